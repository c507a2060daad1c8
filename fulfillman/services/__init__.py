"""
Fulfillman Services.

Business logic that doesn't belong in models:
- ledger: Material stock movements (the only writer of current_stock)
- bom: Costing and producibility from a product's BOM
- allocation: All-or-nothing material consumption for a manufacturing run
- inventory_sync: Finished-goods deltas pushed to the external system
- checkout: Order placement
- purchasing: Purchase orders for raw materials
- alerts: Low-stock alerts
"""
