"""
Fulfillman Adapters.

Implementations of protocols for external systems:
- noop.NoopInventoryBackend: local-only inventory (default)
- shopify.ShopifyInventoryBackend: Shopify Admin REST API
- notifiers: LoggingNotifier (default), LineNotifier, SlackNotifier

Select them with FULFILLMAN["INVENTORY_BACKEND"] / ["NOTIFIER_BACKEND"].
"""
