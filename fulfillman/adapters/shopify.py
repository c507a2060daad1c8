"""
Shopify Inventory Backend -- Shopify Admin REST API via ``requests``.

Reads the first variant's ``inventory_quantity`` and adjusts its inventory
item at the shop's first location.

Configuration:
    FULFILLMAN = {
        "INVENTORY_BACKEND": "fulfillman.adapters.shopify.ShopifyInventoryBackend",
        "SHOPIFY_API_VERSION": "2024-01",
        "SHOPIFY_TIMEOUT": 10,
    }

Credentials come from the product's Shop (``shop_domain``, ``access_token``).
"""

from __future__ import annotations

import logging

import requests

from fulfillman.conf import get_setting
from fulfillman.exceptions import ExternalSystemUnavailable, ProductNotMapped

logger = logging.getLogger(__name__)


class ShopifyInventoryBackend:
    """
    InventoryBackend implementation for Shopify.

    Every HTTP problem (connection error, timeout, non-2xx status,
    unexpected payload) is raised as ExternalSystemUnavailable.
    """

    def __init__(self, session: requests.Session | None = None):
        self.session = session or requests.Session()
        self.api_version = get_setting("SHOPIFY_API_VERSION")
        self.timeout = get_setting("SHOPIFY_TIMEOUT")

    # ── Protocol ──

    def get_quantity(self, product) -> int:
        variant = self._variant(product)
        return int(variant.get("inventory_quantity") or 0)

    def adjust_quantity(self, product, delta: int) -> None:
        variant = self._variant(product)
        inventory_item_id = variant.get("inventory_item_id")
        if not inventory_item_id:
            raise ProductNotMapped(product_id=product.pk, reason="variant has no inventory item")

        location_id = self._location_id(product.shop)
        self._request(
            product.shop,
            "POST",
            "inventory_levels/adjust.json",
            json={
                "location_id": location_id,
                "inventory_item_id": inventory_item_id,
                "available_adjustment": delta,
            },
        )

    # ── Internals ──

    def _variant(self, product) -> dict:
        if not product.external_id:
            raise ProductNotMapped(product_id=product.pk, sku=product.sku)

        data = self._request(product.shop, "GET", f"products/{product.external_id}.json")
        variants = (data.get("product") or {}).get("variants") or []
        if not variants:
            raise ProductNotMapped(
                product_id=product.pk,
                external_id=product.external_id,
                reason="product has no variants",
            )
        return variants[0]

    def _location_id(self, shop) -> int:
        data = self._request(shop, "GET", "locations.json")
        locations = data.get("locations") or []
        if not locations:
            raise ExternalSystemUnavailable(shop=shop.shop_domain, reason="no locations")
        return locations[0]["id"]

    def _request(self, shop, method: str, endpoint: str, **kwargs) -> dict:
        url = f"https://{shop.shop_domain}/admin/api/{self.api_version}/{endpoint}"
        headers = {
            "X-Shopify-Access-Token": shop.access_token,
            "Content-Type": "application/json",
        }
        try:
            response = self.session.request(
                method, url, headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.error(
                f"Shopify {method} {endpoint} failed: {e}",
                extra={"shop": shop.shop_domain, "endpoint": endpoint},
            )
            raise ExternalSystemUnavailable(shop=shop.shop_domain, endpoint=endpoint, error=str(e)) from e

        if response.status_code == 404:
            raise ProductNotMapped(shop=shop.shop_domain, endpoint=endpoint)
        if not response.ok:
            raise ExternalSystemUnavailable(
                shop=shop.shop_domain,
                endpoint=endpoint,
                status=response.status_code,
                error=response.text[:200],
            )

        try:
            return response.json()
        except ValueError as e:
            raise ExternalSystemUnavailable(
                shop=shop.shop_domain, endpoint=endpoint, error="invalid JSON"
            ) from e
