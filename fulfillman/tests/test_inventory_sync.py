"""
Tests for inventory sync (fulfillman.services.inventory_sync) and the
Shopify backend (fulfillman.adapters.shopify).

No network: the Shopify backend gets a MagicMock session.
"""

from unittest.mock import MagicMock

import pytest
import requests

from fulfillman.adapters.noop import NoopInventoryBackend
from fulfillman.adapters.shopify import ShopifyInventoryBackend
from fulfillman.exceptions import ExternalSystemUnavailable, ProductNotMapped
from fulfillman.protocols import InventoryBackend
from fulfillman.services.inventory_sync import push


def _response(status=200, payload=None):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.json.return_value = payload or {}
    response.text = "error body"
    return response


PRODUCT_PAYLOAD = {
    "product": {
        "id": 1001,
        "variants": [{"id": 55, "inventory_item_id": 777, "inventory_quantity": 12}],
    }
}
LOCATIONS_PAYLOAD = {"locations": [{"id": 9001}, {"id": 9002}]}


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def shopify(session):
    return ShopifyInventoryBackend(session=session)


# ═══════════════════════════════════════════════════════════════════
# push
# ═══════════════════════════════════════════════════════════════════


class TestPush:
    def test_reads_then_adjusts_once(self, tote_bag):
        backend = MagicMock()
        backend.get_quantity.return_value = 7

        result = push(tote_bag, -2, backend=backend)

        backend.adjust_quantity.assert_called_once_with(tote_bag, -2)
        assert result.external_before == 7
        assert result.external_after == 5

    def test_typed_errors_pass_through(self, tote_bag):
        backend = MagicMock()
        backend.get_quantity.side_effect = ProductNotMapped(product_id=tote_bag.pk)

        with pytest.raises(ProductNotMapped):
            push(tote_bag, 1, backend=backend)

    def test_unknown_errors_become_unavailable(self, tote_bag):
        backend = MagicMock()
        backend.adjust_quantity.side_effect = TimeoutError("slow")

        with pytest.raises(ExternalSystemUnavailable) as exc:
            push(tote_bag, 1, backend=backend)
        assert "slow" in exc.value.details["error"]

    def test_uses_configured_backend(self, tote_bag):
        """Default settings use the noop backend, which always succeeds."""
        tote_bag.inventory_quantity = 4
        result = push(tote_bag, 3)
        assert result.external_before == 4


class TestNoopBackend:
    def test_implements_protocol(self):
        assert isinstance(NoopInventoryBackend(), InventoryBackend)

    def test_reports_local_cache(self, tote_bag):
        tote_bag.inventory_quantity = 9
        assert NoopInventoryBackend().get_quantity(tote_bag) == 9
        assert NoopInventoryBackend().adjust_quantity(tote_bag, -1) is None


# ═══════════════════════════════════════════════════════════════════
# Shopify
# ═══════════════════════════════════════════════════════════════════


class TestShopifyBackend:
    def test_implements_protocol(self, shopify):
        assert isinstance(shopify, InventoryBackend)

    def test_get_quantity(self, shopify, session, tote_bag):
        session.request.return_value = _response(payload=PRODUCT_PAYLOAD)

        assert shopify.get_quantity(tote_bag) == 12

        method, url = session.request.call_args.args
        kwargs = session.request.call_args.kwargs
        assert method == "GET"
        assert url == "https://atelier-test.myshopify.com/admin/api/2024-01/products/1001.json"
        assert kwargs["headers"]["X-Shopify-Access-Token"] == "shpat_test"
        assert kwargs["timeout"] == 10

    def test_adjust_quantity_posts_to_first_location(self, shopify, session, tote_bag):
        session.request.side_effect = [
            _response(payload=PRODUCT_PAYLOAD),
            _response(payload=LOCATIONS_PAYLOAD),
            _response(payload={"inventory_level": {}}),
        ]

        shopify.adjust_quantity(tote_bag, -2)

        method, url = session.request.call_args.args
        assert method == "POST"
        assert url.endswith("/inventory_levels/adjust.json")
        assert session.request.call_args.kwargs["json"] == {
            "location_id": 9001,
            "inventory_item_id": 777,
            "available_adjustment": -2,
        }

    def test_api_version_from_settings(self, session, tote_bag, settings):
        settings.FULFILLMAN = {"SHOPIFY_API_VERSION": "2025-04", "SHOPIFY_TIMEOUT": 3}
        backend = ShopifyInventoryBackend(session=session)
        session.request.return_value = _response(payload=PRODUCT_PAYLOAD)

        backend.get_quantity(tote_bag)

        assert "/admin/api/2025-04/" in session.request.call_args.args[1]
        assert session.request.call_args.kwargs["timeout"] == 3

    def test_product_without_external_id(self, shopify, session, tote_bag):
        tote_bag.external_id = None

        with pytest.raises(ProductNotMapped):
            shopify.get_quantity(tote_bag)
        session.request.assert_not_called()

    def test_unknown_product(self, shopify, session, tote_bag):
        session.request.return_value = _response(status=404)

        with pytest.raises(ProductNotMapped):
            shopify.get_quantity(tote_bag)

    def test_product_without_variants(self, shopify, session, tote_bag):
        session.request.return_value = _response(payload={"product": {"variants": []}})

        with pytest.raises(ProductNotMapped):
            shopify.get_quantity(tote_bag)

    def test_server_error(self, shopify, session, tote_bag):
        session.request.return_value = _response(status=502)

        with pytest.raises(ExternalSystemUnavailable) as exc:
            shopify.get_quantity(tote_bag)
        assert exc.value.details["status"] == 502

    def test_timeout(self, shopify, session, tote_bag):
        session.request.side_effect = requests.Timeout("read timed out")

        with pytest.raises(ExternalSystemUnavailable):
            shopify.get_quantity(tote_bag)

    def test_connection_error(self, shopify, session, tote_bag):
        session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(ExternalSystemUnavailable):
            shopify.adjust_quantity(tote_bag, 1)

    def test_no_locations(self, shopify, session, tote_bag):
        session.request.side_effect = [
            _response(payload=PRODUCT_PAYLOAD),
            _response(payload={"locations": []}),
        ]

        with pytest.raises(ExternalSystemUnavailable):
            shopify.adjust_quantity(tote_bag, 1)

    def test_invalid_json(self, shopify, session, tote_bag):
        response = _response()
        response.json.side_effect = ValueError("not json")
        session.request.return_value = response

        with pytest.raises(ExternalSystemUnavailable):
            shopify.get_quantity(tote_bag)

    def test_push_through_shopify(self, shopify, session, tote_bag):
        session.request.side_effect = [
            _response(payload=PRODUCT_PAYLOAD),
            _response(payload=PRODUCT_PAYLOAD),
            _response(payload=LOCATIONS_PAYLOAD),
            _response(),
        ]

        result = push(tote_bag, 3, backend=shopify)

        assert result.external_before == 12
        assert result.external_after == 15
