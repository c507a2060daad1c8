"""
Tests for the Django admin (fulfillman.admin).
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from django.contrib import admin
from django.contrib.auth import get_user_model
from django.test import RequestFactory

from fulfillman.admin import MaterialAdmin, MaterialTransactionAdmin, OrderAdmin
from fulfillman.models import Material, MaterialTransaction, Order, OrderStatus
from fulfillman.services.checkout import place_order


@pytest.fixture
def request_(db):
    request = RequestFactory().post("/admin/")
    request.user = get_user_model().objects.create_superuser("admin", "admin@example.com", "pw")
    return request


class TestRegistration:
    def test_models_registered(self):
        for model in (Material, MaterialTransaction, Order):
            assert admin.site.is_registered(model)

    def test_current_stock_read_only(self, request_):
        model_admin = MaterialAdmin(Material, admin.site)
        assert "current_stock" in model_admin.get_readonly_fields(request_)

    def test_transactions_cannot_be_deleted(self, request_):
        model_admin = MaterialTransactionAdmin(MaterialTransaction, admin.site)
        assert not model_admin.has_delete_permission(request_)


class TestMaterialTransactionAdmin:
    def test_save_goes_through_ledger(self, request_, canvas):
        model_admin = MaterialTransactionAdmin(MaterialTransaction, admin.site)
        entry = MaterialTransaction(material=canvas, type="in", quantity=Decimal("5"), notes="Count")

        model_admin.save_model(request_, entry, form=None, change=False)

        canvas.refresh_from_db()
        assert canvas.current_stock == Decimal("5")
        assert MaterialTransaction.objects.get().pk == entry.pk

    def test_existing_entry_fully_read_only(self, request_, canvas):
        from fulfillman.services import ledger

        entry = ledger.receive(canvas, 1)
        model_admin = MaterialTransactionAdmin(MaterialTransaction, admin.site)

        assert "quantity" in model_admin.get_readonly_fields(request_, entry)


class TestOrderAdminActions:
    def test_actions_use_state_machine(self, request_, customer, tote_bag):
        order = place_order(customer, [(tote_bag, 1)])
        model_admin = OrderAdmin(Order, admin.site)
        model_admin.message_user = MagicMock()

        model_admin.mark_completed(request_, Order.objects.filter(pk=order.pk))

        order.refresh_from_db()
        tote_bag.refresh_from_db()
        assert order.status == OrderStatus.COMPLETED
        assert tote_bag.inventory_quantity == 1
        assert order.history.first().history_user == request_.user
