"""
Tests for the order state machine (Order.set_status).

Verifies:
- Forward-only transitions, shipped is terminal, same status is a no-op
- completed/shipped adjust the finished-goods cache (clamped at zero)
- shipped_at is set exactly once
- Material allocation on manufacturing is all-or-nothing with the status
- External sync and notifications run after commit and never undo it
"""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
from django.contrib.auth import get_user_model
from django.db import OperationalError

from fulfillman.exceptions import (
    ConcurrentModification,
    ExternalSystemUnavailable,
    InsufficientMaterials,
    InvalidStatus,
)
from fulfillman.models import MaterialTransaction, Order, OrderStatus, Product
from fulfillman.services.checkout import place_order


# ═══════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def order(customer, tote_bag, pouch):
    """Order with lines tote bag × 2, pouch × 1."""
    return place_order(customer, [(tote_bag, 2), (pouch, 1)])


@pytest.fixture
def notifier():
    mock = MagicMock()
    with patch("fulfillman.signals.handlers.get_notifier", return_value=mock):
        yield mock


@pytest.fixture
def backend():
    mock = MagicMock()
    mock.get_quantity.return_value = 10
    with patch("fulfillman.services.inventory_sync.get_inventory_backend", return_value=mock):
        yield mock


def _cache(product) -> int:
    return Product.objects.get(pk=product.pk).inventory_quantity


# ═══════════════════════════════════════════════════════════════════
# Transitions
# ═══════════════════════════════════════════════════════════════════


class TestTransitions:
    """Which transitions are allowed."""

    def test_forward_sequence(self, order):
        for status in ("manufacturing", "completed", "shipped"):
            order.set_status(status)
            order.refresh_from_db()
            assert order.status == status

    def test_forward_jump_allowed_by_default(self, order):
        order.set_status("shipped")
        assert order.status == OrderStatus.SHIPPED

    def test_backward_rejected(self, order):
        order.set_status("completed")

        with pytest.raises(InvalidStatus):
            order.set_status("manufacturing")

        order.refresh_from_db()
        assert order.status == OrderStatus.COMPLETED

    @pytest.mark.parametrize("status", ["new", "manufacturing", "completed"])
    def test_shipped_is_terminal(self, order, status):
        order.set_status("shipped")

        with pytest.raises(InvalidStatus):
            order.set_status(status)

    def test_unknown_status_rejected(self, order):
        with pytest.raises(InvalidStatus) as exc:
            order.set_status("lost")
        assert exc.value.details["requested"] == "lost"

    def test_strict_mode_requires_adjacent_step(self, order, settings):
        settings.FULFILLMAN = {"STRICT_STATUS_TRANSITIONS": True}

        with pytest.raises(InvalidStatus) as exc:
            order.set_status("shipped")
        assert exc.value.details["expected"] == OrderStatus.MANUFACTURING

        order.set_status("manufacturing")
        assert order.status == OrderStatus.MANUFACTURING

    def test_same_status_is_noop(self, order, tote_bag):
        order.set_status("completed")
        adjustments = order.set_status("completed")

        assert adjustments == []
        assert _cache(tote_bag) == 2

    def test_history_records_user(self, order):
        user = get_user_model().objects.create_user("operator")

        order.set_status("manufacturing", user=user)

        assert order.history.first().history_user == user
        assert order.history.first().status == "manufacturing"


# ═══════════════════════════════════════════════════════════════════
# Finished goods
# ═══════════════════════════════════════════════════════════════════


class TestFinishedGoods:
    """completed adds to the cache, shipped removes from it."""

    def test_completed_increases_cache(self, order, tote_bag, pouch):
        adjustments = order.set_status("completed")

        assert _cache(tote_bag) == 2
        assert _cache(pouch) == 1
        assert {(a.product_id, a.delta) for a in adjustments} == {(tote_bag.pk, 2), (pouch.pk, 1)}

    def test_shipped_decreases_cache(self, order, tote_bag, pouch):
        Product.objects.filter(pk=tote_bag.pk).update(inventory_quantity=5)
        Product.objects.filter(pk=pouch.pk).update(inventory_quantity=5)

        order.set_status("shipped")

        assert _cache(tote_bag) == 3
        assert _cache(pouch) == 4

    def test_shipped_clamps_at_zero(self, order, tote_bag, pouch, caplog):
        """Shipping more than cached is logged, not rejected."""
        Product.objects.filter(pk=tote_bag.pk).update(inventory_quantity=1)

        with caplog.at_level("WARNING", logger="fulfillman.models.order"):
            adjustments = order.set_status("shipped")

        assert _cache(tote_bag) == 0
        assert _cache(pouch) == 0
        tote = next(a for a in adjustments if a.product_id == tote_bag.pk)
        assert tote.delta == -2
        assert tote.clamped
        assert "clamping at 0" in caplog.text

    def test_manufacturing_has_no_cache_effect(self, order, tote_bag):
        assert order.set_status("manufacturing") == []
        assert _cache(tote_bag) == 0

    def test_full_lifecycle_nets_to_zero(self, order, tote_bag, pouch):
        order.set_status("manufacturing")
        order.set_status("completed")
        order.set_status("shipped")

        assert _cache(tote_bag) == 0
        assert _cache(pouch) == 0

    def test_line_without_product_is_skipped(self, order, pouch, tote_bag):
        pouch.delete()

        adjustments = order.set_status("completed")

        assert [a.product_id for a in adjustments] == [tote_bag.pk]


class TestShippedAt:
    def test_set_on_first_shipment(self, order):
        assert order.shipped_at is None
        order.set_status("shipped")

        order.refresh_from_db()
        assert order.shipped_at is not None

    def test_reshipping_keeps_timestamp_and_stock(self, order, tote_bag):
        Product.objects.filter(pk=tote_bag.pk).update(inventory_quantity=10)
        order.set_status("shipped")
        order.refresh_from_db()
        first = order.shipped_at

        order.set_status("shipped")

        order.refresh_from_db()
        assert order.shipped_at == first
        assert _cache(tote_bag) == 8

    def test_shipped_order_cannot_be_deleted(self, order):
        order.set_status("shipped")

        with pytest.raises(InvalidStatus):
            order.delete()
        assert Order.objects.filter(pk=order.pk).exists()


# ═══════════════════════════════════════════════════════════════════
# Material allocation on manufacturing
# ═══════════════════════════════════════════════════════════════════


class TestAllocateOnManufacturing:
    def test_allocates_lines_with_bom(self, order, tote_bom, stocked):
        """Tote bag has a BOM (debited); pouch has none (skipped)."""
        order.set_status("manufacturing", allocate_materials=True)

        canvas, thread = stocked
        canvas.refresh_from_db()
        thread.refresh_from_db()
        assert canvas.current_stock == Decimal("4")
        assert thread.current_stock == Decimal("9")
        assert order.material_transactions.count() == 2

    def test_shortage_aborts_transition(self, order, tote_bom, canvas):
        """Nothing is debited and the status is unchanged."""
        with pytest.raises(InsufficientMaterials):
            order.set_status("manufacturing", allocate_materials=True)

        order.refresh_from_db()
        assert order.status == OrderStatus.NEW
        assert not MaterialTransaction.objects.filter(type="out").exists()

    def test_without_flag_nothing_is_allocated(self, order, tote_bom, stocked):
        order.set_status("manufacturing")
        assert not order.material_transactions.exists()

    def test_lock_conflict_during_allocation_is_retried(
        self, transactional_db, order, tote_bom, stocked
    ):
        """A conflict inside the transition reruns the whole transition."""
        from fulfillman.services import allocation

        real_allocate = allocation._allocate
        calls = []

        def flaky(*args):
            calls.append(args)
            if len(calls) == 1:
                raise OperationalError("database is locked")
            return real_allocate(*args)

        with patch("fulfillman.services.ledger.time.sleep"), patch.object(
            allocation, "_allocate", side_effect=flaky
        ):
            order.set_status("manufacturing", allocate_materials=True)

        order.refresh_from_db()
        assert order.status == OrderStatus.MANUFACTURING
        assert len(calls) == 2
        assert order.material_transactions.count() == 2

    def test_persistent_lock_conflict_leaves_order_untouched(
        self, transactional_db, settings, order, tote_bom, stocked
    ):
        settings.FULFILLMAN = {"STOCK_LOCK_RETRIES": 2}

        with patch("fulfillman.services.ledger.time.sleep"), patch(
            "fulfillman.services.allocation._allocate",
            side_effect=OperationalError("database is locked"),
        ) as mocked:
            with pytest.raises(ConcurrentModification) as exc:
                order.set_status("manufacturing", allocate_materials=True)

        assert mocked.call_count == 2
        assert exc.value.details["attempts"] == 2
        order.refresh_from_db()
        assert order.status == OrderStatus.NEW
        assert not MaterialTransaction.objects.filter(type="out").exists()


# ═══════════════════════════════════════════════════════════════════
# Post-commit side effects
# ═══════════════════════════════════════════════════════════════════


class TestSideEffects:
    """Inventory sync and notifications run only after commit."""

    def test_nothing_happens_before_commit(self, order, backend, notifier):
        order.set_status("completed")

        backend.adjust_quantity.assert_not_called()
        notifier.notify.assert_not_called()

    def test_pushes_each_line_after_commit(
        self, order, tote_bag, pouch, backend, notifier, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            order.set_status("shipped")

        pushed = {(c.args[0].pk, c.args[1]) for c in backend.adjust_quantity.call_args_list}
        assert pushed == {(tote_bag.pk, -2), (pouch.pk, -1)}

    def test_notifies_status_and_customer(
        self, order, notifier, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            order.set_status("completed")

        message = notifier.notify.call_args.args[0]
        assert order.order_number in message
        assert "Completed" in message
        assert "Acme Retail" in message

    def test_noop_transition_sends_nothing(
        self, order, notifier, django_capture_on_commit_callbacks
    ):
        order.set_status("completed")
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            order.set_status("completed")

        assert callbacks == []

    def test_sync_failure_does_not_undo_transition(
        self, order, tote_bag, pouch, backend, notifier, django_capture_on_commit_callbacks
    ):
        """A failing external system still leaves status and cache committed."""
        backend.adjust_quantity.side_effect = [ExternalSystemUnavailable(error="timeout"), None]

        with django_capture_on_commit_callbacks(execute=True):
            order.set_status("completed")

        order.refresh_from_db()
        assert order.status == OrderStatus.COMPLETED
        assert _cache(tote_bag) == 2
        assert _cache(pouch) == 1

        # The second line was still pushed
        assert backend.adjust_quantity.call_count == 2

        errors = order.inventory_sync_errors
        assert len(errors) == 1
        assert errors[0]["error"] == "EXTERNAL_SYSTEM_UNAVAILABLE"
        assert errors[0]["status"] == "completed"

        # Notification still goes out
        notifier.notify.assert_called_once()

    def test_unexpected_backend_error_is_normalized(
        self, order, backend, django_capture_on_commit_callbacks
    ):
        backend.get_quantity.side_effect = RuntimeError("boom")

        with django_capture_on_commit_callbacks(execute=True):
            order.set_status("completed")

        order.refresh_from_db()
        assert {e["error"] for e in order.inventory_sync_errors} == {"EXTERNAL_SYSTEM_UNAVAILABLE"}

    def test_notifier_failure_is_absorbed(
        self, order, notifier, django_capture_on_commit_callbacks, caplog
    ):
        notifier.notify.side_effect = ConnectionError("chat service down")

        with django_capture_on_commit_callbacks(execute=True):
            order.set_status("completed")

        order.refresh_from_db()
        assert order.status == OrderStatus.COMPLETED
        assert "Notification failed" in caplog.text
