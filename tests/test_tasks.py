"""
Background task tests: payment reconciliation and order notifications.
"""
import uuid
from decimal import Decimal

from kombu.exceptions import OperationalError

from conftest import BUYER, CARD, SHIPPING
from storefront.celery_worker import celery_app
from storefront.data.models.payment import PaymentModel
from storefront.domain.errors import UpstreamFailure
from storefront.services.checkout_service import finish_cart_clears
from storefront.services.notification_service import NotificationService, send_order_notification_task
from storefront.tasks.reconcile import reconcile_payments_task


def _orphan(db, order, status="completed"):
    payment = PaymentModel(
        id=str(uuid.uuid4()),
        order_id=order.id,
        buyer_id=order.buyer_id,
        amount=Decimal(order.total),
        method="card",
        status=status,
    )
    db.add(payment)
    db.commit()
    return payment


def test_beat_schedule_runs_reconcile():
    entry = celery_app.conf.beat_schedule["reconcile-payments"]
    assert entry["task"] == reconcile_payments_task.name


def test_reconcile_task_marks_orphaned_order_paid(db, cart_service, order_service):
    cart_service.add_item("s1", "A", 2)
    order = order_service.create_order(BUYER, cart_service.snapshot("s1"), SHIPPING)
    payment = _orphan(db, order)

    fixed = reconcile_payments_task()

    db.refresh(order)
    assert fixed == [order.id]
    assert order.status == "paid"
    assert order.payment_id == payment.id


def test_reconcile_task_ignores_failed_payments(db, cart_service, order_service):
    cart_service.add_item("s1", "A", 1)
    order = order_service.create_order(BUYER, cart_service.snapshot("s1"), SHIPPING)
    _orphan(db, order, status="failed")

    assert reconcile_payments_task() == []

    db.refresh(order)
    assert order.status == "pending"


def test_reconcile_task_with_nothing_to_do(db):
    assert reconcile_payments_task() == []


def test_notification_task_runs_eagerly():
    result = send_order_notification_task.delay(BUYER, "order-1")
    assert result.get() == {"buyer_id": BUYER, "order_id": "order-1", "status": "sent"}


def test_notification_service_enqueues_task(monkeypatch):
    sent = []
    monkeypatch.setattr(send_order_notification_task, "delay", lambda *args: sent.append(args))

    NotificationService().send_order_notification(BUYER, "order-7")

    assert sent == [(BUYER, "order-7")]


def test_notification_broker_down_does_not_raise(monkeypatch):
    def broker_down(*args):
        raise OperationalError("broker unreachable")

    monkeypatch.setattr(send_order_notification_task, "delay", broker_down)

    assert NotificationService().send_order_notification(BUYER, "order-8") is None


def test_reconcile_task_finishes_left_behind_cart_clear(db, cart_service, checkout_service, monkeypatch):
    def failing_clear(session_id):
        raise UpstreamFailure()

    cart_service.add_item("s1", "A", 1)
    checkout_id = checkout_service.start("s1", BUYER).checkout.id
    checkout_service.submit_shipping(checkout_id, BUYER, SHIPPING)
    monkeypatch.setattr(cart_service, "clear", failing_clear)
    checkout = checkout_service.submit_payment(checkout_id, BUYER, CARD).checkout
    assert checkout.cart_cleared is False

    reconcile_payments_task()

    db.refresh(checkout)
    assert checkout.state == "complete"
    assert checkout.cart_cleared is True
    assert cart_service.get_cart("s1").is_empty
    assert finish_cart_clears(db) == []
