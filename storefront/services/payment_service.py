# storefront/services/payment_service.py
import uuid
from decimal import Decimal, InvalidOperation

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.database import db_guard
from storefront.data.models.order import OrderModel
from storefront.data.models.payment import PaymentModel
from storefront.domain.errors import (
    AlreadySettled,
    AmountMismatch,
    OrderNotFound,
    PaymentDeclined,
    SettlementInProgress,
    Unauthorized,
    UpstreamFailure,
    ValidationError,
)
from storefront.domain.schemas import PaymentDetails
from storefront.repos.order_repo import OrderRepo
from storefront.repos.payment_repo import PaymentRepo
from storefront.services.lock_service import LockService, settlement_lock_key
from storefront.services.notification_service import NotificationService
from storefront.services.payment_gateway import MockPaymentGateway
from storefront.utils.retry import db_retry
from storefront.utils.settings import CHECKOUT_LOCK_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CENTS = Decimal("0.01")


def to_amount(value) -> Decimal:
    try:
        amount = Decimal(str(value)).quantize(CENTS)
    except (InvalidOperation, ValueError) as e:
        raise ValidationError("Amount must be a decimal number") from e
    if amount <= 0:
        raise ValidationError("Amount must be greater than 0")
    return amount


class PaymentService:
    """
    Rozliczenie platnosci: zapis proby platnosci i przejscie zamowienia na paid.

    Zapis platnosci i aktualizacja zamowienia to jedna logiczna operacja.
    Jesli aktualizacja zamowienia nie przejdzie mimo ponowien, platnosc
    zostaje osierocona i naprawia ja reconcile_orphaned_payments.
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService,
        gateway: MockPaymentGateway | None = None,
        notification_service: NotificationService | None = None,
    ):
        self.db = db
        self.order_repo = OrderRepo(db)
        self.payment_repo = PaymentRepo(db)
        self.lock_service = lock_service
        self.gateway = gateway or MockPaymentGateway()
        self.notification_service = notification_service or NotificationService()

    def settle_payment(
        self,
        buyer_id: str,
        order_id: str,
        amount,
        method: str,
        card: PaymentDetails | None = None,
    ) -> PaymentModel:
        amount = to_amount(amount)
        order = self._get_owned_order(order_id, buyer_id)

        if order.status == "paid":
            raise AlreadySettled()

        if amount != Decimal(order.total).quantize(CENTS):
            logger.warning(f"Amount mismatch for order {order_id}: got {amount}, expected {order.total}")
            raise AmountMismatch(f"Payment amount {amount} does not match order total {order.total}")

        with self.lock_service.hold(
            settlement_lock_key(order_id),
            ttl=CHECKOUT_LOCK_TTL_SECONDS,
            busy_error=SettlementInProgress,
        ):
            #ponowny odczyt pod lockiem - ktos mogl juz oplacic
            with db_guard(self.db, "order read"):
                self.order_repo.refresh(order)
            if order.status == "paid":
                raise AlreadySettled()

            #osierocona platnosc z poprzedniej proby - naprawa zamiast drugiego obciazenia
            with db_guard(self.db, "payment read"):
                previous = self.payment_repo.find_completed_for_order(order.id)
            if previous is not None:
                logger.warning(
                    f"Order {order.id} already has completed payment {previous.id}, reconciling"
                )
                self._mark_paid(order, previous)
                payment = previous
            else:
                payment = self._charge(order, buyer_id, amount, method, card)

        logger.info(f"Payment {payment.id} completed, order {order.id} paid")
        self.notification_service.send_order_notification(buyer_id, order.id)
        return payment

    def _charge(self, order: OrderModel, buyer_id: str, amount: Decimal, method: str, card) -> PaymentModel:
        charge = self.gateway.charge(amount, method, card)

        payment = PaymentModel(
            id=str(uuid.uuid4()),
            order_id=order.id,
            buyer_id=buyer_id,
            amount=amount,
            method=method,
            status="completed" if charge.approved else "failed",
        )
        with db_guard(self.db, "payment insert"):
            payment = self.payment_repo.create_payment(payment)

        if not charge.approved:
            logger.warning(f"Payment {payment.id} for order {order.id} declined: {charge.reason}")
            raise PaymentDeclined(charge.reason or PaymentDeclined.default_message)

        self._mark_paid(order, payment)
        return payment

    def _get_owned_order(self, order_id: str, buyer_id: str) -> OrderModel:
        with db_guard(self.db, "order read"):
            order = self.order_repo.get_order(order_id)
        if not order:
            raise OrderNotFound()
        if order.buyer_id != buyer_id:
            raise Unauthorized("You do not have access to this order")
        return order

    def _mark_paid(self, order: OrderModel, payment: PaymentModel) -> None:
        def attempt():
            try:
                return self.order_repo.mark_paid(order.id, payment.id)
            except SQLAlchemyError:
                self.db.rollback()
                raise

        try:
            rowcount = db_retry()(attempt)()
        except SQLAlchemyError as e:
            logger.error(
                f"Orphaned payment {payment.id}: order {order.id} still pending after retries: {e}"
            )
            raise UpstreamFailure() from e

        if rowcount == 0:
            logger.warning(f"Order {order.id} was not pending when payment {payment.id} completed")

        with db_guard(self.db, "order read"):
            self.order_repo.refresh(order)


def reconcile_orphaned_payments(db: Session) -> list[str]:
    """
    Naprawa: platnosc completed + zamowienie pending -> zamowienie paid.
    Zwraca id naprawionych zamowien.
    """
    order_repo = OrderRepo(db)
    payment_repo = PaymentRepo(db)

    with db_guard(db, "orphan scan"):
        orphans = payment_repo.find_orphaned()

    fixed = []
    for payment in orphans:
        with db_guard(db, "orphan repair"):
            rowcount = order_repo.mark_paid(payment.order_id, payment.id)
        if rowcount:
            logger.warning(f"Reconciled order {payment.order_id} with orphaned payment {payment.id}")
            fixed.append(payment.order_id)

    if orphans:
        logger.info(f"Reconciliation repaired {len(fixed)} of {len(orphans)} orphaned payments")
    return fixed
