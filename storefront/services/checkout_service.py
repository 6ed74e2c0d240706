# storefront/services/checkout_service.py
import uuid
from dataclasses import dataclass

from sqlalchemy.orm import Session

from storefront.data.database import db_guard
from storefront.data.models.checkout import CheckoutModel
from storefront.data.models.order import OrderModel
from storefront.domain.errors import (
    CheckoutInProgress,
    CheckoutNotFound,
    EmptyCart,
    InvalidTransition,
    StorefrontError,
    Unauthorized,
)
from storefront.domain.validation import parse_payment_details, parse_shipping
from storefront.repos.cart_repo import CartRepo
from storefront.repos.checkout_repo import CheckoutRepo
from storefront.repos.order_repo import OrderRepo
from storefront.services.cart_service import CartService
from storefront.services.lock_service import LockService, checkout_lock_key
from storefront.services.order_service import OrderService
from storefront.services.payment_service import PaymentService
from storefront.utils.settings import CHECKOUT_LOCK_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SHIPPING = "shipping"
PAYMENT = "payment"
COMPLETE = "complete"
FAILED = "failed"
ABANDONED = "abandoned"

_SHIPPING_FROM = (SHIPPING, PAYMENT, FAILED)
_BACK_FROM = (PAYMENT, FAILED)
_PAYMENT_FROM = (PAYMENT, FAILED)
_ABANDON_FROM = (SHIPPING, PAYMENT, FAILED)


@dataclass
class CheckoutResult:
    checkout: CheckoutModel
    order: OrderModel | None = None


class CheckoutService:
    """
    Maszyna stanow checkoutu: shipping -> payment -> complete.

    failed - ostatnia platnosc nie przeszla, mozna ponowic
    abandoned - uzytkownik przerwal, zapisane zamowienia zostaja

    Przejscie do complete jest strzezone wersja (optimistic locking),
    wiec koszyk jest czyszczony co najwyzej raz na checkout.
    """

    def __init__(
        self,
        db: Session,
        cart_service: CartService,
        order_service: OrderService,
        payment_service: PaymentService,
        lock_service: LockService,
    ):
        self.db = db
        self.repo = CheckoutRepo(db)
        self.order_repo = OrderRepo(db)
        self.cart_service = cart_service
        self.order_service = order_service
        self.payment_service = payment_service
        self.lock_service = lock_service

    #query
    def get_checkout(self, checkout_id: str, buyer_id: str) -> CheckoutResult:
        checkout = self._get_owned(checkout_id, buyer_id)
        return CheckoutResult(checkout, self._current_order(checkout))

    #commands
    def start(self, session_id: str, buyer_id: str) -> CheckoutResult:
        snapshot = self.cart_service.snapshot(session_id)
        if snapshot.is_empty:
            raise EmptyCart()

        checkout = CheckoutModel(
            id=str(uuid.uuid4()),
            session_id=session_id,
            buyer_id=buyer_id,
            state=SHIPPING,
            version=1,
        )
        with db_guard(self.db, "checkout start"):
            checkout = self.repo.create_checkout(checkout)

        logger.info(f"Checkout {checkout.id} started for cart {session_id} by {buyer_id}")
        return CheckoutResult(checkout)

    def submit_shipping(self, checkout_id: str, buyer_id: str, shipping) -> CheckoutResult:
        checkout = self._get_owned(checkout_id, buyer_id)
        self._require_state(checkout, _SHIPPING_FROM)

        info = parse_shipping(shipping)
        self._transition(checkout, PAYMENT, _SHIPPING_FROM, shipping_info=info.model_dump())
        return CheckoutResult(checkout, self._current_order(checkout))

    def back_to_shipping(self, checkout_id: str, buyer_id: str) -> CheckoutResult:
        checkout = self._get_owned(checkout_id, buyer_id)
        self._require_state(checkout, _BACK_FROM)

        self._transition(checkout, SHIPPING, _BACK_FROM)
        return CheckoutResult(checkout, self._current_order(checkout))

    def abandon(self, checkout_id: str, buyer_id: str) -> CheckoutResult:
        checkout = self._get_owned(checkout_id, buyer_id)
        if checkout.state == ABANDONED:
            return CheckoutResult(checkout, self._current_order(checkout))
        self._require_state(checkout, _ABANDON_FROM)

        self._transition(checkout, ABANDONED, _ABANDON_FROM)
        return CheckoutResult(checkout, self._current_order(checkout))

    def submit_payment(self, checkout_id: str, buyer_id: str, payment) -> CheckoutResult:
        """
        Use Case: zlozenie zamowienia i platnosc.

        1. Migawka koszyka (odczyt raz)
        2. Zamowienie pending (lub ponowne uzycie niezmienionego)
        3. Rozliczenie platnosci
        4. complete + czyszczenie koszyka, tylko raz
        """
        checkout = self._get_owned(checkout_id, buyer_id)

        #ponowne wyslanie po sukcesie - bez drugiego zamowienia i czyszczenia
        if checkout.state == COMPLETE and checkout.cart_cleared:
            logger.info(f"Checkout {checkout.id} already complete, ignoring duplicate submit")
            return CheckoutResult(checkout, self._current_order(checkout))

        details = None
        if checkout.state != COMPLETE:
            self._require_state(checkout, _PAYMENT_FROM)
            details = parse_payment_details(payment)

        with self.lock_service.hold(
            checkout_lock_key(checkout.id),
            ttl=CHECKOUT_LOCK_TTL_SECONDS,
            busy_error=CheckoutInProgress,
        ):
            with db_guard(self.db, "checkout read"):
                self.repo.refresh(checkout)
            if checkout.state == COMPLETE:
                #complete bez wyczyszczonego koszyka - dokonczenie po wczesniejszym bledzie
                if not checkout.cart_cleared:
                    self._finish_cart_clear(checkout)
                return CheckoutResult(checkout, self._current_order(checkout))
            self._require_state(checkout, _PAYMENT_FROM)
            if details is None:
                details = parse_payment_details(payment)

            snapshot = self.cart_service.snapshot(checkout.session_id)
            #blad skladania zamowienia - stan i koszyk bez zmian
            order = self._assemble_order(checkout, buyer_id, snapshot)

            if order.status != "paid":
                try:
                    self.payment_service.settle_payment(buyer_id, order.id, order.total, "card", details)
                except StorefrontError as e:
                    self._record_failure(checkout, order, e)
                    raise

            if self._transition(checkout, COMPLETE, _PAYMENT_FROM, order_id=order.id, last_error=None, strict=False):
                logger.info(f"Checkout {checkout.id} complete with order {order.id}")
                self._finish_cart_clear(checkout)

        return CheckoutResult(checkout, order)

    def _finish_cart_clear(self, checkout: CheckoutModel) -> bool:
        """
        Czyszczenie koszyka po complete i oznaczenie cart_cleared.
        Blad nie cofa oplaconego checkoutu - ponowne wyslanie albo
        finish_cart_clears dokoncza czyszczenie.
        """
        try:
            self.cart_service.clear(checkout.session_id)
            with db_guard(self.db, "checkout cart cleared"):
                rowcount = self.repo.update_checkout_version(
                    checkout_id=checkout.id,
                    old_version=checkout.version,
                    new_data={"cart_cleared": True},
                    from_states=(COMPLETE,),
                )
                if rowcount == 0:
                    self.repo.rollback()
                    self.repo.refresh(checkout)
                    return False
                self.repo.commit()
                self.repo.refresh(checkout)
        except StorefrontError as e:
            logger.error(f"Cart {checkout.session_id} not cleared after checkout {checkout.id}: {e.message}")
            return False
        return True

    def _assemble_order(self, checkout: CheckoutModel, buyer_id: str, snapshot) -> OrderModel:
        if checkout.order_id:
            with db_guard(self.db, "order read"):
                previous = self.order_repo.get_order(checkout.order_id)
                if previous is not None:
                    self.order_repo.refresh(previous)

            if previous is not None and previous.status == "paid":
                return previous

            #ten sam koszyk i adres -> to samo zamowienie pending, bez mnozenia zamowien
            if (
                previous is not None
                and previous.status == "pending"
                and not snapshot.is_empty
                and snapshot.same_lines(previous.items)
                and previous.shipping_info == checkout.shipping_info
            ):
                logger.info(f"Reusing pending order {previous.id} for checkout {checkout.id}")
                return previous

        return self.order_service.create_order(buyer_id, snapshot, checkout.shipping_info or {})

    def _record_failure(self, checkout: CheckoutModel, order: OrderModel, error: StorefrontError) -> None:
        logger.warning(f"Checkout {checkout.id} payment failed for order {order.id}: {error.message}")
        try:
            self._transition(
                checkout,
                FAILED,
                _PAYMENT_FROM,
                order_id=order.id,
                last_error=error.message,
                strict=False,
            )
        except StorefrontError as e:
            logger.error(f"Could not record failure on checkout {checkout.id}: {e.message}")

    def _transition(self, checkout: CheckoutModel, to_state: str, from_states, strict: bool = True, **data) -> bool:
        with db_guard(self.db, f"checkout -> {to_state}"):
            rowcount = self.repo.update_checkout_version(
                checkout_id=checkout.id,
                old_version=checkout.version,
                new_data={"state": to_state, **data},
                from_states=from_states,
            )
            if rowcount == 0:
                self.repo.rollback()
                self.repo.refresh(checkout)
                if strict:
                    raise CheckoutInProgress(
                        "Checkout was modified by another request, please reload it"
                    )
                logger.info(f"Checkout {checkout.id} transition to {to_state} lost, now {checkout.state}")
                return False

            self.repo.commit()
            self.repo.refresh(checkout)

        logger.info(f"Checkout {checkout.id} -> {to_state} (version {checkout.version})")
        return True

    def _get_owned(self, checkout_id: str, buyer_id: str) -> CheckoutModel:
        with db_guard(self.db, "checkout read"):
            checkout = self.repo.get_checkout(checkout_id)
        if checkout is None:
            raise CheckoutNotFound()
        if checkout.buyer_id != buyer_id:
            raise Unauthorized("You do not have access to this checkout")
        return checkout

    def _current_order(self, checkout: CheckoutModel) -> OrderModel | None:
        if not checkout.order_id:
            return None
        with db_guard(self.db, "order read"):
            return self.order_repo.get_order(checkout.order_id)

    @staticmethod
    def _require_state(checkout: CheckoutModel, allowed) -> None:
        if checkout.state not in allowed:
            raise InvalidTransition(f"Checkout is in state '{checkout.state}'")


def finish_cart_clears(db: Session) -> list[str]:
    """
    Naprawa: checkout complete z niewyczyszczonym koszykiem.
    Zwraca id checkoutow, ktorych koszyk zostal wyczyszczony.
    """
    repo = CheckoutRepo(db)
    cart_repo = CartRepo(db)

    with db_guard(db, "checkout scan"):
        pending = repo.list_uncleared_complete()

    done = []
    for checkout in pending:
        with db_guard(db, "checkout cart clear"):
            cart = cart_repo.get_cart(checkout.session_id)
            if cart is not None:
                cart_repo.delete_cart(cart)
            rowcount = repo.update_checkout_version(
                checkout_id=checkout.id,
                old_version=checkout.version,
                new_data={"cart_cleared": True},
                from_states=(COMPLETE,),
            )
            if rowcount == 0:
                repo.rollback()
                continue
            repo.commit()
        logger.warning(f"Cleared cart {checkout.session_id} left behind by checkout {checkout.id}")
        done.append(checkout.id)

    return done
