# storefront/services/payment_gateway.py
"""
Symulowana bramka platnosci.

Zadne pieniadze nie sa pobierane. Karty konczace sie na 0002 sa odrzucane
(jak karty testowe u popularnych operatorow), reszta przechodzi.
"""
import uuid
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from dataclasses import dataclass
from decimal import Decimal

from storefront.domain.errors import ValidationError
from storefront.domain.schemas import PaymentDetails
from storefront.utils.settings import PAYMENT_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SUPPORTED_METHODS = ("card",)
DECLINED_CARD_SUFFIX = "0002"

_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="payment-gateway")


@dataclass(frozen=True)
class ChargeResult:
    approved: bool
    reference: str
    reason: str | None = None


class MockPaymentGateway:
    def __init__(self, timeout: float | None = None):
        self.timeout = timeout or PAYMENT_TIMEOUT_SECONDS

    def charge(self, amount: Decimal, method: str, card: PaymentDetails | None = None) -> ChargeResult:
        if method not in SUPPORTED_METHODS:
            raise ValidationError(f"Unsupported payment method: {method}")

        future = _executor.submit(self._authorize, amount, card)
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeout:
            logger.warning(f"Payment gateway timed out after {self.timeout}s")
            future.cancel()
            return ChargeResult(approved=False, reference=uuid.uuid4().hex, reason="Payment gateway timed out")

    def _authorize(self, amount: Decimal, card: PaymentDetails | None) -> ChargeResult:
        reference = uuid.uuid4().hex
        number = "".join(ch for ch in (card.card_number if card else "") if ch.isdigit())

        if number.endswith(DECLINED_CARD_SUFFIX):
            logger.info(f"Mock charge {reference} of {amount} declined")
            return ChargeResult(approved=False, reference=reference, reason="Card was declined")

        logger.info(f"Mock charge {reference} of {amount} approved")
        return ChargeResult(approved=True, reference=reference)
