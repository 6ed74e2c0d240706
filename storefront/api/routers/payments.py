# storefront/api/routers/payments.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api import deps
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import OrderOut, PaymentEnvelope, PaymentOut, ProcessPaymentIn
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService
from storefront.services.payment_gateway import MockPaymentGateway
from storefront.services.payment_service import PaymentService

router = APIRouter(prefix="/payment", tags=["payment"])


def get_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(deps.get_lock_service),
    gateway: MockPaymentGateway = Depends(deps.get_payment_gateway),
    notification_service: NotificationService = Depends(deps.get_notification_service),
):
    return PaymentService(
        db=db,
        lock_service=lock_service,
        gateway=gateway,
        notification_service=notification_service,
    )


@router.post("/process", response_model=PaymentEnvelope)
def process_payment(
    payload: ProcessPaymentIn,
    buyer_id: str = Depends(deps.get_current_buyer),
    svc: PaymentService = Depends(get_service),
    db: Session = Depends(get_db),
):
    try:
        payment = svc.settle_payment(
            buyer_id=buyer_id,
            order_id=payload.order_id,
            amount=payload.amount,
            method=payload.payment_method,
            card=payload.card,
        )
        order = OrderService(db).get_order(payment.order_id, buyer_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return PaymentEnvelope(
        payment=PaymentOut.model_validate(payment),
        order=OrderOut.model_validate(order),
    )
