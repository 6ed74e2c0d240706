# storefront/api/routers/checkout.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api import deps
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import (
    CheckoutEnvelope,
    CheckoutOut,
    OrderOut,
    PaymentDetails,
    ShippingInfo,
    StartCheckoutIn,
)
from storefront.services.cart_service import CartService
from storefront.services.catalog_client import CatalogClient
from storefront.services.checkout_service import CheckoutResult, CheckoutService
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService
from storefront.services.payment_gateway import MockPaymentGateway
from storefront.services.payment_service import PaymentService

router = APIRouter(prefix="/checkout", tags=["checkout"])


def get_service(
    db: Session = Depends(get_db),
    catalog_client: CatalogClient = Depends(deps.get_catalog_client),
    lock_service: LockService = Depends(deps.get_lock_service),
    gateway: MockPaymentGateway = Depends(deps.get_payment_gateway),
    notification_service: NotificationService = Depends(deps.get_notification_service),
):
    return CheckoutService(
        db=db,
        cart_service=CartService(db=db, catalog_client=catalog_client),
        order_service=OrderService(db),
        payment_service=PaymentService(
            db=db,
            lock_service=lock_service,
            gateway=gateway,
            notification_service=notification_service,
        ),
        lock_service=lock_service,
    )


def _envelope(result: CheckoutResult) -> CheckoutEnvelope:
    return CheckoutEnvelope(
        checkout=CheckoutOut.model_validate(result.checkout),
        order=OrderOut.model_validate(result.order) if result.order is not None else None,
    )


@router.post("", response_model=CheckoutEnvelope, status_code=201)
def start_checkout(
    payload: StartCheckoutIn,
    buyer_id: str = Depends(deps.get_current_buyer),
    svc: CheckoutService = Depends(get_service),
):
    try:
        return _envelope(svc.start(payload.session_id, buyer_id))
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/{checkout_id}", response_model=CheckoutEnvelope)
def get_checkout(
    checkout_id: str,
    buyer_id: str = Depends(deps.get_current_buyer),
    svc: CheckoutService = Depends(get_service),
):
    try:
        return _envelope(svc.get_checkout(checkout_id, buyer_id))
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/{checkout_id}/shipping", response_model=CheckoutEnvelope)
def submit_shipping(
    checkout_id: str,
    payload: ShippingInfo,
    buyer_id: str = Depends(deps.get_current_buyer),
    svc: CheckoutService = Depends(get_service),
):
    try:
        return _envelope(svc.submit_shipping(checkout_id, buyer_id, payload))
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/{checkout_id}/back", response_model=CheckoutEnvelope)
def back_to_shipping(
    checkout_id: str,
    buyer_id: str = Depends(deps.get_current_buyer),
    svc: CheckoutService = Depends(get_service),
):
    try:
        return _envelope(svc.back_to_shipping(checkout_id, buyer_id))
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/{checkout_id}/payment", response_model=CheckoutEnvelope)
def submit_payment(
    checkout_id: str,
    payload: PaymentDetails,
    buyer_id: str = Depends(deps.get_current_buyer),
    svc: CheckoutService = Depends(get_service),
):
    try:
        return _envelope(svc.submit_payment(checkout_id, buyer_id, payload))
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/{checkout_id}/abandon", response_model=CheckoutEnvelope)
def abandon_checkout(
    checkout_id: str,
    buyer_id: str = Depends(deps.get_current_buyer),
    svc: CheckoutService = Depends(get_service),
):
    try:
        return _envelope(svc.abandon(checkout_id, buyer_id))
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
