# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api import deps
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import CreateOrderIn, OrderEnvelope, OrderOut, OrdersEnvelope
from storefront.services.cart_service import CartService
from storefront.services.catalog_client import CatalogClient
from storefront.services.order_service import OrderService

router = APIRouter(tags=["orders"])


def get_service(db: Session = Depends(get_db)):
    return OrderService(db)


def get_cart_service(
    db: Session = Depends(get_db),
    catalog_client: CatalogClient = Depends(deps.get_catalog_client),
):
    return CartService(db=db, catalog_client=catalog_client)


@router.post("/orders", response_model=OrderEnvelope, status_code=201)
def create_order(
    payload: CreateOrderIn,
    buyer_id: str = Depends(deps.get_current_buyer),
    svc: OrderService = Depends(get_service),
    cart_svc: CartService = Depends(get_cart_service),
):
    """
    Tworzy zamowienie pending z migawki koszyka sesji.
    Total liczony po stronie serwera, nie przyjmowany od klienta.
    """
    try:
        snapshot = cart_svc.snapshot(payload.session_id)
        order = svc.create_order(buyer_id, snapshot, payload.shipping_info)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return OrderEnvelope(order=OrderOut.model_validate(order))


@router.get("/orders", response_model=OrdersEnvelope)
def list_orders(
    buyer_id: str = Depends(deps.get_current_buyer),
    svc: OrderService = Depends(get_service),
):
    try:
        orders = svc.list_orders(buyer_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return OrdersEnvelope(orders=[OrderOut.model_validate(o) for o in orders])


@router.get("/orders/{order_id}", response_model=OrderEnvelope)
def get_order(
    order_id: str,
    buyer_id: str = Depends(deps.get_current_buyer),
    svc: OrderService = Depends(get_service),
):
    try:
        order = svc.get_order(order_id, buyer_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return OrderEnvelope(order=OrderOut.model_validate(order))


@router.get("/seller/orders", response_model=OrdersEnvelope)
def list_seller_orders(
    seller_id: str = Depends(deps.get_current_buyer),
    svc: OrderService = Depends(get_service),
):
    """Zamowienia z pozycjami zalogowanego artysty."""
    try:
        orders = svc.list_seller_orders(seller_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return OrdersEnvelope(orders=[OrderOut.model_validate(o) for o in orders])
