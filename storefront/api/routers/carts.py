#storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api import deps
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import AddItemIn, CartEnvelope, CartOut, MessageEnvelope
from storefront.services.cart_service import CartService
from storefront.services.catalog_client import CatalogClient

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(
    db: Session = Depends(get_db),
    catalog_client: CatalogClient = Depends(deps.get_catalog_client),
):
    return CartService(db=db, catalog_client=catalog_client)


def _envelope(snapshot) -> CartEnvelope:
    return CartEnvelope(cart=CartOut.model_validate(snapshot))


@router.get("/{session_id}", response_model=CartEnvelope)
def get_cart(session_id: str, svc: CartService = Depends(get_service)):
    try:
        return _envelope(svc.get_cart(session_id))
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


#zgodnosc wsteczna - POST na koszyk tez go zwraca
@router.post("/{session_id}", response_model=CartEnvelope)
def get_cart_post(session_id: str, svc: CartService = Depends(get_service)):
    return get_cart(session_id, svc)


@router.post("/{session_id}/add", response_model=CartEnvelope)
def add_item(session_id: str, payload: AddItemIn, svc: CartService = Depends(get_service)):
    try:
        return _envelope(svc.add_item(session_id, payload.item_id, payload.quantity))
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{session_id}/remove/{item_id}", response_model=CartEnvelope)
def remove_item(session_id: str, item_id: str, svc: CartService = Depends(get_service)):
    try:
        return _envelope(svc.remove_item(session_id, item_id))
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{session_id}", response_model=MessageEnvelope)
def clear_cart(session_id: str, svc: CartService = Depends(get_service)):
    try:
        svc.clear(session_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return MessageEnvelope(message="Cart cleared")
