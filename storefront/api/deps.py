# storefront/api/deps.py
"""
Zaleznosci FastAPI wspolne dla routerow.
Klienci zewnetrzni sa wstrzykiwani tutaj, testy podmieniaja je przez dependency_overrides.
"""
from functools import lru_cache

from fastapi import Depends, Header, HTTPException

from storefront.domain.errors import StorefrontError
from storefront.services.auth_client import AuthClient, bearer_token
from storefront.services.catalog_client import CatalogClient
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.payment_gateway import MockPaymentGateway


def get_catalog_client() -> CatalogClient:
    return CatalogClient()


@lru_cache
def get_lock_service() -> LockService:
    return LockService()


def get_auth_client() -> AuthClient:
    return AuthClient()


def get_payment_gateway() -> MockPaymentGateway:
    return MockPaymentGateway()


def get_notification_service() -> NotificationService:
    return NotificationService()


def get_current_buyer(
    authorization: str | None = Header(None),
    auth_client: AuthClient = Depends(get_auth_client),
) -> str:
    try:
        return auth_client.resolve_buyer(bearer_token(authorization))
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
