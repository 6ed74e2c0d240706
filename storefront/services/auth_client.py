# storefront/services/auth_client.py
import requests
from requests import RequestException

from storefront.domain.errors import Unauthenticated, UpstreamFailure
from storefront.utils.retry import http_retry
from storefront.utils.settings import (
    AUTH_API_KEY,
    AUTH_DEV_MODE,
    AUTH_SERVICE_URL,
    HTTP_TIMEOUT_SECONDS,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEV_BUYER_ID = "dev-user"


class AuthClient:
    """
    Zewnetrzny dostawca tozsamosci (API w stylu Supabase).
    Token -> buyer_id albo Unauthenticated.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        dev_mode: bool | None = None,
        timeout: float | None = None,
    ):
        self.base_url = (base_url or AUTH_SERVICE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else AUTH_API_KEY
        self.dev_mode = AUTH_DEV_MODE if dev_mode is None else dev_mode
        self.timeout = timeout or HTTP_TIMEOUT_SECONDS

    def resolve_buyer(self, token: str | None) -> str:
        if not token:
            raise Unauthenticated()

        if self.dev_mode:
            return DEV_BUYER_ID

        try:
            user = self._fetch_user(token)
        except RequestException as e:
            logger.error(f"Auth provider unavailable: {e}")
            raise UpstreamFailure() from e

        if not user or not user.get("id"):
            raise Unauthenticated()
        return str(user["id"])

    @http_retry()
    def _fetch_user(self, token: str) -> dict | None:
        resp = requests.get(
            f"{self.base_url}/auth/v1/user",
            headers={"Authorization": f"Bearer {token}", "apikey": self.api_key},
            timeout=self.timeout,
        )
        if resp.status_code in (401, 403):
            return None
        resp.raise_for_status()
        return resp.json()


def bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
