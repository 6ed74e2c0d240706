# storefront/services/catalog_client.py
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from urllib.parse import quote

import requests
from requests import RequestException

from storefront.domain.errors import NotFound, UpstreamFailure
from storefront.utils.retry import http_retry
from storefront.utils.settings import CATALOG_SERVICE_URL, HTTP_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CatalogItem:
    item_id: str
    title: str
    price: Decimal
    owner_id: str | None


class CatalogClient:
    """Odczyt katalogu: item_id -> cena, tytul, wlasciciel (artysta)."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or CATALOG_SERVICE_URL).rstrip("/")
        self.timeout = timeout or HTTP_TIMEOUT_SECONDS

    def resolve(self, item_id: str) -> CatalogItem:
        try:
            data = self._fetch(item_id)
        except RequestException as e:
            logger.error(f"Catalog lookup for {item_id} failed: {e}")
            raise UpstreamFailure() from e

        if data is None:
            raise NotFound(f"Item {item_id} not found")

        return self._parse(item_id, data)

    @http_retry()
    def _fetch(self, item_id: str) -> dict | None:
        url = f"{self.base_url}/artworks/{quote(str(item_id), safe='')}"
        logger.info(f"CatalogClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.json()

    @staticmethod
    def _parse(item_id: str, data: dict) -> CatalogItem:
        #koperta {"success": ..., "artwork": {...}} albo goly obiekt
        payload = data.get("artwork", data) if isinstance(data, dict) else None
        if not payload:
            raise NotFound(f"Item {item_id} not found")

        try:
            price = Decimal(str(payload["price"]))
        except (KeyError, InvalidOperation) as e:
            logger.error(f"Catalog returned item {item_id} without a valid price")
            raise UpstreamFailure() from e

        owner = payload.get("artisanUserId") or payload.get("owner_id") or payload.get("artisanId")
        return CatalogItem(
            item_id=str(payload.get("id", item_id)),
            title=payload.get("title") or payload.get("name") or "",
            price=price,
            owner_id=str(owner) if owner is not None else None,
        )
