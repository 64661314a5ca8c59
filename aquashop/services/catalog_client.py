# aquashop/services/catalog_client.py
import requests
from pydantic import ValidationError
from requests import RequestException

from aquashop.domain.errors import InvalidInput, RemoteFailure
from aquashop.domain.schemas import PRODUCT_TYPES, CatalogProduct, catalog_product_adapter
from aquashop.utils.retry import http_retry
from aquashop.utils.settings import CATALOG_SERVICE_URL, REMOTE_TIMEOUT_SECONDS
from aquashop.utils.logging import get_logger

logger = get_logger(__name__)


def parse_catalog_record(product_type: str, record: dict) -> CatalogProduct:
    """Validate a raw catalog row into the fish/food/accessories union."""
    try:
        return catalog_product_adapter.validate_python({**record, "product_type": product_type})
    except ValidationError as e:
        raise RemoteFailure(f"Malformed {product_type} record from catalog: {e}") from e


class CatalogClient:
    """
    Read-only gateway to the remote catalog.
    GET {base_url}/{product_type}/{product_id}, 404 means the product does not exist.
    """

    def __init__(self, base_url: str | None = None, timeout: float = REMOTE_TIMEOUT_SECONDS):
        self.base_url = (base_url or CATALOG_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    def lookup(self, product_type: str, product_id: str) -> CatalogProduct | None:
        if product_type not in PRODUCT_TYPES:
            raise InvalidInput(f"Unknown product type: {product_type}")

        try:
            record = self._fetch(product_type, product_id)
        except RequestException as e:
            logger.error(f"Catalog lookup {product_type}/{product_id} failed: {e}")
            raise RemoteFailure(f"Catalog lookup failed for {product_type}/{product_id}") from e

        if record is None:
            return None
        return parse_catalog_record(product_type, record)

    @http_retry()
    def _fetch(self, product_type: str, product_id: str) -> dict | None:
        url = f"{self.base_url}/{product_type}/{product_id}"
        logger.info(f"CatalogClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.json()
