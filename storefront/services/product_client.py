# storefront/services/product_client.py
import requests

from storefront.domain.errors import NotFoundError
from storefront.domain.product import Product
from storefront.utils.retry import catalog_retry
from storefront.utils.settings import PRODUCT_SERVICE_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProductClient:
    def __init__(self, base_url: str | None = None, timeout: int = 2, session: requests.Session | None = None):
        self.base_url = (base_url or PRODUCT_SERVICE_URL).rstrip("/")
        self.timeout = timeout
        self.http = session or requests.Session()

    @catalog_retry()
    def fetch_product(self, product_id: int) -> dict:
        url = f"{self.base_url}/products/{product_id}"
        logger.info(f"ProductClient GET {url}")

        resp = self.http.get(url, timeout=self.timeout)
        # 404 to odpowiedz, nie awaria - bez retry
        if resp.status_code == 404:
            raise NotFoundError("Produkt", product_id)
        resp.raise_for_status()
        return resp.json()

    def get_product(self, product_id: int) -> Product:
        return Product.model_validate(self.fetch_product(product_id))

    @staticmethod
    def is_active(product: Product) -> bool:
        return product.active
