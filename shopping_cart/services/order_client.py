# shopping_cart/services/order_client.py
import requests
from requests import RequestException

from shopping_cart.domain.errors import OrderNotificationError
from shopping_cart.domain.schemas import OrderRequest
from shopping_cart.utils.settings import ORDER_SERVICE_URL, ORDER_SERVICE_TIMEOUT
from shopping_cart.utils.logging import get_logger

logger = get_logger(__name__)


class OrderClient:
    """
    HTTP client of the order service.
    Creating an order is not idempotent, so a failed POST is reported
    back to the caller instead of being retried.
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or ORDER_SERVICE_URL).rstrip("/")
        self.timeout = timeout or ORDER_SERVICE_TIMEOUT

    def create_order(self, order: OrderRequest) -> None:
        url = f"{self.base_url}/orders"
        payload = order.model_dump(mode="json", by_alias=True)
        logger.info(f"OrderClient POST {url} for user {order.user_id} ({len(order.items)} items)")

        try:
            resp = requests.post(
                url,
                json=payload,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except RequestException as e:
            logger.error(f"Order service rejected order for user {order.user_id}: {e}")
            raise OrderNotificationError(
                "It was not possible to create an order from this cart"
            ) from e

        logger.info(f"Order service accepted order for user {order.user_id} ({resp.status_code})")
