"""REST client for the inventory backend (``{base}/api/products``, ``/api/categories``)."""
import logging
from typing import Any, Dict, List, Optional

import requests

from api_connector import api_url, get_api_session, retry_api
from services.config import (
    CATEGORIES_ENDPOINT,
    INVENTORY_API_PREFIX,
    MAX_RETRIES,
    PRODUCTS_ENDPOINT,
    REQUEST_TIMEOUT,
    RETRY_DELAY,
)

logger = logging.getLogger(__name__)


class InventoryApiError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InventoryApiClient:
    def __init__(
        self,
        session: Optional[requests.Session] = None,
        base_url: str = INVENTORY_API_PREFIX,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self._session = session
        self.base_url = base_url
        self.timeout = timeout

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = get_api_session()
        return self._session

    def _send(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = api_url(path, self.base_url)
        logger.debug(f"{method} {url}")
        response = self.session.request(method, url, json=payload, timeout=self.timeout)
        if response.status_code >= 400:
            raise InventoryApiError(
                f"{method} {path} failed with HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        return response

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = self._send(method, path, payload)
        except requests.exceptions.RequestException as e:
            raise InventoryApiError(f"{method} {path} failed: {e}") from e

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise InventoryApiError(f"{method} {path} returned a non-JSON body", response.status_code) from e

    @retry_api(max_retries=MAX_RETRIES, delay=RETRY_DELAY)
    def _get_list(self, path: str) -> List[Dict[str, Any]]:
        try:
            response = self._send('GET', path)
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout):
            raise
        except requests.exceptions.RequestException as e:
            raise InventoryApiError(f"GET {path} failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise InventoryApiError(f"GET {path} returned a non-JSON body", response.status_code) from e
        if not isinstance(body, list):
            raise InventoryApiError(f"GET {path} returned {type(body).__name__}, expected a list", response.status_code)
        return body

    def list_products(self) -> List[Dict[str, Any]]:
        try:
            return self._get_list(PRODUCTS_ENDPOINT)
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            raise InventoryApiError(f"GET {PRODUCTS_ENDPOINT} failed: {e}") from e

    def create_product(self, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        logger.info(f"Sending create product request for {payload.get('name')!r}")
        return self._request('POST', PRODUCTS_ENDPOINT, payload)

    def update_product(self, product_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._request('PATCH', f'{PRODUCTS_ENDPOINT}/{product_id}', updates)

    def delete_product(self, product_id: str) -> None:
        self._request('DELETE', f'{PRODUCTS_ENDPOINT}/{product_id}')

    def list_categories(self) -> List[Dict[str, Any]]:
        try:
            return self._get_list(CATEGORIES_ENDPOINT)
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            raise InventoryApiError(f"GET {CATEGORIES_ENDPOINT} failed: {e}") from e

    def create_category(self, name: str) -> Optional[Dict[str, Any]]:
        return self._request('POST', CATEGORIES_ENDPOINT, {'name': name})
