import logging
import time
from functools import wraps

import requests

from services.config import INVENTORY_API_PREFIX

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    'Accept': 'application/json',
    'Content-Type': 'application/json',
}


class InventoryApiManager:
    _instance = None
    _session = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def get_session(self) -> requests.Session:
        if self._session is None:
            self._session = _create_session()
        return self._session

    def reset(self):
        if self._session is not None:
            self._session.close()
        self._session = None


def retry_api(max_retries=3, delay=1):
    """Retry transient connection failures with exponential backoff.

    Only connection errors and timeouts are retried; HTTP error responses
    are returned to the caller untouched.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(max_retries):
                try:
                    return func(*args, **kwargs)
                except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
                    if attempt == max_retries - 1:
                        raise
                    backoff = delay * (2 ** attempt)
                    logger.warning(
                        f"{func.__name__} failed ({e}), retrying in {backoff:.1f}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    time.sleep(backoff)
            return None
        return wrapper
    return decorator


def _create_session() -> requests.Session:
    session = requests.Session()
    session.headers.update(DEFAULT_HEADERS)
    return session


def api_url(path: str, base_url: str = INVENTORY_API_PREFIX) -> str:
    """Join an endpoint path onto the API prefix (``{base}/api/``)."""
    if not base_url.endswith('/'):
        base_url = f'{base_url}/'
    return f"{base_url}{path.lstrip('/')}"


def get_api_session() -> requests.Session:
    """
    Gets a reusable HTTP session for the inventory backend using the connection manager.
    """
    return InventoryApiManager().get_session()
