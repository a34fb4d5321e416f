"""Backend health check for the system status card."""
import logging
from datetime import datetime
from typing import Any, Dict

from services.config import HEALTH_CACHE_KEY, HEALTH_TTL
from services.inventory_api import InventoryApiError

logger = logging.getLogger(__name__)


def format_last_updated(value: datetime) -> str:
    """e.g. ``Oct 19, 2026, 09:05 AM``"""
    return f'{value:%b} {value.day}, {value:%Y, %I:%M %p}'


def _probe(store) -> Dict[str, Any]:
    try:
        categories = store.client.list_categories()
    except InventoryApiError as e:
        logger.error(f"Health check error: {e}")
        return {
            'status': 'error',
            'message': 'Inventory API unreachable',
            'error': str(e),
        }

    return {
        'status': 'healthy',
        'message': 'All systems operational',
        'categories': len(categories),
    }


def health_check(store) -> Dict[str, Any]:
    """Probe result is cached for ``HEALTH_TTL`` seconds; failures are cached too."""
    result = store.cache.get(HEALTH_CACHE_KEY)
    if not isinstance(result, dict):
        result = _probe(store)
        store.cache.set(HEALTH_CACHE_KEY, result, timeout=HEALTH_TTL)
    return dict(result, last_updated=format_last_updated(store.last_updated()))
