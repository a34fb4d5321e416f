"""Inventory dashboard configuration constants and environment parsing."""
import os
from typing import List

from dotenv import load_dotenv

# Ensure environment variables are loaded immediately upon import
load_dotenv()

# ============================================================================
# CONSTANTS
# ============================================================================

ALL_CATEGORIES = 'all'
UNKNOWN_CATEGORY = 'Unknown'
DEFAULT_SORT_KEY = 'name'
SORT_KEYS = ('name', 'price', 'stock')
CODE_RANDOM_DIGITS = 3

# ============================================================================
# BACKEND API
# ============================================================================

INVENTORY_API_BASE_URL = os.environ.get('INVENTORY_API_BASE_URL', 'http://localhost:8000').rstrip('/')
INVENTORY_API_PREFIX = f'{INVENTORY_API_BASE_URL}/api/'
REQUEST_TIMEOUT = float(os.environ.get('INVENTORY_API_TIMEOUT_SECONDS', '10'))
MAX_RETRIES = int(os.environ.get('INVENTORY_API_MAX_RETRIES', '3'))
RETRY_DELAY = float(os.environ.get('INVENTORY_API_RETRY_DELAY', '1'))

PRODUCTS_ENDPOINT = 'products'
CATEGORIES_ENDPOINT = 'categories'

# ============================================================================
# CACHE
# ============================================================================

CACHE_TTL = int(os.environ.get('DASH_CACHE_TTL_SECONDS', '600'))
PRODUCTS_CACHE_KEY = 'inventory:products'
CATEGORIES_CACHE_KEY = 'inventory:categories'
LAST_UPDATED_CACHE_KEY = 'inventory:last_updated'
HEALTH_CACHE_KEY = 'inventory:health'
HEALTH_TTL = int(os.environ.get('DASH_HEALTH_TTL_SECONDS', '30'))
STATUS_REFRESH_MS = int(os.environ.get('DASH_STATUS_REFRESH_SECONDS', '60')) * 1000

# ============================================================================
# FORM
# ============================================================================

VARIANT_AWARE_FORM = os.environ.get('VARIANT_AWARE_FORM', 'true').lower() == 'true'


def _parse_size_options(raw: str) -> List[str]:
    return [size.strip() for size in raw.split(',') if size.strip()]


SIZE_OPTIONS = _parse_size_options(os.environ.get('SIZE_OPTIONS', 'XS,S,M,L,XL,XXL'))

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
