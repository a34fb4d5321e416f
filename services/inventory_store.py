"""Single owner of the cached category and product lists.

Raw backend records are cached and canonical products are derived on every
read. Mutations go to the backend first; on success the affected list is
invalidated and re-read, the local list is never edited in place.
"""
import logging
import random
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from services.config import (
    CACHE_TTL,
    CATEGORIES_CACHE_KEY,
    LAST_UPDATED_CACHE_KEY,
    PRODUCTS_CACHE_KEY,
    VARIANT_AWARE_FORM,
)
from services.draft_editor import ValidationResult, build_create_payload, validate_draft
from services.inventory_api import InventoryApiClient, InventoryApiError
from services.models import Category, DraftEditor, DraftProduct, Product
from services.normalizer import normalize_categories, normalize_category, normalize_products
from services.product_codes import fill_missing_codes

logger = logging.getLogger(__name__)

CREATED = 'created'
INVALID = 'invalid'
FAILED = 'failed'


@dataclass(frozen=True)
class SubmissionOutcome:
    status: str
    validation: ValidationResult
    product: Optional[Product] = None
    error: Optional[str] = None

    @property
    def created(self) -> bool:
        return self.status == CREATED


class InventoryStore:
    def __init__(self, client: InventoryApiClient, cache, ttl: int = CACHE_TTL):
        self.client = client
        self.cache = cache
        self.ttl = ttl
        self._started_at = datetime.now()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _cached_records(self, key: str) -> Optional[List[Dict[str, Any]]]:
        records = self.cache.get(key)
        return records if isinstance(records, list) else None

    def _fetch(self, key: str, fetcher) -> Optional[List[Dict[str, Any]]]:
        try:
            records = fetcher()
        except InventoryApiError as e:
            logger.error(f"Failed to fetch {key}: {e}")
            return None
        self.cache.set(key, records, timeout=self.ttl)
        return records

    def refresh_categories(self) -> List[Category]:
        records = self._fetch(CATEGORIES_CACHE_KEY, self.client.list_categories)
        if records is None:
            records = self._cached_records(CATEGORIES_CACHE_KEY) or []
        return normalize_categories(records)

    def categories(self) -> List[Category]:
        records = self._cached_records(CATEGORIES_CACHE_KEY)
        if records is None:
            return self.refresh_categories()
        return normalize_categories(records)

    def refresh_products(self) -> List[Product]:
        records = self._fetch(PRODUCTS_CACHE_KEY, self.client.list_products)
        if records is None:
            records = self._cached_records(PRODUCTS_CACHE_KEY) or []
        return normalize_products(records, self.categories())

    def products(self) -> List[Product]:
        records = self._cached_records(PRODUCTS_CACHE_KEY)
        if records is None:
            return self.refresh_products()
        return normalize_products(records, self.categories())

    def get_product(self, product_id: str) -> Optional[Product]:
        for product in self.products():
            if product.id == product_id:
                return product
        return None

    def invalidate_products(self):
        self.cache.delete(PRODUCTS_CACHE_KEY)

    def invalidate_categories(self):
        self.cache.delete(CATEGORIES_CACHE_KEY)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def _touch(self):
        self.cache.set(LAST_UPDATED_CACHE_KEY, datetime.now().isoformat(), timeout=0)

    def last_updated(self) -> datetime:
        value = self.cache.get(LAST_UPDATED_CACHE_KEY)
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value)
            except ValueError:
                pass
        return self._started_at

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_product(
        self,
        source: Union[DraftEditor, DraftProduct],
        variant_aware: bool = VARIANT_AWARE_FORM,
        now_ms: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> SubmissionOutcome:
        draft = source.draft if isinstance(source, DraftEditor) else source
        validation = validate_draft(draft, variant_aware=variant_aware)
        if not validation.valid:
            logger.warning(f"Product not submitted, {validation.describe()}")
            return SubmissionOutcome(status=INVALID, validation=validation)

        draft = fill_missing_codes(draft, now_ms=now_ms, rng=rng)
        try:
            created = self.client.create_product(build_create_payload(draft))
        except InventoryApiError as e:
            logger.error(f"Error creating product {draft.name!r}: {e}")
            return SubmissionOutcome(status=FAILED, validation=validation, error=str(e))

        self.invalidate_products()
        self._touch()
        products = self.refresh_products()

        product = None
        created_id = None
        if isinstance(created, dict):
            created_id = created.get('_id') or created.get('id')
        if created_id is not None:
            product = next((p for p in products if p.id == str(created_id)), None)
        return SubmissionOutcome(status=CREATED, validation=validation, product=product)

    def set_availability(self, product_id: str, availability: bool) -> bool:
        try:
            self.client.update_product(product_id, {'availability': bool(availability)})
        except InventoryApiError as e:
            logger.error(f"Error updating availability of product {product_id}: {e}")
            return False
        self.invalidate_products()
        self._touch()
        self.refresh_products()
        return True

    def delete_product(self, product_id: str) -> bool:
        try:
            self.client.delete_product(product_id)
        except InventoryApiError as e:
            logger.error(f"Error deleting product {product_id}: {e}")
            return False
        self.invalidate_products()
        self._touch()
        self.refresh_products()
        return True

    def create_category(self, name: Optional[str]) -> Optional[Category]:
        name = (name or '').strip()
        if not name:
            return None
        try:
            created = self.client.create_category(name)
        except InventoryApiError as e:
            logger.error(f"Failed to create category {name!r}: {e}")
            return None

        if not isinstance(created, dict) or not (created.get('_id') or created.get('id')):
            logger.error(f"New category data is invalid or null: {created!r}")
            self.invalidate_categories()
            self.refresh_categories()
            return None

        self.invalidate_categories()
        self.refresh_categories()
        return normalize_category(created)


_store: Optional[InventoryStore] = None
_store_lock = threading.Lock()


def get_inventory_store() -> InventoryStore:
    """Process-wide store bound to the Flask cache and the shared HTTP session."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                from services.cache import cache
                _store = InventoryStore(InventoryApiClient(), cache)
    return _store
