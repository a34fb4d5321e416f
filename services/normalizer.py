"""Map heterogeneous backend records onto the canonical product/category models.

This is a display layer, so nothing here raises on malformed records:
bad prices become 0, unknown categories become "Unknown".
"""
import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional

from services.config import UNKNOWN_CATEGORY
from services.models import Category, CategoryRef, Product, Subcategory, Variant

logger = logging.getLogger(__name__)

ID_FIELDS = ('_id', 'id')
TRUTHY_STRINGS = {'true', '1', 'yes', 'y', 'on'}


def _record_id(record: Mapping[str, Any]) -> str:
    for field in ID_FIELDS:
        value = record.get(field)
        if value is not None and value != '':
            return str(value)
    return ''


def _text(value: Any) -> str:
    if value is None:
        return ''
    return value if isinstance(value, str) else str(value)


def _coerce_price(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        price = float(value)
    elif isinstance(value, str):
        try:
            price = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(price) or price < 0:
        return 0.0
    return price


def _coerce_stock(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        stock = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(stock, 0)


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_STRINGS
    return bool(value)


def _coerce_sizes(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [_text(size) for size in value if size is not None and _text(size)]


def _coerce_variants(value: Any) -> List[Variant]:
    if not isinstance(value, list):
        return []
    variants = []
    for item in value:
        if not isinstance(item, Mapping):
            continue
        variants.append(Variant(color=_text(item.get('color')), image=_text(item.get('image'))))
    return variants


def build_category_lookup(categories: Iterable[Category]) -> Dict[str, str]:
    """Category id -> name."""
    return {category.id: category.name for category in categories}


def resolve_category(value: Any, category_lookup: Mapping[str, str]) -> CategoryRef:
    if isinstance(value, Mapping):
        category_id = _record_id(value)
        name = _text(value.get('name')) or category_lookup.get(category_id) or UNKNOWN_CATEGORY
        return CategoryRef(id=category_id, name=name)
    if value is None or value == '':
        return CategoryRef()
    category_id = _text(value)
    return CategoryRef(id=category_id, name=category_lookup.get(category_id, UNKNOWN_CATEGORY))


def normalize_product(record: Mapping[str, Any], category_lookup: Mapping[str, str]) -> Product:
    """Normalize one server product record; the caller guarantees an id is present."""
    return Product(
        id=_record_id(record),
        name=_text(record.get('name')),
        sizes=_coerce_sizes(record.get('sizes')),
        variants=_coerce_variants(record.get('variants')),
        price=_coerce_price(record.get('price')),
        stock=_coerce_stock(record.get('stock')),
        availability=_coerce_bool(record.get('availability', False)),
        category=resolve_category(record.get('categoryId'), category_lookup),
        subcategory=_text(record.get('subcategory')),
        qr_code=_text(record.get('qrCode')),
        barcode=_text(record.get('barcode')),
        description=_text(record.get('description')),
    )


def normalize_products(records: Optional[Iterable[Any]], categories: Iterable[Category]) -> List[Product]:
    """Normalize a product listing, keeping the first record per id."""
    lookup = build_category_lookup(categories)
    products: List[Product] = []
    seen = set()
    for record in records or []:
        if not isinstance(record, Mapping):
            logger.warning(f"Skipping non-object product record: {record!r}")
            continue
        product_id = _record_id(record)
        if not product_id:
            logger.warning(f"Skipping product without id: {record.get('name')!r}")
            continue
        if product_id in seen:
            logger.warning(f"Skipping duplicate product id {product_id}")
            continue
        seen.add(product_id)
        products.append(normalize_product(record, lookup))
    return products


def _coerce_subcategories(value: Any) -> List[Subcategory]:
    if not isinstance(value, list):
        return []
    subcategories = []
    for item in value:
        name = _text(item.get('name')) if isinstance(item, Mapping) else _text(item)
        if name:
            subcategories.append(Subcategory(name=name))
    return subcategories


def normalize_category(record: Mapping[str, Any]) -> Category:
    return Category(
        id=_record_id(record),
        name=_text(record.get('name')) or UNKNOWN_CATEGORY,
        subcategories=_coerce_subcategories(record.get('subcategories')),
    )


def normalize_categories(records: Optional[Iterable[Any]]) -> List[Category]:
    categories = []
    for record in records or []:
        if not isinstance(record, Mapping) or not _record_id(record):
            logger.warning(f"Skipping malformed category record: {record!r}")
            continue
        categories.append(normalize_category(record))
    return categories
