import unicodedata
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

import polars as pl

from services.config import ALL_CATEGORIES, DEFAULT_SORT_KEY
from services.models import Product


@dataclass(frozen=True)
class InventoryStats:
    total: int
    available: int
    total_value: float

    @property
    def out_of_stock(self) -> int:
        return self.total - self.available


@dataclass(frozen=True)
class ProductView:
    visible: List[Product]
    stats: InventoryStats


def name_sort_key(name: str):
    """Case- and accent-insensitive collation key, ties broken by the folded name."""
    folded = name.casefold()
    base = ''.join(ch for ch in unicodedata.normalize('NFKD', folded) if not unicodedata.combining(ch))
    return base, folded


SORT_KEY_FUNCS: Dict[str, Callable[[Product], object]] = {
    'name': lambda product: name_sort_key(product.name),
    'price': lambda product: product.price,
    'stock': lambda product: product.stock,
}


def format_currency(amount: float) -> str:
    return f'${amount:,.2f}'


def filter_products(products: Sequence[Product], search_term: Optional[str], category_filter: Optional[str]) -> List[Product]:
    needle = (search_term or '').casefold()
    filtered = [product for product in products if needle in product.name.casefold()]
    if category_filter and category_filter != ALL_CATEGORIES:
        filtered = [product for product in filtered if product.category.id == category_filter]
    return filtered


def sort_products(products: Sequence[Product], sort_key: Optional[str]) -> List[Product]:
    """Stable ascending sort; unknown keys fall back to name."""
    key_func = SORT_KEY_FUNCS.get(sort_key or DEFAULT_SORT_KEY, SORT_KEY_FUNCS[DEFAULT_SORT_KEY])
    return sorted(products, key=key_func)


def compute_stats(products: Sequence[Product]) -> InventoryStats:
    """Totals over the full product set, independent of any active filter."""
    if not products:
        return InventoryStats(total=0, available=0, total_value=0.0)

    df = pl.DataFrame(
        {
            'price': [product.price for product in products],
            'availability': [product.availability for product in products],
        },
        schema={'price': pl.Float64, 'availability': pl.Boolean},
    )
    summary = df.select(
        pl.len().alias('total'),
        pl.col('availability').cast(pl.Int64).sum().alias('available'),
        pl.col('price').sum().alias('total_value'),
    ).row(0, named=True)

    return InventoryStats(
        total=int(summary['total']),
        available=int(summary['available']),
        total_value=float(summary['total_value']),
    )


def compute_view(
    products: Sequence[Product],
    search_term: Optional[str] = '',
    category_filter: Optional[str] = ALL_CATEGORIES,
    sort_key: Optional[str] = DEFAULT_SORT_KEY,
) -> ProductView:
    """
    Derive the rows to render and the headline statistics.

    Args:
        products: Canonical product set
        search_term: Case-insensitive substring matched against product names
        category_filter: Category id, or ``"all"``
        sort_key: ``"name"``, ``"price"`` or ``"stock"``

    Returns:
        ProductView with the filtered/sorted rows and stats over all products
    """
    visible = sort_products(filter_products(products, search_term, category_filter), sort_key)
    return ProductView(visible=visible, stats=compute_stats(products))
