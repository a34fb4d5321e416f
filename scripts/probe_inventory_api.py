"""
Utility script to verify that the inventory backend serves products and
categories in a shape the dashboard can normalize.

Usage (with INVENTORY_API_BASE_URL configured, run from project root):

    python scripts/probe_inventory_api.py --product-id 64f0c2...

If --product-id is omitted, the script prints the first product returned by
the API next to its normalized form, plus a summary of the category list.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from services.inventory_api import InventoryApiClient, InventoryApiError
from services.normalizer import normalize_categories, normalize_products
from services.product_view import compute_stats, format_currency

logger = logging.getLogger("probe_inventory_api")
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")


class InventoryProbeError(RuntimeError):
    pass


def _find_record(records, product_id: Optional[str]) -> Dict[str, Any]:
    if not records:
        raise InventoryProbeError("No products returned by the API.")
    if product_id is None:
        return records[0]
    for record in records:
        if str(record.get("_id") or record.get("id")) == product_id:
            return record
    raise InventoryProbeError(f"Product with id {product_id} not found.")


def probe_inventory_api(client: InventoryApiClient, product_id: Optional[str] = None) -> Dict[str, Any]:
    logger.info("Fetching categories...")
    category_records = client.list_categories()
    categories = normalize_categories(category_records)

    logger.info("Fetching products...")
    product_records = client.list_products()
    products = normalize_products(product_records, categories)
    stats = compute_stats(products)

    record = _find_record(product_records, product_id)
    record_id = str(record.get("_id") or record.get("id") or "")
    normalized = next((p for p in products if p.id == record_id), None)

    return {
        "categories": {
            "count": len(categories),
            "dropped": len(category_records) - len(categories),
            "names": [category.name for category in categories],
        },
        "products": {
            "count": len(products),
            "dropped": len(product_records) - len(products),
            "available": stats.available,
            "total_value": format_currency(stats.total_value),
        },
        "raw_product": record,
        "normalized_product": normalized.model_dump() if normalized else None,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Probe the inventory API for dashboard compatibility.")
    parser.add_argument(
        "--product-id",
        help="Specific product id to inspect. If omitted, the first product found will be used.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output result as JSON (default is one line per section).",
    )
    args = parser.parse_args()

    try:
        result = probe_inventory_api(InventoryApiClient(), args.product_id)
    except (InventoryApiError, InventoryProbeError) as exc:
        parser.exit(status=1, message=f"Error probing inventory API: {exc}\n")

    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False, default=str))
    else:
        for key, value in result.items():
            print(f"{key}: {value}")


if __name__ == "__main__":
    main()
