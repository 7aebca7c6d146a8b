"""
Client-side product filtering.

Three predicates (title search, category, price bracket) ANDed over the
catalog. Output keeps catalog order.
"""

from typing import Any, Dict, List, Tuple

import pandas as pd

ALL = "all"

PRICE_BRACKETS = [
    ("all", "All Prices"),
    ("0-25", "$0 - $25"),
    ("25-50", "$25 - $50"),
    ("50-100", "$50 - $100"),
    ("100-1000", "$100+"),
]

TABLE_COLUMNS = ["id", "title", "category", "price"]


def parse_bracket(value: str) -> Tuple[float, float]:
    low, sep, high = value.partition("-")
    if not sep:
        raise ValueError(f"not a price bracket: {value!r}")
    return float(low), float(high)


def matches_search(product: Dict[str, Any], text: str) -> bool:
    return text.lower() in product["title"].lower()


def matches_category(product: Dict[str, Any], category: str) -> bool:
    return category == ALL or product["category"] == category


def matches_price(product: Dict[str, Any], bracket: str) -> bool:
    if bracket == ALL:
        return True
    low, high = parse_bracket(bracket)
    return low <= product["price"] <= high


def filter_products(products, search: str = "", category: str = ALL, price: str = ALL) -> List[Dict[str, Any]]:
    return [
        p for p in products
        if matches_search(p, search)
        and matches_category(p, category)
        and matches_price(p, price)
    ]


def category_options(products) -> List[str]:
    """'all' followed by each category once, in the order first seen."""
    seen = dict.fromkeys(p["category"] for p in products)
    return [ALL] + list(seen)


def products_frame(products) -> pd.DataFrame:
    rows = [{c: p.get(c, "") for c in TABLE_COLUMNS} for p in products]
    return pd.DataFrame(rows, columns=TABLE_COLUMNS)
