from typing import Any, Dict, Iterable, List, Tuple

# Largest integer a JSON number holds exactly; upper bound of the last band
MAX_SAFE_INTEGER = 2 ** 53 - 1

PRICE_BANDS: List[Tuple[int, int]] = [
    (0, 100),
    (101, 200),
    (201, 300),
    (301, 400),
    (401, 500),
    (501, 600),
    (601, 700),
    (701, 800),
    (801, 900),
    (901, MAX_SAFE_INTEGER),
]


def in_band(price: float, index: int) -> bool:
    low, high = PRICE_BANDS[index]
    if index == 0:
        return low <= price <= high
    return PRICE_BANDS[index - 1][1] < price <= high


def summarize(transactions: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    total_sale_amount = 0.0
    total_sold_items = 0
    total_not_sold_items = 0

    for transaction in transactions:
        total_sale_amount += transaction.get("price") or 0
        if transaction.get("sold"):
            total_sold_items += 1
        else:
            total_not_sold_items += 1

    return {
        "total_sale_amount": total_sale_amount,
        "total_sold_items": total_sold_items,
        "total_not_sold_items": total_not_sold_items,
    }


def price_histogram(transactions: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Count transactions per price band.

    Every band is checked for every transaction, in ascending order. A band
    starts right above the previous band's upper bound, so fractional prices
    such as 100.5 land in "101-200". Negative prices are not counted.
    """
    counts = [0] * len(PRICE_BANDS)
    for transaction in transactions:
        price = transaction.get("price")
        if price is None:
            continue
        for index in range(len(PRICE_BANDS)):
            if in_band(price, index):
                counts[index] += 1

    return [
        {"price_range": f"{low}-{high}", "count": count}
        for (low, high), count in zip(PRICE_BANDS, counts)
    ]


def category_breakdown(transactions: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    # dicts keep insertion order, so categories come out first-seen first
    counts: Dict[Any, int] = {}
    for transaction in transactions:
        category = transaction.get("category")
        counts[category] = counts.get(category, 0) + 1

    return [{"category": category, "count": count} for category, count in counts.items()]


def page_window(page: int, per_page: int) -> Tuple[int, int]:
    """Return ``(skip, limit)`` for a 1-based page; page and size below 1 count as 1."""
    page = max(page, 1)
    per_page = max(per_page, 1)
    return (page - 1) * per_page, per_page
