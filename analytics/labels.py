"""Human-readable labels for enum-like ledger values."""

from __future__ import annotations

SOURCE_TYPE_LABELS: dict[str, str] = {
    "pallet": "Pallet",
    "thrift": "Thrift Store",
    "garage_sale": "Garage Sale",
    "retail_arbitrage": "Retail Arbitrage",
    "mystery_box": "Mystery Box",
    "other": "Other",
}

EXPENSE_CATEGORY_LABELS: dict[str, str] = {
    "supplies": "Supplies",
    "storage": "Storage",
    "subscriptions": "Subscriptions",
    "equipment": "Equipment",
    "other": "Other",
    "gas": "Gas",
    "mileage": "Mileage",
    "fees": "Fees",
    "shipping": "Shipping",
}

PLATFORM_LABELS: dict[str, str] = {
    "ebay": "eBay",
    "poshmark": "Poshmark",
    "mercari": "Mercari",
    "whatnot": "Whatnot",
    "facebook": "Facebook Marketplace",
    "offerup": "OfferUp",
    "letgo": "Letgo",
    "craigslist": "Craigslist",
    "other": "Other",
}


def get_source_type_label(source_type: str) -> str:
    """Return the display label for a source type, or the raw value if unknown."""
    return SOURCE_TYPE_LABELS.get(source_type, source_type)


def get_expense_category_label(category: str) -> str:
    return EXPENSE_CATEGORY_LABELS.get(category, category)


def get_platform_label(platform: str) -> str:
    return PLATFORM_LABELS.get(platform, platform)
