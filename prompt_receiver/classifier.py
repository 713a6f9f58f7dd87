# prompt_receiver/classifier.py
"""
Keyword classifier that picks a display template for a prompt.

Rules are evaluated top to bottom and the first match wins, so the order of
CATEGORY_RULES is part of the behaviour: "payment dashboard" is a Dashboard
because Dashboard is checked before Finance. Matching is plain case-insensitive
substring search, no tokenization ("storefront" matches "store").
"""

from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple


class Category(str, Enum):
    VENDOR_INSIGHTS = "VendorInsights"
    DASHBOARD = "Dashboard"
    FORM = "Form"
    DATA_TABLE = "DataTable"
    FINANCE = "Finance"
    ECOMMERCE = "Ecommerce"
    GENERIC = "Generic"


# (category, any of these keywords, or all of these keywords)
CATEGORY_RULES: List[Tuple[Category, Tuple[str, ...], Tuple[str, ...]]] = [
    (Category.VENDOR_INSIGHTS, ("vendor insights", "ai - vendor insights"), ("vendor", "invoice")),
    (Category.DASHBOARD, ("dashboard", "analytics"), ()),
    (Category.FORM, ("form", "input", "submit", "registration"), ()),
    (Category.DATA_TABLE, ("table", "list", "data", "grid"), ()),
    (Category.FINANCE, ("finance", "accounting", "billing", "payment"), ()),
    (Category.ECOMMERCE, ("product", "shop", "cart", "store"), ()),
]


def _matches(text: str, any_keywords: Tuple[str, ...], all_keywords: Tuple[str, ...]) -> bool:
    if any(k in text for k in any_keywords):
        return True
    return bool(all_keywords) and all(k in text for k in all_keywords)


def classify(text: Optional[str]) -> Category:
    """Return the category of the first rule matching `text`, else Generic."""
    lowered = (text or "").lower()
    for category, any_keywords, all_keywords in CATEGORY_RULES:
        if _matches(lowered, any_keywords, all_keywords):
            return category
    return Category.GENERIC


def category_counts(texts: Iterable[str]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for text in texts:
        label = classify(text).value
        counts[label] = counts.get(label, 0) + 1
    return counts
