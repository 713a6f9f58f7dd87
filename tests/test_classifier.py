# tests/test_classifier.py
import pytest

from prompt_receiver.classifier import Category, classify, category_counts, CATEGORY_RULES


@pytest.mark.parametrize("text,expected", [
    ("AI - Vendor Insights report", Category.VENDOR_INSIGHTS),
    ("show me vendor insights", Category.VENDOR_INSIGHTS),
    ("vendor invoice dashboard", Category.VENDOR_INSIGHTS),
    ("Create dashboard", Category.DASHBOARD),
    ("payment dashboard", Category.DASHBOARD),
    ("web analytics overview", Category.DASHBOARD),
    ("Build A FORM for registration", Category.FORM),
    ("submit button", Category.FORM),
    ("Data table", Category.DATA_TABLE),
    ("a grid of photos", Category.DATA_TABLE),
    ("todo list", Category.DATA_TABLE),
    ("accounting summary", Category.FINANCE),
    ("billing page", Category.FINANCE),
    ("storefront strategy", Category.ECOMMERCE),
    ("shopping cart", Category.ECOMMERCE),
    ("hello world", Category.GENERIC),
    ("", Category.GENERIC),
])
def test_classify(text, expected):
    assert classify(text) == expected


def test_vendor_alone_is_not_vendor_insights():
    assert classify("vendor onboarding") == Category.GENERIC
    assert classify("invoice") == Category.GENERIC


def test_none_is_generic():
    assert classify(None) == Category.GENERIC


def test_form_checked_before_table():
    # "information" contains "form"
    assert classify("information table") == Category.FORM


def test_deterministic():
    text = "Product registration data"
    assert classify(text) == classify(text) == Category.FORM


def test_category_values_are_labels():
    assert [c.value for c in Category] == [
        "VendorInsights", "Dashboard", "Form", "DataTable", "Finance", "Ecommerce", "Generic",
    ]
    assert Category.GENERIC not in [rule[0] for rule in CATEGORY_RULES]


def test_category_counts():
    counts = category_counts(["Create dashboard", "analytics", "hello", "cart"])
    assert counts == {"Dashboard": 2, "Generic": 1, "Ecommerce": 1}
    assert category_counts([]) == {}
