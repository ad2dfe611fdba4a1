import pytest

from core.currency import format_rupees


@pytest.mark.parametrize("amount, expected", [
    (0, "₹0"),
    (99, "₹99"),
    (999, "₹999"),
    (1652, "₹1,652"),
    (123456.5, "₹1,23,456.5"),
    (10000000, "₹1,00,00,000"),
    (1499.99, "₹1,499.99"),
    (-250, "-₹250"),
])
def test_format_rupees(amount, expected):
    assert format_rupees(amount) == expected
