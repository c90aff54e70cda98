import pytest

from src.model_inference.classification_result import AmountType
from src.output_handler.provenance import ProvenanceLocator, amount_formats


@pytest.fixture
def locator():
    return ProvenanceLocator()


@pytest.mark.parametrize(
    "amount_type, value, expected",
    [
        (AmountType.TOTAL, 1902.05, "TOTAL 1902.05"),
        (AmountType.SUBTOTAL, 745.0, "SUB TOTAL 745.00"),
        (AmountType.TAX, 157.05, "TAX 9% 157.05"),
        (AmountType.DUE, 1745.0, "Amount DUE 1745.00"),
        (AmountType.OTHER_CHARGES, 1000.0, "Consultation 1000.00"),
    ],
)
def test_locates_bill_lines(locator, medical_bill_text, amount_type, value, expected):
    assert locator.locate(amount_type, value, medical_bill_text) == expected


def test_keyword_line_beats_earlier_amount_line(locator):
    text = "Paid 1745.00\nAmount DUE 1745.00"
    assert locator.locate(AmountType.DUE, 1745.0, text) == "Amount DUE 1745.00"


def test_amount_only_line_when_no_keyword_matches(locator):
    text = "  Item A  450.00  \nTOTAL 900.00"
    assert locator.locate(AmountType.DISCOUNT, 450.0, text) == "Item A  450.00"


def test_symbol_prefixed_amounts_are_found(locator):
    assert locator.locate(AmountType.TOTAL, 500.0, "Grand total ₹500") == "Grand total ₹500"
    assert locator.locate(AmountType.TOTAL, 20.0, "Total $ 20.00") == "Total $ 20.00"


def test_synthetic_citation_when_nothing_matches(locator):
    assert locator.locate(AmountType.TAX, 12.5, "") == "tax: 12.5"
    assert locator.locate(AmountType.TOTAL, 1745.0, "TOTAL 17450.00") == "total: 1745"


def test_accepts_type_names(locator):
    assert locator.locate("due", 1745.0, "Amount DUE 1745.00") == "Amount DUE 1745.00"
    assert locator.locate("surcharge", 3.0, "") == "surcharge: 3"


def test_amount_formats_cover_prefixes():
    formats = amount_formats(745.0)

    assert formats[0] == "745.00"
    assert "₹ 745.00" in formats
    assert "Rs.745" in formats
    assert "$ 745" in formats
