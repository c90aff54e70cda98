import pytest

from src.model_inference.classification_result import AmountType, ClassificationMethod
from src.model_inference.fallback_classifier import FallbackClassifier, find_amount_line


@pytest.fixture
def classifier():
    return FallbackClassifier()


def test_medical_bill(classifier, medical_bill_text):
    result = classifier.classify(
        [1902.05, 1745.0, 1000.0, 745.0, 157.05, 9.0], medical_bill_text
    )

    assert [(a.type, a.value) for a in result.amounts] == [
        (AmountType.TOTAL, 1902.05),
        (AmountType.DUE, 1745.0),
        (AmountType.OTHER_CHARGES, 1000.0),
        (AmountType.SUBTOTAL, 745.0),
        (AmountType.TAX, 157.05),
    ]
    assert result.method is ClassificationMethod.FALLBACK
    assert result.confidence == 0.6


def test_only_top_candidates_are_considered(medical_bill_text):
    narrow = FallbackClassifier(top_n=1)

    result = narrow.classify([745.0, 1902.05], medical_bill_text)

    assert [a.value for a in result.amounts] == [1902.05]


def test_amount_without_keyword_is_dropped(classifier):
    assert classifier.classify([450.0], "Item 450.00").amounts == []


def test_amount_not_printed_is_dropped(classifier):
    assert classifier.classify([450.0], "TOTAL 1902.05").amounts == []


@pytest.mark.parametrize(
    "line, expected",
    [
        ("Balance 50.00", AmountType.BALANCE),
        ("Amount Paid 50.00", AmountType.PAID),
        ("MRP 50.00", AmountType.MRP),
        ("Discount 50.00", AmountType.DISCOUNT),
        ("Delivery charges 50.00", AmountType.CHARGES),
        ("Service charge 50.00", AmountType.OTHER_CHARGES),
        ("CGST 50.00", AmountType.TAX),
        ("Subtotal 50.00", AmountType.SUBTOTAL),
    ],
)
def test_keyword_rules(classifier, line, expected):
    assert classifier.classify_one(50.0, line).type is expected


def test_rule_confidence_is_attached(classifier):
    assert classifier.classify_one(50.0, "TOTAL 50.00").confidence == 0.9
    assert classifier.classify_one(50.0, "TAX 50.00").confidence == 0.7


def test_find_amount_line_respects_digit_boundaries():
    text = "TOTAL 1745.00\nSUB TOTAL 745.00"
    assert find_amount_line(text, 745.0) == "SUB TOTAL 745.00"
    assert find_amount_line(text, 45.0) is None


def test_find_amount_line_accepts_plain_form():
    assert find_amount_line("Fee 450", 450.0) == "Fee 450"
