import math

import pytest

from src.postprocessor.normalizers import AmountCleaner
from src.utils.exceptions import InvalidAmountError


@pytest.fixture
def cleaner():
    return AmountCleaner()


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("$1,234.50", 1234.5),
        ("Rs. 745", 745.0),
        ("Rs.745", 745.0),
        ("₹ 157.05", 157.05),
        ("1745.00 USD", 1745.0),
        ("20 euros", 20.0),
        ("12.5%", 12.5),
        ("1.2.3", 1.2),
        (".75", 0.75),
        (745, 745.0),
        (157.05, 157.05),
    ],
)
def test_clean_strips_currency_and_separators(cleaner, raw, expected):
    assert cleaner.clean(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("7O5", 705.0),
        ("l2S", 125.0),
        ("B0", 80.0),
        ("Z0", 20.0),
        ("Rs.7O5", 705.0),
    ],
)
def test_clean_repairs_ocr_digit_confusions(cleaner, raw, expected):
    assert cleaner.clean(raw) == expected


@pytest.mark.parametrize("raw", ["-45", "-$5", "$-5", "−12.00", -3.2])
def test_negative_amounts_are_rejected(cleaner, raw):
    with pytest.raises(InvalidAmountError):
        cleaner.clean(raw)


@pytest.mark.parametrize("raw", ["", "abc", "$", None, True, math.nan, math.inf])
def test_garbage_is_rejected_not_zeroed(cleaner, raw):
    with pytest.raises(InvalidAmountError):
        cleaner.clean(raw)


def test_zero_is_a_valid_amount_by_default(cleaner):
    assert cleaner.clean("0") == 0.0
    assert cleaner.clean("0.00") == 0.0
    assert cleaner.clean(0) == 0.0


def test_zero_can_be_disabled():
    cleaner = AmountCleaner(allow_zero=False)

    with pytest.raises(InvalidAmountError):
        cleaner.clean("0.00")
    assert cleaner.clean("10") == 10.0


@pytest.mark.parametrize("raw", ["745.00", "157.05", "1902.05", "0", "12", "$1,234.50"])
def test_clean_is_idempotent(cleaner, raw):
    once = cleaner.clean(raw)

    assert cleaner.clean(once) == once
    assert cleaner.clean(str(once)) == once


def test_clean_many_drops_invalid_values(cleaner):
    assert cleaner.clean_many(["745.00", "abc", "-5", 157.05, None]) == [745.0, 157.05]


@pytest.mark.parametrize("raw", [{"value": 99.5}, [745.0, 157.05], ("12",), b"745.00"])
def test_structured_values_are_rejected(cleaner, raw):
    with pytest.raises(InvalidAmountError):
        cleaner.clean(raw)
