import pytest

from src.ocr_engine.extraction_result import NO_AMOUNTS_FOUND, ExtractionResult
from src.ocr_engine.token_extractor import NOISY_DOCUMENT_REASON, TokenExtractor


@pytest.fixture
def extractor():
    return TokenExtractor()


@pytest.mark.parametrize("text", ["", "   ", "Thank you for visiting"])
def test_text_without_tokens_is_too_noisy(extractor, text):
    result = extractor.extract(text)

    assert result.is_failure
    assert result.reason == NOISY_DOCUMENT_REASON
    assert result.to_dict() == {"status": NO_AMOUNTS_FOUND, "reason": "document too noisy"}


def test_bill_text_tokens_and_filters(extractor, medical_bill_text):
    result = extractor.extract(medical_bill_text)

    # Invoice number, date, phone number and year are all dropped
    assert result.raw_tokens == ["1000.00", "745.00", "9%", "157.05", "1902.05", "1745.00"]
    assert result.currency_hint == "USD"
    assert result.confidence == 1.0
    assert result.processed_text == medical_bill_text


@pytest.mark.parametrize(
    "text",
    [
        "Invoice year 2023 total 450.00",
        "Date: 12/05/2023 total 450.00",
        "Date: 2023-05-12 total 450.00",
        "Call 9876543210 total 450.00",
        "Ref 12345 total 450.00",
        "Qty 2 total 450.00",
        "Ratio 0.5 total 450.00",
        "Limit 75000.00 total 450.00",
    ],
)
def test_non_amount_tokens_are_filtered(extractor, text):
    assert extractor.extract(text).raw_tokens == ["450.00"]


def test_percent_tokens_are_kept(extractor):
    assert extractor.find_tokens("TAX 9% 157.05") == ["9%", "157.05"]


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Total $ 10.00 and ₹ 20.00", "USD"),
        ("Total ₹ 20.00", "INR"),
        ("Total Rs. 20.00", "INR"),
        ("Total € 5.50", "EUR"),
        ("Total £ 12.00", "GBP"),
    ],
)
def test_currency_detection(extractor, text, expected):
    assert extractor.detect_currency(text) == (expected, True)


def test_missing_currency_falls_back_to_default(extractor):
    assert extractor.detect_currency("Total 20.00") == ("USD", False)
    assert TokenExtractor(default_currency="INR").detect_currency("20.00") == ("INR", False)


def test_confidence_weights(extractor):
    assert extractor.extract("Total $ 450.00").confidence == 1.0
    assert extractor.extract("Paid 450.00 today").confidence == 0.7
    assert extractor.extract("450.00 and 12.00 here").confidence == 0.4


def test_short_text_confidence_is_halved(extractor):
    assert extractor.extract("$ 45.00").confidence == pytest.approx(0.35)

    # 0.4 halved falls under the minimum confidence
    assert extractor.extract("45.00").is_failure


def test_raw_length_controls_short_text_penalty(extractor):
    result = extractor.extract("$ 45.00", raw_length=40)
    assert result.confidence == 0.7


def test_ocr_confidence_scales_extraction_confidence():
    result = ExtractionResult(raw_tokens=["45.00"], confidence=1.0)

    assert result.with_ocr_confidence(0.87).confidence == 0.87
    assert result.with_ocr_confidence(None) is result

    failure = ExtractionResult.failure(NOISY_DOCUMENT_REASON)
    assert failure.with_ocr_confidence(0.5) is failure


def test_success_payload_shape(extractor):
    payload = extractor.extract("Total $ 450.00").to_dict()
    assert payload == {"raw_tokens": ["450.00"], "currency_hint": "USD", "confidence": 1.0}
