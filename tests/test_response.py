import json

from src.model_inference.classification_result import (
    AmountType,
    ClassificationMethod,
    ClassificationResult,
    ClassifiedAmount,
)
from src.ocr_engine.extraction_result import ExtractionResult
from src.output_handler.handler import OutputHandler
from src.output_handler.response import (
    FinalAmount,
    build_failure,
    build_success,
    outcome_from_error,
)
from src.postprocessor.processor import NormalizationResult
from src.utils.exceptions import (
    BackendUnavailableError,
    NoAmountsFoundError,
    NoValidAmountsError,
    OCRProcessingError,
)


def make_success():
    return build_success(
        ExtractionResult(raw_tokens=["1902.05"], currency_hint="INR", confidence=0.9),
        NormalizationResult(normalized_amounts=[1902.05], normalization_confidence=0.8),
        ClassificationResult(
            amounts=[ClassifiedAmount(AmountType.TOTAL, 1902.05)],
            confidence=0.85,
            method=ClassificationMethod.MODEL,
        ),
        [FinalAmount(AmountType.TOTAL, 1902.05, "TOTAL ₹ 1902.05")],
    )


def test_success_payload():
    outcome = make_success()

    assert outcome.status_code == 200
    assert outcome.ok
    assert outcome.payload == {
        "step1_ocr_extraction": {
            "raw_tokens": ["1902.05"],
            "currency_hint": "INR",
            "confidence": 0.9,
        },
        "step2_normalization": {
            "normalized_amounts": [1902.05],
            "normalization_confidence": 0.8,
        },
        "step3_classification": {
            "amounts": [{"type": "total", "value": 1902.05}],
            "confidence": 0.85,
        },
        "step4_final_output": {
            "currency": "INR",
            "amounts": [{"type": "total", "value": 1902.05, "source": "text: 'TOTAL ₹ 1902.05'"}],
            "status": "ok",
        },
    }


def test_json_keeps_currency_symbols():
    assert "₹" in make_success().to_json()


def test_failure_payload():
    outcome = build_failure("document too noisy")

    assert outcome.status_code == 400
    assert not outcome.ok
    assert outcome.payload == {"status": "no_amounts_found", "reason": "document too noisy"}


def test_no_amount_errors_map_to_400():
    assert outcome_from_error(NoAmountsFoundError("document too noisy")).payload == {
        "status": "no_amounts_found",
        "reason": "document too noisy",
    }
    outcome = outcome_from_error(NoValidAmountsError())
    assert outcome.status_code == 400
    assert outcome.payload["reason"] == "No valid amounts found"


def test_other_errors_map_to_500():
    outcome = outcome_from_error(OCRProcessingError("bill.png", "engine crashed"))
    assert outcome.status_code == 500
    assert outcome.payload == {"status": "error", "reason": "OCR processing failed for: bill.png"}

    outcome = outcome_from_error(RuntimeError("boom"))
    assert outcome.payload == {"status": "error", "reason": "boom"}

    outcome = outcome_from_error(BackendUnavailableError(3))
    assert outcome.status_code == 500


def test_output_handler_writes_records(tmp_path):
    handler = OutputHandler(output_dir=tmp_path, indent=None)
    outcomes = [("bill.png", make_success()), ("blank.png", build_failure("document too noisy"))]

    path = handler.save(outcomes)

    assert path.parent == tmp_path
    assert path.name.startswith("amounts_")
    records = json.loads(path.read_text(encoding="utf-8"))
    assert [r["source"] for r in records] == ["bill.png", "blank.png"]
    assert [r["status_code"] for r in records] == [200, 400]
    assert records[1]["response"]["reason"] == "document too noisy"


def test_output_handler_explicit_path(tmp_path):
    target = tmp_path / "nested" / "result.json"

    path = OutputHandler().save([("t.txt", build_failure("x"))], target)

    assert path == target
    assert target.exists()
