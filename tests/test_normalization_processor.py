import pytest

from conftest import FakeModelClient
from src.postprocessor.processor import NormalizationProcessor
from src.utils.exceptions import NoValidAmountsError

TOKENS = ["745.00", "157.05"]


def test_backend_amounts_are_merged_with_local_evidence():
    client = FakeModelClient(
        {"normalized_amounts": [1902.05, "745.00", "bad"], "normalization_confidence": 0.92}
    )
    processor = NormalizationProcessor(model_client=client)

    result = processor.process(TOKENS, "SUB TOTAL 745.00\nTAX 157.05")

    assert result.normalized_amounts == [1902.05, 745.0, 157.05]
    assert result.normalization_confidence == 0.92
    assert result.used_model is True
    # Decimal tokens are listed in the prompt as mandatory
    assert "745.00" in client.prompts[0]
    assert "157.05" in client.prompts[0]


@pytest.mark.parametrize(
    "client",
    [
        None,
        FakeModelClient(),
        FakeModelClient({"amounts": [745.0]}),
        FakeModelClient({"normalized_amounts": "745.00"}),
        FakeModelClient(RuntimeError("boom")),
    ],
)
def test_local_evidence_when_backend_fails(client):
    processor = NormalizationProcessor(model_client=client)

    result = processor.process(TOKENS, "SUB TOTAL 745.00")

    assert result.normalized_amounts == [745.0, 157.05]
    assert result.normalization_confidence == 0.6
    assert result.used_model is False


@pytest.mark.parametrize("reported, expected", [(None, 0.8), (0, 0.8), (1.7, 1.0), (0.55, 0.55)])
def test_backend_confidence_is_clamped(reported, expected):
    client = FakeModelClient(
        {"normalized_amounts": [745.0], "normalization_confidence": reported}
    )

    result = NormalizationProcessor(model_client=client).process(TOKENS, "")

    assert result.normalization_confidence == expected


def test_no_candidates_raises():
    with pytest.raises(NoValidAmountsError):
        NormalizationProcessor().process([], "nothing here")


def test_payload_shape():
    result = NormalizationProcessor().process(TOKENS, "")
    assert result.to_dict() == {
        "normalized_amounts": [745.0, 157.05],
        "normalization_confidence": 0.6,
    }
