from types import SimpleNamespace

import httpx
import pytest
from google.genai import errors as genai_errors

from conftest import FakeTextGenerator
from src.model_inference.gemini_client import (
    GeminiTextGenerator,
    ModelClient,
    create_model_client,
)
from src.model_inference.retry import RetryPolicy
from src.utils.exceptions import (
    BackendError,
    BackendUnavailableError,
    ConfigurationError,
    EmptyResponseError,
    MalformedBackendResponseError,
    SafetyBlockedError,
    TokenLimitExceededError,
)


class FakeModels:
    """Stands in for ``genai.Client().models``."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def generate_content(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


def make_response(text, finish_reason="STOP", block_reason=None):
    return SimpleNamespace(
        text=text,
        candidates=[SimpleNamespace(finish_reason=finish_reason, safety_ratings=[])],
        prompt_feedback=SimpleNamespace(block_reason=block_reason),
    )


def make_generator(models):
    return GeminiTextGenerator(model_name="gemini-test", client=SimpleNamespace(models=models))


def test_generate_returns_text():
    models = FakeModels(make_response('{"amounts": []}'))

    text = make_generator(models).generate("classify")

    assert text == '{"amounts": []}'
    request = models.requests[0]
    assert request["model"] == "gemini-test"
    assert request["contents"] == "classify"
    assert request["config"].temperature == 0.1
    assert len(request["config"].safety_settings) == 4


@pytest.mark.parametrize(
    "response, expected",
    [
        (None, EmptyResponseError),
        (make_response(""), EmptyResponseError),
        (SimpleNamespace(text=None, candidates=[], prompt_feedback=None), EmptyResponseError),
        (make_response("", finish_reason="MAX_TOKENS"), TokenLimitExceededError),
        (make_response("partial", finish_reason="SAFETY"), SafetyBlockedError),
        (make_response(None, block_reason="SAFETY"), SafetyBlockedError),
    ],
)
def test_unusable_responses(response, expected):
    with pytest.raises(expected):
        make_generator(FakeModels(response)).generate("prompt")


def test_api_errors_become_backend_errors():
    error = genai_errors.APIError(
        503, {"error": {"code": 503, "message": "overloaded", "status": "UNAVAILABLE"}}
    )

    with pytest.raises(BackendError):
        make_generator(FakeModels(error=error)).generate("prompt")


def test_timeouts_become_backend_errors():
    error = httpx.ReadTimeout("timed out")

    with pytest.raises(BackendError):
        make_generator(FakeModels(error=error)).generate("prompt")


def test_missing_api_key():
    with pytest.raises(ConfigurationError):
        GeminiTextGenerator(api_key=None)


def test_model_client_retries_malformed_output(recording_sleep):
    generator = FakeTextGenerator("I cannot help with that", '```json\n{"amounts": []}\n```')
    client = ModelClient(generator, RetryPolicy(sleep=recording_sleep))

    assert client.get_json("prompt") == {"amounts": []}
    assert generator.prompts == ["prompt", "prompt"]
    assert recording_sleep.delays == [1.0]


def test_model_client_gives_up(recording_sleep):
    generator = FakeTextGenerator("nope", "[1, 2]", SafetyBlockedError())
    client = ModelClient(generator, RetryPolicy(sleep=recording_sleep))

    with pytest.raises(BackendUnavailableError) as exc_info:
        client.get_json("prompt")

    assert exc_info.value.attempts == 3
    assert isinstance(exc_info.value.last_error, SafetyBlockedError)


def test_model_client_rejects_non_object_json(recording_sleep):
    generator = FakeTextGenerator("[1, 2]")
    client = ModelClient(generator, RetryPolicy(max_attempts=1, sleep=recording_sleep))

    with pytest.raises(BackendUnavailableError) as exc_info:
        client.get_json("prompt")

    assert isinstance(exc_info.value.last_error, MalformedBackendResponseError)


def test_create_model_client_without_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    assert create_model_client() is None


def test_create_model_client_when_disabled(tmp_path):
    from config import ConfigurationManager

    settings = tmp_path / "settings.yaml"
    settings.write_text("llm:\n  enabled: false\n", encoding="utf-8")
    ConfigurationManager(str(settings))

    assert create_model_client(api_key="secret") is None


def test_create_model_client_rejects_unknown_provider(tmp_path):
    from config import ConfigurationManager

    settings = tmp_path / "settings.yaml"
    settings.write_text("llm:\n  provider: other\n", encoding="utf-8")
    ConfigurationManager(str(settings))

    with pytest.raises(ConfigurationError):
        create_model_client(api_key="secret")
