"""Shared fixtures and fakes for the amount detection tests."""

from typing import Any, List

import pytest

from config import ConfigurationManager
from src.utils.exceptions import BackendUnavailableError, EmptyResponseError


MEDICAL_BILL_TEXT = """CITY CARE HOSPITAL
All amounts in USD
Invoice No: 48213
Date: 12/05/2023
Phone: 9876543210
Consultation 1000.00
SUB TOTAL 745.00
TAX 9% 157.05
TOTAL 1902.05
Amount DUE 1745.00"""


@pytest.fixture(autouse=True)
def _reset_config():
    # Every test starts from config/settings.yaml
    ConfigurationManager.reset()
    yield
    ConfigurationManager.reset()


class FakeTextGenerator:
    """Returns queued responses in order; queued exceptions are raised."""

    name = "fake"

    def __init__(self, *responses: Any):
        self.responses: List[Any] = list(responses)
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.responses:
            raise EmptyResponseError("No more fake responses")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeModelClient:
    """Stands in for ModelClient.get_json."""

    def __init__(self, *payloads: Any):
        self.payloads: List[Any] = list(payloads)
        self.prompts: List[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    def get_json(self, prompt: str) -> Any:
        self.prompts.append(prompt)
        if not self.payloads:
            raise BackendUnavailableError(3, EmptyResponseError())
        payload = self.payloads.pop(0)
        if isinstance(payload, Exception):
            raise payload
        return payload


class RecordingSleep:
    """Fake clock for retry tests."""

    def __init__(self):
        self.delays: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def medical_bill_text() -> str:
    return MEDICAL_BILL_TEXT


@pytest.fixture
def unavailable_backend() -> FakeModelClient:
    return FakeModelClient(
        BackendUnavailableError(3, EmptyResponseError()),
        BackendUnavailableError(3, EmptyResponseError()),
    )


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
