import pytest

from src.model_inference.retry import RetryPolicy
from src.utils.exceptions import BackendUnavailableError, EmptyResponseError


class FlakyCall:
    def __init__(self, failures, result="ok"):
        self.failures = list(failures)
        self.result = result
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.result


def test_succeeds_after_transient_failures(recording_sleep):
    call = FlakyCall([EmptyResponseError(), EmptyResponseError()])
    policy = RetryPolicy(max_attempts=3, base_delay=1.0, sleep=recording_sleep)

    assert policy.call(call) == "ok"
    assert call.calls == 3
    assert recording_sleep.delays == [1.0, 2.0]


def test_exhausted_attempts_raise_unavailable(recording_sleep):
    last = EmptyResponseError("third")
    call = FlakyCall([EmptyResponseError(), EmptyResponseError(), last])
    policy = RetryPolicy(max_attempts=3, base_delay=1.0, sleep=recording_sleep)

    with pytest.raises(BackendUnavailableError) as exc_info:
        policy.call(call)

    assert exc_info.value.attempts == 3
    assert exc_info.value.last_error is last
    # No wait after the final attempt
    assert recording_sleep.delays == [1.0, 2.0]


def test_other_errors_are_not_retried(recording_sleep):
    call = FlakyCall([KeyError("boom")])
    policy = RetryPolicy(sleep=recording_sleep)

    with pytest.raises(KeyError):
        policy.call(call)

    assert call.calls == 1
    assert recording_sleep.delays == []


def test_single_attempt_never_sleeps(recording_sleep):
    policy = RetryPolicy(max_attempts=1, sleep=recording_sleep)

    with pytest.raises(BackendUnavailableError):
        policy.call(FlakyCall([EmptyResponseError()]))

    assert recording_sleep.delays == []


def test_invalid_attempt_count():
    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0)


def test_from_config_with_overrides(recording_sleep):
    policy = RetryPolicy.from_config(base_delay=0.5, sleep=recording_sleep)

    assert policy.max_attempts == 3
    assert [policy.delay_for(n) for n in (1, 2)] == [0.5, 1.0]
