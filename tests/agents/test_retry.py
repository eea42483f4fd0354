import pytest

from agents.retry import BackoffRetry, BackoffStrategy, NoRetry


class Flaky:
    def __init__(self, failures: int, error: Exception = ConnectionError("flaky")):
        self.failures = failures
        self.error = error
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return "ok"


def test_no_retry_calls_once():
    fn = Flaky(failures=1)

    with pytest.raises(ConnectionError):
        NoRetry().call(fn)
    assert fn.calls == 1


@pytest.mark.parametrize(
    "strategy, expected",
    [
        (BackoffStrategy.EXPONENTIAL, [1.0, 2.0, 4.0]),
        (BackoffStrategy.LINEAR, [1.0, 2.0, 3.0]),
        (BackoffStrategy.CONSTANT, [1.0, 1.0, 1.0]),
    ],
)
def test_backoff_delays(strategy, expected):
    sleeps = []
    fn = Flaky(failures=3)

    result = BackoffRetry(max_retries=3, strategy=strategy, sleep=sleeps.append).call(fn)

    assert result == "ok"
    assert fn.calls == 4
    assert sleeps == pytest.approx(expected)


def test_base_delay_scales_waits():
    sleeps = []

    BackoffRetry(max_retries=2, base_delay=0.5, sleep=sleeps.append).call(Flaky(failures=2))

    assert sleeps == pytest.approx([0.5, 1.0])


def test_last_error_is_reraised_when_retries_exhausted():
    fn = Flaky(failures=10)

    with pytest.raises(ConnectionError, match="flaky"):
        BackoffRetry(max_retries=2, sleep=lambda _: None).call(fn)
    assert fn.calls == 3


def test_only_listed_errors_are_retried():
    fn = Flaky(failures=1, error=KeyError("nope"))

    with pytest.raises(KeyError):
        BackoffRetry(max_retries=3, retry_on=(ConnectionError,), sleep=lambda _: None).call(fn)
    assert fn.calls == 1


def test_strategy_accepts_plain_strings():
    assert BackoffRetry(strategy="linear").strategy == BackoffStrategy.LINEAR


def test_negative_retries_rejected():
    with pytest.raises(ValueError):
        BackoffRetry(max_retries=-1)
