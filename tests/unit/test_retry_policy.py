"""Tests for RetryPolicy."""

import pytest

from app.services.session import RetryPolicy
from app.utils.exceptions import MemberNotFoundError, TransientIOError


class RecordingSleep:
    """Collects requested delays instead of sleeping."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class FlakyFetch:
    """Fails with the given errors, then returns ``value``."""

    def __init__(self, errors: list[Exception], value: str = "ok") -> None:
        self.errors = list(errors)
        self.value = value
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.value


class TestRetryPolicy:
    """Tests for bounded exponential backoff."""

    def test_default_delays(self) -> None:
        """Defaults wait 1s then 2s."""
        policy = RetryPolicy()

        assert policy.max_attempts == 3
        assert [policy.delay_for(n) for n in (1, 2, 3)] == [1.0, 2.0, 4.0]

    def test_invalid_configuration(self) -> None:
        """Zero attempts or shrinking backoff are rejected."""
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)
        with pytest.raises(ValueError):
            RetryPolicy(multiplier=0.5)
        with pytest.raises(ValueError):
            RetryPolicy().delay_for(0)

    @pytest.mark.asyncio
    async def test_success_first_try(self) -> None:
        """No retry, no sleep."""
        sleep = RecordingSleep()
        fetch = FlakyFetch([])

        result = await RetryPolicy(sleep=sleep).run(fetch)

        assert result == "ok"
        assert fetch.calls == 1
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failures(self) -> None:
        """Two transient failures then success uses all three attempts."""
        sleep = RecordingSleep()
        fetch = FlakyFetch([TransientIOError("down"), TransientIOError("down")])

        result = await RetryPolicy(sleep=sleep).run(fetch)

        assert result == "ok"
        assert fetch.calls == 3
        assert sleep.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self) -> None:
        """The last transient error propagates."""
        sleep = RecordingSleep()
        fetch = FlakyFetch([TransientIOError(str(n)) for n in range(5)])

        with pytest.raises(TransientIOError, match="2"):
            await RetryPolicy(sleep=sleep).run(fetch)

        assert fetch.calls == 3
        assert sleep.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_hard_failure_not_retried(self) -> None:
        """NotFound surfaces immediately."""
        sleep = RecordingSleep()
        fetch = FlakyFetch([MemberNotFoundError(7)])

        with pytest.raises(MemberNotFoundError):
            await RetryPolicy(sleep=sleep).run(fetch)

        assert fetch.calls == 1
        assert sleep.delays == []
