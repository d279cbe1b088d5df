"""
Tests for the GitHub rate limit strategy.
"""

from datetime import datetime, timezone

import pytest
from github import RateLimitExceededException

from miners.rate_limit import (
    PrimaryLimitAction,
    RateLimitKind,
    RateLimitStrategy,
    SecondaryLimitAction,
)

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def primary_limit(reset_in: int = 120) -> RateLimitExceededException:
    reset = int(NOW.timestamp()) + reset_in
    return RateLimitExceededException(
        403,
        {"message": "API rate limit exceeded for user ID 1."},
        {"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": str(reset)},
    )


def secondary_limit(retry_after=None) -> RateLimitExceededException:
    headers = {"x-ratelimit-remaining": "4000"}
    if retry_after is not None:
        headers["retry-after"] = str(retry_after)
    return RateLimitExceededException(
        403,
        {"message": "You have exceeded a secondary rate limit."},
        headers,
    )


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def strategy(sleeps):
    return RateLimitStrategy(
        secondary_wait_seconds=60,
        max_secondary_sleep_seconds=100,
        sleep=sleeps.append,
        clock=lambda: NOW,
    )


def test_classify(strategy):
    assert strategy.classify(primary_limit()) is RateLimitKind.PRIMARY
    assert strategy.classify(secondary_limit(30)) is RateLimitKind.SECONDARY
    assert strategy.classify(secondary_limit()) is RateLimitKind.SECONDARY


def test_primary_sleeps_until_reset(strategy, sleeps):
    strategy.handle(primary_limit(reset_in=120))

    assert sleeps == [121]


def test_primary_reset_in_the_past_does_not_sleep_negative(strategy, sleeps):
    strategy.handle(primary_limit(reset_in=-30))

    assert sleeps == [1]


def test_primary_abort_reraises(sleeps):
    strategy = RateLimitStrategy(
        on_primary_limit="abort", sleep=sleeps.append, clock=lambda: NOW
    )

    with pytest.raises(RateLimitExceededException):
        strategy.handle(primary_limit())
    assert sleeps == []


def test_secondary_uses_retry_after(strategy, sleeps):
    strategy.handle(secondary_limit(30))

    assert sleeps == [30]
    assert strategy.total_secondary_sleep == 30


def test_secondary_falls_back_to_configured_wait(strategy, sleeps):
    strategy.handle(secondary_limit())

    assert sleeps == [60]


def test_secondary_sleep_budget_is_enforced(strategy, sleeps):
    strategy.handle(secondary_limit(40))
    strategy.handle(secondary_limit(40))

    with pytest.raises(RateLimitExceededException):
        strategy.handle(secondary_limit(40))
    assert sleeps == [40, 40]
    assert strategy.total_secondary_sleep == 80


def test_secondary_abort_reraises(sleeps):
    strategy = RateLimitStrategy(
        on_secondary_limit=SecondaryLimitAction.ABORT, sleep=sleeps.append
    )

    with pytest.raises(RateLimitExceededException):
        strategy.handle(secondary_limit(10))
    assert sleeps == []


def test_actions_accept_config_strings():
    strategy = RateLimitStrategy(
        on_primary_limit="sleep-until-reset", on_secondary_limit="sleep-total-duration"
    )

    assert strategy.on_primary_limit is PrimaryLimitAction.SLEEP_UNTIL_RESET
    assert strategy.on_secondary_limit is SecondaryLimitAction.SLEEP_TOTAL_DURATION


def test_unknown_action_is_rejected():
    with pytest.raises(ValueError):
        RateLimitStrategy(on_primary_limit="retry-forever")
