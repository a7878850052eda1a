"""Tests for RefreshScheduler."""

import asyncio
from collections.abc import Coroutine
from typing import Any

import pytest

from gitme.gateway.github.errors import (
    AuthError,
    FetchErrorKind,
    TransientFetchError,
)
from gitme.gateway.github.fake import FakePrDataSource, make_pull_request
from gitme.gateway.github.types import Role
from gitme.gateway.time.fake import FakeTime
from gitme.tui.data.scheduler import RefreshScheduler
from gitme.tui.data.store import PrStore
from gitme.tui.data.types import CycleResult
from tests.fakes.config import make_repository, repo_id

REPO_A = repo_id("acme/a")
REPO_B = repo_id("acme/b")


def _setup(
    source: FakePrDataSource | None = None,
    *,
    interval: float = 30.0,
    fetch_timeout: float | None = None,
    spawn: Any = None,
) -> tuple[RefreshScheduler, PrStore, FakePrDataSource, FakeTime]:
    store = PrStore([make_repository("acme/a"), make_repository("acme/b")])
    data_source = source or FakePrDataSource()
    time = FakeTime()
    scheduler = RefreshScheduler(
        store=store,
        data_source=data_source,
        username="octocat",
        time=time,
        interval=interval,
        fetch_timeout=fetch_timeout,
        spawn=spawn,
    )
    return scheduler, store, data_source, time


class TestRequestRefresh:
    """Tests for on-demand refresh."""

    @pytest.mark.asyncio
    async def test_refresh_fetches_every_repository(self) -> None:
        """A cycle fetches each configured repository for its role."""
        source = FakePrDataSource(
            {(Role.AUTHORED, REPO_A): [make_pull_request(1, repository=REPO_A)]}
        )
        scheduler, store, source, _ = _setup(source)

        assert scheduler.request_refresh(Role.AUTHORED)
        await scheduler.wait_idle()

        assert source.fetch_calls == [
            (Role.AUTHORED, REPO_A, "octocat"),
            (Role.AUTHORED, REPO_B, "octocat"),
        ]
        assert [pr.number for pr in store.snapshot(Role.AUTHORED, REPO_A)] == [1]
        assert store.status(Role.AUTHORED, REPO_B).loaded

    @pytest.mark.asyncio
    async def test_two_rapid_requests_fetch_once(self) -> None:
        """A request while a cycle is in flight is a no-op."""
        scheduler, _, source, _ = _setup()
        source.block()

        assert scheduler.request_refresh(Role.REVIEW_REQUESTED)
        assert not scheduler.request_refresh(Role.REVIEW_REQUESTED)
        await asyncio.sleep(0)
        source.release()
        await scheduler.wait_idle()

        assert source.fetch_count == 2

    @pytest.mark.asyncio
    async def test_in_flight_is_per_role(self) -> None:
        """Each bucket has its own cycle."""
        scheduler, _, source, _ = _setup()
        source.block()

        started = scheduler.refresh_all()

        assert started == [Role.REVIEW_REQUESTED, Role.AUTHORED]
        assert scheduler.in_flight(Role.REVIEW_REQUESTED)
        assert scheduler.in_flight(Role.AUTHORED)
        source.release()
        await scheduler.wait_idle()
        assert not scheduler.in_flight(Role.AUTHORED)

    @pytest.mark.asyncio
    async def test_listener_called_once_per_cycle(self) -> None:
        """Listeners get one CycleResult per completed cycle."""
        scheduler, _, _, _ = _setup()
        results: list[CycleResult] = []
        scheduler.add_listener(results.append)

        scheduler.request_refresh(Role.AUTHORED)
        await scheduler.wait_idle()

        assert len(results) == 1
        assert results[0].role == Role.AUTHORED
        assert [o.repo_id for o in results[0].succeeded] == [REPO_A, REPO_B]


class TestTick:
    """Tests for timed refresh."""

    @pytest.mark.asyncio
    async def test_first_tick_starts_both_buckets(self) -> None:
        """Buckets never refreshed are due immediately."""
        scheduler, _, _, time = _setup(interval=30)

        started = scheduler.tick(time.monotonic())
        await scheduler.wait_idle()

        assert started == [Role.REVIEW_REQUESTED, Role.AUTHORED]

    @pytest.mark.asyncio
    async def test_tick_waits_for_interval(self) -> None:
        """No cycle starts until the interval has elapsed since the last one."""
        scheduler, _, source, time = _setup(interval=30)
        scheduler.refresh_all()
        await scheduler.wait_idle()

        time.advance(29)
        assert scheduler.tick(time.monotonic()) == []

        time.advance(1)
        assert scheduler.tick(time.monotonic()) == [Role.REVIEW_REQUESTED, Role.AUTHORED]
        await scheduler.wait_idle()
        assert source.fetch_count == 8

    @pytest.mark.asyncio
    async def test_tick_during_cycle_is_dropped(self) -> None:
        """A due tick is skipped for a bucket whose cycle is still running."""
        scheduler, _, source, time = _setup(interval=30)
        source.block()
        scheduler.request_refresh(Role.AUTHORED)

        started = scheduler.tick(time.monotonic())

        assert started == [Role.REVIEW_REQUESTED]
        source.release()
        await scheduler.wait_idle()

    def test_zero_interval_disables_ticks(self) -> None:
        """An interval of 0 turns timed refresh off."""
        scheduler, _, _, time = _setup(interval=0)

        assert scheduler.tick(time.monotonic()) == []
        assert scheduler.seconds_until_refresh(Role.AUTHORED, time.monotonic()) is None

    @pytest.mark.asyncio
    async def test_seconds_until_refresh_counts_down(self) -> None:
        """The countdown is measured from the end of the last cycle."""
        scheduler, _, _, time = _setup(interval=30)
        assert scheduler.seconds_until_refresh(Role.AUTHORED, time.monotonic()) == 0.0

        scheduler.request_refresh(Role.AUTHORED)
        await scheduler.wait_idle()
        time.advance(10)

        assert scheduler.seconds_until_refresh(Role.AUTHORED, time.monotonic()) == 20.0


class TestFailures:
    """Tests for per-repository failure isolation."""

    @pytest.mark.asyncio
    async def test_failed_repository_keeps_previous_snapshot(self) -> None:
        """B failing while A succeeds commits A and keeps B's old data."""
        source = FakePrDataSource(
            {
                (Role.AUTHORED, REPO_A): [make_pull_request(1, repository=REPO_A)],
                (Role.AUTHORED, REPO_B): [make_pull_request(7, repository=REPO_B)],
            }
        )
        scheduler, store, source, _ = _setup(source)
        scheduler.request_refresh(Role.AUTHORED)
        await scheduler.wait_idle()

        source.set_pull_requests(Role.AUTHORED, REPO_A, [make_pull_request(2, repository=REPO_A)])
        source.set_error(Role.AUTHORED, REPO_B, TransientFetchError("connection reset"))
        scheduler.request_refresh(Role.AUTHORED)
        await scheduler.wait_idle()

        assert [pr.number for pr in store.snapshot(Role.AUTHORED, REPO_A)] == [2]
        assert [pr.number for pr in store.snapshot(Role.AUTHORED, REPO_B)] == [7]
        assert store.status(Role.AUTHORED, REPO_B).stale
        assert not store.status(Role.AUTHORED, REPO_A).stale

    @pytest.mark.asyncio
    async def test_rejected_commit_is_recorded_as_invalid_data(self) -> None:
        """A snapshot violating store invariants becomes a per-repository error."""
        duplicate = [make_pull_request(1, repository=REPO_A), make_pull_request(1, repository=REPO_A)]
        source = FakePrDataSource({(Role.AUTHORED, REPO_A): duplicate})
        scheduler, store, _, _ = _setup(source)

        scheduler.request_refresh(Role.AUTHORED)
        await scheduler.wait_idle()

        error = store.status(Role.AUTHORED, REPO_A).error
        assert error is not None
        assert error.kind == FetchErrorKind.INVALID
        assert store.snapshot(Role.AUTHORED, REPO_A) == ()

    @pytest.mark.asyncio
    async def test_fetch_timeout_becomes_transient_error(self) -> None:
        """A fetch exceeding fetch_timeout is recorded as a timeout."""
        scheduler, store, source, _ = _setup(fetch_timeout=0.01)
        source.block()

        scheduler.request_refresh(Role.AUTHORED)
        await scheduler.wait_idle()
        source.release()

        error = store.status(Role.AUTHORED, REPO_A).error
        assert isinstance(error, TransientFetchError)
        assert error.kind == FetchErrorKind.TIMEOUT

    @pytest.mark.asyncio
    async def test_unexpected_error_propagates_after_commit(self) -> None:
        """Non-fetch errors are bugs: they propagate once the rest is committed."""
        spawned: list[Coroutine[Any, Any, None]] = []
        source = FakePrDataSource(
            {(Role.AUTHORED, REPO_A): [make_pull_request(1, repository=REPO_A)]},
            errors={(Role.AUTHORED, REPO_B): RuntimeError("bug")},  # type: ignore[dict-item]
        )
        scheduler, store, _, _ = _setup(source, spawn=spawned.append)

        scheduler.request_refresh(Role.AUTHORED)
        with pytest.raises(RuntimeError, match="bug"):
            await spawned[0]

        assert [pr.number for pr in store.snapshot(Role.AUTHORED, REPO_A)] == [1]
        assert not scheduler.in_flight(Role.AUTHORED)


class TestReconfigure:
    """Tests for applying a reloaded configuration."""

    @pytest.mark.asyncio
    async def test_reconfigure_clears_auth_error_and_switches_user(self) -> None:
        """Sticky auth errors are cleared and later cycles use the new settings."""
        source = FakePrDataSource(errors={(Role.AUTHORED, REPO_A): AuthError("Bad credentials")})
        scheduler, store, _, _ = _setup(source)
        scheduler.request_refresh(Role.AUTHORED)
        await scheduler.wait_idle()
        assert store.auth_error(Role.AUTHORED) is not None

        new_source = FakePrDataSource()
        scheduler.reconfigure(
            [make_repository("acme/c")], username="hubot", data_source=new_source
        )
        scheduler.request_refresh(Role.AUTHORED)
        await scheduler.wait_idle()

        assert store.auth_error(Role.AUTHORED) is None
        assert new_source.fetch_calls == [(Role.AUTHORED, repo_id("acme/c"), "hubot")]
