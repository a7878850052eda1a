"""Periodic and on-demand refresh of the pull request store.

A refresh cycle fetches every configured repository for one bucket
concurrently, waits for all fetches to settle, then commits the successful
ones and records the failures. At most one cycle per bucket is in flight;
requests and timer ticks that arrive meanwhile are dropped, not queued.
"""

import asyncio
import logging
from collections.abc import Callable, Coroutine, Sequence
from typing import Any

from gitme.gateway.github.abc import PrDataSource
from gitme.gateway.github.errors import (
    FetchError,
    FetchErrorKind,
    ReconciliationInvariantViolation,
    TransientFetchError,
)
from gitme.gateway.github.types import PullRequest, RepositoryConfig, Role
from gitme.gateway.time.abc import Time
from gitme.tui.data.store import PrStore
from gitme.tui.data.types import CycleResult, RepositoryOutcome

logger = logging.getLogger(__name__)

CycleListener = Callable[[CycleResult], None]
Spawner = Callable[[Coroutine[Any, Any, None]], object]


class RefreshScheduler:
    """Drives fetch cycles for each bucket without overlapping them.

    The scheduler never blocks its caller: tick() and request_refresh() only
    start a background task and return. Completion commits into the store and
    then notifies listeners exactly once per cycle.
    """

    def __init__(
        self,
        *,
        store: PrStore,
        data_source: PrDataSource,
        username: str,
        time: Time,
        interval: float,
        fetch_timeout: float | None = None,
        spawn: Spawner | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            store: Store receiving committed snapshots
            data_source: Source of pull requests
            username: GitHub login of the tracked user
            time: Clock used for cycle bookkeeping and commit timestamps
            interval: Seconds between timed cycles of a bucket (0 disables them)
            fetch_timeout: Per-repository fetch timeout in seconds, None for no limit
            spawn: Starts a cycle coroutine in the background. Defaults to
                asyncio.create_task; the app passes its worker runner so
                unexpected errors surface like any other worker failure.
        """
        self._store = store
        self._data_source = data_source
        self._username = username
        self._time = time
        self._interval = interval
        self._fetch_timeout = fetch_timeout
        self._spawn = spawn or self._create_task
        self._listeners: list[CycleListener] = []
        self._in_flight: set[Role] = set()
        self._idle: dict[Role, asyncio.Event] = {}
        self._last_completed: dict[Role, float | None] = {role: None for role in Role}
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def interval(self) -> float:
        return self._interval

    def add_listener(self, listener: CycleListener) -> None:
        """Register a callback invoked after each cycle commits."""
        self._listeners.append(listener)

    def in_flight(self, role: Role) -> bool:
        return role in self._in_flight

    def last_completed(self, role: Role) -> float | None:
        """Monotonic time the last cycle of `role` completed, None if never."""
        return self._last_completed[role]

    def seconds_until_refresh(self, role: Role, now: float) -> float | None:
        """Seconds before tick() would start the next timed cycle of `role`.

        Returns None when timed refresh is disabled or a cycle is running.
        """
        if self._interval <= 0 or role in self._in_flight:
            return None
        last = self._last_completed[role]
        if last is None:
            return 0.0
        return max(0.0, last + self._interval - now)

    def tick(self, now: float) -> list[Role]:
        """Start a cycle for every bucket whose interval has elapsed.

        Buckets with a cycle in flight are skipped; the tick is dropped for
        them rather than queued.

        Args:
            now: Current monotonic time

        Returns:
            Roles for which a cycle was started
        """
        if self._interval <= 0:
            return []
        started: list[Role] = []
        for role in Role:
            if role in self._in_flight:
                continue
            last = self._last_completed[role]
            if last is not None and now - last < self._interval:
                continue
            self._start_cycle(role)
            started.append(role)
        return started

    def request_refresh(self, role: Role) -> bool:
        """Start a cycle for `role` now, ignoring the interval.

        Returns:
            True if a cycle was started, False if one was already in flight
        """
        if role in self._in_flight:
            logger.debug("Refresh of %s ignored, cycle already in flight", role.name)
            return False
        self._start_cycle(role)
        return True

    def refresh_all(self) -> list[Role]:
        """request_refresh() every bucket; returns the roles that started."""
        return [role for role in Role if self.request_refresh(role)]

    async def wait_idle(self) -> None:
        """Wait until no cycle is in flight."""
        while self._in_flight:
            await asyncio.gather(*(self._idle[role].wait() for role in list(self._in_flight)))

    def reconfigure(
        self,
        repositories: Sequence[RepositoryConfig],
        *,
        username: str | None = None,
        data_source: PrDataSource | None = None,
        interval: float | None = None,
    ) -> None:
        """Apply a reloaded configuration.

        Sticky authentication errors are cleared since the credential may have
        changed. Cycles already in flight finish with the old settings.
        """
        self._store.set_repositories(repositories)
        self._store.clear_auth_errors()
        if username is not None:
            self._username = username
        if data_source is not None:
            self._data_source = data_source
        if interval is not None:
            self._interval = interval

    def _create_task(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(coro)
        # Keep a reference so the task is not garbage collected mid-flight
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _start_cycle(self, role: Role) -> None:
        self._in_flight.add(role)
        idle = self._idle.get(role)
        if idle is None:
            idle = self._idle[role] = asyncio.Event()
        idle.clear()
        logger.debug("Starting refresh cycle for %s", role.name)
        self._spawn(self._run_cycle(role, self._time.monotonic()))

    async def _run_cycle(self, role: Role, started_at: float) -> None:
        try:
            outcomes, unexpected = await self._fetch_and_commit(role)
        finally:
            self._in_flight.discard(role)
            self._last_completed[role] = self._time.monotonic()
            self._idle[role].set()

        result = CycleResult(
            role=role,
            started_at=started_at,
            duration=self._time.monotonic() - started_at,
            outcomes=tuple(outcomes),
        )
        logger.debug(
            "Refresh cycle for %s done: %d ok, %d failed",
            role.name,
            len(result.succeeded),
            len(result.failed),
        )
        for listener in self._listeners:
            listener(result)

        if unexpected is not None:
            raise unexpected

    async def _fetch_and_commit(
        self, role: Role
    ) -> tuple[list[RepositoryOutcome], BaseException | None]:
        repositories = self._store.repositories
        results = await asyncio.gather(
            *(self._fetch_one(role, repo) for repo in repositories),
            return_exceptions=True,
        )

        # Everything below runs without suspension, so the whole cycle lands
        # between two frames
        at = self._time.now()
        outcomes: list[RepositoryOutcome] = []
        unexpected: BaseException | None = None
        for repo, result in zip(repositories, results, strict=True):
            repo_id = repo.repo_id
            if isinstance(result, FetchError):
                logger.warning("Fetching %s for %s failed: %s", repo_id, role.name, result)
                self._store.record_failure(role, repo_id, result)
                outcomes.append(RepositoryOutcome(repo_id=repo_id, count=None, error=result))
                continue
            if isinstance(result, BaseException):
                # Not a fetch failure: a bug in the data source. Commit the
                # rest of the cycle first, then let it propagate.
                if unexpected is None:
                    unexpected = result
                continue
            try:
                count = self._store.commit(role, repo_id, result, at=at)
            except ReconciliationInvariantViolation as e:
                error = FetchError(e.reason, kind=FetchErrorKind.INVALID)
                self._store.record_failure(role, repo_id, error)
                outcomes.append(RepositoryOutcome(repo_id=repo_id, count=None, error=error))
                continue
            outcomes.append(RepositoryOutcome(repo_id=repo_id, count=count, error=None))
        return outcomes, unexpected

    async def _fetch_one(self, role: Role, repo: RepositoryConfig) -> list[PullRequest]:
        fetch = self._data_source.fetch(role, repo.repo_id, self._username)
        if self._fetch_timeout is None:
            return await fetch
        try:
            return await asyncio.wait_for(fetch, timeout=self._fetch_timeout)
        except TimeoutError as e:
            raise TransientFetchError(
                f"No response after {self._fetch_timeout:g}s", kind=FetchErrorKind.TIMEOUT
            ) from e
