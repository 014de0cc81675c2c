"""
Concurrent role creation queue.

A fixed pool of asyncio workers drains a shared queue of role tasks. Each task
is claimed by exactly one worker, skipped when a role with the same name is
already in the snapshot, retried in place while Discord rate limits it, and
abandoned (logged, not raised) on any other failure. ``run()`` never fails
because of a single task; callers read the outcome from ``QueueResult``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..constants import (
    DEFAULT_CREATE_PACING_SECONDS,
    DEFAULT_QUEUE_CONCURRENCY,
    DEFAULT_RATE_LIMIT_WAIT_SECONDS,
)
from .rate_limits import rate_limit_delay

log = logging.getLogger("epic_roles.role_queue")

ExistsFn = Callable[[str], Optional[Any]]
CreateFn = Callable[["RoleTask"], Awaitable[Any]]
SleepFn = Callable[[float], Awaitable[Any]]


class TaskState(str, Enum):
    PENDING = "pending"
    RETRYING = "retrying"
    DONE = "done"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class RoleTask:
    name: str
    color: str


@dataclass
class QueueResult:
    """Outcome of one queue run. ``len()`` counts roles that now exist."""

    roles: List[Any] = field(default_factory=list)
    created: List[str] = field(default_factory=list)
    existing: List[str] = field(default_factory=list)
    abandoned: Dict[str, str] = field(default_factory=dict)
    states: Dict[str, TaskState] = field(default_factory=dict)
    attempts: Dict[str, int] = field(default_factory=dict)
    rate_limit_waits: int = 0

    def __len__(self) -> int:
        return len(self.roles)


def dedupe_tasks(tasks: Iterable[RoleTask]) -> List[RoleTask]:
    seen: set[str] = set()
    unique: List[RoleTask] = []
    for task in tasks:
        if task.name in seen:
            log.warning(f"Dropping duplicate role task {task.name!r}")
            continue
        seen.add(task.name)
        unique.append(task)
    return unique


class RoleCreationQueue:
    """Bounded-concurrency creator with retry on rate limits."""

    def __init__(
        self,
        tasks: Iterable[RoleTask],
        *,
        exists: ExistsFn,
        create: CreateFn,
        concurrency: int = DEFAULT_QUEUE_CONCURRENCY,
        max_retries: Optional[int] = None,
        default_wait: float = DEFAULT_RATE_LIMIT_WAIT_SECONDS,
        pacing: float = DEFAULT_CREATE_PACING_SECONDS,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        if max_retries is not None and max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {max_retries}")

        self.tasks = dedupe_tasks(tasks)
        self.concurrency = concurrency
        self.max_retries = max_retries
        self.default_wait = default_wait
        self.pacing = pacing
        self._exists = exists
        self._create = create
        self._sleep = sleep

    async def run(self) -> QueueResult:
        result = QueueResult()
        queue: asyncio.Queue[RoleTask] = asyncio.Queue()
        for task in self.tasks:
            queue.put_nowait(task)
            result.states[task.name] = TaskState.PENDING
            result.attempts[task.name] = 0

        log.info(f"Processing {len(self.tasks)} role tasks with {self.concurrency} workers")
        workers = [
            asyncio.create_task(self._worker(i, queue, result), name=f"role-queue-{i}")
            for i in range(self.concurrency)
        ]
        await asyncio.gather(*workers)

        log.info(
            f"Role queue finished: created={len(result.created)} existing={len(result.existing)} "
            f"abandoned={len(result.abandoned)} rate_limit_waits={result.rate_limit_waits}"
        )
        return result

    async def _worker(self, worker_id: int, queue: asyncio.Queue[RoleTask], result: QueueResult) -> None:
        while True:
            # get_nowait has no suspension point, so a task is claimed by one worker only.
            try:
                task = queue.get_nowait()
            except asyncio.QueueEmpty:
                log.debug(f"Worker {worker_id}: queue empty")
                return
            await self._process(task, result)
            queue.task_done()

    async def _process(self, task: RoleTask, result: QueueResult) -> None:
        found = self._exists(task.name)
        if found is not None:
            result.roles.append(found)
            result.existing.append(task.name)
            result.states[task.name] = TaskState.DONE
            log.debug(f"Role {task.name!r} already exists; skipping")
            return

        retries = 0
        while True:
            result.attempts[task.name] += 1
            try:
                role = await self._create(task)
            except Exception as exc:
                delay = rate_limit_delay(exc, self.default_wait)
                if delay is None:
                    log.error(f"Failed to create role {task.name!r}: {exc}")
                    self._abandon(task, result, f"{type(exc).__name__}: {exc}")
                    return
                if self.max_retries is not None and retries >= self.max_retries:
                    log.error(f"Giving up on role {task.name!r} after {retries} rate-limit retries")
                    self._abandon(task, result, f"rate limited {retries + 1} times")
                    return

                retries += 1
                result.rate_limit_waits += 1
                result.states[task.name] = TaskState.RETRYING
                log.warning(f"Rate limited on {task.name!r}. Waiting {delay:.2f}s...")
                await self._sleep(delay)
                continue

            result.roles.append(role)
            result.created.append(task.name)
            result.states[task.name] = TaskState.DONE
            log.info(f"Created role: {task.name}")
            if self.pacing > 0:
                await self._sleep(self.pacing)
            return

    @staticmethod
    def _abandon(task: RoleTask, result: QueueResult, reason: str) -> None:
        result.abandoned[task.name] = reason
        result.states[task.name] = TaskState.ABANDONED
