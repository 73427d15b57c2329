"""
Minimal once-a-day job scheduling on the asyncio event loop.

Only the ``"<minute> <hour> * * *"`` cron form is understood; times are
server-local wall-clock times.
"""
import asyncio
import inspect
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

logger = logging.getLogger('siteserver.jobs.cron')

# Upper bound on a single sleep so clock changes and suspends are noticed
MAX_SLEEP_SECONDS = 60.0


@dataclass(frozen=True)
class DailySchedule:
    hour: int
    minute: int

    def __post_init__(self):
        if not 0 <= self.hour <= 23:
            raise ValueError(f"hour out of range: {self.hour}")
        if not 0 <= self.minute <= 59:
            raise ValueError(f"minute out of range: {self.minute}")

    @classmethod
    def from_cron(cls, expression: str) -> "DailySchedule":
        fields = expression.split()
        if len(fields) != 5 or fields[2:] != ["*", "*", "*"]:
            raise ValueError(f"Only daily 'M H * * *' cron expressions are supported, got {expression!r}")
        minute, hour = fields[0], fields[1]
        if not (minute.isdigit() and hour.isdigit()):
            raise ValueError(f"Minute and hour must be plain numbers, got {expression!r}")
        return cls(hour=int(hour), minute=int(minute))

    def next_run(self, after: datetime) -> datetime:
        """The first fire time strictly later than ``after``."""
        candidate = after.replace(hour=self.hour, minute=self.minute, second=0, microsecond=0)
        if candidate <= after:
            candidate += timedelta(days=1)
        return candidate


class ScheduledJob:
    """
    Runs ``callback`` every time the schedule comes round.

    Each fire is launched without waiting for the previous one; a failing
    callback is logged and not retried.
    """

    def __init__(
        self,
        schedule: DailySchedule,
        callback: Callable[[], Any],
        name: Optional[str] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.schedule = schedule
        self.callback = callback
        self.name = name or getattr(callback, "__name__", repr(callback))
        self.clock = clock
        self._task: Optional[asyncio.Task] = None
        self._running: set[asyncio.Task] = set()

    @property
    def next_run(self) -> datetime:
        return self.schedule.next_run(self.clock())

    async def _invoke(self) -> None:
        try:
            if inspect.iscoroutinefunction(self.callback):
                await self.callback()
            else:
                await asyncio.to_thread(self.callback)
        except Exception as e:
            logger.error(f"Scheduled job {self.name} failed: {e}", exc_info=True)

    def fire(self) -> asyncio.Task:
        logger.info(f"Running scheduled job {self.name}")
        task = asyncio.create_task(self._invoke())
        self._running.add(task)
        task.add_done_callback(self._running.discard)
        return task

    async def _run(self) -> None:
        while True:
            target = self.next_run
            logger.info(f"Scheduled job {self.name} will next run at {target.isoformat()}")
            while (remaining := (target - self.clock()).total_seconds()) > 0:
                await asyncio.sleep(min(remaining, MAX_SLEEP_SECONDS))
            self.fire()

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def cancel(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            logger.info(f"Scheduled job {self.name} cancelled during shutdown")
        self._task = None


class JobScheduler:
    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self.clock = clock
        self.jobs: list[ScheduledJob] = []

    def schedule_job(self, expression: str, callback: Callable[[], Any], name: Optional[str] = None) -> ScheduledJob:
        job = ScheduledJob(DailySchedule.from_cron(expression), callback, name=name, clock=self.clock)
        self.jobs.append(job)
        logger.info(f"Registered job {job.name} with schedule {expression!r}")
        return job

    def start(self) -> None:
        for job in self.jobs:
            job.start()

    async def shutdown(self) -> None:
        for job in self.jobs:
            await job.cancel()
