import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

from .cron import DailySchedule, JobScheduler, ScheduledJob

if TYPE_CHECKING:
    from ..service.config import Settings

logger = logging.getLogger('siteserver.jobs')

# Every day at 01:35 server time
SHARE_SCHEDULE = "35 1 * * *"


def init_share_job(
    settings: "Settings",
    share: Optional[Callable[[], Any]],
    scheduler: JobScheduler,
) -> Optional[ScheduledJob]:
    """
    Register the daily social share job. Production only.
    """
    if not settings.is_prod:
        logger.info("Not in production, daily share job not registered")
        return None
    if share is None:
        raise ValueError("A share client is required in production")
    return scheduler.schedule_job(SHARE_SCHEDULE, share, name="share")


__all__ = [
    "DailySchedule",
    "JobScheduler",
    "ScheduledJob",
    "SHARE_SCHEDULE",
    "init_share_job",
]
