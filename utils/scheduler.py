import datetime
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from keyboards.builders import get_quiz_keyboard
from services.exercise_service import ExerciseService
from utils.error_notifier import schedule_ops_error_notification
from utils.ops_logging import log_structured

SCHEDULER_JOB_ID_BROADCAST = "broadcast_exercise"

# Ticks are allowed to overlap when a broadcast outlives the interval.
_MAX_CONCURRENT_TICKS = 100


class BroadcastScheduler:
    """
    Posts a freshly generated exercise to the broadcast chat every interval.

    Stopped -> start() -> Running -> stop() -> Stopped. stop() never waits for
    an in-flight broadcast.
    """

    def __init__(
        self,
        bot,
        exercise_service: ExerciseService,
        chat_id: int,
        interval_minutes: float | None = None,
        interval: datetime.timedelta | None = None,
    ):
        if interval is None:
            interval = datetime.timedelta(minutes=interval_minutes or 0)
        if interval.total_seconds() <= 0:
            raise ValueError("Broadcast interval must be positive")
        self.bot = bot
        self.exercise_service = exercise_service
        self.chat_id = chat_id
        self.interval = interval
        self.ticks_attempted = 0
        self._scheduler: AsyncIOScheduler | None = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None

    def start(self):
        if self._scheduler is not None:
            raise RuntimeError("Broadcast scheduler is already running")
        scheduler = AsyncIOScheduler()
        scheduler.add_job(
            self.tick,
            IntervalTrigger(seconds=self.interval.total_seconds()),
            id=SCHEDULER_JOB_ID_BROADCAST,
            replace_existing=True,
            coalesce=False,
            max_instances=_MAX_CONCURRENT_TICKS,
            misfire_grace_time=None,
        )
        scheduler.start()
        self._scheduler = scheduler
        logging.info("Scheduler started (interval: %s, chat: %s)", self.interval, self.chat_id)

    def stop(self):
        if self._scheduler is None:
            raise RuntimeError("Broadcast scheduler is not running")
        scheduler, self._scheduler = self._scheduler, None
        scheduler.shutdown(wait=False)
        logging.info("Scheduler stopped")

    def health(self) -> dict:
        info = {
            "started": self.running,
            "interval_seconds": int(self.interval.total_seconds()),
            "next_run_time": None,
            "ticks_attempted": self.ticks_attempted,
        }
        if self._scheduler is None:
            return info
        job = self._scheduler.get_job(SCHEDULER_JOB_ID_BROADCAST)
        if job and job.next_run_time:
            info["next_run_time"] = job.next_run_time.isoformat()
        return info

    async def tick(self) -> bool:
        """Generates, stores and posts one exercise. Failures end this tick only."""
        self.ticks_attempted += 1
        logging.info("Posting scheduled quiz...")
        try:
            issued = await self.exercise_service.issue_scheduled()
            await self.bot.send_message(
                self.chat_id,
                issued.card.render(),
                reply_markup=get_quiz_keyboard(),
                parse_mode="HTML",
            )
        except Exception as exc:
            logging.error(f"Scheduled broadcast failed: {exc}")
            schedule_ops_error_notification(self.bot, {
                "where_ctx": "broadcast_tick",
                "error_type": type(exc).__name__,
                "message_short": str(exc),
            })
            return False

        log_structured("broadcast_posted", exercise_id=issued.exercise_id, chat_id=self.chat_id)
        return True
