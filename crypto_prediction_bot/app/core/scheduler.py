"""Daily prediction scheduler"""
from datetime import datetime, date, timedelta, timezone as dt_timezone
from typing import Optional, Tuple, TYPE_CHECKING
from zoneinfo import ZoneInfo

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from .config import settings
from .logging_config import get_logger
from ..schemas.prediction import SchedulerStatus

if TYPE_CHECKING:
    from ..services.prediction_service import PredictionService
    from ..services.telegram_service import TelegramService

logger = get_logger(__name__)

PREDICTION_JOB_ID = "daily_prediction"
HEARTBEAT_JOB_ID = "status_heartbeat"


def parse_prediction_time(value: str) -> Tuple[int, int]:
    """
    Parse a time of day in H:MM or HH:MM (24h) format

    Raises:
        ValueError: If the value is not a valid time of day
    """
    parts = str(value).strip().split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts) or len(parts[1]) != 2:
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Invalid time {value!r}, expected 00:00-23:59")
    return hour, minute


def to_cron_expression(value: str) -> str:
    """'09:00' -> '0 9 * * *'"""
    hour, minute = parse_prediction_time(value)
    return f"{minute} {hour} * * *"


def _at_local_time(day: date, hour: int, minute: int, tz: ZoneInfo) -> datetime:
    wall = datetime(day.year, day.month, day.day, hour, minute, tzinfo=tz)
    # Round-trip through UTC moves times inside a DST gap to a real instant
    return datetime.fromtimestamp(wall.timestamp(), tz)


def compute_next_run(
    prediction_time: str,
    timezone: str,
    now: Optional[datetime] = None
) -> datetime:
    """
    Next occurrence of prediction_time in timezone, strictly after now

    Args:
        prediction_time: Time of day, HH:MM
        timezone: IANA timezone name
        now: Reference instant; naive values are taken as UTC

    Returns:
        Timezone-aware datetime in the given timezone
    """
    hour, minute = parse_prediction_time(prediction_time)
    tz = ZoneInfo(timezone)

    if now is None:
        now = datetime.now(tz)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=dt_timezone.utc)

    local_today = now.astimezone(tz).date()
    candidate = _at_local_time(local_today, hour, minute, tz)
    if candidate.timestamp() <= now.timestamp():
        candidate = _at_local_time(local_today + timedelta(days=1), hour, minute, tz)
    return candidate


def format_run_time(value: datetime) -> str:
    """Monday, October 5, 2026 at 09:00 AM UTC"""
    return f"{value:%A}, {value:%B} {value.day}, {value.year} at {value:%I:%M %p %Z}"


class PredictionScheduler:
    """Runs the prediction task once a day at the configured local time"""

    def __init__(
        self,
        prediction_service: "PredictionService",
        telegram_service: "TelegramService",
        prediction_time: Optional[str] = None,
        timezone: Optional[str] = None,
        status_log_interval: Optional[int] = None
    ):
        self.prediction_service = prediction_service
        self.telegram_service = telegram_service
        self.prediction_time = prediction_time or settings.prediction_time
        self.timezone = timezone or settings.timezone
        self.status_log_interval = status_log_interval or settings.status_log_interval

        # Fail early on bad values
        parse_prediction_time(self.prediction_time)
        ZoneInfo(self.timezone)

        self._scheduler: Optional[BackgroundScheduler] = None
        self.is_running = False

        self._last_run: Optional[str] = None
        self._last_success: Optional[str] = None
        self._last_error: Optional[str] = None
        self._run_count = 0
        self._error_count = 0

    def start(self) -> None:
        """Register the daily trigger and start the background scheduler"""
        if self.is_running:
            logger.info("Scheduler is already running")
            return

        hour, minute = parse_prediction_time(self.prediction_time)
        logger.info(
            f"Starting prediction scheduler for {self.prediction_time} {self.timezone}")
        logger.info(f"Cron expression: {to_cron_expression(self.prediction_time)}")

        scheduler = BackgroundScheduler(timezone=self.timezone)
        scheduler.add_job(
            self._scheduled_run,
            CronTrigger(hour=hour, minute=minute, timezone=self.timezone),
            id=PREDICTION_JOB_ID,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=3600,
        )
        scheduler.add_job(
            self._log_heartbeat,
            IntervalTrigger(seconds=self.status_log_interval, timezone=self.timezone),
            id=HEARTBEAT_JOB_ID,
        )
        scheduler.start()

        self._scheduler = scheduler
        self.is_running = True
        logger.info("✅ Prediction scheduler started successfully!")
        logger.info(
            f"📅 Daily predictions will be sent at {self.prediction_time} {self.timezone}")

    def stop(self) -> None:
        """Stop the background scheduler"""
        if not self.is_running:
            logger.info("Scheduler is not running")
            return

        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
        self.is_running = False
        logger.info("⏹️ Prediction scheduler stopped")

    def _scheduled_run(self) -> None:
        logger.info("Running scheduled prediction task...")
        self.run_prediction_task()

    def _log_heartbeat(self) -> None:
        logger.info(f"⏰ Bot running... Next prediction: {self.get_status().next_run_display}")

    def run_prediction_task(self) -> bool:
        """
        Generate both predictions and send them

        Errors are logged and reported to the chat on a best-effort basis.

        Returns:
            True if both messages were sent
        """
        self._run_count += 1
        self._last_run = datetime.now(dt_timezone.utc).isoformat()

        try:
            logger.info("🔄 Generating predictions...")
            predictions = self.prediction_service.get_both_predictions()

            logger.info("✅ Predictions generated successfully")
            logger.info("📤 Sending predictions to Telegram...")
            self.telegram_service.send_predictions(predictions.btc, predictions.eth)
        except Exception as e:
            logger.error(f"❌ Error in prediction task: {e}", exc_info=True)
            self._error_count += 1
            self._last_error = str(e)

            try:
                self.telegram_service.send_error_message(str(e))
            except Exception as notify_error:
                logger.error(f"❌ Failed to send error notification: {notify_error}")
            return False

        self._last_success = datetime.now(dt_timezone.utc).isoformat()
        self._last_error = None
        logger.info("✅ Predictions sent successfully!")
        return True

    def run_manual_prediction(self) -> bool:
        logger.info("🚀 Running manual prediction...")
        return self.run_prediction_task()

    def get_status(self, now: Optional[datetime] = None) -> SchedulerStatus:
        next_run = compute_next_run(self.prediction_time, self.timezone, now)
        return SchedulerStatus(
            is_running=self.is_running,
            prediction_time=self.prediction_time,
            timezone=self.timezone,
            cron_expression=to_cron_expression(self.prediction_time),
            next_run=next_run.isoformat(),
            next_run_display=format_run_time(next_run),
            last_run=self._last_run,
            last_success=self._last_success,
            last_error=self._last_error,
            run_count=self._run_count,
            error_count=self._error_count,
        )
