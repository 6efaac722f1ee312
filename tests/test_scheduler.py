from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from crypto_prediction_bot.app.core.exceptions import MarketDataError, TelegramDeliveryError
from crypto_prediction_bot.app.core.scheduler import (
    PredictionScheduler,
    compute_next_run,
    format_run_time,
    parse_prediction_time,
    to_cron_expression,
)
from crypto_prediction_bot.app.schemas.prediction import PredictionPair


class StubPredictionService:
    def __init__(self, pair=None, error=None):
        self.pair = pair
        self.error = error
        self.calls = 0

    def get_both_predictions(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.pair


class StubTelegramService:
    def __init__(self, fail_error_message=False):
        self.sent_predictions = []
        self.error_messages = []
        self.fail_error_message = fail_error_message

    def send_predictions(self, btc, eth):
        self.sent_predictions.append((btc.crypto, eth.crypto))

    def send_error_message(self, error):
        self.error_messages.append(error)
        if self.fail_error_message:
            raise TelegramDeliveryError("chat unreachable")


@pytest.mark.parametrize("value,expected", [
    ("09:00", (9, 0)),
    ("9:05", (9, 5)),
    ("00:00", (0, 0)),
    ("23:59", (23, 59)),
    (" 18:30 ", (18, 30)),
])
def test_parse_prediction_time_valid(value, expected):
    assert parse_prediction_time(value) == expected


@pytest.mark.parametrize("value", ["24:00", "12:60", "12", "12:5", "ab:cd", "", "12:00:00", "-1:30"])
def test_parse_prediction_time_invalid(value):
    with pytest.raises(ValueError):
        parse_prediction_time(value)


def test_to_cron_expression():
    assert to_cron_expression("09:00") == "0 9 * * *"
    assert to_cron_expression("23:45") == "45 23 * * *"


def test_next_run_later_today():
    now = datetime(2026, 10, 19, 6, 30, tzinfo=timezone.utc)
    next_run = compute_next_run("09:00", "UTC", now)
    assert next_run == datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


def test_next_run_rolls_to_tomorrow_when_passed():
    now = datetime(2026, 10, 19, 9, 15, tzinfo=timezone.utc)
    next_run = compute_next_run("09:00", "UTC", now)
    assert next_run == datetime(2026, 10, 20, 9, 0, tzinfo=timezone.utc)


def test_next_run_exactly_now_rolls_to_tomorrow():
    now = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)
    next_run = compute_next_run("09:00", "UTC", now)
    assert next_run == now + timedelta(days=1)


def test_next_run_respects_timezone():
    # 12:00 UTC is 08:00 in New York (EDT)
    now = datetime(2026, 7, 1, 12, 0, tzinfo=timezone.utc)
    next_run = compute_next_run("09:00", "America/New_York", now)
    assert next_run.tzinfo == ZoneInfo("America/New_York")
    assert (next_run.hour, next_run.minute) == (9, 0)
    assert next_run.date() == datetime(2026, 7, 1).date()
    assert next_run - now == timedelta(hours=1)


def test_next_run_naive_now_is_utc():
    naive = datetime(2026, 10, 19, 8, 0)
    aware = naive.replace(tzinfo=timezone.utc)
    assert compute_next_run("10:00", "Asia/Tokyo", naive) == compute_next_run("10:00", "Asia/Tokyo", aware)


@pytest.mark.parametrize("tz_name", ["UTC", "Asia/Tokyo", "Asia/Kolkata"])
@pytest.mark.parametrize("now", [
    datetime(2026, 10, 19, 0, 0, tzinfo=timezone.utc),
    datetime(2026, 10, 19, 9, 0, 30, tzinfo=timezone.utc),
    datetime(2026, 12, 31, 23, 59, 59, tzinfo=timezone.utc),
    datetime(2028, 2, 28, 15, 7, tzinfo=timezone.utc),
])
def test_next_run_always_within_next_24_hours(tz_name, now):
    for hour in range(24):
        for minute in (0, 1, 7, 30, 59):
            next_run = compute_next_run(f"{hour:02d}:{minute:02d}", tz_name, now)
            delta = next_run - now
            assert timedelta(0) < delta <= timedelta(hours=24)
            local = next_run.astimezone(ZoneInfo(tz_name))
            assert (local.hour, local.minute) == (hour, minute)


def test_next_run_across_dst_fall_back_is_one_wall_clock_day():
    new_york = ZoneInfo("America/New_York")
    # Clocks go back on 2026-11-01, so the next 09:00 is 25 hours away
    now = datetime(2026, 10, 31, 9, 0, 30, tzinfo=new_york)

    next_run = compute_next_run("09:00", "America/New_York", now)

    assert next_run == datetime(2026, 11, 1, 9, 0, tzinfo=new_york)
    assert next_run.utcoffset() == timedelta(hours=-5)
    elapsed = next_run.timestamp() - now.timestamp()
    assert elapsed == timedelta(days=1, minutes=59, seconds=30).total_seconds()


def test_format_run_time_does_not_pad_day():
    value = datetime(2026, 10, 5, 9, 0, tzinfo=ZoneInfo("UTC"))
    assert format_run_time(value) == "Monday, October 5, 2026 at 09:00 AM UTC"


def test_run_prediction_task_sends_both_predictions(btc_prediction, eth_prediction):
    pair = PredictionPair(btc=btc_prediction, eth=eth_prediction)
    telegram = StubTelegramService()
    scheduler = PredictionScheduler(StubPredictionService(pair=pair), telegram, "09:00", "UTC")

    assert scheduler.run_prediction_task() is True
    assert telegram.sent_predictions == [("BTC", "ETH")]
    assert telegram.error_messages == []

    status = scheduler.get_status()
    assert status.run_count == 1
    assert status.error_count == 0
    assert status.last_success is not None
    assert status.last_error is None


def test_run_prediction_task_failure_sends_error_only():
    telegram = StubTelegramService()
    failing = StubPredictionService(error=MarketDataError("coingecko down"))
    scheduler = PredictionScheduler(failing, telegram, "09:00", "UTC")

    assert scheduler.run_prediction_task() is False
    assert telegram.sent_predictions == []
    assert telegram.error_messages == ["coingecko down"]

    status = scheduler.get_status()
    assert status.error_count == 1
    assert status.last_error == "coingecko down"


def test_error_notification_failure_is_swallowed():
    telegram = StubTelegramService(fail_error_message=True)
    failing = StubPredictionService(error=RuntimeError("gemini exploded"))
    scheduler = PredictionScheduler(failing, telegram, "09:00", "UTC")

    assert scheduler.run_manual_prediction() is False
    assert telegram.error_messages == ["gemini exploded"]


def test_status_reports_schedule():
    scheduler = PredictionScheduler(StubPredictionService(), StubTelegramService(), "07:30", "Asia/Tokyo")
    now = datetime(2026, 10, 19, 0, 0, tzinfo=timezone.utc)  # 09:00 in Tokyo

    status = scheduler.get_status(now)

    assert status.is_running is False
    assert status.cron_expression == "30 7 * * *"
    assert status.next_run == "2026-10-20T07:30:00+09:00"
    assert "October 20, 2026" in status.next_run_display


def test_invalid_schedule_rejected_early():
    with pytest.raises(ValueError):
        PredictionScheduler(StubPredictionService(), StubTelegramService(), "25:00", "UTC")


def test_start_and_stop_are_idempotent():
    scheduler = PredictionScheduler(StubPredictionService(), StubTelegramService(), "09:00", "UTC")
    try:
        scheduler.start()
        scheduler.start()
        assert scheduler.is_running is True
        assert scheduler._scheduler.get_job("daily_prediction") is not None
        assert scheduler._scheduler.get_job("status_heartbeat") is not None
    finally:
        scheduler.stop()
    assert scheduler.is_running is False
    scheduler.stop()
    assert scheduler.is_running is False
