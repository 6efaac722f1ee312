"""Telegram delivery service (Bot API sendMessage)"""
import logging
import time
from datetime import datetime
from typing import Callable, Optional
from zoneinfo import ZoneInfo

import requests

from ..core.config import settings
from ..core.exceptions import TelegramDeliveryError
from ..schemas.prediction import PricePrediction
from ..utils.formatting import (
    SHUTDOWN_MESSAGE,
    format_error_message,
    format_prediction_message,
    format_startup_message,
    strip_markdown,
)

logger = logging.getLogger(__name__)


class TelegramService:
    """Sends bot messages to a single chat"""

    def __init__(
        self,
        bot_token: Optional[str] = None,
        chat_id: Optional[str] = None,
        api_base: Optional[str] = None,
        timeout: Optional[int] = None,
        message_delay: Optional[float] = None,
        timezone: Optional[str] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.bot_token = bot_token or settings.telegram_bot_token
        self.chat_id = chat_id or settings.telegram_chat_id
        self.api_base = (api_base or settings.telegram_api_base).rstrip("/")
        self.timeout = timeout or settings.request_timeout
        self.message_delay = (
            settings.message_delay_seconds if message_delay is None else message_delay)
        self.timezone = timezone or settings.timezone
        self.session = session or requests.Session()
        self._sleep = sleep

    def _post_message(self, text: str, parse_mode: Optional[str] = None) -> None:
        payload = {
            "chat_id": self.chat_id,
            "text": text,
            "disable_web_page_preview": True,
        }
        if parse_mode:
            payload["parse_mode"] = parse_mode

        # Token is part of the URL, never log it
        url = f"{self.api_base}/bot{self.bot_token}/sendMessage"
        response = self.session.post(url, json=payload, timeout=self.timeout)

        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.status_code != 200 or not body.get("ok", False):
            description = body.get("description") or response.text
            raise TelegramDeliveryError(
                f"Telegram API returned {response.status_code}: {description}")

    def send_message(self, message: str) -> None:
        """
        Send a message, falling back to plain text if Markdown is rejected

        Raises:
            TelegramDeliveryError: If the plain text attempt fails as well
        """
        try:
            self._post_message(message, parse_mode="Markdown")
            logger.info("Message sent successfully")
            return
        except (TelegramDeliveryError, requests.exceptions.RequestException) as e:
            logger.warning(f"Markdown send failed ({e}), trying without formatting...")

        try:
            self._post_message(strip_markdown(message))
            logger.info("Message sent successfully (plain text)")
        except requests.exceptions.RequestException as e:
            logger.error(f"Error sending message: {e}")
            raise TelegramDeliveryError(f"Could not reach Telegram: {e}") from e
        except TelegramDeliveryError as e:
            logger.error(f"Error sending message: {e}")
            raise

    def send_predictions(
        self,
        btc_prediction: PricePrediction,
        eth_prediction: PricePrediction,
        now: Optional[datetime] = None
    ) -> None:
        """
        Send BTC then ETH as separate messages with a fixed delay between them

        Both messages are dated in the configured timezone, the same zone the
        daily trigger fires in.
        """
        tz = ZoneInfo(self.timezone)
        today = now.astimezone(tz) if now is not None else datetime.now(tz)
        btc_message = format_prediction_message(btc_prediction, today)
        eth_message = format_prediction_message(eth_prediction, today)

        logger.info("📤 Sending BTC prediction...")
        self.send_message(btc_message)

        logger.info(f"⏳ Waiting {self.message_delay:g} seconds before sending ETH prediction...")
        self._sleep(self.message_delay)

        logger.info("📤 Sending ETH prediction...")
        self.send_message(eth_message)

    def send_startup_message(self, prediction_time: str, timezone: str, next_run: str) -> None:
        self.send_message(format_startup_message(prediction_time, timezone, next_run))

    def send_error_message(self, error: str) -> None:
        self.send_message(format_error_message(error))

    def send_shutdown_message(self) -> None:
        self.send_message(SHUTDOWN_MESSAGE)
