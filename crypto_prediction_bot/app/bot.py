"""Bot lifecycle: validation, startup notice, daily scheduler, health server"""
from typing import Optional

import uvicorn

from .api.v1.routes.health import set_scheduler
from .core.config import Settings, settings as default_settings, validate_config
from .core.logging_config import get_logger
from .core.scheduler import PredictionScheduler
from .services.prediction_service import PredictionService
from .services.telegram_service import TelegramService
from ..ai.config import AIConfig, ai_config as default_ai_config

logger = get_logger(__name__)


class CryptoPredictionBot:
    """Wires the services together and owns the process lifecycle"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        ai_config: Optional[AIConfig] = None,
        prediction_service: Optional[PredictionService] = None,
        telegram_service: Optional[TelegramService] = None
    ):
        self.settings = settings or default_settings
        self.ai_config = ai_config or default_ai_config
        self.prediction_service = prediction_service or PredictionService()
        self.telegram_service = telegram_service or TelegramService(
            timezone=self.settings.timezone)
        self.scheduler = PredictionScheduler(
            self.prediction_service,
            self.telegram_service,
            prediction_time=self.settings.prediction_time,
            timezone=self.settings.timezone,
            status_log_interval=self.settings.status_log_interval,
        )

    def start(self) -> None:
        """
        Start the bot and block until the process is asked to stop

        Raises:
            ConfigurationError: If required settings are missing
            TelegramDeliveryError: If the startup notification cannot be sent
        """
        logger.info("🚀 Starting Crypto Prediction Bot...")

        validate_config(self.settings, self.ai_config)
        logger.info("✅ Configuration validated")

        next_run = self.scheduler.get_status().next_run_display
        self.telegram_service.send_startup_message(
            self.settings.prediction_time, self.settings.timezone, next_run)
        logger.info("✅ Startup notification sent")

        self.scheduler.start()
        set_scheduler(self.scheduler)
        logger.info(f"📅 Next prediction scheduled for: {next_run}")

        try:
            self._serve_health()
        finally:
            self.shutdown()

    def _serve_health(self) -> None:
        """Run the health server in the foreground; uvicorn handles SIGINT/SIGTERM"""
        from .main import app

        logger.info(
            f"🏥 Health check server running on {self.settings.host}:{self.settings.port}")
        logger.info("✅ Crypto Prediction Bot is now running! Press Ctrl+C to stop")
        config = uvicorn.Config(
            app,
            host=self.settings.host,
            port=self.settings.port,
            log_level="warning",
            access_log=False,
        )
        uvicorn.Server(config).run()

    def shutdown(self) -> None:
        """Stop the scheduler and say goodbye in the chat"""
        logger.info("📥 Shutting down gracefully...")
        if self.scheduler.is_running:
            self.scheduler.stop()
            logger.info("✅ Scheduler stopped")
        set_scheduler(None)

        try:
            self.telegram_service.send_shutdown_message()
            logger.info("✅ Shutdown notification sent")
        except Exception as e:
            logger.error(f"❌ Error during shutdown: {e}")

        logger.info("👋 Goodbye!")

    def run_manual_prediction(self) -> bool:
        """
        Run the prediction task once, immediately

        Raises:
            ConfigurationError: If required settings are missing
        """
        validate_config(self.settings, self.ai_config)
        logger.info("🔄 Running manual prediction...")
        return self.scheduler.run_manual_prediction()
