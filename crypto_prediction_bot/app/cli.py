"""Command line entry point"""
import argparse
import sys
from typing import List, Optional

from pydantic import ValidationError

from .core.exceptions import ConfigurationError
from .core.logging_config import setup_logging, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crypto-prediction-bot",
        description="Daily BTC/ETH price predictions delivered to Telegram",
    )
    parser.add_argument(
        "-m", "--manual",
        action="store_true",
        help="run one prediction immediately and exit",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="override LOG_LEVEL",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and run the bot; returns the process exit code"""
    args = build_parser().parse_args(argv)

    # Settings are read from the environment on first import
    try:
        from .core.config import get_settings
        settings = get_settings()
    except ValidationError as e:
        setup_logging(args.log_level or "INFO")
        logger.error(f"❌ Failed to start bot: invalid configuration\n{e}")
        return 1

    setup_logging(args.log_level or settings.log_level)

    try:
        from .bot import CryptoPredictionBot

        bot = CryptoPredictionBot(settings=settings)
        if args.manual:
            return 0 if bot.run_manual_prediction() else 1
        bot.start()
        return 0
    except (ConfigurationError, ValidationError) as e:
        logger.error(f"❌ Failed to start bot: {e}")
        return 1
    except Exception as e:
        logger.critical(f"💥 Fatal error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
