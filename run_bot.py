#!/usr/bin/env python3
"""
Startup script for the crypto prediction bot

    python run_bot.py            # daily schedule + health server
    python run_bot.py --manual   # one prediction now, then exit
"""
import sys

from crypto_prediction_bot.app.cli import main

if __name__ == "__main__":
    sys.exit(main())
