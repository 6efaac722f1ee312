"""Utility modules"""
from .formatting import (
    format_prediction_message,
    format_startup_message,
    format_error_message,
    strip_markdown,
)

__all__ = [
    "format_prediction_message",
    "format_startup_message",
    "format_error_message",
    "strip_markdown",
]
