"""Utility modules for the Oura toolkit."""

from .errors import OuraApiError, format_error, get_no_data_message
from .formatters import (
    format_duration,
    format_score,
    format_sleep_stages,
    format_time,
    get_days_ago,
    get_today,
    percentage,
    seconds_to_hours,
)
from .path_config import PathConfig
from .report_base import BaseReporter

__all__ = [
    "BaseReporter",
    "OuraApiError",
    "PathConfig",
    "format_duration",
    "format_error",
    "format_score",
    "format_sleep_stages",
    "format_time",
    "get_days_ago",
    "get_no_data_message",
    "get_today",
    "percentage",
    "seconds_to_hours",
]
