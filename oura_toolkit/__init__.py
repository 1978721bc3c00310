"""Oura API client, formatting helpers and fixture drift detection."""

from .client import BASE_URL, OuraClient, add_days
from .utils.errors import OuraApiError

__version__ = "0.1.0"

__all__ = [
    "BASE_URL",
    "OuraApiError",
    "OuraClient",
    "add_days",
]
