"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "seedarr",
    "environment": "dev",
    "http": {
        "timeout_seconds": 15.0,
        "follow_redirects": True,
        "user_agent": "Seedarr/0.1.0",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "tmdb": {
        "api_key": None,
        "access_token": None,
        "language": "ru-RU",
        "base_url": "https://api.themoviedb.org/3",
    },
    "source": {
        "search_url": "https://bitru.org/search.php?search={query}",
    },
    "shutdown_timeout_seconds": 10.0,
}
