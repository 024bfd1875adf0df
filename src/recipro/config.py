#!/usr/bin/env python3
"""
Recipe Manager Configuration
Environment-driven settings shared by the store, scaler and CLI.
"""

import os
from typing import List


def _split_list(value: str) -> List[str]:
    return [item.strip().lower() for item in value.split(",") if item.strip()]


class RecipeManagerConfig:
    """Configuration for the recipe manager."""

    # Storage
    DB_PATH = os.getenv("RECIPRO_DB_PATH", "recipes.db")
    DB_RETRIES = int(os.getenv("RECIPRO_DB_RETRIES", "3"))
    DB_RETRY_DELAY = float(os.getenv("RECIPRO_DB_RETRY_DELAY", "0.1"))  # seconds
    EXPORT_VERSION = int(os.getenv("RECIPRO_EXPORT_VERSION", "1"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # json or text

    # Scaling
    MIN_STUDENTS = int(os.getenv("RECIPRO_MIN_STUDENTS", "1"))
    MAX_STUDENTS = int(os.getenv("RECIPRO_MAX_STUDENTS", "100"))

    # Session
    ADMIN_USERS = _split_list(
        os.getenv("RECIPRO_ADMIN_USERS", "admin,administrator,chef,instructor,teacher")
    )

config = RecipeManagerConfig()
