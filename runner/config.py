"""Environment-variable-based configuration for the session runner."""

from __future__ import annotations

import os

STORE_URL: str = os.environ.get("SESSION_STORE_URL", "")
STORE_API_KEY: str = os.environ.get("SESSION_STORE_API_KEY", "")
USER_ID: str = os.environ.get("SESSION_USER_ID", "local-user")
TICK_SECONDS: float = float(os.environ.get("SESSION_TICK_SECONDS", "1.0"))
LOG_LEVEL: str = os.environ.get("SESSION_LOG_LEVEL", "INFO").upper()
