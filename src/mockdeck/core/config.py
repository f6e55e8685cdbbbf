"""
core/config.py — Backend defaults, console constants and env overrides.

Every other module reads its defaults from here so the console, the REPL and
the tests agree on the canonical GraphQL path, the method order and the
notification lifetime.

Usage::

    from mockdeck.core.config import BACKEND_URL, GRAPHQL_PATH, HTTP_METHODS
"""

import os
from pathlib import Path

# ── Backend ────────────────────────────────────────────────────────────────────

BACKEND_URL_DEFAULT: str = "http://localhost:8080"
BACKEND_URL: str = os.environ.get("MOCKDECK_URL", BACKEND_URL_DEFAULT)

# Seconds; empty or unset means the transport never times out on its own.
_timeout_env = os.environ.get("MOCKDECK_TIMEOUT", "").strip()
REQUEST_TIMEOUT: float | None = float(_timeout_env) if _timeout_env else None

LIST_ROUTE: str = "/list"
REGISTER_ROUTE: str = "/register"
DELETE_ROUTE: str = "/delete"

# ── Endpoint form ─────────────────────────────────────────────────────────────

GRAPHQL_PATH: str = "/api/graphql"

# Fixed enumeration order used when the selected methods are serialized.
HTTP_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE")

AUTH_TYPES: tuple[str, ...] = ("none", "basic", "token")

# ── Console ───────────────────────────────────────────────────────────────────

NOTIFICATION_TTL_S: float = 5.0

HISTORY_FILE: Path = Path(os.environ.get("MOCKDECK_HISTORY", str(Path.home() / ".mockdeck_history")))

LOG_LEVEL: str = os.environ.get("MOCKDECK_LOG_LEVEL", "WARNING").upper()
