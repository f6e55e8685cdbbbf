"""
core/models.py — Endpoint configuration as the console sees it.

The backend's ``GET /list`` answers with a mapping ``path -> config``.  The
field names drifted between backend versions (``method`` vs ``methods``,
``status_code`` vs ``statusCode`` …), so :meth:`EndpointConfig.from_server`
accepts either spelling.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from mockdeck.core.config import GRAPHQL_PATH, HTTP_METHODS


@dataclass(frozen=True)
class BasicAuth:
    username: str
    password: str

    def to_json(self) -> dict:
        return {"username": self.username, "password": self.password}


@dataclass(frozen=True)
class TokenAuth:
    token_payload: Any

    def to_json(self) -> Any:
        return self.token_payload


Authentication = BasicAuth | TokenAuth | None


@dataclass(frozen=True)
class EndpointConfig:
    """A registered mock endpoint, keyed by ``path``."""

    path: str
    methods: tuple[str, ...] = ()
    status_code: int | None = None
    delay_ms: int | None = None
    rate_limit: str | None = None
    authentication: Authentication = None
    is_graphql: bool = False
    file: str | None = None
    with_dynamic_vars: bool = False
    extra: dict = field(default_factory=dict, compare=False)

    @property
    def methods_label(self) -> str:
        return ",".join(self.methods)

    @classmethod
    def from_server(cls, path: str, config: dict) -> EndpointConfig:
        """Build an EndpointConfig from one entry of the ``/list`` mapping."""
        config = dict(config or {})
        methods = _parse_methods(_pop_first(config, "methods", "method"))
        is_graphql = _pop_first(config, "isGraphQL", "is_graphql")
        if is_graphql is None:
            is_graphql = path == GRAPHQL_PATH
        return cls(
            path=path,
            methods=methods,
            status_code=_as_int(_pop_first(config, "status_code", "statusCode")),
            delay_ms=_as_int(_pop_first(config, "delay", "delayMs", "delay_ms")),
            rate_limit=_parse_rate_limit(_pop_first(config, "rate_limit", "rateLimit")),
            authentication=_parse_authentication(config.pop("authentication", None)),
            is_graphql=_as_bool(is_graphql),
            file=config.pop("file", None),
            with_dynamic_vars=_as_bool(_pop_first(config, "with_dynamic_vars", "withDynamicVars")),
            extra=config,
        )


def is_authenticated(endpoint: EndpointConfig) -> bool:
    """Return True if the endpoint requires credentials."""
    return endpoint.authentication is not None


def endpoints_from_server(data: dict) -> list[EndpointConfig]:
    """Convert the ``/list`` mapping into endpoints ordered by path."""
    if not isinstance(data, dict):
        raise TypeError(f"expected a JSON object, got {type(data).__name__}")
    return [EndpointConfig.from_server(path, cfg) for path, cfg in sorted(data.items())]


# ── Coercions ─────────────────────────────────────────────────────────────────


def _pop_first(config: dict, *keys: str) -> Any:
    value = None
    for key in keys:
        if key in config:
            found = config.pop(key)
            if value is None:
                value = found
    return value


def _parse_methods(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    names = [str(m).strip().upper() for m in value if str(m).strip()]
    known = [m for m in HTTP_METHODS if m in names]
    return tuple(known + [m for m in names if m not in HTTP_METHODS])


def _parse_rate_limit(value: Any) -> str | None:
    if value in (None, ""):
        return None
    if isinstance(value, dict):
        return f"{value.get('requests', 0)}/{value.get('window_ms', 0)}"
    return str(value)


def _parse_authentication(value: Any) -> Authentication:
    if value in (None, "", "null"):
        return None
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            return TokenAuth(value)
        if value is None:
            return None
    if isinstance(value, dict) and set(value) == {"username", "password"}:
        return BasicAuth(str(value["username"]), str(value["password"]))
    return TokenAuth(value)


def _as_int(value: Any) -> int | None:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)
