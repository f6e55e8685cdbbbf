"""
core/submission.py — Turn the endpoint form into a ``POST /register`` payload.

Flow::

    Idle → Validating → Aborted            (ValidationError, no network call)
                      → Submitting → Succeeded   (form reset, list refreshed)
                                   → Failed      (form kept for a retry)

Validation helpers raise :class:`~mockdeck.core.errors.ValidationError`;
:func:`handle_submit` turns that into an ``error`` notification.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Protocol

from mockdeck.core.config import GRAPHQL_PATH, HTTP_METHODS
from mockdeck.core.effects import ERROR
from mockdeck.core.errors import ValidationError
from mockdeck.core.logger import LOGGER
from mockdeck.core.models import Authentication, BasicAuth, TokenAuth
from mockdeck.core.state import AppState, SubmissionPhase


@dataclass
class SubmitEvent:
    """The form-submit trigger. Handlers must call :meth:`prevent_default` first."""

    source: str = "form"
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


@dataclass
class RegistrationPayload:
    """Multipart body of ``POST /register``."""

    fields: dict[str, str]
    file_name: str
    file_content: bytes
    content_type: str = "application/json"

    def as_multipart(self) -> tuple[dict[str, str], dict[str, tuple[str, bytes, str]]]:
        """Return ``(data, files)`` in the shape ``httpx`` expects."""
        return dict(self.fields), {"file": (self.file_name, self.file_content, self.content_type)}


@dataclass
class SubmissionResult:
    phase: SubmissionPhase
    reason: str = ""
    payload: RegistrationPayload | None = field(default=None, repr=False)

    @property
    def ok(self) -> bool:
        return self.phase is SubmissionPhase.SUCCEEDED


class Registrar(Protocol):
    async def register_endpoint(self, payload: RegistrationPayload) -> bool: ...


# ── Field encoders ────────────────────────────────────────────────────────────


def resolve_path(path: str, is_graphql: bool) -> str:
    return GRAPHQL_PATH if is_graphql else path


def extract_methods(methods_selected: Mapping[str, bool]) -> str:
    """Comma-join the ticked methods in GET, POST, PUT, DELETE order."""
    selected = [m for m in HTTP_METHODS if methods_selected.get(m)]
    if not selected:
        raise ValidationError("Please select at least one HTTP method")
    return ",".join(selected)


def handle_authentication(auth_type: str, username: str, password: str, token_data: str) -> str:
    """Encode the authentication choice as the JSON string the backend stores."""
    auth: Authentication = None
    if auth_type == "basic":
        auth = BasicAuth(username, password)
    elif auth_type == "token":
        try:
            auth = TokenAuth(json.loads(token_data))
        except (TypeError, json.JSONDecodeError) as exc:
            raise ValidationError("Invalid token data format.") from exc
    return json.dumps(auth.to_json() if auth else None, separators=(",", ":"))


def _optional(value: Any) -> str:
    return "" if value is None else str(value)


def _read_response_file(response_file: Any) -> tuple[str, bytes]:
    if not response_file:
        raise ValidationError("Please select a JSON file")
    if isinstance(response_file, tuple):
        name, content = response_file
        return name, content
    path = Path(response_file)
    try:
        return path.name, path.read_bytes()
    except OSError as exc:
        raise ValidationError(f"Cannot read response file {path}: {exc.strerror}") from exc


def build_payload(form: Mapping[str, Any]) -> RegistrationPayload:
    """Validate a form snapshot and pack it into a registration payload.

    Raises:
        ValidationError: no method ticked, bad token JSON, or no response file.
    """
    is_graphql = bool(form.get("is_graphql"))
    methods = "POST" if is_graphql else extract_methods(form.get("methods") or {})
    authentication = handle_authentication(
        form.get("auth_type", "none"),
        form.get("username", ""),
        form.get("password", ""),
        form.get("token_data", ""),
    )
    file_name, content = _read_response_file(form.get("response_file"))

    fields = {
        "path": resolve_path(form.get("path", ""), is_graphql),
        "methods": methods,
        "status_code": _optional(form.get("status_code")),
        "delay": _optional(form.get("delay")),
        "rate_limit": _optional(form.get("rate_limit")),
        "authentication": authentication,
        "isGraphQL": "true" if is_graphql else "false",
    }
    if form.get("with_dynamic_vars"):
        fields["with_dynamic_vars"] = "true"
    return RegistrationPayload(fields=fields, file_name=file_name, file_content=content)


# ── Entry point ───────────────────────────────────────────────────────────────


async def handle_submit(event: SubmitEvent, state: AppState, client: Registrar) -> SubmissionResult:
    """Validate the current form and register it with the backend."""
    event.prevent_default()
    phase = state.submission

    phase.set(SubmissionPhase.VALIDATING)
    try:
        payload = build_payload(state.form.snapshot())
    except ValidationError as exc:
        LOGGER.info("Submission aborted: %s", exc)
        state.effects.show_notification(str(exc), ERROR)
        phase.set(SubmissionPhase.ABORTED)
        phase.set(SubmissionPhase.IDLE)
        return SubmissionResult(SubmissionPhase.ABORTED, reason=str(exc))

    LOGGER.debug("Submitting %s %s", payload.fields["methods"], payload.fields["path"])
    phase.set(SubmissionPhase.SUBMITTING)
    if await client.register_endpoint(payload):
        result = SubmissionResult(SubmissionPhase.SUCCEEDED, payload=payload)
    else:
        result = SubmissionResult(SubmissionPhase.FAILED, reason="registration failed", payload=payload)
    phase.set(result.phase)
    phase.set(SubmissionPhase.IDLE)
    return result
