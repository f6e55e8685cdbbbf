"""core/state.py — Application state owned by one console session."""

from __future__ import annotations

import enum

from mockdeck.core.effects import NullEffects, UIEffects
from mockdeck.core.models import EndpointConfig
from mockdeck.core.store import FormState, Store


class SubmissionPhase(enum.Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    ABORTED = "aborted"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class AppState:
    """Holds the endpoint form draft and the mirror of registered endpoints.

    ``endpoints`` is only ever replaced wholesale with the backend's answer
    (see :meth:`replace_endpoints`); nothing patches it in place.
    """

    def __init__(self, effects: UIEffects | None = None) -> None:
        self.effects: UIEffects = effects or NullEffects()
        self.form = FormState(self.effects)
        self.endpoints: Store[tuple[EndpointConfig, ...]] = Store(())
        self.submission: Store[SubmissionPhase] = Store(SubmissionPhase.IDLE)

    def replace_endpoints(self, endpoints: list[EndpointConfig]) -> None:
        self.endpoints.set(tuple(endpoints))
