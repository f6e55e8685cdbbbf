"""Root test conftest — shared fixtures for all test suites.

Unit tests live in tests/unit/, tests that drive the HTTP client against a
respx-mocked backend live in tests/components/.
"""

import json
import sys
from pathlib import Path

import pytest

# src/ is the Python root for the mockdeck package
_SRC = Path(__file__).parent.parent / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from mockdeck.core.state import AppState  # noqa: E402


class RecordingEffects:
    """UI effects fake that records every call the core makes."""

    def __init__(self, confirm_answer: bool = True) -> None:
        self.confirm_answer = confirm_answer
        self.loader_calls: list[bool] = []
        self.notifications: list[tuple[str, str]] = []
        self.prompts: list[str] = []
        self.file_input_clears = 0

    @property
    def loader_visible(self) -> bool:
        return bool(self.loader_calls) and self.loader_calls[-1]

    def kinds(self) -> list[str]:
        return [kind for _, kind in self.notifications]

    def show_loader(self, visible: bool) -> None:
        self.loader_calls.append(visible)

    def show_notification(self, message: str, kind: str) -> None:
        self.notifications.append((message, kind))

    def clear_file_input(self) -> None:
        self.file_input_clears += 1

    async def confirm(self, message: str) -> bool:
        self.prompts.append(message)
        return self.confirm_answer


@pytest.fixture
def effects():
    return RecordingEffects()


@pytest.fixture
def state(effects):
    return AppState(effects)


@pytest.fixture
def response_file(tmp_path):
    """A response-body JSON file on disk."""
    path = tmp_path / "body.json"
    path.write_text(json.dumps({"hello": "world"}))
    return path


@pytest.fixture
def server_listing():
    """A /list answer as the backend serializes it."""
    return {
        "/foo": {
            "method": ["GET"],
            "file": "uploads/1.json",
            "status_code": 200,
            "delay": None,
            "rate_limit": None,
            "with_dynamic_vars": None,
        },
        "/api/graphql": {
            "method": ["POST"],
            "file": "uploads/2.json",
            "status_code": 200,
            "authentication": '{"username":"u","password":"p"}',
            "delay": 150,
            "rate_limit": {"requests": 10, "window_ms": 60000},
            "with_dynamic_vars": True,
        },
    }
