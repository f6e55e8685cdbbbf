"""
core/effects.py — The side effects the core is allowed to ask for.

The form store, the submission pipeline and the registry client never touch
the terminal directly.  They call into a :class:`UIEffects` implementation:
the REPL and the CLI pass :class:`mockdeck.cli.display.ConsoleEffects`,
tests pass a recording fake.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

SUCCESS = "success"
ERROR = "error"


@runtime_checkable
class UIEffects(Protocol):
    def show_loader(self, visible: bool) -> None:
        """Show or hide the busy indicator."""

    def show_notification(self, message: str, kind: str) -> None:
        """Display a transient message of the given kind."""

    def clear_file_input(self) -> None:
        """Forget whatever the response-file picker is showing."""

    async def confirm(self, message: str) -> bool:
        """Ask the operator a yes/no question without stalling the event loop."""


class NullEffects:
    """Effects sink that does nothing and answers every prompt with ``default``."""

    def __init__(self, default: bool = False) -> None:
        self.default = default

    def show_loader(self, visible: bool) -> None:
        pass

    def show_notification(self, message: str, kind: str) -> None:
        pass

    def clear_file_input(self) -> None:
        pass

    async def confirm(self, message: str) -> bool:
        return self.default
