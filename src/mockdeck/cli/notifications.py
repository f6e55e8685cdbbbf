"""Transient operator notifications with per-message expiry."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from mockdeck.core.config import NOTIFICATION_TTL_S


@dataclass(eq=False)
class Notification:
    message: str
    kind: str
    created_at: float = field(default_factory=time.monotonic)
    handle: asyncio.TimerHandle | None = field(default=None, repr=False)


class NotificationCenter:
    """
    Stack of live notifications, most recent first.

    Each notification schedules its own removal on the running event loop;
    there is no shared timer, no queue and no cap.  Outside an event loop a
    notification stays until :meth:`expire` or :meth:`clear` is called.
    """

    def __init__(self, ttl: float = NOTIFICATION_TTL_S, render: Callable[[Notification], None] | None = None) -> None:
        self.ttl = ttl
        self._render = render
        self._active: list[Notification] = []

    @property
    def active(self) -> list[Notification]:
        return list(self._active)

    def show_notification(self, message: str, kind: str) -> Notification:
        note = Notification(message, kind)
        self._active.insert(0, note)
        if self._render is not None:
            self._render(note)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return note
        note.handle = loop.call_later(self.ttl, self.expire, note)
        return note

    def expire(self, note: Notification) -> None:
        if note.handle is not None:
            note.handle.cancel()
            note.handle = None
        if note in self._active:
            self._active.remove(note)

    def clear(self) -> None:
        for note in self.active:
            self.expire(note)
