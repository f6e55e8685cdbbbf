"""
core/store.py — Observable stores and the endpoint form built from them.

A :class:`Store` holds one value and calls its subscribers synchronously on
every ``set``.  A :class:`Derived` store recomputes from its sources inside
that same ``set``, so a subscriber never sees a derived value that disagrees
with its source.

:class:`FormState` is the draft of an endpoint registration.  It owns one
store per field plus the auth-visibility flags, and the two GraphQL-derived
flags ``show_path_field`` / ``disable_http_methods``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from mockdeck.core.config import GRAPHQL_PATH, HTTP_METHODS
from mockdeck.core.effects import NullEffects, UIEffects

T = TypeVar("T")

Subscriber = Callable[[Any], None]


class Store(Generic[T]):
    """A single observable value."""

    def __init__(self, value: T) -> None:
        self._value = value
        self._subscribers: list[Subscriber] = []

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        for fn in list(self._subscribers):
            fn(value)

    def update(self, fn: Callable[[T], T]) -> None:
        self.set(fn(self._value))

    def subscribe(self, fn: Subscriber, immediate: bool = True) -> Callable[[], None]:
        """Call ``fn`` on every change (and once now, unless ``immediate`` is False).

        Returns an unsubscribe callable.
        """
        self._subscribers.append(fn)
        if immediate:
            fn(self._value)

        def unsubscribe() -> None:
            if fn in self._subscribers:
                self._subscribers.remove(fn)

        return unsubscribe

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"


class Derived(Store[T]):
    """Read-only store computed from one or more source stores."""

    def __init__(self, sources: Store | tuple[Store, ...], fn: Callable[..., T]) -> None:
        self._sources = sources if isinstance(sources, tuple) else (sources,)
        self._fn = fn
        super().__init__(self._compute())
        for source in self._sources:
            # Registered on the source, so it runs before any later subscriber of that source.
            source._subscribers.append(lambda _value: Store.set(self, self._compute()))

    def _compute(self) -> T:
        return self._fn(*(s.get() for s in self._sources))

    def get(self) -> T:
        return self._compute()

    def set(self, value: T) -> None:
        raise AttributeError("derived stores are read-only")


def default_methods() -> dict[str, bool]:
    return {m: m == "GET" for m in HTTP_METHODS}


def graphql_methods() -> dict[str, bool]:
    return {m: m == "POST" for m in HTTP_METHODS}


# (store name, default factory). is_graphql leads so a reset never shows
# GraphQL mode alongside REST path/methods.
_FIELDS: tuple[tuple[str, Callable[[], Any]], ...] = (
    ("is_graphql", lambda: False),
    ("path", lambda: ""),
    ("methods", default_methods),
    ("status_code", lambda: None),
    ("delay", lambda: None),
    ("rate_limit", lambda: ""),
    ("auth_type", lambda: "none"),
    ("username", lambda: ""),
    ("password", lambda: ""),
    ("token_data", lambda: ""),
    ("response_file", lambda: None),
    ("with_dynamic_vars", lambda: False),
)


class FormState:
    """Mutable draft of an endpoint registration."""

    def __init__(self, effects: UIEffects | None = None) -> None:
        self.effects: UIEffects = effects or NullEffects()

        self.path: Store[str] = Store("")
        self.methods: Store[dict[str, bool]] = Store(default_methods())
        self.status_code: Store[int | None] = Store(None)
        self.delay: Store[int | None] = Store(None)
        self.rate_limit: Store[str] = Store("")
        self.auth_type: Store[str] = Store("none")
        self.username: Store[str] = Store("")
        self.password: Store[str] = Store("")
        self.token_data: Store[str] = Store("")
        self.response_file: Store[str | None] = Store(None)
        self.is_graphql: Store[bool] = Store(False)
        self.with_dynamic_vars: Store[bool] = Store(False)

        self.show_basic_auth_fields: Store[bool] = Store(False)
        self.show_token_auth_fields: Store[bool] = Store(False)
        self.auth_type.subscribe(self.update_auth_fields)

        self.show_path_field: Derived[bool] = Derived(self.is_graphql, lambda g: not g)
        self.disable_http_methods: Derived[bool] = Derived(self.is_graphql, lambda g: g)

    # ── Transitions ───────────────────────────────────────────────────────────

    def update_auth_fields(self, new_auth_type: str) -> None:
        self.show_basic_auth_fields.set(new_auth_type == "basic")
        self.show_token_auth_fields.set(new_auth_type == "token")

    def set_auth_type(self, new_auth_type: str) -> None:
        """Select the auth type; the visibility flags follow through the subscription."""
        self.auth_type.set(new_auth_type)

    def handle_graphql_toggle(self, enabled: bool) -> None:
        """Switch between GraphQL and REST mode.

        GraphQL mode pins ``methods`` to POST and ``path`` to the canonical
        GraphQL route; leaving it restores GET and an empty path.  The mode
        flag is only ever true while path and methods are pinned.
        """
        if enabled:
            self.methods.set(graphql_methods())
            self.path.set(GRAPHQL_PATH)
            self.is_graphql.set(True)
        else:
            self.is_graphql.set(False)
            self.methods.set(default_methods())
            self.path.set("")

    def set_method(self, method: str, selected: bool) -> None:
        """Tick or untick one HTTP method; inert while in GraphQL mode."""
        method = method.upper()
        if method not in HTTP_METHODS:
            raise KeyError(method)
        if self.disable_http_methods.get():
            return
        self.methods.update(lambda current: {**current, method: bool(selected)})

    def handle_file_input(self, file_path: str | None) -> None:
        if file_path:
            self.response_file.set(file_path)

    def reset_form(self) -> None:
        for name, default in _FIELDS:
            getattr(self, name).set(default())
        self.effects.clear_file_input()

    # ── Views ─────────────────────────────────────────────────────────────────

    def snapshot(self) -> dict[str, Any]:
        data = {name: getattr(self, name).get() for name, _ in _FIELDS}
        data["methods"] = dict(data["methods"])
        return data

    def subscribe_all(self, fn: Callable[[FormState], None]) -> Callable[[], None]:
        """Call ``fn(self)`` whenever any field changes."""
        unsubscribers = [
            getattr(self, name).subscribe(lambda _value: fn(self), immediate=False)
            for name, _ in _FIELDS
        ]

        def unsubscribe() -> None:
            for unsub in unsubscribers:
                unsub()

        return unsubscribe
