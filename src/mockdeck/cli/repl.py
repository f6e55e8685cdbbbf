"""Interactive mockdeck console — prompt_toolkit powered."""

from __future__ import annotations

import inspect
import shlex
from typing import Any

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import FileHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.styles import Style

from mockdeck.core.config import AUTH_TYPES, HISTORY_FILE, HTTP_METHODS
from mockdeck.core.state import AppState
from mockdeck.core.submission import SubmitEvent, handle_submit

from . import __version__
from .client import RegistryClient
from .display import (
    ConsoleEffects,
    console,
    err,
    info,
    ok,
    print_banner,
    print_endpoints,
    print_form,
    print_help,
    print_notifications,
    warn,
)

# ── Prompt style ──────────────────────────────────────────────────────────────

PROMPT_STYLE = Style.from_dict(
    {
        "marker": "#4DB6AC bold",
        "host": "#B0BEC5",
        "suffix": "#4DB6AC bold",
        "bottom-toolbar": "#607D8B bg:#0C1020",
        "": "#FFFFFF",
    }
)

PROMPT_TOKENS = HTML("<marker>▚▞</marker> <host>mockdeck</host><suffix> ❯ </suffix>")

# ── Tab-completion words ───────────────────────────────────────────────────────

COMPLETER = WordCompleter(
    [
        "list",
        "form",
        "set",
        "method",
        "graphql",
        "auth",
        "dynamic",
        "file",
        "submit",
        "reset",
        "delete",
        "notifications",
        "path",
        "status",
        "delay",
        "rate-limit",
        "username",
        "password",
        "token",
        "on",
        "off",
        *HTTP_METHODS,
        *AUTH_TYPES,
        "/help",
        "/quit",
        "/exit",
        "/clear",
        "/version",
    ],
    ignore_case=True,
    sentence=True,
)

# set <field> → (store name, parser)
SETTABLE: dict[str, tuple[str, Any]] = {
    "path": ("path", str),
    "status": ("status_code", int),
    "delay": ("delay", int),
    "rate-limit": ("rate_limit", str),
    "username": ("username", str),
    "password": ("password", str),
    "token": ("token_data", str),
}

ON_OFF = {"on": True, "off": False, "true": True, "false": False, "yes": True, "no": False}


# ── REPL ──────────────────────────────────────────────────────────────────────


class REPL:
    """
    Interactive console for editing an endpoint draft and managing endpoints.

    The draft panel is re-rendered after any command that changed the form:
    a subscription on the form marks it dirty and the dispatcher redraws.
    """

    def __init__(self, client: RegistryClient, state: AppState, effects: ConsoleEffects) -> None:
        self.client = client
        self.state = state
        self.effects = effects
        self._running = True
        self._form_dirty = False
        self._unsubscribe = state.form.subscribe_all(self._mark_dirty)
        self._session: PromptSession = PromptSession(
            history=FileHistory(str(HISTORY_FILE)),
            auto_suggest=AutoSuggestFromHistory(),
            completer=COMPLETER,
            style=PROMPT_STYLE,
            key_bindings=self._bindings(),
            bottom_toolbar=self._toolbar,
            enable_history_search=True,
            mouse_support=False,
        )

    def _bindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add("c-c")
        def _ctrl_c(event):  # noqa: ANN001
            event.app.current_buffer.reset()

        @kb.add("c-d")
        def _ctrl_d(event):  # noqa: ANN001
            self._running = False
            event.app.exit()

        return kb

    def _mark_dirty(self, _form: Any) -> None:
        self._form_dirty = True

    def _toolbar(self) -> HTML:
        form = self.state.form
        mode = "GraphQL" if form.is_graphql.get() else "REST"
        picked = self.effects.file_input or "no file"
        return HTML(" {} · {} endpoints · response: {}").format(mode, len(self.state.endpoints.get()), picked)

    async def run(self) -> None:
        print_banner(self.client.base_url)
        if await self.client.is_alive():
            ok(f"Connected to [bold]{self.client.base_url}[/bold]")
            await self.client.load_endpoints()
            print_endpoints(self.state.endpoints.get())
        else:
            warn(f"Mock server not reachable at [bold]{self.client.base_url}[/bold]; pass [bold]--url[/bold] to change it.")
        console.print("  [deck.muted]Type[/deck.muted] [deck.accent]/help[/deck.accent] [deck.muted]for commands.[/deck.muted]")
        console.print()

        try:
            while self._running:
                try:
                    raw = await self._session.prompt_async(PROMPT_TOKENS, style=PROMPT_STYLE)
                except EOFError:
                    break
                except KeyboardInterrupt:
                    continue

                line = raw.strip()
                if line:
                    await self.dispatch(line)
        finally:
            self._unsubscribe()
            self.effects.notifications.clear()

        console.print("\n  [deck.muted]Goodbye.[/deck.muted]\n")

    # ── Dispatcher ────────────────────────────────────────────────────────────

    async def dispatch(self, line: str) -> None:
        if line.startswith("/"):
            self._handle_slash(line)
            return

        try:
            parts = shlex.split(line)
        except ValueError as exc:
            err(f"Parse error: {exc}")
            return
        if not parts:
            return

        cmd, *rest = parts
        handlers: dict[str, Any] = {
            "list": self._cmd_list,
            "form": self._cmd_form,
            "set": self._cmd_set,
            "method": self._cmd_method,
            "graphql": self._cmd_graphql,
            "auth": self._cmd_auth,
            "dynamic": self._cmd_dynamic,
            "file": self._cmd_file,
            "submit": self._cmd_submit,
            "reset": self._cmd_reset,
            "delete": self._cmd_delete,
            "notifications": self._cmd_notifications,
            "help": lambda _: print_help(),
            "quit": lambda _: self._quit(),
            "exit": lambda _: self._quit(),
        }

        handler = handlers.get(cmd.lower())
        if handler is None:
            err(f"Unknown command: {cmd!r}  — type /help")
            return

        self._form_dirty = False
        try:
            result = handler(rest)
            if inspect.isawaitable(result):
                await result
        except (KeyError, ValueError) as exc:
            err(f"Bad arguments for {cmd}: {exc}")
        if self._form_dirty and cmd.lower() not in ("form", "submit", "reset"):
            print_form(self.state.form)
        self._form_dirty = False

    # ── Slash commands ────────────────────────────────────────────────────────

    def _handle_slash(self, line: str) -> None:
        cmd = line.split()[0].lower()
        {
            "/help": lambda: print_help(),
            "/quit": self._quit,
            "/exit": self._quit,
            "/clear": lambda: console.clear(),
            "/version": lambda: console.print(
                f"  [deck.accent]mockdeck[/deck.accent] [deck.muted]v{__version__}[/deck.muted]"
            ),
        }.get(cmd, lambda: err(f"Unknown slash command: {cmd}  — type /help"))()

    def _quit(self) -> None:
        self._running = False

    # ── Commands ──────────────────────────────────────────────────────────────

    async def _cmd_list(self, _args: list[str]) -> None:
        await self.client.load_endpoints()
        print_endpoints(self.state.endpoints.get())

    def _cmd_form(self, _args: list[str]) -> None:
        print_form(self.state.form)

    def _cmd_set(self, args: list[str]) -> None:
        """set <field> <value>; an empty value clears optional numbers."""
        if len(args) < 1 or args[0] not in SETTABLE:
            err(f"Usage: set <{'|'.join(SETTABLE)}> <value>")
            return
        name, parse = SETTABLE[args[0]]
        raw = " ".join(args[1:])
        if name == "path" and not self.state.form.show_path_field.get():
            warn("Path is fixed while GraphQL mode is on")
            return
        if parse is int:
            value = int(raw) if raw else None
        else:
            value = raw
        getattr(self.state.form, name).set(value)

    def _cmd_method(self, args: list[str]) -> None:
        """method <GET|POST|PUT|DELETE> on|off"""
        if len(args) != 2:
            err("Usage: method <GET|POST|PUT|DELETE> on|off")
            return
        if self.state.form.disable_http_methods.get():
            warn("Methods are fixed to POST while GraphQL mode is on")
            return
        self.state.form.set_method(args[0], _on_off(args[1]))

    def _cmd_graphql(self, args: list[str]) -> None:
        if len(args) != 1:
            err("Usage: graphql on|off")
            return
        self.state.form.handle_graphql_toggle(_on_off(args[0]))

    def _cmd_auth(self, args: list[str]) -> None:
        if len(args) != 1 or args[0] not in AUTH_TYPES:
            err(f"Usage: auth {'|'.join(AUTH_TYPES)}")
            return
        self.state.form.set_auth_type(args[0])

    def _cmd_dynamic(self, args: list[str]) -> None:
        if len(args) != 1:
            err("Usage: dynamic on|off")
            return
        self.state.form.with_dynamic_vars.set(_on_off(args[0]))

    def _cmd_file(self, args: list[str]) -> None:
        if len(args) != 1:
            err("Usage: file <path>")
            return
        self.effects.file_input = args[0]
        self.state.form.handle_file_input(args[0])

    async def _cmd_submit(self, _args: list[str]) -> None:
        result = await handle_submit(SubmitEvent(source="repl"), self.state, self.client)
        if result.ok:
            print_endpoints(self.state.endpoints.get())
        else:
            info("Draft kept; fix it and run [bold]submit[/bold] again.")

    def _cmd_reset(self, _args: list[str]) -> None:
        self.state.form.reset_form()
        print_form(self.state.form)

    async def _cmd_delete(self, args: list[str]) -> None:
        if len(args) != 1:
            err("Usage: delete <path>")
            return
        if await self.client.delete_endpoint(args[0]):
            print_endpoints(self.state.endpoints.get())

    def _cmd_notifications(self, _args: list[str]) -> None:
        print_notifications(self.effects.notifications.active)


def _on_off(token: str) -> bool:
    try:
        return ON_OFF[token.lower()]
    except KeyError:
        raise ValueError(f"expected on or off, got {token!r}") from None
