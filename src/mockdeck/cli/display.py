"""Rich display helpers — endpoint tables, the form panel, loader, notifications."""

from __future__ import annotations

import asyncio

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.status import Status
from rich.table import Table
from rich.theme import Theme

from mockdeck.core.config import HTTP_METHODS
from mockdeck.core.models import EndpointConfig, is_authenticated
from mockdeck.core.store import FormState

from .notifications import Notification, NotificationCenter

# ── Palette ───────────────────────────────────────────────────────────────────
THEME = Theme(
    {
        "deck.accent": "#4DB6AC",
        "deck.accent2": "#80CBC4",
        "deck.border": "#00796B",
        "deck.text": "#B0BEC5",
        "deck.muted": "#607D8B",
        "deck.ok": "#3d9e5a",
        "deck.warn": "#d4a017",
        "deck.err": "#e05555",
        "deck.gql": "#E535AB",
        "deck.prompt": "bold #4DB6AC",
    }
)

console = Console(theme=THEME, highlight=False)

BANNER = "[deck.accent]  ▚▞ mockdeck[/deck.accent]  [deck.muted]mock endpoint console[/deck.muted]"

KIND_STYLES = {"success": "deck.ok", "error": "deck.err", "info": "deck.text"}
KIND_ICONS = {"success": "✓", "error": "✗", "info": "·"}


def print_banner(backend_url: str) -> None:
    console.print(BANNER)
    console.print(f"  [deck.muted]Backend[/deck.muted]  [deck.text]{backend_url}[/deck.text]")
    console.print()


def print_help() -> None:
    """Print REPL help."""
    table = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    table.add_column(style="deck.accent", no_wrap=True)
    table.add_column(style="deck.text")

    commands = [
        ("list", "Reload and show registered endpoints"),
        ("form", "Show the endpoint draft"),
        ("set <field> <value>", "path | status | delay | rate-limit | username | password | token"),
        ("method <GET|POST|PUT|DELETE> on|off", "Tick or untick an HTTP method"),
        ("graphql on|off", "Toggle GraphQL mode (pins path and POST)"),
        ("auth none|basic|token", "Choose the authentication type"),
        ("dynamic on|off", "Toggle dynamic variables in the response body"),
        ("file <path>", "Select the response-body JSON file"),
        ("submit", "Register the draft with the backend"),
        ("reset", "Restore the draft to its defaults"),
        ("delete <path>", "Delete a registered endpoint"),
        ("notifications", "Show live notifications"),
        ("", ""),
        ("/help", "Show this help"),
        ("/quit  or  Ctrl-D", "Exit the REPL"),
        ("/clear", "Clear the screen"),
    ]
    for cmd, desc in commands:
        table.add_row(cmd, desc)

    console.print(Panel(table, title="[deck.accent]Commands[/deck.accent]", border_style="deck.border", padding=(1, 2)))


# ── Endpoints ─────────────────────────────────────────────────────────────────


def _auth_label(endpoint: EndpointConfig) -> str:
    if not is_authenticated(endpoint):
        return "[deck.muted]—[/deck.muted]"
    return f"[deck.warn]{type(endpoint.authentication).__name__.replace('Auth', '').lower()}[/deck.warn]"


def print_endpoints(endpoints: tuple[EndpointConfig, ...] | list[EndpointConfig]) -> None:
    if not endpoints:
        console.print("[deck.muted]  No endpoints registered. Try: submit[/deck.muted]")
        return

    table = Table(box=box.ROUNDED, show_header=True, header_style="deck.border", padding=(0, 1))
    table.add_column("Path", style="deck.text", no_wrap=True)
    table.add_column("Methods", style="deck.accent", no_wrap=True)
    table.add_column("Status", justify="right")
    table.add_column("Delay ms", justify="right")
    table.add_column("Rate limit", justify="right")
    table.add_column("Auth", no_wrap=True)
    table.add_column("Type", no_wrap=True)

    for ep in endpoints:
        table.add_row(
            ep.path,
            ep.methods_label or "—",
            str(ep.status_code) if ep.status_code is not None else "[deck.muted]200[/deck.muted]",
            str(ep.delay_ms) if ep.delay_ms is not None else "[deck.muted]—[/deck.muted]",
            ep.rate_limit or "[deck.muted]—[/deck.muted]",
            _auth_label(ep),
            "[deck.gql]graphql[/deck.gql]" if ep.is_graphql else "rest",
        )

    console.print(table)


# ── Form ──────────────────────────────────────────────────────────────────────


def print_form(form: FormState) -> None:
    data = form.snapshot()

    table = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    table.add_column(style="deck.muted", no_wrap=True, width=14)
    table.add_column(style="deck.text")

    if form.show_path_field.get():
        table.add_row("Path", data["path"] or "[deck.muted]—[/deck.muted]")
    else:
        table.add_row("Path", f"[deck.gql]{data['path']}[/deck.gql] [deck.muted](GraphQL)[/deck.muted]")

    method_style = "deck.muted" if form.disable_http_methods.get() else "deck.accent"
    ticks = "  ".join(
        f"[{method_style}]{'■' if data['methods'].get(m) else '□'} {m}[/{method_style}]" for m in HTTP_METHODS
    )
    table.add_row("Methods", ticks)
    table.add_row("Status", _or_dash(data["status_code"]))
    table.add_row("Delay ms", _or_dash(data["delay"]))
    table.add_row("Rate limit", _or_dash(data["rate_limit"]))
    table.add_row("Auth", data["auth_type"])
    if form.show_basic_auth_fields.get():
        table.add_row("Username", _or_dash(data["username"]))
        table.add_row("Password", "•" * len(data["password"]) if data["password"] else "[deck.muted]—[/deck.muted]")
    if form.show_token_auth_fields.get():
        table.add_row("Token", _or_dash(data["token_data"]))
    table.add_row("Dynamic vars", "on" if data["with_dynamic_vars"] else "off")
    table.add_row("Response", _or_dash(data["response_file"]))

    console.print(Panel(table, title="[deck.accent]Endpoint draft[/deck.accent]", border_style="deck.border", padding=(0, 1)))


def _or_dash(value) -> str:
    if value in (None, ""):
        return "[deck.muted]—[/deck.muted]"
    return str(value)


# ── Notifications ─────────────────────────────────────────────────────────────


def print_notification(note: Notification) -> None:
    style = KIND_STYLES.get(note.kind, "deck.text")
    icon = KIND_ICONS.get(note.kind, "·")
    console.print(f"  [{style}]{icon}[/{style}]  [{style}]{note.message}[/{style}]")


def print_notifications(notes: list[Notification]) -> None:
    if not notes:
        console.print("[deck.muted]  No live notifications[/deck.muted]")
        return
    for note in notes:
        print_notification(note)


# ── Loader ────────────────────────────────────────────────────────────────────


class Loader:
    """Busy indicator shown while a request is in flight."""

    def __init__(self, message: str = "Talking to the backend…") -> None:
        self._status = Status(f"[deck.text]{message}[/deck.text]", console=console, spinner_style="deck.accent")
        self.visible = False

    def show(self, visible: bool) -> None:
        if visible and not self.visible:
            self._status.start()
        elif not visible and self.visible:
            self._status.stop()
        self.visible = visible


# ── Effects ───────────────────────────────────────────────────────────────────


class ConsoleEffects:
    """UI effects rendered on the terminal."""

    def __init__(self, assume_yes: bool = False) -> None:
        self.loader = Loader()
        self.notifications = NotificationCenter(render=print_notification)
        self.assume_yes = assume_yes
        # Text of the REPL's file picker (shown in its bottom toolbar).
        self.file_input: str = ""

    def show_loader(self, visible: bool) -> None:
        self.loader.show(visible)

    def show_notification(self, message: str, kind: str) -> None:
        self.notifications.show_notification(message, kind)

    def clear_file_input(self) -> None:
        self.file_input = ""

    async def confirm(self, message: str) -> bool:
        if self.assume_yes:
            return True
        # Confirm.ask blocks on input(); keep notification timers running meanwhile.
        return await asyncio.to_thread(Confirm.ask, f"  [deck.warn]{message}[/deck.warn]", console=console, default=False)


# ── Utility ───────────────────────────────────────────────────────────────────


def ok(message: str) -> None:
    console.print(f"  [deck.ok]✓[/deck.ok]  {message}")


def warn(message: str) -> None:
    console.print(f"  [deck.warn]⚠[/deck.warn]  {message}")


def err(message: str) -> None:
    console.print(f"  [deck.err]✗[/deck.err]  [deck.err]{message}[/deck.err]")


def info(message: str) -> None:
    console.print(f"  [deck.muted]·[/deck.muted]  [deck.text]{message}[/deck.text]")
