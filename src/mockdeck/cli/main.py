"""
mockdeck — CLI entry point.

Usage:
  mockdeck                                   # interactive console
  mockdeck list
  mockdeck register /foo --method GET --status 200 --file body.json
  mockdeck register --graphql --file schema-response.json
  mockdeck register /secure --auth basic --username u --password p --file body.json
  mockdeck delete /foo [--yes]
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer

from mockdeck.core.config import AUTH_TYPES, BACKEND_URL_DEFAULT, HTTP_METHODS
from mockdeck.core.logger import LEVELS, LOGGER, LogStream
from mockdeck.core.state import AppState
from mockdeck.core.submission import SubmitEvent, handle_submit

from . import __version__
from .client import RegistryClient
from .display import ConsoleEffects, console, err, info, print_endpoints
from .repl import REPL

# ── App ───────────────────────────────────────────────────────────────────────

app = typer.Typer(
    name="mockdeck",
    help="Operator console for a mock HTTP/GraphQL server",
    add_completion=True,
    rich_markup_mode="rich",
    no_args_is_help=False,
    invoke_without_command=True,
)

# ── Shared options ────────────────────────────────────────────────────────────

URL_OPT = typer.Option(BACKEND_URL_DEFAULT, "--url", "-u", help="Mock server URL", envvar="MOCKDECK_URL")


# ── Root callback → REPL when called with no subcommand ──────────────────────


@app.callback(invoke_without_command=True)
def root(
    ctx: typer.Context,
    url: str = URL_OPT,
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write logs to this file"),
    log_level: str = typer.Option("DEBUG", "--log-level", help=f"Threshold for --log-file: {', '.join(LEVELS)}"),
    version: bool = typer.Option(False, "--version", "-V", help="Print version and exit", is_eager=True),
) -> None:
    """[bold]mockdeck[/bold] — list, register and delete mock endpoints"""
    if version:
        console.print(f"mockdeck [bold]v{__version__}[/bold]")
        raise typer.Exit()

    if log_level.upper() not in LEVELS:
        raise typer.BadParameter(f"expected one of {', '.join(LEVELS)}", param_hint="--log-level")

    if log_file is not None:
        stream = log_file.open("a", encoding="utf-8")
        stream_id = LogStream.Register(stream, log_level)
        ctx.call_on_close(lambda: (LogStream.Unregister(stream_id), stream.close()))

    if ctx.invoked_subcommand is None:
        asyncio.run(_run_repl(url))


async def _run_repl(url: str) -> None:
    effects = ConsoleEffects()
    state = AppState(effects)
    async with RegistryClient(state, base_url=url) as client:
        await REPL(client, state, effects).run()


# ── Subcommands ───────────────────────────────────────────────────────────────


@app.command("list")
def list_endpoints(url: str = URL_OPT) -> None:
    """Show every endpoint registered on the mock server."""
    state = AppState(ConsoleEffects())

    async def _load() -> bool:
        async with RegistryClient(state, base_url=url) as client:
            return await client.load_endpoints()

    if not asyncio.run(_load()):
        raise typer.Exit(1)
    print_endpoints(state.endpoints.get())


@app.command()
def register(
    path: Annotated[str, typer.Argument(help="Route to mock, e.g. /api/users")] = "",
    file: Path = typer.Option(..., "--file", "-f", help="JSON file served as the response body"),
    method: list[str] = typer.Option(["GET"], "--method", "-m", help="HTTP method; repeat for several"),
    graphql: bool = typer.Option(False, "--graphql", help="Register the GraphQL endpoint (POST /api/graphql)"),
    status: Optional[int] = typer.Option(None, "--status", "-s", help="Response status code"),
    delay: Optional[int] = typer.Option(None, "--delay", "-d", help="Response delay in milliseconds"),
    rate_limit: str = typer.Option("", "--rate-limit", help="REQUESTS/WINDOW_MS, e.g. 10/60000"),
    auth: str = typer.Option("none", "--auth", help="none | basic | token"),
    username: str = typer.Option("", "--username", help="Basic auth user"),
    password: str = typer.Option("", "--password", help="Basic auth password"),
    token: str = typer.Option("", "--token", help="Token auth payload as JSON"),
    dynamic_vars: bool = typer.Option(False, "--dynamic-vars", help="Substitute dynamic variables in the body"),
    url: str = URL_OPT,
) -> None:
    """
    Register a mock endpoint serving [bold]FILE[/bold] at [bold]PATH[/bold].

    With [bold]--graphql[/bold] the path and methods are fixed to
    POST /api/graphql and any PATH or --method is ignored.
    """
    if auth not in AUTH_TYPES:
        err(f"--auth must be one of: {', '.join(AUTH_TYPES)}")
        raise typer.Exit(2)
    unknown = [m for m in method if m.upper() not in HTTP_METHODS]
    if unknown:
        err(f"Unsupported method(s): {', '.join(unknown)}")
        raise typer.Exit(2)

    state = AppState(ConsoleEffects())
    form = state.form
    form.handle_graphql_toggle(graphql)
    if not graphql:
        form.path.set(path)
        for m in HTTP_METHODS:
            form.set_method(m, m in {x.upper() for x in method})
    form.status_code.set(status)
    form.delay.set(delay)
    form.rate_limit.set(rate_limit)
    form.set_auth_type(auth)
    form.username.set(username)
    form.password.set(password)
    form.token_data.set(token)
    form.with_dynamic_vars.set(dynamic_vars)
    form.handle_file_input(str(file))

    async def _submit():
        async with RegistryClient(state, base_url=url) as client:
            return await handle_submit(SubmitEvent(source="cli"), state, client)

    result = asyncio.run(_submit())
    LOGGER.debug("register finished in phase %s", result.phase.value)
    if not result.ok:
        raise typer.Exit(1)
    print_endpoints(state.endpoints.get())


@app.command()
def delete(
    path: Annotated[str, typer.Argument(help="Registered route to delete")],
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    url: str = URL_OPT,
) -> None:
    """Delete the mock endpoint registered at [bold]PATH[/bold]."""
    state = AppState(ConsoleEffects(assume_yes=yes))

    async def _delete() -> bool:
        async with RegistryClient(state, base_url=url) as client:
            return await client.delete_endpoint(path)

    if not asyncio.run(_delete()):
        info("Nothing deleted.")
        raise typer.Exit(1)
    print_endpoints(state.endpoints.get())


# ── Entry ─────────────────────────────────────────────────────────────────────


def main() -> None:
    app()


if __name__ == "__main__":
    main()
