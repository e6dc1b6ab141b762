"""VoxAi CLI: run the server and use the API from a terminal.

Usage:
    voxai serve                          # Start the API server
    voxai seed                           # Replace schemes with the sample data
    voxai register                       # Create an account (prompts)
    voxai login                          # Log in and store the session locally
    voxai logout                         # Forget the local session
    voxai whoami                         # Show the current session
    voxai schemes list [--category X]    # List schemes
    voxai schemes add --title "..."      # Add a scheme (login required)
    voxai chat "how do I get a scholarship"
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import sys
from pathlib import Path
from typing import Optional

import click

from voxai import __version__
from voxai.client.api import VoxAiClient
from voxai.client.errors import ApiError
from voxai.client.session import SessionManager, SessionState
from voxai.client.storage import SessionStorage
from voxai.client.validation import (
    is_valid_email,
    parse_interests,
    validate_name,
    validate_password,
)
from voxai.config import settings

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _client(ctx: click.Context) -> VoxAiClient:
    """Build a client whose session has already been restored from disk."""
    opts = ctx.obj
    manager = SessionManager(
        SessionStorage(opts["session_file"]),
        base_url=opts["api_url"],
        timeout=settings.client_timeout_seconds,
    )
    ctx.call_on_close(manager.close)
    manager.initialize()
    return VoxAiClient(manager)


def _fail(message: str) -> None:
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(1)


def _require_login(client: VoxAiClient) -> None:
    if not client.session.is_authenticated:
        _fail("You are not logged in. Run 'voxai login' first.")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="voxai")
@click.option("--api-url", default=lambda: settings.api_url, show_default="VOXAI_API_URL",
              help="Base URL of the VoxAi API")
@click.option("--session-file", type=click.Path(path_type=Path),
              default=lambda: settings.session_file, show_default="VOXAI_SESSION_FILE",
              help="Where the login session is stored")
@click.pass_context
def main(ctx: click.Context, api_url: str, session_file: Path):
    """VoxAi: government schemes and a scheme-finder chatbot."""
    ctx.obj = {"api_url": api_url.rstrip("/"), "session_file": session_file}


# ---------------------------------------------------------------------------
# Server commands
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=lambda: settings.host, show_default="VOXAI_HOST")
@click.option("--port", type=int, default=lambda: settings.port, show_default="VOXAI_PORT")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: str, port: int, reload: bool):
    """Start the API server."""
    import uvicorn

    uvicorn.run("voxai.main:app", host=host, port=port, reload=reload)


@main.command()
def seed():
    """Replace all schemes with the sample data."""
    count = _run(_seed_impl())
    click.secho(f"Seeded {count} schemes", fg="green")


async def _seed_impl() -> int:
    from voxai.db.engine import async_session_factory, engine, init_models
    from voxai.services.scheme_service import SchemeService

    await init_models(engine)
    try:
        async with async_session_factory() as db:
            return await SchemeService(db).reseed()
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# Account commands
# ---------------------------------------------------------------------------


@main.command()
@click.option("--name", prompt=True)
@click.option("--email", prompt=True)
@click.password_option()
@click.option("--interests", default="", help="Comma-separated interests")
@click.pass_context
def register(ctx: click.Context, name: str, email: str, password: str, interests: str):
    """Create an account. Log in afterwards with 'voxai login'."""
    ok, message = validate_name(name)
    if not ok:
        _fail(message)
    if not is_valid_email(email):
        _fail("Please enter a valid email address")
    ok, message = validate_password(password)
    if not ok:
        _fail(message)

    client = _client(ctx)
    try:
        msg = client.register(name.strip(), email.strip(), password, parse_interests(interests))
    except ApiError as e:
        _fail(e.message)
    click.secho(msg, fg="green")


@main.command()
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True)
@click.pass_context
def login(ctx: click.Context, email: str, password: str):
    """Log in and store the session locally."""
    client = _client(ctx)
    try:
        session = client.login(email.strip(), password)
    except ApiError as e:
        _fail(e.message)
    click.secho(f"Welcome back, {session.user.name or session.user.email}!", fg="green")


@main.command()
@click.pass_context
def logout(ctx: click.Context):
    """Forget the local session."""
    client = _client(ctx)
    client.logout()
    click.echo("Logged out")


@main.command()
@click.option("--remote", is_flag=True, help="Also fetch the profile from the server")
@click.pass_context
def whoami(ctx: click.Context, remote: bool):
    """Show the current session."""
    client = _client(ctx)
    session = client.session.session
    if client.session.state is SessionState.ANONYMOUS or session is None:
        click.echo("Not logged in")
        return

    click.echo(f"{session.user.name} <{session.user.email}>")
    click.echo(f"Session expires {session.expires_at:%Y-%m-%d %H:%M} UTC")
    if remote:
        try:
            profile = client.me()
        except ApiError as e:
            _fail(e.message)
        if profile.get("interests"):
            click.echo(f"Interests: {', '.join(profile['interests'])}")


# ---------------------------------------------------------------------------
# Schemes
# ---------------------------------------------------------------------------


@main.group()
def schemes():
    """Browse and add government schemes."""


@schemes.command("list")
@click.option("--category", help="Only show this category")
@click.pass_context
def list_schemes(ctx: click.Context, category: Optional[str]):
    client = _client(ctx)
    try:
        rows = client.list_schemes(category=category)
    except ApiError as e:
        _fail(e.message)
    if not rows:
        click.echo("No schemes found")
        return
    for s in rows:
        click.secho(s["title"], bold=True, nl=False)
        click.echo(f"  [{s.get('category') or '—'}]")
        if s.get("description"):
            click.echo(f"    {s['description']}")
        if s.get("url"):
            click.echo(f"    {s['url']}")


@schemes.command("add")
@click.option("--title", prompt=True)
@click.option("--description", default=None)
@click.option("--category", default=None)
@click.option("--url", default=None)
@click.pass_context
def add_scheme(ctx: click.Context, title: str, description: Optional[str],
               category: Optional[str], url: Optional[str]):
    client = _client(ctx)
    _require_login(client)
    try:
        scheme = client.create_scheme(title, description=description, category=category, url=url)
    except ApiError as e:
        _fail(e.message)
    click.secho(f"Scheme added: {scheme['title']}", fg="green")


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


@main.command()
@click.argument("message", required=False)
@click.pass_context
def chat(ctx: click.Context, message: Optional[str]):
    """Ask the chatbot. Without MESSAGE, starts an interactive prompt."""
    client = _client(ctx)
    _require_login(client)

    if message:
        _chat_once(client, message)
        return

    click.echo("Ask about government schemes. Empty line to quit.")
    while True:
        line = click.prompt("you", default="", show_default=False)
        if not line.strip():
            break
        _chat_once(client, line)


def _chat_once(client: VoxAiClient, message: str) -> None:
    try:
        answer = client.send_message(message)
    except ApiError as e:
        _fail(e.message)
    click.echo(f"bot: {answer['reply']}")
