"""acikkuran CLI — run the API and poke at it from a terminal.

Usage:
    acikkuran serve                                   # Run the API with uvicorn
    acikkuran verify-token <jwt>                      # Who does this token say I am?
    acikkuran get <user_id> <verse_id>                # Read a user's translation
    acikkuran save <verse_id> "text" -f 1:"a note"    # Write as the token's subject
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from typing import Optional

import click
import httpx

from acikkuran import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"


def _api_url() -> str:
    return os.environ.get("ACIKKURAN_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the API."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _pretty_json(data: dict | list | None) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def parse_footnote(value: str) -> dict:
    """Parse a `NUMBER:TEXT` footnote option."""
    number, sep, text = value.partition(":")
    if not sep or not number.strip().isdigit() or not text:
        raise click.BadParameter(f"expected NUMBER:TEXT, got {value!r}")
    return {"number": int(number), "text": text}


def _print_response(r: httpx.Response) -> None:
    try:
        body = r.json()
    except ValueError:
        # Proxies and crashed upstreams answer with HTML or plain text
        body = None
    if not isinstance(body, dict):
        click.secho(
            f"Error {r.status_code}: unexpected response: {r.text[:200]}",
            fg="red",
            err=True,
        )
        sys.exit(1)
    if r.is_success:
        click.echo(_pretty_json(body.get("data")))
        return
    click.secho(f"Error {r.status_code}: {body.get('error', body)}", fg="red", err=True)
    sys.exit(1)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="acikkuran")
def main():
    """Açık Kuran user translations API."""


@main.command()
@click.option("--host", default=None, help="Bind address (default from settings)")
@click.option("--port", default=None, type=int, help="Port (default from settings)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from acikkuran.config import settings

    uvicorn.run(
        "acikkuran.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command("verify-token")
@click.argument("token")
def verify_token_cmd(token: str):
    """Verify TOKEN against the configured secret and print its identity."""
    from acikkuran.auth.jwt import verify_token
    from acikkuran.config import settings
    from acikkuran.errors import AppError

    try:
        identity = verify_token(token, settings.jwt_secret)
    except AppError as e:
        click.secho(f"{e.code}: {e}", fg="red", err=True)
        sys.exit(1)

    click.echo(_pretty_json({"id": identity.id, "email": identity.email, "name": identity.name}))


@main.command()
@click.argument("user_id")
@click.argument("verse_id", type=int)
def get(user_id: str, verse_id: int):
    """Show USER_ID's translation of VERSE_ID."""
    asyncio.run(_get_impl(user_id, verse_id))


async def _get_impl(user_id: str, verse_id: int):
    async with _client() as c:
        r = await c.get(
            "/user/translation", params={"user_id": user_id, "verse_id": verse_id}
        )
        _print_response(r)


@main.command()
@click.argument("verse_id", type=int)
@click.argument("text")
@click.option(
    "--footnote", "-f", "footnotes", multiple=True,
    help="Footnote as NUMBER:TEXT (repeatable)",
)
@click.option("--clear-footnotes", is_flag=True, help="Send an empty footnote list")
@click.option(
    "--token", envvar="ACIKKURAN_TOKEN", required=True,
    help="Bearer token (or set ACIKKURAN_TOKEN)",
)
def save(verse_id: int, text: str, footnotes: tuple[str, ...],
         clear_footnotes: bool, token: str):
    """Save TEXT as your translation of VERSE_ID.

    Without --footnote or --clear-footnotes the stored footnotes are kept.
    """
    body: dict = {"verse_id": verse_id, "text": text}
    if footnotes or clear_footnotes:
        body["footnotes"] = [parse_footnote(f) for f in footnotes]
    asyncio.run(_save_impl(body, token))


async def _save_impl(body: dict, token: str):
    async with _client(token) as c:
        r = await c.post("/user/translation", json=body)
        _print_response(r)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()
