"""Typer-based operator CLI for the relay."""

import os

os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

from pathlib import Path

_project_root = Path(__file__).resolve().parent.parent.parent
from dotenv import load_dotenv

load_dotenv(_project_root / ".env")
load_dotenv(_project_root / ".env.local")

import asyncio
import json

import httpx
import typer

from src.config import get_settings
from src.constants import KNOWN_MESSAGE_TAGS
from src.exceptions import SenderNotConfiguredError
from src.logging_config import redact_tokens
from src.services.messaging_protocol import get_messaging_service

app = typer.Typer(help="Messenger sensor relay")


@app.command()
def serve(
    host: str = typer.Option(None, help="Bind address (defaults to HOST)"),
    port: int = typer.Option(None, help="Listen port (defaults to PORT)"),
    reload: bool = typer.Option(False, help="Auto-reload on code changes"),
):
    """Run the relay HTTP server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@app.command()
def send(
    psid: str = typer.Argument(..., help="Recipient PSID"),
    text: str = typer.Argument(..., help="Message text"),
    tag: str = typer.Option(
        None,
        help=f"Message tag for sends outside the 24h window ({', '.join(KNOWN_MESSAGE_TAGS)})",
    ),
):
    """Send a single message through the Send API and print the response."""
    settings = get_settings()
    sender = get_messaging_service(settings)

    try:
        result = asyncio.run(sender.send_text(psid, text, tag))
    except SenderNotConfiguredError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    except httpx.RequestError as e:
        typer.secho(f"Request failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo(json.dumps(result, indent=2))
    if "error" in result:
        raise typer.Exit(code=1)


@app.command()
def config():
    """Show the effective configuration with secrets masked."""
    settings = get_settings()
    typer.echo(json.dumps(redact_tokens(settings.model_dump()), indent=2))


if __name__ == "__main__":
    app()
