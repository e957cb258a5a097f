#!/usr/bin/env python3
"""
Main CLI entry point for the IntelHub backend server.
"""

import asyncio
import os
import sys

import click
import uvicorn

from intelhub import __version__
from intelhub.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="intelhub")
def cli() -> None:
    """IntelHub CLI - run the server and manage access."""


@cli.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
@click.option("--port", default=4000, type=int, help="Port to bind to (default: 4000)")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
@click.option(
    "--workers",
    default=1,
    type=int,
    help="Number of worker processes (default: 1)",
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, workers: int, log_level: str) -> None:
    """Start the IntelHub API server."""
    configure_logging(debug=(log_level == "debug"))

    logger.info(
        "Starting IntelHub API server",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )

    # The app reads these at import time in reload/worker subprocesses
    if log_level == "debug":
        os.environ["INTELHUB_DEBUG"] = "true"
        os.environ["INTELHUB_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("INTELHUB_DEBUG", "false")
        os.environ.setdefault("INTELHUB_LOG_LEVEL", log_level)

    try:
        if reload or workers > 1:
            uvicorn.run(
                "intelhub.api.app:app",
                host=host,
                port=port,
                reload=reload,
                workers=(workers if not reload else 1),
                log_level=log_level,
                access_log=True,
            )
        else:
            from intelhub.api.app import app

            uvicorn.run(app, host=host, port=port, log_level=log_level, access_log=True)
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command()
@click.option(
    "--skip-admin",
    is_flag=True,
    default=False,
    help="Only seed capabilities and built-in roles",
)
def seed(skip_admin: bool) -> None:
    """Seed capabilities, built-in roles and the administrator."""
    from intelhub.database.connection import get_async_session
    from intelhub.database.seed_data import seed_platform

    configure_logging()

    async def do_seed():
        async with get_async_session() as db:
            return await seed_platform(db, with_admin=not skip_admin)

    try:
        admin = asyncio.run(do_seed())
    except Exception as e:
        logger.error("Failed to seed platform", error=str(e))
        click.echo(f"✗ Error seeding platform: {e}", err=True)
        sys.exit(1)

    click.echo("✓ Capabilities and roles seeded")
    if admin is not None:
        click.echo(f"✓ Administrator: {admin.email} ({admin.id})")


@cli.command("create-user")
@click.option("--email", required=True, help="Login email")
@click.option("--password", required=True, prompt=True, hide_input=True, help="Password")
@click.option("--name", default=None, help="Display name (defaults to the email)")
@click.option("--role", "roles", multiple=True, help="Role to grant (repeatable)")
def create_user(email: str, password: str, name: str | None, roles: tuple[str, ...]) -> None:
    """Create a user able to log in."""
    from intelhub.database.connection import get_async_session
    from intelhub.domain.users import add_user

    configure_logging()

    async def do_create():
        async with get_async_session() as db:
            return await add_user(
                db, name=name or email, email=email, password=password, roles=list(roles)
            )

    try:
        user = asyncio.run(do_create())
    except Exception as e:
        logger.error("Failed to create user", error=str(e))
        click.echo(f"✗ Error creating user: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ User created: {user.id}")
    click.echo(f"  Email: {user.email}")
    click.echo(f"  API token: {user.api_token}")


if __name__ == "__main__":
    cli()
