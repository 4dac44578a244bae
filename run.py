#!/usr/bin/env python3
"""
Application Entry Script.

Usage:
    python run.py --help
    python run.py --action server --reload --verbose
    python run.py --action config
    python run.py --action token --user-id 3f6c...
    python run.py --action info
"""

import subprocess
import sys
from pathlib import Path

import click

# Ensure project root is in path for absolute imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from modules.backend.core.logging import get_logger, setup_logging


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


@click.command()
@click.option(
    "--action",
    type=click.Choice(["server", "config", "token", "info"]),
    default="info",
    help="Action to perform.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable INFO level logging.")
@click.option("--debug", "-d", is_flag=True, help="Enable DEBUG level logging.")
@click.option("--host", default=None, help="Server host (for server action).")
@click.option("--port", default=None, type=int, help="Server port (for server action).")
@click.option("--reload", is_flag=True, help="Enable auto-reload (for server action).")
@click.option("--user-id", default=None, help="Token subject (for token action).")
def main(
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    user_id: str | None,
) -> None:
    """
    Notes Workspace entry point.

    Run the API server, view configuration, or mint a development
    access token for the client package.
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    logger = get_logger(__name__)

    logger.debug("Starting application", extra={"action": action, "log_level": log_level})

    if action == "server":
        run_server(logger, host, port, reload)
    elif action == "config":
        show_config(logger)
    elif action == "token":
        issue_token(logger, user_id)
    elif action == "info":
        show_info(logger)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start the API server with uvicorn."""
    from modules.backend.core.config import get_app_config

    server = get_app_config().application.server
    server_host = host or server.host
    server_port = port or server.port

    logger.info(
        "Starting server",
        extra={"host": server_host, "port": server_port, "reload": reload},
    )

    cmd = [
        sys.executable, "-m", "uvicorn",
        "modules.backend.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]
    if reload:
        cmd.append("--reload")

    click.echo(f"Starting server at http://{server_host}:{server_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def show_config(logger) -> None:
    """Display the validated YAML configuration, one section per file."""
    from modules.backend.core.config import get_app_config

    try:
        app_config = get_app_config()
    except Exception as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)

    sections = [
        "application", "database", "logging", "features", "security",
        "observability", "concurrency", "storage", "ai", "client",
    ]
    for section in sections:
        click.echo(f"\n{section}.yaml")
        click.echo("-" * 40)
        _echo_mapping(getattr(app_config, section).model_dump(), indent=2)

    logger.info("Configuration displayed successfully")


def _echo_mapping(values: dict, indent: int) -> None:
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{' ' * indent}{key}:")
            _echo_mapping(value, indent + 2)
        else:
            click.echo(f"{' ' * indent}{key}: {value}")


def issue_token(logger, user_id: str | None) -> None:
    """Print a development bearer token for the given user id."""
    from modules.backend.core.security import create_access_token

    if not user_id:
        click.echo(click.style("Error: --user-id is required for the token action.", fg="red"), err=True)
        sys.exit(2)

    try:
        token = create_access_token({"sub": user_id})
    except Exception as e:
        logger.error("Failed to create token", extra={"error": str(e)})
        click.echo(click.style(f"Error creating token: {e}", fg="red"), err=True)
        click.echo("Note: JWT_SECRET must be set in config/.env.", err=True)
        sys.exit(1)

    logger.info("Development token issued", extra={"user_id": user_id})
    click.echo(token)


def show_info(logger) -> None:
    """Display application information."""
    from modules.backend.core.config import get_app_config

    app = get_app_config().application
    click.echo(app.name)
    click.echo("=" * 40)
    click.echo(f"Version: {app.version}")
    click.echo(f"Description: {app.description}")
    click.echo()
    click.echo("Available Actions:")
    click.echo("  --action server   Start the API server")
    click.echo("  --action config   Display configuration")
    click.echo("  --action token    Print a development access token (--user-id)")
    click.echo("  --action info     Show this information")
    click.echo()
    click.echo("Logging Options:")
    click.echo("  --verbose, -v     Enable INFO level logging")
    click.echo("  --debug, -d       Enable DEBUG level logging")

    logger.debug("Info displayed")


if __name__ == "__main__":
    main()
