"""Command line entry point: serve the RPC interface or run one command locally."""

import asyncio
import sys

import click
import uvicorn

from dockerd.core.config import Settings
from dockerd.core.logging import setup_logging
from dockerd.domain.errors import DockerdError
from dockerd.main import build_dispatcher, create_app
from dockerd.services.streams import FileInput, FileOutput


@click.group()
@click.option("--log-level", default=None, help="Override DOCKERD_LOG_LEVEL.")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """dockerd: run commands against an in-memory registry of layers and containers."""
    settings = Settings()
    if log_level:
        settings.LOG_LEVEL = log_level
    ctx.obj = settings


@cli.command()
@click.option("--host", default=None, help="Interface to listen on.")
@click.option("--port", type=int, default=None, help="Port to listen on.")
@click.pass_obj
def serve(settings: Settings, host: str | None, port: int | None) -> None:
    """Serve commands over HTTP."""
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    # uvicorn exits the process if the endpoint cannot be bound
    uvicorn.run(
        create_app(settings),
        host=host or settings.HOST,
        port=port or settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


@cli.command(
    "exec",
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
)
@click.argument("command", required=False, default="")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def exec_command(settings: Settings, command: str, args: tuple[str, ...]) -> None:
    """Run one COMMAND in-process, e.g. `dockerd exec help run`."""
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    dispatcher = build_dispatcher(settings)
    stdin = FileInput(click.get_binary_stream("stdin"))
    stdout = FileOutput(click.get_binary_stream("stdout"))
    try:
        asyncio.run(dispatcher.dispatch(command, stdin, stdout, list(args)))
    except DockerdError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


def main() -> None:
    cli()
