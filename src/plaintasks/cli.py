"""Command-line interface for the PlainTasks language server."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from plaintasks import __version__
from plaintasks.config import ConfigError, ServerConfig, load_config
from plaintasks.console_logger import ConsoleLogger
from plaintasks.logging import Logger, LogLevel
from plaintasks.lsp.server import create_server

app = typer.Typer(
    help="PlainTasks language server - tag completion and task code actions over stdio",
    add_completion=False,
    no_args_is_help=False,
)
# stdout carries the LSP stream, so everything human-readable goes to stderr
console = Console(stderr=True)


def _configure_logging(level: LogLevel) -> None:
    """Route standard library logging from the LSP modules to stderr."""
    handler = RichHandler(console=console, show_path=False, markup=False)
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.to_stdlib())


def _resolve_level(option: Optional[str], config: ServerConfig, logger: Logger) -> LogLevel:
    if option is not None:
        try:
            return LogLevel.from_name(option)
        except ValueError as e:
            logger.error(f"[red]{e}[/red]")
            raise typer.Exit(1)
    if config.log_level is not None:
        return config.log_level
    return LogLevel.INFO


def _load_startup_config(config_path: Optional[Path], logger: Logger) -> ServerConfig:
    try:
        return load_config(Path.cwd(), config_path)
    except ConfigError as e:
        logger.error(f"[red]{e}[/red]")
        raise typer.Exit(1)


@app.command()
def serve(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit"
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Diagnostic verbosity: fatal, error, warn, info, debug or trace",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Extra config file applied after the machine, user and project configs",
        dir_okay=False,
    ),
) -> None:
    """Run the language server over stdin/stdout."""
    logger = ConsoleLogger(console)

    if version:
        logger.info(f"plaintasks-lsp version {__version__}")
        return

    config = _load_startup_config(config_path, logger)
    level = _resolve_level(log_level, config, logger)
    logger.push_level(level)
    _configure_logging(level)

    logger.debug(f"plaintasks-lsp {__version__} starting on stdio")
    server = create_server(config=config, config_path=config_path)
    server.start_io()


def main() -> None:
    """Entry point for the plaintasks-lsp script."""
    app()


if __name__ == "__main__":
    main()
