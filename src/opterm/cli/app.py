"""Typer CLI application."""

from dataclasses import replace
from pathlib import Path
from typing import Annotated, Callable, Optional, TypeVar

import typer
from rich.console import Console

import opterm
from opterm.config import TerminalConfig
from opterm.core.errors import TerminalError
from opterm.core.geometry import ScreenGeometry
from opterm.terminal.context import TerminalContext, run, stdio_fds

T = TypeVar("T")

err_console = Console(stderr=True)


def _fail(exc: TerminalError) -> typer.Exit:
    """Print a diagnostic naming the failed operation; the terminal is already restored."""
    err_console.print(f"[bold red]opterm:[/] {exc}", highlight=False)
    return typer.Exit(1)


def _guarded(body: Callable[[TerminalContext], T], config: TerminalConfig, force_fallback: bool = False) -> T:
    try:
        return run(body, config=config, force_fallback=force_fallback)
    except TerminalError as e:
        raise _fail(e) from e


def _load_config(fallback_size: Optional[str]) -> TerminalConfig:
    try:
        config = TerminalConfig.from_env()
        if fallback_size:
            config = replace(config, fallback_geometry=ScreenGeometry.parse(fallback_size))
    except ValueError as e:
        err_console.print(f"[bold red]opterm:[/] invalid configuration: {e}", highlight=False)
        raise typer.Exit(2)
    return config


def _version_callback(value: bool) -> None:
    if value:
        print(f"opterm {opterm.__version__}")
        raise typer.Exit()


def create_app() -> typer.Typer:
    """Create and configure the CLI application."""
    app = typer.Typer(
        name="opterm",
        help="Raw-mode terminal core: full-screen rendering and key decoding.",
        no_args_is_help=True,
        rich_markup_mode="rich",
    )
    console = Console()

    @app.callback()
    def main(
        log_file: Annotated[Optional[Path], typer.Option("--log-file", help="Write debug logs to this file")] = None,
        log_level: Annotated[str, typer.Option("--log-level", help="Log level for --log-file")] = "INFO",
        version: Annotated[bool, typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version and exit")] = False,
    ) -> None:
        """Raw-mode terminal core: full-screen rendering and key decoding."""
        if log_file is not None:
            from opterm.cli.logs import setup_logging
            try:
                setup_logging(log_file, log_level)
            except (OSError, ValueError) as e:
                err_console.print(f"[bold red]opterm:[/] cannot set up logging: {e}", highlight=False)
                raise typer.Exit(2)

    @app.command()
    def screen(
        fallback_size: Annotated[Optional[str], typer.Option("--fallback-size", help="ROWSxCOLS to use if the size cannot be discovered")] = None,
        banner: Annotated[bool, typer.Option("--banner/--no-banner", help="Show the welcome banner")] = True,
    ) -> None:
        """Full-screen demo: arrows move the cursor, Ctrl-Q quits."""
        from opterm.cli.screen import ScreenApp

        config = _load_config(fallback_size)
        _guarded(lambda term: ScreenApp(term, show_banner=banner).run(), config)

    @app.command()
    def keys() -> None:
        """Echo the bytes of each key press until 'q' or Ctrl-Q."""
        from opterm.cli.keys import KeyEchoApp
        from opterm.terminal.session import RawModeSession
        from opterm.terminal.stream import TerminalStream

        config = _load_config(None)
        try:
            stdin_fd, stdout_fd = stdio_fds()
            app = KeyEchoApp(
                TerminalStream(stdin_fd, stdout_fd),
                RawModeSession(stdin_fd, config),
                config,
            )
            app.run()
        except TerminalError as e:
            raise _fail(e) from e

    @app.command()
    def probe(
        fallback: Annotated[bool, typer.Option("--fallback", "-f", help="Skip the OS query and use a cursor position report")] = False,
    ) -> None:
        """Print the discovered screen geometry."""
        config = _load_config(None)
        geometry = _guarded(lambda term: term.geometry, config, force_fallback=fallback)
        console.print(f"[bold]Rows:[/] {geometry.rows}")
        console.print(f"[bold]Cols:[/] {geometry.cols}")

    return app
