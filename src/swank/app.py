"""Typer application and CLI entry point for swank.

This module wires together the top-level Typer application and registers the
built-in sub-commands (``validate``, ``paths``, ``tags``, ``config``,
``cache``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers, registers commands, and
finally invokes the Typer app. Unhandled exceptions are written to a crash
log under the data directory.

See Also:
    :mod:`swank.config`: Global configuration resolution.
    :mod:`swank.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer
from rich.logging import RichHandler

from swank import __version__
from swank.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="swank",
    help="Validate Swagger/OpenAPI documents and regroup their paths.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"swank {__version__}")
        raise typer.Exit()


def _configure_logging(console: Any, verbose: bool) -> None:
    """Route the ``swank`` loggers to a Rich handler on stderr.

    Warnings and errors are always shown; ``--verbose`` adds rule
    violations (INFO) and stage transitions (DEBUG).
    """
    package_logger = logging.getLogger("swank")
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)

    handler = RichHandler(console=console, show_time=False, show_path=False)
    handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.addHandler(handler)
    if verbose:
        package_logger.setLevel(logging.DEBUG)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Skip confirmations."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~swank.output.OutputManager` from CLI
    flags, attaches the Rich log handler, and stores shared options in the
    Typer context so that sub-commands can read them via ``ctx.obj``.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
        force: Skip interactive confirmations.
    """
    from swank.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    cli_format: Optional[str] = None
    if json_output:
        fmt = OutputFormat.JSON
        cli_format = fmt.value
    elif plain_output:
        fmt = OutputFormat.PLAIN
        cli_format = fmt.value

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
    )
    set_output(output)
    _configure_logging(output.stderr_console, verbose)

    ctx.ensure_object(dict)
    ctx.obj["format"] = cli_format
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path.

    Args:
        exc: The unhandled exception to log.

    Returns:
        Absolute path to the written crash log file.
    """
    from swank.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def register_commands() -> None:
    """Attach the built-in sub-commands to :data:`app` (idempotent)."""
    if getattr(app, "_swank_registered", False):
        return
    from swank.commands.cache import cache_app
    from swank.commands.config import config_app
    from swank.commands.validate import paths_command, tags_command, validate_command

    app.command("validate")(validate_command)
    app.command("paths")(paths_command)
    app.command("tags")(tags_command)
    app.add_typer(config_app, name="config", help="Configuration management.")
    app.add_typer(cache_app, name="cache", help="Schema cache management.")
    app._swank_registered = True  # type: ignore[attr-defined]


def main() -> None:
    """CLI entry point invoked by the ``swank`` console script.

    Performs the following sequence:

    1. Install signal handlers for clean Ctrl-C behaviour.
    2. Register built-in sub-commands.
    3. Invoke the Typer application.

    Unhandled :class:`~swank.exceptions.SwankError` instances cause a clean
    exit with the error's ``exit_code``. All other exceptions produce a crash
    log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        register_commands()
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from swank.exceptions import SwankError
        from swank.output import error

        if isinstance(exc, SwankError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
