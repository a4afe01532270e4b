"""Typer application and ``cacheable`` console-script entry point."""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from cacheable import __version__
from cacheable.commands.cache import cache_app
from cacheable.commands.config import config_app
from cacheable.commands.request import fetch_command, key_command
from cacheable.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED


app = typer.Typer(
    name="cacheable",
    help="Inspect and use the cacheable HTTP response cache.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("key")(key_command)
app.command("fetch")(fetch_command)
app.add_typer(cache_app, name="cache", help="Disk cache management.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"cacheable {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show cache decisions and debug output."),
) -> None:
    """Install the output manager; ``--verbose`` also turns on library debug logging."""
    from cacheable.output import OutputFormat, OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = OutputFormat.AUTO
    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="[debug] %(name)s: %(message)s")
        for noisy in ("httpcore", "httpx"):
            logging.getLogger(noisy).setLevel(logging.WARNING)


def _on_sigint(signum: int, frame: Any) -> None:
    sys.stderr.write("\nCancelled.\n")
    sys.exit(EXIT_INTERRUPTED)


def _write_crash_log() -> str:
    from cacheable.config import get_data_dir

    log_path = get_data_dir() / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """Run the CLI, mapping :class:`~cacheable.exceptions.CacheableError` to its exit code."""
    from cacheable.exceptions import CacheableError
    from cacheable.output import error

    signal.signal(signal.SIGINT, _on_sigint)
    try:
        app()
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except CacheableError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception:
        error(f"Unexpected error. Debug log: {_write_crash_log()}")
        sys.exit(EXIT_GENERIC_FAILURE)
