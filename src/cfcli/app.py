"""Typer application factory and CLI entry point for cfcli.

This module wires together the top-level Typer application, registers the
built-in sub-commands (``gen``, ``list``, ``describe``, ``tree``, ``api``,
``config``), and resolves every other command name against the compiled
command tree.

Tree-derived commands are resolved lazily by :class:`CfcliGroup`: click has
already parsed the root options when a sub-command name is looked up, so
``--tree`` and ``--endpoint`` are honoured and built-in commands keep
working when no tree has been generated yet. A resource whose name equals
a built-in command is shadowed by it (logged at debug level).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Unhandled exceptions are written to a crash log under
the data directory.

See Also:
    :mod:`cfcli.config`: Settings resolution.
    :mod:`cfcli.output`: Output manager initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer
from typer.core import TyperGroup

from cfcli import __version__
from cfcli.exceptions import CfcliError, TreeLoadError
from cfcli.exit_codes import EXIT_GENERIC_FAILURE

logger = logging.getLogger(__name__)


class CfcliGroup(TyperGroup):
    """Root command group that falls back to the command tree.

    Built-in commands win; any other name is looked up among the tree's
    resources. :class:`~cfcli.exceptions.CfcliError` raised while resolving
    or running a command is reported on stderr and turned into the error's
    exit code.
    """

    def list_commands(self, ctx: typer.Context) -> list[str]:
        names = list(super().list_commands(ctx))
        from cfcli.commands.dynamic import get_tree

        try:
            tree = get_tree(ctx)
        except CfcliError as exc:
            logger.debug("Command tree unavailable: %s", exc)
            return names
        for resource in tree.resources:
            if not resource.name:
                continue
            if resource.name in names:
                logger.debug(
                    "Resource %s is shadowed by the built-in command of the same name",
                    resource.name,
                )
                continue
            names.append(resource.name)
        return names

    def get_command(self, ctx: typer.Context, cmd_name: str) -> Optional[Any]:
        command = super().get_command(ctx, cmd_name)
        if command is not None:
            return command

        from cfcli.commands.dynamic import build_resource_group, get_tree

        resource = get_tree(ctx).find_resource(cmd_name)
        if resource is None or not resource.name:
            return None
        return build_resource_group(resource)

    def invoke(self, ctx: typer.Context) -> Any:
        try:
            return super().invoke(ctx)
        except CfcliError as exc:
            _report_error(exc)
            raise typer.Exit(code=exc.exit_code) from None


app = typer.Typer(
    name="cfcli",
    cls=CfcliGroup,
    help="Cloudflare API command line, generated from the OpenAPI schema.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"cfcli {__version__}")
        raise typer.Exit()


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
    pretty: bool = typer.Option(
        False, "--pretty", help="Pretty-print JSON output."
    ),
    raw: bool = typer.Option(
        False, "--raw", help="Print the full response envelope instead of 'result'."
    ),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Extra request header NAME:VALUE (repeatable)."
    ),
    endpoint: Optional[str] = typer.Option(
        None, "--endpoint", help="API base URL (overrides CLOUDFLARE_API_URL)."
    ),
    tree: Optional[str] = typer.Option(
        None, "--tree", help="Command tree file (overrides CFCLI_TREE)."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print requests without sending them."
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
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~cfcli.output.OutputManager` from CLI
    flags and stores the shared options in ``ctx.obj``. ``--endpoint`` and
    ``--tree`` are read from the root context's parameters by
    :func:`~cfcli.commands.dynamic.get_settings`.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        pretty: Indent JSON output.
        raw: Do not unwrap the ``result`` member of responses.
        header: Extra ``NAME:VALUE`` request headers.
        endpoint: API base URL override (highest precedence).
        tree: Command tree path override (highest precedence).
        dry_run: Print requests instead of sending them.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
    """
    from cfcli.client.request import parse_key_values
    from cfcli.output import OutputManager, set_output

    set_output(OutputManager(pretty=pretty, no_color=no_color, quiet=quiet, verbose=verbose))
    if verbose:
        _configure_logging(no_color)

    ctx.ensure_object(dict)
    ctx.obj["pretty"] = pretty
    ctx.obj["raw"] = raw
    ctx.obj["headers"] = parse_key_values(header)
    ctx.obj["dry_run"] = dry_run
    ctx.obj["verbose"] = verbose


def _configure_logging(no_color: bool) -> None:
    """Route ``cfcli`` debug logs to stderr through Rich."""
    from rich.console import Console
    from rich.logging import RichHandler

    handler = RichHandler(
        console=Console(stderr=True, no_color=no_color),
        show_time=False,
        show_path=False,
    )
    package_logger = logging.getLogger("cfcli")
    package_logger.handlers[:] = [handler]
    package_logger.setLevel(logging.DEBUG)


# ------------------------------------------------------------------ #
# Built-in commands
# ------------------------------------------------------------------ #

from cfcli.commands.api import api_command  # noqa: E402
from cfcli.commands.config import config_app  # noqa: E402
from cfcli.commands.gen import gen_command  # noqa: E402
from cfcli.commands.inspect import describe_command, list_command, tree_command  # noqa: E402

app.command("gen")(gen_command)
app.command("list")(list_command)
app.command("describe")(describe_command)
app.command("tree")(tree_command)
app.command("api")(api_command)
app.add_typer(config_app, name="config", help="Configuration management.")


def _report_error(exc: CfcliError) -> None:
    from cfcli.output import error, suggest

    error(str(exc))
    if isinstance(exc, TreeLoadError):
        suggest("Run: cfcli gen")


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
    from cfcli.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``cfcli`` console script.

    Installs signal handlers and invokes the Typer application.
    :class:`~cfcli.exceptions.CfcliError` instances that escape the command
    group cause a clean exit with the error's ``exit_code``. All other
    exceptions produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except CfcliError as exc:
        _report_error(exc)
        sys.exit(exc.exit_code)
    except Exception as exc:
        from cfcli.output import error

        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
