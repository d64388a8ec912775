"""Command line interface for dispatching a JWE to its pin plugin."""

from __future__ import annotations

import logging
import sys

import typer
from typer.core import TyperCommand

from .config import load_config
from .dispatch import PinDispatcher
from .errors import DispatchError, UsageError

app = typer.Typer(
    help="Decrypt a JWE read from standard input using its pin plugin",
    add_completion=False,
)

LOG_FORMAT = "%(name)s: %(levelname)s: %(message)s"
RAW_ARGS_KEY = "clevis_decrypt.raw_args"


class RawArgsCommand(TyperCommand):
    """Command that keeps its argument list as given, before click drops ``--``."""

    def parse_args(self, ctx, args):
        ctx.meta[RAW_ARGS_KEY] = list(args)
        return super().parse_args(ctx, args)


def _configure_logging(level: str) -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if not root_logger.handlers:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(console_handler)


@app.command(
    cls=RawArgsCommand,
    add_help_option=False,
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def main(ctx: typer.Context) -> None:
    """
    Read a JWE on stdin and run the pin plugin that can decrypt it.

    The plugin ``<cmd_dir>/pins/<pin>`` receives the JWE in canonical JSON form
    on its stdin and the argument ``decrypt``. Its exit status and output
    become this command's result.

    Example:
        clevis-decrypt < secret.jwe
        CLEVIS_CMD_DIR=/opt/clevis clevis-decrypt < secret.jwe
    """
    if ctx.meta.get(RAW_ARGS_KEY) or ctx.args:
        prog = ctx.find_root().info_name or "clevis-decrypt"
        typer.echo(f"Usage: {prog} < JWE", err=True)
        raise typer.Exit(code=UsageError.exit_code)

    try:
        config = load_config()
        _configure_logging(config.log_level)
        dispatcher = PinDispatcher(config=config)
        status = dispatcher.dispatch_stream(typer.get_binary_stream("stdin"))
    except DispatchError as exc:
        typer.echo(exc.message, err=True)
        raise typer.Exit(code=exc.exit_code)
    raise typer.Exit(code=status)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()
