"""CLI entry point for vish. Uses Click for argument parsing."""

from __future__ import annotations

import io
import logging
import sys

import click

from vish.app import handle_batch_mode, handle_interactive_mode
from vish.config import LOG_LEVELS, ShellConfig
from vish.environment import ShellEnvironment
from vish.reader import LineEditor
from vish.terminal import ProcessTerminal, RawModeUnsupportedError

logger = logging.getLogger(__name__)


def _configure_logging(config: ShellConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        filename=config.log_file,
    )


def _open_terminal() -> ProcessTerminal | None:
    """Open the controlling terminal on stdin/stdout, None when there is none."""
    try:
        input_fd = sys.stdin.fileno()
        output_fd = sys.stdout.fileno()
    except (AttributeError, ValueError, io.UnsupportedOperation):
        return None
    try:
        return ProcessTerminal(input_fd, output_fd)
    except RawModeUnsupportedError:
        return None


@click.command()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS),
    default=None,
    help="Logging level (default: warning, or $VISH_LOG_LEVEL)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write log records to this file instead of stderr",
)
@click.option(
    "--field-substitution/--no-field-substitution",
    default=None,
    help="Classify tokens as fields ($VAR, ${VAR}, $(...), ...) before dispatch",
)
def main(log_level, log_file, field_substitution):
    """Interactive command-line shell."""
    config = ShellConfig.from_env()
    if log_level is not None:
        config.log_level = log_level
    if log_file is not None:
        config.log_file = log_file
    if field_substitution is not None:
        config.field_substitution = field_substitution
    _configure_logging(config)

    env = ShellEnvironment()
    terminal = _open_terminal()
    if terminal is None:
        logger.info("stdin is not a terminal; running in batch mode")
        status = handle_batch_mode(sys.stdin, env, config)
    else:
        status = handle_interactive_mode(LineEditor(terminal), env, config)
    sys.exit(status)


if __name__ == "__main__":
    main()
