"""Builtin commands and external process dispatch."""

from __future__ import annotations

import logging
import os
import re
import subprocess
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from vish.terminal import TerminalIOError

if TYPE_CHECKING:
    from vish.environment import ShellEnvironment
    from vish.reader import LineEditor

logger = logging.getLogger(__name__)

_ESCAPE_RE = re.compile(r"\\x1b|\\033|\\e")


class ShellExit(Exception):
    """Raised by the ``exit`` builtin to end the session."""

    def __init__(self, code: int) -> None:
        super().__init__(code)
        self.code = code


@dataclass
class CommandContext:
    """State shared between the session loop and the commands it runs."""

    env: ShellEnvironment | None = None
    editor: LineEditor | None = None
    last_status: int = 0


Builtin = Callable[[list[str], CommandContext], int]


def _error(message: str) -> None:
    print(f"vish: {message}", file=sys.stderr)


def _reactivate_raw_mode(editor: LineEditor) -> None:
    try:
        editor.enable_raw_mode()
    except TerminalIOError as e:
        logger.warning("Re-enabling raw mode failed: %s", e)
        print("warning: failed to reactivate raw mode", file=sys.stderr)


# ---------------------------------------------------------------------------
# Builtins
# ---------------------------------------------------------------------------


def cd(argv: list[str], ctx: CommandContext) -> int:
    if len(argv) > 2:
        _error("cd: too many arguments")
        return 1

    if len(argv) < 2:
        home = os.environ.get("HOME")
        if home is None:
            _error("cd: HOME environment variable is not set")
            return 1
        target = home
    elif argv[1] == "-":
        target = os.environ.get("OLDPWD")
        if target is None:
            _error("cd: OLDPWD is not set")
            return 1
    else:
        target = argv[1]

    try:
        previous = os.getcwd()
    except OSError:
        _error("cd: current directory is unknown")
        return 1

    try:
        os.chdir(target)
    except OSError as e:
        _error(f"cd: {target} - {e.strerror}")
        return 1

    os.environ["PWD"] = os.getcwd()
    os.environ["OLDPWD"] = previous
    return 0


def pwd(argv: list[str], ctx: CommandContext) -> int:
    try:
        cwd = os.getcwd()
    except OSError:
        _error("pwd: can't retrieve current directory name")
        return 1
    print(cwd, flush=True)
    return 0


def echo(argv: list[str], ctx: CommandContext) -> int:
    print(" ".join(argv[1:]), flush=True)
    return 0


def replace_escape_sequence(text: str) -> str:
    """Turn the literal ``\\x1b``, ``\\033`` and ``\\e`` spellings into ESC."""
    return _ESCAPE_RE.sub("\x1b", text)


def printf(argv: list[str], ctx: CommandContext) -> int:
    for arg in argv[1:]:
        sys.stdout.write(replace_escape_sequence(arg))
    sys.stdout.flush()
    return 0


def exit_(argv: list[str], ctx: CommandContext) -> int:
    if len(argv) < 2:
        raise ShellExit(ctx.last_status)
    try:
        code = int(argv[1])
    except ValueError:
        code = -1
    if not 0 <= code <= 255:
        _error(f"exit: argument {argv[1]!r} is not a number")
        return 1
    raise ShellExit(code)


def exec_(argv: list[str], ctx: CommandContext) -> int:
    if len(argv) < 2:
        _error("exec: no command passed to exec")
        return 1

    editor = ctx.editor
    if editor is not None and editor.is_raw:
        try:
            editor.disable_raw_mode()
        except TerminalIOError:
            _error("exec: failed to cleanup environment...")
            return 1

    try:
        os.execvp(argv[1], argv[1:])
    except OSError as e:
        error = e
    if editor is not None:
        _reactivate_raw_mode(editor)

    if isinstance(error, FileNotFoundError):
        _error(f"{argv[1]}: Not found")
        return 127
    if isinstance(error, PermissionError):
        _error(f"{argv[1]}: Permission denied")
        return 126
    _error("Cannot execute command")
    return 1


BUILTINS: dict[str, Builtin] = {
    "cd": cd,
    "pwd": pwd,
    "echo": echo,
    "printf": printf,
    "exit": exit_,
    "exec": exec_,
    "true": lambda argv, ctx: 0,
    "false": lambda argv, ctx: 1,
}


# ---------------------------------------------------------------------------
# External commands
# ---------------------------------------------------------------------------


def run_command(argv: list[str], ctx: CommandContext) -> int:
    """Run *argv* as a child process with the terminal in its original mode."""
    editor = ctx.editor
    restore_raw = editor is not None and editor.is_raw
    if restore_raw:
        try:
            editor.disable_raw_mode()
        except TerminalIOError:
            _error(f"{argv[0]}: failed to cleanup environment...")
            return 1
    try:
        completed = subprocess.run(argv)
    except FileNotFoundError:
        _error(f"{argv[0]}: not found")
        return 127
    except PermissionError:
        _error(f"{argv[0]}: Permission denied")
        return 126
    finally:
        if restore_raw:
            _reactivate_raw_mode(editor)

    if completed.returncode < 0:
        return 128 - completed.returncode
    return completed.returncode


def dispatch(argv: list[str], ctx: CommandContext) -> int:
    """Run a builtin or an external command and return its status.

    Raises:
        ShellExit: when the ``exit`` builtin ends the session.
    """
    logger.debug("Dispatching %r", argv)
    builtin = BUILTINS.get(argv[0])
    if builtin is not None:
        return builtin(argv, ctx)
    return run_command(argv, ctx)
