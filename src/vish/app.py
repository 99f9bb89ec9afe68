"""Shell session loop: interactive, fallback and batch modes."""

from __future__ import annotations

import contextlib
import logging
import signal
import sys
from typing import Callable, Iterator, TextIO

from vish import commands
from vish.commands import CommandContext, ShellExit
from vish.config import ShellConfig
from vish.environment import ShellEnvironment
from vish.expand import expand_parameter
from vish.line_buffer import BufferDecodeError, LineBuffer
from vish.reader import LineEditor, ReadResult
from vish.terminal import TerminalIOError
from vish.tokenizer import parse_argv, split_argv

logger = logging.getLogger(__name__)

Dispatcher = Callable[[list[str], CommandContext], int]

UNTERMINATED_QUOTE = "vish: Syntax error: Unterminated quoted string"

_TERMINATING_SIGNALS = (signal.SIGTERM, signal.SIGHUP)


def tokenize(
    text: str, env: ShellEnvironment, config: ShellConfig
) -> tuple[list[str], str | None]:
    """Split a completed line into the argument vector to dispatch."""
    if config.field_substitution:
        return split_argv(text, env.get_var)
    argv, quote_char = parse_argv(text, env.get_var)
    return [expand_parameter(arg, env.get_var) for arg in argv], quote_char


def _run(argv: list[str], ctx: CommandContext, dispatch: Dispatcher) -> None:
    try:
        ctx.last_status = dispatch(argv, ctx)
    except KeyboardInterrupt:
        ctx.last_status = 130


@contextlib.contextmanager
def _exit_on_termination() -> Iterator[None]:
    """Turn SIGTERM/SIGHUP into SystemExit so teardown code runs."""

    def _raise_exit(signum: int, frame: object) -> None:
        raise SystemExit(128 + signum)

    previous = {sig: signal.getsignal(sig) for sig in _TERMINATING_SIGNALS}
    for sig in _TERMINATING_SIGNALS:
        signal.signal(sig, _raise_exit)
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


# ---------------------------------------------------------------------------
# Interactive mode
# ---------------------------------------------------------------------------


def handle_interactive_mode(
    editor: LineEditor,
    env: ShellEnvironment,
    config: ShellConfig,
    dispatch: Dispatcher = commands.dispatch,
) -> int:
    """Run the edited prompt loop until end-of-input or ``exit``.

    Raw mode is held for the whole session and released on every exit
    path; a failure to release it makes the session exit with status 1.
    """
    try:
        editor.enable_raw_mode()
    except TerminalIOError as e:
        logger.warning("Could not enable raw mode: %s", e)
        return handle_fallback_mode(sys.stdin, env, config, dispatch)

    status = 1
    try:
        with _exit_on_termination():
            status = _interactive_loop(editor, env, config, dispatch)
    finally:
        try:
            editor.disable_raw_mode()
        except TerminalIOError as e:
            print(f"vish: {e}", file=sys.stderr)
            status = 1
    return status


def _interactive_loop(
    editor: LineEditor,
    env: ShellEnvironment,
    config: ShellConfig,
    dispatch: Dispatcher,
) -> int:
    terminal = editor.terminal
    ctx = CommandContext(env=env, editor=editor)
    buffer = LineBuffer()
    continuing = False

    while True:
        if continuing:
            prompt = env.prompt("PS2").encode()
        else:
            prompt = env.prompt("PS1").encode()
            buffer.clear()

        try:
            terminal.write(prompt)
            result = editor.read_input(buffer, prompt)
        except KeyboardInterrupt:
            terminal.write(b"\n")
            continuing = False
            continue
        except TerminalIOError as e:
            print(f"vish: {e}", file=sys.stderr)
            return 1

        terminal.write(b"\n")

        if result is ReadResult.END_OF_INPUT:
            if not continuing:
                return ctx.last_status
            print(UNTERMINATED_QUOTE, file=sys.stderr)
            continuing = False
            continue

        try:
            text = buffer.as_text()
        except BufferDecodeError as e:
            print(f"vish: {e}", file=sys.stderr)
            continuing = False
            continue

        argv, quote_char = tokenize(text, env, config)
        if quote_char is not None:
            buffer.write(b"\n")
            continuing = True
            continue
        continuing = False

        if not argv:
            continue

        try:
            _run(argv, ctx, dispatch)
        except ShellExit as e:
            return e.code


# ---------------------------------------------------------------------------
# Unedited modes
# ---------------------------------------------------------------------------


def handle_fallback_mode(
    stream: TextIO,
    env: ShellEnvironment,
    config: ShellConfig,
    dispatch: Dispatcher = commands.dispatch,
) -> int:
    """Read prompted lines in the terminal's canonical mode."""
    print("Warning: Failed to disable canonical input mode.", file=sys.stderr)
    return _line_loop(stream, env, config, dispatch, prompts=True)


def handle_batch_mode(
    stream: TextIO,
    env: ShellEnvironment,
    config: ShellConfig,
    dispatch: Dispatcher = commands.dispatch,
) -> int:
    """Execute the lines of a non-interactive input stream."""
    return _line_loop(stream, env, config, dispatch, prompts=False)


def _line_loop(
    stream: TextIO,
    env: ShellEnvironment,
    config: ShellConfig,
    dispatch: Dispatcher,
    *,
    prompts: bool,
) -> int:
    ctx = CommandContext(env=env)
    pending = ""

    while True:
        if prompts:
            sys.stdout.write(env.prompt("PS2" if pending else "PS1"))
            sys.stdout.flush()

        line = stream.readline()
        if not line:
            break

        text = pending + line.rstrip("\n")
        argv, quote_char = tokenize(text, env, config)
        if quote_char is not None:
            pending = text + "\n"
            continue
        pending = ""

        if not argv:
            continue

        try:
            _run(argv, ctx, dispatch)
        except ShellExit as e:
            return e.code

    if pending:
        print(UNTERMINATED_QUOTE, file=sys.stderr)
        return 2
    if prompts:
        sys.stdout.write("\n")
    return ctx.last_status
