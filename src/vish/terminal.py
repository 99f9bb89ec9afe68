"""Terminal abstraction for raw-mode byte-level stdin/stdout interaction.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal``
implementation that owns the raw-mode state of the controlling terminal,
reads one byte at a time, writes editing feedback as ANSI escape
sequences, and exposes the driver's live control-character table.
"""

from __future__ import annotations

import contextlib
import logging
import os
import subprocess
import termios
from dataclasses import dataclass
from typing import Iterator, Protocol

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

NEWLINE = 0x0A

ERASE_CHAR = b"\x08 \x08"
CURSOR_LEFT = b"\x1b[D"
CURSOR_RIGHT = b"\x1b[C"
CLEAR_LINE = b"\x1b[2K\r"

# Values a driver uses for a disabled control character (_POSIX_VDISABLE).
_DISABLED_CC = frozenset({0x00, 0xFF})

_VWERASE = getattr(termios, "VWERASE", None)
_VREPRINT = getattr(termios, "VREPRINT", None)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TerminalIOError(OSError):
    """Reading, writing or configuring the terminal failed."""


class RawModeUnsupportedError(TerminalIOError):
    """The input device does not support terminal attribute changes."""


# ---------------------------------------------------------------------------
# Control-character table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ControlChars:
    """Editing control bytes configured in the terminal driver.

    A field is ``None`` when the character is disabled (or the platform
    does not define it).
    """

    erase: int | None = 0x7F
    word_erase: int | None = 0x17
    kill: int | None = 0x15
    reprint: int | None = 0x12
    eof: int | None = 0x04

    @classmethod
    def from_cc(cls, cc: list) -> ControlChars:
        return cls(
            erase=_cc_byte(cc, termios.VERASE),
            word_erase=_cc_byte(cc, _VWERASE),
            kill=_cc_byte(cc, termios.VKILL),
            reprint=_cc_byte(cc, _VREPRINT),
            eof=_cc_byte(cc, termios.VEOF),
        )


def _cc_byte(cc: list, index: int | None) -> int | None:
    if index is None or index >= len(cc):
        return None
    value = cc[index]
    if isinstance(value, (bytes, bytearray)):
        if not value:
            return None
        value = value[0]
    if value in _DISABLED_CC:
        return None
    return value


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for byte-level terminal I/O operations."""

    @property
    def is_raw(self) -> bool: ...

    def enable_raw_mode(self) -> None: ...

    def disable_raw_mode(self) -> None: ...

    def control_chars(self) -> ControlChars: ...

    def read_byte(self) -> int | None: ...

    def write(self, data: bytes) -> None: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Terminal backed by the process's stdin/stdout file descriptors.

    Holds two attribute snapshots: the original (canonical) mode, which is
    never mutated, and the working mode, which only differs by having
    ``ICANON`` and ``ECHO`` cleared.
    """

    def __init__(self, input_fd: int = 0, output_fd: int = 1) -> None:
        self._input_fd = input_fd
        self._output_fd = output_fd
        try:
            attrs = termios.tcgetattr(input_fd)
        except termios.error as e:
            raise RawModeUnsupportedError(*_error_args(e)) from e
        self._default: list = _copy_attrs(attrs)
        self._working: list = _copy_attrs(attrs)
        self._working[3] &= ~(termios.ICANON | termios.ECHO)
        self._raw = False

    # -- properties ---------------------------------------------------------

    @property
    def is_raw(self) -> bool:
        return self._raw

    @property
    def default_attributes(self) -> list:
        return _copy_attrs(self._default)

    # -- raw mode -----------------------------------------------------------

    def enable_raw_mode(self) -> None:
        """Apply the working attributes (canonical processing and echo off)."""
        try:
            termios.tcsetattr(self._input_fd, termios.TCSANOW, self._working)
        except termios.error as e:
            raise TerminalIOError(*_error_args(e)) from e
        self._raw = True
        logger.debug("Raw mode enabled on fd %d", self._input_fd)

    def disable_raw_mode(self) -> None:
        """Restore the original attributes.

        On failure, ``stty sane`` is run against the terminal before the
        error is propagated.
        """
        try:
            termios.tcsetattr(self._input_fd, termios.TCSANOW, self._default)
        except termios.error as e:
            logger.warning("Restoring terminal attributes failed; running stty sane")
            _reset_terminal(self._input_fd)
            raise TerminalIOError(*_error_args(e)) from e
        self._raw = False
        logger.debug("Raw mode disabled on fd %d", self._input_fd)

    @contextlib.contextmanager
    def raw_mode(self) -> Iterator[ProcessTerminal]:
        """Hold raw mode for the duration of the ``with`` block."""
        self.enable_raw_mode()
        try:
            yield self
        finally:
            self.disable_raw_mode()

    # -- control characters -------------------------------------------------

    def control_chars(self) -> ControlChars:
        """Read the control-character table from the current configuration."""
        try:
            attrs = termios.tcgetattr(self._input_fd)
        except termios.error as e:
            raise TerminalIOError(*_error_args(e)) from e
        return ControlChars.from_cc(attrs[6])

    # -- byte I/O -----------------------------------------------------------

    def read_byte(self) -> int | None:
        """Block until one byte is available; None when the stream closes."""
        try:
            data = os.read(self._input_fd, 1)
        except OSError as e:
            raise TerminalIOError(e.errno, e.strerror) from e
        if not data:
            return None
        return data[0]

    def write(self, data: bytes) -> None:
        view = memoryview(data)
        try:
            while view:
                written = os.write(self._output_fd, view)
                view = view[written:]
        except OSError as e:
            raise TerminalIOError(e.errno, e.strerror) from e


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _copy_attrs(attrs: list) -> list:
    copied = list(attrs)
    copied[6] = list(attrs[6])
    return copied


def _error_args(error: termios.error) -> tuple:
    if len(error.args) == 2:
        return error.args
    return (None, str(error))


def _reset_terminal(fd: int) -> None:
    """Last-resort reset of the terminal driver via ``stty sane``."""
    try:
        subprocess.run(["stty", "sane"], stdin=fd, check=False)
    except OSError:
        logger.exception("stty sane failed")

