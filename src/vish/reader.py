"""Raw-mode terminal line editor.

``LineEditor`` turns the unbuffered byte stream of a raw-mode terminal into
one completed line, applying the editing controls (erase, word-erase,
kill, reprint, end-of-file) that the terminal driver would otherwise only
honor in canonical mode.
"""

from __future__ import annotations

import enum
import logging

import wcwidth

from vish.input_decoder import Arrow, Grapheme, InputDecoder
from vish.line_buffer import LineBuffer
from vish.terminal import (
    CLEAR_LINE,
    CURSOR_LEFT,
    CURSOR_RIGHT,
    ERASE_CHAR,
    NEWLINE,
    Terminal,
)

logger = logging.getLogger(__name__)


class ReadResult(enum.Enum):
    LINE = "line"
    END_OF_INPUT = "end-of-input"


def _is_whitespace_group(group: bytes) -> bool:
    return all(chr(b) in " \t\n\r\x0b\x0c" for b in group)


def erase_word(groups: list[bytes]) -> list[bytes]:
    """Remove the trailing whitespace run, then the word before it.

    Returns a new list; *groups* is left untouched.
    """
    end = len(groups)
    while end and _is_whitespace_group(groups[end - 1]):
        end -= 1
    while end and not _is_whitespace_group(groups[end - 1]):
        end -= 1
    return groups[:end]


def _display_width(group: bytes) -> int:
    try:
        text = group.decode("utf-8")
    except UnicodeDecodeError:
        return 1
    return wcwidth.wcswidth(text)


class LineEditor:
    """Reads and edits one line at a time from a raw-mode terminal.

    Left/Right arrows only move the terminal cursor: the logical edit
    position stays at the end of the line, so characters typed after a
    cursor move are still appended at the end.
    """

    def __init__(self, terminal: Terminal) -> None:
        self._terminal = terminal
        self._decoder = InputDecoder()
        self._groups: list[bytes] = []
        self._prompt = b""

    @property
    def terminal(self) -> Terminal:
        return self._terminal

    @property
    def is_raw(self) -> bool:
        return self._terminal.is_raw

    def enable_raw_mode(self) -> None:
        self._terminal.enable_raw_mode()

    def disable_raw_mode(self) -> None:
        self._terminal.disable_raw_mode()

    def read_input(self, buffer: LineBuffer, prompt: bytes = b"") -> ReadResult:
        """Block until a line is complete or end-of-input is reached.

        On ``ReadResult.LINE`` the line's bytes (without the newline) are
        written into *buffer* at its cursor. On ``ReadResult.END_OF_INPUT``
        the buffer is untouched.

        Raises:
            TerminalIOError: if reading or writing the terminal fails.
        """
        controls = self._terminal.control_chars()
        self._groups = []
        self._prompt = prompt
        self._decoder.reset()

        while True:
            byte = self._terminal.read_byte()
            if byte is None:
                if self._decoder.pending:
                    logger.debug(
                        "Input closed with incomplete unit %r; dropped",
                        self._decoder.pending,
                    )
                if not self._groups:
                    return ReadResult.END_OF_INPUT
                logger.debug("Input closed mid-line; completing line")
                break

            if byte == controls.erase:
                self._erase_char()
                continue

            if byte == controls.word_erase:
                self._groups = erase_word(self._groups)
                self._redraw()
                continue

            if byte == controls.kill:
                self._groups = []
                self._decoder.reset()
                self._redraw()
                continue

            if byte == controls.reprint:
                self._redraw()
                continue

            if byte == controls.eof:
                return ReadResult.END_OF_INPUT

            if byte == NEWLINE:
                break

            for event in self._decoder.feed(byte):
                self._handle_event(event)

        buffer.write(b"".join(self._groups))
        return ReadResult.LINE

    # -- event handling -----------------------------------------------------

    def _handle_event(self, event: Grapheme | Arrow) -> None:
        if isinstance(event, Grapheme):
            self._groups.append(event.data)
            self._terminal.write(event.data)
        elif event is Arrow.LEFT:
            self._terminal.write(CURSOR_LEFT)
        elif event is Arrow.RIGHT:
            self._terminal.write(CURSOR_RIGHT)
        # Up/Down: no history to navigate

    def _erase_char(self) -> None:
        if not self._groups:
            return
        removed = self._groups.pop()
        width = _display_width(removed)
        if width < 1:
            self._redraw()
        else:
            self._terminal.write(ERASE_CHAR * width)

    def _redraw(self) -> None:
        self._terminal.write(CLEAR_LINE + self._prompt + b"".join(self._groups))
