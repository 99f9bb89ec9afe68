"""Byte-at-a-time decoder for UTF-8 characters and terminal escape sequences.

The terminal delivers single bytes, so multi-byte characters and escape
sequences arrive split. ``InputDecoder`` holds the pending unit and emits
a complete event once the unit is resolved:

* ``IDLE`` - nothing pending.
* ``ACCUMULATING_UTF8`` - a multi-byte character has started.
* ``ACCUMULATING_ESCAPE`` - an ESC has been seen.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

ESC = 0x1B
CSI_INTRODUCER = ord("[")
SS3_INTRODUCER = ord("O")


class DecoderState(enum.Enum):
    IDLE = "idle"
    ACCUMULATING_UTF8 = "accumulating-utf8"
    ACCUMULATING_ESCAPE = "accumulating-escape"


class Arrow(enum.Enum):
    UP = "up"
    DOWN = "down"
    RIGHT = "right"
    LEFT = "left"


@dataclass(frozen=True)
class Grapheme:
    """One decoded character's bytes, or one raw byte that decodes to nothing."""

    data: bytes

    @property
    def is_valid(self) -> bool:
        try:
            self.data.decode("utf-8")
        except UnicodeDecodeError:
            return False
        return True


InputEvent = Grapheme | Arrow

_ARROW_FINALS = {
    ord("A"): Arrow.UP,
    ord("B"): Arrow.DOWN,
    ord("C"): Arrow.RIGHT,
    ord("D"): Arrow.LEFT,
}


def _utf8_length(lead: int) -> int:
    """Expected sequence length for a lead byte, 0 if it cannot start one."""
    if lead < 0x80:
        return 1
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    return 0


def _is_continuation(byte: int) -> bool:
    return 0x80 <= byte <= 0xBF


def _is_complete_escape(pending: bytes) -> str:
    """Classify a pending escape unit.

    Returns 'complete', 'incomplete' or 'invalid'.
    """
    if len(pending) < 2:
        return "incomplete"

    introducer = pending[1]

    if introducer == ESC:
        # ESC-prefixed sequence (Alt + key): the unit ends with the inner one
        inner = pending[1:]
        if len(inner) >= 2 and inner[1] == ESC:
            return "invalid"
        return _is_complete_escape(inner)

    if introducer == CSI_INTRODUCER:
        if len(pending) < 3:
            return "incomplete"
        if pending[2] == CSI_INTRODUCER:
            # Linux console function keys: ESC [ [ A .. ESC [ [ E
            return "complete" if len(pending) >= 4 else "incomplete"
        last = pending[-1]
        if 0x40 <= last <= 0x7E:
            return "complete"
        if 0x20 <= last <= 0x3F:
            return "incomplete"
        return "invalid"

    if introducer == SS3_INTRODUCER:
        return "complete" if len(pending) >= 3 else "incomplete"

    # Meta key: ESC followed by a single byte
    return "complete"


def resolve_arrow(sequence: bytes) -> Arrow | None:
    """Map ``ESC [ X`` / ``ESC O X`` to an arrow, None for anything else."""
    if len(sequence) != 3 or sequence[0] != ESC:
        return None
    if sequence[1] not in (CSI_INTRODUCER, SS3_INTRODUCER):
        return None
    return _ARROW_FINALS.get(sequence[2])


class InputDecoder:
    """Reassembles characters and escape sequences from single bytes."""

    def __init__(self) -> None:
        self._state = DecoderState.IDLE
        self._pending = bytearray()
        self._expected = 0

    @property
    def state(self) -> DecoderState:
        return self._state

    @property
    def pending(self) -> bytes:
        return bytes(self._pending)

    def reset(self) -> None:
        self._state = DecoderState.IDLE
        self._pending.clear()
        self._expected = 0

    def feed(self, byte: int) -> list[InputEvent]:
        """Consume one byte and return the events it completes."""
        if self._state is DecoderState.ACCUMULATING_ESCAPE:
            return self._feed_escape(byte)
        if self._state is DecoderState.ACCUMULATING_UTF8:
            return self._feed_utf8(byte)
        return self._feed_idle(byte)

    # -- transitions --------------------------------------------------------

    def _feed_idle(self, byte: int) -> list[InputEvent]:
        if byte == ESC:
            self._state = DecoderState.ACCUMULATING_ESCAPE
            self._pending.append(byte)
            return []

        length = _utf8_length(byte)
        if length == 1:
            return [Grapheme(bytes([byte]))]
        if length == 0:
            logger.debug("Byte 0x%02x cannot start a UTF-8 sequence", byte)
            return [Grapheme(bytes([byte]))]

        self._state = DecoderState.ACCUMULATING_UTF8
        self._pending.append(byte)
        self._expected = length
        return []

    def _feed_utf8(self, byte: int) -> list[InputEvent]:
        if not _is_continuation(byte):
            broken = Grapheme(bytes(self._pending))
            logger.debug("Broken UTF-8 sequence %r", broken.data)
            self.reset()
            return [broken, *self._feed_idle(byte)]

        self._pending.append(byte)
        if len(self._pending) < self._expected:
            return []

        unit = Grapheme(bytes(self._pending))
        self.reset()
        if not unit.is_valid:
            # overlong or surrogate encoding, kept as raw bytes
            logger.debug("Invalid UTF-8 sequence %r", unit.data)
        return [unit]

    def _feed_escape(self, byte: int) -> list[InputEvent]:
        self._pending.append(byte)
        status = _is_complete_escape(bytes(self._pending))
        if status == "incomplete":
            return []

        sequence = bytes(self._pending)
        self.reset()
        if status == "complete":
            arrow = resolve_arrow(sequence)
            if arrow is not None:
                return [arrow]
        logger.debug("Dropped unrecognized escape sequence %r", sequence)
        return []
