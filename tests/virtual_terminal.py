"""Virtual terminal for testing -- implements the Terminal protocol in-memory.

This module provides a ``VirtualTerminal`` class that satisfies the
``vish.terminal.Terminal`` protocol without performing any real I/O.
Input is served from a scripted byte string and all output is captured
for assertions.
"""

from __future__ import annotations

from vish.terminal import ControlChars, TerminalIOError


class VirtualTerminal:
    """In-memory terminal that replays input bytes and records writes.

    Parameters
    ----------
    data:
        Bytes returned one at a time by ``read_byte``. When exhausted the
        stream reports closure (``None``).
    controls:
        Control-character table reported by ``control_chars``.
    """

    def __init__(
        self,
        data: bytes = b"",
        controls: ControlChars | None = None,
    ) -> None:
        self._input = bytearray(data)
        self._output: list[bytes] = []
        self.controls = controls or ControlChars()
        self._raw = False
        self.raw_transitions: list[bool] = []
        self.fail_enable = False
        self.fail_disable = False
        self.control_reads = 0

    # -- Terminal protocol: raw mode ----------------------------------------

    @property
    def is_raw(self) -> bool:
        return self._raw

    def enable_raw_mode(self) -> None:
        if self.fail_enable:
            raise TerminalIOError(25, "Inappropriate ioctl for device")
        self._raw = True
        self.raw_transitions.append(True)

    def disable_raw_mode(self) -> None:
        if self.fail_disable:
            raise TerminalIOError(5, "Input/output error")
        self._raw = False
        self.raw_transitions.append(False)

    def control_chars(self) -> ControlChars:
        self.control_reads += 1
        return self.controls

    # -- Terminal protocol: byte I/O ----------------------------------------

    def read_byte(self) -> int | None:
        if not self._input:
            return None
        return self._input.pop(0)

    def write(self, data: bytes) -> None:
        self._output.append(bytes(data))

    # -- Test helpers -------------------------------------------------------

    @property
    def output(self) -> bytes:
        """Return everything written to the terminal as a single byte string."""
        return b"".join(self._output)

    @property
    def remaining_input(self) -> bytes:
        return bytes(self._input)

    def feed(self, data: bytes) -> None:
        """Queue more input bytes."""
        self._input.extend(data)

    def clear_output(self) -> None:
        """Discard all recorded output."""
        self._output.clear()
