"""Editable, seekable byte buffer holding one logical command line."""

from __future__ import annotations

import os
from typing import Iterator


class BufferDecodeError(ValueError):
    """Raised when the buffer contents are not valid UTF-8."""

    def __init__(self, position: int, reason: str) -> None:
        super().__init__(f"invalid UTF-8 in input at byte {position}: {reason}")
        self.position = position
        self.reason = reason


class LineBuffer:
    """A growable byte sequence with a cursor.

    The cursor always stays within ``[0, len(buffer)]``. Writes overwrite
    bytes at the cursor and extend the buffer past its end; inserts shift
    the following bytes right. Both advance the cursor by the number of
    bytes written.
    """

    def __init__(self, data: bytes = b"") -> None:
        self._data = bytearray(data)
        self._pos = 0

    @classmethod
    def from_text(cls, text: str) -> LineBuffer:
        return cls(text.encode("utf-8"))

    def __len__(self) -> int:
        return len(self._data)

    def __bytes__(self) -> bytes:
        return bytes(self._data)

    def __iter__(self) -> Iterator[int]:
        return iter(self._data)

    def __repr__(self) -> str:
        return f"LineBuffer(inner={bytes(self._data)!r}, pos={self._pos})"

    # -- cursor -------------------------------------------------------------

    @property
    def position(self) -> int:
        return self._pos

    def set_position(self, pos: int) -> None:
        self._pos = min(max(pos, 0), len(self._data))

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """Move the cursor, clamping the result to the buffer bounds."""
        if whence == os.SEEK_SET:
            target = offset
        elif whence == os.SEEK_CUR:
            target = self._pos + offset
        elif whence == os.SEEK_END:
            target = len(self._data) + offset
        else:
            raise ValueError(f"invalid whence ({whence!r})")
        self.set_position(target)
        return self._pos

    def byte(self) -> int | None:
        """Return the byte under the cursor, or None at the end."""
        if self._pos < len(self._data):
            return self._data[self._pos]
        return None

    # -- reading / writing --------------------------------------------------

    def write(self, data: bytes) -> int:
        end = self._pos + len(data)
        self._data[self._pos:end] = data
        self._pos = end
        return len(data)

    def insert(self, data: bytes) -> None:
        self._data[self._pos:self._pos] = data
        self._pos += len(data)

    def read(self, size: int = -1) -> bytes:
        if size < 0:
            end = len(self._data)
        else:
            end = min(self._pos + size, len(self._data))
        chunk = bytes(self._data[self._pos:end])
        self._pos = end
        return chunk

    def clear(self) -> None:
        self._data.clear()
        self._pos = 0

    def getvalue(self) -> bytes:
        return bytes(self._data)

    # -- text access --------------------------------------------------------

    def is_valid_utf8(self) -> bool:
        try:
            self._data.decode("utf-8")
        except UnicodeDecodeError:
            return False
        return True

    def as_text(self) -> str:
        """Decode the whole buffer as UTF-8.

        Raises:
            BufferDecodeError: if the buffer holds an invalid sequence.
        """
        try:
            return self._data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise BufferDecodeError(e.start, e.reason) from e
