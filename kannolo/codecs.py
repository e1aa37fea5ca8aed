"""Bit-level encoders and decoders for product-quantization codes."""

from __future__ import annotations

import struct
from typing import Any

_MASK_64 = (1 << 64) - 1
_U16 = struct.Struct("<H")


def _byte_view(code: Any) -> memoryview:
    view = memoryview(code)
    if view.format != "B" or view.ndim != 1:
        view = view.cast("B")
    return view


class PQEncoderGeneric:
    """Packs values of ``nbits`` bits each, least significant bits first, into ``code``.

    Bytes are written only once they are complete; bits of a trailing partial
    byte stay in the encoder. Bytes that would fall beyond the end of
    ``code`` are silently dropped.
    """

    def __init__(self, code: Any, nbits: int) -> None:
        if not 0 <= nbits <= 64:
            raise ValueError(f"nbits must be between 0 and 64, got {nbits}")
        self._code = _byte_view(code)
        if self._code.readonly:
            raise TypeError("code buffer must be writable")
        self._nbits = nbits
        self._position = 0
        self._offset = 0
        self._reg = 0

    @property
    def position(self) -> int:
        """Number of bytes written so far."""
        return self._position

    def _write(self, byte: int) -> None:
        if self._position < len(self._code):
            self._code[self._position] = byte & 0xFF
            self._position += 1

    def encode(self, x: int) -> None:
        """Append the low ``nbits`` bits of ``x`` to the stream."""
        x &= _MASK_64
        self._reg = (self._reg | (x << self._offset)) & _MASK_64
        x >>= 8 - self._offset

        if self._offset + self._nbits >= 8:
            self._write(self._reg)
            for _ in range((self._nbits - (8 - self._offset)) // 8):
                self._write(x)
                x >>= 8
            self._offset = (self._offset + self._nbits) % 8
            self._reg = x
        else:
            self._offset += self._nbits


class PQEncoder8:
    """Writes one byte per value into ``code``."""

    def __init__(self, code: Any) -> None:
        self._code = _byte_view(code)
        if self._code.readonly:
            raise TypeError("code buffer must be writable")
        self._position = 0

    @property
    def position(self) -> int:
        """Number of values written so far."""
        return self._position

    def encode(self, x: int) -> None:
        """Store the low 8 bits of ``x``; raises IndexError when ``code`` is full."""
        if self._position >= len(self._code):
            raise IndexError("code buffer is full")
        self._code[self._position] = x & 0xFF
        self._position += 1


class PQEncoder16:
    """Writes one little-endian 16-bit word per value into the byte buffer ``code``."""

    def __init__(self, code: Any) -> None:
        self._code = _byte_view(code)
        if self._code.readonly:
            raise TypeError("code buffer must be writable")
        self._position = 0

    @property
    def position(self) -> int:
        """Number of values written so far."""
        return self._position

    def encode(self, x: int) -> None:
        """Store the low 16 bits of ``x``; raises IndexError when ``code`` is full."""
        start = 2 * self._position
        if start + 2 > len(self._code):
            raise IndexError("code buffer is full")
        _U16.pack_into(self._code, start, x & 0xFFFF)
        self._position += 1


class PQDecoder8:
    """Reads back one byte per value from ``code``."""

    def __init__(self, code: Any) -> None:
        self._code = _byte_view(code)
        self._position = 0

    def decode(self) -> int:
        """Return the next value; raises IndexError when ``code`` is exhausted."""
        if self._position >= len(self._code):
            raise IndexError("no more codes to decode")
        value = self._code[self._position]
        self._position += 1
        return int(value)