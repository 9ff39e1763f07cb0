"""Bit-level reader for JPEG entropy-coded segments.

The reader removes 0xFF 0x00 byte stuffing, stops at the first marker it
meets and afterwards feeds zero bits, exactly as a baseline decoder expects.
"""

from __future__ import annotations

from .huffman import LOOKUP_BITS, HuffmanTable, _extend

_MASK32 = 0xFFFFFFFF


class HuffmanDecodeError(ValueError):
    """Raised when the bit stream holds no valid code for the table."""


class BitReader:
    """Read Huffman-coded symbols and markers from a JPEG scan."""

    def __init__(self, data: bytes, offset: int = 0) -> None:
        self._data = bytes(data)
        if not 0 <= offset <= len(self._data):
            raise ValueError(f"offset {offset} is outside data of {len(self._data)} bytes")
        self._pos = offset
        self._bits = 0
        self._left = 0
        self._marker = 0

    @property
    def position(self) -> int:
        """Offset of the next byte not yet taken into the bit buffer."""
        return self._pos

    def _next_byte(self) -> int:
        if self._pos >= len(self._data):
            raise EOFError("entropy-coded data ends without a marker")
        byte = self._data[self._pos]
        self._pos += 1
        return byte

    def _pad(self) -> None:
        if self._left <= 16:
            self._bits = (self._bits << 16) & _MASK32
            self._left += 16

    def _fill(self) -> None:
        if self._marker:
            self._pad()
            return
        while self._left <= 24:
            byte = self._next_byte()
            if byte == 0xFF:
                follower = self._next_byte()
                if follower != 0:
                    self._marker = follower
                    self._pad()
                    break
            self._bits = ((self._bits << 8) | byte) & _MASK32
            self._left += 8

    def _get_bits(self, count: int) -> int:
        if self._left < count:
            self._fill()
        self._left -= count
        return (self._bits >> self._left) & ((1 << count) - 1)

    def decode(self, table: HuffmanTable) -> tuple[int, int]:
        """Decode one symbol and its amplitude, returning ``(run, value)``."""
        window = self._get_bits(LOOKUP_BITS)
        entry = table.lookup[window]
        if entry is not None and entry.value is not None:
            self._left += LOOKUP_BITS - entry.consumed
            return entry.run, entry.value
        if entry is not None:
            self._left += LOOKUP_BITS - entry.consumed
            run, size = entry.run, entry.size
        else:
            index = LOOKUP_BITS
            code = window
            while True:
                code = (code << 1) | self._get_bits(1)
                if code < table.maxcode[index]:
                    break
                index += 1
            if index >= 16:
                raise HuffmanDecodeError("no Huffman code matches the bit stream")
            symbol = table.values[table.valptr[index] + code - table.maxcode[index - 1] * 2]
            run, size = symbol >> 4, symbol & 0x0F
        if size == 0:
            return run, 0
        return run, _extend(self._get_bits(size), size)

    def read_marker(self) -> int:
        """Return the pending marker code and reset the bit buffer, or 0 if none."""
        self._fill()
        marker = self._marker
        if marker == 0:
            return 0
        self._left = 0
        self._marker = 0
        return marker