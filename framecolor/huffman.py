"""Huffman tables for baseline JPEG entropy decoding.

A ``HuffmanTable`` is built from the sixteen code-length counts and the
symbol list of a DHT segment. Besides the canonical ``maxcode``/``valptr``
arrays it carries a lookup table indexed by the next ``LOOKUP_BITS`` bits of
the stream. When a code and its amplitude bits both fit in that window, the
entry already holds the signed coefficient value.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import NamedTuple, Optional

LOOKUP_BITS = 10

_END_OF_CODES = 0x20000

_DEFAULT_SPECS = bytes(
    # luminance DC
    [0x00]
    + [0x00, 0x01, 0x05, 0x01, 0x01, 0x01, 0x01, 0x01,
       0x01, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00]
    + list(range(12))
    # chrominance DC
    + [0x01]
    + [0x00, 0x03, 0x01, 0x01, 0x01, 0x01, 0x01, 0x01,
       0x01, 0x01, 0x01, 0x00, 0x00, 0x00, 0x00, 0x00]
    + list(range(12))
)

_DEFAULT_SPECS += bytes.fromhex(
    # luminance AC
    "10"
    "00 02 01 03 03 02 04 03 05 05 04 04 00 00 01 7D"
    "01 02 03 00 04 11 05 12 21 31 41 06 13 51 61 07 22 71 14 32"
    "81 91 A1 08 23 42 B1 C1 15 52 D1 F0 24 33 62 72 82 09 0A 16"
    "17 18 19 1A 25 26 27 28 29 2A 34 35 36 37 38 39 3A 43 44 45"
    "46 47 48 49 4A 53 54 55 56 57 58 59 5A 63 64 65 66 67 68 69"
    "6A 73 74 75 76 77 78 79 7A 83 84 85 86 87 88 89 8A 92 93 94"
    "95 96 97 98 99 9A A2 A3 A4 A5 A6 A7 A8 A9 AA B2 B3 B4 B5 B6"
    "B7 B8 B9 BA C2 C3 C4 C5 C6 C7 C8 C9 CA D2 D3 D4 D5 D6 D7 D8"
    "D9 DA E1 E2 E3 E4 E5 E6 E7 E8 E9 EA F1 F2 F3 F4 F5 F6 F7 F8"
    "F9 FA"
    # chrominance AC
    "11"
    "00 02 01 02 04 04 03 04 07 05 04 04 00 01 02 77"
    "00 01 02 03 11 04 05 21 31 06 12 41 51 07 61 71 13 22 32 81"
    "08 14 42 91 A1 B1 C1 09 23 33 52 F0 15 62 72 D1 0A 16 24 34"
    "E1 25 F1 17 18 19 1A 26 27 28 29 2A 35 36 37 38 39 3A 43 44"
    "45 46 47 48 49 4A 53 54 55 56 57 58 59 5A 63 64 65 66 67 68"
    "69 6A 73 74 75 76 77 78 79 7A 82 83 84 85 86 87 88 89 8A 92"
    "93 94 95 96 97 98 99 9A A2 A3 A4 A5 A6 A7 A8 A9 AA B2 B3 B4"
    "B5 B6 B7 B8 B9 BA C2 C3 C4 C5 C6 C7 C8 C9 CA D2 D3 D4 D5 D6"
    "D7 D8 D9 DA E2 E3 E4 E5 E6 E7 E8 E9 EA F2 F3 F4 F5 F6 F7 F8"
    "F9 FA"
)


class LookupEntry(NamedTuple):
    """What the next ``LOOKUP_BITS`` bits of a stream decode to.

    ``consumed`` counts the bits used: the code plus its amplitude bits when
    ``value`` is known, or the code alone when ``value`` is ``None`` and the
    ``size`` amplitude bits still have to be read.
    """

    run: int
    size: int
    consumed: int
    value: Optional[int]


def _extend(bits: int, size: int) -> int:
    """Turn ``size`` raw amplitude bits into a signed coefficient value."""
    if size and bits < (1 << (size - 1)):
        return bits + (-1 << size) + 1
    return bits


def _build(counts: Sequence[int], values: Sequence[int]):
    maxcode: list[int] = []
    valptr: list[int] = []
    lookup: list[Optional[LookupEntry]] = [None] * (1 << LOOKUP_BITS)
    code = 0
    k = 0
    for index, count in enumerate(counts):
        length = index + 1
        valptr.append(k)
        for _ in range(count):
            if code >= (1 << length):
                raise ValueError(f"too many Huffman codes of length {length} or less")
            symbol = values[k]
            if length <= LOOKUP_BITS:
                shift = LOOKUP_BITS - length
                run, size = symbol >> 4, symbol & 0x0F
                prefix = code << shift
                for tail in range(1 << shift):
                    if size + length <= LOOKUP_BITS:
                        amplitude = tail >> (shift - size)
                        entry = LookupEntry(run, size, length + size, _extend(amplitude, size))
                    else:
                        entry = LookupEntry(run, size, length, None)
                    lookup[prefix | tail] = entry
            code += 1
            k += 1
        maxcode.append(code)
        code <<= 1
    maxcode.append(_END_OF_CODES)
    return tuple(maxcode), tuple(valptr), tuple(lookup)


class HuffmanTable:
    """A decoding table built from DHT code-length counts and symbols."""

    def __init__(self, counts: Sequence[int], values: Sequence[int]) -> None:
        counts = tuple(counts)
        values = tuple(values)
        if len(counts) != 16:
            raise ValueError(f"a Huffman table needs 16 code-length counts, got {len(counts)}")
        if any(count < 0 for count in counts):
            raise ValueError("code-length counts must not be negative")
        if sum(counts) != len(values):
            raise ValueError(
                f"counts announce {sum(counts)} symbols but {len(values)} were given"
            )
        if len(values) > 256:
            raise ValueError(f"a Huffman table holds at most 256 symbols, got {len(values)}")
        if any(not 0 <= value <= 0xFF for value in values):
            raise ValueError("Huffman symbols must be bytes")
        self.counts = counts
        self.values = values
        self.maxcode, self.valptr, self.lookup = _build(counts, values)

    def __repr__(self) -> str:
        return f"HuffmanTable(counts={list(self.counts)!r}, symbols={len(self.values)})"


def _parse_specs(data: bytes) -> Iterator[tuple[int, HuffmanTable]]:
    """Yield ``(index, table)`` for each table spec, where index is class * 2 + id."""
    position = 0
    while position < len(data):
        header = data[position]
        table_class, table_id = header >> 4, header & 0x0F
        if table_class > 1 or table_id > 1:
            raise ValueError(f"bad Huffman table selector 0x{header:02x}")
        counts = data[position + 1:position + 17]
        if len(counts) < 16:
            raise ValueError("Huffman table spec is truncated")
        position += 17
        total = sum(counts)
        values = data[position:position + total]
        if len(values) < total:
            raise ValueError("Huffman table spec is truncated")
        position += total
        yield table_class * 2 + table_id, HuffmanTable(counts, values)


def default_tables() -> tuple[HuffmanTable, HuffmanTable, HuffmanTable, HuffmanTable]:
    """Return the standard tables used by MJPEG frames that carry no DHT segment.

    The order is luminance DC, chrominance DC, luminance AC, chrominance AC,
    i.e. indexed by ``class * 2 + id``.
    """
    tables: list[Optional[HuffmanTable]] = [None] * 4
    for index, table in _parse_specs(_DEFAULT_SPECS):
        tables[index] = table
    dc_luma, dc_chroma, ac_luma, ac_chroma = tables
    return dc_luma, dc_chroma, ac_luma, ac_chroma