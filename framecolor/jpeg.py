"""Baseline (M)JPEG decoding to packed YUYV 4:2:2.

The decoder handles sequential Huffman-coded frames with 8-bit precision and
4:2:0, 4:2:2, 4:4:4 or greyscale sampling. Frames without a DHT segment, as
MJPEG cameras send them, are decoded with the standard Huffman tables.
Quantisation tables, Huffman tables and the restart interval carry over from
one frame to the next, so a stream may define them once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import NamedTuple, Optional

from .bitreader import BitReader, HuffmanDecodeError
from .huffman import HuffmanTable, default_tables
from .idct import idct, scale_quant_table
from .packed import yuv400p_to_422, yuv420p_to_422, yuv422p_to_422, yuv444p_to_422

_log = logging.getLogger(__name__)

_SOI = 0xD8
_SOF0 = 0xC0
_SOF2 = 0xC2
_DHT = 0xC4
_DQT = 0xDB
_DRI = 0xDD
_SOS = 0xDA
_RST0 = 0xD0
_EOI = 0xD9

_MAX_COMPONENTS = 4
_LUMA_OFFSET = 128.5
_CHROMA_OFFSET = 0.5


class JpegError(ValueError):
    """Raised when a frame cannot be decoded; ``code`` tells what went wrong."""

    DECODE = -19
    BAD_TABLES = -20
    NO_SOI = -21
    NOT_8BIT = -22
    BAD_WIDTH_OR_HEIGHT = -23
    TOO_MANY_COMPONENTS = -24
    ILLEGAL_HV = -25
    QUANT_TABLE_SELECTOR = -26
    NOT_YCBCR = -27
    UNKNOWN_CID = -28
    WRONG_MARKER = -29
    NO_EOI = -30

    def __init__(self, message: str, code: int) -> None:
        super().__init__(message)
        self.code = code


class _Header:
    """Byte reader for the marker segments in front of the entropy-coded data."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0

    def byte(self) -> int:
        if self.pos >= len(self.data):
            raise JpegError("JPEG data ends inside a header", JpegError.DECODE)
        value = self.data[self.pos]
        self.pos += 1
        return value

    def word(self) -> int:
        high = self.byte()
        return high << 8 | self.byte()

    def take(self, count: int) -> list[int]:
        return [self.byte() for _ in range(count)]


@dataclass
class _Component:
    cid: int
    hv: int
    tq: int


@dataclass
class _Scan:
    cid: int
    hv: int
    tq: int
    dc_index: int
    ac_index: int
    dc: int = 0


class _Layout(NamedTuple):
    mcu_width: int
    mcu_height: int
    scan_of_block: tuple[int, ...]
    slot_of_block: tuple[int, ...]
    max_of_block: tuple[int, ...]
    convert: Callable[[Sequence[int], bytearray, int, int], None]


_LAYOUT_420 = _Layout(16, 16, (0, 0, 0, 0, 1, 2), (0, 1, 2, 3, 4, 5), (0, 1, 2, 3, 4, 5),
                      yuv420p_to_422)
_LAYOUT_422 = _Layout(16, 8, (0, 0, 1, 2), (0, 1, 4, 5), (0, 1, 4, 5), yuv422p_to_422)
_LAYOUT_444 = _Layout(8, 8, (0, 1, 2), (0, 4, 5), (0, 4, 5), yuv444p_to_422)
_LAYOUT_400 = _Layout(8, 8, (0,), (0,), (0,), yuv400p_to_422)


def _choose_layout(hv: int, scan_count: int) -> _Layout:
    if hv == 0x22:
        return _LAYOUT_420
    if hv == 0x21:
        return _LAYOUT_422
    if hv == 0x11:
        return _LAYOUT_400 if scan_count == 1 else _LAYOUT_444
    raise JpegError(f"unsupported sampling factors 0x{hv:02x}", JpegError.NOT_YCBCR)


def _decode_block(reader: BitReader, scan: _Scan, dc_table: HuffmanTable,
                  ac_table: HuffmanTable) -> tuple[list[int], int]:
    """Decode one block's zigzag coefficients; also return one past the last index used."""
    coeffs = [0] * 64
    _, difference = reader.decode(dc_table)
    scan.dc += difference
    coeffs[0] = scan.dc
    position = 1
    remaining = 63
    while remaining > 0:
        run, value = reader.decode(ac_table)
        if run == 0 and value == 0:
            break
        position += run
        if position > 63:
            raise JpegError("AC coefficients run past the end of a block", JpegError.DECODE)
        coeffs[position] = value
        position += 1
        remaining -= run + 1
    return coeffs, 64 - remaining


class JpegDecoder:
    """Decode baseline JPEG frames of a fixed size into YUYV."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"frame dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._quant: list[list[int]] = [[0] * 64 for _ in range(4)]
        self._huffman: list[Optional[HuffmanTable]] = [None] * 4
        self._restart_interval = 0

    def _read_tables(self, header: _Header, until: int) -> bool:
        """Read segments up to ``until``; return whether a DHT segment was seen."""
        found_dht = False
        while True:
            if header.byte() != 0xFF:
                raise JpegError("expected a marker", JpegError.BAD_TABLES)
            marker = header.byte()
            if marker == until or marker == _SOF2:
                return found_dht
            if marker == _DQT:
                length = header.word()
                while length > 2:
                    spec = header.byte()
                    index = spec & 0x0F
                    if index > 3 or spec >> 4:
                        raise JpegError(f"bad quantisation table spec 0x{spec:02x}",
                                        JpegError.BAD_TABLES)
                    self._quant[index] = header.take(64)
                    length -= 65
            elif marker == _DHT:
                length = header.word()
                while length > 2:
                    spec = header.byte()
                    table_class, table_id = spec >> 4, spec & 0x0F
                    if table_class > 1 or table_id > 1:
                        raise JpegError(f"bad Huffman table selector 0x{spec:02x}",
                                        JpegError.BAD_TABLES)
                    counts = header.take(16)
                    values = header.take(sum(counts))
                    try:
                        table = HuffmanTable(counts, values)
                    except ValueError as exc:
                        raise JpegError(str(exc), JpegError.BAD_TABLES) from exc
                    self._huffman[table_class * 2 + table_id] = table
                    length -= 17 + len(values)
                found_dht = True
            elif marker == _DRI:
                header.word()
                self._restart_interval = header.word()
            else:
                length = header.word()
                header.take(max(length - 2, 0))

    def _read_frame_header(self, header: _Header) -> list[_Component]:
        header.word()
        precision = header.byte()
        if precision != 8:
            raise JpegError(f"only 8-bit samples are supported, got {precision}",
                            JpegError.NOT_8BIT)
        frame_height = header.word()
        frame_width = header.word()
        if frame_height & 7 or frame_width & 7:
            raise JpegError(f"frame size {frame_width}x{frame_height} is not a multiple of 8",
                            JpegError.BAD_WIDTH_OR_HEIGHT)
        count = header.byte()
        if count > _MAX_COMPONENTS:
            raise JpegError(f"too many components: {count}", JpegError.TOO_MANY_COMPONENTS)
        components = []
        for _ in range(count):
            cid, hv, tq = header.byte(), header.byte(), header.byte()
            if hv >> 4 > 3 or hv & 0x0F > 3:
                raise JpegError(f"illegal sampling factors 0x{hv:02x}", JpegError.ILLEGAL_HV)
            if tq > 3:
                raise JpegError(f"bad quantisation table selector {tq}",
                                JpegError.QUANT_TABLE_SELECTOR)
            components.append(_Component(cid, hv, tq))
        return components

    def _read_scan_header(self, header: _Header, components: list[_Component]) -> list[_Scan]:
        header.word()
        count = header.byte()
        if not count:
            raise JpegError("scan has no components", JpegError.NOT_YCBCR)
        if count > _MAX_COMPONENTS:
            raise JpegError(f"too many scan components: {count}",
                            JpegError.TOO_MANY_COMPONENTS)
        scans = []
        for _ in range(count):
            cid = header.byte()
            selector = header.byte()
            dc_index, ac_index = selector >> 4, selector & 0x0F
            if dc_index > 1 or ac_index > 1:
                raise JpegError(f"bad Huffman table selector 0x{selector:02x}",
                                JpegError.QUANT_TABLE_SELECTOR)
            component = next((c for c in components if c.cid == cid), None)
            if component is None:
                raise JpegError(f"scan names unknown component {cid}", JpegError.UNKNOWN_CID)
            scans.append(_Scan(cid, component.hv, component.tq, dc_index, ac_index))
        start, end, approximation = header.byte(), header.byte(), header.byte()
        if (start, end, approximation) != (0, 63, 0):
            _log.warning("scan is not sequential DCT (Ss=%d, Se=%d, Ah/Al=0x%02x)",
                         start, end, approximation)
        return scans

    def _tables_for(self, scan: _Scan) -> tuple[HuffmanTable, HuffmanTable]:
        dc_table = self._huffman[scan.dc_index]
        ac_table = self._huffman[2 + scan.ac_index]
        if dc_table is None or ac_table is None:
            raise JpegError("scan uses an undefined Huffman table", JpegError.BAD_TABLES)
        return dc_table, ac_table

    def decode(self, data: bytes) -> bytes:
        """Decode one JPEG frame into ``width * height * 2`` bytes of YUYV."""
        frame = bytes(data)
        if len(frame) < 2 or frame[0] != 0xFF or frame[1] != _SOI:
            raise JpegError("data does not start with an SOI marker", JpegError.NO_SOI)
        header = _Header(frame)
        header.pos = 2

        found_dht = self._read_tables(header, _SOF0)
        components = self._read_frame_header(header)
        found_dht = self._read_tables(header, _SOS) or found_dht
        scans = self._read_scan_header(header, components)

        if not found_dht:
            self._huffman = list(default_tables())

        layout = _choose_layout(scans[0].hv, len(scans))
        used = max(layout.scan_of_block) + 1
        if used > len(scans):
            raise JpegError(f"sampling needs {used} scan components, got {len(scans)}",
                            JpegError.NOT_YCBCR)
        tables = [self._tables_for(scan) for scan in scans[:used]]
        quant = [scale_quant_table(self._quant[scan.tq]) for scan in scans[:used]]

        pitch = self.width * 2
        xpitch = layout.mcu_width * 2
        ypitch = layout.mcu_height * pitch
        mcus_x = self.width // layout.mcu_width
        mcus_y = self.height // layout.mcu_height

        picture = bytearray(self.width * self.height * 2)
        blocks = [0] * (64 * 6)
        maxes = [0] * 6
        interval = self._restart_interval
        until_restart = interval + 1
        expected_restart = _RST0

        reader = BitReader(frame, header.pos)
        try:
            for my in range(mcus_y):
                for mx in range(mcus_x):
                    if interval:
                        until_restart -= 1
                        if until_restart == 0:
                            marker = reader.read_marker()
                            if marker != expected_restart:
                                raise JpegError(
                                    f"expected restart marker 0x{expected_restart:02x}, "
                                    f"got 0x{marker:02x}", JpegError.WRONG_MARKER)
                            until_restart = interval
                            expected_restart = (expected_restart + 1) & ~0x08
                            for scan in scans:
                                scan.dc = 0
                    decoded = []
                    for index, scan_index in enumerate(layout.scan_of_block):
                        coeffs, last = _decode_block(reader, scans[scan_index],
                                                     *tables[scan_index])
                        maxes[index] = last
                        decoded.append(coeffs)
                    for index, coeffs in enumerate(decoded):
                        slot = layout.slot_of_block[index]
                        scan_index = layout.scan_of_block[index]
                        offset = _LUMA_OFFSET if slot < 4 else _CHROMA_OFFSET
                        blocks[slot * 64:slot * 64 + 64] = idct(
                            coeffs, quant[scan_index], offset,
                            maxes[layout.max_of_block[index]])
                    layout.convert(blocks, picture, my * ypitch + mx * xpitch, pitch)
            marker = reader.read_marker()
        except (HuffmanDecodeError, EOFError) as exc:
            raise JpegError(str(exc), JpegError.DECODE) from exc

        if marker != _EOI:
            raise JpegError(f"expected an EOI marker, got 0x{marker:02x}", JpegError.NO_EOI)
        return bytes(picture)


def decode_jpeg(data: bytes, width: int, height: int) -> bytes:
    """Decode a single JPEG frame of the given size into YUYV."""
    return JpegDecoder(width, height).decode(data)