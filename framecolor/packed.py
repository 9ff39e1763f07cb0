"""Conversions from camera pixel formats to packed YUYV 4:2:2.

Frame converters take a frame as a bytes-like object plus its dimensions and
return a new ``bytes`` object of ``width * height * 2`` bytes laid out as
Y0 U Y1 V for every pair of pixels.

The ``*_to_422`` block functions place one decoded JPEG macroblock
(an IDCT output of Y blocks followed by a U and a V block) into a YUYV
picture buffer in place.
"""

from __future__ import annotations

from collections.abc import Sequence

from .planar import (
    NEUTRAL_CHROMA,
    _SIGN_FLIP,
    _frame,
    _rows,
    clip,
    unpack_bits,
)

_Y41P_ORDER = (1, 0, 3, 2, 5, 0, 7, 2, 8, 4, 9, 6, 10, 4, 11, 6)

_MACROBLOCK_SIZE = 64 * 6
_U_BLOCK = 64 * 4
_V_BLOCK = 64 * 5


def _join(luma: bytes, cb: bytes, cr: bytes) -> bytes:
    """Interleave a luma run with half-rate chroma into YUYV."""
    out = bytearray(len(luma) * 2)
    out[0::2] = luma
    out[1::4] = cb
    out[3::4] = cr
    return bytes(out)


def _luma_only(luma: bytes) -> bytes:
    neutral = bytes([NEUTRAL_CHROMA]) * (len(luma) // 2)
    return _join(luma, neutral, neutral)


def _double_rows(plane: bytes, stride: int) -> bytes:
    """Repeat every row of a subsampled plane so it covers two luma rows."""
    return b"".join(row + row for row in _rows(plane, stride))


def _reorder(data, width: int, height: int, order: Sequence[int]) -> bytes:
    frame = _frame(data, width, height, width * height * 2)
    out = bytearray(len(frame))
    for target, source in enumerate(order):
        out[target::4] = frame[source::4]
    return bytes(out)


def y10b_to_yuyv(data: bytes, width: int, height: int) -> bytes:
    """Convert bit-packed 10-bit greyscale (Y10B) to YUYV."""
    area = width * height
    frame = _frame(data, width, height, (area * 10 + 7) // 8)
    luma = bytes((sample & 0x3FF) >> 2 for sample in unpack_bits(frame, 10, area))
    return _luma_only(luma)


def y16_to_yuyv(data: bytes, width: int, height: int) -> bytes:
    """Convert 16-bit little-endian greyscale to YUYV, keeping the high byte."""
    frame = _frame(data, width, height, width * height * 2)
    return _luma_only(frame[1::2])


def yyuv_to_yuyv(data: bytes, width: int, height: int) -> bytes:
    """Convert packed YYUV to YUYV."""
    return _reorder(data, width, height, (0, 2, 1, 3))


def uyvy_to_yuyv(data: bytes, width: int, height: int) -> bytes:
    """Convert packed UYVY to YUYV."""
    return _reorder(data, width, height, (1, 0, 3, 2))


def yvyu_to_yuyv(data: bytes, width: int, height: int) -> bytes:
    """Convert packed YVYU to YUYV."""
    return _reorder(data, width, height, (0, 3, 2, 1))


def yuv422_to_yuyv(data: bytes, width: int, height: int) -> bytes:
    """Convert planar YUV 4:2:2 to YUYV."""
    area = width * height
    frame = _frame(data, width, height, area * 2)
    half = area // 2
    return _join(frame[:area], frame[area:area + half], frame[area + half:])


def yvu420_to_yuyv(data: bytes, width: int, height: int) -> bytes:
    """Convert planar YV12 (V plane before U plane) to YUYV."""
    area = width * height
    frame = _frame(data, width, height, area * 3 // 2)
    quarter = area // 4
    half = width // 2
    cr = frame[area:area + quarter]
    cb = frame[area + quarter:]
    return _join(frame[:area], _double_rows(cb, half), _double_rows(cr, half))


def _semiplanar420_to_yuyv(data, width: int, height: int, u_first: bool) -> bytes:
    area = width * height
    frame = _frame(data, width, height, area * 3 // 2)
    chroma = frame[area:]
    half = width // 2
    first = _double_rows(chroma[0::2], half)
    second = _double_rows(chroma[1::2], half)
    if u_first:
        return _join(frame[:area], first, second)
    return _join(frame[:area], second, first)


def nv12_to_yuyv(data: bytes, width: int, height: int) -> bytes:
    """Convert NV12 (4:2:0, interleaved UV plane) to YUYV."""
    return _semiplanar420_to_yuyv(data, width, height, u_first=True)


def nv21_to_yuyv(data: bytes, width: int, height: int) -> bytes:
    """Convert NV21 (4:2:0, interleaved VU plane) to YUYV."""
    return _semiplanar420_to_yuyv(data, width, height, u_first=False)


def _semiplanar422_to_yuyv(data, width: int, height: int, u_first: bool) -> bytes:
    area = width * height
    frame = _frame(data, width, height, area * 2)
    chroma = frame[area:]
    first, second = chroma[0::2], chroma[1::2]
    if u_first:
        return _join(frame[:area], first, second)
    return _join(frame[:area], second, first)


def nv16_to_yuyv(data: bytes, width: int, height: int) -> bytes:
    """Convert NV16 (4:2:2, interleaved UV plane) to YUYV."""
    return _semiplanar422_to_yuyv(data, width, height, u_first=True)


def nv61_to_yuyv(data: bytes, width: int, height: int) -> bytes:
    """Convert NV61 (4:2:2, interleaved VU plane) to YUYV."""
    return _semiplanar422_to_yuyv(data, width, height, u_first=False)


def y41p_to_yuyv(data: bytes, width: int, height: int) -> bytes:
    """Convert packed YUV 4:1:1 (Y41P) to YUYV."""
    if width % 8:
        raise ValueError(f"Y41P frame width must be a multiple of 8, got {width}")
    frame = _frame(data, width, height, width * 3 // 2 * height)
    out = bytearray(width * height * 2)
    for target, source in enumerate(_Y41P_ORDER):
        out[target::16] = frame[source::12]
    return bytes(out)


def grey_to_yuyv(data: bytes, width: int, height: int) -> bytes:
    """Convert 8-bit greyscale to YUYV with neutral chroma."""
    return _luma_only(_frame(data, width, height, width * height))


def _spca_to_yuyv(data, width: int, height: int, layout: Sequence[str]) -> bytes:
    frame = _frame(data, width, height, width * height * 3 // 2).translate(_SIGN_FLIP)
    lengths = {"Y": width, "U": width // 2, "V": width // 2}
    out = bytearray()
    for start in range(0, len(frame), width * 3):
        parts: dict[str, list[bytes]] = {"Y": [], "U": [], "V": []}
        position = start
        for part in layout:
            size = lengths[part]
            parts[part].append(frame[position:position + size])
            position += size
        (cb,), (cr,) = parts["U"], parts["V"]
        top, bottom = parts["Y"]
        out += _join(top, cb, cr)
        out += _join(bottom, cb, cr)
    return bytes(out)


def s501_to_yuyv(data: bytes, width: int, height: int) -> bytes:
    """Convert signed SPCA501 lines (Y, U, Y, V) to YUYV."""
    return _spca_to_yuyv(data, width, height, ("Y", "U", "Y", "V"))


def s505_to_yuyv(data: bytes, width: int, height: int) -> bytes:
    """Convert signed SPCA505 lines (Y, Y, U, V) to YUYV."""
    return _spca_to_yuyv(data, width, height, ("Y", "Y", "U", "V"))


def s508_to_yuyv(data: bytes, width: int, height: int) -> bytes:
    """Convert signed SPCA508 lines (Y, U, V, Y) to YUYV."""
    return _spca_to_yuyv(data, width, height, ("Y", "U", "V", "Y"))


def _check_blocks(blocks: Sequence[int], needed: int) -> None:
    if len(blocks) < needed:
        raise ValueError(f"macroblock needs {needed} coefficients, got {len(blocks)}")


def _check_target(pic: bytearray, offset: int, pitch: int, rows: int, row_bytes: int) -> None:
    if offset < 0:
        raise ValueError(f"offset must not be negative, got {offset}")
    if pitch < row_bytes:
        raise ValueError(f"pitch must be at least {row_bytes} bytes, got {pitch}")
    end = offset + (rows - 1) * pitch + row_bytes
    if end > len(pic):
        raise ValueError(f"picture buffer needs {end} bytes, got {len(pic)}")


def yuv420p_to_422(blocks: Sequence[int], pic: bytearray, offset: int, pitch: int) -> None:
    """Write a 4:2:0 macroblock (four Y blocks, U, V) as 16x16 YUYV pixels."""
    _check_blocks(blocks, _MACROBLOCK_SIZE)
    _check_target(pic, offset, pitch, 16, 32)
    for j in range(8):
        base = 16 * j if j < 4 else 128 + 16 * (j - 4)
        top = offset + 2 * j * pitch
        bottom = top + pitch
        for k in range(8):
            y1 = base + 2 * k + (56 if k >= 4 else 0)
            y2 = y1 + 8
            u = clip(128 + blocks[_U_BLOCK + 8 * j + k])
            v = clip(128 + blocks[_V_BLOCK + 8 * j + k])
            at = 4 * k
            pic[top + at:top + at + 4] = bytes((clip(blocks[y1]), u, clip(blocks[y1 + 1]), v))
            pic[bottom + at:bottom + at + 4] = bytes((clip(blocks[y2]), u, clip(blocks[y2 + 1]), v))


def yuv422p_to_422(blocks: Sequence[int], pic: bytearray, offset: int, pitch: int) -> None:
    """Write a 4:2:2 macroblock (two Y blocks, U, V) as 16x8 YUYV pixels."""
    _check_blocks(blocks, _MACROBLOCK_SIZE)
    _check_target(pic, offset, pitch, 8, 32)
    for j in range(4):
        base = 16 * j
        top = offset + 2 * j * pitch
        bottom = top + pitch
        for k in range(8):
            y1 = base + 2 * k + (56 if k >= 4 else 0)
            y2 = y1 + 8
            u1 = _U_BLOCK + 8 * j + k
            v1 = _V_BLOCK + 8 * j + k
            at = 4 * k
            pic[top + at:top + at + 4] = bytes((
                clip(blocks[y1]), clip(128 + blocks[u1]),
                clip(blocks[y1 + 1]), clip(128 + blocks[v1]),
            ))
            pic[bottom + at:bottom + at + 4] = bytes((
                clip(blocks[y2]), clip(128 + blocks[u1 + 8]),
                clip(blocks[y2 + 1]), clip(128 + blocks[v1 + 8]),
            ))


def yuv444p_to_422(blocks: Sequence[int], pic: bytearray, offset: int, pitch: int) -> None:
    """Write a 4:4:4 macroblock (Y, U, V) as 8x8 YUYV pixels, dropping odd chroma."""
    _check_blocks(blocks, _MACROBLOCK_SIZE)
    _check_target(pic, offset, pitch, 8, 16)
    for j in range(4):
        top = offset + 2 * j * pitch
        bottom = top + pitch
        for k in range(4):
            y1 = 16 * j + 2 * k
            y2 = y1 + 8
            u1 = _U_BLOCK + 16 * j + 2 * k
            v1 = _V_BLOCK + 16 * j + 2 * k
            at = 4 * k
            pic[top + at:top + at + 4] = bytes((
                clip(blocks[y1]), clip(128 + blocks[u1]),
                clip(blocks[y1 + 1]), clip(128 + blocks[v1]),
            ))
            pic[bottom + at:bottom + at + 4] = bytes((
                clip(blocks[y2]), clip(128 + blocks[u1 + 8]),
                clip(blocks[y2 + 1]), clip(128 + blocks[v1 + 8]),
            ))


def yuv400p_to_422(blocks: Sequence[int], pic: bytearray, offset: int, pitch: int) -> None:
    """Write a greyscale macroblock (one Y block) as 8x8 YUYV pixels."""
    _check_blocks(blocks, 64)
    _check_target(pic, offset, pitch, 8, 16)
    for j in range(4):
        top = offset + 2 * j * pitch
        bottom = top + pitch
        for k in range(4):
            y1 = 16 * j + 2 * k
            y2 = y1 + 8
            at = 4 * k
            pic[top + at:top + at + 4] = bytes((
                clip(blocks[y1]), NEUTRAL_CHROMA, clip(blocks[y1 + 1]), NEUTRAL_CHROMA,
            ))
            pic[bottom + at:bottom + at + 4] = bytes((
                clip(blocks[y2]), NEUTRAL_CHROMA, clip(blocks[y2 + 1]), NEUTRAL_CHROMA,
            ))