"""Conversions from camera pixel formats to planar YUV 4:2:0 (YU12, also known as I420).

Every converter takes a frame as a bytes-like object plus its dimensions and returns
a new ``bytes`` object holding the full Y plane followed by the quarter-size U and V
planes. Chroma planes are subsampled by averaging vertically adjacent lines.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

NEUTRAL_CHROMA = 0x80

_SIGN_FLIP = bytes(b ^ 0x80 for b in range(256))


def clip(value: float) -> int:
    """Clamp a value to the 0..255 range, truncating fractions toward zero."""
    if value > 0xFF:
        return 0xFF
    if value < 0:
        return 0
    return int(value)


def unpack_bits(raw: bytes, bits: int, count: int) -> list[int]:
    """Unpack ``count`` big-endian bit-packed samples of ``bits`` bits each."""
    if not 1 <= bits <= 24:
        raise ValueError(f"sample width must be between 1 and 24 bits, got {bits}")
    if count < 0:
        raise ValueError(f"sample count must not be negative, got {count}")
    needed = (bits * count + 7) // 8
    if len(raw) < needed:
        raise ValueError(f"need {needed} bytes to unpack {count} samples, got {len(raw)}")

    mask = (1 << bits) - 1
    source = iter(raw)
    buffer = 0
    held = 0
    samples = []
    for _ in range(count):
        while held < bits:
            buffer = ((buffer << 8) | next(source)) & 0xFFFFFFFF
            held += 8
        held -= bits
        samples.append((buffer >> held) & mask)
    return samples


def _frame(data: bytes, width: int, height: int, size: int) -> bytes:
    if width <= 0 or height <= 0:
        raise ValueError(f"frame dimensions must be positive, got {width}x{height}")
    if width % 2 or height % 2:
        raise ValueError(f"frame dimensions must be even, got {width}x{height}")
    frame = bytes(data)
    if len(frame) < size:
        raise ValueError(f"frame of {width}x{height} needs {size} bytes, got {len(frame)}")
    return frame[:size]


def _rows(plane: bytes, stride: int) -> list[bytes]:
    return [plane[start:start + stride] for start in range(0, len(plane), stride)]


def _pairs(items: Iterable) -> Iterator[tuple]:
    it = iter(items)
    return zip(it, it)


def _average(first: Sequence[int], second: Sequence[int]) -> bytes:
    return bytes((a + b) // 2 for a, b in zip(first, second))


def _interleave(even: bytes, odd: bytes) -> bytearray:
    out = bytearray(len(even) + len(odd))
    out[0::2] = even
    out[1::2] = odd
    return out


def _neutral(width: int, height: int) -> bytes:
    return bytes([NEUTRAL_CHROMA]) * (width * height // 4)


def _packed422_to_yu12(data, width, height, y0, y1, u, v) -> bytes:
    frame = _frame(data, width, height, width * height * 2)
    rows = _rows(frame, width * 2)
    luma = bytearray()
    for row in rows:
        luma += _interleave(row[y0::4], row[y1::4])
    cb = bytearray()
    cr = bytearray()
    for top, bottom in _pairs(rows):
        cb += _average(top[u::4], bottom[u::4])
        cr += _average(top[v::4], bottom[v::4])
    return bytes(luma + cb + cr)


def yuyv_to_yu12(data: bytes, width: int, height: int) -> bytes:
    """Convert packed YUYV 4:2:2 to YU12."""
    return _packed422_to_yu12(data, width, height, 0, 2, 1, 3)


def yvyu_to_yu12(data: bytes, width: int, height: int) -> bytes:
    """Convert packed YVYU 4:2:2 to YU12."""
    return _packed422_to_yu12(data, width, height, 0, 2, 3, 1)


def uyvy_to_yu12(data: bytes, width: int, height: int) -> bytes:
    """Convert packed UYVY 4:2:2 to YU12."""
    return _packed422_to_yu12(data, width, height, 1, 3, 0, 2)


def yyuv_to_yu12(data: bytes, width: int, height: int) -> bytes:
    """Convert packed YYUV 4:2:2 to YU12."""
    return _packed422_to_yu12(data, width, height, 0, 1, 2, 3)


def yuv422p_to_yu12(data: bytes, width: int, height: int) -> bytes:
    """Convert planar YUV 4:2:2 to YU12."""
    area = width * height
    frame = _frame(data, width, height, area * 2)
    half = width // 2
    u_plane = frame[area:area + area // 2]
    v_plane = frame[area + area // 2:]
    cb = b"".join(_average(a, b) for a, b in _pairs(_rows(u_plane, half)))
    cr = b"".join(_average(a, b) for a, b in _pairs(_rows(v_plane, half)))
    return frame[:area] + cb + cr


def yv12_to_yu12(data: bytes, width: int, height: int) -> bytes:
    """Convert planar YV12 (V plane first) to YU12 by swapping the chroma planes."""
    area = width * height
    frame = _frame(data, width, height, area * 3 // 2)
    quarter = area // 4
    v_plane = frame[area:area + quarter]
    u_plane = frame[area + quarter:]
    return frame[:area] + u_plane + v_plane


def _semiplanar420_to_yu12(data, width, height, u_first: bool) -> bytes:
    area = width * height
    frame = _frame(data, width, height, area * 3 // 2)
    chroma = frame[area:]
    first, second = chroma[0::2], chroma[1::2]
    if u_first:
        return frame[:area] + first + second
    return frame[:area] + second + first


def nv12_to_yu12(data: bytes, width: int, height: int) -> bytes:
    """Convert NV12 (interleaved UV plane) to YU12."""
    return _semiplanar420_to_yu12(data, width, height, u_first=True)


def nv21_to_yu12(data: bytes, width: int, height: int) -> bytes:
    """Convert NV21 (interleaved VU plane) to YU12."""
    return _semiplanar420_to_yu12(data, width, height, u_first=False)


def _semiplanar422_to_yu12(data, width, height, u_first: bool) -> bytes:
    area = width * height
    frame = _frame(data, width, height, area * 2)
    cb = bytearray()
    cr = bytearray()
    for top, bottom in _pairs(_rows(frame[area:], width)):
        averaged = _average(top, bottom)
        first, second = averaged[0::2], averaged[1::2]
        if u_first:
            cb += first
            cr += second
        else:
            cb += second
            cr += first
    return frame[:area] + bytes(cb) + bytes(cr)


def nv16_to_yu12(data: bytes, width: int, height: int) -> bytes:
    """Convert NV16 (4:2:2, interleaved UV plane) to YU12."""
    return _semiplanar422_to_yu12(data, width, height, u_first=True)


def nv61_to_yu12(data: bytes, width: int, height: int) -> bytes:
    """Convert NV61 (4:2:2, interleaved VU plane) to YU12."""
    return _semiplanar422_to_yu12(data, width, height, u_first=False)


def y10b_to_yu12(data: bytes, width: int, height: int) -> bytes:
    """Convert bit-packed 10-bit greyscale (Y10B) to YU12."""
    area = width * height
    frame = _frame(data, width, height, (area * 10 + 7) // 8)
    luma = bytes((sample & 0x3FF) >> 2 for sample in unpack_bits(frame, 10, area))
    neutral = _neutral(width, height)
    return luma + neutral + neutral


def y41p_to_yu12(data: bytes, width: int, height: int) -> bytes:
    """Convert packed YUV 4:1:1 (Y41P) to YU12."""
    if width % 8:
        raise ValueError(f"Y41P frame width must be a multiple of 8, got {width}")
    linesize = width * 3 // 2
    frame = _frame(data, width, height, linesize * height)
    rows = _rows(frame, linesize)
    luma = bytearray()
    for row in rows:
        for block in _rows(row, 12):
            luma += bytes(block[i] for i in (1, 3, 5, 7, 8, 9, 10, 11))
    cb = bytearray()
    cr = bytearray()
    for top, bottom in _pairs(rows):
        for upper, lower in zip(_rows(top, 12), _rows(bottom, 12)):
            u0, u4 = (upper[0] + lower[0]) // 2, (upper[4] + lower[4]) // 2
            v0, v4 = (upper[2] + lower[2]) // 2, (upper[6] + lower[6]) // 2
            cb += bytes((u0, u0, u4, u4))
            cr += bytes((v0, v0, v4, v4))
    return bytes(luma + cb + cr)


def grey_to_yu12(data: bytes, width: int, height: int) -> bytes:
    """Convert 8-bit greyscale to YU12 with neutral chroma."""
    frame = _frame(data, width, height, width * height)
    neutral = _neutral(width, height)
    return frame + neutral + neutral


def y16_to_yu12(data: bytes, width: int, height: int) -> bytes:
    """Convert 16-bit little-endian greyscale to YU12, keeping the high byte."""
    frame = _frame(data, width, height, width * height * 2)
    neutral = _neutral(width, height)
    return frame[1::2] + neutral + neutral


def _spca_to_yu12(data, width, height, layout: Sequence[str]) -> bytes:
    frame = _frame(data, width, height, width * height * 3 // 2).translate(_SIGN_FLIP)
    lengths = {"Y": width, "U": width // 2, "V": width // 2}
    planes = {"Y": bytearray(), "U": bytearray(), "V": bytearray()}
    position = 0
    while position < len(frame):
        for part in layout:
            size = lengths[part]
            planes[part] += frame[position:position + size]
            position += size
    return bytes(planes["Y"] + planes["U"] + planes["V"])


def s501_to_yu12(data: bytes, width: int, height: int) -> bytes:
    """Convert signed SPCA501 lines (Y, U, Y, V) to YU12."""
    return _spca_to_yu12(data, width, height, ("Y", "U", "Y", "V"))


def s505_to_yu12(data: bytes, width: int, height: int) -> bytes:
    """Convert signed SPCA505 lines (Y, Y, U, V) to YU12."""
    return _spca_to_yu12(data, width, height, ("Y", "Y", "U", "V"))


def s508_to_yu12(data: bytes, width: int, height: int) -> bytes:
    """Convert signed SPCA508 lines (Y, U, V, Y) to YU12."""
    return _spca_to_yu12(data, width, height, ("Y", "U", "V", "Y"))


def _luma(r: int, g: int, b: int) -> int:
    return clip(0.299 * (r - 128) + 0.587 * (g - 128) + 0.114 * (b - 128) + 128)


def _blue_difference(r: int, g: int, b: int) -> float:
    return -0.147 * (r - 128) - 0.289 * (g - 128) + 0.436 * (b - 128) + 128


def _red_difference(r: int, g: int, b: int) -> float:
    return 0.615 * (r - 128) - 0.515 * (g - 128) - 0.100 * (b - 128) + 128


def _row_chroma(pixels: list[tuple[int, int, int]]) -> Iterator[tuple[int, int]]:
    for left, right in _pairs(pixels):
        u = clip((_blue_difference(*left) + _blue_difference(*right)) / 2)
        v = clip((_red_difference(*left) + _red_difference(*right)) / 2)
        yield u, v


def _rgb_to_yu12(data, width, height, red: int, blue: int) -> bytes:
    frame = _frame(data, width, height, width * height * 3)
    pixels = list(zip(frame[red::3], frame[1::3], frame[blue::3]))
    luma = bytes(_luma(*pixel) for pixel in pixels)
    rows = [pixels[start:start + width] for start in range(0, len(pixels), width)]
    cb = bytearray()
    cr = bytearray()
    for top, bottom in _pairs(rows):
        for (u1, v1), (u2, v2) in zip(_row_chroma(top), _row_chroma(bottom)):
            cb.append((u1 + u2) // 2)
            cr.append((v1 + v2) // 2)
    return luma + bytes(cb) + bytes(cr)


def rgb24_to_yu12(data: bytes, width: int, height: int) -> bytes:
    """Convert packed 24-bit RGB to YU12."""
    return _rgb_to_yu12(data, width, height, red=0, blue=2)


def bgr24_to_yu12(data: bytes, width: int, height: int) -> bytes:
    """Convert packed 24-bit BGR to YU12."""
    return _rgb_to_yu12(data, width, height, red=2, blue=0)