import pytest
from hypothesis import given, strategies as st

from framecolor import packed, planar
from framecolor.planar import NEUTRAL_CHROMA, clip


def _draw_frame(data, size_of, width_step=2):
    width = data.draw(st.integers(1, 4)) * width_step
    height = data.draw(st.integers(1, 4)) * 2
    size = size_of(width, height)
    frame = data.draw(st.binary(min_size=size, max_size=size))
    return frame, width, height


def _packed_size(w, h):
    return w * h * 2


def _yu12_size(w, h):
    return w * h * 3 // 2


MATCHING = [
    (packed.yyuv_to_yuyv, planar.yyuv_to_yu12, _packed_size, 2),
    (packed.uyvy_to_yuyv, planar.uyvy_to_yu12, _packed_size, 2),
    (packed.yvyu_to_yuyv, planar.yvyu_to_yu12, _packed_size, 2),
    (packed.yuv422_to_yuyv, planar.yuv422p_to_yu12, _packed_size, 2),
    (packed.yvu420_to_yuyv, planar.yv12_to_yu12, _yu12_size, 2),
    (packed.nv12_to_yuyv, planar.nv12_to_yu12, _yu12_size, 2),
    (packed.nv21_to_yuyv, planar.nv21_to_yu12, _yu12_size, 2),
    (packed.nv16_to_yuyv, planar.nv16_to_yu12, _packed_size, 2),
    (packed.nv61_to_yuyv, planar.nv61_to_yu12, _packed_size, 2),
    (packed.y41p_to_yuyv, planar.y41p_to_yu12, lambda w, h: w * 3 // 2 * h, 8),
    (packed.grey_to_yuyv, planar.grey_to_yu12, lambda w, h: w * h, 2),
    (packed.y16_to_yuyv, planar.y16_to_yu12, _packed_size, 2),
    (packed.y10b_to_yuyv, planar.y10b_to_yu12, lambda w, h: (w * h * 10 + 7) // 8, 2),
    (packed.s501_to_yuyv, planar.s501_to_yu12, _yu12_size, 2),
    (packed.s505_to_yuyv, planar.s505_to_yu12, _yu12_size, 2),
    (packed.s508_to_yuyv, planar.s508_to_yu12, _yu12_size, 2),
]


@pytest.mark.parametrize("to_yuyv, to_yu12, size_of, step", MATCHING)
@given(data=st.data())
def test_yuyv_then_yu12_matches_direct_conversion(to_yuyv, to_yu12, size_of, step, data):
    frame, width, height = _draw_frame(data, size_of, step)
    yuyv = to_yuyv(frame, width, height)
    assert len(yuyv) == width * height * 2
    assert planar.yuyv_to_yu12(yuyv, width, height) == to_yu12(frame, width, height)


@pytest.mark.parametrize("swap", [packed.uyvy_to_yuyv, packed.yvyu_to_yuyv])
@given(data=st.data())
def test_self_inverse_reorders(swap, data):
    frame, width, height = _draw_frame(data, _packed_size)
    assert swap(swap(frame, width, height), width, height) == frame


def test_uyvy_byte_order():
    assert packed.uyvy_to_yuyv(bytes([1, 2, 3, 4, 5, 6, 7, 8]), 2, 2) == bytes(
        [2, 1, 4, 3, 6, 5, 8, 7]
    )


def test_y16_keeps_high_byte():
    result = packed.y16_to_yuyv(bytes([0x34, 0x12, 0x78, 0x56] * 2), 2, 2)
    assert result == bytes([0x12, NEUTRAL_CHROMA, 0x56, NEUTRAL_CHROMA] * 2)


@given(data=st.data())
def test_grey_luma_and_neutral_chroma(data):
    frame, width, height = _draw_frame(data, lambda w, h: w * h)
    result = packed.grey_to_yuyv(frame, width, height)
    assert result[0::2] == frame
    assert set(result[1::2]) == {NEUTRAL_CHROMA}


@pytest.mark.parametrize("convert", [packed.s501_to_yuyv, packed.s505_to_yuyv, packed.s508_to_yuyv])
def test_signed_zero_is_neutral(convert):
    result = convert(bytes(4 * 4 * 3 // 2), 4, 4)
    assert result == bytes([NEUTRAL_CHROMA]) * (4 * 4 * 2)


@given(data=st.data())
def test_yuv422_chroma_placement(data):
    frame, width, height = _draw_frame(data, _packed_size)
    area = width * height
    result = packed.yuv422_to_yuyv(frame, width, height)
    assert result[0::2] == frame[:area]
    assert result[1::4] == frame[area:area + area // 2]
    assert result[3::4] == frame[area + area // 2:]


@pytest.mark.parametrize("convert", [packed.grey_to_yuyv, packed.uyvy_to_yuyv, packed.nv12_to_yuyv])
def test_odd_dimensions_rejected(convert):
    with pytest.raises(ValueError):
        convert(bytes(100), 3, 2)


@pytest.mark.parametrize("convert", [packed.yuv422_to_yuyv, packed.nv21_to_yuyv, packed.s501_to_yuyv])
def test_short_frame_rejected(convert):
    with pytest.raises(ValueError):
        convert(bytes(3), 4, 4)


def test_y41p_width_must_be_multiple_of_eight():
    with pytest.raises(ValueError):
        packed.y41p_to_yuyv(bytes(4 * 3 // 2 * 2), 4, 2)


def _plane_rows(pic, offset, pitch, rows, row_bytes):
    return [pic[offset + r * pitch:offset + r * pitch + row_bytes] for r in range(rows)]


def test_yuv420_block_layout():
    chroma_u = [n - 128 for n in range(64)]
    chroma_v = [n - 128 for n in range(64, 128)]
    blocks = list(range(256)) + chroma_u + chroma_v
    pitch = 40
    offset = 3
    pic = bytearray([0xEE]) * (offset + 16 * pitch)
    packed.yuv420p_to_422(blocks, pic, offset, pitch)
    rows = _plane_rows(pic, offset, pitch, 16, 32)
    for r, row in enumerate(rows):
        luma = row[0::2]
        for c in range(16):
            block = (r // 8) * 2 + c // 8
            assert luma[c] == block * 64 + (r % 8) * 8 + c % 8
        for p in range(8):
            assert row[1::4][p] == (r // 2) * 8 + p
            assert row[3::4][p] == 64 + (r // 2) * 8 + p
    assert set(pic[:offset]) == {0xEE}
    assert all(set(pic[offset + r * pitch + 32:offset + (r + 1) * pitch]) == {0xEE} for r in range(15))


def test_yuv422_block_layout():
    blocks = list(range(128)) + [0] * 128 + [-28] * 64 + [20] * 64
    pitch = 32
    pic = bytearray(8 * pitch)
    packed.yuv422p_to_422(blocks, pic, 0, pitch)
    for r, row in enumerate(_plane_rows(pic, 0, pitch, 8, 32)):
        luma = row[0::2]
        for c in range(16):
            assert luma[c] == (c // 8) * 64 + r * 8 + c % 8
        assert set(row[1::4]) == {128 - 28}
        assert set(row[3::4]) == {128 + 20}


def test_yuv444_block_layout():
    u_block = [n - 128 for n in range(64)]
    blocks = list(range(64)) + [0] * 192 + u_block + [0] * 64
    pitch = 16
    pic = bytearray(8 * pitch)
    packed.yuv444p_to_422(blocks, pic, 0, pitch)
    for r, row in enumerate(_plane_rows(pic, 0, pitch, 8, 16)):
        assert list(row[0::2]) == [r * 8 + c for c in range(8)]
        assert list(row[1::4]) == [r * 8 + 2 * p for p in range(4)]
        assert set(row[3::4]) == {128}


def test_yuv400_block_clips_and_neutral_chroma():
    blocks = [300] * 32 + [-20] * 32
    pitch = 16
    pic = bytearray(8 * pitch)
    packed.yuv400p_to_422(blocks, pic, 0, pitch)
    rows = _plane_rows(pic, 0, pitch, 8, 16)
    for r, row in enumerate(rows):
        expected = clip(300) if r < 4 else clip(-20)
        assert set(row[0::2]) == {expected}
        assert set(row[1::2]) == {NEUTRAL_CHROMA}


@pytest.mark.parametrize(
    "convert, rows, row_bytes",
    [
        (packed.yuv420p_to_422, 16, 32),
        (packed.yuv422p_to_422, 8, 32),
        (packed.yuv444p_to_422, 8, 16),
        (packed.yuv400p_to_422, 8, 16),
    ],
)
def test_block_target_too_small(convert, rows, row_bytes):
    pic = bytearray(rows * row_bytes - 1)
    with pytest.raises(ValueError):
        convert([0] * 384, pic, 0, row_bytes)
    assert pic == bytearray(rows * row_bytes - 1)


@pytest.mark.parametrize(
    "convert", [packed.yuv420p_to_422, packed.yuv422p_to_422, packed.yuv444p_to_422]
)
def test_block_coefficients_too_few(convert):
    with pytest.raises(ValueError):
        convert([0] * 64, bytearray(16 * 32), 0, 32)