import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from framecolor.planar import rgb24_to_yu12, yuyv_to_yu12
from framecolor.rgb import (
    bgr24_to_yuyv,
    rgb24_to_yuyv,
    yu12_to_dib24,
    yu12_to_rgb24,
    yu12_to_yuyv,
    yuyv_to_dib24,
    yuyv_to_rgb24,
)

dims = st.tuples(st.integers(1, 4), st.integers(1, 4)).map(lambda p: (p[0] * 2, p[1] * 2))


@st.composite
def yu12_frames(draw):
    width, height = draw(dims)
    size = width * height * 3 // 2
    data = draw(st.binary(min_size=size, max_size=size))
    return data, width, height


@st.composite
def yuyv_frames(draw):
    width, height = draw(dims)
    size = width * height * 2
    data = draw(st.binary(min_size=size, max_size=size))
    return data, width, height


@st.composite
def rgb_frames(draw):
    width, height = draw(dims)
    size = width * height * 3
    data = draw(st.binary(min_size=size, max_size=size))
    return data, width, height


def _flip_and_swap(rgb: bytes, width: int, height: int) -> bytes:
    stride = width * 3
    rows = [rgb[i:i + stride] for i in range(0, len(rgb), stride)]
    out = bytearray()
    for row in reversed(rows):
        for i in range(0, stride, 3):
            out += bytes((row[i + 2], row[i + 1], row[i]))
    return bytes(out)


@settings(max_examples=50)
@given(dims, st.data())
def test_neutral_chroma_gives_grey(size, data):
    width, height = size
    area = width * height
    luma = data.draw(st.binary(min_size=area, max_size=area))
    frame = luma + bytes([128]) * (area // 2)
    rgb = yu12_to_rgb24(frame, width, height)
    assert rgb[0::3] == luma
    assert rgb[1::3] == luma
    assert rgb[2::3] == luma


@settings(max_examples=50)
@given(yu12_frames())
def test_yu12_rgb_length(frame):
    data, width, height = frame
    assert len(yu12_to_rgb24(data, width, height)) == width * height * 3


@settings(max_examples=50)
@given(yu12_frames())
def test_dib24_is_flipped_bgr(frame):
    data, width, height = frame
    rgb = yu12_to_rgb24(data, width, height)
    assert yu12_to_dib24(data, width, height) == _flip_and_swap(rgb, width, height)


@settings(max_examples=50)
@given(yuyv_frames())
def test_yuyv_dib24_is_flipped_bgr(frame):
    data, width, height = frame
    rgb = yuyv_to_rgb24(data, width, height)
    assert yuyv_to_dib24(data, width, height) == _flip_and_swap(rgb, width, height)


@settings(max_examples=50)
@given(yu12_frames())
def test_yu12_yuyv_round_trip(frame):
    data, width, height = frame
    packed = yu12_to_yuyv(data, width, height)
    assert len(packed) == width * height * 2
    assert yuyv_to_yu12(packed, width, height) == data


@settings(max_examples=50)
@given(yu12_frames())
def test_yuyv_and_yu12_paths_agree(frame):
    data, width, height = frame
    packed = yu12_to_yuyv(data, width, height)
    assert yuyv_to_rgb24(packed, width, height) == yu12_to_rgb24(data, width, height)


def test_yu12_to_yuyv_layout():
    frame = bytes([1, 2, 3, 4, 5, 6])
    assert yu12_to_yuyv(frame, 2, 2) == bytes([1, 5, 2, 6, 3, 5, 4, 6])


def test_saturated_values_are_clipped():
    frame = bytes([255] * 4) + bytes([255]) + bytes([255])
    rgb = yu12_to_rgb24(frame, 2, 2)
    assert rgb[0::3] == bytes([255] * 4)
    assert rgb[2::3] == bytes([255] * 4)

    dark = bytes([0] * 4) + bytes([0]) + bytes([0])
    rgb = yu12_to_rgb24(dark, 2, 2)
    assert rgb[0::3] == bytes(4)
    assert rgb[2::3] == bytes(4)


def test_mid_grey_rgb_to_yuyv():
    assert rgb24_to_yuyv(bytes([128]) * 12, 2, 2) == bytes([128]) * 8
    assert bgr24_to_yuyv(bytes([128]) * 12, 2, 2) == bytes([128]) * 8


@settings(max_examples=50)
@given(rgb_frames())
def test_bgr_matches_swapped_rgb(frame):
    data, width, height = frame
    swapped = bytearray(len(data))
    swapped[0::3] = data[2::3]
    swapped[1::3] = data[1::3]
    swapped[2::3] = data[0::3]
    assert bgr24_to_yuyv(bytes(swapped), width, height) == rgb24_to_yuyv(data, width, height)


@settings(max_examples=50)
@given(rgb_frames())
def test_rgb_to_yuyv_luma_matches_planar(frame):
    data, width, height = frame
    packed = rgb24_to_yuyv(data, width, height)
    assert len(packed) == width * height * 2
    assert packed[0::2] == rgb24_to_yu12(data, width, height)[:width * height]


@pytest.mark.parametrize(
    "func, size",
    [
        (yu12_to_rgb24, 5),
        (yu12_to_dib24, 5),
        (yu12_to_yuyv, 5),
        (yuyv_to_rgb24, 7),
        (yuyv_to_dib24, 7),
        (rgb24_to_yuyv, 11),
        (bgr24_to_yuyv, 11),
    ],
)
def test_short_frame_rejected(func, size):
    with pytest.raises(ValueError):
        func(bytes(size), 2, 2)


@pytest.mark.parametrize(
    "func", [yu12_to_rgb24, yu12_to_yuyv, yuyv_to_rgb24, rgb24_to_yuyv]
)
def test_odd_dimensions_rejected(func):
    with pytest.raises(ValueError):
        func(bytes(100), 3, 2)