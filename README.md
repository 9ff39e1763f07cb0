# framecolor

Pixel format conversion for raw camera frames, written in plain Python with
no third-party dependencies.

Each frame converter takes a frame as `bytes` (or any bytes-like object)
together with its width and height, and returns a new `bytes` object in the
target format. Frames that are too short, or dimensions that are not
positive and even, raise `ValueError`.

## Modules

- `framecolor.planar`: converters to planar YUV 4:2:0 (YU12/I420) from
  YUYV, YVYU, UYVY, YYUV, planar 4:2:2, YV12, NV12, NV21, NV16, NV61, Y41P,
  GREY, Y10B, Y16, SPCA501/505/508 and RGB24/BGR24 (`yuyv_to_yu12`,
  `nv12_to_yu12`, `rgb24_to_yu12`, ...). Also `clip`, which clamps a value
  to 0..255, and `unpack_bits`, which unpacks big-endian bit-packed samples.
- `framecolor.packed`: the same kinds of source to packed YUYV
  (`uyvy_to_yuyv`, `nv21_to_yuyv`, `grey_to_yuyv`, ...), plus
  `yuv420p_to_422`, `yuv422p_to_422`, `yuv444p_to_422` and
  `yuv400p_to_422`, which write one decoded JPEG macroblock into a YUYV
  `bytearray` in place.
- `framecolor.rgb`: `yu12_to_rgb24`, `yuyv_to_rgb24`, the bottom-up BGR
  variants `yu12_to_dib24` and `yuyv_to_dib24` (bitmap row order),
  `yu12_to_yuyv`, and `rgb24_to_yuyv` / `bgr24_to_yuyv`.
- `framecolor.demosaic`: bilinear Bayer demosaicing.
  `bayer_to_bgr(bayer, width, height, code, gain_blue, gain_green, gain_red)`
  takes a `BayerCode` and per-channel gains and leaves a one-pixel black
  border; `bayer_to_rgb24(bayer, width, height, pix_order)` takes a
  `BayerOrder` and interpolates the borders too (an unknown order is treated
  as `BayerOrder.GBRG`).
- `framecolor.jpeg`: `JpegDecoder(width, height).decode(data)` and
  `decode_jpeg(data, width, height)` decode baseline, 8-bit, Huffman-coded
  frames with 4:2:0, 4:2:2, 4:4:4 or greyscale sampling into YUYV. Frames
  without a DHT segment, as MJPEG cameras send them, use the standard
  Huffman tables. Restart intervals are honoured. Failures raise
  `JpegError` (a `ValueError`) whose `code` attribute says what went wrong.
- `framecolor.huffman`, `framecolor.bitreader`, `framecolor.idct`: the
  building blocks of the decoder (`HuffmanTable`, `default_tables`,
  `BitReader`, `scale_quant_table`, `idct`).
- `framecolor.converter`: `FormatConverter(width, height)`, one object per
  frame size with `yuyv_to_rgb`, `yuyv_to_bgr`, `jpeg_to_rgb`,
  `jpeg_to_bgr`, `grey_to_rgb`, `grey_to_bgr`, `bayer_to_rgb` and
  `bgr_to_rgb`. Its BGR outputs are stored bottom-up.

## Installing

```
pip install .
```

## Examples

Convert a YUYV frame to RGB:

```python
from framecolor.rgb import yuyv_to_rgb24

rgb = yuyv_to_rgb24(yuyv_frame, 640, 480)
assert len(rgb) == 640 * 480 * 3
```

Decode an MJPEG frame from a camera:

```python
from framecolor.converter import FormatConverter
from framecolor.jpeg import JpegError

converter = FormatConverter(640, 480)
try:
    rgb = converter.jpeg_to_rgb(mjpeg_frame)
except JpegError as exc:
    print("corrupt frame:", exc.code, exc)
```

Demosaic a Bayer frame:

```python
from framecolor.demosaic import BayerOrder, bayer_to_rgb24

rgb = bayer_to_rgb24(raw, 1280, 960, BayerOrder.GRBG)
```

## What it does not do

framecolor only converts frames you already hold in memory. It does not
open or configure cameras, capture frames, display them, or provide a
command-line tool. The JPEG decoder handles baseline sequential frames
only; progressive and arithmetic-coded JPEG are not supported.

## Running the tests

```
pip install ".[test]"
pytest
```