"""Pixel format conversion for raw camera frames: YUV, RGB, Bayer demosaicing and baseline MJPEG."""

__version__ = "0.1.0"
__all__ = [
    "planar",
    "packed",
    "rgb",
    "demosaic",
    "huffman",
    "bitreader",
    "idct",
    "jpeg",
    "converter",
]