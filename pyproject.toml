[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "framecolor"
version = "0.1.0"
description = "Pure-Python pixel format conversion for camera frames: YUV, RGB, Bayer demosaicing and baseline MJPEG decoding"
requires-python = ">=3.10"
dependencies = []
keywords = ["yuv", "yuyv", "yu12", "rgb", "bgr", "bayer", "demosaic", "mjpeg", "jpeg", "camera", "pixel-format"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
    "Topic :: Multimedia :: Video :: Conversion",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["framecolor"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
