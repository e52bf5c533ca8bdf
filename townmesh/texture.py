"""Textures backed by pixel arrays, read from PNG files or filled with a solid colour."""

from __future__ import annotations

import os
import struct
import zlib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import numpy as np


class PixelFormat(Enum):
    """Channel layout of a texture's pixels."""

    RGB = 3
    RGBA = 4

    @property
    def channels(self) -> int:
        return self.value


_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
_PNG_CHANNELS = {0: 1, 2: 3, 3: 1, 4: 2, 6: 4}


def _paeth(left: int, up: int, upper_left: int) -> int:
    estimate = left + up - upper_left
    dist_left = abs(estimate - left)
    dist_up = abs(estimate - up)
    dist_upper_left = abs(estimate - upper_left)
    if dist_left <= dist_up and dist_left <= dist_upper_left:
        return left
    if dist_up <= dist_upper_left:
        return up
    return upper_left


def _unfilter(raw: bytes, height: int, stride: int, bpp: int) -> bytes:
    """Undo the per-scanline PNG filters."""
    out = bytearray()
    prev = bytearray(stride)
    for y in range(height):
        start = y * (stride + 1)
        if start + stride + 1 > len(raw):
            raise ValueError("truncated PNG image data")
        kind = raw[start]
        row = bytearray(raw[start + 1 : start + 1 + stride])
        if kind == 1:
            for i in range(bpp, stride):
                row[i] = (row[i] + row[i - bpp]) & 0xFF
        elif kind == 2:
            row = bytearray((r + p) & 0xFF for r, p in zip(row, prev))
        elif kind == 3:
            for i in range(stride):
                left = row[i - bpp] if i >= bpp else 0
                row[i] = (row[i] + (left + prev[i]) // 2) & 0xFF
        elif kind == 4:
            for i in range(stride):
                left = row[i - bpp] if i >= bpp else 0
                upper_left = prev[i - bpp] if i >= bpp else 0
                row[i] = (row[i] + _paeth(left, prev[i], upper_left)) & 0xFF
        elif kind != 0:
            raise ValueError(f"unknown PNG filter type {kind}")
        out += row
        prev = row
    return bytes(out)


def _read_png(data: bytes) -> np.ndarray:
    """Decode a non-interlaced PNG into an array of shape (height, width, channels)."""
    if not data.startswith(_PNG_SIGNATURE):
        raise ValueError("not a PNG file")
    pos = len(_PNG_SIGNATURE)
    header = None
    palette = None
    transparency = None
    compressed = bytearray()
    while pos + 8 <= len(data):
        length, kind = struct.unpack(">I4s", data[pos : pos + 8])
        body = data[pos + 8 : pos + 8 + length]
        pos += 12 + length
        if kind == b"IHDR":
            header = struct.unpack(">IIBBBBB", body)
        elif kind == b"PLTE":
            palette = np.frombuffer(body, np.uint8).reshape(-1, 3)
        elif kind == b"tRNS":
            transparency = np.frombuffer(body, np.uint8)
        elif kind == b"IDAT":
            compressed += body
        elif kind == b"IEND":
            break
    if header is None:
        raise ValueError("PNG file has no header")

    width, height, depth, color_type, _, _, interlace = header
    if color_type not in _PNG_CHANNELS:
        raise ValueError(f"unknown PNG colour type {color_type}")
    if interlace:
        raise ValueError("interlaced PNG images are not supported")
    if depth not in (8, 16) or (color_type == 3 and depth != 8):
        raise ValueError(f"unsupported PNG bit depth {depth}")

    channels = _PNG_CHANNELS[color_type]
    bpp = channels * depth // 8
    try:
        raw = zlib.decompress(bytes(compressed))
    except zlib.error as exc:
        raise ValueError(f"corrupt PNG image data: {exc}") from exc
    samples = np.frombuffer(_unfilter(raw, height, width * bpp, bpp), np.uint8)
    if depth == 16:
        samples = samples[0::2]
    image = samples.reshape(height, width, channels)

    if color_type != 3:
        return image
    if palette is None:
        raise ValueError("palette image without a PLTE chunk")
    index = image[..., 0]
    if index.size and int(index.max()) >= len(palette):
        raise ValueError("palette index out of range")
    rgb = palette[index]
    if transparency is None:
        return rgb
    alpha = np.full(len(palette), 255, np.uint8)
    given = transparency[: len(palette)]
    alpha[: len(given)] = given
    return np.dstack([rgb, alpha[index]])


def _to_format(image: np.ndarray, pixel_format: PixelFormat) -> np.ndarray:
    channels = image.shape[2]
    if channels in (1, 2):
        color = np.repeat(image[..., :1], 3, axis=2)
        alpha = image[..., 1:2] if channels == 2 else None
    else:
        color = image[..., :3]
        alpha = image[..., 3:4] if channels == 4 else None
    if pixel_format is PixelFormat.RGB:
        return np.ascontiguousarray(color)
    if alpha is None:
        alpha = np.full(image.shape[:2] + (1,), 255, np.uint8)
    return np.concatenate([color, alpha], axis=2)


@dataclass(eq=False)
class Texture:
    """A 2D texture whose pixels are stored bottom row first."""

    pixel_format: PixelFormat
    path: Path | None = None
    _pixels: np.ndarray | None = field(default=None, repr=False)

    @classmethod
    def from_file(
        cls, filename: str | os.PathLike, pixel_format: PixelFormat = PixelFormat.RGBA
    ) -> Texture:
        """Reference a PNG file; it is decoded when the pixels are first needed."""
        return cls(PixelFormat(pixel_format), Path(filename))

    @classmethod
    def solid(cls, color, width: int, height: int) -> Texture:
        """Create a texture of one colour; three components give RGB, four RGBA."""
        values = np.asarray(color, dtype=np.float32)
        if values.shape not in ((3,), (4,)):
            raise ValueError("a colour has three or four components")
        if width < 0 or height < 0:
            raise ValueError("texture size cannot be negative")
        pixel_format = PixelFormat.RGB if values.shape[0] == 3 else PixelFormat.RGBA
        pixels = np.broadcast_to(values, (height, width, values.shape[0])).copy()
        return cls(pixel_format, None, pixels)

    @property
    def pixels(self) -> np.ndarray:
        """Pixel array of shape (height, width, channels)."""
        if self._pixels is None:
            if self.path is None:
                raise ValueError("texture has neither pixels nor a file")
            image = _to_format(_read_png(self.path.read_bytes()), self.pixel_format)
            self._pixels = image[::-1].copy()
        return self._pixels

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])