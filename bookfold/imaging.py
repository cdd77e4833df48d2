"""Image decoding into grayscale pixel grids.

This module handles:
- The immutable PixelGrid consumed by zone detection
- Decoding paths, raw bytes, data URLs and Pillow images with Pillow
- Luminance conversion and flattening of transparent pixels onto white

Transparent pixels read as white (light). A browser canvas reads them as
black, so fully transparent areas fold differently than in canvas-based
tools; flatten such images onto a black background first to match.
"""

import base64
import binascii
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from PIL import Image, UnidentifiedImageError

from bookfold.config import BACKGROUND_COLOR
from bookfold.errors import DecodeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PixelGrid:
    """Row-major grid of grayscale samples (0-255).

    ``grid[y][x]`` returns the sample at column ``x`` of row ``y``.
    """

    width: int
    height: int
    data: bytes

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {self.width}x{self.height}")
        if len(self.data) != self.width * self.height:
            raise ValueError(
                f"Expected {self.width * self.height} samples for a "
                f"{self.width}x{self.height} grid, got {len(self.data)}"
            )

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "PixelGrid":
        """Build a grid from a list of equally long rows of intensities."""
        if not rows or not rows[0]:
            raise ValueError("Grid needs at least one row and one column")
        width = len(rows[0])
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"Row {y} has {len(row)} samples, expected {width}")
        # bytes() rejects samples outside 0-255
        data = b"".join(bytes(row) for row in rows)
        return cls(width=width, height=len(rows), data=data)

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelGrid":
        """Convert a Pillow image to grayscale samples."""
        gray = to_grayscale(image)
        width, height = gray.size
        return cls(width=width, height=height, data=gray.tobytes())

    def __getitem__(self, y: int) -> bytes:
        if not 0 <= y < self.height:
            raise IndexError(f"Row {y} out of range for height {self.height}")
        start = y * self.width
        return self.data[start : start + self.width]

    def sample(self, x: int, y: int) -> int:
        """Intensity at column ``x``, row ``y``."""
        return self[y][x]

    def column(self, x: int) -> bytes:
        """All samples of column ``x``, top to bottom."""
        if not 0 <= x < self.width:
            raise IndexError(f"Column {x} out of range for width {self.width}")
        return self.data[x :: self.width]


def to_grayscale(image: Image.Image) -> Image.Image:
    """Reduce an image to 8-bit luminance.

    Transparent areas are composited onto white first, so an empty
    background reads as light rather than black.

    Note:
        Pillow's "L" conversion uses L = 0.299R + 0.587G + 0.114B
    """
    has_alpha = image.mode in ("RGBA", "LA", "PA") or (
        image.mode == "P" and "transparency" in image.info
    )
    if has_alpha:
        rgba = image.convert("RGBA")
        background = Image.new("RGBA", rgba.size, BACKGROUND_COLOR + (255,))
        image = Image.alpha_composite(background, rgba)
    if image.mode == "L":
        return image
    return image.convert("L")


def _decode_bytes(payload: bytes, origin: str) -> PixelGrid:
    try:
        with Image.open(io.BytesIO(payload)) as img:
            img.load()
            grid = PixelGrid.from_image(img)
    except (UnidentifiedImageError, OSError) as e:
        raise DecodeError(f"Cannot decode image from {origin}: {e}") from e
    logger.debug(f"Decoded {origin} into {grid.width}x{grid.height} grid")
    return grid


def _decode_data_url(url: str) -> PixelGrid:
    header, sep, payload = url.partition(",")
    if not sep or ";base64" not in header:
        raise DecodeError("Data URL must carry a base64 payload")
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Invalid base64 payload in data URL: {e}") from e
    return _decode_bytes(raw, "data URL")


def load_pixel_grid(source: Any) -> PixelGrid:
    """Load any supported image source as a PixelGrid.

    Args:
        source: PixelGrid, nested rows of 0-255 intensities, Pillow image,
            encoded image bytes, ``data:image/...;base64,`` URL, or
            filesystem path

    Returns:
        Grayscale PixelGrid of the image

    Raises:
        DecodeError: If the file is missing, the data is not a readable
            image, or the source type is not supported
    """
    if isinstance(source, PixelGrid):
        return source
    if isinstance(source, Image.Image):
        return PixelGrid.from_image(source)
    if isinstance(source, (bytes, bytearray)):
        return _decode_bytes(bytes(source), "bytes")
    if isinstance(source, str) and source.startswith("data:"):
        return _decode_data_url(source)
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.is_file():
            raise DecodeError(f"Image not found: {path}")
        logger.info(f"Loading image: {path}")
        return _decode_bytes(path.read_bytes(), str(path))
    if isinstance(source, (list, tuple)):
        try:
            return PixelGrid.from_rows(source)
        except (ValueError, TypeError) as e:
            raise DecodeError(f"Invalid pixel rows: {e}") from e
    raise DecodeError(f"Unsupported image source: {type(source).__name__}")
