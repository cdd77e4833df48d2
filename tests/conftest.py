"""Shared test fixtures for pattern generation tests."""

from pathlib import Path
from typing import Callable

import pytest
from PIL import Image, ImageDraw

from bookfold.imaging import PixelGrid

WHITE = 255
BLACK = 0

GridFactory = Callable[..., PixelGrid]


def _build_grid(
    width: int,
    height: int,
    dark_runs: dict[int, list[tuple[int, int]]] | None = None,
    background: int = WHITE,
    ink: int = BLACK,
) -> PixelGrid:
    rows = [[background] * width for _ in range(height)]
    for x, runs in (dark_runs or {}).items():
        for start, stop in runs:
            for y in range(start, stop):
                rows[y][x] = ink
    return PixelGrid.from_rows(rows)


@pytest.fixture
def grid_factory() -> GridFactory:
    """Build a white grid with dark runs ``{column: [(start_row, stop_row), ...]}``."""
    return _build_grid


@pytest.fixture
def silhouette_png(tmp_path: Path) -> Path:
    """100x200 white PNG with a black bar over columns 20-29, rows 40-59.

    With 10 physical pages, page 3 samples column 20 and sees the bar.
    """
    img = Image.new("L", (100, 200), color=WHITE)
    draw = ImageDraw.Draw(img)
    draw.rectangle([(20, 40), (29, 59)], fill=BLACK)

    output_path = tmp_path / "silhouette.png"
    img.save(output_path, "PNG")
    return output_path
