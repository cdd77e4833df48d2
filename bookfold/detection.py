"""Fold zone detection along image columns.

This module handles:
- Dark/light classification of grayscale samples against a threshold
- Scanning one column for runs of target samples
- Converting pixel runs into FoldZones measured on the physical page
- Mapping physical pages onto image columns
- Inverting a zone list into the gaps between zones

A run covers the half-open pixel range ``[start, stop)``: its end mark is
the top edge of the first non-target row, or the bottom edge of the image
when the run reaches the last row.
"""

import logging
import math
from typing import Callable, Iterable, Iterator

from bookfold.imaging import PixelGrid
from bookfold.measurements import Precision, format_measurement, pixel_to_cm
from bookfold.validation import FoldZone

logger = logging.getLogger(__name__)


def is_dark(value: int, threshold: int) -> bool:
    """A sample is dark when strictly below the threshold."""
    return value < threshold


def is_light(value: int, threshold: int) -> bool:
    """A sample is light when at or above the threshold."""
    return value >= threshold


def target_predicate(threshold: int, detect_dark: bool) -> Callable[[int], bool]:
    """Classifier selecting the samples a mode folds."""
    if detect_dark:
        return lambda value: is_dark(value, threshold)
    return lambda value: is_light(value, threshold)


def scan_runs(samples: Iterable[int], is_target: Callable[[int], bool]) -> Iterator[tuple[int, int]]:
    """Yield ``(start, stop)`` row ranges of consecutive target samples.

    Args:
        samples: Intensities from top to bottom
        is_target: Sample classifier

    Yields:
        Half-open ranges in increasing order; ranges never touch, since
        each one ends on a non-target row or the end of the samples
    """
    zone_start: int | None = None  # None while idle
    count = 0
    for y, value in enumerate(samples):
        count = y + 1
        if is_target(value):
            if zone_start is None:
                zone_start = y
        elif zone_start is not None:
            yield zone_start, y
            zone_start = None

    if zone_start is not None:
        yield zone_start, count


def run_to_zone(
    start: int,
    stop: int,
    image_height: int,
    page_height_cm: float,
    precision: Precision | str,
    band: tuple[float, float] | None = None,
) -> FoldZone | None:
    """Convert a pixel run into a FoldZone on the physical page.

    Args:
        start: First row of the run
        stop: Row just past the run
        image_height: Image height in pixels
        page_height_cm: Physical page height in centimeters
        precision: Snapping grid for the marks
        band: Optional ``(top_cm, bottom_cm)`` window; the run is clipped
            to it before rounding

    Returns:
        The zone, or None if the run lies outside ``band``
    """
    start_raw = pixel_to_cm(start, image_height, page_height_cm)
    end_raw = pixel_to_cm(stop, image_height, page_height_cm)

    if band is not None:
        start_raw = max(start_raw, band[0])
        end_raw = min(end_raw, band[1])
        if end_raw <= start_raw:
            return None

    start_mark = format_measurement(start_raw, precision)
    end_mark = format_measurement(end_raw, precision)
    return FoldZone(
        start_mark=start_mark,
        end_mark=end_mark,
        height=format_measurement(end_mark - start_mark, precision),
    )


def detect_zones(
    grid: PixelGrid,
    column_x: int,
    threshold: int,
    page_height_cm: float,
    precision: Precision | str,
    detect_dark: bool,
    band: tuple[float, float] | None = None,
) -> list[FoldZone]:
    """Detect fold zones along one image column.

    Args:
        grid: Grayscale image
        column_x: Column to scan (0-indexed)
        threshold: Dark/light cutoff (0-255)
        page_height_cm: Physical page height in centimeters
        precision: Snapping grid for the marks
        detect_dark: True folds dark samples, False folds light samples
        band: Optional ``(top_cm, bottom_cm)`` window restricting the zones

    Returns:
        Zones ordered by start_mark and non-overlapping; empty when
        ``column_x`` lies outside the image
    """
    if not 0 <= column_x < grid.width:
        logger.debug(f"Column {column_x} outside image width {grid.width}, no zones")
        return []

    is_target = target_predicate(threshold, detect_dark)
    zones: list[FoldZone] = []
    for start, stop in scan_runs(grid.column(column_x), is_target):
        zone = run_to_zone(start, stop, grid.height, page_height_cm, precision, band)
        if zone is not None:
            zones.append(zone)
    return zones


def page_column(page_index: int, total_pages: int, width: int) -> int:
    """Image column sampled for a physical page.

    Example:
        page_column(3, 10, 200) == 60
    """
    return math.floor(page_index * (width / total_pages))


def invert_zones(
    zones: list[FoldZone], page_height_cm: float, precision: Precision | str
) -> list[FoldZone]:
    """Return the gaps around and between ``zones`` over the whole page.

    Args:
        zones: Zones ordered by start_mark, as returned by ``detect_zones``
        page_height_cm: Physical page height in centimeters
        precision: Snapping grid for the gap heights

    Returns:
        Gap zones with strictly positive height; a single page-long zone
        when ``zones`` is empty
    """
    page_end = format_measurement(page_height_cm, precision)
    if not zones:
        return [FoldZone(start_mark=0.0, end_mark=page_end, height=page_end)]

    bounds = [0.0]
    for zone in zones:
        bounds.extend((zone.start_mark, zone.end_mark))
    bounds.append(page_end)

    inverted: list[FoldZone] = []
    for start, end in zip(bounds[::2], bounds[1::2]):
        height = format_measurement(end - start, precision)
        if height > 0:
            inverted.append(FoldZone(start_mark=start, end_mark=end, height=height))
    return inverted
