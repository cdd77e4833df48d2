"""Unit conversion and precision rounding for physical measurements.

This module handles:
- Length conversions (centimeters ↔ inches)
- Physical sheet count from a logical page number
- Pixel row → centimeter mapping on a page
- Snapping measurements to a millimeter grid and display rounding

All internal computation happens in centimeters.
"""

import math
from enum import Enum
from typing import Iterable

from bookfold.config import (
    CM_PER_INCH,
    DISPLAY_DECIMALS,
    LOGICAL_PAGES_PER_SHEET,
    MM_PER_CM,
    PRECISION_STEPS_PER_MM,
)


class Unit(str, Enum):
    """Length unit accepted for page dimensions."""

    CM = "cm"
    INCH = "in"


class Precision(str, Enum):
    """Snapping grid applied to every reported measurement."""

    TENTH_MM = "0.1mm"
    HALF_MM = "0.5mm"
    ONE_MM = "1mm"
    EXACT = "exact"


def _round_half_up(value: float) -> float:
    return math.floor(value + 0.5)


def to_cm(value: float, unit: Unit | str) -> float:
    """Convert a length to centimeters.

    Args:
        value: Length expressed in ``unit``
        unit: "cm" or "in"

    Returns:
        Length in centimeters

    Note:
        1 inch = 2.54 cm
    """
    return value * CM_PER_INCH if Unit(unit) is Unit.INCH else value


def from_cm(value_cm: float, unit: Unit | str) -> float:
    """Convert a length in centimeters to ``unit``."""
    return value_cm / CM_PER_INCH if Unit(unit) is Unit.INCH else value_cm


def convert_length(value: float, from_unit: Unit | str, to_unit: Unit | str) -> float:
    """Convert a length between units, going through centimeters."""
    if Unit(from_unit) is Unit(to_unit):
        return value
    return from_cm(to_cm(value, from_unit), to_unit)


def physical_pages(last_page_number: int) -> int:
    """Number of physical sheets needed for a logical last page number.

    Args:
        last_page_number: Number printed on the last page of the book

    Returns:
        Sheet count; each sheet carries two page numbers, so an odd last
        page still needs a full sheet

    Example:
        physical_pages(10) == 5, physical_pages(11) == 6
    """
    return math.ceil(last_page_number / LOGICAL_PAGES_PER_SHEET)


def pixel_to_cm(pixel: float, image_height: int, page_height_cm: float) -> float:
    """Map a pixel row position onto the physical page height."""
    return (pixel / image_height) * page_height_cm


def round_to_precision(value_cm: float, precision: Precision | str) -> float:
    """Snap a length to the requested millimeter grid.

    Args:
        value_cm: Length in centimeters
        precision: "0.1mm", "0.5mm", "1mm" or "exact"

    Returns:
        Snapped length in centimeters; "exact" returns the value unchanged
    """
    precision = Precision(precision)
    if precision is Precision.EXACT:
        return value_cm

    steps = PRECISION_STEPS_PER_MM[precision.value]
    value_mm = value_cm * MM_PER_CM
    rounded_mm = _round_half_up(value_mm * steps) / steps
    return rounded_mm / MM_PER_CM


def format_measurement(value_cm: float, precision: Precision | str) -> float:
    """Snap a length and keep at most two decimals.

    The two-decimal rounding is applied regardless of ``precision``, so
    formatting an already formatted value returns it unchanged.
    """
    scale = 10**DISPLAY_DECIMALS
    return _round_half_up(round_to_precision(value_cm, precision) * scale) / scale


def format_measurements(values: Iterable[float], precision: Precision | str) -> list[float]:
    """Apply ``format_measurement`` to every value."""
    return [format_measurement(v, precision) for v in values]
