"""Unit tests for bookfold/measurements.py."""

import pytest

from bookfold.measurements import (
    Precision,
    Unit,
    convert_length,
    format_measurement,
    format_measurements,
    from_cm,
    physical_pages,
    pixel_to_cm,
    round_to_precision,
    to_cm,
)


class TestUnitConversions:
    """Tests for length conversion functions."""

    def test_inches_to_cm(self) -> None:
        """Test inch to cm conversion."""
        assert to_cm(10, "in") == pytest.approx(25.4)

    def test_cm_passthrough(self) -> None:
        """Test that centimeters are returned unchanged."""
        assert to_cm(21.5, Unit.CM) == 21.5

    def test_from_cm_to_inches(self) -> None:
        """Test cm to inch conversion."""
        assert from_cm(25.4, Unit.INCH) == pytest.approx(10)

    def test_convert_length_between_units(self) -> None:
        """Test conversion going through centimeters."""
        assert convert_length(1, "in", "cm") == pytest.approx(2.54)
        assert convert_length(5.08, "cm", "in") == pytest.approx(2)

    def test_convert_length_same_unit(self) -> None:
        """Test that converting to the same unit is the identity."""
        assert convert_length(7.3, "in", Unit.INCH) == 7.3

    def test_unknown_unit_raises(self) -> None:
        """Test that an unknown unit is rejected."""
        with pytest.raises(ValueError):
            to_cm(1, "mm")


class TestPhysicalPages:
    """Tests for physical sheet count."""

    @pytest.mark.parametrize(
        ("last_page", "expected"),
        [(10, 5), (11, 6), (1, 1), (2, 1), (399, 200)],
    )
    def test_two_page_numbers_per_sheet(self, last_page: int, expected: int) -> None:
        """Test that odd last pages round up to a full sheet."""
        assert physical_pages(last_page) == expected


class TestPixelToCm:
    """Tests for pixel to page position mapping."""

    def test_middle_of_page(self) -> None:
        """Test that the middle row maps to half the page height."""
        assert pixel_to_cm(100, 200, 20) == pytest.approx(10)

    def test_bottom_edge(self) -> None:
        """Test that the image height maps to the full page height."""
        assert pixel_to_cm(200, 200, 20) == pytest.approx(20)


class TestRoundToPrecision:
    """Tests for millimeter grid snapping."""

    def test_tenth_mm(self) -> None:
        """Test snapping to 0.1 mm."""
        assert round_to_precision(1.2345, Precision.TENTH_MM) == pytest.approx(1.23)

    def test_half_mm(self) -> None:
        """Test snapping to 0.5 mm."""
        assert round_to_precision(1.2345, "0.5mm") == pytest.approx(1.25)

    def test_one_mm(self) -> None:
        """Test snapping to whole millimeters."""
        assert round_to_precision(1.2345, "1mm") == pytest.approx(1.2)

    def test_exact_passthrough(self) -> None:
        """Test that exact precision leaves the value unchanged."""
        assert round_to_precision(1.2345, "exact") == 1.2345

    def test_half_rounds_up(self) -> None:
        """Test that a value halfway between grid steps rounds up."""
        assert round_to_precision(0.25, "1mm") == pytest.approx(0.3)

    def test_unknown_precision_raises(self) -> None:
        """Test that an unknown precision is rejected."""
        with pytest.raises(ValueError):
            round_to_precision(1.0, "2mm")


class TestFormatMeasurement:
    """Tests for display formatting."""

    def test_two_decimals_for_exact(self) -> None:
        """Test that exact values are still cut to two decimals."""
        assert format_measurement(3.14159, "exact") == pytest.approx(3.14)

    def test_grid_then_decimals(self) -> None:
        """Test that 0.5 mm snapping survives display rounding."""
        assert format_measurement(2.6789, "0.5mm") == pytest.approx(2.7)

    @pytest.mark.parametrize("precision", list(Precision))
    @pytest.mark.parametrize(
        "value",
        [0.0, 0.004, 0.005, 0.0149, 1.2345, 2.675, 3.14159, 12.3456, 99.999, 254.0, -1.25],
    )
    def test_idempotent(self, value: float, precision: Precision) -> None:
        """Test that formatting a formatted value changes nothing."""
        once = format_measurement(value, precision)
        assert format_measurement(once, precision) == once

    def test_format_many(self) -> None:
        """Test list formatting."""
        assert format_measurements([1.2345, 6.789], "1mm") == pytest.approx([1.2, 6.8])
