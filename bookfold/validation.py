"""Schema validation using Pydantic models.

This module defines:
- Enumerations for fold modes and shadow-fold periods
- Pydantic models for fold zones, page patterns, parameters and results
- Cross-field checks (zone geometry, skipped pages, Combi edge width)

Every model accepts snake_case field names and camelCase aliases, and
serializes to camelCase with ``model_dump(by_alias=True)``.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from bookfold.config import (
    DEFAULT_COMBI_EDGE_WIDTH_CM,
    DEFAULT_PRECISION,
    DEFAULT_SHADOW_FOLD_PERIOD,
    DEFAULT_THRESHOLD,
    DEFAULT_UNIT,
    MAX_THRESHOLD,
    MIN_THRESHOLD,
    SCHEMA_VERSION,
    ZONE_HEIGHT_TOLERANCE_CM,
)
from bookfold.errors import UnknownModeError
from bookfold.measurements import Precision, Unit, to_cm


class ModeKind(str, Enum):
    """Supported fold modes."""

    INVERTED = "inverted"
    EMBOSSED = "embossed"
    COMBI = "combi"
    SHADOW_FOLD = "shadowFold"
    MMF = "mmf"

    @property
    def label(self) -> str:
        """Human-readable mode name."""
        return _MODE_LABELS[self]

    @classmethod
    def parse(cls, name: "ModeKind | str") -> "ModeKind":
        """Resolve a mode from its value, label or a loose spelling of either.

        "Shadow Fold", "shadow_fold", "shadowFold" and "SHADOW-FOLD" all
        resolve to ``ModeKind.SHADOW_FOLD``.

        Raises:
            UnknownModeError: If the name matches no mode
        """
        if isinstance(name, cls):
            return name
        if isinstance(name, str):
            key = "".join(ch for ch in name.lower() if ch not in " _-")
            for mode in cls:
                if key == mode.value.lower():
                    return mode
        raise UnknownModeError(f"Unknown mode: {name!r}")


_MODE_LABELS = {
    ModeKind.INVERTED: "Inverted",
    ModeKind.EMBOSSED: "Embossed",
    ModeKind.COMBI: "Combi",
    ModeKind.SHADOW_FOLD: "Shadow Fold",
    ModeKind.MMF: "MMF",
}


class ShadowFoldPeriod(str, Enum):
    """Fold/skip rhythm for Shadow Fold mode."""

    FOLD_ONE_SKIP_ONE = "1:1"
    FOLD_TWO_SKIP_ONE = "2:1"


class CamelModel(BaseModel):
    """Base model exposing camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FoldZone(CamelModel):
    """Vertical span of a page to cut and/or fold, in centimeters from the top."""

    model_config = ConfigDict(frozen=True)

    start_mark: float = Field(ge=0, description="Distance from the top edge (cm)")
    end_mark: float = Field(ge=0, description="Distance from the top edge (cm)")
    height: float = Field(ge=0, description="Zone height (cm)")
    is_edge_fold: bool = Field(default=False, description="Fixed edge fold (Combi mode)")

    @model_validator(mode="after")
    def check_geometry(self) -> "FoldZone":
        """Validate that marks are ordered and height matches their distance."""
        if self.end_mark < self.start_mark:
            raise ValueError(
                f"end_mark ({self.end_mark}) must not precede start_mark ({self.start_mark})"
            )
        drift = abs(self.height - (self.end_mark - self.start_mark))
        if drift > ZONE_HEIGHT_TOLERANCE_CM + 1e-9:
            raise ValueError(
                f"height ({self.height}) does not match end_mark - start_mark "
                f"({self.end_mark - self.start_mark:.4f})"
            )
        return self


class PagePattern(CamelModel):
    """Fold plan for one physical page."""

    page: int = Field(ge=1, description="Physical page number (1-indexed)")
    zones: list[FoldZone] = Field(default_factory=list)
    has_content: bool = Field(description="Whether the page carries any zone")
    is_skipped: bool = Field(default=False, description="Page left untouched (Shadow Fold)")

    @model_validator(mode="after")
    def check_content(self) -> "PagePattern":
        """Validate has_content against zones and that skipped pages are empty."""
        if self.is_skipped and self.zones:
            raise ValueError(f"Skipped page {self.page} must not carry zones")
        if self.has_content != bool(self.zones):
            raise ValueError(
                f"has_content={self.has_content} contradicts {len(self.zones)} zones on page {self.page}"
            )
        return self


class GenerationParams(CamelModel):
    """User-supplied configuration for one generation call."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    image: Any = Field(description="Path, bytes, data URL, Pillow image or PixelGrid")
    mode: ModeKind = ModeKind.INVERTED
    threshold: int = Field(default=DEFAULT_THRESHOLD, ge=MIN_THRESHOLD, le=MAX_THRESHOLD)
    last_page_number: int = Field(gt=0, description="Number of the last logical page")
    page_height: float = Field(gt=0, allow_inf_nan=False, description="Page height in page_height_unit")
    page_height_unit: Unit = Unit(DEFAULT_UNIT)
    precision: Precision = Precision(DEFAULT_PRECISION)
    shadow_fold_period: ShadowFoldPeriod = ShadowFoldPeriod(DEFAULT_SHADOW_FOLD_PERIOD)
    combi_edge_width: float | None = Field(default=None, gt=0, allow_inf_nan=False, description="Edge fold width (cm)")
    max_workers: int | None = Field(default=None, ge=1, description="Threads for per-page scans")

    @field_validator("image")
    @classmethod
    def check_image(cls, v: Any) -> Any:
        """Reject a missing image reference."""
        if v is None or (isinstance(v, (str, bytes)) and not v):
            raise ValueError("an image is required")
        return v

    @field_validator("mode", mode="before")
    @classmethod
    def parse_mode(cls, v: Any) -> ModeKind:
        """Resolve loose mode spellings; unknown names raise UnknownModeError."""
        return ModeKind.parse(v)

    @field_validator("threshold", "page_height_unit", "precision", "shadow_fold_period", mode="before")
    @classmethod
    def fill_default(cls, v: Any, info: ValidationInfo) -> Any:
        """Treat an explicit None as "use the default"."""
        if v is None:
            return cls.model_fields[info.field_name].default
        return v

    @property
    def page_height_cm(self) -> float:
        """Page height converted to centimeters."""
        return to_cm(self.page_height, self.page_height_unit)

    @property
    def edge_width_cm(self) -> float:
        """Combi edge fold width in centimeters."""
        if self.combi_edge_width is None:
            return DEFAULT_COMBI_EDGE_WIDTH_CM
        return self.combi_edge_width

    @model_validator(mode="after")
    def check_combi_edges(self) -> "GenerationParams":
        """Validate that Combi edge folds leave room between them."""
        if self.mode is ModeKind.COMBI and 2 * self.edge_width_cm >= self.page_height_cm:
            raise ValueError(
                f"Combi edge width {self.edge_width_cm} cm is too large for a "
                f"{self.page_height_cm:g} cm page (2 x edge width must be smaller than the page height)"
            )
        return self


class GenerationResult(CamelModel):
    """Outcome of one generation call; ``pattern`` is only present on success."""

    schema_version: str = Field(default=SCHEMA_VERSION, description="JSON schema version")
    success: bool
    message: str
    mode: str | None = None
    pattern: list[PagePattern] | None = None
    processed_at: str | None = Field(default=None, description="ISO 8601 timestamp")

    @field_validator("processed_at")
    @classmethod
    def check_timestamp_format(cls, v: str | None) -> str | None:
        """Validate timestamp is valid ISO 8601 format."""
        if v is None:
            return v
        try:
            datetime.fromisoformat(v)
        except ValueError as e:
            raise ValueError(f"Invalid ISO 8601 timestamp: {v}") from e
        return v

    @model_validator(mode="after")
    def check_outcome(self) -> "GenerationResult":
        """Validate that pattern presence matches success."""
        if self.success and (self.pattern is None or self.processed_at is None):
            raise ValueError("A successful result needs a pattern and processed_at")
        if not self.success and self.pattern is not None:
            raise ValueError("A failed result must not carry a pattern")
        return self
