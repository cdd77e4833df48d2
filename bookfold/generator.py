"""Pattern generation pipeline.

This module provides:
- Parameter loading from a GenerationParams or a plain mapping
- The generate() entry point: validate → decode → scan pages → summarize
- Summary statistics over a finished pattern

generate() never raises: every failure comes back as an unsuccessful
GenerationResult and no partial pattern is ever returned.
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, TypedDict

from pydantic import ValidationError

from bookfold.errors import InvalidParametersError, UnknownModeError
from bookfold.imaging import load_pixel_grid
from bookfold.measurements import physical_pages
from bookfold.modes import ModeContext, get_strategy
from bookfold.validation import GenerationParams, GenerationResult, PagePattern

logger = logging.getLogger(__name__)


class PatternSummary(TypedDict):
    """Counts reported alongside a generated pattern."""

    pages: int
    pages_with_content: int
    skipped_pages: int
    total_zones: int


def _describe_validation_error(error: ValidationError) -> str:
    reasons = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err["loc"])
        msg = err["msg"].removeprefix("Value error, ")
        reasons.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(reasons)


def load_params(raw: GenerationParams | Mapping[str, Any]) -> GenerationParams:
    """Validate raw parameters.

    Args:
        raw: Ready GenerationParams, or a mapping with snake_case or
            camelCase keys

    Returns:
        Validated GenerationParams with defaults resolved

    Raises:
        InvalidParametersError: If a parameter is missing or out of range
        UnknownModeError: If the mode names no known mode
    """
    if isinstance(raw, GenerationParams):
        return raw
    if not isinstance(raw, Mapping):
        raise InvalidParametersError(
            f"Parameters must be a mapping or GenerationParams, got {type(raw).__name__}"
        )
    try:
        return GenerationParams.model_validate(dict(raw))
    except ValidationError as e:
        raise InvalidParametersError(_describe_validation_error(e)) from e


def summarize_pattern(pattern: list[PagePattern]) -> PatternSummary:
    """Count pages, content pages, skipped pages and zones."""
    return PatternSummary(
        pages=len(pattern),
        pages_with_content=sum(1 for page in pattern if page.has_content),
        skipped_pages=sum(1 for page in pattern if page.is_skipped),
        total_zones=sum(len(page.zones) for page in pattern),
    )


def generate(params: GenerationParams | Mapping[str, Any]) -> GenerationResult:
    """Generate a bookfolding pattern.

    Args:
        params: GenerationParams, or a mapping accepted by ``load_params``

    Returns:
        GenerationResult with one PagePattern per physical page on success,
        or ``success=False`` and a message naming the failure

    Note:
        Parameters are validated before the image is touched. Decoding and
        detection failures are reported as "<mode> generation failed: <cause>".
    """
    try:
        resolved = load_params(params)
    except InvalidParametersError as e:
        logger.warning(f"Invalid parameters: {e}")
        return GenerationResult(success=False, message=f"Invalid parameters: {e}")
    except UnknownModeError as e:
        logger.warning(str(e))
        return GenerationResult(success=False, message=str(e))

    mode = resolved.mode.value
    logger.info(f"Generating {mode} pattern for last page {resolved.last_page_number}")

    try:
        grid = load_pixel_grid(resolved.image)
        ctx = ModeContext(
            grid=grid,
            page_height_cm=resolved.page_height_cm,
            physical_pages=physical_pages(resolved.last_page_number),
            threshold=resolved.threshold,
            precision=resolved.precision,
            shadow_fold_period=resolved.shadow_fold_period,
            edge_width_cm=resolved.edge_width_cm,
            max_workers=resolved.max_workers,
        )
        logger.info(
            f"Scanning {ctx.physical_pages} pages over a {grid.width}x{grid.height} image, "
            f"page height {ctx.page_height_cm:g} cm"
        )
        pattern = get_strategy(resolved.mode).generate(ctx)
        summary = summarize_pattern(pattern)
    except Exception as e:
        logger.error(f"{mode} generation failed: {e}", exc_info=True)
        return GenerationResult(success=False, mode=mode, message=f"{mode} generation failed: {e}")

    message = (
        f"{resolved.mode.label} pattern generated: {summary['pages_with_content']}/"
        f"{summary['pages']} pages with content, {summary['total_zones']} zones"
    )
    logger.info(message)
    return GenerationResult(
        success=True,
        message=message,
        mode=mode,
        pattern=pattern,
        processed_at=datetime.now().isoformat(),
    )
