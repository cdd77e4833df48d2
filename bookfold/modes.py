"""Fold mode strategies.

Each mode is a ModeStrategy record: the sample polarity it folds and a pure
function turning a ModeContext into one PagePattern per physical page.
MODE_STRATEGIES maps every ModeKind to its strategy.

- Inverted: fold dark runs
- Embossed: fold light runs
- Shadow Fold: Inverted, leaving pages out in a fold/skip rhythm
- Combi: fixed top and bottom edge folds, dark runs cut in between
- MMF (measure, mark, fold): one zone per page enclosing every dark run
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable

from bookfold.config import DEFAULT_COMBI_EDGE_WIDTH_CM
from bookfold.detection import detect_zones, page_column
from bookfold.imaging import PixelGrid
from bookfold.measurements import Precision, format_measurement
from bookfold.validation import FoldZone, ModeKind, PagePattern, ShadowFoldPeriod

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModeContext:
    """Everything a strategy needs to build a pattern."""

    grid: PixelGrid
    page_height_cm: float
    physical_pages: int
    threshold: int
    precision: Precision
    shadow_fold_period: ShadowFoldPeriod = ShadowFoldPeriod.FOLD_ONE_SKIP_ONE
    edge_width_cm: float = DEFAULT_COMBI_EDGE_WIDTH_CM
    max_workers: int | None = None


def scan_pages(
    ctx: ModeContext, detect_dark: bool, band: tuple[float, float] | None = None
) -> list[list[FoldZone]]:
    """Run zone detection once per physical page.

    Returns:
        Zone lists indexed by 0-based page index

    Note:
        Pages only read the shared grid, so with ``max_workers > 1`` they
        are scanned on a thread pool; ``executor.map`` keeps page order.
    """

    def scan(page_index: int) -> list[FoldZone]:
        column_x = page_column(page_index, ctx.physical_pages, ctx.grid.width)
        zones = detect_zones(
            ctx.grid,
            column_x,
            ctx.threshold,
            ctx.page_height_cm,
            ctx.precision,
            detect_dark,
            band=band,
        )
        logger.debug(f"Page {page_index + 1}: column {column_x}, {len(zones)} zones")
        return zones

    pages = range(ctx.physical_pages)
    if ctx.max_workers and ctx.max_workers > 1:
        with ThreadPoolExecutor(max_workers=ctx.max_workers) as executor:
            return list(executor.map(scan, pages))
    return [scan(page_index) for page_index in pages]


def plain_pattern(ctx: ModeContext, detect_dark: bool) -> list[PagePattern]:
    """One page per column scan, zones kept as detected (Inverted, Embossed)."""
    return [
        PagePattern(page=index + 1, zones=zones, has_content=bool(zones))
        for index, zones in enumerate(scan_pages(ctx, detect_dark))
    ]


def should_skip_page(page_index: int, period: ShadowFoldPeriod | str) -> bool:
    """Whether Shadow Fold leaves a page (0-indexed) untouched.

    "1:1" skips every second page (1, 3, 5, ...); "2:1" skips every third
    page (2, 5, 8, ...).
    """
    if ShadowFoldPeriod(period) is ShadowFoldPeriod.FOLD_ONE_SKIP_ONE:
        return page_index % 2 == 1
    return (page_index + 1) % 3 == 0


def shadow_fold_pattern(ctx: ModeContext, detect_dark: bool) -> list[PagePattern]:
    """Inverted pattern with skipped pages emptied."""
    pattern: list[PagePattern] = []
    for index, zones in enumerate(scan_pages(ctx, detect_dark)):
        if should_skip_page(index, ctx.shadow_fold_period):
            pattern.append(PagePattern(page=index + 1, has_content=False, is_skipped=True))
        else:
            pattern.append(PagePattern(page=index + 1, zones=zones, has_content=bool(zones)))
    return pattern


def edge_folds(
    edge_width_cm: float, page_height_cm: float, precision: Precision | str
) -> tuple[FoldZone, FoldZone]:
    """Top and bottom edge folds for Combi mode."""
    width = format_measurement(edge_width_cm, precision)
    top = FoldZone(start_mark=0.0, end_mark=width, height=width, is_edge_fold=True)
    bottom_start = format_measurement(page_height_cm - edge_width_cm, precision)
    bottom_end = format_measurement(page_height_cm, precision)
    bottom = FoldZone(
        start_mark=bottom_start,
        end_mark=bottom_end,
        height=format_measurement(bottom_end - bottom_start, precision),
        is_edge_fold=True,
    )
    return top, bottom


def combi_pattern(ctx: ModeContext, detect_dark: bool) -> list[PagePattern]:
    """Edge folds on every page plus the runs found between them."""
    band = (ctx.edge_width_cm, ctx.page_height_cm - ctx.edge_width_cm)
    top, bottom = edge_folds(ctx.edge_width_cm, ctx.page_height_cm, ctx.precision)

    pattern: list[PagePattern] = []
    for index, center in enumerate(scan_pages(ctx, detect_dark, band=band)):
        zones = sorted([top, bottom, *center], key=lambda zone: zone.start_mark)
        pattern.append(PagePattern(page=index + 1, zones=zones, has_content=True))
    return pattern


def combine_zones(zones: list[FoldZone], precision: Precision | str) -> FoldZone | None:
    """Single zone from the topmost start to the lowest end, or None if no zones."""
    if not zones:
        return None

    start = min(zone.start_mark for zone in zones)
    end = max(zone.end_mark for zone in zones)
    return FoldZone(
        start_mark=format_measurement(start, precision),
        end_mark=format_measurement(end, precision),
        height=format_measurement(end - start, precision),
    )


def mmf_pattern(ctx: ModeContext, detect_dark: bool) -> list[PagePattern]:
    """Collapse each page's runs into one enclosing fold."""
    pattern: list[PagePattern] = []
    for index, zones in enumerate(scan_pages(ctx, detect_dark)):
        combined = combine_zones(zones, ctx.precision)
        if combined is None:
            pattern.append(PagePattern(page=index + 1, has_content=False))
        else:
            pattern.append(PagePattern(page=index + 1, zones=[combined], has_content=True))
    return pattern


@dataclass(frozen=True)
class ModeStrategy:
    """Polarity and pattern builder of one fold mode."""

    kind: ModeKind
    detect_dark: bool
    build: Callable[[ModeContext, bool], list[PagePattern]]
    description: str

    @property
    def name(self) -> str:
        return self.kind.value

    def generate(self, ctx: ModeContext) -> list[PagePattern]:
        """Build the pattern for every physical page."""
        return self.build(ctx, self.detect_dark)


MODE_STRATEGIES: dict[ModeKind, ModeStrategy] = {
    ModeKind.INVERTED: ModeStrategy(
        ModeKind.INVERTED, True, plain_pattern, "Fold the dark areas of the image"
    ),
    ModeKind.EMBOSSED: ModeStrategy(
        ModeKind.EMBOSSED, False, plain_pattern, "Fold the light areas of the image"
    ),
    ModeKind.SHADOW_FOLD: ModeStrategy(
        ModeKind.SHADOW_FOLD, True, shadow_fold_pattern, "Inverted with skipped pages (1:1 or 2:1)"
    ),
    ModeKind.COMBI: ModeStrategy(
        ModeKind.COMBI, True, combi_pattern, "Fixed edge folds, dark areas cut in the center"
    ),
    ModeKind.MMF: ModeStrategy(
        ModeKind.MMF, True, mmf_pattern, "One fold per page spanning every dark area"
    ),
}


def get_strategy(mode: ModeKind | str) -> ModeStrategy:
    """Look up the strategy for a mode.

    Raises:
        UnknownModeError: If ``mode`` names no mode
    """
    return MODE_STRATEGIES[ModeKind.parse(mode)]
