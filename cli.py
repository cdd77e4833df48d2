"""Command-line interface for bookfold pattern generation.

Usage:
    # Inverted pattern for a 300-page book with 20 cm pages
    python cli.py generate heart.png --last-page=300 --page-height=20

    # Combi pattern with 1.5 cm edge folds, saved as JSON
    python cli.py generate heart.png --last-page=300 --page-height=8 --unit=in \
        --mode=combi --edge-width=1.5 --output=heart_pattern.json

    # List available modes
    python cli.py modes
"""

import logging
import sys
from pathlib import Path

import click

from bookfold.config import DEFAULT_COMBI_EDGE_WIDTH_CM, DEFAULT_THRESHOLD
from bookfold.generator import generate, summarize_pattern
from bookfold.measurements import Precision, Unit
from bookfold.modes import MODE_STRATEGIES
from bookfold.validation import ShadowFoldPeriod

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


@click.group()
@click.option("--verbose", is_flag=True, help="Log per-page detection details")
def cli(verbose: bool) -> None:
    """Bookfold - turn an image into a book folding pattern."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )


@cli.command(name="generate")
@click.argument("image_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--last-page", "last_page_number", required=True, type=int, help="Number of the last page of the book")
@click.option("--page-height", required=True, type=float, help="Page height in --unit")
@click.option("--unit", default=Unit.CM.value, type=click.Choice([u.value for u in Unit]), help="Page height unit")
@click.option("--mode", default="inverted", help="Fold mode (see 'modes' command)")
@click.option("--threshold", default=DEFAULT_THRESHOLD, type=click.IntRange(0, 255), help="Dark/light cutoff (0-255)")
@click.option("--precision", default=Precision.TENTH_MM.value, type=click.Choice([p.value for p in Precision]), help="Measurement snapping grid")
@click.option("--shadow-fold-period", default=ShadowFoldPeriod.FOLD_ONE_SKIP_ONE.value, type=click.Choice([p.value for p in ShadowFoldPeriod]), help="Fold/skip rhythm for Shadow Fold mode")
@click.option("--edge-width", type=float, default=None, help=f"Combi edge fold width in cm (default {DEFAULT_COMBI_EDGE_WIDTH_CM:g})")
@click.option("--workers", type=click.IntRange(min=1), default=None, help="Threads for per-page scans")
@click.option("--output", type=click.Path(dir_okay=False, writable=True), default=None, help="Write the result JSON to this file")
def generate_cmd(
    image_path: str,
    last_page_number: int,
    page_height: float,
    unit: str,
    mode: str,
    threshold: int,
    precision: str,
    shadow_fold_period: str,
    edge_width: float | None,
    workers: int | None,
    output: str | None,
) -> None:
    """Generate a folding pattern from IMAGE_PATH.

    Output:
        - Summary line per run on stdout
        - Result JSON (camelCase keys) when --output is given
    """
    click.echo(f"📐 Generating {mode} pattern from {image_path}...")

    result = generate(
        {
            "image": image_path,
            "mode": mode,
            "threshold": threshold,
            "last_page_number": last_page_number,
            "page_height": page_height,
            "page_height_unit": unit,
            "precision": precision,
            "shadow_fold_period": shadow_fold_period,
            "combi_edge_width": edge_width,
            "max_workers": workers,
        }
    )

    if not result.success:
        raise click.ClickException(result.message)

    summary = summarize_pattern(result.pattern or [])
    click.echo(f"✓ {result.message}")
    if summary["skipped_pages"]:
        click.echo(f"  {summary['skipped_pages']} pages skipped")

    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(result.model_dump_json(by_alias=True, indent=2))
        logger.info(f"Saved pattern to {output_path}")
        click.echo(f"📁 Pattern JSON saved to: {output_path}")


@cli.command()
def modes() -> None:
    """List the available fold modes."""
    for strategy in MODE_STRATEGIES.values():
        click.echo(f"{strategy.name:<12} {strategy.kind.label:<12} {strategy.description}")


if __name__ == "__main__":
    cli()
