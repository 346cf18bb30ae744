#!/usr/bin/env python3
"""CLI for listing and searching indexed videos.

Usage:
    # List the whole catalog
    python -m cli.search_videos

    # Rank videos against a free-text query
    python -m cli.search_videos --query "cat dog"

    # Rank videos against the tags of a still image
    python -m cli.search_videos --image beach.jpg --include-zero
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from rich.console import Console
from rich.table import Table

from models.image_analysis import ImageAnalysis
from models.search import SearchMode, SearchOutcome
from services.errors import VideoSearchError
from services.search_context import SearchContext
from utils.config import load_config, setup_logging, validate_config

console = Console()


def format_duration(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"


def render_analysis(analysis: ImageAnalysis) -> None:
    caption = analysis.caption
    if caption:
        console.print(
            f"[bold]Description:[/bold] {caption.text} "
            f"[dim]({caption.confidence * 100:.2f}%)[/dim]"
        )
    console.print(f"[bold]Tags:[/bold] {', '.join(t.name for t in analysis.tags)}")


def render_outcome(outcome: SearchOutcome, include_zero: bool, limit: int | None) -> None:
    """Print ranked results as a table, followed by any warnings."""
    results = outcome.visible_results(include_zero=include_zero)
    if limit:
        results = results[:limit]

    title = {
        SearchMode.LISTING: "Video Library",
        SearchMode.TEXT: f"Results for: {' '.join(outcome.query_tags)}",
        SearchMode.IMAGE: "Image Search Results",
    }.get(outcome.mode, "Results")

    table = Table(title=title)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Duration", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Matching tags")
    table.add_column("Id", style="dim")

    for idx, result in enumerate(results, start=1):
        table.add_row(
            str(idx),
            result.video.name,
            format_duration(result.video.duration_in_seconds),
            f"{result.score * 100:.0f}%",
            ", ".join(result.matching_tags),
            result.video.id,
        )

    console.print(table)
    if not results:
        console.print("[yellow]No videos found[/yellow]")
    for warning in outcome.warnings:
        console.print(f"[yellow]⚠ {warning}[/yellow]")


async def run(args: argparse.Namespace, config: dict) -> int:
    context = SearchContext.from_config(config)
    try:
        if args.image:
            image_path = Path(args.image)
            if not image_path.is_file():
                console.print(f"[red]✗ Image not found: {image_path}[/red]")
                return 2
            analysis = await context.vision.analyze_image(image_path.read_bytes())
            render_analysis(analysis)
            outcome = await context.orchestrator.search_image(analysis)
        else:
            outcome = await context.orchestrator.search_text(args.query or "")
        render_outcome(outcome, include_zero=args.include_zero, limit=args.limit)
        return 0
    except VideoSearchError as e:
        console.print(f"[red]✗ {e}[/red]")
        return 1
    finally:
        await context.close()


def main() -> int:
    parser = argparse.ArgumentParser(description="Search indexed videos by text or image")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--query", "-q", help="Free-text query (omit to list all videos)")
    source.add_argument("--image", "-i", help="Path to an image whose tags drive the search")
    parser.add_argument("--limit", type=int, default=None, help="Maximum rows to show")
    parser.add_argument(
        "--include-zero",
        action="store_true",
        help="Show image-search results with no matching tag",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default from LOG_LEVEL)")
    args = parser.parse_args()

    config = load_config()
    setup_logging(args.log_level or config["log_level"])

    errors = validate_config(config)
    if errors:
        for error in errors:
            console.print(f"[red]✗ {error}[/red]")
        return 2

    return asyncio.run(run(args, config))


if __name__ == "__main__":
    sys.exit(main())
