"""
Logo Remixer — command-line entry point

Usage:
  python -m remixer.main --image logo.png --brand "Aperture Labs" --industry Technology
  python -m remixer.main --image logo.png --changes "make it futuristic" --no-preserve color background
  python -m remixer.main --brand "Aperture Labs" --show-prompt
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from .config import create_client, load_settings
from .errors import MissingSourceImage, RemixerError
from .generator import remix_logo
from .image_io import default_output_path, load_image, save_image
from .models import GenerationRequest, PreservationSet
from .prompt import build_prompt

console = Console()

# CLI name → PreservationSet field
PRESERVE_CHOICES = {
    "typography": "typography",
    "style": "style",
    "color": "color",
    "icon": "icon",
    "background": "background_color",
}


# ── CLI ───────────────────────────────────────────────────────────────────────

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Logo Remixer — adapt an existing logo for a new brand with Gemini"
    )
    parser.add_argument("--image", type=Path, default=None, help="Original logo (png/jpg/webp/gif)")
    parser.add_argument("--brand", default="", help="New brand name (optional)")
    parser.add_argument("--industry", default="", help="Industry / business sector (optional)")
    parser.add_argument("--changes", default="", help="Specific changes to make (optional)")
    parser.add_argument(
        "--no-preserve",
        nargs="+",
        choices=sorted(PRESERVE_CHOICES),
        default=[],
        metavar="DETAIL",
        help="Details NOT to keep from the original: " + ", ".join(PRESERVE_CHOICES),
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Where to save the result (default: <output dir>/<brand>_<timestamp>.png)",
    )
    parser.add_argument("--model", default=None, help="Override the Gemini image model")
    parser.add_argument(
        "--show-prompt",
        action="store_true",
        help="Print the prompt that would be sent and exit (no API call)",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def preservation_from_args(excluded: List[str]) -> PreservationSet:
    dropped = {PRESERVE_CHOICES[name] for name in excluded}
    return PreservationSet.from_flags(
        {field: field not in dropped for field in PRESERVE_CHOICES.values()}
    )


# ── Main ──────────────────────────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    preservation = preservation_from_args(args.no_preserve)

    if args.show_prompt:
        prompt = build_prompt(args.brand, args.industry, args.changes, preservation)
        console.print(Panel(escape(prompt), title="Prompt", expand=False))
        return 0

    try:
        if args.image is None:
            raise MissingSourceImage()
        image = load_image(args.image)
        request = GenerationRequest(
            source_image=image,
            brand_name=args.brand,
            industry=args.industry,
            change_instructions=args.changes,
            preservation=preservation,
        )
    except (RemixerError, ValueError) as exc:
        console.print(f"[red]✗ {escape(str(exc))}[/red]")
        return 1

    settings = load_settings()
    model = args.model or settings.model
    kept = ", ".join(preservation.labels()) or "nothing"
    console.print(f"[bold cyan]→ Remixing {args.image.name}[/bold cyan] [dim](keeping: {kept})[/dim]")

    client = create_client(settings)
    with console.status(f"Waiting for {model}..."):
        result = asyncio.run(remix_logo(client, request, model=model))

    if not result.ok:
        console.print(f"[red]✗ {escape(result.error_message)}[/red]")
        return 1

    output = args.output or default_output_path(settings.output_dir, args.brand)
    try:
        saved = save_image(result.image_bytes, output)
    except OSError as exc:
        console.print(f"[red]✗ Could not save the generated logo: {exc}[/red]")
        return 1
    console.print(f"[green]✓ New logo[/green] → {saved}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
