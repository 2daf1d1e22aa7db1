#!/usr/bin/env python3
"""
Command line interface for slidereel.

This tool provides command-line access to:
- Composing a slide into its animated HTML document
- Rendering a slide into a video file without running the API server
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from slidereel.capture.factory import EngineFactory
from slidereel.capture.orchestrator import CaptureOrchestrator
from slidereel.configs.config import config
from slidereel.configs.logging_config import setup_logging
from slidereel.core.errors import RenderPipelineError
from slidereel.pipeline.renderer import SlideRenderer
from slidereel.timeline.composer import compose


def load_slide(source: str) -> dict[str, Any]:
    """Read slide JSON from a file path, or stdin when ``source`` is '-'."""
    raw = sys.stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("Slide JSON must be an object")
    # Accept a full request body as well as bare slide data
    return data.get("slideData", data)


def compose_command(slide: dict[str, Any], duration: float, timeline_only: bool) -> None:
    document = compose(slide, duration)
    if timeline_only:
        print(json.dumps([cue.as_dict() for cue in document.timeline], indent=2))
    else:
        print(document.html)


async def render_command(
    slide: dict[str, Any], duration: float, output: Path, engine_name: str | None
) -> None:
    engine = EngineFactory.create_engine(engine_name)
    renderer = SlideRenderer(CaptureOrchestrator(engine))
    result = await renderer.render(slide, duration)
    output.parent.mkdir(parents=True, exist_ok=True)
    result.artifact.path.replace(output)
    print(f"Rendered {output} ({result.artifact.size_bytes} bytes) in {result.render_time}s")


async def main() -> None:
    """Main entry point for the CLI tool."""
    parser = argparse.ArgumentParser(
        description="slidereel slide rendering CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cli.py compose slide.json -d 6                 # Print the animated document
  cli.py compose slide.json -d 6 --timeline      # Print only the cue schedule
  cli.py render slide.json -d 6 -o out.webm      # Record the slide to a file
        """,
    )
    parser.add_argument("--log-level", default=config.log_level, help="Logging level")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    compose_parser = subparsers.add_parser("compose", help="Compose a slide document")
    compose_parser.add_argument("slide", help="Slide JSON file, or '-' for stdin")
    compose_parser.add_argument("-d", "--duration", type=float, required=True)
    compose_parser.add_argument(
        "--timeline", action="store_true", help="Print the cue schedule as JSON"
    )

    render_parser = subparsers.add_parser("render", help="Render a slide to video")
    render_parser.add_argument("slide", help="Slide JSON file, or '-' for stdin")
    render_parser.add_argument("-d", "--duration", type=float, required=True)
    render_parser.add_argument("-o", "--output", type=Path, default=Path("slide.webm"))
    render_parser.add_argument("--engine", default=None, help="Rendering engine name")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    setup_logging(args.log_level)

    try:
        slide = load_slide(args.slide)
        if args.command == "compose":
            compose_command(slide, args.duration, args.timeline)
        elif args.command == "render":
            config.ensure_directories_exist()
            await render_command(slide, args.duration, args.output, args.engine)
        else:
            parser.print_help()
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except RenderPipelineError as e:
        print(f"{e.error_kind}: {e.message}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    asyncio.run(main())
