import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from slidegen.agents.exceptions import ConfigurationError, GenerationError
from slidegen.agents.generation.orchestrator import create_slide_generator
from slidegen.config.logging_config import get_logger, setup_logging
from slidegen.models.outline import Tone
from slidegen.models.requests import SlideGenerationRequest

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="slidegen", description="Generate an HTML slide deck from a topic")
    parser.add_argument("topic", help="Presentation topic")
    parser.add_argument("--slides", type=int, default=None, help="Target number of content slides (1-50)")
    parser.add_argument("--tone", choices=[t.value for t in Tone], default=None, help="Override the outline tone")
    parser.add_argument("--audience", default=None, help="Intended audience")
    parser.add_argument("--theme", default=None, help="Theme name (professional, modern, minimal, vibrant)")
    parser.add_argument("--no-images", action="store_true", help="Skip asset resolution")
    parser.add_argument("--output", default="presentation.html", help="HTML output path")
    parser.add_argument("--markdown", default=None, help="Also write the deck as markdown to this path")
    parser.add_argument("--log-level", default=None, help="Logging level (defaults to LOG_LEVEL)")
    return parser


def _print_progress(phase: str, percent: int, message: str) -> None:
    print(f"[{percent:3d}%] {phase}: {message}", file=sys.stderr)


async def run(args: argparse.Namespace) -> int:
    request = SlideGenerationRequest(
        topic=args.topic,
        slide_count=args.slides,
        tone=Tone(args.tone) if args.tone else None,
        audience=args.audience,
        include_images=False if args.no_images else None,
        theme_preference=args.theme,
    )

    generator = create_slide_generator()
    result = await generator.generate_with_progress(request, _print_progress)

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result.html, encoding="utf-8")
    print(f"Wrote {result.metadata.total_slides} slides to {output}")

    if args.markdown:
        markdown = generator.generator_agent.export_presentation(result.slides, result.theme, "markdown")
        Path(args.markdown).write_text(markdown, encoding="utf-8")
        print(f"Wrote markdown to {args.markdown}")

    for warning in result.metadata.warnings:
        print(f"warning: {warning}", file=sys.stderr)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        return asyncio.run(run(args))
    except ValidationError as e:
        logger.error(f"Invalid request: {e}")
        return 2
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 2
    except GenerationError as e:
        logger.error(f"Generation failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
