"""
Composition stage: turns slide texts, the design decision and resolved
assets into Slide objects, validates them and renders the deck.
"""

import re
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from slidegen.agents.core.base_agent import BaseAgent
from slidegen.agents.core.task_log import TaskPriority, TaskStatus, TaskType
from slidegen.agents.exceptions import AgentError
from slidegen.agents.generation.html_renderer import HTMLRenderer, RenderOptions
from slidegen.config.logging_config import get_logger
from slidegen.models.design import DesignDecision
from slidegen.models.outline import Outline
from slidegen.models.slide import Asset, LayoutType, RenderResult, Slide, SlideMetadata
from slidegen.models.theme import Theme

logger = get_logger(__name__)

H1_TITLE = re.compile(r"^#\s+(.+)$", re.M)
H2_TITLE = re.compile(r"^##\s+(.+)$", re.M)
HEADING_PREFIX = re.compile(r"^#+\s*")
FIRST_HEADING = re.compile(r"^#+ .+\n*", re.M)
WHITESPACE = re.compile(r"\s+")

DEFAULT_SLIDE_SECONDS = 60
MIN_SLIDES = 3
MAX_SLIDE_CHARS = 1000
MAX_SLIDE_ASSETS = 3
METADATA_VERSION = "1.0.0"

EXPORT_FORMATS = ("html", "markdown", "pdf", "pptx")


def extract_title(content: str) -> str:
    match = H1_TITLE.search(content) or H2_TITLE.search(content)
    if match:
        return match.group(1).strip()
    first_line = next((line for line in content.split("\n") if line.strip()), "")
    return HEADING_PREFIX.sub("", first_line.strip()).strip() or "Untitled Slide"


def remove_title(content: str) -> str:
    return FIRST_HEADING.sub("", content, count=1).strip()


def slugify(title: str) -> str:
    return WHITESPACE.sub("-", title.lower())


class GeneratorAgent(BaseAgent):
    task_type = TaskType.GENERATOR

    def __init__(self, renderer: Optional[HTMLRenderer] = None, task_history_limit: int = 1000):
        super().__init__(None, task_history_limit)
        self.renderer = renderer or HTMLRenderer()

    def generate_presentation(
        self,
        outline: Outline,
        slide_contents: Sequence[str],
        design_decision: DesignDecision,
        asset_map: Mapping[int, List[Asset]],
        max_assets: Optional[int] = None
    ) -> Tuple[List[Slide], RenderResult]:
        """Build, validate and render the deck.

        Returned RenderResult warnings hold both composition and renderer
        warnings, in that order.
        """
        with self.track("Generate HTML presentation", {"title": outline.title, "slides": len(slide_contents)}) as task:
            slides = self.build_slides(outline, slide_contents, design_decision, asset_map, max_assets)
            warnings = self.validate_slides(slides)

            result = self.renderer.render_presentation(
                slides,
                design_decision.theme,
                RenderOptions(export_format="standalone", title=outline.title),
            )
            result = result.model_copy(update={"warnings": warnings + result.warnings})

            task.complete({"slide_count": len(slides), "warnings": result.warnings})
            logger.info(f"[GENERATOR] Rendered {len(slides)} slides with {len(result.warnings)} warnings")
            return slides, result

    def build_slides(
        self,
        outline: Outline,
        slide_contents: Sequence[str],
        design_decision: DesignDecision,
        asset_map: Mapping[int, List[Asset]],
        max_assets: Optional[int] = None
    ) -> List[Slide]:
        slides = []
        last = len(slide_contents) - 1
        for index, content in enumerate(slide_contents):
            assets = list(asset_map.get(index) or [])
            if max_assets is not None:
                assets = assets[:max_assets]

            slides.append(Slide(
                id=f"slide-{index}",
                title=extract_title(content),
                content=remove_title(content),
                layout=design_decision.layout_map.get(index, LayoutType.CONTENT_ONLY),
                theme=design_decision.theme,
                assets=assets or None,
                metadata=SlideMetadata(
                    order=index,
                    duration=DEFAULT_SLIDE_SECONDS,
                    transitions="fade",
                    notes="",
                    tags=self._tags(index, last, outline),
                ),
            ))
        return slides

    def _tags(self, index: int, last: int, outline: Outline) -> List[str]:
        if index == 0:
            return ["title", "intro"]
        if index == last:
            return ["conclusion", "closing"]

        # Slide 0 is the title slide, so sections start at 1
        counter = 1
        for section in outline.sections:
            if counter <= index < counter + section.slide_count:
                tags = [slugify(section.title)]
                if section.has_visuals:
                    tags.append("visual")
                return tags
            counter += section.slide_count
        return []

    def validate_slides(self, slides: Sequence[Slide]) -> List[str]:
        """Raise for an unusable deck; return warnings for anything else."""
        if len(slides) < MIN_SLIDES:
            raise AgentError(
                "generator",
                f"Presentation must have at least {MIN_SLIDES} slides",
                {"slide_count": len(slides)},
            )

        warnings = []
        for index, slide in enumerate(slides):
            if not slide.content or not slide.content.strip():
                raise AgentError(
                    "generator",
                    f"Slide {index + 1} has no content",
                    {"slide_index": index, "slide_id": slide.id},
                )
            if not slide.title and index != 0 and slide.layout != LayoutType.SECTION_HEADER:
                warnings.append(f"Slide {index + 1} is missing a title")
            if len(slide.content) > MAX_SLIDE_CHARS:
                warnings.append(f"Slide {index + 1} has excessive content ({len(slide.content)} chars)")
            if slide.assets and len(slide.assets) > MAX_SLIDE_ASSETS:
                warnings.append(f"Slide {index + 1} has too many assets ({len(slide.assets)})")

        for warning in warnings:
            logger.warning(f"[GENERATOR] {warning}")
        return warnings

    def generate_slide(
        self,
        content: str,
        layout: LayoutType,
        theme: Theme,
        assets: Optional[List[Asset]] = None
    ) -> str:
        """Embeddable HTML fragment for a single slide."""
        slide = Slide(
            id=f"slide-single-{int(datetime.now().timestamp() * 1000)}",
            title=extract_title(content),
            content=remove_title(content),
            layout=layout,
            theme=theme,
            assets=assets or None,
            metadata=SlideMetadata(order=0),
        )
        result = self.renderer.render_presentation(
            [slide], theme, RenderOptions(include_css=False, include_js=False, export_format="fragment")
        )
        return result.html

    def export_presentation(self, slides: Sequence[Slide], theme: Theme, format: str = "html") -> str:
        with self.track(f"Export presentation as {format}", {"format": format}, TaskPriority.LOW):
            if format == "html":
                title = slides[0].title if slides else "Presentation"
                return self.renderer.render_presentation(slides, theme, RenderOptions(title=title)).html
            if format == "markdown":
                return self.export_to_markdown(slides)
            if format in EXPORT_FORMATS:
                raise AgentError("generator", f"Export format {format} not yet implemented", {"format": format})
            raise AgentError("generator", f"Unknown export format: {format}", {"format": format})

    def export_to_markdown(self, slides: Sequence[Slide]) -> str:
        lines = []
        for number, slide in enumerate(slides, start=1):
            lines += ["---", f"<!-- Slide {number} -->", "", f"# {slide.title}", "", slide.content, ""]
            if slide.assets:
                lines.append("**Visual Assets:**")
                lines += [f"- ![{asset.alt}]({asset.url})" for asset in slide.assets if asset.url]
                lines.append("")
        lines.append("---")
        return "\n".join(lines)

    def generate_metadata(self, slides: Sequence[Slide], outline: Outline) -> Dict[str, Any]:
        return {
            "title": outline.title,
            "slide_count": len(slides),
            "estimated_duration": sum(slide.metadata.duration or DEFAULT_SLIDE_SECONDS for slide in slides),
            "asset_count": sum(len(slide.assets or []) for slide in slides),
            "generated_at": datetime.now().isoformat(),
            "version": METADATA_VERSION,
        }

    def get_stats(self) -> Dict[str, Any]:
        stats = super().get_stats()
        stats["total_slides_generated"] = sum(
            task.output.get("slide_count", 0)
            for task in self.get_task_history()
            if task.status == TaskStatus.COMPLETED and isinstance(task.output, dict)
        )
        return stats
