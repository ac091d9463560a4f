"""
Content stage: outline generation and per-slide text.

The outline is the one artifact without a safe default, so a failed or empty
outline is fatal. Per-slide content always has one: a bullet rendering of the
slide's points.
"""

import asyncio
import math
from typing import List, Optional, Tuple

from slidegen.agents.ai.prompts import (
    OUTLINE_TEMPERATURE,
    SLIDE_CONTENT_TEMPERATURE,
    build_outline_prompt,
    build_slide_content_prompt,
)
from slidegen.agents.core.base_agent import BaseAgent
from slidegen.agents.core.interfaces import IModelGateway
from slidegen.agents.core.task_log import TaskPriority, TaskType
from slidegen.agents.exceptions import AgentError, ModelError
from slidegen.agents.generation.generator_agent import remove_title
from slidegen.config.logging_config import get_logger
from slidegen.models.outline import Outline, OutlineSection, Tone
from slidegen.models.research import TopicResearch
from slidegen.models.schemas import OutlineDraft, SlideContentDraft

logger = get_logger(__name__)

MIN_SLIDES = 3
MAX_SLIDES = 50


def chunk_points(points: List[str], slide_count: int) -> List[List[str]]:
    """Split points into slide_count contiguous chunks of ceil(n / slide_count).

    Trailing chunks may be short or empty; the number of chunks is always
    slide_count.
    """
    if slide_count <= 1:
        return [list(points)]
    size = math.ceil(len(points) / slide_count) if points else 0
    return [points[i * size:(i + 1) * size] for i in range(slide_count)]


def bullet_body(points: List[str]) -> str:
    return "\n".join(f"- {p}" for p in points)


def fallback_slide(title: str, points: List[str]) -> str:
    body = bullet_body(points) if points else f"*{title}*"
    return f"## {title}\n\n{body}"


def outline_from_draft(draft: OutlineDraft, topic: str) -> Outline:
    sections = []
    for section in draft.sections:
        slide_count = section.slideCount if section.slideCount and section.slideCount > 0 else 1
        sections.append(OutlineSection(
            title=(section.title or "").strip() or "Untitled Section",
            points=[p for p in section.points if p and p.strip()],
            slide_count=slide_count,
            has_visuals=section.hasVisuals is not False,
        ))

    try:
        tone = Tone((draft.tone or "").strip().lower())
    except ValueError:
        tone = Tone.FORMAL

    duration = draft.estimatedDuration if draft.estimatedDuration and draft.estimatedDuration > 0 else len(sections) * 2

    outline = Outline(
        title=(draft.title or "").strip() or topic,
        sections=sections,
        estimated_duration_minutes=duration,
        tone=tone,
    )
    return outline.recompute_total()


class ContentAgent(BaseAgent):
    task_type = TaskType.CONTENT

    def __init__(self, gateway: IModelGateway, task_history_limit: int = 1000):
        super().__init__(gateway, task_history_limit)

    async def generate_outline(
        self,
        topic: str,
        research: Optional[TopicResearch] = None,
        target_slide_count: Optional[int] = None,
        *,
        audience: Optional[str] = None,
        cancel_event: Optional[asyncio.Event] = None
    ) -> Outline:
        task_input = {"topic": topic, "target_slide_count": target_slide_count}
        with self.track(f"Generate outline for: {topic}", task_input) as task:
            try:
                draft = await self.gateway.generate_structured(
                    build_outline_prompt(topic, target_slide_count, research, audience),
                    OutlineDraft,
                    temperature=OUTLINE_TEMPERATURE,
                    cancel_event=cancel_event,
                )
            except ModelError as e:
                raise AgentError(
                    "content",
                    f"Failed to generate outline for: {topic}",
                    {"original_error": str(e), "reason": e.reason.value},
                    cause=e,
                ) from e

            outline = outline_from_draft(draft, topic)
            if not outline.sections:
                raise AgentError("content", f"Outline for '{topic}' has no sections", {"raw": draft.model_dump()})

            if research is not None:
                outline = self.merge_research(outline, research)

            task.complete(outline)
            logger.info(f"[CONTENT] Outline '{outline.title}': {len(outline.sections)} sections, {outline.total_slides} slides")
            return outline

    def merge_research(self, outline: Outline, research: TopicResearch) -> Outline:
        """Distribute research key points across sections, skipping duplicates.

        Merging the same research twice gives the same result as merging once.
        """
        if not outline.sections or not research.key_points:
            return outline

        chunk = math.ceil(len(research.key_points) / len(outline.sections))
        sections = []
        for index, section in enumerate(outline.sections):
            points = list(section.points)
            seen = {p.lower() for p in points}
            for point in research.key_points[index * chunk:(index + 1) * chunk]:
                if point.lower() not in seen:
                    points.append(point)
                    seen.add(point.lower())
            sections.append(section.model_copy(update={"points": points}))

        return outline.model_copy(update={"sections": sections})

    async def generate_slide_contents(
        self,
        outline: Outline,
        *,
        cancel_event: Optional[asyncio.Event] = None
    ) -> List[str]:
        """Title slide, one entry per outline slot, closing slide."""
        with self.track(f"Generate slide contents: {outline.title}", {"total_slides": outline.total_slides}) as task:
            contents = [self._title_slide(outline)]

            for section in outline.sections:
                chunks = chunk_points(section.points, section.slide_count)
                for i, points in enumerate(chunks):
                    title = section.title
                    if section.slide_count > 1:
                        title = f"{section.title} ({i + 1}/{section.slide_count})"
                    contents.append(await self._section_content(outline.title, title, points, cancel_event))

            contents.append(self._closing_slide(outline))
            task.complete({"slides": len(contents)})
            logger.info(f"[CONTENT] Generated {len(contents)} slide contents")
            return contents

    def _title_slide(self, outline: Outline) -> str:
        return f"# {outline.title}\n\n*{len(outline.sections)} sections | {outline.estimated_duration_minutes} minutes*"

    def _closing_slide(self, outline: Outline) -> str:
        return f"# Thank You\n\n## Questions?\n\n*{outline.title}*"

    async def _section_content(
        self,
        presentation_title: str,
        section_title: str,
        points: List[str],
        cancel_event: Optional[asyncio.Event]
    ) -> str:
        try:
            draft = await self.gateway.generate_structured(
                build_slide_content_prompt(presentation_title, section_title, points),
                SlideContentDraft,
                temperature=SLIDE_CONTENT_TEMPERATURE,
                cancel_event=cancel_event,
            )
        except ModelError as e:
            logger.warning(f"[CONTENT] Falling back to bullets for '{section_title}': {e}")
            return fallback_slide(section_title, points)

        content = (draft.content or "").strip()
        if not content or not remove_title(content):
            # A heading with no body would leave the slide empty
            return fallback_slide(section_title, points)
        if content.startswith("#"):
            return content
        title = (draft.title or "").strip() or section_title
        return f"## {title}\n\n{content}"

    def optimize_for_duration(self, outline: Outline, target_minutes: int) -> Outline:
        if target_minutes <= 0:
            raise ValueError(f"target_minutes must be positive, got {target_minutes}")
        current = outline.estimated_duration_minutes
        if current == target_minutes:
            return outline
        if current <= 0:
            # No baseline to scale from; only the duration changes
            return outline.model_copy(update={"estimated_duration_minutes": target_minutes}).recompute_total()

        ratio = target_minutes / current
        sections = [
            section.model_copy(update={"slide_count": max(1, math.floor(section.slide_count * ratio + 0.5))})
            for section in outline.sections
        ]
        optimized = outline.model_copy(update={"sections": sections, "estimated_duration_minutes": target_minutes})
        return optimized.recompute_total()

    def validate_outline(self, outline: Outline) -> Tuple[bool, List[str]]:
        """Collect every structural defect; never stops at the first."""
        errors = []

        if not outline.title or not outline.title.strip():
            errors.append("Outline must have a title")

        if not outline.sections:
            errors.append("Outline must have at least one section")

        for index, section in enumerate(outline.sections, start=1):
            if not section.title or not section.title.strip():
                errors.append(f"Section {index} is missing a title")
            if not section.points:
                errors.append(f"Section {index} has no key points")
            if section.slide_count < 1:
                errors.append(f"Section {index} has invalid slide count: {section.slide_count}")

        if outline.total_slides < MIN_SLIDES:
            errors.append(f"Presentation should have at least {MIN_SLIDES} slides")
        if outline.total_slides > MAX_SLIDES:
            errors.append(f"Presentation has too many slides (maximum {MAX_SLIDES})")

        return len(errors) == 0, errors

    def generate_content_markdown(self, outline: Outline, slide_contents: List[str]) -> str:
        """Render the outline and slide texts as a standalone content.md document."""
        with self.track("Generate content markdown", {"title": outline.title}, priority=TaskPriority.LOW):
            lines = [
                f"# {outline.title}",
                "",
                f"**Total Slides:** {outline.total_slides}",
                f"**Estimated Duration:** {outline.estimated_duration_minutes} minutes",
                f"**Tone:** {outline.tone.value}",
                "",
                "---",
                "",
                "## Table of Contents",
                "",
            ]
            for index, section in enumerate(outline.sections, start=1):
                plural = "s" if section.slide_count > 1 else ""
                lines.append(f"{index}. {section.title} ({section.slide_count} slide{plural})")
            lines += ["", "---", "", "## Sections", ""]

            for index, section in enumerate(outline.sections, start=1):
                lines += [
                    f"### {index}. {section.title}",
                    "",
                    f"**Slides:** {section.slide_count}",
                    f"**Visuals:** {'Yes' if section.has_visuals else 'No'}",
                    "",
                    "**Key Points:**",
                ]
                lines += [f"- {point}" for point in section.points]
                lines += ["", "---", ""]

            lines += ["## Detailed Slide Content", ""]
            for index, content in enumerate(slide_contents, start=1):
                lines += [f"### Slide {index}", "", content, "", "---", ""]

            return "\n".join(lines)
