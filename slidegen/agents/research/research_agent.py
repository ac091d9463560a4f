"""
Research stage: a structured topic summary that grounds the outline.
"""

import asyncio
import math
import re
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from slidegen.agents.ai.prompts import (
    ENHANCE_TEMPERATURE,
    RESEARCH_TEMPERATURE,
    build_enhance_research_prompt,
    build_research_prompt,
)
from slidegen.agents.core.base_agent import BaseAgent
from slidegen.agents.core.interfaces import IModelGateway
from slidegen.agents.core.task_log import TaskStatus, TaskType
from slidegen.agents.exceptions import AgentError, ModelError
from slidegen.config.logging_config import get_logger
from slidegen.models.research import TopicResearch
from slidegen.models.schemas import ResearchDraft

logger = get_logger(__name__)

DEFAULT_CONFIDENCE = 0.7
INAPPROPRIATE_PATTERNS = [
    re.compile(r"\b(hack|exploit|illegal|harmful)\b", re.IGNORECASE),
]


def research_from_draft(draft: ResearchDraft, topic: str) -> TopicResearch:
    """Apply defaults to a possibly partial draft."""
    confidence = draft.confidence
    if confidence is None or not math.isfinite(confidence):
        confidence = DEFAULT_CONFIDENCE
    return TopicResearch(
        topic=draft.topic or topic,
        summary=draft.summary or "",
        key_points=[p for p in draft.keyPoints if p and p.strip()],
        sources=list(draft.sources),
        related_topics=list(draft.relatedTopics),
        confidence=min(max(confidence, 0.0), 1.0),
    )


class ResearchAgent(BaseAgent):
    task_type = TaskType.RESEARCH

    def __init__(self, gateway: IModelGateway, task_history_limit: int = 1000):
        super().__init__(gateway, task_history_limit)

    async def research(
        self,
        topic: str,
        depth: str = "quick",
        *,
        cancel_event: Optional[asyncio.Event] = None
    ) -> TopicResearch:
        with self.track(f"Research topic: {topic}", {"topic": topic, "depth": depth}) as task:
            logger.info(f"[RESEARCH] Researching '{topic}' ({depth})")
            try:
                draft = await self.gateway.generate_structured(
                    build_research_prompt(topic, depth),
                    ResearchDraft,
                    temperature=RESEARCH_TEMPERATURE,
                    cancel_event=cancel_event,
                )
            except ModelError as e:
                raise AgentError(
                    "research",
                    f"Research failed for topic: {topic}",
                    {"original_error": str(e), "reason": e.reason.value},
                    cause=e,
                ) from e

            try:
                result = research_from_draft(draft, topic)
            except ValidationError as e:
                raise AgentError(
                    "research",
                    f"Research reply for '{topic}' could not be used",
                    {"original_error": str(e)},
                    cause=e,
                ) from e
            task.complete(result)
            logger.info(
                f"[RESEARCH] Done: {len(result.key_points)} key points, "
                f"confidence {result.confidence:.2f}"
            )
            return result

    def validate_topic(self, topic: str) -> Tuple[bool, Optional[str]]:
        if not topic or not topic.strip():
            return False, "Topic cannot be empty"
        if len(topic) < 3:
            return False, "Topic is too short (minimum 3 characters)"
        if len(topic) > 200:
            return False, "Topic is too long (maximum 200 characters)"
        for pattern in INAPPROPRIATE_PATTERNS:
            if pattern.search(topic):
                return False, "Topic contains inappropriate content"
        return True, None

    async def enhance_research(
        self,
        research: TopicResearch,
        focus_area: Optional[str] = None,
        *,
        cancel_event: Optional[asyncio.Event] = None
    ) -> TopicResearch:
        """Deepen existing research, optionally around a focus area."""
        description = f"Enhance research: {research.topic}"
        with self.track(description, {"topic": research.topic, "focus_area": focus_area}) as task:
            try:
                draft = await self.gateway.generate_structured(
                    build_enhance_research_prompt(research, focus_area),
                    ResearchDraft,
                    temperature=ENHANCE_TEMPERATURE,
                    cancel_event=cancel_event,
                )
            except ModelError as e:
                raise AgentError(
                    "research",
                    f"Research enhancement failed for topic: {research.topic}",
                    {"original_error": str(e)},
                    cause=e,
                ) from e
            try:
                result = research_from_draft(draft, research.topic)
            except ValidationError as e:
                raise AgentError(
                    "research",
                    f"Enhanced research for '{research.topic}' could not be used",
                    {"original_error": str(e)},
                    cause=e,
                ) from e
            task.complete(result)
            return result

    async def research_related_topics(
        self,
        main_topic: str,
        related_topics: List[str],
        *,
        cancel_event: Optional[asyncio.Event] = None
    ) -> Dict[str, TopicResearch]:
        """Main topic in depth, then up to three related topics quickly.

        Failures on related topics are logged and skipped; a failure on the
        main topic propagates.
        """
        results = {main_topic: await self.research(main_topic, "comprehensive", cancel_event=cancel_event)}

        for topic in related_topics[:3]:
            try:
                results[topic] = await self.research(topic, "quick", cancel_event=cancel_event)
            except AgentError as e:
                logger.warning(f"[RESEARCH] Failed to research related topic '{topic}': {e}")

        return results

    def get_stats(self) -> Dict[str, Any]:
        stats = super().get_stats()
        confidences = [
            task.output.confidence
            for task in self.get_task_history()
            if task.status == TaskStatus.COMPLETED and isinstance(task.output, TopicResearch)
        ]
        stats["average_confidence"] = sum(confidences) / max(stats["completed"], 1)
        return stats
