"""
Pipeline orchestrator: topic in, rendered deck out.

research -> outline -> slide contents -> design -> assets -> composition

Stages run strictly in order and never loop back. Each stage applies its
own fallback; anything it cannot recover from aborts the request and is
surfaced as a single GenerationError.
"""

import asyncio
import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from slidegen.agents.ai.gateway import ModelGateway
from slidegen.agents.assets.asset_agent import AssetAgent
from slidegen.agents.content.content_agent import ContentAgent
from slidegen.agents.core.interfaces import IAssetSource, IModelGateway
from slidegen.agents.design.design_agent import DesignAgent
from slidegen.agents.exceptions import AgentError, GenerationError, ModelError, ModelErrorReason
from slidegen.agents.generation.generator_agent import GeneratorAgent
from slidegen.agents.generation.progress_manager import GenerationPhase, GenerationProgress, ProgressCallback
from slidegen.agents.research.research_agent import ResearchAgent
from slidegen.config.logging_config import get_logger
from slidegen.config.settings import Config, get_config
from slidegen.models.requests import SlideGenerationRequest
from slidegen.models.research import TopicResearch
from slidegen.models.results import GenerationMetadata, SlideGenerationResult
from slidegen.services.asset_search import create_asset_source

logger = get_logger(__name__)


class SlideGenerator:
    """Runs every stage for a request. Stage objects are shared across requests."""

    def __init__(
        self,
        research_agent: ResearchAgent,
        content_agent: ContentAgent,
        design_agent: DesignAgent,
        asset_agent: AssetAgent,
        generator_agent: GeneratorAgent,
        config: Optional[Config] = None
    ):
        self.research_agent = research_agent
        self.content_agent = content_agent
        self.design_agent = design_agent
        self.asset_agent = asset_agent
        self.generator_agent = generator_agent
        self.config = config or get_config()

    @property
    def agents(self) -> Dict[str, Any]:
        return {
            "research": self.research_agent,
            "content": self.content_agent,
            "design": self.design_agent,
            "assets": self.asset_agent,
            "generation": self.generator_agent,
        }

    async def generate_presentation(
        self,
        request: SlideGenerationRequest,
        *,
        cancel_event: Optional[asyncio.Event] = None
    ) -> SlideGenerationResult:
        return await self.generate_with_progress(request, None, cancel_event=cancel_event)

    async def generate_with_progress(
        self,
        request: SlideGenerationRequest,
        on_progress: Optional[ProgressCallback] = None,
        *,
        cancel_event: Optional[asyncio.Event] = None
    ) -> SlideGenerationResult:
        start = time.time()
        timeout = self.config.pipeline.request_timeout_seconds
        logger.info(f"[PIPELINE] Starting presentation generation for: '{request.topic}'")

        try:
            return await asyncio.wait_for(
                self._run(request, GenerationProgress(on_progress), cancel_event, start),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            elapsed = time.time() - start
            logger.error(f"[PIPELINE] Generation for '{request.topic}' timed out after {elapsed:.1f}s")
            timeout_error = ModelError(ModelErrorReason.TIMEOUT, f"Generation exceeded {timeout}s", cause=e)
            raise GenerationError(request.topic, timeout_error, elapsed, "Presentation generation timed out") from e
        except GenerationError:
            raise
        except Exception as e:
            elapsed = time.time() - start
            error = GenerationError(request.topic, e, elapsed)
            if error.cancelled:
                logger.info(f"[PIPELINE] Generation for '{request.topic}' cancelled after {elapsed:.1f}s")
            else:
                logger.error(f"[PIPELINE] Generation failed at stage {error.stage or 'unknown'}: {e}")
            raise error from e

    async def _run(
        self,
        request: SlideGenerationRequest,
        progress: GenerationProgress,
        cancel_event: Optional[asyncio.Event],
        start: float
    ) -> SlideGenerationResult:
        started_at = datetime.fromtimestamp(start)
        pipeline = self.config.pipeline
        warnings: List[str] = []

        # Research
        progress.update(GenerationPhase.RESEARCH, 10, "Researching topic...")
        research = await self._research(request.topic, warnings, cancel_event)
        progress.update(GenerationPhase.RESEARCH, 20, f"Research complete ({research.confidence * 100:.0f}% confidence)")

        # Content
        progress.update(GenerationPhase.CONTENT, 30, "Generating outline...")
        outline = await self.content_agent.generate_outline(
            request.topic,
            research,
            request.slide_count,
            audience=request.audience,
            cancel_event=cancel_event,
        )
        if request.tone is not None:
            outline = outline.model_copy(update={"tone": request.tone})
        progress.update(GenerationPhase.CONTENT, 40, f"Outline created ({outline.total_slides} slides)")

        progress.update(GenerationPhase.CONTENT, 50, "Generating slide content...")
        slide_contents = await self.content_agent.generate_slide_contents(outline, cancel_event=cancel_event)
        progress.update(GenerationPhase.CONTENT, 60, f"Content generated for {len(slide_contents)} slides")

        # Design
        progress.update(GenerationPhase.DESIGN, 70, "Making design decisions...")
        decision = self.design_agent.make_design_decisions(
            outline,
            slide_contents,
            theme_name=request.theme_preference,
            prefer_images=request.include_images,
        )
        progress.update(GenerationPhase.DESIGN, 75, f"Design complete ({decision.theme.name} theme)")

        # Assets
        progress.update(GenerationPhase.ASSETS, 80, "Finding visual assets...")
        if request.include_images is False:
            asset_map = {}
        else:
            asset_map = await self.asset_agent.batch_find_assets(
                slide_contents,
                decision.asset_strategy,
                pipeline.assets_per_slide,
                cancel_event=cancel_event,
            )
        total_assets = sum(len(assets) for assets in asset_map.values())
        progress.update(GenerationPhase.ASSETS, 85, f"Assets collected ({total_assets} total)")

        # Composition
        progress.update(GenerationPhase.GENERATION, 90, "Generating HTML...")
        slides, render_result = self.generator_agent.generate_presentation(
            outline,
            slide_contents,
            decision,
            asset_map,
            max_assets=pipeline.assets_per_slide,
        )
        warnings.extend(render_result.warnings)
        progress.update(GenerationPhase.GENERATION, 100, "Complete!")

        processing_ms = int((time.time() - start) * 1000)
        metadata = GenerationMetadata(
            total_slides=len(slides),
            total_assets=sum(len(slide.assets or []) for slide in slides),
            processing_time_ms=processing_ms,
            agent_tasks=self._agent_tasks_since(started_at),
            warnings=warnings,
        )
        logger.info(f"[PIPELINE] Presentation complete! {len(slides)} slides in {processing_ms / 1000:.2f}s")

        return SlideGenerationResult(
            slides=slides,
            outline=outline,
            theme=decision.theme,
            metadata=metadata,
            html=render_result.html,
        )

    async def _research(
        self,
        topic: str,
        warnings: List[str],
        cancel_event: Optional[asyncio.Event]
    ) -> TopicResearch:
        """Research is enrichment only; on failure the outline is built without it."""
        try:
            return await self.research_agent.research(
                topic, self.config.pipeline.research_depth, cancel_event=cancel_event
            )
        except AgentError as e:
            logger.warning(f"[PIPELINE] Research failed, continuing without it: {e}")
            warnings.append(f"Research unavailable: {e.message}")
            return TopicResearch.empty(topic)

    def _agent_tasks_since(self, started_at: datetime) -> List[Dict[str, Any]]:
        tasks = []
        for agent in self.agents.values():
            tasks += [task.to_dict() for task in agent.get_task_history() if task.start_time >= started_at]
        return sorted(tasks, key=lambda t: t["start_time"])

    def get_stats(self) -> Dict[str, Any]:
        return {name: agent.get_stats() for name, agent in self.agents.items()}

    def clear_history(self) -> None:
        for agent in self.agents.values():
            agent.clear_history()


def create_slide_generator(
    gateway: Optional[IModelGateway] = None,
    asset_source: Optional[IAssetSource] = None,
    config: Optional[Config] = None
) -> SlideGenerator:
    """Wire the default stage objects around a gateway and an asset source."""
    config = config or get_config()
    gateway = gateway or ModelGateway.from_config(config)
    asset_source = asset_source or create_asset_source(config.pipeline.asset_source, config.pipeline.pexels_api_key)
    history_limit = config.pipeline.task_history_limit

    return SlideGenerator(
        research_agent=ResearchAgent(gateway, history_limit),
        content_agent=ContentAgent(gateway, history_limit),
        design_agent=DesignAgent(task_history_limit=history_limit),
        asset_agent=AssetAgent(
            gateway,
            asset_source,
            max_parallel=config.pipeline.max_parallel_assets,
            task_history_limit=history_limit,
        ),
        generator_agent=GeneratorAgent(task_history_limit=history_limit),
        config=config,
    )
