import asyncio
from typing import Any, Dict, List, Optional, Type

import pytest

from slidegen.agents.assets.asset_agent import AssetAgent
from slidegen.agents.content.content_agent import ContentAgent
from slidegen.agents.core.interfaces import IAssetSource, IModelGateway
from slidegen.agents.design.design_agent import DesignAgent
from slidegen.agents.exceptions import GenerationCancelledError
from slidegen.agents.generation.generator_agent import GeneratorAgent
from slidegen.agents.generation.orchestrator import SlideGenerator
from slidegen.agents.research.research_agent import ResearchAgent
from slidegen.config.settings import Config, PipelineConfig
from slidegen.config.design import THEMES
from slidegen.models.design import AssetStrategy, DesignDecision
from slidegen.models.outline import Outline, OutlineSection, Tone
from slidegen.models.schemas import (
    ImageQueryDraft,
    ImageQueryList,
    OutlineDraft,
    ResearchDraft,
    SectionDraft,
    SlideContentDraft,
)
from slidegen.models.slide import AssetType


class StubGateway(IModelGateway):
    """Canned replies keyed by schema class.

    A reply may be a model instance, a callable taking the prompt, an
    exception to raise, or a list consumed one entry per call.
    """

    def __init__(self, replies: Optional[Dict[Type, Any]] = None, text: str = "stub text"):
        self.replies = dict(replies or {})
        self.text = text
        self.calls: List[Dict[str, Any]] = []

    async def generate_text(self, prompt, max_tokens=None, *, cancel_event=None):
        self.calls.append({"schema": None, "prompt": prompt})
        return self.text

    async def generate_structured(self, prompt, schema, *, temperature=None, cancel_event=None):
        self.calls.append({"schema": schema, "prompt": prompt, "temperature": temperature})
        await asyncio.sleep(0)
        if cancel_event is not None and cancel_event.is_set():
            raise GenerationCancelledError("cancelled")
        reply = self.replies.get(schema)
        if isinstance(reply, list):
            reply = reply.pop(0) if len(reply) > 1 else reply[0]
        if reply is None:
            return schema()
        if isinstance(reply, BaseException):
            raise reply
        if callable(reply) and not isinstance(reply, schema):
            return reply(prompt)
        return reply

    def calls_for(self, schema) -> List[Dict[str, Any]]:
        return [call for call in self.calls if call["schema"] is schema]


class RecordingAssetSource(IAssetSource):
    def __init__(self):
        self.queries = []

    async def search(self, query, asset_type):
        self.queries.append((query, AssetType(asset_type)))
        return f"https://assets.test/{AssetType(asset_type).value}/{len(self.queries)}"


HEALTHCARE_OUTLINE = OutlineDraft(
    title="AI in Healthcare",
    sections=[
        SectionDraft(title="Introduction", points=["What AI means for care", "Where it is used today", "Why now"], slideCount=3, hasVisuals=True),
        SectionDraft(title="Diagnostics", points=["Imaging", "Early detection"], slideCount=2, hasVisuals=True),
        SectionDraft(title="Operations", points=["Scheduling", "Triage", "Records"], slideCount=3, hasVisuals=False),
        SectionDraft(title="Ethics and Outlook", points=["Bias", "Regulation"], slideCount=2, hasVisuals=True),
    ],
    totalSlides=10,
    estimatedDuration=20,
    tone="formal",
)

HEALTHCARE_RESEARCH = ResearchDraft(
    topic="AI in Healthcare",
    summary="AI is reshaping diagnosis, operations and patient care.",
    keyPoints=["Imaging models match specialists", "Hospitals automate scheduling", "Regulators are catching up"],
    sources=["Industry reports"],
    relatedTopics=["Medical imaging"],
    confidence=0.85,
)


def slide_reply(prompt: str) -> SlideContentDraft:
    section = prompt.split("Section: ", 1)[1].split("\n", 1)[0]
    return SlideContentDraft(
        title=section,
        content="- Better patient outcomes\n- Faster clinical decisions\n\nTechnology supports care teams.",
    )


IMAGE_QUERIES = ImageQueryList(queries=[
    ImageQueryDraft(query="hospital technology", description="Doctors using a tablet", style="photographic", priority="high"),
    ImageQueryDraft(query="medical icon", description="Stethoscope icon", style="icon", priority="medium"),
])


def healthcare_replies() -> Dict[Type, Any]:
    return {
        ResearchDraft: HEALTHCARE_RESEARCH,
        OutlineDraft: HEALTHCARE_OUTLINE,
        SlideContentDraft: slide_reply,
        ImageQueryList: IMAGE_QUERIES,
    }


@pytest.fixture
def gateway():
    return StubGateway(healthcare_replies())


@pytest.fixture
def asset_source():
    return RecordingAssetSource()


@pytest.fixture
def pipeline_config():
    return Config(pipeline=PipelineConfig(
        assets_per_slide=2,
        max_parallel_assets=3,
        task_history_limit=100,
        request_timeout_seconds=30,
        research_depth="comprehensive",
        asset_source="placeholder",
        pexels_api_key=None,
    ))


def build_generator(gateway, asset_source, config) -> SlideGenerator:
    return SlideGenerator(
        research_agent=ResearchAgent(gateway),
        content_agent=ContentAgent(gateway),
        design_agent=DesignAgent(),
        asset_agent=AssetAgent(gateway, asset_source, max_parallel=config.pipeline.max_parallel_assets),
        generator_agent=GeneratorAgent(),
        config=config,
    )


@pytest.fixture
def slide_generator(gateway, asset_source, pipeline_config):
    return build_generator(gateway, asset_source, pipeline_config)


@pytest.fixture
def sample_outline():
    return Outline(
        title="Cloud Migration",
        sections=[
            OutlineSection(title="Why Migrate", points=["Cost", "Scale", "Speed"], slide_count=1),
            OutlineSection(title="Planning", points=["Inventory", "Dependencies"], slide_count=2, has_visuals=False),
        ],
        total_slides=3,
        estimated_duration_minutes=10,
        tone=Tone.FORMAL,
    )


@pytest.fixture
def design_decision():
    return DesignDecision(
        theme=THEMES["professional"],
        layout_map={},
        asset_strategy=AssetStrategy(use_images=True, use_icons=True),
    )
