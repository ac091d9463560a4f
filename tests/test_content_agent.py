import pytest

from conftest import HEALTHCARE_OUTLINE, StubGateway
from slidegen.agents.content.content_agent import ContentAgent, chunk_points, fallback_slide, outline_from_draft
from slidegen.agents.exceptions import AgentError, ModelError, ModelErrorReason
from slidegen.models.outline import Outline, OutlineSection, Tone
from slidegen.models.research import TopicResearch
from slidegen.models.schemas import OutlineDraft, SectionDraft, SlideContentDraft


def test_chunk_points_uses_ceiling_size():
    assert chunk_points(["a", "b", "c", "d", "e", "f", "g"], 3) == [["a", "b", "c"], ["d", "e", "f"], ["g"]]


def test_chunk_points_keeps_slide_count_with_few_points():
    assert chunk_points(["a"], 3) == [["a"], [], []]
    assert chunk_points([], 2) == [[], []]
    assert chunk_points(["a", "b"], 1) == [["a", "b"]]


def test_fallback_slide():
    assert fallback_slide("Costs", ["Licences", "Hosting"]) == "## Costs\n\n- Licences\n- Hosting"
    assert fallback_slide("Costs", []) == "## Costs\n\n*Costs*"


def test_outline_from_draft_applies_defaults():
    draft = OutlineDraft(
        title="  ",
        sections=[
            SectionDraft(title="One", points=["x", " "], slideCount=0),
            SectionDraft(title=None, points=["y"], slideCount=3, hasVisuals=False),
        ],
        totalSlides=99,
        tone="Playful",
    )
    outline = outline_from_draft(draft, "Fallback Topic")

    assert outline.title == "Fallback Topic"
    assert outline.tone == Tone.FORMAL
    assert outline.sections[0].slide_count == 1
    assert outline.sections[0].points == ["x"]
    assert outline.sections[0].has_visuals is True
    assert outline.sections[1].title == "Untitled Section"
    assert outline.total_slides == 4
    assert outline.estimated_duration_minutes == 4


async def test_generate_outline_merges_research():
    gateway = StubGateway({OutlineDraft: HEALTHCARE_OUTLINE})
    agent = ContentAgent(gateway)
    research = TopicResearch(topic="AI in Healthcare", key_points=["Imaging models", "imaging"], confidence=0.9)

    outline = await agent.generate_outline("AI in Healthcare", research, 10, audience="nurses")

    assert outline.total_slides == 10
    assert outline.sections[0].points[-1] == "Imaging models"
    # duplicate of an existing point is not appended again
    assert outline.sections[1].points == ["Imaging", "Early detection"]
    assert "Audience: nurses" in gateway.calls[0]["prompt"]


async def test_generate_outline_wraps_model_error():
    agent = ContentAgent(StubGateway({OutlineDraft: ModelError(ModelErrorReason.TIMEOUT)}))

    with pytest.raises(AgentError) as excinfo:
        await agent.generate_outline("Topic")

    assert excinfo.value.stage == "content"
    assert excinfo.value.details["reason"] == "timeout"
    assert agent.get_stats()["failed"] == 1


def test_merge_research_is_idempotent(sample_outline):
    agent = ContentAgent(StubGateway())
    research = TopicResearch(topic="Cloud", key_points=["Cost", "Security", "Training"], confidence=0.5)

    once = agent.merge_research(sample_outline, research)
    twice = agent.merge_research(once, research)

    assert once == twice
    assert once.sections[0].points == ["Cost", "Scale", "Speed", "Security"]
    assert once.sections[1].points == ["Inventory", "Dependencies", "Training"]


async def test_slide_contents_layout_and_fallbacks(sample_outline):
    replies = {SlideContentDraft: [
        SlideContentDraft(title="Why", content="Cloud saves money."),
        ModelError(ModelErrorReason.RATE_LIMITED),
        SlideContentDraft(content="### Already titled\n\nBody"),
    ]}
    agent = ContentAgent(StubGateway(replies))

    contents = await agent.generate_slide_contents(sample_outline)

    assert len(contents) == sample_outline.total_slides + 2
    assert contents[0].startswith("# Cloud Migration")
    assert contents[1] == "## Why\n\nCloud saves money."
    assert contents[2] == "## Planning (1/2)\n\n- Inventory"
    assert contents[3] == "### Already titled\n\nBody"
    assert contents[-1].startswith("# Thank You")


async def test_empty_draft_content_falls_back(sample_outline):
    agent = ContentAgent(StubGateway({SlideContentDraft: SlideContentDraft(content="  ")}))
    contents = await agent.generate_slide_contents(sample_outline)
    assert contents[1] == "## Why Migrate\n\n- Cost\n- Scale\n- Speed"


async def test_heading_only_draft_falls_back(sample_outline):
    agent = ContentAgent(StubGateway({SlideContentDraft: SlideContentDraft(content="## Key Findings")}))
    contents = await agent.generate_slide_contents(sample_outline)
    assert contents[1] == "## Why Migrate\n\n- Cost\n- Scale\n- Speed"
    assert contents[2] == "## Planning (1/2)\n\n- Inventory"


def test_validate_outline_collects_every_error():
    agent = ContentAgent(StubGateway())
    outline = Outline(
        title="",
        sections=[OutlineSection(title="Only", points=[], slide_count=1)],
        total_slides=1,
    )

    valid, errors = agent.validate_outline(outline)

    assert not valid
    assert errors == [
        "Outline must have a title",
        "Section 1 has no key points",
        "Presentation should have at least 3 slides",
    ]


def test_validate_outline_accepts_sample(sample_outline):
    assert ContentAgent(StubGateway()).validate_outline(sample_outline) == (True, [])


def test_optimize_for_duration_scales_sections(sample_outline):
    agent = ContentAgent(StubGateway())

    doubled = agent.optimize_for_duration(sample_outline, 20)

    assert [s.slide_count for s in doubled.sections] == [2, 4]
    assert doubled.total_slides == 6
    assert doubled.estimated_duration_minutes == 20
    assert agent.optimize_for_duration(sample_outline, 10) is sample_outline

    shrunk = agent.optimize_for_duration(sample_outline, 1)
    assert all(s.slide_count >= 1 for s in shrunk.sections)

    with pytest.raises(ValueError):
        agent.optimize_for_duration(sample_outline, 0)


def test_optimize_for_duration_rounds_halves_up():
    agent = ContentAgent(StubGateway())
    outline = Outline(
        title="Rounding",
        sections=[
            OutlineSection(title="Five", points=["a"], slide_count=5),
            OutlineSection(title="Three", points=["b"], slide_count=3),
        ],
        estimated_duration_minutes=10,
    ).recompute_total()

    halved = agent.optimize_for_duration(outline, 5)

    assert [s.slide_count for s in halved.sections] == [3, 2]
    assert halved.total_slides == 5

    single = Outline(
        title="Single",
        sections=[OutlineSection(title="One", points=["a"], slide_count=1)],
        estimated_duration_minutes=2,
    ).recompute_total()
    assert agent.optimize_for_duration(single, 5).sections[0].slide_count == 3


def test_generate_content_markdown(sample_outline):
    agent = ContentAgent(StubGateway())
    markdown = agent.generate_content_markdown(sample_outline, ["# Cloud Migration", "## Why\n\nBody"])

    assert markdown.startswith("# Cloud Migration")
    assert "**Total Slides:** 3" in markdown
    assert "2. Planning (2 slides)" in markdown
    assert "1. Why Migrate (1 slide)" in markdown
    assert "### Slide 2" in markdown
