import pytest

from slidegen.agents.exceptions import AgentError
from slidegen.agents.generation.generator_agent import GeneratorAgent, extract_title, remove_title, slugify
from slidegen.config.design import THEMES
from slidegen.models.slide import Asset, AssetPlacement, AssetSize, AssetType, LayoutType, Slide, SlideMetadata


def make_asset(n):
    return Asset(
        type=AssetType.IMAGE,
        url=f"https://img.test/{n}.png",
        description=f"image {n}",
        alt=f"image {n}",
        placement=AssetPlacement(position="right", width="45%", height="auto"),
        size=AssetSize(width=100, height=100, unit="%"),
    )


def make_slide(index, title="Title", content="Body", assets=None):
    return Slide(
        id=f"slide-{index}",
        title=title,
        content=content,
        theme=THEMES["professional"],
        assets=assets,
        metadata=SlideMetadata(order=index),
    )


def test_title_helpers():
    assert extract_title("Intro\n## Second\n# First") == "First"
    assert extract_title("## Only H2\n\nText") == "Only H2"
    assert extract_title("### Plain line\nmore") == "Plain line"
    assert extract_title("") == "Untitled Slide"
    assert extract_title("\n   \nOpening remarks\nmore") == "Opening remarks"
    assert extract_title("\n### Lead in\nmore") == "Lead in"
    assert extract_title(" \n\t\n") == "Untitled Slide"
    assert remove_title("## Heading\n\n- a\n- b") == "- a\n- b"
    assert slugify("Ethics and  Outlook") == "ethics-and-outlook"


def test_build_slides_assigns_order_layout_and_tags(sample_outline, design_decision):
    agent = GeneratorAgent()
    contents = ["# Cloud Migration\n\n*intro*", "## Why\n\nBody", "## Plan 1\n\nBody", "## Plan 2\n\nBody", "# Thank You\n\nBye"]
    decision = design_decision.model_copy(update={"layout_map": {1: LayoutType.BULLET_POINTS}})
    assets = {1: [make_asset(1), make_asset(2), make_asset(3)]}

    slides = agent.build_slides(sample_outline, contents, decision, assets, max_assets=2)

    assert [s.id for s in slides] == [f"slide-{i}" for i in range(5)]
    assert slides[1].layout == LayoutType.BULLET_POINTS
    assert slides[2].layout == LayoutType.CONTENT_ONLY
    assert len(slides[1].assets) == 2
    assert slides[2].assets is None
    assert slides[0].metadata.tags == ["title", "intro"]
    assert slides[1].metadata.tags == ["why-migrate", "visual"]
    assert slides[3].metadata.tags == ["planning"]
    assert slides[4].metadata.tags == ["conclusion", "closing"]
    assert slides[1].content == "Body"


def test_validate_slides_fatal_conditions():
    agent = GeneratorAgent()

    with pytest.raises(AgentError, match="at least 3 slides"):
        agent.validate_slides([make_slide(0), make_slide(1)])

    with pytest.raises(AgentError, match="Slide 2 has no content"):
        agent.validate_slides([make_slide(0), make_slide(1, content="  "), make_slide(2)])


def test_validate_slides_warnings():
    agent = GeneratorAgent()
    slides = [
        make_slide(0),
        make_slide(1, title=""),
        make_slide(2, content="x" * 1001),
        make_slide(3, assets=[make_asset(i) for i in range(4)]),
    ]

    assert agent.validate_slides(slides) == [
        "Slide 2 is missing a title",
        "Slide 3 has excessive content (1001 chars)",
        "Slide 4 has too many assets (4)",
    ]


def test_generate_presentation_merges_warnings(sample_outline, design_decision):
    agent = GeneratorAgent()
    long_body = "word " * 120
    contents = ["# Cloud Migration\n\nintro", f"## Why\n\n{long_body}", "## Plan\n\nBody", "## Plan\n\nBody", "# Thank You\n\nBye"]

    slides, result = agent.generate_presentation(sample_outline, contents, design_decision, {})

    assert len(slides) == 5
    assert "<title>Cloud Migration</title>" in result.html
    assert result.warnings == ["Slide 2: Content may be too long (599 chars)"]
    assert agent.get_stats()["total_slides_generated"] == 5


def test_export_formats():
    agent = GeneratorAgent()
    slides = [make_slide(0, "Intro"), make_slide(1, "Details", assets=[make_asset(1)]), make_slide(2, "End")]
    theme = THEMES["minimal"]

    assert agent.export_presentation(slides, theme, "html").startswith("<!DOCTYPE html>")

    markdown = agent.export_presentation(slides, theme, "markdown")
    assert "<!-- Slide 2 -->" in markdown
    assert "- ![image 1](https://img.test/1.png)" in markdown
    assert markdown.endswith("---")

    with pytest.raises(AgentError, match="not yet implemented"):
        agent.export_presentation(slides, theme, "pdf")
    with pytest.raises(AgentError, match="Unknown export format"):
        agent.export_presentation(slides, theme, "docx")


def test_generate_slide_fragment():
    html = GeneratorAgent().generate_slide("## Hello\n\n**Bold** move", LayoutType.QUOTE, THEMES["modern"])

    assert "<!DOCTYPE" not in html
    assert 'class="slide slide--quote' in html
    assert "<strong>Bold</strong>" in html


def test_generate_metadata(sample_outline):
    slides = [make_slide(0), make_slide(1, assets=[make_asset(1)]), make_slide(2)]
    metadata = GeneratorAgent().generate_metadata(slides, sample_outline)

    assert metadata["slide_count"] == 3
    assert metadata["asset_count"] == 1
    assert metadata["estimated_duration"] == 180
    assert metadata["title"] == "Cloud Migration"
