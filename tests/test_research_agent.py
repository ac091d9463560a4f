import pytest

from conftest import StubGateway
from slidegen.agents.exceptions import AgentError, ModelError, ModelErrorReason
from slidegen.agents.research.research_agent import ResearchAgent, research_from_draft
from slidegen.models.research import TopicResearch
from slidegen.models.schemas import ResearchDraft


def test_research_from_draft_defaults_and_clamps():
    research = research_from_draft(ResearchDraft(keyPoints=["a", " ", ""]), "Volcanoes")
    assert research.topic == "Volcanoes"
    assert research.key_points == ["a"]
    assert research.confidence == 0.7

    assert research_from_draft(ResearchDraft(confidence=1.7), "x").confidence == 1.0
    assert research_from_draft(ResearchDraft(confidence=-2), "x").confidence == 0.0
    assert research_from_draft(ResearchDraft(confidence=float("nan")), "x").confidence == 0.7
    assert research_from_draft(ResearchDraft(confidence=float("inf")), "x").confidence == 0.7


async def test_research_uses_depth_specific_prompt():
    gateway = StubGateway({ResearchDraft: ResearchDraft(summary="Hot rocks", keyPoints=["Magma"], confidence=0.9)})
    agent = ResearchAgent(gateway)

    research = await agent.research("Volcanoes", "comprehensive")

    assert research.summary == "Hot rocks"
    assert "comprehensive research" in gateway.calls[0]["prompt"]
    assert gateway.calls[0]["temperature"] == 0.7
    assert agent.get_stats()["average_confidence"] == pytest.approx(0.9)


async def test_research_failure_raises_agent_error():
    agent = ResearchAgent(StubGateway({ResearchDraft: ModelError(ModelErrorReason.RATE_LIMITED)}))

    with pytest.raises(AgentError) as excinfo:
        await agent.research("Volcanoes")

    assert excinfo.value.stage == "research"
    assert excinfo.value.details["reason"] == "rate-limited"
    history = agent.get_task_history()
    assert history[0].status.value == "failed"


async def test_unusable_research_reply_raises_agent_error():
    # model_construct skips validation, as a loosely parsed reply can
    draft = ResearchDraft.model_construct(summary="Hot rocks", sources=[42])
    agent = ResearchAgent(StubGateway({ResearchDraft: draft}))

    with pytest.raises(AgentError) as excinfo:
        await agent.research("Volcanoes")

    assert excinfo.value.stage == "research"
    assert agent.get_task_history()[0].status.value == "failed"


@pytest.mark.parametrize("topic,reason", [
    ("", "Topic cannot be empty"),
    ("AI", "Topic is too short (minimum 3 characters)"),
    ("x" * 201, "Topic is too long (maximum 200 characters)"),
    ("How to hack a bank", "Topic contains inappropriate content"),
])
def test_validate_topic_rejections(topic, reason):
    assert ResearchAgent(StubGateway()).validate_topic(topic) == (False, reason)


def test_validate_topic_accepts_normal_topic():
    assert ResearchAgent(StubGateway()).validate_topic("Renewable energy") == (True, None)


async def test_enhance_research_mentions_focus_area():
    gateway = StubGateway({ResearchDraft: ResearchDraft(summary="Deeper", keyPoints=["More"])})
    base = TopicResearch(topic="Volcanoes", summary="Hot rocks", key_points=["Magma"], confidence=0.5)

    enhanced = await ResearchAgent(gateway).enhance_research(base, "eruptions")

    assert enhanced.topic == "Volcanoes"
    assert enhanced.summary == "Deeper"
    assert "focusing on: eruptions" in gateway.calls[0]["prompt"]


async def test_related_topics_skip_failures():
    replies = {ResearchDraft: [
        ResearchDraft(summary="main"),
        ModelError(ModelErrorReason.TIMEOUT),
        ResearchDraft(summary="second related"),
    ]}
    agent = ResearchAgent(StubGateway(replies))

    results = await agent.research_related_topics("Volcanoes", ["Lava", "Ash", "Geysers", "Tectonics"])

    assert list(results) == ["Volcanoes", "Ash", "Geysers"]
    assert results["Ash"].summary == "second related"
