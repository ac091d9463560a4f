import asyncio

import pytest

from conftest import RecordingAssetSource, StubGateway
from slidegen.agents.assets.asset_agent import AssetAgent, filter_by_strategy, map_style_to_asset_type
from slidegen.agents.exceptions import GenerationCancelledError, ModelError, ModelErrorReason
from slidegen.models.design import AssetStrategy, AssetSuggestion
from slidegen.models.schemas import ImageQueryDraft, ImageQueryList
from slidegen.models.slide import AssetType
from slidegen.services.asset_search import PexelsAssetSource, PlaceholderAssetSource, create_asset_source, placeholder_url

IMAGES_ONLY = AssetStrategy(use_images=True, use_icons=False)
EVERYTHING = AssetStrategy(use_images=True, use_icons=True)


def test_style_mapping_and_strategy_filter():
    assert map_style_to_asset_type("Icon") == AssetType.ICON
    assert map_style_to_asset_type("data") == AssetType.CHART
    assert map_style_to_asset_type(None) == AssetType.IMAGE

    suggestions = [AssetSuggestion(type=t) for t in (AssetType.IMAGE, AssetType.ICON, AssetType.CHART)]
    assert [s.type for s in filter_by_strategy(suggestions, IMAGES_ONLY)] == [AssetType.IMAGE, AssetType.CHART]
    no_visuals = AssetStrategy(use_images=False, use_icons=False)
    assert [s.type for s in filter_by_strategy(suggestions, no_visuals)] == [AssetType.CHART]


async def test_find_assets_prefers_analyzer_suggestions():
    gateway = StubGateway()
    source = RecordingAssetSource()
    agent = AssetAgent(gateway, source)

    assets = await agent.find_assets("Our team ships software for digital health", IMAGES_ONLY, count=2)

    assert len(assets) == 2
    assert gateway.calls == []
    assert [a.placement.position for a in assets] == ["right", "left"]
    assert all(a.placement.width == "45%" for a in assets)
    assert all(a.url.startswith("https://assets.test/image/") for a in assets)


async def test_find_assets_asks_model_when_analyzer_is_short():
    queries = ImageQueryList(queries=[
        ImageQueryDraft(query="river delta aerial", description="Aerial view", style="photographic", priority="high"),
        ImageQueryDraft(query="wave icon", style="icon", priority="low"),
    ])
    gateway = StubGateway({ImageQueryList: queries})
    agent = AssetAgent(gateway, RecordingAssetSource())

    assets = await agent.find_assets("Rivers shape landscapes", EVERYTHING, count=2)

    assert [a.type for a in assets] == [AssetType.IMAGE, AssetType.ICON]
    assert assets[0].description == "Aerial view"
    assert assets[1].placement.width == "64px"
    assert assets[1].size.unit == "px"


async def test_query_failure_degrades_to_analyzer_only():
    gateway = StubGateway({ImageQueryList: ModelError(ModelErrorReason.MALFORMED_OUTPUT)})
    agent = AssetAgent(gateway, RecordingAssetSource())

    assert await agent.find_assets("Rivers shape landscapes", EVERYTHING) == []


async def test_unexpected_source_error_becomes_agent_error_and_batch_skips_slide():
    class BrokenSource(PlaceholderAssetSource):
        async def search(self, query, asset_type):
            raise RuntimeError("source offline")

    agent = AssetAgent(StubGateway(), BrokenSource())
    contents = ["# Title", "Team technology overview", "# Thanks"]

    asset_map = await agent.batch_find_assets(contents, IMAGES_ONLY)

    assert asset_map == {0: [], 1: [], 2: []}
    assert agent.get_stats()["failed"] == 1


async def test_batch_skips_first_and_last_and_bounds_parallelism():
    active = []
    peak = []

    class SlowSource(PlaceholderAssetSource):
        async def search(self, query, asset_type):
            active.append(1)
            peak.append(len(active))
            await asyncio.sleep(0.01)
            active.pop()
            return await super().search(query, asset_type)

    agent = AssetAgent(StubGateway(), SlowSource(), max_parallel=2)
    contents = ["# Title"] + ["Team technology update"] * 6 + ["# Thanks"]

    asset_map = await agent.batch_find_assets(contents, IMAGES_ONLY, assets_per_slide=1)

    assert sorted(asset_map) == list(range(8))
    assert asset_map[0] == [] and asset_map[7] == []
    assert all(len(asset_map[i]) == 1 for i in range(1, 7))
    assert max(peak) <= 2


async def test_batch_propagates_cancellation():
    cancel = asyncio.Event()
    cancel.set()
    agent = AssetAgent(StubGateway(), RecordingAssetSource())

    with pytest.raises(GenerationCancelledError):
        await agent.batch_find_assets(["# A", "Rivers", "# B"], EVERYTHING, cancel_event=cancel)


async def test_search_optimize_and_validate_asset():
    agent = AssetAgent(StubGateway(), PlaceholderAssetSource())

    asset = await agent.search_asset("mountain lake", "image", style="minimal", orientation="landscape")
    assert asset.url == placeholder_url("mountain lake minimal landscape", AssetType.IMAGE)
    assert agent.validate_asset(asset) == (True, [])

    shrunk = agent.optimize_asset(asset, max_width=50)
    assert (shrunk.size.width, shrunk.size.height) == (50, 100)

    invalid = asset.model_copy(update={"alt": " ", "description": ""})
    valid, errors = agent.validate_asset(invalid)
    assert not valid
    assert errors == ["Asset must have a description", "Asset must have alt text for accessibility"]


def test_placeholder_urls():
    assert placeholder_url("solar panels", AssetType.IMAGE) == "https://source.unsplash.com/800x600/?solar%20panels"
    assert placeholder_url("star", AssetType.ICON).startswith("https://api.iconify.design/mdi/star.svg")
    assert placeholder_url("sales", AssetType.CHART).startswith("data:image/svg+xml,")


def test_create_asset_source(monkeypatch):
    monkeypatch.delenv("PEXELS_API_KEY", raising=False)
    assert isinstance(create_asset_source("placeholder"), PlaceholderAssetSource)
    assert isinstance(create_asset_source("pexels", api_key="key"), PexelsAssetSource)


async def test_pexels_falls_back_to_placeholder(monkeypatch):
    source = PexelsAssetSource(api_key="key")

    async def no_results(query, per_page=10, orientation=None):
        return {"photos": [], "total_results": 0}

    monkeypatch.setattr(source, "search_images", no_results)
    assert await source.search("glacier", AssetType.IMAGE) == placeholder_url("glacier", AssetType.IMAGE)
    assert await source.search("glacier", AssetType.ICON) == placeholder_url("glacier", AssetType.ICON)


async def test_pexels_uses_first_photo(monkeypatch):
    source = PexelsAssetSource(api_key="key")

    async def one_photo(query, per_page=10, orientation=None):
        return {"photos": [{"src": {"large": "https://images.pexels.test/1.jpg"}}]}

    monkeypatch.setattr(source, "search_images", one_photo)
    assert await source.search("glacier", AssetType.IMAGE) == "https://images.pexels.test/1.jpg"
