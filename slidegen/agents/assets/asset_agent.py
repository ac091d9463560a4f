"""
Asset resolution stage: images, icons and charts for each slide.

Suggestions come from the content analyzer first and the model second; the
asset strategy filters them and an IAssetSource turns queries into URLs.
Missing assets never fail a deck, so per-slide failures degrade to no assets.
"""

import asyncio
from typing import Dict, List, Optional, Sequence, Tuple

from slidegen.agents.ai.prompts import IMAGE_QUERY_TEMPERATURE, build_image_queries_prompt
from slidegen.agents.core.base_agent import BaseAgent
from slidegen.agents.core.interfaces import IAssetSource, IModelGateway
from slidegen.agents.core.task_log import TaskPriority, TaskType
from slidegen.agents.design.content_analyzer import ContentAnalyzer
from slidegen.agents.exceptions import AgentError, GenerationCancelledError, ModelError
from slidegen.config.logging_config import get_logger
from slidegen.models.design import AssetStrategy, AssetSuggestion
from slidegen.models.schemas import ImageQueryDraft, ImageQueryList
from slidegen.models.slide import Asset, AssetPlacement, AssetSize, AssetType
from slidegen.services.asset_search import PlaceholderAssetSource

logger = get_logger(__name__)

POSITIONS = ["right", "left", "center", "top", "bottom"]

PRIORITY_RELEVANCE = {"high": 0.9, "medium": 0.7}
DEFAULT_RELEVANCE = 0.5

ASSET_SIZES = {
    AssetType.ICON: (64, 64, "px"),
    AssetType.IMAGE: (100, 100, "%"),
}
DEFAULT_ASSET_SIZE = (80, 80, "%")


def map_style_to_asset_type(style: Optional[str]) -> AssetType:
    style = (style or "").strip().lower()
    if style in ("icon", "minimal"):
        return AssetType.ICON
    if style in ("chart", "data"):
        return AssetType.CHART
    return AssetType.IMAGE


def suggestion_from_query(query: ImageQueryDraft) -> AssetSuggestion:
    priority = (query.priority or "").strip().lower()
    return AssetSuggestion(
        type=map_style_to_asset_type(query.style),
        description=query.description or query.query or "",
        relevance=PRIORITY_RELEVANCE.get(priority, DEFAULT_RELEVANCE),
        search_query=query.query or "",
    )


def filter_by_strategy(suggestions: List[AssetSuggestion], strategy: AssetStrategy) -> List[AssetSuggestion]:
    filtered = []
    for suggestion in suggestions:
        if suggestion.type == AssetType.IMAGE and not strategy.use_images:
            continue
        if suggestion.type == AssetType.ICON and not strategy.use_icons:
            continue
        filtered.append(suggestion)
    return filtered


def asset_placement(asset_type: AssetType, index: int, total_assets: int) -> AssetPlacement:
    position = POSITIONS[index] if index < len(POSITIONS) else "center"

    if asset_type == AssetType.IMAGE:
        return AssetPlacement(position=position, width="60%" if total_assets == 1 else "45%", height="auto")
    if asset_type == AssetType.ICON:
        return AssetPlacement(position=position, width="64px", height="64px")
    return AssetPlacement(position=position, width="70%", height="auto")


def asset_size(asset_type: AssetType) -> AssetSize:
    width, height, unit = ASSET_SIZES.get(asset_type, DEFAULT_ASSET_SIZE)
    return AssetSize(width=width, height=height, unit=unit)


class AssetAgent(BaseAgent):
    task_type = TaskType.ASSET

    def __init__(
        self,
        gateway: IModelGateway,
        asset_source: Optional[IAssetSource] = None,
        analyzer: Optional[ContentAnalyzer] = None,
        max_parallel: int = 4,
        task_history_limit: int = 1000
    ):
        super().__init__(gateway, task_history_limit)
        self.asset_source = asset_source or PlaceholderAssetSource()
        self.analyzer = analyzer or ContentAnalyzer()
        self.max_parallel = max_parallel

    async def find_assets(
        self,
        slide_content: str,
        strategy: AssetStrategy,
        count: int = 2,
        *,
        cancel_event: Optional[asyncio.Event] = None
    ) -> List[Asset]:
        with self.track("Find assets for slide", {"count": count}, TaskPriority.MEDIUM) as task:
            try:
                suggestions = await self._suggestions(slide_content, strategy, count, cancel_event)
                assets = await self._create_assets(suggestions)
            except (GenerationCancelledError, AgentError):
                raise
            except Exception as e:
                raise AgentError("asset", "Failed to find assets", {"original_error": str(e)}, cause=e) from e

            task.complete({"assets": len(assets)})
            return assets

    async def _suggestions(
        self,
        content: str,
        strategy: AssetStrategy,
        count: int,
        cancel_event: Optional[asyncio.Event]
    ) -> List[AssetSuggestion]:
        suggestions = list(self.analyzer.analyze(content).suggested_assets)

        if len(suggestions) < count:
            try:
                queries = await self.gateway.generate_structured(
                    build_image_queries_prompt(content, count),
                    ImageQueryList,
                    temperature=IMAGE_QUERY_TEMPERATURE,
                    cancel_event=cancel_event,
                )
                suggestions += [suggestion_from_query(q) for q in queries.queries if q.query or q.description]
            except ModelError as e:
                logger.warning(f"[ASSETS] Failed to generate search queries: {e}")

        return filter_by_strategy(suggestions, strategy)[:count]

    async def _create_assets(self, suggestions: List[AssetSuggestion]) -> List[Asset]:
        assets = []
        for index, suggestion in enumerate(suggestions):
            url = await self.asset_source.search(suggestion.search_query, suggestion.type)
            assets.append(Asset(
                type=suggestion.type,
                url=url,
                description=suggestion.description,
                alt=suggestion.description,
                placement=asset_placement(suggestion.type, index, len(suggestions)),
                size=asset_size(suggestion.type),
            ))
        return assets

    async def search_asset(
        self,
        query: str,
        asset_type: AssetType,
        style: Optional[str] = None,
        orientation: Optional[str] = None
    ) -> Asset:
        """Look up a single asset directly from a query."""
        full_query = query
        if style:
            full_query += f" {style}"
        if orientation:
            full_query += f" {orientation}"

        asset_type = AssetType(asset_type)
        return Asset(
            type=asset_type,
            url=await self.asset_source.search(full_query, asset_type),
            description=query,
            alt=query,
            placement=asset_placement(asset_type, 0, 1),
            size=asset_size(asset_type),
        )

    def optimize_asset(self, asset: Asset, max_width: Optional[float] = None, max_height: Optional[float] = None) -> Asset:
        size = asset.size
        if max_width and size.width > max_width:
            size = size.model_copy(update={"width": max_width})
        if max_height and size.height > max_height:
            size = size.model_copy(update={"height": max_height})
        return asset.model_copy(update={"size": size})

    def validate_asset(self, asset: Asset) -> Tuple[bool, List[str]]:
        errors = []

        if not asset.description or not asset.description.strip():
            errors.append("Asset must have a description")
        if not asset.alt or not asset.alt.strip():
            errors.append("Asset must have alt text for accessibility")
        if asset.placement is None:
            errors.append("Asset must have placement information")
        if asset.size is None:
            errors.append("Asset must have size information")
        if asset.type not in list(AssetType):
            errors.append(f"Invalid asset type: {asset.type}")

        return len(errors) == 0, errors

    async def batch_find_assets(
        self,
        slide_contents: Sequence[str],
        strategy: AssetStrategy,
        assets_per_slide: int = 2,
        *,
        cancel_event: Optional[asyncio.Event] = None
    ) -> Dict[int, List[Asset]]:
        """Assets for every slide index; the opening and closing slides get none."""
        last = len(slide_contents) - 1
        semaphore = asyncio.Semaphore(self.max_parallel)

        async def resolve(index: int, content: str) -> List[Asset]:
            if index == 0 or index == last:
                return []
            async with semaphore:
                try:
                    return await self.find_assets(content, strategy, assets_per_slide, cancel_event=cancel_event)
                except AgentError as e:
                    logger.warning(f"[ASSETS] Failed to find assets for slide {index + 1}: {e}")
                    return []

        results = await asyncio.gather(*(resolve(i, c) for i, c in enumerate(slide_contents)))
        asset_map = dict(enumerate(results))
        logger.info(f"[ASSETS] Resolved {sum(len(a) for a in results)} assets across {len(results)} slides")
        return asset_map
