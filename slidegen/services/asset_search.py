"""
Asset sources: where asset URLs come from.

PlaceholderAssetSource builds deterministic URLs without any network access.
PexelsAssetSource searches the Pexels photo API for images and falls back to
the placeholder URL when the search finds nothing or fails.
"""

import asyncio
import os
from typing import Any, Dict, Optional
from urllib.parse import quote

import aiohttp
from dotenv import load_dotenv

from slidegen.agents.core.interfaces import IAssetSource
from slidegen.agents.exceptions import MissingConfigError
from slidegen.config.logging_config import get_logger
from slidegen.models.slide import AssetType

# Load environment variables
load_dotenv()

logger = get_logger(__name__)


def placeholder_url(query: str, asset_type: AssetType) -> str:
    encoded = quote(query, safe="")
    asset_type = AssetType(asset_type)

    if asset_type == AssetType.IMAGE:
        return f"https://source.unsplash.com/800x600/?{encoded}"
    if asset_type == AssetType.ICON:
        return f"https://api.iconify.design/mdi/{encoded}.svg?color=%23000000"
    return (
        "data:image/svg+xml,<svg xmlns='http://www.w3.org/2000/svg' width='400' height='300'>"
        f"<text x='50%' y='50%' text-anchor='middle'>Chart: {encoded}</text></svg>"
    )


class PlaceholderAssetSource(IAssetSource):
    """Deterministic Unsplash / Iconify / inline SVG URLs."""

    async def search(self, query: str, asset_type: AssetType) -> Optional[str]:
        return placeholder_url(query, asset_type)


class PexelsAssetSource(IAssetSource):
    """Pexels photo search for image assets; other types use placeholders."""

    base_url = "https://api.pexels.com/v1"

    def __init__(self, api_key: Optional[str] = None, timeout_seconds: float = 30):
        self.api_key = api_key or os.getenv("PEXELS_API_KEY")
        if not self.api_key:
            raise MissingConfigError("PEXELS_API_KEY environment variable not set")
        self.headers = {"Authorization": self.api_key}
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds, connect=10)

    async def search(self, query: str, asset_type: AssetType) -> Optional[str]:
        if AssetType(asset_type) != AssetType.IMAGE or not query:
            return placeholder_url(query, asset_type)

        data = await self.search_images(query, per_page=1, orientation="landscape")
        photos = data.get("photos") or []
        if photos:
            src = photos[0].get("src") or {}
            url = src.get("large") or src.get("original")
            if url:
                return url

        logger.debug(f"[ASSETS] No Pexels result for '{query}', using placeholder")
        return placeholder_url(query, asset_type)

    async def search_images(
        self,
        query: str,
        per_page: int = 10,
        orientation: Optional[str] = None
    ) -> Dict[str, Any]:
        """Raw Pexels search. Network and API errors yield an empty result."""
        params = {"query": query, "per_page": min(per_page, 80)}
        if orientation:
            params["orientation"] = orientation

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(f"{self.base_url}/search", headers=self.headers, params=params) as response:
                    if response.status == 200:
                        return await response.json()
                    logger.warning(f"[ASSETS] Pexels API error ({query=}): {response.status} - {await response.text()}")
        except asyncio.TimeoutError:
            logger.warning(f"[ASSETS] Timeout searching Pexels ({query=})")
        except aiohttp.ClientError as e:
            logger.warning(f"[ASSETS] Error searching Pexels ({query=}): {e}")
        return {"photos": [], "total_results": 0}


def create_asset_source(kind: str = "placeholder", api_key: Optional[str] = None) -> IAssetSource:
    if kind == "pexels":
        return PexelsAssetSource(api_key=api_key)
    return PlaceholderAssetSource()
