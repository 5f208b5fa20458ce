"""YouTube video lookup for generated recipes.

VideoEnricher fans out one search per recipe with asyncio.gather and puts
each result back at its input position. A failed or empty search only
affects its own recipe, which is returned without a videoId.
"""

import asyncio
from typing import Any, List, Optional

import aiohttp

from wasfa.models.models import Recipe
from wasfa.utils.config import config
from wasfa.utils.logger import logger
from wasfa.utils.safe import safe_execute_async


YOUTUBE_SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"


class YouTubeSearch:
    """Minimal YouTube Data API v3 search client."""

    def __init__(self, api_key: str, timeout_seconds: float = 10.0) -> None:
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    async def _fetch_json(self, params: dict[str, Any]) -> dict[str, Any]:
        async with aiohttp.ClientSession() as session:
            async with session.get(
                YOUTUBE_SEARCH_URL,
                params=params,
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            ) as response:
                response.raise_for_status()
                return await response.json()

    async def search_video_id(self, query: str) -> Optional[str]:
        """Return the id of the top video for query, or None.

        Raises:
            aiohttp.ClientError: On HTTP or network errors.
            asyncio.TimeoutError: When the request exceeds timeout_seconds.
        """
        if not self.available:
            return None

        params = {
            "part": "snippet",
            "q": query,
            "type": "video",
            "maxResults": 1,
            "key": self.api_key,
        }
        data = await self._fetch_json(params)
        items = data.get("items") or []
        if not items:
            logger.debug(f"No YouTube results for '{query}'")
            return None
        return items[0].get("id", {}).get("videoId")


class VideoEnricher:
    """Attaches a YouTube videoId to each recipe."""

    def __init__(self, searcher: YouTubeSearch) -> None:
        self.searcher = searcher

    async def _enrich_one(self, recipe: Recipe) -> Recipe:
        if recipe.video_id:
            return recipe

        video_id = await safe_execute_async(
            self.searcher.search_video_id(f"{recipe.title} recipe"),
            f"YouTube search for '{recipe.title}'",
            log_level="warning",
            default_return=None,
        )
        if not video_id:
            return recipe
        return recipe.model_copy(update={"video_id": video_id})

    async def enrich(self, recipes: List[Recipe]) -> List[Recipe]:
        """Enrich recipes concurrently.

        Args:
            recipes: Recipes in display order.

        Returns:
            New list in the same order; items whose lookup failed keep
            video_id unset.
        """
        if not recipes:
            return []
        if not self.searcher.available:
            logger.debug("YOUTUBE_API_KEY not set, skipping video enrichment")
            return list(recipes)

        # gather() returns results in argument order regardless of completion order
        return list(await asyncio.gather(*(self._enrich_one(recipe) for recipe in recipes)))


def create_video_enricher() -> VideoEnricher:
    """Build a VideoEnricher from the module-level config."""
    return VideoEnricher(YouTubeSearch(api_key=config.YOUTUBE_API_KEY, timeout_seconds=config.VIDEO_TIMEOUT_SECONDS))
