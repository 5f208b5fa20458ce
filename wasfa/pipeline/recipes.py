"""Request orchestration for recipe discovery.

find_recipes() runs one request through:

    validate -> cache lookup -> (hit: respond)
                             -> (miss: generate -> enrich videos -> store -> respond)

Steps are strictly sequential within a request. Cache errors never fail a
request: a failed lookup is a miss and a failed store is skipped. Bundles
without recipes are returned but not stored, so a later request can still
get real recipes once the model answers again.
"""

import asyncio
import contextlib
from typing import AsyncIterator, List, Optional

from wasfa.models.models import (
    CacheEntry,
    PairingRequest,
    PairingResult,
    RecipeRequest,
    RecipeResult,
    RecipeSearchRequest,
    SubstitutionRequest,
    SubstitutionResult,
    cache_key,
)
from wasfa.services.gemini import RecipeGenerator, create_gemini_client
from wasfa.services.pairings import PairingAdvisor
from wasfa.services.substitutions import find_substitutes
from wasfa.services.youtube import VideoEnricher, create_video_enricher
from wasfa.storage.cache import RecipeCache
from wasfa.utils.config import config
from wasfa.utils.logger import logger
from wasfa.utils.safe import safe_execute_async, safe_execute_sync


class _KeyedLocks:
    """One asyncio.Lock per key, dropped once nobody holds or waits on it."""

    def __init__(self) -> None:
        self._locks: dict[str, tuple[asyncio.Lock, int]] = {}

    @contextlib.asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock, users = self._locks.get(key, (asyncio.Lock(), 0))
        self._locks[key] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._locks[key]
            if users <= 1:
                del self._locks[key]
            else:
                self._locks[key] = (lock, users - 1)

    def __len__(self) -> int:
        return len(self._locks)


class RecipePipeline:
    """Cache-then-generate-then-store orchestration over the recipe services."""

    def __init__(
        self,
        generator: RecipeGenerator,
        enricher: VideoEnricher,
        cache: Optional[RecipeCache] = None,
        pairing_advisor: Optional[PairingAdvisor] = None,
        single_flight: bool = False,
    ) -> None:
        self.generator = generator
        self.enricher = enricher
        self.cache = cache
        self.pairing_advisor = pairing_advisor or PairingAdvisor(generator.client)
        self.single_flight = single_flight
        self._key_locks = _KeyedLocks()

    async def _cache_lookup(self, key: str) -> Optional[CacheEntry]:
        if self.cache is None:
            return None
        return await safe_execute_async(
            self.cache.get(key),
            "Recipe cache lookup",
            log_level="warning",
            default_return=None,
        )

    async def _cache_store(self, key: str, result: RecipeResult) -> None:
        if self.cache is None:
            return
        if not result.recipes:
            logger.debug("Not caching a bundle without recipes")
            return
        await safe_execute_async(
            self.cache.put(key, result),
            "Recipe cache store",
            log_level="warning",
            default_return=None,
        )

    async def _lookup_or_generate(self, ingredients: List[str], key: str) -> RecipeResult:
        cached = await self._cache_lookup(key)
        if cached is not None:
            logger.info(f"Cache hit for ingredients: {key}", extra={"cache_key": key})
            return cached.result

        logger.info(f"Cache miss, generating recipes for: {key}", extra={"cache_key": key})
        result = await self.generator.generate(ingredients)
        recipes = await self.enricher.enrich(result.recipes)
        result = result.model_copy(update={"recipes": recipes})

        await self._cache_store(key, result)
        return result

    async def find_recipes(self, ingredients: List[str]) -> RecipeResult:
        """Find recipes for the given ingredients.

        Args:
            ingredients: 1-50 non-blank ingredient names, any order and case.

        Returns:
            RecipeResult: Cached bundle on a hit, freshly generated and
            enriched bundle on a miss.

        Raises:
            pydantic.ValidationError: If the ingredient list is invalid
                (a ValueError subclass), before any lookup happens.
        """
        request = RecipeRequest(ingredients=ingredients)
        key = cache_key(request.ingredients)

        if not (self.single_flight and self.cache is not None):
            return await self._lookup_or_generate(request.ingredients, key)

        # Waiters re-check the cache after the first request has stored its bundle
        async with self._key_locks.hold(key):
            return await self._lookup_or_generate(request.ingredients, key)

    async def search_recipes(self, query: str) -> RecipeResult:
        """Recipes for a dish name instead of an ingredient list.

        The name goes to the generator as a one-item list and the result is
        enriched with videos. Searches are not cached.

        Raises:
            pydantic.ValidationError: If the query is shorter than 2 characters
                after trimming, or longer than 100.
        """
        request = RecipeSearchRequest(query=query)
        logger.info(f"Searching recipes by name: {request.query}")
        result = await self.generator.generate([request.query])
        recipes = await self.enricher.enrich(result.recipes)
        return result.model_copy(update={"recipes": recipes})

    async def find_substitutes(self, ingredient: str) -> SubstitutionResult:
        """Static substitution lookup.

        Raises:
            pydantic.ValidationError: If the ingredient name is blank or too long.
        """
        request = SubstitutionRequest(ingredient=ingredient)
        return find_substitutes(request.ingredient)

    async def suggest_pairings(self, ingredient: str) -> PairingResult:
        """Ingredient pairing suggestions.

        Raises:
            pydantic.ValidationError: If the ingredient name is blank or too long.
        """
        request = PairingRequest(ingredient=ingredient)
        return await self.pairing_advisor.suggest(request.ingredient)

    def close(self) -> None:
        if self.cache is not None:
            safe_execute_sync(self.cache.close, "Recipe cache close")


def _create_generator() -> RecipeGenerator:
    logger.info("Step 1/4: Configuring Gemini recipe generator...")
    client = create_gemini_client()
    if client.available:
        logger.info(f"✓ Gemini configured (model: {config.GEMINI_MODEL})")
    else:
        logger.warning("GEMINI_API_KEY not set - recipes will come from the static fallback table")
        logger.info("✓ Fallback-only mode configured")
    return RecipeGenerator(client, max_recipes=config.MAX_RECIPES, max_output_tokens=config.MAX_OUTPUT_TOKENS)


def _create_enricher() -> VideoEnricher:
    logger.info("Step 2/4: Configuring YouTube video enrichment...")
    enricher = create_video_enricher()
    if enricher.searcher.available:
        logger.info("✓ YouTube enrichment enabled")
    else:
        logger.info("✓ YouTube enrichment disabled (YOUTUBE_API_KEY not set)")
    return enricher


def _configure_cache(use_cache: bool) -> Optional[RecipeCache]:
    logger.info("Step 3/4: Configuring recipe cache...")

    if not (use_cache and config.ENABLE_CACHE):
        logger.info("✓ Recipe cache disabled")
        return None

    if config.DATABASE_URL:
        logger.info(
            f"Using database: {config.DATABASE_URL.split('@')[1] if '@' in config.DATABASE_URL else '...'}"
        )
    else:
        logger.info(f"Using SQLite database: {config.CACHE_DB_FILE}")

    cache = RecipeCache(config.cache_db_url)
    logger.info("✓ Recipe cache configured")
    return cache


def initialize_recipe_pipeline(use_cache: bool = True) -> RecipePipeline:
    """Factory function to build the recipe pipeline from configuration.

    Args:
        use_cache: If False, run without the recipe cache regardless of ENABLE_CACHE.

    Returns:
        RecipePipeline: Ready-to-use pipeline.
    """
    logger.info("=== Initializing Recipe Pipeline ===")

    generator = _create_generator()
    enricher = _create_enricher()
    cache = _configure_cache(use_cache)

    logger.info("Step 4/4: Assembling pipeline...")
    pipeline = RecipePipeline(
        generator=generator,
        enricher=enricher,
        cache=cache,
        pairing_advisor=PairingAdvisor(generator.client),
        single_flight=config.CACHE_SINGLE_FLIGHT,
    )
    logger.info(f"✓ Pipeline assembled (single-flight: {config.CACHE_SINGLE_FLIGHT})")

    logger.info("=== Pipeline initialization complete ===")
    return pipeline
