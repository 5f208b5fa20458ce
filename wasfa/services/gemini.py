"""Recipe generation with the Gemini API.

Core pieces:
- extract_first_json_object(): lenient JSON extraction from free-text replies
- GeminiClient: thin async wrapper over google-genai with timeout + retries
- parse_recipe_payload(): normalize a decoded reply into RecipeResult
- RecipeGenerator: prompt -> model -> RecipeResult, falling back to the
  static table on any failure

The generator is total: missing credentials, network errors, timeouts,
malformed JSON and schema errors all end in match_fallback(), never in an
exception.
"""

import asyncio
import json
import re
from typing import Any, List, Optional

from google import genai
from google.genai import types

from wasfa.models.models import DEFAULT_SUGGESTED_INGREDIENTS, RecipeResult
from wasfa.prompts.prompts import get_recipe_prompt
from wasfa.services.fallback import match_fallback
from wasfa.utils.config import config
from wasfa.utils.logger import logger
from wasfa.utils.safe import safe_execute_async


TRANSIENT_ERROR_KEYWORDS = ("timeout", "connection", "429", "500", "503", "502", "retryable")

SAFETY_CATEGORIES = (
    types.HarmCategory.HARM_CATEGORY_HARASSMENT,
    types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
    types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
    types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
)

# Fields the model is asked for; anything else in a recipe object is ignored
RECIPE_FIELDS = ("title", "description", "ingredients", "instructions")

_OPENING_BRACE = re.compile(r"\{")


def build_safety_settings() -> list[types.SafetySetting]:
    """Block medium-and-above harm in every category the API exposes for text."""
    return [
        types.SafetySetting(category=category, threshold=types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE)
        for category in SAFETY_CATEGORIES
    ]


def extract_first_json_object(text: Optional[str]) -> Optional[str]:
    """Return the first substring of text that decodes as a JSON object.

    Tolerates prose, markdown fences or trailing commentary around the
    object. Every "{" is tried as a start position in order, so a stray brace
    in leading prose does not hide the real payload.

    Args:
        text: Raw model reply.

    Returns:
        The JSON object text, or None if the reply contains no decodable object.
    """
    if not text:
        return None

    decoder = json.JSONDecoder()
    for match in _OPENING_BRACE.finditer(text):
        start = match.start()
        try:
            _, end = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            continue
        return text[start:end]
    return None


def is_transient_error(error: Exception) -> bool:
    """Timeouts, connection problems, 429 and 5xx are worth another attempt."""
    if isinstance(error, (asyncio.TimeoutError, ConnectionError)):
        return True
    error_str = str(error).lower()
    return any(keyword in error_str for keyword in TRANSIENT_ERROR_KEYWORDS)


class GeminiClient:
    """Async access to Gemini text generation.

    The google-genai client is synchronous, so each call runs in a worker
    thread and is bounded by timeout_seconds. Transient failures are retried
    with exponential backoff; everything else propagates to the caller.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        temperature: float = 0.7,
        top_p: float = 0.8,
        top_k: int = 40,
        timeout_seconds: float = 30.0,
        max_retries: int = 2,
        delay_between_retries: float = 1.0,
        client: Any = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.top_p = top_p
        self.top_k = top_k
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.delay_between_retries = delay_between_retries
        self._client = client

    @property
    def available(self) -> bool:
        """True when a credential is configured."""
        return bool(self.api_key)

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def _generation_config(self, max_output_tokens: int) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            temperature=self.temperature,
            top_p=self.top_p,
            top_k=self.top_k,
            max_output_tokens=max_output_tokens,
            safety_settings=build_safety_settings(),
        )

    async def _generate_once(self, prompt: str, max_output_tokens: int) -> str:
        client = self._get_client()
        response = await asyncio.wait_for(
            asyncio.to_thread(
                client.models.generate_content,
                model=self.model,
                contents=prompt,
                config=self._generation_config(max_output_tokens),
            ),
            timeout=self.timeout_seconds,
        )
        text = response.text
        if not text:
            raise ValueError("Gemini returned an empty response")
        return text

    async def generate_text(self, prompt: str, max_output_tokens: int = 2048) -> str:
        """Generate text for a prompt.

        Args:
            prompt: Full prompt text.
            max_output_tokens: Output token cap for this call.

        Returns:
            str: Model reply text.

        Raises:
            ValueError: If no credential is configured or the reply is empty.
            Exception: The last error once retries are exhausted, or the first
                non-transient error.
        """
        if not self.available:
            raise ValueError("GEMINI_API_KEY is not configured")

        attempt = 1
        delay_seconds = self.delay_between_retries
        while True:
            try:
                return await self._generate_once(prompt, max_output_tokens)
            except Exception as e:
                if attempt >= self.max_retries or not is_transient_error(e):
                    raise
                logger.debug(
                    f"Transient Gemini error, retrying (attempt {attempt + 1}/{self.max_retries}) "
                    f"after {delay_seconds}s: {type(e).__name__}: {e}"
                )
                await asyncio.sleep(delay_seconds)
                delay_seconds *= 2
                attempt += 1

    async def generate_json(self, prompt: str, max_output_tokens: int = 2048) -> dict[str, Any]:
        """Generate a reply and decode the first JSON object in it.

        Raises:
            ValueError: If the reply holds no JSON object.
        """
        text = await self.generate_text(prompt, max_output_tokens)
        raw = extract_first_json_object(text)
        if raw is None:
            raise ValueError("No JSON object found in Gemini response")
        return json.loads(raw)


def parse_recipe_payload(payload: dict[str, Any]) -> RecipeResult:
    """Normalize a decoded model reply into a RecipeResult.

    Only the title, description, ingredients and instructions of each recipe
    are kept. Missing or empty suggestions are replaced by the default list.

    Raises:
        ValueError: If the payload does not fit the recipe schema. A payload
            without a "recipes" list counts as malformed: a reply cut off at the
            token limit decodes to a nested recipe object instead of the bundle.
    """
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")

    recipes = payload.get("recipes")
    if not isinstance(recipes, list):
        raise ValueError("Reply has no 'recipes' list")

    cleaned = [
        {field: recipe[field] for field in RECIPE_FIELDS if recipe.get(field) is not None}
        for recipe in recipes
        if isinstance(recipe, dict)
    ]
    suggestions = (
        payload.get("suggestedIngredients")
        or payload.get("suggested_ingredients")
        or list(DEFAULT_SUGGESTED_INGREDIENTS)
    )

    return RecipeResult.model_validate({"recipes": cleaned, "suggestedIngredients": suggestions})


class RecipeGenerator:
    """Turns an ingredient list into recipes, via Gemini when possible."""

    def __init__(self, client: GeminiClient, max_recipes: int = 3, max_output_tokens: int = 2048) -> None:
        self.client = client
        self.max_recipes = max_recipes
        self.max_output_tokens = max_output_tokens

    async def _generate_with_model(self, ingredients: List[str]) -> RecipeResult:
        prompt = get_recipe_prompt(ingredients, self.max_recipes)
        payload = await self.client.generate_json(prompt, self.max_output_tokens)
        result = parse_recipe_payload(payload)
        logger.info(
            f"Gemini returned {len(result.recipes)} recipe(s) and "
            f"{len(result.suggested_ingredients)} suggestion(s)"
        )
        return result

    async def generate(self, ingredients: List[str]) -> RecipeResult:
        """Generate recipes for the given ingredients.

        Args:
            ingredients: Ingredient names as typed by the user.

        Returns:
            RecipeResult: Never raises. Empty input returns the default
            suggestions without any network call.
        """
        if not ingredients:
            return RecipeResult.empty()

        if not self.client.available:
            logger.info("GEMINI_API_KEY not set, using fallback recipes")
            return match_fallback(ingredients)

        result = await safe_execute_async(
            self._generate_with_model(ingredients),
            "Gemini recipe generation",
            log_level="warning",
            default_return=None,
        )
        if result is None:
            logger.info("Falling back to static recipes")
            return match_fallback(ingredients)
        return result


def create_gemini_client() -> GeminiClient:
    """Build a GeminiClient from the module-level config."""
    return GeminiClient(
        api_key=config.GEMINI_API_KEY,
        model=config.GEMINI_MODEL,
        temperature=config.TEMPERATURE,
        top_p=config.TOP_P,
        top_k=config.TOP_K,
        timeout_seconds=config.AI_TIMEOUT_SECONDS,
        max_retries=config.MAX_RETRIES,
        delay_between_retries=config.DELAY_BETWEEN_RETRIES,
    )
