"""Unit tests for the HTTP API in app.py.

Requests go through FastAPI's TestClient against a pipeline whose generator
and video enricher are faked, so no network is involved.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app import (
    INVALID_INGREDIENT_MESSAGE,
    INVALID_INGREDIENTS_MESSAGE,
    INVALID_QUERY_MESSAGE,
    NO_RECIPES_MESSAGE_AR,
    NO_RECIPES_MESSAGE_EN,
    NO_SEARCH_RESULTS_MESSAGE_AR,
    NO_SEARCH_RESULTS_MESSAGE_EN,
    REQUEST_ID_HEADER,
    create_app,
)
from wasfa.models.models import DEFAULT_SUGGESTED_INGREDIENTS, Recipe, RecipeResult
from wasfa.pipeline.recipes import RecipePipeline
from wasfa.services.pairings import static_pairings


SHAKSHUKA = RecipeResult(
    recipes=[
        Recipe(
            title="شكشوكة",
            description="بيض في صلصة الطماطم",
            ingredients=["4 بيضات", "3 حبات طماطم"],
            instructions=["اطهُ الطماطم", "أضف البيض"],
        )
    ],
    suggested_ingredients=["فلفل حار"],
)


def _pipeline(result: RecipeResult = SHAKSHUKA) -> RecipePipeline:
    generator = MagicMock()
    generator.generate = AsyncMock(return_value=result)
    generator.client.available = False

    enricher = MagicMock()
    enricher.enrich = AsyncMock(side_effect=lambda recipes: [r.model_copy(update={"video_id": "yt1"}) for r in recipes])
    enricher.searcher.available = True

    advisor = MagicMock()
    advisor.suggest = AsyncMock(side_effect=lambda name: static_pairings(name))

    return RecipePipeline(generator, enricher, pairing_advisor=advisor)


@pytest.fixture
def client():
    with TestClient(create_app(_pipeline())) as test_client:
        yield test_client


class TestRecipesEndpoint:
    """Test POST /api/recipes."""

    def test_success_uses_camel_case(self, client):
        """Test that the response carries camelCase keys and the enriched videoId."""
        response = client.post("/api/recipes", json={"ingredients": ["بيض", "طماطم"]})

        assert response.status_code == 200
        body = response.json()
        assert body["recipes"][0]["title"] == "شكشوكة"
        assert body["recipes"][0]["videoId"] == "yt1"
        assert body["suggestedIngredients"] == ["فلفل حار"]
        assert "message" not in body

    def test_no_recipes_adds_arabic_message(self):
        """Test that an empty bundle carries the default staples and an Arabic message."""
        with TestClient(create_app(_pipeline(RecipeResult.empty()))) as client:
            response = client.post("/api/recipes", json={"ingredients": ["جزر"]})

        assert response.status_code == 200
        body = response.json()
        assert body["recipes"] == []
        assert body["suggestedIngredients"] == list(DEFAULT_SUGGESTED_INGREDIENTS)
        assert body["message"] == NO_RECIPES_MESSAGE_AR

    def test_no_recipes_adds_english_message(self):
        """Test that English input gets the English message."""
        with TestClient(create_app(_pipeline(RecipeResult.empty()))) as client:
            response = client.post("/api/recipes", json={"ingredients": ["carrot"]})

        assert response.json()["message"] == NO_RECIPES_MESSAGE_EN

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"ingredients": None},
            {"ingredients": []},
            {"ingredients": "بيض"},
            {"ingredients": ["بيض", "  "]},
            {"ingredients": ["x" * 101]},
            {"ingredients": ["a"] * 51},
            ["بيض"],
        ],
    )
    def test_invalid_ingredients(self, client, payload):
        """Test that invalid bodies are rejected with 400 and details."""
        response = client.post("/api/recipes", json=payload)

        assert response.status_code == 400
        assert response.json()["message"] == INVALID_INGREDIENTS_MESSAGE
        assert response.json()["details"]

    def test_malformed_json(self, client):
        """Test that a body that is not JSON is a 400."""
        response = client.post(
            "/api/recipes", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"message": INVALID_INGREDIENTS_MESSAGE}


class TestLookupEndpoints:
    """Test GET /api/substitutes and GET /api/pairings."""

    def test_substitutes(self, client):
        """Test a substitution lookup in camelCase."""
        response = client.get("/api/substitutes", params={"ingredient": "حليب"})

        assert response.status_code == 200
        body = response.json()
        assert body["originalIngredient"] == "حليب"
        assert len(body["substitutes"]) == 3

    def test_substitutes_placeholder(self, client):
        """Test that an unknown ingredient still returns 200 with a placeholder."""
        response = client.get("/api/substitutes", params={"ingredient": "saffron"})

        assert response.status_code == 200
        assert response.json()["substitutes"][0]["ratio"] == "unavailable"

    def test_pairings(self, client):
        """Test a pairing lookup in camelCase."""
        response = client.get("/api/pairings", params={"ingredient": "طماطم"})

        assert response.status_code == 200
        body = response.json()
        assert body["ingredient"] == "طماطم"
        assert body["pairings"][0]["name"] == "ريحان"
        assert body["cuisineAffinities"][0]["cuisine"] == "إيطالي"

    @pytest.mark.parametrize("path", ["/api/substitutes", "/api/pairings"])
    @pytest.mark.parametrize("params", [{}, {"ingredient": ""}, {"ingredient": "   "}])
    def test_missing_ingredient(self, client, path, params):
        """Test that a missing or blank ingredient is a 400."""
        response = client.get(path, params=params)

        assert response.status_code == 400
        assert response.json()["message"] == INVALID_INGREDIENT_MESSAGE


class TestHealth:
    """Test GET /health."""

    def test_health_reports_integrations(self, client):
        """Test that health lists which integrations are configured."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "ai": False, "video": True, "cache": False}

    def test_cors_headers(self, client):
        """Test that cross-origin requests are allowed."""
        response = client.get("/health", headers={"Origin": "http://localhost:5173"})

        assert response.headers["access-control-allow-origin"] == "*"


class TestSearchEndpoint:
    """Test GET /api/recipes/search."""

    def test_search_by_name(self, client):
        """Test that a dish name returns enriched recipes in camelCase."""
        response = client.get("/api/recipes/search", params={"query": "شكشوكة"})

        assert response.status_code == 200
        body = response.json()
        assert body["recipes"][0]["title"] == "شكشوكة"
        assert body["recipes"][0]["videoId"] == "yt1"
        assert "message" not in body

    def test_search_passes_name_to_generator(self):
        """Test that the dish name is sent to the generator as a one-item list."""
        pipeline = _pipeline()
        with TestClient(create_app(pipeline)) as client:
            client.get("/api/recipes/search", params={"query": " كبسة "})

        pipeline.generator.generate.assert_awaited_once_with(["كبسة"])

    @pytest.mark.parametrize(
        "query,expected",
        [("ملوخية", NO_SEARCH_RESULTS_MESSAGE_AR), ("moussaka", NO_SEARCH_RESULTS_MESSAGE_EN)],
    )
    def test_no_results_message(self, query, expected):
        """Test that an empty search carries the default staples and a message in the query's language."""
        with TestClient(create_app(_pipeline(RecipeResult.empty()))) as client:
            response = client.get("/api/recipes/search", params={"query": query})

        assert response.status_code == 200
        body = response.json()
        assert body["recipes"] == []
        assert body["suggestedIngredients"] == list(DEFAULT_SUGGESTED_INGREDIENTS)
        assert body["message"] == expected

    @pytest.mark.parametrize("params", [{}, {"query": ""}, {"query": "ك"}, {"query": "  a  "}])
    def test_short_query_is_rejected(self, client, params):
        """Test that a missing query or one under 2 characters is a 400."""
        response = client.get("/api/recipes/search", params=params)

        assert response.status_code == 400
        assert response.json()["message"] == INVALID_QUERY_MESSAGE


class TestRequestId:
    """Test request id tagging."""

    def test_generated_request_id(self, client):
        """Test that a response carries a generated X-Request-ID."""
        response = client.get("/health")

        assert len(response.headers[REQUEST_ID_HEADER]) == 32

    def test_incoming_request_id_is_kept(self, client):
        """Test that a client-supplied X-Request-ID is echoed back."""
        response = client.get("/health", headers={REQUEST_ID_HEADER: "abc-123"})

        assert response.headers[REQUEST_ID_HEADER] == "abc-123"

    def test_oversized_request_id_is_replaced(self, client):
        """Test that an overlong incoming id is replaced by a generated one."""
        response = client.get("/health", headers={REQUEST_ID_HEADER: "x" * 100})

        assert response.headers[REQUEST_ID_HEADER] != "x" * 100

    def test_access_log_is_tagged(self, client):
        """Test that the access log line carries the request id as an extra field."""
        with patch("app.logger") as mock_logger:
            client.get("/api/substitutes", params={"ingredient": "حليب"}, headers={REQUEST_ID_HEADER: "req-7"})

        mock_logger.info.assert_any_call("GET /api/substitutes -> 200", extra={"request_id": "req-7"})
