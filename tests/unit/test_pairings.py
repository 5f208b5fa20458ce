"""Unit tests for ingredient pairing suggestions."""

import json

import pytest

from wasfa.services.pairings import PAIRING_MAX_OUTPUT_TOKENS, PairingAdvisor, static_pairings


MODEL_REPLY = {
    "ingredient": "ignored",
    "pairings": [
        {"name": "Basil", "affinity": 10, "description": "Classic match", "useCases": ["Caprese salad"]},
        {"name": "Mozzarella", "affinity": 9, "description": "Pizza staple"},
    ],
    "cuisineAffinities": [{"cuisine": "Italian", "affinity": 10}],
}


class TestStaticPairings:
    """Test the static pairing table."""

    def test_known_ingredient(self):
        """Test that a seeded ingredient returns its own pairings."""
        result = static_pairings("طماطم")

        assert result.ingredient == "طماطم"
        assert result.pairings[0].name == "ريحان"
        assert result.pairings[0].affinity == 10
        assert [c.cuisine for c in result.cuisine_affinities] == ["إيطالي", "متوسطي", "مكسيكي"]

    def test_unknown_ingredient_gets_generic_list(self):
        """Test that any other ingredient gets the generic pairings under its own name."""
        result = static_pairings("  جزر ")

        assert result.ingredient == "جزر"
        assert [p.name for p in result.pairings] == ["بصل", "ثوم", "ملح", "فلفل أسود", "زيت زيتون"]
        assert [c.cuisine for c in result.cuisine_affinities] == ["متوسطي", "عالمي"]


class TestPairingAdvisor:
    """Test model-first suggestions with static fallback."""

    @pytest.mark.asyncio
    async def test_model_reply(self, make_gemini):
        """Test that a valid model reply is used and named after the query."""
        client = make_gemini(text=json.dumps(MODEL_REPLY))

        result = await PairingAdvisor(client).suggest("tomato")

        assert result.ingredient == "tomato"
        assert [p.name for p in result.pairings] == ["Basil", "Mozzarella"]
        assert result.pairings[0].use_cases == ["Caprese salad"]
        kwargs = client._client.models.generate_content.call_args.kwargs
        assert kwargs["config"].max_output_tokens == PAIRING_MAX_OUTPUT_TOKENS
        assert '"tomato"' in kwargs["contents"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"side_effect": ValueError("API key not valid")},
            {"text": "no json"},
            {"text": '{"pairings": []}'},
            {"text": '{"pairings": [{"name": "Basil", "affinity": 42}]}'},
        ],
    )
    async def test_model_failure_falls_back(self, make_gemini, kwargs):
        """Test that unusable replies end in the static table."""
        result = await PairingAdvisor(make_gemini(**kwargs)).suggest("ثوم")

        assert result.ingredient == "ثوم"
        assert result.pairings[0].name == "زيت زيتون"

    @pytest.mark.asyncio
    async def test_no_key_uses_static_table(self, make_gemini):
        """Test that no model call is made without a key."""
        client = make_gemini(text=json.dumps(MODEL_REPLY), api_key="")

        result = await PairingAdvisor(client).suggest("زعتر")

        assert result.pairings[0].name == "ليمون"
        client._client.models.generate_content.assert_not_called()
