"""Ingredient pairing suggestions.

Gemini is asked first when a key is configured. Without a key, or when the
reply cannot be used, the static pairing table answers for common
ingredients and a generic list covers everything else.
"""

from types import MappingProxyType
from typing import Any, Mapping

from wasfa.models.models import PairingResult
from wasfa.prompts.prompts import get_pairing_prompt
from wasfa.services.gemini import GeminiClient
from wasfa.utils.logger import logger
from wasfa.utils.safe import safe_execute_async


PAIRING_MAX_OUTPUT_TOKENS = 1024


_PAIRINGS: dict[str, dict[str, Any]] = {
    "طماطم": {
        "pairings": [
            {"name": "ريحان", "affinity": 10, "description": "تزاوج كلاسيكي في المطبخ الإيطالي."},
            {"name": "ثوم", "affinity": 9, "description": "يضيف عمقًا للنكهة مع الطماطم."},
            {"name": "بصل", "affinity": 8, "description": "قاعدة أساسية للعديد من أطباق الطماطم."},
            {"name": "زيتون", "affinity": 8, "description": "يضيف نكهة مالحة تكمل حموضة الطماطم."},
            {"name": "جبن موزاريلا", "affinity": 9, "description": "التزاوج المثالي للبيتزا والسلطات."},
        ],
        "cuisineAffinities": [
            {"cuisine": "إيطالي", "affinity": 10},
            {"cuisine": "متوسطي", "affinity": 9},
            {"cuisine": "مكسيكي", "affinity": 8},
        ],
    },
    "بصل": {
        "pairings": [
            {"name": "ثوم", "affinity": 9, "description": "أساس نكهة قوي للعديد من الأطباق."},
            {"name": "زعتر", "affinity": 7, "description": "يضفي نكهة عطرية."},
            {"name": "فلفل", "affinity": 8, "description": "يضيف حرارة تكمل حلاوة البصل المطبوخ."},
            {"name": "جزر", "affinity": 7, "description": "قاعدة تقليدية للمرق والشوربات."},
            {"name": "زيت زيتون", "affinity": 8, "description": "وسط مثالي لطهي البصل وإبراز نكهته."},
        ],
        "cuisineAffinities": [
            {"cuisine": "فرنسي", "affinity": 8},
            {"cuisine": "هندي", "affinity": 9},
            {"cuisine": "متوسطي", "affinity": 8},
        ],
    },
    "ثوم": {
        "pairings": [
            {"name": "زيت زيتون", "affinity": 10, "description": "مزيج كلاسيكي يبرز نكهة الثوم."},
            {"name": "ليمون", "affinity": 8, "description": "يوازن حدة الثوم مع الحموضة."},
            {"name": "بقدونس", "affinity": 8, "description": "مزيج تقليدي في تتبيلة الجريمولاتا."},
            {"name": "زبدة", "affinity": 9, "description": "أساس للعديد من الصلصات الكريمية."},
            {"name": "فلفل أحمر", "affinity": 7, "description": "يضيف حرارة متوازنة مع نكهة الثوم."},
        ],
        "cuisineAffinities": [
            {"cuisine": "إيطالي", "affinity": 9},
            {"cuisine": "آسيوي", "affinity": 8},
            {"cuisine": "متوسطي", "affinity": 10},
        ],
    },
    "زعتر": {
        "pairings": [
            {"name": "ليمون", "affinity": 9, "description": "يبرز النكهة العطرية للزعتر."},
            {"name": "زيت زيتون", "affinity": 10, "description": "وسط مثالي لإطلاق نكهة الزعتر."},
            {"name": "ثوم", "affinity": 8, "description": "مزيج عطري قوي."},
            {"name": "جبن فيتا", "affinity": 7, "description": "تزاوج كلاسيكي في المطبخ اليوناني."},
            {"name": "طماطم", "affinity": 7, "description": "مزيج منعش للسلطات والمقبلات."},
        ],
        "cuisineAffinities": [
            {"cuisine": "يوناني", "affinity": 9},
            {"cuisine": "لبناني", "affinity": 10},
            {"cuisine": "متوسطي", "affinity": 9},
        ],
    },
}

PAIRINGS: Mapping[str, Mapping[str, Any]] = MappingProxyType(_PAIRINGS)

GENERIC_PAIRING: Mapping[str, Any] = MappingProxyType(
    {
        "pairings": [
            {"name": "بصل", "affinity": 7, "description": "مكون أساسي يتناسب مع معظم المكونات."},
            {"name": "ثوم", "affinity": 7, "description": "يضيف عمقًا للنكهة مع معظم المكونات."},
            {"name": "ملح", "affinity": 8, "description": "يعزز نكهة المكونات الأخرى."},
            {"name": "فلفل أسود", "affinity": 7, "description": "يضيف حرارة خفيفة ونكهة متوازنة."},
            {"name": "زيت زيتون", "affinity": 8, "description": "وسط طهي مثالي للعديد من المكونات."},
        ],
        "cuisineAffinities": [
            {"cuisine": "متوسطي", "affinity": 7},
            {"cuisine": "عالمي", "affinity": 8},
        ],
    }
)


def static_pairings(ingredient: str) -> PairingResult:
    """Pairings from the static table, or the generic list when the ingredient is unknown."""
    name = ingredient.strip()
    entry = PAIRINGS.get(name.lower(), GENERIC_PAIRING)
    return PairingResult.model_validate({"ingredient": name, **entry})


class PairingAdvisor:
    """Suggests ingredients that pair well with a given one."""

    def __init__(self, client: GeminiClient) -> None:
        self.client = client

    async def _suggest_with_model(self, ingredient: str) -> PairingResult:
        payload = await self.client.generate_json(get_pairing_prompt(ingredient), PAIRING_MAX_OUTPUT_TOKENS)
        result = PairingResult.model_validate({**payload, "ingredient": ingredient})
        if not result.pairings:
            raise ValueError("Gemini returned no pairings")
        return result

    async def suggest(self, ingredient: str) -> PairingResult:
        """Suggest pairings for an ingredient. Never raises."""
        name = ingredient.strip()
        if self.client.available and name:
            result = await safe_execute_async(
                self._suggest_with_model(name),
                "Gemini pairing suggestions",
                log_level="warning",
                default_return=None,
            )
            if result is not None:
                return result
            logger.info(f"Falling back to static pairings for '{name}'")

        return static_pairings(name)
