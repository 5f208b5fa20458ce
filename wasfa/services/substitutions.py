"""Static ingredient substitution table.

Keys are scanned in insertion order and the first key that contains the
query, or is contained in it, wins. Arabic entries come first.
"""

import re
from types import MappingProxyType
from typing import Any, Mapping

from wasfa.models.models import SubstitutionResult
from wasfa.utils.logger import logger


ARABIC_LETTERS = re.compile(r"[\u0600-\u06FF]")

NO_SUBSTITUTE_AR = {"name": "لم نتمكن من إيجاد بدائل محددة لهذا المكون", "ratio": "غير متوفر"}
NO_SUBSTITUTE_EN = {"name": "No specific substitutes found for this ingredient", "ratio": "unavailable"}


_SUBSTITUTIONS: dict[str, dict[str, Any]] = {
    "دقيق": {
        "originalIngredient": "دقيق أبيض",
        "substitutes": [
            {"name": "دقيق القمح الكامل", "ratio": "1:1", "notes": "سيجعل الطعام أكثر كثافة وسيعطي نكهة أقوى"},
            {"name": "دقيق اللوز", "ratio": "1:1", "notes": "خيار منخفض الكربوهيدرات، مناسب للأطعمة الخالية من الغلوتين"},
            {"name": "دقيق الذرة", "ratio": "3/4 كوب دقيق ذرة لكل كوب دقيق", "notes": "مناسب للخبز والتكثيف"},
        ],
    },
    "سكر": {
        "originalIngredient": "سكر أبيض",
        "substitutes": [
            {"name": "عسل", "ratio": "3/4 كوب عسل لكل كوب سكر", "notes": "قلل السوائل الأخرى بمقدار 1/4 كوب لكل كوب عسل"},
            {"name": "سكر جوز الهند", "ratio": "1:1"},
            {"name": "شراب القيقب", "ratio": "3/4 كوب شراب لكل كوب سكر", "notes": "قلل السوائل الأخرى قليلاً"},
        ],
    },
    "زبدة": {
        "originalIngredient": "زبدة",
        "substitutes": [
            {"name": "زيت جوز الهند", "ratio": "1:1", "notes": "جيد للخبز، يعمل بشكل أفضل عند درجة حرارة الغرفة"},
            {"name": "زيت الزيتون", "ratio": "3/4 كوب زيت لكل كوب زبدة", "notes": "أفضل للوصفات المالحة"},
            {"name": "صلصة التفاح", "ratio": "1/2 كوب صلصة تفاح لكل كوب زبدة", "notes": "لتقليل الدهون في المخبوزات"},
        ],
    },
    "بيض": {
        "originalIngredient": "بيض",
        "substitutes": [
            {
                "name": "بذور الكتان المطحونة + ماء",
                "ratio": "1 ملعقة كبيرة بذور كتان + 3 ملاعق ماء = بيضة واحدة",
                "notes": "اتركها لمدة 5 دقائق حتى تتكاثف",
            },
            {"name": "موز مهروس", "ratio": "1/4 كوب موز مهروس = بيضة واحدة", "notes": "مناسب للمخبوزات الحلوة"},
            {"name": "الزبادي", "ratio": "1/4 كوب زبادي = بيضة واحدة"},
        ],
    },
    "حليب": {
        "originalIngredient": "حليب",
        "substitutes": [
            {"name": "حليب اللوز", "ratio": "1:1"},
            {"name": "حليب جوز الهند", "ratio": "1:1", "notes": "يضيف نكهة جوز الهند"},
            {"name": "حليب الصويا", "ratio": "1:1", "notes": "بديل نباتي شائع"},
        ],
    },
    "زيت زيتون": {
        "originalIngredient": "زيت زيتون",
        "substitutes": [
            {"name": "زيت الكانولا", "ratio": "1:1", "notes": "نكهة أخف"},
            {"name": "زيت الأفوكادو", "ratio": "1:1", "notes": "خيار صحي مع نقطة دخان عالية"},
            {"name": "زيت جوز الهند", "ratio": "1:1", "notes": "يضيف نكهة جوز الهند"},
        ],
    },
    "خل": {
        "originalIngredient": "خل أبيض",
        "substitutes": [
            {"name": "عصير ليمون", "ratio": "1:1", "notes": "يعطي حموضة مشابهة مع نكهة حمضية"},
            {"name": "خل التفاح", "ratio": "1:1", "notes": "نكهة أقوى قليلاً"},
            {"name": "خل النبيذ الأبيض", "ratio": "1:1", "notes": "نكهة أكثر دقة"},
        ],
    },
    "ملح": {
        "originalIngredient": "ملح طعام",
        "substitutes": [
            {"name": "ملح البحر", "ratio": "1:1"},
            {"name": "صلصة الصويا منخفضة الصوديوم", "ratio": "استخدم بحذر حسب الذوق", "notes": "يضيف نكهة أومامي"},
            {"name": "أعشاب طازجة", "ratio": "استخدم حسب الذوق", "notes": "لإضافة نكهة بدون ملح"},
        ],
    },
    "بصل": {
        "originalIngredient": "بصل",
        "substitutes": [
            {"name": "كراث", "ratio": "1:1", "notes": "نكهة أخف"},
            {"name": "بصل أخضر", "ratio": "1:1", "notes": "نكهة أكثر تميزاً"},
            {"name": "مسحوق البصل", "ratio": "1 ملعقة صغيرة لكل 1/2 كوب بصل طازج"},
        ],
    },
    "ثوم": {
        "originalIngredient": "ثوم",
        "substitutes": [
            {"name": "مسحوق الثوم", "ratio": "1/8 ملعقة صغيرة لكل فص ثوم"},
            {"name": "الثوم المعمر", "ratio": "1 ملعقة كبيرة لكل فص ثوم", "notes": "نكهة أخف"},
            {"name": "الكراث", "ratio": "1/2 كوب كراث لكل فص ثوم", "notes": "نكهة مختلفة لكن مقبولة"},
        ],
    },
    "طماطم": {
        "originalIngredient": "طماطم طازجة",
        "substitutes": [
            {"name": "معجون طماطم + ماء", "ratio": "2-3 ملاعق كبيرة معجون + 1/4 كوب ماء = كوب طماطم"},
            {"name": "طماطم معلبة", "ratio": "1:1"},
            {"name": "صلصة طماطم", "ratio": "1/2 كوب صلصة لكل كوب طماطم", "notes": "قد تحتاج لتعديل التوابل"},
        ],
    },
    "ليمون": {
        "originalIngredient": "عصير ليمون",
        "substitutes": [
            {"name": "خل أبيض", "ratio": "1/2 الكمية من الخل لكل كمية من الليمون"},
            {"name": "عصير ليمون معبأ", "ratio": "1:1", "notes": "لكن النكهة قد تكون أقل حدة"},
            {"name": "خل التفاح", "ratio": "1/2 الكمية من الخل لكل كمية من الليمون"},
        ],
    },
    "flour": {
        "originalIngredient": "White flour",
        "substitutes": [
            {"name": "Whole wheat flour", "ratio": "1:1", "notes": "Denser texture and a stronger flavor"},
            {"name": "Almond flour", "ratio": "1:1", "notes": "Low-carb and gluten-free"},
            {"name": "Cornstarch", "ratio": "3/4 cup per 1 cup flour", "notes": "Good for thickening"},
        ],
    },
    "sugar": {
        "originalIngredient": "White sugar",
        "substitutes": [
            {"name": "Honey", "ratio": "3/4 cup per 1 cup sugar", "notes": "Reduce other liquids by 1/4 cup"},
            {"name": "Coconut sugar", "ratio": "1:1"},
            {"name": "Maple syrup", "ratio": "3/4 cup per 1 cup sugar", "notes": "Reduce other liquids slightly"},
        ],
    },
    "butter": {
        "originalIngredient": "Butter",
        "substitutes": [
            {"name": "Coconut oil", "ratio": "1:1", "notes": "Works best at room temperature"},
            {"name": "Olive oil", "ratio": "3/4 cup per 1 cup butter", "notes": "Best for savory dishes"},
            {"name": "Applesauce", "ratio": "1/2 cup per 1 cup butter", "notes": "Cuts fat in baked goods"},
        ],
    },
    "egg": {
        "originalIngredient": "Egg",
        "substitutes": [
            {"name": "Ground flaxseed + water", "ratio": "1 tbsp flax + 3 tbsp water = 1 egg", "notes": "Let it sit 5 minutes"},
            {"name": "Mashed banana", "ratio": "1/4 cup = 1 egg", "notes": "Best in sweet baking"},
            {"name": "Yogurt", "ratio": "1/4 cup = 1 egg"},
        ],
    },
    "milk": {
        "originalIngredient": "Milk",
        "substitutes": [
            {"name": "Almond milk", "ratio": "1:1"},
            {"name": "Coconut milk", "ratio": "1:1", "notes": "Adds coconut flavor"},
            {"name": "Soy milk", "ratio": "1:1", "notes": "Common plant-based option"},
        ],
    },
    "olive oil": {
        "originalIngredient": "Olive oil",
        "substitutes": [
            {"name": "Canola oil", "ratio": "1:1", "notes": "Milder flavor"},
            {"name": "Avocado oil", "ratio": "1:1", "notes": "High smoke point"},
            {"name": "Coconut oil", "ratio": "1:1", "notes": "Adds coconut flavor"},
        ],
    },
}

SUBSTITUTIONS: Mapping[str, Mapping[str, Any]] = MappingProxyType(_SUBSTITUTIONS)


def find_substitutes(ingredient: str) -> SubstitutionResult:
    """Look up substitutes for an ingredient.

    Args:
        ingredient: Ingredient name, Arabic or English.

    Returns:
        The first table entry whose key contains the query or is contained in
        it; otherwise a single placeholder substitute in the query's language.
    """
    normalized = ingredient.strip().lower()
    if normalized:
        for key, entry in SUBSTITUTIONS.items():
            if key in normalized or normalized in key:
                logger.debug(f"Substitution match for '{normalized}': {key}")
                return SubstitutionResult.model_validate(entry)

    placeholder = NO_SUBSTITUTE_AR if ARABIC_LETTERS.search(ingredient) else NO_SUBSTITUTE_EN
    logger.info(f"No substitutes found for '{normalized}'")
    return SubstitutionResult(original_ingredient=ingredient.strip(), substitutes=[placeholder])
