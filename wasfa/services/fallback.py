"""Static recipe table used when the AI model cannot answer.

The table is keyed by canonical ingredient signatures (trimmed, lowercased,
sorted, comma-joined; see cache_key). Arabic entries come first and win over
the English ones in every iteration-order based match step.

match_fallback() is pure and total: it never raises and never touches the
network. Each call returns a freshly validated RecipeResult, so callers may
mutate what they receive without affecting the table.

The two substring steps are separate passes over the whole table rather than
one loop checking both per entry: a full subset match anywhere in the table
beats a partial overlap with an earlier entry.
"""

from types import MappingProxyType
from typing import Any, List, Mapping

from wasfa.models.models import RecipeResult, cache_key
from wasfa.utils.logger import logger


_FALLBACK_RECIPES: dict[str, dict[str, Any]] = {
    "بصل,ثوم,طماطم": {
        "recipes": [
            {
                "title": "صلصة طماطم مع البصل والثوم",
                "description": "صلصة طماطم بسيطة وسريعة يمكن استخدامها مع المعكرونة أو الأرز",
                "ingredients": ["3 حبات طماطم", "1 بصلة متوسطة", "2 فص ثوم", "ملح وفلفل حسب الرغبة", "زيت زيتون"],
                "instructions": [
                    "قطع البصل والثوم إلى قطع صغيرة",
                    "سخن زيت الزيتون في مقلاة على نار متوسطة",
                    "أضف البصل والثوم وقلبهم حتى يصبح لونهم ذهبياً",
                    "قطع الطماطم وأضفها إلى المقلاة",
                    "أضف الملح والفلفل واتركها على نار هادئة لمدة 15 دقيقة",
                ],
            }
        ],
        "suggestedIngredients": ["فلفل أخضر", "زيتون", "معكرونة", "جبنة", "أعشاب (ريحان أو بقدونس)"],
    },
    "بيض": {
        "recipes": [
            {
                "title": "بيض مقلي",
                "description": "وجبة سريعة من البيض المقلي",
                "ingredients": ["2 بيضة", "ملح وفلفل حسب الرغبة", "زيت للقلي"],
                "instructions": [
                    "سخن الزيت في مقلاة على نار متوسطة",
                    "اكسر البيض في المقلاة",
                    "رش الملح والفلفل",
                    "اطهي البيض حتى ينضج حسب الرغبة",
                ],
            },
            {
                "title": "عجة البيض",
                "description": "عجة بيض شهية ولذيذة",
                "ingredients": ["3 بيضات", "1/4 كوب حليب", "ملح وفلفل حسب الرغبة", "زيت للقلي"],
                "instructions": [
                    "اخفق البيض مع الحليب والملح والفلفل في وعاء",
                    "سخن الزيت في مقلاة على نار متوسطة",
                    "صب خليط البيض في المقلاة",
                    "اطهي البيض مع التقليب حتى ينضج",
                ],
            },
        ],
        "suggestedIngredients": ["جبنة", "خبز", "طماطم", "بصل", "فلفل أخضر"],
    },
    "دجاج": {
        "recipes": [
            {
                "title": "دجاج مشوي بالأعشاب",
                "description": "دجاج مشوي طري ولذيذ بالأعشاب",
                "ingredients": [
                    "4 قطع دجاج",
                    "2 ملعقة زيت زيتون",
                    "ملح وفلفل",
                    "1 ملعقة ثوم مفروم",
                    "أعشاب (زعتر، إكليل الجبل)",
                ],
                "instructions": [
                    "اخلط الزيت مع الثوم والأعشاب والملح والفلفل",
                    "تبل قطع الدجاج بالخليط وضعها في صينية",
                    "اتركها في الثلاجة لمدة ساعة على الأقل",
                    "اشوي الدجاج في الفرن على حرارة 180 درجة لمدة 40-45 دقيقة",
                ],
            },
            {
                "title": "كاري الدجاج",
                "description": "طبق هندي لذيذ ومتبل من الدجاج",
                "ingredients": [
                    "500 جرام دجاج مقطع",
                    "بصلة مفرومة",
                    "2 فص ثوم",
                    "2 ملعقة معجون طماطم",
                    "ملعقة بهارات كاري",
                    "ملح",
                    "زيت",
                ],
                "instructions": [
                    "سخن الزيت وأضف البصل والثوم وقلبهم حتى يذبلوا",
                    "أضف بهارات الكاري وقلب لمدة دقيقة",
                    "أضف الدجاج وقلبه حتى يتغير لونه",
                    "أضف معجون الطماطم والملح وكوب من الماء",
                    "غطِ المقلاة واطهي على نار هادئة لمدة 20-25 دقيقة",
                ],
            },
        ],
        "suggestedIngredients": ["أرز", "بطاطس", "بصل", "ثوم", "ليمون"],
    },
    "أرز": {
        "recipes": [
            {
                "title": "أرز بالخضار",
                "description": "طبق أرز بسيط مع الخضروات المشكلة",
                "ingredients": [
                    "2 كوب أرز",
                    "1 جزر مقطع",
                    "1 فلفل أخضر مقطع",
                    "1 بصلة مفرومة",
                    "2 ملعقة زيت",
                    "ملح وبهارات",
                ],
                "instructions": [
                    "اغسل الأرز ودعه ينقع لمدة 15 دقيقة ثم صفّه",
                    "سخن الزيت وأضف البصل وقلبه حتى يذبل",
                    "أضف الجزر والفلفل وقلبهم لمدة 3-4 دقائق",
                    "أضف الأرز وقلبه مع الخضار",
                    "أضف 4 أكواب ماء والملح والبهارات",
                    "اطهي على نار هادئة لمدة 20 دقيقة حتى ينضج الأرز",
                ],
            }
        ],
        "suggestedIngredients": ["دجاج", "لحم", "بازلاء", "ذرة", "زعفران"],
    },
    "بطاطس": {
        "recipes": [
            {
                "title": "بطاطس مقلية",
                "description": "بطاطس مقلية مقرمشة ولذيذة",
                "ingredients": ["4 حبات بطاطس كبيرة", "زيت للقلي", "ملح"],
                "instructions": [
                    "قشر البطاطس وقطعها إلى شرائح طويلة",
                    "اغسل البطاطس بالماء البارد وجففها جيداً",
                    "سخن الزيت في مقلاة عميقة",
                    "اقلي البطاطس حتى تصبح ذهبية ومقرمشة",
                    "صفّها من الزيت ورش الملح عليها",
                ],
            },
            {
                "title": "بطاطس مهروسة",
                "description": "بطاطس مهروسة كريمية وطرية",
                "ingredients": ["5 حبات بطاطس متوسطة", "نصف كوب حليب", "2 ملعقة زبدة", "ملح وفلفل"],
                "instructions": [
                    "قشر البطاطس وقطعها إلى مكعبات",
                    "اسلق البطاطس في ماء مملح حتى تنضج",
                    "صفّي البطاطس واهرسها",
                    "سخن الحليب والزبدة واضفهما تدريجياً إلى البطاطس المهروسة",
                    "أضف الملح والفلفل حسب الرغبة واخلط جيداً",
                ],
            },
        ],
        "suggestedIngredients": ["جبنة", "ثوم", "كريمة", "بقدونس", "زبدة"],
    },
    "بصل,طماطم": {
        "recipes": [
            {
                "title": "صلصة البصل والطماطم",
                "description": "صلصة بسيطة مثالية للسندويشات أو المعكرونة",
                "ingredients": ["3 حبات طماطم", "1 بصلة كبيرة", "2 ملعقة زيت زيتون", "ملح وفلفل أسود", "أعشاب حسب الرغبة"],
                "instructions": [
                    "قطع البصل إلى شرائح رفيعة والطماطم إلى مكعبات",
                    "سخن الزيت في مقلاة على نار متوسطة",
                    "أضف البصل وقلبه حتى يصبح شفافاً",
                    "أضف الطماطم والملح والفلفل والأعشاب",
                    "اطهي على نار هادئة لمدة 10-15 دقيقة",
                ],
            }
        ],
        "suggestedIngredients": ["ثوم", "فلفل أخضر", "زيتون", "معكرونة", "دجاج"],
    },
    "بيض,جبنة": {
        "recipes": [
            {
                "title": "أومليت بالجبنة",
                "description": "أومليت شهي محشو بالجبنة",
                "ingredients": ["3 بيضات", "50 جرام جبنة مبشورة", "ملح وفلفل", "زيت أو زبدة للقلي"],
                "instructions": [
                    "اخفق البيض في وعاء مع الملح والفلفل",
                    "سخن الزيت في مقلاة على نار متوسطة",
                    "صب خليط البيض في المقلاة واتركه لمدة دقيقة",
                    "رش الجبنة على نصف الأومليت",
                    "اطوِ النصف الآخر عليه واطهي لمدة دقيقة إضافية",
                ],
            }
        ],
        "suggestedIngredients": ["طماطم", "فطر", "بصل", "خبز", "فلفل أخضر"],
    },
    "أرز,دجاج": {
        "recipes": [
            {
                "title": "كبسة دجاج",
                "description": "طبق شهير من المطبخ العربي من الأرز والدجاج",
                "ingredients": ["دجاجة مقطعة", "2 كوب أرز", "2 بصل", "2 طماطم", "بهارات كبسة", "ملح", "زيت"],
                "instructions": [
                    "انقع الأرز في ماء لمدة 30 دقيقة",
                    "في قدر كبير، سخن الزيت وقلي قطع الدجاج حتى تصبح ذهبية من كل الجوانب",
                    "أضف البصل المفروم وقلبه حتى يذبل",
                    "أضف الطماطم المفرومة والبهارات والملح",
                    "أضف 4 أكواب ماء ساخن واطهي الدجاج لمدة 20 دقيقة",
                    "أخرج الدجاج وأضف الأرز المصفى إلى المرق",
                    "غطِ القدر واطهي على نار هادئة لمدة 20 دقيقة",
                    "ضع الدجاج فوق الأرز وقدمه ساخناً",
                ],
            }
        ],
        "suggestedIngredients": ["لوز", "زبيب", "بصل", "هيل", "قرفة"],
    },
    "garlic,onion,tomato": {
        "recipes": [
            {
                "title": "Tomato Sauce with Onion and Garlic",
                "description": "A quick, simple tomato sauce for pasta or rice",
                "ingredients": ["3 tomatoes", "1 medium onion", "2 garlic cloves", "Salt and pepper to taste", "Olive oil"],
                "instructions": [
                    "Finely chop the onion and garlic",
                    "Heat the olive oil in a pan over medium heat",
                    "Add the onion and garlic and stir until golden",
                    "Chop the tomatoes and add them to the pan",
                    "Season with salt and pepper and simmer for 15 minutes",
                ],
            }
        ],
        "suggestedIngredients": ["Green pepper", "Olives", "Pasta", "Cheese", "Basil or parsley"],
    },
    "egg": {
        "recipes": [
            {
                "title": "Fried Eggs",
                "description": "A fast meal of pan-fried eggs",
                "ingredients": ["2 eggs", "Salt and pepper to taste", "Oil for frying"],
                "instructions": [
                    "Heat the oil in a pan over medium heat",
                    "Crack the eggs into the pan",
                    "Sprinkle with salt and pepper",
                    "Cook until the eggs are done to your liking",
                ],
            },
            {
                "title": "Omelette",
                "description": "A soft, tasty egg omelette",
                "ingredients": ["3 eggs", "1/4 cup milk", "Salt and pepper to taste", "Oil for frying"],
                "instructions": [
                    "Whisk the eggs with the milk, salt and pepper",
                    "Heat the oil in a pan over medium heat",
                    "Pour the egg mixture into the pan",
                    "Cook, stirring gently, until set",
                ],
            },
        ],
        "suggestedIngredients": ["Cheese", "Bread", "Tomato", "Onion", "Green pepper"],
    },
    "chicken": {
        "recipes": [
            {
                "title": "Herb Roasted Chicken",
                "description": "Tender roasted chicken with herbs",
                "ingredients": [
                    "4 chicken pieces",
                    "2 tbsp olive oil",
                    "Salt and pepper",
                    "1 tbsp minced garlic",
                    "Herbs (thyme, rosemary)",
                ],
                "instructions": [
                    "Mix the oil with the garlic, herbs, salt and pepper",
                    "Coat the chicken with the mixture and place it in a tray",
                    "Refrigerate for at least one hour",
                    "Roast at 180°C for 40-45 minutes",
                ],
            }
        ],
        "suggestedIngredients": ["Rice", "Potato", "Onion", "Garlic", "Lemon"],
    },
    "potato": {
        "recipes": [
            {
                "title": "French Fries",
                "description": "Crispy fried potatoes",
                "ingredients": ["4 large potatoes", "Oil for frying", "Salt"],
                "instructions": [
                    "Peel the potatoes and cut them into long strips",
                    "Rinse in cold water and dry well",
                    "Heat the oil in a deep pan",
                    "Fry until golden and crisp",
                    "Drain and sprinkle with salt",
                ],
            }
        ],
        "suggestedIngredients": ["Cheese", "Garlic", "Cream", "Parsley", "Butter"],
    },
}

# Read-only view; keys are canonical signatures, iteration order is match priority
FALLBACK_RECIPES: Mapping[str, Mapping[str, Any]] = MappingProxyType(_FALLBACK_RECIPES)


def _overlaps(component: str, ingredient: str) -> bool:
    return component in ingredient or ingredient in component


def _find_entry_key(normalized: List[str]) -> str | None:
    """Return the table key chosen for the normalized ingredients, or None.

    Match steps, first hit wins:
    1. Exact canonical key.
    2. A single ingredient equal to a table key.
    3. Any input ingredient equal to a full table key (input order).
    4. Every component of a table key overlaps some input ingredient (table order).
    5. Any component of a table key overlaps any input ingredient (table order).
    """
    key = cache_key(normalized)
    if key in FALLBACK_RECIPES:
        logger.debug(f"Fallback exact match: {key}")
        return key

    if len(normalized) == 1 and normalized[0] in FALLBACK_RECIPES:
        logger.debug(f"Fallback single ingredient match: {normalized[0]}")
        return normalized[0]

    for ingredient in normalized:
        if ingredient in FALLBACK_RECIPES:
            logger.debug(f"Fallback per-ingredient match: {ingredient}")
            return ingredient

    # An empty ingredient overlaps everything; skip it in substring matching
    candidates = [ingredient for ingredient in normalized if ingredient]
    if not candidates:
        return None

    for table_key in FALLBACK_RECIPES:
        components = table_key.split(",")
        if all(any(_overlaps(c, i) for i in candidates) for c in components):
            logger.debug(f"Fallback full-subset match: {table_key}")
            return table_key

    for table_key in FALLBACK_RECIPES:
        components = table_key.split(",")
        if any(_overlaps(c, i) for c in components for i in candidates):
            logger.debug(f"Fallback partial match: {table_key}")
            return table_key

    return None


def match_fallback(ingredients: List[str]) -> RecipeResult:
    """Find the best static recipe bundle for an ingredient list.

    Args:
        ingredients: Free-text ingredient names in any order and case.

    Returns:
        A fresh RecipeResult: the matched table entry, or no recipes with the
        default suggested ingredients when nothing matches.
    """
    normalized = [ingredient.strip().lower() for ingredient in ingredients]
    entry_key = _find_entry_key(normalized)
    if entry_key is None:
        logger.info(f"No fallback recipes for {len(normalized)} ingredient(s), returning suggestions")
        return RecipeResult.empty()

    return RecipeResult.model_validate(FALLBACK_RECIPES[entry_key])
