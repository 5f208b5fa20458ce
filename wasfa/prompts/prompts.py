"""Prompts sent to Gemini.

Both prompts demand a bare JSON object. Replies are still parsed leniently
(see extract_first_json_object) because models sometimes wrap the JSON in
prose or code fences.
"""


def _get_language_section() -> str:
    """Shared instruction: answer in the language the ingredients are written in."""
    return """
## Language
- Detect the language of the ingredient names.
- If they are written in Arabic, write every title, description, ingredient, instruction
  and suggestion in Arabic. Otherwise answer in English.
- Do not mix languages inside one answer.
"""


def get_recipe_prompt(ingredients: list[str], max_recipes: int = 3) -> str:
    """Build the recipe generation prompt.

    Args:
        ingredients: Ingredient names as the user typed them.
        max_recipes: Upper bound on recipes the model should return.

    Returns:
        str: Prompt embedding the comma-joined ingredient list.
    """
    joined_ingredients = ", ".join(ingredients)
    return f"""You are a professional home cook. Suggest quick, easy recipes that use only the ingredients below
(plus pantry basics such as salt, pepper, oil and water).

Available ingredients: {joined_ingredients}

Create up to {max_recipes} different recipes, fewer if the ingredients do not allow more.
Describe each recipe briefly and list its steps in order.
Also suggest 5 additional ingredients that would unlock more varied recipes.
{_get_language_section()}
## Output format (CRITICAL)
Return ONLY a JSON object with exactly this shape, no markdown, no commentary:
{{
  "recipes": [
    {{
      "title": "Recipe title",
      "description": "Short description",
      "ingredients": ["ingredient 1 with quantity", "ingredient 2 with quantity"],
      "instructions": ["step 1", "step 2"]
    }}
  ],
  "suggestedIngredients": ["suggestion 1", "suggestion 2"]
}}

If the ingredients are not enough for any recipe, return an empty "recipes" array and fill
"suggestedIngredients" only.
"""


def get_pairing_prompt(ingredient: str) -> str:
    """Build the ingredient pairing prompt.

    Args:
        ingredient: Ingredient to find pairings for.

    Returns:
        str: Prompt asking for 5-7 pairings and the cuisines that use the ingredient.
    """
    return f"""You are an expert in food ingredients and flavor pairing.
Suggest the ingredients that pair best with "{ingredient}".
Give 5-7 ingredients, each with an affinity score from 1 to 10, a short description of why they
work together and a few use cases. Also list the cuisines where "{ingredient}" is used most,
each with an affinity score from 1 to 10.
{_get_language_section()}
## Output format (CRITICAL)
Return ONLY a JSON object with exactly this shape, no markdown, no commentary:
{{
  "ingredient": "{ingredient}",
  "pairings": [
    {{
      "name": "paired ingredient",
      "affinity": 9,
      "description": "why it works",
      "useCases": ["use case 1", "use case 2"]
    }}
  ],
  "cuisineAffinities": [
    {{"cuisine": "cuisine name", "affinity": 8}}
  ]
}}
"""
