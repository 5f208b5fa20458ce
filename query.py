#!/usr/bin/env python3
"""Ad hoc query runner for the Wasfa recipe pipeline.

Run queries directly without starting the API server.

Usage:
    python query.py "طماطم، بصل، ثوم"
    python query.py "chicken, rice"
    python query.py --debug "egg, cheese"        # Show full JSON response
    python query.py --no-cache "egg, cheese"     # Skip the recipe cache
    python query.py --substitute "زيت"           # Substitutes for one ingredient
    python query.py --pairings "tomato"          # Pairing suggestions for one ingredient
    python query.py --search "كبسة"              # Recipes for a dish name

Ingredients are comma-separated; the Arabic comma (،) is accepted too.
"""

import asyncio
import re
import sys

from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from wasfa.models.models import PairingResult, RecipeResult, SubstitutionResult
from wasfa.pipeline.recipes import RecipePipeline, initialize_recipe_pipeline
from wasfa.utils.logger import logger

console = Console()

INGREDIENT_SEPARATORS = re.compile(r"[,،]")


def split_ingredients(text: str) -> list[str]:
    """Split a comma-separated ingredient string, dropping empty items."""
    return [part.strip() for part in INGREDIENT_SEPARATORS.split(text) if part.strip()]


def render_recipes(result: RecipeResult) -> None:
    if not result.recipes:
        console.print("[yellow]No recipes found for these ingredients.[/yellow]")

    for recipe in result.recipes:
        lines = []
        if recipe.description:
            lines.append(f"[italic]{recipe.description}[/italic]\n")
        lines.append("[bold]Ingredients[/bold]")
        lines.extend(f"  • {item}" for item in recipe.ingredients)
        lines.append("\n[bold]Instructions[/bold]")
        lines.extend(f"  {number}. {step}" for number, step in enumerate(recipe.instructions, start=1))
        if recipe.video_id:
            lines.append(f"\n🎬 https://www.youtube.com/watch?v={recipe.video_id}")
        console.print(Panel("\n".join(lines), title=f"[bold green]{recipe.title}[/bold green]", expand=False))

    if result.suggested_ingredients:
        console.print(f"[bold cyan]Suggested ingredients:[/bold cyan] {', '.join(result.suggested_ingredients)}")


def render_substitutes(result: SubstitutionResult) -> None:
    table = Table(title=f"Substitutes for {result.original_ingredient}")
    table.add_column("Substitute", style="green")
    table.add_column("Ratio")
    table.add_column("Notes", style="dim")
    for substitute in result.substitutes:
        table.add_row(substitute.name, substitute.ratio, substitute.notes or "")
    console.print(table)


def render_pairings(result: PairingResult) -> None:
    table = Table(title=f"Pairings for {result.ingredient}")
    table.add_column("Ingredient", style="green")
    table.add_column("Affinity", justify="right")
    table.add_column("Why")
    for pairing in result.pairings:
        table.add_row(pairing.name, str(pairing.affinity), pairing.description)
    console.print(table)

    if result.cuisine_affinities:
        cuisines = ", ".join(f"{c.cuisine} ({c.affinity})" for c in result.cuisine_affinities)
        console.print(f"[bold cyan]Cuisines:[/bold cyan] {cuisines}")


async def _execute(pipeline: RecipePipeline, query: str, mode: str):
    if mode == "substitute":
        return await pipeline.find_substitutes(query)
    if mode == "pairings":
        return await pipeline.suggest_pairings(query)
    if mode == "search":
        return await pipeline.search_recipes(query)
    return await pipeline.find_recipes(split_ingredients(query))


def run_query(query: str, mode: str = "recipes", debug: bool = False, use_cache: bool = True) -> None:
    """Execute a single ad hoc query and print the result.

    Args:
        query: Comma-separated ingredients, or one ingredient for substitute/pairings mode.
        mode: "recipes", "search", "substitute" or "pairings".
        debug: If True, display the full JSON result.
        use_cache: If False, run without the recipe cache.
    """
    pipeline = initialize_recipe_pipeline(use_cache=use_cache)
    try:
        logger.info(f"Running {mode} query: {query}")
        logger.info("---")
        result = asyncio.run(_execute(pipeline, query, mode))
        logger.info("---")
        console.print()

        if debug:
            console.print("[bold cyan]Debug Mode: Full Response[/bold cyan]")
            console.print("[dim]" + "=" * 60 + "[/dim]")
            console.print_json(data=result.to_wire())
            console.print("[dim]" + "=" * 60 + "[/dim]")
            console.print()

        if mode == "substitute":
            render_substitutes(result)
        elif mode == "pairings":
            render_pairings(result)
        else:
            render_recipes(result)

    except ValidationError as e:
        console.print(f"[red]✗ Invalid input: {e.error_count()} validation error(s)[/red]")
        for err in e.errors():
            console.print(f"[red]  - {err['msg']}[/red]")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("\nQuery interrupted by user.")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Query execution failed: {e}", exc_info=True)
        sys.exit(1)
    finally:
        pipeline.close()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print('Usage: python query.py [--debug] [--no-cache] [--search | --substitute | --pairings] "<ingredients>"')
        print("")
        print("Examples:")
        print('  python query.py "طماطم، بصل، ثوم"')
        print('  python query.py --debug "chicken, rice"')
        print('  python query.py --no-cache "egg, cheese"')
        print('  python query.py --substitute "زيت"')
        print('  python query.py --pairings "tomato"')
        print('  python query.py --search "كبسة"')
        sys.exit(1)

    debug_mode = False
    use_cache = True
    mode = "recipes"
    argv_start = 1

    while argv_start < len(sys.argv) and sys.argv[argv_start].startswith("--"):
        flag = sys.argv[argv_start]
        if flag == "--debug":
            debug_mode = True
        elif flag == "--no-cache":
            use_cache = False
        elif flag == "--substitute":
            mode = "substitute"
        elif flag == "--pairings":
            mode = "pairings"
        elif flag == "--search":
            mode = "search"
        else:
            print(f"Error: Unknown flag {flag}")
            sys.exit(1)
        argv_start += 1

    if argv_start >= len(sys.argv):
        print("Error: No query provided")
        sys.exit(1)

    query = " ".join(sys.argv[argv_start:])
    run_query(query, mode=mode, debug=debug_mode, use_cache=use_cache)
