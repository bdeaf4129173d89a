"""
Recipeshare - Recipe repository.

Reads and writes against published_recipes, ingredients and categories.
Multi-row writes go through stored procedures so that either every row
changes or none does.
"""

import logging

from supabase import PostgrestAPIError

from recipeshare.db.adapter import BackendClient
from recipeshare.errors import (
    BackendError,
    RecipeCreateError,
    RecipeDeleteError,
    RecipeNotFoundError,
)
from recipeshare.models import Category, Recipe, RecipeDraft

logger = logging.getLogger(__name__)

RECIPES_TABLE = "published_recipes"
INGREDIENTS_TABLE = "ingredients"
CATEGORIES_TABLE = "categories"

# Recipe row with its category and ingredients blob embedded
RECIPE_SELECT = "*, categories(*), ingredients(*)"

CREATE_RECIPE_FN = "create_recipe_with_ingredients"
DELETE_RECIPE_FN = "delete_recipe_cascade"


def _rows(query, what: str) -> list[dict]:
    """Execute a query and return its rows, wrapping backend failures."""
    try:
        response = query.execute()
    except PostgrestAPIError as e:
        logger.error(f"Failed to {what}: {e.message}")
        raise BackendError(e.message) from e
    return response.data or []


# =============================================================================
# Categories
# =============================================================================


def fetch_categories(client: BackendClient) -> list[Category]:
    """Get all categories in display order."""
    rows = _rows(client.table(CATEGORIES_TABLE).select("*").order("id"), "fetch categories")
    return [Category(**row) for row in rows]


def seed_categories(client: BackendClient, names: list[str]) -> int:
    """
    Insert the given category names that do not exist yet.

    Returns the number of categories inserted.
    """
    existing = {c.category_name for c in fetch_categories(client)}
    missing = [name for name in dict.fromkeys(names) if name and name not in existing]
    if not missing:
        return 0

    _rows(
        client.table(CATEGORIES_TABLE).insert([{"category_name": name} for name in missing]),
        "seed categories",
    )
    logger.info(f"Seeded {len(missing)} categories")
    return len(missing)


# =============================================================================
# Recipe reads
# =============================================================================


def list_recipes(
    client: BackendClient,
    category_id: int | None = None,
    search: str | None = None,
    limit: int = 100,
) -> list[Recipe]:
    """Get published recipes, newest first, optionally filtered."""
    query = client.table(RECIPES_TABLE).select(RECIPE_SELECT)

    if category_id:
        query = query.eq("category_id", category_id)

    if search:
        query = query.ilike("title", f"%{search}%")

    rows = _rows(query.order("created_at", desc=True).limit(limit), "list recipes")
    return [Recipe.from_row(row) for row in rows]


def get_recipe(client: BackendClient, recipe_id: int) -> Recipe:
    """
    Get a single recipe with category and ingredients.

    Raises RecipeNotFoundError if no such recipe is visible.
    """
    try:
        response = (
            client.table(RECIPES_TABLE)
            .select(RECIPE_SELECT)
            .eq("id", recipe_id)
            .maybe_single()
            .execute()
        )
    except PostgrestAPIError as e:
        logger.error(f"Failed to fetch recipe {recipe_id}: {e.message}")
        raise BackendError(e.message) from e

    # maybe_single() yields no response at all for zero rows on some client versions
    if response is None or not response.data:
        raise RecipeNotFoundError(recipe_id)

    return Recipe.from_row(response.data)


def get_user_recipes(client: BackendClient, user_id: str) -> list[Recipe]:
    """Get all recipes created by a user, newest first."""
    rows = _rows(
        client.table(RECIPES_TABLE)
        .select(RECIPE_SELECT)
        .eq("user_id", user_id)
        .order("created_at", desc=True),
        f"list recipes of {user_id}",
    )
    return [Recipe.from_row(row) for row in rows]


def get_recipes_by_ids(client: BackendClient, recipe_ids: list[int]) -> list[Recipe]:
    """Get recipes by id, preserving the order of `recipe_ids`."""
    if not recipe_ids:
        return []

    rows = _rows(
        client.table(RECIPES_TABLE).select(RECIPE_SELECT).in_("id", recipe_ids),
        "fetch recipes by id",
    )
    by_id = {row["id"]: Recipe.from_row(row) for row in rows}
    return [by_id[rid] for rid in recipe_ids if rid in by_id]


# =============================================================================
# Recipe writes
# =============================================================================


def add_recipe(client: BackendClient, draft: RecipeDraft) -> Recipe:
    """
    Create a recipe and its ingredients record.

    The procedure inserts the ingredients row first, then the recipe row
    referencing it, in one transaction.
    """
    try:
        response = client.rpc(CREATE_RECIPE_FN, draft.to_params()).execute()
    except PostgrestAPIError as e:
        logger.error(f"Failed to create recipe '{draft.title}': {e.message}")
        raise RecipeCreateError(e.message) from e

    row = response.data
    if isinstance(row, list):
        row = row[0] if row else None
    if not row:
        raise RecipeCreateError("Recipe was not created")

    recipe = Recipe.from_row(row)
    recipe.ingredients = list(draft.ingredients)
    logger.info(f"Recipe {recipe.id} created by {draft.user_id}")
    return recipe


def delete_recipe(client: BackendClient, recipe_id: int, user_id: str) -> None:
    """
    Delete a recipe owned by `user_id`, with its likes and ingredients.

    Order inside the procedure: likes, recipe, ingredients. A failure at
    any step rolls back all of them and raises RecipeDeleteError.
    Raises RecipeNotFoundError if the recipe does not exist or belongs to
    someone else.
    """
    try:
        response = client.rpc(
            DELETE_RECIPE_FN,
            {"p_recipe_id": recipe_id, "p_user_id": user_id},
        ).execute()
    except PostgrestAPIError as e:
        logger.error(f"Failed to delete recipe {recipe_id}: {e.message}")
        raise RecipeDeleteError(e.message) from e

    if response.data is not True:
        raise RecipeNotFoundError(recipe_id)

    logger.info(f"Recipe {recipe_id} deleted by {user_id}")
