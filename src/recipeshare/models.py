"""
Recipeshare - Domain models.

Rows come back from Supabase as dicts; these models give them a stable
shape for templates and tests.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError


class Category(BaseModel):
    """Read-only reference data."""
    id: int
    category_name: str


class IngredientLine(BaseModel):
    """One ingredient as entered in the recipe form."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    quantity: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.name.strip()) and bool(self.quantity.strip())


_ingredient_list = TypeAdapter(list[IngredientLine])


def format_ingredients(lines: list[IngredientLine] | tuple[IngredientLine, ...]) -> str:
    """
    Serialize ingredient lines into the text blob stored per recipe.

    The blob is a JSON list of {"name", "quantity"} objects, so names and
    quantities may contain any character.
    """
    cleaned = [IngredientLine(name=line.name.strip(), quantity=line.quantity.strip()) for line in lines]
    return _ingredient_list.dump_json(cleaned).decode()


def parse_ingredients(text: str | None) -> list[IngredientLine]:
    """
    Parse the stored ingredients blob back into lines.

    Blobs that are not JSON are read as "name: quantity" lines; a line
    without a colon is kept as a bare name with no quantity.
    """
    if not text:
        return []
    try:
        return _ingredient_list.validate_json(text)
    except ValidationError:
        return _parse_ingredient_lines(text)


def _parse_ingredient_lines(text: str) -> list[IngredientLine]:
    lines = []
    for raw in text.splitlines():
        raw = raw.strip()
        if not raw:
            continue
        name, _, quantity = raw.partition(":")
        lines.append(IngredientLine(name=name.strip(), quantity=quantity.strip()))
    return lines


class Recipe(BaseModel):
    """A published recipe with its category and ingredients resolved."""
    id: int
    title: str
    servings: int
    category_id: int | None = None
    total_time_minutes: int
    steps_description: str
    image_path: str | None = None
    user_id: str
    created_at: datetime | None = None
    ingredients_id: int | None = None

    category: Category | None = None
    ingredients: list[IngredientLine] = Field(default_factory=list)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Recipe":
        """
        Build from a published_recipes row.

        Embedded `categories(*)` and `ingredients(*)` selections are
        optional; a bare row yields an empty ingredient list.
        """
        data = dict(row)
        category = data.pop("categories", None)
        ingredients = data.pop("ingredients", None)
        if isinstance(category, list):
            category = category[0] if category else None
        if isinstance(ingredients, list):
            ingredients = ingredients[0] if ingredients else None

        return cls(
            **data,
            category=Category(**category) if category else None,
            ingredients=parse_ingredients(ingredients.get("ingredients")) if ingredients else [],
        )


class RecipeDraft(BaseModel):
    """Validated form contents ready to be written."""
    title: str
    servings: int
    category_id: int
    total_time_minutes: int
    steps_description: str
    ingredients: list[IngredientLine]
    image_path: str | None = None
    user_id: str

    def to_params(self) -> dict[str, Any]:
        """Parameters for the create_recipe_with_ingredients procedure."""
        return {
            "p_title": self.title,
            "p_servings": self.servings,
            "p_category_id": self.category_id,
            "p_total_time_minutes": self.total_time_minutes,
            "p_steps_description": self.steps_description,
            "p_image_path": self.image_path,
            "p_user_id": self.user_id,
            "p_ingredients": format_ingredients(self.ingredients),
        }


class UserProfile(BaseModel):
    """Row from the public users table."""
    id: str
    email: str | None = None
    username: str
