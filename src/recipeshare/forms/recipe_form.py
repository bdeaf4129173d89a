"""
Recipe Authoring Form.

The whole form is one frozen value. Every button press (add or remove an
ingredient row, submit) produces a new state; validation is a pure
function from state to the list of missing field labels.

The state is rebuilt from the posted fields on every request, so nothing
about an unfinished form is kept on the server.
"""

import logging
from enum import Enum
from itertools import zip_longest
from typing import Any

from pydantic import BaseModel, ConfigDict

from recipeshare.models import IngredientLine, RecipeDraft

logger = logging.getLogger(__name__)


# =============================================================================
# Field metadata
# =============================================================================

# Labels shown to the user for missing fields, in display order
FIELD_LABELS = {
    "title": "Pealkiri",
    "ingredients": "Koostisosa ja kogus",
    "servings": "Portsjonite arv",
    "category_id": "Kategooria",
    "total_time_minutes": "Valmistusaeg",
    "steps_description": "Valmistusjuhend",
}

SCALAR_FIELDS = ("title", "servings", "category_id", "total_time_minutes", "steps_description")
INT_FIELDS = ("servings", "total_time_minutes")
INGREDIENT_FIELDS = ("name", "quantity")

TITLE_MAX_LENGTH = 30
STEPS_MAX_LENGTH = 2000
SERVINGS_CHOICES = list(range(1, 11))


class FormAction(str, Enum):
    """Buttons on the recipe form."""
    ADD_INGREDIENT = "add_ingredient"
    REMOVE_INGREDIENT = "remove_ingredient"
    SUBMIT = "submit"


def _to_int(value: Any) -> int:
    """Form numbers: blanks, junk and negatives all count as unset (0)."""
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return 0
    return max(number, 0)


def _single_line(value: Any) -> str:
    """Ingredient inputs are one line; embedded line breaks become spaces."""
    return " ".join(str(value).splitlines())


# =============================================================================
# State
# =============================================================================


class RecipeFormState(BaseModel):
    """Immutable snapshot of the recipe form."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    servings: int = 0
    category_id: str = ""
    total_time_minutes: int = 0
    steps_description: str = ""
    ingredients: tuple[IngredientLine, ...] = (IngredientLine(),)

    @classmethod
    def from_form(cls, form) -> "RecipeFormState":
        """
        Rebuild state from posted form data.

        `form` is a Starlette FormData (or anything with get/getlist).
        Ingredient names and quantities are paired by position.
        """
        names = form.getlist("ingredient_name")
        quantities = form.getlist("ingredient_quantity")
        ingredients = tuple(
            IngredientLine(name=_single_line(name), quantity=_single_line(quantity))
            for name, quantity in zip_longest(names, quantities, fillvalue="")
        )
        return cls(
            title=str(form.get("title") or "")[:TITLE_MAX_LENGTH],
            servings=_to_int(form.get("servings")),
            category_id=str(form.get("category_id") or ""),
            total_time_minutes=_to_int(form.get("total_time_minutes")),
            steps_description=str(form.get("steps_description") or "")[:STEPS_MAX_LENGTH],
            ingredients=ingredients,
        )

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def with_field(self, name: str, value: Any) -> "RecipeFormState":
        """Set one scalar field."""
        if name not in SCALAR_FIELDS:
            raise ValueError(f"Unknown form field: {name}")
        if name in INT_FIELDS:
            value = _to_int(value)
        else:
            value = "" if value is None else str(value)
        return self.model_copy(update={name: value})

    def add_ingredient(self) -> "RecipeFormState":
        """Append an empty ingredient row."""
        return self.model_copy(update={"ingredients": self.ingredients + (IngredientLine(),)})

    def remove_ingredient(self, index: int) -> "RecipeFormState":
        """Drop the ingredient row at `index`. Raises IndexError if out of range."""
        if not 0 <= index < len(self.ingredients):
            raise IndexError(f"No ingredient row {index}")
        remaining = self.ingredients[:index] + self.ingredients[index + 1:]
        return self.model_copy(update={"ingredients": remaining})

    def update_ingredient(self, index: int, field: str, value: str) -> "RecipeFormState":
        """Change the name or quantity of one ingredient row."""
        if field not in INGREDIENT_FIELDS:
            raise ValueError(f"Unknown ingredient field: {field}")
        if not 0 <= index < len(self.ingredients):
            raise IndexError(f"No ingredient row {index}")
        row = self.ingredients[index].model_copy(update={field: value})
        updated = self.ingredients[:index] + (row,) + self.ingredients[index + 1:]
        return self.model_copy(update={"ingredients": updated})

    def reset(self) -> "RecipeFormState":
        """Back to the empty form (after a successful submit)."""
        return RecipeFormState()

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def to_draft(self, user_id: str, image_path: str | None = None) -> RecipeDraft:
        """
        Convert a valid form into a RecipeDraft.

        Raises ValueError if the form still has missing fields.
        """
        missing = validate_recipe_form(self)
        if missing:
            raise ValueError(f"Missing fields: {', '.join(missing)}")

        return RecipeDraft(
            title=self.title.strip(),
            servings=self.servings,
            category_id=int(self.category_id),
            total_time_minutes=self.total_time_minutes,
            steps_description=self.steps_description.strip(),
            ingredients=list(self.ingredients),
            image_path=image_path,
            user_id=user_id,
        )


# =============================================================================
# Validation
# =============================================================================


def validate_recipe_form(state: RecipeFormState) -> list[str]:
    """
    Return the labels of all missing required fields, each at most once.

    An empty ingredient list, or any row lacking a name or quantity, counts
    as one missing "ingredient and quantity" field. A category that is not
    a number is treated as not selected.
    """
    missing = []
    if not state.title.strip():
        missing.append(FIELD_LABELS["title"])
    if not state.ingredients or not all(line.is_complete for line in state.ingredients):
        missing.append(FIELD_LABELS["ingredients"])
    if not state.servings:
        missing.append(FIELD_LABELS["servings"])
    if not state.category_id.strip().isdigit():
        missing.append(FIELD_LABELS["category_id"])
    if not state.total_time_minutes:
        missing.append(FIELD_LABELS["total_time_minutes"])
    if not state.steps_description.strip():
        missing.append(FIELD_LABELS["steps_description"])
    return missing


# =============================================================================
# Actions
# =============================================================================


def parse_action(raw: str | None) -> tuple[FormAction, int | None]:
    """
    Decode the value of the pressed button.

    "remove_ingredient:2" carries the row index. Anything unrecognised is
    treated as submit, which is what pressing Enter in a field sends.
    """
    raw = (raw or "").strip()
    name, _, arg = raw.partition(":")
    try:
        action = FormAction(name)
    except ValueError:
        return FormAction.SUBMIT, None

    if action is FormAction.REMOVE_INGREDIENT:
        try:
            return action, int(arg)
        except ValueError:
            logger.warning(f"Ignoring malformed form action: {raw!r}")
            return action, None
    return action, None


def apply_action(state: RecipeFormState, action: FormAction, index: int | None = None) -> RecipeFormState:
    """
    Apply a non-submit button press.

    Out-of-range or missing row indexes leave the state unchanged.
    """
    if action is FormAction.ADD_INGREDIENT:
        return state.add_ingredient()
    if action is FormAction.REMOVE_INGREDIENT and index is not None:
        try:
            return state.remove_ingredient(index)
        except IndexError:
            logger.warning(f"Ignoring removal of missing ingredient row {index}")
    return state
