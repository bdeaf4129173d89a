"""Form state and validation."""

from recipeshare.forms.recipe_form import (
    FIELD_LABELS,
    FormAction,
    RecipeFormState,
    apply_action,
    parse_action,
    validate_recipe_form,
)

__all__ = [
    "FIELD_LABELS",
    "FormAction",
    "RecipeFormState",
    "apply_action",
    "parse_action",
    "validate_recipe_form",
]
