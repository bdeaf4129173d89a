"""
Tests for the recipe authoring form.

Tests cover:
- State transitions (field edits, ingredient rows, reset)
- Validation of required fields
- Button action decoding
- Conversion to a draft
"""

import pytest
from starlette.datastructures import FormData

from recipeshare.forms.recipe_form import (
    FIELD_LABELS,
    FormAction,
    RecipeFormState,
    apply_action,
    parse_action,
    validate_recipe_form,
)
from recipeshare.models import IngredientLine, format_ingredients, parse_ingredients


def complete_state() -> RecipeFormState:
    return RecipeFormState(
        title="Supp",
        servings=2,
        category_id="1",
        total_time_minutes=30,
        steps_description="Keeda.",
        ingredients=(IngredientLine(name="sool", quantity="1tl"),),
    )


class TestTransitions:
    """Every transition returns a new state and leaves the old one alone."""

    def test_initial_state_has_one_empty_row(self):
        state = RecipeFormState()
        assert state.ingredients == (IngredientLine(),)
        assert state.servings == 0
        assert state.category_id == ""

    def test_with_field_is_pure(self):
        state = RecipeFormState()
        updated = state.with_field("title", "Pannkoogid")
        assert updated.title == "Pannkoogid"
        assert state.title == ""

    def test_with_field_coerces_numbers(self):
        state = RecipeFormState()
        assert state.with_field("servings", "4").servings == 4
        assert state.with_field("total_time_minutes", "abc").total_time_minutes == 0
        assert state.with_field("total_time_minutes", "-5").total_time_minutes == 0

    def test_with_field_rejects_unknown(self):
        with pytest.raises(ValueError):
            RecipeFormState().with_field("ingredients", "x")

    def test_add_ingredient_appends_empty_row(self):
        state = complete_state().add_ingredient()
        assert len(state.ingredients) == 2
        assert state.ingredients[-1] == IngredientLine()

    def test_remove_ingredient(self):
        state = complete_state().add_ingredient().update_ingredient(1, "name", "pipar")
        state = state.remove_ingredient(0)
        assert [line.name for line in state.ingredients] == ["pipar"]

    def test_remove_last_row_leaves_empty_list(self):
        state = complete_state().remove_ingredient(0)
        assert state.ingredients == ()

    def test_remove_ingredient_out_of_range(self):
        with pytest.raises(IndexError):
            complete_state().remove_ingredient(3)

    def test_update_ingredient(self):
        state = RecipeFormState().update_ingredient(0, "quantity", "200g")
        assert state.ingredients[0].quantity == "200g"

    def test_update_ingredient_unknown_field(self):
        with pytest.raises(ValueError):
            RecipeFormState().update_ingredient(0, "unit", "g")

    def test_reset(self):
        assert complete_state().reset() == RecipeFormState()


class TestFromForm:
    def test_pairs_ingredients_by_position(self):
        form = FormData([
            ("title", "Salat"),
            ("ingredient_name", "kurk"),
            ("ingredient_quantity", "1"),
            ("ingredient_name", "tomat"),
            ("ingredient_quantity", "2"),
            ("servings", "2"),
        ])
        state = RecipeFormState.from_form(form)
        assert state.ingredients == (
            IngredientLine(name="kurk", quantity="1"),
            IngredientLine(name="tomat", quantity="2"),
        )
        assert state.servings == 2

    def test_missing_quantity_padded(self):
        form = FormData([("ingredient_name", "kurk")])
        state = RecipeFormState.from_form(form)
        assert state.ingredients == (IngredientLine(name="kurk", quantity=""),)

    def test_line_breaks_in_ingredients_flattened(self):
        form = FormData([
            ("ingredient_name", "kaste:\r\ntomati"),
            ("ingredient_quantity", "1\n2"),
        ])
        state = RecipeFormState.from_form(form)
        assert state.ingredients == (IngredientLine(name="kaste: tomati", quantity="1 2"),)

        params = complete_state().model_copy(update={"ingredients": state.ingredients}).to_draft("user-1").to_params()
        assert parse_ingredients(params["p_ingredients"]) == list(state.ingredients)

    def test_truncates_long_title(self):
        form = FormData([("title", "x" * 50)])
        assert len(RecipeFormState.from_form(form).title) == 30

    def test_blank_numbers_are_unset(self):
        form = FormData([("servings", ""), ("total_time_minutes", "")])
        state = RecipeFormState.from_form(form)
        assert state.servings == 0
        assert state.total_time_minutes == 0


class TestValidation:
    def test_complete_form_is_valid(self):
        assert validate_recipe_form(complete_state()) == []

    def test_empty_form_lists_every_label_once(self):
        missing = validate_recipe_form(RecipeFormState())
        assert missing == list(FIELD_LABELS.values())
        assert len(missing) == len(set(missing))

    def test_incomplete_rows_reported_once(self):
        state = complete_state().add_ingredient().add_ingredient()
        missing = validate_recipe_form(state)
        assert missing == ["Koostisosa ja kogus"]

    def test_empty_ingredient_list_is_missing(self):
        state = complete_state().remove_ingredient(0)
        assert validate_recipe_form(state) == ["Koostisosa ja kogus"]

    def test_whitespace_only_fields_missing(self):
        state = complete_state().with_field("title", "   ").with_field("steps_description", "\n")
        assert validate_recipe_form(state) == ["Pealkiri", "Valmistusjuhend"]

    def test_non_numeric_category_missing(self):
        state = complete_state().with_field("category_id", "supid")
        assert validate_recipe_form(state) == ["Kategooria"]

    def test_validation_is_pure(self):
        state = RecipeFormState()
        assert validate_recipe_form(state) == validate_recipe_form(state)
        assert state == RecipeFormState()


class TestActions:
    @pytest.mark.parametrize("raw,expected", [
        ("add_ingredient", (FormAction.ADD_INGREDIENT, None)),
        ("remove_ingredient:2", (FormAction.REMOVE_INGREDIENT, 2)),
        ("remove_ingredient:x", (FormAction.REMOVE_INGREDIENT, None)),
        ("submit", (FormAction.SUBMIT, None)),
        ("", (FormAction.SUBMIT, None)),
        (None, (FormAction.SUBMIT, None)),
        ("explode", (FormAction.SUBMIT, None)),
    ])
    def test_parse_action(self, raw, expected):
        assert parse_action(raw) == expected

    def test_apply_add(self):
        state = apply_action(complete_state(), FormAction.ADD_INGREDIENT)
        assert len(state.ingredients) == 2

    def test_apply_remove(self):
        state = apply_action(complete_state(), FormAction.REMOVE_INGREDIENT, 0)
        assert state.ingredients == ()

    def test_apply_remove_bad_index_keeps_state(self):
        state = complete_state()
        assert apply_action(state, FormAction.REMOVE_INGREDIENT, 7) == state
        assert apply_action(state, FormAction.REMOVE_INGREDIENT, None) == state


class TestDraft:
    def test_to_draft(self):
        draft = complete_state().to_draft("user-1", image_path="user-1/a.jpg")
        assert draft.category_id == 1
        assert draft.user_id == "user-1"
        params = draft.to_params()
        assert parse_ingredients(params["p_ingredients"]) == [IngredientLine(name="sool", quantity="1tl")]
        assert params["p_image_path"] == "user-1/a.jpg"

    def test_to_draft_rejects_invalid(self):
        with pytest.raises(ValueError, match="Pealkiri"):
            RecipeFormState().to_draft("user-1")


class TestIngredientsBlob:
    def test_format_strips_whitespace(self):
        lines = [IngredientLine(name=" jahu ", quantity="2 dl"), IngredientLine(name="muna", quantity="3")]
        assert parse_ingredients(format_ingredients(lines)) == [
            IngredientLine(name="jahu", quantity="2 dl"),
            IngredientLine(name="muna", quantity="3"),
        ]

    def test_colons_and_line_breaks_survive(self):
        lines = [
            IngredientLine(name="kaste: tomati", quantity="1:2"),
            IngredientLine(name="jahu\nnisu", quantity="2 dl\r\n"),
            IngredientLine(name="äädikas", quantity="1 sl"),
        ]
        assert parse_ingredients(format_ingredients(lines)) == [
            IngredientLine(name="kaste: tomati", quantity="1:2"),
            IngredientLine(name="jahu\nnisu", quantity="2 dl"),
            IngredientLine(name="äädikas", quantity="1 sl"),
        ]

    def test_stored_as_json(self):
        blob = format_ingredients([IngredientLine(name="muna", quantity="3")])
        assert blob == '[{"name":"muna","quantity":"3"}]'

    def test_parse_legacy_skips_blank_lines_and_keeps_bare_names(self):
        assert parse_ingredients("jahu: 2 dl\n\nsool") == [
            IngredientLine(name="jahu", quantity="2 dl"),
            IngredientLine(name="sool", quantity=""),
        ]

    def test_parse_empty(self):
        assert parse_ingredients(None) == []
