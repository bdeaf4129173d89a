"""
Checks on the SQL migration.

The procedures run inside Postgres, so these tests read the migration text
and check the statement order the app relies on.
"""

import re
from pathlib import Path

from recipeshare.db.recipes import CREATE_RECIPE_FN, DELETE_RECIPE_FN

MIGRATION = Path(__file__).resolve().parents[1] / "migrations" / "001_recipe_schema.sql"


def function_body(name: str) -> str:
    """Text between the `as $$` and closing `$$;` of a SQL function."""
    sql = MIGRATION.read_text(encoding="utf-8")
    match = re.search(
        rf"create or replace function public\.{name}\(.*?as \$\$(.*?)\$\$;",
        sql,
        re.DOTALL | re.IGNORECASE,
    )
    assert match, f"function {name} not found in {MIGRATION.name}"
    return match.group(1).lower()


def positions(body: str, *statements: str) -> list[int]:
    found = [body.find(statement) for statement in statements]
    assert -1 not in found, f"missing statement in {dict(zip(statements, found))}"
    return found


class TestRecipeProcedures:
    def test_delete_order(self):
        body = function_body(DELETE_RECIPE_FN)
        likes, recipe, ingredients = positions(
            body,
            "delete from public.liked_recipes",
            "delete from public.published_recipes",
            "delete from public.ingredients",
        )
        assert likes < recipe < ingredients

    def test_delete_checks_owner(self):
        body = function_body(DELETE_RECIPE_FN)
        assert "auth.uid()" in body
        assert "user_id = p_user_id" in body

    def test_create_order(self):
        body = function_body(CREATE_RECIPE_FN)
        ingredients, recipe = positions(
            body,
            "insert into public.ingredients",
            "insert into public.published_recipes",
        )
        assert ingredients < recipe
