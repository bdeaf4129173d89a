"""
Recipe pages and form actions.

All pages live under /protected and need a signed-in user.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from starlette.datastructures import UploadFile

from recipeshare.config import settings
from recipeshare.db import recipes as recipe_db
from recipeshare.db import social as social_db
from recipeshare.db.adapter import BackendClient
from recipeshare.db.storage import public_image_url, remove_recipe_image, upload_recipe_image
from recipeshare.errors import BackendError, ImageError, RecipeDeleteError, RecipeNotFoundError
from recipeshare.forms.recipe_form import (
    SERVINGS_CHOICES,
    STEPS_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    FormAction,
    RecipeFormState,
    apply_action,
    parse_action,
    validate_recipe_form,
)
from recipeshare.images import CropBox, crop_image
from recipeshare.models import Recipe
from recipeshare.web.auth import AuthenticatedUser, get_current_user, get_user_client
from recipeshare.web.messages import encoded_redirect
from recipeshare.web.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/protected", tags=["recipes"])

USER_RECIPES_PATH = "/protected/user-recipes"
RECIPE_FORM_PATH = "/protected/recipe-form"

RECIPE_CREATE_FAILED = "Retsepti lisamine nurjus"
RECIPE_DELETED = "Retsept kustutatud"
RECIPE_DELETE_FAILED = "Retsepti kustutamine nurjus"
RECIPE_NOT_FOUND = "Retsepti ei leitud"


def image_urls(client: BackendClient, recipes: list[Recipe]) -> dict[int, str | None]:
    return {r.id: public_image_url(client, r.image_path) for r in recipes}


def _render_form(
    request: Request,
    client: BackendClient,
    state: RecipeFormState,
    errors: list[str] | None = None,
):
    return render(
        request,
        "recipe_form.html",
        form=state,
        errors=errors or [],
        categories=recipe_db.fetch_categories(client),
        servings_choices=SERVINGS_CHOICES,
        title_max_length=TITLE_MAX_LENGTH,
        steps_max_length=STEPS_MAX_LENGTH,
    )


# =============================================================================
# Browsing
# =============================================================================


@router.get("")
async def recipe_list(
    request: Request,
    category: int | None = None,
    q: str | None = None,
    user: AuthenticatedUser = Depends(get_current_user),
    client: BackendClient = Depends(get_user_client),
):
    """All published recipes, optionally filtered by category or title."""
    recipes = recipe_db.list_recipes(client, category_id=category, search=q)
    return render(
        request,
        "recipes.html",
        user=user,
        recipes=recipes,
        images=image_urls(client, recipes),
        categories=recipe_db.fetch_categories(client),
        selected_category=category,
        search=q or "",
    )


@router.get("/recipes/{recipe_id}")
async def recipe_detail(
    request: Request,
    recipe_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    client: BackendClient = Depends(get_user_client),
):
    recipe = recipe_db.get_recipe(client, recipe_id)
    return render(
        request,
        "recipe_detail.html",
        user=user,
        recipe=recipe,
        image_url=public_image_url(client, recipe.image_path),
        author=social_db.get_user_profile(client, recipe.user_id),
        likes=social_db.count_likes(client, recipe_id),
        liked=social_db.is_recipe_liked(client, user.id, recipe_id),
        is_owner=recipe.user_id == user.id,
    )


@router.get("/user-recipes")
async def user_recipes(
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    client: BackendClient = Depends(get_user_client),
):
    """The signed-in user's own recipes."""
    recipes = recipe_db.get_user_recipes(client, user.id)
    return render(
        request,
        "user_recipes.html",
        user=user,
        recipes=recipes,
        images=image_urls(client, recipes),
    )


# =============================================================================
# Authoring
# =============================================================================


@router.get("/recipe-form")
async def recipe_form_page(
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    client: BackendClient = Depends(get_user_client),
):
    return _render_form(request, client, RecipeFormState())


@router.post("/recipe-form")
async def recipe_form_submit(
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    client: BackendClient = Depends(get_user_client),
):
    """
    Handle a button press on the recipe form.

    Add/remove ingredient re-renders the form with the new state. Submit
    validates, uploads the optional image, then writes ingredients and
    recipe in one call.
    """
    form = await request.form()
    state = RecipeFormState.from_form(form)
    action, index = parse_action(form.get("action"))

    if action is not FormAction.SUBMIT:
        return _render_form(request, client, apply_action(state, action, index))

    missing = validate_recipe_form(state)
    if missing:
        return _render_form(request, client, state, errors=missing)

    image_path = None
    upload = form.get("image")
    if isinstance(upload, UploadFile) and upload.filename:
        try:
            cropped = crop_image(
                await upload.read(),
                CropBox.from_form(form),
                max_size=settings.image_max_size,
            )
            image_path = upload_recipe_image(client, user.id, cropped)
        except ImageError as e:
            return _render_form(request, client, state, errors=[e.message])
        except BackendError:
            return encoded_redirect("error", RECIPE_FORM_PATH, RECIPE_CREATE_FAILED)

    try:
        recipe_db.add_recipe(client, state.to_draft(user.id, image_path))
    except BackendError:
        if image_path:
            remove_recipe_image(client, image_path)
        return encoded_redirect("error", RECIPE_FORM_PATH, RECIPE_CREATE_FAILED)

    return RedirectResponse(USER_RECIPES_PATH, status_code=303)


# =============================================================================
# Deleting and liking
# =============================================================================


@router.post("/recipes/{recipe_id}/delete")
async def delete_recipe(
    recipe_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    client: BackendClient = Depends(get_user_client),
):
    """Delete one of the user's recipes together with its likes and ingredients."""
    recipe = recipe_db.get_recipe(client, recipe_id)

    try:
        recipe_db.delete_recipe(client, recipe_id, user.id)
    except RecipeNotFoundError:
        return encoded_redirect("error", USER_RECIPES_PATH, RECIPE_NOT_FOUND)
    except RecipeDeleteError:
        return encoded_redirect("error", USER_RECIPES_PATH, RECIPE_DELETE_FAILED)

    if recipe.image_path:
        remove_recipe_image(client, recipe.image_path)

    return encoded_redirect("success", USER_RECIPES_PATH, RECIPE_DELETED)


@router.post("/recipes/{recipe_id}/like")
async def like(
    recipe_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    client: BackendClient = Depends(get_user_client),
):
    social_db.like_recipe(client, user.id, recipe_id)
    return RedirectResponse(f"/protected/recipes/{recipe_id}", status_code=303)


@router.post("/recipes/{recipe_id}/unlike")
async def unlike(
    recipe_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    client: BackendClient = Depends(get_user_client),
):
    social_db.unlike_recipe(client, user.id, recipe_id)
    return RedirectResponse(f"/protected/recipes/{recipe_id}", status_code=303)
