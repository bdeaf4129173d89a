"""Likes, follows, feed and user profile pages."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from recipeshare.db import recipes as recipe_db
from recipeshare.db import social as social_db
from recipeshare.db.adapter import BackendClient
from recipeshare.errors import SocialError, UserNotFoundError
from recipeshare.models import UserProfile
from recipeshare.web.auth import AuthenticatedUser, get_current_user, get_user_client
from recipeshare.web.messages import encoded_redirect
from recipeshare.web.recipe_routes import image_urls
from recipeshare.web.templating import render

router = APIRouter(prefix="/protected", tags=["social"])


def _profile_or_404(client: BackendClient, username: str) -> UserProfile:
    profile = social_db.get_user_by_username(client, username)
    if profile is None:
        raise UserNotFoundError(username)
    return profile


@router.get("/liked-recipes")
async def liked_recipes(
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    client: BackendClient = Depends(get_user_client),
):
    recipes = social_db.get_liked_recipes(client, user.id)
    return render(
        request,
        "recipe_grid.html",
        heading="Meeldivad retseptid",
        user=user,
        recipes=recipes,
        images=image_urls(client, recipes),
    )


@router.get("/feed")
async def feed(
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    client: BackendClient = Depends(get_user_client),
):
    """Recipes from people the user follows."""
    recipes = social_db.get_feed(client, user.id)
    return render(
        request,
        "recipe_grid.html",
        heading="Jälgitavate retseptid",
        user=user,
        recipes=recipes,
        images=image_urls(client, recipes),
    )


@router.get("/users/{username}")
async def profile(
    request: Request,
    username: str,
    user: AuthenticatedUser = Depends(get_current_user),
    client: BackendClient = Depends(get_user_client),
):
    profile = _profile_or_404(client, username)
    recipes = recipe_db.get_user_recipes(client, profile.id)
    return render(
        request,
        "profile.html",
        user=user,
        profile=profile,
        recipes=recipes,
        images=image_urls(client, recipes),
        followers=social_db.get_followers(client, profile.id),
        followings=social_db.get_followings(client, profile.id),
        following=social_db.is_following(client, user.id, profile.id),
        is_self=profile.id == user.id,
    )


@router.post("/users/{username}/follow")
async def follow(
    username: str,
    user: AuthenticatedUser = Depends(get_current_user),
    client: BackendClient = Depends(get_user_client),
):
    profile = _profile_or_404(client, username)
    try:
        social_db.follow_user(client, user.id, profile.id)
    except SocialError as e:
        return encoded_redirect("error", f"/protected/users/{username}", e.message)
    return RedirectResponse(f"/protected/users/{username}", status_code=303)


@router.post("/users/{username}/unfollow")
async def unfollow(
    username: str,
    user: AuthenticatedUser = Depends(get_current_user),
    client: BackendClient = Depends(get_user_client),
):
    profile = _profile_or_404(client, username)
    social_db.unfollow_user(client, user.id, profile.id)
    return RedirectResponse(f"/protected/users/{username}", status_code=303)
