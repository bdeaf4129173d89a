"""
Recipeshare - Likes, followings and user profiles.
"""

import logging

from supabase import PostgrestAPIError

from recipeshare.db.adapter import BackendClient
from recipeshare.db.recipes import RECIPE_SELECT, RECIPES_TABLE, get_recipes_by_ids
from recipeshare.errors import BackendError, SocialError
from recipeshare.models import Recipe, UserProfile

logger = logging.getLogger(__name__)

LIKES_TABLE = "liked_recipes"
FOLLOWINGS_TABLE = "followings"
USERS_TABLE = "users"

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


def _execute(query, what: str):
    try:
        return query.execute()
    except PostgrestAPIError as e:
        logger.error(f"Failed to {what}: {e.message}")
        raise BackendError(e.message) from e


def _insert_pair(client: BackendClient, table: str, row: dict, what: str) -> bool:
    """
    Insert a membership row. Returns False if the pair already existed.
    """
    try:
        client.table(table).insert(row).execute()
    except PostgrestAPIError as e:
        if e.code == UNIQUE_VIOLATION:
            return False
        logger.error(f"Failed to {what}: {e.message}")
        raise BackendError(e.message) from e
    return True


# =============================================================================
# Likes
# =============================================================================


def like_recipe(client: BackendClient, user_id: str, recipe_id: int) -> bool:
    """Like a recipe. Liking twice is a no-op that returns False."""
    return _insert_pair(
        client,
        LIKES_TABLE,
        {"user_id": user_id, "recipe_id": recipe_id},
        f"like recipe {recipe_id}",
    )


def unlike_recipe(client: BackendClient, user_id: str, recipe_id: int) -> None:
    """Remove a like. Missing likes are ignored."""
    _execute(
        client.table(LIKES_TABLE).delete().eq("user_id", user_id).eq("recipe_id", recipe_id),
        f"unlike recipe {recipe_id}",
    )


def is_recipe_liked(client: BackendClient, user_id: str, recipe_id: int) -> bool:
    response = _execute(
        client.table(LIKES_TABLE).select("id").eq("user_id", user_id).eq("recipe_id", recipe_id),
        "check like",
    )
    return bool(response.data)


def count_likes(client: BackendClient, recipe_id: int) -> int:
    """Number of users who liked a recipe."""
    response = _execute(
        client.table(LIKES_TABLE).select("id", count="exact").eq("recipe_id", recipe_id),
        f"count likes of {recipe_id}",
    )
    if response.count is not None:
        return response.count
    return len(response.data or [])


def get_liked_recipes(client: BackendClient, user_id: str) -> list[Recipe]:
    """Recipes a user has liked, most recently liked first."""
    response = _execute(
        client.table(LIKES_TABLE)
        .select("recipe_id")
        .eq("user_id", user_id)
        .order("created_at", desc=True),
        f"list likes of {user_id}",
    )
    recipe_ids = [row["recipe_id"] for row in response.data or []]
    return get_recipes_by_ids(client, recipe_ids)


# =============================================================================
# Followings
# =============================================================================


def follow_user(client: BackendClient, follower_id: str, followee_id: str) -> bool:
    """
    Follow another user. Following twice is a no-op that returns False.

    Raises SocialError when a user tries to follow themselves.
    """
    if follower_id == followee_id:
        raise SocialError("Iseennast ei saa jälgida")

    return _insert_pair(
        client,
        FOLLOWINGS_TABLE,
        {"follower_id": follower_id, "followee_id": followee_id},
        f"follow {followee_id}",
    )


def unfollow_user(client: BackendClient, follower_id: str, followee_id: str) -> None:
    _execute(
        client.table(FOLLOWINGS_TABLE)
        .delete()
        .eq("follower_id", follower_id)
        .eq("followee_id", followee_id),
        f"unfollow {followee_id}",
    )


def is_following(client: BackendClient, follower_id: str, followee_id: str) -> bool:
    response = _execute(
        client.table(FOLLOWINGS_TABLE)
        .select("id")
        .eq("follower_id", follower_id)
        .eq("followee_id", followee_id),
        "check following",
    )
    return bool(response.data)


def _followee_ids(client: BackendClient, user_id: str) -> list[str]:
    response = _execute(
        client.table(FOLLOWINGS_TABLE).select("followee_id").eq("follower_id", user_id),
        f"list followings of {user_id}",
    )
    return [row["followee_id"] for row in response.data or []]


def _users_by_ids(client: BackendClient, user_ids: list[str]) -> list[UserProfile]:
    if not user_ids:
        return []
    response = _execute(
        client.table(USERS_TABLE).select("*").in_("id", user_ids).order("username"),
        "fetch users",
    )
    return [UserProfile(**row) for row in response.data or []]


def get_followings(client: BackendClient, user_id: str) -> list[UserProfile]:
    """Users that `user_id` follows."""
    return _users_by_ids(client, _followee_ids(client, user_id))


def get_followers(client: BackendClient, user_id: str) -> list[UserProfile]:
    """Users following `user_id`."""
    response = _execute(
        client.table(FOLLOWINGS_TABLE).select("follower_id").eq("followee_id", user_id),
        f"list followers of {user_id}",
    )
    return _users_by_ids(client, [row["follower_id"] for row in response.data or []])


def get_feed(client: BackendClient, user_id: str, limit: int = 50) -> list[Recipe]:
    """Recipes published by the users `user_id` follows, newest first."""
    followee_ids = _followee_ids(client, user_id)
    if not followee_ids:
        return []

    response = _execute(
        client.table(RECIPES_TABLE)
        .select(RECIPE_SELECT)
        .in_("user_id", followee_ids)
        .order("created_at", desc=True)
        .limit(limit),
        f"build feed for {user_id}",
    )
    return [Recipe.from_row(row) for row in response.data or []]


# =============================================================================
# Users
# =============================================================================


def get_user_profile(client: BackendClient, user_id: str) -> UserProfile | None:
    response = _execute(
        client.table(USERS_TABLE).select("*").eq("id", user_id).maybe_single(),
        f"fetch user {user_id}",
    )
    if response is None or not response.data:
        return None
    return UserProfile(**response.data)


def get_user_by_username(client: BackendClient, username: str) -> UserProfile | None:
    response = _execute(
        client.table(USERS_TABLE).select("*").eq("username", username).maybe_single(),
        f"fetch user {username}",
    )
    if response is None or not response.data:
        return None
    return UserProfile(**response.data)
