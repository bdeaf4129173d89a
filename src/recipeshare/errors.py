"""
Recipeshare - Error types.

Backend failures are wrapped so routes can translate them into
redirect-encoded messages without knowing which Supabase component failed.
"""


class RecipeShareError(Exception):
    """Base class for all application errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BackendError(RecipeShareError):
    """A database or storage call failed."""


class RecipeNotFoundError(RecipeShareError):
    """Recipe does not exist or is not visible to the caller."""

    def __init__(self, recipe_id: int):
        super().__init__(f"Recipe {recipe_id} not found")
        self.recipe_id = recipe_id


class RecipeCreateError(BackendError):
    """Ingredients and recipe rows could not be written."""


class RecipeDeleteError(BackendError):
    """The likes/recipe/ingredients cascade did not complete."""


class ImageError(RecipeShareError):
    """Uploaded file is not a usable image."""


class SocialError(RecipeShareError):
    """A like or follow request is not allowed."""


class NotAuthenticatedError(RecipeShareError):
    """No valid session for a protected page."""


class UserNotFoundError(RecipeShareError):
    """No user profile with the requested username."""

    def __init__(self, username: str):
        super().__init__(f"User {username} not found")
        self.username = username
