"""
Recipeshare - Recipe image storage.

Images live in a single bucket, addressed by `<user_id>/<UTC timestamp>.jpg`.
"""

import logging
from datetime import datetime, timezone

from supabase import StorageException

from recipeshare.config import settings
from recipeshare.db.adapter import BackendClient
from recipeshare.errors import BackendError

logger = logging.getLogger(__name__)


def image_path_for(user_id: str, now: datetime | None = None) -> str:
    """Time-stamped storage path for a new recipe image."""
    now = now or datetime.now(timezone.utc)
    return f"{user_id}/{now.strftime('%Y%m%dT%H%M%S%f')}.jpg"


def upload_recipe_image(
    client: BackendClient,
    user_id: str,
    image_bytes: bytes,
    bucket: str | None = None,
    now: datetime | None = None,
) -> str:
    """
    Upload a cropped image and return its storage path.

    Raises BackendError if the storage call fails.
    """
    bucket = bucket or settings.recipe_images_bucket
    path = image_path_for(user_id, now)

    try:
        client.storage.from_(bucket).upload(
            path,
            image_bytes,
            {"content-type": "image/jpeg"},
        )
    except StorageException as e:
        logger.error(f"Image upload to {bucket}/{path} failed: {e}")
        raise BackendError("Pildi üleslaadimine nurjus") from e

    logger.info(f"Uploaded recipe image {bucket}/{path} ({len(image_bytes)} bytes)")
    return path


def remove_recipe_image(client: BackendClient, image_path: str, bucket: str | None = None) -> bool:
    """
    Delete a stored image whose recipe is gone or was never written.

    Failures are logged, not raised: the recipe outcome is already decided.
    """
    bucket = bucket or settings.recipe_images_bucket
    try:
        client.storage.from_(bucket).remove([image_path])
    except StorageException as e:
        logger.warning(f"Could not remove image {bucket}/{image_path}: {e}")
        return False
    return True


def public_image_url(client: BackendClient, image_path: str | None, bucket: str | None = None) -> str | None:
    """Public URL for a stored image, or None when the recipe has no image."""
    if not image_path:
        return None
    bucket = bucket or settings.recipe_images_bucket
    return client.storage.from_(bucket).get_public_url(image_path)
