"""
Authentication dependencies for FastAPI routes.

Protected pages read the Supabase session from cookies, validate the access
token with the service client, and get a per-request client acting as the
user.
"""

import logging

from fastapi import Depends, Request
from pydantic import BaseModel
from supabase import AuthError

from recipeshare.auth.session import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE
from recipeshare.db.adapter import BackendClient
from recipeshare.db.client import create_anon_client, get_authenticated_client, get_service_client
from recipeshare.errors import NotAuthenticatedError

logger = logging.getLogger(__name__)


class AuthenticatedUser(BaseModel):
    """Authenticated user info from the Supabase session cookies."""
    id: str
    email: str | None
    access_token: str
    refresh_token: str


def get_anon_client() -> BackendClient:
    """Fresh anon client for auth flows that have no session yet."""
    return create_anon_client()


def get_backend_service_client() -> BackendClient:
    return get_service_client()


# request.state key holding tokens issued by a refresh during this request
REFRESHED_SESSION = "refreshed_session"


def _refresh_session(client: BackendClient, refresh_token: str):
    """Exchange a refresh token for a new session, or None if it is rejected."""
    try:
        response = client.auth.refresh_session(refresh_token)
    except AuthError as e:
        logger.warning(f"Session refresh failed: {e.message}")
        return None
    if not response or not response.session or not response.user:
        return None
    return response


async def get_current_user(
    request: Request,
    client: BackendClient = Depends(get_backend_service_client),
    anon_client: BackendClient = Depends(get_anon_client),
) -> AuthenticatedUser:
    """
    Validate the session cookie and extract user info.

    An expired access token is renewed with the refresh cookie; the new
    tokens are left on `request.state` for the app to write back as
    cookies. Raises NotAuthenticatedError, which the app turns into a
    redirect to the sign-in page.
    """
    access_token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    refresh_token = request.cookies.get(REFRESH_TOKEN_COOKIE, "")

    if not access_token and not refresh_token:
        raise NotAuthenticatedError("Missing session")

    user = None
    if access_token:
        try:
            user_response = client.auth.get_user(access_token)
            user = user_response.user if user_response else None
        except AuthError as e:
            logger.info(f"Access token rejected: {e.message}")

    if user is None:
        refreshed = _refresh_session(anon_client, refresh_token) if refresh_token else None
        if refreshed is None:
            raise NotAuthenticatedError("Invalid or expired session")
        user = refreshed.user
        access_token = refreshed.session.access_token
        refresh_token = refreshed.session.refresh_token
        setattr(request.state, REFRESHED_SESSION, (access_token, refresh_token))
        logger.info(f"Session refreshed for {user.id}")

    return AuthenticatedUser(
        id=user.id,
        email=user.email,
        access_token=access_token,
        refresh_token=refresh_token,
    )


def get_user_client(user: AuthenticatedUser = Depends(get_current_user)) -> BackendClient:
    """Per-request client carrying the user's session (row-level security applies)."""
    return get_authenticated_client(user.access_token, user.refresh_token)
