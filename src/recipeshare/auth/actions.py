"""
Auth actions.

Each action is one call to Supabase Auth followed by a redirect that
carries the outcome. Nothing is retried and nothing is kept between
requests apart from the session cookies set on success.

Sign-up sends the username as user metadata; the `handle_new_user`
database trigger creates the matching `users` row in the same transaction
as the auth user.
"""

import logging

from fastapi.responses import RedirectResponse
from supabase import AuthError

from recipeshare.auth.session import clear_session_cookies, set_session_cookies
from recipeshare.db.adapter import BackendClient
from recipeshare.db.social import get_user_by_username
from recipeshare.errors import BackendError
from recipeshare.web.messages import encoded_redirect

logger = logging.getLogger(__name__)

SIGN_UP_PATH = "/sign-up"
SIGN_IN_PATH = "/sign-in"
FORGOT_PASSWORD_PATH = "/forgot-password"
RESET_PASSWORD_PATH = "/protected/reset-password"
HOME_PATH = "/protected"

SIGN_UP_REQUIRED = "Email, parool, ja kasutajanimi on vajalikud"
SIGN_UP_USERNAME_TAKEN = "Kasutajanimi on juba kasutusel"
SIGN_UP_SUCCESS = "Tänud liitumast! Palun kontrolli oma emaili kinnituse jaoks."
EMAIL_REQUIRED = "Email vajalik"
FORGOT_PASSWORD_FAILED = "Parooli taastamine nurjus"
FORGOT_PASSWORD_SUCCESS = "Parooli taastamise link saadetud emailile."
PASSWORD_REQUIRED = "Parool vajalik"
PASSWORDS_DIFFER = "Paroolid ei ühti"
RESET_PASSWORD_FAILED = "Parooli uuendamine nurjus"
RESET_PASSWORD_SUCCESS = "Parool uuendatud"
CONFIRM_FAILED = "Kinnituslink on aegunud või vigane"

# Auth error returned when the handle_new_user trigger fails, e.g. on a
# duplicate username
TRIGGER_REJECTED = "Database error saving new user"


def safe_next_path(path: str | None, default: str) -> str:
    """Only allow same-site relative redirect targets."""
    if path and path.startswith("/") and not path.startswith("//"):
        return path
    return default


def _redirect(path: str) -> RedirectResponse:
    return RedirectResponse(path, status_code=303)


def _username_taken(client: BackendClient, username: str) -> bool:
    """Whether a failed sign-up collided with an existing username."""
    try:
        return get_user_by_username(client, username) is not None
    except BackendError:
        return False


# =============================================================================
# Sign up / sign in / sign out
# =============================================================================


def sign_up(
    client: BackendClient,
    email: str | None,
    password: str | None,
    username: str | None,
    origin: str,
) -> RedirectResponse:
    """
    Register a new user.

    The provider's error message is passed to the page unchanged, e.g.
    "User already registered" for a duplicate email. Only when the profile
    trigger rejected the row and the username already exists is the
    friendlier "username taken" message shown instead.
    """
    email = (email or "").strip()
    username = (username or "").strip()

    if not email or not password or not username:
        return encoded_redirect("error", SIGN_UP_PATH, SIGN_UP_REQUIRED)

    try:
        response = client.auth.sign_up({
            "email": email,
            "password": password,
            "options": {
                "data": {"username": username},
                "email_redirect_to": f"{origin}/auth/confirm",
            },
        })
    except AuthError as e:
        logger.error(f"Sign-up failed for {email}: {e.message}")
        if e.message == TRIGGER_REJECTED and _username_taken(client, username):
            return encoded_redirect("error", SIGN_UP_PATH, SIGN_UP_USERNAME_TAKEN)
        return encoded_redirect("error", SIGN_UP_PATH, e.message)

    if response.user:
        logger.info(f"User {response.user.id} signed up as {username}")

    return encoded_redirect("success", SIGN_UP_PATH, SIGN_UP_SUCCESS)


def sign_in(client: BackendClient, email: str | None, password: str | None) -> RedirectResponse:
    """Sign in with email and password and start a cookie session."""
    try:
        response = client.auth.sign_in_with_password({
            "email": email or "",
            "password": password or "",
        })
    except AuthError as e:
        return encoded_redirect("error", SIGN_IN_PATH, e.message)

    redirect = _redirect(HOME_PATH)
    set_session_cookies(redirect, response.session.access_token, response.session.refresh_token)
    return redirect


def sign_out(client: BackendClient) -> RedirectResponse:
    """End the session. Cookies are cleared even if the provider call fails."""
    try:
        client.auth.sign_out()
    except AuthError as e:
        logger.warning(f"Sign-out failed: {e.message}")

    redirect = _redirect(SIGN_IN_PATH)
    clear_session_cookies(redirect)
    return redirect


# =============================================================================
# Password recovery
# =============================================================================


def forgot_password(
    client: BackendClient,
    email: str | None,
    origin: str,
    callback_url: str | None = None,
) -> RedirectResponse:
    """Send a password recovery email."""
    email = (email or "").strip()
    if not email:
        return encoded_redirect("error", FORGOT_PASSWORD_PATH, EMAIL_REQUIRED)

    try:
        client.auth.reset_password_for_email(
            email,
            {"redirect_to": f"{origin}/auth/confirm?next={RESET_PASSWORD_PATH}"},
        )
    except AuthError as e:
        logger.error(f"Password recovery failed for {email}: {e.message}")
        return encoded_redirect("error", FORGOT_PASSWORD_PATH, FORGOT_PASSWORD_FAILED)

    if callback_url:
        return _redirect(safe_next_path(callback_url, FORGOT_PASSWORD_PATH))

    return encoded_redirect("success", FORGOT_PASSWORD_PATH, FORGOT_PASSWORD_SUCCESS)


def reset_password(
    client: BackendClient,
    password: str | None,
    confirm_password: str | None,
) -> RedirectResponse:
    """Set a new password for the signed-in user."""
    if not password or not confirm_password:
        return encoded_redirect("error", RESET_PASSWORD_PATH, PASSWORD_REQUIRED)

    if password != confirm_password:
        return encoded_redirect("error", RESET_PASSWORD_PATH, PASSWORDS_DIFFER)

    try:
        client.auth.update_user({"password": password})
    except AuthError as e:
        logger.error(f"Password update failed: {e.message}")
        return encoded_redirect("error", RESET_PASSWORD_PATH, RESET_PASSWORD_FAILED)

    return encoded_redirect("success", RESET_PASSWORD_PATH, RESET_PASSWORD_SUCCESS)


def confirm_email(
    client: BackendClient,
    token_hash: str | None,
    otp_type: str | None,
    next_path: str | None = None,
) -> RedirectResponse:
    """
    Verify the one-time token from a sign-up or recovery email.

    On success the session cookies are set and the user lands on
    `next_path` (recovery defaults to the reset-password page).
    """
    otp_type = otp_type or "email"
    default = RESET_PASSWORD_PATH if otp_type == "recovery" else HOME_PATH

    if not token_hash:
        return encoded_redirect("error", SIGN_IN_PATH, CONFIRM_FAILED)

    try:
        response = client.auth.verify_otp({"token_hash": token_hash, "type": otp_type})
    except AuthError as e:
        logger.warning(f"Email confirmation failed: {e.message}")
        return encoded_redirect("error", SIGN_IN_PATH, CONFIRM_FAILED)

    if not response.session:
        return encoded_redirect("error", SIGN_IN_PATH, CONFIRM_FAILED)

    redirect = _redirect(safe_next_path(next_path, default))
    set_session_cookies(redirect, response.session.access_token, response.session.refresh_token)
    return redirect
