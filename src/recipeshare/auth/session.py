"""
Session cookies.

The Supabase access and refresh tokens are kept in HTTP-only cookies so
server-rendered pages can act as the signed-in user.
"""

from starlette.responses import Response

from recipeshare.config import settings

ACCESS_TOKEN_COOKIE = "sb-access-token"
REFRESH_TOKEN_COOKIE = "sb-refresh-token"


def set_session_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    for name, value in ((ACCESS_TOKEN_COOKIE, access_token), (REFRESH_TOKEN_COOKIE, refresh_token)):
        response.set_cookie(
            name,
            value,
            max_age=settings.session_cookie_max_age,
            httponly=True,
            secure=settings.session_cookie_secure,
            samesite="lax",
        )


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    response.delete_cookie(REFRESH_TOKEN_COOKIE)
