"""
Recipeshare Web - FastAPI application.

Server-rendered pages; Supabase handles auth, data and image storage.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse

from recipeshare import __version__
from recipeshare.auth.session import set_session_cookies
from recipeshare.errors import BackendError, NotAuthenticatedError, RecipeNotFoundError, UserNotFoundError
from recipeshare.web.auth import REFRESHED_SESSION
from recipeshare.web.auth_routes import router as auth_router
from recipeshare.web.messages import encoded_redirect
from recipeshare.web.recipe_routes import router as recipe_router
from recipeshare.web.social_routes import router as social_router
from recipeshare.web.templating import render

logger = logging.getLogger(__name__)

HOME_PATH = "/protected"
BACKEND_FAILED = "Päring ebaõnnestus, proovi hiljem uuesti"
USER_NOT_FOUND = "Kasutajat ei leitud"

app = FastAPI(title="Recipeshare", version=__version__)

app.include_router(auth_router)
app.include_router(recipe_router)
app.include_router(social_router)


# =============================================================================
# Session refresh
# =============================================================================


@app.middleware("http")
async def write_refreshed_session(request: Request, call_next):
    """Store tokens renewed during the request in the session cookies."""
    response = await call_next(request)
    refreshed = getattr(request.state, REFRESHED_SESSION, None)
    if refreshed:
        set_session_cookies(response, *refreshed)
    return response


# =============================================================================
# Error handling
# =============================================================================


@app.exception_handler(NotAuthenticatedError)
async def not_authenticated(request: Request, exc: NotAuthenticatedError):
    """Protected pages bounce to the sign-in page."""
    return RedirectResponse("/sign-in", status_code=303)


@app.exception_handler(RecipeNotFoundError)
async def recipe_not_found(request: Request, exc: RecipeNotFoundError):
    return encoded_redirect("error", HOME_PATH, "Retsepti ei leitud")


@app.exception_handler(UserNotFoundError)
async def user_not_found(request: Request, exc: UserNotFoundError):
    return render(request, "error.html", status_code=404, error=USER_NOT_FOUND)


@app.exception_handler(BackendError)
async def backend_failed(request: Request, exc: BackendError):
    logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    if request.url.path == HOME_PATH:
        # Redirecting home would loop
        return render(request, "error.html", status_code=503, error=BACKEND_FAILED)
    return encoded_redirect("error", HOME_PATH, BACKEND_FAILED)


# =============================================================================
# Misc
# =============================================================================


@app.get("/")
async def index():
    return RedirectResponse(HOME_PATH, status_code=303)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
