"""Sign-up, sign-in and password pages."""

from fastapi import APIRouter, Depends, Form, Request

from recipeshare.auth import actions
from recipeshare.config import settings
from recipeshare.db.adapter import BackendClient
from recipeshare.web.auth import AuthenticatedUser, get_anon_client, get_current_user, get_user_client
from recipeshare.web.templating import render

router = APIRouter(tags=["auth"])


def _origin(request: Request) -> str:
    return request.headers.get("origin") or settings.site_url


@router.get("/sign-up")
async def sign_up_page(request: Request):
    return render(request, "sign_up.html")


@router.post("/sign-up")
async def sign_up(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    username: str = Form(""),
    client: BackendClient = Depends(get_anon_client),
):
    return actions.sign_up(client, email, password, username, _origin(request))


@router.get("/sign-in")
async def sign_in_page(request: Request):
    return render(request, "sign_in.html")


@router.post("/sign-in")
async def sign_in(
    email: str = Form(""),
    password: str = Form(""),
    client: BackendClient = Depends(get_anon_client),
):
    return actions.sign_in(client, email, password)


@router.post("/sign-out")
async def sign_out(client: BackendClient = Depends(get_user_client)):
    return actions.sign_out(client)


@router.get("/forgot-password")
async def forgot_password_page(request: Request):
    return render(request, "forgot_password.html")


@router.post("/forgot-password")
async def forgot_password(
    request: Request,
    email: str = Form(""),
    callback_url: str = Form("", alias="callbackUrl"),
    client: BackendClient = Depends(get_anon_client),
):
    return actions.forgot_password(client, email, _origin(request), callback_url or None)


@router.get("/protected/reset-password")
async def reset_password_page(
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
):
    return render(request, "reset_password.html", user=user)


@router.post("/protected/reset-password")
async def reset_password(
    password: str = Form(""),
    confirm_password: str = Form("", alias="confirmPassword"),
    client: BackendClient = Depends(get_user_client),
):
    return actions.reset_password(client, password, confirm_password)


@router.get("/auth/confirm")
async def confirm(
    token_hash: str | None = None,
    type: str | None = None,
    next: str | None = None,
    client: BackendClient = Depends(get_anon_client),
):
    """Landing point for links in confirmation and recovery emails."""
    return actions.confirm_email(client, token_hash, type, next)
