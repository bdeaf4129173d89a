"""
Redirect-encoded messages.

Form actions report their outcome by redirecting to a page with the status
and a human-readable message in the query string:

    /sign-up?error=User%20already%20registered
    /forgot-password?success=Parooli%20taastamise%20link%20saadetud%20emailile.

The receiving page decodes it with `read_message()` and renders it.
"""

from typing import Literal, Mapping
from urllib.parse import quote, urlencode

from fastapi.responses import RedirectResponse
from pydantic import BaseModel

Status = Literal["success", "error"]

# Query keys a page looks at, in priority order
MESSAGE_KEYS = ("error", "success", "message")


class Message(BaseModel):
    """Decoded form message."""
    status: Literal["success", "error", "message"]
    text: str

    @property
    def is_error(self) -> bool:
        return self.status == "error"


def encoded_redirect_url(status: Status, path: str, message: str) -> str:
    separator = "&" if "?" in path else "?"
    return f"{path}{separator}{urlencode({status: message}, quote_via=quote)}"


def encoded_redirect(status: Status, path: str, message: str) -> RedirectResponse:
    """Redirect (303 See Other) to `path` carrying a status and message."""
    return RedirectResponse(encoded_redirect_url(status, path, message), status_code=303)


def read_message(query_params: Mapping[str, str]) -> Message | None:
    """Decode the message a redirect left in the query string, if any."""
    for key in MESSAGE_KEYS:
        text = query_params.get(key)
        if text:
            return Message(status=key, text=text)
    return None
