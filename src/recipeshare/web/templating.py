"""Jinja2 templates shared by all route modules."""

from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from recipeshare.web.messages import read_message

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(request: Request, name: str, status_code: int = 200, **context):
    """Render a page; any redirect-encoded message in the URL is included."""
    context.setdefault("message", read_message(request.query_params))
    return templates.TemplateResponse(request, name, context, status_code=status_code)
