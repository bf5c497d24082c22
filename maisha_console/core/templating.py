# maisha_console/core/templating.py
from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.templating import Jinja2Templates

from maisha_console.core.config import get_settings
from maisha_console.core.notifications import pop_notifications
from maisha_console.core.permissions import navigation_for
from maisha_console.core.storage import THEME_KEY, ClientStorage
from maisha_console.schemas.payment import payment_status_text, payment_status_tone

settings = get_settings()

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["project_name"] = settings.PROJECT_NAME
templates.env.globals["currency"] = settings.CURRENCY
templates.env.filters["payment_status"] = payment_status_text
templates.env.filters["payment_tone"] = payment_status_tone


def _money(value: Any) -> str:
    try:
        return f"{float(value or 0):,.0f}"
    except (TypeError, ValueError):
        return str(value)


templates.env.filters["money"] = _money


def render(
    request: Request,
    name: str,
    context: dict[str, Any] | None = None,
    status_code: int = 200,
):
    """
    Render a page inside the console shell.

    Adds the session user, the role-filtered navigation, the theme and any
    queued notifications to the template context.
    """
    auth = getattr(request.state, "auth", None)
    user = auth.user if auth is not None else None
    ctx: dict[str, Any] = {
        "user": user,
        "navigation": navigation_for(user),
        "current_path": request.url.path,
        "theme": ClientStorage(request.session).get(THEME_KEY) or "light",
        "notifications": pop_notifications(request),
    }
    if context:
        ctx.update(context)
    return templates.TemplateResponse(request, name, ctx, status_code=status_code)
