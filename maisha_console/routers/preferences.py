# maisha_console/routers/preferences.py
from fastapi import APIRouter, Depends, Form
from fastapi.responses import RedirectResponse

from maisha_console.core.api_client import get_storage
from maisha_console.core.storage import THEME_KEY, ClientStorage

router = APIRouter(tags=["Preferences"])


def _safe_next(next_url: str) -> str:
    # only same-site paths
    if next_url.startswith("/") and not next_url.startswith("//"):
        return next_url
    return "/dashboard"


@router.post("/theme")
def toggle_theme(
    next: str = Form("/dashboard"),
    storage: ClientStorage = Depends(get_storage),
):
    """Flip between light and dark; stored alongside the session."""
    current = storage.get(THEME_KEY) or "light"
    storage.set(THEME_KEY, "dark" if current == "light" else "light")
    return RedirectResponse(_safe_next(next), status_code=303)
