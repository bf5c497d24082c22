# maisha_console/core/notifications.py
from typing import Literal

from fastapi import Request

_FLASH_KEY = "_notifications"

Variant = Literal["default", "destructive"]


def notify(
    request: Request,
    title: str,
    description: str = "",
    variant: Variant = "default",
) -> None:
    """
    Queue a transient notification ("toast") for the next rendered page.

    Stored in the session so it survives the redirect after a POST.
    """
    queue = list(request.session.get(_FLASH_KEY, []))
    queue.append({"title": title, "description": description, "variant": variant})
    request.session[_FLASH_KEY] = queue


def notify_error(request: Request, description: str, title: str = "Error") -> None:
    notify(request, title, description, "destructive")


def pop_notifications(request: Request) -> list[dict[str, str]]:
    """Return and clear queued notifications."""
    return request.session.pop(_FLASH_KEY, [])
