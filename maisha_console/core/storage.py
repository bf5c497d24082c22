# maisha_console/core/storage.py
from collections.abc import MutableMapping
from typing import Any

# Slot names are fixed; Auth Context writes them, the API client reads the token.
USER_KEY = "maisha_user"
TOKEN_KEY = "maisha_token"
CUSTOMER_INFO_TOKEN_KEY = "mopay_token"
THEME_KEY = "theme"


class ClientStorage:
    """
    Durable client-side key/value slots.

    In the running console the backing mapping is the signed session cookie
    (`request.session`), so everything written here travels back to the
    browser and survives page reloads. Tests pass a plain dict.

    Values are strings, like browser localStorage.
    """

    def __init__(self, backing: MutableMapping[str, Any] | None = None):
        self._backing = backing if backing is not None else {}

    def get(self, key: str) -> str | None:
        value = self._backing.get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        self._backing[key] = value

    def remove(self, key: str) -> None:
        """Delete a slot. No-op if it is already empty."""
        self._backing.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
