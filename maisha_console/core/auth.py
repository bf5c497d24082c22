# maisha_console/core/auth.py
import enum
import logging
from collections.abc import Iterable

from fastapi import Depends, HTTPException, Request, status
from pydantic import ValidationError

from maisha_console.core.api_client import ApiClient, ApiError, get_api_client
from maisha_console.core.permissions import FEATURES, is_permitted
from maisha_console.core.storage import TOKEN_KEY, USER_KEY, ClientStorage
from maisha_console.repositories.auth_repo import AuthRepository
from maisha_console.schemas.auth import AuthUser

logger = logging.getLogger(__name__)


class AuthState(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class LoginRequired(Exception):
    """Raised by the route guard; the app turns it into a redirect to /login."""


class AuthContext:
    """
    Who is logged in and what they may do.

    One instance per request, built over the client storage so the session
    survives reloads. Writes go through to storage on every successful
    transition; failed login/register attempts change nothing.

    States:
      uninitialized -> loading -> authenticated | anonymous
      anonymous -> authenticated   (login/register success, restore)
      authenticated -> anonymous   (logout)
    """

    def __init__(
        self,
        storage: ClientStorage,
        api: ApiClient | None,
        repo: AuthRepository | None = None,
    ):
        self.storage = storage
        self.api = api
        self.repo = repo or AuthRepository()
        self.user: AuthUser | None = None
        self.state = AuthState.UNINITIALIZED

    # ----- Lifecycle -----

    def restore(self) -> None:
        """
        Load a previously stored user, synchronously.

        The token is not validated here; an expired token only shows up when
        the next backend call fails.
        """
        self.state = AuthState.LOADING
        raw = self.storage.get(USER_KEY)
        if raw:
            try:
                self.user = AuthUser.model_validate_json(raw)
            except ValidationError:
                logger.warning("Discarding malformed stored session")
                self.user = None
        self.state = AuthState.AUTHENTICATED if self.user else AuthState.ANONYMOUS

    @property
    def is_ready(self) -> bool:
        return self.state in (AuthState.AUTHENTICATED, AuthState.ANONYMOUS)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def _start_session(self, response: object) -> bool:
        if not isinstance(response, dict) or not isinstance(response.get("user"), dict):
            return False
        try:
            user = AuthUser.model_validate(response["user"])
        except ValidationError:
            return False

        self.user = user
        self.state = AuthState.AUTHENTICATED
        self.storage.set(USER_KEY, user.model_dump_json())
        token = response.get("token")
        if token:
            self.storage.set(TOKEN_KEY, str(token))
        return True

    # ----- Transitions -----

    async def login(self, email: str, password: str) -> bool:
        """
        Authenticate against the backend.

        Returns True and persists the session on success. Any failure
        (network, non-2xx, malformed body) returns False and leaves the
        current session untouched; this method never raises.
        """
        try:
            response = await self.repo.login(self.api, email, password)
        except ApiError as e:
            logger.warning("Login failed for %s: %s", email, e.message)
            return False
        if not self._start_session(response):
            logger.warning("Login for %s returned no usable user", email)
            return False
        logger.info("User %s logged in", email)
        return True

    async def register(self, name: str, email: str, password: str) -> bool:
        """Same contract as `login`, against the registration endpoint."""
        try:
            response = await self.repo.register(self.api, name, email, password)
        except ApiError as e:
            logger.warning("Registration failed for %s: %s", email, e.message)
            return False
        if not self._start_session(response):
            logger.warning("Registration for %s returned no usable user", email)
            return False
        logger.info("User %s registered", email)
        return True

    def logout(self) -> None:
        """Forget the session. Always succeeds, even when already anonymous."""
        if self.user is not None:
            logger.info("User %s logged out", self.user.email)
        self.user = None
        self.state = AuthState.ANONYMOUS
        self.storage.remove(USER_KEY)
        self.storage.remove(TOKEN_KEY)

    # ----- Predicates -----

    def has_role(self, roles: Iterable[str]) -> bool:
        """True iff a user with a role is present and the role is in `roles`."""
        if self.user is None or not self.user.role:
            return False
        return self.user.role in set(roles)

    def can_access_group(self, group_id: int | str | None) -> bool:
        """
        Group scoping.

          - super_admin: any group
          - group_admin / group_user: only their own group_id
          - member, no role, no user: never
        """
        if self.user is None:
            return False
        if self.user.role == "super_admin":
            return True
        if self.user.role in ("group_admin", "group_user"):
            if self.user.group_id is None or group_id is None:
                return False
            return str(self.user.group_id) == str(group_id)
        return False

    def can(self, feature: str) -> bool:
        return is_permitted(self.user, feature)


def get_auth(
    request: Request,
    api: ApiClient = Depends(get_api_client),
) -> AuthContext:
    """
    Resolve this request's AuthContext, restored from client storage.

    Anonymous sessions are allowed (login/register pages). The context is
    also kept on `request.state` so the page shell can read it.
    """
    auth = AuthContext(api.storage, api)
    auth.restore()
    request.state.auth = auth
    return auth


def require_session(auth: AuthContext = Depends(get_auth)) -> AuthContext:
    """
    Route guard: presence-of-session only.

    Raises:
        LoginRequired: if nobody is logged in (handled as redirect to /login).
    """
    if not auth.is_authenticated:
        raise LoginRequired()
    return auth


def require_feature(feature: str):
    """
    Dependency factory enforcing the capability table for one page.

    Raises:
        HTTPException(403): if the session's role may not use `feature`.
    """
    if feature not in FEATURES:
        raise ValueError(f"Unknown feature: {feature}")

    def _check(auth: AuthContext = Depends(require_session)) -> AuthContext:
        if not auth.can(feature):
            logger.info(
                "Access denied: %s (%s) -> %s",
                auth.user.email,
                auth.user.role,
                feature,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Your role may not open {FEATURES[feature].title}",
            )
        return auth

    return _check
