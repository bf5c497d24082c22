# maisha_console/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from maisha_console.core.api_client import create_http_client
from maisha_console.core.auth import AuthContext, LoginRequired
from maisha_console.core.config import get_settings
from maisha_console.core.storage import ClientStorage
from maisha_console.core.templating import render

# Routers
from maisha_console.routers.auth import router as auth_router
from maisha_console.routers.dashboard import router as dashboard_router
from maisha_console.routers.groups import router as groups_router
from maisha_console.routers.members import router as members_router
from maisha_console.routers.member_portal import router as member_portal_router
from maisha_console.routers.wallets import router as wallets_router
from maisha_console.routers.deductions import router as deductions_router
from maisha_console.routers.withdrawals import router as withdrawals_router
from maisha_console.routers.group_policy import router as group_policy_router
from maisha_console.routers.upload import router as upload_router
from maisha_console.routers.reports import router as reports_router
from maisha_console.routers.payments import router as payments_router
from maisha_console.routers.search import router as search_router
from maisha_console.routers.preferences import router as preferences_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Open the shared HTTP client used for every backend call.

    Shutdown:
      - Close it.
    """
    logger.info("Startup: backend API at %s", settings.API_BASE)
    app.state.http_client = create_http_client()
    try:
        yield
    finally:
        await app.state.http_client.aclose()
        logger.info("Shutdown: backend HTTP client closed")


app = FastAPI(
    title=settings.PROJECT_NAME or "Maisha App",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE,
    max_age=settings.SESSION_MAX_AGE,
    same_site="lax",
)


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Error pages inside the console shell.

    403 -> access denied, 404 -> not found, anything else -> generic error.
    """
    if getattr(request.state, "auth", None) is None:
        # unmatched routes never resolved the session dependency
        auth = AuthContext(ClientStorage(request.session), api=None)
        auth.restore()
        request.state.auth = auth
    if exc.status_code == status.HTTP_403_FORBIDDEN:
        return render(
            request,
            "errors/access_denied.html",
            {"detail": exc.detail},
            status_code=exc.status_code,
        )
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return render(request, "errors/not_found.html", status_code=exc.status_code)
    return render(
        request,
        "errors/error.html",
        {"detail": exc.detail},
        status_code=exc.status_code,
    )


app.include_router(auth_router)
app.include_router(dashboard_router)
app.include_router(groups_router)
app.include_router(members_router)
app.include_router(member_portal_router)
app.include_router(wallets_router)
app.include_router(deductions_router)
app.include_router(withdrawals_router)
app.include_router(group_policy_router)
app.include_router(upload_router)
app.include_router(reports_router)
app.include_router(payments_router)
app.include_router(search_router)
app.include_router(preferences_router)


@app.get("/")
def root():
    """Entry point: everyone starts at the login screen."""
    return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok", "service": "maisha-console"}
