# maisha_console/routers/auth.py
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from maisha_console.core.auth import AuthContext, get_auth
from maisha_console.core.notifications import notify, notify_error
from maisha_console.core.templating import render
from maisha_console.schemas.auth import LoginForm, RegisterForm

router = APIRouter(tags=["Auth"])


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    field = ".".join(str(p) for p in err.get("loc", ())) or "form"
    return f"{field}: {err.get('msg')}"


@router.get("/login")
def login_page(request: Request, auth: AuthContext = Depends(get_auth)):
    if auth.is_authenticated:
        return RedirectResponse("/dashboard", status_code=303)
    return render(request, "login.html")


@router.post("/login")
async def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    auth: AuthContext = Depends(get_auth),
):
    """
    Submit the login form.

    Validation happens before the backend is called; any failure re-renders
    the form with a "Login failed" notification.
    """
    try:
        form = LoginForm(email=email, password=password)
    except ValidationError as e:
        notify_error(request, _first_error(e), title="Login failed")
        return render(request, "login.html", {"email": email}, status_code=400)

    if not await auth.login(form.email, form.password):
        notify_error(request, "Invalid email or password", title="Login failed")
        return render(request, "login.html", {"email": email}, status_code=401)

    notify(request, "Welcome back", auth.user.name or auth.user.email)
    return RedirectResponse("/dashboard", status_code=303)


@router.get("/register")
def register_page(request: Request, auth: AuthContext = Depends(get_auth)):
    if auth.is_authenticated:
        return RedirectResponse("/dashboard", status_code=303)
    return render(request, "register.html")


@router.post("/register")
async def register(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    auth: AuthContext = Depends(get_auth),
):
    ctx = {"name": name, "email": email}
    try:
        form = RegisterForm(name=name, email=email, password=password)
    except ValidationError as e:
        notify_error(request, _first_error(e), title="Registration failed")
        return render(request, "register.html", ctx, status_code=400)

    if not await auth.register(form.name, form.email, form.password):
        notify_error(request, "Could not create the account", title="Registration failed")
        return render(request, "register.html", ctx, status_code=400)

    notify(request, "Account created", form.email)
    return RedirectResponse("/dashboard", status_code=303)


@router.post("/logout")
def logout(request: Request, auth: AuthContext = Depends(get_auth)):
    auth.logout()
    notify(request, "Logged out")
    return RedirectResponse("/login", status_code=303)
