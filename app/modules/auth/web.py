"""
Server-rendered sign-in / create-account form.

Each POST rebuilds an AuthFormController from the submitted fields, so the
form carries its own mode in a hidden input and no server-side form state
survives between requests.
"""
from pathlib import Path

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from app.config import Settings
from app.core.dependencies import get_app_settings, get_auth_service
from app.modules.auth.form import AuthFormController, FormMode, FormState
from app.modules.auth.service import AuthService

router = APIRouter(prefix="/auth", tags=["auth-ui"])

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


def _render(request: Request, state: FormState, status_code: int = 200):
    return templates.TemplateResponse(
        request,
        "auth_form.html",
        {"form": state, "modes": FormMode},
        status_code=status_code,
    )


def _parse_mode(mode: str) -> FormMode:
    try:
        return FormMode(mode)
    except ValueError:
        return FormMode.SIGN_IN


@router.get("")
async def auth_form(request: Request, mode: str = FormMode.SIGN_IN.value):
    return _render(request, FormState(mode=_parse_mode(mode)))


@router.post("/mode")
async def switch_mode(
    request: Request,
    mode: str = Form(...),
    email: str = Form(default=""),
    service: AuthService = Depends(get_auth_service),
):
    """Switch tabs. Errors are cleared, the email is carried over."""
    controller = AuthFormController(service, state=FormState(email=email))
    controller.set_mode(_parse_mode(mode))
    return _render(request, controller.state)


@router.post("/toggle")
async def toggle_mode(
    request: Request,
    mode: str = Form(default=FormMode.SIGN_IN.value),
    email: str = Form(default=""),
    service: AuthService = Depends(get_auth_service),
):
    controller = AuthFormController(service, state=FormState(mode=_parse_mode(mode), email=email))
    controller.toggle_mode()
    return _render(request, controller.state)


@router.post("")
async def submit_form(
    request: Request,
    mode: str = Form(default=FormMode.SIGN_IN.value),
    email: str = Form(default=""),
    username: str = Form(default=""),
    password: str = Form(default=""),
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_app_settings),
):
    state = FormState(mode=_parse_mode(mode), email=email, username=username, password=password)
    response = RedirectResponse(url=settings.auth_success_redirect, status_code=303)

    def set_session_cookie(session):
        response.set_cookie(
            key=settings.session_cookie_name,
            value=session.access_token,
            httponly=True,
            secure=settings.is_production,
            samesite="lax",
        )

    controller = AuthFormController(service, on_success=set_session_cookie, state=state)
    if await controller.submit():
        return response

    # Never echo the password back into the page
    controller.state.password = ""
    status_code = 422 if controller.state.username_error else 400
    return _render(request, controller.state, status_code=status_code)
