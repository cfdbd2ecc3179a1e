from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from app.core.dependencies import get_auth_service, get_current_token
from app.modules.auth.errors import (
    AuthError, CredentialStoreError, DeliveryError, UnregisteredEmailError,
    UsernameValidationError
)
from app.modules.auth.models import Session
from app.modules.auth.schemas import (
    SignInEmailRequest, SignInUsernameRequest, SignUpEmailRequest,
    SessionResponse, SendVerificationOTPRequest, SendVerificationOTPResponse,
    VerifyEmailRequest
)
from app.modules.auth.service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


def _session_response(session: Session) -> SessionResponse:
    return SessionResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        user_id=session.user_id,
        email=session.email,
        username=session.username,
        expires_at=session.expires_at,
    )


def _username_error(exc: UsernameValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": exc.message, "field": "username"})


def _dispatch_http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, UnregisteredEmailError):
        return HTTPException(status_code=404, detail=exc.message)
    if isinstance(exc, DeliveryError):
        return HTTPException(status_code=502, detail=exc.message)
    return HTTPException(status_code=503, detail="User lookup failed")


@router.post("/sign-in/email", response_model=SessionResponse)
async def sign_in_email(
    body: SignInEmailRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Sign in with email and password"""
    try:
        return _session_response(service.sign_in(body.email, body.password))
    except AuthError as e:
        raise HTTPException(status_code=401, detail=e.message)


@router.post("/sign-in/username", response_model=SessionResponse)
async def sign_in_username(
    body: SignInUsernameRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Sign in with username and password"""
    try:
        return _session_response(service.sign_in_with_username(body.username, body.password))
    except AuthError as e:
        raise HTTPException(status_code=401, detail=e.message)
    except CredentialStoreError as e:
        raise _dispatch_http_error(e)


@router.post("/sign-up/email", response_model=SessionResponse, status_code=201)
async def sign_up_email(
    body: SignUpEmailRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Create an account and sign it in"""
    try:
        return _session_response(service.sign_up(body.email, body.password, body.username))
    except UsernameValidationError as e:
        return _username_error(e)
    except AuthError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except CredentialStoreError as e:
        raise _dispatch_http_error(e)


@router.post("/email-otp/send-verification-otp", response_model=SendVerificationOTPResponse)
async def send_verification_otp(
    body: SendVerificationOTPRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Send a verification code to a registered email"""
    try:
        service.send_verification_otp(body.email)
    except (UnregisteredEmailError, DeliveryError, CredentialStoreError) as e:
        raise _dispatch_http_error(e)
    except AuthError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return SendVerificationOTPResponse()


@router.post("/email-otp/verify-email", response_model=SessionResponse)
async def verify_email(
    body: VerifyEmailRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Redeem a verification code"""
    try:
        return _session_response(service.verify_email_otp(body.email, body.otp))
    except AuthError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.post("/sign-out", status_code=200)
async def sign_out(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.sign_out()
    return {"message": "Logged out successfully"}
