# app/routers/auth.py
from fastapi import APIRouter, Depends, status
from supabase import Client

from app.core.auth import require_auth
from app.core.redirects import get_safe_redirect_url
from app.core.session_store import SessionStore
from app.dependencies import (
    get_access_token,
    get_auth_service,
    get_gateway,
    get_session_store,
)
from app.routers._results import unwrap
from app.schemas.auth import EmailRequest, SignInRequest, SignUpRequest, SignUpResult
from app.schemas.profile import ProfileRead, ProfileUpdate
from app.schemas.session import SessionUser
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup", response_model=SignUpResult, status_code=status.HTTP_201_CREATED)
def sign_up(
    payload: SignUpRequest,
    client: Client | None = Depends(get_gateway),
    store: SessionStore = Depends(get_session_store),
    service: AuthService = Depends(get_auth_service),
):
    """
    Register a new account.

    `confirmation_required=true` means the user must click the email link
    before signing in.
    """
    return unwrap(service.sign_up(client, store, **payload.model_dump()))


@router.post("/signin")
def sign_in(
    payload: SignInRequest,
    client: Client | None = Depends(get_gateway),
    store: SessionStore = Depends(get_session_store),
    service: AuthService = Depends(get_auth_service),
):
    """
    Sign in with email/password.

    Returns the session user (role read fresh from profiles), the
    provider access token to send as `Authorization: Bearer ...` and the
    page to open next. `redirect` is honored only when it is on the
    allow-list; otherwise admins land on admin/index.html and everyone
    else on dashboard.html.
    """
    user = unwrap(service.sign_in(client, store, payload.email, payload.password))
    landing = "admin/index.html" if user.is_admin else "dashboard.html"
    return {
        "user": user,
        "access_token": service.get_access_token(client),
        "redirect": get_safe_redirect_url(payload.redirect) or landing,
    }


@router.post("/signout", status_code=status.HTTP_204_NO_CONTENT)
def sign_out(
    token: str | None = Depends(get_access_token),
    client: Client | None = Depends(get_gateway),
    store: SessionStore = Depends(get_session_store),
    service: AuthService = Depends(get_auth_service),
):
    """Idempotent; revokes the bearer token when one is sent."""
    service.sign_out(client, store, access_token=token)


@router.post("/password-reset", status_code=status.HTTP_202_ACCEPTED)
def request_password_reset(
    payload: EmailRequest,
    client: Client | None = Depends(get_gateway),
    service: AuthService = Depends(get_auth_service),
):
    unwrap(service.request_password_reset(client, payload.email, payload.redirect_to))
    return {"status": "sent"}


@router.post("/resend-confirmation", status_code=status.HTTP_202_ACCEPTED)
def resend_confirmation(
    payload: EmailRequest,
    client: Client | None = Depends(get_gateway),
    service: AuthService = Depends(get_auth_service),
):
    unwrap(service.resend_confirmation_email(client, payload.email))
    return {"status": "sent"}


@router.get("/google")
def google_sign_in(
    client: Client | None = Depends(get_gateway),
    service: AuthService = Depends(get_auth_service),
):
    """Provider URL to redirect the browser to for Google sign-in."""
    return {"url": unwrap(service.sign_in_with_google(client))}


@router.get("/me", response_model=SessionUser)
def read_me(current_user: SessionUser = Depends(require_auth)):
    """
    Return the authenticated user's session projection.

    Auth:
      - Requires valid Supabase JWT.
    """
    return current_user


@router.patch("/me", response_model=ProfileRead)
def update_me(
    payload: ProfileUpdate,
    client: Client | None = Depends(get_gateway),
    store: SessionStore = Depends(get_session_store),
    current_user: SessionUser = Depends(require_auth),
    service: AuthService = Depends(get_auth_service),
):
    """
    Partial profile update (full_name, phone, nationality).

    Auth:
      - Requires valid Supabase JWT.
    """
    store.set(current_user)
    return unwrap(service.update_profile(client, store, current_user.id, payload))
