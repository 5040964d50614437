from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from typing import Optional
import logging

from keno_admin.config import settings
from keno_admin.core.dependencies import (
    get_authorization, get_authorization_resolver, get_document_store,
    get_identity_client, get_request_token
)
from keno_admin.core.errors import AuthorizationError, delete_auth_cookies
from keno_admin.core.rate_limit import limiter
from keno_admin.database.document_store import DocumentStore
from keno_admin.database.identity_client import IdentityClient
from keno_admin.modules.auth.resolver import AuthorizationResolver
from keno_admin.modules.auth.schemas import (
    LoginRequest, RecoveryRequest, RecoveryConfirmRequest, TokenResponse,
    AuthorizationPayload, ProfileResponse, ProfileUpdate
)
from keno_admin.modules.auth.service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(
    identity_client: IdentityClient = Depends(get_identity_client),
    store: DocumentStore = Depends(get_document_store),
    resolver: AuthorizationResolver = Depends(get_authorization_resolver)
) -> AuthService:
    return AuthService(identity_client, store, resolver)


def _set_session_cookies(response: Response, access_token: str, refresh_token: Optional[str]) -> None:
    cookie_options = {"httponly": True, "secure": settings.cookie_secure, "samesite": "lax", "path": "/"}
    response.set_cookie(settings.session_cookie_name, access_token, **cookie_options)
    if refresh_token:
        response.set_cookie(settings.refresh_cookie_name, refresh_token, **cookie_options)


@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.auth_rate_limit)
async def login(
    request: Request,
    response: Response,
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login, resolve authorization and start a cookie session"""
    session, payload = service.login(login_data)
    _set_session_cookies(response, session.access_token, session.refresh_token)
    return TokenResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        authorization=payload
    )


@router.post("/logout", status_code=200)
async def logout(
    response: Response,
    token: Optional[str] = Depends(get_request_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and clear session cookies"""
    service.logout(token)
    delete_auth_cookies(response)
    return {"message": "Logged out successfully"}


@router.post("/recovery", status_code=202)
@limiter.limit(settings.auth_rate_limit)
async def request_recovery(
    request: Request,
    recovery_data: RecoveryRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Send a password recovery e-mail if the account exists"""
    service.request_recovery(recovery_data.email)
    return {"message": "If the account exists, a recovery e-mail has been sent"}


@router.post("/recovery/confirm", status_code=200)
async def confirm_recovery(
    recovery_data: RecoveryConfirmRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Set a new password from a recovery link"""
    service.confirm_recovery(recovery_data)
    return {"message": "Password updated"}


@router.get("/me", response_model=AuthorizationPayload)
async def get_current_authorization(
    token: Optional[str] = Depends(get_request_token),
    resolver: AuthorizationResolver = Depends(get_authorization_resolver)
):
    """Resolve the caller's user, team, role and permissions (for frontend UI)"""
    try:
        return resolver.resolve(token)
    except AuthorizationError:
        raise
    except Exception as e:
        logger.exception("Authorization resolution failed")
        return JSONResponse(status_code=500, content={"error": str(e) or "Internal Server Error"})


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    payload: AuthorizationPayload = Depends(get_authorization),
    token: Optional[str] = Depends(get_request_token),
    service: AuthService = Depends(get_auth_service)
):
    """Get the caller's own profile"""
    return service.get_profile(token)


@router.patch("/profile", response_model=ProfileResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    payload: AuthorizationPayload = Depends(get_authorization),
    token: Optional[str] = Depends(get_request_token),
    service: AuthService = Depends(get_auth_service)
):
    """Update the caller's name, phone or password"""
    return service.update_profile(token, profile_data)
