"""
Core dependencies for route protection and permission checking
"""

from fastapi import Depends, Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import Client
from typing import Any, Dict, Optional
import logging

from keno_admin.config import settings
from keno_admin.core.errors import AuthorizationError, ErrorCode
from keno_admin.core.permission_gate import PermissionGate
from keno_admin.database.supabase_client import get_supabase, get_service_supabase
from keno_admin.database.document_store import DocumentStore
from keno_admin.database.identity_client import IdentityClient
from keno_admin.modules.auth.resolver import AuthorizationResolver
from keno_admin.modules.auth.schemas import AuthorizationPayload

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _get_request_cache(request: Request) -> Dict[str, Any]:
    """Return request-scoped cache for access data (the resolved authorization payload)."""
    if not hasattr(request.state, "access_cache"):
        request.state.access_cache = {}
    return request.state.access_cache


def get_document_store(supabase: Client = Depends(get_service_supabase)) -> DocumentStore:
    return DocumentStore(supabase)


def get_identity_client(
    public: Client = Depends(get_supabase),
    admin: Client = Depends(get_service_supabase)
) -> IdentityClient:
    return IdentityClient(public, admin)


def get_authorization_resolver(
    identity_client: IdentityClient = Depends(get_identity_client),
    store: DocumentStore = Depends(get_document_store)
) -> AuthorizationResolver:
    return AuthorizationResolver(identity_client, store)


def get_request_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> Optional[str]:
    """Bearer token from the Authorization header, falling back to the session cookie"""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.session_cookie_name)


def get_authorization(
    request: Request,
    token: Optional[str] = Depends(get_request_token),
    resolver: AuthorizationResolver = Depends(get_authorization_resolver)
) -> AuthorizationPayload:
    """Resolve the caller's authorization once per request"""
    cache = _get_request_cache(request)
    if "authorization" not in cache:
        cache["authorization"] = resolver.resolve(token)
    return cache["authorization"]


def get_permission_gate(
    payload: AuthorizationPayload = Depends(get_authorization)
) -> PermissionGate:
    return PermissionGate(payload)


def require_permission(*required_permissions: str):
    """Factory function to create permission check dependency"""
    def check_permission(
        gate: PermissionGate = Depends(get_permission_gate)
    ) -> AuthorizationPayload:
        """Dependency to check if user holds every required permission"""
        if not gate.has_all_permissions(required_permissions):
            logger.info(
                f"User {gate.payload.user.id} denied; requires {', '.join(required_permissions)}"
            )
            raise AuthorizationError(
                ErrorCode.PERMISSION_DENIED,
                f"Insufficient permissions. Required: {', '.join(required_permissions)}"
            )
        return gate.payload
    return check_permission
