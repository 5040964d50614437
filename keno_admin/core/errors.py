"""
Authorization error taxonomy.

Every code maps to an HTTP status. Codes raised while resolving the caller's
authorization revoke the session: the response deletes the auth cookies so the
client has to log in again.
"""

from enum import Enum
from typing import Any, Dict, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from keno_admin.config import settings


class ErrorCode(str, Enum):
    UNAUTHORIZED = "UNAUTHORIZED"
    EMAIL_NOT_VERIFIED = "EMAIL_NOT_VERIFIED"
    STAFF_NOT_FOUND = "STAFF_NOT_FOUND"
    ACCOUNT_BLOCKED = "ACCOUNT_BLOCKED"
    ACCOUNT_NOT_MEMBER = "ACCOUNT_NOT_MEMBER"
    ACCOUNT_NO_ROLE = "ACCOUNT_NO_ROLE"
    ROLE_NOT_FOUND = "ROLE_NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    SYSTEM_ROLE_IMMUTABLE = "SYSTEM_ROLE_IMMUTABLE"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self]

    @property
    def revokes_session(self) -> bool:
        return self not in (ErrorCode.PERMISSION_DENIED, ErrorCode.SYSTEM_ROLE_IMMUTABLE)


_HTTP_STATUS = {
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.EMAIL_NOT_VERIFIED: 403,
    ErrorCode.STAFF_NOT_FOUND: 404,
    ErrorCode.ACCOUNT_BLOCKED: 403,
    ErrorCode.ACCOUNT_NOT_MEMBER: 403,
    ErrorCode.ACCOUNT_NO_ROLE: 403,
    ErrorCode.ROLE_NOT_FOUND: 403,
    ErrorCode.PERMISSION_DENIED: 403,
    ErrorCode.SYSTEM_ROLE_IMMUTABLE: 403,
}


class AuthorizationError(Exception):
    def __init__(self, code: ErrorCode, message: str, status: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status = status

    @property
    def http_status(self) -> int:
        return self.code.http_status

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message, "code": self.code.value}
        if self.status is not None:
            body["status"] = self.status
        return body


def delete_auth_cookies(response: Response) -> None:
    for name in settings.auth_cookie_names:
        response.delete_cookie(name, path="/")


def authorization_error_response(exc: AuthorizationError) -> JSONResponse:
    response = JSONResponse(status_code=exc.http_status, content=exc.to_dict())
    if exc.code.revokes_session:
        delete_auth_cookies(response)
    return response


async def authorization_error_handler(request: Request, exc: AuthorizationError) -> JSONResponse:
    return authorization_error_response(exc)
