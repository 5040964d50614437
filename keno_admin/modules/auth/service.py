from fastapi import HTTPException
from typing import Optional, Tuple
import logging

from keno_admin.config import Settings, settings as default_settings
from keno_admin.core.errors import AuthorizationError, ErrorCode
from keno_admin.database.document_store import DocumentStore
from keno_admin.database.identity_client import Identity, IdentityClient, IdentitySession
from keno_admin.modules.auth.resolver import AuthorizationResolver
from keno_admin.modules.auth.schemas import (
    LoginRequest, RecoveryConfirmRequest, AuthorizationPayload, ProfileResponse, ProfileUpdate
)

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        identity_client: IdentityClient,
        store: DocumentStore,
        resolver: AuthorizationResolver,
        settings: Optional[Settings] = None
    ):
        self.identity_client = identity_client
        self.store = store
        self.resolver = resolver
        self.settings = settings or default_settings

    def login(self, login_data: LoginRequest) -> Tuple[IdentitySession, AuthorizationPayload]:
        """Sign in and resolve the new session's authorization.

        A session that fails resolution is signed out again before the error is raised.
        """
        try:
            session = self.identity_client.sign_in(login_data.email, login_data.password)
        except Exception as e:
            error_message = str(e)
            if "banned" in error_message.lower():
                raise AuthorizationError(ErrorCode.ACCOUNT_BLOCKED, "Account is disabled")
            if "not confirmed" in error_message.lower():
                raise AuthorizationError(ErrorCode.EMAIL_NOT_VERIFIED, "Email not verified")
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            raise HTTPException(status_code=500, detail=f"Login failed: {error_message}")

        try:
            payload = self.resolver.resolve(session.access_token)
        except AuthorizationError:
            self.identity_client.sign_out(session.access_token)
            raise
        logger.info(f"User {session.identity.id} logged in as {payload.role.name}")
        return session, payload

    def logout(self, token: Optional[str]) -> bool:
        if not token:
            return False
        return self.identity_client.sign_out(token)

    def request_recovery(self, email: str) -> None:
        """Send the recovery e-mail; failures are logged and never reported to the caller"""
        try:
            self.identity_client.send_recovery(email, self.settings.password_reset_redirect_url)
        except Exception as e:
            logger.warning(f"Password recovery request failed: {e}")

    def confirm_recovery(self, data: RecoveryConfirmRequest) -> None:
        try:
            identity = self.identity_client.complete_recovery(data.token_hash, data.password)
        except Exception as e:
            logger.info(f"Password recovery rejected: {e}")
            raise HTTPException(status_code=400, detail="Invalid or expired recovery link")
        logger.info(f"Password reset completed for {identity.id}")

    def get_profile(self, token: str) -> ProfileResponse:
        identity = self.resolver.resolve_identity(token)
        return self._to_profile(identity)

    def update_profile(self, token: str, data: ProfileUpdate) -> ProfileResponse:
        """Update the caller's own identity and mirror name/phone onto the staff record"""
        identity = self.resolver.resolve_identity(token)

        if data.password and not self.identity_client.verify_password(identity.email, data.current_password):
            raise HTTPException(status_code=400, detail="Current password is incorrect")

        try:
            updated = self.identity_client.update_identity(
                identity.id,
                full_name=data.full_name,
                phone=data.phone,
                password=data.password
            )

            staff_update = {}
            if data.full_name is not None:
                staff_update["full_name"] = data.full_name
            if data.phone is not None:
                staff_update["phone"] = data.phone
            if staff_update:
                staff = self.store.find_one(self.settings.staff_collection_id, user_id=identity.id)
                if staff:
                    self.store.update(self.settings.staff_collection_id, staff["id"], staff_update)
        except Exception as e:
            logger.exception("Profile update failed")
            raise HTTPException(status_code=500, detail=str(e))

        return self._to_profile(updated)

    def _to_profile(self, identity: Identity) -> ProfileResponse:
        return ProfileResponse(
            id=identity.id,
            email=identity.email,
            full_name=identity.name,
            phone=identity.phone,
            email_verified=identity.email_verified
        )
