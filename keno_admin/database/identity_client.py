"""
Wrapper over Supabase Auth, the identity provider.

Token verification and the password flows use the public (anon key) client;
account provisioning and mutation go through the admin API of the service
role client.
"""

from supabase import Client
from pydantic import BaseModel
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

# Supabase has no "disabled" flag; a ban of ~100 years stands in for it.
PERMANENT_BAN_DURATION = "876000h"


class Identity(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    email_verified: bool = False


class IdentitySession(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    identity: Identity


def to_identity(user: Any) -> Identity:
    metadata = getattr(user, "user_metadata", None) or {}
    return Identity(
        id=user.id,
        email=user.email,
        name=metadata.get("full_name") or metadata.get("name"),
        phone=metadata.get("phone") or getattr(user, "phone", None) or None,
        email_verified=bool(getattr(user, "email_confirmed_at", None)),
    )


class IdentityClient:
    def __init__(self, public: Client, admin: Client):
        self.public = public
        self.admin = admin

    def get_identity(self, token: str) -> Identity:
        """Resolve the identity behind an access token. Raises ValueError when rejected."""
        response = self.public.auth.get_user(token)
        if not response or not response.user:
            raise ValueError("Invalid or expired token")
        return to_identity(response.user)

    def sign_in(self, email: str, password: str) -> IdentitySession:
        response = self.public.auth.sign_in_with_password({
            "email": email,
            "password": password
        })
        if not response.user or not response.session:
            raise ValueError("Invalid credentials")
        return IdentitySession(
            access_token=response.session.access_token,
            refresh_token=response.session.refresh_token,
            identity=to_identity(response.user),
        )

    def verify_password(self, email: str, password: str) -> bool:
        try:
            self.sign_in(email, password)
            return True
        except Exception:
            return False

    def sign_out(self, token: str) -> bool:
        """Revoke all sessions of the token's owner. Best effort."""
        try:
            self.admin.auth.admin.sign_out(token)
            return True
        except Exception as e:
            logger.warning(f"Provider sign-out failed: {e}")
            return False

    def create_identity(
        self,
        email: str,
        password: str,
        full_name: str,
        phone: Optional[str] = None
    ) -> Identity:
        user_metadata = {"full_name": full_name}
        if phone:
            user_metadata["phone"] = phone
        response = self.admin.auth.admin.create_user({
            "email": email,
            "password": password,
            "email_confirm": False,
            "user_metadata": user_metadata
        })
        if not response.user:
            raise ValueError("Identity provider did not return the created user")
        return to_identity(response.user)

    def set_identity_enabled(self, user_id: str, enabled: bool) -> None:
        self.admin.auth.admin.update_user_by_id(
            user_id,
            {"ban_duration": "none" if enabled else PERMANENT_BAN_DURATION}
        )

    def update_identity(
        self,
        user_id: str,
        full_name: Optional[str] = None,
        phone: Optional[str] = None,
        password: Optional[str] = None
    ) -> Identity:
        attributes: Dict[str, Any] = {}
        metadata: Dict[str, Any] = {}
        if full_name is not None:
            metadata["full_name"] = full_name
        if phone is not None:
            metadata["phone"] = phone
        if metadata:
            attributes["user_metadata"] = metadata
        if password:
            attributes["password"] = password
        response = self.admin.auth.admin.update_user_by_id(user_id, attributes)
        if not response.user:
            raise ValueError("User not found")
        return to_identity(response.user)

    def delete_identity(self, user_id: str) -> None:
        self.admin.auth.admin.delete_user(user_id)

    def send_recovery(self, email: str, redirect_to: str) -> None:
        self.public.auth.reset_password_for_email(email, {"redirect_to": redirect_to})

    def complete_recovery(self, token_hash: str, password: str) -> Identity:
        response = self.public.auth.verify_otp({
            "token_hash": token_hash,
            "type": "recovery"
        })
        if not response.user:
            raise ValueError("Invalid or expired recovery link")
        self.admin.auth.admin.update_user_by_id(response.user.id, {"password": password})
        return to_identity(response.user)
