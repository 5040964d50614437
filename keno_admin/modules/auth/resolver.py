"""
Authorization resolution.

Walks identity -> staff record -> staff team membership -> role -> permissions
and consolidates the result into an AuthorizationPayload. Steps run
sequentially and stop at the first failure, which is raised as an
AuthorizationError carrying its taxonomy code. Lookups are single attempts;
an unexpected provider error while reading grants propagates unchanged.
"""

from typing import Any, Dict, List, Optional
import logging

from keno_admin.config import Settings, settings as default_settings
from keno_admin.core.errors import AuthorizationError, ErrorCode
from keno_admin.database.document_store import DocumentStore
from keno_admin.database.identity_client import Identity, IdentityClient
from keno_admin.modules.auth.schemas import (
    AuthorizationPayload, UserSummary, TeamSummary, RoleSummary
)
from keno_admin.modules.staff.schemas import StaffStatus

logger = logging.getLogger(__name__)


class AuthorizationResolver:
    def __init__(
        self,
        identity_client: IdentityClient,
        store: DocumentStore,
        settings: Optional[Settings] = None
    ):
        self.identity_client = identity_client
        self.store = store
        self.settings = settings or default_settings

    def resolve(self, token: Optional[str]) -> AuthorizationPayload:
        identity = self.resolve_identity(token)

        if not identity.email_verified:
            raise self._fail(ErrorCode.EMAIL_NOT_VERIFIED, "Email not verified")

        staff = self._get_staff(identity.id)
        if not staff:
            raise self._fail(ErrorCode.STAFF_NOT_FOUND, "Staff profile not found")

        staff_status = staff.get("status")
        if str(staff_status or "").lower() != StaffStatus.ACTIVE.value:
            raise self._fail(
                ErrorCode.ACCOUNT_BLOCKED,
                f"Account is {staff_status}",
                status=staff_status
            )

        membership = self._get_staff_membership(identity.id)
        if not membership:
            raise self._fail(
                ErrorCode.ACCOUNT_NOT_MEMBER,
                f"Account is not a member of {self.settings.staff_team_name} team",
                status=""
            )

        roles = membership.get("roles") or []
        role_id = roles[0] if roles else None
        if not role_id:
            raise self._fail(ErrorCode.ACCOUNT_NO_ROLE, "Account has no role", status="")

        role = self._get_role(role_id)
        if not role:
            raise self._fail(ErrorCode.ROLE_NOT_FOUND, "Role not found", status="")

        permissions = self._get_role_permissions(role_id)
        keys = [p["key"] for p in permissions]
        groups: List[str] = []
        for permission in permissions:
            if permission["group"] not in groups:
                groups.append(permission["group"])

        return AuthorizationPayload(
            user=UserSummary(id=identity.id, email=identity.email, name=identity.name),
            team=TeamSummary(id=self.settings.staff_team_id, name=self.settings.staff_team_name),
            role=RoleSummary(id=role["id"], name=role["name"]),
            permissions=keys,
            groups=groups,
        )

    def resolve_identity(self, token: Optional[str]) -> Identity:
        if not token:
            raise self._fail(ErrorCode.UNAUTHORIZED, "Unauthorized")
        try:
            return self.identity_client.get_identity(token)
        except Exception as e:
            logger.info(f"Identity lookup rejected token: {e}")
            raise self._fail(ErrorCode.UNAUTHORIZED, "Unauthorized")

    def _fail(self, code: ErrorCode, message: str, status: Optional[str] = None) -> AuthorizationError:
        logger.warning(f"Authorization failed: {code.value} ({message})")
        return AuthorizationError(code, message, status=status)

    def _get_staff(self, user_id: str) -> Optional[Dict[str, Any]]:
        try:
            return self.store.find_one(self.settings.staff_collection_id, user_id=user_id)
        except Exception as e:
            logger.error(f"Staff profile lookup failed: {e}")
            return None

    def _get_staff_membership(self, user_id: str) -> Optional[Dict[str, Any]]:
        try:
            page = self.store.list(
                self.settings.team_memberships_collection_id,
                filters={"team_id": self.settings.staff_team_id, "user_id": user_id},
                limit=1
            )
        except Exception as e:
            logger.error(f"Team membership lookup failed: {e}")
            return None
        for membership in page.documents:
            if membership.get("team_id") == self.settings.staff_team_id:
                return membership
        return None

    def _get_role(self, role_id: str) -> Optional[Dict[str, Any]]:
        try:
            return self.store.get(self.settings.roles_collection_id, role_id)
        except Exception as e:
            logger.error(f"Role lookup failed: {e}")
            return None

    def _get_role_permissions(self, role_id: str) -> List[Dict[str, Any]]:
        """Permission documents granted to a role, in grant order.

        Both fetches are capped at ``authorization_batch_limit``; grants past the
        cap are not returned.
        """
        limit = self.settings.authorization_batch_limit
        grants = self.store.list(
            self.settings.role_permissions_collection_id,
            filters={"role_id": role_id},
            limit=limit
        ).documents
        permission_ids = [g["permission_id"] for g in grants]
        if not permission_ids:
            return []

        documents = self.store.list(
            self.settings.permissions_collection_id,
            in_filters={"id": permission_ids},
            limit=limit
        ).documents
        by_id = {p["id"]: p for p in documents}
        return [by_id[pid] for pid in permission_ids if pid in by_id]
