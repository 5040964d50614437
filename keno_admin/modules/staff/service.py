import secrets
from datetime import datetime, timezone
from fastapi import HTTPException
from typing import Optional
import logging

from keno_admin.config import Settings, settings as default_settings
from keno_admin.database.document_store import DocumentStore
from keno_admin.database.identity_client import IdentityClient
from keno_admin.modules.staff.schemas import (
    StaffStatus, StaffCreate, StaffUpdate, StaffResponse, StaffListResponse,
    StaffCreateResponse, StaffUpdateResponse
)

logger = logging.getLogger(__name__)

DUPLICATE_IDENTITY_MARKERS = ("already registered", "already been registered", "already exists")


def generate_temporary_password() -> str:
    return secrets.token_urlsafe(12) + "A1!"


class StaffService:
    def __init__(
        self,
        store: DocumentStore,
        identity_client: IdentityClient,
        settings: Optional[Settings] = None
    ):
        self.store = store
        self.identity_client = identity_client
        self.settings = settings or default_settings

    def _check_target(self, collection_id: Optional[str], database_id: Optional[str]) -> None:
        """Staff writes may only target the configured staff collection"""
        if collection_id is not None and collection_id != self.settings.staff_collection_id:
            raise HTTPException(status_code=400, detail=f"Unknown collection: {collection_id}")
        if database_id is not None and database_id != self.store.database_id:
            raise HTTPException(status_code=400, detail=f"Unknown database: {database_id}")

    def _check_role(self, role_id: str) -> None:
        if not self.store.get(self.settings.roles_collection_id, role_id):
            raise HTTPException(status_code=400, detail=f"Unknown role: {role_id}")

    def list_staff(
        self,
        limit: int = 25,
        offset: int = 0,
        search: Optional[str] = None,
        status: Optional[StaffStatus] = None
    ) -> StaffListResponse:
        """List staff records, newest first"""
        try:
            filters = {"status": status.value} if status else None
            page = self.store.list(
                self.settings.staff_collection_id,
                filters=filters,
                search=("full_name", search) if search else None,
                order_by="created_at",
                desc=True,
                limit=limit,
                offset=offset,
                with_count=True
            )
            return StaffListResponse(
                documents=[StaffResponse(**doc) for doc in page.documents],
                total=page.total
            )
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_staff(self, document_id: str) -> StaffResponse:
        try:
            document = self.store.get(self.settings.staff_collection_id, document_id)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not document:
            raise HTTPException(status_code=404, detail="Staff member not found")
        return StaffResponse(**document)

    def create_staff(self, data: StaffCreate) -> StaffCreateResponse:
        """Provision a staff member: identity, staff record and staff team membership.

        A failed step removes whatever the earlier steps created. Submitting the same request twice creates two identities unless the
        identity provider rejects the duplicate email.
        """
        self._check_target(data.collection_id, data.database_id)
        try:
            self._check_role(data.role)

            try:
                identity = self.identity_client.create_identity(
                    email=data.email,
                    password=generate_temporary_password(),
                    full_name=data.full_name,
                    phone=data.phone
                )
            except Exception as e:
                error_message = str(e)
                if any(marker in error_message.lower() for marker in DUPLICATE_IDENTITY_MARKERS):
                    raise HTTPException(status_code=409, detail="A user with this email already exists")
                raise

            try:
                document = self.store.create(self.settings.staff_collection_id, {
                    "id": identity.id,
                    "user_id": identity.id,
                    "full_name": data.full_name,
                    "email": data.email,
                    "phone": data.phone,
                    "status": StaffStatus.ACTIVE.value,
                    "role": data.role
                })
            except Exception:
                logger.error(f"Staff record insert failed; removing identity {identity.id}")
                try:
                    self.identity_client.delete_identity(identity.id)
                except Exception as cleanup_error:
                    logger.error(f"Could not remove identity {identity.id}: {cleanup_error}")
                raise

            try:
                self.store.create(self.settings.team_memberships_collection_id, {
                    "team_id": self.settings.staff_team_id,
                    "user_id": identity.id,
                    "roles": [data.role]
                })
            except Exception:
                logger.error(f"Team membership insert failed; removing staff record and identity {identity.id}")
                self._discard_staff(identity.id)
                raise
            logger.info(f"Provisioned staff member {identity.id} with role {data.role}")

            return StaffCreateResponse(
                user={"id": identity.id, "email": identity.email, "name": identity.name},
                document=StaffResponse(**document)
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.exception("Staff creation failed")
            raise HTTPException(status_code=500, detail=str(e))

    def update_staff(self, data: StaffUpdate) -> StaffUpdateResponse:
        """Patch a staff record; a status change also enables/disables the identity"""
        self._check_target(data.collection_id, data.database_id)
        try:
            current = self.store.get(self.settings.staff_collection_id, data.document_id)
            if not current:
                raise HTTPException(status_code=404, detail="Staff member not found")
            if current.get("user_id") != data.user_id:
                raise HTTPException(status_code=400, detail="userId does not match the staff record")
            if data.role:
                self._check_role(data.role)

            if data.status is not None:
                self.identity_client.set_identity_enabled(data.user_id, data.status.enables_login)

            update_data = {"updated_at": datetime.now(timezone.utc).isoformat()}
            if data.full_name:
                update_data["full_name"] = data.full_name
            if "phone" in data.model_fields_set:
                update_data["phone"] = data.phone
            if data.status is not None:
                update_data["status"] = data.status.value
            if data.role:
                update_data["role"] = data.role

            document = self.store.update(self.settings.staff_collection_id, data.document_id, update_data)
            if not document:
                raise HTTPException(status_code=404, detail="Staff member not found")

            if data.role:
                self._assign_role(data.user_id, data.role)

            return StaffUpdateResponse(document=StaffResponse(**document))
        except HTTPException:
            raise
        except Exception as e:
            logger.exception("Staff update failed")
            raise HTTPException(status_code=500, detail=str(e))

    def _discard_staff(self, user_id: str) -> None:
        """Undo a partially provisioned staff member; cleanup failures are only logged"""
        try:
            self.store.delete(self.settings.staff_collection_id, user_id)
        except Exception as e:
            logger.error(f"Could not remove staff record {user_id}: {e}")
        try:
            self.identity_client.delete_identity(user_id)
        except Exception as e:
            logger.error(f"Could not remove identity {user_id}: {e}")

    def _assign_role(self, user_id: str, role_id: str) -> None:
        collection_id = self.settings.team_memberships_collection_id
        membership = self.store.find_one(
            collection_id,
            team_id=self.settings.staff_team_id,
            user_id=user_id
        )
        if membership:
            self.store.update(collection_id, membership["id"], {"roles": [role_id]})
        else:
            self.store.create(collection_id, {
                "team_id": self.settings.staff_team_id,
                "user_id": user_id,
                "roles": [role_id]
            })
        logger.info(f"Assigned role {role_id} to {user_id}")
