"""
Seed Permissions and Roles Script
This script populates the permissions, roles and role_permissions tables using the config,
then attaches the bootstrap owner (OWNER_USER_ID) to the staff team.
Idempotent: safe to re-run.

Usage: python -m keno_admin.scripts.seed_permissions_roles
"""

import sys
import logging

from keno_admin.config import settings
from keno_admin.config.permissions_config import PERMISSION_MATRIX
from keno_admin.database.document_store import DocumentStore
from keno_admin.database.supabase_client import get_service_supabase

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

OWNER_ROLE_NAME = "Owner"


def seed_permissions(store: DocumentStore):
    """Seed permissions from config"""
    logger.info("Seeding permissions...")

    collection_id = settings.permissions_collection_id
    created_count = 0
    updated_count = 0

    for perm in PERMISSION_MATRIX["permissions"]:
        try:
            existing = store.find_one(collection_id, key=perm["key"])
            if existing:
                store.update(collection_id, existing["id"], {
                    "group": perm["group"],
                    "description": perm["description"]
                })
                updated_count += 1
                logger.debug(f"Updated permission: {perm['key']}")
            else:
                store.create(collection_id, perm)
                created_count += 1
                logger.debug(f"Created permission: {perm['key']}")
        except Exception as e:
            logger.error(f"Error processing permission {perm['key']}: {e}")

    logger.info(f"Permissions seeded: {created_count} created, {updated_count} updated")
    return created_count + updated_count


def seed_roles(store: DocumentStore):
    """Seed roles from config"""
    logger.info("Seeding roles...")

    collection_id = settings.roles_collection_id
    created_count = 0
    updated_count = 0

    for role in PERMISSION_MATRIX["roles"]:
        try:
            existing = store.find_one(collection_id, name=role["name"])
            if existing:
                store.update(collection_id, existing["id"], {
                    "description": role["description"],
                    "is_system": role["is_system"]
                })
                role_id = existing["id"]
                updated_count += 1
                logger.debug(f"Updated role: {role['name']}")
            else:
                created = store.create(collection_id, {
                    "name": role["name"],
                    "description": role["description"],
                    "is_system": role["is_system"]
                })
                role_id = created["id"]
                created_count += 1
                logger.debug(f"Created role: {role['name']}")

            assign_permissions_to_role(store, role_id, role["name"], role["permissions"])

        except Exception as e:
            logger.error(f"Error processing role {role['name']}: {e}")

    logger.info(f"Roles seeded: {created_count} created, {updated_count} updated")
    return created_count + updated_count


def assign_permissions_to_role(store: DocumentStore, role_id: str, role_name: str, permission_keys: list):
    """Make a role's grants match the configured permission keys"""
    try:
        permissions = store.list(
            settings.permissions_collection_id,
            in_filters={"key": permission_keys},
            limit=settings.authorization_batch_limit
        ).documents
        if not permissions:
            logger.warning(f"No permissions found for role {role_name}")
            return

        permission_ids = {p["id"] for p in permissions}

        existing = store.list(
            settings.role_permissions_collection_id,
            filters={"role_id": role_id},
            limit=settings.authorization_batch_limit
        ).documents
        existing_by_permission = {row["permission_id"]: row for row in existing}

        new_ids = permission_ids - set(existing_by_permission)
        for permission_id in new_ids:
            store.create(settings.role_permissions_collection_id, {
                "role_id": role_id,
                "permission_id": permission_id
            })
        if new_ids:
            logger.debug(f"Assigned {len(new_ids)} permissions to role {role_name}")

        # Remove permissions that are no longer in the config
        stale_ids = set(existing_by_permission) - permission_ids
        for permission_id in stale_ids:
            store.delete(settings.role_permissions_collection_id, existing_by_permission[permission_id]["id"])
        if stale_ids:
            logger.debug(f"Removed {len(stale_ids)} permissions from role {role_name}")

    except Exception as e:
        logger.error(f"Error assigning permissions to role {role_name}: {e}")


def seed_owner_staff(store: DocumentStore):
    """Attach the configured owner identity to the staff team with the Owner role.

    The auth identity is created out of band (dashboard or invite); this only
    writes the staff record and the staff team membership. Returns the staff
    record, or None when OWNER_USER_ID is not configured.
    """
    user_id = settings.owner_user_id
    if not user_id:
        logger.warning("OWNER_USER_ID is not set; skipping owner staff record")
        return None

    logger.info(f"Seeding owner staff record for {user_id}...")

    owner_role = store.find_one(settings.roles_collection_id, name=OWNER_ROLE_NAME)
    if not owner_role:
        raise RuntimeError(f"Role {OWNER_ROLE_NAME} not found; seed roles first")

    staff_data = {
        "full_name": settings.owner_full_name,
        "email": settings.owner_email,
        "status": "active",
        "role": owner_role["id"]
    }
    existing = store.find_one(settings.staff_collection_id, user_id=user_id)
    if existing:
        staff = store.update(settings.staff_collection_id, existing["id"], staff_data)
        logger.debug(f"Updated owner staff record {existing['id']}")
    else:
        staff = store.create(settings.staff_collection_id, {"id": user_id, "user_id": user_id, **staff_data})
        logger.debug(f"Created owner staff record {user_id}")

    membership = store.find_one(
        settings.team_memberships_collection_id,
        team_id=settings.staff_team_id,
        user_id=user_id
    )
    if membership:
        store.update(settings.team_memberships_collection_id, membership["id"], {"roles": [owner_role["id"]]})
    else:
        store.create(settings.team_memberships_collection_id, {
            "team_id": settings.staff_team_id,
            "user_id": user_id,
            "roles": [owner_role["id"]]
        })

    logger.info(f"Owner {settings.owner_email} is on team {settings.staff_team_id} as {OWNER_ROLE_NAME}")
    return staff


def main():
    """Main function to seed permissions, roles and the owner staff record"""
    try:
        store = DocumentStore(get_service_supabase())

        logger.info("Starting permissions and roles seeding...")

        # Seed permissions first
        perm_count = seed_permissions(store)

        # Then seed roles (which depend on permissions)
        role_count = seed_roles(store)

        # Finally attach the bootstrap owner, if configured
        seed_owner_staff(store)

        logger.info("Seeding completed successfully!")
        logger.info(f"Total: {perm_count} permissions, {role_count} roles processed")

    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
