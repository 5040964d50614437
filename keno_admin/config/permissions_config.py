"""
Permissions and Roles Configuration
This config defines the permission catalog for the back office and the built-in roles.
Used by the seed script to populate/update permissions, roles and role_permissions.
"""

# Permission groups and their keys
PERMISSION_GROUPS = {
    "CONFIG": {
        "CONFIG_READ": "Allows viewing and accessing system and application configuration settings.",
        "CONFIG_WRITE": "Allows creating, updating, and modifying system and application configuration settings.",
    },
    "ROLES": {
        "ROLES_MANAGE": "Allows creating, editing, and assigning roles, including managing role permissions.",
    },
    "USERS": {
        "USERS_INVITE": "Allows inviting new users to the organization and managing pending invitations.",
    },
    "STAFF": {
        "STAFF_READ": "Can view staff members and their roles.",
        "STAFF_INVITE": "Allows inviting new staff users and managing pending invitations.",
        "STAFF_UPDATE": "Can update staff roles and permissions.",
        "STAFF_DELETE": "Can remove staff members from the system.",
        "STAFF_ASSIGN_ROLES": "Can assign roles to staff members.",
    },
    "KENO": {
        "KENO_VENUES_CREATE": "Can create and register new venues (taquillas).",
        "KENO_VENUES_READ": "Can view venues and their details.",
        "KENO_VENUES_UPDATE": "Can update venue information and assigned vendors.",
        "KENO_TICKETS_CREATE": "Can issue new tickets (bets) at a venue.",
        "KENO_TICKETS_VOID": "Can void or cancel issued tickets.",
        "KENO_TICKETS_PAY": "Can mark winning tickets as paid.",
        "KENO_REPORTS_VIEW": "Can view sales and payout reports.",
    },
}


class Permissions:
    """Permission keys referenced by route guards."""
    CONFIG_READ = "CONFIG_READ"
    CONFIG_WRITE = "CONFIG_WRITE"
    ROLES_MANAGE = "ROLES_MANAGE"
    USERS_INVITE = "USERS_INVITE"
    STAFF_READ = "STAFF_READ"
    STAFF_INVITE = "STAFF_INVITE"
    STAFF_UPDATE = "STAFF_UPDATE"
    STAFF_DELETE = "STAFF_DELETE"
    STAFF_ASSIGN_ROLES = "STAFF_ASSIGN_ROLES"
    KENO_VENUES_CREATE = "KENO_VENUES_CREATE"
    KENO_VENUES_READ = "KENO_VENUES_READ"
    KENO_VENUES_UPDATE = "KENO_VENUES_UPDATE"
    KENO_TICKETS_CREATE = "KENO_TICKETS_CREATE"
    KENO_TICKETS_VOID = "KENO_TICKETS_VOID"
    KENO_TICKETS_PAY = "KENO_TICKETS_PAY"
    KENO_REPORTS_VIEW = "KENO_REPORTS_VIEW"


_ALL_KEYS = [key for keys in PERMISSION_GROUPS.values() for key in keys]

# Built-in roles. "owner" is a system role: its grants cannot be toggled from the API.
ROLES = [
    {
        "name": "Owner",
        "description": "Full system access. Built-in role - cannot be edited or deleted.",
        "is_system": True,
        "permissions": _ALL_KEYS,
    },
    {
        "name": "Gerente",
        "description": "Can create and activate vendors, manage venues, and view reports.",
        "is_system": False,
        "permissions": [
            "CONFIG_READ",
            "STAFF_READ", "STAFF_INVITE", "STAFF_UPDATE",
            "KENO_VENUES_CREATE", "KENO_VENUES_READ", "KENO_VENUES_UPDATE",
            "KENO_TICKETS_CREATE", "KENO_TICKETS_VOID", "KENO_TICKETS_PAY",
            "KENO_REPORTS_VIEW",
        ],
    },
    {
        "name": "Vendedor / Cajero",
        "description": "Can issue tickets and mark payouts at assigned venues.",
        "is_system": False,
        "permissions": [
            "KENO_VENUES_READ",
            "KENO_TICKETS_CREATE", "KENO_TICKETS_PAY",
        ],
    },
]


def get_permission_matrix():
    """
    Returns a dictionary with all permissions and the built-in roles
    Format: {
        "permissions": [
            {"key": "STAFF_READ", "group": "STAFF", "description": "..."},
            ...
        ],
        "roles": [
            {"name": "Owner", "description": "...", "is_system": True, "permissions": ["CONFIG_READ", ...]},
            ...
        ]
    }
    """
    permissions = []
    for group, keys in PERMISSION_GROUPS.items():
        for key, description in keys.items():
            permissions.append({
                "key": key,
                "group": group,
                "description": description
            })

    return {
        "permissions": permissions,
        "roles": [dict(role, permissions=sorted(role["permissions"])) for role in ROLES]
    }


# Export the matrix for use in seed scripts
PERMISSION_MATRIX = get_permission_matrix()
