# Supabase tables: permissions, roles, role_permissions
# This file documents the expected database schema
# Actual operations are handled via the DocumentStore in service.py

"""
Expected Supabase table structure:

permissions:
- id: uuid (primary key)
- key: text (not null, unique) - e.g., "STAFF_READ", "KENO_TICKETS_CREATE"
- group: text (not null) - e.g., "STAFF", "KENO", "CONFIG"
- description: text (nullable)
- created_at: timestamp (default: now())

roles:
- id: uuid (primary key)
- name: text (not null, unique) - e.g., "Owner", "Gerente"
- description: text (nullable)
- is_system: boolean (not null, default: false) - built-in roles whose grants are immutable
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

role_permissions:
- id: uuid (primary key)
- role_id: uuid (foreign key to roles.id, not null)
- permission_id: uuid (foreign key to permissions.id, not null)
- created_at: timestamp (default: now())
- unique constraint on (role_id, permission_id)
"""
