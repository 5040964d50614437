# Supabase tables: staff, team_memberships
# This file documents the expected database schema
# Actual operations are handled via the DocumentStore in service.py

"""
Expected Supabase table structure:

staff:
- id: uuid (primary key, equals the auth.users id of the staff member)
- user_id: uuid (unique, not null, references auth.users.id)
- full_name: text (not null)
- email: text (not null)
- phone: text (nullable)
- status: text (not null, default: 'active') - values: active, inactive, suspended
- role: text (nullable, references roles.id) - mirrors roles[0] of the staff team membership
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

team_memberships:
- id: uuid (primary key)
- team_id: text (not null) - the staff team is configured by STAFF_TEAM_ID
- user_id: uuid (not null, references auth.users.id)
- roles: text[] (not null, default: '{}') - role ids; the first entry is authoritative
- created_at: timestamp (default: now())
- unique constraint on (team_id, user_id)

Staff members are never hard-deleted; their status is changed instead.
"""
