# Supabase table: venues
# This file documents the expected database schema
# Actual operations are handled via the DocumentStore in service.py

"""
Expected Supabase table structure:

venues:
- id: uuid (primary key)
- name: text (not null)
- code: text (not null, unique) - e.g., "VEN-001"
- is_active: boolean (not null, default: true)
- vendor_ids: uuid[] (default: '{}') - auth.users ids of the vendors working the venue
- commission_pct: numeric (not null, default: 0, check 0 <= commission_pct <= 100)
- address: text (nullable)
- phone: text (nullable)
- notes: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
