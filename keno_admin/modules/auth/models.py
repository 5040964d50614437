# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - Staff identities (auth.users table), created server-side through the admin API
# - Login, session management and JWT issuance
# - E-mail verification (email_confirmed_at) and password recovery
# - Disabling identities (ban_duration)

"""
Supabase Auth provides:
- auth.sign_in_with_password() - Authenticate staff
- auth.get_user() - Resolve the identity behind a JWT
- auth.reset_password_for_email() / auth.verify_otp() - Password recovery
- auth.admin.create_user() / update_user_by_id() / delete_user() - Staff provisioning
- auth.admin.sign_out() - Revoke a user's sessions

Authorization (staff record, team membership, role, permissions) is resolved
from the staff, team_memberships, roles, role_permissions and permissions
tables; see resolver.py.
"""
