"""
Tests for authorization resolution: identity -> staff -> membership -> role -> permissions.
"""

import pytest

from keno_admin.config import Settings
from keno_admin.core.errors import AuthorizationError, ErrorCode
from keno_admin.modules.auth.resolver import AuthorizationResolver


def resolve_error(resolver, token) -> AuthorizationError:
    with pytest.raises(AuthorizationError) as excinfo:
        resolver.resolve(token)
    return excinfo.value


# =============================================================================
# Successful resolution
# =============================================================================


class TestResolvedPayload:
    def test_scenario_a_permissions_and_groups(self, fake, resolver):
        user_id, token = fake.add_identity(email="u1@keno.local", name="User One")
        fake.add_staff(user_id, status="active")
        fake.add_membership(user_id, ["r1"])
        fake.add_role("r1", name="Vendor")
        tickets = fake.add_permission("KENO_TICKETS_CREATE", "KENO")
        staff_read = fake.add_permission("STAFF_READ", "STAFF")
        fake.grant("r1", tickets["id"])
        fake.grant("r1", staff_read["id"])

        payload = resolver.resolve(token)

        assert payload.permissions == ["KENO_TICKETS_CREATE", "STAFF_READ"]
        assert payload.groups == ["KENO", "STAFF"]
        assert payload.user.id == user_id
        assert payload.user.email == "u1@keno.local"
        assert payload.user.name == "User One"
        assert payload.team.id == "staff-team"
        assert payload.team.name == "Staff"
        assert payload.role.id == "r1"
        assert payload.role.name == "Vendor"

    def test_groups_are_deduplicated(self, fake, resolver):
        token = fake.add_staff_user(["STAFF_READ", "STAFF_UPDATE", "KENO_VENUES_READ", "STAFF_INVITE"])

        payload = resolver.resolve(token)

        assert payload.groups == ["STAFF", "KENO"]
        assert len(payload.permissions) == 4

    def test_role_without_grants(self, fake, resolver):
        token = fake.add_staff_user([])

        payload = resolver.resolve(token)

        assert payload.permissions == []
        assert payload.groups == []

    def test_first_role_is_authoritative(self, fake, resolver):
        user_id, token = fake.add_identity()
        fake.add_staff(user_id)
        fake.add_membership(user_id, ["r1", "r2"])
        fake.add_role("r1", name="First")
        fake.add_role("r2", name="Second")

        assert resolver.resolve(token).role.name == "First"

    def test_status_comparison_ignores_case(self, fake, resolver):
        token = fake.add_staff_user(["STAFF_READ"], status="ACTIVE")

        assert resolver.resolve(token).permissions == ["STAFF_READ"]

    def test_grants_beyond_batch_limit_are_dropped(self, fake, identity_client, store):
        token = fake.add_staff_user(["STAFF_READ", "STAFF_UPDATE", "STAFF_INVITE"])
        capped = AuthorizationResolver(
            identity_client, store,
            settings=Settings(staff_team_id="staff-team", authorization_batch_limit=2)
        )

        assert capped.resolve(token).permissions == ["STAFF_READ", "STAFF_UPDATE"]


# =============================================================================
# Failure codes
# =============================================================================


class TestIdentityFailures:
    def test_missing_token(self, resolver):
        error = resolve_error(resolver, None)
        assert error.code == ErrorCode.UNAUTHORIZED
        assert error.http_status == 401

    def test_unknown_token(self, resolver):
        assert resolve_error(resolver, "not-a-session").code == ErrorCode.UNAUTHORIZED

    @pytest.mark.parametrize("staff_status", [None, "active", "suspended"])
    def test_unverified_email_wins_over_everything(self, fake, resolver, staff_status):
        user_id, token = fake.add_identity(verified=False)
        if staff_status:
            fake.add_staff(user_id, status=staff_status)
            fake.add_membership(user_id, ["r1"])
            fake.add_role("r1")

        error = resolve_error(resolver, token)

        assert error.code == ErrorCode.EMAIL_NOT_VERIFIED
        assert error.http_status == 403


class TestStaffFailures:
    def test_scenario_b_no_staff_record(self, fake, resolver):
        _, token = fake.add_identity()

        error = resolve_error(resolver, token)

        assert error.code == ErrorCode.STAFF_NOT_FOUND
        assert error.http_status == 404

    def test_staff_lookup_error_reads_as_not_found(self, fake, resolver):
        token = fake.add_staff_user(["STAFF_READ"])
        fake.failing_tables.add("staff")

        assert resolve_error(resolver, token).code == ErrorCode.STAFF_NOT_FOUND

    @pytest.mark.parametrize("status", ["inactive", "suspended", "INACTIVE", "BANNED"])
    def test_blocked_status_is_echoed(self, fake, resolver, status):
        token = fake.add_staff_user(["STAFF_READ"], status=status)

        error = resolve_error(resolver, token)

        assert error.code == ErrorCode.ACCOUNT_BLOCKED
        assert error.status == status
        assert error.to_dict()["status"] == status
        assert error.message == f"Account is {status}"


class TestMembershipFailures:
    def test_no_membership(self, fake, resolver):
        user_id, token = fake.add_identity()
        fake.add_staff(user_id)

        assert resolve_error(resolver, token).code == ErrorCode.ACCOUNT_NOT_MEMBER

    def test_membership_in_another_team(self, fake, resolver):
        user_id, token = fake.add_identity()
        fake.add_staff(user_id)
        fake.add_membership(user_id, ["r1"], team_id="players")
        fake.add_role("r1")

        assert resolve_error(resolver, token).code == ErrorCode.ACCOUNT_NOT_MEMBER

    def test_membership_lookup_error(self, fake, resolver):
        token = fake.add_staff_user(["STAFF_READ"])
        fake.failing_tables.add("team_memberships")

        assert resolve_error(resolver, token).code == ErrorCode.ACCOUNT_NOT_MEMBER

    @pytest.mark.parametrize("roles", [[], [""]])
    def test_scenario_c_no_role(self, fake, resolver, roles):
        user_id, token = fake.add_identity()
        fake.add_staff(user_id)
        fake.add_membership(user_id, roles)

        error = resolve_error(resolver, token)

        assert error.code == ErrorCode.ACCOUNT_NO_ROLE
        assert error.http_status == 403


class TestRoleFailures:
    def test_role_document_missing(self, fake, resolver):
        user_id, token = fake.add_identity()
        fake.add_staff(user_id)
        fake.add_membership(user_id, ["ghost"])

        assert resolve_error(resolver, token).code == ErrorCode.ROLE_NOT_FOUND

    def test_grant_lookup_error_propagates(self, fake, resolver):
        token = fake.add_staff_user(["STAFF_READ"])
        fake.failing_tables.add("role_permissions")

        with pytest.raises(Exception) as excinfo:
            resolver.resolve(token)

        assert not isinstance(excinfo.value, AuthorizationError)
        assert "role_permissions" in str(excinfo.value)


class TestErrorCodes:
    @pytest.mark.parametrize("code", [
        ErrorCode.UNAUTHORIZED, ErrorCode.EMAIL_NOT_VERIFIED, ErrorCode.STAFF_NOT_FOUND,
        ErrorCode.ACCOUNT_BLOCKED, ErrorCode.ACCOUNT_NOT_MEMBER, ErrorCode.ACCOUNT_NO_ROLE,
        ErrorCode.ROLE_NOT_FOUND,
    ])
    def test_resolution_codes_revoke_session(self, code):
        assert code.revokes_session

    @pytest.mark.parametrize("code", [ErrorCode.PERMISSION_DENIED, ErrorCode.SYSTEM_ROLE_IMMUTABLE])
    def test_gate_codes_keep_session(self, code):
        assert not code.revokes_session
        assert code.http_status == 403
