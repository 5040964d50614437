import pytest

from helpers import bearer, cleared_cookies
from keno_admin.modules.staff.schemas import StaffStatus, StaffUpdate


STAFF_URL = "/api/v1/staff"

ALL_STAFF_KEYS = ["STAFF_READ", "STAFF_INVITE", "STAFF_UPDATE", "STAFF_ASSIGN_ROLES"]


@pytest.fixture
def manager_token(fake):
    """Caller holding every staff permission through role r1."""
    return fake.add_staff_user(ALL_STAFF_KEYS, email="manager@keno.local")


@pytest.fixture
def vendor(fake):
    """A second staff member with role "vendor"."""
    fake.add_role("vendor", name="Vendedor")
    user_id, token = fake.add_identity(email="vendor@keno.local", name="Vendor One")
    fake.add_staff(user_id, full_name="Vendor One", email="vendor@keno.local")
    fake.add_membership(user_id, ["vendor"])
    return user_id, token


def membership_roles(fake, user_id):
    return [m["roles"] for m in fake.tables["team_memberships"] if m["user_id"] == user_id]


class TestStaffStatus:
    @pytest.mark.parametrize("raw, expected", [
        ("active", StaffStatus.ACTIVE),
        ("INACTIVE", StaffStatus.INACTIVE),
        ("Suspended", StaffStatus.SUSPENDED),
        ("banned", StaffStatus.SUSPENDED),
    ])
    def test_parse(self, raw, expected):
        assert StaffStatus.parse(raw) is expected

    def test_only_active_enables_login(self):
        assert StaffStatus.ACTIVE.enables_login
        assert not StaffStatus.INACTIVE.enables_login
        assert not StaffStatus.SUSPENDED.enables_login

    def test_update_accepts_camel_case(self):
        update = StaffUpdate.model_validate({"userId": "u", "documentId": "d", "status": "BANNED"})
        assert update.user_id == "u"
        assert update.status is StaffStatus.SUSPENDED


class TestListStaff:
    def test_requires_staff_read(self, client, fake):
        token = fake.add_staff_user(["KENO_VENUES_READ"])

        response = client.get(STAFF_URL, headers=bearer(token))

        assert response.status_code == 403
        assert response.json()["code"] == "PERMISSION_DENIED"
        assert cleared_cookies(response) == set()

    def test_list_and_search(self, client, manager_token, vendor):
        response = client.get(STAFF_URL, headers=bearer(manager_token))
        assert response.status_code == 200
        assert response.json()["total"] == 2

        response = client.get(STAFF_URL, params={"search": "vendor"}, headers=bearer(manager_token))
        assert [s["email"] for s in response.json()["documents"]] == ["vendor@keno.local"]

    def test_filter_by_status(self, client, fake, manager_token, vendor):
        fake.tables["staff"][1]["status"] = "suspended"

        response = client.get(STAFF_URL, params={"status": "suspended"}, headers=bearer(manager_token))

        assert response.json()["total"] == 1

    def test_get_one(self, client, manager_token, vendor):
        user_id, _ = vendor

        response = client.get(f"{STAFF_URL}/{user_id}", headers=bearer(manager_token))

        assert response.status_code == 200
        assert response.json()["full_name"] == "Vendor One"

    def test_get_missing(self, client, manager_token):
        response = client.get(f"{STAFF_URL}/missing", headers=bearer(manager_token))
        assert response.status_code == 404


class TestCreateStaff:
    def payload(self, **overrides):
        body = {"email": "new@keno.local", "fullName": "New Member", "phone": "0412", "role": "vendor"}
        body.update(overrides)
        return body

    def test_create(self, client, fake, manager_token):
        fake.add_role("vendor")

        response = client.post(f"{STAFF_URL}/create", headers=bearer(manager_token), json=self.payload())

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        user_id = body["user"]["id"]
        assert body["document"]["id"] == user_id
        assert body["document"]["status"] == "active"
        assert body["document"]["role"] == "vendor"
        assert membership_roles(fake, user_id) == [["vendor"]]
        created = fake.auth.users[user_id]
        assert created.email_confirmed_at is None
        assert created.user_metadata == {"full_name": "New Member", "phone": "0412"}

    def test_new_member_cannot_resolve_until_verified(self, client, fake, manager_token):
        fake.add_role("vendor")
        body = client.post(f"{STAFF_URL}/create", headers=bearer(manager_token), json=self.payload()).json()
        token = fake.auth.issue_token(body["user"]["id"])

        response = client.get("/api/v1/auth/me", headers=bearer(token))

        assert response.json()["code"] == "EMAIL_NOT_VERIFIED"

    def test_requires_staff_invite(self, client, fake):
        token = fake.add_staff_user(["STAFF_READ"])
        fake.add_role("vendor")

        response = client.post(f"{STAFF_URL}/create", headers=bearer(token), json=self.payload())

        assert response.status_code == 403
        assert len(fake.tables["staff"]) == 1

    def test_unknown_collection(self, client, fake, manager_token):
        fake.add_role("vendor")

        response = client.post(
            f"{STAFF_URL}/create", headers=bearer(manager_token),
            json=self.payload(collectionId="players")
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Unknown collection: players", "code": 400}
        assert len(fake.auth.users) == 1

    def test_unknown_role(self, client, manager_token):
        response = client.post(f"{STAFF_URL}/create", headers=bearer(manager_token), json=self.payload(role="ghost"))

        assert response.status_code == 400

    def test_duplicate_email(self, client, fake, manager_token):
        fake.add_role("vendor")

        response = client.post(
            f"{STAFF_URL}/create", headers=bearer(manager_token),
            json=self.payload(email="manager@keno.local")
        )

        assert response.status_code == 409
        assert response.json()["code"] == 409

    def test_identity_removed_when_staff_insert_fails(self, client, fake, manager_token):
        fake.add_role("vendor")
        original_insert = fake.insert_row

        def failing_insert(table, row):
            if table == "staff":
                raise Exception("insert rejected")
            return original_insert(table, row)
        fake.insert_row = failing_insert

        response = client.post(f"{STAFF_URL}/create", headers=bearer(manager_token), json=self.payload())

        assert response.status_code == 500
        assert [u.email for u in fake.auth.users.values()] == ["manager@keno.local"]

    def test_staff_record_and_identity_removed_when_membership_insert_fails(self, client, fake, manager_token):
        fake.add_role("vendor")
        original_insert = fake.insert_row

        def failing_insert(table, row):
            if table == "team_memberships":
                raise Exception("insert rejected")
            return original_insert(table, row)
        fake.insert_row = failing_insert

        response = client.post(f"{STAFF_URL}/create", headers=bearer(manager_token), json=self.payload())

        assert response.status_code == 500
        assert [s["email"] for s in fake.tables["staff"]] == ["manager@keno.local"]
        assert [u.email for u in fake.auth.users.values()] == ["manager@keno.local"]


class TestUpdateStaff:
    def test_status_round_trip_blocks_login(self, client, fake, manager_token, vendor):
        user_id, vendor_token = vendor

        response = client.patch(f"{STAFF_URL}/update", headers=bearer(manager_token), json={
            "userId": user_id,
            "documentId": user_id,
            "status": "INACTIVE",
        })

        assert response.status_code == 200
        assert response.json()["document"]["status"] == "inactive"
        assert response.json()["document"]["updated_at"] is not None
        assert fake.auth.users[user_id].banned

        me = client.get("/api/v1/auth/me", headers=bearer(vendor_token))
        assert me.status_code == 403
        assert me.json()["code"] == "ACCOUNT_BLOCKED"
        assert me.json()["status"] == "inactive"

    def test_reactivate(self, client, fake, manager_token, vendor):
        user_id, _ = vendor
        fake.auth.users[user_id].banned = True
        fake.tables["staff"][1]["status"] = "suspended"

        response = client.patch(f"{STAFF_URL}/update", headers=bearer(manager_token), json={
            "userId": user_id, "documentId": user_id, "status": "active",
        })

        assert response.status_code == 200
        assert not fake.auth.users[user_id].banned

    def test_change_role(self, client, fake, manager_token, vendor):
        user_id, vendor_token = vendor
        fake.add_role("supervisor", name="Supervisor")

        response = client.patch(f"{STAFF_URL}/update", headers=bearer(manager_token), json={
            "userId": user_id, "documentId": user_id, "role": "supervisor",
        })

        assert response.status_code == 200
        assert response.json()["document"]["role"] == "supervisor"
        assert membership_roles(fake, user_id) == [["supervisor"]]
        assert fake.tables["staff"][1]["role"] == "supervisor"
        assert client.get("/api/v1/auth/me", headers=bearer(vendor_token)).json()["role"]["name"] == "Supervisor"

    def test_change_role_requires_assign_permission(self, client, fake, vendor):
        user_id, _ = vendor
        token = fake.add_staff_user(["STAFF_UPDATE"], email="editor@keno.local")

        response = client.patch(f"{STAFF_URL}/update", headers=bearer(token), json={
            "userId": user_id, "documentId": user_id, "role": "vendor",
        })

        assert response.status_code == 403
        assert response.json()["code"] == "PERMISSION_DENIED"

    def test_user_id_must_match_record(self, client, manager_token, vendor):
        user_id, _ = vendor

        response = client.patch(f"{STAFF_URL}/update", headers=bearer(manager_token), json={
            "userId": "someone-else", "documentId": user_id, "fullName": "X",
        })

        assert response.status_code == 400

    def test_missing_record(self, client, manager_token):
        response = client.patch(f"{STAFF_URL}/update", headers=bearer(manager_token), json={
            "userId": "ghost", "documentId": "ghost", "fullName": "X",
        })

        assert response.status_code == 404
        assert response.json()["code"] == 404

    def test_unknown_status(self, client, manager_token, vendor):
        user_id, _ = vendor

        response = client.patch(f"{STAFF_URL}/update", headers=bearer(manager_token), json={
            "userId": user_id, "documentId": user_id, "status": "retired",
        })

        assert response.status_code == 422
