"""
Integration tests for License API endpoints.
"""

import pytest
from django.urls import reverse

from allowlist.infrastructure.models import AllowListEntry as AllowListEntryModel
from licenses.infrastructure.models import License as LicenseModel

OWNER = {
    "email": "ada@example.com",
    "name": "Ada Lovelace",
    "phone_number": "+44 20 7946 0000",
}


def issue(api_client, user_id="U100", **overrides):
    payload = {"user_id": user_id, **OWNER, **overrides}
    return api_client.post(reverse("licenses:issue-license"), payload, format="json")


def activate(api_client, license_key, machine_id="machine-1", email="ada@example.com"):
    return api_client.post(
        reverse("licenses:activate-license"),
        {"license_key": license_key, "email": email, "machine_id": machine_id},
        format="json",
    )


@pytest.fixture
def issued_key(api_client, eligible_user_ids):
    response = issue(api_client)
    assert response.status_code == 201
    return LicenseModel.objects.get(user_identity="U100").license_key


@pytest.mark.django_db
@pytest.mark.integration
class TestIssueLicenseAPI:
    """Integration tests for the issue endpoint."""

    def test_issue_sends_key_by_email(self, api_client, eligible_user_ids, mailoutbox):
        response = issue(api_client)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "SUCCESS"
        assert data["message"] == "User ID validated and license key sent to your email!"
        assert "license_key" not in data

        license = LicenseModel.objects.get(user_identity="U100")
        assert license.status == "ASSIGNED"
        assert license.owner_email == "ada@example.com"
        assert len(mailoutbox) == 1
        assert license.license_key in mailoutbox[0].body
        assert AllowListEntryModel.objects.get(user_id="U100").is_consumed

    def test_issue_returns_key_without_email(
        self, api_client, eligible_user_ids, mailoutbox, settings
    ):
        settings.LICENSE_EMAIL_ENABLED = False

        response = issue(api_client)

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "User ID validated, but email is not configured on the server."
        assert data["license_key"] == LicenseModel.objects.get(user_identity="U100").license_key
        assert mailoutbox == []

    def test_issue_accepts_legacy_field_names(self, api_client, eligible_user_ids):
        response = api_client.post(
            reverse("licenses:issue-license"),
            {
                "userId": "U200",
                "email": "ada@example.com",
                "name": "Ada",
                "phoneNumber": "555-0100",
            },
            format="json",
        )

        assert response.status_code == 201
        assert LicenseModel.objects.filter(user_identity="U200").exists()

    def test_unknown_user_id(self, api_client, eligible_user_ids):
        response = issue(api_client, user_id="U999")

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "IDENTITY_INELIGIBLE"
        assert error["message"] == "User ID 'U999' is not a valid ID."
        assert LicenseModel.objects.count() == 0

    def test_user_id_used_twice(self, api_client, eligible_user_ids):
        assert issue(api_client).status_code == 201

        response = issue(api_client, email="mallory@example.com")

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "IDENTITY_ALREADY_CONSUMED"
        assert error["message"] == "User ID 'U100' has already been used."
        assert LicenseModel.objects.count() == 1

    def test_missing_fields(self, api_client, eligible_user_ids):
        response = api_client.post(
            reverse("licenses:issue-license"), {"user_id": "U100"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INPUT_INVALID"
        assert AllowListEntryModel.objects.get(user_id="U100").is_consumed is False

    def test_invalid_email(self, api_client, eligible_user_ids):
        response = issue(api_client, email="not-an-email")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INPUT_INVALID"

    def test_correlation_id_header(self, api_client, eligible_user_ids):
        response = issue(api_client)

        assert response["X-Correlation-ID"]


@pytest.mark.django_db
@pytest.mark.integration
class TestActivateLicenseAPI:
    """Integration tests for the activate endpoint."""

    def test_activate(self, api_client, issued_key):
        response = activate(api_client, issued_key)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "VALID"
        assert data["message"] == "License activated successfully."
        assert data["activated_at"]

        license = LicenseModel.objects.get(license_key=issued_key)
        assert license.status == "ACTIVATED"
        assert license.bound_machine_id == "machine-1"

    def test_repeat_from_same_machine(self, api_client, issued_key):
        first = activate(api_client, issued_key).json()

        response = activate(api_client, issued_key)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ALREADY_ACTIVATED"
        assert data["message"] == "This license is already active on this device."
        assert data["activated_at"] == first["activated_at"]

    def test_other_machine_rejected(self, api_client, issued_key):
        activate(api_client, issued_key)

        response = activate(api_client, issued_key, machine_id="machine-2")

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "MACHINE_MISMATCH"
        assert LicenseModel.objects.get(license_key=issued_key).bound_machine_id == "machine-1"

    def test_email_must_match_exactly(self, api_client, issued_key):
        response = activate(api_client, issued_key, email="ADA@Example.COM")

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "EMAIL_MISMATCH"
        assert LicenseModel.objects.get(license_key=issued_key).status == "ASSIGNED"

    def test_wrong_email(self, api_client, issued_key):
        response = activate(api_client, issued_key, email="bob@example.com")

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "EMAIL_MISMATCH"
        assert LicenseModel.objects.get(license_key=issued_key).status == "ASSIGNED"

    @pytest.mark.parametrize("key", ["NOTREAL-KEY", "ZZZZ-ZZZZ-ZZZZ"])
    def test_unknown_key(self, api_client, eligible_user_ids, key):
        response = activate(api_client, key)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "LICENSE_NOT_FOUND"

    def test_legacy_field_names(self, api_client, issued_key):
        response = api_client.post(
            reverse("licenses:activate-license"),
            {"licenseKey": issued_key, "email": "ada@example.com", "machineId": "m-9"},
            format="json",
        )

        assert response.status_code == 200
        assert LicenseModel.objects.get(license_key=issued_key).bound_machine_id == "m-9"

    def test_missing_machine_id(self, api_client, issued_key):
        response = api_client.post(
            reverse("licenses:activate-license"),
            {"license_key": issued_key, "email": "ada@example.com"},
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INPUT_INVALID"


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseStatusAPI:
    """Integration tests for the status endpoint."""

    def test_status_follows_activation(self, api_client, issued_key):
        url = reverse("licenses:get-license-status")

        before = api_client.get(url, {"license_key": issued_key})
        assert before.status_code == 200
        assert before.json()["status"] == "ASSIGNED"
        assert before.json()["is_activated"] is False

        activate(api_client, issued_key)

        after = api_client.get(url, {"license_key": issued_key, "machine_id": "machine-1"})
        data = after.json()
        assert data["status"] == "ACTIVATED"
        assert data["is_activated"] is True
        assert data["machine_matches"] is True

    def test_unknown_key(self, api_client, eligible_user_ids):
        response = api_client.get(
            reverse("licenses:get-license-status"), {"license_key": "ZZZZ-ZZZZ-ZZZZ"}
        )

        assert response.status_code == 404

    def test_missing_key(self, api_client):
        response = api_client.get(reverse("licenses:get-license-status"))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INPUT_INVALID"
