"""Unit tests for bizdesk.services.payloads — form validation and payload building."""

import pytest

from bizdesk.core.exceptions import ForbiddenError, ValidationError
from bizdesk.services.payloads import (
    NOTIFICATION_FORM,
    build_create_payload,
    build_payload,
    build_update_payload,
    create_form,
    editable_fields,
    snake_case,
)


class TestCreatePayload:
    def test_project_ids_as_ints_and_blank_optionals_omitted(self):
        payload = build_create_payload("projects", {
            "title": "Website", "description": "New site", "serviceId": "1",
            "clientId": "2", "controllerId": "", "progress": 0, "amount": "",
            "amountDescription": "  ",
        })
        assert payload == {"title": "Website", "description": "New site",
                           "serviceId": 1, "clientId": 2, "progress": 0}

    def test_snake_case_values_accepted(self):
        payload = build_create_payload("projects", {
            "title": "ERP", "description": "Rollout", "service_id": 3, "client_id": 4,
        })
        assert payload["serviceId"] == 3
        assert payload["clientId"] == 4

    def test_required_fields_reported(self):
        with pytest.raises(ValidationError) as exc_info:
            build_create_payload("projects", {"title": "  ", "serviceId": 1})
        details = exc_info.value.details
        assert set(details) == {"title", "description", "clientId"}
        assert str(exc_info.value) == "title is required"

    @pytest.mark.parametrize("progress", ["-1", 101, "abc"])
    def test_progress_range(self, progress):
        with pytest.raises(ValidationError) as exc_info:
            build_create_payload("projects", {"title": "t", "description": "d",
                                              "serviceId": 1, "clientId": 2,
                                              "progress": progress})
        assert "progress" in exc_info.value.details

    def test_whole_number_ids(self):
        with pytest.raises(ValidationError) as exc_info:
            build_create_payload("projects", {"title": "t", "description": "d",
                                              "serviceId": "1.5", "clientId": 2})
        assert exc_info.value.details["serviceId"] == "Service must be a whole number"

    def test_project_create_form_has_no_status(self):
        assert "status" not in [f.name for f in create_form("projects")]
        payload = build_create_payload("projects", {"title": "t", "description": "d",
                                                    "serviceId": 1, "clientId": 2,
                                                    "status": "completed"})
        assert "status" not in payload

    def test_user_email_and_password(self):
        payload = build_create_payload("users", {
            "email": "new.user@acme.co.tz", "password": "secret1", "role": "client",
            "firstName": "Neema", "lastName": "Said",
        })
        assert payload["email"] == "new.user@acme.co.tz"
        assert "phone" not in payload

        with pytest.raises(ValidationError) as exc_info:
            build_create_payload("users", {
                "email": "not-an-email", "password": "123", "role": "superuser",
                "firstName": "N", "lastName": "S",
            })
        assert set(exc_info.value.details) == {"email", "password", "role"}

    def test_notification_type_must_be_current(self):
        with pytest.raises(ValidationError):
            build_payload(NOTIFICATION_FORM, {"userId": 3, "title": "t", "message": "m",
                                              "type": "info"})


class TestUpdatePayload:
    def test_controller_edits_only_whitelist(self):
        payload = build_update_payload("projects", {
            "title": "Hijacked", "status": "testing", "progress": "75", "clientId": 9,
        }, "controller")
        assert payload == {"status": "testing", "progress": 75}

    def test_client_edits_title_and_description(self):
        payload = build_update_payload("projects", {
            "title": "Renamed", "description": "New scope", "status": "completed",
            "amount": "100",
        }, "client")
        assert payload == {"title": "Renamed", "description": "New scope"}

    def test_partial_update_skips_absent_required(self):
        assert build_update_payload("services", {"price": "150000"}, "admin") == {"price": 150000}

    def test_present_but_blank_required_fails(self):
        with pytest.raises(ValidationError):
            build_update_payload("services", {"name": ""}, "admin")

    def test_legacy_status_accepted_on_update(self):
        assert build_update_payload("projects", {"status": "in_progress"}, "admin") == \
            {"status": "in_progress"}

    def test_role_without_fields_forbidden(self):
        with pytest.raises(ForbiddenError):
            editable_fields("services", "client")
        with pytest.raises(ForbiddenError):
            build_update_payload("services", {"name": "x"}, "controller")


def test_snake_case():
    assert snake_case("amountDescription") == "amount_description"
    assert snake_case("title") == "title"
