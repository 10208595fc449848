"""End-to-end tests for POST /api/v1/forms/<form_type>."""

from __future__ import annotations

import io
import re
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from mandir_forms.extensions import db, mail
from mandir_forms.models import FacilityRequest, FormSubmission, PujaSponsorship

TRANSACTION_ID_RE = re.compile(r"^req_[0-9a-f]{32}$")


def _post(client, form_type, payload, **kwargs):
    return client.post(f"/api/v1/forms/{form_type}", json=payload, **kwargs)


class TestSponsorship:
    """Puja sponsorship submissions."""

    def test_valid_submission_persists_and_notifies(self, client, sponsorship_payload) -> None:
        with mail.record_messages() as outbox:
            resp = _post(client, "sponsorship", sponsorship_payload)

        assert resp.status_code == 201
        body = resp.get_json()
        assert body["status"] == "success"
        assert body["message"] == "Your puja sponsorship request has been submitted successfully."
        assert TRANSACTION_ID_RE.match(body["transactionId"])

        rows = PujaSponsorship.query.all()
        assert len(rows) == 1
        row = rows[0]
        assert row.status == "pending"
        assert row.transaction_id == body["transactionId"]
        assert row.puja_service_name == "satyanarayan"
        assert row.notes == "Family gotra: Kashyap\n\nWill bring flowers"

        assert len(outbox) == 2
        admin, confirmation = outbox
        assert admin.recipients == ["office@mandir.test"]
        assert admin.reply_to == "asha.patel@gmail.com"
        assert admin.subject == "[Vishnu Mandir] New puja sponsorship: Asha Patel"
        assert confirmation.recipients == ["asha.patel@gmail.com"]
        assert confirmation.reply_to == "office@mandir.test"
        assert body["transactionId"] in confirmation.html

    def test_same_payload_twice_creates_two_rows(self, client, sponsorship_payload) -> None:
        first = _post(client, "sponsorship", sponsorship_payload).get_json()
        second = _post(client, "sponsorship", sponsorship_payload).get_json()

        assert first["transactionId"] != second["transactionId"]
        assert PujaSponsorship.query.count() == 2

    def test_multipart_with_attachment(self, client, sponsorship_payload) -> None:
        data = dict(sponsorship_payload)
        data["attachment"] = (io.BytesIO(b"%PDF-1.7"), "gotra.pdf", "application/pdf")

        resp = client.post(
            "/api/v1/forms/sponsorship", data=data, content_type="multipart/form-data"
        )

        assert resp.status_code == 201
        assert PujaSponsorship.query.count() == 1

    def test_missing_field_is_reported(self, client, sponsorship_payload) -> None:
        del sponsorship_payload["pujaId"]
        resp = _post(client, "sponsorship", sponsorship_payload)

        assert resp.status_code == 400
        body = resp.get_json()
        assert body["status"] == "error"
        assert body["message"] == "Validation failed"
        assert body["errors"] == [
            {"field": "pujaId", "code": "REQUIRED", "message": "Puja selection is required"}
        ]
        assert PujaSponsorship.query.count() == 0

    def test_object_value_is_rejected(self, client, sponsorship_payload) -> None:
        sponsorship_payload["devoteeName"] = {"first": "Asha"}
        resp = _post(client, "sponsorship", sponsorship_payload)

        assert resp.status_code == 400
        assert resp.get_json()["errors"][0]["field"] == "devoteeName"
        assert resp.get_json()["errors"][0]["code"] == "INVALID_TYPE"
        assert PujaSponsorship.query.count() == 0


class TestFacilityRequest:
    """Facility rental submissions."""

    def test_empty_object_lists_six_issues(self, client) -> None:
        resp = _post(client, "facility-request", {})

        assert resp.status_code == 400
        assert len(resp.get_json()["errors"]) == 6
        assert FacilityRequest.query.count() == 0

    def test_valid_request(self, client, facility_payload) -> None:
        resp = _post(client, "facility-request", facility_payload)

        assert resp.status_code == 201
        row = FacilityRequest.query.one()
        assert row.number_of_guests == 150
        assert row.requester_name == "Ravi Kumar"
        assert row.event_date.isoformat() == "2026-12-05"

    def test_huge_guest_count_is_a_validation_error(self, client, facility_payload) -> None:
        facility_payload["numberOfGuests"] = 10**20
        resp = _post(client, "facility-request", facility_payload)

        assert resp.status_code == 400
        assert resp.get_json()["errors"] == [
            {"field": "numberOfGuests", "code": "TOO_BIG", "message": "At most 5000 guests allowed"}
        ]
        assert FacilityRequest.query.count() == 0


class TestGenericForms:
    """Forms stored in form_submissions."""

    def test_donation_statement_payload(self, client) -> None:
        resp = _post(
            client,
            "donation-statement",
            {
                "name": "Meera Shah",
                "email": "meera@gmail.com",
                "period": "custom",
                "startDate": "2026-01-01",
                "endDate": "2026-06-30",
                "delivery": "email",
            },
        )

        assert resp.status_code == 201
        assert resp.get_json()["message"] == "Your request has been submitted successfully."
        row = FormSubmission.query.one()
        assert row.form_type == "DONATION_STATEMENT"
        assert row.payload == {
            "name": "Meera Shah",
            "email": "meera@gmail.com",
            "period": "custom",
            "startDate": "2026-01-01",
            "endDate": "2026-06-30",
            "delivery": "email",
        }

    def test_email_subscription_confirmation(self, client) -> None:
        with mail.record_messages() as outbox:
            resp = _post(
                client,
                "email-subscription",
                {"name": "Meera Shah", "email": "meera@gmail.com", "subscribe": True},
            )

        assert resp.status_code == 201
        assert resp.get_json()["message"] == "Your email subscription has been updated successfully."
        confirmation = outbox[-1]
        assert confirmation.subject == "Vishnu Mandir – Subscription confirmed"
        assert "Thank you for staying connected with Vishnu Mandir." in confirmation.html

    def test_change_of_address(self, client) -> None:
        resp = _post(
            client,
            "change-of-address",
            {"name": "Meera Shah", "email": "meera@gmail.com", "newAddress": "12 Temple Rd, Tampa FL"},
        )

        assert resp.status_code == 201
        row = FormSubmission.query.one()
        assert row.form_type == "CHANGE_OF_ADDRESS"
        assert row.payload["newAddress"] == "12 Temple Rd, Tampa FL"


class TestRequestHandling:
    """Routing, body parsing and failure paths."""

    def test_unknown_form_type_is_404(self, client) -> None:
        resp = _post(client, "volunteer", {"name": "x"})

        assert resp.status_code == 404
        assert resp.get_json()["status"] == "error"

    @pytest.mark.parametrize("body", ["{not json", "[1, 2, 3]"])
    def test_bad_json_body(self, client, body) -> None:
        resp = client.post(
            "/api/v1/forms/sponsorship", data=body, content_type="application/json"
        )

        assert resp.status_code == 400
        assert resp.get_json() == {"status": "error", "message": "Invalid request body"}

    def test_plain_text_body_is_rejected(self, client) -> None:
        resp = client.post("/api/v1/forms/sponsorship", data="hello", content_type="text/plain")

        assert resp.status_code == 400

    def test_request_id_is_echoed(self, client, sponsorship_payload) -> None:
        resp = _post(client, "sponsorship", sponsorship_payload, headers={"X-Request-ID": "abc123"})

        assert resp.headers["X-Request-ID"] == "abc123"
        assert "X-Response-Time-ms" in resp.headers

    def test_database_failure_is_opaque_500(self, client, sponsorship_payload) -> None:
        boom = OperationalError("INSERT", {}, Exception("disk I/O error"))
        with mail.record_messages() as outbox, patch.object(db.session, "commit", side_effect=boom):
            resp = _post(client, "sponsorship", sponsorship_payload)

        assert resp.status_code == 500
        body = resp.get_json()
        assert body == {"status": "error", "message": "Unable to save your submission. Please try again."}
        assert "disk" not in resp.get_data(as_text=True)
        assert outbox == []

    def test_unexpected_error_is_generic_500(self, client, sponsorship_payload) -> None:
        with patch("mandir_forms.routes.forms.submit", side_effect=RuntimeError("kaboom")):
            resp = _post(client, "sponsorship", sponsorship_payload)

        assert resp.status_code == 500
        assert resp.get_json() == {"status": "error", "message": "Internal server error"}

    def test_mail_outage_still_succeeds(self, client, sponsorship_payload, monkeypatch, events) -> None:
        def _refuse(_msg):
            raise ConnectionRefusedError("smtp down")

        monkeypatch.setattr(mail, "send", _refuse)
        resp = _post(client, "sponsorship", sponsorship_payload)

        assert resp.status_code == 201
        assert PujaSponsorship.query.count() == 1
        failed = [e for e in events if e["name"] == "notification_failed"]
        assert {e["kind"] for e in failed} == {"admin", "confirmation"}


class TestApiKeyGuard:
    """X-API-Key is enforced only when FORMS_API_KEY is set."""

    def test_open_when_unset(self, client, sponsorship_payload) -> None:
        assert _post(client, "sponsorship", sponsorship_payload).status_code == 201

    def test_rejects_missing_or_wrong_key(self, app, client, sponsorship_payload) -> None:
        app.config["FORMS_API_KEY"] = "s3cret"

        missing = _post(client, "sponsorship", sponsorship_payload)
        wrong = _post(client, "sponsorship", sponsorship_payload, headers={"X-API-Key": "nope"})

        for resp in (missing, wrong):
            assert resp.status_code == 401
            assert resp.get_json() == {"status": "error", "message": "Invalid or missing API key"}
        assert PujaSponsorship.query.count() == 0

    def test_accepts_matching_key(self, app, client, sponsorship_payload) -> None:
        app.config["FORMS_API_KEY"] = "s3cret"

        resp = _post(client, "sponsorship", sponsorship_payload, headers={"X-API-Key": "s3cret"})

        assert resp.status_code == 201
