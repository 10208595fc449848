# mandir_forms/services/form_types.py
"""
Closed registry of public form types.

Each FormType bundles everything that differs between forms: the WTForms
class, how a validated mapping becomes a row, the CMS resource, and the
email templates/subjects. The pipeline and the route are written once
against this descriptor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Type

from wtforms import Form

from mandir_forms.forms import FORM_CLASSES
from mandir_forms.helpers import join_notes, json_sanitize
from mandir_forms.models import FacilityRequest, FormSubmission, PujaSponsorship

RecordBuilder = Callable[[Dict[str, Any], str], Any]


@dataclass(frozen=True)
class FormType:
    slug: str
    tag: str
    label: str
    form_class: Type[Form]
    cms_resource: str
    build_record: RecordBuilder
    admin_template: str
    confirm_template: str
    admin_subject: str
    confirm_subject: str
    success_message: str
    name_field: str = "name"
    email_field: str = "email"
    confirmation_note: Optional[str] = None

    def submitter(self, data: Dict[str, Any]) -> tuple[str, str]:
        return str(data.get(self.name_field) or ""), str(data.get(self.email_field) or "")

    def wire_payload(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Validated data re-keyed by the public field names, JSON-safe, unset fields dropped."""
        form = self.form_class()
        out: Dict[str, Any] = {}
        for attr, field in form._fields.items():
            value = data.get(attr)
            if value is None or attr == "attachment":
                continue
            out[field.name] = value
        return json_sanitize(out)


# ─────────────────────────────────────────────────────────────
# Persistence mappings
# ─────────────────────────────────────────────────────────────
def _sponsorship_record(data: Dict[str, Any], transaction_id: str) -> PujaSponsorship:
    return PujaSponsorship(
        puja_id=data["puja_id"],
        puja_service_name=data["puja_id"],
        sponsor_name=data["devotee_name"],
        sponsor_email=data["email"],
        sponsor_phone=data["phone"],
        requested_date=data["sponsorship_date"],
        location=data.get("location"),
        notes=join_notes(data.get("special_instructions"), data.get("additional_notes")),
        status="pending",
        transaction_id=transaction_id,
    )


def _facility_record(data: Dict[str, Any], transaction_id: str) -> FacilityRequest:
    return FacilityRequest(
        requester_name=data["contact_name"],
        requester_email=data["email"],
        requester_phone=data["phone"],
        event_type=data["event_type"],
        event_name=None,
        event_date=data["requested_date"],
        start_time=data.get("start_time"),
        end_time=data.get("end_time"),
        number_of_guests=data["number_of_guests"],
        details=data.get("details"),
        requirements=data.get("requirements"),
        status="pending",
        transaction_id=transaction_id,
    )


def _generic_record(slug: str) -> RecordBuilder:
    def _build(data: Dict[str, Any], transaction_id: str) -> FormSubmission:
        return FormSubmission(
            form_type=FORM_TYPES[slug].tag,
            email=data["email"],
            name=data.get("name"),
            payload=FORM_TYPES[slug].wire_payload(data),
            status="pending",
            transaction_id=transaction_id,
        )

    return _build


# ─────────────────────────────────────────────────────────────
# Registry
# ─────────────────────────────────────────────────────────────
_GENERIC_SUCCESS = "Your request has been submitted successfully."

FORM_TYPES: Dict[str, FormType] = {
    "sponsorship": FormType(
        slug="sponsorship",
        tag="SPONSORSHIP",
        label="puja sponsorship",
        form_class=FORM_CLASSES["sponsorship"],
        cms_resource="puja-sponsorships",
        build_record=_sponsorship_record,
        admin_template="sponsorship_admin",
        confirm_template="sponsorship_confirmation",
        admin_subject="[{org_name}] New puja sponsorship: {name}",
        confirm_subject="{org_name} – Puja sponsorship received",
        success_message="Your puja sponsorship request has been submitted successfully.",
        name_field="devotee_name",
    ),
    "facility-request": FormType(
        slug="facility-request",
        tag="FACILITY_REQUEST",
        label="facility request",
        form_class=FORM_CLASSES["facility-request"],
        cms_resource="facility-requests",
        build_record=_facility_record,
        admin_template="facility_request_admin",
        confirm_template="facility_request_confirmation",
        admin_subject="[{org_name}] New facility request: {name}",
        confirm_subject="{org_name} – Facility request received",
        success_message="Your facility request has been submitted successfully.",
        name_field="contact_name",
    ),
    "donation-statement": FormType(
        slug="donation-statement",
        tag="DONATION_STATEMENT",
        label="donation statement",
        form_class=FORM_CLASSES["donation-statement"],
        cms_resource="form-submissions",
        build_record=_generic_record("donation-statement"),
        admin_template="form_submission_admin",
        confirm_template="form_submission_confirmation",
        admin_subject="[{org_name}] New donation statement form: {name}",
        confirm_subject="{org_name} – Request received",
        success_message=_GENERIC_SUCCESS,
        confirmation_note=(
            "We have received your donation statement request. "
            "We will process it and send your statement accordingly."
        ),
    ),
    "change-of-address": FormType(
        slug="change-of-address",
        tag="CHANGE_OF_ADDRESS",
        label="change of address",
        form_class=FORM_CLASSES["change-of-address"],
        cms_resource="form-submissions",
        build_record=_generic_record("change-of-address"),
        admin_template="form_submission_admin",
        confirm_template="form_submission_confirmation",
        admin_subject="[{org_name}] New change of address form: {name}",
        confirm_subject="{org_name} – Request received",
        success_message=_GENERIC_SUCCESS,
        confirmation_note=(
            "We have received your change of address request. "
            "We will update our records accordingly."
        ),
    ),
    "email-subscription": FormType(
        slug="email-subscription",
        tag="EMAIL_SUBSCRIPTION",
        label="email subscription",
        form_class=FORM_CLASSES["email-subscription"],
        cms_resource="form-submissions",
        build_record=_generic_record("email-subscription"),
        admin_template="form_submission_admin",
        confirm_template="form_submission_confirmation",
        admin_subject="[{org_name}] New email subscription: {name}",
        confirm_subject="{org_name} – Subscription confirmed",
        success_message="Your email subscription has been updated successfully.",
        confirmation_note=(
            "We have received your email subscription request. "
            "Thank you for staying connected with {org_name}."
        ),
    ),
}


def get_form_type(slug: str) -> Optional[FormType]:
    return FORM_TYPES.get(slug)
