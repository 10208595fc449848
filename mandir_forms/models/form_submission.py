from __future__ import annotations

"""
FormSubmission: generic store for the smaller forms
────────────────────────────────────────────────────────────
Donation statements, change of address and email subscriptions share one
table; the validated fields live in the JSON payload column.
"""

from typing import Any, Dict

from sqlalchemy import Index

from mandir_forms.extensions import db

from .mixins import SubmissionMixin, TimestampMixin

GENERIC_FORM_TYPES = (
    "DONATION_STATEMENT",
    "CHANGE_OF_ADDRESS",
    "EMAIL_SUBSCRIPTION",
)


class FormSubmission(db.Model, TimestampMixin, SubmissionMixin):
    """One submission of a payload-only form."""

    __tablename__ = "form_submissions"
    __table_args__ = (
        Index("ix_form_submissions_type_created", "form_type", "created_at"),
    )

    id = db.Column(db.Integer, primary_key=True)

    form_type = db.Column(
        db.Enum(*GENERIC_FORM_TYPES, name="form_submission_type"),
        nullable=False,
        index=True,
    )

    email = db.Column(db.String(255), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=True)

    payload = db.Column(
        db.JSON,
        nullable=False,
        default=dict,
        doc="Validated form fields (dates as ISO strings).",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<FormSubmission {self.form_type} {self.transaction_id}>"

    def to_cms_payload(self) -> Dict[str, Any]:
        return {
            "formType": self.form_type,
            "email": self.email,
            "name": self.name,
            "payload": dict(self.payload or {}),
            "transactionId": self.transaction_id,
            "postgresId": self.cms_id,
        }
