# mandir_forms/models/mixins.py
"""Shared SQLAlchemy mixins for timestamps and the submission envelope."""

from datetime import datetime, timezone

from mandir_forms.extensions import db


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """Adds created_at and updated_at columns."""

    created_at = db.Column(
        db.DateTime(timezone=True), default=_utcnow, nullable=False, index=True
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )


class SubmissionMixin:
    """
    Envelope columns every stored submission carries.

    transaction_id is generated once by the pipeline and used as the
    correlation key in the CMS copy and in email content.
    """

    transaction_id = db.Column(
        db.String(40),
        unique=True,
        nullable=False,
        index=True,
        doc="req_<32 hex> correlation key",
    )
    status = db.Column(
        db.String(32),
        default="pending",
        nullable=False,
        index=True,
        doc="Lifecycle marker; always 'pending' at creation.",
    )

    @property
    def cms_id(self) -> str:
        """Primary-store id as carried by the CMS copy (postgresId)."""
        return str(self.id)
