# ──────────────────────────────────────────────────────────────────────────────
# FacilityRequest: rental request for the temple hall / facilities.
# ──────────────────────────────────────────────────────────────────────────────
from datetime import date
from typing import Any, Dict, Optional

from sqlalchemy import CheckConstraint, Date, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from mandir_forms.extensions import db

from .mixins import SubmissionMixin, TimestampMixin


class FacilityRequest(db.Model, TimestampMixin, SubmissionMixin):
    __tablename__ = "facility_requests"

    __table_args__ = (
        CheckConstraint("number_of_guests >= 1", name="ck_facility_requests_guests_pos"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    requester_name: Mapped[str] = mapped_column(String(200), nullable=False)
    requester_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    requester_phone: Mapped[str] = mapped_column(String(40), nullable=False)

    event_type: Mapped[str] = mapped_column(String(120), nullable=False)
    event_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    event_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    start_time: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    end_time: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    number_of_guests: Mapped[int] = mapped_column(Integer, nullable=False)

    details: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    requirements: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<FacilityRequest id={self.id} {self.transaction_id} "
            f"{self.event_type!r} on {self.event_date} guests={self.number_of_guests}>"
        )

    def to_cms_payload(self) -> Dict[str, Any]:
        return {
            "requesterName": self.requester_name,
            "requesterEmail": self.requester_email,
            "requesterPhone": self.requester_phone,
            "eventType": self.event_type,
            "eventName": self.event_name,
            "eventDate": self.event_date.isoformat() if self.event_date else None,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "numberOfGuests": self.number_of_guests,
            "details": self.details,
            "requirements": self.requirements,
            "status": self.status,
            "transactionId": self.transaction_id,
            "postgresId": self.cms_id,
        }
