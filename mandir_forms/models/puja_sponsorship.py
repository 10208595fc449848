# ──────────────────────────────────────────────────────────────────────────────
# PujaSponsorship: a devotee's request to sponsor a puja on a given date.
# Created by POST /api/v1/forms/sponsorship; mirrored to the CMS as
# "puja-sponsorships".
# ──────────────────────────────────────────────────────────────────────────────
from datetime import date
from typing import Any, Dict, Optional

from sqlalchemy import Date, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from mandir_forms.extensions import db

from .mixins import SubmissionMixin, TimestampMixin


class PujaSponsorship(db.Model, TimestampMixin, SubmissionMixin):
    __tablename__ = "puja_sponsorships"

    __table_args__ = (
        Index("ix_puja_sponsorships_requested_date", "requested_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # ── Puja ──────────────────────────────────────────────────────
    puja_id: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    puja_service_name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        doc="Display name; the public form only sends the puja id, so it mirrors puja_id.",
    )

    # ── Sponsor ───────────────────────────────────────────────────
    sponsor_name: Mapped[str] = mapped_column(String(200), nullable=False)
    sponsor_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    sponsor_phone: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)

    requested_date: Mapped[date] = mapped_column(Date, nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<PujaSponsorship id={self.id} {self.transaction_id} "
            f"puja={self.puja_id!r} date={self.requested_date} status={self.status}>"
        )

    def to_cms_payload(self) -> Dict[str, Any]:
        return {
            "pujaId": self.puja_id,
            "pujaServiceName": self.puja_service_name,
            "sponsorName": self.sponsor_name,
            "sponsorEmail": self.sponsor_email,
            "sponsorPhone": self.sponsor_phone,
            "requestedDate": self.requested_date.isoformat() if self.requested_date else None,
            "location": self.location,
            "notes": self.notes,
            "status": self.status,
            "transactionId": self.transaction_id,
            "postgresId": self.cms_id,
        }
