"""initial schema

Revision ID: 5e2b7c41d9a0
Revises:
Create Date: 2026-10-19 09:12:40.214517
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "5e2b7c41d9a0"
down_revision = None
branch_labels = None
depends_on = None


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _envelope_columns():
    # Shared by every submission table (TimestampMixin + SubmissionMixin)
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("transaction_id", sa.String(length=40), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
    ]


def _envelope_indexes(batch_op, table: str) -> None:
    batch_op.create_index(f"ix_{table}_created_at", ["created_at"], unique=False)
    batch_op.create_index(f"ix_{table}_transaction_id", ["transaction_id"], unique=True)
    batch_op.create_index(f"ix_{table}_status", ["status"], unique=False)


def upgrade():
    # --- puja_sponsorships ---
    op.create_table(
        "puja_sponsorships",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("puja_id", sa.String(length=120), nullable=False),
        sa.Column("puja_service_name", sa.String(length=200), nullable=False),
        sa.Column("sponsor_name", sa.String(length=200), nullable=False),
        sa.Column("sponsor_email", sa.String(length=255), nullable=False),
        sa.Column("sponsor_phone", sa.String(length=40), nullable=True),
        sa.Column("requested_date", sa.Date(), nullable=False),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_envelope_columns(),
    )
    with op.batch_alter_table("puja_sponsorships") as batch_op:
        _envelope_indexes(batch_op, "puja_sponsorships")
        batch_op.create_index("ix_puja_sponsorships_puja_id", ["puja_id"], unique=False)
        batch_op.create_index("ix_puja_sponsorships_sponsor_email", ["sponsor_email"], unique=False)
        batch_op.create_index("ix_puja_sponsorships_requested_date", ["requested_date"], unique=False)

    # --- facility_requests ---
    op.create_table(
        "facility_requests",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("requester_name", sa.String(length=200), nullable=False),
        sa.Column("requester_email", sa.String(length=255), nullable=False),
        sa.Column("requester_phone", sa.String(length=40), nullable=False),
        sa.Column("event_type", sa.String(length=120), nullable=False),
        sa.Column("event_name", sa.String(length=200), nullable=True),
        sa.Column("event_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.String(length=20), nullable=True),
        sa.Column("end_time", sa.String(length=20), nullable=True),
        sa.Column("number_of_guests", sa.Integer(), nullable=False),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("requirements", sa.Text(), nullable=True),
        *_envelope_columns(),
        sa.CheckConstraint("number_of_guests >= 1", name="ck_facility_requests_guests_pos"),
    )
    with op.batch_alter_table("facility_requests") as batch_op:
        _envelope_indexes(batch_op, "facility_requests")
        batch_op.create_index("ix_facility_requests_requester_email", ["requester_email"], unique=False)
        batch_op.create_index("ix_facility_requests_event_date", ["event_date"], unique=False)

    # --- form_submissions ---
    op.create_table(
        "form_submissions",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "form_type",
            sa.Enum(
                "DONATION_STATEMENT",
                "CHANGE_OF_ADDRESS",
                "EMAIL_SUBSCRIPTION",
                name="form_submission_type",
            ),
            nullable=False,
        ),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=True),
        sa.Column("payload", sa.JSON(), nullable=False),
        *_envelope_columns(),
    )
    with op.batch_alter_table("form_submissions") as batch_op:
        _envelope_indexes(batch_op, "form_submissions")
        batch_op.create_index("ix_form_submissions_form_type", ["form_type"], unique=False)
        batch_op.create_index("ix_form_submissions_email", ["email"], unique=False)
        batch_op.create_index("ix_form_submissions_type_created", ["form_type", "created_at"], unique=False)


def downgrade():
    op.drop_table("form_submissions")
    op.drop_table("facility_requests")
    op.drop_table("puja_sponsorships")
    sa.Enum(name="form_submission_type").drop(op.get_bind(), checkfirst=True)
