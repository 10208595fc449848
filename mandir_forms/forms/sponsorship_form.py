from wtforms import FileField, Form, StringField
from wtforms.validators import Email

from .validators import AllowedUpload, IsoDateField, Required, blank_to_none, coded, strip_value

_OPTIONAL_TEXT = [strip_value, blank_to_none]


class PujaSponsorshipForm(Form):
    """Puja sponsorship request (JSON or multipart with optional attachment)."""

    devotee_name = StringField(
        "Full name",
        name="devoteeName",
        validators=[Required("Full name is required")],
        filters=[strip_value],
    )

    email = StringField(
        "Email",
        name="email",
        validators=[
            Required("Email is required"),
            coded(Email(message="Invalid email address"), "INVALID_STRING"),
        ],
        filters=[strip_value],
    )

    phone = StringField(
        "Phone",
        name="phone",
        validators=[Required("Phone is required")],
        filters=[strip_value],
    )

    puja_id = StringField(
        "Puja",
        name="pujaId",
        validators=[Required("Puja selection is required")],
        filters=[strip_value],
    )

    sponsorship_date = IsoDateField(
        "Preferred date",
        name="sponsorshipDate",
        validators=[Required("Preferred date is required")],
    )

    special_instructions = StringField("Special instructions", name="specialInstructions", filters=_OPTIONAL_TEXT)
    additional_notes = StringField("Additional notes", name="additionalNotes", filters=_OPTIONAL_TEXT)
    location = StringField("Location", name="location", filters=_OPTIONAL_TEXT)

    # Accepted and checked, not persisted
    attachment = FileField("Attachment", name="attachment", validators=[AllowedUpload()])
