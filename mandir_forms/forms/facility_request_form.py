from wtforms import Form, StringField
from wtforms.validators import Email, NumberRange

from .validators import IsoDateField, Required, WholeNumberField, blank_to_none, coded, strip_value

_OPTIONAL_TEXT = [strip_value, blank_to_none]

MAX_GUESTS = 5000


class FacilityRequestForm(Form):
    """Facility rental request."""

    contact_name = StringField(
        "Contact name",
        name="contactName",
        validators=[Required("Contact name is required")],
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

    event_type = StringField(
        "Event type",
        name="eventType",
        validators=[Required("Event type is required")],
        filters=[strip_value],
    )

    requested_date = IsoDateField(
        "Requested date",
        name="requestedDate",
        validators=[Required("Requested date is required")],
    )

    number_of_guests = WholeNumberField(
        "Number of guests",
        name="numberOfGuests",
        validators=[
            Required("Number of guests is required"),
            coded(NumberRange(min=1, message="At least 1 guest required"), "TOO_SMALL"),
            coded(NumberRange(max=MAX_GUESTS, message="At most %(max)s guests allowed"), "TOO_BIG"),
        ],
    )

    start_time = StringField("Start time", name="startTime", filters=_OPTIONAL_TEXT)
    end_time = StringField("End time", name="endTime", filters=_OPTIONAL_TEXT)
    details = StringField("Details", name="details", filters=_OPTIONAL_TEXT)
    requirements = StringField("Requirements", name="requirements", filters=_OPTIONAL_TEXT)
