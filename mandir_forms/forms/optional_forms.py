# mandir_forms/forms/optional_forms.py
from __future__ import annotations

from wtforms import BooleanField, Form, StringField
from wtforms.validators import AnyOf, Email

from .validators import FieldIssueMessage, IsoDateField, Required, blank_to_none, coded, strip_value

_OPTIONAL_TEXT = [strip_value, blank_to_none]

STATEMENT_PERIODS = ("current-year", "previous-year", "custom")
STATEMENT_DELIVERY = ("email", "mail")


class BaseContactForm(Form):
    """
    Shared name + email fields for the smaller forms.
    Keeps messages identical across donation statement / address / subscription.
    """

    name = StringField(
        "Name",
        name="name",
        validators=[Required("Name is required")],
        filters=[strip_value],
    )

    email = StringField(
        "Email",
        name="email",
        validators=[
            Required("Email is required"),
            coded(Email(message="Invalid email"), "INVALID_STRING"),
        ],
        filters=[strip_value],
    )


class DonationStatementForm(BaseContactForm):
    """Year-end / custom-range donation statement request."""

    period = StringField(
        "Period",
        name="period",
        validators=[
            Required("Period is required"),
            coded(AnyOf(STATEMENT_PERIODS, message="Must be one of: %(values)s"), "INVALID_ENUM_VALUE"),
        ],
        filters=[strip_value],
    )
    start_date = IsoDateField("Start date", name="startDate")
    end_date = IsoDateField("End date", name="endDate")

    delivery = StringField(
        "Delivery",
        name="delivery",
        validators=[
            Required("Delivery method is required"),
            coded(AnyOf(STATEMENT_DELIVERY, message="Must be one of: %(values)s"), "INVALID_ENUM_VALUE"),
        ],
        filters=[strip_value],
    )
    address = StringField("Mailing address", name="address", filters=_OPTIONAL_TEXT)

    def validate(self, extra_validators=None) -> bool:
        ok = super().validate(extra_validators)

        # Cross-field rules, reported in the same pass as the field checks
        if self.period.data == "custom":
            for field in (self.start_date, self.end_date):
                if field.data is None and not field.errors:
                    field.errors.append(FieldIssueMessage("Required for custom period", "REQUIRED"))
                    ok = False

        if self.delivery.data == "mail" and not self.address.data and not self.address.errors:
            self.address.errors.append(FieldIssueMessage("Required for US Mail", "REQUIRED"))
            ok = False

        return ok


class ChangeOfAddressForm(BaseContactForm):
    phone = StringField("Phone", name="phone", filters=_OPTIONAL_TEXT)
    new_address = StringField(
        "New address",
        name="newAddress",
        validators=[Required("New address is required")],
        filters=[strip_value],
    )


class EmailSubscriptionForm(BaseContactForm):
    subscribe = BooleanField("Subscribe", name="subscribe")
