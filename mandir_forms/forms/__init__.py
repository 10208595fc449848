"""
Schema validation for every public form.

validate_payload() is side-effect free: it needs no app or request context
and never touches the database.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

from wtforms import Form

from mandir_forms.errors import Issue
from mandir_forms.helpers import to_formdata

from .facility_request_form import FacilityRequestForm
from .optional_forms import ChangeOfAddressForm, DonationStatementForm, EmailSubscriptionForm
from .sponsorship_form import PujaSponsorshipForm
from .validators import FieldIssueMessage, issue_code

FORM_CLASSES: Dict[str, Type[Form]] = {
    "sponsorship": PujaSponsorshipForm,
    "facility-request": FacilityRequestForm,
    "donation-statement": DonationStatementForm,
    "change-of-address": ChangeOfAddressForm,
    "email-subscription": EmailSubscriptionForm,
}


def collect_issues(form: Form) -> List[Issue]:
    """Flatten field errors into ordered {field, code, message} issues."""
    issues: List[Issue] = []
    for field in form:
        for message in field.errors:
            issues.append(Issue(field=field.name, code=issue_code(message), message=str(message)))
    return issues


def validate_payload(
    form_type: str, raw: Mapping[str, Any]
) -> Tuple[Optional[Dict[str, Any]], List[Issue]]:
    """
    Validate one submission.

    Returns (data, []) on success, where data is keyed by the form's Python
    field names and holds coerced values, or (None, issues) listing every
    failing field. Unknown keys in `raw` are ignored.
    """
    form_cls = FORM_CLASSES.get(form_type)
    if form_cls is None:
        raise KeyError(form_type)

    if hasattr(raw, "getlist"):
        formdata, rejected = raw, []
    else:
        formdata, rejected = to_formdata(raw)
    form = form_cls(formdata=formdata)

    ok = form.validate()

    # Objects/arrays sent for a scalar field replace whatever the field reported
    by_wire_name = {field.name: field for field in form}
    for key in rejected:
        field = by_wire_name.get(key)
        if field is None:
            continue
        field.errors[:] = [FieldIssueMessage("Must be a single value.", "INVALID_TYPE")]
        ok = False

    if not ok:
        return None, collect_issues(form)
    return dict(form.data), []


__all__ = [
    "FORM_CLASSES",
    "ChangeOfAddressForm",
    "DonationStatementForm",
    "EmailSubscriptionForm",
    "FacilityRequestForm",
    "PujaSponsorshipForm",
    "collect_issues",
    "validate_payload",
]
