from __future__ import annotations

from mandir_forms.extensions import db
from mandir_forms.models.facility_request import FacilityRequest
from mandir_forms.models.form_submission import GENERIC_FORM_TYPES, FormSubmission
from mandir_forms.models.mixins import SubmissionMixin, TimestampMixin
from mandir_forms.models.puja_sponsorship import PujaSponsorship

__all__ = [
    "db",
    "FacilityRequest",
    "FormSubmission",
    "GENERIC_FORM_TYPES",
    "PujaSponsorship",
    "SubmissionMixin",
    "TimestampMixin",
]
