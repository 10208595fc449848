from __future__ import annotations

from mandir_forms.services.cms_sync import CmsClient, sync_in_background
from mandir_forms.services.form_types import FORM_TYPES, FormType, get_form_type
from mandir_forms.services.notifications import EmailResult, render_email, send_email
from mandir_forms.services.persistence import persist_submission
from mandir_forms.services.submissions import SubmissionResult, notify_submission, submit

__all__ = [
    "CmsClient",
    "EmailResult",
    "FORM_TYPES",
    "FormType",
    "SubmissionResult",
    "get_form_type",
    "notify_submission",
    "persist_submission",
    "render_email",
    "send_email",
    "submit",
    "sync_in_background",
]
