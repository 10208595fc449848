# mandir_forms/services/submissions.py
"""
Submission pipeline: validate → persist → sync (background) → notify.

Only validation and persistence decide the HTTP outcome. Once the row is
committed the submission has succeeded; CMS and email failures are logged
and signalled, never raised.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from flask import current_app

from mandir_forms.errors import FormValidationError, NotificationError
from mandir_forms.extensions import emit_event
from mandir_forms.forms import validate_payload
from mandir_forms.helpers import new_transaction_id
from mandir_forms.services.cms_sync import CmsClient, sync_in_background
from mandir_forms.services.form_types import FormType
from mandir_forms.services.notifications import EmailResult, render_email, send_email
from mandir_forms.services.persistence import persist_submission

log = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    transaction_id: str
    record_id: Any
    message: str
    sync: Optional[Future] = None
    notifications: Dict[str, EmailResult] = field(default_factory=dict)


def submit(form_type: FormType, raw: Mapping[str, Any]) -> SubmissionResult:
    data, issues = validate_payload(form_type.slug, raw)
    if data is None:
        log.info("forms.%s: rejected with %d issue(s)", form_type.slug, len(issues))
        raise FormValidationError(issues)

    txn = new_transaction_id()
    row = persist_submission(form_type, data, txn)

    # Snapshot before handing off; the worker must not touch the session.
    cms_payload = row.to_cms_payload()
    future = sync_in_background(CmsClient.from_app(current_app), form_type.cms_resource, cms_payload)

    results = notify_submission(form_type, data, txn)

    emit_event("submission_received", {"form_type": form_type.slug, "transaction_id": txn, "id": row.id})
    return SubmissionResult(
        transaction_id=txn,
        record_id=row.id,
        message=form_type.success_message,
        sync=future,
        notifications=results,
    )


def _email_context(form_type: FormType, data: Dict[str, Any], txn: str) -> Dict[str, Any]:
    cfg = current_app.config
    org_name = cfg.get("ORG_NAME") or "Vishnu Mandir"
    name, email = form_type.submitter(data)
    note = form_type.confirmation_note.format(org_name=org_name) if form_type.confirmation_note else None
    return {
        "form_type": form_type,
        "data": data,
        "fields": form_type.wire_payload(data),
        "name": name,
        "email": email,
        "transaction_id": txn,
        "org_name": org_name,
        "org_signature": cfg.get("ORG_SIGNATURE") or org_name,
        "confirmation_note": note,
    }


def _report_failure(kind: str, form_type: FormType, txn: str, error: Any) -> None:
    log.error("forms.%s: %s email failed for %s: %s", form_type.slug, kind, txn, error)
    emit_event(
        "notification_failed",
        {"form_type": form_type.slug, "kind": kind, "transaction_id": txn, "error": str(error)},
    )


def _deliver(kind: str, form_type: FormType, txn: str, template: str, ctx: Dict[str, Any], **kwargs) -> EmailResult:
    try:
        html, text = render_email(template, **ctx)
    except Exception as exc:
        log.exception("forms.%s: could not render %s email", form_type.slug, kind)
        result = EmailResult(error=NotificationError(f"template {template}: {exc}"))
    else:
        result = send_email(html=html, text=text, **kwargs)

    if not result.ok:
        _report_failure(kind, form_type, txn, result.error)
    return result


def notify_submission(form_type: FormType, data: Dict[str, Any], txn: str) -> Dict[str, EmailResult]:
    """
    Send the office notification (when ADMIN_EMAIL_ADDRESS is set) and the
    submitter confirmation. Each attempt is independent; failures are
    reported in the returned mapping and never raised.
    """
    admin = (current_app.config.get("ADMIN_EMAIL_ADDRESS") or "").strip()
    ctx = _email_context(form_type, data, txn)
    results: Dict[str, EmailResult] = {}

    if admin:
        results["admin"] = _deliver(
            "admin",
            form_type,
            txn,
            form_type.admin_template,
            ctx,
            to=admin,
            subject=form_type.admin_subject.format(**ctx),
            reply_to=ctx["email"] or None,
        )
    else:
        log.warning("ADMIN_EMAIL_ADDRESS not set, skipping office notification for %s", txn)

    results["confirmation"] = _deliver(
        "confirmation",
        form_type,
        txn,
        form_type.confirm_template,
        ctx,
        to=ctx["email"],
        subject=form_type.confirm_subject.format(**ctx),
        reply_to=admin or None,
    )
    return results
