# mandir_forms/services/notifications.py
"""
Transactional email through Flask-Mail.

send_email() never raises: it returns an EmailResult holding either the
provider message id or a NotificationError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

from flask import current_app, render_template
from flask_mail import Message
from jinja2 import TemplateNotFound

from mandir_forms.errors import NotificationError
from mandir_forms.extensions import mail

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailResult:
    id: Optional[str] = None
    error: Optional[NotificationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _failed(message: str) -> EmailResult:
    log.error("Email not sent: %s", message)
    return EmailResult(error=NotificationError(message))


def send_email(
    to: Union[str, Iterable[str]],
    subject: str,
    *,
    html: Optional[str] = None,
    text: Optional[str] = None,
    reply_to: Optional[str] = None,
) -> EmailResult:
    sender = (current_app.config.get("SENDER_EMAIL_ADDRESS") or "").strip()
    if not sender:
        return _failed("SENDER_EMAIL_ADDRESS is not set")

    if not (html or "").strip() and not (text or "").strip():
        return _failed("Either text or html is required")

    recipients = [to] if isinstance(to, str) else list(to)

    try:
        msg = Message(
            subject=subject,
            recipients=recipients,
            sender=sender,
            html=html or None,
            body=text or None,
            reply_to=reply_to or None,
        )
        mail.send(msg)
    except Exception as exc:
        log.error("Mail send failed (to=%s subject=%r): %s", ", ".join(recipients), subject, exc, exc_info=True)
        return EmailResult(error=NotificationError(str(exc)))

    return EmailResult(id=msg.msgId)


def render_email(template: str, /, **ctx) -> Tuple[str, Optional[str]]:
    """
    Render templates/emails/<template>.html and, when present, <template>.txt.
    HTML is autoescaped; the text part is plain. `ctx` may carry any key,
    including `name` (the submitter).
    """
    html = render_template(f"emails/{template}.html", **ctx)
    try:
        text = render_template(f"emails/{template}.txt", **ctx)
    except TemplateNotFound:
        text = None
    return html, text
