# mandir_forms/routes/forms.py
from __future__ import annotations

"""
Public form API
────────────────────────────────────────────────────────────
• Mounted at /api/v1/forms by the app factory
• POST /<form_type> for every registered form type
• JSON or multipart/urlencoded bodies (multipart carries the attachment)
• Optional X-API-Key guard (FORMS_API_KEY)
• Envelopes: 201 success / 400 validation / 404 unknown / 500 failure
"""

import hmac
import logging
from typing import Any, Mapping

from flask import Blueprint, current_app, request
from werkzeug.datastructures import CombinedMultiDict
from werkzeug.exceptions import BadRequest

from mandir_forms.errors import FormValidationError, SubmissionError
from mandir_forms.responses import error_response, success_response
from mandir_forms.services.form_types import get_form_type
from mandir_forms.services.submissions import submit

log = logging.getLogger(__name__)

bp = Blueprint("forms", __name__)

_FORM_MIMETYPES = {"multipart/form-data", "application/x-www-form-urlencoded"}


@bp.before_request
def _require_api_key():
    expected = str(current_app.config.get("FORMS_API_KEY") or "")
    if not expected or request.method == "OPTIONS":
        return None

    supplied = request.headers.get("X-API-Key", "")
    if not hmac.compare_digest(supplied.encode(), expected.encode()):
        log.warning("forms: rejected request with missing or invalid API key")
        return error_response("Invalid or missing API key", 401)
    return None


def _get_payload() -> Mapping[str, Any]:
    if request.is_json:
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            raise BadRequest("Invalid request body")
        return body

    if request.mimetype in _FORM_MIMETYPES:
        return CombinedMultiDict([request.files, request.form])

    raise BadRequest("Invalid request body")


@bp.post("/<form_type>")
def submit_form(form_type: str):
    descriptor = get_form_type(form_type)
    if descriptor is None:
        return error_response(f"Unknown form type: {form_type}", 404)

    try:
        payload = _get_payload()
    except BadRequest as exc:
        return error_response(exc.description or "Invalid request body", 400)

    try:
        result = submit(descriptor, payload)
    except FormValidationError as exc:
        return error_response(exc.public_message, exc.status_code, exc.issues)
    except SubmissionError as exc:
        return error_response(exc.public_message, exc.status_code)
    except Exception:
        log.exception("forms.%s: unexpected failure", descriptor.slug)
        return error_response("Internal server error", 500)

    return success_response(result.message, result.transaction_id)
