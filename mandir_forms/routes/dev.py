# mandir_forms/routes/dev.py
# Development-only helpers. Registered by the factory when ENV=development.

from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify

from mandir_forms.helpers import new_transaction_id
from mandir_forms.services.notifications import render_email, send_email

log = logging.getLogger(__name__)

bp = Blueprint("dev", __name__)


@bp.post("/test-email")
def test_email():
    cfg = current_app.config
    to = (cfg.get("ADMIN_EMAIL_ADDRESS") or "").strip()
    if not to:
        return jsonify({"success": False, "error": "ADMIN_EMAIL_ADDRESS is not set"}), 500

    org_name = cfg.get("ORG_NAME") or "Vishnu Mandir"
    html, text = render_email(
        "test_email",
        org_name=org_name,
        org_signature=cfg.get("ORG_SIGNATURE") or org_name,
        transaction_id=new_transaction_id(),
    )
    result = send_email(to, f"[{org_name}] Test email", html=html, text=text)

    if not result.ok:
        return jsonify({"success": False, "error": str(result.error)}), 500

    log.info("Test email sent to %s (%s)", to, result.id)
    return jsonify({"success": True, "message": f"Test email sent to {to}", "id": result.id})
