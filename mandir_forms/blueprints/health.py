from __future__ import annotations

import os
import socket
import time
from datetime import datetime, timezone
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text

from mandir_forms.extensions import db

bp = Blueprint("health", __name__)

APP_STARTED_AT = time.time()
HOSTNAME = socket.gethostname()

STRICT_HEALTH = os.getenv("STRICT_HEALTH", "0").lower() in {"1", "true", "yes", "on"}

BUILD_VERSION = (
    os.getenv("BUILD_VERSION") or os.getenv("RELEASE") or os.getenv("VERSION") or "dev"
)
GIT_SHA = os.getenv("GIT_SHA", "")[:12]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _overall_status(parts: Dict[str, Dict[str, Any]]) -> str:
    states = [p.get("status", "ok") for p in parts.values()]
    if any(s == "fail" for s in states):
        return "fail"
    if any(s == "degraded" for s in states):
        return "degraded"
    return "ok"


def _db_check() -> Dict[str, Any]:
    try:
        db.session.execute(text("SELECT 1"))
        return {"status": "ok", "ok": True, "dialect": db.engine.dialect.name}
    except Exception as e:
        db.session.rollback()
        return {"status": "fail", "ok": False, "error": str(e)}


def _cms_check() -> Dict[str, Any]:
    # Sync is best-effort: a missing token degrades, never fails
    url = current_app.config.get("CMS_API_URL") or ""
    if not (current_app.config.get("CMS_API_TOKEN") or "").strip():
        return {
            "status": "fail" if STRICT_HEALTH else "degraded",
            "ok": False,
            "url": url,
            "reason": "no-api-token",
        }
    return {"status": "ok", "ok": True, "url": url}


def _mail_check() -> Dict[str, Any]:
    cfg = current_app.config
    if not (cfg.get("SENDER_EMAIL_ADDRESS") or "").strip():
        return {
            "status": "fail" if STRICT_HEALTH else "degraded",
            "ok": False,
            "reason": "no-sender-address",
        }
    return {
        "status": "ok",
        "ok": True,
        "server": cfg.get("MAIL_SERVER"),
        "admin_alerts": bool((cfg.get("ADMIN_EMAIL_ADDRESS") or "").strip()),
        "suppressed": bool(cfg.get("MAIL_SUPPRESS_SEND")),
    }


def _summary_payload() -> Dict[str, Any]:
    parts = {
        "database": _db_check(),
        "cms": _cms_check(),
        "mail": _mail_check(),
    }
    overall = _overall_status(parts)
    return {
        "status": overall,
        "version": BUILD_VERSION,
        "git": GIT_SHA,
        "hostname": HOSTNAME,
        "started_at": datetime.fromtimestamp(APP_STARTED_AT, tz=timezone.utc).isoformat(
            timespec="seconds"
        ),
        "uptime_s": int(time.time() - APP_STARTED_AT),
        "now": _now_iso(),
        "parts": parts,
        "flags": {"strict": STRICT_HEALTH},
    }


@bp.get("/health")
def health():
    return jsonify(_summary_payload())


@bp.get("/ready")
def ready():
    p = _summary_payload()
    code = 200 if p["status"] != "fail" else 503
    return jsonify(p), code


@bp.get("/live")
def live():
    return jsonify(
        {
            "status": "ok",
            "now": _now_iso(),
            "uptime_s": int(time.time() - APP_STARTED_AT),
        }
    )
