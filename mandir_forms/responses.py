# mandir_forms/responses.py
"""Uniform JSON envelopes for the public form API."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from flask import jsonify

from mandir_forms.errors import Issue


def success_response(message: str, transaction_id: str, status: int = 201):
    resp = jsonify({"status": "success", "message": message, "transactionId": transaction_id})
    resp.status_code = int(status)
    return resp


def error_response(message: str, status: int, errors: Optional[Iterable[Any]] = None):
    payload: dict = {"status": "error", "message": str(message)}
    if errors is not None:
        payload["errors"] = [e.as_dict() if isinstance(e, Issue) else e for e in errors]

    resp = jsonify(payload)
    resp.status_code = int(status)
    return resp
