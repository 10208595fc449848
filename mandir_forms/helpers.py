# mandir_forms/helpers.py
"""
mandir_forms.helpers: small utilities shared by the pipeline and tests.

This module provides:
- new_transaction_id: "req_" + 32 hex chars correlation key
- json_sanitize: recursively convert dates/Decimals into JSON-safe values
- to_formdata: flatten a JSON body into a MultiDict WTForms can process,
  reporting keys whose value is an object or array
- join_notes: merge optional free-text fields into one block
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Tuple
from uuid import uuid4

from werkzeug.datastructures import MultiDict


def new_transaction_id() -> str:
    return f"req_{uuid4().hex}"


def json_sanitize(x: Any) -> Any:
    """
    Recursively convert common non-JSON types into JSON-safe equivalents.
    Used for JSON columns and CMS payloads.
    """
    if x is None or isinstance(x, (str, int, float, bool)):
        return x
    if isinstance(x, Decimal):
        return float(x)
    if isinstance(x, (datetime, date)):
        return x.isoformat()
    if isinstance(x, dict):
        return {str(k): json_sanitize(v) for k, v in x.items()}
    if isinstance(x, (list, tuple)):
        return [json_sanitize(v) for v in x]
    return str(x)


def _form_value(v: Any) -> Optional[str]:
    if v is None:
        return None
    if isinstance(v, bool):
        # BooleanField treats "false" (lowercase) as falsy
        return "true" if v else "false"
    return str(v)


def to_formdata(payload: Mapping[str, Any]) -> Tuple[MultiDict, List[str]]:
    """
    Flatten a decoded JSON object into a MultiDict.

    Returns (formdata, rejected). None values are dropped so they read as
    "missing". Objects and arrays are never stringified: their keys are
    left out of the MultiDict and listed in `rejected` so the caller can
    report a type error for them.
    """
    md: MultiDict = MultiDict()
    rejected: List[str] = []
    for key, value in payload.items():
        if isinstance(value, (dict, list, tuple)):
            rejected.append(str(key))
            continue
        s = _form_value(value)
        if s is not None:
            md.add(str(key), s)
    return md, rejected


def join_notes(*parts: Optional[str]) -> Optional[str]:
    text = "\n\n".join(p for p in parts if p).strip()
    return text or None
