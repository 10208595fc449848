# mandir_forms/forms/validators.py
"""
WTForms building blocks that keep a machine-readable code on every error.

WTForms stores error messages as plain strings; FieldIssueMessage is a str
that also carries `.code`, so the API can report {field, code, message}
without a second lookup table.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Callable, Iterable, Optional

from werkzeug.datastructures import FileStorage
from wtforms import DateField, IntegerField
from wtforms.validators import StopValidation, ValidationError

DEFAULT_CODE = "INVALID"

ALLOWED_ATTACHMENT_TYPES = (
    "application/pdf",
    "image/jpeg",
    "image/png",
    "image/webp",
)
MAX_ATTACHMENT_BYTES = 10 * 1024 * 1024

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_ISO_DATETIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}")


class FieldIssueMessage(str):
    """Error message that remembers its issue code."""

    code: str = DEFAULT_CODE

    def __new__(cls, message: str, code: str = DEFAULT_CODE) -> "FieldIssueMessage":
        obj = super().__new__(cls, message)
        obj.code = code
        return obj


def issue_code(message: Any) -> str:
    return getattr(message, "code", DEFAULT_CODE)


def strip_value(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def blank_to_none(value: Any) -> Any:
    return None if value == "" else value


# ─────────────────────────────────────────────────────────────
# Validators
# ─────────────────────────────────────────────────────────────
def _has_input(field) -> bool:
    for raw in field.raw_data or ():
        if isinstance(raw, str):
            if raw.strip():
                return True
        elif raw is not None:
            return True
    return False


class Required:
    """
    Like InputRequired, but whitespace-only input counts as missing.
    Clears earlier errors so a missing field reports exactly one issue.
    """

    field_flags = {"required": True}

    def __init__(self, message: Optional[str] = None):
        self.message = message

    def __call__(self, form, field) -> None:
        if _has_input(field):
            return
        message = self.message or f"{field.label.text} is required"
        field.errors[:] = []
        raise StopValidation(FieldIssueMessage(message, "REQUIRED"))


def coded(validator: Callable[[Any, Any], None], code: str) -> Callable[[Any, Any], None]:
    """
    Wrap a stock WTForms validator so its error carries `code`.
    Skipped once the field already has an error (bad date, bad number, ...).
    """

    def _check(form, field) -> None:
        if field.errors:
            return
        try:
            validator(form, field)
        except StopValidation as exc:
            msg = exc.args[0] if exc.args else ""
            raise StopValidation(FieldIssueMessage(str(msg), code)) from exc
        except ValidationError as exc:
            msg = exc.args[0] if exc.args else ""
            raise ValidationError(FieldIssueMessage(str(msg), code)) from exc

    field_flags = getattr(validator, "field_flags", None)
    if field_flags:
        _check.field_flags = field_flags  # type: ignore[attr-defined]
    return _check


class AllowedUpload:
    """Optional multipart attachment: checks type and size; never stores it."""

    def __init__(
        self,
        mimetypes: Iterable[str] = ALLOWED_ATTACHMENT_TYPES,
        max_bytes: int = MAX_ATTACHMENT_BYTES,
    ):
        self.mimetypes = tuple(mimetypes)
        self.max_bytes = int(max_bytes)

    @staticmethod
    def _size(upload: FileStorage) -> int:
        stream = upload.stream
        pos = stream.tell()
        stream.seek(0, 2)
        size = stream.tell()
        stream.seek(pos)
        return size

    def __call__(self, form, field) -> None:
        upload = field.data
        if upload is None or upload == "":
            return
        if not isinstance(upload, FileStorage):
            raise ValidationError(FieldIssueMessage("Attachment must be an uploaded file.", "INVALID_FILE"))
        if not upload.filename:
            return
        if upload.mimetype not in self.mimetypes:
            raise ValidationError(
                FieldIssueMessage("Invalid file type. Allowed: PDF, JPEG, PNG, WebP.", "INVALID_FILE")
            )
        if self._size(upload) > self.max_bytes:
            raise ValidationError(
                FieldIssueMessage(
                    f"Attachment exceeds {self.max_bytes // (1024 * 1024)}MB.", "INVALID_FILE"
                )
            )


# ─────────────────────────────────────────────────────────────
# Coercing fields
# ─────────────────────────────────────────────────────────────
def parse_iso_date(raw: str) -> date:
    """
    Accept YYYY-MM-DD or an extended ISO-8601 datetime (trailing Z allowed).
    Compact forms such as 20261114 are rejected.
    """
    invalid = FieldIssueMessage("Must be a valid date.", "INVALID_DATE")
    if _ISO_DATE_RE.match(raw):
        try:
            return date.fromisoformat(raw)
        except ValueError as exc:
            raise ValueError(invalid) from exc
    if not _ISO_DATETIME_RE.match(raw):
        raise ValueError(invalid)
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError as exc:
        raise ValueError(invalid) from exc


class IsoDateField(DateField):
    """string → datetime.date; blank input reads as missing."""

    def process_formdata(self, valuelist) -> None:
        if not valuelist:
            return
        raw = str(valuelist[0]).strip()
        self.data = None
        if not raw:
            return
        self.data = parse_iso_date(raw)


class WholeNumberField(IntegerField):
    """string → int; accepts "5" and "5.0", rejects "five" and "2.5"."""

    def process_formdata(self, valuelist) -> None:
        if not valuelist:
            return
        raw = str(valuelist[0]).strip()
        self.data = None
        if not raw:
            return
        try:
            num = float(raw)
        except ValueError as exc:
            raise ValueError(FieldIssueMessage("Must be a number.", "INVALID_TYPE")) from exc
        if not num.is_integer():
            raise ValueError(FieldIssueMessage("Must be a whole number.", "INVALID_TYPE"))
        self.data = int(num)
