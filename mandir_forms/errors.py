# mandir_forms/errors.py
"""
Submission error taxonomy.

Only FormValidationError and PersistenceError change what the client sees;
SyncError and NotificationError are recorded server-side and swallowed.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, List, Sequence


@dataclass(frozen=True)
class Issue:
    field: str
    code: str
    message: str

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)


class SubmissionError(Exception):
    """Base class for everything the form pipeline raises."""

    status_code = 500
    public_message = "Internal server error"


class FormValidationError(SubmissionError):
    status_code = 400
    public_message = "Validation failed"

    def __init__(self, issues: Sequence[Issue], message: str | None = None):
        self.issues: List[Issue] = list(issues)
        super().__init__(message or self.public_message)


class PersistenceError(SubmissionError):
    status_code = 500
    public_message = "Unable to save your submission. Please try again."


class SyncError(SubmissionError):
    pass


class NotificationError(SubmissionError):
    pass
