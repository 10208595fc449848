# mandir_forms/services/persistence.py
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict

from sqlalchemy.exc import SQLAlchemyError

from mandir_forms.errors import PersistenceError
from mandir_forms.extensions import db

if TYPE_CHECKING:  # pragma: no cover
    from mandir_forms.services.form_types import FormType

logger = logging.getLogger(__name__)


def persist_submission(form_type: "FormType", data: Dict[str, Any], transaction_id: str) -> Any:
    """
    Insert exactly one row for a validated submission and commit it.

    Returns the committed model instance; its `id` is the generated
    identifier carried to the CMS as postgresId. Nothing is visible to
    other sessions unless the commit succeeds.
    """
    row = form_type.build_record(data, transaction_id)

    try:
        db.session.add(row)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error(
            "forms.%s: failed to persist %s: %s",
            form_type.slug,
            transaction_id,
            exc,
            exc_info=True,
        )
        raise PersistenceError(str(exc)) from exc

    logger.info("forms.%s: stored %s id=%s", form_type.slug, transaction_id, row.id)
    return row
