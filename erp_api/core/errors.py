# erp_api/core/errors.py

import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from erp_api.core.enum_mapper import EnumMapper, UnknownLabelError

logger = logging.getLogger("app")


def commit_or_conflict(db: Session, conflict_detail: str):
    """
    Commit the session, turning a storage-level constraint violation into a
    400 after rollback. The unique constraints are the source of truth; the
    pre-insert lookups done by the routers only produce friendlier messages.
    """
    try:
        db.commit()

    except IntegrityError as exc:
        db.rollback()
        logger.warning(f"Integrity error: {exc.orig}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=conflict_detail,
        )

    except SQLAlchemyError:
        db.rollback()
        raise


def enum_code(mapper: EnumMapper, family: str, value, field: str):
    try:
        return mapper.to_code(family, value)
    except UnknownLabelError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{field.capitalize()} {exc}",
        )
