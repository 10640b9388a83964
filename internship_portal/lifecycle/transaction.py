import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from internship_portal.lifecycle.errors import Conflict

logger = logging.getLogger(__name__)


def flush_or_conflict(db: Session, conflict: Conflict) -> None:
    """Flush pending writes, turning a unique-constraint violation into ``conflict``."""
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Integrity error on flush: %s", e.orig)
        raise conflict from e


def commit_or_conflict(db: Session, conflict: Conflict) -> None:
    """Commit the unit of work, turning a unique-constraint violation into ``conflict``."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Integrity error on commit: %s", e.orig)
        raise conflict from e
