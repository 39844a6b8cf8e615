from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from services.errors import OperationFailedError, ServiceError
from utils.logger import get_logger

logger = get_logger("db")


@contextmanager
def unit_of_work(db: Session, failure_message: str):
    """
    Commit everything done inside the block as one transaction.

    Service errors roll back and propagate as-is; database errors roll back
    and become OperationFailedError(failure_message).
    """
    try:
        yield
        db.commit()
    except ServiceError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("%s: %s", failure_message, e, exc_info=True)
        raise OperationFailedError(failure_message) from e
