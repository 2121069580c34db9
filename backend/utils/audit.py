import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from models.log import Log

logger = logging.getLogger(__name__)


# Called after the business transaction committed, so a failing audit
# write is rolled back on its own and only reported.
def write_log(db: Session, *, user_id, action, resource, company_id=None, status="SUCCESS", meta=None):
    entry = Log(user_id=user_id, company_id=company_id, action=action, resource=resource, status=status, meta=meta or {})
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to write audit log %s/%s", resource, action)
