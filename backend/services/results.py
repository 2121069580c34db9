"""
Tagged results returned by every public service operation.

Services never let validation or storage faults escape as exceptions;
callers inspect ``result.ok`` / ``result.error`` instead.
"""
import enum
import functools
import logging
from dataclasses import dataclass
from typing import Any, Generic, Optional, Tuple, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from utils.invalidation import View

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorCode(str, enum.Enum):
    VALIDATION_FAILED = "validation_failed"
    NOT_FOUND = "not_found"
    INSUFFICIENT_STOCK = "insufficient_stock"
    CONFLICT = "conflict"
    STORAGE_FAILURE = "storage_failure"


@dataclass(frozen=True)
class ValidationFailed:
    """First offending field of a rejected payload."""

    field: str
    reason: str


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[ErrorCode] = None
    message: Optional[str] = None
    # Set for VALIDATION_FAILED
    field: Optional[str] = None
    # Set for INSUFFICIENT_STOCK
    available: Optional[int] = None
    # Views whose cached data is stale after this operation
    invalidated: Tuple[View, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any = None, invalidated: Tuple[View, ...] = ()) -> "ServiceResult":
        return cls(value=value, invalidated=tuple(invalidated))

    @classmethod
    def failure(cls, error: ErrorCode, message: str, **details: Any) -> "ServiceResult":
        return cls(error=error, message=message, **details)

    @classmethod
    def invalid(cls, failed: ValidationFailed) -> "ServiceResult":
        return cls(
            error=ErrorCode.VALIDATION_FAILED,
            message=failed.reason,
            field=failed.field,
        )

    @classmethod
    def not_found(cls, entity: str) -> "ServiceResult":
        return cls(error=ErrorCode.NOT_FOUND, message=f"{entity} not found")


def storage_guarded(operation: str, message: str):
    """
    Turn storage errors raised by a service function into a
    STORAGE_FAILURE result.

    The wrapped function takes the SQLAlchemy session as its first
    argument; the session is rolled back so no partial write survives.
    The full error is logged here, the caller only sees ``message``.
    """

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(db, *args, **kwargs):
            try:
                return fn(db, *args, **kwargs)
            except SQLAlchemyError:
                db.rollback()
                ids = {k: v for k, v in kwargs.items() if k.endswith("_id")}
                logger.exception("%s failed (args=%s, ids=%s)", operation, args, ids)
                return ServiceResult.failure(ErrorCode.STORAGE_FAILURE, message)

        return wrapper

    return decorator
