from typing import Optional

from fastapi import HTTPException, Response, status

from services.results import ErrorCode, ServiceResult
from utils.invalidation import INVALIDATE_HEADER, header_value

_STATUS_BY_ERROR = {
    ErrorCode.VALIDATION_FAILED: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INSUFFICIENT_STOCK: status.HTTP_400_BAD_REQUEST,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.STORAGE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def unwrap(result: ServiceResult, response: Optional[Response] = None):
    """Return the result's value or raise the matching HTTPException."""
    if not result.ok:
        if result.error == ErrorCode.VALIDATION_FAILED:
            detail = {"field": result.field, "reason": result.message}
        else:
            detail = result.message
        raise HTTPException(status_code=_STATUS_BY_ERROR[result.error], detail=detail)

    if response is not None and result.invalidated:
        response.headers[INVALIDATE_HEADER] = header_value(result.invalidated)
    return result.value
