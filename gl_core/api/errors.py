"""
Translation of posting core errors into HTTP errors.

Validation failures are 400, locked periods 423 (so clients can
tell them apart from bad input), missing records 404.
"""

from fastapi import HTTPException

from gl_core.exceptions import (
    LedgerError,
    LedgerNotFoundError,
    PeriodLocked,
    PostingValidationError,
)


def to_http_error(error: LedgerError) -> HTTPException:
    if isinstance(error, PeriodLocked):
        status_code = 423
    elif isinstance(error, LedgerNotFoundError):
        status_code = 404
    elif isinstance(error, PostingValidationError):
        status_code = 400
    else:
        status_code = 500
    return HTTPException(
        status_code=status_code,
        detail={"code": error.code, "message": str(error)},
    )
