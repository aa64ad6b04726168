"""
FX revaluation API endpoint.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gl_core.api.errors import to_http_error
from gl_core.exceptions import LedgerError
from gl_core.models.base import get_db
from gl_core.schemas.fx import RevalRequest, RevalResult
from gl_core.services.fx_revaluation_service import FxRevaluationService

router = APIRouter(prefix="/fx", tags=["FX"])


@router.post("/revaluations", response_model=RevalResult, status_code=201)
def revalue(
    request: RevalRequest,
    db: Session = Depends(get_db),
):
    """Run (or dry-run) month-end revaluation of monetary accounts."""
    service = FxRevaluationService(db)
    try:
        return service.revalue_monetary_accounts(request)
    except LedgerError as e:
        raise to_http_error(e)
