"""
Dimension validator.

Checks cost center and project references on journal lines:
the record must exist and be active, and accounts that require
a dimension must receive one. Read-only.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from gl_core.exceptions import DimensionNotFound, DimensionRequired
from gl_core.models.dimension import CostCenter, Project
from gl_core.models.enums import DimensionKind
from gl_core.models.ledger_account import LedgerAccount


_DIMENSION_MODELS = {
    DimensionKind.COST_CENTER: CostCenter,
    DimensionKind.PROJECT: Project,
}


class DimensionValidator:

    def __init__(self, db: Session):
        self.db = db

    def ensure_dim_valid(
        self, dimension_id: str | None, kind: DimensionKind
    ) -> None:
        """No-op for None; otherwise the id must be an active record."""
        if dimension_id is None:
            return
        record = self.db.get(_DIMENSION_MODELS[kind], dimension_id)
        if record is None or not record.is_active:
            raise DimensionNotFound(kind.value, dimension_id)

    def ensure_dims_meet_account_policy(
        self,
        account_code: str,
        company_id: str,
        cost_center: str | None = None,
        project: str | None = None,
    ) -> None:
        """
        Enforce the account's dimension requirement flags.

        An account with no policy row has no requirements.
        """
        account = self.db.execute(
            select(LedgerAccount).where(
                LedgerAccount.company_id == company_id,
                LedgerAccount.code == account_code,
            )
        ).scalar_one_or_none()

        if account is None:
            return
        if account.require_cost_center and not cost_center:
            raise DimensionRequired(account_code, DimensionKind.COST_CENTER.value)
        if account.require_project and not project:
            raise DimensionRequired(account_code, DimensionKind.PROJECT.value)
