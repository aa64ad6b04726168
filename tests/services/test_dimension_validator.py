"""
Tests for the DimensionValidator.
"""

import pytest

from gl_core.exceptions import DimensionNotFound, DimensionRequired
from gl_core.models.enums import DimensionKind
from gl_core.services.dimension_validator import DimensionValidator


class TestEnsureDimValid:

    def test_none_is_accepted(self, db_session):
        validator = DimensionValidator(db_session)
        validator.ensure_dim_valid(None, DimensionKind.COST_CENTER)
        validator.ensure_dim_valid(None, DimensionKind.PROJECT)

    def test_active_records_pass(self, db_session, usd_company):
        validator = DimensionValidator(db_session)
        validator.ensure_dim_valid("CC-OPS", DimensionKind.COST_CENTER)
        validator.ensure_dim_valid("PRJ-1", DimensionKind.PROJECT)

    def test_unknown_cost_center_rejected(self, db_session, usd_company):
        validator = DimensionValidator(db_session)
        with pytest.raises(DimensionNotFound) as exc:
            validator.ensure_dim_valid("CC-NOPE", DimensionKind.COST_CENTER)
        assert exc.value.kind == "cost_center"
        assert exc.value.dimension_id == "CC-NOPE"

    def test_inactive_cost_center_rejected(self, db_session, usd_company):
        validator = DimensionValidator(db_session)
        with pytest.raises(DimensionNotFound):
            validator.ensure_dim_valid("CC-OLD", DimensionKind.COST_CENTER)

    def test_ids_are_not_shared_across_kinds(self, db_session, usd_company):
        validator = DimensionValidator(db_session)
        with pytest.raises(DimensionNotFound):
            validator.ensure_dim_valid("CC-OPS", DimensionKind.PROJECT)


class TestAccountPolicy:

    def test_required_cost_center_missing(self, db_session, usd_company):
        validator = DimensionValidator(db_session)
        with pytest.raises(DimensionRequired) as exc:
            validator.ensure_dims_meet_account_policy("Expense", "acme")
        assert exc.value.account_code == "Expense"
        assert exc.value.kind == "cost_center"

    def test_required_cost_center_present(self, db_session, usd_company):
        validator = DimensionValidator(db_session)
        validator.ensure_dims_meet_account_policy(
            "Expense", "acme", cost_center="CC-OPS"
        )

    def test_account_without_requirements(self, db_session, usd_company):
        validator = DimensionValidator(db_session)
        validator.ensure_dims_meet_account_policy("Revenue", "acme")

    def test_unknown_account_has_no_requirements(self, db_session, usd_company):
        validator = DimensionValidator(db_session)
        validator.ensure_dims_meet_account_policy("Suspense", "acme")

    def test_policy_is_per_company(self, db_session, usd_company, myr_company):
        # acme-my has no Expense account, so no requirement applies
        validator = DimensionValidator(db_session)
        validator.ensure_dims_meet_account_policy("Expense", "acme-my")
