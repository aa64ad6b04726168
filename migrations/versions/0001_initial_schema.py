"""initial posting core schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa


revision: str = "0001"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


account_type_enum = sa.Enum(
    "ASSET", "LIABILITY", "EQUITY", "REVENUE", "EXPENSE",
    name="account_type_enum",
)
period_state_enum = sa.Enum(
    "open", "pending_close", "closed", name="period_state_enum"
)
entry_side_enum = sa.Enum("D", "C", name="entry_side_enum")
party_type_enum = sa.Enum("customer", "supplier", name="party_type_enum")
reval_mode_enum = sa.Enum("dry_run", "commit", name="reval_mode_enum")


def upgrade() -> None:
    op.create_table(
        "company",
        sa.Column("id", sa.String(length=50), nullable=False),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("base_currency", sa.String(length=3), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )

    op.create_table(
        "ledger_account",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.String(length=50), nullable=False),
        sa.Column("code", sa.String(length=40), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("account_type", account_type_enum, nullable=False),
        sa.Column("is_monetary", sa.Boolean(), nullable=False),
        sa.Column("require_cost_center", sa.Boolean(), nullable=False),
        sa.Column("require_project", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["company_id"], ["company.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("company_id", "code", name="uq_ledger_account_code"),
    )
    op.create_index(
        "ix_ledger_account_company_id", "ledger_account", ["company_id"]
    )

    for table in ("dim_cost_center", "dim_project"):
        op.create_table(
            table,
            sa.Column("id", sa.String(length=50), nullable=False),
            sa.Column("name", sa.String(length=100), nullable=False),
            sa.Column("is_active", sa.Boolean(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
        )

    op.create_table(
        "periods",
        sa.Column("company_id", sa.String(length=50), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("state", period_state_enum, nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("updated_by", sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint("company_id", "year", "month"),
    )

    op.create_table(
        "journal",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("company_id", sa.String(length=50), nullable=False),
        sa.Column("posting_date", sa.Date(), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("base_currency", sa.String(length=3), nullable=False),
        sa.Column("rate_used", sa.Numeric(20, 10), nullable=False),
        sa.Column("source_doctype", sa.String(length=50), nullable=False),
        sa.Column("source_id", sa.String(length=100), nullable=False),
        sa.Column("idempotency_key", sa.String(length=200), nullable=False),
        sa.Column("is_reversal", sa.Boolean(), nullable=False),
        sa.Column("reverses_journal_id", sa.Uuid(), nullable=True),
        sa.Column("linked_journal_id", sa.Uuid(), nullable=True),
        sa.Column("memo", sa.String(length=255), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["reverses_journal_id"], ["journal.id"]),
        sa.PrimaryKeyConstraint("id"),
        # exactly-once posting depends on this constraint
        sa.UniqueConstraint(
            "company_id",
            "idempotency_key",
            name="uq_journal_company_idempotency_key",
        ),
    )
    op.create_index("ix_journal_company_id", "journal", ["company_id"])
    op.create_index(
        "ix_journal_reverses_journal_id", "journal", ["reverses_journal_id"]
    )

    op.create_table(
        "journal_line",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("journal_id", sa.Uuid(), nullable=False),
        sa.Column("line_no", sa.Integer(), nullable=False),
        sa.Column("account_code", sa.String(length=40), nullable=False),
        sa.Column("side", entry_side_enum, nullable=False),
        sa.Column("txn_amount", sa.Numeric(20, 6), nullable=False),
        sa.Column("txn_currency", sa.String(length=3), nullable=False),
        sa.Column("base_amount", sa.Numeric(20, 6), nullable=False),
        sa.Column("base_currency", sa.String(length=3), nullable=False),
        sa.Column("party_type", party_type_enum, nullable=True),
        sa.Column("party_id", sa.String(length=50), nullable=True),
        sa.Column("cost_center_id", sa.String(length=50), nullable=True),
        sa.Column("project_id", sa.String(length=50), nullable=True),
        sa.Column("description", sa.String(length=255), nullable=True),
        sa.ForeignKeyConstraint(
            ["journal_id"], ["journal.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["cost_center_id"], ["dim_cost_center.id"]),
        sa.ForeignKeyConstraint(["project_id"], ["dim_project.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_journal_line_journal_id", "journal_line", ["journal_id"]
    )

    op.create_table(
        "outbox",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("company_id", sa.String(length=50), nullable=False),
        sa.Column("topic", sa.String(length=100), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_outbox_company_id", "outbox", ["company_id"])

    op.create_table(
        "fx_admin_rates",
        sa.Column("company_id", sa.String(length=50), nullable=False),
        sa.Column("as_of_date", sa.Date(), nullable=False),
        sa.Column("src_ccy", sa.String(length=3), nullable=False),
        sa.Column("dst_ccy", sa.String(length=3), nullable=False),
        sa.Column("rate", sa.Numeric(20, 10), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("updated_by", sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint(
            "company_id", "as_of_date", "src_ccy", "dst_ccy"
        ),
    )

    op.create_table(
        "fx_account_map",
        sa.Column("company_id", sa.String(length=50), nullable=False),
        sa.Column("gl_account", sa.String(length=40), nullable=False),
        sa.Column("unreal_gain_account", sa.String(length=40), nullable=False),
        sa.Column("unreal_loss_account", sa.String(length=40), nullable=False),
        sa.PrimaryKeyConstraint("company_id", "gl_account"),
    )

    op.create_table(
        "fx_reval_run",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("company_id", sa.String(length=50), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("mode", reval_mode_enum, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("created_by", sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_fx_reval_run_company_id", "fx_reval_run", ["company_id"])

    op.create_table(
        "fx_reval_line",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("run_id", sa.Uuid(), nullable=False),
        sa.Column("gl_account", sa.String(length=40), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("balance_base", sa.Numeric(20, 6), nullable=False),
        sa.Column("balance_src", sa.Numeric(20, 6), nullable=False),
        sa.Column("rate_old", sa.Numeric(20, 10), nullable=False),
        sa.Column("rate_new", sa.Numeric(20, 10), nullable=False),
        sa.Column("delta_base", sa.Numeric(20, 2), nullable=False),
        sa.ForeignKeyConstraint(["run_id"], ["fx_reval_run.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_fx_reval_line_run_id", "fx_reval_line", ["run_id"])

    op.create_table(
        "fx_reval_lock",
        sa.Column("company_id", sa.String(length=50), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("gl_account", sa.String(length=40), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.PrimaryKeyConstraint(
            "company_id", "year", "month", "gl_account", "currency"
        ),
    )


def downgrade() -> None:
    op.drop_table("fx_reval_lock")
    op.drop_index("ix_fx_reval_line_run_id", table_name="fx_reval_line")
    op.drop_table("fx_reval_line")
    op.drop_index("ix_fx_reval_run_company_id", table_name="fx_reval_run")
    op.drop_table("fx_reval_run")
    op.drop_table("fx_account_map")
    op.drop_table("fx_admin_rates")
    op.drop_index("ix_outbox_company_id", table_name="outbox")
    op.drop_table("outbox")
    op.drop_index("ix_journal_line_journal_id", table_name="journal_line")
    op.drop_table("journal_line")
    op.drop_index("ix_journal_reverses_journal_id", table_name="journal")
    op.drop_index("ix_journal_company_id", table_name="journal")
    op.drop_table("journal")
    op.drop_table("periods")
    op.drop_table("dim_project")
    op.drop_table("dim_cost_center")
    op.drop_index("ix_ledger_account_company_id", table_name="ledger_account")
    op.drop_table("ledger_account")
    op.drop_table("company")

    bind = op.get_bind()
    for enum in (
        reval_mode_enum,
        party_type_enum,
        entry_side_enum,
        period_state_enum,
        account_type_enum,
    ):
        enum.drop(bind, checkfirst=True)
