"""
Shared test fixtures.

Sets up an isolated SQLite database so tests never touch the
real one. Tables are created before each test and dropped after,
so every test starts from an empty ledger.
"""

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from gl_core.main import app
from gl_core.models import (
    AccountType,
    Company,
    CostCenter,
    FxAccountMap,
    FxAdminRate,
    LedgerAccount,
    Project,
)
from gl_core.models.base import Base, get_db


# SQLite keeps the suite free of database infrastructure.
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db_session):
    """
    Provide a test client bound to the test database.

    get_db is overridden so the app and the test share a session.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# --- Seed data ---

def _account(company_id, code, account_type, monetary=False, **flags):
    return LedgerAccount(
        company_id=company_id,
        code=code,
        name=code,
        account_type=account_type,
        is_monetary=monetary,
        **flags,
    )


@pytest.fixture
def usd_company(db_session):
    """
    A USD company with the chart of accounts the posting rules use.

    Expense requires a cost center; nothing else has dimension
    requirements.
    """
    company = Company(id="acme", code="ACME", name="Acme Inc", base_currency="USD")
    db_session.add(company)
    db_session.add_all([
        _account("acme", "AR", AccountType.ASSET, monetary=True),
        _account("acme", "Bank", AccountType.ASSET, monetary=True),
        _account("acme", "Inventory", AccountType.ASSET),
        _account("acme", "Tax Receivable", AccountType.ASSET),
        _account("acme", "AP", AccountType.LIABILITY, monetary=True),
        _account("acme", "Tax Payable", AccountType.LIABILITY),
        _account("acme", "Revenue", AccountType.REVENUE),
        _account("acme", "COGS", AccountType.EXPENSE),
        _account(
            "acme", "Expense", AccountType.EXPENSE, require_cost_center=True
        ),
    ])
    db_session.add_all([
        CostCenter(id="CC-OPS", name="Operations"),
        CostCenter(id="CC-OLD", name="Closed office", is_active=False),
        Project(id="PRJ-1", name="Launch"),
    ])
    db_session.commit()
    return company


@pytest.fixture
def myr_company(db_session):
    """
    A MYR company that trades in USD.

    USD->MYR is 4.0 from Jan 1 2024. AR is monetary and mapped to
    FX Gain / FX Loss.
    """
    company = Company(
        id="acme-my", code="ACME-MY", name="Acme Malaysia", base_currency="MYR"
    )
    db_session.add(company)
    db_session.add_all([
        _account("acme-my", "AR", AccountType.ASSET, monetary=True),
        _account("acme-my", "Bank", AccountType.ASSET, monetary=True),
        _account("acme-my", "Revenue", AccountType.REVENUE),
        _account("acme-my", "Tax Payable", AccountType.LIABILITY),
        _account("acme-my", "FX Gain", AccountType.REVENUE),
        _account("acme-my", "FX Loss", AccountType.EXPENSE),
    ])
    db_session.add(FxAdminRate(
        company_id="acme-my",
        as_of_date=date(2024, 1, 1),
        src_ccy="USD",
        dst_ccy="MYR",
        rate=Decimal("4.0"),
    ))
    db_session.add(FxAccountMap(
        company_id="acme-my",
        gl_account="AR",
        unreal_gain_account="FX Gain",
        unreal_loss_account="FX Loss",
    ))
    db_session.commit()
    return company
