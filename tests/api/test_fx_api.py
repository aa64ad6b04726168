"""
Tests for the FX revaluation endpoint.
"""

from datetime import date
from decimal import Decimal

from gl_core.models import FxAdminRate


def post_usd_invoice(client):
    client.post("/postings", json={
        "doc_type": "SalesInvoice",
        "id": "SI-1",
        "company_id": "acme-my",
        "doc_date": "2024-01-15",
        "currency": "USD",
        "customer_id": "CUST-1",
        "totals": {"subtotal": "250", "grand_total": "250"},
    })


def set_month_end_rate(db, rate):
    db.add(FxAdminRate(
        company_id="acme-my",
        as_of_date=date(2024, 1, 31),
        src_ccy="USD",
        dst_ccy="MYR",
        rate=Decimal(rate),
    ))
    db.commit()


def test_dry_run_is_the_default(client, db_session, myr_company):
    post_usd_invoice(client)
    set_month_end_rate(db_session, "4.08")

    response = client.post("/fx/revaluations", json={
        "company_id": "acme-my", "year": 2024, "month": 1,
    })

    assert response.status_code == 201
    data = response.json()
    assert data["lines"] == 1
    assert Decimal(data["delta_total"]) == Decimal("20.00")
    assert data["journals"] is None


def test_commit_posts_adjustment(client, db_session, myr_company):
    post_usd_invoice(client)
    set_month_end_rate(db_session, "4.08")

    response = client.post("/fx/revaluations", json={
        "company_id": "acme-my", "year": 2024, "month": 1, "dry_run": False,
    })

    data = response.json()
    assert data["journals"] == 1
    journal = client.get(f"/journals/{data['journal_ids'][0]}").json()
    assert [line["account_code"] for line in journal["lines"]] == [
        "AR", "FX Gain",
    ]


def test_invalid_month_returns_422(client, myr_company):
    response = client.post("/fx/revaluations", json={
        "company_id": "acme-my", "year": 2024, "month": 13,
    })
    assert response.status_code == 422


def test_missing_rate_returns_400(client, myr_company):
    post_usd_invoice(client)

    response = client.post("/fx/revaluations", json={
        "company_id": "acme-my", "year": 2024, "month": 1, "base_ccy": "EUR",
    })

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "EXCHANGE_RATE_NOT_FOUND"
