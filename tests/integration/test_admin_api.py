from __future__ import annotations

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from quickride.models import DividendRecord, Shareholder, ShareholderStatus


def test_admin_dashboard_orders_agreements_by_status(client, auth_headers, make_shareholder) -> None:
    approved = make_shareholder(status=ShareholderStatus.APPROVED)
    rejected = make_shareholder(status=ShareholderStatus.REJECTED)
    pending = make_shareholder(status=ShareholderStatus.PENDING)

    response = client.get("/api/admin/dashboard", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()

    assert [item["id"] for item in body["agreements"]] == [pending.id, approved.id, rejected.id]
    assert all(item["business_role"] != "ADMIN" for item in body["agreements"])
    assert body["status_counts"] == {"PENDING": 1, "APPROVED": 1, "REJECTED": 1}
    assert body["running_stage"]["stage"] == 2
    assert Decimal(body["role_prices"]["SHOPS_HOTELS"]) == Decimal("700")
    assert "password_hash" not in body["agreements"][0]


def test_prices_and_subscribers_are_admin_mutable(client, auth_headers) -> None:
    prices = client.get("/api/prices").json()["prices"]
    assert {role: Decimal(value) for role, value in prices.items()} == {
        "DRIVER": Decimal("350"),
        "SHOPS_HOTELS": Decimal("700"),
        "TRAVEL_AGENT": Decimal("500"),
    }

    updated = client.put("/api/admin/prices", json={"prices": {"DRIVER": "399.5"}}, headers=auth_headers)
    assert Decimal(updated.json()["prices"]["DRIVER"]) == Decimal("399.50")

    unknown = client.put("/api/admin/prices", json={"prices": {"PILOT": 10}}, headers=auth_headers)
    assert unknown.json()["reason"] == "validation"

    counts = client.put(
        "/api/admin/subscribers",
        json={"counts": {"DRIVER": 1200, "TRAVEL_AGENT": 300, "SHOPS_HOTELS": 60}},
        headers=auth_headers,
    )
    assert counts.json()["total"] == 1560

    stages = client.get("/api/stages").json()
    assert stages["applicable_stage"] == 2


def test_stage_management(client, auth_headers) -> None:
    running = client.get("/api/stages/running").json()
    assert running["stage"] == {"stage": 2, "name": "Current Price", "price_per_share": "1200.00"}

    empty = client.put("/api/admin/stages/2", json={}, headers=auth_headers)
    assert empty.json()["reason"] == "validation"

    conflict = client.put("/api/admin/stages/3", json={"status": "RUNNING"}, headers=auth_headers)
    assert conflict.json()["reason"] == "running_stage_conflict"

    created = client.put(
        "/api/admin/stages/4",
        json={"name": "Final Price", "price_per_share": "1728", "min_subscribers": 15001, "max_subscribers": 50000},
        headers=auth_headers,
    )
    assert created.json()["stage"]["status"] == "UPCOMING"

    listing = client.get("/api/stages").json()
    assert [stage["stage"] for stage in listing["stages"]] == [1, 2, 3, 4]


def test_dividend_payouts_and_history(client, auth_headers, make_shareholder, login) -> None:
    small = make_shareholder(num_shares=1, password="pw-small-1")
    make_shareholder(num_shares=3)
    make_shareholder(num_shares=6)

    single = client.post(
        "/api/admin/dividends",
        json={"shareholder_id": small.id, "month": "August 2026", "gross_amount": "1000", "gst_rate": "18"},
        headers=auth_headers,
    )
    assert single.status_code == 200
    assert Decimal(single.json()["net"]) == Decimal("820")

    bulk = client.post(
        "/api/admin/dividends/distribute",
        json={"month": "September 2026", "total_gross_amount": "100"},
        headers=auth_headers,
    )
    body = bulk.json()
    assert body["paid_count"] == 3
    assert sorted(Decimal(item["gross"]) for item in body["allocations"]) == [
        Decimal("10"),
        Decimal("30"),
        Decimal("60"),
    ]

    headers = login(small.username, "pw-small-1")
    history = client.get(f"/api/shareholders/{small.id}/dividends", headers=headers).json()["dividends"]
    assert [item["month"] for item in history] == ["September 2026", "August 2026"]

    dashboard = client.get(f"/api/shareholders/{small.id}/dashboard", headers=headers).json()
    assert Decimal(dashboard["ownership_percentage"]) == Decimal("0.1")
    assert Decimal(dashboard["total_dividends_net"]) == Decimal("830")
    assert len(dashboard["dividends"]) == 2


def test_bulk_payout_without_approved_shareholders(client, auth_headers, make_shareholder) -> None:
    make_shareholder(status=ShareholderStatus.PENDING)
    response = client.post(
        "/api/admin/dividends/distribute",
        json={"month": "September 2026", "total_gross_amount": "100"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["reason"] == "no_approved_shareholders"


def test_shareholder_cannot_read_someone_else(client, make_shareholder, login) -> None:
    owner = make_shareholder(password="pw-owner-1")
    other = make_shareholder()
    headers = login(owner.username, "pw-owner-1")

    assert client.get(f"/api/shareholders/{owner.id}/details", headers=headers).status_code == 200
    assert client.get(f"/api/shareholders/{other.id}/details", headers=headers).status_code == 403


def test_credentials_and_deletion(client, auth_headers, make_shareholder, db_session: Session) -> None:
    shareholder = make_shareholder()
    shareholder_id = shareholder.id
    client.post(
        "/api/admin/dividends",
        json={"shareholder_id": shareholder_id, "month": "Sep", "gross_amount": "10"},
        headers=auth_headers,
    )

    renamed = client.put(
        f"/api/admin/shareholders/{shareholder_id}/credentials",
        json={"username": "renamed-investor", "password": "fresh-pass"},
        headers=auth_headers,
    )
    assert renamed.json()["username"] == "renamed-investor"
    login = client.post("/api/auth/login", json={"username": "renamed-investor", "password": "fresh-pass"})
    assert login.json()["success"] is True

    admin = db_session.scalars(select(Shareholder).where(Shareholder.username == "admin")).one()
    refused = client.delete(f"/api/admin/shareholders/{admin.id}", headers=auth_headers)
    assert refused.json()["reason"] == "forbidden"

    deleted = client.delete(f"/api/admin/shareholders/{shareholder_id}", headers=auth_headers)
    assert deleted.json()["success"] is True
    assert db_session.get(Shareholder, shareholder_id) is None
    assert (
        db_session.scalar(
            select(func.count()).select_from(DividendRecord).where(DividendRecord.shareholder_id == shareholder_id)
        )
        == 0
    )


def test_health_and_audit_trail(client, audit_s3_client) -> None:
    assert client.get("/api/healthz").json()["status"] == "ok"
    client.post("/api/auth/login", json={"username": "admin", "password": "admin123"})

    bucket = audit_s3_client.buckets["quickride-audit-logs"]
    lines = b"".join(bucket.values()).decode("utf-8").strip().splitlines()
    assert any('"password": "***"' in line for line in lines)
    assert not any("admin123" in line for line in lines)


def test_huge_amounts_are_declined_not_faults(client, auth_headers, make_shareholder, db_session: Session) -> None:
    shareholder = make_shareholder()
    requests = [
        ("post", "/api/admin/dividends", {"shareholder_id": shareholder.id, "month": "Sep", "gross_amount": "1e30"}),
        ("post", "/api/admin/dividends/distribute", {"month": "Sep", "total_gross_amount": "1e30"}),
        ("put", "/api/admin/stages/2", {"price_per_share": "1e30"}),
    ]
    for method, url, payload in requests:
        response = getattr(client, method)(url, json=payload, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["kind"] == "decline"
        assert response.json()["reason"] == "validation"

    assert db_session.scalar(select(func.count()).select_from(DividendRecord)) == 0
    assert client.get("/api/stages/running").json()["stage"]["price_per_share"] == "1200.00"
