from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from app.api.v1.dashboard import service as dashboard_service


def _in_days(days: int) -> str:
    return (datetime.now(timezone.utc).date() + timedelta(days=days)).isoformat()


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Server is running"}


@pytest.mark.asyncio
async def test_dashboard_requires_admin(client: AsyncClient) -> None:
    assert (await client.get("/api/admin/dashboard/stats")).status_code == 401


@pytest.mark.asyncio
async def test_storage_failure_is_opaque_500(admin_client: AsyncClient, monkeypatch) -> None:
    async def failing_stats(db):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(dashboard_service, "get_dashboard_stats", failing_stats)
    response = await admin_client.get("/api/admin/dashboard/stats")

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


@pytest.mark.asyncio
async def test_dashboard_counts(admin_client: AsyncClient) -> None:
    for name, status in [("Asha", "Active"), ("Bala", "Graduated"), ("Charu", "Active")]:
        await admin_client.post("/api/students", json={"name": name, "status": status})
    await admin_client.post("/api/faculty", json={"name": "Meera", "status": "Retired"})
    await admin_client.post(
        "/api/transport/buses",
        json={"bus_number": "Bus-1", "registration_number": "KA01", "insurance_expiry": _in_days(0),
              "fc_expiry": _in_days(5)},
    )
    await admin_client.post(
        "/api/transport/buses",
        json={"bus_number": "Bus-2", "registration_number": "KA02", "status": "Under Maintenance",
              "permit_expiry": _in_days(40)},
    )
    await admin_client.post(
        "/api/announcements", json={"title": "T", "content": "C", "recipients": ["all"], "status": "Published"}
    )
    await admin_client.post("/api/announcements", json={"title": "T2", "content": "C", "recipients": ["all"]})

    response = await admin_client.get("/api/admin/dashboard/stats")
    assert response.status_code == 200
    stats = response.json()

    assert stats["students"] == {"total": 3, "active": 2, "inactive": 0, "graduated": 1}
    assert stats["faculty"] == {"total": 1, "active": 0, "inactive": 0, "retired": 1}
    assert stats["transport"] == {"total": 2, "active": 1, "inactive": 0, "underMaintenance": 1}
    assert stats["announcements"] == {"total": 2, "published": 1, "draft": 1, "scheduled": 0}
    assert stats["alerts"] == {"total": 3, "critical": 1, "urgent": 1, "busesWithAlerts": 2}
