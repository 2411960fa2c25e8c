from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient


def _in_days(days: int) -> str:
    return (datetime.now(timezone.utc).date() + timedelta(days=days)).isoformat()


async def _create_bus(client: AsyncClient, number: str, registration: str, **fields) -> dict:
    response = await client.post(
        "/api/transport/buses",
        json={"bus_number": number, "registration_number": registration, **fields},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_buses_listed_by_numeral(admin_client: AsyncClient) -> None:
    for number, reg in [("Bus-10", "KA01"), ("Bus-2", "KA02"), ("Bus-1", "KA03")]:
        await _create_bus(admin_client, number, reg)

    response = await admin_client.get("/api/transport/buses")
    assert [b["bus_number"] for b in response.json()] == ["Bus-1", "Bus-2", "Bus-10"]


@pytest.mark.asyncio
async def test_duplicate_bus_conflicts(admin_client: AsyncClient) -> None:
    await _create_bus(admin_client, "Bus-1", "KA01")
    response = await admin_client.post(
        "/api/transport/buses", json={"bus_number": "Bus-9", "registration_number": "KA01"}
    )
    assert response.status_code == 409
    assert response.json()["detail"] == "Bus number or registration number already exists"


@pytest.mark.asyncio
async def test_bus_alerts(admin_client: AsyncClient) -> None:
    await _create_bus(admin_client, "Bus-1", "KA01", permit_expiry=_in_days(45))
    await _create_bus(admin_client, "Bus-2", "KA02", insurance_expiry=_in_days(10), fc_expiry=_in_days(0))
    await _create_bus(admin_client, "Bus-3", "KA03", insurance_expiry=_in_days(200))

    response = await admin_client.get("/api/transport/buses/alerts")
    assert response.status_code == 200
    buses = response.json()
    assert [b["bus_number"] for b in buses] == ["Bus-2", "Bus-1"]

    severities = {a["type"]: a["severity"] for a in buses[0]["alerts"]}
    assert severities == {"insurance": "urgent", "fc": "critical"}
    assert buses[1]["alerts"][0]["severity"] == "warning"

    wide = (await admin_client.get("/api/transport/buses/alerts", params={"months": 12})).json()
    assert {b["bus_number"] for b in wide} == {"Bus-1", "Bus-2", "Bus-3"}


@pytest.mark.asyncio
async def test_maintenance_records(admin_client: AsyncClient) -> None:
    bus = await _create_bus(admin_client, "Bus-1", "KA01")
    for day, kind in [("2024-01-10", "Service"), ("2024-03-05", "Tyres"), ("2024-03-20", "Brakes")]:
        response = await admin_client.post(
            "/api/transport/maintenance",
            json={"bus_id": bus["id"], "maintenance_date": day, "maintenance_type": kind, "cost": 100},
        )
        assert response.status_code == 201

    records = (await admin_client.get(f"/api/transport/maintenance/bus/{bus['id']}")).json()
    assert [r["maintenance_type"] for r in records] == ["Brakes", "Tyres", "Service"]
    assert records[0]["bus_number"] == "Bus-1"

    march = await admin_client.get(
        f"/api/transport/maintenance/bus/{bus['id']}", params={"year": 2024, "month": 3}
    )
    assert [r["maintenance_type"] for r in march.json()] == ["Brakes", "Tyres"]

    ranged = await admin_client.get(
        f"/api/transport/maintenance/bus/{bus['id']}",
        params={"start_date": "2024-01-01", "end_date": "2024-03-10"},
    )
    assert [r["maintenance_type"] for r in ranged.json()] == ["Tyres", "Service"]


@pytest.mark.asyncio
async def test_maintenance_for_missing_bus_is_not_found(admin_client: AsyncClient) -> None:
    response = await admin_client.post(
        "/api/transport/maintenance",
        json={"bus_id": 77, "maintenance_date": "2024-01-10", "maintenance_type": "Service"},
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Bus not found"


@pytest.mark.asyncio
async def test_deleting_bus_removes_it(admin_client: AsyncClient) -> None:
    bus = await _create_bus(admin_client, "Bus-1", "KA01")
    await admin_client.post(
        "/api/transport/maintenance",
        json={"bus_id": bus["id"], "maintenance_date": "2024-01-10", "maintenance_type": "Service"},
    )
    assert (await admin_client.delete(f"/api/transport/buses/{bus['id']}")).status_code == 204
    assert (await admin_client.get(f"/api/transport/buses/{bus['id']}")).status_code == 404
