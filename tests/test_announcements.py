from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from app.api.v1.announcements.service import EARLY_PUBLISH_MESSAGE


def _iso(delta: timedelta) -> str:
    return (datetime.now(timezone.utc) + delta).isoformat()


async def _create(client: AsyncClient, **fields) -> dict:
    body = {"title": "Sports Day", "content": "Friday", "recipients": ["students"], **fields}
    response = await client.post("/api/announcements", json=body)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_defaults_to_draft(admin_client: AsyncClient) -> None:
    announcement = await _create(admin_client)
    assert announcement["status"] == "Draft"
    assert announcement["recipients"] == ["students"]


@pytest.mark.asyncio
async def test_recipients_must_be_a_list(admin_client: AsyncClient) -> None:
    response = await admin_client.post(
        "/api/announcements", json={"title": "T", "content": "C", "recipients": "students"}
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_keeps_status_when_omitted(admin_client: AsyncClient) -> None:
    announcement = await _create(admin_client, status="Published")
    response = await admin_client.put(f"/api/announcements/{announcement['id']}", json={"title": "Renamed"})
    assert response.status_code == 200
    assert response.json()["status"] == "Published"
    assert response.json()["title"] == "Renamed"


@pytest.mark.asyncio
async def test_cannot_publish_scheduled_early(admin_client: AsyncClient) -> None:
    announcement = await _create(admin_client, status="Scheduled", scheduled_time=_iso(timedelta(days=1)))
    response = await admin_client.put(
        f"/api/announcements/{announcement['id']}", json={"status": "Published"}
    )
    assert response.status_code == 400
    assert response.json()["detail"] == EARLY_PUBLISH_MESSAGE


@pytest.mark.asyncio
async def test_publish_due_scheduled_announcements(admin_client: AsyncClient) -> None:
    due = await _create(admin_client, status="Scheduled", scheduled_time=_iso(-timedelta(hours=1)))
    later = await _create(admin_client, status="Scheduled", scheduled_time=_iso(timedelta(days=2)))

    response = await admin_client.post("/api/announcements/publish-scheduled")
    assert response.status_code == 200
    assert response.json()["published"] == 1

    published = (await admin_client.get("/api/announcements", params={"status": "Published"})).json()
    assert [a["id"] for a in published] == [due["id"]]
    scheduled = (await admin_client.get("/api/announcements", params={"status": "Scheduled"})).json()
    assert [a["id"] for a in scheduled] == [later["id"]]


@pytest.mark.asyncio
async def test_delete_announcement(admin_client: AsyncClient) -> None:
    announcement = await _create(admin_client)
    assert (await admin_client.delete(f"/api/announcements/{announcement['id']}")).status_code == 204
    assert (await admin_client.get(f"/api/announcements/{announcement['id']}")).status_code == 404
