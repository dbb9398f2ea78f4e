"""
Integration tests for candidates and their comment threads.
"""

import pytest
from sqlalchemy import select

from backend.app.models.candidate import Comment

BASE = "/api/candidates"


def candidate_body(**overrides):
    body = {
        "name": "Asha Nair",
        "email": "Asha.Nair@Example.com",
        "phone": "+91 98765 43210",
        "role": "Front Office Associate",
        "department": "Front Office",
        "location": "Goa Beach Resort",
        "source": "Referral",
    }
    body.update(overrides)
    return body


async def add_candidate(client, headers, **overrides):
    response = await client.post(BASE, json=candidate_body(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_create_candidate(client, hr_headers):
    data = await add_candidate(client, hr_headers)

    assert data["email"] == "asha.nair@example.com"
    assert data["status"] == "Uploaded"
    assert data["uploadedBy"] > 0


@pytest.mark.asyncio
async def test_duplicate_email_rejected(client, hr_headers):
    await add_candidate(client, hr_headers)

    response = await client.post(BASE, json=candidate_body(email="asha.nair@example.com"), headers=hr_headers)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_filters(client, hr_headers):
    await add_candidate(client, hr_headers)
    await add_candidate(
        client, hr_headers,
        name="Ravi Kumar", email="ravi@example.com", role="Sous Chef",
        department="Kitchen", location="Kerala Backwaters Resort"
    )

    kitchen = (await client.get(BASE, params={"department": "Kitchen"}, headers=hr_headers)).json()["data"]
    chef = (await client.get(BASE, params={"search": "CHEF"}, headers=hr_headers)).json()["data"]
    recent = (await client.get(BASE, params={"dateRange": "last7days"}, headers=hr_headers)).json()["data"]

    assert kitchen["count"] == 1
    assert chef["candidates"][0]["name"] == "Ravi Kumar"
    assert recent["count"] == 2


@pytest.mark.asyncio
async def test_update_status(client, hr_headers):
    candidate = await add_candidate(client, hr_headers)

    response = await client.put(f"{BASE}/{candidate['id']}", json={"status": "Shortlisted"}, headers=hr_headers)

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "Shortlisted"
    assert response.json()["data"]["name"] == "Asha Nair"


@pytest.mark.asyncio
async def test_stats(client, hr_headers):
    first = await add_candidate(client, hr_headers)
    second = await add_candidate(client, hr_headers, name="B", email="b@example.com", department="Kitchen")
    third = await add_candidate(client, hr_headers, name="C", email="c@example.com", department="Kitchen")
    await client.put(f"{BASE}/{first['id']}", json={"status": "Hired"}, headers=hr_headers)
    await client.put(f"{BASE}/{second['id']}", json={"status": "Interview Scheduled"}, headers=hr_headers)
    await client.put(f"{BASE}/{third['id']}", json={"status": "Interview Done"}, headers=hr_headers)

    response = await client.get(f"{BASE}/stats", headers=hr_headers)

    assert response.status_code == 200
    stats = response.json()["data"]
    assert stats["totalCVs"] == 3
    assert stats["hired"] == 1
    assert stats["interviewed"] == 2
    assert stats["candidatesByDepartment"][0] == {"name": "Kitchen", "count": 2}
    assert stats["candidatesByLocation"] == [{"name": "Goa Beach Resort", "count": 3}]


@pytest.mark.asyncio
async def test_only_master_deletes_candidates(client, hr_headers, master_headers, db_session):
    candidate = await add_candidate(client, hr_headers)
    await client.post(f"{BASE}/{candidate['id']}/comments", json={"content": "Strong CV"}, headers=hr_headers)

    denied = await client.delete(f"{BASE}/{candidate['id']}", headers=hr_headers)
    assert denied.status_code == 403

    response = await client.delete(f"{BASE}/{candidate['id']}", headers=master_headers)
    assert response.status_code == 200
    assert (await client.get(f"{BASE}/{candidate['id']}", headers=hr_headers)).status_code == 404

    remaining = (await db_session.execute(
        select(Comment).where(Comment.candidate_id == candidate["id"])
    )).scalars().all()
    assert remaining == []


# Comments

@pytest.mark.asyncio
async def test_comment_thread(client, hr_headers, staff_headers):
    candidate = await add_candidate(client, hr_headers)

    first = await client.post(f"{BASE}/{candidate['id']}/comments", json={"content": "  Call back Monday "}, headers=hr_headers)
    await client.post(f"{BASE}/{candidate['id']}/comments", json={"content": "Good references"}, headers=staff_headers)

    assert first.status_code == 201
    assert first.json()["data"]["content"] == "Call back Monday"
    assert first.json()["data"]["author"] == "hradmin"
    assert "timestamp" in first.json()["data"]

    thread = (await client.get(f"{BASE}/{candidate['id']}/comments", headers=hr_headers)).json()["data"]
    assert [c["content"] for c in thread] == ["Good references", "Call back Monday"]


@pytest.mark.asyncio
async def test_blank_comment_rejected(client, hr_headers):
    candidate = await add_candidate(client, hr_headers)

    response = await client.post(f"{BASE}/{candidate['id']}/comments", json={"content": "   "}, headers=hr_headers)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_comment_on_missing_candidate(client, hr_headers):
    response = await client.post(f"{BASE}/9999/comments", json={"content": "Hello"}, headers=hr_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_comment_delete_rules(client, hr_headers, staff_headers, other_staff_headers):
    candidate = await add_candidate(client, hr_headers)
    other = await add_candidate(client, hr_headers, name="Other", email="other@example.com")
    comment = (await client.post(
        f"{BASE}/{candidate['id']}/comments", json={"content": "Mine"}, headers=staff_headers
    )).json()["data"]

    missing = await client.delete(f"{BASE}/{candidate['id']}/comments/9999", headers=staff_headers)
    wrong_candidate = await client.delete(f"{BASE}/{other['id']}/comments/{comment['id']}", headers=staff_headers)
    not_author = await client.delete(f"{BASE}/{candidate['id']}/comments/{comment['id']}", headers=other_staff_headers)

    assert missing.status_code == 404
    assert wrong_candidate.status_code == 400
    assert not_author.status_code == 403

    author = await client.delete(f"{BASE}/{candidate['id']}/comments/{comment['id']}", headers=staff_headers)
    assert author.status_code == 200


@pytest.mark.asyncio
async def test_moderator_deletes_any_comment(client, hr_headers, staff_headers):
    candidate = await add_candidate(client, hr_headers)
    comment = (await client.post(
        f"{BASE}/{candidate['id']}/comments", json={"content": "Spam"}, headers=staff_headers
    )).json()["data"]

    response = await client.delete(f"{BASE}/{candidate['id']}/comments/{comment['id']}", headers=hr_headers)

    assert response.status_code == 200
