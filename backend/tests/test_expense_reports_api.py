"""
Integration tests for the expense report API.

Covers create, listing filters, the submit/approve lifecycle, locking and
ownership enforcement end to end.
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy import select, update

from backend.app.models.audit_log import AuditLog
from backend.app.models.expense_report import ExpenseReport

BASE = "/api/expense-reports"


def report_body(**overrides):
    body = {
        "hotelName": "Goa Beach Resort",
        "reportDate": "2024-05-01",
        "storeAndPurchase": {
            "purchaseDetails": [{"item": "Rice", "quantity": 50, "unitPrice": 200, "supplier": "Metro"}]
        },
        "summary": {"totalRevenue": 190000, "notes": "May opening"},
    }
    body.update(overrides)
    return body


async def create_report(client, headers, **overrides):
    response = await client.post(BASE, json=report_body(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


# TEST 1: derived totals
@pytest.mark.asyncio
async def test_create_computes_totals(client, staff_headers):
    data = await create_report(client, staff_headers)

    assert data["status"] == "draft"
    assert data["storeAndPurchase"]["purchaseDetails"][0]["totalPrice"] == 10000
    assert data["storeAndPurchase"]["totalPurchaseAmount"] == 10000
    assert data["summary"]["totalExpenses"] == 10000
    assert data["summary"]["netProfit"] == 180000
    assert data["summary"]["profitMargin"] == pytest.approx(94.74)
    assert data["control"]["isLocked"] is False
    assert data["version"] == 1


@pytest.mark.asyncio
async def test_client_totals_are_ignored(client, staff_headers):
    data = await create_report(
        client, staff_headers,
        storeAndPurchase={
            "purchaseDetails": [{"item": "Oil", "quantity": 2, "unitPrice": 150, "totalPrice": 1}],
            "totalPurchaseAmount": 999999,
        },
        departmentBills={"bills": [{"department": "Kitchen", "billType": "Gas", "amount": 700}]},
        powerConsumption={"consumptionDetails": [
            {"meterReading": 1300, "previousReading": 1200, "ratePerUnit": 8, "totalCost": 5}
        ]},
    )

    assert data["storeAndPurchase"]["totalPurchaseAmount"] == 300
    assert data["departmentBills"]["totalBillsAmount"] == 700
    assert data["powerConsumption"]["consumptionDetails"][0]["unitsConsumed"] == 100
    assert data["powerConsumption"]["totalPowerCost"] == 800
    assert data["summary"]["totalExpenses"] == 1800


@pytest.mark.asyncio
async def test_create_requires_hotel_name(client, staff_headers):
    response = await client.post(BASE, json=report_body(hotelName="   "), headers=staff_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "ERR_VALIDATION"


@pytest.mark.asyncio
async def test_backwards_meter_is_rejected(client, staff_headers):
    response = await client.post(BASE, json=report_body(powerConsumption={
        "consumptionDetails": [{"meterReading": 10, "previousReading": 20, "ratePerUnit": 5}]
    }), headers=staff_headers)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_oversized_amount_is_rejected(client, staff_headers):
    response = await client.post(BASE, json=report_body(storeAndPurchase={
        "purchaseDetails": [{"item": "Rice", "quantity": 1e13, "unitPrice": 1000}]
    }), headers=staff_headers)

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_VALIDATION"


@pytest.mark.asyncio
async def test_totals_beyond_storage_range_are_rejected(client, staff_headers):
    response = await client.post(BASE, json=report_body(storeAndPurchase={
        "purchaseDetails": [{"item": "Marble", "quantity": 1000000000, "unitPrice": 10000}]
    }), headers=staff_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "ERR_VALIDATION"
    fields = [error["loc"][-1] for error in body["details"]["errors"]]
    assert "totalPurchaseAmount" in fields

    listing = (await client.get(BASE, headers=staff_headers)).json()["data"]
    assert listing["total"] == 0


@pytest.mark.asyncio
async def test_update_beyond_storage_range_keeps_report(client, staff_headers):
    report = await create_report(client, staff_headers)

    response = await client.put(
        f"{BASE}/{report['id']}",
        json={
            "storeAndPurchase": {"purchaseDetails": [{"item": "Linen", "quantity": 1000000, "unitPrice": 1000}]},
            "summary": {"totalRevenue": 0.01},
        },
        headers=staff_headers
    )

    assert response.status_code == 400
    assert [e["loc"][-1] for e in response.json()["details"]["errors"]] == ["profitMargin"]
    stored = (await client.get(f"{BASE}/{report['id']}", headers=staff_headers)).json()["data"]
    assert stored["summary"]["totalRevenue"] == 190000
    assert stored["version"] == 1


@pytest.mark.asyncio
async def test_requires_authentication(client):
    response = await client.get(BASE)

    assert response.status_code == 401


# TEST 2: submit
@pytest.mark.asyncio
async def test_owner_submits_draft(client, staff_headers):
    report = await create_report(client, staff_headers)

    response = await client.put(f"{BASE}/{report['id']}/submit", headers=staff_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "submitted"
    assert data["submittedAt"] is not None
    assert data["version"] == 2


@pytest.mark.asyncio
async def test_stranger_cannot_submit(client, staff_headers, other_staff_headers):
    report = await create_report(client, staff_headers)

    response = await client.put(f"{BASE}/{report['id']}/submit", headers=other_staff_headers)

    assert response.status_code == 403
    assert response.json()["details"]["reason"] == "not_owner"

    unchanged = await client.get(f"{BASE}/{report['id']}", headers=staff_headers)
    assert unchanged.json()["data"]["status"] == "draft"


@pytest.mark.asyncio
async def test_stranger_cannot_read(client, staff_headers, other_staff_headers):
    report = await create_report(client, staff_headers)

    response = await client.get(f"{BASE}/{report['id']}", headers=other_staff_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_unknown_report_is_404(client, staff_headers):
    response = await client.get(f"{BASE}/9999", headers=staff_headers)

    assert response.status_code == 404
    assert response.json()["error_code"] == "ERR_NOT_FOUND_001"


# TEST 3: approve, lock
@pytest.mark.asyncio
async def test_manager_approves_and_locks(client, staff_headers, manager_headers):
    report = await create_report(client, staff_headers)
    await client.put(f"{BASE}/{report['id']}/submit", headers=staff_headers)

    response = await client.put(
        f"{BASE}/{report['id']}/approve",
        json={"status": "approved", "approvalNotes": "Looks right"},
        headers=manager_headers
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "approved"
    assert data["control"]["isLocked"] is True
    assert data["control"]["approvedBy"] is not None
    assert data["control"]["approvedAt"] is not None
    assert data["control"]["approvalNotes"] == "Looks right"

    delete_response = await client.delete(f"{BASE}/{report['id']}", headers=staff_headers)
    assert delete_response.status_code == 403
    assert delete_response.json()["details"]["reason"] == "locked"


@pytest.mark.asyncio
async def test_update_after_approval_is_locked(client, staff_headers, manager_headers):
    report = await create_report(client, staff_headers)
    await client.put(f"{BASE}/{report['id']}/submit", headers=staff_headers)
    await client.put(f"{BASE}/{report['id']}/approve", json={"status": "approved"}, headers=manager_headers)

    response = await client.put(
        f"{BASE}/{report['id']}",
        json={"summary": {"totalRevenue": 1}},
        headers=staff_headers
    )

    assert response.status_code == 403
    assert response.json()["error_code"] == "ERR_PERM_LOCKED"

    stored = (await client.get(f"{BASE}/{report['id']}", headers=staff_headers)).json()["data"]
    assert stored["summary"]["totalRevenue"] == 190000


@pytest.mark.asyncio
async def test_reject_also_locks(client, staff_headers, manager_headers):
    report = await create_report(client, staff_headers)
    await client.put(f"{BASE}/{report['id']}/submit", headers=staff_headers)

    response = await client.put(
        f"{BASE}/{report['id']}/approve",
        json={"status": "rejected", "approvalNotes": "Missing receipts"},
        headers=manager_headers
    )

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "rejected"
    assert response.json()["data"]["control"]["isLocked"] is True


@pytest.mark.asyncio
async def test_approving_a_draft_is_invalid_transition(client, staff_headers, manager_headers):
    report = await create_report(client, staff_headers)

    response = await client.put(
        f"{BASE}/{report['id']}/approve", json={"status": "approved"}, headers=manager_headers
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_TRANSITION"

    stored = (await client.get(f"{BASE}/{report['id']}", headers=staff_headers)).json()["data"]
    assert stored["status"] == "draft"


@pytest.mark.asyncio
async def test_owner_cannot_approve(client, staff_headers):
    report = await create_report(client, staff_headers)
    await client.put(f"{BASE}/{report['id']}/submit", headers=staff_headers)

    response = await client.put(f"{BASE}/{report['id']}/approve", json={"status": "approved"}, headers=staff_headers)

    assert response.status_code == 403
    assert response.json()["details"]["reason"] == "not_elevated"


@pytest.mark.asyncio
async def test_decision_status_must_be_final(client, staff_headers, manager_headers):
    report = await create_report(client, staff_headers)
    await client.put(f"{BASE}/{report['id']}/submit", headers=staff_headers)

    response = await client.put(f"{BASE}/{report['id']}/approve", json={"status": "draft"}, headers=manager_headers)

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_VALIDATION"


# TEST 4: Update and delete of drafts
@pytest.mark.asyncio
async def test_update_replaces_only_sent_sections(client, staff_headers):
    report = await create_report(client, staff_headers)

    response = await client.put(
        f"{BASE}/{report['id']}",
        json={"departmentBills": {"bills": [{"department": "Housekeeping", "amount": 5000}]}},
        headers=staff_headers
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["storeAndPurchase"]["totalPurchaseAmount"] == 10000
    assert data["departmentBills"]["totalBillsAmount"] == 5000
    assert data["summary"]["totalExpenses"] == 15000
    assert data["summary"]["netProfit"] == 175000
    assert data["summary"]["notes"] == "May opening"
    assert data["version"] == 2


@pytest.mark.asyncio
async def test_submitted_report_cannot_be_edited(client, staff_headers):
    report = await create_report(client, staff_headers)
    await client.put(f"{BASE}/{report['id']}/submit", headers=staff_headers)

    response = await client.put(f"{BASE}/{report['id']}", json={"hotelName": "Other"}, headers=staff_headers)

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_TRANSITION"


@pytest.mark.asyncio
async def test_owner_deletes_draft(client, staff_headers):
    report = await create_report(client, staff_headers)

    response = await client.delete(f"{BASE}/{report['id']}", headers=staff_headers)

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert (await client.get(f"{BASE}/{report['id']}", headers=staff_headers)).status_code == 404


# TEST 5: listing
@pytest.mark.asyncio
async def test_empty_filter_result_is_not_an_error(client, staff_headers):
    await create_report(client, staff_headers)
    report = await create_report(client, staff_headers, reportDate="2024-05-02")
    await client.put(f"{BASE}/{report['id']}/submit", headers=staff_headers)

    response = await client.get(
        BASE,
        params={"status": "submitted", "startDate": "2023-01-01", "endDate": "2023-12-31"},
        headers=staff_headers
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["items"] == []
    assert data["total"] == 0


@pytest.mark.asyncio
async def test_listing_filters_and_paginates(client, staff_headers):
    for day in range(1, 4):
        await create_report(client, staff_headers, reportDate=f"2024-05-0{day}")
    await create_report(client, staff_headers, hotelName="Kerala Backwaters Resort")

    response = await client.get(BASE, params={"hotelName": "goa", "limit": 2}, headers=staff_headers)

    data = response.json()["data"]
    assert data["total"] == 3
    assert len(data["items"]) == 2
    assert data["totalPages"] == 2

    page_two = (await client.get(BASE, params={"hotelName": "goa", "limit": 2, "page": 2}, headers=staff_headers)).json()["data"]
    assert len(page_two["items"]) == 1


@pytest.mark.asyncio
async def test_page_past_the_end_is_empty(client, staff_headers):
    for day in range(1, 4):
        await create_report(client, staff_headers, reportDate=f"2024-05-0{day}")

    response = await client.get(BASE, params={"page": 5, "limit": 2}, headers=staff_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["items"] == []
    assert data["total"] == 3
    assert data["page"] == 5


@pytest.mark.asyncio
async def test_equal_creation_times_listed_by_id(client, staff_headers, db_session):
    ids = [(await create_report(client, staff_headers, reportDate=f"2024-05-0{day}"))["id"] for day in range(1, 4)]
    await db_session.execute(
        update(ExpenseReport)
        .where(ExpenseReport.id.in_(ids))
        .values(created_at=datetime(2024, 5, 10, 9, 0, tzinfo=timezone.utc))
    )
    await db_session.commit()

    items = (await client.get(BASE, headers=staff_headers)).json()["data"]["items"]

    assert [item["id"] for item in items] == sorted(ids)


@pytest.mark.asyncio
async def test_listing_is_scoped_to_owner(client, staff_headers, other_staff_headers, manager_headers):
    await create_report(client, staff_headers)
    await create_report(client, other_staff_headers)

    own = (await client.get(BASE, headers=staff_headers)).json()["data"]
    everyone = (await client.get(BASE, headers=manager_headers)).json()["data"]

    assert own["total"] == 1
    assert everyone["total"] == 2


@pytest.mark.asyncio
async def test_staff_cannot_list_other_owner(client, staff_headers, other_staff_headers):
    other = await create_report(client, other_staff_headers)

    response = await client.get(BASE, params={"ownerId": other["ownerId"]}, headers=staff_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_limit_is_bounded(client, staff_headers):
    response = await client.get(BASE, params={"limit": 0}, headers=staff_headers)

    assert response.status_code == 400


# TEST 6: Stats
@pytest.mark.asyncio
async def test_stats_summarise_visible_reports(client, staff_headers, manager_headers):
    first = await create_report(client, staff_headers)
    await create_report(client, staff_headers, summary={"totalRevenue": 10000})
    await client.put(f"{BASE}/{first['id']}/submit", headers=staff_headers)
    await client.put(f"{BASE}/{first['id']}/approve", json={"status": "approved"}, headers=manager_headers)

    response = await client.get(f"{BASE}/stats", headers=staff_headers)

    assert response.status_code == 200
    stats = response.json()["data"]
    assert stats["totalReports"] == 2
    assert stats["totalExpenses"] == 20000
    assert stats["totalRevenue"] == 200000
    assert stats["totalNetProfit"] == 180000
    assert stats["draftCount"] == 1
    assert stats["approvedCount"] == 1
    assert stats["submittedCount"] == 0


# TEST 7: Audit trail
@pytest.mark.asyncio
async def test_lifecycle_is_audited(client, db_session, staff_headers, manager_headers):
    report = await create_report(client, staff_headers)
    await client.put(f"{BASE}/{report['id']}/submit", headers=staff_headers)
    await client.put(f"{BASE}/{report['id']}/approve", json={"status": "approved"}, headers=manager_headers)

    result = await db_session.execute(
        select(AuditLog.action)
        .where(AuditLog.target_type == "expense_report", AuditLog.target_id == report["id"])
        .order_by(AuditLog.id)
    )

    assert result.scalars().all() == [
        "EXPENSE_REPORT_CREATED",
        "EXPENSE_REPORT_SUBMITTED",
        "EXPENSE_REPORT_APPROVED",
    ]
