import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from conftest import add_holiday, make_person, auth_headers
from leavedesk.core import dependencies
from leavedesk.main import app
from leavedesk.models import Employee, LeaveRequest

BASE = "/api/v1/leave-requests"


def vacation(start="2025-03-10", end="2025-03-12", leave_type="Vacation", reason="Family trip"):
    return {"leave_type": leave_type, "start_date": start, "end_date": end, "reason": reason}


async def test_submit_then_approve_scenario(client, employee, admin, fetch):
    emp, emp_headers = employee
    _, admin_headers = admin

    resp = await client.post(BASE, json=vacation(), headers=emp_headers)
    assert resp.status_code == 201
    body = resp.json()
    assert body["days_requested"] == 3
    assert body["status"] == "pending"
    assert body["employee_name"] == "Emily Johnson"
    assert body["reviewed_by"] is None

    resp = await client.put(
        f"{BASE}/{body['id']}/status", json={"status": "approved"}, headers=admin_headers
    )
    assert resp.status_code == 200
    decided = resp.json()
    assert decided["status"] == "approved"
    assert decided["reviewed_by"] == "Sarah Chen"
    assert decided["reviewed_at"] is not None

    assert (await fetch(Employee, emp.id)).leave_balance == 17

    profile = await client.get("/api/v1/user/profile", headers=emp_headers)
    assert profile.json()["leave_balance"] == 17


async def test_second_approval_is_rejected_and_balance_unchanged(client, employee, admin, fetch):
    emp, emp_headers = employee
    _, admin_headers = admin
    created = (await client.post(BASE, json=vacation(), headers=emp_headers)).json()
    url = f"{BASE}/{created['id']}/status"

    assert (await client.put(url, json={"status": "approved"}, headers=admin_headers)).status_code == 200
    again = await client.put(url, json={"status": "approved"}, headers=admin_headers)

    assert again.status_code == 400
    assert again.json()["code"] == "InvalidTransition"
    assert (await fetch(Employee, emp.id)).leave_balance == 17


async def test_reject_changes_only_review_fields(client, employee, admin, fetch):
    emp, emp_headers = employee
    _, admin_headers = admin
    created = (await client.post(BASE, json=vacation(), headers=emp_headers)).json()

    resp = await client.put(
        f"{BASE}/{created['id']}/status", json={"status": "rejected"}, headers=admin_headers
    )

    assert resp.status_code == 200
    rejected = resp.json()
    assert rejected["status"] == "rejected"
    assert rejected["reviewed_by"] == "Sarah Chen"
    for field in ("days_requested", "start_date", "end_date", "leave_type", "reason", "employee_name"):
        assert rejected[field] == created[field]
    assert (await fetch(Employee, emp.id)).leave_balance == 20


async def test_holiday_conflict_scenario(client, db, employee, fetch):
    emp, emp_headers = employee
    await add_holiday(db, "Founders Day", date(2025, 3, 10))

    resp = await client.post(
        BASE, json=vacation("2025-03-10", "2025-03-10", leave_type="Sick"), headers=emp_headers
    )

    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == "HolidayConflict"
    assert body["holidays"] == ["Founders Day"]
    assert "Founders Day" in body["error"]
    assert (await client.get(BASE, headers=emp_headers)).json() == []


async def test_insufficient_balance_scenario(client, db, fetch):
    emp, user = await make_person(db, name="Low Balance", email="low@acme.com", leave_balance=2)

    resp = await client.post(
        BASE, json=vacation("2025-03-10", "2025-03-14"), headers=auth_headers(user)
    )

    assert resp.status_code == 400
    assert resp.json()["code"] == "InsufficientBalance"
    assert (await fetch(Employee, emp.id)).leave_balance == 2


async def test_validation_errors_are_400_with_error_key(client, employee):
    _, headers = employee
    cases = [
        (vacation(leave_type="Sabbatical"), "InvalidLeaveType"),
        (vacation(start="03/10/2025"), "InvalidDate"),
        (vacation(start="2025-03-12", end="2025-03-10"), "InvalidDateRange"),
        (vacation(start="2025-03-01", end="2025-03-04"), "DateInPast"),
        (vacation(reason=""), "MissingReason"),
    ]
    for payload, code in cases:
        resp = await client.post(BASE, json=payload, headers=headers)
        assert resp.status_code == 400, payload
        assert resp.json()["code"] == code
        assert resp.json()["error"]


async def test_missing_fields_are_400(client, employee):
    _, headers = employee
    resp = await client.post(BASE, json={"leave_type": "Vacation"}, headers=headers)
    assert resp.status_code == 400
    assert "start_date" in resp.json()["error"]


async def test_submit_requires_token(client):
    resp = await client.post(BASE, json=vacation())
    assert resp.status_code == 401
    assert resp.json()["error"] == "Authorization required"


async def test_bad_token_is_401(client):
    resp = await client.get(BASE, headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


async def test_employee_cannot_decide(client, employee):
    _, headers = employee
    created = (await client.post(BASE, json=vacation(), headers=headers)).json()

    resp = await client.put(
        f"{BASE}/{created['id']}/status", json={"status": "approved"}, headers=headers
    )
    assert resp.status_code == 403
    assert resp.json()["error"] == "Admin access required"


async def test_decide_unknown_request_is_404(client, admin):
    _, headers = admin
    resp = await client.put(
        f"{BASE}/7f1c3d7e-8a51-4a39-9a57-3a7f0b1f4d11/status",
        json={"status": "approved"},
        headers=headers,
    )
    assert resp.status_code == 404


async def test_list_is_scoped_and_filterable(client, db, employee, admin):
    _, emp_headers = employee
    _, admin_headers = admin
    _, other_user = await make_person(db, name="James Wilson", email="james@acme.com")
    other_headers = auth_headers(other_user)

    await client.post(BASE, json=vacation(), headers=emp_headers)
    await client.post(BASE, json=vacation(leave_type="Sick"), headers=other_headers)

    assert len((await client.get(BASE, headers=admin_headers)).json()) == 2
    mine = (await client.get(BASE, headers=emp_headers)).json()
    assert [r["employee_name"] for r in mine] == ["Emily Johnson"]
    sick = (await client.get(BASE, params={"leave_type": "Sick"}, headers=admin_headers)).json()
    assert [r["employee_name"] for r in sick] == ["James Wilson"]
    pending = (await client.get(BASE, params={"status": "pending"}, headers=admin_headers)).json()
    assert len(pending) == 2


async def test_employee_name_is_a_snapshot(client, employee, fetch):
    _, headers = employee
    created = (await client.post(BASE, json=vacation(), headers=headers)).json()

    await client.put("/api/v1/user/profile", json={"name": "Emily Carter"}, headers=headers)

    stored = await fetch(LeaveRequest, uuid.UUID(created["id"]))
    assert stored.employee_name == "Emily Johnson"


async def test_history_survives_employee_deletion(client, employee, admin):
    emp, emp_headers = employee
    _, admin_headers = admin
    await client.post(BASE, json=vacation(), headers=emp_headers)

    resp = await client.delete(f"/api/v1/employees/{emp.id}", headers=admin_headers)
    assert resp.status_code == 200

    requests = (await client.get(BASE, headers=admin_headers)).json()
    assert [r["employee_id"] for r in requests] == [str(emp.id)]


async def test_validate_endpoint_collects_all_errors(client, db, employee):
    _, headers = employee
    await add_holiday(db, "Founders Day", date(2025, 3, 4))

    resp = await client.post(
        f"{BASE}/validate",
        json=vacation(start="2025-03-01", end="2025-03-28", reason=""),
        headers=headers,
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["valid"] is False
    assert body["days_requested"] == 28
    assert len(body["errors"]) == 4
    assert body["errors"][0] == "Start date cannot be in the past"


async def test_validate_endpoint_accepts_good_request(client, employee):
    _, headers = employee
    resp = await client.post(f"{BASE}/validate", json=vacation(), headers=headers)
    assert resp.json() == {"valid": True, "days_requested": 3, "errors": []}


async def test_company_holiday_conflict_message(client, db, employee):
    _, headers = employee
    await add_holiday(db, "Offsite", date(2025, 3, 11), kind="company")

    resp = await client.post(BASE, json=vacation(), headers=headers)

    assert resp.status_code == 400
    assert resp.json()["error"] == "Cannot request leave on holidays: Offsite"


async def test_failed_commit_is_503_and_nothing_stored(
    client, employee, session_factory, monkeypatch
):
    _, headers = employee

    async def failing_commit(self):
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    # Run the real unit of work against the test database
    monkeypatch.setattr(dependencies, "async_session_factory", session_factory)
    app.dependency_overrides.pop(dependencies.get_db, None)
    monkeypatch.setattr(AsyncSession, "commit", failing_commit)

    resp = await client.post(BASE, json=vacation(), headers=headers)

    assert resp.status_code == 503
    assert resp.json()["code"] == "StoreUnavailable"
    async with session_factory() as session:
        stored = await session.execute(select(LeaveRequest))
        assert stored.scalars().all() == []
