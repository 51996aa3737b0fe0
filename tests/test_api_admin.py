"""Admin API integration tests"""
import pytest
from sqlalchemy import select

from app.models import TestCode, TestCodeStatus


def batch_payload(**overrides) -> dict:
    payload = {
        "title": "Basic Science First CA",
        "subject_id": 1,
        "class_level": "JSS1",
        "term_id": 1,
        "session_id": 1,
        "test_type": "First CA",
        "duration_minutes": 30,
        "total_questions": 15,
        "count": 3,
    }
    payload.update(overrides)
    return payload


async def create_batch(client, admin_headers, **overrides) -> dict:
    response = await client.post(
        "/api/v1/admin/test-code-batches",
        json=batch_payload(**overrides),
        headers=admin_headers,
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_create_batch(client, test_db_session, add_questions, admin_headers):
    await add_questions(20)

    data = await create_batch(client, admin_headers)

    assert data["batch_id"].startswith("batch_")
    assert data["count"] == 3
    codes = [c["code"] for c in data["codes"]]
    assert len(set(codes)) == 3
    assert all(len(code) == 6 and code.isalnum() and code.upper() == code for code in codes)
    assert [c["title"] for c in data["codes"]] == [
        "Basic Science First CA (1)",
        "Basic Science First CA (2)",
        "Basic Science First CA (3)",
    ]

    result = await test_db_session.execute(select(TestCode).where(TestCode.batch_id == data["batch_id"]))
    stored = result.scalars().all()
    assert len(stored) == 3
    assert all(tc.status == TestCodeStatus.ACTIVE and tc.is_active and not tc.is_activated for tc in stored)
    assert all(tc.created_by == 1 for tc in stored)


@pytest.mark.asyncio
async def test_create_batch_insufficient_questions(client, add_questions, admin_headers):
    await add_questions(5)
    response = await client.post(
        "/api/v1/admin/test-code-batches",
        json=batch_payload(),
        headers=admin_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_batch_count_limit(client, add_questions, admin_headers):
    await add_questions(20)
    response = await client.post(
        "/api/v1/admin/test-code-batches",
        json=batch_payload(count=101),
        headers=admin_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_activate_then_redeem(client, add_questions, admin_headers, student_headers):
    await add_questions(20)
    data = await create_batch(client, admin_headers, count=2)
    batch_id = data["batch_id"]
    code = data["codes"][0]["code"]

    response = await client.post(
        "/api/v1/student/test-codes/redeem",
        json={"test_code": code},
        headers=student_headers(100),
    )
    assert response.status_code == 400

    response = await client.patch(
        f"/api/v1/admin/test-code-batches/{batch_id}/activation",
        json={"is_activated": "TRUE"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json() == {"batch_id": batch_id, "is_activated": True, "updated_codes": 2}

    # Idempotent
    response = await client.patch(
        f"/api/v1/admin/test-code-batches/{batch_id}/activation",
        json={"is_activated": True},
        headers=admin_headers,
    )
    assert response.status_code == 200

    response = await client.post(
        "/api/v1/student/test-codes/redeem",
        json={"test_code": code},
        headers=student_headers(100),
    )
    assert response.status_code == 200

    response = await client.get(f"/api/v1/admin/test-code-batches/{batch_id}/codes", headers=admin_headers)
    assert response.status_code == 200
    listing = response.json()
    assert listing["total"] == 2
    statuses = {c["code"]: c["status"] for c in listing["codes"]}
    assert statuses[code] == "using"


@pytest.mark.asyncio
async def test_activation_flag_validation(client, add_test_code, admin_headers):
    await add_test_code(batch_id="batch_flags", is_activated=False)
    response = await client.patch(
        "/api/v1/admin/test-code-batches/batch_flags/activation",
        json={"is_activated": "maybe"},
        headers=admin_headers,
    )
    assert response.status_code == 422

    response = await client.patch(
        "/api/v1/admin/test-code-batches/batch_flags/activation",
        json={"is_activated": "0"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["is_activated"] is False


@pytest.mark.asyncio
async def test_batch_locked_after_result(client, add_test_code, add_result, admin_headers):
    first = await add_test_code(code="LCK001", batch_id="batch_lock")
    await add_test_code(code="LCK002", batch_id="batch_lock")
    await add_result(first.id, 100)

    response = await client.patch(
        "/api/v1/admin/test-code-batches/batch_lock/activation",
        json={"is_activated": False},
        headers=admin_headers,
    )
    assert response.status_code == 200

    response = await client.patch(
        "/api/v1/admin/test-code-batches/batch_lock/activation",
        json={"is_activated": True},
        headers=admin_headers,
    )
    assert response.status_code == 409

    response = await client.delete("/api/v1/admin/test-code-batches/batch_lock", headers=admin_headers)
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_delete_batch(client, add_test_code, admin_headers):
    await add_test_code(code="DEL001", batch_id="batch_del")
    await add_test_code(code="DEL002", batch_id="batch_del")

    response = await client.delete("/api/v1/admin/test-code-batches/batch_del", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"batch_id": "batch_del", "deleted_codes": 2}

    response = await client.delete("/api/v1/admin/test-code-batches/batch_del", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_unknown_batch(client, admin_headers):
    response = await client.patch(
        "/api/v1/admin/test-code-batches/batch_missing/activation",
        json={"is_activated": True},
        headers=admin_headers,
    )
    assert response.status_code == 404

    response = await client.get("/api/v1/admin/test-code-batches/batch_missing/codes", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_individual_code_mutation_rejected(client, add_test_code, admin_headers):
    test_code = await add_test_code()

    response = await client.patch(
        f"/api/v1/admin/test-codes/{test_code.id}/activation",
        json={"is_activated": True},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert "batch" in response.json()["detail"]

    response = await client.delete(f"/api/v1/admin/test-codes/{test_code.id}", headers=admin_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_test_code(client, add_test_code, add_questions, admin_headers):
    test_code = await add_test_code()
    await add_questions(20)

    response = await client.patch(
        f"/api/v1/admin/test-codes/{test_code.id}",
        json={"title": "Renamed", "duration_minutes": 45},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Renamed"
    assert data["duration_minutes"] == 45
    assert data["total_questions"] == 15

    response = await client.patch(
        f"/api/v1/admin/test-codes/{test_code.id}",
        json={"total_questions": 30},
        headers=admin_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_test_code_rejects_lifecycle_fields(client, add_test_code, admin_headers):
    test_code = await add_test_code()
    for body in ({"status": "used"}, {"is_activated": True}, {}, {"title": None}):
        response = await client.patch(
            f"/api/v1/admin/test-codes/{test_code.id}",
            json=body,
            headers=admin_headers,
        )
        assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_redeemed_code_conflict(client, add_test_code, admin_headers, student_headers, add_questions):
    test_code = await add_test_code()
    await add_questions(20)
    await client.post(
        "/api/v1/student/test-codes/redeem",
        json={"test_code": "ABC123"},
        headers=student_headers(100),
    )

    response = await client.patch(
        f"/api/v1/admin/test-codes/{test_code.id}",
        json={"title": "Too late"},
        headers=admin_headers,
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_admin_endpoints_reject_students(client, student_headers):
    response = await client.delete("/api/v1/admin/test-code-batches/batch_any", headers=student_headers())
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_list_and_get_batches(client, add_questions, admin_headers, student_headers):
    await add_questions(20)
    await add_questions(20, class_level="JSS2")
    first = await create_batch(client, admin_headers, count=2)
    second = await create_batch(client, admin_headers, count=1, class_level="JSS2")

    await client.patch(
        f"/api/v1/admin/test-code-batches/{first['batch_id']}/activation",
        json={"is_activated": True},
        headers=admin_headers,
    )
    response = await client.post(
        "/api/v1/student/test-codes/redeem",
        json={"test_code": first["codes"][0]["code"]},
        headers=student_headers(100),
    )
    assert response.status_code == 200

    response = await client.get("/api/v1/admin/test-code-batches", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert data["limit"] == 50
    assert data["offset"] == 0
    assert {b["batch_id"] for b in data["batches"]} == {first["batch_id"], second["batch_id"]}

    response = await client.get(
        "/api/v1/admin/test-code-batches",
        params={"class_level": "JSS1", "subject_id": 1},
        headers=admin_headers,
    )
    batches = response.json()["batches"]
    assert len(batches) == 1
    summary = batches[0]
    assert summary["batch_id"] == first["batch_id"]
    assert summary["total_codes"] == 2
    assert summary["used_codes"] == 1
    assert summary["is_activated"] is True
    assert summary["test_type"] == "First CA"

    response = await client.get(f"/api/v1/admin/test-code-batches/{first['batch_id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == summary

    response = await client.get("/api/v1/admin/test-code-batches/batch_missing", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_batches_paging_validation(client, admin_headers, student_headers):
    response = await client.get("/api/v1/admin/test-code-batches", params={"limit": 0}, headers=admin_headers)
    assert response.status_code == 422

    response = await client.get("/api/v1/admin/test-code-batches", params={"offset": -1}, headers=admin_headers)
    assert response.status_code == 422

    response = await client.get("/api/v1/admin/test-code-batches", headers=student_headers())
    assert response.status_code == 403
