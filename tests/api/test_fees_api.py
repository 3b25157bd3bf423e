"""Fee endpoints (admin only)."""

from __future__ import annotations

import pytest

FEE = {
    "student_id": "student-1",
    "student_name": "Ama Mensah",
    "gen": "30",
    "email": "ama@example.com",
    "total_fees": 1000.0,
}


class TestFees:
    @pytest.mark.asyncio
    async def test_initialize_and_pay(self, client, admin_headers, student_headers):
        created = await client.post("/api/v1/fees", json=FEE, headers=admin_headers)
        assert created.status_code == 201
        assert created.json()["status"] == "unpaid"

        paid = await client.post(
            "/api/v1/fees/student-1/payments",
            json={"amount": 400.0, "method": "mobile_money", "reference": "MM-123"},
            headers=admin_headers,
        )
        assert paid.status_code == 201
        body = paid.json()
        assert body["status"] == "partial"
        assert body["balance"] == 600.0
        assert body["payments"][0]["reference"] == "MM-123"
        assert body["payments"][0]["recorded_by"] == "admin-1"

        unread = await client.get("/api/v1/notifications/unread-count", headers=student_headers)
        assert unread.json() == {"count": 1}

    @pytest.mark.asyncio
    async def test_duplicate_initialize(self, client, admin_headers):
        await client.post("/api/v1/fees", json=FEE, headers=admin_headers)
        resp = await client.post("/api/v1/fees", json=FEE, headers=admin_headers)
        assert resp.status_code == 409

    @pytest.mark.asyncio
    async def test_partial_scholarship_needs_percentage(self, client, admin_headers):
        resp = await client.post("/api/v1/fees", json={**FEE, "scholarship_type": "partial"}, headers=admin_headers)
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_scholarship_update(self, client, admin_headers):
        await client.post("/api/v1/fees", json=FEE, headers=admin_headers)
        resp = await client.put(
            "/api/v1/fees/student-1/scholarship",
            json={"scholarship_type": "partial", "scholarship_percentage": 25},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["amount_due"] == 750.0

    @pytest.mark.asyncio
    async def test_statistics(self, client, admin_headers):
        await client.post("/api/v1/fees", json=FEE, headers=admin_headers)
        await client.post(
            "/api/v1/fees", json={**FEE, "student_id": "student-2", "gen": "31"}, headers=admin_headers,
        )
        resp = await client.get("/api/v1/fees/statistics", params={"gen": "31"}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["total_students"] == 1
        assert resp.json()["unpaid_count"] == 1

    @pytest.mark.asyncio
    async def test_unknown_student(self, client, admin_headers):
        resp = await client.get("/api/v1/fees/ghost", headers=admin_headers)
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_bad_payment_method(self, client, admin_headers):
        await client.post("/api/v1/fees", json=FEE, headers=admin_headers)
        resp = await client.post(
            "/api/v1/fees/student-1/payments", json={"amount": 10, "method": "barter"}, headers=admin_headers,
        )
        assert resp.status_code == 422

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", ["student", "teacher"])
    async def test_admin_only(self, client, auth_headers, role):
        resp = await client.get("/api/v1/fees", headers=auth_headers("u1", role))
        assert resp.status_code == 403
