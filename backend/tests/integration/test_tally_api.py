"""
Tally records, payment status changes and daily revenue over HTTP.
"""

import json

import pytest

pytestmark = pytest.mark.tally


def tally_payload(**overrides):
    payload = {
        "date": "2024-06-01T11:30:00",
        "time": "11:30",
        "customerName": "Priya Sharma",
        "customerPhone": "9876543210",
        "staffName": "Anita",
        "services": [{"name": "Haircut", "price": 500}],
        "totalCost": 500,
        "paymentMethod": "CASH",
    }
    payload.update(overrides)
    return payload


def create_record(client, **overrides):
    response = client.post("/api/tally", json=tally_payload(**overrides))
    assert response.status_code == 201, response.get_json()
    return response.get_json()["data"]


class TestTallyApi:
    def test_revenue_for_empty_day_is_zero(self, client):
        response = client.get("/api/tally/revenue?date=2024-06-01")

        assert response.status_code == 200
        data = response.get_json()["data"]
        assert data["totalRevenue"] == 0.0
        assert data["byMethod"] == {"CASH": 0.0, "CARD": 0.0, "UPI": 0.0}

    def test_payment_date_stamped_only_on_completion(self, client):
        record = create_record(client)
        assert record["paymentStatus"] == "PENDING"
        assert record["paymentDate"] is None
        assert record["services"] == [{"name": "Haircut", "price": 500}]

        failed = client.patch(
            f"/api/tally/{record['id']}/payment-status", json={"status": "FAILED"}
        ).get_json()["data"]
        assert failed["paymentDate"] is None

        completed = client.patch(
            f"/api/tally/{record['id']}/payment-status",
            json={"status": "COMPLETED", "upiTransactionId": "UPI-4455"},
        ).get_json()["data"]
        assert completed["paymentStatus"] == "COMPLETED"
        assert completed["paymentDate"] is not None
        assert completed["upiTransactionId"] == "UPI-4455"

    def test_revenue_counts_completed_records(self, client):
        create_record(client, paymentStatus="COMPLETED")
        create_record(client, totalCost=800, paymentMethod="UPI", paymentStatus="COMPLETED")
        create_record(client, totalCost=300)
        create_record(client, date="2024-06-02", paymentStatus="COMPLETED")

        data = client.get("/api/tally/revenue?date=2024-06-01").get_json()["data"]

        assert data["date"] == "2024-06-01"
        assert data["totalRevenue"] == 1300.0
        assert data["byMethod"] == {"CASH": 500.0, "CARD": 0.0, "UPI": 800.0}

    def test_list_filters(self, client):
        create_record(client, paymentStatus="COMPLETED")
        create_record(client, paymentMethod="CARD", date="2024-06-03")

        by_day = client.get("/api/tally?date=2024-06-01").get_json()["data"]
        by_status = client.get("/api/tally?status=completed").get_json()["data"]
        by_method = client.get("/api/tally?paymentMethod=CARD").get_json()["data"]
        in_range = client.get(
            "/api/tally?startDate=2024-06-01&endDate=2024-06-03T23:59:59"
        ).get_json()["data"]

        assert len(by_day) == 1
        assert len(by_status) == 1
        assert [r["paymentMethod"] for r in by_method] == ["CARD"]
        assert len(in_range) == 2

    def test_revenue_requires_date(self, client):
        response = client.get("/api/tally/revenue")

        assert response.status_code == 400
        assert response.get_json()["errors"] == ["date: date is required"]

    def test_invalid_payment_status_is_rejected(self, client):
        record = create_record(client)

        response = client.patch(
            f"/api/tally/{record['id']}/payment-status?status=REFUNDED"
        )

        assert response.status_code == 400

    def test_delete_record(self, client):
        record = create_record(client)

        assert client.delete(f"/api/tally/{record['id']}").status_code == 200
        assert client.get(f"/api/tally/{record['id']}").status_code == 404

    def test_non_finite_total_cost_is_rejected(self, client):
        body = json.dumps(tally_payload()).replace(
            '"totalCost": 500', '"totalCost": NaN'
        )

        bare = client.post("/api/tally", data=body, content_type="application/json")
        quoted = client.post("/api/tally", json=tally_payload(totalCost="nan"))

        for response in (bare, quoted):
            assert response.status_code == 400
            assert "totalCost: Value must be a finite number" in (
                response.get_json()["errors"]
            )
