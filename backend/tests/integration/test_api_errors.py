"""
Error envelope, validation responses and health endpoints.
"""

import pytest

CUSTOMER = {"name": "Priya Sharma", "phone": "9876543210", "gender": "FEMALE"}


@pytest.mark.customer
class TestCustomerApi:
    def test_missing_fields_return_every_error(self, client):
        response = client.post("/api/customers", json={"email": "x@example.com"})

        assert response.status_code == 400
        body = response.get_json()
        assert body["success"] is False
        assert body["message"] == "Validation failed"
        assert "name: name is required" in body["errors"]
        assert "phone: phone is required" in body["errors"]
        assert "gender: gender is required" in body["errors"]

    def test_duplicate_phone_is_a_conflict(self, client):
        assert client.post("/api/customers", json=CUSTOMER).status_code == 201

        response = client.post(
            "/api/customers", json={**CUSTOMER, "name": "Another Person"}
        )

        assert response.status_code == 409
        assert "9876543210" in response.get_json()["message"]

    def test_invalid_json_body(self, client):
        response = client.post(
            "/api/customers", data="{not json", content_type="application/json"
        )

        assert response.status_code == 400
        assert response.get_json()["success"] is False

    def test_unknown_customer_is_not_found(self, client):
        response = client.get("/api/customers/12345")

        assert response.status_code == 404
        assert response.get_json()["message"] == "Customer 12345 not found"

    def test_lookup_by_phone_and_search(self, client):
        client.post("/api/customers", json=CUSTOMER)

        by_phone = client.get("/api/customers/phone/9876543210")
        search = client.get("/api/customers?search=PRIYA").get_json()["data"]

        assert by_phone.status_code == 200
        assert by_phone.get_json()["data"]["name"] == "Priya Sharma"
        assert [c["phone"] for c in search] == ["9876543210"]

    def test_id_beyond_store_range_is_not_found(self, client):
        response = client.get("/api/customers/99999999999999999999999")

        assert response.status_code == 404
        assert response.get_json()["success"] is False

    def test_invalid_sort_key(self, client):
        response = client.get("/api/customers?sortBy=age")

        assert response.status_code == 400

    def test_update_overwrites_fields(self, client):
        created = client.post("/api/customers", json=CUSTOMER).get_json()["data"]

        response = client.put(
            f"/api/customers/{created['id']}",
            json={**CUSTOMER, "notes": "Prefers mornings"},
        )

        assert response.status_code == 200
        data = response.get_json()["data"]
        assert data["notes"] == "Prefers mornings"
        assert data["createdAt"] == created["createdAt"]


@pytest.mark.employee
class TestEmployeeApi:
    def test_availability_toggle(self, client):
        employee = client.post(
            "/api/employees", json={"name": "Anita", "role": "Stylist"}
        ).get_json()["data"]

        off = client.patch(
            f"/api/employees/{employee['id']}/availability", json={"available": False}
        ).get_json()["data"]
        listed = client.get("/api/employees?available=true").get_json()["data"]

        assert off["available"] is False
        assert listed == []

        on = client.patch(
            f"/api/employees/{employee['id']}/availability?available=true"
        ).get_json()["data"]
        assert on["available"] is True
        assert on["nextAvailable"] is not None

    def test_list_by_role(self, client):
        client.post("/api/employees", json={"name": "Anita", "role": "Stylist"})
        client.post("/api/employees", json={"name": "Ravi", "role": "Barber"})

        barbers = client.get("/api/employees/role/Barber").get_json()["data"]

        assert [e["name"] for e in barbers] == ["Ravi"]


@pytest.mark.catalog
class TestServiceApi:
    def test_sorted_by_price(self, client):
        client.post(
            "/api/services",
            json={"name": "Facial", "duration": 45, "price": 1200, "category": "Skin"},
        )
        client.post(
            "/api/services",
            json={"name": "Haircut", "duration": 30, "price": 500, "category": "Hair"},
        )

        names = [
            s["name"]
            for s in client.get("/api/services?sortBy=price").get_json()["data"]
        ]

        assert names == ["Haircut", "Facial"]

    def test_invalid_price(self, client):
        response = client.post(
            "/api/services",
            json={"name": "Facial", "duration": 45, "price": -1, "category": "Skin"},
        )

        assert response.status_code == 400
        assert "price: Value must be positive" in response.get_json()["errors"]


class TestHealth:
    def test_health(self, client):
        body = client.get("/api/health").get_json()

        assert body["success"] is True
        assert body["data"]["status"] == "ok"

    def test_database_health(self, client):
        response = client.get("/api/health/db")

        assert response.status_code == 200
        assert response.get_json()["data"] == {"database": "ok"}

    def test_unknown_route_uses_envelope(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.get_json()["success"] is False
