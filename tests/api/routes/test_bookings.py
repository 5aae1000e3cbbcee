"""
Tests for bookings API endpoints.

Tests cover:
- Create booking
- List cleaner bookings
- Cancel booking
- Hand-off summary
"""
from fastapi.testclient import TestClient

from cleanclick.core.config import settings
from tests.utils import MONDAY, SUNDAY, TUESDAY, auth_headers, booking_payload


class TestCreateBooking:
    """Tests for booking creation endpoint."""

    def test_create_booking_success(self, client: TestClient) -> None:
        response = client.post(f"{settings.API_V1_STR}/bookings", json=booking_payload())
        assert response.status_code == 201
        data = response.json()
        assert "id" in data
        assert data["cleanerId"] == "c1"
        assert data["status"] == "confirmed"
        assert data["startTime"] == "09:00"
        assert data["endTime"] == "13:00"
        assert data["totalPrice"] == 110.0

    def test_client_price_ignored(self, client: TestClient) -> None:
        response = client.post(
            f"{settings.API_V1_STR}/bookings",
            json=booking_payload(totalPrice=1, bathrooms=2, serviceType="deep", frequency="weekly"),
        )
        assert response.status_code == 201
        assert response.json()["totalPrice"] == 148.75

    def test_double_booking_conflict(self, client: TestClient) -> None:
        first = client.post(f"{settings.API_V1_STR}/bookings", json=booking_payload())
        second = client.post(
            f"{settings.API_V1_STR}/bookings", json=booking_payload(customerName="Late Larry")
        )
        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["detail"] == "Time slot no longer available"

    def test_closed_day_conflict(self, client: TestClient) -> None:
        response = client.post(
            f"{settings.API_V1_STR}/bookings", json=booking_payload(date=SUNDAY)
        )
        assert response.status_code == 409

    def test_not_priced(self, client: TestClient) -> None:
        response = client.post(
            f"{settings.API_V1_STR}/bookings",
            json=booking_payload(cleanerId="c2", bedrooms=3, bathrooms=5),
        )
        assert response.status_code == 400
        assert response.json()["detail"].startswith("No rate defined")

    def test_house_size_out_of_range(self, client: TestClient) -> None:
        response = client.post(
            f"{settings.API_V1_STR}/bookings", json=booking_payload(bedrooms=0)
        )
        assert response.status_code == 400

    def test_missing_field(self, client: TestClient) -> None:
        payload = booking_payload()
        del payload["customerAddress"]
        response = client.post(f"{settings.API_V1_STR}/bookings", json=payload)
        assert response.status_code == 400

    def test_unknown_cleaner(self, client: TestClient) -> None:
        response = client.post(
            f"{settings.API_V1_STR}/bookings", json=booking_payload(cleanerId="nobody")
        )
        assert response.status_code == 404


class TestListBookings:
    """Tests for listing a cleaner's bookings."""

    def test_list_ordered_by_date(self, client: TestClient) -> None:
        client.post(f"{settings.API_V1_STR}/bookings", json=booking_payload(date=TUESDAY))
        client.post(f"{settings.API_V1_STR}/bookings", json=booking_payload(date=MONDAY))

        response = client.get(f"{settings.API_V1_STR}/bookings", params={"cleanerId": "c1"})
        assert response.status_code == 200
        assert [b["date"] for b in response.json()] == [MONDAY, TUESDAY]

    def test_list_requires_cleaner(self, client: TestClient) -> None:
        response = client.get(f"{settings.API_V1_STR}/bookings")
        assert response.status_code == 400

    def test_list_empty(self, client: TestClient) -> None:
        response = client.get(f"{settings.API_V1_STR}/bookings", params={"cleanerId": "c2"})
        assert response.json() == []


class TestCancelBooking:
    """Tests for cancellation endpoint."""

    def _create(self, client: TestClient) -> str:
        return client.post(f"{settings.API_V1_STR}/bookings", json=booking_payload()).json()["id"]

    def test_cancel_frees_slot(self, client: TestClient) -> None:
        booking_id = self._create(client)
        response = client.delete(
            f"{settings.API_V1_STR}/bookings/{booking_id}", headers=auth_headers("c1")
        )
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

        availability = client.get(
            f"{settings.API_V1_STR}/availability",
            params={"cleanerId": "c1", "date": MONDAY},
        )
        assert availability.json()["morning"] is True

    def test_cancel_unauthenticated(self, client: TestClient) -> None:
        booking_id = self._create(client)
        response = client.delete(f"{settings.API_V1_STR}/bookings/{booking_id}")
        assert response.status_code == 401

    def test_cancel_invalid_token(self, client: TestClient) -> None:
        booking_id = self._create(client)
        response = client.delete(
            f"{settings.API_V1_STR}/bookings/{booking_id}",
            headers={"Authorization": "Bearer garbage"},
        )
        assert response.status_code == 401

    def test_cancel_other_cleaners_booking(self, client: TestClient) -> None:
        booking_id = self._create(client)
        response = client.delete(
            f"{settings.API_V1_STR}/bookings/{booking_id}", headers=auth_headers("c2")
        )
        assert response.status_code == 401

    def test_cancel_missing(self, client: TestClient) -> None:
        response = client.delete(
            f"{settings.API_V1_STR}/bookings/missing", headers=auth_headers("c1")
        )
        assert response.status_code == 404


class TestBookingSummary:
    """Tests for the hand-off summary endpoint."""

    def test_summary(self, client: TestClient) -> None:
        booking_id = client.post(
            f"{settings.API_V1_STR}/bookings", json=booking_payload()
        ).json()["id"]
        response = client.get(f"{settings.API_V1_STR}/bookings/{booking_id}/summary")
        assert response.status_code == 200
        data = response.json()
        assert data["bookingId"] == booking_id
        assert "Date: Monday, June 2, 2025 · Morning (9:00am - 1:00pm)" in data["text"]
        assert "Notes: Pets: Yes" in data["text"]

    def test_summary_missing(self, client: TestClient) -> None:
        response = client.get(f"{settings.API_V1_STR}/bookings/missing/summary")
        assert response.status_code == 404
