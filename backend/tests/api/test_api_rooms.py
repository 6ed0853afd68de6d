"""
Room, reservation, night audit and settings API tests
"""
from datetime import date, timedelta
from decimal import Decimal


class TestRooms:

    def test_list_rooms_and_types(self, client, sample_room, deluxe_room):
        rooms = client.get("/rooms").json()
        assert [r["room_number"] for r in rooms] == ["101", "103"]

        types = {t["name"]: t for t in client.get("/rooms/types").json()}
        assert types["Standard"]["room_count"] == 1
        assert Decimal(types["Deluxe"]["base_rate"]) == Decimal("2500")

    def test_create_room(self, client, operator_headers, standard_type):
        response = client.post("/rooms", json={"room_number": "201", "floor": 2, "room_type_id": standard_type.id},
                               headers=operator_headers)
        assert response.status_code == 201
        assert response.json()["status"] == "vacant_clean"

    def test_status_change(self, client, operator_headers, sample_room):
        response = client.patch(f"/rooms/{sample_room.id}/status", json={"status": "out_of_order"},
                                headers=operator_headers)
        assert response.status_code == 200
        assert client.get("/rooms/available").json() == []

    def test_status_occupied_refused(self, client, operator_headers, sample_room):
        response = client.patch(f"/rooms/{sample_room.id}/status", json={"status": "occupied"},
                                headers=operator_headers)
        assert response.status_code == 409

    def test_unknown_room(self, client):
        assert client.get("/rooms/999").status_code == 404

    def test_room_without_booking(self, client, sample_room):
        response = client.get(f"/rooms/{sample_room.id}/booking")
        assert response.status_code == 404
        assert response.json() == {"detail": f"Room {sample_room.id} has no active booking"}

    def test_delete_room_and_type(self, client, operator_headers, sample_room, standard_type):
        assert client.delete(f"/rooms/types/{standard_type.id}", headers=operator_headers).status_code == 409

        response = client.delete(f"/rooms/{sample_room.id}", headers=operator_headers)
        assert response.status_code == 200
        assert client.get(f"/rooms/{sample_room.id}").status_code == 404

        response = client.delete(f"/rooms/types/{standard_type.id}", headers=operator_headers)
        assert response.status_code == 200
        assert client.get("/rooms/types").json() == []

    def test_delete_occupied_room(self, client, operator_headers, sample_room):
        client.post("/checkin/walk-in", json={
            "guest": {"full_name": "Mohan Das", "mobile": "9876503001"}, "room_id": sample_room.id
        }, headers=operator_headers)
        assert client.delete(f"/rooms/{sample_room.id}", headers=operator_headers).status_code == 409

    def test_delete_requires_operator(self, client, sample_room):
        assert client.delete(f"/rooms/{sample_room.id}").status_code == 400


class TestReservations:

    def test_create_and_cancel(self, client, operator_headers, standard_type):
        response = client.post("/reservations", json={
            "guest": {"full_name": "Lakshmi Rao", "mobile": "9876501201"},
            "room_type_id": standard_type.id,
            "check_in_date": date.today().isoformat(),
            "check_out_date": (date.today() + timedelta(days=2)).isoformat(),
        }, headers=operator_headers)
        assert response.status_code == 201
        reservation_id = response.json()["id"]

        assert [r["id"] for r in client.get("/reservations/today-arrivals").json()] == [reservation_id]

        response = client.post(f"/reservations/{reservation_id}/cancel", headers=operator_headers)
        assert response.json()["status"] == "cancelled"
        assert client.post(f"/reservations/{reservation_id}/cancel", headers=operator_headers).status_code == 409

    def test_invalid_dates(self, client, operator_headers, standard_type):
        response = client.post("/reservations", json={
            "guest": {"full_name": "Lakshmi Rao", "mobile": "9876501201"},
            "room_type_id": standard_type.id,
            "check_in_date": date.today().isoformat(),
            "check_out_date": date.today().isoformat(),
        }, headers=operator_headers)
        assert response.status_code == 422

    def test_reservation_check_in(self, client, operator_headers, standard_type, sample_room):
        reservation_id = client.post("/reservations", json={
            "guest": {"full_name": "Lakshmi Rao", "mobile": "9876501201"},
            "room_type_id": standard_type.id,
            "check_in_date": date.today().isoformat(),
            "check_out_date": (date.today() + timedelta(days=1)).isoformat(),
        }, headers=operator_headers).json()["id"]

        response = client.post("/checkin/from-reservation",
                               json={"reservation_id": reservation_id, "room_id": sample_room.id},
                               headers=operator_headers)
        assert response.status_code == 201
        assert response.json()["reservation_id"] == reservation_id
        assert client.get(f"/reservations/{reservation_id}").json()["status"] == "checked_in"


class TestNightAudit:

    def test_run_and_summary(self, client, operator_headers, sample_room):
        client.post("/checkin/walk-in", json={
            "guest": {"full_name": "Today Guest", "mobile": "9876501301"}, "room_id": sample_room.id
        }, headers=operator_headers)

        summary = client.get("/night-audit/summary").json()
        assert summary["occupied_rooms"] == 1
        assert summary["check_ins"] == 1
        assert summary["stayovers"] == 0

        result = client.post("/night-audit/run", headers=operator_headers).json()
        assert result["charges_posted"] == 0
        assert result["audit_date"] == date.today().isoformat()

    def test_run_requires_operator(self, client):
        assert client.post("/night-audit/run").status_code == 400


class TestSettings:

    def test_tax_rates(self, client, operator_headers):
        rates = client.get("/settings/taxes").json()
        assert Decimal(rates["cgst"]) == Decimal("6")

        response = client.put("/settings/taxes", json={"cgst": "9"}, headers=operator_headers)
        assert Decimal(response.json()["cgst"]) == Decimal("9")
        assert Decimal(response.json()["sgst"]) == Decimal("6")

    def test_rate_out_of_range(self, client, operator_headers):
        response = client.put("/settings/taxes", json={"cgst": "150"}, headers=operator_headers)
        assert response.status_code == 422


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
