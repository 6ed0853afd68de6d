"""
Folio API tests
"""
from datetime import date, timedelta
from decimal import Decimal


def _open_booking(client, headers, room):
    return client.post("/checkin/walk-in", json={
        "guest": {"full_name": "Neha Gupta", "mobile": "9876501001"},
        "room_id": room.id,
        "advance_payment": "1000",
    }, headers=headers).json()["id"]


def test_folio_totals(client, operator_headers, sample_room):
    booking_id = _open_booking(client, operator_headers, sample_room)
    response = client.post(f"/folio/{booking_id}/charges", json={
        "charge_date": (date.today() - timedelta(days=1)).isoformat(),
        "description": "Room Rent - 101 (Standard)",
        "amount": "1500",
        "charge_type": "room_rent",
    }, headers=operator_headers)
    assert response.status_code == 201

    folio = client.get(f"/folio/{booking_id}").json()

    assert len(folio["charges"]) == 2
    assert len(folio["payments"]) == 1
    assert Decimal(folio["totals"]["subtotal"]) == Decimal("3000")
    assert Decimal(folio["totals"]["cgst_amount"]) == Decimal("180")
    assert Decimal(folio["totals"]["sgst_amount"]) == Decimal("180")
    assert Decimal(folio["totals"]["grand_total"]) == Decimal("3360")
    assert Decimal(folio["totals"]["balance"]) == Decimal("2360")


def test_duplicate_room_rent_conflict(client, operator_headers, sample_room):
    booking_id = _open_booking(client, operator_headers, sample_room)
    response = client.post(f"/folio/{booking_id}/charges", json={
        "description": "Room Rent - 101 (Standard)",
        "amount": "1500",
        "charge_type": "room_rent",
    }, headers=operator_headers)
    assert response.status_code == 409


def test_add_payment(client, operator_headers, sample_room, operator):
    booking_id = _open_booking(client, operator_headers, sample_room)
    response = client.post(f"/folio/{booking_id}/payments", json={
        "amount": "250.50", "payment_mode": "card", "reference_number": "TXN-1"
    }, headers=operator_headers)

    assert response.status_code == 201
    assert response.json()["received_by"] == operator.id
    assert len(client.get(f"/folio/{booking_id}/payments").json()) == 2


def test_invalid_charge_type(client, operator_headers, sample_room):
    booking_id = _open_booking(client, operator_headers, sample_room)
    response = client.post(f"/folio/{booking_id}/charges", json={
        "description": "Room", "amount": "100", "charge_type": "room"
    }, headers=operator_headers)
    assert response.status_code == 422


def test_unknown_booking(client):
    assert client.get("/folio/999").status_code == 404


def test_sub_paisa_payment_rejected(client, operator_headers, sample_room):
    booking_id = _open_booking(client, operator_headers, sample_room)
    response = client.post(f"/folio/{booking_id}/payments", json={
        "amount": "0.004", "payment_mode": "cash"
    }, headers=operator_headers)

    assert response.status_code == 422
    assert len(client.get(f"/folio/{booking_id}/payments").json()) == 1
