import uuid

import pytest


@pytest.fixture
def shipping_record(client, auth_headers):
    response = client.post(
        "/api/v1/shipping",
        json={
            "order_id": str(uuid.uuid4()),
            "carrier": "DHL",
            "tracking_number": "DHL-100",
            "shipping_address": {"full_name": "Ada Buyer", "city": "Lagos", "country": "NG"},
        },
        headers=auth_headers["seller"],
    )
    assert response.status_code == 201
    return response.json()["data"]


def test_create_shipping_record(client, shipping_record):
    assert shipping_record["status"] == "pending"
    assert shipping_record["carrier"] == "DHL"
    assert shipping_record["actual_delivery_date"] is None
    assert shipping_record["tracking_history"] == []
    assert shipping_record["shipping_address"]["city"] == "Lagos"


def test_create_duplicate_order_returns_conflict(client, auth_headers, shipping_record):
    response = client.post(
        "/api/v1/shipping",
        json={"order_id": shipping_record["order_id"]},
        headers=auth_headers["seller"],
    )

    assert response.status_code == 409
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Shipping record already exists"


def test_create_rejects_overlong_carrier(client, auth_headers):
    response = client.post(
        "/api/v1/shipping",
        json={"order_id": str(uuid.uuid4()), "carrier": "c" * 101},
        headers=auth_headers["seller"],
    )

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation failed"
    assert body["errors"] == ["Carrier name cannot exceed 100 characters"]


def test_create_rejects_malformed_body(client, auth_headers):
    response = client.post(
        "/api/v1/shipping",
        json={"order_id": "not-a-uuid"},
        headers=auth_headers["seller"],
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert body["errors"][0].startswith("body.order_id")


def test_buyers_cannot_create_shipping_records(client, auth_headers):
    response = client.post(
        "/api/v1/shipping",
        json={"order_id": str(uuid.uuid4())},
        headers=auth_headers["buyer"],
    )

    assert response.status_code == 403
    assert response.json() == {"success": False, "message": "Insufficient role"}


def test_delivered_status_stamps_delivery_date_once(client, auth_headers, shipping_record):
    url = f"/api/v1/shipping/{shipping_record['id']}/status"

    first = client.post(url, json={"status": "delivered"}, headers=auth_headers["seller"])
    assert first.status_code == 200
    delivered_at = first.json()["data"]["actual_delivery_date"]
    assert delivered_at is not None

    client.post(url, json={"status": "returned"}, headers=auth_headers["seller"])
    again = client.post(url, json={"status": "delivered"}, headers=auth_headers["seller"])

    assert again.json()["data"]["status"] == "delivered"
    assert again.json()["data"]["actual_delivery_date"] == delivered_at


def test_status_update_with_history_entry(client, auth_headers, shipping_record):
    response = client.post(
        f"/api/v1/shipping/{shipping_record['id']}/status",
        json={
            "status": "in_transit",
            "history_entry": {"status": "in_transit", "location": "Ibadan hub"},
        },
        headers=auth_headers["seller"],
    )

    assert response.status_code == 200
    history = response.json()["data"]["tracking_history"]
    assert len(history) == 1
    assert history[0]["location"] == "Ibadan hub"
    assert history[0]["timestamp"] is not None


def test_status_update_rejects_unknown_status(client, auth_headers, shipping_record):
    response = client.post(
        f"/api/v1/shipping/{shipping_record['id']}/status",
        json={"status": "teleported"},
        headers=auth_headers["seller"],
    )

    assert response.status_code == 400
    assert response.json()["errors"][0].startswith("Status 'teleported' is not one of")


def test_tracking_events_keep_insertion_order(client, auth_headers, shipping_record):
    url = f"/api/v1/shipping/{shipping_record['id']}/tracking"
    for location in ("Lagos", "Ibadan", "Abuja"):
        response = client.post(url, json={"location": location}, headers=auth_headers["admin"])
        assert response.status_code == 200

    record = client.get(
        f"/api/v1/shipping/{shipping_record['id']}", headers=auth_headers["admin"]
    ).json()["data"]
    assert [event["location"] for event in record["tracking_history"]] == [
        "Lagos",
        "Ibadan",
        "Abuja",
    ]


def test_patch_updates_details(client, auth_headers, shipping_record):
    response = client.patch(
        f"/api/v1/shipping/{shipping_record['id']}",
        json={"notes": "Leave at reception", "tracking_number": "DHL-200"},
        headers=auth_headers["seller"],
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["notes"] == "Leave at reception"
    assert data["tracking_number"] == "DHL-200"
    assert data["carrier"] == "DHL"


def test_lookup_by_order_for_any_authenticated_user(client, auth_headers, shipping_record):
    response = client.get(
        f"/api/v1/shipping/order/{shipping_record['order_id']}", headers=auth_headers["buyer"]
    )

    assert response.status_code == 200
    assert response.json()["data"]["id"] == shipping_record["id"]


def test_lookup_missing_record(client, auth_headers):
    response = client.get(f"/api/v1/shipping/{uuid.uuid4()}", headers=auth_headers["seller"])

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Shipping record not found"}


def test_list_filters_by_status(client, auth_headers, shipping_record):
    other = client.post(
        "/api/v1/shipping", json={"order_id": str(uuid.uuid4())}, headers=auth_headers["seller"]
    ).json()["data"]
    client.post(
        f"/api/v1/shipping/{other['id']}/status",
        json={"status": "shipped"},
        headers=auth_headers["seller"],
    )

    everything = client.get("/api/v1/shipping", headers=auth_headers["seller"]).json()
    shipped = client.get(
        "/api/v1/shipping", params={"status": "shipped"}, headers=auth_headers["seller"]
    ).json()

    assert everything["count"] == 2
    assert shipped["count"] == 1
    assert shipped["data"][0]["id"] == other["id"]


def test_invalid_token_is_rejected(client):
    response = client.get(
        "/api/v1/shipping", headers={"Authorization": "Bearer not.a.token"}
    )

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid JWT"}
    assert response.headers["WWW-Authenticate"] == "Bearer"
