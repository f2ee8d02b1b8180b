import uuid

import pytest


@pytest.fixture
def return_request(client, auth_headers):
    response = client.post(
        "/api/v1/returns",
        json={
            "order_id": str(uuid.uuid4()),
            "reason": "Item arrived damaged",
            "images": [{"url": "https://img.example/1.jpg", "public_id": "returns/1"}],
        },
        headers=auth_headers["buyer"],
    )
    assert response.status_code == 201
    return response.json()["data"]


def test_create_return_request_uses_caller_identity(return_request):
    assert return_request["user_id"] == "buyer-1"
    assert return_request["status"] == "pending"
    assert return_request["refund_amount"] == 0
    assert return_request["images"][0]["public_id"] == "returns/1"


def test_create_return_request_requires_reason(client, auth_headers):
    response = client.post(
        "/api/v1/returns",
        json={"order_id": str(uuid.uuid4()), "reason": ""},
        headers=auth_headers["buyer"],
    )

    assert response.status_code == 400
    assert response.json()["errors"] == ["Return reason is required"]


def test_only_buyers_create_return_requests(client, auth_headers):
    response = client.post(
        "/api/v1/returns",
        json={"order_id": str(uuid.uuid4()), "reason": "Changed my mind"},
        headers=auth_headers["seller"],
    )

    assert response.status_code == 403


def test_owner_and_admin_can_read_request(client, auth_headers, return_request):
    url = f"/api/v1/returns/{return_request['id']}"

    assert client.get(url, headers=auth_headers["buyer"]).status_code == 200
    assert client.get(url, headers=auth_headers["admin"]).status_code == 200

    response = client.get(url, headers=auth_headers["other_buyer"])
    assert response.status_code == 403
    assert response.json() == {"success": False, "message": "Not your return request"}


def test_list_mine_is_scoped_to_caller(client, auth_headers, return_request):
    mine = client.get("/api/v1/returns/mine", headers=auth_headers["buyer"]).json()
    theirs = client.get("/api/v1/returns/mine", headers=auth_headers["other_buyer"]).json()

    assert mine["count"] == 1
    assert mine["data"][0]["id"] == return_request["id"]
    assert theirs == {"success": True, "count": 0, "data": []}


def test_admin_lists_all_requests(client, auth_headers, return_request):
    response = client.get("/api/v1/returns", headers=auth_headers["admin"])
    assert response.status_code == 200
    assert response.json()["count"] == 1

    assert client.get("/api/v1/returns", headers=auth_headers["buyer"]).status_code == 403


def test_admin_processes_request(client, auth_headers, return_request):
    response = client.post(
        f"/api/v1/returns/{return_request['id']}/process",
        json={
            "status": "approved",
            "admin_response": "Refund issued",
            "refund_amount": 25.5,
            "refund_method": "original_payment",
        },
        headers=auth_headers["admin"],
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "approved"
    assert data["processed_by"] == "admin-1"
    assert data["processed_at"] is not None
    assert data["refund_amount"] == 25.5
    assert data["refund_method"] == "original_payment"

    filtered = client.get(
        "/api/v1/returns", params={"status": "approved"}, headers=auth_headers["admin"]
    ).json()
    assert filtered["count"] == 1


def test_process_rejects_unknown_refund_method(client, auth_headers, return_request):
    response = client.post(
        f"/api/v1/returns/{return_request['id']}/process",
        json={"status": "approved", "refund_method": "cash"},
        headers=auth_headers["admin"],
    )

    assert response.status_code == 400
    assert response.json()["errors"][0].startswith("Refund method 'cash' is not one of")


def test_process_missing_request(client, auth_headers):
    response = client.post(
        f"/api/v1/returns/{uuid.uuid4()}/process",
        json={"status": "approved"},
        headers=auth_headers["admin"],
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Return request not found"
