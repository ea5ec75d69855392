from datetime import timedelta

from whmapping.core.security import create_access_token


def _putaway(client, headers, location="A1-01", sku="SKU1", qty=100):
    return client.post(
        "/inventory/putaway",
        json={"location_code": location, "items": [{"sku_code": sku, "qty": qty}]},
        headers=headers,
    )


# =====================================================
# AUTH
# =====================================================
def test_health_check_is_public(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.headers["X-Request-ID"]


def test_missing_token_is_unauthorized(client):
    response = client.get("/inventory/location/A1-01")

    assert response.status_code == 401
    assert response.json()["error_code"] == "UNAUTHORIZED"


def test_expired_token_is_unauthorized(client):
    token = create_access_token("u-1", expires_delta=timedelta(minutes=-1))

    response = client.get(
        "/locations/", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 401


def test_admin_routes_forbid_regular_users(client, user_headers):
    response = client.delete("/logs/1", headers=user_headers)

    assert response.status_code == 403
    assert response.json()["error_code"] == "PERMISSION_DENIED"


# =====================================================
# LEDGER
# =====================================================
def test_putaway_move_adjust_flow(client, user_headers):
    response = _putaway(client, user_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"][0]["qty"] == 100

    response = client.post(
        "/inventory/move",
        json={
            "from_location_code": "a1-01",
            "to_location_code": "A1-02",
            "sku_code": "sku1",
            "qty": 25,
        },
        headers=user_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["from_inventory"]["qty"] == 75
    assert response.json()["data"]["to_inventory"]["qty"] == 25

    response = client.post(
        "/inventory/adjust",
        json={"location_code": "A1-01", "sku_code": "SKU1", "qty": -10, "note": "damaged"},
        headers=user_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["qty"] == 65

    response = client.get("/inventory/location/A1-01", headers=user_headers)
    assert response.json()["data"]["total_qty"] == 65

    response = client.get("/inventory/sku/SKU1", headers=user_headers)
    assert response.json()["data"]["total_qty"] == 90


def test_insufficient_quantity_is_conflict(client, user_headers):
    _putaway(client, user_headers, qty=5)

    response = client.post(
        "/inventory/move",
        json={
            "from_location_code": "A1-01",
            "to_location_code": "A1-02",
            "sku_code": "SKU1",
            "qty": 6,
        },
        headers=user_headers,
    )

    assert response.status_code == 409
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "INSUFFICIENT_QUANTITY"
    assert body["message"] == "Insufficient quantity. Available: 5, Requested: 6"


def test_same_location_move_is_bad_request(client, user_headers):
    response = client.post(
        "/inventory/move",
        json={
            "from_location_code": "A1-01",
            "to_location_code": "a1-01",
            "sku_code": "SKU1",
            "qty": 1,
        },
        headers=user_headers,
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "VALIDATION_ERROR"


def test_adjust_without_note_is_bad_request(client, user_headers):
    response = client.post(
        "/inventory/adjust",
        json={"location_code": "A1-01", "sku_code": "SKU1", "qty": 3, "note": " "},
        headers=user_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Adjustment note is required"


def test_malformed_body_is_unprocessable(client, user_headers):
    response = client.post(
        "/inventory/putaway",
        json={"location_code": "A1-01", "items": [{"sku_code": "SKU1", "qty": 0}]},
        headers=user_headers,
    )

    assert response.status_code == 422
    assert response.json()["error_code"] == "VALIDATION_ERROR"


def test_unknown_location_lookup_is_not_found(client, user_headers):
    response = client.get("/inventory/location/Z9", headers=user_headers)

    assert response.status_code == 404
    assert response.json()["message"] == 'Location "Z9" not found'


def test_available_quantity(client, user_headers):
    _putaway(client, user_headers, qty=12)

    response = client.get(
        "/inventory/available",
        params={"location": "a1-01", "sku": "sku1"},
        headers=user_headers,
    )

    assert response.json()["data"]["qty"] == 12


def test_location_and_sku_lists(client, user_headers):
    _putaway(client, user_headers)

    locations = client.get("/locations/", headers=user_headers).json()["data"]["items"]
    skus = client.get("/skus/", headers=user_headers).json()["data"]["items"]

    assert locations == [{"id": locations[0]["id"], "code": "A1-01", "sku_count": 1}]
    assert skus[0]["code"] == "SKU1"
    assert skus[0]["total_qty"] == 100


# =====================================================
# MOVEMENT LOGS
# =====================================================
def test_logs_record_token_identity(client, user_headers):
    _putaway(client, user_headers)

    items = client.get("/logs/", headers=user_headers).json()["data"]["items"]

    assert items[0]["user"] == "Alice"
    assert items[0]["action"] == "PUTAWAY"


def test_non_admin_sees_only_own_logs(client, user_headers, other_headers, admin_headers):
    _putaway(client, user_headers)
    _putaway(client, other_headers, sku="SKU2")

    mine = client.get(
        "/logs/", params={"user": "Bob"}, headers=user_headers
    ).json()["data"]
    everything = client.get("/logs/", headers=admin_headers).json()["data"]
    bobs = client.get("/logs/", params={"user": "Bob"}, headers=admin_headers).json()["data"]

    assert [l["user"] for l in mine["items"]] == ["Alice"]
    assert everything["pagination"]["total"] == 2
    assert [l["sku_code"] for l in bobs["items"]] == ["SKU2"]


def test_log_stats(client, user_headers):
    _putaway(client, user_headers, qty=7)

    stats = client.get("/logs/stats", headers=user_headers).json()["data"]

    assert stats["total_locations"] == 1
    assert stats["total_eans"] == 1
    assert stats["total_quantity"] == 7


def test_admin_deletes_logs(client, user_headers, admin_headers):
    _putaway(client, user_headers)
    _putaway(client, user_headers, sku="SKU2")
    ids = [l["id"] for l in client.get("/logs/", headers=admin_headers).json()["data"]["items"]]

    response = client.request(
        "DELETE", "/logs/bulk", json={"ids": ids[:1]}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["deleted"] == 1

    response = client.delete(f"/logs/{ids[1]}", headers=admin_headers)
    assert response.json()["data"]["deleted"] == 1

    response = client.delete(f"/logs/{ids[1]}", headers=admin_headers)
    assert response.status_code == 404


def test_bulk_delete_without_ids_is_bad_request(client, admin_headers):
    response = client.request("DELETE", "/logs/bulk", json={}, headers=admin_headers)

    assert response.status_code == 400
