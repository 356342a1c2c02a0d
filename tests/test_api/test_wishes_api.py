"""
API tests for wishes
"""


def _saving(client, headers, income):
    response = client.post("/api/v1/savings/", json={"bank_name": "BCA", "income": income}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def _wish(client, headers, price, name="Laptop", **extra):
    response = client.post("/api/v1/wishes/", json={"name": name, "price": price, **extra}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_create_uses_live_balance(client, auth_headers):
    _saving(client, auth_headers, "10000000")
    wish = _wish(client, auth_headers, "15000000", amount_still_needed="0")

    assert wish["status"] == "partially-funded"
    assert wish["amount_still_needed"] == "5000000.00"
    assert wish["live"] == {
        "status": "pending",
        "is_funded": False,
        "amount_still_needed": "5000000.00",
        "affordability_percent": "66.67",
    }


def test_status_follows_savings(client, auth_headers):
    wish = _wish(client, auth_headers, "1000")
    assert wish["status"] == "unfunded"

    _saving(client, auth_headers, "1000")
    refreshed = client.get(f"/api/v1/wishes/{wish['id']}", headers=auth_headers).json()["data"]
    assert refreshed["status"] == "funded"
    assert refreshed["live"]["status"] == "achieved"


def test_caller_mode(client, auth_headers, caller_status_source):
    wish = _wish(client, auth_headers, "15000000", amount_still_needed="5000000")
    assert wish["status"] == "partially-funded"
    assert wish["amount_still_needed"] == "5000000.00"
    assert wish["live"]["status"] == "pending"


def test_price_must_be_positive(client, auth_headers):
    response = client.post("/api/v1/wishes/", json={"name": "Free", "price": "0"}, headers=auth_headers)
    assert response.status_code == 422


def test_update_and_list(client, auth_headers):
    _saving(client, auth_headers, "1000")
    phone = _wish(client, auth_headers, "500", name="Phone")
    _wish(client, auth_headers, "4000", name="Bike")

    response = client.put(
        f"/api/v1/wishes/{phone['id']}", json={"description": "128GB"}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["description"] == "128GB"

    body = client.get("/api/v1/wishes/?sort=lowest", headers=auth_headers).json()
    assert [w["name"] for w in body["data"]] == ["Phone", "Bike"]
    assert body["summary"]["achieved"] == 1
    assert body["summary"]["pending"] == 1
    assert body["summary"]["savings_balance"] == "1000.00"
    assert body["summary"]["total_amount_still_needed"] == "3000.00"

    pending = client.get("/api/v1/wishes/?live_status=pending", headers=auth_headers).json()
    assert [w["name"] for w in pending["data"]] == ["Bike"]

    assert client.get("/api/v1/wishes/?status=done", headers=auth_headers).status_code == 422


def test_delete_and_ownership(client, auth_headers, register_user):
    wish = _wish(client, auth_headers, "100")
    other = register_user("other@gmail.com")
    other_headers = {"Authorization": f"Bearer {other['access_token']}"}

    assert client.put(
        f"/api/v1/wishes/{wish['id']}", json={"name": "Mine"}, headers=other_headers
    ).status_code == 404

    assert client.delete(f"/api/v1/wishes/{wish['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/v1/wishes/{wish['id']}", headers=auth_headers).status_code == 404


def test_oversized_amounts_rejected(client, auth_headers):
    huge = "1" + "0" * 30
    for payload in (
        {"name": "Island", "price": huge},
        {"name": "Island", "price": "10000000000000"},
        {"name": "Island", "price": "100", "amount_still_needed": huge},
    ):
        response = client.post("/api/v1/wishes/", json=payload, headers=auth_headers)
        assert response.status_code == 422, payload
        assert "too large" in response.text
