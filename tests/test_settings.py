async def test_settings_crud(client, admin_headers):
    created = await client.post("/api/v1/settings", json={"key": "currency", "value": "EUR"}, headers=admin_headers)
    assert created.status_code == 200
    assert created.json()["key"] == "currency"
    assert created.json()["value"] == "EUR"

    listing = await client.get("/api/v1/settings", headers=admin_headers)
    assert [s["key"] for s in listing.json()["data"]] == ["currency"]

    single = await client.get("/api/v1/settings/currency", headers=admin_headers)
    assert single.status_code == 200
    assert single.json()["value"] == "EUR"
    assert "data" not in single.json()

    updated = await client.put("/api/v1/settings", json={"key": "currency", "value": "USD"}, headers=admin_headers)
    assert updated.status_code == 200
    assert updated.json()["value"] == "USD"

    deleted = await client.delete("/api/v1/settings/currency", headers=admin_headers)
    assert deleted.status_code == 204
    assert (await client.get("/api/v1/settings/currency", headers=admin_headers)).status_code == 404


async def test_setting_key_is_unique(client, admin_headers):
    await client.post("/api/v1/settings", json={"key": "currency", "value": "EUR"}, headers=admin_headers)

    response = await client.post("/api/v1/settings", json={"key": "currency", "value": "USD"}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["errors"][0] == {"code": "unique", "field": "key", "message": "unique validation failed"}


async def test_setting_update_invalid_data(client, admin_headers):
    response = await client.put("/api/v1/settings", json={"key": "currency"}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"errors": [{"code": "invalid_data", "message": "Invalid data"}]}


async def test_setting_update_unknown_key(client, admin_headers):
    response = await client.put("/api/v1/settings", json={"key": "missing", "value": "x"}, headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["errors"][0]["message"] == "Setting not found"


async def test_delete_unknown_setting(client, admin_headers):
    response = await client.delete("/api/v1/settings/missing", headers=admin_headers)

    assert response.status_code == 404


async def test_settings_need_admin(client, customer_headers):
    assert (await client.get("/api/v1/settings", headers=customer_headers)).status_code == 403
    assert (await client.get("/api/v1/settings")).status_code == 401
