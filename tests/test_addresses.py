from sqlalchemy.future import select

from app import models
from app.database import AsyncSessionLocal

from .conftest import auth_headers


def addresses_url(customer_id, address_id=None):
    url = f"/api/v1/customers/{customer_id}/addresses"
    return url if address_id is None else f"{url}/{address_id}"


async def stored_addresses(customer_id):
    """Lee el estado real de la tabla con una sesión nueva."""
    async with AsyncSessionLocal() as session:
        result = await session.execute(
            select(models.Address).filter(models.Address.customer_id == customer_id).order_by(models.Address.id)
        )
        return list(result.scalars().all())


async def test_first_address_is_default(client, customer_user, customer_headers, address_payload):
    customer_id = customer_user.customer.id

    response = await client.post(addresses_url(customer_id), json=address_payload, headers=customer_headers)

    assert response.status_code == 201
    created = response.json()["data"][0]
    assert created["id_default"] is True
    assert created["street1"] == "rue de la paix"
    assert created["customer_id"] == customer_id


async def test_second_address_is_not_default(client, customer_user, customer_headers, address_payload):
    customer_id = customer_user.customer.id
    first = await client.post(addresses_url(customer_id), json=address_payload, headers=customer_headers)

    response = await client.post(addresses_url(customer_id), json=address_payload, headers=customer_headers)

    assert response.status_code == 201
    assert response.json()["data"][0]["id_default"] is False

    rows = await stored_addresses(customer_id)
    assert [a.is_default for a in rows] == [True, False]
    assert rows[0].id == first.json()["data"][0]["id"]


async def test_update_promotes_address_to_default(client, customer_user, customer_headers, address_payload):
    customer_id = customer_user.customer.id
    d1 = (await client.post(addresses_url(customer_id), json=address_payload, headers=customer_headers)).json()["data"][0]
    d2 = (await client.post(addresses_url(customer_id), json=address_payload, headers=customer_headers)).json()["data"][0]

    payload = dict(address_payload, street1="avenue montaigne", street2="apt 4")
    response = await client.put(addresses_url(customer_id, d2["id"]), json=payload, headers=customer_headers)

    assert response.status_code == 200
    by_id = {a["id"]: a for a in response.json()["data"]}
    assert by_id[d2["id"]]["id_default"] is True
    assert by_id[d2["id"]]["street1"] == "avenue montaigne"
    assert by_id[d2["id"]]["street2"] == "apt 4"
    assert by_id[d1["id"]]["id_default"] is False

    rows = await stored_addresses(customer_id)
    assert {a.id: a.is_default for a in rows} == {d1["id"]: False, d2["id"]: True}


async def test_update_without_street2_keeps_stored_value(client, customer_user, customer_headers, address_payload):
    customer_id = customer_user.customer.id
    created = await client.post(
        addresses_url(customer_id), json=dict(address_payload, street2="apt 4"), headers=customer_headers
    )
    address_id = created.json()["data"][0]["id"]

    response = await client.put(
        addresses_url(customer_id, address_id), json=dict(address_payload, city="Lyon"), headers=customer_headers
    )

    assert response.status_code == 200
    updated = response.json()["data"][0]
    assert (updated["city"], updated["street2"]) == ("Lyon", "apt 4")
    rows = await stored_addresses(customer_id)
    assert rows[0].street2 == "apt 4"


async def test_update_with_null_street2_clears_it(client, customer_user, customer_headers, address_payload):
    customer_id = customer_user.customer.id
    created = await client.post(
        addresses_url(customer_id), json=dict(address_payload, street2="apt 4"), headers=customer_headers
    )
    address_id = created.json()["data"][0]["id"]

    response = await client.put(
        addresses_url(customer_id, address_id), json=dict(address_payload, street2=None), headers=customer_headers
    )

    assert response.status_code == 200
    assert response.json()["data"][0]["street2"] is None


async def test_update_default_address_keeps_single_default(client, customer_user, customer_headers, address_payload):
    customer_id = customer_user.customer.id
    d1 = (await client.post(addresses_url(customer_id), json=address_payload, headers=customer_headers)).json()["data"][0]
    await client.post(addresses_url(customer_id), json=address_payload, headers=customer_headers)

    response = await client.put(addresses_url(customer_id, d1["id"]), json=address_payload, headers=customer_headers)

    assert response.status_code == 200
    rows = await stored_addresses(customer_id)
    assert sum(a.is_default for a in rows) == 1
    assert rows[0].is_default is True


async def test_update_unknown_address_returns_404(client, customer_user, customer_headers, address_payload):
    customer_id = customer_user.customer.id
    await client.post(addresses_url(customer_id), json=address_payload, headers=customer_headers)

    response = await client.put(addresses_url(customer_id, 999), json=address_payload, headers=customer_headers)

    assert response.status_code == 404
    assert response.json()["errors"][0]["code"] == "not_found"
    rows = await stored_addresses(customer_id)
    assert [a.is_default for a in rows] == [True]


async def test_delete_default_address_is_rejected(client, customer_user, customer_headers, address_payload):
    customer_id = customer_user.customer.id
    d1 = (await client.post(addresses_url(customer_id), json=address_payload, headers=customer_headers)).json()["data"][0]

    response = await client.delete(addresses_url(customer_id, d1["id"]), headers=customer_headers)

    assert response.status_code == 400
    assert response.json() == {
        "errors": [{
            "code": "default_address",
            "field": "id_default",
            "message": "You can not delete your default address",
        }]
    }
    assert len(await stored_addresses(customer_id)) == 1


async def test_delete_default_rejected_even_with_other_addresses(client, customer_user, customer_headers, address_payload):
    customer_id = customer_user.customer.id
    d1 = (await client.post(addresses_url(customer_id), json=address_payload, headers=customer_headers)).json()["data"][0]
    await client.post(addresses_url(customer_id), json=address_payload, headers=customer_headers)

    response = await client.delete(addresses_url(customer_id, d1["id"]), headers=customer_headers)

    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "default_address"


async def test_delete_non_default_address(client, customer_user, customer_headers, address_payload):
    customer_id = customer_user.customer.id
    await client.post(addresses_url(customer_id), json=address_payload, headers=customer_headers)
    d2 = (await client.post(addresses_url(customer_id), json=address_payload, headers=customer_headers)).json()["data"][0]

    response = await client.delete(addresses_url(customer_id, d2["id"]), headers=customer_headers)

    assert response.status_code == 204
    assert response.content == b""

    gone = await client.get(addresses_url(customer_id, d2["id"]), headers=customer_headers)
    assert gone.status_code == 401
    rows = await stored_addresses(customer_id)
    assert [a.is_default for a in rows] == [True]


async def test_delete_unknown_address_returns_404(client, customer_user, customer_headers):
    # Existencia antes que protección: sin direcciones no hay default_address
    response = await client.delete(addresses_url(customer_user.customer.id, 999), headers=customer_headers)

    assert response.status_code == 404
    assert response.json()["errors"][0] == {"code": "not_found", "message": "Address not found"}


async def test_missing_fields_report_one_required_error_each(client, customer_user, customer_headers):
    response = await client.post(addresses_url(customer_user.customer.id), json={}, headers=customer_headers)

    assert response.status_code == 400
    errors = response.json()["errors"]
    assert sorted(e["field"] for e in errors) == ["city", "country", "street1", "zip"]
    assert all(e["code"] == "required" for e in errors)
    assert all(e["message"] == "required validation failed" for e in errors)


async def test_blank_fields_are_required(client, customer_user, customer_headers, address_payload):
    payload = dict(address_payload, city="   ")

    response = await client.post(addresses_url(customer_user.customer.id), json=payload, headers=customer_headers)

    assert response.status_code == 400
    assert response.json()["errors"] == [
        {"code": "required", "field": "city", "message": "required validation failed"}
    ]


async def test_list_and_read_addresses(client, customer_user, customer_headers, address_payload):
    customer_id = customer_user.customer.id
    d1 = (await client.post(addresses_url(customer_id), json=address_payload, headers=customer_headers)).json()["data"][0]
    await client.post(addresses_url(customer_id), json=dict(address_payload, city="Lyon"), headers=customer_headers)

    listing = await client.get(addresses_url(customer_id), headers=customer_headers)
    assert listing.status_code == 200
    assert [a["city"] for a in listing.json()["data"]] == ["Paris", "Lyon"]

    single = await client.get(addresses_url(customer_id, d1["id"]), headers=customer_headers)
    assert single.status_code == 200
    assert single.json()["data"][0]["id"] == d1["id"]


async def test_cross_customer_access_is_unauthorized(client, customer_factory, customer_user, customer_headers, address_payload):
    owner_id = customer_user.customer.id
    address = (await client.post(addresses_url(owner_id), json=address_payload, headers=customer_headers)).json()["data"][0]
    other = await customer_factory(email="other@example.com")
    other_headers = auth_headers(other)

    # Mediante la ruta del dueño
    assert (await client.get(addresses_url(owner_id), headers=other_headers)).status_code == 401
    assert (await client.get(addresses_url(owner_id, address["id"]), headers=other_headers)).status_code == 401
    assert (await client.put(addresses_url(owner_id, address["id"]), json=address_payload, headers=other_headers)).status_code == 401
    assert (await client.delete(addresses_url(owner_id, address["id"]), headers=other_headers)).status_code == 401

    # Mediante su propia ruta con un ID ajeno
    other_id = other.customer.id
    assert (await client.get(addresses_url(other_id, address["id"]), headers=other_headers)).status_code == 401
    assert (await client.put(addresses_url(other_id, address["id"]), json=address_payload, headers=other_headers)).status_code == 404
    assert (await client.delete(addresses_url(other_id, address["id"]), headers=other_headers)).status_code == 404

    rows = await stored_addresses(owner_id)
    assert [(a.street1, a.is_default) for a in rows] == [("rue de la paix", True)]
    assert await stored_addresses(other_id) == []


async def test_addresses_require_authentication(client, customer_user, address_payload):
    response = await client.post(addresses_url(customer_user.customer.id), json=address_payload)

    assert response.status_code == 401
    assert response.json()["errors"][0]["code"] == "unauthorized"


async def test_archived_customer_token_is_rejected(client, db_session, customer_user, customer_headers):
    from app import crud

    await crud.soft_delete_user(db_session, customer_user)

    response = await client.get(addresses_url(customer_user.customer.id), headers=customer_headers)

    assert response.status_code == 401
