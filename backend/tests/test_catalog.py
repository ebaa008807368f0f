import uuid


async def test_category_crud(client, create):
    cat = await create("/api/categories", {"name": " Tools ", "description": "Hand tools"})
    assert cat["name"] == "Tools"

    res = await client.get("/api/categories", params={"search": "hand"})
    assert res.json()["total"] == 1

    res = await client.put(f"/api/categories/{cat['id']}", json={"description": ""})
    assert res.status_code == 200
    assert res.json()["description"] is None

    res = await client.get("/api/categories", params={"search": "hand"})
    assert res.json()["total"] == 0
    res = await client.get("/api/categories", params={"search": "tool"})
    assert res.json()["total"] == 1

    res = await client.delete(f"/api/categories/{cat['id']}")
    assert res.status_code == 200
    res = await client.get(f"/api/categories/{cat['id']}")
    assert res.status_code == 404


async def test_category_in_use_cannot_be_deleted(client, product, category):
    res = await client.delete(f"/api/categories/{category['id']}")
    assert res.status_code == 409
    assert "1 product" in res.json()["detail"]


async def test_supplier_search_fields(client, create):
    await create("/api/suppliers", {"name": "Acme", "contactName": "Wile Coyote"})
    await create("/api/suppliers", {"name": "Globex", "email": "hank@globex.example"})

    res = await client.get("/api/suppliers", params={"search": "coyote"})
    assert [s["name"] for s in res.json()["data"]] == ["Acme"]

    res = await client.get("/api/suppliers", params={"search": "GLOBEX.EXAMPLE"})
    assert [s["name"] for s in res.json()["data"]] == ["Globex"]

    res = await client.get("/api/suppliers")
    assert res.json()["total"] == 2


async def test_supplier_update_and_delete(client, supplier, product):
    res = await client.put(f"/api/suppliers/{supplier['id']}", json={"phone": "555-0100", "name": None})
    assert res.status_code == 200
    assert res.json()["phone"] == "555-0100"
    assert res.json()["name"] == "TechSource"

    res = await client.delete(f"/api/suppliers/{supplier['id']}")
    assert res.status_code == 409

    res = await client.delete(f"/api/suppliers/{uuid.uuid4()}")
    assert res.status_code == 404


async def test_customer_crud_and_search(client, create):
    c = await create(
        "/api/customers",
        {"name": "Jane Doe", "email": "jane@initech.example", "company": "Initech", "zipCode": "12345"},
    )
    assert c["zipCode"] == "12345"

    res = await client.get("/api/customers", params={"search": "initech"})
    assert res.json()["total"] == 1

    res = await client.put(f"/api/customers/{c['id']}", json={"city": "Austin"})
    assert res.json()["city"] == "Austin"

    res = await client.delete(f"/api/customers/{c['id']}")
    assert res.status_code == 200
    assert res.json()["name"] == "Jane Doe"


async def test_customer_email_validation(client):
    res = await client.post("/api/customers", json={"name": "Bad", "email": "not-an-email"})
    assert res.status_code == 422


async def test_location_crud_and_filters(client, warehouse, shelf):
    assert warehouse["type"] == "warehouse"
    assert warehouse["isActive"] is True

    res = await client.put(f"/api/locations/{shelf['id']}", json={"isActive": False})
    assert res.json()["isActive"] is False

    res = await client.get("/api/locations", params={"active": "true"})
    assert [loc["name"] for loc in res.json()["data"]] == ["Main Warehouse"]

    res = await client.get("/api/locations", params={"search": "shelf"})
    assert res.json()["total"] == 1


async def test_location_with_stock_cannot_be_deleted(client, create, product, warehouse, shelf):
    await create("/api/inventory", {"productId": product["id"], "locationId": warehouse["id"]})

    res = await client.delete(f"/api/locations/{warehouse['id']}")
    assert res.status_code == 409

    res = await client.delete(f"/api/locations/{shelf['id']}")
    assert res.status_code == 200


async def test_location_with_movements_cannot_be_deleted(client, create, product, warehouse):
    await create(
        "/api/transactions",
        {"type": "PURCHASE", "productId": product["id"], "destinationLocationId": warehouse["id"], "quantity": 2},
    )
    lines = (await client.get("/api/inventory", params={"locationId": warehouse["id"]})).json()["data"]
    for line in lines:
        assert (await client.delete(f"/api/inventory/{line['id']}")).status_code == 200

    res = await client.delete(f"/api/locations/{warehouse['id']}")
    assert res.status_code == 409
    assert "0 inventory line(s) and 1 transaction(s)" in res.json()["detail"]


async def test_search_wildcards_match_literally(client, create):
    await create("/api/categories", {"name": "50% off"})
    await create("/api/categories", {"name": "Clearance"})
    await create("/api/categories", {"name": "bulk_items"})
    await create("/api/categories", {"name": "bulk items"})

    res = await client.get("/api/categories", params={"search": "50%"})
    assert [c["name"] for c in res.json()["data"]] == ["50% off"]

    res = await client.get("/api/categories", params={"search": "%"})
    assert res.json()["total"] == 1

    res = await client.get("/api/categories", params={"search": "k_i"})
    assert [c["name"] for c in res.json()["data"]] == ["bulk_items"]
