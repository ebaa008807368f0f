import uuid


async def test_create_inventory_line(client, create, product, warehouse):
    line = await create(
        "/api/inventory",
        {
            "productId": product["id"],
            "locationId": warehouse["id"],
            "quantity": 12,
            "lotNumber": "LOT-7",
            "expirationDate": "2027-01-31T00:00:00",
        },
    )
    assert line["productId"] == product["id"]
    assert line["locationId"] == warehouse["id"]
    assert line["quantity"] == 12
    assert line["lotNumber"] == "LOT-7"
    assert line["expirationDate"].startswith("2027-01-31")


async def test_create_inventory_line_missing_product(client, warehouse):
    res = await client.post(
        "/api/inventory", json={"productId": str(uuid.uuid4()), "locationId": warehouse["id"], "quantity": 1}
    )
    assert res.status_code == 400
    assert res.json()["detail"] == "Product not found"


async def test_create_inventory_line_missing_location(client, product):
    res = await client.post(
        "/api/inventory", json={"productId": product["id"], "locationId": str(uuid.uuid4()), "quantity": 1}
    )
    assert res.status_code == 400
    assert res.json()["detail"] == "Location not found"


async def test_create_inventory_line_negative_quantity(client, product, warehouse):
    res = await client.post(
        "/api/inventory", json={"productId": product["id"], "locationId": warehouse["id"], "quantity": -1}
    )
    assert res.status_code == 422


async def test_get_inventory_line_is_joined(client, create, product, warehouse):
    line = await create("/api/inventory", {"productId": product["id"], "locationId": warehouse["id"], "quantity": 4})

    res = await client.get(f"/api/inventory/{line['id']}")
    assert res.status_code == 200
    body = res.json()
    assert body["product"] == {"id": product["id"], "name": "Laptop", "sku": "TECH-1001"}
    assert body["location"] == {"id": warehouse["id"], "name": "Main Warehouse"}

    res = await client.get(f"/api/inventory/{uuid.uuid4()}")
    assert res.status_code == 404
    assert res.json()["detail"] == "Inventory item not found"


async def test_list_inventory_filters(client, create, product, warehouse, shelf):
    mouse = await create("/api/products", {"name": "Mouse", "sku": "TECH-1002", "price": "49.99"})
    await create("/api/inventory", {"productId": product["id"], "locationId": warehouse["id"], "quantity": 5})
    await create("/api/inventory", {"productId": product["id"], "locationId": shelf["id"], "quantity": 1})
    await create("/api/inventory", {"productId": mouse["id"], "locationId": warehouse["id"], "quantity": 9})

    res = await client.get("/api/inventory")
    body = res.json()
    assert body["total"] == 3
    assert all(row["product"] and row["location"] for row in body["data"])

    res = await client.get("/api/inventory", params={"productId": product["id"]})
    assert res.json()["total"] == 2

    res = await client.get("/api/inventory", params={"productId": product["id"], "locationId": shelf["id"]})
    body = res.json()
    assert body["total"] == 1
    assert body["data"][0]["quantity"] == 1
    assert body["hasMore"] is False

    res = await client.get("/api/inventory", params={"limit": 2})
    body = res.json()
    assert len(body["data"]) == 2
    assert body["hasMore"] is True


async def test_update_inventory_line(client, create, product, warehouse, shelf):
    line = await create("/api/inventory", {"productId": product["id"], "locationId": warehouse["id"], "quantity": 5})

    res = await client.put(f"/api/inventory/{line['id']}", json={"quantity": 8, "locationId": shelf["id"]})
    assert res.status_code == 200
    body = res.json()
    assert body["quantity"] == 8
    assert body["locationId"] == shelf["id"]
    assert body["productId"] == product["id"]


async def test_update_inventory_line_bad_reference(client, create, product, warehouse):
    line = await create("/api/inventory", {"productId": product["id"], "locationId": warehouse["id"]})

    res = await client.put(f"/api/inventory/{line['id']}", json={"locationId": str(uuid.uuid4())})
    assert res.status_code == 400
    assert res.json()["detail"] == "Location not found"

    res = await client.put(f"/api/inventory/{uuid.uuid4()}", json={"quantity": 1})
    assert res.status_code == 404


async def test_delete_inventory_line(client, create, product, warehouse):
    line = await create("/api/inventory", {"productId": product["id"], "locationId": warehouse["id"], "quantity": 2})

    res = await client.delete(f"/api/inventory/{line['id']}")
    assert res.status_code == 200
    assert res.json()["quantity"] == 2

    res = await client.delete(f"/api/inventory/{line['id']}")
    assert res.status_code == 404


async def test_one_unlotted_line_per_product_and_location(client, create, product, warehouse):
    first = await create("/api/inventory", {"productId": product["id"], "locationId": warehouse["id"], "quantity": 5})

    res = await client.post(
        "/api/inventory", json={"productId": product["id"], "locationId": warehouse["id"], "quantity": 5}
    )
    assert res.status_code == 409
    assert first["id"] in res.json()["detail"]

    # lot-tracked stock can sit beside it
    await create(
        "/api/inventory",
        {"productId": product["id"], "locationId": warehouse["id"], "quantity": 5, "lotNumber": "LOT-1"},
    )

    res = await client.post(
        "/api/transactions",
        json={"type": "SALE", "productId": product["id"], "sourceLocationId": warehouse["id"], "quantity": 5},
    )
    assert res.status_code == 201, res.text

    res = await client.get("/api/inventory/" + first["id"])
    assert res.json()["quantity"] == 0


async def test_update_cannot_create_second_unlotted_line(client, create, product, warehouse, shelf):
    await create("/api/inventory", {"productId": product["id"], "locationId": warehouse["id"], "quantity": 5})
    lotted = await create(
        "/api/inventory",
        {"productId": product["id"], "locationId": warehouse["id"], "quantity": 3, "lotNumber": "LOT-9"},
    )

    res = await client.put(f"/api/inventory/{lotted['id']}", json={"lotNumber": None})
    assert res.status_code == 409

    # moving it to a location without un-lotted stock is fine
    res = await client.put(f"/api/inventory/{lotted['id']}", json={"lotNumber": None, "locationId": shelf["id"]})
    assert res.status_code == 200
    assert res.json()["lotNumber"] is None

    # updating the un-lotted line itself does not conflict with itself
    res = await client.put(f"/api/inventory/{lotted['id']}", json={"quantity": 7})
    assert res.status_code == 200


async def test_database_conflict_is_409(client, create, product, warehouse, monkeypatch):
    import routers.inventory

    async def _skip_check(*args, **kwargs):
        return None

    # without the pre-check the unique index still rejects the duplicate
    monkeypatch.setattr(routers.inventory, "_ensure_no_unlotted_line", _skip_check)

    await create("/api/inventory", {"productId": product["id"], "locationId": warehouse["id"], "quantity": 1})
    res = await client.post(
        "/api/inventory", json={"productId": product["id"], "locationId": warehouse["id"], "quantity": 1}
    )
    assert res.status_code == 409
    assert res.json() == {"detail": "Request conflicts with existing data"}
