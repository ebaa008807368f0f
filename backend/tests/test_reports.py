async def test_summary_on_empty_database(client):
    res = await client.get("/api/reports/summary")
    assert res.status_code == 200
    body = res.json()
    assert body["inventory"] == {
        "totalItems": 0,
        "totalLines": 0,
        "lowStock": 0,
        "outOfStock": 0,
        "totalValue": "0.00",
    }
    assert body["transactions"]["total"] == 0


async def test_summary_counts(client, create, product, warehouse, shelf):
    await create("/api/products", {"name": "Mouse", "sku": "TECH-1002", "price": "49.99"})
    await create("/api/customers", {"name": "Jane Doe"})
    await client.put(f"/api/locations/{shelf['id']}", json={"isActive": False})
    await create(
        "/api/transactions",
        {
            "type": "PURCHASE",
            "productId": product["id"],
            "destinationLocationId": warehouse["id"],
            "quantity": 4,
            "unitPrice": "700.00",
        },
    )

    res = await client.get("/api/reports/summary")
    assert res.status_code == 200
    body = res.json()

    assert body["inventory"]["totalItems"] == 4
    assert body["inventory"]["totalLines"] == 1
    # laptop: 4 on hand, reorder point 10; mouse: nothing on hand
    assert body["inventory"]["lowStock"] == 1
    assert body["inventory"]["outOfStock"] == 1
    # valued at cost (750.00) when the product has one
    assert body["inventory"]["totalValue"] == "3000.00"

    assert body["products"] == {"total": 2, "active": 2, "categories": 1}
    assert body["customers"] == {"total": 1}
    assert body["suppliers"] == {"total": 1}
    assert body["locations"] == {"total": 2, "active": 1}
    assert body["transactions"]["total"] == 1
    assert body["transactions"]["thisMonth"] == 1
    assert body["transactions"]["value"] == "2800.00"


async def test_low_stock_report(client, create, product, warehouse):
    mouse = await create("/api/products", {"name": "Mouse", "sku": "TECH-1002", "price": "49.99"})
    cable = await create("/api/products", {"name": "Cable", "sku": "CAB-1", "price": "5.00", "reorderPoint": 2})
    await create("/api/inventory", {"productId": product["id"], "locationId": warehouse["id"], "quantity": 4})
    await create("/api/inventory", {"productId": cable["id"], "locationId": warehouse["id"], "quantity": 50})

    res = await client.get("/api/reports/low-stock")
    assert res.status_code == 200
    body = res.json()
    assert body["total"] == 2
    assert [(row["sku"], row["onHand"]) for row in body["data"]] == [
        (mouse["sku"], 0),
        (product["sku"], 4),
    ]
    assert body["data"][1]["reorderPoint"] == 10
