from sqlalchemy import func, select

from db.database import InventoryLine, Product
from scripts.seed_demo_data import seed


async def test_seed_is_idempotent(db):
    first = await seed(db)
    assert first["products"] == 3
    assert first["categories"] == 2
    assert first["inventory"] == 5

    second = await seed(db)
    assert set(second.values()) == {0}

    res = await db.execute(select(func.count(Product.id)))
    assert res.scalar_one() == 3
    res = await db.execute(select(func.sum(InventoryLine.quantity)))
    assert res.scalar_one() == 12 + 2 + 25 + 140 + 20


async def test_seeded_data_through_api(db, client):
    await seed(db)
    res = await client.get("/api/products", params={"search": "TECH-"})
    assert res.json()["total"] == 2


async def test_health(anon_client):
    res = await anon_client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"

    res = await anon_client.get("/ready")
    assert res.status_code == 200
    assert res.json()["database"] == "up"
