"""
Seed a small demo catalog: categories, suppliers, locations, products and stock.

Run locally (from backend/):
  python -m scripts.seed_demo_data

It uses the same DATABASE_URL as the backend (dotenv supported by core.config).
Safe to run repeatedly: products are matched by SKU, everything else by name.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.database import (
    async_session_maker,
    create_db_and_tables,
    Category,
    InventoryLine,
    Location,
    Product,
    Supplier,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeedProduct:
    name: str
    sku: str
    price: str
    category: str
    supplier: str
    description: Optional[str] = None
    cost: Optional[str] = None
    min_stock_level: int = 0
    reorder_point: int = 0
    # location name -> quantity
    stock: tuple[tuple[str, int], ...] = ()


SEED_CATEGORIES: list[tuple[str, str]] = [
    ("Electronics", "Computers, peripherals and accessories"),
    ("Office Supplies", "Paper, pens and desk items"),
]

SEED_SUPPLIERS: list[tuple[str, str]] = [
    ("TechSource Distribution", "orders@techsource.example"),
    ("Paper & Co", "sales@paperco.example"),
]

SEED_LOCATIONS: list[tuple[str, str]] = [
    ("Main Warehouse", "warehouse"),
    ("Front Shelf", "shelf"),
]

SEED_PRODUCTS: list[SeedProduct] = [
    SeedProduct(
        name="Laptop",
        sku="TECH-1001",
        description="High-performance laptop for professionals",
        price="999.99",
        cost="750.00",
        category="Electronics",
        supplier="TechSource Distribution",
        min_stock_level=5,
        reorder_point=10,
        stock=(("Main Warehouse", 12), ("Front Shelf", 2)),
    ),
    SeedProduct(
        name="Wireless Mouse",
        sku="TECH-1002",
        description="Ergonomic wireless mouse",
        price="49.99",
        cost="18.50",
        category="Electronics",
        supplier="TechSource Distribution",
        min_stock_level=20,
        reorder_point=30,
        stock=(("Main Warehouse", 25),),
    ),
    SeedProduct(
        name="A4 Copy Paper (500 sheets)",
        sku="OFF-2001",
        price="6.49",
        cost="3.10",
        category="Office Supplies",
        supplier="Paper & Co",
        min_stock_level=50,
        reorder_point=80,
        stock=(("Main Warehouse", 140), ("Front Shelf", 20)),
    ),
]


async def _by_name(db: AsyncSession, model, name: str):
    res = await db.execute(select(model).where(func.lower(model.name) == name.lower()))
    return res.scalars().first()


async def seed(db: AsyncSession) -> dict[str, int]:
    """Insert whatever is missing; returns how many rows of each kind were created."""
    created = {"categories": 0, "suppliers": 0, "locations": 0, "products": 0, "inventory": 0}

    categories: dict[str, Category] = {}
    for name, description in SEED_CATEGORIES:
        m = await _by_name(db, Category, name)
        if not m:
            m = Category(name=name, description=description)
            db.add(m)
            created["categories"] += 1
        categories[name] = m

    suppliers: dict[str, Supplier] = {}
    for name, email in SEED_SUPPLIERS:
        m = await _by_name(db, Supplier, name)
        if not m:
            m = Supplier(name=name, email=email)
            db.add(m)
            created["suppliers"] += 1
        suppliers[name] = m

    locations: dict[str, Location] = {}
    for name, loc_type in SEED_LOCATIONS:
        m = await _by_name(db, Location, name)
        if not m:
            m = Location(name=name, type=loc_type, is_active=True)
            db.add(m)
            created["locations"] += 1
        locations[name] = m

    await db.flush()

    for sp in SEED_PRODUCTS:
        res = await db.execute(select(Product).where(Product.sku == sp.sku))
        if res.scalar_one_or_none():
            continue

        p = Product(
            name=sp.name,
            sku=sp.sku,
            description=sp.description,
            price=Decimal(sp.price),
            cost=Decimal(sp.cost) if sp.cost else None,
            category_id=categories[sp.category].id,
            supplier_id=suppliers[sp.supplier].id,
            min_stock_level=sp.min_stock_level,
            reorder_point=sp.reorder_point,
            is_active=True,
        )
        db.add(p)
        await db.flush()
        created["products"] += 1

        for location_name, qty in sp.stock:
            db.add(InventoryLine(product_id=p.id, location_id=locations[location_name].id, quantity=qty))
            created["inventory"] += 1

    await db.commit()
    return created


async def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    await create_db_and_tables()
    async with async_session_maker() as db:
        created = await seed(db)
    logger.info("Seeding completed: %s", created)


if __name__ == "__main__":
    asyncio.run(main())
