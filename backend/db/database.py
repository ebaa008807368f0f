from collections.abc import AsyncGenerator
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from core.config import settings


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    """Naive UTC timestamp; every DateTime column holds UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


engine = create_async_engine(settings.database_url, echo=settings.database_echo)
async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


async def create_db_and_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session


# Register every model on Base.metadata; routers import them from here.
from .users import User  # noqa: E402,F401
from .category import Category  # noqa: E402,F401
from .supplier import Supplier  # noqa: E402,F401
from .customer import Customer  # noqa: E402,F401
from .location import Location  # noqa: E402,F401
from .product import Product  # noqa: E402,F401
from .inventory.line import InventoryLine  # noqa: E402,F401
from .inventory.transaction import Transaction, TRANSACTION_TYPES  # noqa: E402,F401
