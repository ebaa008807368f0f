import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from core.auth import fastapi_users, auth_backend
from core.config import settings
from db.database import create_db_and_tables
from routers.categories import router as categories_router
from routers.customers import router as customers_router
from routers.health import router as health_router
from routers.inventory import router as inventory_router
from routers.locations import router as locations_router
from routers.products import router as products_router
from routers.reports import router as reports_router
from routers.suppliers import router as suppliers_router
from routers.transactions import router as transactions_router
from schemas.users import UserRead, UserCreate, UserUpdate

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Inventory API starting up")
    await create_db_and_tables()
    yield
    logger.info("Inventory API shutting down")


app = FastAPI(
    title="Inventory Management API",
    description="API for managing products, suppliers, customers and stock across locations",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": "Request conflicts with existing data"},
    )


# Authentication routes (fastapi-users)
app.include_router(fastapi_users.get_auth_router(auth_backend), prefix="/auth/jwt", tags=["auth"],)
app.include_router(fastapi_users.get_register_router(UserRead, UserCreate), prefix="/auth", tags=["auth"])
app.include_router(fastapi_users.get_reset_password_router(), prefix="/auth", tags=["auth"])
app.include_router(fastapi_users.get_users_router(UserRead, UserUpdate), prefix="/users", tags=["users"])

app.include_router(health_router, tags=["health"])

# Catalog
app.include_router(categories_router, prefix="/api/categories", tags=["categories"])
app.include_router(products_router, prefix="/api/products", tags=["products"])

# Parties
app.include_router(suppliers_router, prefix="/api/suppliers", tags=["suppliers"])
app.include_router(customers_router, prefix="/api/customers", tags=["customers"])

# Stock
app.include_router(locations_router, prefix="/api/locations", tags=["locations"])
app.include_router(inventory_router, prefix="/api/inventory", tags=["inventory"])
app.include_router(transactions_router, prefix="/api/transactions", tags=["transactions"])

app.include_router(reports_router, prefix="/api/reports", tags=["reports"])

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
