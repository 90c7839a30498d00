import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from restaurant.api.errors import install_error_handlers
from restaurant.api.health import router as health_router
from restaurant.api.routes_admin import router as admin_router
from restaurant.api.routes_cart import router as cart_router
from restaurant.api.routes_catalogue import router as catalogue_router
from restaurant.api.routes_order import router as order_router
from restaurant.config import settings
from restaurant.db import init_db

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(threadName)s [%(name)s] %(levelname)-8s %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # RESET_DB=1 drops and recreates the schema (local dev / CI)
    reset = os.environ.get("RESET_DB", "0").lower() in ("1", "true", "yes")
    init_db(reset=reset)
    yield


app = FastAPI(title="Restaurant Ordering - Backend", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_error_handlers(app)

app.include_router(health_router, prefix="/api", tags=["health"])

app.include_router(catalogue_router)

app.include_router(cart_router)

app.include_router(order_router)

app.include_router(admin_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.APP_HOST, port=settings.APP_PORT)
