# storefront/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from storefront.data.database import init_db
from storefront.api.routers import carts, orders, health
from storefront.utils.logging import get_logger
import uvicorn

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Inicjalizacja bazy danych")
    try:
        init_db()
    except Exception as e:
        logger.error(f"Nie udalo sie utworzyc tabel: {e}")
        raise
    logger.info("Tabele utworzone")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(carts.router)
    app.include_router(orders.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
