# aquashop/main.py
from fastapi import FastAPI
from aquashop.data.database import Base, engine
from aquashop.api.routers import carts, health, orders, wishlists
from aquashop.utils.logging import get_logger
import uvicorn

# import modeli przed create_all
from aquashop.data.models import OrderModel, OrderItemModel  # noqa: F401

logger = get_logger(__name__)


def init_db():
    logger.info(f"Initializing database, tables: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    logger.info("Database tables ready")


def create_app() -> FastAPI:
    init_db()

    app = FastAPI(
        title="AquaShop Cart Service",
        version="1.0.0",
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(carts.router)
    app.include_router(wishlists.router)
    app.include_router(orders.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
