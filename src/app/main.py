from fastapi import FastAPI
from .logging_config import configure_logging
from .routers import health, products, collections

configure_logging()

app = FastAPI(title="Shopify Product Composer")

app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(products.router)
app.include_router(collections.router)
