import structlog
import uvicorn
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.shared.config import load_settings
from storefront.shared.errors import register_exception_handlers
from storefront.shared.observability import setup_observability
from storefront.storage import SqlAlchemyStorage

from storefront.services.catalog_service.router import category_router, product_router
from storefront.services.order_service.router import router as order_router

logger = structlog.get_logger(__name__)

settings = load_settings()

app = FastAPI(
    title="Storefront API",
    version="1.0.0",
    description="Catalog and ordering API: categories, products, orders.",
)

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(app, settings)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.allowed_origins),
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

register_exception_handlers(app)

public_router = APIRouter()  # For any public endpoints (e.g. health check)


@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": settings.service_name, "status": "running"}


app.include_router(public_router)
app.include_router(category_router, prefix="/api")
app.include_router(product_router, prefix="/api")
app.include_router(order_router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    storage = SqlAlchemyStorage.from_url(settings.database_url, echo=settings.sql_echo)
    await storage.create_schema()
    app.state.storage = storage
    logger.info("storage_connected", dialect=storage.engine.dialect.name)


@app.on_event("shutdown")
async def shutdown_event():
    storage = getattr(app.state, "storage", None)
    if storage is not None:
        await storage.disconnect()
        logger.info("storage_disconnected")


def run():
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
