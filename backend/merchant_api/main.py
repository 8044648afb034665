"""
Merchant API main application.
Entry point for the FastAPI REST server.
"""

from fastapi import FastAPI

from merchant_api.core import configure_cors, lifespan, register_middlewares
from merchant_api.routers import health_router, merchant_router
from shared.config.settings import settings


app = FastAPI(
    title="Merchant API",
    description="Restaurant merchant backend: menu, inventory and reporting",
    version="0.1.0",
    lifespan=lifespan,
)

register_middlewares(app)
configure_cors(app)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router)
app.include_router(merchant_router)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "merchant_api.main:app",
        host="0.0.0.0",
        port=settings.api_port,
        reload=settings.debug,
    )
