"""
Merchant API: FastAPI application for restaurant menu, inventory and reporting.

STRUCTURE:
- core: lifespan, CORS, middlewares
- models: pydantic models of the stored collections
- repositories: typed access to the entity store
- services: domain services, analytics engine, report export
- routers: HTTP endpoints under /api/merchant and /api/health
- seed.py: sample data
- main.py: application entry point
"""
