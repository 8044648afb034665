"""
CORS setup for the merchant dashboard frontends.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config.settings import settings

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Accept", "Accept-Language", "Content-Type", "X-Request-ID"]

# Report downloads need Content-Disposition visible to the browser
CORS_EXPOSED_HEADERS = ["X-Request-ID", "Content-Disposition"]

PREFLIGHT_MAX_AGE = 600


def configure_cors(app: FastAPI) -> None:
    """
    Origins come from ALLOWED_ORIGINS (comma-separated); without it the
    local dev servers are allowed. Preflights are not cached in development.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
        expose_headers=CORS_EXPOSED_HEADERS,
        max_age=0 if settings.environment == "development" else PREFLIGHT_MAX_AGE,
    )
