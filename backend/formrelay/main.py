"""
Form Relay Backend API
FastAPI application that relays website lead and quote forms by email.
"""

import logging
from contextlib import asynccontextmanager
from typing import List

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from formrelay.config import Settings, settings
from formrelay.mail import mail_transport
from formrelay.middleware import add_security_headers
from formrelay.routers import forms

# Configure logging to output to console
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)


def log_startup() -> None:
    """
    Log where the API listens and whether mail delivery is enabled.

    Example output:

        API listening on port 10000
        Mail delivery: smtp.example.com:587 -> hello@breakingdevlab.example
    """
    logger.info("API listening on port %s", settings.port)
    if mail_transport is None:
        logger.warning(
            "SMTP is not fully configured (SMTP_HOST, SMTP_PORT, SMTP_USER, "
            "SMTP_PASS), submissions will be logged instead of emailed"
        )
    else:
        logger.info(
            "Mail delivery: %s:%s -> %s",
            mail_transport.hostname,
            mail_transport.port,
            settings.to_email,
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    log_startup()
    yield


app = FastAPI(
    title="Form Relay API",
    description="Relays lead and quote form submissions to a fixed inbox",
    version="0.1.0",
    lifespan=lifespan,
)


def get_cors_origins(config: Settings) -> List[str]:
    """
    Build the list of allowed CORS origins.

    ALLOWED_ORIGIN holds a single origin, e.g.:
        ALLOWED_ORIGIN=https://breakingdevlab.example

    When unset every origin is allowed.
    """
    return [config.allowed_origin or "*"]


# CORS configuration: origin is resolved at startup from environment
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(settings),
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Added after CORS so preflight responses carry the headers too
add_security_headers(app)

# Include routers
app.include_router(forms.router, prefix="/api", tags=["forms"])


@app.get("/health")
async def health():
    return {"ok": True}


def run() -> None:
    """Console entry point: serve the app on PORT (default 10000)."""
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
