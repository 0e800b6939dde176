"""
FastAPI application entrypoint.

Run locally:  uvicorn app.main:app --reload
"""

import logging

from fastapi import FastAPI

from app.api.routes import lookup_client, router
from app.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL, format="%(levelname)s | %(name)s | %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Patient Registration API",
    description=(
        "Validates patient registrations (national ID checksum, domestic phone "
        "formats, exactly one main phone), forwards valid ones to an automation "
        "webhook, and proxies city/street autocomplete."
    ),
    version="1.0.0",
)

app.include_router(router, prefix="/api/v1")


@app.on_event("startup")
def on_startup():
    if not settings.webhook_configured:
        logger.warning("Webhook URL is not configured in environment variables!")


@app.on_event("shutdown")
async def on_shutdown():
    await lookup_client.close()
