"""
FastAPI routes – the HTTP surface the registration form talks to.

- Validation on blur and on submit (errors returned as data, never raised)
- Submission relay to the automation webhook
- City / street autocomplete
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from app.config import settings
from app.exceptions import ConfigurationError, LookupServiceError, SubmissionError
from app.schemas.api import (
    CandidateListResponse,
    HealthResponse,
    SubmissionResult,
    ValidationResponse,
)
from app.services.lookup import LookupClient
from app.services.relay import SubmissionRelay
from app.services.validation import validate_patient

logger = logging.getLogger(__name__)

router = APIRouter()

lookup_client = LookupClient()


def get_lookup_client() -> LookupClient:
    return lookup_client


def get_relay() -> SubmissionRelay:
    return SubmissionRelay()


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@router.get("/health", response_model=HealthResponse)
def health_check():
    """Basic health endpoint – reports whether the webhook is configured."""
    return HealthResponse(
        status="healthy",
        environment=settings.ENVIRONMENT,
        webhook="configured" if settings.webhook_configured else "missing",
    )


# ---------------------------------------------------------------------------
# Patient registration
# ---------------------------------------------------------------------------

@router.post("/patients/validate", response_model=ValidationResponse)
def validate_registration(payload: Any = Body(...)):
    """Judge a raw form payload; always 200, the verdict is in the body."""
    result = validate_patient(payload)
    return ValidationResponse(
        valid=result.is_valid, errors=result.errors, record=result.record
    )


@router.post("/patients/submit", response_model=SubmissionResult)
async def submit_registration(
    payload: Any = Body(...), relay: SubmissionRelay = Depends(get_relay)
):
    """
    Validate the whole record and forward it to the webhook.
    An invalid record is never forwarded.
    """
    result = validate_patient(payload)
    if not result.is_valid:
        raise HTTPException(
            status_code=422,
            detail={"valid": False, "errors": result.errors},
        )

    try:
        return await relay.submit(result.record)
    except ConfigurationError as exc:
        raise HTTPException(status_code=500, detail=exc.description) from exc
    except SubmissionError as exc:
        raise HTTPException(status_code=502, detail=exc.description) from exc


# ---------------------------------------------------------------------------
# Lookup (degrades to an empty list on failure)
# ---------------------------------------------------------------------------

@router.get("/lookup/cities", response_model=CandidateListResponse)
async def lookup_cities(
    q: str = Query(""), client: LookupClient = Depends(get_lookup_client)
):
    try:
        return CandidateListResponse(results=await client.search_cities(q))
    except LookupServiceError as exc:
        return CandidateListResponse(results=[], error=exc.description)


@router.get("/lookup/streets", response_model=CandidateListResponse)
async def lookup_streets(
    city_code: str = Query(..., min_length=1),
    q: str = Query(""),
    client: LookupClient = Depends(get_lookup_client),
):
    try:
        return CandidateListResponse(results=await client.search_streets(q, city_code))
    except LookupServiceError as exc:
        return CandidateListResponse(results=[], error=exc.description)
