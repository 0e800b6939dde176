"""Pydantic models for API request/response serialization."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from app.schemas.patient import PatientRecord


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class ValidationResponse(BaseModel):
    """Verdict for a raw registration; errors are keyed by field path."""
    valid: bool
    errors: dict[str, list[str]] = {}
    record: PatientRecord | None = None


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------

class SubmissionResult(BaseModel):
    success: bool
    webhook_response: dict[str, Any] = {}


# ---------------------------------------------------------------------------
# City / street lookup
# ---------------------------------------------------------------------------

class Candidate(BaseModel):
    """A city or street the user can pick; ``code`` is the authoritative key."""
    code: str
    name: str
    city_code: str | None = None


class CandidateListResponse(BaseModel):
    results: list[Candidate]
    error: str | None = None


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

class HealthResponse(BaseModel):
    status: str = "healthy"
    environment: str
    webhook: str = "configured"
