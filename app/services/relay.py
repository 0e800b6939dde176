"""
Forward a validated registration to the automation webhook.

One POST per submission. Nothing is retried, queued or stored; a failure is
raised so the user can see it and resubmit the same form.
"""

from __future__ import annotations

import logging

import httpx

from app.config import Settings, settings as default_settings
from app.exceptions import ConfigurationError, SubmissionError
from app.schemas.api import SubmissionResult
from app.schemas.patient import PatientRecord

logger = logging.getLogger(__name__)

SUCCESS_STATUS = "success"


class SubmissionRelay:
    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or default_settings
        self._transport = transport

    async def submit(self, record: PatientRecord) -> SubmissionResult:
        """POST the record as JSON; succeed only on ``{"status": "success"}``."""
        if not self.settings.webhook_configured:
            logger.error("Webhook URL not configured in environment variables.")
            raise ConfigurationError("Server configuration error.")

        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=httpx.Timeout(self.settings.HTTP_TIMEOUT_SECONDS),
            ) as client:
                response = await client.post(
                    self.settings.WEBHOOK_URL, json=record.to_payload()
                )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Webhook rejected submission: HTTP %s", e.response.status_code)
            raise SubmissionError(
                f"Failed to submit data: webhook responded with HTTP {e.response.status_code}."
            ) from e
        except httpx.HTTPError as e:
            logger.error("Error forwarding data to webhook: %s", e)
            raise SubmissionError(f"Failed to submit data: {e}") from e
        except ValueError as e:
            logger.error("Webhook returned a non-JSON response: %s", e)
            raise SubmissionError("Failed to submit data: unreadable webhook response.") from e

        if not isinstance(data, dict) or data.get("status") != SUCCESS_STATUS:
            logger.warning("Webhook response did not indicate success: %s", data)
            raise SubmissionError("Failed to submit data: webhook did not confirm success.")

        logger.info("Patient registration forwarded to webhook")
        return SubmissionResult(success=True, webhook_response=data)
