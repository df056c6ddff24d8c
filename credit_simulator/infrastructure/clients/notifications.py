"""Email notification webhook client with exponential backoff retry logic"""

import httpx
import asyncio
import logging
from typing import Dict, Any
from credit_simulator.config import settings
from credit_simulator.domain.exceptions import NotificationError
from credit_simulator.infrastructure.observability.metrics import (
    notification_latency_histogram,
    notification_failure_counter,
)

SIMULATION_SAVED_TEMPLATE = "simulation-saved"


class NotificationClient:
    """Client for the mail-sending webhook"""

    def __init__(self, webhook_url: str | None = None):
        self.webhook_url = webhook_url or settings.notification_webhook_url
        self.sender = settings.notification_from
        self.max_retries = settings.webhook_max_retries
        self.backoff_base = settings.webhook_backoff_base

    async def send_email(self, to: str, template: str, params: Dict[str, Any]) -> None:
        """
        Send a templated email with retry logic.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s (base * 2^(attempt-1))
        - Retries on 5xx/4xx responses and network failures
        - Tracks latency histogram and failure counter

        Raises:
            NotificationError: delivery failed after max_retries attempts
        """
        payload = {"from": self.sender, "to": to, "template": template, "params": params}
        attempt = 0
        async with httpx.AsyncClient() as client:
            while attempt < self.max_retries:
                try:
                    with notification_latency_histogram.time():
                        response = await client.post(
                            self.webhook_url,
                            json=payload,
                            timeout=settings.http_timeout_seconds,
                        )
                        response.raise_for_status()
                        return

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    notification_failure_counter.inc()

                    if attempt >= self.max_retries:
                        raise NotificationError(f"Email to {to} failed after {attempt} attempts: {e}") from e

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)

    async def send_simulation_saved(self, to: str, reference_number: str) -> None:
        """Mail the applicant their simulation reference code. Failures are logged, not raised."""
        try:
            await self.send_email(to, SIMULATION_SAVED_TEMPLATE, {"reference_number": reference_number})
        except NotificationError as e:
            logging.error(str(e), extra={"reference_number": reference_number})
