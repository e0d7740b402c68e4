from __future__ import annotations

from typing import Optional


class CakeAssistantError(Exception):
    """Base error for failures raised inside the assistant core."""


class ExternalServiceFailure(CakeAssistantError):
    """A text-generation, image-generation, or lookup call did not succeed."""

    def __init__(self, service: str, detail: Optional[str] = None) -> None:
        self.service = service
        self.detail = detail or "unknown error"
        super().__init__(f"{service} failed: {self.detail}")


class PricingDegraded(CakeAssistantError):
    """Price estimation could not complete; callers receive a degraded quote."""
