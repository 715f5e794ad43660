"""Pydantic models for API request payloads."""

from pydantic import BaseModel


class IntakeRequest(BaseModel):
    """Intake payload; either ``amount`` in mg or a ``shots`` preset.

    A ``timestamp`` in epoch milliseconds makes it a backdated entry.
    """

    amount: float | None = None
    shots: int | None = None
    timestamp: int | None = None


class SetupRequest(BaseModel):
    """Initial setup payload."""

    initial_amount: float = 0.0
