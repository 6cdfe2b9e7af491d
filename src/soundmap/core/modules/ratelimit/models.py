from datetime import datetime

from pydantic import BaseModel, Field


class RateLimitCounter(BaseModel):
    """Stored state of one fixed window for one scope."""

    count: int = Field(0, ge=0)
    reset_at: datetime


class RateLimitResult(BaseModel):
    """Outcome of a single check-and-consume call."""

    allowed: bool
    remaining: int
    reset_at: datetime
    count: int  # Actions recorded in the window after this call
