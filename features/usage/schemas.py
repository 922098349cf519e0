"""Usage ledger schemas."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class UsageEntry(BaseModel):
    """One append-only cost/usage row per orchestration call."""

    user_id: Optional[str] = None
    subject_type: str = "admin"
    request_kind: str
    model_id: str
    provider: str
    cost_usd: float = Field(default=0.0, ge=0)
    response_time_ms: int = Field(default=0, ge=0)
    success: bool
    error_message: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class UsageStats(BaseModel):
    """Aggregate usage over a time window."""

    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    total_cost_usd: float = 0.0
    avg_response_time_ms: int = 0


class ModelUsage(BaseModel):
    """Usage grouped by provider model id."""

    model_id: str
    requests: int
    cost_usd: float


class UserUsage(BaseModel):
    """Usage grouped by caller and subject type."""

    user_id: Optional[str] = None
    subject_type: str
    requests: int
    cost_usd: float


class DailyUsage(BaseModel):
    date: str
    requests: int = 0
    cost_usd: float = 0.0


__all__ = ["DailyUsage", "ModelUsage", "UsageEntry", "UsageStats", "UserUsage"]
