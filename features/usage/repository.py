"""Usage ledger contract and in-memory implementation."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from .schemas import DailyUsage, ModelUsage, UsageEntry, UsageStats, UserUsage


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive bounds as UTC so they compare with stored timestamps."""

    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _stats(entries: Iterable[UsageEntry]) -> UsageStats:
    entries = list(entries)
    successful = [entry for entry in entries if entry.success]
    avg_response = (
        round(sum(entry.response_time_ms for entry in successful) / len(successful)) if successful else 0
    )
    return UsageStats(
        total_requests=len(entries),
        successful_requests=len(successful),
        failed_requests=len(entries) - len(successful),
        total_cost_usd=round(sum(entry.cost_usd for entry in entries), 6),
        avg_response_time_ms=avg_response,
    )


class UsageLedger(Protocol):
    """Write-only collaborator persisting usage rows."""

    async def append(self, entry: UsageEntry) -> None:
        ...


class InMemoryUsageLedger:
    """Process-local ledger used in development and tests."""

    def __init__(self) -> None:
        self.entries: List[UsageEntry] = []

    async def append(self, entry: UsageEntry) -> None:
        self.entries.append(entry)

    def _window(self, since: Optional[datetime], until: Optional[datetime]) -> List[UsageEntry]:
        since, until = _as_utc(since), _as_utc(until)
        return [
            entry
            for entry in self.entries
            if (since is None or entry.created_at >= since) and (until is None or entry.created_at <= until)
        ]

    def summarize(self, since: Optional[datetime] = None, until: Optional[datetime] = None) -> UsageStats:
        return _stats(self._window(since, until))

    def usage_by_model(self, since: Optional[datetime] = None, until: Optional[datetime] = None) -> List[ModelUsage]:
        grouped: Dict[str, ModelUsage] = {}
        for entry in self._window(since, until):
            current = grouped.get(entry.model_id)
            if current is None:
                grouped[entry.model_id] = ModelUsage(model_id=entry.model_id, requests=1, cost_usd=entry.cost_usd)
            else:
                current.requests += 1
                current.cost_usd = round(current.cost_usd + entry.cost_usd, 6)
        return sorted(grouped.values(), key=lambda usage: usage.cost_usd, reverse=True)

    def usage_by_user(
        self,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: int = 10,
    ) -> List[UserUsage]:
        """Per caller totals, most expensive first."""

        grouped: Dict[Tuple[Optional[str], str], UserUsage] = {}
        for entry in self._window(since, until):
            key = (entry.user_id, entry.subject_type)
            current = grouped.get(key)
            if current is None:
                grouped[key] = UserUsage(
                    user_id=entry.user_id,
                    subject_type=entry.subject_type,
                    requests=1,
                    cost_usd=entry.cost_usd,
                )
            else:
                current.requests += 1
                current.cost_usd = round(current.cost_usd + entry.cost_usd, 6)
        ranked = sorted(grouped.values(), key=lambda usage: usage.cost_usd, reverse=True)
        return ranked[: max(limit, 0)]

    def daily_usage(self, days: int = 30, *, now: Optional[datetime] = None) -> List[DailyUsage]:
        """One bucket per UTC day for the last ``days`` days, oldest first.

        Days without entries are reported with zero requests and cost.
        """

        today = (_as_utc(now) or datetime.now(UTC)).astimezone(UTC).date()
        buckets: Dict[str, DailyUsage] = {}
        for offset in range(days - 1, -1, -1):
            day = (today - timedelta(days=offset)).isoformat()
            buckets[day] = DailyUsage(date=day, requests=0, cost_usd=0.0)

        for entry in self.entries:
            bucket = buckets.get(entry.created_at.astimezone(UTC).date().isoformat())
            if bucket is None:
                continue
            bucket.requests += 1
            bucket.cost_usd = round(bucket.cost_usd + entry.cost_usd, 6)
        return list(buckets.values())

    def user_usage(
        self,
        user_id: str,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> UsageStats:
        return _stats(entry for entry in self._window(since, until) if entry.user_id == user_id)


__all__ = ["InMemoryUsageLedger", "UsageLedger"]
