"""Usage and cost ledger for generation calls."""

from .recorder import UsageRecorder
from .repository import InMemoryUsageLedger, UsageLedger
from .schemas import DailyUsage, ModelUsage, UsageEntry, UsageStats, UserUsage

__all__ = [
    "DailyUsage",
    "InMemoryUsageLedger",
    "ModelUsage",
    "UsageEntry",
    "UsageLedger",
    "UsageRecorder",
    "UsageStats",
    "UserUsage",
]
