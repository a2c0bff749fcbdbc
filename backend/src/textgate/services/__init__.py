"""Plan catalog, usage ledger, capability gate and request orchestration."""

from textgate.services.analysis_service import AnalysisService
from textgate.services.capability_gate import CapabilityGate, GateDecision
from textgate.services.plan_catalog import DEFAULT_PLAN_LIMITS, PlanCatalog
from textgate.services.subscription_reader import (
    InMemorySubscriptionReader,
    SqlSubscriptionReader,
    SubscriptionReaderProtocol,
)
from textgate.services.usage_ledger import UsageLedger
from textgate.services.usage_store import InMemoryUsageStore, SqlUsageStore, UsageStoreProtocol

__all__ = [
    "AnalysisService",
    "CapabilityGate",
    "DEFAULT_PLAN_LIMITS",
    "GateDecision",
    "InMemorySubscriptionReader",
    "InMemoryUsageStore",
    "PlanCatalog",
    "SqlSubscriptionReader",
    "SqlUsageStore",
    "SubscriptionReaderProtocol",
    "UsageLedger",
    "UsageStoreProtocol",
]
