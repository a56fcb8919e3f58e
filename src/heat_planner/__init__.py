"""Inventory matching and heat-plan allocation for steel orders."""
from .allocation.allocator import allocate, heat_count
from .matching.policy import MatchTier, classify
from .matching.search import search
from .schemas import (
    AllocationResult,
    AvailableStockEntry,
    HeatPlanEntry,
    MatchReport,
    OrderRecord,
    SearchQuery,
    SearchResponse,
    StockRecord,
    WipRecord,
)

__version__ = "0.1.0"

__all__ = [
    "allocate",
    "heat_count",
    "search",
    "classify",
    "MatchTier",
    "AllocationResult",
    "AvailableStockEntry",
    "HeatPlanEntry",
    "MatchReport",
    "OrderRecord",
    "SearchQuery",
    "SearchResponse",
    "StockRecord",
    "WipRecord",
]
