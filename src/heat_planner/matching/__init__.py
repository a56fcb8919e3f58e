"""Tiered stock/WIP matching for interactive search."""
from .policy import MatchTier, classify
from .search import search, search_stock, search_wip

__all__ = ["MatchTier", "classify", "search", "search_stock", "search_wip"]
