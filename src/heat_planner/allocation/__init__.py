"""Greedy order allocation and heat-plan aggregation."""
from .allocator import allocate, heat_count

__all__ = ["allocate", "heat_count"]
