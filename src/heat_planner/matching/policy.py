"""Tiered match policy used by interactive stock/WIP search.

A candidate is classified in a single pass into the first tier whose
predicate holds, so tiers are mutually exclusive:

    EXACT                 grade, width, thickness (+-0.01), finish or empty finish
    SAME_GRADE_THICKNESS  grade, thickness (+-0.01)
    THICKNESS_RANGE       grade, thickness within +-0.25
    APPROXIMATE           grade and any of: thickness +-0.5, width +-100,
                          finish equal, empty finish
    NONE                  nothing above

Allocation does not use this policy (see ``allocation.allocator``).
"""
from __future__ import annotations

from enum import IntEnum
from typing import Union

from .. import config
from ..schemas import SearchQuery, StockRecord, WipRecord

Candidate = Union[StockRecord, WipRecord]


class MatchTier(IntEnum):
    EXACT = 1
    SAME_GRADE_THICKNESS = 2
    THICKNESS_RANGE = 3
    APPROXIMATE = 4
    NONE = 5

    @property
    def label(self) -> str:
        return self.name.lower()


RANKED_TIERS: tuple[MatchTier, ...] = (
    MatchTier.EXACT,
    MatchTier.SAME_GRADE_THICKNESS,
    MatchTier.THICKNESS_RANGE,
    MatchTier.APPROXIMATE,
)


def same_thickness(a: float, b: float) -> bool:
    return abs(a - b) < config.THICKNESS_TOLERANCE


def classify(query: SearchQuery, candidate: Candidate) -> MatchTier:
    if str(candidate.grade).strip() != str(query.grade).strip():
        return MatchTier.NONE

    thk_diff = abs(candidate.thickness - query.thickness)
    fin = candidate.finish
    finish_ok = not fin or fin == query.finish

    if same_thickness(candidate.thickness, query.thickness):
        if candidate.width == query.width and finish_ok:
            return MatchTier.EXACT
        return MatchTier.SAME_GRADE_THICKNESS
    if thk_diff <= config.THICKNESS_RANGE:
        return MatchTier.THICKNESS_RANGE
    if (
        thk_diff <= config.APPROX_THICKNESS
        or abs(candidate.width - query.width) <= config.APPROX_WIDTH
        or finish_ok
    ):
        return MatchTier.APPROXIMATE
    return MatchTier.NONE


__all__ = ["Candidate", "MatchTier", "RANKED_TIERS", "classify", "same_thickness"]
