"""Stock/WIP search: classify, cap per tier, combine in tier order."""
from __future__ import annotations

import time
from typing import Mapping, Sequence

from .. import config
from ..logs import LOG_SUMMARY, get_logger, get_request_id
from ..schemas import MatchReport, SearchQuery, SearchResponse, StockRecord, WipRecord, coerce_records
from .policy import RANKED_TIERS, Candidate, MatchTier, classify

logger = get_logger("search")

# label -> (exact, approximate, not found)
MESSAGES: dict[str, tuple[str, str, str]] = {
    "Stock": ("Stock Available", "Approximate Stock Available", "Stock is not available"),
    "WIP": ("WIP Available", "Approximate WIP Available", "WIP is not available"),
}


def search_candidates(
    query: SearchQuery,
    candidates: Sequence[Candidate],
    caps: Sequence[int],
    label: str,
) -> MatchReport:
    """Match ``query`` against one candidate set.

    Candidates are bucketed by tier in their input order; each bucket is
    truncated to its cap and the buckets are concatenated tier 1 first.
    ``label`` selects the message set ("Stock" or "WIP").
    """
    candidates = list(candidates)
    if len(caps) != len(RANKED_TIERS):
        raise ValueError(f"search: expected {len(RANKED_TIERS)} tier caps, got {len(caps)}")

    buckets: dict[MatchTier, list[Candidate]] = {t: [] for t in RANKED_TIERS}
    for cand in candidates:
        tier = classify(query, cand)
        if tier is MatchTier.NONE:
            continue
        bucket = buckets[tier]
        if len(bucket) < caps[tier - 1]:
            bucket.append(cand)

    data: list[Candidate] = []
    tiers: list[str] = []
    for tier in RANKED_TIERS:
        data.extend(buckets[tier])
        tiers.extend([tier.label] * len(buckets[tier]))

    found = bool(data)
    exact = bool(buckets[MatchTier.EXACT])
    msg_exact, msg_approx, msg_none = MESSAGES.get(label, MESSAGES["Stock"])
    if not found:
        message = msg_none
    else:
        message = msg_exact if exact else msg_approx
    return MatchReport(found=found, exact_match=exact, message=message, data=data, tiers=tiers)


def _as_query(query) -> SearchQuery:
    if isinstance(query, SearchQuery):
        return query
    if isinstance(query, Mapping):
        return SearchQuery.model_validate(dict(query))
    raise ValueError(f"search: query must be a SearchQuery or mapping. Got: {type(query).__name__}")


def search_stock(query: SearchQuery, stock: Sequence[StockRecord]) -> MatchReport:
    stock = coerce_records("search", "stock", stock, StockRecord)
    return search_candidates(_as_query(query), stock, config.STOCK_TIER_CAPS, "Stock")


def search_wip(query: SearchQuery, wip: Sequence[WipRecord]) -> MatchReport:
    wip = coerce_records("search", "wip", wip, WipRecord)
    return search_candidates(_as_query(query), wip, config.WIP_TIER_CAPS, "WIP")


def search(
    query: SearchQuery,
    stock: Sequence[StockRecord],
    wip: Sequence[WipRecord],
) -> SearchResponse:
    """Run the stock and WIP searches independently for one query."""
    t0 = time.perf_counter()
    query = _as_query(query)
    stock_result = search_stock(query, stock)
    wip_result = search_wip(query, wip)
    if LOG_SUMMARY:
        logger.info(
            "[%s] search grade=%s width=%s thk=%s finish=%s stock=%d/%d wip=%d/%d ms=%.2f",
            get_request_id(), query.grade, query.width, query.thickness, query.finish or "-",
            len(stock_result.data), len(stock), len(wip_result.data), len(wip),
            (time.perf_counter() - t0) * 1000,
        )
    return SearchResponse(stock_result=stock_result, wip_result=wip_result)


__all__ = ["MESSAGES", "search", "search_candidates", "search_stock", "search_wip"]
