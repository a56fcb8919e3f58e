"""Greedy order allocation and heat-plan aggregation.

Orders are processed in input order. Each order takes the first free stock
packet that matches it exactly (grade, width, finish, thickness +-0.01),
otherwise the first free WIP coil (same rule without finish). Whatever
cannot be served is summed into one heat-plan row per (grade, width).

Allocation deliberately uses this single strict rule and not the tiered
search policy.
"""
from __future__ import annotations

import math
import time
from typing import Iterable, Sequence

from .. import config
from ..logs import LOG_DECISIONS, LOG_SUMMARY, get_logger, get_request_id
from ..matching.policy import same_thickness
from ..schemas import (
    AllocationResult,
    AvailableStockEntry,
    HeatPlanEntry,
    OrderRecord,
    StockRecord,
    WipRecord,
    coerce_records,
)

logger = get_logger("allocation")


def heat_count(quantity: float) -> int:
    return max(1, math.ceil(quantity / config.HEAT_CAPACITY))


def _first_free_stock(order: OrderRecord, stock: Iterable[StockRecord], used_ids: set[str]) -> StockRecord | None:
    for s in stock:
        if (
            s.grade == order.grade
            and same_thickness(s.thickness, order.thickness)
            and s.width == order.width
            and s.finish == order.finish
            and s.packet_id not in used_ids
        ):
            return s
    return None


def _first_free_wip(order: OrderRecord, wip: Iterable[WipRecord], used_ids: set[str]) -> WipRecord | None:
    for w in wip:
        if (
            w.grade == order.grade
            and same_thickness(w.thickness, order.thickness)
            and w.width == order.width
            and w.coil_id not in used_ids
        ):
            return w
    return None


def allocate(
    orders: Sequence[OrderRecord],
    stock: Sequence[StockRecord],
    wip: Sequence[WipRecord],
    used_ids: set[str] | None = None,
) -> AllocationResult:
    """Allocate orders to stock/WIP and roll the rest into heat plans.

    ``used_ids`` collects every packet/coil id consumed by this run. Pass
    your own set to inspect it afterwards; a fresh one is created
    otherwise. Never share one set between concurrent runs.
    """
    orders = coerce_records("allocate", "orders", orders, OrderRecord)
    stock = coerce_records("allocate", "stock", stock, StockRecord)
    wip = coerce_records("allocate", "wip", wip, WipRecord)
    if used_ids is None:
        used_ids = set()

    t0 = time.perf_counter()
    plans: dict[tuple[str, float], HeatPlanEntry] = {}
    available: list[AvailableStockEntry] = []
    skipped = 0

    for idx, order in enumerate(orders):
        if not order.grade or not order.quantity:
            skipped += 1
            continue

        match: StockRecord | WipRecord | None = _first_free_stock(order, stock, used_ids)
        if match is None:
            match = _first_free_wip(order, wip, used_ids)
        if match is not None:
            available.append(
                AvailableStockEntry(
                    grade=order.grade,
                    width=order.width,
                    material_id=match.material_id,
                    customer_name=order.customer,
                )
            )
            used_ids.add(match.material_id)
            if LOG_DECISIONS:
                logger.debug(
                    "[%s] order#%d grade=%s width=%s -> %s %s",
                    get_request_id(), idx, order.grade, order.width,
                    "stock" if isinstance(match, StockRecord) else "wip", match.material_id,
                )
            continue

        key = (order.grade, order.width)
        plan = plans.get(key)
        if plan is None:
            plans[key] = HeatPlanEntry(
                grade=order.grade,
                width=order.width,
                quantity=order.quantity,
                heat_count=heat_count(order.quantity),
            )
        else:
            plan.quantity += order.quantity
            plan.heat_count = heat_count(plan.quantity)
        if LOG_DECISIONS:
            logger.debug(
                "[%s] order#%d grade=%s width=%s qty=%s -> heat plan",
                get_request_id(), idx, order.grade, order.width, order.quantity,
            )

    heat_plans = sorted(plans.values(), key=lambda p: (p.grade, p.width))

    if LOG_SUMMARY:
        logger.info(
            "[%s] allocate orders=%d stock=%d wip=%d -> available=%d heat_plans=%d skipped=%d ms=%.2f",
            get_request_id(), len(orders), len(stock), len(wip),
            len(available), len(heat_plans), skipped, (time.perf_counter() - t0) * 1000,
        )
    return AllocationResult(heat_plans=heat_plans, available_stock=available)


__all__ = ["allocate", "heat_count"]
