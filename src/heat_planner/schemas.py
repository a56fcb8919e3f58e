"""Typed records exchanged with the matching and allocation core.

Python attributes are snake_case; every model serializes under the
canonical spreadsheet column names (``Grade``, ``PacketId``, ...) or the
camelCase response keys (``heatPlans``, ``exactMatch``, ...). Always dump
with ``model_dump(by_alias=True)`` when handing rows to a caller.
"""
from __future__ import annotations

from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict, Field

M = TypeVar("M", bound=BaseModel)


class OrderRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    grade: str = Field("", alias="Grade")
    thickness: float = Field(0.0, alias="Thickness")
    width: float = Field(0.0, alias="Width")
    finish: str = Field("", alias="Finish")
    quantity: float = Field(0.0, alias="Quantity")
    customer: str = Field("", alias="Customer")


class StockRecord(BaseModel):
    """One packet of finished stock. Unmapped sheet columns ride along as extras."""
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    grade: str = Field("", alias="Grade")
    thickness: float = Field(0.0, alias="Thickness")
    width: float = Field(0.0, alias="Width")
    finish: str = Field("", alias="Finish")
    packet_id: str = Field("", alias="PacketId")

    @property
    def material_id(self) -> str:
        return self.packet_id


class WipRecord(BaseModel):
    """One coil in production. WIP carries no finish."""
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    grade: str = Field("", alias="Grade")
    thickness: float = Field(0.0, alias="Thickness")
    width: float = Field(0.0, alias="Width")
    coil_id: str = Field("", alias="CoilId")

    @property
    def finish(self) -> str:
        return ""

    @property
    def material_id(self) -> str:
        return self.coil_id


class HeatPlanEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    grade: str = Field(alias="Grade")
    width: float = Field(alias="Width")
    slab_count: str = Field("", alias="SlabCount")  # filled downstream
    quantity: float = Field(alias="Quantity")
    heat_count: int = Field(alias="HeatCount")


class AvailableStockEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    grade: str = Field(alias="Grade")
    width: float = Field(alias="Width")
    material_id: str = Field(alias="MaterialId")
    customer_name: str = Field("", alias="CustomerName")


class AllocationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    heat_plans: list[HeatPlanEntry] = Field(default_factory=list, alias="heatPlans")
    available_stock: list[AvailableStockEntry] = Field(default_factory=list, alias="availableStock")


class SearchQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    grade: str = ""
    width: float = 0.0
    thickness: float = 0.0
    finish: str = ""


class MatchReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    found: bool = False
    exact_match: bool = Field(False, alias="exactMatch")
    message: str = ""
    data: list[StockRecord | WipRecord] = Field(default_factory=list)
    # tier name per entry of ``data``
    tiers: list[str] = Field(default_factory=list)


class SearchResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    stock_result: MatchReport = Field(alias="stockResult")
    wip_result: MatchReport = Field(alias="wipResult")


def coerce_records(op: str, name: str, rows: Any, model: type[M]) -> list[M]:
    """Accept a list of ``model`` instances or canonical-key mappings.

    Anything else violates the input contract and raises ``ValueError``.
    """
    if not isinstance(rows, (list, tuple)):
        raise ValueError(f"{op}: {name} must be a list of records. Got: {type(rows).__name__}")
    out: list[M] = []
    for i, row in enumerate(rows):
        if isinstance(row, model):
            out.append(row)
        elif isinstance(row, Mapping):
            out.append(model.model_validate(dict(row)))
        else:
            raise ValueError(f"{op}: {name}[{i}] is not a {model.__name__} or mapping: {type(row).__name__}")
    return out


__all__ = [
    "coerce_records",
    "OrderRecord",
    "StockRecord",
    "WipRecord",
    "HeatPlanEntry",
    "AvailableStockEntry",
    "AllocationResult",
    "SearchQuery",
    "MatchReport",
    "SearchResponse",
]
