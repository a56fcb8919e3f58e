from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response
from pydantic import BaseModel, Field

from ...allocation.allocator import allocate
from ...export.report import TABLES, export_excel, to_csv
from ...logs import get_logger
from ...schemas import AllocationResult
from ..common import enforce_row_limit, normalize_or_400

router = APIRouter(prefix="/heatplans", tags=["heatplans"])
logger = get_logger("api")

XLSX_MEDIA = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class HeatPlanRequest(BaseModel):
    orders: List[Dict[str, Any]] = Field(default_factory=list)
    stock: List[Dict[str, Any]] = Field(default_factory=list)
    wip: List[Dict[str, Any]] = Field(default_factory=list)
    # reject datasets with unmappable required columns instead of defaulting them
    strict: bool = False


def _run(body: HeatPlanRequest) -> AllocationResult:
    enforce_row_limit(orders=body.orders, stock=body.stock, wip=body.wip)
    orders = normalize_or_400(body.orders, "orders", require=body.strict)
    stock = normalize_or_400(body.stock, "stock", require=body.strict)
    wip = normalize_or_400(body.wip, "wip", require=body.strict)
    try:
        return allocate(orders, stock, wip)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:  # pylint: disable=broad-except
        logger.exception("heat plan allocation failed: orders=%d", len(body.orders))
        raise HTTPException(status_code=500, detail=f"Allocation failed: {e}")


@router.post("/process", summary="Allocate orders to stock/WIP and build heat plans")
def process(body: HeatPlanRequest):
    return _run(body).model_dump(by_alias=True)


@router.post("/export", summary="Allocate and download one result table as CSV or the full workbook")
def export(
    body: HeatPlanRequest,
    fmt: str = Query("xlsx", pattern="^(xlsx|csv)$"),
    table: str = Query("heatPlans"),
):
    if table not in TABLES:
        raise HTTPException(status_code=400, detail=f"table must be one of {list(TABLES)}")
    result = _run(body)

    if fmt == "csv":
        filename = "heat-plans.csv" if table == "heatPlans" else "available-stock.csv"
        return Response(
            content=to_csv(result, table),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    tmp_file = tempfile.NamedTemporaryFile(prefix="heatplan_", suffix=".xlsx", delete=False)
    tmp_path = Path(tmp_file.name)
    tmp_file.close()
    try:
        export_excel(result, tmp_path)
        content = tmp_path.read_bytes()
    finally:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
    return Response(
        content=content,
        media_type=XLSX_MEDIA,
        headers={"Content-Disposition": 'attachment; filename="heat-plans.xlsx"'},
    )
