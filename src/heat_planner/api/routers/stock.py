from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field, field_validator

from ...logs import get_logger
from ...matching.search import search
from ...schemas import SearchQuery
from ..common import enforce_row_limit, normalize_or_400

router = APIRouter(prefix="/stock", tags=["stock"])
logger = get_logger("api")


class StockSearchRequest(BaseModel):
    grade: str
    width: float
    thickness: float
    finish: str = ""
    stockData: List[Dict[str, Any]] = Field(default_factory=list)
    wipData: List[Dict[str, Any]] = Field(default_factory=list)

    @field_validator("grade", "finish", mode="before")
    @classmethod
    def _as_text(cls, v):
        return "" if v is None else str(v).strip()


@router.post("/search", summary="Tiered search of stock and WIP for one grade/width/thickness/finish")
def search_stock(body: StockSearchRequest):
    enforce_row_limit(stockData=body.stockData, wipData=body.wipData)
    stock = normalize_or_400(body.stockData, "stock")
    wip = normalize_or_400(body.wipData, "wip")
    query = SearchQuery(grade=body.grade, width=body.width, thickness=body.thickness, finish=body.finish)
    try:
        return search(query, stock, wip).model_dump(by_alias=True)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:  # pylint: disable=broad-except
        logger.exception("stock search failed: grade=%s", body.grade)
        raise HTTPException(status_code=500, detail=f"Search failed: {e}")
