# src/heat_planner/api/common.py
from __future__ import annotations

from typing import Any, Iterable

from fastapi import HTTPException

from .. import config
from ..ingest.columns import normalize_rows


def enforce_row_limit(**datasets: list[Any]) -> None:
    for name, rows in datasets.items():
        if len(rows) > config.MAX_ROWS:
            raise HTTPException(
                status_code=413,
                detail=f"{name}: {len(rows)} rows exceeds the limit of {config.MAX_ROWS}",
            )


def normalize_or_400(rows: Iterable[dict[str, Any]], kind: str, *, require: bool = False) -> list:
    try:
        return normalize_rows(list(rows), kind, require=require)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
