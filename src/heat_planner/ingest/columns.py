# src/heat_planner/ingest/columns.py
"""Map loosely named sheet columns onto canonical record fields.

Input rows come from whatever produced them (spreadsheet export, JSON
body, DataFrame) with human-entered headers such as "GRD", "B Qty",
"Coil No". Headers are matched against synonym lists, cells are coerced
(numbers -> float with 0 fallback, text -> trimmed str with "" fallback)
and one typed record is built per row.
"""
from __future__ import annotations

import datetime as dt
import math
import re
from typing import Any, Iterable, Mapping, Sequence

import numpy as np
import pandas as pd
from pydantic import BaseModel

from ..logs import get_logger
from ..schemas import OrderRecord, StockRecord, WipRecord

logger = get_logger("ingest")

# ===================== Header synonyms =====================
# canonical field -> accepted headers (compared after _norm_col)

ORDER_SYNONYMS: dict[str, list[str]] = {
    "Grade": ["Grade", "GRD", "Material"],
    "Thickness": ["Thickness", "THK", "Thi"],
    "Width": ["Width", "WIDT", "Wid"],
    "Finish": ["Finish", "FIN", "F"],
    "Quantity": ["Quantity", "Qty", "B Qty", "BQty"],
    "Customer": ["Customer", "CustomerName", "Customer Name"],
}

STOCK_SYNONYMS: dict[str, list[str]] = {
    "Grade": ["GRD", "Grade", "Material"],
    "Thickness": ["THK", "Thickness", "Thi"],
    "Width": ["WIDT", "Width", "Wid"],
    "Finish": ["FIN", "Finish", "F"],
    "PacketId": ["PKT", "PKTNO", "PacketNo", "Packet", "PacketId", "packet_id"],
}

WIP_SYNONYMS: dict[str, list[str]] = {
    "Grade": ["Grade", "GRD", "Material"],
    "Thickness": ["Thk", "Thickness", "Thi"],
    "Width": ["Width", "WIDT", "Wid"],
    "CoilId": ["Coil No", "CoilNo", "Coil", "CoilId", "coil_id"],
}

NUMERIC_FIELDS = {"Thickness", "Width", "Quantity"}

# kind -> (synonyms, record model, keep unmapped columns)
KINDS: dict[str, tuple[dict[str, list[str]], type[BaseModel], bool]] = {
    "orders": (ORDER_SYNONYMS, OrderRecord, False),
    "stock": (STOCK_SYNONYMS, StockRecord, True),
    "wip": (WIP_SYNONYMS, WipRecord, True),
}

# ===================== Helpers =====================

_WS = re.compile(r"\s+")


def _norm_col(s: Any) -> str:
    """Lowercase, drop whitespace/underscores, then a leading "b"/"ssp" and trailing "ro"."""
    n = _WS.sub("", str(s).strip().lower()).replace("_", "")
    n = re.sub(r"^b", "", n)
    n = re.sub(r"^ssp", "", n)
    n = re.sub(r"ro$", "", n)
    return n


def _clean_text(v: Any) -> str:
    if v is None:
        return ""
    if isinstance(v, float):
        if math.isnan(v):
            return ""
        if v.is_integer():
            v = int(v)
    s = str(v).strip()
    if not s or s.lower() in {"nan", "none", "null"}:
        return ""
    return s


def _to_py_scalar(x):
    """Convert numpy/pandas scalars & dates to JSON-friendly Python types."""
    if x is None:
        return None
    if isinstance(x, float) and math.isnan(x):
        return None
    if isinstance(x, (np.integer,)):
        return int(x)
    if isinstance(x, (np.floating,)):
        v = float(x)
        return None if math.isnan(v) else v
    if isinstance(x, (pd.Timestamp, dt.datetime, dt.date)):
        return None if pd.isna(x) else str(x)
    if x is pd.NaT:
        return None
    return x


def _frame(rows: pd.DataFrame | Iterable[Mapping[str, Any]], kind: str) -> pd.DataFrame:
    if isinstance(rows, pd.DataFrame):
        return rows
    if isinstance(rows, (str, bytes)) or not isinstance(rows, Iterable):
        raise ValueError(f"{kind}: expected a list of rows or a DataFrame. Got: {type(rows).__name__}")
    rows = list(rows)
    for i, r in enumerate(rows):
        if not isinstance(r, Mapping):
            raise ValueError(f"{kind}: row {i} is not a mapping: {type(r).__name__}")
    return pd.DataFrame.from_records(rows)


# ===================== Public =====================

def map_columns(headers: Sequence[Any], synonyms: Mapping[str, Sequence[str]]) -> dict[str, Any]:
    """Return canonical field -> original header for every field that was found.

    Headers are scanned in sheet order; the first one whose normalized
    form matches a synonym wins and is not reused for another field.
    """
    norm_headers = [(_norm_col(h), h) for h in headers]
    mapping: dict[str, Any] = {}
    claimed: set[int] = set()
    for canon, syns in synonyms.items():
        wanted = {_norm_col(s) for s in syns}
        for i, (n, original) in enumerate(norm_headers):
            if i not in claimed and n in wanted:
                mapping[canon] = original
                claimed.add(i)
                break
    return mapping


def missing_columns(headers: Sequence[Any], kind: str) -> list[str]:
    synonyms = KINDS[kind][0]
    found = map_columns(headers, synonyms)
    return [c for c in synonyms if c not in found]


def normalize_rows(
    rows: pd.DataFrame | Iterable[Mapping[str, Any]],
    kind: str,
    *,
    require: bool = False,
) -> list[BaseModel]:
    """Build typed records of ``kind`` ("orders" | "stock" | "wip") from raw rows.

    With ``require=True`` a canonical column that cannot be found raises
    ``ValueError``; otherwise it is defaulted (0 / "").
    """
    if kind not in KINDS:
        raise ValueError(f"unknown record kind {kind!r}; expected one of {sorted(KINDS)}")
    synonyms, model, keep_extra = KINDS[kind]

    df = _frame(rows, kind)
    if df.empty:
        return []
    df = df.dropna(how="all")

    original_cols = list(df.columns)
    mapping = map_columns(original_cols, synonyms)
    missing = [c for c in synonyms if c not in mapping]
    if missing:
        if require:
            raise ValueError(f"{kind}: missing columns {missing}. Found: {original_cols}")
        logger.info("%s: columns %s not found, defaulted. Found: %s", kind, missing, original_cols)

    out = pd.DataFrame(index=df.index)
    for canon in synonyms:
        src = mapping.get(canon)
        if canon in NUMERIC_FIELDS:
            col = pd.to_numeric(df[src], errors="coerce") if src is not None else pd.Series(0.0, index=df.index)
            out[canon] = col.fillna(0.0).astype(float)
        else:
            out[canon] = df[src].map(_clean_text) if src is not None else ""

    extra_cols: list[Any] = []
    if keep_extra:
        taken = set(mapping.values())
        all_syns = {_norm_col(s) for syns in synonyms.values() for s in syns}
        field_names = set(model.model_fields)
        extra_cols = [
            c for c in original_cols
            if c not in taken and _norm_col(c) not in all_syns and str(c) not in field_names
        ]

    records: list[BaseModel] = []
    canon_rows = out.to_dict(orient="records")
    extra_rows = df[extra_cols].to_dict(orient="records") if extra_cols else [{}] * len(canon_rows)
    for canon_row, extra_row in zip(canon_rows, extra_rows):
        payload = {str(k): _to_py_scalar(v) for k, v in extra_row.items()}
        payload.update(canon_row)
        records.append(model.model_validate(payload))
    return records


def normalize_orders(rows, *, require: bool = False) -> list[OrderRecord]:
    return normalize_rows(rows, "orders", require=require)  # type: ignore[return-value]


def normalize_stock(rows, *, require: bool = False) -> list[StockRecord]:
    return normalize_rows(rows, "stock", require=require)  # type: ignore[return-value]


def normalize_wip(rows, *, require: bool = False) -> list[WipRecord]:
    return normalize_rows(rows, "wip", require=require)  # type: ignore[return-value]


__all__ = [
    "ORDER_SYNONYMS",
    "STOCK_SYNONYMS",
    "WIP_SYNONYMS",
    "map_columns",
    "missing_columns",
    "normalize_rows",
    "normalize_orders",
    "normalize_stock",
    "normalize_wip",
]
