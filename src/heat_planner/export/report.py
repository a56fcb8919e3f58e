from __future__ import annotations

from pathlib import Path

import pandas as pd
from openpyxl.utils import get_column_letter

from ..schemas import AllocationResult, AvailableStockEntry, HeatPlanEntry

HEAT_PLAN_COLUMNS = [f.alias for f in HeatPlanEntry.model_fields.values()]
AVAILABLE_STOCK_COLUMNS = [f.alias for f in AvailableStockEntry.model_fields.values()]

TABLES = ("heatPlans", "availableStock")


def heat_plans_frame(result: AllocationResult) -> pd.DataFrame:
    rows = [p.model_dump(by_alias=True) for p in result.heat_plans]
    return pd.DataFrame(rows, columns=HEAT_PLAN_COLUMNS)


def available_stock_frame(result: AllocationResult) -> pd.DataFrame:
    rows = [a.model_dump(by_alias=True) for a in result.available_stock]
    return pd.DataFrame(rows, columns=AVAILABLE_STOCK_COLUMNS)


def table_frame(result: AllocationResult, table: str) -> pd.DataFrame:
    if table == "heatPlans":
        return heat_plans_frame(result)
    if table == "availableStock":
        return available_stock_frame(result)
    raise ValueError(f"unknown table {table!r}; expected one of {list(TABLES)}")


def to_csv(result: AllocationResult, table: str) -> str:
    """CSV text for one result table, header row included."""
    return table_frame(result, table).to_csv(index=False)


def summary(result: AllocationResult) -> dict:
    return {
        "available_rows": len(result.available_stock),
        "heat_plan_rows": len(result.heat_plans),
        "unmet_quantity": float(sum(p.quantity for p in result.heat_plans)),
        "total_heats": int(sum(p.heat_count for p in result.heat_plans)),
    }


def _auto_width(ws):
    for col in ws.columns:
        max_len = 0
        col_letter = get_column_letter(col[0].column)
        for cell in col:
            if cell.value is not None:
                max_len = max(max_len, len(str(cell.value)))
        ws.column_dimensions[col_letter].width = min(60, max(12, max_len + 2))


def export_excel(result: AllocationResult, out_path: str | Path) -> Path:
    """Write heat plans, available stock and a summary sheet to ``out_path`` (.xlsx)."""
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    kpi = summary(result)
    df_kpi = pd.DataFrame(
        [
            ("Orders served from stock/WIP", kpi["available_rows"]),
            ("Heat plan rows", kpi["heat_plan_rows"]),
            ("Unmet quantity", kpi["unmet_quantity"]),
            ("Heats required", kpi["total_heats"]),
        ],
        columns=["Metric", "Value"],
    )

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        heat_plans_frame(result).to_excel(writer, sheet_name="Heat Plans", index=False)
        available_stock_frame(result).to_excel(writer, sheet_name="Available Stock", index=False)
        df_kpi.to_excel(writer, sheet_name="Summary", index=False)
        for ws in writer.book.worksheets:
            _auto_width(ws)
            ws.freeze_panes = "A2"

    return out_path


__all__ = [
    "TABLES",
    "available_stock_frame",
    "export_excel",
    "heat_plans_frame",
    "summary",
    "table_frame",
    "to_csv",
]
