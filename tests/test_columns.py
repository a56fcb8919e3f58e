import numpy as np
import pandas as pd
import pytest

from heat_planner.ingest.columns import (
    ORDER_SYNONYMS,
    STOCK_SYNONYMS,
    _norm_col,
    map_columns,
    missing_columns,
    normalize_orders,
    normalize_stock,
    normalize_wip,
)


@pytest.mark.parametrize(
    "raw,norm",
    [("B Qty", "qty"), ("  Coil No ", "coilno"), ("packet_id", "packetid"), ("SSP Grade", "grade"), ("WIDTH", "width")],
)
def test_norm_col(raw, norm):
    assert _norm_col(raw) == norm


def test_map_columns_uses_sheet_headers():
    headers = ["S.No", "GRD", "THK", "WIDT", "FIN", "PKT", "STORE"]
    assert map_columns(headers, STOCK_SYNONYMS) == {
        "Grade": "GRD", "Thickness": "THK", "Width": "WIDT", "Finish": "FIN", "PacketId": "PKT",
    }


def test_order_quantity_header_variants():
    for header in ("B Qty", "BQTY", "Qty", "Quantity"):
        assert map_columns(["Grade", header], ORDER_SYNONYMS)["Quantity"] == header


def test_normalize_orders_coerces_cells():
    rows = [
        {"Grade": " 304 ", "Thi": "2.0", "Wid": 1250, "F": "2B", "B Qty": "40", "Customer Name": "Acme "},
        {"Grade": "316L", "Thi": "n/a", "Wid": None, "F": None, "B Qty": 12.5, "Customer Name": float("nan")},
    ]
    first, second = normalize_orders(rows)
    assert (first.grade, first.thickness, first.width, first.finish, first.quantity, first.customer) == (
        "304", 2.0, 1250.0, "2B", 40.0, "Acme",
    )
    assert (second.thickness, second.width, second.finish, second.quantity, second.customer) == (
        0.0, 0.0, "", 12.5, "",
    )


def test_numeric_grade_cell_becomes_text():
    (rec,) = normalize_orders([{"Grade": 304.0, "Qty": 1}])
    assert rec.grade == "304"


def test_missing_column_defaults_unless_required():
    rows = [{"Grade": "A", "Thickness": 2, "Width": 1000, "Qty": 5}]
    (rec,) = normalize_orders(rows)
    assert rec.finish == "" and rec.customer == ""
    with pytest.raises(ValueError, match=r"missing columns \['Finish', 'Customer'\]"):
        normalize_orders(rows, require=True)


def test_stock_extras_are_kept():
    rows = [{"GRD": "A", "THK": 2, "WIDT": 1000, "FIN": "2D", "PKT": "P-1", "STORE": "Y1", "NICKEL": np.float64(8.1)}]
    (rec,) = normalize_stock(rows)
    dumped = rec.model_dump(by_alias=True)
    assert dumped["PacketId"] == "P-1"
    assert dumped["STORE"] == "Y1"
    assert dumped["NICKEL"] == pytest.approx(8.1)
    assert "PKT" not in dumped


def test_wip_from_dataframe():
    df = pd.DataFrame(
        {
            "Coil No": ["C1", "C2", None],
            "Grade": ["A", "B", None],
            "Thk": [2.0, "x", None],
            "Width": [1000, 1250, None],
            "Decision": ["OK", None, None],
        }
    )
    recs = normalize_wip(df)
    assert [r.coil_id for r in recs] == ["C1", "C2"]
    assert recs[1].thickness == 0.0
    assert recs[0].model_dump(by_alias=True)["Decision"] == "OK"
    assert recs[1].model_dump(by_alias=True)["Decision"] is None


def test_missing_columns_report():
    assert missing_columns(["Coil", "Grade"], "wip") == ["Thickness", "Width"]


def test_empty_input():
    assert normalize_stock([]) == []


def test_rejects_non_rows():
    with pytest.raises(ValueError):
        normalize_stock("GRD,THK")
    with pytest.raises(ValueError, match="row 0"):
        normalize_stock([["A", 2.0]])
