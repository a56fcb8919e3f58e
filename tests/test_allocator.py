import math

import pytest

from heat_planner.allocation.allocator import allocate, heat_count

from conftest import order, stock, wip


def test_stock_match_consumes_packet():
    used = set()
    result = allocate([order(quantity=50)], [stock("P1")], [], used_ids=used)
    assert result.heat_plans == []
    assert len(result.available_stock) == 1
    entry = result.available_stock[0]
    assert (entry.grade, entry.width, entry.material_id, entry.customer_name) == ("A", 1000, "P1", "ACME")
    assert used == {"P1"}


def test_unmatched_orders_accumulate_into_one_heat_plan():
    result = allocate([order(quantity=40), order(quantity=30)], [], [])
    assert result.available_stock == []
    assert len(result.heat_plans) == 1
    plan = result.heat_plans[0]
    assert (plan.grade, plan.width, plan.quantity, plan.heat_count) == ("A", 1000, 70, 2)
    assert plan.slab_count == ""


def test_aggregation_is_keyed_not_positional():
    orders = [
        order(grade="A", width=1000, quantity=40),
        order(grade="B", width=1250, quantity=10),  # served from stock
        order(grade="A", width=1000, quantity=30),
    ]
    result = allocate(orders, [stock("PB", grade="B", width=1250)], [])
    assert [e.material_id for e in result.available_stock] == ["PB"]
    assert [(p.grade, p.width, p.quantity) for p in result.heat_plans] == [("A", 1000, 70)]


def test_wip_fallback_when_stock_finish_differs():
    result = allocate([order(finish="2B")], [stock("P1", finish="2D")], [wip("C1")])
    assert [e.material_id for e in result.available_stock] == ["C1"]


def test_stock_preferred_over_wip():
    result = allocate([order()], [stock("P1")], [wip("C1")])
    assert [e.material_id for e in result.available_stock] == ["P1"]


def test_allocation_width_is_exact():
    # 1 mm off is enough to miss, unlike interactive search
    result = allocate([order(width=1000)], [stock("P1", width=1001)], [wip("C1", width=999)])
    assert result.available_stock == []
    assert len(result.heat_plans) == 1


def test_allocation_thickness_tolerance():
    result = allocate([order(thickness=2.0)], [stock("P1", thickness=2.005)], [])
    assert [e.material_id for e in result.available_stock] == ["P1"]
    result = allocate([order(thickness=2.0)], [stock("P1", thickness=2.05)], [])
    assert result.available_stock == []


def test_first_come_first_served_without_double_allocation():
    orders = [order(customer="c1"), order(customer="c2"), order(customer="c3"), order(customer="c4")]
    result = allocate(orders, [stock("P1"), stock("P2")], [wip("C1")])
    got = [(e.customer_name, e.material_id) for e in result.available_stock]
    assert got == [("c1", "P1"), ("c2", "P2"), ("c3", "C1")]
    ids = [e.material_id for e in result.available_stock]
    assert len(ids) == len(set(ids))
    assert [(p.grade, p.quantity) for p in result.heat_plans] == [("A", 50)]


def test_degenerate_orders_are_skipped():
    result = allocate([order(grade=""), order(quantity=0)], [stock("P1")], [])
    assert result.available_stock == []
    assert result.heat_plans == []


def test_heat_plans_sorted_by_grade_then_width():
    orders = [
        order(grade="B", width=1500),
        order(grade="A", width=1250),
        order(grade="B", width=900),
        order(grade="A", width=1000),
    ]
    result = allocate(orders, [], [])
    assert [(p.grade, p.width) for p in result.heat_plans] == [
        ("A", 1000), ("A", 1250), ("B", 900), ("B", 1500),
    ]


@pytest.mark.parametrize("qty,heats", [(1, 1), (59.5, 1), (60, 1), (61, 2), (120, 2), (121, 3), (0.2, 1)])
def test_heat_count(qty, heats):
    assert heat_count(qty) == heats


def test_quantity_is_accounted_for_exactly_once():
    orders = [
        order(grade=g, width=w, quantity=q)
        for g, w, q in [("A", 1000, 35), ("A", 1000, 80), ("B", 1000, 12), ("A", 1250, 64), ("B", 1000, 5)]
    ]
    stock_rows = [stock("P1", grade="A", width=1000), stock("P2", grade="B", width=1000)]
    result = allocate(orders, stock_rows, [])

    served = len(result.available_stock)
    assert served == 2
    unmet = sum(o.quantity for o in orders) - 35 - 12
    assert sum(p.quantity for p in result.heat_plans) == unmet
    for p in result.heat_plans:
        assert p.heat_count == max(1, math.ceil(p.quantity / 60))


def test_runs_are_isolated():
    orders = [order()]
    first = allocate(orders, [stock("P1")], [])
    second = allocate(orders, [stock("P1")], [])
    assert first.available_stock[0].material_id == "P1"
    assert second.available_stock[0].material_id == "P1"


def test_caller_owned_set_blocks_reuse():
    used = {"P1"}
    result = allocate([order()], [stock("P1"), stock("P2")], [], used_ids=used)
    assert result.available_stock[0].material_id == "P2"
    assert used == {"P1", "P2"}


def test_result_serializes_with_canonical_names():
    body = allocate([order(), order(grade="B")], [stock("P1")], []).model_dump(by_alias=True)
    assert body["availableStock"] == [{"Grade": "A", "Width": 1000, "MaterialId": "P1", "CustomerName": "ACME"}]
    assert body["heatPlans"] == [{"Grade": "B", "Width": 1000, "SlabCount": "", "Quantity": 50, "HeatCount": 1}]


def test_non_list_input_is_rejected():
    with pytest.raises(ValueError, match="orders must be a list"):
        allocate(None, [], [])
