import argparse
import json
import sys
from pathlib import Path

from .allocation.allocator import allocate
from .export.report import export_excel, summary
from .ingest.columns import normalize_orders, normalize_stock, normalize_wip
from .logs import configure_logging
from .matching.search import search
from .schemas import SearchQuery


def _read_rows(path: str) -> list:
    with open(path, "r", encoding="utf-8") as f:
        rows = json.load(f)
    if not isinstance(rows, list):
        raise ValueError(f"{path}: expected a JSON array of rows")
    return rows


def _cmd_allocate(args) -> int:
    orders = normalize_orders(_read_rows(args.orders), require=args.strict)
    stock = normalize_stock(_read_rows(args.stock), require=args.strict)
    wip = normalize_wip(_read_rows(args.wip), require=args.strict)
    result = allocate(orders, stock, wip)
    kpi = summary(result)
    print(
        f"Allocated: available={kpi['available_rows']} heat_plans={kpi['heat_plan_rows']} "
        f"unmet_qty={kpi['unmet_quantity']:g} heats={kpi['total_heats']}",
        file=sys.stderr,
    )
    if args.out:
        out = export_excel(result, Path(args.out))
        print(f"Exported: {out}", file=sys.stderr)
    else:
        print(json.dumps(result.model_dump(by_alias=True), indent=2))
    return 0


def _cmd_search(args) -> int:
    query = SearchQuery(grade=args.grade, width=args.width, thickness=args.thickness, finish=args.finish)
    stock = normalize_stock(_read_rows(args.stock))
    wip = normalize_wip(_read_rows(args.wip))
    print(json.dumps(search(query, stock, wip).model_dump(by_alias=True), indent=2, default=str))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="heat-planner", description="Heat Planner CLI")
    sub = parser.add_subparsers(dest="cmd", required=True)

    alloc_p = sub.add_parser("allocate", help="Orders -> stock/WIP allocation -> heat plans")
    alloc_p.add_argument("--orders", required=True, help="JSON array of order rows")
    alloc_p.add_argument("--stock", required=True, help="JSON array of stock rows")
    alloc_p.add_argument("--wip", required=True, help="JSON array of WIP rows")
    alloc_p.add_argument("--out", default=None, help="write an .xlsx report instead of printing JSON")
    alloc_p.add_argument("--strict", action="store_true", help="fail on unmappable required columns")
    alloc_p.set_defaults(func=_cmd_allocate)

    search_p = sub.add_parser("search", help="Tiered stock/WIP search for one query")
    search_p.add_argument("--grade", required=True)
    search_p.add_argument("--width", required=True, type=float)
    search_p.add_argument("--thickness", required=True, type=float)
    search_p.add_argument("--finish", default="")
    search_p.add_argument("--stock", required=True, help="JSON array of stock rows")
    search_p.add_argument("--wip", required=True, help="JSON array of WIP rows")
    search_p.set_defaults(func=_cmd_search)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()
    try:
        return args.func(args)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
