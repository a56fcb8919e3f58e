import pytest

from heat_planner.schemas import OrderRecord, SearchQuery, StockRecord, WipRecord


def order(grade="A", width=1000, thickness=2.0, finish="", quantity=50, customer="ACME"):
    return OrderRecord(
        grade=grade, width=width, thickness=thickness, finish=finish, quantity=quantity, customer=customer
    )


def stock(pkt, grade="A", width=1000, thickness=2.0, finish="", **extra):
    return StockRecord(grade=grade, width=width, thickness=thickness, finish=finish, packet_id=pkt, **extra)


def wip(coil, grade="A", width=1000, thickness=2.0, **extra):
    return WipRecord(grade=grade, width=width, thickness=thickness, coil_id=coil, **extra)


@pytest.fixture
def query():
    return SearchQuery(grade="A", width=1000, thickness=2.0, finish="2D")
