# tests/conftest.py
import copy
from datetime import datetime, timedelta, timezone

import pytest

from services.order_store import OrderStore


class FakeOrderCollection:
    """In-memory stand-in for SupabaseOrderCollection."""

    def __init__(self, rows=None):
        self.rows = {row["id"]: copy.deepcopy(row) for row in (rows or [])}
        self.calls = []
        self.fail = False

    def _result(self, name, *args):
        self.calls.append((name,) + args)
        if self.fail:
            return False, f"{name} failed: connection reset"
        return True, "OK"

    def list_all(self):
        ok, msg = self._result("list_all")
        return ok, msg, [copy.deepcopy(r) for r in self.rows.values()] if ok else []

    def insert(self, row):
        ok, msg = self._result("insert", row["id"])
        if ok:
            self.rows[row["id"]] = copy.deepcopy(row)
        return ok, msg, row if ok else None

    def update(self, order_id, row):
        ok, msg = self._result("update", order_id)
        if ok and order_id in self.rows:
            self.rows[order_id].update(copy.deepcopy(row))
        return ok, msg, row if ok else None

    def delete(self, order_id):
        ok, msg = self._result("delete", order_id)
        if ok:
            self.rows.pop(order_id, None)
        return ok, msg, None


class StepClock:
    """Returns a new UTC time one minute later on every call."""

    def __init__(self, start=datetime(2026, 10, 16, 9, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self):
        now = self.current
        self.current = now + timedelta(minutes=1)
        return now


def make_row(order_id, status="Order Received", history=None, **fields):
    history = history or [status]
    status = history[-1]
    row = {
        "id": order_id,
        "client": "Acme",
        "manufacturer": "M1",
        "product": "Sarees",
        "quantity": 50,
        "status": status,
        "date": "2026-10-01",
        "timeline": [
            {"status": s, "timestamp": f"2026-10-01T10:{i:02d}:00+00:00"}
            for i, s in enumerate(history)
        ],
    }
    row.update(fields)
    return row


@pytest.fixture
def collection():
    return FakeOrderCollection()


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def store(collection, clock):
    store = OrderStore(collection, clock=clock)
    store.load()
    return store


@pytest.fixture
def make_store(clock):
    def _make(rows):
        coll = FakeOrderCollection(rows)
        s = OrderStore(coll, clock=clock)
        s.load()
        return s, coll

    return _make
