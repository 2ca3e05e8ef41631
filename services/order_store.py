# services/order_store.py
import logging
import re
from collections import Counter
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from domain.models import (
    DEFAULT_PRODUCT,
    INITIAL_STATUS,
    ORDER_STATUSES,
    TERMINAL_STATUS,
    Order,
    OrderSummary,
    TimelineEntry,
)

logger = logging.getLogger(__name__)

ORDER_ID_PREFIX = "ORD"
ORDER_ID_WIDTH = 3
_ORDER_ID_RE = re.compile(rf"^{ORDER_ID_PREFIX}(\d+)$")

EDITABLE_FIELDS = ("client", "manufacturer", "product", "quantity", "status", "timeline")
IMMUTABLE_FIELDS = ("id", "date")

Result = Tuple[bool, str, Optional[Order]]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _order_seq(order_id: str) -> int:
    match = _ORDER_ID_RE.match(order_id or "")
    return int(match.group(1)) if match else 0


class OrderStore:
    """
    Owns the in-memory working set of orders and every mutation on it.

    Each mutation does exactly one round trip to `collection`; the working
    set is only touched after that round trip succeeds. `collection` must
    offer list_all() / insert(row) / update(order_id, row) / delete(order_id),
    each returning (ok, message, data).
    """

    def __init__(
            self,
            collection,
            *,
            default_product: str = DEFAULT_PRODUCT,
            clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._collection = collection
        self._orders: List[Order] = []
        self._last_seq = 0
        self.default_product = default_product
        self.clock = clock
        self.loaded = False

    # ---------- loading ----------

    def load(self) -> Tuple[bool, str, List[Order]]:
        """
        Load the whole collection once. Later calls are served from memory;
        use reload() to pick up writes made by other sessions.
        """
        if self.loaded:
            return True, "Already loaded", self.list_orders()
        return self.reload()

    def reload(self) -> Tuple[bool, str, List[Order]]:
        ok, msg, rows = self._collection.list_all()
        if not ok:
            logger.error("Could not load orders: %s", msg)
            return False, msg, self.list_orders()

        orders: List[Order] = []
        for row in rows:
            try:
                orders.append(Order.from_row(row))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed order row %r: %s", row.get("id"), e)

        self._orders = orders
        self._last_seq = max([self._last_seq] + [_order_seq(o.id) for o in orders])
        self.loaded = True
        logger.info("Loaded %d orders", len(orders))
        return True, f"Loaded {len(orders)} orders", self.list_orders()

    # ---------- reads ----------

    def list_orders(self) -> List[Order]:
        return list(self._orders)

    def get_order(self, order_id: str) -> Optional[Order]:
        return next((o for o in self._orders if o.id == order_id), None)

    def known_clients(self) -> List[str]:
        return sorted({o.client for o in self._orders if o.client})

    def known_manufacturers(self) -> List[str]:
        return sorted({o.manufacturer for o in self._orders if o.manufacturer})

    def next_order_id(self) -> str:
        """
        Next id in the ORD001 series: one past the highest number loaded or
        issued in this session, so a deleted order's id is never handed out again.
        """
        seq = max([self._last_seq] + [_order_seq(o.id) for o in self._orders]) + 1
        return f"{ORDER_ID_PREFIX}{seq:0{ORDER_ID_WIDTH}d}"

    # ---------- mutations ----------

    def create_order(self, client: str, manufacturer: str, quantity: int) -> Result:
        try:
            quantity = int(quantity)
        except (TypeError, ValueError):
            return False, f"Invalid quantity: {quantity!r}", None

        now = self.clock()
        order_id = self.next_order_id()
        order = Order(
            id=order_id,
            client=client,
            manufacturer=manufacturer,
            product=self.default_product,
            quantity=quantity,
            status=INITIAL_STATUS,
            date=now.date().isoformat(),
            timeline=[TimelineEntry(status=INITIAL_STATUS, timestamp=now.isoformat())],
        )

        ok, msg, _ = self._collection.insert(order.to_row())
        if not ok:
            logger.error("Error adding order %s: %s", order_id, msg)
            return False, f"Could not add order {order_id}: {msg}", None

        self._last_seq = max(self._last_seq, _order_seq(order_id))
        self._orders.insert(0, order)
        logger.info("Created order %s for %s", order_id, client)
        return True, f"New order {order_id} has been added successfully.", order

    def update_status(self, order_id: str, new_status: str) -> Result:
        """
        Set any stage, forward or backward, and record it on the timeline.
        """
        if new_status not in ORDER_STATUSES:
            return False, f"Unknown status: {new_status!r}", None

        order = self.get_order(order_id)
        if order is None:
            return True, f"Order {order_id} not found.", None

        timestamp = self.clock().isoformat()
        updated = replace(
            order,
            status=new_status,
            timeline=order.timeline + [TimelineEntry(status=new_status, timestamp=timestamp)],
        )

        ok, msg = self._persist(updated)
        if not ok:
            return False, f"Could not update order {order_id}: {msg}", order

        return True, f"Order {order_id} status updated to {new_status}.", updated

    def advance_status(self, order_id: str) -> Result:
        order = self.get_order(order_id)
        if order is None:
            return True, f"Order {order_id} not found.", None

        if order.status == TERMINAL_STATUS:
            return True, f"Order {order_id} is already at {TERMINAL_STATUS}.", order

        next_status = order.next_status
        if next_status is None:
            logger.warning("Order %s has unknown status %r", order_id, order.status)
            return False, f"Order {order_id} has unknown status {order.status!r}.", order

        return self.update_status(order_id, next_status)

    def revert_status(self, order_id: str) -> Result:
        """
        Undo the latest transition by dropping the last timeline entry.
        """
        order = self.get_order(order_id)
        if order is None:
            return True, f"Order {order_id} not found.", None

        if not order.can_revert:
            return True, f"Order {order_id} has no status change to undo.", order

        timeline = order.timeline[:-1]
        updated = replace(order, status=timeline[-1].status, timeline=timeline)

        ok, msg = self._persist(updated)
        if not ok:
            return False, f"Could not revert order {order_id}: {msg}", order

        return True, f"Order {order_id} status reverted to {updated.status}.", updated

    def edit_order(self, order_id: str, changes: Dict[str, Any]) -> Result:
        order = self.get_order(order_id)
        if order is None:
            return True, f"Order {order_id} not found.", None

        overrides: Dict[str, Any] = {}
        for key, value in changes.items():
            if key in IMMUTABLE_FIELDS:
                if value != getattr(order, key):
                    logger.warning("Ignoring change to immutable field %s of order %s", key, order_id)
                continue
            if key not in EDITABLE_FIELDS:
                logger.warning("Ignoring unknown field %s for order %s", key, order_id)
                continue
            overrides[key] = value

        try:
            if "quantity" in overrides:
                overrides["quantity"] = int(overrides["quantity"])
            if "timeline" in overrides:
                overrides["timeline"] = _coerce_timeline(overrides["timeline"])
        except (KeyError, TypeError, ValueError) as e:
            return False, f"Invalid changes for order {order_id}: {e}", order

        updated = replace(order, **overrides)
        if updated.status not in ORDER_STATUSES or not updated.has_consistent_timeline():
            return False, f"Order {order_id}: status and timeline do not match.", order

        ok, msg = self._persist(updated)
        if not ok:
            return False, f"Could not update order {order_id}: {msg}", order

        return True, f"Order {order_id} has been updated.", updated

    def delete_order(self, order_id: str) -> Result:
        # the delete is always sent, even for ids we no longer hold
        ok, msg, _ = self._collection.delete(order_id)
        if not ok:
            logger.error("Error deleting order %s: %s", order_id, msg)
            return False, f"Could not delete order {order_id}: {msg}", None

        order = self.get_order(order_id)
        self._orders = [o for o in self._orders if o.id != order_id]
        logger.info("Deleted order %s", order_id)
        return True, f"Order {order_id} has been deleted.", order

    def _persist(self, updated: Order) -> Tuple[bool, str]:
        ok, msg, _ = self._collection.update(updated.id, updated.to_row())
        if not ok:
            logger.error("Error updating order %s: %s", updated.id, msg)
            return False, msg

        self._orders = [updated if o.id == updated.id else o for o in self._orders]
        return True, msg


def _coerce_timeline(entries: Iterable[Any]) -> List[TimelineEntry]:
    timeline = []
    for entry in entries:
        if isinstance(entry, TimelineEntry):
            timeline.append(entry)
        else:
            timeline.append(TimelineEntry(status=entry["status"], timestamp=entry["timestamp"]))
    return timeline


def search_orders(orders: Iterable[Order], term: str) -> List[Order]:
    """
    Case-insensitive substring match over id, client, manufacturer and date.
    """
    needle = (term or "").lower()
    if not needle:
        return list(orders)

    return [
        o for o in orders
        if needle in o.id.lower()
        or needle in o.client.lower()
        or needle in o.manufacturer.lower()
        or needle in o.date.lower()
    ]


def summarize_orders(orders: Iterable[Order]) -> OrderSummary:
    orders = list(orders)
    counts = Counter(o.status for o in orders)

    # stages in pipeline order first, then anything unexpected
    status_counts = {s: counts[s] for s in ORDER_STATUSES if counts[s]}
    for status, n in counts.items():
        status_counts.setdefault(status, n)

    return OrderSummary(
        total=len(orders),
        active=sum(1 for o in orders if o.status != TERMINAL_STATUS),
        status_counts=status_counts,
    )
