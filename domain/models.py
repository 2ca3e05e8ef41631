# domain/models.py

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

ORDER_STATUSES = (
    "Order Received",
    "Retrieved from Manufacturer",
    "At Photography Studio",
    "Collected from Studio",
    "Returned to Manufacturer",
    "Pre Printing",
    "Printing",
    "Post Printing",
    "Photos Delivered",
)

INITIAL_STATUS = ORDER_STATUSES[0]
TERMINAL_STATUS = ORDER_STATUSES[-1]

DEFAULT_PRODUCT = "Sarees"
DEFAULT_BUSINESS_NAME = "PATEL OFFSET"

CHALLAN_TYPES = {
    "receiving": "Receiving from Manufacturer",
    "delivering": "Delivering to Manufacturer",
    "photos": "Photos Delivered",
}

# one printed copy per recipient, in this order
CHALLAN_COPIES = ("Delivery Man", "End Party")


@dataclass
class TimelineEntry:
    status: str
    timestamp: str  # ISO-8601, UTC

    def to_dict(self) -> Dict[str, str]:
        return {"status": self.status, "timestamp": self.timestamp}


@dataclass
class Order:
    """
    One tracked order, mirrored 1:1 with a row of the orders table.
    The last timeline entry always carries the current status.
    """
    id: str
    client: str
    manufacturer: str
    product: str
    quantity: int
    status: str
    date: str  # ISO date the order was created
    timeline: List[TimelineEntry] = field(default_factory=list)

    @property
    def stage_index(self) -> int:
        """0-based position of the status in ORDER_STATUSES, -1 if unknown."""
        try:
            return ORDER_STATUSES.index(self.status)
        except ValueError:
            return -1

    @property
    def is_delivered(self) -> bool:
        return self.status == TERMINAL_STATUS

    @property
    def next_status(self) -> Optional[str]:
        idx = self.stage_index
        if idx < 0 or idx >= len(ORDER_STATUSES) - 1:
            return None
        return ORDER_STATUSES[idx + 1]

    @property
    def can_advance(self) -> bool:
        return self.next_status is not None

    @property
    def can_revert(self) -> bool:
        return len(self.timeline) > 1

    def has_consistent_timeline(self) -> bool:
        return bool(self.timeline) and self.timeline[-1].status == self.status

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Order":
        raw_timeline = row.get("timeline") or []
        if isinstance(raw_timeline, str):
            raw_timeline = json.loads(raw_timeline) or []

        timeline = [
            TimelineEntry(status=entry["status"], timestamp=entry["timestamp"])
            for entry in raw_timeline
        ]

        status = row.get("status") or INITIAL_STATUS
        date = str(row.get("date") or "")

        # rows written outside the app may have no history
        if not timeline:
            timeline = [TimelineEntry(status=status, timestamp=date)]

        return cls(
            id=str(row["id"]),
            client=row.get("client") or "",
            manufacturer=row.get("manufacturer") or "",
            product=row.get("product") or DEFAULT_PRODUCT,
            quantity=int(row.get("quantity") or 0),
            status=status,
            date=date,
            timeline=timeline,
        )

    def to_row(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "client": self.client,
            "manufacturer": self.manufacturer,
            "product": self.product,
            "quantity": self.quantity,
            "status": self.status,
            "date": self.date,
            "timeline": [entry.to_dict() for entry in self.timeline],
        }


@dataclass
class OrderSummary:
    total: int
    active: int  # not yet at TERMINAL_STATUS
    status_counts: Dict[str, int]


@dataclass
class ChallanRow:
    """
    Represents one order line in a challan table.
    """
    order_id: str
    client: str
    manufacturer: str
    product: str
    quantity: int
    photos_delivered: Optional[int] = None  # only set for "photos" challans


@dataclass
class Challan:
    """
    A complete challan batch. Printed once per entry of `copies`.
    """
    challan_type: str
    business_name: str
    generated_at: str  # ISO-8601
    rows: List[ChallanRow]
    copies: Tuple[str, ...] = CHALLAN_COPIES

    @property
    def title(self) -> str:
        return CHALLAN_TYPES.get(self.challan_type, self.challan_type)

    @property
    def shows_photos(self) -> bool:
        return self.challan_type == "photos"

    @property
    def headers(self) -> List[str]:
        headers = ["Order ID", "Client", "Manufacturer", "Product", "Quantity"]
        if self.shows_photos:
            headers.append("Photos Delivered")
        return headers

    def table_rows(self) -> List[List[str]]:
        result = []
        for row in self.rows:
            cells = [row.order_id, row.client, row.manufacturer, row.product, str(row.quantity)]
            if self.shows_photos:
                cells.append(str(row.photos_delivered or 0))
            result.append(cells)
        return result
