# services/challan_service.py
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from html import escape
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from domain.models import CHALLAN_COPIES, DEFAULT_BUSINESS_NAME, Challan, ChallanRow, Order
from utils.formatting import format_challan_timestamp

logger = logging.getLogger(__name__)

SELECTION_REQUIRED_MSG = "Please select a challan type and at least one order."

SIGNATURE_LABELS = ("Delivery Boy Signature", "End Party Signature")

CHALLAN_CSS = """
@page { size: A4; margin: 0; }
body { font-family: Arial, sans-serif; margin: 0; padding: 20px; box-sizing: border-box; }
.challan { page-break-after: always; }
.header { display: flex; justify-content: space-between; align-items: center; margin-bottom: 20px; }
h1, h2 { margin: 0; }
table { width: 100%; border-collapse: collapse; margin-bottom: 20px; }
th, td { border: 1px solid #ddd; padding: 8px; text-align: left; }
th { background-color: #f2f2f2; }
.signature { display: flex; justify-content: space-between; margin-top: 50px; }
.signature div { width: 200px; border-top: 1px solid black; padding-top: 10px; text-align: center; }
"""


@dataclass
class ChallanSelection:
    """
    Working selection of the challan page. Cleared after each generated batch.
    """
    challan_type: str = ""
    order_ids: List[str] = field(default_factory=list)
    photos_delivered: Dict[str, int] = field(default_factory=dict)

    def add_order(self, order_id: str) -> None:
        if order_id not in self.order_ids:
            self.order_ids.append(order_id)

    def remove_order(self, order_id: str) -> None:
        self.order_ids = [oid for oid in self.order_ids if oid != order_id]
        self.photos_delivered.pop(order_id, None)

    def set_photos_delivered(self, order_id: str, count: int) -> None:
        self.photos_delivered[order_id] = int(count)

    def clear(self) -> None:
        self.challan_type = ""
        self.order_ids = []
        self.photos_delivered = {}


def validate_selection(challan_type: str, order_ids: Iterable[str]) -> Tuple[bool, str]:
    if not (challan_type or "").strip() or not list(order_ids):
        return False, SELECTION_REQUIRED_MSG
    return True, ""


def build_challan(
        challan_type: str,
        order_ids: Iterable[str],
        orders: Iterable[Order],
        photos_delivered: Optional[Dict[str, int]] = None,
        *,
        business_name: str = DEFAULT_BUSINESS_NAME,
        generated_at: Optional[datetime] = None,
) -> Challan:
    """
    Resolve the selected ids against the loaded orders, one row per order.
    Ids that no longer resolve are left out of the batch.
    """
    photos_delivered = photos_delivered or {}
    by_id = {o.id: o for o in orders}
    generated_at = generated_at or datetime.now(timezone.utc)

    rows: List[ChallanRow] = []
    for order_id in order_ids:
        order = by_id.get(order_id)
        if order is None:
            logger.warning("Order %s not found, left out of %s challan", order_id, challan_type)
            continue

        photos = None
        if challan_type == "photos":
            photos = int(photos_delivered.get(order_id) or 0)

        rows.append(
            ChallanRow(
                order_id=order.id,
                client=order.client,
                manufacturer=order.manufacturer,
                product=order.product,
                quantity=order.quantity,
                photos_delivered=photos,
            )
        )

    return Challan(
        challan_type=challan_type,
        business_name=business_name,
        generated_at=generated_at.isoformat(),
        rows=rows,
        copies=CHALLAN_COPIES,
    )


def render_challan_html(challan: Challan, auto_print: bool = True) -> str:
    date_display = format_challan_timestamp(challan.generated_at)

    header_cells = "".join(f"<th>{escape(h)}</th>" for h in challan.headers)
    body_rows = "".join(
        "<tr>" + "".join(f"<td>{escape(cell)}</td>" for cell in cells) + "</tr>"
        for cells in challan.table_rows()
    )
    signatures = "".join(f"<div>{escape(label)}</div>" for label in SIGNATURE_LABELS)

    copies = []
    for party in challan.copies:
        copies.append(
            '<div class="challan">'
            '<div class="header">'
            f"<h1>{escape(challan.business_name)}</h1>"
            f"<h2>Challan - {escape(challan.title)} ({escape(party)} Copy)</h2>"
            "</div>"
            f"<p>Date: {escape(date_display)}</p>"
            f"<table><tr>{header_cells}</tr>{body_rows}</table>"
            f'<div class="signature">{signatures}</div>'
            "</div>"
        )

    script = "<script>window.print();</script>" if auto_print else ""

    return (
        "<html><head>"
        f"<title>Challan - {escape(challan.title)}</title>"
        f"<style>{CHALLAN_CSS}</style>"
        "</head><body>"
        + "".join(copies)
        + script
        + "</body></html>"
    )


def generate_challan(
        selection: ChallanSelection,
        orders: Iterable[Order],
        printer: Callable[[str], None],
        *,
        business_name: str = DEFAULT_BUSINESS_NAME,
        generated_at: Optional[datetime] = None,
) -> Tuple[bool, str, Optional[Challan]]:
    """
    Build the challan for `selection`, hand its HTML to `printer` and clear
    the selection.

    Returns (ok, message, challan). On a validation error nothing is built
    and `printer` is not called.
    """
    ok, msg = validate_selection(selection.challan_type, selection.order_ids)
    if not ok:
        return False, msg, None

    challan = build_challan(
        selection.challan_type,
        selection.order_ids,
        orders,
        selection.photos_delivered,
        business_name=business_name,
        generated_at=generated_at,
    )

    try:
        printer(render_challan_html(challan, auto_print=True))
    except Exception as e:
        logger.error("Printing %s challan failed: %s", selection.challan_type, e)
        return False, f"Could not print challan: {e}", challan

    message = f"{selection.challan_type} challan generated for {len(selection.order_ids)} orders."
    logger.info("Generated %s challan with %d rows", selection.challan_type, len(challan.rows))
    selection.clear()
    return True, message, challan
