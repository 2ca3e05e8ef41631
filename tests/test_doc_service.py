# tests/test_doc_service.py
"""Word rendering of challans."""

import io
from datetime import datetime, timezone

from docx import Document

from domain.models import Challan, ChallanRow
from services.doc_service import build_challan_docx


def _challan(challan_type="photos"):
    photos = 7 if challan_type == "photos" else None
    return Challan(
        challan_type=challan_type,
        business_name="PATEL OFFSET",
        generated_at=datetime(2026, 10, 16, 14, 30, tzinfo=timezone.utc).isoformat(),
        rows=[
            ChallanRow("ORD001", "Acme", "M1", "Sarees", 50, photos),
            ChallanRow("ORD002", "Globex", "M2", "Sarees", 20, 0 if photos is not None else None),
        ],
    )


def _load(data):
    return Document(io.BytesIO(data))


def test_two_copies_each_with_table_and_signatures():
    doc = _load(build_challan_docx(_challan()))

    # order table + signature table per copy
    assert len(doc.tables) == 4
    headings = [p.text for p in doc.paragraphs if p.style.name.startswith("Heading")]
    assert headings == [
        "PATEL OFFSET",
        "Challan - Photos Delivered (Delivery Man Copy)",
        "PATEL OFFSET",
        "Challan - Photos Delivered (End Party Copy)",
    ]


def test_order_table_contents():
    doc = _load(build_challan_docx(_challan()))
    table = doc.tables[0]

    assert [c.text for c in table.rows[0].cells] == [
        "Order ID", "Client", "Manufacturer", "Product", "Quantity", "Photos Delivered",
    ]
    assert [c.text for c in table.rows[1].cells] == ["ORD001", "Acme", "M1", "Sarees", "50", "7"]
    assert len(table.rows) == 3


def test_signature_labels():
    doc = _load(build_challan_docx(_challan("receiving")))
    signature = doc.tables[1]

    assert [c.text for c in signature.rows[1].cells] == ["Delivery Boy Signature", "End Party Signature"]
    assert len(doc.tables[0].columns) == 5


def test_date_line():
    doc = _load(build_challan_docx(_challan()))
    assert "Date: Oct 16, 2026, 2:30:00 PM" in [p.text for p in doc.paragraphs]
