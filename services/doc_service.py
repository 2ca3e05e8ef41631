import io

from docx import Document
from docx.shared import Pt

from domain.models import Challan
from services.challan_service import SIGNATURE_LABELS
from utils.docx_helpers import add_table, add_signature_block
from utils.formatting import format_challan_timestamp


def build_challan_docx(challan: Challan) -> bytes:
    """
    Render a challan as a Word document, one page per recipient copy:

      1. business name heading
      2. "Challan - <type> (<party> Copy)" sub heading and date line
      3. order table (with "Photos Delivered" for photo challans)
      4. signature block for both parties

    Returns:
        the .docx file content
    """
    doc = Document()
    date_display = format_challan_timestamp(challan.generated_at)

    for i, party in enumerate(challan.copies):
        if i > 0:
            doc.add_page_break()

        doc.add_heading(challan.business_name, level=1)
        doc.add_heading(f"Challan - {challan.title} ({party} Copy)", level=2)

        date_par = doc.add_paragraph()
        date_run = date_par.add_run(f"Date: {date_display}")
        date_run.font.size = Pt(10)

        add_table(doc, challan.headers, challan.table_rows())
        doc.add_paragraph()
        add_signature_block(doc, SIGNATURE_LABELS)

    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()
