from typing import List, Sequence

from docx.document import Document
from docx.table import Table


def add_table(doc: Document, headers: Sequence[str], rows: List[Sequence[str]]) -> Table:
    """
    Append a bordered table with a bold header row to a python-docx Document.
    """
    table = doc.add_table(rows=1, cols=len(headers))
    table.style = "Table Grid"

    header_cells = table.rows[0].cells
    for cell, text in zip(header_cells, headers):
        cell.text = ""
        run = cell.paragraphs[0].add_run(text)
        run.bold = True

    for values in rows:
        cells = table.add_row().cells
        for cell, text in zip(cells, values):
            cell.text = str(text)

    return table


def add_signature_block(doc: Document, labels: Sequence[str]) -> Table:
    """
    One borderless row with a signature line above each label.
    """
    table = doc.add_table(rows=2, cols=len(labels))
    for i, label in enumerate(labels):
        table.rows[0].cells[i].text = "\n\n________________________"
        table.rows[1].cells[i].text = label
    return table
