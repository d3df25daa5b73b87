"""
Tabular PDF reports (sales, orders, invoices, quotes, payments, finance,
employees, users).

Every report has the same layout: a title, a block of summary lines, then one
table row per record under a header row that is repeated on each new page.
Rows are fully materialized by the caller; the whole document is rendered to
bytes before any response is built, so a rendering failure never leaves a
half-written download behind.
"""

from datetime import date
from io import BytesIO
from typing import Iterable, List, Sequence, Tuple

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

# Column = (header, max characters). Widths are proportional to max characters.
Column = Tuple[str, int]

PAGE_MARGIN = 15 * mm


def _cell(value, max_chars: int) -> str:
    if value is None:
        return ""
    text = str(value)
    if len(text) > max_chars:
        return text[: max_chars - 1] + "…"
    return text


def money(value) -> str:
    return f"${float(value or 0):,.2f}"


def render_table_report(
    title: str,
    summary_lines: Iterable[str],
    columns: Sequence[Column],
    rows: Iterable[Sequence],
) -> bytes:
    """Render a titled table report and return the PDF bytes."""
    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=letter,
        leftMargin=PAGE_MARGIN,
        rightMargin=PAGE_MARGIN,
        topMargin=PAGE_MARGIN,
        bottomMargin=PAGE_MARGIN,
        title=title,
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        name="ReportTitle",
        parent=styles["Heading1"],
        fontSize=20,
        spaceAfter=10,
    )
    summary_style = ParagraphStyle(
        name="ReportSummary",
        parent=styles["Normal"],
        fontSize=11,
        spaceAfter=3,
    )

    flow = [Paragraph(title, title_style)]
    for line in summary_lines:
        flow.append(Paragraph(line, summary_style))
    flow.append(Paragraph(f"Report Generated: {date.today().isoformat()}", summary_style))
    flow.append(Spacer(1, 6 * mm))

    # ----- Table -----
    total_chars = sum(max_chars for _, max_chars in columns) or 1
    usable = doc.width
    col_widths = [usable * max_chars / total_chars for _, max_chars in columns]

    data: List[List[str]] = [[header for header, _ in columns]]
    for row in rows:
        data.append([_cell(value, max_chars) for value, (_, max_chars) in zip(row, columns)])

    if len(data) == 1:
        data.append(["No records"] + [""] * (len(columns) - 1))

    table = Table(data, colWidths=col_widths, repeatRows=1)
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("LINEBELOW", (0, 0), (-1, 0), 1, colors.black),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
    ]))
    flow.append(table)

    doc.build(flow)
    return buf.getvalue()


def pdf_headers(filename: str) -> dict:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}
