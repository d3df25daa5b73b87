# erp_api/routers/invoices.py

from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from erp_api.core.enum_mapper import EnumMapper, get_enum_mapper
from erp_api.core.rate_limiter import limiter
from erp_api.database import get_db
from erp_api.schemas.invoice import InvoiceCreate, InvoiceResponse
from erp_api.services.aggregates import invoice_writer, items_total
from erp_api.services.pdf_report import money, pdf_headers, render_table_report

router = APIRouter(prefix="/invoices", tags=["Invoices"])


# =========================================================
# PDF REPORT
# =========================================================
@router.get("/download/pdf")
@limiter.limit("10/minute")
def download_invoices_pdf(
    request: Request,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    invoices = invoice_writer.list_documents(db)
    totals = {inv.id: items_total(inv.items) for inv in invoices}
    counts = invoice_writer.status_counts(db)

    breakdown = "  ".join(
        f"{label.title()}: {counts.get(code, 0)}"
        for label, code in zip(mapper.labels("invoice_status"), mapper.codes("invoice_status"))
    )

    summary = [
        f"Total Invoices: {len(invoices)}",
        f"Total Amount: {money(sum(totals.values(), Decimal('0')))}",
        f"Status Breakdown: {breakdown}",
    ]

    rows = [
        (
            inv.id,
            inv.number,
            inv.customer.name if inv.customer else inv.customer_id,
            mapper.to_label("invoice_status", inv.status),
            inv.expire_date.isoformat(),
            money(totals[inv.id]),
        )
        for inv in invoices
    ]

    pdf = render_table_report(
        "Invoices Report",
        summary,
        [("ID", 6), ("Number", 12), ("Customer", 18), ("Status", 14), ("Due Date", 12), ("Amount", 14)],
        rows,
    )
    return Response(pdf, media_type="application/pdf", headers=pdf_headers("invoices-report.pdf"))


# =========================================================
# CRUD
# =========================================================
@router.get("", response_model=list[InvoiceResponse])
def list_invoices(
    search: str | None = Query(None),
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    return [invoice_writer.to_response(inv, mapper) for inv in invoice_writer.list_documents(db, search)]


@router.get("/{invoice_id}", response_model=InvoiceResponse)
def get_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    return invoice_writer.to_response(invoice_writer.get_or_404(db, invoice_id), mapper)


@router.post("", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
def create_invoice(
    invoice_data: InvoiceCreate,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    invoice = invoice_writer.create(db, mapper, invoice_data)
    return invoice_writer.to_response(invoice, mapper)


@router.put("/{invoice_id}", response_model=InvoiceResponse)
def update_invoice(
    invoice_id: int,
    invoice_data: InvoiceCreate,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    invoice = invoice_writer.update(db, mapper, invoice_id, invoice_data)
    return invoice_writer.to_response(invoice, mapper)


@router.delete("/{invoice_id}")
def delete_invoice(invoice_id: int, db: Session = Depends(get_db)):
    invoice_writer.delete(db, invoice_id)
    return {"message": "Invoice deleted successfully"}
