# erp_api/routers/quotes.py

from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from erp_api.core.enum_mapper import EnumMapper, get_enum_mapper
from erp_api.core.rate_limiter import limiter
from erp_api.database import get_db
from erp_api.schemas.quote import QuoteCreate, QuoteResponse
from erp_api.services.aggregates import items_total, quote_writer
from erp_api.services.pdf_report import money, pdf_headers, render_table_report

router = APIRouter(prefix="/quotes", tags=["Quotes"])


@router.get("/download/pdf")
@limiter.limit("10/minute")
def download_quotes_pdf(
    request: Request,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    quotes = quote_writer.list_documents(db)
    totals = {q.id: items_total(q.items) for q in quotes}
    counts = quote_writer.status_counts(db)

    summary = [
        f"Total Quotes: {len(quotes)}",
        f"Total Value: {money(sum(totals.values(), Decimal('0')))}",
        f"Accepted: {counts.get('ACCEPTED', 0)}  "
        f"Sent: {counts.get('SENT', 0)}  "
        f"Declined: {counts.get('DECLINED', 0)}",
    ]

    rows = [
        (
            q.number,
            q.customer.name if q.customer else q.customer_id,
            mapper.to_label("quote_status", q.status),
            q.expire_date.isoformat(),
            len(q.items),
            money(totals[q.id]),
        )
        for q in quotes
    ]

    pdf = render_table_report(
        "Quotes Report",
        summary,
        [("Quote", 12), ("Customer", 18), ("Status", 10), ("Valid Until", 12), ("Items", 6), ("Total", 14)],
        rows,
    )
    return Response(pdf, media_type="application/pdf", headers=pdf_headers("quotes-report.pdf"))


@router.get("", response_model=list[QuoteResponse])
def list_quotes(
    search: str | None = Query(None),
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    return [quote_writer.to_response(q, mapper) for q in quote_writer.list_documents(db, search)]


@router.get("/{quote_id}", response_model=QuoteResponse)
def get_quote(
    quote_id: int,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    return quote_writer.to_response(quote_writer.get_or_404(db, quote_id), mapper)


@router.post("", response_model=QuoteResponse, status_code=status.HTTP_201_CREATED)
def create_quote(
    quote_data: QuoteCreate,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    quote = quote_writer.create(db, mapper, quote_data)
    return quote_writer.to_response(quote, mapper)


@router.put("/{quote_id}", response_model=QuoteResponse)
def update_quote(
    quote_id: int,
    quote_data: QuoteCreate,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    quote = quote_writer.update(db, mapper, quote_id, quote_data)
    return quote_writer.to_response(quote, mapper)


@router.delete("/{quote_id}")
def delete_quote(quote_id: int, db: Session = Depends(get_db)):
    quote_writer.delete(db, quote_id)
    return {"message": "Quote deleted successfully"}
