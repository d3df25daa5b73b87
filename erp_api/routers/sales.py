# =========================================================
# SALES ROUTER
#
# Every write goes through the sale writer so stock stays
# consistent with the recorded sales.
# =========================================================

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from erp_api.core.enum_mapper import EnumMapper, get_enum_mapper
from erp_api.core.rate_limiter import limiter
from erp_api.database import get_db
from erp_api.models.customers import Customer
from erp_api.models.sales import Sale
from erp_api.schemas.sale import SaleCreate, SaleResponse
from erp_api.services import sales as sale_writer
from erp_api.services.pdf_report import money, pdf_headers, render_table_report

router = APIRouter(prefix="/sales", tags=["Sales"])


def _to_response(sale: Sale, mapper: EnumMapper) -> dict:
    return {
        "id": sale.id,
        "sale_id": sale.sale_id,
        "customer_id": sale.customer_id,
        "customer_name": sale.customer.name if sale.customer else "",
        "product_id": sale.product_id,
        "product_name": sale.product.name if sale.product else "",
        "company_id": sale.company_id,
        "date": sale.date,
        "quantity": sale.quantity,
        "unit_price": float(sale.unit_price),
        "discount": mapper.to_label("discount", sale.discount),
        "discount_percent": float(mapper.discount_percent(sale.discount)),
        "amount": float(sale.amount),
        "payment_method": mapper.to_label("payment_method", sale.payment_method),
        "status": mapper.to_label("sale_status", sale.status),
        "notes": sale.notes or "",
        "created_by": sale.created_by or "",
        "created_at": sale.created_at,
        "updated_at": sale.updated_at,
    }


def _query(db: Session):
    return db.query(Sale).options(
        joinedload(Sale.customer),
        joinedload(Sale.product),
    )


def _get_or_404(db: Session, sale_pk: int) -> Sale:
    sale = _query(db).filter(Sale.id == sale_pk).first()
    if not sale:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Sale not found",
        )
    return sale


# =========================================================
# PDF REPORT
# =========================================================
@router.get("/download/pdf")
@limiter.limit("10/minute")
def download_sales_pdf(
    request: Request,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    sales = _query(db).order_by(Sale.created_at.desc(), Sale.id.desc()).all()

    completed = sum(1 for s in sales if s.status == "COMPLETED")
    pending = sum(1 for s in sales if s.status == "PENDING")

    summary = [
        f"Total Sales: {len(sales)}",
        f"Total Amount: {money(sum((s.amount for s in sales), Decimal('0')))}",
        f"Completed: {completed}  Pending: {pending}",
    ]

    rows = [
        (
            s.sale_id,
            s.customer.name if s.customer else s.customer_id,
            s.product.name if s.product else s.product_id,
            s.date.isoformat(),
            money(s.amount),
            mapper.to_label("sale_status", s.status),
        )
        for s in sales
    ]

    pdf = render_table_report(
        "Sales Report",
        summary,
        [("Sale ID", 18), ("Customer", 16), ("Product", 16), ("Date", 11), ("Amount", 13), ("Status", 11)],
        rows,
    )
    return Response(pdf, media_type="application/pdf", headers=pdf_headers("sales-report.pdf"))


# =========================================================
# CRUD
# =========================================================
@router.get("", response_model=list[SaleResponse])
def list_sales(
    search: str | None = Query(None),
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    query = _query(db)

    if search:
        pattern = f"%{search}%"
        query = query.join(Customer, Sale.customer_id == Customer.id).filter(
            or_(Sale.sale_id.ilike(pattern), Customer.name.ilike(pattern))
        )

    sales = query.order_by(Sale.created_at.desc(), Sale.id.desc()).all()
    return [_to_response(s, mapper) for s in sales]


@router.get("/{sale_pk}", response_model=SaleResponse)
def get_sale(
    sale_pk: int,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    return _to_response(_get_or_404(db, sale_pk), mapper)


@router.post("", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def create_sale(
    request: Request,
    sale_data: SaleCreate,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    sale = sale_writer.create_sale(db, mapper, sale_data)
    return _to_response(_get_or_404(db, sale.id), mapper)


@router.put("/{sale_pk}", response_model=SaleResponse)
def update_sale(
    sale_pk: int,
    sale_data: SaleCreate,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    sale = sale_writer.update_sale(db, mapper, sale_pk, sale_data)
    return _to_response(_get_or_404(db, sale.id), mapper)


@router.delete("/{sale_pk}")
def delete_sale(sale_pk: int, db: Session = Depends(get_db)):
    sale_writer.delete_sale(db, sale_pk)
    return {"message": "Sale deleted successfully"}
