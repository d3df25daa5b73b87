# erp_api/routers/payments.py

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from erp_api.core.config import settings
from erp_api.core.enum_mapper import EnumMapper, get_enum_mapper
from erp_api.core.errors import commit_or_conflict, enum_code
from erp_api.core.rate_limiter import limiter
from erp_api.database import get_db
from erp_api.models.companies import Company
from erp_api.models.customers import Customer
from erp_api.models.payments import Payment
from erp_api.schemas.payment import PaymentCreate, PaymentResponse
from erp_api.services.pdf_report import money, pdf_headers, render_table_report

router = APIRouter(prefix="/payments", tags=["Payments"])


def _to_response(payment: Payment, mapper: EnumMapper) -> dict:
    return {
        "id": payment.id,
        "receipt_number": payment.receipt_number,
        "customer_id": payment.customer_id,
        "client": payment.customer.name if payment.customer else "",
        "company_id": payment.company_id,
        "amount": float(payment.amount),
        "date": payment.date,
        "number": payment.number or "",
        "transaction_date": payment.transaction_date,
        "payment_mode": mapper.to_label("payment_mode", payment.payment_mode),
        "payment_transaction": payment.payment_transaction or "",
        "status": mapper.to_label("payment_status", payment.status),
        "notes": payment.notes or "",
        "created_by": payment.created_by or "",
        "created_at": payment.created_at,
        "updated_at": payment.updated_at,
    }


def _query(db: Session):
    return db.query(Payment).options(joinedload(Payment.customer))


def _get_or_404(db: Session, payment_id: int) -> Payment:
    payment = _query(db).filter(Payment.id == payment_id).first()
    if not payment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Payment not found",
        )
    return payment


def _ensure_unique_receipt(db: Session, receipt_number: str, exclude_id: int | None = None):
    query = db.query(Payment.id).filter(Payment.receipt_number == receipt_number)
    if exclude_id is not None:
        query = query.filter(Payment.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Receipt number already exists",
        )


def _apply(payment: Payment, data: PaymentCreate, mapper: EnumMapper, db: Session):
    if not db.query(Customer.id).filter(Customer.id == data.customer_id).first():
        raise HTTPException(status_code=400, detail="Customer not found")

    if data.company_id is not None:
        if not db.query(Company.id).filter(Company.id == data.company_id).first():
            raise HTTPException(status_code=400, detail="Company not found")

    payment_mode = enum_code(mapper, "payment_mode", data.payment_mode, "payment mode")
    payment_status = enum_code(mapper, "payment_status", data.status, "status")

    payment.receipt_number = data.receipt_number
    payment.customer_id = data.customer_id
    payment.company_id = data.company_id
    payment.amount = data.amount
    payment.date = data.date or payment.date or date.today()
    payment.number = data.number
    payment.transaction_date = data.transaction_date
    payment.payment_mode = payment_mode
    payment.payment_transaction = data.payment_transaction
    payment.status = payment_status
    payment.notes = data.notes
    payment.created_by = data.created_by or payment.created_by or settings.DEFAULT_CREATED_BY


# =========================================================
# TOTALS / FILTERS
# =========================================================
@router.get("/total-received")
def get_total_received(db: Session = Depends(get_db)):
    total = (
        db.query(func.coalesce(func.sum(Payment.amount), 0))
        .filter(Payment.status == "RECEIVED")
        .scalar()
    )
    return {"totalReceived": float(Decimal(str(total or 0)))}


@router.get("/customer/{customer_id}", response_model=list[PaymentResponse])
def list_customer_payments(
    customer_id: int,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    payments = (
        _query(db)
        .filter(Payment.customer_id == customer_id)
        .order_by(Payment.date.desc(), Payment.id.desc())
        .all()
    )
    return [_to_response(p, mapper) for p in payments]


# =========================================================
# PDF REPORT
# =========================================================
@router.get("/download/pdf")
@limiter.limit("10/minute")
def download_payments_pdf(
    request: Request,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    payments = _query(db).order_by(Payment.date.desc(), Payment.id.desc()).all()

    received = sum(1 for p in payments if p.status in ("RECEIVED", "COMPLETED"))
    pending = sum(1 for p in payments if p.status in ("PENDING", "PROCESSING"))
    failed = sum(1 for p in payments if p.status == "FAILED")

    summary = [
        f"Total Payments: {len(payments)}",
        f"Total Amount: {money(sum((p.amount for p in payments), Decimal('0')))}",
        f"Successful: {received}  Pending: {pending}  Failed: {failed}",
    ]

    rows = [
        (
            p.receipt_number,
            p.customer.name if p.customer else "N/A",
            mapper.to_label("payment_mode", p.payment_mode),
            mapper.to_label("payment_status", p.status),
            p.date.isoformat(),
            money(p.amount),
        )
        for p in payments
    ]

    pdf = render_table_report(
        "Payments Report",
        summary,
        [("Receipt", 12), ("Customer", 18), ("Method", 14), ("Status", 11), ("Date", 11), ("Amount", 13)],
        rows,
    )
    return Response(pdf, media_type="application/pdf", headers=pdf_headers("payments-report.pdf"))


# =========================================================
# CRUD
# =========================================================
@router.get("", response_model=list[PaymentResponse])
def list_payments(
    search: str | None = Query(None),
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    query = _query(db)

    if search:
        pattern = f"%{search}%"
        query = query.join(Customer, Payment.customer_id == Customer.id).filter(
            or_(Payment.receipt_number.ilike(pattern), Customer.name.ilike(pattern))
        )

    payments = query.order_by(Payment.date.desc(), Payment.id.desc()).all()
    return [_to_response(p, mapper) for p in payments]


@router.get("/{payment_id}", response_model=PaymentResponse)
def get_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    return _to_response(_get_or_404(db, payment_id), mapper)


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def create_payment(
    payment_data: PaymentCreate,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    _ensure_unique_receipt(db, payment_data.receipt_number)

    payment = Payment()
    _apply(payment, payment_data, mapper, db)

    db.add(payment)
    commit_or_conflict(db, "Receipt number already exists")

    return _to_response(_get_or_404(db, payment.id), mapper)


@router.put("/{payment_id}", response_model=PaymentResponse)
def update_payment(
    payment_id: int,
    payment_data: PaymentCreate,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    payment = _get_or_404(db, payment_id)

    if payment_data.receipt_number != payment.receipt_number:
        _ensure_unique_receipt(db, payment_data.receipt_number, exclude_id=payment.id)

    _apply(payment, payment_data, mapper, db)
    commit_or_conflict(db, "Receipt number already exists")

    return _to_response(_get_or_404(db, payment_id), mapper)


@router.delete("/{payment_id}")
def delete_payment(payment_id: int, db: Session = Depends(get_db)):
    payment = _get_or_404(db, payment_id)

    db.delete(payment)
    commit_or_conflict(db, "Payment could not be deleted")

    return {"message": "Payment deleted successfully"}
