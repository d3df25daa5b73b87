# erp_api/routers/transactions.py

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from erp_api.core.config import settings
from erp_api.core.enum_mapper import EnumMapper, get_enum_mapper
from erp_api.core.errors import commit_or_conflict, enum_code
from erp_api.core.rate_limiter import limiter
from erp_api.database import get_db
from erp_api.models.companies import Company
from erp_api.models.transactions import Transaction
from erp_api.schemas.transaction import TransactionCreate, TransactionResponse
from erp_api.services.pdf_report import money, pdf_headers, render_table_report

router = APIRouter(prefix="/transactions", tags=["Transactions"])


def _to_response(txn: Transaction, mapper: EnumMapper) -> dict:
    return {
        "id": txn.id,
        "type": mapper.to_label("transaction_type", txn.type),
        "amount": float(txn.amount),
        "bank": txn.bank,
        "check_number": txn.check_number or "",
        "status": mapper.to_label("transaction_status", txn.status),
        "category": mapper.to_label("transaction_category", txn.category),
        "date": txn.date,
        "received_payment": float(txn.received_payment or 0),
        "description": txn.description or "",
        "created_by": txn.created_by or "",
        "company_id": txn.company_id,
        "created_at": txn.created_at,
        "updated_at": txn.updated_at,
    }


def _get_or_404(db: Session, transaction_id: int) -> Transaction:
    txn = db.query(Transaction).filter(Transaction.id == transaction_id).first()
    if not txn:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Transaction not found",
        )
    return txn


def _apply(txn: Transaction, data: TransactionCreate, mapper: EnumMapper, db: Session):
    if data.company_id is not None:
        if not db.query(Company.id).filter(Company.id == data.company_id).first():
            raise HTTPException(status_code=400, detail="Company not found")

    txn.type = enum_code(mapper, "transaction_type", data.type, "type")
    txn.status = enum_code(mapper, "transaction_status", data.status, "status")
    txn.category = enum_code(mapper, "transaction_category", data.category, "category")
    txn.amount = data.amount
    txn.bank = data.bank
    txn.check_number = data.check_number
    txn.date = data.date
    txn.received_payment = data.received_payment
    txn.description = data.description
    txn.created_by = data.created_by or txn.created_by or settings.DEFAULT_CREATED_BY
    txn.company_id = data.company_id


def _sum_completed(db: Session, type_code: str) -> Decimal:
    total = (
        db.query(func.coalesce(func.sum(Transaction.amount), 0))
        .filter(Transaction.type == type_code, Transaction.status == "COMPLETED")
        .scalar()
    )
    return Decimal(str(total or 0))


# =========================================================
# BALANCE / FILTERS
# =========================================================
@router.get("/balance")
def get_balance(db: Session = Depends(get_db)):
    balance = _sum_completed(db, "INCOME") - _sum_completed(db, "EXPENSE")
    return {"balance": float(balance)}


@router.get("/status/{status_label}", response_model=list[TransactionResponse])
def list_by_status(
    status_label: str,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    code = enum_code(mapper, "transaction_status", status_label, "status")

    txns = (
        db.query(Transaction)
        .filter(Transaction.status == code)
        .order_by(Transaction.date.desc(), Transaction.id.desc())
        .all()
    )
    return [_to_response(t, mapper) for t in txns]


# =========================================================
# PDF REPORT
# =========================================================
@router.get("/download/pdf")
@limiter.limit("10/minute")
def download_finance_pdf(
    request: Request,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    txns = db.query(Transaction).order_by(Transaction.date.desc(), Transaction.id.desc()).all()

    income = sum((t.amount for t in txns if t.type == "INCOME"), Decimal("0"))
    expenses = sum((t.amount for t in txns if t.type == "EXPENSE"), Decimal("0"))

    summary = [
        f"Total Income: {money(income)}",
        f"Total Expenses: {money(expenses)}",
        f"Net Profit: {money(income - expenses)}",
        f"Total Entries: {len(txns)}",
    ]

    rows = [
        (
            t.id,
            mapper.to_label("transaction_type", t.type),
            mapper.to_label("transaction_category", t.category),
            t.description or "N/A",
            t.date.isoformat(),
            money(t.amount),
        )
        for t in txns
    ]

    pdf = render_table_report(
        "Finance Report",
        summary,
        [("ID", 6), ("Type", 10), ("Category", 16), ("Description", 24), ("Date", 11), ("Amount", 13)],
        rows,
    )
    return Response(pdf, media_type="application/pdf", headers=pdf_headers("finance-report.pdf"))


# =========================================================
# CRUD
# =========================================================
@router.get("", response_model=list[TransactionResponse])
def list_transactions(
    search: str | None = Query(None),
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    query = db.query(Transaction)

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Transaction.bank.ilike(pattern), Transaction.description.ilike(pattern)))

    txns = query.order_by(Transaction.date.desc(), Transaction.id.desc()).all()
    return [_to_response(t, mapper) for t in txns]


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    return _to_response(_get_or_404(db, transaction_id), mapper)


@router.post("", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def create_transaction(
    transaction_data: TransactionCreate,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    txn = Transaction()
    _apply(txn, transaction_data, mapper, db)

    db.add(txn)
    commit_or_conflict(db, "Invalid transaction data")
    db.refresh(txn)

    return _to_response(txn, mapper)


@router.put("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: int,
    transaction_data: TransactionCreate,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    txn = _get_or_404(db, transaction_id)
    _apply(txn, transaction_data, mapper, db)

    commit_or_conflict(db, "Invalid transaction data")
    db.refresh(txn)

    return _to_response(txn, mapper)


@router.delete("/{transaction_id}")
def delete_transaction(transaction_id: int, db: Session = Depends(get_db)):
    txn = _get_or_404(db, transaction_id)

    db.delete(txn)
    commit_or_conflict(db, "Transaction could not be deleted")

    return {"message": "Transaction deleted successfully"}
