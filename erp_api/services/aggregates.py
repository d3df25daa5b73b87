"""
Header + items writers for invoices and quotes.

Both documents are stored as a header row and an ordered list of item rows.
A header is never visible without its items: create, update and delete each
run in a single transaction, flushing the header first so the items can be
tagged with its id, and rolling the whole unit back on any failure.
"""

import logging
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from erp_api.core.config import settings
from erp_api.core.enum_mapper import EnumMapper
from erp_api.core.errors import enum_code
from erp_api.models.companies import Company
from erp_api.models.customers import Customer
from erp_api.models.invoice_items import InvoiceItem
from erp_api.models.invoices import Invoice
from erp_api.models.quote_items import QuoteItem
from erp_api.models.quotes import Quote
from erp_api.schemas.document import DocumentCreate

logger = logging.getLogger("app")


def items_total(items) -> Decimal:
    return sum(
        (Decimal(item.quantity) * Decimal(item.price) for item in items),
        Decimal("0"),
    )


class DocumentWriter:
    def __init__(self, header_model, item_model, item_fk: str, status_family: str, label: str):
        self.header_model = header_model
        self.item_model = item_model
        self.item_fk = item_fk
        self.status_family = status_family
        self.label = label

    # =========================================================
    # HELPERS
    # =========================================================
    def get_or_404(self, db: Session, doc_id: int):
        doc = db.query(self.header_model).filter(self.header_model.id == doc_id).first()
        if not doc:
            raise HTTPException(status_code=404, detail=f"{self.label} not found")
        return doc

    def _ensure_unique_number(self, db: Session, number: str, exclude_id: int | None = None):
        query = db.query(self.header_model.id).filter(self.header_model.number == number)
        if exclude_id is not None:
            query = query.filter(self.header_model.id != exclude_id)
        if query.first():
            raise HTTPException(
                status_code=400,
                detail=f"{self.label} number already exists",
            )

    def _check_references(self, db: Session, data: DocumentCreate):
        if not db.query(Customer.id).filter(Customer.id == data.customer_id).first():
            raise HTTPException(status_code=400, detail="Customer not found")

        if data.company_id is not None:
            if not db.query(Company.id).filter(Company.id == data.company_id).first():
                raise HTTPException(status_code=400, detail="Company not found")

    def _apply_header(self, doc, data: DocumentCreate, status_code: str):
        doc.number = data.number
        doc.customer_id = data.customer_id
        doc.company_id = data.company_id
        doc.date = data.date
        doc.expire_date = data.expire_date
        doc.year = data.year or data.date.year
        doc.currency = data.currency or settings.DEFAULT_CURRENCY
        doc.status = status_code
        doc.paid = data.paid
        doc.note = data.note
        doc.tax = data.tax
        doc.created_by = data.created_by or doc.created_by or settings.DEFAULT_CREATED_BY

    def _insert_items(self, db: Session, doc_id: int, items):
        for item in items:
            db.add(
                self.item_model(
                    **{self.item_fk: doc_id},
                    item=item.item,
                    description=item.description,
                    quantity=item.quantity,
                    price=item.price,
                )
            )

    def _commit(self, db: Session):
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            logger.warning(f"{self.label} write rejected by constraint: {exc.orig}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid {self.label.lower()} data",
            )

    # =========================================================
    # CREATE
    # =========================================================
    def create(self, db: Session, mapper: EnumMapper, data: DocumentCreate):
        if not data.items:
            raise HTTPException(status_code=400, detail=f"{self.label} must contain items")

        status_code = enum_code(mapper, self.status_family, data.status, "status")

        try:
            self._ensure_unique_number(db, data.number)
            self._check_references(db, data)

            doc = self.header_model()
            self._apply_header(doc, data, status_code)
            db.add(doc)
            db.flush()

            self._insert_items(db, doc.id, data.items)
            db.flush()

            self._commit(db)
            db.refresh(doc)

            logger.info(f"{self.label} {doc.number} created with {len(data.items)} items")
            return doc

        except HTTPException:
            db.rollback()
            raise

        except IntegrityError as exc:
            db.rollback()
            logger.warning(f"{self.label} create rejected by constraint: {exc.orig}")
            raise HTTPException(status_code=400, detail=f"Invalid {self.label.lower()} data")

        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"{self.label} create failed")
            raise HTTPException(status_code=500, detail=f"Unable to create {self.label.lower()}")

    # =========================================================
    # UPDATE (header replaced, item set replaced)
    # =========================================================
    def update(self, db: Session, mapper: EnumMapper, doc_id: int, data: DocumentCreate):
        if not data.items:
            raise HTTPException(status_code=400, detail=f"{self.label} must contain items")

        status_code = enum_code(mapper, self.status_family, data.status, "status")

        try:
            doc = self.get_or_404(db, doc_id)

            if data.number != doc.number:
                self._ensure_unique_number(db, data.number, exclude_id=doc.id)
            self._check_references(db, data)

            self._apply_header(doc, data, status_code)

            fk_column = getattr(self.item_model, self.item_fk)
            db.query(self.item_model).filter(fk_column == doc.id).delete(synchronize_session=False)
            self._insert_items(db, doc.id, data.items)
            db.flush()

            self._commit(db)
            db.refresh(doc)
            return doc

        except HTTPException:
            db.rollback()
            raise

        except IntegrityError as exc:
            db.rollback()
            logger.warning(f"{self.label} update rejected by constraint: {exc.orig}")
            raise HTTPException(status_code=400, detail=f"Invalid {self.label.lower()} data")

        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"{self.label} update failed")
            raise HTTPException(status_code=500, detail=f"Unable to update {self.label.lower()}")

    # =========================================================
    # DELETE (items first, then header)
    # =========================================================
    def delete(self, db: Session, doc_id: int):
        try:
            doc = self.get_or_404(db, doc_id)
            number = doc.number

            fk_column = getattr(self.item_model, self.item_fk)
            db.query(self.item_model).filter(fk_column == doc.id).delete(synchronize_session=False)
            db.delete(doc)
            db.commit()

            logger.info(f"{self.label} {number} deleted")

        except HTTPException:
            db.rollback()
            raise

        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"{self.label} delete failed")
            raise HTTPException(status_code=500, detail=f"Unable to delete {self.label.lower()}")

    # =========================================================
    # READ
    # =========================================================
    def list_documents(self, db: Session, search: str | None = None):
        query = db.query(self.header_model)
        if search:
            pattern = f"%{search}%"
            query = query.join(Customer, Customer.id == self.header_model.customer_id).filter(
                self.header_model.number.ilike(pattern) | Customer.name.ilike(pattern)
            )
        return query.order_by(self.header_model.date.desc(), self.header_model.id.desc()).all()

    def status_counts(self, db: Session) -> dict:
        rows = (
            db.query(self.header_model.status, func.count(self.header_model.id))
            .group_by(self.header_model.status)
            .all()
        )
        return {code: count for code, count in rows}

    def to_response(self, doc, mapper: EnumMapper) -> dict:
        items = [
            {
                "id": item.id,
                "item": item.item,
                "description": item.description or "",
                "quantity": float(item.quantity),
                "price": float(item.price),
                "total": float(Decimal(item.quantity) * Decimal(item.price)),
            }
            for item in doc.items
        ]

        return {
            "id": doc.id,
            "number": doc.number,
            "customer_id": doc.customer_id,
            "customer_name": doc.customer.name if doc.customer else "",
            "company_id": doc.company_id,
            "date": doc.date,
            "expire_date": doc.expire_date,
            "year": doc.year,
            "currency": doc.currency,
            "status": mapper.to_label(self.status_family, doc.status),
            "paid": float(doc.paid or 0),
            "note": doc.note or "",
            "tax": float(doc.tax or 0),
            "created_by": doc.created_by or "",
            "created_at": doc.created_at,
            "updated_at": doc.updated_at,
            "items": items,
            "item_count": len(items),
            "total": float(items_total(doc.items)),
        }


invoice_writer = DocumentWriter(Invoice, InvoiceItem, "invoice_id", "invoice_status", "Invoice")
quote_writer = DocumentWriter(Quote, QuoteItem, "quote_id", "quote_status", "Quote")
