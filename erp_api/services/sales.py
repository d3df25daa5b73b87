# =========================================================
# SALE WRITER
#
# A sale moves stock: every write here adjusts product
# quantities in the same transaction as the sale row.
#
# - Product rows are locked (SELECT ... FOR UPDATE) in id order
# - All stock checks run before anything is written
# - products.quantity >= 0 is enforced by a CHECK constraint
#   as the last line of defence
# =========================================================

import logging
import time
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from erp_api.core.config import settings
from erp_api.core.enum_mapper import EnumMapper
from erp_api.core.errors import enum_code
from erp_api.models.companies import Company
from erp_api.models.customers import Customer
from erp_api.models.products import Product
from erp_api.models.sales import Sale
from erp_api.schemas.sale import SaleCreate

logger = logging.getLogger("app")

CENTS = Decimal("0.01")

# Name of the CHECK (quantity >= 0) constraint on products
STOCK_CONSTRAINT = "ck_product_quantity_non_negative"


def sale_amount(quantity: int, unit_price: Decimal, discount_percent: Decimal) -> Decimal:
    gross = Decimal(quantity) * Decimal(unit_price)
    return (gross * (Decimal("1") - Decimal(discount_percent) / Decimal("100"))).quantize(CENTS)


def _next_sale_id(db: Session) -> str:
    stamp = int(time.time() * 1000)
    while db.query(Sale.id).filter(Sale.sale_id == f"SALE-{stamp}").first():
        stamp += 1
    return f"SALE-{stamp}"


def _lock_products(db: Session, product_ids) -> dict:
    products = (
        db.query(Product)
        .filter(Product.id.in_(set(product_ids)))
        .order_by(Product.id)
        .with_for_update()
        .all()
    )
    return {p.id: p for p in products}


def _check_references(db: Session, data: SaleCreate):
    if not db.query(Customer.id).filter(Customer.id == data.customer_id).first():
        raise HTTPException(status_code=400, detail="Customer not found")

    if data.company_id is not None:
        if not db.query(Company.id).filter(Company.id == data.company_id).first():
            raise HTTPException(status_code=400, detail="Company not found")


def _resolve_codes(mapper: EnumMapper, data: SaleCreate):
    return (
        enum_code(mapper, "discount", data.discount, "discount"),
        enum_code(mapper, "payment_method", data.payment_method, "payment method"),
        enum_code(mapper, "sale_status", data.status, "status"),
    )


def _apply(sale: Sale, data: SaleCreate, mapper: EnumMapper, codes):
    discount, payment_method, status_code = codes

    sale.customer_id = data.customer_id
    sale.product_id = data.product_id
    sale.company_id = data.company_id
    sale.date = data.date
    sale.quantity = data.quantity
    sale.unit_price = data.unit_price
    sale.discount = discount
    sale.amount = sale_amount(data.quantity, data.unit_price, mapper.discount_percent(discount))
    sale.payment_method = payment_method
    sale.status = status_code
    sale.notes = data.notes
    sale.created_by = data.created_by or sale.created_by or settings.DEFAULT_CREATED_BY


def _commit(db: Session, action: str):
    try:
        db.commit()

    except IntegrityError as exc:
        db.rollback()
        logger.warning(f"Sale {action} rejected by constraint: {exc.orig}")

        if STOCK_CONSTRAINT in str(exc.orig):
            detail = "Insufficient product quantity"
        else:
            detail = "Sale conflicts with an existing record"

        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )


# =========================================================
# CREATE
# =========================================================
def create_sale(db: Session, mapper: EnumMapper, data: SaleCreate) -> Sale:
    codes = _resolve_codes(mapper, data)

    try:
        _check_references(db, data)

        product = _lock_products(db, [data.product_id]).get(data.product_id)
        if not product:
            raise HTTPException(status_code=400, detail="Product not found")

        if product.quantity < data.quantity:
            raise HTTPException(status_code=400, detail="Insufficient product quantity")

        sale = Sale(sale_id=_next_sale_id(db))
        _apply(sale, data, mapper, codes)

        product.quantity -= data.quantity

        db.add(sale)
        _commit(db, "create")
        db.refresh(sale)

        logger.info(f"Sale {sale.sale_id} recorded: product={product.id} qty={sale.quantity}")
        return sale

    except HTTPException:
        db.rollback()
        raise

    except SQLAlchemyError:
        db.rollback()
        logger.exception("Sale create failed")
        raise HTTPException(status_code=500, detail="Unable to complete sale")


# =========================================================
# UPDATE
# =========================================================
def update_sale(db: Session, mapper: EnumMapper, sale_pk: int, data: SaleCreate) -> Sale:
    codes = _resolve_codes(mapper, data)

    try:
        sale = db.query(Sale).filter(Sale.id == sale_pk).with_for_update().first()
        if not sale:
            raise HTTPException(status_code=404, detail="Sale not found")

        _check_references(db, data)

        old_product_id = sale.product_id
        old_quantity = sale.quantity

        products = _lock_products(db, [old_product_id, data.product_id])
        new_product = products.get(data.product_id)
        if not new_product:
            raise HTTPException(status_code=400, detail="Product not found")

        if data.product_id == old_product_id:
            # The sale's own quantity is returned to stock before re-checking
            available = new_product.quantity + old_quantity
            if available < data.quantity:
                raise HTTPException(status_code=400, detail="Insufficient product quantity")

            new_product.quantity = available - data.quantity

        else:
            if new_product.quantity < data.quantity:
                raise HTTPException(status_code=400, detail="Insufficient product quantity")

            old_product = products.get(old_product_id)
            if old_product:
                old_product.quantity += old_quantity
            new_product.quantity -= data.quantity

        _apply(sale, data, mapper, codes)

        _commit(db, "update")
        db.refresh(sale)
        return sale

    except HTTPException:
        db.rollback()
        raise

    except SQLAlchemyError:
        db.rollback()
        logger.exception("Sale update failed")
        raise HTTPException(status_code=500, detail="Unable to update sale")


# =========================================================
# DELETE
# =========================================================
def delete_sale(db: Session, sale_pk: int):
    try:
        sale = db.query(Sale).filter(Sale.id == sale_pk).with_for_update().first()
        if not sale:
            raise HTTPException(status_code=404, detail="Sale not found")

        sale_ref, returned = sale.sale_id, sale.quantity

        product = _lock_products(db, [sale.product_id]).get(sale.product_id)
        if product:
            product.quantity += returned

        db.delete(sale)
        db.commit()

        logger.info(f"Sale {sale_ref} deleted, {returned} returned to stock")

    except HTTPException:
        db.rollback()
        raise

    except SQLAlchemyError:
        db.rollback()
        logger.exception("Sale delete failed")
        raise HTTPException(status_code=500, detail="Unable to delete sale")
