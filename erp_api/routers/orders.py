# erp_api/routers/orders.py

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from erp_api.core.enum_mapper import EnumMapper, get_enum_mapper
from erp_api.core.errors import commit_or_conflict, enum_code
from erp_api.core.rate_limiter import limiter
from erp_api.database import get_db
from erp_api.models.companies import Company
from erp_api.models.customers import Customer
from erp_api.models.orders import Order
from erp_api.models.products import Product
from erp_api.schemas.order import OrderCreate, OrderResponse
from erp_api.services.pdf_report import money, pdf_headers, render_table_report

router = APIRouter(
    prefix="/orders",
    tags=["Orders"],
)


def order_total(quantity: int, price: Decimal, discount: Decimal) -> Decimal:
    gross = Decimal(quantity) * Decimal(price)
    return (gross * (Decimal("1") - Decimal(discount) / Decimal("100"))).quantize(Decimal("0.01"))


def _to_response(order: Order, mapper: EnumMapper) -> dict:
    return {
        "id": order.id,
        "number": order.number,
        "customer_id": order.customer_id,
        "customer_name": order.customer.name if order.customer else "",
        "product_id": order.product_id,
        "product_name": order.product.name if order.product else "",
        "company_id": order.company_id,
        "quantity": order.quantity,
        "price": float(order.price),
        "discount": float(order.discount or 0),
        "total": float(order.total),
        "status": mapper.to_label("order_status", order.status),
        "phone": order.phone or "",
        "state": order.state or "",
        "city": order.city or "",
        "note": order.note or "",
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


def _query(db: Session):
    return db.query(Order).options(
        joinedload(Order.customer),
        joinedload(Order.product),
    )


def _get_or_404(db: Session, order_id: int) -> Order:
    order = _query(db).filter(Order.id == order_id).first()
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found",
        )
    return order


def _check_references(db: Session, data: OrderCreate):
    if not db.query(Customer.id).filter(Customer.id == data.customer_id).first():
        raise HTTPException(status_code=400, detail="Customer not found")

    if not db.query(Product.id).filter(Product.id == data.product_id).first():
        raise HTTPException(status_code=400, detail="Product not found")

    if data.company_id is not None:
        if not db.query(Company.id).filter(Company.id == data.company_id).first():
            raise HTTPException(status_code=400, detail="Company not found")


def _ensure_unique_number(db: Session, number: str, exclude_id: int | None = None):
    query = db.query(Order.id).filter(Order.number == number)
    if exclude_id is not None:
        query = query.filter(Order.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Order number already exists",
        )


def _apply(order: Order, data: OrderCreate, status_code: str):
    order.number = data.number
    order.customer_id = data.customer_id
    order.product_id = data.product_id
    order.company_id = data.company_id
    order.quantity = data.quantity
    order.price = data.price
    order.discount = data.discount
    order.total = order_total(data.quantity, data.price, data.discount)
    order.status = status_code
    order.phone = data.phone
    order.state = data.state
    order.city = data.city
    order.note = data.note


# =========================================================
# PDF REPORT
# =========================================================
@router.get("/download/pdf")
@limiter.limit("10/minute")
def download_orders_pdf(
    request: Request,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    orders = _query(db).order_by(Order.created_at.desc(), Order.id.desc()).all()

    by_status = {}
    for order in orders:
        by_status[order.status] = by_status.get(order.status, 0) + 1

    summary = [
        f"Total Orders: {len(orders)}",
        f"Total Value: {money(sum((o.total for o in orders), Decimal('0')))}",
        f"Pending: {by_status.get('PENDING', 0)}  "
        f"Delivered: {by_status.get('DELIVERED', 0)}  "
        f"Cancelled: {by_status.get('CANCELLED', 0)}",
    ]

    rows = [
        (
            o.id,
            o.customer.name if o.customer else o.customer_id,
            o.product.name if o.product else o.product_id,
            mapper.to_label("order_status", o.status),
            o.quantity,
            money(o.total),
        )
        for o in orders
    ]

    pdf = render_table_report(
        "Orders Report",
        summary,
        [("ID", 6), ("Customer", 18), ("Product", 18), ("Status", 12), ("Quantity", 9), ("Total", 14)],
        rows,
    )
    return Response(pdf, media_type="application/pdf", headers=pdf_headers("orders-report.pdf"))


# =========================================================
# CRUD
# =========================================================
@router.get("", response_model=list[OrderResponse])
def list_orders(
    search: str | None = Query(None),
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    query = _query(db)

    if search:
        pattern = f"%{search}%"
        query = query.join(Customer, Order.customer_id == Customer.id).filter(
            or_(Order.number.ilike(pattern), Customer.name.ilike(pattern))
        )

    orders = query.order_by(Order.created_at.desc(), Order.id.desc()).all()
    return [_to_response(o, mapper) for o in orders]


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    return _to_response(_get_or_404(db, order_id), mapper)


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    order_data: OrderCreate,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    status_code = enum_code(mapper, "order_status", order_data.status, "status")

    _ensure_unique_number(db, order_data.number)
    _check_references(db, order_data)

    order = Order()
    _apply(order, order_data, status_code)

    db.add(order)
    commit_or_conflict(db, "Order number already exists")

    return _to_response(_get_or_404(db, order.id), mapper)


@router.put("/{order_id}", response_model=OrderResponse)
def update_order(
    order_id: int,
    order_data: OrderCreate,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    status_code = enum_code(mapper, "order_status", order_data.status, "status")

    order = _get_or_404(db, order_id)

    if order_data.number != order.number:
        _ensure_unique_number(db, order_data.number, exclude_id=order.id)
    _check_references(db, order_data)

    _apply(order, order_data, status_code)
    commit_or_conflict(db, "Order number already exists")

    return _to_response(_get_or_404(db, order_id), mapper)


@router.delete("/{order_id}")
def delete_order(order_id: int, db: Session = Depends(get_db)):
    order = _get_or_404(db, order_id)

    db.delete(order)
    commit_or_conflict(db, "Order could not be deleted")

    return {"message": "Order deleted successfully"}
