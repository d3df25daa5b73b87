# =========================================================
# ANALYTICS AGGREGATOR (READ ONLY)
#
# Six independent listings joined to names and aggregates:
# orders, quotes, invoices, products, sales, customers
#
# Child aggregates are computed in grouped subqueries before
# joining, so a row with several kinds of children is never
# multiplied by the join fan-out.
# =========================================================

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from erp_api.core.enum_mapper import EnumMapper
from erp_api.models.companies import Company
from erp_api.models.customers import Customer
from erp_api.models.invoice_items import InvoiceItem
from erp_api.models.invoices import Invoice
from erp_api.models.orders import Order
from erp_api.models.products import Product
from erp_api.models.quote_items import QuoteItem
from erp_api.models.quotes import Quote
from erp_api.models.sales import Sale
from erp_api.models.transactions import Transaction
from erp_api.routers.products import image_url

GROWTH_WINDOW_DAYS = 30


def _num(value) -> float:
    return float(value or 0)


def _dec(value) -> Decimal:
    return Decimal(str(value or 0))


def growth_percentage(current, previous) -> float:
    current, previous = Decimal(current), Decimal(previous)

    if previous == 0:
        if current > 0:
            return 100.0
        return 0.0

    growth = ((current - previous) / previous) * 100
    return float(growth.quantize(Decimal("0.01")))


# =========================================================
# LISTINGS
# =========================================================
def order_analytics(db: Session, mapper: EnumMapper) -> list[dict]:
    rows = (
        db.query(
            Order,
            Company.name.label("company_name"),
            Customer.name.label("customer_name"),
            Product.name.label("product_name"),
        )
        .outerjoin(Company, Order.company_id == Company.id)
        .outerjoin(Customer, Order.customer_id == Customer.id)
        .outerjoin(Product, Order.product_id == Product.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )

    return [
        {
            "id": order.id,
            "number": order.number,
            "quantity": order.quantity,
            "price": _num(order.price),
            "discount": _num(order.discount),
            "total": _num(order.total),
            "status": mapper.to_label("order_status", order.status),
            "phone": order.phone or "",
            "state": order.state or "",
            "city": order.city or "",
            "note": order.note or "",
            "createdAt": order.created_at,
            "updatedAt": order.updated_at,
            "customerId": order.customer_id,
            "productId": order.product_id,
            "companyId": order.company_id,
            "companyName": company_name or "",
            "customerName": customer_name or "",
            "productName": product_name or "",
        }
        for order, company_name, customer_name, product_name in rows
    ]


def _document_analytics(db, mapper, header_model, item_model, item_fk, status_family):
    fk_column = getattr(item_model, item_fk)
    totals = (
        db.query(
            fk_column.label("doc_id"),
            func.count(item_model.id).label("item_count"),
            func.coalesce(func.sum(item_model.quantity * item_model.price), 0).label("total_value"),
        )
        .group_by(fk_column)
        .subquery()
    )

    rows = (
        db.query(
            header_model,
            Company.name.label("company_name"),
            Customer.name.label("customer_name"),
            totals.c.item_count,
            totals.c.total_value,
        )
        .outerjoin(totals, totals.c.doc_id == header_model.id)
        .outerjoin(Company, header_model.company_id == Company.id)
        .outerjoin(Customer, header_model.customer_id == Customer.id)
        .order_by(header_model.date.desc(), header_model.id.desc())
        .all()
    )

    return [
        {
            "id": doc.id,
            "number": doc.number,
            "customerId": doc.customer_id,
            "companyId": doc.company_id,
            "date": doc.date,
            "expireDate": doc.expire_date,
            "year": doc.year,
            "currency": doc.currency,
            "status": mapper.to_label(status_family, doc.status),
            "paid": _num(doc.paid),
            "note": doc.note or "",
            "tax": _num(doc.tax),
            "createdBy": doc.created_by or "",
            "createdAt": doc.created_at,
            "updatedAt": doc.updated_at,
            "companyName": company_name or "",
            "customerName": customer_name or "",
            "itemCount": int(item_count or 0),
            "totalValue": _num(total_value),
        }
        for doc, company_name, customer_name, item_count, total_value in rows
    ]


def quote_analytics(db: Session, mapper: EnumMapper) -> list[dict]:
    return _document_analytics(db, mapper, Quote, QuoteItem, "quote_id", "quote_status")


def invoice_analytics(db: Session, mapper: EnumMapper) -> list[dict]:
    return _document_analytics(db, mapper, Invoice, InvoiceItem, "invoice_id", "invoice_status")


def product_analytics(db: Session, mapper: EnumMapper) -> list[dict]:
    order_counts = (
        db.query(
            Order.product_id.label("product_id"),
            func.count(Order.id).label("order_count"),
        )
        .group_by(Order.product_id)
        .subquery()
    )

    sale_totals = (
        db.query(
            Sale.product_id.label("product_id"),
            func.count(Sale.id).label("sale_count"),
            func.coalesce(func.sum(Sale.quantity * Sale.unit_price), 0).label("total_sale_value"),
            func.coalesce(
                func.sum(Sale.quantity * Sale.unit_price - Sale.amount), 0
            ).label("total_discount"),
        )
        .group_by(Sale.product_id)
        .subquery()
    )

    rows = (
        db.query(
            Product,
            order_counts.c.order_count,
            sale_totals.c.sale_count,
            sale_totals.c.total_sale_value,
            sale_totals.c.total_discount,
        )
        .outerjoin(order_counts, order_counts.c.product_id == Product.id)
        .outerjoin(sale_totals, sale_totals.c.product_id == Product.id)
        .all()
    )

    products = [
        {
            "id": product.id,
            "sku": product.sku,
            "image": image_url(product.image),
            "name": product.name,
            "price": _num(product.price),
            "quantity": product.quantity,
            "description": product.description or "",
            "orderCount": int(order_count or 0),
            "saleCount": int(sale_count or 0),
            "totalSaleValue": _num(total_sale_value),
            "totalDiscount": _num(total_discount),
        }
        for product, order_count, sale_count, total_sale_value, total_discount in rows
    ]

    products.sort(key=lambda p: (-p["totalSaleValue"], p["id"]))
    return products


def sale_analytics(db: Session, mapper: EnumMapper) -> list[dict]:
    rows = (
        db.query(
            Sale,
            Product.name.label("product_name"),
            Customer.name.label("customer_name"),
            Company.name.label("company_name"),
        )
        .outerjoin(Product, Sale.product_id == Product.id)
        .outerjoin(Customer, Sale.customer_id == Customer.id)
        .outerjoin(Company, Sale.company_id == Company.id)
        .order_by(Sale.created_at.desc(), Sale.id.desc())
        .all()
    )

    return [
        {
            "id": sale.id,
            "saleId": sale.sale_id,
            "date": sale.date,
            "quantity": sale.quantity,
            "unitPrice": _num(sale.unit_price),
            "discount": mapper.to_label("discount", sale.discount),
            "amount": _num(sale.amount),
            "paymentMethod": mapper.to_label("payment_method", sale.payment_method),
            "status": mapper.to_label("sale_status", sale.status),
            "createdAt": sale.created_at,
            "updatedAt": sale.updated_at,
            "customerId": sale.customer_id,
            "productId": sale.product_id,
            "companyId": sale.company_id,
            "productName": product_name or "",
            "customerName": customer_name or "",
            "companyName": company_name or "",
        }
        for sale, product_name, customer_name, company_name in rows
    ]


def customer_analytics(db: Session, mapper: EnumMapper) -> list[dict]:
    order_totals = (
        db.query(
            Order.customer_id.label("customer_id"),
            func.count(Order.id).label("order_count"),
            func.coalesce(func.sum(Order.total), 0).label("total_order_value"),
        )
        .group_by(Order.customer_id)
        .subquery()
    )

    invoice_counts = (
        db.query(Invoice.customer_id.label("customer_id"), func.count(Invoice.id).label("n"))
        .group_by(Invoice.customer_id)
        .subquery()
    )

    quote_counts = (
        db.query(Quote.customer_id.label("customer_id"), func.count(Quote.id).label("n"))
        .group_by(Quote.customer_id)
        .subquery()
    )

    rows = (
        db.query(
            Customer,
            Company.name.label("company_name"),
            order_totals.c.order_count,
            order_totals.c.total_order_value,
            invoice_counts.c.n,
            quote_counts.c.n,
        )
        .outerjoin(Company, Customer.company_id == Company.id)
        .outerjoin(order_totals, order_totals.c.customer_id == Customer.id)
        .outerjoin(invoice_counts, invoice_counts.c.customer_id == Customer.id)
        .outerjoin(quote_counts, quote_counts.c.customer_id == Customer.id)
        .all()
    )

    customers = [
        {
            "id": customer.id,
            "name": customer.name,
            "email": customer.email,
            "phone": customer.phone or "",
            "address": customer.address or "",
            "createdAt": customer.created_at,
            "updatedAt": customer.updated_at,
            "companyId": customer.company_id,
            "companyName": company_name or "",
            "orderCount": int(order_count or 0),
            "invoiceCount": int(invoice_count or 0),
            "quoteCount": int(quote_count or 0),
            "totalOrderValue": _num(total_order_value),
        }
        for customer, company_name, order_count, total_order_value, invoice_count, quote_count in rows
    ]

    customers.sort(key=lambda c: (-c["totalOrderValue"], c["id"]))
    return customers


LISTINGS = {
    "orders": order_analytics,
    "quotes": quote_analytics,
    "invoices": invoice_analytics,
    "products": product_analytics,
    "sales": sale_analytics,
    "customers": customer_analytics,
}


# =========================================================
# STATS
# =========================================================
def _sales_between(db: Session, start: datetime, end: datetime):
    revenue, discount = (
        db.query(
            func.coalesce(func.sum(Sale.amount), 0),
            func.coalesce(func.sum(Sale.quantity * Sale.unit_price - Sale.amount), 0),
        )
        .filter(Sale.created_at >= start, Sale.created_at < end)
        .one()
    )
    revenue = _dec(revenue)
    return revenue, revenue - _dec(discount)


def _count_between(db: Session, model, start: datetime, end: datetime) -> Decimal:
    count = (
        db.query(func.count(model.id))
        .filter(model.created_at >= start, model.created_at < end)
        .scalar()
    )
    return Decimal(count or 0)


def monthly_expenses(db: Session, today: date | None = None) -> Decimal:
    today = today or datetime.now(timezone.utc).date()
    month_start = today.replace(day=1)
    next_month = (month_start + timedelta(days=32)).replace(day=1)

    total = (
        db.query(func.coalesce(func.sum(Transaction.amount), 0))
        .filter(
            Transaction.type == "EXPENSE",
            Transaction.status == "COMPLETED",
            Transaction.date >= month_start,
            Transaction.date < next_month,
        )
        .scalar()
    )
    return _dec(total)


def _stats(db: Session, listings: dict) -> dict:
    revenue = sum((_dec(s["amount"]) for s in listings["sales"]), Decimal("0"))
    discounts = sum((_dec(p["totalDiscount"]) for p in listings["products"]), Decimal("0"))

    now = datetime.now(timezone.utc)
    current_start = now - timedelta(days=GROWTH_WINDOW_DAYS)
    previous_start = current_start - timedelta(days=GROWTH_WINDOW_DAYS)

    current_revenue, current_profit = _sales_between(db, current_start, now)
    previous_revenue, previous_profit = _sales_between(db, previous_start, current_start)

    def change(model):
        return growth_percentage(
            _count_between(db, model, current_start, now),
            _count_between(db, model, previous_start, current_start),
        )

    return {
        "revenue": float(revenue),
        "revenueChange": growth_percentage(current_revenue, previous_revenue),
        "customers": len(listings["customers"]),
        "customersChange": change(Customer),
        "invoices": len(listings["invoices"]),
        "invoicesChange": change(Invoice),
        "orders": len(listings["orders"]),
        "ordersChange": change(Order),
        "quoteCount": len(listings["quotes"]),
        "profit": float(revenue - discounts),
        "profitChange": growth_percentage(current_profit, previous_profit),
        "monthlyExpenses": float(monthly_expenses(db)),
    }


def reports_analytics(db: Session, mapper: EnumMapper) -> dict:
    # Listings share the request session and run one after another
    listings = {name: build(db, mapper) for name, build in LISTINGS.items()}
    listings["stats"] = _stats(db, listings)
    return listings
