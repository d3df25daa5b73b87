# erp_api/routers/customers.py

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from erp_api.core.errors import commit_or_conflict
from erp_api.database import get_db
from erp_api.models.companies import Company
from erp_api.models.customers import Customer
from erp_api.models.invoices import Invoice
from erp_api.models.orders import Order
from erp_api.models.payments import Payment
from erp_api.models.quotes import Quote
from erp_api.models.sales import Sale
from erp_api.schemas.customer import CustomerCreate, CustomerResponse, CustomerUpdate

router = APIRouter(
    prefix="/customers",
    tags=["Customers"],
)

# Tables whose rows keep a customer reference
DEPENDENT_MODELS = (Invoice, Quote, Sale, Order, Payment)


def _to_response(customer: Customer) -> dict:
    return {
        "id": customer.id,
        "name": customer.name,
        "email": customer.email,
        "phone": customer.phone or "",
        "address": customer.address or "",
        "company_id": customer.company_id,
        "company_name": customer.company.name if customer.company else "",
    }


def _get_or_404(db: Session, customer_id: int) -> Customer:
    customer = (
        db.query(Customer)
        .options(joinedload(Customer.company))
        .filter(Customer.id == customer_id)
        .first()
    )
    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found",
        )
    return customer


def _ensure_unique_email(db: Session, email: str, exclude_id: int | None = None):
    query = db.query(Customer.id).filter(Customer.email == email)
    if exclude_id is not None:
        query = query.filter(Customer.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Customer with this email already exists",
        )


def _ensure_company(db: Session, company_id: int | None):
    if company_id is None:
        return
    if not db.query(Company.id).filter(Company.id == company_id).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Company not found",
        )


@router.get("", response_model=list[CustomerResponse])
def list_customers(
    search: str | None = Query(None),
    db: Session = Depends(get_db),
):
    query = db.query(Customer).options(joinedload(Customer.company))

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Customer.name.ilike(pattern), Customer.email.ilike(pattern)))

    return [_to_response(c) for c in query.order_by(Customer.name).all()]


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(customer_id: int, db: Session = Depends(get_db)):
    return _to_response(_get_or_404(db, customer_id))


@router.post(
    "",
    response_model=CustomerResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_customer(
    customer_data: CustomerCreate,
    db: Session = Depends(get_db),
):
    _ensure_unique_email(db, customer_data.email)
    _ensure_company(db, customer_data.company_id)

    customer = Customer(**customer_data.model_dump())

    db.add(customer)
    commit_or_conflict(db, "Customer with this email already exists")
    db.refresh(customer)

    return _to_response(customer)


@router.put("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: int,
    customer_data: CustomerUpdate,
    db: Session = Depends(get_db),
):
    customer = _get_or_404(db, customer_id)

    # Merge: fields missing from the body keep their stored values
    changes = customer_data.model_dump(exclude_unset=True)

    if changes.get("email") and changes["email"] != customer.email:
        _ensure_unique_email(db, changes["email"], exclude_id=customer.id)

    if "company_id" in changes:
        _ensure_company(db, changes["company_id"])

    for field, value in changes.items():
        if value is None and field in ("name", "email"):
            continue
        setattr(customer, field, value)

    commit_or_conflict(db, "Customer with this email already exists")
    db.refresh(customer)

    return _to_response(customer)


@router.delete("/{customer_id}")
def delete_customer(customer_id: int, db: Session = Depends(get_db)):
    customer = _get_or_404(db, customer_id)

    for model in DEPENDENT_MODELS:
        if db.query(model.id).filter(model.customer_id == customer.id).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete customer with associated records",
            )

    db.delete(customer)
    commit_or_conflict(db, "Cannot delete customer with associated records")

    return {"message": "Customer deleted successfully"}
