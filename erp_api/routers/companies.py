# erp_api/routers/companies.py

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from erp_api.core.errors import commit_or_conflict
from erp_api.database import get_db
from erp_api.models.companies import Company
from erp_api.models.customers import Customer
from erp_api.models.invoices import Invoice
from erp_api.models.orders import Order
from erp_api.models.payments import Payment
from erp_api.models.quotes import Quote
from erp_api.models.sales import Sale
from erp_api.models.transactions import Transaction
from erp_api.schemas.company import CompanyCreate, CompanyResponse

router = APIRouter(
    prefix="/companies",
    tags=["Companies"],
)

# Tables whose rows may point at a company
REFERENCING_MODELS = (Customer, Order, Invoice, Quote, Sale, Transaction, Payment)


def _to_response(company: Company) -> dict:
    return {
        "id": company.id,
        "name": company.name,
        "contact": company.contact or "",
        "country": company.country or "",
        "phone": company.phone or "",
        "email": company.email,
        "website": company.website or "",
    }


def _get_or_404(db: Session, company_id: int) -> Company:
    company = db.query(Company).filter(Company.id == company_id).first()
    if not company:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Company not found",
        )
    return company


def _ensure_unique_email(db: Session, email: str, exclude_id: int | None = None):
    query = db.query(Company.id).filter(Company.email == email)
    if exclude_id is not None:
        query = query.filter(Company.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Company with this email already exists",
        )


@router.get("", response_model=list[CompanyResponse])
def list_companies(
    search: str | None = Query(None),
    db: Session = Depends(get_db),
):
    query = db.query(Company)

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Company.name.ilike(pattern), Company.email.ilike(pattern)))

    return [_to_response(c) for c in query.order_by(Company.name).all()]


@router.get("/{company_id}", response_model=CompanyResponse)
def get_company(company_id: int, db: Session = Depends(get_db)):
    return _to_response(_get_or_404(db, company_id))


@router.post(
    "",
    response_model=CompanyResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_company(
    company_data: CompanyCreate,
    db: Session = Depends(get_db),
):
    _ensure_unique_email(db, company_data.email)

    company = Company(**company_data.model_dump())

    db.add(company)
    commit_or_conflict(db, "Company with this email already exists")
    db.refresh(company)

    return _to_response(company)


@router.put("/{company_id}", response_model=CompanyResponse)
def update_company(
    company_id: int,
    company_data: CompanyCreate,
    db: Session = Depends(get_db),
):
    company = _get_or_404(db, company_id)

    if company_data.email != company.email:
        _ensure_unique_email(db, company_data.email, exclude_id=company.id)

    for field, value in company_data.model_dump().items():
        setattr(company, field, value)

    commit_or_conflict(db, "Company with this email already exists")
    db.refresh(company)

    return _to_response(company)


@router.delete("/{company_id}")
def delete_company(company_id: int, db: Session = Depends(get_db)):
    company = _get_or_404(db, company_id)

    # Dependent rows are kept with a NULL company reference
    for model in REFERENCING_MODELS:
        db.query(model).filter(model.company_id == company.id).update(
            {model.company_id: None},
            synchronize_session=False,
        )

    db.delete(company)
    commit_or_conflict(db, "Company could not be deleted")

    return {"message": "Company deleted successfully"}
