# erp_api/routers/employees.py

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from erp_api.core.enum_mapper import EnumMapper, get_enum_mapper
from erp_api.core.errors import commit_or_conflict, enum_code
from erp_api.core.rate_limiter import limiter
from erp_api.database import get_db
from erp_api.models.employees import Employee
from erp_api.schemas.employee import EmployeeCreate, EmployeeResponse, EmployeeUpdate
from erp_api.services.pdf_report import money, pdf_headers, render_table_report

router = APIRouter(prefix="/employees", tags=["Employees"])

DUPLICATE_DETAIL = "Employee ID or email already exists"


def _to_response(employee: Employee, mapper: EnumMapper) -> dict:
    return {
        "id": employee.id,
        "name": employee.name,
        "employee_id": employee.employee_id,
        "department": mapper.to_label("department", employee.department),
        "position": employee.position,
        "salary": float(employee.salary),
        "hire_date": employee.hire_date,
        "email": employee.email,
        "website": employee.website or "",
        "status": mapper.to_label("active_status", employee.status),
        "created_at": employee.created_at,
        "updated_at": employee.updated_at,
    }


def _get_or_404(db: Session, employee_pk: int) -> Employee:
    employee = db.query(Employee).filter(Employee.id == employee_pk).first()
    if not employee:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Employee not found",
        )
    return employee


def _ensure_unique(db: Session, employee_id: str | None, email: str | None, exclude_id: int | None = None):
    conditions = []
    if employee_id:
        conditions.append(Employee.employee_id == employee_id)
    if email:
        conditions.append(Employee.email == email)
    if not conditions:
        return

    query = db.query(Employee.id).filter(or_(*conditions))
    if exclude_id is not None:
        query = query.filter(Employee.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=DUPLICATE_DETAIL,
        )


# =========================================================
# PDF REPORT
# =========================================================
@router.get("/download/pdf")
@limiter.limit("10/minute")
def download_employees_pdf(
    request: Request,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    employees = db.query(Employee).order_by(Employee.name).all()

    active = sum(1 for e in employees if e.status == "ACTIVE")

    summary = [
        f"Total Employees: {len(employees)}",
        f"Active Employees: {active}",
        f"Total Salary: {money(sum((e.salary for e in employees), Decimal('0')))}",
    ]

    rows = [
        (
            e.name,
            e.employee_id,
            mapper.to_label("department", e.department),
            e.position,
            money(e.salary),
            mapper.to_label("active_status", e.status),
        )
        for e in employees
    ]

    pdf = render_table_report(
        "Employees Report",
        summary,
        [("Name", 20), ("Employee ID", 14), ("Department", 12), ("Position", 16), ("Salary", 13), ("Status", 9)],
        rows,
    )
    return Response(pdf, media_type="application/pdf", headers=pdf_headers("employees-report.pdf"))


# =========================================================
# CRUD
# =========================================================
@router.get("", response_model=list[EmployeeResponse])
def list_employees(
    search: str | None = Query(None),
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    query = db.query(Employee)

    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                Employee.name.ilike(pattern),
                Employee.employee_id.ilike(pattern),
                Employee.department.ilike(pattern),
            )
        )

    employees = query.order_by(Employee.created_at.desc(), Employee.id.desc()).all()
    return [_to_response(e, mapper) for e in employees]


@router.get("/{employee_pk}", response_model=EmployeeResponse)
def get_employee(
    employee_pk: int,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    return _to_response(_get_or_404(db, employee_pk), mapper)


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
def create_employee(
    employee_data: EmployeeCreate,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    department = enum_code(mapper, "department", employee_data.department, "department")
    employee_status = enum_code(mapper, "active_status", employee_data.status, "status")

    _ensure_unique(db, employee_data.employee_id, employee_data.email)

    employee = Employee(
        **employee_data.model_dump(exclude={"department", "status"}),
        department=department,
        status=employee_status,
    )

    db.add(employee)
    commit_or_conflict(db, DUPLICATE_DETAIL)
    db.refresh(employee)

    return _to_response(employee, mapper)


@router.put("/{employee_pk}", response_model=EmployeeResponse)
def update_employee(
    employee_pk: int,
    employee_data: EmployeeUpdate,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    employee = _get_or_404(db, employee_pk)

    # Keep existing values for anything not sent
    changes = {
        field: value
        for field, value in employee_data.model_dump(exclude_unset=True).items()
        if value is not None or field == "website"
    }

    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update",
        )

    if "department" in changes:
        changes["department"] = enum_code(mapper, "department", changes["department"], "department")
    if "status" in changes:
        changes["status"] = enum_code(mapper, "active_status", changes["status"], "status")

    _ensure_unique(
        db,
        changes.get("employee_id") if changes.get("employee_id") != employee.employee_id else None,
        changes.get("email") if changes.get("email") != employee.email else None,
        exclude_id=employee.id,
    )

    for field, value in changes.items():
        setattr(employee, field, value)

    commit_or_conflict(db, DUPLICATE_DETAIL)
    db.refresh(employee)

    return _to_response(employee, mapper)


@router.delete("/{employee_pk}", status_code=status.HTTP_204_NO_CONTENT)
def delete_employee(employee_pk: int, db: Session = Depends(get_db)):
    employee = _get_or_404(db, employee_pk)

    db.delete(employee)
    commit_or_conflict(db, "Employee could not be deleted")

    return None
