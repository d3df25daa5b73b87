# erp_api/routers/users.py

import secrets
import string
import time

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from erp_api.core.enum_mapper import EnumMapper, get_enum_mapper
from erp_api.core.errors import commit_or_conflict, enum_code
from erp_api.core.hashing import hash_password
from erp_api.core.rate_limiter import limiter
from erp_api.database import get_db
from erp_api.models.users import User
from erp_api.schemas.user import UserCreate, UserResponse, UserUpdate
from erp_api.services.pdf_report import pdf_headers, render_table_report

router = APIRouter(prefix="/users", tags=["Users"])

DUPLICATE_DETAIL = "Username or email already exists"

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_user_id() -> str:
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"user_{int(time.time() * 1000)}_{suffix}"


def _to_response(user: User, mapper: EnumMapper) -> dict:
    return {
        "id": user.id,
        "user_id": user.user_id,
        "name": user.name,
        "username": user.username,
        "email": user.email,
        "role": mapper.to_label("user_role", user.role),
        "status": mapper.to_label("active_status", user.status),
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def _get_or_404(db: Session, user_pk: int) -> User:
    user = db.query(User).filter(User.id == user_pk).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


def _ensure_unique(db: Session, username: str | None, email: str | None, exclude_id: int | None = None):
    conditions = []
    if username:
        conditions.append(User.username == username)
    if email:
        conditions.append(User.email == email)
    if not conditions:
        return

    query = db.query(User.id).filter(or_(*conditions))
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
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
def download_users_pdf(
    request: Request,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    users = db.query(User).order_by(User.name).all()

    summary = [
        f"Total Users: {len(users)}",
        f"Active Users: {sum(1 for u in users if u.status == 'ACTIVE')}",
        f"Admin Users: {sum(1 for u in users if u.role == 'ADMIN')}",
    ]

    rows = [
        (
            u.name,
            u.username,
            u.email,
            mapper.to_label("user_role", u.role),
            mapper.to_label("active_status", u.status),
        )
        for u in users
    ]

    pdf = render_table_report(
        "Users Report",
        summary,
        [("Name", 20), ("Username", 18), ("Email", 26), ("Role", 10), ("Status", 9)],
        rows,
    )
    return Response(pdf, media_type="application/pdf", headers=pdf_headers("users-report.pdf"))


# =========================================================
# CRUD
# =========================================================
@router.get("", response_model=list[UserResponse])
def list_users(
    search: str | None = Query(None),
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    query = db.query(User)

    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                User.name.ilike(pattern),
                User.username.ilike(pattern),
                User.email.ilike(pattern),
            )
        )

    users = query.order_by(User.created_at.desc(), User.id.desc()).all()
    return [_to_response(u, mapper) for u in users]


@router.get("/{user_pk}", response_model=UserResponse)
def get_user(
    user_pk: int,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    return _to_response(_get_or_404(db, user_pk), mapper)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("10/minute")
def create_user(
    request: Request,
    user_data: UserCreate,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    role = enum_code(mapper, "user_role", user_data.role, "role")
    user_status = enum_code(mapper, "active_status", user_data.status, "status")

    _ensure_unique(db, user_data.username, user_data.email)

    user = User(
        name=user_data.name,
        username=user_data.username,
        email=user_data.email,
        role=role,
        status=user_status,
        user_id=generate_user_id(),
        current_challenge=user_data.current_challenge,
        password_hash=hash_password(user_data.password),
    )

    db.add(user)
    commit_or_conflict(db, DUPLICATE_DETAIL)
    db.refresh(user)

    return _to_response(user, mapper)


@router.put("/{user_pk}", response_model=UserResponse)
def update_user(
    user_pk: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    user = _get_or_404(db, user_pk)

    changes = {
        field: value
        for field, value in user_data.model_dump(exclude_unset=True).items()
        if value is not None or field == "current_challenge"
    }

    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update",
        )

    if "role" in changes:
        changes["role"] = enum_code(mapper, "user_role", changes["role"], "role")
    if "status" in changes:
        changes["status"] = enum_code(mapper, "active_status", changes["status"], "status")
    if "password" in changes:
        changes["password_hash"] = hash_password(changes.pop("password"))

    _ensure_unique(
        db,
        changes.get("username") if changes.get("username") != user.username else None,
        changes.get("email") if changes.get("email") != user.email else None,
        exclude_id=user.id,
    )

    for field, value in changes.items():
        setattr(user, field, value)

    commit_or_conflict(db, DUPLICATE_DETAIL)
    db.refresh(user)

    return _to_response(user, mapper)


@router.delete("/{user_pk}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_pk: int, db: Session = Depends(get_db)):
    user = _get_or_404(db, user_pk)

    db.delete(user)
    commit_or_conflict(db, "User could not be deleted")

    return None
