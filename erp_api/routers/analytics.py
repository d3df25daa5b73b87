# erp_api/routers/analytics.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from erp_api.core.enum_mapper import EnumMapper, get_enum_mapper
from erp_api.database import get_db
from erp_api.services import analytics

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/reports")
def reports(
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    return analytics.reports_analytics(db, mapper)


@router.get("/{family}")
def family_listing(
    family: str,
    db: Session = Depends(get_db),
    mapper: EnumMapper = Depends(get_enum_mapper),
):
    build = analytics.LISTINGS.get(family)
    if build is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown analytics family '{family}'",
        )
    return build(db, mapper)
