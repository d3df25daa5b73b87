# erp_api/routers/products.py

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from erp_api.core.config import settings
from erp_api.core.errors import commit_or_conflict
from erp_api.database import get_db
from erp_api.models.orders import Order
from erp_api.models.products import Product
from erp_api.models.sales import Sale
from erp_api.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
)

router = APIRouter(
    prefix="/products",
    tags=["Products"],
)


def image_url(path: str | None) -> str | None:
    if not path:
        return None
    if path.startswith(("http://", "https://")):
        return path
    return f"{settings.BASE_URL.rstrip('/')}/{path.lstrip('/')}"


def _to_response(product: Product) -> dict:
    return {
        "id": product.id,
        "sku": product.sku,
        "image": image_url(product.image),
        "name": product.name,
        "price": float(product.price),
        "quantity": product.quantity,
        "description": product.description,
    }


def _get_or_404(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )
    return product


def _ensure_unique_sku(db: Session, sku: str, exclude_id: int | None = None):
    query = db.query(Product.id).filter(Product.sku == sku)
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Product with this SKU already exists",
        )


@router.get("", response_model=list[ProductResponse])
def list_products(
    search: str | None = Query(None),
    db: Session = Depends(get_db),
):
    query = db.query(Product)

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Product.name.ilike(pattern), Product.sku.ilike(pattern)))

    return [_to_response(p) for p in query.order_by(Product.id.desc()).all()]


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return _to_response(_get_or_404(db, product_id))


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    product_data: ProductCreate,
    db: Session = Depends(get_db),
):
    _ensure_unique_sku(db, product_data.sku)

    product = Product(**product_data.model_dump())

    db.add(product)
    commit_or_conflict(db, "Product with this SKU already exists")
    db.refresh(product)

    return _to_response(product)


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    product_data: ProductUpdate,
    db: Session = Depends(get_db),
):
    product = _get_or_404(db, product_id)

    changes = product_data.model_dump(exclude_unset=True)

    if changes.get("sku") and changes["sku"] != product.sku:
        _ensure_unique_sku(db, changes["sku"], exclude_id=product.id)

    for field, value in changes.items():
        # Required columns keep their stored value when sent as null
        if value is None and field in ("sku", "name", "price", "quantity"):
            continue
        setattr(product, field, value)

    commit_or_conflict(db, "Product with this SKU already exists")
    db.refresh(product)

    return _to_response(product)


@router.delete("/{product_id}")
def delete_product(product_id: int, db: Session = Depends(get_db)):
    product = _get_or_404(db, product_id)

    in_use = (
        db.query(Order.id).filter(Order.product_id == product.id).first()
        or db.query(Sale.id).filter(Sale.product_id == product.id).first()
    )
    if in_use:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete product with associated orders or sales",
        )

    db.delete(product)
    commit_or_conflict(db, "Cannot delete product with associated orders or sales")

    return {"message": "Product deleted successfully"}
