# erp_api/models/sales.py

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from erp_api.database import Base


class Sale(Base):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(String, unique=True, index=True, nullable=False)

    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    company_id = Column(
        Integer,
        ForeignKey("companies.id", ondelete="SET NULL"),
        nullable=True,
    )

    date = Column(Date, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)

    # Discount tier code, see the "discount" enum family
    discount = Column(String, nullable=False, default="NO_DISCOUNT")
    amount = Column(Numeric(12, 2), nullable=False)

    payment_method = Column(String, nullable=False, default="CASH")
    status = Column(String, nullable=False, default="COMPLETED")
    notes = Column(Text, nullable=True)
    created_by = Column(String, nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    customer = relationship("Customer")
    product = relationship("Product")
    company = relationship("Company")

    __table_args__ = (
        Index("ix_sales_product_created", "product_id", "created_at"),
        CheckConstraint("quantity > 0", name="ck_sale_quantity_positive"),
    )
