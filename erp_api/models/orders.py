# erp_api/models/orders.py

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from erp_api.database import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    number = Column(String, unique=True, index=True, nullable=False)

    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    company_id = Column(
        Integer,
        ForeignKey("companies.id", ondelete="SET NULL"),
        nullable=True,
    )

    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)

    # Percentage, 0-100
    discount = Column(Numeric(5, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False)

    status = Column(String, nullable=False, default="PENDING")

    phone = Column(String, nullable=True)
    state = Column(String, nullable=True)
    city = Column(String, nullable=True)
    note = Column(String, nullable=True)

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
        Index("ix_orders_customer_created", "customer_id", "created_at"),
        CheckConstraint("quantity > 0", name="ck_order_quantity_positive"),
        CheckConstraint("discount >= 0 AND discount <= 100", name="ck_order_discount_range"),
    )
