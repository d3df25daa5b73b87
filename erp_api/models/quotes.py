# erp_api/models/quotes.py

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from erp_api.database import Base


class Quote(Base):
    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True, index=True)
    number = Column(String, unique=True, index=True, nullable=False)

    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    company_id = Column(
        Integer,
        ForeignKey("companies.id", ondelete="SET NULL"),
        nullable=True,
    )

    date = Column(Date, nullable=False)
    expire_date = Column(Date, nullable=False)
    year = Column(Integer, nullable=True)
    currency = Column(String, nullable=False)
    status = Column(String, nullable=False, default="DRAFT")
    paid = Column(Numeric(12, 2), nullable=False, default=0)
    note = Column(Text, nullable=True)
    tax = Column(Numeric(12, 2), nullable=False, default=0)
    created_by = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    customer = relationship("Customer")
    company = relationship("Company")

    items = relationship(
        "QuoteItem",
        back_populates="quote",
        cascade="all, delete-orphan",
        order_by="QuoteItem.id",
    )

    __table_args__ = (
        Index("ix_quotes_customer_date", "customer_id", "date"),
    )
