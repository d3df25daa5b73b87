# erp_api/models/transactions.py

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


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)

    type = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    bank = Column(String, nullable=False)
    check_number = Column(String, nullable=True)
    status = Column(String, nullable=False, default="PENDING")
    category = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    received_payment = Column(Numeric(12, 2), nullable=False, default=0)
    description = Column(Text, nullable=True)
    created_by = Column(String, nullable=True)

    company_id = Column(
        Integer,
        ForeignKey("companies.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    company = relationship("Company")

    __table_args__ = (
        Index("ix_transactions_status_type", "status", "type"),
        CheckConstraint("amount > 0", name="ck_transaction_amount_positive"),
    )
