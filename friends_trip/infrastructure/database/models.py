"""SQLAlchemy ORM models for bills and their expenses"""

import uuid
from sqlalchemy import Column, BigInteger, DateTime, ForeignKey, Integer, Text, JSON, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Bill(Base):
    """Named group expense ledger with a fixed participant list"""

    __tablename__ = "bill"

    # Insertion sequence; created_at alone ties within the same second
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(Uuid(as_uuid=True), nullable=False, unique=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    participants = Column(JSON, nullable=False)  # ordered list of names
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    expenses = relationship(
        "Expense",
        back_populates="bill",
        cascade="all, delete-orphan",
        order_by="Expense.seq",
    )


class Expense(Base):
    """Single charge within a bill"""

    __tablename__ = "expense"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(Uuid(as_uuid=True), nullable=False, unique=True, default=uuid.uuid4)
    bill_id = Column(Uuid(as_uuid=True), ForeignKey("bill.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    total_amount_cents = Column(BigInteger, nullable=False)
    paid_by = Column(Text, nullable=False)
    split_among = Column(JSON, nullable=False)  # list of participant names
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    bill = relationship("Bill", back_populates="expenses")
