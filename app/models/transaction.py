# app/models/transaction.py
import enum
import uuid
from sqlalchemy import Column, String, Float, Date, DateTime, Text, CheckConstraint, func
from app.core.database import Base

MAX_AMOUNT = 999_999_999


class TransactionType(str, enum.Enum):
    income = "income"
    expense = "expense"


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("type IN ('income', 'expense')", name="ck_transactions_type"),
        CheckConstraint("length(category) >= 1 AND length(category) <= 50", name="ck_transactions_category_length"),
        CheckConstraint(f"amount > 0 AND amount <= {MAX_AMOUNT}", name="ck_transactions_amount_range"),
        CheckConstraint("length(description) <= 500", name="ck_transactions_description_length"),
        CheckConstraint("length(source) <= 100", name="ck_transactions_source_length"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # Not updatable once created
    type = Column(String(10), nullable=False)
    category = Column(String(50), nullable=False)
    amount = Column(Float, nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False)
    source = Column(String(100), nullable=True)

    # Stamped by the database; an AFTER UPDATE trigger refreshes updated_at
    created_at = Column(DateTime, server_default=func.current_timestamp())
    updated_at = Column(DateTime, server_default=func.current_timestamp())

    def __repr__(self):
        return f"<Transaction type={self.type} amount={self.amount} date={self.date}>"
