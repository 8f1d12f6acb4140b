"""Data access layer for bills and expenses"""

import uuid
from typing import List, Optional
from sqlalchemy.orm import Session, selectinload
from friends_trip.infrastructure.database.models import Bill, Expense
from friends_trip.domain.models import BillInput, ExpenseInput


class BillRepository:
    """Repository for bills"""

    def __init__(self, db: Session):
        self.db = db

    def create_bill(self, bill_input: BillInput) -> Bill:
        """Persist a new bill with no expenses"""
        db_bill = Bill(name=bill_input.name, participants=list(bill_input.participants))
        self.db.add(db_bill)
        self.db.flush()  # Get ID without committing
        return db_bill

    def get_bill_by_id(self, bill_id: uuid.UUID) -> Optional[Bill]:
        """Fetch bill with its expenses"""
        return (
            self.db.query(Bill)
            .options(selectinload(Bill.expenses))
            .filter(Bill.id == bill_id)
            .first()
        )

    def list_bills(self) -> List[Bill]:
        """Fetch every bill, oldest first, expenses included"""
        return (
            self.db.query(Bill)
            .options(selectinload(Bill.expenses))
            .order_by(Bill.seq.asc())
            .all()
        )

    def delete_bill(self, db_bill: Bill) -> None:
        # ORM cascade removes the bill's expenses as well
        self.db.delete(db_bill)
        self.db.flush()


class ExpenseRepository:
    """Repository for expenses"""

    def __init__(self, db: Session):
        self.db = db

    def create_expense(self, bill_id: uuid.UUID, expense_input: ExpenseInput) -> Expense:
        """Persist an expense under an existing bill"""
        db_expense = Expense(
            bill_id=bill_id,
            description=expense_input.description,
            quantity=expense_input.quantity,
            total_amount_cents=expense_input.total_amount_cents,
            paid_by=expense_input.paid_by,
            split_among=list(expense_input.split_among),
        )
        self.db.add(db_expense)
        self.db.flush()
        return db_expense

    def get_expense_by_id(self, expense_id: uuid.UUID) -> Optional[Expense]:
        return (
            self.db.query(Expense)
            .filter(Expense.id == expense_id)
            .first()
        )

    def update_expense(self, db_expense: Expense, expense_input: ExpenseInput) -> Expense:
        """Overwrite the mutable fields; bill_id stays"""
        db_expense.description = expense_input.description
        db_expense.quantity = expense_input.quantity
        db_expense.total_amount_cents = expense_input.total_amount_cents
        db_expense.paid_by = expense_input.paid_by
        db_expense.split_among = list(expense_input.split_among)
        self.db.flush()
        return db_expense

    def delete_expense(self, db_expense: Expense) -> None:
        self.db.delete(db_expense)
        self.db.flush()
