"""Settlement engine - bill/expense lifecycle and balance summaries"""

import uuid
from contextlib import contextmanager
from typing import Any, Iterator, List, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from friends_trip.domain.exceptions import ConflictError, NotFoundError, StorageError
from friends_trip.domain.models import BillSummary, ExpenseLine
from friends_trip.domain.settlement import compute_summary
from friends_trip.domain.validation import validate_bill, validate_expense
from friends_trip.infrastructure.database.models import Bill, Expense
from friends_trip.infrastructure.database.repositories import BillRepository, ExpenseRepository

EntityId = Union[uuid.UUID, str]


def _as_uuid(value: EntityId, entity: str) -> uuid.UUID:
    """Coerce an id; a malformed id can never match a row"""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise NotFoundError(entity, value)


def summarize_bill(db_bill: Bill) -> BillSummary:
    """Compute the summary of an already-loaded bill"""
    lines = [
        ExpenseLine(
            total_amount_cents=e.total_amount_cents,
            paid_by=e.paid_by,
            split_among=list(e.split_among or []),
        )
        for e in db_bill.expenses
    ]
    return compute_summary(db_bill.participants, lines)


class SettlementEngine:
    """
    Operations over bills and expenses, one storage transaction each.

    Every mutation validates its input before writing and commits once;
    any failure rolls the session back. Storage errors surface as
    StorageError and are never retried here.
    """

    def __init__(self, db: Session, bill_delete_policy: str = "cascade"):
        self.db = db
        self.bill_delete_policy = bill_delete_policy
        self.bills = BillRepository(db)
        self.expenses = ExpenseRepository(db)

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"Storage failure: {e}") from e
        except Exception:
            self.db.rollback()
            raise

    @contextmanager
    def _reading(self) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"Storage failure: {e}") from e

    def _load_bill(self, bill_id: EntityId) -> Bill:
        db_bill = self.bills.get_bill_by_id(_as_uuid(bill_id, "Bill"))
        if db_bill is None:
            raise NotFoundError("Bill", bill_id)
        return db_bill

    def _load_expense(self, expense_id: EntityId) -> Expense:
        db_expense = self.expenses.get_expense_by_id(_as_uuid(expense_id, "Expense"))
        if db_expense is None:
            raise NotFoundError("Expense", expense_id)
        return db_expense

    # Bills

    def create_bill(self, name: Any, participants: Any) -> Bill:
        bill_input = validate_bill(name, participants)
        with self._transaction():
            db_bill = self.bills.create_bill(bill_input)
        return db_bill

    def list_bills(self) -> List[Bill]:
        with self._reading():
            return self.bills.list_bills()

    def get_bill(self, bill_id: EntityId) -> Bill:
        with self._reading():
            return self._load_bill(bill_id)

    def delete_bill(self, bill_id: EntityId) -> None:
        """
        Delete a bill under the configured policy.

        Raises:
            NotFoundError: no such bill
            ConflictError: policy is "restrict" and the bill has expenses
        """
        with self._transaction():
            db_bill = self._load_bill(bill_id)
            if self.bill_delete_policy == "restrict" and db_bill.expenses:
                raise ConflictError(
                    f"Bill {bill_id} still has {len(db_bill.expenses)} expense(s)"
                )
            self.bills.delete_bill(db_bill)

    # Expenses

    def add_expense(
        self,
        bill_id: EntityId,
        description: Any,
        quantity: Any,
        total_amount_cents: Any,
        paid_by: Any,
        split_among: Any,
    ) -> Expense:
        with self._transaction():
            db_bill = self._load_bill(bill_id)
            expense_input = validate_expense(
                db_bill.participants, description, quantity, total_amount_cents, paid_by, split_among
            )
            db_expense = self.expenses.create_expense(db_bill.id, expense_input)
        return db_expense

    def update_expense(
        self,
        expense_id: EntityId,
        description: Any,
        quantity: Any,
        total_amount_cents: Any,
        paid_by: Any,
        split_among: Any,
    ) -> Expense:
        with self._transaction():
            db_expense = self._load_expense(expense_id)
            expense_input = validate_expense(
                db_expense.bill.participants, description, quantity, total_amount_cents, paid_by, split_among
            )
            self.expenses.update_expense(db_expense, expense_input)
        return db_expense

    def delete_expense(self, expense_id: EntityId) -> None:
        with self._transaction():
            db_expense = self._load_expense(expense_id)
            self.expenses.delete_expense(db_expense)

    # Settlement

    def compute_summary(self, bill_id: EntityId) -> BillSummary:
        with self._reading():
            return summarize_bill(self._load_bill(bill_id))
