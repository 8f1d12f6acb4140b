"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from typing import Any, List, Optional


# Request fields stay untyped: the settlement engine checks them after the
# bill lookup, in a fixed order, and reports the offending field


class BillCreateRequest(BaseModel):
    """Request body for POST /v1/bills"""

    name: Any = Field(None, description="Bill display name")
    participants: Any = Field(None, description="Participant names, first occurrence order kept")


class ExpenseRequest(BaseModel):
    """Request body for POST /v1/bills/{bill_id}/expenses and PUT /v1/expenses/{expense_id}"""

    description: Any = None
    quantity: Any = Field(1, description="Informational; total already includes it")
    total_amount_cents: Any = Field(None, description="Full charged amount in cents")
    paid_by: Any = None
    split_among: Any = None


class ExpenseResponse(BaseModel):
    """Single expense within a bill"""

    expense_id: str
    bill_id: str
    description: str
    quantity: int
    total_amount_cents: int
    paid_by: str
    split_among: List[str]
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class BillResponse(BaseModel):
    """Bill with its expenses"""

    bill_id: str
    name: str
    participants: List[str]
    expenses: List[ExpenseResponse]
    created_at: Optional[str] = None


class ParticipantSummary(BaseModel):
    """Derived totals for one participant"""

    name: str
    total_paid_cents: int
    total_owed_cents: int
    balance_cents: int
    status: str  # owed | owes | settled


class SummaryResponse(BaseModel):
    """Response for GET /v1/bills/{bill_id}/summary"""

    bill_id: str
    total_amount_cents: int
    participants: List[ParticipantSummary]
