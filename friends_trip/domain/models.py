"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class BillInput:
    """Validated bill creation request"""

    name: str
    participants: List[str]


@dataclass
class ExpenseInput:
    """Validated expense fields, ready to persist"""

    description: str
    quantity: int
    total_amount_cents: int
    paid_by: str
    split_among: List[str]


@dataclass
class ExpenseLine:
    """The parts of an expense the settlement math needs"""

    total_amount_cents: int
    paid_by: str
    split_among: List[str]


@dataclass
class ParticipantBalance:
    """Derived totals for one participant"""

    name: str
    total_paid_cents: int = 0
    total_owed_cents: int = 0

    @property
    def balance_cents(self) -> int:
        return self.total_paid_cents - self.total_owed_cents

    @property
    def status(self) -> str:
        if self.balance_cents > 0:
            return "owed"
        if self.balance_cents < 0:
            return "owes"
        return "settled"


@dataclass
class BillSummary:
    """Output of the settlement computation, in participant order"""

    total_amount_cents: int
    balances: List[ParticipantBalance] = field(default_factory=list)

    def for_participant(self, name: str) -> ParticipantBalance:
        for balance in self.balances:
            if balance.name == name:
                return balance
        raise KeyError(name)
