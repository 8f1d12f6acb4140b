"""Precondition checks for bill and expense input"""

from typing import Any, List, Sequence

from friends_trip.domain.exceptions import InvalidArgumentError
from friends_trip.domain.models import BillInput, ExpenseInput

# Largest values the quantity (INTEGER) and amount (BIGINT) columns hold
MAX_QUANTITY = 2**31 - 1
MAX_AMOUNT_CENTS = 2**63 - 1


def _is_strict_int(value: Any) -> bool:
    # bool is an int subclass; True must not pass as quantity 1
    return isinstance(value, int) and not isinstance(value, bool)


def _clean_name(value: Any) -> str:
    """Return the trimmed string, or "" for anything that isn't a string"""
    if not isinstance(value, str):
        return ""
    return value.strip()


def _unique(names: List[str]) -> List[str]:
    """Drop repeated names, keeping first occurrence order"""
    return list(dict.fromkeys(names))


def validate_bill(name: Any, participants: Any) -> BillInput:
    """
    Normalize a bill creation request.

    Names are trimmed and duplicate participants collapsed. At least one
    participant must remain.

    Raises:
        InvalidArgumentError: on empty name, non-list participants, or
            any blank participant entry
    """
    clean_name = _clean_name(name)
    if not clean_name:
        raise InvalidArgumentError("name", "Bill name is required")

    if not isinstance(participants, (list, tuple)):
        raise InvalidArgumentError("participants", "Participants must be a list of names")

    cleaned = [_clean_name(p) for p in participants]
    if any(not p for p in cleaned):
        raise InvalidArgumentError("participants", "All participants must be non-empty strings")

    unique = _unique(cleaned)
    if not unique:
        raise InvalidArgumentError("participants", "At least one participant is required")

    return BillInput(name=clean_name, participants=unique)


def validate_expense(
    participants: Sequence[str],
    description: Any,
    quantity: Any,
    total_amount_cents: Any,
    paid_by: Any,
    split_among: Any,
) -> ExpenseInput:
    """
    Check expense fields against the owning bill's participants.

    Checks run in a fixed order and the first failure wins:
    description, quantity, total_amount_cents, paid_by, split_among.

    Raises:
        InvalidArgumentError: naming the first field that fails
    """
    clean_description = _clean_name(description)
    if not clean_description:
        raise InvalidArgumentError("description", "Description is required")

    if not _is_strict_int(quantity) or quantity < 1:
        raise InvalidArgumentError("quantity", "Quantity must be a positive integer")
    if quantity > MAX_QUANTITY:
        raise InvalidArgumentError("quantity", f"Quantity must not exceed {MAX_QUANTITY}")

    if not _is_strict_int(total_amount_cents) or total_amount_cents <= 0:
        raise InvalidArgumentError(
            "total_amount_cents", "Total amount must be a positive number of cents"
        )
    if total_amount_cents > MAX_AMOUNT_CENTS:
        raise InvalidArgumentError(
            "total_amount_cents", f"Total amount must not exceed {MAX_AMOUNT_CENTS} cents"
        )

    members = set(participants)

    payer = _clean_name(paid_by)
    if not payer:
        raise InvalidArgumentError("paid_by", "Payer is required")
    if payer not in members:
        raise InvalidArgumentError("paid_by", f"'{payer}' is not a participant of this bill")

    if not isinstance(split_among, (list, tuple)) or not split_among:
        raise InvalidArgumentError("split_among", "Split must include at least one participant")

    split = [_clean_name(name) for name in split_among]
    if any(not name for name in split):
        raise InvalidArgumentError("split_among", "All split entries must be non-empty strings")

    outsiders = [name for name in split if name not in members]
    if outsiders:
        raise InvalidArgumentError(
            "split_among", f"Not participants of this bill: {', '.join(outsiders)}"
        )

    return ExpenseInput(
        description=clean_description,
        quantity=quantity,
        total_amount_cents=total_amount_cents,
        paid_by=payer,
        split_among=_unique(split),
    )
