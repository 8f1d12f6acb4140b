"""Settlement engine core - derives per-participant balances from expenses"""

from typing import Dict, Iterable, List, Sequence

from friends_trip.domain.models import BillSummary, ExpenseLine, ParticipantBalance


def split_evenly(
    amount_cents: int,
    split_among: Sequence[str],
    participant_order: Sequence[str],
) -> Dict[str, int]:
    """
    Divide an amount evenly among members in whole cents.

    Requirements:
    - Shares always sum to exactly amount_cents
    - Leftover cents go one each to the first members, ordered by their
      position in the bill's participant list (not the split list)
    - Names missing from participant_order sort after known participants

    Example:
        10000 cents among A, B, C → {A: 3334, B: 3333, C: 3333}
        10000 // 3 = 3333 base, remainder 1 goes to A
    """
    if not split_among:
        return {}

    position = {name: i for i, name in enumerate(participant_order)}
    members = sorted(
        dict.fromkeys(split_among),
        key=lambda name: position.get(name, len(position)),
    )

    base_amount = amount_cents // len(members)
    remainder = amount_cents % len(members)

    return {
        name: base_amount + (1 if i < remainder else 0)
        for i, name in enumerate(members)
    }


def compute_summary(
    participants: Sequence[str],
    expenses: Iterable[ExpenseLine],
) -> BillSummary:
    """
    Main entry point: total paid, total owed and net balance per participant.

    Balance > 0 means the group owes this participant; < 0 means the
    participant owes the group. Quantity plays no part: totals are already
    multiplied out. Pure function of its inputs, safe to recompute.
    """
    balances: Dict[str, ParticipantBalance] = {
        name: ParticipantBalance(name=name) for name in participants
    }
    total_amount = 0

    for expense in expenses:
        total_amount += expense.total_amount_cents

        if expense.paid_by in balances:
            balances[expense.paid_by].total_paid_cents += expense.total_amount_cents

        shares = split_evenly(expense.total_amount_cents, expense.split_among, participants)
        for name, share in shares.items():
            if name in balances:
                balances[name].total_owed_cents += share

    ordered: List[ParticipantBalance] = [balances[name] for name in dict.fromkeys(participants)]
    return BillSummary(total_amount_cents=total_amount, balances=ordered)
