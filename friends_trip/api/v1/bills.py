"""/v1/bills - create, list, fetch and delete bills; bill summaries"""

from fastapi import APIRouter, Depends, Request, Response

from friends_trip.api.v1.schemas import (
    BillCreateRequest,
    BillResponse,
    ExpenseResponse,
    ParticipantSummary,
    SummaryResponse,
)
from friends_trip.api.v1.errors import internal_error, to_http_exception
from friends_trip.api.dependencies import get_request_id, get_settlement_engine, parse_entity_id
from friends_trip.domain.exceptions import DomainException
from friends_trip.infrastructure.database.models import Bill, Expense
from friends_trip.infrastructure.observability.logging import log_bill_event
from friends_trip.infrastructure.observability.metrics import record_operation
from friends_trip.services.engine import SettlementEngine

router = APIRouter()


def _isoformat(value) -> str | None:
    return value.isoformat() if value is not None else None


def expense_to_response(expense: Expense) -> ExpenseResponse:
    return ExpenseResponse(
        expense_id=str(expense.id),
        bill_id=str(expense.bill_id),
        description=expense.description,
        quantity=expense.quantity,
        total_amount_cents=expense.total_amount_cents,
        paid_by=expense.paid_by,
        split_among=list(expense.split_among or []),
        created_at=_isoformat(expense.created_at),
        updated_at=_isoformat(expense.updated_at),
    )


def bill_to_response(bill: Bill) -> BillResponse:
    return BillResponse(
        bill_id=str(bill.id),
        name=bill.name,
        participants=list(bill.participants),
        expenses=[expense_to_response(e) for e in bill.expenses],
        created_at=_isoformat(bill.created_at),
    )


@router.post("/bills", response_model=BillResponse, status_code=201)
def create_bill(
    request_body: BillCreateRequest,
    request: Request,
    engine: SettlementEngine = Depends(get_settlement_engine),
):
    """
    Create a bill for a fixed group of participants.

    Participant names are trimmed and duplicates dropped; at least one
    participant is required.
    """
    request_id = get_request_id(request)

    try:
        bill = engine.create_bill(request_body.name, request_body.participants)
    except DomainException as e:
        raise to_http_exception(e, request_id, "create_bill")
    except Exception as e:
        raise internal_error(e, request_id, "create_bill")

    record_operation("create_bill")
    log_bill_event(request_id, "bill_created", bill_id=bill.id, participant_count=len(bill.participants))
    return bill_to_response(bill)


@router.get("/bills", response_model=list[BillResponse])
def list_bills(request: Request, engine: SettlementEngine = Depends(get_settlement_engine)):
    """Return every bill with its expenses"""
    request_id = get_request_id(request)

    try:
        bills = engine.list_bills()
    except DomainException as e:
        raise to_http_exception(e, request_id, "list_bills")
    except Exception as e:
        raise internal_error(e, request_id, "list_bills")

    record_operation("list_bills")
    return [bill_to_response(b) for b in bills]


@router.get("/bills/{bill_id}", response_model=BillResponse)
def get_bill(bill_id: str, request: Request, engine: SettlementEngine = Depends(get_settlement_engine)):
    request_id = get_request_id(request)
    bill_uuid = parse_entity_id(bill_id, "Bill")

    try:
        bill = engine.get_bill(bill_uuid)
    except DomainException as e:
        raise to_http_exception(e, request_id, "get_bill")
    except Exception as e:
        raise internal_error(e, request_id, "get_bill")

    record_operation("get_bill")
    return bill_to_response(bill)


@router.delete("/bills/{bill_id}", status_code=204)
def delete_bill(bill_id: str, request: Request, engine: SettlementEngine = Depends(get_settlement_engine)):
    """
    Delete a bill.

    With the default "cascade" policy the bill's expenses go with it; under
    "restrict" a bill that still has expenses returns 409.
    """
    request_id = get_request_id(request)
    bill_uuid = parse_entity_id(bill_id, "Bill")

    try:
        engine.delete_bill(bill_uuid)
    except DomainException as e:
        raise to_http_exception(e, request_id, "delete_bill")
    except Exception as e:
        raise internal_error(e, request_id, "delete_bill")

    record_operation("delete_bill")
    log_bill_event(request_id, "bill_deleted", bill_id=bill_uuid, policy=engine.bill_delete_policy)
    return Response(status_code=204)


@router.get("/bills/{bill_id}/summary", response_model=SummaryResponse)
def get_bill_summary(bill_id: str, request: Request, engine: SettlementEngine = Depends(get_settlement_engine)):
    """
    Per-participant totals derived from the bill's current expenses.

    Returns:
        total paid, total owed and balance in cents for each participant;
        positive balance means the group owes them
    """
    request_id = get_request_id(request)
    bill_uuid = parse_entity_id(bill_id, "Bill")

    try:
        summary = engine.compute_summary(bill_uuid)
    except DomainException as e:
        raise to_http_exception(e, request_id, "compute_summary")
    except Exception as e:
        raise internal_error(e, request_id, "compute_summary")

    record_operation("compute_summary")
    return SummaryResponse(
        bill_id=str(bill_uuid),
        total_amount_cents=summary.total_amount_cents,
        participants=[
            ParticipantSummary(
                name=b.name,
                total_paid_cents=b.total_paid_cents,
                total_owed_cents=b.total_owed_cents,
                balance_cents=b.balance_cents,
                status=b.status,
            )
            for b in summary.balances
        ],
    )
