"""Expense endpoints - add under a bill, update and delete by id"""

from fastapi import APIRouter, Depends, Request, Response

from friends_trip.api.v1.schemas import ExpenseRequest, ExpenseResponse
from friends_trip.api.v1.bills import expense_to_response
from friends_trip.api.v1.errors import internal_error, to_http_exception
from friends_trip.api.dependencies import get_request_id, get_settlement_engine, parse_entity_id
from friends_trip.domain.exceptions import DomainException
from friends_trip.infrastructure.observability.logging import log_bill_event
from friends_trip.infrastructure.observability.metrics import record_expense_amount, record_operation
from friends_trip.services.engine import SettlementEngine

router = APIRouter()


@router.post("/bills/{bill_id}/expenses", response_model=ExpenseResponse, status_code=201)
def add_expense(
    bill_id: str,
    request_body: ExpenseRequest,
    request: Request,
    engine: SettlementEngine = Depends(get_settlement_engine),
):
    """
    Record an expense on a bill.

    Payer and every split member must be participants of the bill. The
    amount is the full charged total; quantity is stored as given.
    """
    request_id = get_request_id(request)
    bill_uuid = parse_entity_id(bill_id, "Bill")

    try:
        expense = engine.add_expense(
            bill_uuid,
            description=request_body.description,
            quantity=request_body.quantity,
            total_amount_cents=request_body.total_amount_cents,
            paid_by=request_body.paid_by,
            split_among=request_body.split_among,
        )
    except DomainException as e:
        raise to_http_exception(e, request_id, "add_expense")
    except Exception as e:
        raise internal_error(e, request_id, "add_expense")

    record_operation("add_expense")
    record_expense_amount(expense.total_amount_cents)
    log_bill_event(
        request_id,
        "expense_added",
        bill_id=bill_uuid,
        expense_id=expense.id,
        total_amount_cents=expense.total_amount_cents,
    )
    return expense_to_response(expense)


@router.put("/expenses/{expense_id}", response_model=ExpenseResponse)
def update_expense(
    expense_id: str,
    request_body: ExpenseRequest,
    request: Request,
    engine: SettlementEngine = Depends(get_settlement_engine),
):
    """Replace an expense's fields; it stays on its original bill"""
    request_id = get_request_id(request)
    expense_uuid = parse_entity_id(expense_id, "Expense")

    try:
        expense = engine.update_expense(
            expense_uuid,
            description=request_body.description,
            quantity=request_body.quantity,
            total_amount_cents=request_body.total_amount_cents,
            paid_by=request_body.paid_by,
            split_among=request_body.split_among,
        )
    except DomainException as e:
        raise to_http_exception(e, request_id, "update_expense")
    except Exception as e:
        raise internal_error(e, request_id, "update_expense")

    record_operation("update_expense")
    log_bill_event(request_id, "expense_updated", bill_id=expense.bill_id, expense_id=expense.id)
    return expense_to_response(expense)


@router.delete("/expenses/{expense_id}", status_code=204)
def delete_expense(
    expense_id: str,
    request: Request,
    engine: SettlementEngine = Depends(get_settlement_engine),
):
    request_id = get_request_id(request)
    expense_uuid = parse_entity_id(expense_id, "Expense")

    try:
        engine.delete_expense(expense_uuid)
    except DomainException as e:
        raise to_http_exception(e, request_id, "delete_expense")
    except Exception as e:
        raise internal_error(e, request_id, "delete_expense")

    record_operation("delete_expense")
    log_bill_event(request_id, "expense_deleted", expense_id=expense_uuid)
    return Response(status_code=204)
