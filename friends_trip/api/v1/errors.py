"""Translate domain failures into HTTP errors with logging and metrics"""

import logging
from fastapi import HTTPException

from friends_trip.domain.exceptions import (
    ConflictError,
    DomainException,
    InvalidArgumentError,
    NotFoundError,
    StorageError,
)
from friends_trip.infrastructure.observability.metrics import record_operation, record_validation_failure


def to_http_exception(exc: DomainException, request_id: str, operation: str) -> HTTPException:
    """
    Map a domain exception to the HTTP error the caller should see.

    InvalidArgumentError → 400 with field detail, NotFoundError → 404,
    ConflictError → 409, StorageError → 503, any other domain error → 500.
    """
    extra = {"request_id": request_id, "operation": operation}

    if isinstance(exc, InvalidArgumentError):
        record_operation(operation, "invalid")
        record_validation_failure(exc.field)
        logging.warning(f"Invalid argument: {exc}", extra={**extra, "field": exc.field})
        return HTTPException(status_code=400, detail={"field": exc.field, "message": exc.message})

    if isinstance(exc, NotFoundError):
        record_operation(operation, "not_found")
        logging.warning(f"Not found: {exc}", extra=extra)
        return HTTPException(status_code=404, detail=f"{exc.entity} not found")

    if isinstance(exc, ConflictError):
        record_operation(operation, "conflict")
        logging.warning(f"Conflict: {exc}", extra=extra)
        return HTTPException(status_code=409, detail=str(exc))

    if isinstance(exc, StorageError):
        record_operation(operation, "storage_error")
        logging.error(f"Storage error: {exc}", extra=extra)
        return HTTPException(status_code=503, detail="Storage unavailable")

    return internal_error(exc, request_id, operation)


def internal_error(exc: Exception, request_id: str, operation: str) -> HTTPException:
    record_operation(operation, "error")
    logging.error(f"Unexpected error: {exc}", extra={"request_id": request_id, "operation": operation})
    return HTTPException(status_code=500, detail="Internal server error")
