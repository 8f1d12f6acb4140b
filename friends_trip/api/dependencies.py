"""Dependency injection for FastAPI endpoints"""

import uuid
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from friends_trip.config import settings
from friends_trip.infrastructure.database.session import get_db
from friends_trip.services.engine import SettlementEngine


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_settlement_engine(request: Request, db: Session = Depends(get_db)) -> SettlementEngine:
    """Provide a settlement engine bound to this request's session"""
    app_settings = getattr(request.app.state, "settings", settings)
    return SettlementEngine(db, bill_delete_policy=app_settings.bill_delete_policy)


def parse_entity_id(raw_id: str, entity: str) -> uuid.UUID:
    """Reject malformed path ids before touching storage"""
    try:
        return uuid.UUID(raw_id)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {entity} ID format")
