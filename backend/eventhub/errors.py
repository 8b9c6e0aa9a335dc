"""Typed errors raised by the engine.

Services raise these; the HTTP layer maps them to status codes in
``eventhub.main``. Nothing in the engine retries or swallows them.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Wire format for every engine error."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class EngineError(Exception):
    """Base class for all engine errors."""

    code = "ENGINE_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(code=self.code, message=self.message, details=self.details)


class ValidationError(EngineError):
    """Malformed or out-of-range input, rejected before reaching the store."""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        super().__init__(message, {"field": field})
        self.field = field


class ConstraintViolation(EngineError):
    """Uniqueness or referential integrity failure at commit time."""

    code = "CONSTRAINT_VIOLATION"

    def __init__(self, rule: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, {"rule": rule, **(details or {})})
        self.rule = rule


class DuplicateReview(ConstraintViolation):
    code = "DUPLICATE_REVIEW"

    def __init__(self, event_id: str, user_id: str):
        super().__init__(
            "unique_review",
            "You have already reviewed this event",
            {"event_id": event_id, "user_id": user_id},
        )


class Unauthorized(EngineError):
    """The identity lacks rights for the requested operation."""

    code = "UNAUTHORIZED"

    def __init__(self, entity_kind: str, operation: str, entity_id: Optional[str] = None):
        super().__init__(
            f"Not allowed to {operation.lower()} this {entity_kind.lower()}",
            {"entity": entity_kind, "operation": operation, "id": entity_id},
        )


class NotFound(EngineError):
    code = "NOT_FOUND"

    def __init__(self, entity_kind: str, entity_id: str):
        super().__init__(f"{entity_kind} not found", {"entity": entity_kind, "id": entity_id})


class InvalidTimeRange(EngineError):
    """An event must end strictly after it starts."""

    code = "INVALID_TIME_RANGE"

    def __init__(self, start_time, end_time):
        super().__init__(
            "End time must be after start time",
            {"start_time": start_time.isoformat(), "end_time": end_time.isoformat()},
        )


class IneligibleReview(EngineError):
    """Reviews are accepted only once the event has ended."""

    code = "INELIGIBLE_REVIEW"

    def __init__(self, event_id: str, end_time):
        super().__init__(
            "Reviews open once the event has ended",
            {"event_id": event_id, "end_time": end_time.isoformat()},
        )
