# blueprints/core/errors.py
from __future__ import annotations
from typing import Any, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

M = TypeVar("M", bound=BaseModel)


class PlannerError(Exception):
    """Base of every business error raised by the planning services.

    Routes never catch these one by one: the core blueprint registers an
    app-wide handler that turns them into ``{"ok": False, "errors": [...]}``
    with ``status`` as the HTTP code.
    """
    code = "PLANNER_ERROR"
    status = 400

    def __init__(self, message: str = "", details: dict | list | None = None):
        super().__init__(message or self.code)
        self.message = message or self.code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            out["details"] = self.details
        return out


class ValidationError(PlannerError):
    code = "VALIDATION_ERROR"
    status = 400


class NotFoundError(PlannerError):
    code = "NOT_FOUND"
    status = 404


class ConflictError(PlannerError):
    code = "SLOT_CONFLICT"
    status = 409


class NoSubjectsAvailableError(PlannerError):
    code = "NO_SUBJECTS_AVAILABLE"
    status = 422


class NoSlotsConfiguredError(PlannerError):
    code = "NO_SLOTS_CONFIGURED"
    status = 422


class AllocationExhaustedError(PlannerError):
    # soft: only ever reported inside an autofill error list
    code = "ALLOCATION_EXHAUSTED"
    status = 200


def _pydantic_errors_safe(ve: SchemaValidationError) -> list[dict]:
    errs = ve.errors(include_url=False)
    for e in errs:
        if "ctx" in e and isinstance(e["ctx"], dict):
            e["ctx"] = {k: str(v) for k, v in e["ctx"].items()}
        if "input" in e:
            e["input"] = str(e["input"])
    return errs


def parse_payload(model: Type[M], payload: Any) -> M:
    """Validate a request body, re-raising pydantic failures as ValidationError."""
    try:
        return model.model_validate(payload or {})
    except SchemaValidationError as ve:
        raise ValidationError("Missing or invalid fields", details=_pydantic_errors_safe(ve)) from ve
