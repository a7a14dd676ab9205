"""Standardized API response helpers.

Ensures consistent response structure across all endpoints.
Successful responses include {"success": True, ...}; domain errors are
rendered by ballot_error_response() with a status code chosen by type.
"""

from typing import Optional

from fastapi.responses import JSONResponse

from exceptions import (
    BallotError,
    BallotStateError,
    CandidateNotFoundError,
    ConfirmationRequiredError,
    InsightBusyError,
    StorageError,
    ValidationError,
)

# Checked in order; first match wins
_STATUS_BY_ERROR = [
    (ValidationError, 400),
    (CandidateNotFoundError, 404),
    (BallotStateError, 409),
    (ConfirmationRequiredError, 409),
    (InsightBusyError, 409),
    (StorageError, 500),
]


def success_response(data: dict, **extras) -> dict:
    """Standard success response wrapper.

    Usage:
        return success_response({"ballot": session.snapshot()})

    Returns:
        {"success": True, **data, **extras}
    """
    return {"success": True, **data, **extras}


def list_response(
    items: list,
    key: str = "items",
    total: Optional[int] = None,
    **extras
) -> dict:
    """Standard list response with total count.

    Usage:
        return list_response(candidates, key="candidates")

    Returns:
        {"success": True, key: items, "total": N, **extras}
    """
    return {
        "success": True,
        key: items,
        "total": total if total is not None else len(items),
        **extras
    }


def error_response(message: str, **extras) -> dict:
    """Standard error response wrapper.

    Returns:
        {"success": False, "error": message, **extras}
    """
    return {"success": False, "error": message, **extras}


def status_for(error: BallotError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return 500


def ballot_error_response(error: BallotError, request_id: Optional[str] = None) -> JSONResponse:
    """Render a domain error as a JSON response with the matching status code"""
    body = error_response(
        error.message,
        error_type=type(error).__name__,
        context=error.context,
    )
    if request_id:
        body["request_id"] = request_id
    return JSONResponse(status_code=status_for(error), content=body)


def request_validation_response(errors: list, request_id: Optional[str] = None) -> JSONResponse:
    """Render FastAPI body/query validation failures in the standard error shape"""
    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", ""),
        }
        for error in errors
    ]
    message = "; ".join(
        f"{d['field']}: {d['message']}" if d["field"] else d["message"] for d in details
    ) or "Invalid request"
    body = error_response(message, error_type="RequestValidationError", details=details)
    if request_id:
        body["request_id"] = request_id
    return JSONResponse(status_code=400, content=body)
