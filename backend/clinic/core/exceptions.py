"""
Clinic-specific exceptions.

These exceptions are raised by the query and mutation services and are
translated to HTTP responses by the handlers in
``clinic.core.exception_handlers``.
"""

from __future__ import annotations

from typing import Any


class ClinicError(Exception):
    """Base exception for all clinic service errors."""

    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message}


class NotFoundError(ClinicError):
    """Raised when an update or delete targets an identifier that does not exist."""

    status_code = 404

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} '{entity_id}' not found")


class ReferentialViolationError(ClinicError):
    """
    Raised when a write names a foreign identifier that does not exist.

    Checked before anything is written, so no partial row is ever created.
    """

    status_code = 409

    def __init__(self, entity: str, field: str, value: str):
        self.entity = entity
        self.field = field
        self.value = value
        super().__init__(f"{field} '{value}' does not reference an existing {entity}")


class InvalidWorkflowError(ClinicError):
    """Raised when a submitted workflow cannot be stored as given."""

    status_code = 422

    def __init__(self, message: str, duplicate_ids: list[str] | None = None):
        self.duplicate_ids = duplicate_ids or []
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.duplicate_ids:
            result["duplicate_ids"] = self.duplicate_ids
        return result
