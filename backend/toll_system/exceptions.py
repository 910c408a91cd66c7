"""Exceptions raised by the toll system."""

from typing import Any, Dict, Optional


class TollSystemError(Exception):
    """Base exception for the toll system."""


class TollCalculationError(TollSystemError, ValueError):
    """Raised when a toll cannot be calculated for the given inputs."""


class UnknownRoutePointError(TollCalculationError):
    """Raised when an entry or exit point is not on the route table."""

    def __init__(self, point_name: str):
        self.point_name = point_name
        super().__init__(f"Invalid entry point: {point_name}")


class MalformedPlateError(TollCalculationError):
    """Raised when a number plate has no trailing digits to inspect."""

    def __init__(self, number_plate: str):
        self.number_plate = number_plate
        super().__init__(f"Invalid number plate format: {number_plate}")


class TollRequestValidationError(TollSystemError, ValueError):
    """
    Raised when a toll calculation request fails validation.

    Attributes:
        error: Short error title returned to the client
        message: Human readable explanation
        details: Extra fields merged into the error response
    """

    def __init__(
        self,
        error: str,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.error = error
        self.message = message
        self.details = details or {}
        super().__init__(message or error)

    def to_dict(self) -> Dict[str, Any]:
        """Render the error as a failure envelope body."""
        body: Dict[str, Any] = {"success": False, "error": self.error}
        if self.message:
            body["message"] = self.message
        body.update(self.details)
        return body
