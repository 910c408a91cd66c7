"""Validation of toll calculation requests before they reach the calculator."""

import re
from datetime import datetime
from typing import List, NamedTuple, Optional

from pydantic import TypeAdapter, ValidationError

from toll_system.exceptions import TollRequestValidationError
from toll_system.models import TollCalculationRequest

NUMBER_PLATE_PATTERN = re.compile(r"[A-Z]{3}-\d{3}", re.ASCII)

REQUIRED_FIELDS = [
    "numberPlate",
    "entryPoint",
    "exitPoint",
    "entryDateTime",
    "exitDateTime",
]

# Unix epoch strings would otherwise be accepted as datetimes
ISO_DATE_PREFIX = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)

_datetime_adapter = TypeAdapter(datetime)


class ValidatedTrip(NamedTuple):
    """A toll request that passed validation, with parsed timestamps."""
    number_plate: str
    entry_point: str
    exit_point: str
    entry_time: datetime
    exit_time: datetime


def validate_number_plate(number_plate: str) -> bool:
    """Check a plate against the LLL-NNN format (e.g. ABC-123)."""
    return NUMBER_PLATE_PATTERN.fullmatch(number_plate) is not None


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, returning None if it is not one."""
    if not ISO_DATE_PREFIX.match(value):
        return None
    try:
        return _datetime_adapter.validate_python(value)
    except ValidationError:
        return None


def validate_toll_request(
    request: TollCalculationRequest, available_entry_points: List[str]
) -> ValidatedTrip:
    """
    Validate a toll calculation request.

    Checks run in a fixed order and the first failure is reported.

    Args:
        request: Incoming request
        available_entry_points: Names of the known route points

    Returns:
        ValidatedTrip with parsed entry and exit times

    Raises:
        TollRequestValidationError: If any check fails
    """
    if not all(
        [
            request.number_plate,
            request.entry_point,
            request.exit_point,
            request.entry_date_time,
            request.exit_date_time,
        ]
    ):
        raise TollRequestValidationError(
            "Missing required fields",
            details={"required": REQUIRED_FIELDS},
        )

    if not validate_number_plate(request.number_plate):
        raise TollRequestValidationError(
            "Invalid number plate format",
            "Number plate must be in format LLL-NNN (e.g., ABC-123)",
        )

    if request.entry_point.lower() == request.exit_point.lower():
        raise TollRequestValidationError(
            "Entry and exit points cannot be the same",
            "Please provide different entry and exit points",
        )

    if request.entry_point not in available_entry_points:
        raise TollRequestValidationError(
            "Invalid entry point",
            details={"availableEntryPoints": available_entry_points},
        )

    if request.exit_point not in available_entry_points:
        raise TollRequestValidationError(
            "Invalid exit point",
            details={"availableEntryPoints": available_entry_points},
        )

    entry_time = parse_timestamp(request.entry_date_time)
    exit_time = parse_timestamp(request.exit_date_time)
    if entry_time is None or exit_time is None:
        raise TollRequestValidationError(
            "Invalid date format",
            "Dates must be in ISO format (YYYY-MM-DDTHH:mm:ss.sssZ)",
        )

    # Naive and offset-aware datetimes cannot be compared
    if (entry_time.tzinfo is None) != (exit_time.tzinfo is None):
        raise TollRequestValidationError(
            "Invalid date format",
            "Entry and exit dates must both include a timezone offset or both omit it",
        )

    if exit_time < entry_time:
        raise TollRequestValidationError(
            "Invalid date range",
            "Exit date must be after entry date",
        )

    return ValidatedTrip(
        number_plate=request.number_plate,
        entry_point=request.entry_point,
        exit_point=request.exit_point,
        entry_time=entry_time,
        exit_time=exit_time,
    )
