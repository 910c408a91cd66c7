"""Toll calculation service implementing the pricing rules."""

import re
from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Protocol, runtime_checkable

from toll_system.exceptions import MalformedPlateError, UnknownRoutePointError
from toll_system.models import TollBreakdown, TollResult
from toll_system.reference_data import (
    DEFAULT_SCHEDULE,
    RoutePoint,
    TollSchedule,
    current_rate_schedule,
    list_route_points,
)

HOLIDAY_REASON = "National Holiday (50% discount)"
NUMBER_PLATE_REASON = "Number plate discount (10%)"

# date.weekday(): Monday=0 ... Sunday=6
MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY = range(7)
WEEKEND_DAYS = (SATURDAY, SUNDAY)
EVEN_PLATE_DAYS = (MONDAY, WEDNESDAY)
ODD_PLATE_DAYS = (TUESDAY, THURSDAY)

_TRAILING_DIGITS = re.compile(r"\d+\Z", re.ASCII)
_CENT = Decimal("0.01")


def round_money(amount: Decimal) -> Decimal:
    """Round half-up to whole cents."""
    return amount.quantize(_CENT, rounding=ROUND_HALF_UP)


def last_plate_digit(number_plate: str) -> int:
    """
    Get the final digit of the plate's trailing digit run.

    Raises:
        MalformedPlateError: If the plate does not end in a digit
    """
    match = _TRAILING_DIGITS.search(number_plate)
    if not match:
        raise MalformedPlateError(number_plate)
    return int(match.group()[-1])


@runtime_checkable
class TollCalculatorInterface(Protocol):
    """
    Interface for toll calculation.
    This protocol defines the contract that all toll calculators must follow.
    """

    def calculate_toll(
        self,
        number_plate: str,
        entry_point: str,
        exit_point: str,
        entry_time: datetime,
        exit_time: datetime,
    ) -> TollResult:
        """Calculate the toll for a single trip."""
        ...

    def list_route_points(self) -> List[str]:
        """Names of the known route points."""
        ...

    def current_rate_schedule(self) -> dict:
        """Snapshot of the rates in use."""
        ...


class BaseTollCalculator(ABC):
    """Abstract base class for toll calculators bound to a schedule."""

    def __init__(self, schedule: TollSchedule = DEFAULT_SCHEDULE):
        self.schedule = schedule

    @abstractmethod
    def calculate_toll(
        self,
        number_plate: str,
        entry_point: str,
        exit_point: str,
        entry_time: datetime,
        exit_time: datetime,
    ) -> TollResult:
        """
        Calculate the toll for a single trip.
        Must be implemented by subclasses.
        """
        pass

    def list_route_points(self) -> List[str]:
        return list_route_points(self.schedule)

    def current_rate_schedule(self) -> dict:
        return current_rate_schedule(self.schedule)


class RingRoadTollCalculator(BaseTollCalculator):
    """
    Distance based toll calculator for the ring road.

    The toll is base rate plus a per-km distance charge. The distance
    charge is multiplied at weekends (by exit time). A holiday discount
    (by entry date) and then a number plate discount (by entry weekday
    and the plate's last digit) are taken off the running total in turn,
    so the plate discount is computed on the already discounted amount.
    Holds no state besides the immutable schedule, so one instance can be
    shared freely between threads.
    """

    def resolve_point(self, name: str) -> RoutePoint:
        """
        Find a route point by exact name.

        Raises:
            UnknownRoutePointError: If the name is not on the route table
        """
        point = self.schedule.find_point(name)
        if point is None:
            raise UnknownRoutePointError(name)
        return point

    def is_weekend(self, value: datetime) -> bool:
        return value.weekday() in WEEKEND_DAYS

    def is_holiday(self, value: datetime) -> bool:
        return self.schedule.is_holiday(value.date())

    def number_plate_discount(
        self, number_plate: str, entry_time: datetime, amount: Decimal
    ) -> Decimal:
        """
        Discount earned by the plate on the entry weekday.

        Even last digits qualify on Monday and Wednesday, odd ones on
        Tuesday and Thursday. Any other day earns nothing.
        """
        digit = last_plate_digit(number_plate)
        weekday = entry_time.weekday()
        is_even = digit % 2 == 0

        if weekday in EVEN_PLATE_DAYS and is_even:
            return amount * self.schedule.number_plate_discount_rate
        if weekday in ODD_PLATE_DAYS and not is_even:
            return amount * self.schedule.number_plate_discount_rate
        return Decimal("0")

    def calculate_toll(
        self,
        number_plate: str,
        entry_point: str,
        exit_point: str,
        entry_time: datetime,
        exit_time: datetime,
    ) -> TollResult:
        """
        Calculate the toll for a trip between two route points.

        Args:
            number_plate: Vehicle plate, e.g. ABC-123
            entry_point: Name of the entry point (case-sensitive)
            exit_point: Name of the exit point (case-sensitive)
            entry_time: When the vehicle entered
            exit_time: When the vehicle exited

        Returns:
            TollResult with the amount payable and its breakdown

        Raises:
            UnknownRoutePointError: If either point is not on the route table
            MalformedPlateError: If the plate has no trailing digits
        """
        entry_data = self.resolve_point(entry_point)
        exit_data = self.resolve_point(exit_point)

        distance_km = abs(exit_data.distance_km - entry_data.distance_km)
        base_toll = self.schedule.base_rate
        distance_charge = distance_km * self.schedule.distance_rate

        weekend_multiplier = Decimal("1")
        if self.is_weekend(exit_time):
            weekend_multiplier = self.schedule.weekend_multiplier
        distance_toll = distance_charge * weekend_multiplier

        total = base_toll + distance_toll
        discount_reasons: List[str] = []

        holiday_discount = Decimal("0")
        if self.is_holiday(entry_time):
            holiday_discount = total * self.schedule.holiday_discount_rate
            total -= holiday_discount
            discount_reasons.append(HOLIDAY_REASON)

        plate_discount = self.number_plate_discount(number_plate, entry_time, total)
        if plate_discount > 0:
            total -= plate_discount
            discount_reasons.append(NUMBER_PLATE_REASON)

        holiday_discount = round_money(holiday_discount)
        plate_discount = round_money(plate_discount)
        toll_amount = round_money(total)

        return TollResult(
            toll_amount=float(toll_amount),
            base_toll=float(round_money(base_toll)),
            distance_toll=float(round_money(distance_toll)),
            distance_km=float(distance_km),
            discount_applied=float(holiday_discount + plate_discount),
            discount_reasons=discount_reasons,
            breakdown=TollBreakdown(
                base_rate=float(round_money(base_toll)),
                distance_rate=float(round_money(distance_charge)),
                weekend_multiplier=float(weekend_multiplier),
                number_plate_discount=float(plate_discount),
                holiday_discount=float(holiday_discount),
                final_amount=float(toll_amount),
            ),
        )


# Default calculator, bound to the schedule from settings
_default_calculator: Optional[TollCalculatorInterface] = None


def get_toll_calculator() -> TollCalculatorInterface:
    """
    Get the default toll calculator instance (Singleton pattern).

    Returns:
        Toll calculator instance implementing TollCalculatorInterface
    """
    global _default_calculator
    if _default_calculator is None:
        from toll_system.config import settings

        _default_calculator = RingRoadTollCalculator(settings.get_schedule())
    return _default_calculator


def reset_toll_calculator() -> None:
    """Drop the default calculator so the next call rebinds to the current schedule."""
    global _default_calculator
    _default_calculator = None
