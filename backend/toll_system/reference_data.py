"""Static reference data: route table, holiday calendar and toll rates."""

import calendar
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class RoutePoint(BaseModel):
    """A named tolling point with its distance from the origin."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Unique point name")
    distance_km: Decimal = Field(..., ge=0, description="Distance from Zero Point")


class Holiday(BaseModel):
    """A recurring national holiday (month and day, any year)."""
    model_config = ConfigDict(frozen=True)

    month: int = Field(..., ge=1, le=12)
    day: int = Field(..., ge=1, le=31)
    name: Optional[str] = None

    @property
    def month_day(self) -> str:
        return f"{self.month:02d}-{self.day:02d}"

    @property
    def label(self) -> str:
        """Display label, e.g. 'March 23'."""
        return f"{calendar.month_name[self.month]} {self.day}"

    def matches(self, value: date) -> bool:
        return value.month == self.month and value.day == self.day


class TollSchedule(BaseModel):
    """
    Immutable snapshot of everything the toll calculator depends on.
    Route points are kept in distance-ascending order.
    """
    model_config = ConfigDict(frozen=True)

    base_rate: Decimal = Field(..., ge=0)
    distance_rate: Decimal = Field(..., ge=0)
    weekend_multiplier: Decimal = Field(..., ge=1)
    number_plate_discount_rate: Decimal = Field(..., ge=0, le=1)
    holiday_discount_rate: Decimal = Field(..., ge=0, le=1)
    route_points: Tuple[RoutePoint, ...]
    holidays: Tuple[Holiday, ...] = ()

    def find_point(self, name: str) -> Optional[RoutePoint]:
        """Look up a route point by exact name."""
        for point in self.route_points:
            if point.name == name:
                return point
        return None

    def point_names(self) -> List[str]:
        return [point.name for point in self.route_points]

    def is_holiday(self, value: date) -> bool:
        return any(holiday.matches(value) for holiday in self.holidays)


BASE_RATE = Decimal("20")
DISTANCE_RATE = Decimal("0.2")
WEEKEND_MULTIPLIER = Decimal("1.5")
NUMBER_PLATE_DISCOUNT_RATE = Decimal("0.1")
HOLIDAY_DISCOUNT_RATE = Decimal("0.5")

DEFAULT_ROUTE_POINTS = (
    RoutePoint(name="Zero Point", distance_km=Decimal("0")),
    RoutePoint(name="NS Interchange", distance_km=Decimal("5")),
    RoutePoint(name="Ph4 Interchange", distance_km=Decimal("10")),
    RoutePoint(name="Ferozpur Interchange", distance_km=Decimal("17")),
    RoutePoint(name="Lake City Interchange", distance_km=Decimal("24")),
    RoutePoint(name="Raiwand Interchange", distance_km=Decimal("29")),
    RoutePoint(name="Bahria Interchange", distance_km=Decimal("34")),
)

DEFAULT_HOLIDAYS = (
    Holiday(month=3, day=23, name="Pakistan Day"),
    Holiday(month=8, day=14, name="Independence Day"),
    Holiday(month=12, day=25, name="Quaid-e-Azam Day"),
)

DEFAULT_SCHEDULE = TollSchedule(
    base_rate=BASE_RATE,
    distance_rate=DISTANCE_RATE,
    weekend_multiplier=WEEKEND_MULTIPLIER,
    number_plate_discount_rate=NUMBER_PLATE_DISCOUNT_RATE,
    holiday_discount_rate=HOLIDAY_DISCOUNT_RATE,
    route_points=DEFAULT_ROUTE_POINTS,
    holidays=DEFAULT_HOLIDAYS,
)


def list_route_points(schedule: TollSchedule = DEFAULT_SCHEDULE) -> List[str]:
    """Names of the known route points, nearest to the origin first."""
    return schedule.point_names()


def current_rate_schedule(schedule: TollSchedule = DEFAULT_SCHEDULE) -> dict:
    """Descriptive snapshot of the toll rates, as shown to clients."""
    return {
        "baseRate": float(schedule.base_rate),
        "distanceRate": float(schedule.distance_rate),
        "weekendMultiplier": float(schedule.weekend_multiplier),
        "numberPlateDiscountRate": float(schedule.number_plate_discount_rate),
        "holidayDiscountRate": float(schedule.holiday_discount_rate),
        "holidayDates": [holiday.label for holiday in schedule.holidays],
    }
