"""Unit tests for toll calculation."""

import pytest
from datetime import datetime, timedelta, timezone
from itertools import permutations
from pydantic import ValidationError

from toll_system.exceptions import MalformedPlateError, UnknownRoutePointError
from toll_system.models import TollResult
from toll_system.reference_data import (
    DEFAULT_SCHEDULE,
    current_rate_schedule,
    list_route_points,
)
from toll_system.services.toll_calculator import (
    HOLIDAY_REASON,
    NUMBER_PLATE_REASON,
    RingRoadTollCalculator,
    TollCalculatorInterface,
    get_toll_calculator,
    last_plate_digit,
)

FRIDAY = datetime(2025, 7, 11, 8, 0)
SATURDAY = datetime(2025, 7, 12, 8, 0)
SUNDAY = datetime(2025, 7, 13, 8, 0)
MONDAY = datetime(2025, 7, 7, 8, 0)
TUESDAY = datetime(2025, 7, 8, 8, 0)
WEDNESDAY = datetime(2025, 7, 9, 8, 0)
THURSDAY = datetime(2025, 7, 10, 8, 0)
HOLIDAY_MONDAY = datetime(2026, 3, 23, 8, 0)
ONE_HOUR = timedelta(hours=1)


class TestTollCalculator:
    """Test toll calculation logic."""

    def setup_method(self):
        """Setup test fixtures."""
        self.calculator = RingRoadTollCalculator()

    def trip(self, plate="ABC-123", entry_time=FRIDAY, exit_time=None,
             entry_point="Zero Point", exit_point="NS Interchange"):
        return self.calculator.calculate_toll(
            plate, entry_point, exit_point, entry_time, exit_time or entry_time + ONE_HOUR
        )

    def test_weekday_trip_without_discounts(self):
        """Friday trip pays base plus distance only."""
        result = self.trip()
        assert result.distance_km == 5
        assert result.base_toll == 20.0
        assert result.distance_toll == 1.0
        assert result.breakdown.weekend_multiplier == 1
        assert result.discount_applied == 0
        assert result.discount_reasons == []
        assert result.toll_amount == 21.0
        assert result.breakdown.final_amount == 21.0

    def test_weekend_multiplier_applies_to_distance_toll(self):
        """Saturday trip multiplies only the distance toll by 1.5."""
        result = self.trip(entry_time=SATURDAY)
        assert result.breakdown.weekend_multiplier == 1.5
        assert result.breakdown.distance_rate == 1.0
        assert result.distance_toll == 1.5
        assert result.toll_amount == 21.5

    def test_holiday_discount_halves_the_toll(self):
        """Entry on 23 March (a Sunday in 2025) with a Monday exit."""
        result = self.trip(
            entry_time=datetime(2025, 3, 23, 23, 0),
            exit_time=datetime(2025, 3, 24, 1, 0),
        )
        assert result.breakdown.weekend_multiplier == 1
        assert result.breakdown.holiday_discount == 10.5
        assert result.breakdown.number_plate_discount == 0
        assert result.discount_reasons == [HOLIDAY_REASON]
        assert result.toll_amount == 10.5

    def test_holiday_ignores_year(self):
        for year in (2020, 2025, 2031):
            result = self.trip(entry_time=datetime(year, 8, 14, 12, 0), exit_time=datetime(year, 8, 14, 12, 30))
            assert HOLIDAY_REASON in result.discount_reasons

    def test_even_plate_discount_on_monday(self):
        result = self.trip(plate="ABC-124", entry_time=MONDAY)
        assert result.breakdown.number_plate_discount == 2.1
        assert result.discount_reasons == [NUMBER_PLATE_REASON]
        assert result.toll_amount == 18.9

    def test_even_plate_discount_on_wednesday(self):
        result = self.trip(plate="ABC-120", entry_time=WEDNESDAY)
        assert result.toll_amount == 18.9

    def test_odd_plate_discount_on_tuesday_and_thursday(self):
        assert self.trip(plate="ABC-123", entry_time=TUESDAY).toll_amount == 18.9
        assert self.trip(plate="ABC-125", entry_time=THURSDAY).toll_amount == 18.9

    def test_mismatched_parity_gets_no_plate_discount(self):
        assert self.trip(plate="ABC-123", entry_time=MONDAY).toll_amount == 21.0
        assert self.trip(plate="ABC-124", entry_time=TUESDAY).toll_amount == 21.0
        assert self.trip(plate="ABC-121", entry_time=WEDNESDAY).toll_amount == 21.0
        assert self.trip(plate="ABC-122", entry_time=THURSDAY).toll_amount == 21.0

    @pytest.mark.parametrize("plate", ["ABC-123", "ABC-124"])
    @pytest.mark.parametrize("entry_time", [FRIDAY, SATURDAY, SUNDAY])
    def test_no_plate_discount_friday_to_sunday(self, plate, entry_time):
        result = self.trip(plate=plate, entry_time=entry_time)
        assert result.breakdown.number_plate_discount == 0
        assert NUMBER_PLATE_REASON not in result.discount_reasons

    def test_discounts_stack_on_running_total(self):
        """Plate discount is 10% of the holiday-discounted amount."""
        result = self.trip(plate="ABC-124", entry_time=HOLIDAY_MONDAY)
        assert result.breakdown.holiday_discount == 10.5
        assert result.breakdown.number_plate_discount == 1.05
        assert result.discount_applied == 11.55
        assert result.discount_reasons == [HOLIDAY_REASON, NUMBER_PLATE_REASON]
        assert result.toll_amount == 9.45

    def test_rounding_is_half_up(self):
        """Ph4 to Ferozpur (7 km), holiday Monday entry, Saturday exit."""
        result = self.trip(
            plate="ABC-124",
            entry_point="Ph4 Interchange",
            exit_point="Ferozpur Interchange",
            entry_time=HOLIDAY_MONDAY,
            exit_time=datetime(2026, 3, 28, 9, 0),
        )
        assert result.breakdown.distance_rate == 1.4
        assert result.distance_toll == 2.1
        assert result.breakdown.holiday_discount == 11.05
        # 1.105 and 9.945 round up
        assert result.breakdown.number_plate_discount == 1.11
        assert result.toll_amount == 9.95
        assert result.discount_applied == 12.16

    def test_weekend_is_decided_by_exit_time(self):
        result = self.trip(entry_time=datetime(2025, 7, 11, 23, 0), exit_time=datetime(2025, 7, 12, 0, 30))
        assert result.breakdown.weekend_multiplier == 1.5
        assert result.toll_amount == 21.5

        result = self.trip(entry_time=datetime(2025, 7, 13, 23, 0), exit_time=datetime(2025, 7, 14, 0, 30))
        assert result.breakdown.weekend_multiplier == 1
        assert result.toll_amount == 21.0

    def test_discounts_are_decided_by_entry_time(self):
        """Monday entry with a Tuesday exit still earns the even plate discount."""
        result = self.trip(
            plate="ABC-124",
            entry_time=datetime(2025, 7, 7, 23, 30),
            exit_time=datetime(2025, 7, 8, 0, 30),
        )
        assert result.toll_amount == 18.9

        result = self.trip(
            entry_time=datetime(2025, 3, 22, 23, 30),
            exit_time=datetime(2025, 3, 23, 0, 30),
        )
        assert HOLIDAY_REASON not in result.discount_reasons

    def test_timezone_aware_timestamps_use_their_own_date(self):
        pkt = timezone(timedelta(hours=5))
        # Saturday 00:30 in +05:00 is still Friday in UTC
        exit_time = datetime(2025, 7, 12, 0, 30, tzinfo=pkt)
        result = self.trip(entry_time=datetime(2025, 7, 11, 23, 0, tzinfo=pkt), exit_time=exit_time)
        assert exit_time.astimezone(timezone.utc).weekday() == 4
        assert result.breakdown.weekend_multiplier == 1.5
        assert result.toll_amount == 21.5

    def test_long_route(self):
        result = self.trip(plate="XYZ-789", entry_point="NS Interchange", exit_point="Bahria Interchange")
        assert result.distance_km == 29
        assert result.distance_toll == 5.8
        assert result.toll_amount == 25.8

    def test_pricing_is_direction_independent(self):
        for entry_point, exit_point in permutations(list_route_points(), 2):
            there = self.trip(entry_point=entry_point, exit_point=exit_point)
            back = self.trip(entry_point=exit_point, exit_point=entry_point)
            assert there.distance_km == back.distance_km
            assert there.base_toll == back.base_toll
            assert there.distance_toll == back.distance_toll

    @pytest.mark.parametrize("plate,entry_time", [
        ("ABC-123", FRIDAY),
        ("ABC-124", MONDAY),
        ("ABC-124", HOLIDAY_MONDAY),
        ("ABC-123", SATURDAY),
    ])
    def test_final_amount_is_toll_less_discounts(self, plate, entry_time):
        result = self.trip(plate=plate, entry_time=entry_time, exit_point="Raiwand Interchange")
        expected = (
            result.base_toll
            + result.distance_toll
            - result.breakdown.holiday_discount
            - result.breakdown.number_plate_discount
        )
        assert result.breakdown.final_amount == pytest.approx(expected, abs=0.011)
        assert result.toll_amount >= 0
        assert result.discount_applied == pytest.approx(
            result.breakdown.holiday_discount + result.breakdown.number_plate_discount
        )

    def test_calculation_is_idempotent(self):
        first = self.trip(plate="ABC-124", entry_time=HOLIDAY_MONDAY)
        second = self.trip(plate="ABC-124", entry_time=HOLIDAY_MONDAY)
        assert first == second
        assert first.model_dump() == second.model_dump()

    def test_unknown_route_point(self):
        with pytest.raises(UnknownRoutePointError) as exc_info:
            self.trip(entry_point="Airport")
        assert exc_info.value.point_name == "Airport"

        # Names are matched exactly
        with pytest.raises(UnknownRoutePointError):
            self.trip(exit_point="ns interchange")

    def test_plate_without_trailing_digit(self):
        with pytest.raises(MalformedPlateError):
            self.trip(plate="ABC-XYZ")

    def test_unknown_point_is_a_value_error(self):
        """Domain errors are ValueErrors so callers can map them to client errors."""
        with pytest.raises(ValueError):
            self.trip(entry_point="Nowhere")

    def test_custom_schedule(self):
        schedule = DEFAULT_SCHEDULE.model_copy(update={"holidays": ()})
        calculator = RingRoadTollCalculator(schedule)
        result = calculator.calculate_toll(
            "ABC-123", "Zero Point", "NS Interchange", HOLIDAY_MONDAY, HOLIDAY_MONDAY + ONE_HOUR
        )
        assert result.discount_reasons == []
        assert result.toll_amount == 21.0


class TestPlateDigit:
    """Test extraction of the plate's last digit."""

    def test_last_digit_of_trailing_run(self):
        assert last_plate_digit("ABC-123") == 3
        assert last_plate_digit("ABC-120") == 0
        assert last_plate_digit("AB1-C9") == 9
        assert last_plate_digit("X12345") == 5

    @pytest.mark.parametrize("plate", ["ABC-12X", "ABC", "", "123-ABC"])
    def test_no_trailing_digit(self, plate):
        with pytest.raises(MalformedPlateError) as exc_info:
            last_plate_digit(plate)
        assert exc_info.value.number_plate == plate


class TestReferenceData:
    """Test route and rate reference data."""

    def test_route_points_in_distance_order(self):
        assert list_route_points() == [
            "Zero Point",
            "NS Interchange",
            "Ph4 Interchange",
            "Ferozpur Interchange",
            "Lake City Interchange",
            "Raiwand Interchange",
            "Bahria Interchange",
        ]
        distances = [point.distance_km for point in DEFAULT_SCHEDULE.route_points]
        assert distances == sorted(distances)

    def test_rate_schedule(self):
        assert current_rate_schedule() == {
            "baseRate": 20.0,
            "distanceRate": 0.2,
            "weekendMultiplier": 1.5,
            "numberPlateDiscountRate": 0.1,
            "holidayDiscountRate": 0.5,
            "holidayDates": ["March 23", "August 14", "December 25"],
        }

    def test_schedule_is_immutable(self):
        with pytest.raises(ValidationError):
            DEFAULT_SCHEDULE.base_rate = 30

    def test_calculator_implements_protocol(self):
        """Test that calculators implement the TollCalculatorInterface protocol."""
        calc = RingRoadTollCalculator()
        assert isinstance(calc, TollCalculatorInterface), \
            f"{calc.__class__.__name__} does not implement TollCalculatorInterface"
        assert calc.list_route_points() == list_route_points()
        assert calc.current_rate_schedule() == current_rate_schedule()

        result = get_toll_calculator().calculate_toll(
            "ABC-123", "Zero Point", "NS Interchange", FRIDAY, FRIDAY + ONE_HOUR
        )
        assert isinstance(result, TollResult)
