"""Models for the toll calculation system."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TollCalculationRequest(CamelModel):
    """
    Request model for toll calculation.
    Fields are optional here so that missing values are reported
    together by the request validator rather than one at a time.
    """
    number_plate: Optional[str] = Field(None, description="Plate in LLL-NNN format")
    entry_point: Optional[str] = Field(None, description="Entry point name")
    exit_point: Optional[str] = Field(None, description="Exit point name")
    entry_date_time: Optional[str] = Field(None, description="ISO-8601 entry time")
    exit_date_time: Optional[str] = Field(None, description="ISO-8601 exit time")


class TollBreakdown(CamelModel):
    """Step by step breakdown of a toll amount."""
    base_rate: float = Field(..., ge=0)
    distance_rate: float = Field(..., ge=0, description="Distance charge before weekend multiplier")
    weekend_multiplier: float = Field(..., description="1 on weekdays, 1.5 at weekends")
    number_plate_discount: float = Field(..., ge=0)
    holiday_discount: float = Field(..., ge=0)
    final_amount: float = Field(..., ge=0)


class TollResult(CamelModel):
    """Result of a single toll calculation."""
    toll_amount: float = Field(..., ge=0, description="Amount payable")
    base_toll: float = Field(..., ge=0)
    distance_toll: float = Field(..., ge=0, description="Distance charge after weekend multiplier")
    distance_km: float = Field(..., ge=0)
    discount_applied: float = Field(..., ge=0)
    discount_reasons: List[str] = Field(default_factory=list)
    breakdown: TollBreakdown

