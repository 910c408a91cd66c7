"""Services package for the toll system."""

from .toll_calculator import (
    get_toll_calculator,
    TollCalculatorInterface,
    RingRoadTollCalculator
)
from .validation import validate_toll_request

__all__ = [
    'get_toll_calculator',
    'TollCalculatorInterface',
    'RingRoadTollCalculator',
    'validate_toll_request'
]
