"""API endpoints for toll calculation."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging

from toll_system.models import TollCalculationRequest
from toll_system.services import get_toll_calculator, validate_toll_request
from toll_system.services.toll_calculator import TollCalculatorInterface
from toll_system.exceptions import TollCalculationError, TollRequestValidationError
from toll_system.config import settings
from toll_system.database import get_db_manager

router = APIRouter(prefix=settings.API_PREFIX, tags=["Toll Calculation"])

logger = logging.getLogger(__name__)


def get_calculator() -> TollCalculatorInterface:
    """
    Dependency injection for toll calculator.
    Returns any implementation of TollCalculatorInterface.
    """
    return get_toll_calculator()


def failure(status_code: int, error: str, message: str = None, **details) -> JSONResponse:
    """Wrap an error in the failure envelope."""
    body = {"success": False, "error": error}
    if message:
        body["message"] = message
    body.update(details)
    return JSONResponse(status_code=status_code, content=body)


@router.post("/calculate")
def calculate_toll(
    request: TollCalculationRequest,
    calculator: TollCalculatorInterface = Depends(get_calculator)
):
    """
    Calculate the toll for a single trip.

    Args:
        request: Plate, entry/exit points and entry/exit times
        calculator: Injected toll calculator implementing TollCalculatorInterface

    Returns:
        Success envelope wrapping the toll result, or a failure envelope
        (400 for invalid requests, 500 for unexpected errors)
    """
    try:
        trip = validate_toll_request(request, calculator.list_route_points())
        result = calculator.calculate_toll(
            trip.number_plate,
            trip.entry_point,
            trip.exit_point,
            trip.entry_time,
            trip.exit_time
        )

    except TollRequestValidationError as e:
        logger.info("Rejected toll request: %s", e.error)
        return JSONResponse(status_code=400, content=e.to_dict())
    except TollCalculationError as e:
        logger.info("Toll calculation failed: %s", e)
        return failure(400, str(e))
    except Exception as e:
        logger.exception("Unexpected error calculating toll")
        return failure(500, str(e) or "Internal server error")

    return {
        "success": True,
        "data": result.model_dump(by_alias=True),
        "message": "Toll calculated successfully"
    }


@router.get("/entry-points")
def get_entry_points(calculator: TollCalculatorInterface = Depends(get_calculator)):
    """List the names of all tolling points, nearest to Zero Point first."""
    return {
        "success": True,
        "data": calculator.list_route_points(),
        "message": "Entry points retrieved successfully"
    }


@router.get("/rates")
def get_toll_rates(calculator: TollCalculatorInterface = Depends(get_calculator)):
    """Get the toll rates and national holidays currently in use."""
    return {
        "success": True,
        "data": calculator.current_rate_schedule(),
        "message": "Toll rates retrieved successfully"
    }


@router.get("/health")
def health_check():
    """Health check endpoint including reference datastore status."""
    db_status = "healthy"
    try:
        points_count = len(get_db_manager().get_route_points())
    except Exception as e:
        logger.warning("Reference datastore health check failed: %s", e)
        db_status = f"unhealthy: {str(e)}"
        points_count = 0

    return {
        "status": "healthy",
        "service": settings.API_TITLE,
        "datastore_status": db_status,
        "route_points_count": points_count
    }
