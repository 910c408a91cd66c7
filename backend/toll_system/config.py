"""Configuration for the Ring Road toll system."""

from typing import Optional
import logging
import os
from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError

from toll_system.reference_data import DEFAULT_SCHEDULE, TollSchedule

load_dotenv()

logger = logging.getLogger(__name__)


def _split_origins(value: str) -> list:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


class Settings:
    """Application settings."""

    # API Settings
    API_TITLE = "Lahore Ring Road Toll Calculator"
    API_VERSION = "1.0.0"
    API_DESCRIPTION = (
        "Distance based toll calculation with weekend surcharge and "
        "holiday / number plate discounts"
    )
    API_PREFIX = os.getenv("API_PREFIX", "/api/toll")

    # Server Settings
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "3000"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Database Settings
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./ringroad_reference.db")

    # CORS Settings
    CORS_ORIGINS = _split_origins(
        os.getenv(
            "CORS_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000,"
            "http://localhost:8000,http://127.0.0.1:8000",
        )
    )

    # Reference data loaded once from the datastore
    _schedule_cache: Optional[TollSchedule] = None

    @classmethod
    def get_schedule(cls) -> TollSchedule:
        """
        Get the toll schedule (route table, holidays, rates).
        Loaded from the reference datastore on first use and cached.
        Falls back to the built-in schedule if the datastore is unavailable.
        """
        if cls._schedule_cache is None:
            try:
                from toll_system.database import get_db_manager

                cls._schedule_cache = get_db_manager().load_schedule()
            except (SQLAlchemyError, ValueError) as e:
                logger.warning(
                    "Could not load toll schedule from datastore, using defaults: %s", e
                )
                cls._schedule_cache = DEFAULT_SCHEDULE
        return cls._schedule_cache

    @classmethod
    def reload_schedule(cls) -> TollSchedule:
        """Force reload of the toll schedule and rebind the default calculator."""
        from toll_system.services.toll_calculator import reset_toll_calculator

        cls._schedule_cache = None
        reset_toll_calculator()
        return cls.get_schedule()


settings = Settings()
