"""Reference datastore for route points, holidays and toll rates."""

from sqlalchemy import create_engine, Column, Integer, Float, String, UniqueConstraint
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional
import logging
import os

from toll_system.reference_data import (
    BASE_RATE,
    DEFAULT_HOLIDAYS,
    DEFAULT_ROUTE_POINTS,
    DISTANCE_RATE,
    HOLIDAY_DISCOUNT_RATE,
    NUMBER_PLATE_DISCOUNT_RATE,
    WEEKEND_MULTIPLIER,
    Holiday,
    RoutePoint,
    TollSchedule,
)

Base = declarative_base()

logger = logging.getLogger(__name__)

# system_config key (same as the TollSchedule field) -> (default, description)
RATE_KEYS = {
    "base_rate": (BASE_RATE, "Flat toll charged on every trip"),
    "distance_rate": (DISTANCE_RATE, "Toll per kilometre travelled"),
    "weekend_multiplier": (
        WEEKEND_MULTIPLIER,
        "Multiplier on the distance toll when exiting on Saturday or Sunday",
    ),
    "number_plate_discount_rate": (
        NUMBER_PLATE_DISCOUNT_RATE,
        "Discount for even plates on Mon/Wed and odd plates on Tue/Thu",
    ),
    "holiday_discount_rate": (
        HOLIDAY_DISCOUNT_RATE,
        "Discount when entering on a national holiday",
    ),
}


class RoutePointDB(Base):
    """Database model for storing tolling points on the route."""
    __tablename__ = "route_points"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    distance_km = Column(Float, nullable=False)
    position = Column(Integer, nullable=False)

    def __repr__(self):
        return f"<RoutePoint(name={self.name}, distance_km={self.distance_km})>"


class HolidayDB(Base):
    """Database model for storing recurring national holidays."""
    __tablename__ = "national_holidays"

    id = Column(Integer, primary_key=True, index=True)
    month = Column(Integer, nullable=False)
    day = Column(Integer, nullable=False)
    name = Column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint('month', 'day', name='_month_day_uc'),
    )

    def __repr__(self):
        return f"<Holiday(month={self.month}, day={self.day}, name={self.name})>"


class SystemConfigDB(Base):
    """Database model for storing toll rates and other configuration."""
    __tablename__ = "system_config"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String, unique=True, nullable=False)
    value = Column(String, nullable=False)
    description = Column(String, nullable=True)

    def __repr__(self):
        return f"<SystemConfig(key={self.key}, value={self.value})>"


class DatabaseManager:
    """Manager class for reference datastore operations."""

    def __init__(self, database_url: Optional[str] = None):
        """Initialize database connection."""
        self.database_url = database_url or os.getenv(
            "DATABASE_URL",
            "sqlite:///./ringroad_reference.db"
        )

        # Create engine with appropriate settings for SQLite
        connect_args = {"check_same_thread": False} if "sqlite" in self.database_url else {}
        self.engine = create_engine(self.database_url, connect_args=connect_args)

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

        Base.metadata.create_all(bind=self.engine)

    def get_session(self) -> Session:
        """Get a new database session."""
        return self.SessionLocal()

    def init_default_reference_data(self):
        """Seed the datastore with the default route, holidays and rates."""
        session = self.get_session()
        try:
            if session.query(RoutePointDB).count() == 0:
                for position, point in enumerate(DEFAULT_ROUTE_POINTS):
                    session.add(RoutePointDB(
                        name=point.name,
                        distance_km=float(point.distance_km),
                        position=position
                    ))
                session.commit()
                logger.info("Initialized %d default route points", len(DEFAULT_ROUTE_POINTS))

            if session.query(HolidayDB).count() == 0:
                for holiday in DEFAULT_HOLIDAYS:
                    session.add(HolidayDB(
                        month=holiday.month,
                        day=holiday.day,
                        name=holiday.name
                    ))
                session.commit()
                logger.info("Initialized %d national holidays", len(DEFAULT_HOLIDAYS))

            added = 0
            for key, (default, description) in RATE_KEYS.items():
                existing = session.query(SystemConfigDB).filter_by(key=key).first()
                if not existing:
                    session.add(SystemConfigDB(
                        key=key,
                        value=str(default),
                        description=description
                    ))
                    added += 1
            if added:
                session.commit()
                logger.info("Initialized %d toll rates", added)

        finally:
            session.close()

    def get_route_points(self) -> List[RoutePoint]:
        """Retrieve route points ordered by distance from the origin."""
        session = self.get_session()
        try:
            rows = session.query(RoutePointDB).order_by(
                RoutePointDB.distance_km, RoutePointDB.position
            ).all()
            return [
                RoutePoint(name=row.name, distance_km=Decimal(str(row.distance_km)))
                for row in rows
            ]
        finally:
            session.close()

    def get_holidays(self) -> List[Holiday]:
        """Retrieve national holidays in calendar order."""
        session = self.get_session()
        try:
            rows = session.query(HolidayDB).order_by(HolidayDB.month, HolidayDB.day).all()
            return [Holiday(month=row.month, day=row.day, name=row.name) for row in rows]
        finally:
            session.close()

    def get_config_value(self, key: str) -> Optional[str]:
        """Get a configuration value by key."""
        session = self.get_session()
        try:
            config = session.query(SystemConfigDB).filter_by(key=key).first()
            return config.value if config else None
        finally:
            session.close()

    def get_rates(self) -> Dict[str, Decimal]:
        """Get toll rates keyed by schedule field, defaulting missing ones."""
        rates = {}
        for key, (default, _) in RATE_KEYS.items():
            value = self.get_config_value(key)
            if value is None:
                rates[key] = default
                continue
            try:
                rates[key] = Decimal(value)
            except InvalidOperation:
                raise ValueError(f"Invalid value for {key}: {value!r}")
        return rates

    def load_schedule(self) -> TollSchedule:
        """
        Build an immutable toll schedule from the datastore.

        Raises:
            ValueError: If no route points are stored
        """
        route_points = self.get_route_points()
        if not route_points:
            raise ValueError("No route points in reference datastore")

        return TollSchedule(
            route_points=tuple(route_points),
            holidays=tuple(self.get_holidays()),
            **self.get_rates()
        )


# Singleton instance
_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """Get singleton database manager instance."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
        _db_manager.init_default_reference_data()
    return _db_manager

