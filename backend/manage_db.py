#!/usr/bin/env python3
"""
Reference datastore management utility for the Ring Road toll system.

Usage:
    python manage_db.py init      - Initialize datastore with default route, holidays and rates
    python manage_db.py show      - Show route points, holidays and rates
    python manage_db.py reset     - Reset datastore to defaults
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from toll_system.database import Base, DatabaseManager
from toll_system.reference_data import current_rate_schedule


def init_database(db: DatabaseManager = None):
    """Initialize datastore with default reference data."""
    print("Initializing reference datastore...")
    db = db or DatabaseManager()
    db.init_default_reference_data()
    print("Reference datastore initialized successfully!")
    show_reference_data(db)


def show_reference_data(db: DatabaseManager = None):
    """Display route points, holidays and rates."""
    db = db or DatabaseManager()
    schedule = db.load_schedule()

    print("\n" + "="*50)
    print("ROUTE POINTS IN REFERENCE DATASTORE")
    print("="*50)
    print(f"{'Point':<25} {'Distance (km)':>14}")
    print("-"*40)

    for point in schedule.route_points:
        print(f"{point.name:<25} {point.distance_km:>14}")

    print("-"*40)
    print(f"Total points: {len(schedule.route_points)}")

    print("\nNational holidays:")
    for holiday in schedule.holidays:
        print(f"  {holiday.month_day}  {holiday.label:<12} {holiday.name or ''}")

    print("\nRates:")
    for key, value in current_rate_schedule(schedule).items():
        if key != "holidayDates":
            print(f"  {key:<25} {value}")
    print("="*50)


def reset_database(db: DatabaseManager = None):
    """Reset datastore to the default reference data."""
    confirm = input("Are you sure you want to reset all reference data to defaults? (yes/no): ")

    if confirm.lower() == 'yes':
        db = db or DatabaseManager()
        Base.metadata.drop_all(bind=db.engine)
        Base.metadata.create_all(bind=db.engine)
        print("Reference data deleted.")

        init_database(db)
        print("Reference datastore reset to defaults!")
    else:
        print("Reset cancelled.")


def main(argv=None):
    """Main entry point."""
    argv = sys.argv if argv is None else argv
    if len(argv) < 2:
        print(__doc__)
        return

    command = argv[1].lower()

    commands = {
        'init': init_database,
        'show': show_reference_data,
        'reset': reset_database
    }

    if command in commands:
        commands[command]()
    else:
        print(f"Unknown command: {command}")
        print(__doc__)


if __name__ == "__main__":
    main()
