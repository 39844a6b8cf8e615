from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from models.Trip import Trip
from services.errors import NotFoundError, ValidationError
from services.unit_of_work import unit_of_work


def _validate_trip_fields(name: Optional[str], start_date: Optional[date], end_date: Optional[date]) -> str:
    if not name or not name.strip():
        raise ValidationError("Please enter a trip name")
    if start_date and end_date and start_date > end_date:
        raise ValidationError("End date must be after start date")
    return name.strip()


def create_trip(db: Session, name: str, start_date: Optional[date] = None, end_date: Optional[date] = None) -> Trip:
    name = _validate_trip_fields(name, start_date, end_date)
    trip = Trip(name=name, start_date=start_date, end_date=end_date)
    with unit_of_work(db, "Failed to create trip"):
        db.add(trip)
    db.refresh(trip)
    return trip


def get_trip(db: Session, trip_id: str) -> Trip:
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise NotFoundError("Trip not found")
    return trip


def list_trips(db: Session) -> List[Trip]:
    return db.query(Trip).order_by(Trip.created_at.desc()).all()


def update_trip(db: Session, trip_id: str, name: str, start_date: Optional[date] = None, end_date: Optional[date] = None) -> Trip:
    """Only name and dates are mutable; the id never changes."""
    name = _validate_trip_fields(name, start_date, end_date)
    with unit_of_work(db, "Failed to update trip"):
        trip = get_trip(db, trip_id)
        trip.name = name
        trip.start_date = start_date
        trip.end_date = end_date
    db.refresh(trip)
    return trip
