from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from schemas import TripWrite, TripUpdate, TripRead, TripBoard
from database import get_db
from services import trip_service, vault_service, itinerary_service

router = APIRouter(prefix="/trips", tags=["Trips"])


@router.post("/", response_model=TripRead, status_code=status.HTTP_201_CREATED)
def create_trip(payload: TripWrite, db: Session = Depends(get_db)):
    return trip_service.create_trip(db, payload.name, payload.start_date, payload.end_date)


@router.get("/", response_model=List[TripRead])
def list_trips(db: Session = Depends(get_db)):
    return trip_service.list_trips(db)


@router.get("/{trip_id}", response_model=TripRead)
def get_trip(trip_id: str, db: Session = Depends(get_db)):
    return trip_service.get_trip(db, trip_id)


@router.get("/{trip_id}/board", response_model=TripBoard)
def get_board(trip_id: str, db: Session = Depends(get_db)):
    """Trip with its vault (newest first) and itinerary (by start time)."""
    trip = trip_service.get_trip(db, trip_id)
    return {
        "trip": trip,
        "vault_items": vault_service.list_vault_items(db, trip_id),
        "itinerary_items": itinerary_service.list_itinerary_items(db, trip_id),
    }


@router.put("/{trip_id}", response_model=TripRead)
def update_trip(trip_id: str, payload: TripUpdate, db: Session = Depends(get_db)):
    return trip_service.update_trip(db, trip_id, payload.name, payload.start_date, payload.end_date)
