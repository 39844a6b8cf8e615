from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from schemas import ItineraryItemWrite, ItineraryItemMove, ItineraryItemRead, VaultReferenceUpdate, OccurrenceCopy
from database import get_db
from services import itinerary_service, trip_service, vault_service
from services.errors import NotFoundError

router = APIRouter(prefix="/trips/{trip_id}/itinerary", tags=["Itinerary"])


def _get_in_trip(db: Session, trip_id: str, item_id: str):
    item = itinerary_service.get_itinerary_item(db, item_id)
    if item.trip_id != trip_id:
        raise NotFoundError("Itinerary item not found")
    return item


@router.get("/", response_model=List[ItineraryItemRead])
def list_items(trip_id: str, db: Session = Depends(get_db)):
    trip_service.get_trip(db, trip_id)
    return itinerary_service.list_itinerary_items(db, trip_id)


@router.post("/", response_model=ItineraryItemRead, status_code=status.HTTP_201_CREATED)
def add_item(trip_id: str, payload: ItineraryItemWrite, db: Session = Depends(get_db)):
    """Drop a vault item on the calendar."""
    vault_item = vault_service.get_vault_item(db, payload.vault_item_id)
    if vault_item.trip_id != trip_id:
        raise NotFoundError("Vault item not found")
    return itinerary_service.add_to_itinerary(db, payload.vault_item_id, payload.start_time, payload.end_time)


@router.put("/{item_id}", response_model=ItineraryItemRead)
def move_item(trip_id: str, item_id: str, payload: ItineraryItemMove, db: Session = Depends(get_db)):
    """Drag or resize."""
    _get_in_trip(db, trip_id, item_id)
    return itinerary_service.move_itinerary_item(db, item_id, payload.start_time, payload.end_time)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(trip_id: str, item_id: str, db: Session = Depends(get_db)):
    _get_in_trip(db, trip_id, item_id)
    itinerary_service.delete_itinerary_item(db, item_id)


@router.put("/{item_id}/vault-reference", response_model=ItineraryItemRead)
def update_vault_reference(trip_id: str, item_id: str, payload: VaultReferenceUpdate, db: Session = Depends(get_db)):
    _get_in_trip(db, trip_id, item_id)
    return itinerary_service.retarget_itinerary_item(db, item_id, payload.new_vault_item_id)


@router.post("/{item_id}/copy-vault-item", response_model=ItineraryItemRead)
def save_this_occurrence(trip_id: str, item_id: str, payload: OccurrenceCopy, db: Session = Depends(get_db)):
    """Save to this occurrence only: the other occurrences keep the shared vault item."""
    _get_in_trip(db, trip_id, item_id)
    return itinerary_service.copy_vault_item_and_retarget(
        db, item_id, payload.original_vault_item_id, payload.name, payload.description, payload.activity_type
    )
