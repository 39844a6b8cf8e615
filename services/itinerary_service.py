"""
Itinerary placements: vault items scheduled on the trip calendar.

Placements may overlap; the calendar is advisory.
"""
import random
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.ItineraryItem import ItineraryItem
from services.errors import NotFoundError, ValidationError
from services.placement import suggest_slot, validate_slot
from services.unit_of_work import unit_of_work
from services.vault_service import stage_vault_item_copy, get_vault_item
from utils.logger import get_logger

logger = get_logger("itinerary")


def get_itinerary_item(db: Session, item_id: str) -> ItineraryItem:
    item = db.query(ItineraryItem).filter(ItineraryItem.id == item_id).first()
    if not item:
        raise NotFoundError("Itinerary item not found")
    return item


def list_itinerary_items(db: Session, trip_id: str) -> List[ItineraryItem]:
    """Placements of a trip in start order, each with its vault item loaded."""
    return (
        db.query(ItineraryItem)
        .filter(ItineraryItem.trip_id == trip_id)
        .order_by(ItineraryItem.start_time.asc())
        .all()
    )


def add_to_itinerary(
    db: Session,
    vault_item_id: str,
    start_time: Optional[datetime] = None,
    end_time: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> ItineraryItem:
    """
    Schedule a vault item. The trip comes from the vault item.

    Without explicit times (a drop outside any slot) the item gets a
    suggested slot from services.placement.
    """
    if start_time is None and end_time is None:
        start_time, end_time = suggest_slot(rng=rng)
    start_time, end_time = validate_slot(start_time, end_time)

    with unit_of_work(db, "Failed to add to itinerary"):
        vault_item = get_vault_item(db, vault_item_id)
        item = ItineraryItem(
            trip_id=vault_item.trip_id,
            vault_item_id=vault_item.id,
            start_time=start_time,
            end_time=end_time,
        )
        db.add(item)
    db.refresh(item)
    return item


def move_itinerary_item(db: Session, item_id: str, start_time: datetime, end_time: datetime) -> ItineraryItem:
    """Drag (move) or resize: both times are replaced."""
    start_time, end_time = validate_slot(start_time, end_time)
    with unit_of_work(db, "Failed to move itinerary item"):
        item = get_itinerary_item(db, item_id)
        item.start_time = start_time
        item.end_time = end_time
        item.updated_at = func.now()
    db.refresh(item)
    return item


def delete_itinerary_item(db: Session, item_id: str) -> None:
    with unit_of_work(db, "Failed to delete itinerary item"):
        item = get_itinerary_item(db, item_id)
        db.delete(item)


def retarget_itinerary_item(db: Session, item_id: str, new_vault_item_id: str) -> ItineraryItem:
    """Point a placement at another vault item of the same trip."""
    with unit_of_work(db, "Failed to update itinerary item vault reference"):
        item = get_itinerary_item(db, item_id)
        vault_item = get_vault_item(db, new_vault_item_id)
        if vault_item.trip_id != item.trip_id:
            raise ValidationError("Vault item belongs to a different trip")
        item.vault_item_id = vault_item.id
        item.updated_at = func.now()
    db.refresh(item)
    return item


def copy_vault_item_and_retarget(
    db: Session,
    item_id: str,
    original_vault_item_id: str,
    name: str,
    description: Optional[str],
    activity_type: Optional[str],
) -> ItineraryItem:
    """
    "Save this occurrence only".

    Creates a copy of the original vault item with the new fields (same
    image) and points only this placement at it. The original vault item and
    any other placement referencing it are left untouched.
    """
    with unit_of_work(db, "Failed to save this occurrence"):
        item = get_itinerary_item(db, item_id)
        if item.vault_item_id != original_vault_item_id:
            raise ValidationError("Itinerary item does not reference this vault item")
        copy = stage_vault_item_copy(db, original_vault_item_id, name, description, activity_type, trip_id=item.trip_id)
        item.vault_item_id = copy.id
        item.updated_at = func.now()
    db.refresh(item)
    logger.info("Itinerary item %s now uses vault item copy %s (from %s)", item_id, copy.id, original_vault_item_id)
    return item
