"""
Vault items: the unscheduled activities of a trip.

Two ways to edit an activity that is already on the calendar:

- update_vault_item() changes the shared vault entry; every placement that
  references it shows the change.
- copy_vault_item_and_retarget() (in services.itinerary_service) gives a
  single placement its own copy and leaves the shared entry alone.
"""
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from models.ItineraryItem import ItineraryItem
from models.Trip import Trip
from models.VaultItem import VaultItem
from services.activity_types import validate_activity_type
from services.errors import NotFoundError, ValidationError
from services.placement import validate_slot
from services.unit_of_work import unit_of_work
from utils.logger import get_logger

logger = get_logger("vault")


def _require_name(name: Optional[str]) -> str:
    if not name or not name.strip():
        raise ValidationError("Please enter an activity name")
    return name.strip()


def require_trip(db: Session, trip_id: str) -> None:
    if not trip_id:
        raise ValidationError("tripId is required")
    if not db.query(Trip.id).filter(Trip.id == trip_id).first():
        raise NotFoundError("Trip not found")


def get_vault_item(db: Session, item_id: str) -> VaultItem:
    item = db.query(VaultItem).filter(VaultItem.id == item_id).first()
    if not item:
        raise NotFoundError("Vault item not found")
    return item


def list_vault_items(db: Session, trip_id: str) -> List[VaultItem]:
    return (
        db.query(VaultItem)
        .filter(VaultItem.trip_id == trip_id)
        .order_by(VaultItem.created_at.desc())
        .all()
    )


def build_vault_item(
    trip_id: str,
    name: str,
    description: Optional[str],
    activity_type: Optional[str],
    image_url: Optional[str] = None,
) -> VaultItem:
    return VaultItem(
        trip_id=trip_id,
        name=_require_name(name),
        description=description,
        activity_type=validate_activity_type(activity_type),
        image_url=image_url,
    )


def create_vault_item(
    db: Session,
    trip_id: str,
    name: str,
    description: Optional[str] = None,
    activity_type: Optional[str] = None,
    image_url: Optional[str] = None,
) -> VaultItem:
    """Manual entry (no screenshot) or the last step of an upload."""
    item = build_vault_item(trip_id, name, description, activity_type, image_url)
    with unit_of_work(db, "Failed to create vault item"):
        require_trip(db, trip_id)
        db.add(item)
    db.refresh(item)
    return item


def create_vault_item_with_time(
    db: Session,
    trip_id: str,
    name: str,
    description: Optional[str],
    activity_type: Optional[str],
    start_time: datetime,
    end_time: datetime,
) -> Tuple[VaultItem, ItineraryItem]:
    """Create an activity straight on the calendar: vault item and placement together."""
    start_time, end_time = validate_slot(start_time, end_time)
    item = build_vault_item(trip_id, name, description or "", activity_type)
    with unit_of_work(db, "Failed to create vault item with time"):
        require_trip(db, trip_id)
        db.add(item)
        db.flush()
        placement = ItineraryItem(
            trip_id=trip_id,
            vault_item_id=item.id,
            start_time=start_time,
            end_time=end_time,
        )
        db.add(placement)
    db.refresh(item)
    db.refresh(placement)
    return item, placement


def update_vault_item(
    db: Session,
    item_id: str,
    name: str,
    description: Optional[str],
    activity_type: Optional[str],
) -> VaultItem:
    """In-place edit of the shared entry. Placements hold a reference, so they all see it."""
    name = _require_name(name)
    with unit_of_work(db, "Failed to update vault item"):
        item = get_vault_item(db, item_id)
        item.name = name
        item.description = description
        item.activity_type = validate_activity_type(activity_type)
    db.refresh(item)
    return item


def copy_vault_item(
    db: Session,
    original_item_id: str,
    name: str,
    description: Optional[str],
    activity_type: Optional[str],
    trip_id: Optional[str] = None,
) -> VaultItem:
    """New vault entry with its own fields and the original's image."""
    with unit_of_work(db, "Failed to create vault item copy"):
        copy = stage_vault_item_copy(db, original_item_id, name, description, activity_type, trip_id)
    db.refresh(copy)
    return copy


def stage_vault_item_copy(
    db: Session,
    original_item_id: str,
    name: str,
    description: Optional[str],
    activity_type: Optional[str],
    trip_id: Optional[str] = None,
) -> VaultItem:
    # caller owns the transaction
    original = get_vault_item(db, original_item_id)
    if trip_id and original.trip_id != trip_id:
        raise NotFoundError("Vault item not found")
    copy = build_vault_item(original.trip_id, name, description, activity_type, original.image_url)
    db.add(copy)
    db.flush()
    return copy


def delete_vault_item(db: Session, item_id: str) -> int:
    """
    Delete a vault item and every placement that references it.

    Placements go first, then the item, in one transaction. Returns the number
    of placements removed.
    """
    with unit_of_work(db, "Failed to delete vault item"):
        item = get_vault_item(db, item_id)
        removed = (
            db.query(ItineraryItem)
            .filter(ItineraryItem.vault_item_id == item_id)
            .delete(synchronize_session="fetch")
        )
        db.delete(item)
    logger.info("Deleted vault item %s and %d itinerary item(s)", item_id, removed)
    return removed
