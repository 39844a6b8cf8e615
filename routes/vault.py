from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from schemas import (
    VaultItemWrite, VaultItemUpdate, VaultItemCopy, VaultItemWithTime,
    VaultItemRead, VaultItemWithTimeRead, VaultDeleteResult,
)
from database import get_db
from services import trip_service, upload_service, vault_service
from services.errors import NotFoundError
from services.storage_service import get_storage

router = APIRouter(prefix="/trips/{trip_id}/vault", tags=["Vault"])


def _get_in_trip(db: Session, trip_id: str, item_id: str):
    item = vault_service.get_vault_item(db, item_id)
    if item.trip_id != trip_id:
        raise NotFoundError("Vault item not found")
    return item


@router.get("/", response_model=List[VaultItemRead])
def list_items(trip_id: str, db: Session = Depends(get_db)):
    trip_service.get_trip(db, trip_id)
    return vault_service.list_vault_items(db, trip_id)


@router.post("/", response_model=VaultItemRead, status_code=status.HTTP_201_CREATED)
def create_item(trip_id: str, payload: VaultItemWrite, db: Session = Depends(get_db)):
    """Manual entry, no screenshot."""
    return vault_service.create_vault_item(
        db, trip_id, payload.name, payload.description, payload.activity_type, payload.image_url
    )


@router.post("/upload", response_model=VaultItemRead, status_code=status.HTTP_201_CREATED)
def upload_screenshot(
    trip_id: str,
    file: UploadFile = File(...),
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    activity_type: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    storage=Depends(get_storage),
):
    """
    Upload a travel screenshot and save it to the vault.

    If `name` is sent the form values are used as-is (manual override);
    otherwise the vision model fills name, description and type.
    """
    content = file.file.read()
    manual = None
    if name is not None:
        manual = {"name": name, "description": description, "activity_type": activity_type}

    return upload_service.upload_screenshot(
        db,
        trip_id,
        file.filename,
        file.content_type,
        content,
        manual=manual,
        storage=storage,
    )


@router.post("/copy", response_model=VaultItemRead, status_code=status.HTTP_201_CREATED)
def copy_item(trip_id: str, payload: VaultItemCopy, db: Session = Depends(get_db)):
    return vault_service.copy_vault_item(
        db, payload.original_item_id, payload.name, payload.description, payload.activity_type, trip_id=trip_id
    )


@router.post("/with-time", response_model=VaultItemWithTimeRead, status_code=status.HTTP_201_CREATED)
def create_item_with_time(trip_id: str, payload: VaultItemWithTime, db: Session = Depends(get_db)):
    vault_item, itinerary_item = vault_service.create_vault_item_with_time(
        db, trip_id, payload.name, payload.description, payload.activity_type,
        payload.start_time, payload.end_time,
    )
    return {"vault_item": vault_item, "itinerary_item": itinerary_item}


@router.put("/{item_id}", response_model=VaultItemRead)
def update_item(trip_id: str, item_id: str, payload: VaultItemUpdate, db: Session = Depends(get_db)):
    """Save to all occurrences: edits the shared vault item."""
    _get_in_trip(db, trip_id, item_id)
    return vault_service.update_vault_item(db, item_id, payload.name, payload.description, payload.activity_type)


@router.delete("/{item_id}", response_model=VaultDeleteResult)
def delete_item(trip_id: str, item_id: str, db: Session = Depends(get_db)):
    """Also removes the item from every itinerary slot."""
    _get_in_trip(db, trip_id, item_id)
    removed = vault_service.delete_vault_item(db, item_id)
    return {"success": True, "removed_itinerary_items": removed}
