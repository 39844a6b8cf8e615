"""
Screenshot upload: validate, store, classify, save as a vault item.

The steps run in that order. A storage failure therefore never leaves a vault
row behind. A database failure after the image was stored can leave an
orphaned file; it is logged and left in place.

Classification never fails the upload: any vision error turns into
FALLBACK_ACTIVITY.
"""
import re
import uuid
from pathlib import Path
from typing import Callable, Dict, Optional

from sqlalchemy.orm import Session

from config import MAX_IMAGE_BYTES
from models.VaultItem import VaultItem
from services.activity_types import validate_activity_type
from services.errors import OperationFailedError, ValidationError
from services.image_service import prepare_image, resolve_content_type
from services.storage_service import StorageError, get_storage
from services.vault_service import create_vault_item, require_trip
from services.vision_service import classify_image
from utils.logger import get_logger

logger = get_logger("upload")

FALLBACK_ACTIVITY = {
    "name": "Travel Activity",
    "description": "Activity details could not be extracted",
    "activityType": "Other",
}

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def storage_key(trip_id: str, filename: str, content_type: str) -> str:
    """`{trip_id}/{uuid}-{name}`; the suffix follows the stored content type."""
    stem = _UNSAFE_CHARS.sub("-", Path(filename).stem).strip("-") or "screenshot"
    suffix = ".jpg" if content_type == "image/jpeg" else (Path(filename).suffix.lower() or ".img")
    return f"{trip_id}/{uuid.uuid4()}-{stem}{suffix}"


def _text_field(parsed: dict, field: str) -> str:
    value = parsed.get(field)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{field} is {type(value).__name__}, expected str")
    return (value or "").strip() or FALLBACK_ACTIVITY[field]


def classify_or_fallback(classifier: Callable[[bytes, str], Dict[str, str]], data: bytes, content_type: str) -> Dict[str, str]:
    """Classifier result with every field a non-empty str and the type normalized, or FALLBACK_ACTIVITY."""
    try:
        parsed = classifier(data, content_type)
        return {
            "name": _text_field(parsed, "name"),
            "description": _text_field(parsed, "description"),
            "activityType": validate_activity_type(_text_field(parsed, "activityType")),
        }
    except Exception as e:
        logger.warning("Screenshot classification failed, using fallback: %s", e)
        return dict(FALLBACK_ACTIVITY)


def upload_screenshot(
    db: Session,
    trip_id: Optional[str],
    filename: Optional[str],
    content_type: Optional[str],
    data: Optional[bytes],
    manual: Optional[Dict[str, Optional[str]]] = None,
    storage=None,
    classifier: Optional[Callable[[bytes, str], Dict[str, str]]] = None,
    max_bytes: int = MAX_IMAGE_BYTES,
) -> VaultItem:
    """
    Turn an uploaded screenshot into a vault item.

    `manual` ({name, description, activity_type}) skips the vision call.
    """
    if not data or not filename or not trip_id:
        raise ValidationError("File and tripId are required")
    if manual is not None and not (manual.get("name") or "").strip():
        raise ValidationError("Please enter an activity name")

    content_type = resolve_content_type(content_type, filename)
    data, content_type = prepare_image(data, content_type, max_bytes=max_bytes)

    # the trip must exist before anything is written
    require_trip(db, trip_id)

    storage = storage or get_storage()
    key = storage_key(trip_id, filename, content_type)
    try:
        image_url = storage.put(data, key, content_type)
    except StorageError as e:
        logger.error("Upload failed while storing %s: %s", key, e)
        raise OperationFailedError("Failed to upload screenshot") from e

    if manual is not None:
        fields = {
            "name": manual["name"],
            "description": manual.get("description") or "",
            "activityType": validate_activity_type(manual.get("activity_type")),
        }
    else:
        fields = classify_or_fallback(classifier or classify_image, data, content_type)

    try:
        return create_vault_item(
            db,
            trip_id,
            fields["name"],
            fields["description"],
            fields["activityType"],
            image_url=image_url,
        )
    except OperationFailedError as e:
        logger.error("Vault item insert failed; stored image %s is orphaned", image_url)
        raise OperationFailedError("Failed to upload screenshot") from e
