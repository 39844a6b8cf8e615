import io

import pytest
from PIL import Image

from models.VaultItem import VaultItem
from services import upload_service
from services.errors import ImageProcessingError, NotFoundError, OperationFailedError, ValidationError
from services.image_service import downsize_image, is_heic, resolve_content_type
from services.storage_service import StorageError
from services.vision_service import VisionError


def make_png(width=64, height=64, compress_level=6) -> bytes:
    image = Image.linear_gradient("L").resize((width, height)).convert("RGB")
    buffer = io.BytesIO()
    image.save(buffer, format="PNG", compress_level=compress_level)
    return buffer.getvalue()


def louvre_classifier(data, content_type):
    return {"name": "Louvre Museum Visit", "description": "See the Mona Lisa", "activityType": "museum"}


def failing_classifier(data, content_type):
    raise VisionError("No JSON found in OpenAI response")


class BrokenStorage:
    def put(self, data, key, content_type):
        raise StorageError("bucket unavailable")


def test_upload_with_ai_classification(db, trip, storage):
    item = upload_service.upload_screenshot(
        db, trip.id, "louvre.png", "image/png", make_png(), storage=storage, classifier=louvre_classifier
    )
    assert item.name == "Louvre Museum Visit"
    assert item.activity_type == "Culture"
    assert item.image_url.startswith(f"/uploads/{trip.id}/")
    assert storage.get(item.image_url) == make_png()


def test_ai_failure_falls_back_to_placeholder(db, trip, storage):
    item = upload_service.upload_screenshot(
        db, trip.id, "shot.png", "image/png", make_png(), storage=storage, classifier=failing_classifier
    )
    assert item.name == "Travel Activity"
    assert item.description == "Activity details could not be extracted"
    assert item.activity_type == "Other"
    assert item.image_url is not None


@pytest.mark.parametrize("reply", [
    {"name": "Tower", "description": "Deck", "activityType": 5},
    {"name": "Tower", "description": {"text": "Deck"}, "activityType": "viewpoint"},
    {"name": None, "description": None, "activityType": ["museum"]},
    ["not", "a", "dict"],
])
def test_malformed_classifier_reply_falls_back(db, trip, storage, reply):
    item = upload_service.upload_screenshot(
        db, trip.id, "shot.png", "image/png", make_png(), storage=storage,
        classifier=lambda data, content_type: reply,
    )
    assert item.name == "Travel Activity"
    assert item.description == "Activity details could not be extracted"
    assert item.activity_type == "Other"
    assert db.query(VaultItem).count() == 1


def test_blank_classifier_fields_use_fallback_values(db, trip, storage):
    item = upload_service.upload_screenshot(
        db, trip.id, "shot.png", "image/png", make_png(), storage=storage,
        classifier=lambda data, content_type: {"name": "  ", "description": "", "activityType": None},
    )
    assert item.name == "Travel Activity"
    assert item.activity_type == "Other"


def test_manual_override_skips_classifier(db, trip, storage):
    def must_not_be_called(data, content_type):
        raise AssertionError("classifier called")

    item = upload_service.upload_screenshot(
        db, trip.id, "shot.png", "image/png", make_png(),
        manual={"name": "Sushi dinner", "description": None, "activity_type": "restaurant"},
        storage=storage, classifier=must_not_be_called,
    )
    assert item.name == "Sushi dinner"
    assert item.activity_type == "Food & Drink"


@pytest.mark.parametrize("trip_id, filename, data", [
    (None, "shot.png", b"x"),
    ("trip", None, b"x"),
    ("trip", "shot.png", b""),
])
def test_missing_inputs(db, storage, trip_id, filename, data):
    with pytest.raises(ValidationError):
        upload_service.upload_screenshot(db, trip_id, filename, "image/png", data, storage=storage)


def test_unknown_trip(db, storage):
    with pytest.raises(NotFoundError):
        upload_service.upload_screenshot(
            db, "missing", "shot.png", "image/png", make_png(), storage=storage, classifier=louvre_classifier
        )


@pytest.mark.parametrize("content_type, filename", [
    ("image/heic", "IMG_0001.jpg"),
    ("image/heif", "photo"),
    ("application/octet-stream", "IMG_0001.HEIC"),
    (None, "IMG_0002.heif"),
])
def test_heic_is_rejected_before_storage(db, trip, storage, content_type, filename):
    with pytest.raises(ValidationError) as exc:
        upload_service.upload_screenshot(db, trip.id, filename, content_type, b"heic-bytes", storage=storage)
    assert "HEIC" in exc.value.detail
    assert db.query(VaultItem).count() == 0
    assert not storage.base_dir.exists()


def test_non_image_is_rejected(db, trip, storage):
    with pytest.raises(ValidationError):
        upload_service.upload_screenshot(db, trip.id, "notes.pdf", "application/pdf", b"%PDF", storage=storage)


def test_content_type_from_filename():
    assert resolve_content_type(None, "beach.JPG") == "image/jpeg"
    assert resolve_content_type("application/octet-stream", "map.webp") == "image/webp"
    assert is_heic(None, "x.heic")
    assert not is_heic("image/png", "x.png")


def test_oversized_image_is_downsized_before_storage(db, trip, storage):
    original = make_png(800, 800, compress_level=0)
    limit = 500_000
    assert len(original) > limit

    item = upload_service.upload_screenshot(
        db, trip.id, "big.png", "image/png", original,
        storage=storage, classifier=louvre_classifier, max_bytes=limit,
    )

    stored = storage.get(item.image_url)
    assert len(stored) <= limit
    assert item.image_url.endswith(".jpg")
    assert Image.open(io.BytesIO(stored)).format == "JPEG"


def test_downsize_fails_instead_of_storing_oversized_file(db, trip, storage):
    with pytest.raises(ImageProcessingError):
        upload_service.upload_screenshot(
            db, trip.id, "big.png", "image/png", make_png(800, 800, compress_level=0),
            storage=storage, classifier=louvre_classifier, max_bytes=100,
        )
    assert db.query(VaultItem).count() == 0
    assert not storage.base_dir.exists()


def test_undecodable_oversized_payload():
    with pytest.raises(ImageProcessingError):
        downsize_image(b"not an image" * 1000, max_bytes=100)


def test_storage_failure_leaves_no_vault_row(db, trip):
    with pytest.raises(OperationFailedError):
        upload_service.upload_screenshot(
            db, trip.id, "shot.png", "image/png", make_png(), storage=BrokenStorage(), classifier=louvre_classifier
        )
    assert db.query(VaultItem).count() == 0


def test_database_failure_after_storage_is_reported(db, trip, storage, monkeypatch):
    def fail(*args, **kwargs):
        raise OperationFailedError("Failed to create vault item")

    monkeypatch.setattr(upload_service, "create_vault_item", fail)
    with pytest.raises(OperationFailedError) as exc:
        upload_service.upload_screenshot(
            db, trip.id, "shot.png", "image/png", make_png(), storage=storage, classifier=louvre_classifier
        )
    assert exc.value.detail == "Failed to upload screenshot"
    # the stored file is left behind
    assert any(storage.base_dir.rglob("*.png"))


def test_local_storage_missing_file_is_not_found(storage):
    url = storage.put(b"png", "trip/shot.png", "image/png")
    assert storage.get(url) == b"png"
    with pytest.raises(NotFoundError):
        storage.get("/uploads/trip/missing.png")
    with pytest.raises(StorageError):
        storage.get("/uploads/../../etc/passwd")
