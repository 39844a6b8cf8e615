"""
Image checks and downsizing for screenshot uploads.

HEIC/HEIF is rejected up front: browsers and the vision model can't read it.
Anything above MAX_IMAGE_BYTES is re-encoded as JPEG with Pillow.
"""
import io
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from config import MAX_IMAGE_BYTES, MAX_IMAGE_DIMENSION
from services.errors import ImageProcessingError, ValidationError
from utils.logger import get_logger

logger = get_logger("images")

HEIC_CONTENT_TYPES = {"image/heic", "image/heif", "image/heic-sequence", "image/heif-sequence"}
HEIC_EXTENSIONS = {".heic", ".heif"}

MIME_MAP = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}

JPEG_QUALITIES = (85, 75, 65, 50)


def is_heic(content_type: Optional[str], filename: Optional[str]) -> bool:
    if content_type and content_type.lower() in HEIC_CONTENT_TYPES:
        return True
    return bool(filename) and Path(filename).suffix.lower() in HEIC_EXTENSIONS


def resolve_content_type(content_type: Optional[str], filename: Optional[str]) -> str:
    """
    Validate the upload type and return the content type to store it with.

    Falls back to the filename suffix when the client sent no (or a generic)
    content type.
    """
    if is_heic(content_type, filename):
        raise ValidationError(
            "HEIC images are not supported. Please convert the photo to JPEG or PNG "
            "(or take a screenshot of it) and upload again."
        )

    if not content_type or content_type == "application/octet-stream":
        ext = Path(filename).suffix.lower() if filename else ""
        content_type = MIME_MAP.get(ext)

    if not content_type or not content_type.startswith("image/"):
        raise ValidationError(f"Please upload an image file. Received: {content_type or 'unknown'}")

    return content_type


def downsize_image(
    data: bytes,
    max_bytes: int = MAX_IMAGE_BYTES,
    max_dimension: int = MAX_IMAGE_DIMENSION,
) -> Tuple[bytes, str]:
    """
    Shrink an image until it fits in `max_bytes`.

    Returns (jpeg_bytes, "image/jpeg"). Raises ImageProcessingError when the
    payload isn't a decodable image or stays too large at the lowest quality.
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageProcessingError(f"Could not read image for resizing: {e}") from e

    if image.mode not in ("RGB", "L"):
        image = image.convert("RGB")
    image.thumbnail((max_dimension, max_dimension))

    for quality in JPEG_QUALITIES:
        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", quality=quality, optimize=True)
        resized = buffer.getvalue()
        if len(resized) <= max_bytes:
            logger.info("Downsized image %d -> %d bytes (quality=%d, size=%s)",
                        len(data), len(resized), quality, image.size)
            return resized, "image/jpeg"

    raise ImageProcessingError(
        f"Image is too large even after resizing. Maximum size: {max_bytes / (1024 * 1024):.1f} MB"
    )


def prepare_image(data: bytes, content_type: str, max_bytes: int = MAX_IMAGE_BYTES) -> Tuple[bytes, str]:
    """Return the payload unchanged when it is small enough, downsized otherwise."""
    if len(data) <= max_bytes:
        return data, content_type
    return downsize_image(data, max_bytes=max_bytes)
