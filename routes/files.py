"""
Image retrieval for vault items.

Local uploads are served straight from disk; bucket images are proxied so
private buckets work without signed urls.
"""
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import FileResponse, Response

from services.image_service import MIME_MAP
from services.storage_service import LocalStorage, StorageError, get_storage

router = APIRouter(tags=["Files"])


@router.get("/uploads/{trip_id}/{filename}")
def get_upload(trip_id: str, filename: str, storage=Depends(get_storage)):
    if not isinstance(storage, LocalStorage):
        raise HTTPException(status_code=404, detail="File not found")

    try:
        file_path = storage.path(f"{trip_id}/{filename}")
    except StorageError:
        raise HTTPException(status_code=400, detail="Invalid file path")
    if not file_path.exists():
        raise HTTPException(status_code=404, detail="File not found")

    content_type = MIME_MAP.get(Path(filename).suffix.lower(), "application/octet-stream")
    return FileResponse(file_path, media_type=content_type, filename=filename)


@router.get("/files/image")
def get_image(url: str = Query(..., description="image_url of a vault item"), storage=Depends(get_storage)):
    try:
        content = storage.get(url)
    except StorageError as e:
        raise HTTPException(status_code=400, detail=str(e))

    content_type = MIME_MAP.get(Path(url).suffix.lower(), "application/octet-stream")
    return Response(content=content, media_type=content_type)
