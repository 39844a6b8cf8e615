"""
Image storage backends.

Both backends expose ``put(data, key, content_type) -> url`` and
``get(url) -> bytes``. Local disk is used in development; a Firebase/GCS
bucket is used when STORAGE_BUCKET is set.
"""
import os
from pathlib import Path
from typing import Optional

import firebase_admin
from firebase_admin import credentials, storage

from config import FIREBASE_CREDENTIALS_PATH, STORAGE_BUCKET, UPLOAD_DIR
from services.errors import NotFoundError
from utils.logger import get_logger

logger = get_logger("storage")

LOCAL_URL_PREFIX = "/uploads/"
GCS_URL_PREFIX = "https://storage.googleapis.com/"


class StorageError(Exception):
    pass


class LocalStorage:
    def __init__(self, base_dir: str | Path = UPLOAD_DIR):
        self.base_dir = Path(base_dir)

    def _path_for(self, key: str) -> Path:
        path = (self.base_dir / key).resolve()
        if self.base_dir.resolve() not in path.parents:
            raise StorageError(f"Invalid storage key: {key}")
        return path

    def put(self, data: bytes, key: str, content_type: str) -> str:
        path = self._path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "wb") as buffer:
                buffer.write(data)
        except OSError as e:
            raise StorageError(f"Could not write {key}: {e}") from e
        return f"{LOCAL_URL_PREFIX}{key}"

    def get(self, url: str) -> bytes:
        if not url.startswith(LOCAL_URL_PREFIX):
            raise StorageError(f"Not a local upload url: {url}")
        path = self._path_for(url[len(LOCAL_URL_PREFIX):])
        if not path.exists():
            raise NotFoundError("Image not found")
        return path.read_bytes()

    def path(self, key: str) -> Path:
        return self._path_for(key)


_firebase_initialized = False


def initialize_firebase_admin(bucket_name: str):
    """Initialize the Firebase Admin SDK once, with the storage bucket configured."""
    global _firebase_initialized
    if _firebase_initialized:
        return

    options = {"storageBucket": bucket_name}
    cred_path = FIREBASE_CREDENTIALS_PATH or os.path.join(os.path.dirname(__file__), "..", "serviceAccountKey.json")
    if os.path.exists(cred_path):
        firebase_admin.initialize_app(credentials.Certificate(cred_path), options)
        logger.info("Firebase Admin initialized with %s", cred_path)
    else:
        # GOOGLE_APPLICATION_CREDENTIALS / metadata server
        firebase_admin.initialize_app(options=options)
        logger.info("Firebase Admin initialized from environment credentials")
    _firebase_initialized = True


class FirebaseStorage:
    def __init__(self, bucket_name: str):
        self.bucket_name = bucket_name
        initialize_firebase_admin(bucket_name)
        self.bucket = storage.bucket(bucket_name)

    def put(self, data: bytes, key: str, content_type: str) -> str:
        try:
            blob = self.bucket.blob(key)
            blob.upload_from_string(data, content_type=content_type)
        except Exception as e:
            raise StorageError(f"Could not upload {key} to {self.bucket_name}: {e}") from e
        return f"{GCS_URL_PREFIX}{self.bucket_name}/{key}"

    def get(self, url: str) -> bytes:
        prefix = f"{GCS_URL_PREFIX}{self.bucket_name}/"
        if not url.startswith(prefix):
            raise StorageError(f"Url does not belong to bucket {self.bucket_name}: {url}")
        blob = self.bucket.blob(url[len(prefix):])
        try:
            if not blob.exists():
                raise NotFoundError("Image not found")
            return blob.download_as_bytes()
        except NotFoundError:
            raise
        except Exception as e:
            raise StorageError(f"Could not download {url}: {e}") from e


_storage: Optional[LocalStorage | FirebaseStorage] = None


def get_storage():
    """Storage backend for this process, chosen from the environment."""
    global _storage
    if _storage is None:
        if STORAGE_BUCKET:
            _storage = FirebaseStorage(STORAGE_BUCKET)
        else:
            logger.info("STORAGE_BUCKET not set, using local storage in %s", UPLOAD_DIR)
            _storage = LocalStorage(UPLOAD_DIR)
    return _storage
