import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tripvault.db")

# Storage: local folder unless a bucket is configured
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
STORAGE_BUCKET = os.getenv("STORAGE_BUCKET")
FIREBASE_CREDENTIALS_PATH = os.getenv("FIREBASE_CREDENTIALS_PATH")

# Vision
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")

# Images above this size are downsized before storage
MAX_IMAGE_BYTES = int(os.getenv("MAX_IMAGE_BYTES", str(4 * 1024 * 1024)))  # 4 MB
MAX_IMAGE_DIMENSION = int(os.getenv("MAX_IMAGE_DIMENSION", "2048"))

LOG_PATH = os.getenv("LOG_PATH")
