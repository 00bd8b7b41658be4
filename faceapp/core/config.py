"""Configuration settings for the face app."""
from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    These settings are loaded from environment variables with the following precedence:
    1. Environment variables
    2. .env file
    3. Default values

    Attributes:
        STORE_BACKEND: Where identity records live ("firestore" or "memory")
        FIRESTORE_COLLECTION: Firestore collection holding identity records
        MATCH_THRESHOLD: Euclidean distance below which two descriptors are the same person
        MATCH_STRATEGY: "nearest" picks the closest candidate, "first" the first one found
        POLL_INTERVAL_SECONDS: Period of the detection-and-match cycle
    """
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="",
        env_nested_delimiter="__"
    )

    # Core Settings
    PROJECT_NAME: str = "Face App"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"

    # CORS Settings
    ALLOWED_ORIGINS: str = "http://localhost:3000"

    @property
    def cors_origins(self) -> List[str]:
        """Get list of allowed origins."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    # Store Settings
    STORE_BACKEND: Literal["firestore", "memory"] = "firestore"
    FIRESTORE_COLLECTION: str = "faces"
    FIREBASE_CREDENTIALS_PATH: str = ""  # Empty means application default credentials
    FIREBASE_PROJECT_ID: str = ""

    # Matching Settings
    MATCH_THRESHOLD: float = 0.6
    MATCH_STRATEGY: Literal["nearest", "first"] = "nearest"
    DESCRIPTOR_LENGTH: int = 512  # buffalo_l recognition model output size

    # Session Settings
    POLL_INTERVAL_SECONDS: float = 2.0
    CAMERA_INDEX: int = 0
    CANVAS_WIDTH: int = 940
    CANVAS_HEIGHT: int = 650

    # Face Recognition Settings
    MODEL_NAME: str = "buffalo_l"
    MODEL_CACHE_DIR: str = ".model_cache"
    DETECTION_SIZE: int = 640
    MIN_FACE_CONFIDENCE: float = 0.5
    DETECT_EXPRESSIONS: bool = True

    # Optional settings with defaults
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000

settings = Settings()
