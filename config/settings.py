"""Application settings using Pydantic Settings."""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Firebase Identity Toolkit
    firebase_api_key: str = ""
    firebase_auth_url: str = "https://identitytoolkit.googleapis.com/v1"
    auth_timeout: float = 10.0

    # Database Configuration
    mongodb_url: str = "mongodb://localhost:27017/vitalitygo"

    # Application Configuration
    app_name: str = "VitalityGo API"
    app_version: str = "1.0.0"
    debug: bool = True
    log_level: str = "INFO"

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS Configuration
    cors_origins: List[str] = ["http://localhost:4200", "http://localhost:8100", "capacitor://localhost"]

    # Admin dashboard access
    admin_email: str = ""
    stats_window_days: int = 7

    # Missions
    geofence_radius_m: float = 30.0
    target_offset_deg: float = 0.002
    step_threshold: float = 12.0

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
