"""Configuration management using Pydantic settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "GREENSIDE"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Editor
    readonly: bool = False
    settle_delay: float = 0.5          # seconds before draw flags reset
    data_path: str = ""                # GeoJSON file backing the "map" key; empty = memory only

    # Map viewport (also the fallback location for GPS placement)
    map_center_lat: float = 0.0
    map_center_lng: float = 20.0
    map_zoom: float = 2.0
    map_style: str = "Standard"        # basemap title, picks the feature color

    # Geolocation (GPS relay serving JSON fixes)
    geolocation_url: str = ""          # empty = no positioning device
    geolocation_timeout: float = 10.0
    geolocation_high_accuracy: bool = True
    geolocation_maximum_age: float = 0.0


settings = Settings()
