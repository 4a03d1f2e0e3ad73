"""Configuration management using Pydantic settings."""

from typing import Optional

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
    app_name: str = "DISTRICT SCANNER"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Assets: {asset_root}/{district folder}/{prefix}-{kind}.{asset_extension}
    asset_root: str = "Blockout"
    asset_extension: str = "obj"          # "obj" or "glb"
    center_asset: Optional[str] = None    # optional center piece (GLTF variant)
    load_on_startup: bool = True

    # Render loop
    render_hz: float = 60.0

    # Scanner feed (seconds)
    scanner_burst_count: int = 10
    scanner_burst_delay: float = 1.0
    scanner_steady_min: float = 1.0
    scanner_steady_max: float = 5.0
    scanner_event_lifetime: float = 60.0
    scanner_purge_on_stop: bool = False

    # Camera
    camera_fov: float = 45.0
    focus_duration: float = 1.8
    focus_min_distance: float = 72000.0
    focus_max_distance: float = 180000.0


settings = Settings()
