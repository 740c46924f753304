# Application settings and environment variable loading (Pydantic BaseSettings)

from pydantic import Field
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Server Settings
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Database Settings
    database_url: str = Field(default="sqlite:///./data.db")

    # Media storage (local filesystem)
    media_root: str = Field(default="media")  # Final renditions: <media_root>/<type>/<id>/
    media_upload_root: str = Field(default="uploads")  # Raw uploads while being processed

    # FFmpeg Settings (binaries are auto-detected when unset)
    ffmpeg_path: Optional[str] = None
    ffprobe_path: Optional[str] = None
    ffmpeg_timeout: int = Field(default=240)  # Seconds per ffmpeg process
    hls_segment_duration: int = Field(default=5)  # Seconds per HLS segment

    # Processing queues
    video_queue_concurrency: int = Field(default=1, ge=1)
    image_queue_concurrency: int = Field(default=3, ge=1)

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
