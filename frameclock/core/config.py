"""
Configuration management

Centralized settings using Pydantic BaseSettings for type-safe configuration
with environment variable support, plus the immutable per-run CaptureConfig.

Settings can be overridden via environment variables with the FRAMECLOCK_
prefix (e.g. FRAMECLOCK_FRAMERATE=30) or a .env file in the working directory.
"""

import logging
import math
import re
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from frameclock.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*$")

# Schemes that are meaningless without a host part
_HOST_SCHEMES = {"http", "https", "ws", "wss", "ftp"}


def validate_url(url: str) -> str:
    """
    Check that a URL is absolute

    Args:
        url: Target URL as typed by the user

    Returns:
        The stripped URL

    Raises:
        ValueError: If the URL has no scheme or no location
    """
    url = url.strip()
    parts = urlsplit(url)
    if not parts.scheme or not _SCHEME_RE.match(parts.scheme):
        raise ValueError(f"Invalid URL: {url}")
    if parts.scheme.lower() in _HOST_SCHEMES and not parts.netloc:
        raise ValueError(f"Invalid URL: {url}")
    if not parts.netloc and not parts.path:
        raise ValueError(f"Invalid URL: {url}")
    return url


class Settings(BaseSettings):
    """
    Application defaults with environment variable support

    Settings can be overridden via environment variables:
    - FRAMECLOCK_WIDTH=1280
    - FRAMECLOCK_FRAMERATE=30
    - FRAMECLOCK_FFMPEG_PATH=/opt/ffmpeg/bin/ffmpeg
    """

    # Viewport
    width: int = 720
    height: int = 720
    scale: float = 1.0

    # Timing
    length: float = 60.0  # seconds of animation
    framerate: float = 60.0
    settle_ms: int = 1000  # real-time wait after load, before frame 0
    frame_pause_ms: int = 50  # real-time pause between frames

    # Output
    output_dir: Path = Path("./frames")
    video_path: Path = Path("./rendered.mp4")
    ffmpeg_path: str | None = None

    # Browser
    headless: bool = False

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="FRAMECLOCK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Singleton pattern for settings
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get application settings (singleton)

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


class CaptureConfig(BaseModel):
    """Immutable configuration of one capture session"""

    model_config = ConfigDict(frozen=True)

    url: str
    headless: bool = False
    width: int = Field(default=720, gt=0)
    height: int = Field(default=720, gt=0)
    scale: float = Field(default=1.0, gt=0)
    length: float = Field(default=60.0, gt=0)
    framerate: float = Field(default=60.0, gt=0)
    output_dir: Path = Path("./frames")
    video_path: Path = Path("./rendered.mp4")
    settle_ms: int = Field(default=1000, ge=0)
    frame_pause_ms: int = Field(default=50, ge=0)

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        return validate_url(value)

    @property
    def total_frames(self) -> int:
        """Number of frames to capture (length x framerate)"""
        # round() absorbs float noise such as 2.3 * 10 == 22.999999999999996
        return math.ceil(round(self.length * self.framerate, 6))

    @property
    def frame_interval_ms(self) -> float:
        return 1000 / self.framerate

    @property
    def video_width(self) -> int:
        return round(self.width * self.scale)

    @property
    def video_height(self) -> int:
        return round(self.height * self.scale)

    @classmethod
    def from_settings(
        cls, url: str, settings: Settings | None = None, **overrides: Any
    ) -> "CaptureConfig":
        """
        Build a config from settings, letting explicit values win

        Args:
            url: Target URL
            settings: Defaults source (get_settings() if omitted)
            **overrides: Explicit values; None means "use the default"

        Returns:
            Validated CaptureConfig

        Raises:
            ConfigurationError: If any value is invalid
        """
        settings = settings or get_settings()
        values: dict[str, Any] = {
            "headless": settings.headless,
            "width": settings.width,
            "height": settings.height,
            "scale": settings.scale,
            "length": settings.length,
            "framerate": settings.framerate,
            "output_dir": settings.output_dir,
            "video_path": settings.video_path,
            "settle_ms": settings.settle_ms,
            "frame_pause_ms": settings.frame_pause_ms,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})

        try:
            return cls(url=url, **values)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            if field == "url":
                raise ConfigurationError(
                    f"Invalid URL: {url}",
                    recovery_hint="Check if you forgot the protocol (https:// or http://)",
                ) from e
            raise ConfigurationError(f"Invalid value for {field}: {first['msg']}") from e
