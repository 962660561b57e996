"""
Core module - Base abstractions and interfaces

Provides foundational components used across frameclock:
- Interfaces and protocols
- Base exception hierarchy
- Configuration management
"""

from frameclock.core.config import (
    CaptureConfig,
    Settings,
    get_settings,
    validate_url,
)

__all__ = [
    "CaptureConfig",
    "Settings",
    "get_settings",
    "validate_url",
]
