"""
Base exception hierarchy

Provides a consistent exception structure across frameclock
with clear error messages and recovery hints.
"""


class FrameclockError(Exception):
    """
    Base exception for all frameclock errors

    Attributes:
        message: Error message
        component: Component that raised the error
        recovery_hint: Optional hint for recovery
    """

    def __init__(self, message: str, component: str = "", recovery_hint: str = ""):
        self.component = component
        self.recovery_hint = recovery_hint
        super().__init__(message)

    def __str__(self) -> str:
        msg = super().__str__()
        if self.component:
            msg = f"[{self.component}] {msg}"
        if self.recovery_hint:
            msg += f"\n💡 Recovery: {self.recovery_hint}"
        return msg


class ConfigurationError(FrameclockError):
    """Invalid session configuration (bad URL, non-positive sizes, ...)"""

    def __init__(self, message: str, recovery_hint: str = ""):
        super().__init__(message, component="Configuration", recovery_hint=recovery_hint)


class ClockError(FrameclockError):
    """Virtual clock was moved out of frame order"""

    def __init__(self, message: str):
        super().__init__(message, component="Clock")


class BrowserError(FrameclockError):
    """Chromium could not be launched or the page stopped responding"""

    def __init__(self, message: str, recovery_hint: str = ""):
        super().__init__(message, component="Browser", recovery_hint=recovery_hint)


class NavigationError(FrameclockError):
    """Target page could not be loaded"""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        message = f"Unable to load url: {url}"
        if reason:
            message += f" ({reason})"
        super().__init__(
            message,
            component="Browser",
            recovery_hint="Check that the page is reachable from this machine",
        )


class CaptureError(FrameclockError):
    """Still image for a frame could not be captured"""

    def __init__(self, frame: int, reason: str = ""):
        self.frame = frame
        message = f"Failed to capture frame {frame}"
        if reason:
            message += f": {reason}"
        super().__init__(message, component="Capture")


class EncodingError(FrameclockError):
    """ffmpeg failed to assemble the frames into a video"""

    def __init__(self, message: str, recovery_hint: str = ""):
        super().__init__(
            message,
            component="Encoder",
            recovery_hint=recovery_hint or "Frames are kept on disk and can be encoded manually",
        )
