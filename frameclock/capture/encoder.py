"""
ffmpeg encoder

Assembles a numbered PNG sequence into an H.264 MP4. The encoder is optional:
callers check is_available() and carry on without a video when it is not.
"""

import logging
import shutil
import subprocess
from pathlib import Path

from frameclock.core.exceptions import EncodingError

logger = logging.getLogger(__name__)


class FfmpegEncoder:
    """
    Encode frame sequences with the ffmpeg command line tool

    Example:
        encoder = FfmpegEncoder()
        if encoder.is_available():
            encoder.encode(Path("frames"), "%05d.png", 60, 720, 720, Path("rendered.mp4"))
    """

    def __init__(self, ffmpeg_path: str | None = None, codec: str = "h264"):
        """
        Initialize encoder

        Args:
            ffmpeg_path: Explicit ffmpeg executable (looked up on PATH if omitted)
            codec: Video codec passed to -c:v
        """
        self.ffmpeg_path = ffmpeg_path
        self.codec = codec

    def executable(self) -> str | None:
        """Resolved ffmpeg executable, or None when not installed"""
        return shutil.which(self.ffmpeg_path or "ffmpeg")

    def is_available(self) -> bool:
        return self.executable() is not None

    def build_command(
        self,
        ffmpeg: str,
        frames_dir: Path,
        pattern: str,
        framerate: float,
        width: int,
        height: int,
        output_path: Path,
    ) -> list[str]:
        return [
            ffmpeg,
            "-hide_banner",
            "-loglevel",
            "error",
            "-framerate",
            f"{framerate:g}",
            "-pattern_type",
            "sequence",
            "-start_number",
            "0",
            "-i",
            str(frames_dir / pattern),
            "-s:v",
            f"{width}x{height}",
            "-c:v",
            self.codec,
            "-pix_fmt",
            "yuv420p",
            str(output_path),
        ]

    def encode(
        self,
        frames_dir: Path,
        pattern: str,
        framerate: float,
        width: int,
        height: int,
        output_path: Path,
    ) -> Path:
        """
        Encode frames_dir/pattern into output_path

        Any previous file at output_path is replaced.

        Returns:
            Path to the video

        Raises:
            EncodingError: If ffmpeg is missing or exits with an error
        """
        ffmpeg = self.executable()
        if ffmpeg is None:
            raise EncodingError(
                "ffmpeg is not installed, video will not be made from frames",
                recovery_hint="Install ffmpeg and make sure it is on PATH",
            )

        if output_path.exists():
            output_path.unlink()
            logger.info(f"Removed old video file: {output_path}")
        output_path.parent.mkdir(parents=True, exist_ok=True)

        cmd = self.build_command(ffmpeg, frames_dir, pattern, framerate, width, height, output_path)
        logger.info(f"Running: {' '.join(cmd)}")

        try:
            completed = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as e:
            raise EncodingError(f"Could not run ffmpeg: {e}") from e

        if completed.returncode != 0:
            message = (completed.stderr or completed.stdout or "").strip() or "unknown error"
            raise EncodingError(f"ffmpeg errored with message: {message}")

        logger.info(f"Video rendered at {output_path}")
        return output_path
