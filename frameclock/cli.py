"""
Command-line interface for frameclock
"""

import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)

from frameclock import __version__
from frameclock.core.config import CaptureConfig, get_settings
from frameclock.core.exceptions import ConfigurationError, FrameclockError

console = Console()


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, get_settings().log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """frameclock - render JavaScript animations into frame-exact videos"""
    pass


@main.command()
@click.argument("url")
@click.option("--headless", "-H", is_flag=True, help="Run the browser headless")
@click.option("--width", "-w", type=int, default=None, help="Viewport width in pixels (default: 720)")
@click.option("--height", "-h", type=int, default=None, help="Viewport height in pixels (default: 720)")
@click.option("--scale", "-s", type=float, default=None, help="Scale the viewport by the given multiple (default: 1)")
@click.option("--length", "-l", type=float, default=None, help="Seconds of animation to render (default: 60)")
@click.option("--framerate", "-f", type=float, default=None, help="Frames to sample per second (default: 60)")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None, help="Directory for frames (default: ./frames/)")
@click.option("--video", type=click.Path(path_type=Path), default=None, help="Video file to write (default: ./rendered.mp4)")
@click.option("--settle-ms", type=int, default=None, help="Real-time wait after page load (default: 1000)")
@click.option("--frame-pause-ms", type=int, default=None, help="Real-time pause between frames (default: 50)")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging, including page console output")
def render(
    url: str,
    headless: bool,
    width: int | None,
    height: int | None,
    scale: float | None,
    length: float | None,
    framerate: float | None,
    output: Path | None,
    video: Path | None,
    settle_ms: int | None,
    frame_pause_ms: int | None,
    verbose: bool,
) -> None:
    """Render URL into frames by overriding the page's timing functions"""
    from frameclock.capture.encoder import FfmpegEncoder
    from frameclock.capture.session import CaptureSession

    _configure_logging(verbose)

    try:
        config = CaptureConfig.from_settings(
            url,
            headless=headless or None,
            width=width,
            height=height,
            scale=scale,
            length=length,
            framerate=framerate,
            output_dir=output,
            video_path=video,
            settle_ms=settle_ms,
            frame_pause_ms=frame_pause_ms,
        )
    except ConfigurationError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)

    console.print(
        Panel.fit(
            "[bold cyan]frameclock[/bold cyan]\n"
            f"{config.url}\n"
            f"{config.width}x{config.height} @ {config.scale:g}x, "
            f"{config.length:g}s at {config.framerate:g} fps ({config.total_frames} frames)",
            border_style="cyan",
        )
    )

    with Progress(
        TextColumn("Rendering:"),
        BarColumn(),
        TaskProgressColumn(),
        TextColumn("| ETA:"),
        TimeRemainingColumn(),
        TextColumn("| Frames:"),
        MofNCompleteColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("render", total=config.total_frames)
        session = CaptureSession(
            config,
            encoder=FfmpegEncoder(get_settings().ffmpeg_path),
            on_progress=lambda frame: progress.advance(task),
        )

        try:
            result = asyncio.run(session.run())
        except FrameclockError as e:
            progress.stop()
            console.print(f"\n[bold red]❌ {escape(str(e))}[/bold red]\n")
            sys.exit(1)

    console.print(f"✅ {len(result.frames)} frames written to [green]{config.output_dir}[/green]")
    if result.callback_errors:
        console.print(
            f"[yellow]⚠️  {result.callback_errors} timer callback(s) raised; see log for details[/yellow]"
        )
    if result.video_path:
        console.print(f"✅ Video rendered at [green]{result.video_path}[/green]")
    elif result.encode_warning:
        console.print(f"[yellow]⚠️  {escape(result.encode_warning)}[/yellow]")

    console.print("\n[bold green]Done![/bold green]\n")


@main.command()
@click.option("--install", is_flag=True, help="Install Playwright Chromium if it is missing")
def verify(install: bool) -> None:
    """Verify the browser and encoder are available"""
    from rich.table import Table

    from frameclock.capture.encoder import FfmpegEncoder
    from frameclock.startup.playwright_installer import (
        ensure_browser_installed,
        get_playwright_browsers_path,
        is_browser_installed,
    )

    console.print("\n[bold cyan]Verifying frameclock installation[/bold cyan]\n")

    checks = []
    errors = []
    warnings = []

    python_version = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
    python_ok = sys.version_info >= (3, 10)
    checks.append(("Python Version", python_version, "✅" if python_ok else "❌"))
    if not python_ok:
        errors.append(f"Python 3.10+ required, found {python_version}")

    browsers_path = str(get_playwright_browsers_path())
    browser_ok = is_browser_installed()
    if not browser_ok and install:
        console.print("Installing Playwright Chromium...")
        browser_ok = asyncio.run(ensure_browser_installed())
    checks.append(("Playwright Chromium", browsers_path, "✅" if browser_ok else "❌"))
    if not browser_ok:
        errors.append("Playwright Chromium not installed (run 'frameclock verify --install')")

    encoder = FfmpegEncoder(get_settings().ffmpeg_path)
    ffmpeg = encoder.executable()
    checks.append(("ffmpeg", ffmpeg or "not found", "✅" if ffmpeg else "⚠️"))
    if not ffmpeg:
        warnings.append("ffmpeg not found: frames will be rendered but no video will be made")

    table = Table(title="Installation Verification", show_header=True, header_style="bold cyan")
    table.add_column("Check", style="white")
    table.add_column("Location/Value", style="dim")
    table.add_column("Status", style="white")
    for check_name, check_value, check_status in checks:
        table.add_row(check_name, check_value, check_status)

    console.print(table)
    console.print()

    if warnings:
        console.print("[bold yellow]⚠️  Warnings:[/bold yellow]")
        for warning in warnings:
            console.print(f"  • {warning}")
        console.print()

    if errors:
        console.print("[bold red]❌ Errors:[/bold red]")
        for error in errors:
            console.print(f"  • {error}")
        console.print()
        sys.exit(1)

    console.print("[bold green]✅ Ready to render.[/bold green]\n")


if __name__ == "__main__":
    main()
