"""
Tests for the page-side timer interception running in Chromium

Each test loads a blank local page with the interception script installed,
registers timers from page JavaScript, then steps the page through PageClock
exactly as the frame driver does. Skipped when Playwright's Chromium build is
not installed.
"""

import asyncio

import pytest

from frameclock.browser.manager import BrowserManager
from frameclock.browser.page_clock import PageClock
from frameclock.clock.virtual_clock import frame_to_ms
from frameclock.startup.playwright_installer import is_browser_installed

pytestmark = pytest.mark.skipif(
    not is_browser_installed(), reason="Playwright Chromium is not installed"
)

# page helpers shared by every scenario
PAGE_SETUP = """
() => {
  window.log = [];
  window.currentFrame = () => window.__frameclock.pending().frame;
}
"""


async def drive_page(blank_page, framerate, register_js, frames):
    """
    Step an instrumented page and collect what its timers recorded

    Args:
        blank_page: Local HTML file to load
        framerate: Frames per simulated second
        register_js: Function source run once before frame 0
        frames: Number of frames to step

    Returns:
        Tuple of (window.log contents, StepReport per frame)
    """
    async with BrowserManager(headless=True, width=64, height=64) as browser:
        page_clock = PageClock(browser, framerate)
        await page_clock.install()
        await browser.navigate(blank_page.as_uri())
        await page_clock.verify_installed()

        await browser.evaluate(PAGE_SETUP)
        await browser.evaluate(register_js)

        reports = []
        for frame in range(frames):
            await page_clock.advance_to(frame, frame_to_ms(frame, framerate))
            reports.append(await page_clock.fire_due(frame))

        log = await browser.evaluate("() => window.log")
    return log, reports


def run_page(blank_page, framerate, register_js, frames):
    return asyncio.run(drive_page(blank_page, framerate, register_js, frames))


@pytest.fixture
def blank_page(tmp_path):
    page = tmp_path / "blank.html"
    page.write_text("<!doctype html><html><body></body></html>")
    return page


class TestPageTimeouts:
    """setTimeout inside the page"""

    def test_delay_rounds_up_to_next_frame(self, blank_page):
        """20ms at 60 fps lands on frame 2"""
        log, _ = run_page(
            blank_page,
            60,
            "() => { setTimeout(() => window.log.push(window.currentFrame()), 20); }",
            5,
        )

        assert log == [2]

    def test_string_handler_runs_in_global_scope(self, blank_page):
        log, _ = run_page(blank_page, 60, "() => { setTimeout(\"window.log.push('str')\", 0); }", 2)

        assert log == ["str"]

    def test_cleared_timeout_never_fires(self, blank_page):
        log, _ = run_page(
            blank_page,
            60,
            """() => {
              const id = setTimeout(() => window.log.push('cancelled'), 20);
              clearTimeout(id);
              clearTimeout([]);
              clearTimeout(9999);
            }""",
            5,
        )

        assert log == []


class TestPageIntervals:
    """setInterval inside the page"""

    def test_interval_fires_every_period(self, blank_page):
        """500ms interval at 10 fps over 20 frames fires at 5, 10, 15"""
        log, _ = run_page(
            blank_page,
            10,
            "() => { setInterval(() => window.log.push(window.currentFrame()), 500); }",
            20,
        )

        assert log == [5, 10, 15]

    def test_cleared_interval_stops(self, blank_page):
        log, _ = run_page(
            blank_page,
            10,
            """() => {
              const id = setInterval(() => {
                window.log.push(window.currentFrame());
                if (window.log.length === 2) {
                  clearInterval(id);
                }
              }, 200);
            }""",
            20,
        )

        assert log == [2, 4]


class TestPageAnimationFrames:
    """requestAnimationFrame inside the page"""

    def test_each_request_fires_on_the_following_frame(self, blank_page):
        log, _ = run_page(
            blank_page,
            30,
            """() => {
              const tick = () => {
                window.log.push(window.currentFrame());
                if (window.log.length < 3) {
                  requestAnimationFrame(tick);
                }
              };
              requestAnimationFrame(tick);
            }""",
            6,
        )

        assert log == [1, 2, 3]

    def test_performance_now_reads_frame_time(self, blank_page):
        log, _ = run_page(
            blank_page,
            10,
            """() => {
              const tick = () => {
                window.log.push(performance.now());
                requestAnimationFrame(tick);
              };
              requestAnimationFrame(tick);
            }""",
            4,
        )

        assert log == [100, 200, 300]


class TestPageFiring:
    """Ordering and isolation of one page step"""

    def test_registration_during_a_step_waits_for_the_next_one(self, blank_page):
        log, _ = run_page(
            blank_page,
            60,
            """() => {
              setTimeout(() => {
                window.log.push(['outer', window.currentFrame()]);
                setTimeout(() => window.log.push(['inner', window.currentFrame()]), 0);
              }, 20);
            }""",
            6,
        )

        assert log == [["outer", 2], ["inner", 3]]

    def test_throwing_callback_does_not_stop_the_step(self, blank_page):
        """One-shot entries fire before repeating ones; errors are reported"""
        log, reports = run_page(
            blank_page,
            10,
            """() => {
              setInterval(() => window.log.push('interval'), 100);
              setTimeout(() => { throw new Error('broken animation'); }, 100);
              setTimeout(() => window.log.push('timeout'), 100);
            }""",
            2,
        )

        assert log == ["timeout", "interval"]
        assert reports[1].fired == 3
        assert len(reports[1].errors) == 1
        assert "broken animation" in reports[1].errors[0]
        assert reports[0].ok

    def test_callback_can_cancel_a_later_entry_of_the_same_step(self, blank_page):
        log, reports = run_page(
            blank_page,
            10,
            """() => {
              let second;
              setTimeout(() => { window.log.push('first'); clearTimeout(second); }, 100);
              second = setTimeout(() => window.log.push('second'), 100);
            }""",
            3,
        )

        assert log == ["first"]
        assert reports[1].fired == 1
