"""
Tests for the page-side interception script builder
"""

import pytest

from frameclock.clock.instrumentation import (
    ADVANCE_EXPRESSION,
    CONTROL_OBJECT,
    FIRE_DUE_EXPRESSION,
    build_instrumentation_script,
)


class TestBuildInstrumentationScript:
    """Tests for build_instrumentation_script"""

    def test_framerate_is_embedded(self):
        script = build_instrumentation_script(30)

        assert "const framerate = 30.0;" in script
        assert "__FRAMERATE__" not in script

    def test_overrides_every_timer_primitive(self):
        """All timer families and their cancellation functions are replaced"""
        script = build_instrumentation_script(60)

        for name in (
            "window.setTimeout",
            "window.clearTimeout",
            "window.requestAnimationFrame",
            "window.cancelAnimationFrame",
            "window.setInterval",
            "window.clearInterval",
            "performance.now",
        ):
            assert name in script

    def test_exposes_control_object(self):
        script = build_instrumentation_script(60)

        assert f"window.{CONTROL_OBJECT}" in script
        assert "fireDue(frame)" in script
        assert "advanceTo(frame, time)" in script

    def test_driver_expressions_target_control_object(self):
        assert CONTROL_OBJECT in ADVANCE_EXPRESSION
        assert CONTROL_OBJECT in FIRE_DUE_EXPRESSION

    def test_rejects_non_positive_framerate(self):
        with pytest.raises(ValueError):
            build_instrumentation_script(0)
