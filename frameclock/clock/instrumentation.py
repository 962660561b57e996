"""
Page-side timer interception

Builds the JavaScript that replaces a page's timer and clock primitives with
frame-stepped equivalents. The script is registered with Playwright's
add_init_script so it runs before any of the page's own scripts, and it
mirrors TimerRegistry's semantics exactly:

- one id counter shared by setTimeout, requestAnimationFrame and setInterval
- due entries are snapshotted before any callback runs
- one-shot entries fire before repeating ones, each in registration order
- a throwing callback is recorded and the step continues

The driver reaches the page-side registry through a single non-enumerable
control object, window.__frameclock.
"""

import json

CONTROL_OBJECT = "__frameclock"

_SCRIPT_TEMPLATE = """
(() => {
  if (window.__frameclock) {
    return;
  }

  const framerate = __FRAMERATE__;
  const EPSILON = 1e-9;

  const msToFrame = (ms) => {
    const exact = (ms * framerate) / 1000;
    const nearest = Math.round(exact);
    if (Math.abs(exact - nearest) < EPSILON) {
      return Math.max(0, nearest);
    }
    return Math.max(0, Math.ceil(exact));
  };

  const normalizeDelay = (delay) => {
    const value = Number(delay);
    return Number.isFinite(value) && value > 0 ? value : 0;
  };

  // legacy string handlers run in global scope, like the real API
  const toCallable = (handler) =>
    typeof handler === 'function' ? handler : () => (0, eval)(String(handler));

  const describe = (error) =>
    error && error.stack ? String(error.stack) : String(error);

  const clock = { frame: 0, time: 0 };
  const once = new Map();
  const repeating = new Map();
  let nextId = 1;
  let firing = new Set();

  const cancel = (id) => {
    firing.delete(id);
    once.delete(id);
    repeating.delete(id);
  };

  window.setTimeout = function (handler, delay, ...args) {
    const id = nextId++;
    const due = msToFrame(clock.time + normalizeDelay(delay));
    once.set(id, { id, due, callback: toCallable(handler), args });
    return id;
  };
  window.clearTimeout = cancel;

  window.requestAnimationFrame = function (callback) {
    const id = nextId++;
    once.set(id, { id, due: clock.frame + 1, callback, args: [] });
    return id;
  };
  window.cancelAnimationFrame = cancel;

  window.setInterval = function (handler, delay, ...args) {
    const id = nextId++;
    const period = normalizeDelay(delay);
    const due = msToFrame(clock.time + period);
    repeating.set(id, { id, due, period, callback: toCallable(handler), args });
    return id;
  };
  window.clearInterval = cancel;

  performance.now = () => clock.time;

  const control = {
    advanceTo(frame, time) {
      clock.frame = frame;
      clock.time = time;
      return { frame: clock.frame, time: clock.time };
    },

    fireDue(frame) {
      const dueOnce = [];
      for (const entry of once.values()) {
        if (entry.due <= frame) {
          dueOnce.push(entry);
        }
      }
      for (const entry of dueOnce) {
        once.delete(entry.id);
      }

      const dueRepeating = [];
      for (const entry of repeating.values()) {
        if (entry.due <= frame) {
          dueRepeating.push(entry);
        }
      }
      for (const entry of dueRepeating) {
        entry.due = Math.max(frame + 1, msToFrame(clock.time + entry.period));
      }

      const snapshot = dueOnce.concat(dueRepeating);
      const report = { frame, fired: 0, errors: [] };
      firing = new Set(snapshot.map((entry) => entry.id));
      try {
        for (const entry of snapshot) {
          if (!firing.has(entry.id)) {
            continue;
          }
          report.fired += 1;
          try {
            entry.callback.apply(window, entry.args);
          } catch (error) {
            report.errors.push(describe(error));
          }
        }
      } finally {
        firing = new Set();
      }
      return report;
    },

    pending() {
      return {
        once: once.size,
        repeating: repeating.size,
        frame: clock.frame,
        time: clock.time,
      };
    },
  };

  Object.defineProperty(window, '__frameclock', {
    value: Object.freeze(control),
    enumerable: false,
    configurable: false,
    writable: false,
  });
})();
"""

ADVANCE_EXPRESSION = f"([frame, time]) => window.{CONTROL_OBJECT}.advanceTo(frame, time)"
FIRE_DUE_EXPRESSION = f"(frame) => window.{CONTROL_OBJECT}.fireDue(frame)"
PENDING_EXPRESSION = f"() => window.{CONTROL_OBJECT}.pending()"
INSTALLED_EXPRESSION = f"() => typeof window.{CONTROL_OBJECT} === 'object'"


def build_instrumentation_script(framerate: float) -> str:
    """
    Render the interception script for a frame rate

    Args:
        framerate: Frames per simulated second

    Returns:
        JavaScript source suitable for add_init_script

    Raises:
        ValueError: If framerate is not positive
    """
    if framerate <= 0:
        raise ValueError(f"Framerate must be positive, got {framerate}")
    return _SCRIPT_TEMPLATE.replace("__FRAMERATE__", json.dumps(float(framerate)))
