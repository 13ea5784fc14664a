"""Timestamped flow tracing for preheat diagnostics."""

import time

from scrollpreheat.utils.settings import settings

_flow_log_last: dict[str, float] = {}


def trace_enabled() -> bool:
    try:
        return bool(settings.preheat_value('preheat_trace_logs'))
    except Exception:
        return False


def log_flow(component: str, message: str, *, level: str = "DEBUG",
             throttle_key: str | None = None, every_s: float | None = None):
    """Timestamped, optionally throttled flow logging."""
    # WARN and above always print; DEBUG/INFO only with `preheat_trace_logs`.
    if level in ("DEBUG", "INFO") and not trace_enabled():
        return

    now = time.time()
    if throttle_key and every_s is not None:
        last = _flow_log_last.get(throttle_key, 0.0)
        if (now - last) < every_s:
            return
        _flow_log_last[throttle_key] = now
    ts = time.strftime("%H:%M:%S", time.localtime(now)) + f".{int((now % 1) * 1000):03d}"
    print(f"[{ts}][TRACE][{component}][{level}] {message}")
