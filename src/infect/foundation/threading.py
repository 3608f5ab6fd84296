"""Free-threading detection and worker sizing.

Python 3.13+ supports free-threading (PEP 703) which disables the GIL.
Task executors size their thread pools with optimal_workers().
"""

import os
import sys
from functools import cache


@cache
def is_free_threaded() -> bool:
    """Check if running on a free-threaded (no-GIL) Python build.

    Detection methods (in order):
    1. sys._is_gil_enabled() - Python 3.13+ direct API
    2. sysconfig Py_GIL_DISABLED - build-time flag
    3. PYTHON_GIL=0 environment variable
    """
    if hasattr(sys, "_is_gil_enabled"):
        return not sys._is_gil_enabled()

    import sysconfig

    gil_disabled = sysconfig.get_config_var("Py_GIL_DISABLED")
    if gil_disabled:
        return bool(int(gil_disabled))

    return os.environ.get("PYTHON_GIL", "1") == "0"


@cache
def cpu_count() -> int:
    """Get available CPU cores."""
    try:
        # Container-aware where supported
        return len(os.sched_getaffinity(0))
    except (AttributeError, OSError):
        return os.cpu_count() or 4


def optimal_workers() -> int:
    """Get the default worker count for task executors.

    Tasks wait on I/O (network, timers, files), so threads help regardless
    of the GIL: 4x CPU count.
    """
    return cpu_count() * 4


def runtime_info() -> dict:
    """Get runtime parallelism info for diagnostics."""
    return {
        "python_version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        "free_threaded": is_free_threaded(),
        "cpu_count": cpu_count(),
        "default_task_workers": optimal_workers(),
    }
