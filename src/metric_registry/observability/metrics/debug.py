"""Observability – process and runtime debug metrics.

Each metric is an ordinary store instrument whose value is read from the
process at scrape time, so registering them twice is a dedup no-op.
"""
from __future__ import annotations

import dataclasses
import gc
import threading
from collections.abc import Callable

import psutil

from metric_registry.observability.metrics.ports import MetricKind


@dataclasses.dataclass(frozen=True)
class DebugMetric:
    name: str
    help_text: str
    kind: MetricKind
    read: Callable[[], float]


def _cpu_seconds(proc: psutil.Process) -> float:
    times = proc.cpu_times()
    return times.user + times.system


def _gc_collections() -> float:
    return float(sum(gen["collections"] for gen in gc.get_stats()))


def debug_metrics(proc: psutil.Process | None = None) -> list[DebugMetric]:
    """Describe the debug metrics available on this platform."""
    proc = proc or psutil.Process()
    metrics = [
        DebugMetric(
            "process_cpu_seconds",
            "Total user and system CPU time spent in seconds.",
            MetricKind.COUNTER,
            lambda: _cpu_seconds(proc),
        ),
        DebugMetric(
            "process_resident_memory_bytes",
            "Resident memory size in bytes.",
            MetricKind.GAUGE,
            lambda: float(proc.memory_info().rss),
        ),
        DebugMetric(
            "process_virtual_memory_bytes",
            "Virtual memory size in bytes.",
            MetricKind.GAUGE,
            lambda: float(proc.memory_info().vms),
        ),
        DebugMetric(
            "process_start_time_seconds",
            "Start time of the process since unix epoch in seconds.",
            MetricKind.GAUGE,
            proc.create_time,
        ),
        DebugMetric(
            "python_threads",
            "Number of live Python threads.",
            MetricKind.GAUGE,
            lambda: float(threading.active_count()),
        ),
        DebugMetric(
            "python_gc_collections",
            "Number of garbage collector runs across all generations.",
            MetricKind.COUNTER,
            _gc_collections,
        ),
    ]
    if hasattr(proc, "num_fds"):
        metrics.append(
            DebugMetric(
                "process_open_fds",
                "Number of open file descriptors.",
                MetricKind.GAUGE,
                lambda: float(proc.num_fds()),
            )
        )
    return metrics


__all__ = ["DebugMetric", "debug_metrics"]
