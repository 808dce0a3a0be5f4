"""
Hot-path profiling for the reader, parser and serializer.

Enabled by setting ``JTREE_PROFILE`` in the environment; otherwise every
hook below is a no-op.
"""

import os
import time
from dataclasses import dataclass
from typing import Any

PROFILE_HOT_PATHS = __debug__ and "JTREE_PROFILE" in os.environ


@dataclass
class HotPathStats:
    """Accumulated timings for one instrumented code path."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    chars_processed: int = 0

    def record_call(self, duration_ns: int, chars: int = 0) -> None:
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.chars_processed += chars

    @property
    def ns_per_char(self) -> float:
        if not self.chars_processed:
            return 0.0
        return self.total_time_ns / self.chars_processed


def format_hot_path_stats(stats: dict[str, HotPathStats]) -> str:
    """Renders collected stats as a fixed-width table, slowest path first."""
    lines = [f"{'path':<14} {'calls':>9} {'total ms':>10} {'chars':>11}"]
    ordered = sorted(
        stats.values(), key=lambda s: s.total_time_ns, reverse=True
    )
    for entry in ordered:
        lines.append(
            f"{entry.function_name:<14} {entry.call_count:>9,} "
            f"{entry.total_time_ns / 1e6:>10.2f} {entry.chars_processed:>11,}"
        )
    return "\n".join(lines)


if PROFILE_HOT_PATHS:
    _hot_path_stats: dict[str, HotPathStats] = {}

    class ProfileContext:
        """
        Times the enclosed block under ``func_name``.

        Character counts that are only known once the block has scanned its
        input are added with ``count``.
        """

        def __init__(self, func_name: str, chars_to_process: int = 0):
            self.func_name = func_name
            self.chars = chars_to_process
            self.start_time = 0

        def count(self, chars: int) -> None:
            self.chars += chars

        def __enter__(self) -> "ProfileContext":
            self.start_time = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            duration = time.perf_counter_ns() - self.start_time
            if self.func_name not in _hot_path_stats:
                _hot_path_stats[self.func_name] = HotPathStats(self.func_name)
            _hot_path_stats[self.func_name].record_call(duration, self.chars)

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        """Returns a snapshot of the collected statistics."""
        return _hot_path_stats.copy()

    def clear_hot_path_stats() -> None:
        _hot_path_stats.clear()

else:

    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, func_name: str, chars_to_process: int = 0) -> None:
            pass

        def count(self, chars: int) -> None:
            pass

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass
