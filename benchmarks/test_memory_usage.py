"""
Memory usage benchmarks for JSON parsing.

Measures peak memory per library, and checks that streaming a document
through jtree's bounded buffer keeps peak memory independent of the
document's length.
"""

import json
import tracemalloc
from typing import Any

import orjson
import pytest
import ujson  # type: ignore[import-untyped]

import jtree
from benchmarks.data_generators import DATA_TYPES
from benchmarks.data_generators import PaddedSource
from benchmarks.data_generators import generate_test_data


def measure_memory_usage(
    func: Any, *args: Any, **kwargs: Any
) -> tuple[Any, int]:
    """
    Measures peak memory usage during function execution.

    Returns:
        Tuple of (function_result, peak_memory_bytes)
    """
    tracemalloc.start()
    try:
        result = func(*args, **kwargs)
        _, peak = tracemalloc.get_traced_memory()
        return result, peak
    finally:
        tracemalloc.stop()


def _measure_all(test_data: str) -> dict[str, int]:
    peaks = {}
    _, peaks["stdlib_json"] = measure_memory_usage(json.loads, test_data)
    _, peaks["orjson"] = measure_memory_usage(
        orjson.loads, test_data.encode("utf-8")
    )
    _, peaks["ujson"] = measure_memory_usage(ujson.loads, test_data)
    _, peaks["jtree"] = measure_memory_usage(jtree.loads, test_data)
    return peaks


class TestMemoryUsage:
    """Memory usage benchmarks for JSON parsing."""

    @pytest.mark.parametrize("data_type", DATA_TYPES)
    def test_jtree_memory(self, data_type: str) -> None:
        """Measures memory usage for jtree."""
        test_data = generate_test_data(data_type)
        result, peak_memory = measure_memory_usage(jtree.loads, test_data)

        print(f"\njtree {data_type}: {peak_memory:,} bytes")
        assert result is not None

    @pytest.mark.parametrize("padding", [200_000, 2_000_000])
    def test_streaming_memory_is_bounded(self, padding: int) -> None:
        """Streams a mostly-whitespace document through a 4 KiB buffer."""
        result, peak_memory = measure_memory_usage(
            jtree.load, PaddedSource(padding), max_buffer_size=4096
        )

        print(f"\njtree stream of {padding:,} chars: {peak_memory:,} bytes")
        assert result == []
        assert peak_memory < 256 * 1024

    def test_memory_comparison_summary(self) -> None:
        """Prints a memory usage comparison across libraries."""
        results = {
            data_type: _measure_all(generate_test_data(data_type))
            for data_type in DATA_TYPES
        }
        libraries = ["stdlib_json", "orjson", "ujson", "jtree"]

        print("\n" + "=" * 72)
        print("MEMORY USAGE COMPARISON (bytes)")
        print("=" * 72)
        print(f"{'Data Type':<20}" + "".join(f"{n:<13}" for n in libraries))
        print("-" * 72)
        for data_type, peaks in results.items():
            row = "".join(f"{peaks[n]:<13,}" for n in libraries)
            print(f"{data_type:<20}{row}")
        print("=" * 72)

        print("\nMEMORY vs stdlib_json")
        for data_type, peaks in results.items():
            baseline = peaks["stdlib_json"]
            ratios = " ".join(
                f"{n}={peaks[n] / baseline:.2f}x" for n in libraries[1:]
            )
            print(f"{data_type}: {ratios}")

        assert len(results) == len(DATA_TYPES)
