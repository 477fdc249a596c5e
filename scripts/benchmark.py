#!/usr/bin/env python3
"""
Benchmark Script for KVStore

Measures the performance characteristics of the in-memory store, the
closest-key search and the persistence round trip. Useful for profiling
and optimization.

Usage:
    python scripts/benchmark.py                    # Run all benchmarks
    python scripts/benchmark.py --operations 10000 # Custom operation count
    python scripts/benchmark.py --profile          # Enable cProfile
"""

import argparse
import os
import random
import statistics
import string
import sys
import tempfile
import time
from typing import Any, Callable, Dict, List

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from kvstore import KVStore


def random_string(length: int) -> str:
    """Generate a random alphanumeric string."""
    return ''.join(random.choices(string.ascii_letters + string.digits, k=length))


def measure_time(func: Callable, iterations: int = 1) -> Dict[str, float]:
    """Measure execution time statistics."""
    times = []

    for _ in range(iterations):
        start = time.perf_counter()
        func()
        elapsed = (time.perf_counter() - start) * 1000  # Convert to ms
        times.append(elapsed)

    return {
        "min_ms": min(times),
        "max_ms": max(times),
        "mean_ms": statistics.mean(times),
        "median_ms": statistics.median(times),
        "total_ms": sum(times),
    }


class Benchmark:
    """Collection of benchmarks for KVStore operations."""

    def __init__(self, workdir: str, operations: int = 10000, key_size: int = 16,
                 value_size: int = 64, queries: int = 100):
        self.workdir = workdir
        self.operations = operations
        self.key_size = key_size
        self.value_size = value_size
        self.queries = queries

        # Pre-generate test data
        self.keys = [random_string(key_size) for _ in range(operations)]
        self.values = [random_string(value_size) for _ in range(operations)]

    def _new_store(self, name: str) -> KVStore:
        return KVStore(os.path.join(self.workdir, f"{name}.kvs"), autoload=False)

    def _populated_store(self, name: str) -> KVStore:
        store = self._new_store(name)
        for i in range(self.operations):
            store.set(self.keys[i], self.values[i])
        return store

    def _finish(self, stats: Dict[str, Any], operation: str, count: int) -> Dict[str, Any]:
        stats["ops_per_second"] = count / (stats["total_ms"] / 1000)
        stats["operation"] = operation
        stats["count"] = count
        return stats

    def benchmark_set(self) -> Dict[str, Any]:
        """Benchmark SET operations."""
        store = self._new_store("set")

        def run():
            for i in range(self.operations):
                store.set(self.keys[i], self.values[i])

        return self._finish(measure_time(run), "SET", self.operations)

    def benchmark_get(self) -> Dict[str, Any]:
        """Benchmark GET operations on present keys."""
        store = self._populated_store("get")

        def run():
            for i in range(self.operations):
                store.get(self.keys[i])

        return self._finish(measure_time(run), "GET (hit)", self.operations)

    def benchmark_get_miss(self) -> Dict[str, Any]:
        """Benchmark GET operations on missing keys."""
        store = self._populated_store("get_miss")
        miss_keys = [random_string(self.key_size + 1) for _ in range(self.operations)]

        def run():
            for key in miss_keys:
                store.get(key)

        return self._finish(measure_time(run), "GET (miss)", self.operations)

    def benchmark_append(self) -> Dict[str, Any]:
        """Benchmark APPEND operations growing value lists."""
        store = self._populated_store("append")

        def run():
            for i in range(self.operations):
                store.append(self.keys[i % 100], self.values[i])

        stats = self._finish(measure_time(run), "APPEND", self.operations)
        stats["max_depth"] = store.max_depth
        return stats

    def benchmark_remove(self) -> Dict[str, Any]:
        """Benchmark REMOVE operations."""
        store = self._populated_store("remove")

        def run():
            for i in range(self.operations):
                store.remove(self.keys[i])

        return self._finish(measure_time(run), "REMOVE", self.operations)

    def benchmark_closest(self) -> Dict[str, Any]:
        """Benchmark closest-key searches over the whole store."""
        store = self._populated_store("closest")
        queries = [random_string(self.key_size) for _ in range(self.queries)]

        def run():
            for query in queries:
                store.closest(query)

        return self._finish(measure_time(run), "CLOSEST", self.queries)

    def benchmark_swap_all(self) -> Dict[str, Any]:
        """Benchmark swapping every entry of a one-to-one store."""
        store = self._populated_store("swap_all")

        def run():
            store.swap_all(unique=True)

        return self._finish(measure_time(run), "SWAP ALL", self.operations)

    def benchmark_save_load(self) -> Dict[str, Any]:
        """Benchmark a save followed by a reload."""
        store = self._populated_store("save_load")

        def run():
            store.save()
            store.load()

        stats = self._finish(measure_time(run, iterations=5), "SAVE + LOAD", self.operations * 5)
        stats["file_size"] = store.size
        return stats

    def run_all(self) -> List[Dict[str, Any]]:
        """Run all benchmarks."""
        benchmarks = [
            ("SET", self.benchmark_set),
            ("GET (hit)", self.benchmark_get),
            ("GET (miss)", self.benchmark_get_miss),
            ("APPEND", self.benchmark_append),
            ("REMOVE", self.benchmark_remove),
            ("CLOSEST", self.benchmark_closest),
            ("SWAP ALL", self.benchmark_swap_all),
            ("SAVE + LOAD", self.benchmark_save_load),
        ]

        results = []
        for name, func in benchmarks:
            print(f"Running: {name}...", end=" ", flush=True)
            result = func()
            print(f"{result['ops_per_second']:,.0f} ops/sec")
            results.append(result)

        return results


def print_results(results: List[Dict[str, Any]]):
    """Print benchmark results in a table."""
    print()
    print("=" * 70)
    print("                        BENCHMARK RESULTS")
    print("=" * 70)
    print(f"{'Operation':<30} {'Ops/sec':>12} {'Mean (ms)':>12} {'Total (ms)':>12}")
    print("-" * 70)

    for r in results:
        print(f"{r['operation']:<30} {r['ops_per_second']:>12,.0f} "
              f"{r['mean_ms']:>12.3f} {r['total_ms']:>12.1f}")

    print("=" * 70)

    # Summary
    total_ops = sum(r['count'] for r in results)
    total_time = sum(r['total_ms'] for r in results)
    avg_ops = total_ops / (total_time / 1000)

    print()
    print(f"Total operations: {total_ops:,}")
    print(f"Total time: {total_time / 1000:.2f} seconds")
    print(f"Average throughput: {avg_ops:,.0f} ops/sec")


def main():
    parser = argparse.ArgumentParser(
        description="Benchmark KVStore operations",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--operations", "-n",
        type=int,
        default=10000,
        help="Number of operations per benchmark"
    )
    parser.add_argument(
        "--key-size",
        type=int,
        default=16,
        help="Size of keys"
    )
    parser.add_argument(
        "--value-size",
        type=int,
        default=64,
        help="Size of values"
    )
    parser.add_argument(
        "--queries",
        type=int,
        default=100,
        help="Number of closest-key queries"
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Enable cProfile profiling"
    )

    args = parser.parse_args()

    print("KVStore Benchmark")
    print("=================")
    print(f"Operations per test: {args.operations:,}")
    print(f"Key size: {args.key_size}")
    print(f"Value size: {args.value_size}")
    print(f"Closest queries: {args.queries:,}")
    print()

    with tempfile.TemporaryDirectory() as workdir:
        benchmark = Benchmark(
            workdir,
            operations=args.operations,
            key_size=args.key_size,
            value_size=args.value_size,
            queries=args.queries,
        )

        if args.profile:
            import cProfile
            import pstats

            profiler = cProfile.Profile()
            profiler.enable()
            results = benchmark.run_all()
            profiler.disable()

            print_results(results)

            print()
            print("Profiling Results (top 20):")
            print("-" * 70)
            stats = pstats.Stats(profiler)
            stats.sort_stats('cumulative')
            stats.print_stats(20)
        else:
            results = benchmark.run_all()
            print_results(results)


if __name__ == "__main__":
    main()
