"""
Generation Benchmark
====================

Measures sequence generation throughput and reports how the generated rounds
are distributed: lengths, gap counts, and how often the gap picker had to
stop short of the requested count.

Usage:
    python -m tools.benchmark_generation [--count N] [--seed SEED] [--quick]
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import Dict, List

import numpy as np

# Add project root to path for direct script execution
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from gaprunner.gap_core.config_loader import GameConfig, GameMode, load_config
from gaprunner.gap_core.rng import RandomSource
from gaprunner.gap_core.selection_pool import SelectionPoolGenerator
from gaprunner.gap_core.sequence_generator import SequenceGenerator, has_gap_run
from gaprunner.gap_core.tile_catalog import TileCatalog


def benchmark_mode(
    config: GameConfig,
    mode: GameMode,
    count: int = 10000,
    seed: int = 42
) -> Dict:
    """
    Generate count rounds (sequence + pool) in one mode.

    Args:
        config: Game configuration.
        mode: Game mode.
        count: Number of rounds to generate.
        seed: Random seed.

    Returns:
        Dict with timing results and distribution stats.
    """
    catalog = TileCatalog(config)
    rng = RandomSource(seed)
    sequences = SequenceGenerator(catalog, rng, config)
    pools = SelectionPoolGenerator(rng, config)
    max_run = config.sequence.max_consecutive_gaps

    lengths = np.zeros(count, dtype=np.int16)
    gaps = np.zeros(count, dtype=np.int16)
    requested = np.zeros(count, dtype=np.int16)
    violations = 0

    start = time.perf_counter()
    for i in range(count):
        sequence = sequences.generate(mode)
        pools.generate(mode, catalog, sequence.family)
        lengths[i] = len(sequence)
        gaps[i] = sequence.gap_count
        requested[i] = sequence.requested_gaps
        if has_gap_run(sequence.gap_positions, max_run):
            violations += 1
    elapsed = time.perf_counter() - start

    return {
        "mode": mode.value,
        "count": count,
        "elapsed_seconds": elapsed,
        "rounds_per_second": count / elapsed,
        "mean_length": float(lengths.mean()),
        "mean_gaps": float(gaps.mean()),
        "degraded_rate": float((gaps < requested).mean()),
        "gap_histogram": np.bincount(gaps, minlength=config.sequence.max_length).tolist(),
        "run_violations": violations,
    }


def run_all_benchmarks(count: int = 10000, seed: int = 42) -> List[Dict]:
    """Run the benchmark for every mode and print a summary."""
    config = load_config()
    results = []

    print("=" * 60)
    print("GAPRUNNER GENERATION BENCHMARK")
    print("=" * 60)
    print()

    for mode in GameMode:
        print(f"Benchmarking {mode.value} mode...")
        result = benchmark_mode(config, mode, count=count, seed=seed)
        results.append(result)
        print(f"  Rounds/sec:    {result['rounds_per_second']:.1f}")
        print(f"  Mean length:   {result['mean_length']:.2f}")
        print(f"  Mean gaps:     {result['mean_gaps']:.2f}")
        print(f"  Degraded:      {result['degraded_rate']:.1%}")
        print(f"  Gap histogram: {result['gap_histogram']}")
        print(f"  Violations:    {result['run_violations']}")
        print()

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark GapRunner round generation")
    parser.add_argument("--count", type=int, default=10000, help="Rounds per mode")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer rounds)")

    args = parser.parse_args()

    count = 1000 if args.quick else args.count
    results = run_all_benchmarks(count=count, seed=args.seed)

    return 1 if any(r["run_violations"] for r in results) else 0


if __name__ == "__main__":
    sys.exit(main())
