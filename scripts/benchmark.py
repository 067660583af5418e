#!/usr/bin/env python3
"""
Benchmark script for lzjd sketch construction and comparison.

Hashes random byte sequences (10000 blocks of 32 random bytes) with every
hasher/strategy combination and times building two sketches plus their
distance.
"""

import time
from typing import List, Tuple

import click
import numpy as np
from rich.console import Console
from rich.table import Table

from lzjd.core.builders import BUILDERS, get_builder
from lzjd.core.hashers import HASHERS
from lzjd.core.similarity import distance


def generate_byte_sequence(rng: np.random.Generator, blocks: int = 10000, block_size: int = 32) -> bytes:
    """Random bytes, built block by block."""
    return rng.integers(0, 256, size=(blocks, block_size), dtype=np.uint8).tobytes()


def time_combination(hasher: str, strategy: str, seq_a: bytes, seq_b: bytes,
                     rounds: int) -> Tuple[float, float]:
    """Return (mean seconds per round, last distance)."""
    builder = get_builder(strategy, HASHERS[hasher])
    timings: List[float] = []
    dist = 0.0
    for _ in range(rounds):
        start = time.perf_counter()
        dict_a = builder.build(seq_a)
        dict_b = builder.build(seq_b)
        dist = distance(dict_a, dict_b)
        timings.append(time.perf_counter() - start)
    return float(np.mean(timings)), dist


@click.command()
@click.option("--blocks", default=10000, show_default=True, help="Number of 32-byte blocks per sequence")
@click.option("--rounds", default=3, show_default=True, help="Timed rounds per combination")
@click.option("--seed", default=0, show_default=True, help="Random seed")
@click.option("--strategy", "strategies", multiple=True, type=click.Choice(sorted(BUILDERS)),
              help="Restrict to these strategies (default: all)")
def main(blocks: int, rounds: int, seed: int, strategies: Tuple[str, ...]):
    """Time sketch construction and distance on random data."""
    console = Console()
    rng = np.random.default_rng(seed)
    seq_a = generate_byte_sequence(rng, blocks)
    seq_b = generate_byte_sequence(rng, blocks)

    table = Table(title=f"LZJD benchmark ({len(seq_a)} bytes per sequence)")
    table.add_column("Hasher")
    table.add_column("Strategy")
    table.add_column("Mean time (s)", justify="right")
    table.add_column("Distance", justify="right")

    for hasher in sorted(HASHERS):
        for strategy in strategies or sorted(BUILDERS):
            mean, dist = time_combination(hasher, strategy, seq_a, seq_b, rounds)
            table.add_row(hasher, strategy, f"{mean:.3f}", f"{dist:.4f}")

    console.print(table)


if __name__ == "__main__":
    main()
