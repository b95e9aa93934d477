from __future__ import annotations

import argparse
import sys
import time
from typing import Sequence

import numpy as np

from vosealias.alias import build
from vosealias.config import default_generator
from vosealias.errors import InvalidInput
from vosealias.stats import summarize


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Draw from a weighted distribution with Vose's alias method")
    parser.add_argument(
        "--weights",
        type=float,
        nargs="+",
        default=[40.0, 60.0, 80.0, 20.0],
        help="Non-negative weights (default: 40 60 80 20)",
    )
    parser.add_argument("--draws", type=int, default=100_000, help="Number of samples to draw")
    parser.add_argument("--seed", type=int, default=None, help="Generator seed (default: $VOSEALIAS_SEED or entropy)")
    parser.add_argument("--index", type=int, default=0, help="Index whose probability is reported first")
    parser.add_argument("--dtype", type=str, default="float64", choices=["float64", "float32"], help="Probability table dtype")
    parser.add_argument("--scalar", action="store_true", help="Draw one sample per call instead of in blocks")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _parser().parse_args(argv)

    if args.draws < 1:
        print("error: --draws must be >= 1", file=sys.stderr)
        return 2
    if not 0 <= args.index < len(args.weights):
        print(f"error: --index must be in [0, {len(args.weights)})", file=sys.stderr)
        return 2

    rng = default_generator(args.seed)

    t0 = time.perf_counter()
    try:
        table = build(args.weights, dtype=np.dtype(args.dtype))
    except InvalidInput as e:
        print(f"error: invalid weights ({e.reason}): {e}", file=sys.stderr)
        return 2
    t1 = time.perf_counter()
    if args.scalar:
        samples = np.fromiter((table.sample(rng) for _ in range(args.draws)), dtype=np.int64, count=args.draws)
    else:
        samples = table.sample_many(rng, args.draws)
    t2 = time.perf_counter()

    summary = summarize(samples, table.weights)
    k = int(args.index)

    print(f"Build Time (secs): {t1 - t0:.6f}")
    print(f"Total Time (secs): {t2 - t0:.6f}")
    print(f"Actual Prob : {100.0 * summary.expected[k]:.4f}")
    print(f"Visualised Prob: {100.0 * summary.observed[k]:.4f}")
    print(f"- draws: {summary.n_draws}")
    print(f"- index mean: {summary.mean:.6f} (expected {summary.expected_mean:.6f})")
    print(f"- index std: {summary.std:.6f}")
    print("  idx    weight    expected    observed         z")
    for i in range(table.n):
        print(
            f"  {i:>3d} {table.weights[i]:>9.4g} {summary.expected[i]:>11.6f} "
            f"{summary.observed[i]:>11.6f} {summary.z_scores[i]:>9.3f}"
        )
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
