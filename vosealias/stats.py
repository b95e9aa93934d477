"""Statistics over streams of sampled indices.

These helpers only consume the indices returned by ``AliasTable.sample`` /
``sample_many`` together with the input weights; they never look inside a
table.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np


def _as_index_array(samples) -> np.ndarray:
    s = np.asarray(samples, dtype=np.int64).ravel()
    if s.size and int(s.min()) < 0:
        raise ValueError("sample indices must be >= 0")
    return s


def _as_distribution(weights) -> np.ndarray:
    w = np.asarray(weights, dtype=np.float64).ravel()
    if w.size == 0:
        raise ValueError("weights must be non-empty")
    if not np.all(np.isfinite(w)) or np.any(w < 0.0):
        raise ValueError("weights must be finite and >= 0")
    w_max = float(w.max())
    if w_max <= 0.0:
        raise ValueError("sum of weights must be > 0")
    w = w / w_max
    return w / float(w.sum())


def empirical_frequencies(samples, n: int) -> np.ndarray:
    """Fraction of draws that landed on each of the ``n`` indices."""

    s = _as_index_array(samples)
    n = int(n)
    if n <= 0:
        raise ValueError("n must be > 0")
    if s.size and int(s.max()) >= n:
        raise ValueError(f"sample index {int(s.max())} out of range for n={n}")
    if s.size == 0:
        return np.zeros((n,), dtype=np.float64)
    return np.bincount(s, minlength=n).astype(np.float64) / float(s.size)


class RunningStats:
    """Welford accumulator for the mean / variance of a stream of numbers."""

    def __init__(self) -> None:
        self._count = 0
        self._mean = 0.0
        self._m2 = 0.0

    def push(self, x: float) -> None:
        x = float(x)
        self._count += 1
        delta = x - self._mean
        self._mean += delta / self._count
        self._m2 += delta * (x - self._mean)

    def extend(self, xs: Iterable[float]) -> None:
        for x in xs:
            self.push(x)

    @property
    def count(self) -> int:
        return self._count

    @property
    def mean(self) -> float:
        if self._count == 0:
            raise ValueError("mean of an empty stream")
        return self._mean

    @property
    def variance(self) -> float:
        """Sample variance (ddof=1); 0 for a single value."""

        if self._count == 0:
            raise ValueError("variance of an empty stream")
        if self._count == 1:
            return 0.0
        return self._m2 / (self._count - 1)

    @property
    def std(self) -> float:
        return math.sqrt(self.variance)


def z_score(value: float, mean: float, std: float) -> float:
    std = float(std)
    if not std > 0.0:
        raise ValueError(f"std must be > 0, got {std}")
    return (float(value) - float(mean)) / std


def frequency_z_scores(samples, weights: Sequence[float] | np.ndarray) -> np.ndarray:
    """Per-index z-score of the observed counts against Binomial(N, p_i).

    ``z_i = (count_i - N p_i) / sqrt(N p_i (1 - p_i))``. Indices with
    ``p_i`` equal to 0 or 1 have zero variance and get ``z_i = 0``.
    """

    p = _as_distribution(weights)
    s = _as_index_array(samples)
    n_draws = int(s.size)
    if n_draws == 0:
        raise ValueError("samples must be non-empty")
    if int(s.max()) >= int(p.size):
        raise ValueError(f"sample index {int(s.max())} out of range for n={int(p.size)}")

    counts = np.bincount(s, minlength=int(p.size)).astype(np.float64)
    var = float(n_draws) * p * (1.0 - p)
    z = np.zeros_like(p)
    ok = var > 0.0
    z[ok] = (counts[ok] - float(n_draws) * p[ok]) / np.sqrt(var[ok])
    return z


@dataclass(frozen=True)
class SampleSummary:
    """Expected vs observed behaviour of a batch of draws.

    Attributes
    ----------
    n_draws
        Number of sampled indices.
    expected
        ``weights / sum(weights)``.
    observed
        Empirical frequency per index.
    mean, std
        Mean and sample standard deviation of the drawn index values.
    expected_mean
        ``sum_i i * expected[i]``.
    z_scores
        ``frequency_z_scores`` of the batch.
    """

    n_draws: int
    expected: np.ndarray
    observed: np.ndarray
    mean: float
    std: float
    expected_mean: float
    z_scores: np.ndarray

    @property
    def max_abs_error(self) -> float:
        return float(np.max(np.abs(self.observed - self.expected)))


def summarize(samples, weights: Sequence[float] | np.ndarray) -> SampleSummary:
    p = _as_distribution(weights)
    s = _as_index_array(samples)
    if s.size == 0:
        raise ValueError("samples must be non-empty")

    rs = RunningStats()
    rs.extend(s.tolist())

    return SampleSummary(
        n_draws=int(s.size),
        expected=p,
        observed=empirical_frequencies(s, int(p.size)),
        mean=rs.mean,
        std=rs.std,
        expected_mean=float(np.dot(np.arange(p.size, dtype=np.float64), p)),
        z_scores=frequency_z_scores(s, p),
    )
