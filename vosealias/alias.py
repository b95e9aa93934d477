from __future__ import annotations

import warnings
from typing import Sequence

import numpy as np

from vosealias import config
from vosealias.errors import InvalidInput, PreconditionViolation

UNINITIALIZED = "uninitialized"
INITIALIZED = "initialized"
POPULATED = "populated"

_PROB_DTYPES = (np.dtype(np.float64), np.dtype(np.float32))


def _as_weight_array(weights) -> np.ndarray:
    try:
        raw = np.asarray(weights)
    except (TypeError, ValueError) as e:
        raise InvalidInput("not_1d", f"weights must be a flat numeric sequence ({e})") from e
    if raw.ndim != 1:
        raise InvalidInput("not_1d", f"weights must be 1D, got shape {raw.shape}")
    if raw.size == 0:
        raise InvalidInput("empty", "weights must be non-empty")
    if raw.dtype == object:
        # Decimal, Fraction and other real types that numpy keeps as objects.
        if any(isinstance(x, (bool, np.bool_, complex, str, bytes)) for x in raw):
            raise InvalidInput("not_numeric", "weights must be real numbers")
        try:
            return raw.astype(np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidInput("not_numeric", f"weights must be real numbers ({e})") from e
    if raw.dtype == np.bool_ or not (np.issubdtype(raw.dtype, np.integer) or np.issubdtype(raw.dtype, np.floating)):
        raise InvalidInput("not_numeric", f"weights must be real numbers, got dtype {raw.dtype}")
    return raw.astype(np.float64)


def _relative_weights(w: np.ndarray, w_max: float) -> np.ndarray:
    """``w / max(w)``: every entry in [0, 1], so sums of up to 2**52 terms stay finite."""

    return w / w_max


class AliasTable:
    """O(1) discrete sampler via Vose's alias method.

    The table goes through three states. ``initialize()`` validates the
    weights, scales them to ``w[i] * n / sum(w)`` and splits the indices into
    the Small (< 1) and Large (>= 1) worklists. ``populate()`` runs Vose's
    loop and fixes the ``prob`` / ``alias`` arrays. Only a populated table can
    be sampled; it is never mutated afterwards, so it can be shared between
    threads as long as every caller brings its own generator.

    Both worklists are drained last-in-first-out, which makes the resulting
    tables a deterministic function of the weights.

    Parameters
    ----------
    weights
        1D sequence of non-negative real weights with a positive sum. A
        float64 copy is taken by ``initialize()``.
    dtype
        Storage dtype of the probability table (float64 or float32).
    """

    def __init__(self, weights: Sequence[float] | np.ndarray, *, dtype=np.float64) -> None:
        dtype = np.dtype(dtype)
        if dtype not in _PROB_DTYPES:
            raise ValueError(f"dtype must be float64 or float32, got {dtype}")
        self._source = weights
        self._dtype = dtype
        self._state = UNINITIALIZED

        self._weights: np.ndarray | None = None
        self._weight_sum = 0.0
        self._n = 0

        # Construction scratch, released by populate().
        self._initial_probs: np.ndarray | None = None
        self._small: np.ndarray | None = None
        self._large: np.ndarray | None = None
        self._n_small = 0
        self._n_large = 0

        self._prob: np.ndarray | None = None
        self._alias: np.ndarray | None = None

    # ------------------------------------------------------------------
    # construction

    def initialize(self) -> "AliasTable":
        if self._state != UNINITIALIZED:
            raise PreconditionViolation(f"initialize() called on a table in state {self._state!r}")

        w = _as_weight_array(self._source)
        if not np.all(np.isfinite(w)):
            bad = int(np.flatnonzero(~np.isfinite(w))[0])
            raise InvalidInput("non_finite", f"weight at index {bad} is not finite ({float(w[bad])!r})")
        if np.any(w < 0.0):
            bad = int(np.flatnonzero(w < 0.0)[0])
            raise InvalidInput("negative_weight", f"weight at index {bad} is negative ({float(w[bad])!r})")
        w_max = float(w.max())
        if w_max <= 0.0:
            raise InvalidInput("non_positive_sum", "sum of weights must be > 0, got 0.0")

        # Scale by the largest weight first so neither the sum nor w * n can overflow.
        n = int(w.size)
        w_rel = _relative_weights(w, w_max)
        rel_sum = float(w_rel.sum())
        q = w_rel * float(n) / rel_sum

        small = np.empty((n,), dtype=np.int64)
        large = np.empty((n,), dtype=np.int64)
        is_small = q < 1.0
        small_idx = np.flatnonzero(is_small)
        large_idx = np.flatnonzero(~is_small)
        small[: small_idx.size] = small_idx
        large[: large_idx.size] = large_idx

        w.flags.writeable = False
        self._weights = w
        self._weight_sum = w_max * rel_sum
        self._n = n
        self._initial_probs = q
        self._small = small
        self._large = large
        self._n_small = int(small_idx.size)
        self._n_large = int(large_idx.size)
        self._source = None
        self._state = INITIALIZED
        return self

    def populate(self) -> "AliasTable":
        if self._state != INITIALIZED:
            raise PreconditionViolation(f"populate() requires an initialized table, state is {self._state!r}")

        n = self._n
        q = self._initial_probs
        small = self._small
        large = self._large
        n_small = self._n_small
        n_large = self._n_large

        prob = np.empty((n,), dtype=self._dtype)
        alias = np.empty((n,), dtype=np.int64)

        while n_small and n_large:
            n_small -= 1
            l = int(small[n_small])
            n_large -= 1
            g = int(large[n_large])

            ql = float(q[l])
            prob[l] = ql if ql > 0.0 else 0.0
            alias[l] = g

            qg = (float(q[g]) + ql) - 1.0
            q[g] = qg
            if qg < 1.0:
                small[n_small] = g
                n_small += 1
            else:
                large[n_large] = g
                n_large += 1

        # Leftovers in Small only appear through rounding; both sides are exact 1.
        rest = np.concatenate((large[:n_large], small[:n_small]))
        prob[rest] = 1.0
        alias[rest] = rest

        prob.flags.writeable = False
        alias.flags.writeable = False
        self._prob = prob
        self._alias = alias

        self._initial_probs = None
        self._small = None
        self._large = None
        self._n_small = 0
        self._n_large = 0
        self._state = POPULATED

        if config.check_enabled():
            self._check_reconstruction(config.check_atol())
        return self

    def _check_reconstruction(self, atol: float) -> None:
        w_rel = _relative_weights(self._weights, float(self._weights.max()))
        expected = w_rel / float(w_rel.sum())
        err = float(np.max(np.abs(reconstruct_probabilities(self) - expected)))
        if err > atol:
            warnings.warn(
                f"alias table reconstructs the input distribution with max abs error {err:.3e} (atol={atol:.1e})",
                RuntimeWarning,
                stacklevel=3,
            )

    # ------------------------------------------------------------------
    # sampling

    def _require_populated(self) -> None:
        if self._state != POPULATED:
            raise PreconditionViolation(f"alias table must be populated before sampling, state is {self._state!r}")

    def sample(self, rng: np.random.Generator) -> int:
        """Draw one index: roll a fair n-sided die, then flip a coin biased by ``prob[side]``."""

        self._require_populated()
        side = int(rng.integers(self._n))
        if float(rng.random()) < float(self._prob[side]):
            return side
        return int(self._alias[side])

    def sample_many(self, rng: np.random.Generator, size: int) -> np.ndarray:
        """Draw ``size`` indices at once (int64 array).

        Uses the same two draws per element as ``sample`` but requests them in
        blocks, so the stream differs from ``size`` calls to ``sample`` with
        the same generator state.
        """

        self._require_populated()
        size = int(size)
        if size < 0:
            raise ValueError(f"size must be >= 0, got {size}")
        side = rng.integers(0, self._n, size=size, dtype=np.int64)
        u = rng.random(size)
        return np.where(u < self._prob[side], side, self._alias[side])

    # ------------------------------------------------------------------
    # introspection

    @property
    def state(self) -> str:
        return self._state

    @property
    def n(self) -> int:
        return self._n

    def __len__(self) -> int:
        return self._n

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def weights(self) -> np.ndarray | None:
        return self._weights

    @property
    def weight_sum(self) -> float:
        """Total weight; ``inf`` when finite weights add up past the float64 range."""

        return self._weight_sum

    @property
    def initial_probs(self) -> np.ndarray:
        """Scaled probabilities ``w * n / sum(w)``; only exist between initialize() and populate()."""

        if self._state != INITIALIZED:
            raise PreconditionViolation(f"scaled probabilities are only kept while initialized, state is {self._state!r}")
        return self._initial_probs.copy()

    def worklist_sizes(self) -> tuple[int, int]:
        """``(len(Small), len(Large))`` of an initialized table."""

        if self._state != INITIALIZED:
            raise PreconditionViolation(f"worklists are only kept while initialized, state is {self._state!r}")
        return self._n_small, self._n_large

    @property
    def prob(self) -> np.ndarray:
        self._require_populated()
        return self._prob

    @property
    def alias(self) -> np.ndarray:
        self._require_populated()
        return self._alias

    def __repr__(self) -> str:
        return f"AliasTable(n={self._n}, state={self._state!r}, dtype={self._dtype.name})"


def build(weights: Sequence[float] | np.ndarray, *, dtype=np.float64) -> AliasTable:
    """Build a ready-to-sample alias table for indices with probability ∝ weights.

    Raises
    ------
    InvalidInput
        Empty or non-1D input, a negative or non-finite weight, or a
        non-positive total weight.
    """

    return AliasTable(weights, dtype=dtype).initialize().populate()


def sample(table: AliasTable, rng: np.random.Generator) -> int:
    return table.sample(rng)


def probabilities(table: AliasTable) -> np.ndarray:
    return table.prob


def aliases(table: AliasTable) -> np.ndarray:
    return table.alias


def reconstruct_probabilities(table: AliasTable) -> np.ndarray:
    """Distribution implied by the table.

    ``P(i) = prob[i] / n + sum_{j: alias[j] = i} (1 - prob[j]) / n``; for a
    correct table this equals ``weights / weights.sum()`` up to rounding.
    """

    prob = np.asarray(table.prob, dtype=np.float64)
    alias = np.asarray(table.alias)
    n = int(prob.size)
    out = prob / float(n)
    donor = prob < 1.0
    out += np.bincount(alias[donor], weights=(1.0 - prob[donor]) / float(n), minlength=n)
    return out
