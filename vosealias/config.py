from __future__ import annotations

import os

import numpy as np

ENV_SEED = "VOSEALIAS_SEED"
ENV_CHECK = "VOSEALIAS_CHECK"
ENV_CHECK_ATOL = "VOSEALIAS_CHECK_ATOL"

DEFAULT_CHECK_ATOL = 1e-9


def _bool_env(key: str) -> bool:
    val = os.environ.get(key, "").strip().lower()
    return val not in ("", "0", "false", "no", "off")


def _int_env(key: str, default: int | None) -> int | None:
    raw = os.environ.get(key, "").strip()
    if raw == "":
        return default
    try:
        out = int(raw)
    except ValueError as e:
        raise ValueError(f"{key} must be an integer, got: {raw!r}") from e
    if out < 0:
        raise ValueError(f"{key} must be >= 0, got: {out}")
    return out


def _float_env(key: str, default: float) -> float:
    raw = os.environ.get(key, "").strip()
    if raw == "":
        return float(default)
    try:
        out = float(raw)
    except ValueError as e:
        raise ValueError(f"{key} must be a number, got: {raw!r}") from e
    if not np.isfinite(out) or out < 0.0:
        raise ValueError(f"{key} must be a finite number >= 0, got: {out}")
    return out


def default_seed() -> int | None:
    """Seed taken from ``VOSEALIAS_SEED`` (``None`` when unset)."""

    return _int_env(ENV_SEED, None)


def check_enabled() -> bool:
    return _bool_env(ENV_CHECK)


def check_atol() -> float:
    return _float_env(ENV_CHECK_ATOL, DEFAULT_CHECK_ATOL)


def default_generator(seed: int | None = None) -> np.random.Generator:
    """Return a reusable ``numpy.random.Generator``.

    ``seed`` falls back to ``VOSEALIAS_SEED``; with neither set the generator
    is seeded from OS entropy.
    """

    if seed is None:
        seed = default_seed()
    return np.random.default_rng(None if seed is None else int(seed))
