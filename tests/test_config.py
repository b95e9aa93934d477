"""Tests for environment-driven configuration."""

from __future__ import annotations

import numpy as np
import pytest

from vosealias import config


def test_defaults(monkeypatch):
    for key in (config.ENV_SEED, config.ENV_CHECK, config.ENV_CHECK_ATOL):
        monkeypatch.delenv(key, raising=False)
    assert config.default_seed() is None
    assert config.check_enabled() is False
    assert config.check_atol() == config.DEFAULT_CHECK_ATOL


@pytest.mark.parametrize("raw, expected", [("1", True), ("yes", True), ("0", False), ("off", False), ("", False)])
def test_check_flag(monkeypatch, raw, expected):
    monkeypatch.setenv(config.ENV_CHECK, raw)
    assert config.check_enabled() is expected


def test_seeded_generator_from_env(monkeypatch):
    monkeypatch.setenv(config.ENV_SEED, "42")
    a = config.default_generator().random(5)
    b = np.random.default_rng(42).random(5)
    assert np.array_equal(a, b)


def test_explicit_seed_wins(monkeypatch):
    monkeypatch.setenv(config.ENV_SEED, "42")
    a = config.default_generator(7).random(3)
    assert np.array_equal(a, np.random.default_rng(7).random(3))


@pytest.mark.parametrize("raw", ["abc", "-3"])
def test_bad_seed(monkeypatch, raw):
    monkeypatch.setenv(config.ENV_SEED, raw)
    with pytest.raises(ValueError, match=config.ENV_SEED):
        config.default_seed()


@pytest.mark.parametrize("raw", ["tiny", "-1e-9", "nan"])
def test_bad_atol(monkeypatch, raw):
    monkeypatch.setenv(config.ENV_CHECK_ATOL, raw)
    with pytest.raises(ValueError, match=config.ENV_CHECK_ATOL):
        config.check_atol()
