"""Shared fixtures for the gmproc test suite.

This module provides:
- A deterministic numpy RNG
- Small reference records (sine waves in g)
- A non-interactive matplotlib backend
"""

import os

import matplotlib
import numpy as np
import pytest

matplotlib.use("Agg")

from gmproc import Waveform, WaveformMetadata  # noqa: E402


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Deterministic numpy RNG; override the seed with TEST_RNG_SEED."""
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


def make_sine(frequency=1.0, amplitude=1.0, duration=10.0, dt=0.01, units="g"):
    n = int(round(duration / dt)) + 1
    t = np.arange(n) * dt
    return Waveform(t, amplitude * np.sin(2 * np.pi * frequency * t), WaveformMetadata(units=units))


@pytest.fixture
def sine_1hz() -> Waveform:
    """1 Hz, 1 g sine over 10 s at 100 samples/s."""
    return make_sine()


@pytest.fixture
def noisy_record(rng) -> Waveform:
    """Uniform white noise in g, 20 s at 100 samples/s."""
    t = np.arange(2000) * 0.01
    return Waveform(t, rng.uniform(-0.2, 0.2, t.size), WaveformMetadata(units="g"))


@pytest.fixture
def sine():
    """Factory for sine records: ``sine(frequency, amplitude, duration, dt, units)``."""
    return make_sine
