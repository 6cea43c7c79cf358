"""Shared test fixtures and configuration."""

from pathlib import Path
from typing import Callable

import numpy as np
import pytest
import soundfile as sf

from bandlimit.config import FilterConfig


def generate_tone(
    frequency: float,
    duration: float,
    sample_rate: int,
    amplitude: float = 10000.0
) -> np.ndarray:
    """Generate a pure tone as int16 samples.

    Args:
        frequency: Frequency in Hz
        duration: Duration in seconds
        sample_rate: Sample rate in Hz
        amplitude: Peak amplitude

    Returns:
        Audio samples as numpy array
    """
    t = np.linspace(0, duration, int(sample_rate * duration), False)
    tone = np.sin(2 * np.pi * frequency * t)
    return np.round(tone * amplitude).astype(np.int16)


def dominant_frequency(samples: np.ndarray, sample_rate: int) -> float:
    """Frequency of the largest FFT magnitude bin."""
    spectrum = np.abs(np.fft.rfft(samples.astype(np.float64)))
    freqs = np.fft.rfftfreq(len(samples), 1.0 / sample_rate)
    return float(freqs[np.argmax(spectrum)])


@pytest.fixture
def tone() -> Callable[..., np.ndarray]:
    """Tone generator."""
    return generate_tone


@pytest.fixture
def filter_config() -> FilterConfig:
    """Default filter design."""
    return FilterConfig()


@pytest.fixture
def write_wav(tmp_path: Path) -> Callable[..., Path]:
    """Write int16 samples to a 16-bit file under tmp_path."""

    def _write(name: str, samples: np.ndarray, sample_rate: int, container: str = "WAV") -> Path:
        path = tmp_path / name
        sf.write(str(path), samples, sample_rate, subtype="PCM_16", format=container)
        return path

    return _write


@pytest.fixture
def peak_frequency() -> Callable[[np.ndarray, int], float]:
    """Dominant frequency estimator."""
    return dominant_frequency
