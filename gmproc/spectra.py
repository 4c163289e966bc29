"""
Fourier amplitude spectrum and power spectral density.

Both transforms zero-pad the record to the next power of two ``N`` and keep
the ``N/2`` non-negative frequency bins ``k*fs/N``, ``k = 0 .. N/2-1``. The
DFT is evaluated with ``numpy.fft``, which returns the same coefficients as
the direct sum ``X_k = sum_n x_n exp(-2j*pi*k*n/N)``.
"""

# =============================================================================
# IMPORTS
# =============================================================================
import logging
from dataclasses import dataclass

import numpy as np
from scipy.signal import windows

from .exceptions import InvalidParameterError
from .waveform import Waveform

log = logging.getLogger(__name__)

__all__ = ["FourierSpectrum", "PowerSpectrum", "fourier_spectrum", "power_spectral_density"]


@dataclass(frozen=True, eq=False)
class FourierSpectrum:
    """One-sided Fourier amplitude spectrum (units of the record)."""
    frequency: np.ndarray
    amplitude: np.ndarray


@dataclass(frozen=True, eq=False)
class PowerSpectrum:
    """One-sided power spectral density (units^2/Hz)."""
    frequency: np.ndarray
    power: np.ndarray


def _next_pow2(n: int) -> int:
    return 1 << int(np.ceil(np.log2(n)))


def _readonly(*arrays):
    for a in arrays:
        a.flags.writeable = False
    return arrays


def _smooth(power: np.ndarray, smoothing_factor: float) -> np.ndarray:
    """Centred moving average whose window shrinks at both ends."""
    m = power.size
    # round half up, not numpy's round-half-to-even
    width = max(3, int(np.floor(m * smoothing_factor * 0.1 + 0.5)))
    half = width // 2
    idx = np.arange(m)
    lo = np.maximum(0, idx - half)
    hi = np.minimum(m - 1, idx + half)
    csum = np.concatenate(([0.0], np.cumsum(power)))
    return (csum[hi + 1] - csum[lo]) / (hi - lo + 1)


# =============================================================================
# PUBLIC API
# =============================================================================

def fourier_spectrum(waveform: Waveform) -> FourierSpectrum:
    """Fourier amplitude spectrum ``2*|X_k|/N``.

    Parameters
    ----------
    waveform : Waveform
        Input record, uniformly sampled.

    Returns
    -------
    FourierSpectrum
        ``N/2`` frequencies (Hz) and amplitudes.
    """
    n = _next_pow2(waveform.npts)
    fs = waveform.sample_rate
    X = np.fft.fft(waveform.amplitude, n)
    half = n // 2
    frequency = np.arange(half) * fs / n
    amplitude = 2 * np.abs(X[:half]) / n
    log.debug(f"Fourier spectrum: {waveform.npts} samples padded to {n}.")
    return FourierSpectrum(*_readonly(frequency, amplitude))


def power_spectral_density(waveform: Waveform, smoothing_factor: float = 0.2) -> PowerSpectrum:
    """Hann-windowed periodogram with optional moving-average smoothing.

    The padded record is multiplied by a symmetric Hann window spanning all
    ``N`` samples, then ``P_k = |X_k|^2 / (fs * N/2)``.

    Parameters
    ----------
    waveform : Waveform
        Input record.
    smoothing_factor : float, optional
        In ``[0, 1)``. Values above zero smooth the spectrum with a centred
        window of ``max(3, round(N/2 * smoothing_factor * 0.1))`` bins; zero
        returns the raw periodogram. Default is 0.2.

    Returns
    -------
    PowerSpectrum

    Raises
    ------
    InvalidParameterError
        If `smoothing_factor` is outside ``[0, 1)``.
    """
    if not 0 <= smoothing_factor < 1:
        raise InvalidParameterError(f"smoothing_factor must be in [0, 1) (got {smoothing_factor}).")
    n = _next_pow2(waveform.npts)
    fs = waveform.sample_rate
    padded = np.zeros(n)
    padded[:waveform.npts] = waveform.amplitude
    X = np.fft.fft(padded * windows.hann(n, sym=True))

    m = n // 2
    frequency = np.arange(m) * fs / n
    power = np.abs(X[:m]) ** 2 / (fs * m)
    if smoothing_factor > 0:
        power = _smooth(power, smoothing_factor)
    return PowerSpectrum(*_readonly(frequency, power))
