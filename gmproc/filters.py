"""
Recursive (IIR) filters for waveforms.

Two families live here and are intentionally kept apart:

* ``low_pass``, ``high_pass`` and ``band_pass``: first-order filters whose
  single coefficient follows from the cutoff normalized to the Nyquist
  frequency. The output starts at the first input sample.
* ``fixed_band_pass``: a 4th-order direct-form filter with a literal
  coefficient table, used to colour the white noise of the synthetic
  generator. The cutoffs are checked but do not alter the coefficients, so
  its response is *not* equivalent to ``band_pass``. The recursion is not
  bounded-input bounded-output stable (a pole pair lies outside the unit
  circle), so its output grows geometrically with record length.

Filtering changes the frequency content only; time and units are kept.
"""

# =============================================================================
# IMPORTS
# =============================================================================
import logging

import numpy as np
from scipy import signal

from .exceptions import InvalidParameterError
from .waveform import Waveform

log = logging.getLogger(__name__)

__all__ = ["low_pass", "high_pass", "band_pass", "fixed_band_pass", "fixed_band_pass_array"]

FIXED_BANDPASS_B = np.array([0.00968, 0.03872, 0.05808, 0.03872, 0.00968])
FIXED_BANDPASS_A = np.array([1.0, -3.8364, 5.52745, -3.53622, 0.85322])


def _normalized_cutoff(waveform: Waveform, cutoff: float) -> float:
    if not np.isfinite(cutoff) or cutoff <= 0:
        raise InvalidParameterError(f"Cutoff frequency must be positive (got {cutoff}).")
    return cutoff / (waveform.sample_rate / 2)


# =============================================================================
# PUBLIC API
# =============================================================================

def low_pass(waveform: Waveform, cutoff: float) -> Waveform:
    """Single-pole low-pass, ``y[n] = a*x[n] + (1-a)*y[n-1]`` with ``a = fn/(fn+1)``.

    Parameters
    ----------
    waveform : Waveform
        Input record.
    cutoff : float
        Cutoff frequency (Hz), must be positive.

    Returns
    -------
    Waveform
        Filtered record (same time axis and units).
    """
    fn = _normalized_cutoff(waveform, cutoff)
    alpha = fn / (fn + 1)
    x = waveform.amplitude
    # initial state chosen so that y[0] = x[0]
    y, _ = signal.lfilter([alpha], [1.0, alpha - 1.0], x, zi=[(1 - alpha) * x[0]])
    log.debug(f"Low-pass at {cutoff:.3f} Hz (alpha={alpha:.5f}).")
    return waveform.with_amplitude(y)


def high_pass(waveform: Waveform, cutoff: float) -> Waveform:
    """Single-pole high-pass, ``y[n] = a*(y[n-1] + x[n] - x[n-1])`` with ``a = 1/(1+fn)``."""
    fn = _normalized_cutoff(waveform, cutoff)
    alpha = 1 / (1 + fn)
    x = waveform.amplitude
    y, _ = signal.lfilter([alpha, -alpha], [1.0, -alpha], x, zi=[(1 - alpha) * x[0]])
    log.debug(f"High-pass at {cutoff:.3f} Hz (alpha={alpha:.5f}).")
    return waveform.with_amplitude(y)


def band_pass(waveform: Waveform, low: float, high: float) -> Waveform:
    """High-pass at `low` followed by low-pass at `high`.

    Raises
    ------
    InvalidParameterError
        If a cutoff is not positive or ``low >= high``.
    """
    if low >= high:
        raise InvalidParameterError(f"Low cutoff ({low} Hz) must be below high cutoff ({high} Hz).")
    return low_pass(high_pass(waveform, low), high)


def fixed_band_pass_array(data, low: float, high: float, sample_rate: float) -> np.ndarray:
    """Applies the fixed-coefficient 4th-order filter to a plain array.

    Parameters
    ----------
    data : array_like
        Samples to filter.
    low, high : float
        Pass band (Hz). Validated (``low < high < sample_rate/2``) but the
        coefficients are fixed.
    sample_rate : float
        Sampling frequency (Hz).

    Returns
    -------
    np.ndarray
        Filtered samples, zero initial state.
    """
    x = np.asarray(data, dtype=float)
    if x.ndim != 1 or x.size == 0:
        raise InvalidParameterError("Data to filter must be a non-empty 1-D array.")
    if low >= high:
        raise InvalidParameterError(f"Low cutoff ({low} Hz) must be below high cutoff ({high} Hz).")
    if high >= sample_rate / 2:
        raise InvalidParameterError(
            f"High cutoff must be below the Nyquist frequency ({sample_rate / 2} Hz).")
    return signal.lfilter(FIXED_BANDPASS_B, FIXED_BANDPASS_A, x)


def fixed_band_pass(waveform: Waveform, low: float, high: float) -> Waveform:
    """Waveform version of :func:`fixed_band_pass_array`."""
    return waveform.with_amplitude(
        fixed_band_pass_array(waveform.amplitude, low, high, waveform.sample_rate))
