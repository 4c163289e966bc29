"""
Elastic response spectra of single-degree-of-freedom (SDOF) oscillators.

For each natural period the relative-motion equation

    u'' + 2*zeta*wn*u' + wn^2*u = -ag(t)

is integrated from rest with Newmark's average-acceleration method
(gamma = 1/2, beta = 1/4, unconditionally stable) using the record's time
step. The spectrum keeps the peak relative displacement (SD), the peak
relative velocity (SV) and the pseudo-acceleration SA = wn^2 * SD.

Periods below ``MIN_PERIOD`` are treated as rigid: SA is the peak ground
acceleration and SV = SD = 0.
"""

# =============================================================================
# IMPORTS
# =============================================================================
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
from numba import jit

from .calculus import physical_quantity
from .exceptions import InvalidParameterError, InvalidWaveformError
from .waveform import Waveform

log = logging.getLogger(__name__)

__all__ = [
    "MIN_PERIOD",
    "DEFAULT_DAMPING_RATIOS",
    "ResponseSpectrum",
    "default_periods",
    "sdof_response",
    "response_spectrum",
    "multi_damping_response_spectra",
]

MIN_PERIOD = 0.01
DEFAULT_DAMPING_RATIOS = (0.02, 0.05, 0.10, 0.20)

# Newmark average-acceleration constants
NEWMARK_GAMMA = 0.5
NEWMARK_BETA = 0.25


@dataclass(frozen=True, eq=False)
class ResponseSpectrum:
    """Peak SDOF responses, one entry per period.

    Attributes
    ----------
    period : np.ndarray
        Natural periods (s).
    spectral_acceleration : np.ndarray
        Pseudo-spectral acceleration (units of the input record).
    spectral_velocity : np.ndarray
        Peak relative velocity (input units * s).
    spectral_displacement : np.ndarray
        Peak relative displacement (input units * s^2).
    damping_ratio : float
        Fraction of critical damping.
    """
    period: np.ndarray
    spectral_acceleration: np.ndarray
    spectral_velocity: np.ndarray
    spectral_displacement: np.ndarray
    damping_ratio: float


def default_periods() -> np.ndarray:
    """100 periods ``0.01 + 0.04*i`` s, i.e. 0.01 s to 3.97 s."""
    return 0.01 + 0.04 * np.arange(100)


# =============================================================================
# PUBLIC API
# =============================================================================

def sdof_response(acc, dt: float, periods, damping_ratio: float = 0.05) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Array-level response spectrum.

    Parameters
    ----------
    acc : array_like
        Ground acceleration samples (any units). A single sample is accepted.
    dt : float
        Time step (s).
    periods : array_like
        Natural periods (s), finite and non-negative.
    damping_ratio : float, optional
        Damping ratio, ``0 <= damping_ratio < 1``. Default is 0.05.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray, np.ndarray]
        - SA (np.ndarray): Pseudo-spectral acceleration (units of `acc`).
        - SV (np.ndarray): Spectral velocity.
        - SD (np.ndarray): Spectral displacement.

    Raises
    ------
    InvalidParameterError
        On empty/negative/non-finite periods, damping outside ``[0, 1)`` or
        a non-positive time step.
    InvalidWaveformError
        If `acc` is empty or non-finite.
    """
    T = _checked_periods(periods)
    if not 0 <= damping_ratio < 1:
        raise InvalidParameterError(f"Damping ratio must satisfy 0 <= zeta < 1 (got {damping_ratio}).")
    if not np.isfinite(dt) or dt <= 0:
        raise InvalidParameterError(f"Time step must be positive (got {dt}).")
    s = np.asarray(acc, dtype=float)
    if s.ndim != 1 or s.size == 0 or not np.all(np.isfinite(s)):
        raise InvalidWaveformError("Acceleration must be a non-empty 1-D array of finite values.")

    return _newmark_sdof(T, s, float(damping_ratio), float(dt), NEWMARK_GAMMA, NEWMARK_BETA, MIN_PERIOD)


def response_spectrum(waveform: Waveform, periods=None, damping_ratio: float = 0.05) -> ResponseSpectrum:
    """Elastic response spectrum of an acceleration record.

    Parameters
    ----------
    waveform : Waveform
        Ground acceleration. Other quantities are accepted with a warning.
    periods : array_like, optional
        Natural periods (s). Default is :func:`default_periods`.
    damping_ratio : float, optional
        Damping ratio. Default is 0.05 (5%).

    Returns
    -------
    ResponseSpectrum
    """
    if physical_quantity(waveform.units) != "acceleration":
        log.warning(f"Record units {waveform.units!r} may not be an acceleration; "
                    "response spectrum may be inaccurate.")
    T = default_periods() if periods is None else periods
    SA, SV, SD = sdof_response(waveform.amplitude, waveform.dt, T, damping_ratio)
    T = np.array(T, dtype=float)
    for a in (T, SA, SV, SD):
        a.flags.writeable = False
    return ResponseSpectrum(T, SA, SV, SD, float(damping_ratio))


def multi_damping_response_spectra(
    waveform: Waveform,
    periods=None,
    damping_ratios: Sequence[float] = DEFAULT_DAMPING_RATIOS,
    max_workers: Optional[int] = None) -> List[ResponseSpectrum]:
    """Response spectra for several damping ratios on a common period grid.

    Parameters
    ----------
    waveform : Waveform
        Ground acceleration.
    periods : array_like, optional
        Natural periods (s). Default is :func:`default_periods`.
    damping_ratios : sequence of float, optional
        Default is (0.02, 0.05, 0.10, 0.20).
    max_workers : int, optional
        When given, the ratios are computed on a thread pool of that size
        (the compiled kernel releases the GIL). Default runs sequentially.

    Returns
    -------
    List[ResponseSpectrum]
        One spectrum per damping ratio, in input order.
    """
    ratios = list(damping_ratios)
    if not ratios:
        raise InvalidParameterError("At least one damping ratio is required.")
    T = default_periods() if periods is None else _checked_periods(periods)

    def _one(zeta):
        return response_spectrum(waveform, T, zeta)

    if max_workers is None:
        return [_one(z) for z in ratios]

    log.debug(f"Computing {len(ratios)} spectra with {max_workers} worker threads.")
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(_one, ratios))


# =============================================================================
# INTERNAL (HELPER) FUNCTIONS
# =============================================================================

def _checked_periods(periods) -> np.ndarray:
    try:
        T = np.array(periods, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"Periods must be numeric: {e}") from e
    if T.ndim != 1 or T.size == 0:
        raise InvalidParameterError("Periods must be a non-empty 1-D sequence.")
    if not np.all(np.isfinite(T)) or np.any(T < 0):
        raise InvalidParameterError("Periods must be finite and non-negative.")
    return T


@jit(nopython=True, cache=True, nogil=True)
def _newmark_sdof(T: np.ndarray, s: np.ndarray, zeta: float, dt: float,
                  gamma: float, beta: float, min_period: float) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Peak responses of unit-mass SDOF systems (Newmark-beta, total form).

    Internal helper function.

    Parameters
    ----------
    T : np.ndarray
        Vector of periods (s).
    s : np.ndarray
        Ground acceleration.
    zeta : float
        Damping ratio.
    dt : float
        Time step (s).
    gamma, beta : float
        Newmark parameters.
    min_period : float
        Periods below this value return SA = max|s| and SV = SD = 0.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray, np.ndarray]
        SA, SV, SD.
    """
    nper = len(T)
    n = len(s)
    SA = np.zeros(nper)
    SV = np.zeros(nper)
    SD = np.zeros(nper)
    pga = np.max(np.abs(s))

    for k in range(nper):
        if T[k] < min_period:
            SA[k] = pga
            continue

        wn = 2 * np.pi / T[k]
        stiff = wn * wn
        c = 2 * zeta * wn

        a1 = 1.0 / (beta * dt * dt) + gamma * c / (beta * dt)
        a2 = 1.0 / (beta * dt) + (gamma / beta - 1.0) * c
        a3 = (1.0 / (2 * beta) - 1.0) + dt * (gamma / (2 * beta) - 1.0) * c
        khat = stiff + a1

        # at rest; initial relative acceleration balances -ag[0]
        u = 0.0
        v = 0.0
        a = -s[0]
        umax = 0.0
        vmax = 0.0
        for i in range(n - 1):
            phat = -s[i + 1] + a1 * u + a2 * v + a3 * a
            u_new = phat / khat
            v_new = (gamma / (beta * dt)) * (u_new - u) + (1.0 - gamma / beta) * v \
                + dt * (1.0 - gamma / (2 * beta)) * a
            a_new = (u_new - u) / (beta * dt * dt) - v / (beta * dt) - (1.0 / (2 * beta) - 1.0) * a
            u = u_new
            v = v_new
            a = a_new
            if abs(u) > umax:
                umax = abs(u)
            if abs(v) > vmax:
                vmax = abs(v)

        SD[k] = umax
        SV[k] = vmax
        SA[k] = stiff * umax

    return SA, SV, SD
