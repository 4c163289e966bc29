"""
Ground-motion intensity measures.

Arias intensity and cumulative absolute velocity (CAV) are energy/damage
measures of the acceleration history; the significant-duration bounds are
read from the *normalized* cumulative Arias curve (Husid plot).

Acceleration is converted to m/s^2 from ``metadata.units`` before any
energy measure is computed. Records with missing or unrecognized units are
taken to be in g.
"""

# =============================================================================
# IMPORTS
# =============================================================================
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from scipy import integrate as sp_integrate
from scipy import signal

from .calculus import differentiate, physical_quantity
from .exceptions import InvalidParameterError
from .waveform import Waveform

log = logging.getLogger(__name__)

__all__ = [
    "G",
    "IntensityParameters",
    "arias_intensity",
    "extract_parameters",
    "significant_duration",
    "rms",
    "cumulative_absolute_velocity",
]

G = 9.81  # m/s^2

# factor to m/s^2
_TO_MS2 = {
    "g": G,
    "m/s^2": 1.0,
    "m/s²": 1.0,
    "cm/s^2": 0.01,
    "cm/s²": 0.01,
    "gal": 0.01,
    "mm/s^2": 0.001,
    "mm/s²": 0.001,
    "in/s^2": 0.0254,
    "in/s²": 0.0254,
}


@dataclass(frozen=True)
class IntensityParameters:
    """Scalar summary of a ground-motion record.

    Peaks are in the record's own unit system, ``arias_intensity`` in m/s,
    ``cav`` in cm/s and every time in seconds.
    """
    peak_amplitude: float
    pga: float
    pgv: float
    pgd: float
    rms: float
    arias_intensity: float
    cav: float
    duration: float
    t5: float
    t25: float
    t75: float
    t95: float
    units: Optional[str] = None

    @property
    def significant_duration_5_95(self) -> float:
        return self.t95 - self.t5

    @property
    def significant_duration_25_75(self) -> float:
        return self.t75 - self.t25


# =============================================================================
# PUBLIC API
# =============================================================================

def arias_intensity(waveform: Waveform) -> Waveform:
    """Cumulative Arias intensity ``Ia(t) = pi/(2g) * int_0^t a^2 dtau``.

    Parameters
    ----------
    waveform : Waveform
        Acceleration record (velocity/displacement records are differentiated
        first).

    Returns
    -------
    Waveform
        Non-decreasing curve starting at 0, units 'm/s'.
    """
    ia = _arias_curve(_acceleration_ms2(waveform), waveform.dt)
    return waveform.with_amplitude(ia, units="m/s")


def significant_duration(waveform: Waveform, start: float = 0.05, end: float = 0.95) -> Tuple[float, float, float]:
    """Time needed to build up the ``start``..``end`` fraction of Arias intensity.

    Returns
    -------
    Tuple[float, float, float]
        - duration (float): ``t_end - t_start`` (s).
        - t_start (float): Time at which `start` is reached (s).
        - t_end (float): Time at which `end` is reached (s).
    """
    if not 0 <= start < end <= 1:
        raise InvalidParameterError(f"Expected 0 <= start < end <= 1 (got start={start}, end={end}).")
    husid = _normalized(_arias_curve(_acceleration_ms2(waveform), waveform.dt))
    t_start = _time_at_fraction(waveform.time, husid, start)
    t_end = _time_at_fraction(waveform.time, husid, end)
    return t_end - t_start, t_start, t_end


def rms(waveform: Waveform) -> float:
    """Root mean square of the samples, ``sqrt(mean(x^2))``."""
    return float(np.sqrt(np.mean(waveform.amplitude ** 2)))


def cumulative_absolute_velocity(waveform: Waveform) -> float:
    """CAV ``= sum |a| * dt`` in cm/s."""
    return _cav(_acceleration_ms2(waveform), waveform.dt)


def extract_parameters(waveform: Waveform) -> IntensityParameters:
    """Peak values, RMS, Arias intensity, CAV and significant-duration bounds.

    The record's units tell which peak it carries directly (PGA, PGV or PGD);
    the other two come from trapezoidal integration with the mean removed, or
    from differentiation.

    Parameters
    ----------
    waveform : Waveform
        Acceleration, velocity or displacement record.

    Returns
    -------
    IntensityParameters
    """
    acc, vel, disp = _motion_triplet(waveform)
    acc_ms2 = _acceleration_ms2(waveform)
    ia = _arias_curve(acc_ms2, waveform.dt)
    husid = _normalized(ia)
    t5, t25, t75, t95 = (_time_at_fraction(waveform.time, husid, f) for f in (0.05, 0.25, 0.75, 0.95))

    params = IntensityParameters(
        peak_amplitude=waveform.peak_amplitude,
        pga=float(np.max(np.abs(acc))),
        pgv=float(np.max(np.abs(vel))),
        pgd=float(np.max(np.abs(disp))),
        rms=rms(waveform),
        arias_intensity=float(ia[-1]),
        cav=_cav(acc_ms2, waveform.dt),
        duration=waveform.duration,
        t5=t5, t25=t25, t75=t75, t95=t95,
        units=waveform.units,
    )
    log.info(f"PGA={params.pga:.4g}, Ia={params.arias_intensity:.4g} m/s, "
             f"D5-95={params.significant_duration_5_95:.2f} s")
    return params


# =============================================================================
# INTERNAL (HELPER) FUNCTIONS
# =============================================================================

def _integrated(x: np.ndarray, dt: float) -> np.ndarray:
    """Trapezoidal integral with its mean removed."""
    y = sp_integrate.cumulative_trapezoid(x, dx=dt, initial=0)
    return signal.detrend(y, type="constant")


def _motion_triplet(waveform: Waveform) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Acceleration, velocity and displacement arrays of a record."""
    quantity = physical_quantity(waveform.units)
    x, dt = waveform.amplitude, waveform.dt
    if quantity == "velocity":
        return differentiate(waveform).amplitude, x, _integrated(x, dt)
    if quantity == "displacement":
        vel = differentiate(waveform)
        return differentiate(vel).amplitude, vel.amplitude, x
    vel = _integrated(x, dt)
    return x, vel, _integrated(vel, dt)


def _acceleration_ms2(waveform: Waveform) -> np.ndarray:
    quantity = physical_quantity(waveform.units)
    if quantity == "velocity":
        waveform = differentiate(waveform)
    elif quantity == "displacement":
        waveform = differentiate(differentiate(waveform))

    units = waveform.units.strip() if waveform.units else None
    if units not in _TO_MS2:
        log.warning(f"Units {waveform.units!r} not recognized as acceleration; assuming g.")
        units = "g"
    return waveform.amplitude * _TO_MS2[units]


def _arias_curve(acc_ms2: np.ndarray, dt: float) -> np.ndarray:
    # increments are non-negative, so the cumulative sum never decreases
    return np.pi / (2 * G) * sp_integrate.cumulative_trapezoid(acc_ms2 ** 2, dx=dt, initial=0)


def _cav(acc_ms2: np.ndarray, dt: float) -> float:
    return float(np.sum(np.abs(acc_ms2 * 100.0)) * dt)


def _normalized(ia: np.ndarray) -> Optional[np.ndarray]:
    """Cumulative Arias curve scaled to end at 1, or None for a zero record."""
    total = ia[-1]
    if total <= 0:
        return None
    return ia / total


def _time_at_fraction(time: np.ndarray, husid: Optional[np.ndarray], fraction: float) -> float:
    """First time the normalized curve reaches `fraction`, interpolated linearly.

    A zero-intensity record (``husid is None``) returns the time midpoint.
    """
    if husid is None:
        return float((time[0] + time[-1]) / 2)
    i = int(np.argmax(husid >= fraction))
    if i == 0:
        return float(time[0])
    t0, t1 = time[i - 1], time[i]
    h0, h1 = husid[i - 1], husid[i]
    return float(t0 + (t1 - t0) * (fraction - h0) / (h1 - h0))
