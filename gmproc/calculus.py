"""
Time-domain integration and differentiation of waveforms.

Integration uses the trapezoidal rule and differentiation central differences
(one-sided at the two ends). The physical quantity changes, so the result is
relabelled through the unit tables below; units not found there become
``GENERIC_UNITS``.
"""

# =============================================================================
# IMPORTS
# =============================================================================
import logging
from typing import Optional

import numpy as np
from scipy import integrate as sp_integrate

from .waveform import Waveform

log = logging.getLogger(__name__)

__all__ = ["GENERIC_UNITS", "integrate", "differentiate", "physical_quantity"]

GENERIC_UNITS = "unknown"

# acceleration -> velocity -> displacement
_INTEGRAL_UNITS = {
    "g": "g*s",
    "g*s": "g*s^2",
    "m/s^2": "m/s",
    "m/s²": "m/s",
    "m/s": "m",
    "cm/s^2": "cm/s",
    "cm/s²": "cm/s",
    "gal": "cm/s",
    "cm/s": "cm",
    "mm/s^2": "mm/s",
    "mm/s²": "mm/s",
    "mm/s": "mm",
    "in/s^2": "in/s",
    "in/s²": "in/s",
    "in/s": "in",
}

_DERIVATIVE_UNITS = {
    "g*s^2": "g*s",
    "g*s": "g",
    "m": "m/s",
    "m/s": "m/s^2",
    "cm": "cm/s",
    "cm/s": "cm/s^2",
    "mm": "mm/s",
    "mm/s": "mm/s^2",
    "in": "in/s",
    "in/s": "in/s^2",
}

_QUANTITY = {
    "g": "acceleration", "m/s^2": "acceleration", "m/s²": "acceleration",
    "cm/s^2": "acceleration", "cm/s²": "acceleration", "gal": "acceleration",
    "mm/s^2": "acceleration", "mm/s²": "acceleration",
    "in/s^2": "acceleration", "in/s²": "acceleration",
    "g*s": "velocity", "m/s": "velocity", "cm/s": "velocity",
    "mm/s": "velocity", "in/s": "velocity",
    "g*s^2": "displacement", "m": "displacement", "cm": "displacement",
    "mm": "displacement", "in": "displacement",
}


def physical_quantity(units: Optional[str]) -> Optional[str]:
    """'acceleration', 'velocity', 'displacement' or None when `units` is unknown."""
    if units is None:
        return None
    return _QUANTITY.get(units.strip())


def _relabel(units: Optional[str], table: dict) -> str:
    if units is not None and units.strip() in table:
        return table[units.strip()]
    log.debug(f"No unit mapping for {units!r}; labelling result as {GENERIC_UNITS!r}.")
    return GENERIC_UNITS


# =============================================================================
# PUBLIC API
# =============================================================================

def integrate(waveform: Waveform, initial_value: float = 0.0) -> Waveform:
    """Cumulative trapezoidal integral, ``y[i] = y[i-1] + dt/2 * (x[i] + x[i-1])``.

    Parameters
    ----------
    waveform : Waveform
        Acceleration or velocity record.
    initial_value : float, optional
        Value of the integral at the first sample. Default is 0.

    Returns
    -------
    Waveform
        Velocity (or displacement) record with relabelled units.
    """
    y = sp_integrate.cumulative_trapezoid(waveform.amplitude, dx=waveform.dt, initial=0) + initial_value
    return waveform.with_amplitude(y, units=_relabel(waveform.units, _INTEGRAL_UNITS))


def differentiate(waveform: Waveform) -> Waveform:
    """Central-difference derivative; forward/backward difference at the ends."""
    x = waveform.amplitude
    dt = waveform.dt
    dx = np.empty_like(x)
    dx[0] = (x[1] - x[0]) / dt
    dx[1:-1] = (x[2:] - x[:-2]) / (2 * dt)
    dx[-1] = (x[-1] - x[-2]) / dt
    return waveform.with_amplitude(dx, units=_relabel(waveform.units, _DERIVATIVE_UNITS))
