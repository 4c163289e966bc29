"""
Waveform record and its validation.

A :class:`Waveform` couples a strictly increasing time vector with an
amplitude vector of the same length. Arrays are copied on construction and
flagged read-only; every processing function in the package returns a new
Waveform instead of touching its input.

Sampling is taken as uniform everywhere: ``dt = time[1] - time[0]``.
"""

# =============================================================================
# IMPORTS
# =============================================================================
import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional

import numpy as np

from .exceptions import InvalidParameterError, InvalidWaveformError

log = logging.getLogger(__name__)

__all__ = [
    "WaveformMetadata",
    "Waveform",
    "validate",
    "normalize_waveform",
    "resample_waveform",
    "scale_to_pga",
]


# =============================================================================
# DATA MODEL
# =============================================================================

@dataclass(frozen=True)
class WaveformMetadata:
    """Optional descriptive attributes of a record.

    ``extra`` holds anything without a dedicated field (file header entries,
    generator parameters, ...). It is copied on construction and exposed as a
    read-only mapping, so neither the caller nor a derived record can alter it.
    It does not take part in hashing.
    """
    units: Optional[str] = None
    sample_rate: Optional[float] = None
    component: Optional[str] = None
    magnitude: Optional[float] = None
    depth: Optional[float] = None
    distance: Optional[float] = None
    station: Optional[str] = None
    event_id: Optional[str] = None
    source: Optional[str] = None
    date: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra or {})))


@dataclass(frozen=True, eq=False)
class Waveform:
    """Digitized ground-motion time series.

    Parameters
    ----------
    time : array_like
        Sample times (s). Must be 1-D, finite and strictly increasing.
    amplitude : array_like
        Acceleration, velocity or displacement samples, same length as `time`.
    metadata : WaveformMetadata, optional
        Descriptive attributes; ``metadata.units`` tells the physical quantity.

    Raises
    ------
    InvalidWaveformError
        If the arrays are empty, have different lengths, hold fewer than two
        samples, contain non-finite values or time is not strictly increasing.
    """
    time: np.ndarray
    amplitude: np.ndarray
    metadata: WaveformMetadata = field(default_factory=WaveformMetadata)

    def __post_init__(self):
        time, amplitude = _checked_arrays(self.time, self.amplitude)
        object.__setattr__(self, "time", time)
        object.__setattr__(self, "amplitude", amplitude)
        if self.metadata is None:
            object.__setattr__(self, "metadata", WaveformMetadata())

    # --- derived quantities ---------------------------------------------------
    @property
    def npts(self) -> int:
        return self.time.size

    @property
    def dt(self) -> float:
        """Time step, taken from the first two samples (s)."""
        return float(self.time[1] - self.time[0])

    @property
    def sample_rate(self) -> float:
        return 1.0 / self.dt

    @property
    def duration(self) -> float:
        return float(self.time[-1] - self.time[0])

    @property
    def units(self) -> Optional[str]:
        return self.metadata.units

    @property
    def peak_amplitude(self) -> float:
        return float(np.max(np.abs(self.amplitude)))

    def with_amplitude(self, amplitude: np.ndarray, **metadata_changes: Any) -> "Waveform":
        """Returns a new Waveform on the same time axis.

        Keyword arguments replace fields of the metadata (e.g. ``units='m/s'``).
        """
        metadata = replace(self.metadata, **metadata_changes) if metadata_changes else self.metadata
        return Waveform(self.time, amplitude, metadata)


def _checked_arrays(time, amplitude):
    try:
        t = np.array(time, dtype=float)
        a = np.array(amplitude, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidWaveformError(f"Time and amplitude must be numeric sequences: {e}") from e

    if t.ndim != 1 or a.ndim != 1:
        raise InvalidWaveformError(
            f"Time and amplitude must be 1-D (got {t.ndim}-D and {a.ndim}-D).")
    if t.size == 0 or a.size == 0:
        raise InvalidWaveformError("Time and amplitude must not be empty.")
    if t.size != a.size:
        raise InvalidWaveformError(
            f"Time and amplitude lengths differ ({t.size} vs {a.size}).")
    if t.size < 2:
        raise InvalidWaveformError("A waveform needs at least two samples.")
    if not np.all(np.isfinite(t)) or not np.all(np.isfinite(a)):
        raise InvalidWaveformError("Time and amplitude must contain only finite values.")
    steps = np.diff(t)
    if np.any(steps <= 0):
        bad = int(np.argmax(steps <= 0))
        raise InvalidWaveformError(
            f"Time must be strictly increasing (t[{bad}]={t[bad]}, t[{bad + 1}]={t[bad + 1]}).")

    t.flags.writeable = False
    a.flags.writeable = False
    return t, a


# =============================================================================
# PUBLIC API
# =============================================================================

def validate(time, amplitude, metadata: Optional[WaveformMetadata] = None) -> Waveform:
    """Builds a :class:`Waveform` from raw sequences, enforcing its invariants.

    Parameters
    ----------
    time : array_like
        Sample times (s).
    amplitude : array_like
        Sample values.
    metadata : WaveformMetadata, optional
        Attributes to attach. Default is an empty metadata record.

    Returns
    -------
    Waveform

    Raises
    ------
    InvalidWaveformError
        See :class:`Waveform`.
    """
    return Waveform(time, amplitude, metadata if metadata is not None else WaveformMetadata())


def normalize_waveform(waveform: Waveform, lower: float = -1.0, upper: float = 1.0) -> Waveform:
    """Linearly rescales the amplitude into ``[lower, upper]``.

    A flat record has no range to stretch; every sample is then set to the
    midpoint ``(lower + upper) / 2``.
    """
    if not lower < upper:
        raise InvalidParameterError(f"lower ({lower}) must be smaller than upper ({upper}).")
    x = waveform.amplitude
    xmin, xmax = np.min(x), np.max(x)
    span = xmax - xmin
    if span == 0:
        log.debug(f"Flat waveform: normalizing to the midpoint {(lower + upper) / 2:.4g}.")
        return waveform.with_amplitude(np.full_like(x, (lower + upper) / 2))
    return waveform.with_amplitude((x - xmin) / span * (upper - lower) + lower)


def resample_waveform(waveform: Waveform, npts: int) -> Waveform:
    """Linear interpolation onto `npts` equally spaced samples over the same span."""
    if int(npts) != npts or npts < 2:
        raise InvalidParameterError(f"npts must be an integer >= 2 (got {npts}).")
    npts = int(npts)
    if npts == waveform.npts:
        return waveform
    t_new = np.linspace(waveform.time[0], waveform.time[-1], npts)
    a_new = np.interp(t_new, waveform.time, waveform.amplitude)
    metadata = replace(waveform.metadata, sample_rate=(npts - 1) / waveform.duration)
    return Waveform(t_new, a_new, metadata)


def scale_to_pga(waveform: Waveform, target_pga: float) -> Waveform:
    """Scales the record so that its peak absolute amplitude equals `target_pga`.

    Raises
    ------
    InvalidParameterError
        If `target_pga` is not a positive finite number.
    InvalidWaveformError
        If the record is identically zero.
    """
    if not np.isfinite(target_pga) or target_pga <= 0:
        raise InvalidParameterError(f"target_pga must be positive (got {target_pga}).")
    peak = waveform.peak_amplitude
    if peak == 0:
        raise InvalidWaveformError("Cannot scale a record whose amplitude is identically zero.")
    sf = target_pga / peak
    log.debug(f"Scaling record by {sf:.4f} to reach a peak of {target_pga:.4g}.")
    return waveform.with_amplitude(waveform.amplitude * sf)
