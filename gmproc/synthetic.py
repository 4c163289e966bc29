"""
Synthetic ground motions for testing and demonstrations.

`generate_synthetic_ground_motion` is a simplified stochastic simulation:
band-limited white noise under a build-up / strong-motion / decay envelope,
scaled to a PGA predicted from magnitude, distance and site class. It is not
a seismological model; use it to exercise the analysis functions.

`generate_realistic_waveform` sums random-phase sinusoids under a source
spectrum instead; `generate_three_component_waveform` pairs two such
horizontal records with a vertical one (`generate_vertical_component`).

`generate_shape_waveform` builds deterministic test signals (sine, Ricker
wavelet, rectangular pulse, step, a user function) and uniform noise.
"""

# =============================================================================
# IMPORTS
# =============================================================================
import logging
from typing import Callable, Dict, Optional

import numpy as np

from .exceptions import InvalidParameterError
from .filters import fixed_band_pass_array
from .waveform import Waveform, WaveformMetadata, scale_to_pga

log = logging.getLogger(__name__)

__all__ = [
    "SITE_AMPLIFICATION",
    "SOIL_AMPLIFICATION",
    "COMPONENTS",
    "WAVEFORM_SHAPES",
    "MAX_NOISE_DT",
    "generate_synthetic_ground_motion",
    "generate_realistic_waveform",
    "generate_vertical_component",
    "generate_three_component_waveform",
    "generate_shape_waveform",
]

# NEHRP-like site classes, A (hard rock) to E (soft soil)
SITE_AMPLIFICATION = {
    "A": 0.8,
    "B": 1.0,
    "C": 1.5,
    "D": 2.0,
    "E": 3.0,
}

# soil-type factors of the sum-of-sinusoids generator
SOIL_AMPLIFICATION = {
    "rock": 1.0,
    "stiff": 1.2,
    "soft": 1.5,
    "very-soft": 2.0,
}

COMPONENTS = ("E-W", "N-S", "Z")

WAVEFORM_SHAPES = ("sinusoidal", "ricker", "pulse", "step", "noise", "custom")

# pass band used to colour the white noise (Hz)
_NOISE_BAND = (0.1, 25.0)

# largest time step whose Nyquist frequency exceeds the top of the noise band
MAX_NOISE_DT = 1 / (2 * _NOISE_BAND[1])

_REALISTIC_BAND = (0.1, 25.0)
_N_FREQUENCIES = 100


def _envelope(t: np.ndarray, strong_motion_end: float, duration: float) -> np.ndarray:
    env = np.ones_like(t)
    rise = t < 2.0
    env[rise] = t[rise] / 2.0
    decay = ~rise & (t >= strong_motion_end)
    if np.any(decay):
        env[decay] = np.exp(-(t[decay] - strong_motion_end) / (duration - strong_motion_end) * 3)
    return env


# =============================================================================
# PUBLIC API
# =============================================================================

def generate_synthetic_ground_motion(
    magnitude: float,
    distance: float,
    site_class: str,
    duration: float = 30.0,
    dt: float = 0.01,
    seed: Optional[int] = None) -> Waveform:
    """Generates a synthetic acceleration record (g).

    Parameters
    ----------
    magnitude : float
        Moment magnitude, 4 to 9.
    distance : float
        Source-to-site distance (km), non-negative.
    site_class : str
        One of 'A', 'B', 'C', 'D', 'E'.
    duration : float, optional
        Record length (s). Default is 30.
    dt : float, optional
        Time step (s), below `MAX_NOISE_DT` (0.02 s). Default is 0.01.
    seed : int, optional
        Seed for the noise generator; the same seed gives the same record.

    Returns
    -------
    Waveform
        ``ceil(duration/dt)`` samples starting at t = 0, peak absolute value
        equal to the target PGA. The generation parameters are stored in
        ``metadata.extra``.

    Raises
    ------
    InvalidParameterError
        If any argument is outside its valid range.

    Notes
    -----
    - PGA on rock: ``exp(0.48*M - 0.0059*M^2 - 0.8*log10(R + 10))``, times
      the site factor in `SITE_AMPLIFICATION`.
    - Strong-motion duration ``5 + 3*(M - 5) + 0.05*R`` (s).
    - Corner frequency ``4.9e6 * 10^-M`` is reported but does not shape the
      noise; the noise is coloured with the fixed band-pass filter.
    """
    if not 4 <= magnitude <= 9:
        raise InvalidParameterError(f"Magnitude must be between 4 and 9 (got {magnitude}).")
    if not distance >= 0:
        raise InvalidParameterError(f"Distance must be non-negative (got {distance}).")
    if site_class not in SITE_AMPLIFICATION:
        raise InvalidParameterError(
            f"Site class must be one of: {', '.join(SITE_AMPLIFICATION)} (got {site_class!r}).")
    if not duration > 0 or not dt > 0:
        raise InvalidParameterError(f"duration and dt must be positive (got {duration}, {dt}).")
    if dt >= MAX_NOISE_DT:
        raise InvalidParameterError(
            f"dt must be below {MAX_NOISE_DT} s to keep the {_NOISE_BAND[1]} Hz noise band under Nyquist (got {dt}).")
    npts = int(np.ceil(duration / dt))
    if npts < 2:
        raise InvalidParameterError(f"duration/dt must give at least two samples (got {npts}).")

    pga_rock = float(np.exp(0.48 * magnitude - 0.0059 * magnitude ** 2 - 0.8 * np.log10(distance + 10)))
    site_factor = SITE_AMPLIFICATION[site_class]
    target_pga = pga_rock * site_factor
    sig_duration = 5 + 3 * (magnitude - 5) + 0.05 * distance
    corner_frequency = 4.9e6 * 10 ** (-magnitude)

    rng = np.random.default_rng(seed)
    t = np.arange(npts) * dt
    noise = rng.uniform(-1.0, 1.0, npts)
    shaped = fixed_band_pass_array(noise, _NOISE_BAND[0], _NOISE_BAND[1], 1 / dt)
    if not np.all(np.isfinite(shaped)):
        # the fixed recursion has poles outside the unit circle
        raise InvalidParameterError(
            f"Shaped noise overflowed after {npts} samples; use a shorter duration or a larger dt.")
    acc = shaped * _envelope(t, sig_duration, duration)

    metadata = WaveformMetadata(
        units="g",
        sample_rate=1 / dt,
        magnitude=magnitude,
        distance=distance,
        source="synthetic",
        extra={
            "site_class": site_class,
            "pga_rock": pga_rock,
            "target_pga": target_pga,
            "site_factor": site_factor,
            "significant_duration": sig_duration,
            "corner_frequency": corner_frequency,
            "duration": duration,
            "dt": dt,
        },
    )
    log.info(f"Synthetic motion M{magnitude} R={distance} km site {site_class}: "
             f"target PGA {target_pga:.3f} g, {npts} points.")
    return scale_to_pga(Waveform(t, acc, metadata), target_pga)


def generate_realistic_waveform(
    duration: float = 30.0,
    sample_rate: float = 100.0,
    magnitude: float = 6.5,
    distance: float = 25.0,
    depth: float = 10.0,
    soil_type: str = "stiff",
    peak_acceleration: Optional[float] = 0.3,
    component: str = "E-W",
    seed: Optional[int] = None) -> Waveform:
    """Random-phase sum of sinusoids shaped by a source spectrum.

    Parameters
    ----------
    duration : float, optional
        Record length (s). Default is 30.
    sample_rate : float, optional
        Samples per second, above twice the highest component (25 Hz).
        Default is 100.
    magnitude : float, optional
        Default is 6.5.
    distance : float, optional
        Epicentral distance (km), non-negative. Default is 25.
    depth : float, optional
        Focal depth (km), stored in the metadata only. Default is 10.
    soil_type : str, optional
        One of `SOIL_AMPLIFICATION` ('rock', 'stiff', 'soft', 'very-soft').
    peak_acceleration : float or None, optional
        Target peak (g). Default is 0.3. ``None`` uses the empirical estimate
        ``exp(M - 0.05*ln(R + 10) - 3.5)`` times the soil factor.
    component : str, optional
        One of `COMPONENTS`. Default is 'E-W'.
    seed : int, optional
        Seed for the spectral scatter and the phases.

    Returns
    -------
    Waveform
        ``floor(duration*sample_rate)`` samples in g, peak absolute value equal
        to the target.

    Notes
    -----
    100 log-spaced frequencies between 0.1 and 25 Hz, each with a random
    phase and an amplitude that rises as ``f/fc`` below the corner
    ``fc = 4*exp(-M/2) + 0.2`` and falls as ``(fc/f)^(1 + R/50)`` above it,
    scattered by a factor in ``[0.7, 1.3)``. The envelope rises
    quadratically over the first 20 % of the record, stays at 1 for the next
    40 % and decays as ``exp(-3*x)`` over the rest.
    """
    if soil_type not in SOIL_AMPLIFICATION:
        raise InvalidParameterError(
            f"Soil type must be one of: {', '.join(SOIL_AMPLIFICATION)} (got {soil_type!r}).")
    if component not in COMPONENTS:
        raise InvalidParameterError(f"Component must be one of: {', '.join(COMPONENTS)} (got {component!r}).")
    if not distance >= 0:
        raise InvalidParameterError(f"Distance must be non-negative (got {distance}).")
    if peak_acceleration is not None and not peak_acceleration > 0:
        raise InvalidParameterError(f"peak_acceleration must be positive (got {peak_acceleration}).")
    if not duration > 0 or not sample_rate > 0:
        raise InvalidParameterError(f"duration and sample_rate must be positive (got {duration}, {sample_rate}).")
    if sample_rate <= 2 * _REALISTIC_BAND[1]:
        raise InvalidParameterError(
            f"sample_rate must exceed {2 * _REALISTIC_BAND[1]} Hz to resolve the "
            f"{_REALISTIC_BAND[1]} Hz components (got {sample_rate}).")
    npts = int(np.floor(duration * sample_rate))
    if npts < 2:
        raise InvalidParameterError(f"duration*sample_rate must give at least two samples (got {npts}).")

    soil_factor = SOIL_AMPLIFICATION[soil_type]
    expected_pga = float(np.exp(magnitude - 0.05 * np.log(distance + 10) - 3.5)) * soil_factor
    target_pga = expected_pga if peak_acceleration is None else float(peak_acceleration)
    corner_frequency = 4.0 * np.exp(-0.5 * magnitude) + 0.2
    high_frequency_decay = 1.0 + distance / 50.0

    rng = np.random.default_rng(seed)
    f = np.geomspace(_REALISTIC_BAND[0], _REALISTIC_BAND[1], _N_FREQUENCIES)
    spectrum = np.where(f < corner_frequency, f / corner_frequency, (corner_frequency / f) ** high_frequency_decay)
    spectrum = spectrum * (0.7 + 0.6 * rng.random(f.size))
    phase = 2 * np.pi * rng.random(f.size)

    t = np.arange(npts) / sample_rate
    acc = np.sin(np.outer(t, 2 * np.pi * f) + phase) @ spectrum
    acc *= _realistic_envelope(t, duration)

    metadata = WaveformMetadata(
        units="g",
        sample_rate=sample_rate,
        component=component,
        magnitude=magnitude,
        depth=depth,
        distance=distance,
        source="synthetic:realistic",
        extra={
            "soil_type": soil_type,
            "soil_factor": soil_factor,
            "expected_pga": expected_pga,
            "target_pga": target_pga,
            "corner_frequency": corner_frequency,
            "high_frequency_decay": high_frequency_decay,
        },
    )
    log.debug(f"Realistic waveform {component}: fc = {corner_frequency:.3f} Hz, target PGA {target_pga:.3f} g.")
    return scale_to_pga(Waveform(t, acc, metadata), target_pga)


def generate_vertical_component(horizontal: Waveform, vh_ratio: float = 0.7) -> Waveform:
    """Vertical record as the horizontal one scaled by the V/H ratio.

    The result is labelled ``component='Z'`` and keeps the ratio in
    ``metadata.extra['vh_ratio']``.
    """
    if not vh_ratio > 0:
        raise InvalidParameterError(f"V/H ratio must be positive (got {vh_ratio}).")
    extra = dict(horizontal.metadata.extra, vh_ratio=vh_ratio)
    return horizontal.with_amplitude(horizontal.amplitude * vh_ratio, component="Z", extra=extra)


def generate_three_component_waveform(
    duration: float = 30.0,
    sample_rate: float = 100.0,
    magnitude: float = 6.5,
    distance: float = 25.0,
    depth: float = 10.0,
    soil_type: str = "stiff",
    peak_acceleration: Optional[float] = 0.3,
    seed: Optional[int] = None) -> Dict[str, Waveform]:
    """E-W, N-S and vertical records of one event.

    The horizontal components come from :func:`generate_realistic_waveform`
    with seeds `seed` and ``seed + 1000``. The vertical one is the E-W record
    scaled by ``0.7 - 0.01*magnitude`` (larger events, smaller V/H).

    Returns
    -------
    Dict[str, Waveform]
        Keys 'EW', 'NS' and 'Z'.
    """
    common = dict(duration=duration, sample_rate=sample_rate, magnitude=magnitude, distance=distance,
                  depth=depth, soil_type=soil_type, peak_acceleration=peak_acceleration)
    ew = generate_realistic_waveform(component="E-W", seed=seed, **common)
    ns = generate_realistic_waveform(component="N-S", seed=None if seed is None else seed + 1000, **common)
    vh_ratio = 0.7 - 0.1 * magnitude / 10
    return {"EW": ew, "NS": ns, "Z": generate_vertical_component(ew, vh_ratio)}


def generate_shape_waveform(
    shape: str,
    duration: float = 10.0,
    sample_rate: float = 100.0,
    frequency: float = 1.0,
    amplitude: float = 1.0,
    delay: float = 0.0,
    pulse_duration: float = 1.0,
    seed: Optional[int] = None,
    function: Optional[Callable[[np.ndarray], np.ndarray]] = None) -> Waveform:
    """Deterministic test signal (or uniform noise), zero before `delay`.

    Shapes, with ``tau = t - delay``:

    - ``'sinusoidal'``: ``sin(2*pi*frequency*tau)``
    - ``'ricker'``: ``(1 - 2*x^2) * exp(-x^2)``, ``x = pi*frequency*tau``
    - ``'pulse'``: 1 while ``tau < pulse_duration``, else 0
    - ``'step'``: 1
    - ``'noise'``: uniform in ``[-1, 1)``
    - ``'custom'``: ``function(tau)``; `function` takes the array of shifted
      times and returns an array of the same length (or a scalar)

    all multiplied by `amplitude`. The record has ``floor(duration*sample_rate)``
    samples, units 'g'.
    """
    if shape not in WAVEFORM_SHAPES:
        raise InvalidParameterError(f"Unknown shape {shape!r}; expected one of {WAVEFORM_SHAPES}.")
    if shape == "custom" and not callable(function):
        raise InvalidParameterError("The 'custom' shape needs a callable `function`.")
    if not sample_rate > 0:
        raise InvalidParameterError(f"sample_rate must be positive (got {sample_rate}).")
    npts = int(np.floor(duration * sample_rate))
    if npts < 2:
        raise InvalidParameterError(f"duration*sample_rate must give at least two samples (got {npts}).")

    t = np.arange(npts) / sample_rate
    tau = t - delay
    if shape == "sinusoidal":
        y = np.sin(2 * np.pi * frequency * tau)
    elif shape == "ricker":
        x2 = (np.pi * frequency * tau) ** 2
        y = (1 - 2 * x2) * np.exp(-x2)
    elif shape == "pulse":
        y = (tau < pulse_duration).astype(float)
    elif shape == "step":
        y = np.ones(npts)
    elif shape == "noise":
        y = np.random.default_rng(seed).uniform(-1.0, 1.0, npts)
    else:
        try:
            y = np.broadcast_to(np.asarray(function(tau), dtype=float), tau.shape)
        except (TypeError, ValueError) as e:
            raise InvalidParameterError(f"Custom function must return {npts} numeric values: {e}") from e

    y = np.where(tau < 0, 0.0, y * amplitude)
    return Waveform(t, y, WaveformMetadata(units="g", sample_rate=sample_rate, source=f"shape:{shape}"))


# =============================================================================
# INTERNAL (HELPER) FUNCTIONS
# =============================================================================

def _realistic_envelope(t: np.ndarray, duration: float) -> np.ndarray:
    rise_end = 0.2 * duration
    strong_end = 0.6 * duration
    env = np.ones_like(t)
    rise = t < rise_end
    env[rise] = (t[rise] / rise_end) ** 2
    decay = t >= strong_end
    env[decay] = np.exp(-3 * (t[decay] - strong_end) / (0.4 * duration))
    return env
