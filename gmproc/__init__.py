"""
gmproc: processing and analysis of earthquake ground-motion records.

The package works on :class:`Waveform` objects (time vector, amplitude
vector and metadata) and provides:

1.  Validation and simple transforms (normalization, resampling, PGA scaling).
2.  Single-pole low/high/band-pass filters and a fixed-coefficient band-pass.
3.  Trapezoidal integration, central-difference differentiation and
    polynomial baseline correction.
4.  Fourier amplitude spectrum and power spectral density.
5.  Elastic response spectra (Newmark-beta SDOF integration), for one or
    several damping ratios.
6.  Intensity measures: PGA/PGV/PGD, RMS, Arias intensity, CAV and
    significant duration.
7.  Synthetic ground motions (single and three-component) and test signals.
8.  SeismoSignal text import, CSV export and PEER NGA .AT2 read/write.

---
Quick Start
---

**Example 1: Response spectrum and intensity of a recorded motion**

.. code-block:: python

    import gmproc
    import matplotlib.pyplot as plt

    record = gmproc.load_peer_at2('RSN175_IMPVALL.H_H-E12140.AT2')
    record = gmproc.correct_baseline(gmproc.band_pass(record, 0.1, 25.0))

    spectra = gmproc.multi_damping_response_spectra(record)
    params = gmproc.extract_parameters(record)
    print(f"PGA = {params.pga:.3f} g, D5-95 = {params.significant_duration_5_95:.1f} s")

    fig_spec = gmproc.plot_response_spectra(spectra)
    fig_hist = gmproc.plot_time_histories(record)
    plt.show()


**Example 2: Synthetic record exported as CSV**

.. code-block:: python

    import gmproc

    motion = gmproc.generate_synthetic_ground_motion(
        magnitude=6.5, distance=20.0, site_class='D', seed=42
    )
    print(motion.metadata.extra['target_pga'], motion.peak_amplitude)
    gmproc.save_csv(motion, 'synthetic.csv', name='Acceleration')

Logging goes through the standard ``logging`` module under the ``gmproc``
logger hierarchy; configure it from the application, e.g.
``logging.basicConfig(level=logging.INFO)``.
"""

__license__ = "MIT"
__version__ = "0.1.0"

from .exceptions import (
    GroundMotionError,
    InvalidParameterError,
    InvalidWaveformError,
    SingularSystemError,
)
from .waveform import (
    Waveform,
    WaveformMetadata,
    normalize_waveform,
    resample_waveform,
    scale_to_pga,
    validate,
)
from .filters import band_pass, fixed_band_pass, fixed_band_pass_array, high_pass, low_pass
from .calculus import differentiate, integrate, physical_quantity
from .baseline import correct_baseline, fit_polynomial, solve_linear_system
from .spectra import FourierSpectrum, PowerSpectrum, fourier_spectrum, power_spectral_density
from .response import (
    ResponseSpectrum,
    default_periods,
    multi_damping_response_spectra,
    response_spectrum,
    sdof_response,
)
from .intensity import (
    IntensityParameters,
    arias_intensity,
    cumulative_absolute_velocity,
    extract_parameters,
    rms,
    significant_duration,
)
from .synthetic import (
    generate_realistic_waveform,
    generate_shape_waveform,
    generate_synthetic_ground_motion,
    generate_three_component_waveform,
    generate_vertical_component,
)
from .formats import (
    export_csv,
    format_at2,
    load_peer_at2,
    load_seismosignal,
    parse_peer_at2,
    parse_seismosignal,
    save_at2,
    save_csv,
    waveform_to_csv,
)
from .plotting import plot_response_spectra, plot_time_histories

__all__ = [
    "GroundMotionError", "InvalidParameterError", "InvalidWaveformError", "SingularSystemError",
    "Waveform", "WaveformMetadata", "validate", "normalize_waveform", "resample_waveform", "scale_to_pga",
    "low_pass", "high_pass", "band_pass", "fixed_band_pass", "fixed_band_pass_array",
    "integrate", "differentiate", "physical_quantity",
    "correct_baseline", "fit_polynomial", "solve_linear_system",
    "FourierSpectrum", "PowerSpectrum", "fourier_spectrum", "power_spectral_density",
    "ResponseSpectrum", "default_periods", "sdof_response", "response_spectrum",
    "multi_damping_response_spectra",
    "IntensityParameters", "arias_intensity", "extract_parameters", "significant_duration",
    "rms", "cumulative_absolute_velocity",
    "generate_synthetic_ground_motion", "generate_realistic_waveform", "generate_vertical_component",
    "generate_three_component_waveform", "generate_shape_waveform",
    "parse_seismosignal", "load_seismosignal", "export_csv", "waveform_to_csv", "save_csv",
    "parse_peer_at2", "load_peer_at2", "format_at2", "save_at2",
    "plot_time_histories", "plot_response_spectra",
]
