"""
Example: Response Spectra and Intensity Measures of a Record

This script demonstrates the analysis workflow:
1.  Writing a record to a PEER NGA .AT2 file and loading it back.
2.  Band-pass filtering and polynomial baseline correction.
3.  Response spectra for several damping ratios and the intensity measures.
4.  Plotting the time histories and spectra, and exporting a CSV file.

Replace 'record_file' with any .AT2 file from the PEER NGA database to run it
on a recorded motion.
"""

import logging

import matplotlib.pyplot as plt
import numpy as np

from gmproc import (
    band_pass,
    correct_baseline,
    extract_parameters,
    fourier_spectrum,
    generate_synthetic_ground_motion,
    load_peer_at2,
    multi_damping_response_spectra,
    plot_response_spectra,
    plot_time_histories,
    save_at2,
    save_csv,
)

# Setup Logging
logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
log = logging.getLogger()

plt.close('all')

# =============================================================================
# 1. INPUTS
# =============================================================================

record_file = 'SYNTHETIC_M6.5_R20_D.AT2'
damping_ratios = (0.02, 0.05, 0.10)
periods = np.geomspace(0.02, 5.0, 120)

motion = generate_synthetic_ground_motion(6.5, 20.0, 'D', duration=25.0, seed=7)
save_at2(motion, record_file, {'title': 'SYNTHETIC RECORD', 'station': 'SYN', 'component': 'H1'})

# =============================================================================
# 2. LOAD AND PROCESS
# =============================================================================

record = load_peer_at2(record_file)
log.info(f"Loaded {record.metadata.extra['record_name']}: {record.npts} points, dt = {record.dt} s")

record = correct_baseline(band_pass(record, 0.1, 25.0), polynomial_order=3)

# =============================================================================
# 3. SPECTRA AND INTENSITY MEASURES
# =============================================================================

spectra = multi_damping_response_spectra(record, periods, damping_ratios, max_workers=3)
params = extract_parameters(record)
fas = fourier_spectrum(record)

log.info(f"PGA = {params.pga:.3f} g, PGV = {params.pgv:.3f} g*s, PGD = {params.pgd:.3f} g*s^2")
log.info(f"Arias intensity = {params.arias_intensity:.3f} m/s, CAV = {params.cav:.1f} cm/s")
log.info(f"D5-95 = {params.significant_duration_5_95:.2f} s, "
         f"D25-75 = {params.significant_duration_25_75:.2f} s")
log.info(f"Dominant frequency = {fas.frequency[np.argmax(fas.amplitude)]:.2f} Hz")

# =============================================================================
# 4. PLOTS AND OUTPUT
# =============================================================================

fig_hist = plot_time_histories(record, title=record.metadata.extra['record_name'])
fig_spec = plot_response_spectra(spectra)
fig_hist.savefig('time_histories.png', dpi=150)
fig_spec.savefig('response_spectra.png', dpi=150)

save_csv(record, 'processed_record.csv', name='Acceleration')

plt.show()
