"""
Matplotlib figures for records and response spectra.

The functions only build and return figures; showing or saving them is left
to the caller (``plt.show()``, ``fig.savefig(...)``).
"""

# =============================================================================
# IMPORTS
# =============================================================================
import logging
from typing import Optional, Sequence, Tuple

import matplotlib as mpl
import matplotlib.pyplot as plt
import numpy as np

from .calculus import differentiate, integrate, physical_quantity
from .response import ResponseSpectrum
from .waveform import Waveform

log = logging.getLogger(__name__)

__all__ = ["plot_time_histories", "plot_response_spectra"]


def _motion_histories(waveform: Waveform) -> Tuple[Waveform, Waveform, Waveform]:
    quantity = physical_quantity(waveform.units)
    if quantity == "velocity":
        return differentiate(waveform), waveform, integrate(waveform)
    if quantity == "displacement":
        vel = differentiate(waveform)
        return differentiate(vel), vel, waveform
    vel = integrate(waveform)
    return waveform, vel, integrate(vel)


# =============================================================================
# PUBLIC API
# =============================================================================

def plot_time_histories(waveform: Waveform, title: Optional[str] = None) -> plt.Figure:
    """Acceleration, velocity and displacement histories in three panels.

    The two quantities the record does not carry are obtained by
    trapezoidal integration or central differences.

    Parameters
    ----------
    waveform : Waveform
        Record to plot.
    title : str, optional
        Figure title.

    Returns
    -------
    plt.Figure
    """
    histories = _motion_histories(waveform)
    labels = ("Acc.", "Vel.", "Displ.")

    mpl.rcParams['font.size'] = 9
    mpl.rcParams['legend.frameon'] = False

    fig, axs = plt.subplots(3, 1, figsize=(6.5, 6.5), sharex=True)
    for ax, w, label in zip(axs, histories, labels):
        lim = 1.05 * np.max(np.abs(w.amplitude))
        ax.plot(w.time, w.amplitude, lw=1, color='cornflowerblue')
        if lim > 0:
            ax.set_ylim(-lim, lim)
        ax.set_ylabel(f'{label} [{w.units or "-"}]')
        ax.grid(True, linestyle=':', alpha=0.7)
    axs[-1].set_xlabel('Time [s]')
    if title:
        fig.suptitle(title)
    fig.tight_layout()
    return fig


def plot_response_spectra(
    spectra: Sequence[ResponseSpectrum],
    target_spec: Optional[Tuple[np.ndarray, np.ndarray]] = None,
    units: str = "g") -> plt.Figure:
    """Pseudo-acceleration spectra, one curve per damping ratio.

    Parameters
    ----------
    spectra : sequence of ResponseSpectrum
        E.g. the output of ``multi_damping_response_spectra``.
    target_spec : Optional[Tuple[np.ndarray, np.ndarray]], optional
        (periods, SA) of a target/design spectrum drawn for reference.
    units : str, optional
        Label for the SA axis. Default is 'g'.

    Returns
    -------
    plt.Figure
    """
    mpl.rcParams['font.size'] = 9
    mpl.rcParams['legend.frameon'] = False

    fig, ax = plt.subplots(figsize=(6.5, 4.5))
    if target_spec is not None:
        To, SAo = target_spec
        ax.semilogx(To, SAo, color='darkgray', lw=2, label='Target')

    colors = plt.cm.viridis(np.linspace(0, 0.9, max(len(spectra), 1)))
    for rs, color in zip(spectra, colors):
        # log axis cannot show T = 0
        mask = rs.period > 0
        ax.semilogx(rs.period[mask], rs.spectral_acceleration[mask], lw=1, color=color,
                    label=f'ζ = {100 * rs.damping_ratio:g}%')

    ax.set_xlabel('Period T [s]')
    ax.set_ylabel(f'PSA [{units}]')
    ax.set_ylim(bottom=0)
    ax.grid(True, which='both', linestyle=':', alpha=0.7)
    ax.legend(loc='upper right')
    fig.tight_layout()
    return fig
