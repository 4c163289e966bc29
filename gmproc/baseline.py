"""
Polynomial baseline correction.

The baseline is the least-squares polynomial in time obtained from the normal
equations ``(A^T A) c = A^T y``, ``A`` being the increasing Vandermonde
matrix of the time vector. The small system is solved by Gaussian
elimination with partial pivoting.
"""

# =============================================================================
# IMPORTS
# =============================================================================
import logging

import numpy as np

from .exceptions import InvalidParameterError, SingularSystemError
from .waveform import Waveform

log = logging.getLogger(__name__)

__all__ = ["PIVOT_TOLERANCE", "correct_baseline", "fit_polynomial", "solve_linear_system"]

# pivots at or below this fraction of max|A| are treated as zero
PIVOT_TOLERANCE = 1e-12


# =============================================================================
# PUBLIC API
# =============================================================================

def correct_baseline(waveform: Waveform, polynomial_order: int = 3) -> Waveform:
    """Removes a fitted polynomial trend from the record.

    Parameters
    ----------
    waveform : Waveform
        Record to correct (any physical quantity).
    polynomial_order : int, optional
        Order of the baseline polynomial, non-negative. Default is 3.
        Order 0 removes the mean.

    Returns
    -------
    Waveform
        Corrected record, same time axis and metadata.

    Raises
    ------
    InvalidParameterError
        If `polynomial_order` is not a non-negative integer.
    SingularSystemError
        If the record has no more samples than `polynomial_order` or the
        normal equations are (numerically) singular, e.g. a high order on a
        long record.
    """
    coefficients = fit_polynomial(waveform.time, waveform.amplitude, polynomial_order)
    # np.polyval wants the highest order first
    baseline = np.polyval(coefficients[::-1], waveform.time)
    log.debug(f"Baseline polynomial (order {polynomial_order}) coefficients: {coefficients}")
    return waveform.with_amplitude(waveform.amplitude - baseline)


def fit_polynomial(x, y, order: int) -> np.ndarray:
    """Least-squares polynomial coefficients, lowest order first.

    Parameters
    ----------
    x, y : array_like
        Abscissas and ordinates, same length.
    order : int
        Polynomial order (>= 0). At least ``order + 1`` points are needed.

    Returns
    -------
    np.ndarray
        ``order + 1`` coefficients ``c`` with ``y ~ sum(c[j] * x**j)``.
    """
    if isinstance(order, bool) or not isinstance(order, (int, np.integer)) or order < 0:
        raise InvalidParameterError(f"Polynomial order must be a non-negative integer (got {order!r}).")
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    if x.ndim != 1 or x.shape != y.shape:
        raise InvalidParameterError(f"x and y must be 1-D of equal length (got {x.shape} and {y.shape}).")
    if x.size <= order:
        raise SingularSystemError(
            f"A polynomial of order {order} needs at least {order + 1} points (got {x.size}).")

    A = np.vander(x, order + 1, increasing=True)
    return solve_linear_system(A.T @ A, A.T @ y)


def solve_linear_system(A, b) -> np.ndarray:
    """Solves ``A x = b`` by Gaussian elimination with partial pivoting.

    Parameters
    ----------
    A : array_like
        Square coefficient matrix (n x n).
    b : array_like
        Right-hand side (n,).

    Returns
    -------
    np.ndarray
        Solution vector (n,).

    Raises
    ------
    InvalidParameterError
        If the shapes do not match.
    SingularSystemError
        If a pivot's magnitude is at most ``PIVOT_TOLERANCE * max|A|``.
    """
    A = np.asarray(A, dtype=float)
    b = np.asarray(b, dtype=float)
    if A.ndim != 2 or A.shape[0] != A.shape[1] or A.shape[0] == 0:
        raise InvalidParameterError(f"A must be a non-empty square matrix (got shape {A.shape}).")
    n = A.shape[0]
    if b.shape != (n,):
        raise InvalidParameterError(f"b must have shape ({n},) (got {b.shape}).")

    tol = PIVOT_TOLERANCE * np.max(np.abs(A))
    aug = np.column_stack((A, b))  # augmented matrix [A | b]

    # Forward elimination
    for k in range(n):
        p = k + int(np.argmax(np.abs(aug[k:, k])))
        if abs(aug[p, k]) <= tol:
            raise SingularSystemError(
                f"Matrix is singular to working precision (pivot {aug[p, k]:.3e} in column {k}).")
        if p != k:
            aug[[k, p]] = aug[[p, k]]
        factors = aug[k + 1:, k] / aug[k, k]
        aug[k + 1:, k:] -= factors[:, None] * aug[k, k:]

    # Back substitution
    x = np.zeros(n)
    for i in range(n - 1, -1, -1):
        x[i] = (aug[i, n] - aug[i, i + 1:n] @ x[i + 1:]) / aug[i, i]
    return x
