"""Conic fitting by Taubin's method."""

import logging

import numpy as np

from conicfit._centering import (
    center_points, scale_points, unscale_coefficients,
    uncenter_coefficients, normalize_coefficients)
from conicfit._fit_ellipse_process_params import _fit_ellipse_process_params
from conicfit._linalg import NUMPY_LINALG
from conicfit.exceptions import EllipseFitError


def _select_smallest_real(evals: np.ndarray, tol: float=1e-8) -> int:
    """Index of the smallest real eigenvalue, first occurrence on ties.

    Eigenvalues whose imaginary part exceeds `tol` times the largest
    magnitude are skipped.
    """
    scale = np.max(np.abs(evals))
    real = np.abs(np.imag(evals)) <= tol*scale
    if not np.any(real):
        raise EllipseFitError('no real eigenvalue: %s'
                              % np.array2string(evals))
    # argmin returns the first occurrence on ties
    return int(np.argmin(np.where(real, np.real(evals), np.inf)))


def _taubin_matrices(M: np.ndarray):
    """Build the (M, 5, 5) matrices P and Q from the moment matrices M."""
    m = M[:, :3, 5]
    P = M[:, :5, :5].copy()
    P[:, :3, :3] -= np.einsum('fi,fj->fij', m, m)

    nsets = M.shape[0]
    Q = np.zeros((nsets, 5, 5))
    Q[:, 0, 0] = 4*M[:, 0, 5]
    Q[:, 0, 1] = Q[:, 1, 0] = 2*M[:, 1, 5]
    Q[:, 1, 1] = M[:, 0, 5] + M[:, 2, 5]
    Q[:, 1, 2] = Q[:, 2, 1] = 2*M[:, 1, 5]
    Q[:, 2, 2] = 4*M[:, 2, 5]
    Q[:, 3, 3] = 1
    Q[:, 4, 4] = 1
    return P, Q


def fit_ellipse_taubin(x: np.ndarray, y: np.ndarray=None,
                       linalg=None) -> np.ndarray:
    """Conic fit by Taubin's method.

    Parameters
    ----------
    x : array_like ([M,] N) or ([M,] N, 2)
        If y is None, x is either an array of complex numbers that
        plot M conics in the complex plane (i.e., plot x.real vs
        x.imag) or an array of (x, y) pairs.
        If y is not None, x are the x-axis coordinates assumed to
        be on M conics with N points (x, y).
    y : None or array_like ([M,] N), optional
        If y is not None, y are the y-axis coordinates assumed to
        be on M conics with N points (x, y).
    linalg : LinearAlgebra, optional
        Linear algebra provider.  Defaults to numpy.

    Returns
    -------
    res : array_like ([M,] 6)
        Coefficients [a b c d e f] of

            a x^2 + b x y + c y^2 + d x + e y + f = 0

        scaled so that each row has unit norm.

    Raises
    ------
    DegenerateInputError
        If the normalization matrix Q is singular (coincident or
        collinear points).
    EllipseFitError
        If the eigensolver returns no real eigenvalue.

    Notes
    -----
    This fits a general conic.  If the points are better described
    by a hyperbola, a hyperbola is returned; use
    :func:`fit_ellipse_direct` when only ellipses are acceptable.

    The generalized eigenproblem P v = lambda Q v is solved as the
    standard eigenproblem of Q^-1 P.  The eigenvector of the smallest
    real eigenvalue gives a, b, c, d, e; f follows from the last column
    of the moment matrix, f = -(a, b, c).(M05, M15, M25).

    The points are shifted to their centroid and scaled to unit size
    before the moments are taken, and the result is mapped back.

    References
    ----------
    .. [1] G. Taubin, "Estimation Of Planar Curves, Surfaces And
           Nonplanar Space Curves Defined By Implicit Equations, With
           Applications To Edge And Range Image Segmentation", IEEE
           Trans. PAMI, Vol. 13, pages 1115-1138, (1991)
    .. [2] N. Chernov, "Ellipse Fit (Taubin method)", MATLAB Central
           File Exchange 22683.
    """
    if linalg is None:
        linalg = NUMPY_LINALG

    x, y, only_one = _fit_ellipse_process_params(x, y)
    x, y, xc, yc = center_points(x, y)
    x, y, s = scale_points(x, y)

    Z = np.stack((x**2, x*y, y**2, x, y, np.ones(x.shape)), axis=-1)
    M = np.einsum('fji,fjk->fik', Z, Z)/x.shape[-1]
    P, Q = _taubin_matrices(M)

    evals, evec = linalg.eig(linalg.solve(Q, P, 'Q'))

    nsets = M.shape[0]
    a = np.empty((nsets, 6))
    for ii in range(nsets):
        try:
            idx = _select_smallest_real(evals[ii])
        except EllipseFitError as e:
            raise EllipseFitError('point set %d: %s' % (ii, e)) from e
        logging.debug('point set %d: eigenvector %d selected '
                      '(eigenvalue %s)', ii, idx, evals[ii, idx])
        a[ii, :5] = evec[ii, :, idx].real
    a[:, 5] = -1*np.einsum('fi,fi->f', a[:, :3], M[:, :3, 5])

    a = unscale_coefficients(a, s)
    a = uncenter_coefficients(a, xc, yc)
    a = normalize_coefficients(a, linalg)

    if only_one:
        return a[0, :]
    return a
