"""Direct least squares ellipse fit after Halir and Flusser."""

import logging

import numpy as np

from conicfit._centering import (
    center_points, scale_points, unscale_coefficients,
    uncenter_coefficients, normalize_coefficients)
from conicfit._fit_ellipse_process_params import _fit_ellipse_process_params
from conicfit._linalg import NUMPY_LINALG
from conicfit.exceptions import UnfittableConstraintError


def _select_ellipse_eigenvector(evec: np.ndarray) -> int:
    """Index of the first eigenvector column satisfying a'Ca > 0.

    Parameters
    ----------
    evec : array_like (3, 3)
        Eigenvectors (as columns) of the reduced scatter matrix.

    Returns
    -------
    idx : int
        First column (v0, v1, v2) with 4*v0*v2 - v1**2 > 0.

    Raises
    ------
    UnfittableConstraintError
        If no column satisfies the ellipse constraint.
    """
    evec = np.real(evec)
    # evaluate a'Ca
    cond = 4*evec[0, :]*evec[2, :] - evec[1, :]**2
    idx = np.flatnonzero(cond > 0)
    if idx.size == 0:
        raise UnfittableConstraintError(
            'no eigenvector satisfies 4ac - b^2 > 0 '
            '(a\'Ca = %s)' % np.array2string(cond))
    return int(idx[0])


def fit_ellipse_direct(x: np.ndarray, y: np.ndarray=None,
                       linalg=None) -> np.ndarray:
    """Direct ellipse fit (Halir and Flusser, Chernov's variant).

    Parameters
    ----------
    x : array_like ([M,] N) or ([M,] N, 2)
        If y is None, x is either an array of complex numbers that
        plot M ellipses in the complex plane (i.e., plot x.real vs
        x.imag) or an array of (x, y) pairs.
        If y is not None, x are the x-axis coordinates assumed to
        be on M ellipses with N points (x, y).
    y : None or array_like ([M,] N), optional
        If y is not None, y are the y-axis coordinates assumed to
        be on M ellipses with N points (x, y).
    linalg : LinearAlgebra, optional
        Linear algebra provider.  Defaults to numpy.

    Returns
    -------
    res : array_like ([M,] 6)
        Coefficients [a b c d e f] of

            a x^2 + b x y + c y^2 + d x + e y + f = 0

        with b^2 - 4 a c < 0, scaled so that each row has unit norm.

    Raises
    ------
    DegenerateInputError
        If the linear part of the scatter matrix is singular
        (collinear or coincident points).
    UnfittableConstraintError
        If no eigenvector satisfies the ellipse constraint.

    Notes
    -----
    The points are shifted to their centroid and scaled isotropically
    before the design matrices are built, and the result is mapped
    back.  This keeps the scatter matrices well conditioned whatever
    the position and units of the data.

    If several eigenvectors satisfy the constraint the first one (in
    the order returned by the eigensolver) is used.

    References
    ----------
    .. [1] R. Halir and J. Flusser, "Numerically stable direct least
           squares fitting of ellipses", Proc. 6th International
           Conference in Central Europe on Computer Graphics and
           Visualization. WSCG '98, 125--132, 1998.
    .. [2] N. Chernov, "Ellipse Fit (Direct method)", MATLAB Central
           File Exchange 22684.
    """
    if linalg is None:
        linalg = NUMPY_LINALG

    x, y, only_one = _fit_ellipse_process_params(x, y)
    x, y, xc, yc = center_points(x, y)
    x, y, s = scale_points(x, y)

    # quadratic part of the design matrix
    D1 = np.stack((x**2, x*y, y**2), axis=-1)
    # linear part of the design matrix
    D2 = np.stack((x, y, np.ones(x.shape)), axis=-1)

    # quadratic part of the scatter matrix
    S1 = np.einsum('fji,fjk->fik', D1, D1)
    # combined part of the scatter matrix
    S2 = np.einsum('fji,fjk->fik', D1, D2)
    # linear part of the scatter matrix
    S3 = np.einsum('fji,fjk->fik', D2, D2)

    # for getting a2 from a1
    T = np.einsum('fij,fkj->fik', -1*linalg.inv(S3, 'S3'), S2)

    # reduced scatter matrix; premult by C1^-1
    M = S1 + np.einsum('fij,fjk->fik', S2, T)
    N = np.stack((
        M[:, 2, :]/2,
        -1*M[:, 1, :],
        M[:, 0, :]/2), axis=1)

    # solve eigensystem
    evals, evec = linalg.eig(N)

    a1 = np.empty((N.shape[0], 3))
    for ii in range(N.shape[0]):
        try:
            idx = _select_ellipse_eigenvector(evec[ii])
        except UnfittableConstraintError as e:
            raise UnfittableConstraintError(
                'point set %d: %s' % (ii, e)) from e
        logging.debug('point set %d: eigenvector %d selected '
                      '(eigenvalue %s)', ii, idx, evals[ii, idx])
        a1[ii, :] = evec[ii, :, idx].real

    # ellipse coefficients
    a = np.concatenate((a1, np.einsum('fij,fj->fi', T, a1)), axis=-1)
    a = unscale_coefficients(a, s)
    a = uncenter_coefficients(a, xc, yc)
    a = normalize_coefficients(a, linalg)

    if only_one:
        return a[0, :]
    return a
