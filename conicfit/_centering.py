"""Centroid recentering shared by the fitters.

The design matrices are built from points shifted so that their mean
is the origin.  This keeps the monomials x^2, xy, y^2, x, y and 1 of
comparable size.  The fitted coefficients are then translated back to
the original frame and scaled to unit norm.
"""

from typing import Tuple

import numpy as np


def get_centroid(x: np.ndarray, y: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Arithmetic mean of the coordinates of each point set.

    Parameters
    ----------
    x, y : array_like ([M,] N)
        Coordinates of M point sets with N points each.

    Returns
    -------
    (xc, yc) : tuple of array_like ([M],)
        Centroid of each point set.
    """
    return np.mean(x, axis=-1), np.mean(y, axis=-1)


def center_points(x: np.ndarray, y: np.ndarray):
    """Shift (M, N) point sets so each has its centroid at the origin."""
    xc, yc = get_centroid(x, y)
    return x - xc[..., None], y - yc[..., None], xc, yc


def scale_points(x: np.ndarray, y: np.ndarray):
    """Isotropically scale centered (M, N) point sets.

    Parameters
    ----------
    x, y : array_like (M, N)
        Coordinates with centroid at the origin.

    Returns
    -------
    xn, yn : array_like (M, N)
        Coordinates with mean squared distance 2 from the origin, so
        the monomials in the design matrices are of order 1 whatever
        the units of the data.
    s : array_like (M,)
        Scale factor that was divided out.  Point sets whose points
        all coincide keep s = 1.

    References
    ----------
    .. [1] W. Chojnacki and M. Brookes, "On the Consistency of the
           Normalized Eight-Point Algorithm", J Math Imaging Vis (2007)
           28: 19-27
    """
    s = np.sqrt(np.mean(x**2 + y**2, axis=-1)/2)
    s[s == 0] = 1
    return x/s[:, None], y/s[:, None], s


def unscale_coefficients(A: np.ndarray, s: np.ndarray) -> np.ndarray:
    """Map conics fitted to points divided by s back to unscaled points."""
    w = np.stack((s**-2, s**-2, s**-2, 1/s, 1/s, np.ones(s.shape)),
                 axis=-1)
    return A*w


def uncenter_coefficients(A: np.ndarray, xc: np.ndarray,
                          yc: np.ndarray) -> np.ndarray:
    """Translate conics fitted to centered points back by (xc, yc).

    Parameters
    ----------
    A : array_like (M, 6)
        Coefficients [a b c d e f] in the centered frame.
    xc, yc : array_like (M,)
        Centroids that were subtracted from the points.

    Returns
    -------
    res : array_like (M, 6)
        Coefficients in the original frame.  The quadratic part is
        unchanged by a translation.
    """
    a, b, c, d, e, f = A.T
    res = A.copy()
    res[:, 3] = d - 2*a*xc - b*yc
    res[:, 4] = e - 2*c*yc - b*xc
    res[:, 5] = f + a*xc**2 + c*yc**2 + b*xc*yc - d*xc - e*yc
    return res


def normalize_coefficients(A: np.ndarray, linalg) -> np.ndarray:
    """Scale each row of A to unit Euclidean norm."""
    return A/linalg.norm(A)[:, None]
