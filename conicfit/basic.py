"""Geometry of conics given by their algebraic coefficients."""

from typing import Tuple

import numpy as np

from conicfit.exceptions import NotAnEllipseError

# |b^2 - ac| below this fraction of max(b^2, |ac|) is a parabola
_PARABOLA_TOL = 1e-12


def _conic_terms(c: np.ndarray):
    """Return (a, b, c, d, f, g) of a x^2 + 2b xy + c y^2 + 2d x + 2f y + g.

    The sign of the input is flipped if needed so that a + c > 0;
    c and -c describe the same conic.
    """
    c = np.asarray(c, dtype=float)
    if c.shape != (6,):
        raise ValueError('expected 6 conic coefficients, got shape %s'
                         % (c.shape,))
    if not np.all(np.isfinite(c)):
        raise ValueError('conic coefficients must be finite')
    if c[0] + c[2] < 0:
        c = -c
    return c[0], c[1]/2, c[2], c[3]/2, c[4]/2, c[5]


def _discriminant(a: float, b: float, c: float) -> float:
    den = b**2 - a*c
    if abs(den) <= _PARABOLA_TOL*max(b**2, abs(a*c)):
        raise NotAnEllipseError(
            'b^2 - 4ac = 0: the conic is a parabola (or has no '
            'quadratic part)')
    return den


def get_center(c: np.ndarray) -> Tuple[float, float]:
    """Compute center of conic from implicit function coefficients.

    Parameters
    ----------
    c : array_like (6,)
        Coefficients [a b c d e f] of
        a x^2 + b x y + c y^2 + d x + e y + f = 0.

    Returns
    -------
    (xc, yc) : tuple of float
        (x,y) coordinate of center, where the gradient of the conic
        vanishes.

    Raises
    ------
    NotAnEllipseError
        If the conic is a parabola and has no center.
    """
    a, b, c, d, f, _g = _conic_terms(c)
    den = _discriminant(a, b, c)
    xc = (c*d - b*f)/den
    yc = (a*f - b*d)/den
    return float(xc), float(yc)


def get_semiaxes(c: np.ndarray) -> Tuple[float, float]:
    """Solve for semi-axes of the cartesian form of ellipse equation.

    Parameters
    ----------
    c : array_like (6,)
        Coefficients of general quadratic polynomial function for
        conic functions.

    Returns
    -------
    (a, b) : tuple of float
        Semi-major and semi-minor axes, in that order.

    Raises
    ------
    NotAnEllipseError
        If the conic is a parabola, a hyperbola, or an imaginary or
        degenerate (single point) ellipse.

    Notes
    -----
    Eqs. 21-22 of http://mathworld.wolfram.com/Ellipse.html
    """
    a, b, c, d, f, g = _conic_terms(c)
    den = _discriminant(a, b, c)
    if den > 0:
        raise NotAnEllipseError('b^2 - 4ac > 0: the conic is a hyperbola')

    num = 2*(a*f**2 + c*d**2 + g*b**2 - 2*b*d*f - a*c*g)
    root = np.sqrt((a - c)**2 + 4*b**2)
    r1 = num/(den*(root - a - c))
    r2 = num/(den*(-root - a - c))
    if not (r1 > 0 and r2 > 0):
        raise NotAnEllipseError(
            'squared semi-axes (%g, %g) are not positive: the ellipse '
            'is imaginary or degenerate' % (r1, r2))
    return float(np.sqrt(r1)), float(np.sqrt(r2))


def get_angle(c: np.ndarray) -> float:
    """Find the rotation angle of the ellipse.

    Parameters
    ----------
    c : array_like (6,)
        Ellipse coefficients.

    Returns
    -------
    phi : float
        The angle from the positive horizontal axis to the ellipse's
        major axis, in (-pi/4, 3*pi/4).

    Notes
    -----
    Eq. 23 of http://mathworld.wolfram.com/Ellipse.html
    """
    a, b, c, _d, _f, _g = _conic_terms(c)
    if b == 0:
        if a <= c:
            return 0.0
        return np.pi/2
    if a == c:
        # axes on the diagonals
        return -np.pi/4 if b > 0 else np.pi/4
    phi = np.arctan(2*b/(a - c))/2
    if a > c:
        phi += np.pi/2
    return float(phi)


def algebraic_to_geometric(c: np.ndarray) -> Tuple[float, float, float, float, float]:
    """Convert conic coefficients into ellipse dimensions.

    Parameters
    ----------
    c : array_like (6,)
        Coefficients [a b c d e f] of
        a x^2 + b x y + c y^2 + d x + e y + f = 0, of any nonzero
        scale and sign.

    Returns
    -------
    (xc, yc, a, b, phi) : tuple of float
        Center, semi-major and semi-minor axes, and the angle in
        radians from the x-axis to the semi-major axis.

    Raises
    ------
    NotAnEllipseError
        If the coefficients do not describe a real ellipse.
    """
    a, b = get_semiaxes(c)
    xc, yc = get_center(c)
    return xc, yc, a, b, get_angle(c)


def rotate_points(x: np.ndarray, y: np.ndarray, phi: float,
                  p: Tuple[float, float]=(0, 0)) -> Tuple[np.ndarray, np.ndarray]:
    """Rotate points x, y through angle phi w.r.t. point p.

    Parameters
    ----------
    x : array_like (N,)
        x coordinates of points to be rotated.
    y : array_like (N,)
        y coordinates of points to be rotated.
    phi : float
        Angle in radians to rotate points (counterclockwise).
    p : tuple (2,), optional
        Point to rotate around.

    Returns
    -------
    (xr, yr) : tuple (2,) of array_like (N,)
        (x,y) coordinates of rotated points.
    """
    x = np.asarray(x, dtype=float).flatten()
    y = np.asarray(y, dtype=float).flatten()
    cp, sp = np.cos(phi), np.sin(phi)
    xr = cp*(x - p[0]) - sp*(y - p[1]) + p[0]
    yr = sp*(x - p[0]) + cp*(y - p[1]) + p[1]
    return xr, yr


def make_points(c: np.ndarray, t: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Generate points along the ellipse parameterized by t.

    Parameters
    ----------
    c : array_like (6,)
        Ellipse coefficients.
    t : array_like (N,)
        Points along the ellipse.  t is in the interval [0, 2*pi).

    Returns
    -------
    (x, y) : tuple of array_like (N,)
        Points along the ellipse.
    """
    xc, yc, a, b, phi = algebraic_to_geometric(c)
    t = np.asarray(t, dtype=float)
    x, y = rotate_points(a*np.cos(t), b*np.sin(t), phi)
    return x + xc, y + yc


def make_ellipse_points(a: float, b: float, phi: float=0, xc: float=0,
                        yc: float=0, noise: float=0, n: int=200,
                        rng=None) -> np.ndarray:
    """Synthetic points on an ellipse, for testing.

    Parameters
    ----------
    a, b : float
        Semi-axes along x and y before rotation.
    phi : float, optional
        Rotation in radians.
    xc, yc : float, optional
        Center.
    noise : float, optional
        If > 0, uniform noise in [0, noise) is added to each
        coordinate before rotation.
    n : int, optional
        Number of points, spaced 2*pi/(n + 1) apart.
    rng : None, int or numpy.random.Generator, optional
        Source of the noise.

    Returns
    -------
    points : array_like (n, 2)
        (x, y) pairs.
    """
    alpha = np.arange(n)*2*np.pi/(n + 1)
    x = a*np.cos(alpha)
    y = b*np.sin(alpha)
    if noise > 0:
        rng = np.random.default_rng(rng)
        x = x + noise*rng.random(n)
        y = y + noise*rng.random(n)
    x, y = rotate_points(x, y, phi)
    return np.stack((x + xc, y + yc), axis=-1)


def check_fit(C: np.ndarray, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """General quadratic polynomial function.

    Parameters
    ----------
    C : array_like (6,)
        coefficients.
    x : array_like (N,)
        x coordinates assumed to be on ellipse.
    y : array_like (N,)
        y coordinates assumed to be on ellipse.

    Returns
    -------
    res : array_like (N,)
        Algebraic distance of each point (x, y) to the conic.

    Notes
    -----
    We want this to equal 0 for a good fit.
    """
    x = np.asarray(x, dtype=float).flatten()
    y = np.asarray(y, dtype=float).flatten()
    return C[0]*x**2 + C[1]*x*y + C[2]*y**2 + C[3]*x + C[4]*y + C[5]
