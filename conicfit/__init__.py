
from .basic import (
    get_center,
    get_semiaxes,
    get_angle,
    algebraic_to_geometric,
    rotate_points,
    check_fit,
    make_points,
    make_ellipse_points,
)
from .exceptions import (
    EllipseFitError,
    DegenerateInputError,
    UnfittableConstraintError,
    NotAnEllipseError,
)
from ._linalg import LinearAlgebra, NUMPY_LINALG
from ._centering import get_centroid
from .fit_ellipse_direct import fit_ellipse_direct
from .fit_ellipse_taubin import fit_ellipse_taubin
