"""Errors raised by the conic fitting and conversion routines."""


class EllipseFitError(ValueError):
    """Base class for all conicfit failures."""


class DegenerateInputError(EllipseFitError):
    """A matrix that must be inverted is singular.

    Raised for empty, coincident or collinear point sets, i.e. when
    the points do not pin down a conic.
    """


class UnfittableConstraintError(EllipseFitError):
    """No eigenvector satisfies the ellipse constraint 4ac - b^2 > 0.

    Only raised by the direct method.  The Taubin method does not
    enforce the constraint and may be tried instead.
    """


class NotAnEllipseError(EllipseFitError):
    """The conic is a parabola, hyperbola or degenerate ellipse."""
