"""Dense linear algebra used by the fitters.

All methods accept stacks of matrices ``(..., n, n)`` so that a batch
of point sets can be processed in one call.
"""

import numpy as np

from conicfit.exceptions import DegenerateInputError


class LinearAlgebra:
    """numpy backed linear algebra provider.

    Parameters
    ----------
    rcond : float, optional
        Matrices whose reciprocal condition number (ratio of smallest
        to largest singular value) falls below `rcond` are treated as
        singular.

    Notes
    -----
    Subclass and override the methods to use another numerics
    library; the fitters only talk to this interface.
    """

    def __init__(self, rcond: float=1e-12):
        self.rcond = rcond

    def check_invertible(self, A: np.ndarray, name: str):
        """Raise DegenerateInputError if any matrix in A is singular."""
        s = np.linalg.svd(A, compute_uv=False)
        smax = s[..., 0]
        bad = ~(s[..., -1] > self.rcond*smax)
        if np.any(bad):
            idx = np.flatnonzero(bad).tolist()
            raise DegenerateInputError(
                '%s is singular for point set(s) %s; the points are '
                'coincident, collinear or too few' % (name, idx))

    def inv(self, A: np.ndarray, name: str='matrix') -> np.ndarray:
        self.check_invertible(A, name)
        return np.linalg.inv(A)

    def solve(self, A: np.ndarray, B: np.ndarray,
              name: str='matrix') -> np.ndarray:
        """Solve A X = B for X."""
        self.check_invertible(A, name)
        return np.linalg.solve(A, B)

    def eig(self, A: np.ndarray):
        """Eigenvalues and eigenvectors (as columns) of general A."""
        return np.linalg.eig(A)

    def norm(self, A: np.ndarray) -> np.ndarray:
        return np.linalg.norm(A, axis=-1)


NUMPY_LINALG = LinearAlgebra()
