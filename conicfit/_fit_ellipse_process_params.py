"""Process common input arguments to ellipse fitting methods."""

from typing import Optional
import logging

import numpy as np

from conicfit.exceptions import DegenerateInputError


def _fit_ellipse_process_params(x: np.ndarray, y: Optional[np.ndarray]):

    x = np.asarray(x)
    if y is None:
        if np.iscomplexobj(x):
            # Convert complex array: (x, y) <=> (x.real, x.imag)
            x, y = x.real, x.imag
        elif x.ndim in (2, 3) and x.shape[-1] == 2:
            # ([M,] N, 2) array of (x, y) pairs
            x, y = x[..., 0], x[..., 1]
        else:
            raise ValueError(
                'if y not provided, x must be a complex-valued array '
                'or an array of (x, y) pairs')
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    if x.shape != y.shape:
        raise ValueError('x, y must have the same shape!')

    # Deal with multiple ellipses
    only_one = False
    if x.ndim == 1:
        x = x[None, :]
        y = y[None, :]
        only_one = True
    elif x.ndim != 2:
        raise ValueError('x (and y) must have 1 or 2 dimensions: ([M,] N)')

    if x.shape[-1] == 0:
        raise DegenerateInputError('cannot fit a conic to an empty point set')
    if not (np.all(np.isfinite(x)) and np.all(np.isfinite(y))):
        raise ValueError('x, y must be finite')

    # Make sure we have enough points to fit
    if x.shape[-1] < 6:
        logging.warning('6 or more points are required '
                        'for fitting an ellipse!')

    return x, y, only_one
