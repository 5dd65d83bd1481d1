# gpcf/num/numpy_backend.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""NumPy numerical backend for gpcf.

This module defines the NumPy implementation of the gpcf.num API.
"""

from typing import Any, Optional, Tuple, Union
from gpcf.config import get_config, init_backend, get_logger

Scalar = Union[int, float]
ArrayLike = Any

_gpcf_backend_: str = init_backend()
_config = get_config()
_logger = get_logger()
_logger.debug("Using backend: %s", _gpcf_backend_)


# -----------------------------------------------------
#
#                      NUMPY
#
# -----------------------------------------------------

import numpy
from numpy.typing import NDArray

_np_dtype = numpy.float64
_config.dtype_resolved = _np_dtype

ndarray = NDArray[numpy.floating]
from numpy import (
    copy,
    reshape,
    where,
    any,
    isscalar,
    isnan,
    isfinite,
    allclose,
    hstack,
    vstack,
    stack,
    concatenate,
    zeros_like,
    ones_like,
    diag,
    arange,
    floor,
    abs,
    sqrt,
    exp,
    log,
    sin,
    cos,
    sum,
    min,
    max,
    maximum,
    minimum,
    all,
    tril_indices,
)
from numpy.linalg import norm, cholesky, eigvalsh
from numpy import pi, inf
from numpy import finfo, float64
from scipy.special import gammaln, digamma

# ..................................................

eps = finfo(_np_dtype).eps

# ..................................................


def array(x, dtype=None):
    if dtype is not None:
        return numpy.array(x, dtype=dtype)
    out = numpy.array(x)
    if numpy.issubdtype(out.dtype, numpy.floating):
        return out.astype(_np_dtype, copy=False)
    return out


def asarray(x, dtype=None):
    if dtype is not None:
        return numpy.asarray(x, dtype=dtype)
    if isinstance(x, numpy.ndarray):
        if numpy.issubdtype(x.dtype, numpy.floating):
            return x.astype(_np_dtype, copy=False)
        return x
    elif isinstance(x, (int, float)):
        dt = _np_dtype if isinstance(x, float) else None
        return numpy.array([x], dtype=dt)
    else:
        out = numpy.asarray(x)
        if numpy.issubdtype(out.dtype, numpy.floating):
            return out.astype(_np_dtype, copy=False)
        return out


def asdouble(x):
    return numpy.asarray(x).astype(float64, copy=False)


def zeros(shape, dtype=None):
    return numpy.zeros(shape, dtype=_np_dtype if dtype is None else dtype)


def ones(shape, dtype=None):
    return numpy.ones(shape, dtype=_np_dtype if dtype is None else dtype)


def full(shape, fill_value, dtype=None):
    return numpy.full(
        shape, fill_value, dtype=_np_dtype if dtype is None else dtype
    )


def eye(n, m=None, k=0, dtype=None):
    return numpy.eye(n, M=m, k=k, dtype=_np_dtype if dtype is None else dtype)


def linspace(start, stop, num=50, endpoint=True, dtype=None):
    return numpy.linspace(
        start, stop, num=num, endpoint=endpoint,
        dtype=_np_dtype if dtype is None else dtype,
    )


def to_scalar(x):
    return x.item()


def isarray(x):
    return isinstance(x, numpy.ndarray)


# ..................................................


def coordinate_differences(x: ArrayLike, y: ArrayLike, j: int) -> ArrayLike:
    """Matrix of differences x[i, j] - y[k, j], shape (nx, ny)."""
    return x[:, j][:, None] - y[:, j][None, :]


def lower_pair_indices(n: int) -> Tuple[ArrayLike, ArrayLike]:
    """Row and column indices (i > k) of the strict lower triangle."""
    return tril_indices(n, k=-1)


def clamp_below(a: ArrayLike, threshold: Optional[Scalar] = None) -> ArrayLike:
    """Set entries smaller than threshold (default eps) to exactly zero."""
    if threshold is None:
        threshold = eps
    return where(a < threshold, 0.0, a)


# ..................................................

# Build one global RNG (or let the user set the seed somewhere):
_np_rng = numpy.random.default_rng(seed=1234)


def set_seed(seed: int) -> None:
    """Set the global NumPy generator seed."""
    global _np_rng
    _np_rng = numpy.random.default_rng(seed=seed)


def rand(*shape: int) -> ArrayLike:
    return _np_rng.random(shape, dtype=_np_dtype)


def randn(*shape: int) -> ArrayLike:
    return _np_rng.normal(loc=0, scale=1, size=shape).astype(_np_dtype, copy=False)
