# gpcf/kernel/base.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Covariance function interface.

A covariance function object holds its hyperparameters in natural
(positive, untransformed) form together with one hyperprior per
parameter group, and provides

- ``pak`` / ``unpak``: exchange of the active hyperparameters with a
  flat log-space vector,
- ``lp`` / ``lpg``: log-prior and its gradient w.r.t. the packed vector,
- ``cov`` / ``trcov`` / ``trvar`` / ``covvec``: covariance evaluation,
- ``cfg`` / ``ginput``: derivatives w.r.t. hyperparameters and inputs,
- ``recappend``: sample records for MCMC.

Instances can also be called as ``k(x, y, pairwise)``, following the
covariance callable convention ``K = covariance(x, y, pairwise)`` where
``y is None`` (or ``y is x``) selects the training covariance.
"""
from abc import ABC, abstractmethod

import gpcf.num as gnp
from gpcf.errors import ColumnMismatch, UnsupportedMetric


def as_inputs(x):
    """Return x as a 2-D float array (n, d); 1-D input is a column."""
    x = gnp.asarray(x, dtype=float)
    if x.ndim == 0:
        x = x.reshape(1, 1)
    elif x.ndim == 1:
        x = x.reshape(-1, 1)
    elif x.ndim != 2:
        raise ValueError(f"Inputs must be a 2-D array (n, d), got shape {x.shape}.")
    return x


def is_empty(x) -> bool:
    return x is None or gnp.asarray(x).size == 0


class CovarianceFunction(ABC):
    """Abstract covariance function."""

    kind = "gpcf"
    metric = None

    def check_metric(self):
        if self.metric is not None:
            raise UnsupportedMetric(
                f"{self.kind}: covariance function not compatible with metrics."
            )

    def check_columns(self, x1, x2):
        if x1.shape[1] != x2.shape[1]:
            raise ColumnMismatch(
                f"{self.kind}: the number of columns in x ({x1.shape[1]}) "
                f"and x2 ({x2.shape[1]}) has to be the same."
            )

    @abstractmethod
    def pak(self):
        """Return (w, labels) for the active hyperparameters."""

    @abstractmethod
    def unpak(self, w):
        """Return (new covariance function, unconsumed rest of w)."""

    @abstractmethod
    def lp(self):
        """Log-prior of the packed hyperparameters."""

    @abstractmethod
    def lpg(self):
        """Gradient of lp w.r.t. the packed vector."""

    @abstractmethod
    def cov(self, x1, x2=None):
        """Covariance matrix between x1 and x2."""

    @abstractmethod
    def trcov(self, x):
        """Training covariance matrix of x."""

    @abstractmethod
    def trvar(self, x):
        """Variance vector of x."""

    @abstractmethod
    def covvec(self, x1, x2):
        """Covariances k(x1[i], x2[i])."""

    @abstractmethod
    def cfg(self, x, x2=None, mask=False):
        """Derivatives of the covariance w.r.t. the packed hyperparameters."""

    @abstractmethod
    def ginput(self, x, x2=None):
        """Derivatives of the covariance w.r.t. the inputs x."""

    @abstractmethod
    def recappend(self, rec=None, ri=None):
        """Initialize or append to a sample record."""

    def __call__(self, x, y=None, pairwise=False):
        if y is x or y is None:
            return self.trvar(x) if pairwise else self.trcov(x)
        return self.covvec(x, y) if pairwise else self.cov(x, y)
