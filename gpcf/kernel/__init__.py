# gpcf/kernel/__init__.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Gaussian Process covariance functions and hyperpriors.

Modules
-------
base
    Covariance function interface.
periodic
    Periodic covariance function with optional squared-exponential decay.
priors
    Hyperpriors on covariance parameters.
record
    Sample records for MCMC traces.

Public API
-----------
- Covariance functions:
    CovarianceFunction, PeriodicCovariance
- Hyperpriors:
    Hyperprior, Uniform, SqrtUniform, LogUniform, Gaussian, LogGaussian,
    Gamma, InverseGamma
- Records:
    RecordAccumulator
"""

from .base import CovarianceFunction
from .periodic import PeriodicCovariance
from .priors import (
    Hyperprior,
    Uniform,
    SqrtUniform,
    LogUniform,
    Gaussian,
    LogGaussian,
    Gamma,
    InverseGamma,
)
from .record import RecordAccumulator

__all__ = [
    # Covariance functions
    "CovarianceFunction",
    "PeriodicCovariance",
    # Hyperpriors
    "Hyperprior",
    "Uniform",
    "SqrtUniform",
    "LogUniform",
    "Gaussian",
    "LogGaussian",
    "Gamma",
    "InverseGamma",
    # Records
    "RecordAccumulator",
]
