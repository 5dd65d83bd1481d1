# gpcf/errors.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Exceptions raised by gpcf.

All errors are validation failures raised synchronously to the caller.
They subclass builtin exceptions so that ``except ValueError`` keeps
working in code written against plain NumPy routines.
"""


class InvalidParameter(ValueError):
    """A hyperparameter value or an option lies outside its domain."""


class UnsupportedMetric(ValueError):
    """A metric distance abstraction is attached to a covariance function
    that cannot use one."""


class ColumnMismatch(ValueError):
    """Two input arrays do not have the same number of columns."""


class IncompatibleVectorLength(ValueError):
    """A packed parameter vector is too short to be unpacked."""


class UnsupportedLatentMethod(NotImplementedError):
    """The requested latent inference method is unknown or not available."""


class RecordIndexError(IndexError):
    """A sample record index skips rows of the record."""
