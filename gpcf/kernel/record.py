# gpcf/kernel/record.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Sample records for MCMC traces of covariance hyperparameters.

A :class:`RecordAccumulator` stores, for each recorded parameter, a
two-dimensional array with one row per sample. Hyperpriors attached to
the parameters keep their own accumulators in ``priors``, so that a
record mirrors the tree of a covariance function and its hyperpriors.
"""
from typing import Dict, List, Optional
import gpcf.num as gnp
from gpcf.errors import RecordIndexError


class RecordAccumulator:
    """Row-indexed history of parameter values.

    Parameters
    ----------
    kind : str
        Name of the object being recorded (e.g. ``"gpcf_periodic"``).
    names : list of str, optional
        Names of the recorded parameters, in recording order.
    priors : dict, optional
        Sub-accumulators of hyperpriors, keyed by parameter name.
    """

    def __init__(
        self,
        kind: str,
        names: Optional[List[str]] = None,
        priors: Optional[Dict[str, "RecordAccumulator"]] = None,
    ):
        self.kind = kind
        self.names: List[str] = list(names) if names is not None else []
        self.priors: Dict[str, "RecordAccumulator"] = dict(priors or {})
        self._rows: Dict[str, List] = {name: [] for name in self.names}

    @property
    def nsamples(self) -> int:
        if not self.names:
            return 0
        return len(self._rows[self.names[0]])

    def append(self, name: str, ri: int, value) -> None:
        """Write ``value`` into row ``ri`` of parameter ``name``.

        ``ri`` equal to the current number of rows appends a row; a
        smaller index overwrites an existing row.
        """
        if name not in self._rows:
            raise KeyError(f"Parameter '{name}' is not recorded by this {self.kind} record.")
        rows = self._rows[name]
        if ri < 0 or ri > len(rows):
            raise RecordIndexError(
                f"Record index {ri} out of range for '{name}' with {len(rows)} rows."
            )
        row = gnp.copy(gnp.asarray(value, dtype=float).reshape(-1))
        if ri == len(rows):
            rows.append(row)
        else:
            rows[ri] = row

    def samples(self, name: str):
        """Return the (nsamples, k) array of recorded values of ``name``."""
        rows = self._rows[name]
        if not rows:
            return gnp.zeros((0, 0))
        return gnp.vstack(rows)

    def row(self, name: str, ri: int):
        return self._rows[name][ri]

    def __contains__(self, name: str) -> bool:
        return name in self._rows

    def __repr__(self) -> str:
        return (
            f"RecordAccumulator(kind={self.kind!r}, names={self.names}, "
            f"nsamples={self.nsamples}, priors={list(self.priors.keys())})"
        )
