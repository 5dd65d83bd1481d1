# gpcf/misc/param.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Param: structured view of a packed hyperparameter vector

Covariance functions and hyperpriors exchange their parameters with
optimizers and samplers as one flat vector. A Param object attaches to
each entry of that vector

- a name (the label produced by ``pak``),
- a path locating the entry in the tree covariance -> parameter -> prior,
- the normalization mapping the natural value to the packed value
  (log, none).

Param objects can be indexed, sliced, concatenated and queried by path
prefix.
"""

from enum import Enum
from typing import List, Union, Optional, Tuple, Sequence
import gpcf.num as gnp
from gpcf.misc.dataframe import ftos


class Normalization(Enum):
    LOG = "log"
    NONE = "none"


def parse_normalization(norm: Union[str, Normalization]) -> Normalization:
    if isinstance(norm, Normalization):
        return norm
    if isinstance(norm, str):
        try:
            return Normalization(norm.lower())
        except ValueError:
            raise ValueError(f"Unknown normalization: {norm}") from None
    raise TypeError("Normalization must be a str or Normalization enum.")


def normalize(value, normalization: Normalization):
    """Map a natural value to its packed representation."""
    if normalization == Normalization.LOG:
        return gnp.log(value)
    return value


def denormalize(value, normalization: Normalization):
    """Map a packed value back to its natural representation."""
    if normalization == Normalization.LOG:
        return gnp.exp(value)
    return value


class Param:
    def __init__(
        self,
        values: Optional[Union[List[float], gnp.ndarray]] = None,
        paths: Optional[List[List[str]]] = None,
        normalizations: Optional[List[Union[str, Normalization]]] = None,
        names: Optional[List[str]] = None,
        name_prefix: str = "param_",
    ):
        self.values = gnp.zeros(0) if values is None else values
        self.paths: List[List[str]] = (
            paths if paths is not None else [["param"] for _ in range(self.dim)]
        )
        self.names: List[str] = (
            names if names is not None else [f"{name_prefix}{i}" for i in range(self.dim)]
        )
        self.normalizations: List[Normalization] = (
            [Normalization.NONE] * self.dim
            if normalizations is None
            else [parse_normalization(n) for n in normalizations]
        )

        if not (
            len(self.paths)
            == len(self.names)
            == len(self.normalizations)
            == self.dim
        ):
            raise ValueError(
                "All parameter fields must have the same length as the number of parameters."
            )

    @classmethod
    def from_entries(cls, entries: Sequence[Tuple[float, str, List[str], Normalization]]) -> "Param":
        """Build a Param from (packed value, name, path, normalization) tuples."""
        entries = list(entries)
        return cls(
            values=gnp.asarray([e[0] for e in entries], dtype=float),
            names=[e[1] for e in entries],
            paths=[list(e[2]) for e in entries],
            normalizations=[e[3] for e in entries],
        )

    @property
    def values(self) -> gnp.ndarray:
        return self._values

    @values.setter
    def values(self, new_values: Union[List[float], gnp.ndarray]) -> None:
        self._values = gnp.asarray(new_values, dtype=float).reshape(-1)
        self.dim = self._values.shape[0]

    @property
    def denormalized_values(self) -> gnp.ndarray:
        return gnp.asarray(
            [denormalize(v, n) for v, n in zip(self._values, self.normalizations)],
            dtype=float,
        )

    def get_by_name(self, name: str) -> float:
        return self._values[self.names.index(name)]

    def indices_by_path_prefix(self, prefix: List[str]) -> List[int]:
        """Return indices of parameters whose path matches the prefix."""
        return [i for i, p in enumerate(self.paths) if p[: len(prefix)] == prefix]

    def names_by_path_prefix(self, prefix: List[str]) -> List[str]:
        """Return parameter names whose path matches the prefix."""
        return [self.names[i] for i in self.indices_by_path_prefix(prefix)]

    def get_by_path(self, path: List[str], prefix_match: bool = False) -> gnp.ndarray:
        if prefix_match:
            indices = self.indices_by_path_prefix(path)
        else:
            indices = [i for i, p in enumerate(self.paths) if p == path]
        return gnp.copy(self._values[gnp.asarray(indices, dtype=int)])

    def set_by_path(
        self,
        path: List[str],
        new_values: Union[List[float], gnp.ndarray],
        prefix_match: bool = False,
    ) -> None:
        if prefix_match:
            indices = self.indices_by_path_prefix(path)
        else:
            indices = [i for i, p in enumerate(self.paths) if p == path]
        if len(indices) != len(new_values):
            raise ValueError(f"Expected {len(indices)} values, got {len(new_values)}.")
        for idx, val in zip(indices, new_values):
            self._values[idx] = val

    def __getitem__(self, index: Union[int, slice]) -> "Param":
        if isinstance(index, int):
            index = [index]
        elif isinstance(index, slice):
            index = list(range(self.dim))[index]
        return Param(
            values=self._values[index],
            paths=[self.paths[i] for i in index],
            normalizations=[self.normalizations[i] for i in index],
            names=[self.names[i] for i in index],
        )

    def __len__(self) -> int:
        return self.dim

    def __add__(self, other: "Param") -> "Param":
        return Param.concat(self, other)

    @staticmethod
    def concat(*params: "Param") -> "Param":
        return Param(
            gnp.concatenate([p.values for p in params]),
            sum((p.paths for p in params), []),
            sum((p.normalizations for p in params), []),
            sum((p.names for p in params), []),
        )

    def to_simple_dict(self) -> dict:
        return {name: val for name, val in zip(self.names, self.denormalized_values)}

    def __repr__(self) -> str:
        denorm = self.denormalized_values
        raw_data = [
            (
                self.names[i] + ":",
                "->".join(self.paths[i]),
                self.normalizations[i].value,
                ftos(self._values[i]),
                ftos(denorm[i]),
            )
            for i in range(self.dim)
        ]
        headers = ("Name:", "Path", "Norm", "Value", "Denorm")
        widths = [len(h) for h in headers]
        for row in raw_data:
            widths = [max(w, len(v)) for w, v in zip(widths, row)]

        lines = ["    ".join(h.rjust(w) for h, w in zip(headers, widths))]
        for row in raw_data:
            lines.append("    ".join(v.rjust(w) for v, w in zip(row, widths)))
        return "\n".join(lines)
