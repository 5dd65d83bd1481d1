# gpcf/kernel/priors.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Hyperpriors on covariance parameters.

A hyperprior is a distribution placed on a covariance parameter. It may
itself depend on hyperparameters, which may in turn carry hyperpriors.
Every hyperprior exposes the same capabilities:

pak()
    Packed vector of its active hyperparameters and their labels.
unpak(w)
    New hyperprior with values read from ``w``, and the unconsumed rest.
lp(x)
    Log-density at ``x`` (summed over the entries of ``x``), including
    the log-densities of its hyperparameters.
lpg(x)
    Gradient of ``lp``: derivatives w.r.t. the entries of ``x``, followed
    by derivatives w.r.t. the packed hyperparameters.
recappend(rec=None, ri=None)
    Initialize (no argument) or append to a sample record.

A hyperparameter whose own prior is ``None`` is fixed: it is not packed
and contributes nothing to ``lp`` or ``lpg``.

Classes
-------
Uniform
    Improper flat prior.
SqrtUniform
    Flat prior on ``sqrt(x)``.
LogUniform
    Flat prior on ``log(x)``.
Gaussian
    Normal prior with mean ``mu`` and variance ``s2``.
LogGaussian
    Normal prior on ``log(x)``.
Gamma
    Gamma prior with shape ``sh`` and inverse scale ``inv_scale``.
InverseGamma
    Inverse-gamma prior with shape ``sh`` and scale ``s``.
"""
import copy
from typing import Dict, List, Optional, Tuple

import gpcf.num as gnp
from gpcf.errors import IncompatibleVectorLength, InvalidParameter
from gpcf.misc.param import Normalization, normalize, denormalize
from .record import RecordAccumulator


def _as_vector(x):
    return gnp.asarray(x, dtype=float).reshape(-1)


def _check_positive(name, value):
    if not (gnp.isscalar(value) or gnp.asarray(value).size == 1):
        raise InvalidParameter(f"{name} must be a scalar, got {value!r}.")
    value = float(gnp.asarray(value, dtype=float).reshape(-1)[0])
    if not value > 0.0:
        raise InvalidParameter(f"{name} must be positive, got {value}.")
    return value


def _check_real(name, value):
    if not (gnp.isscalar(value) or gnp.asarray(value).size == 1):
        raise InvalidParameter(f"{name} must be a scalar, got {value!r}.")
    value = float(gnp.asarray(value, dtype=float).reshape(-1)[0])
    if not gnp.isfinite(value):
        raise InvalidParameter(f"{name} must be finite, got {value}.")
    return value


def check_prior(name, prior):
    """Accept None (fixed parameter) or an object with the hyperprior
    capabilities."""
    if prior is None:
        return None
    for method in ("pak", "unpak", "lp", "lpg", "recappend"):
        if not callable(getattr(prior, method, None)):
            raise InvalidParameter(
                f"{name} must be a hyperprior or None, got {type(prior).__name__}."
            )
    return prior


def unpak_at(prior, w, offset: int):
    """Unpack ``prior`` from ``w`` starting at ``offset``.

    Returns the updated prior and the offset of the first unconsumed
    entry. Objects that only implement ``unpak`` are supported.
    """
    if hasattr(prior, "_unpak_at"):
        return prior._unpak_at(w, offset)
    rest_in = w[offset:]
    new_prior, rest_out = prior.unpak(rest_in)
    return new_prior, offset + (rest_in.shape[0] - _as_vector(rest_out).shape[0])


def prior_entries(prior, path: List[str]):
    """(packed value, label, path, normalization) for each packed entry."""
    if hasattr(prior, "_entries"):
        return prior._entries(path)
    w, labels = prior.pak()
    return [
        (v, s, path + [s], Normalization.NONE) for v, s in zip(_as_vector(w), labels)
    ]


class Hyperprior:
    """Base class of hyperpriors.

    Subclasses declare their hyperparameters in ``_hyperparameters`` as
    ``(name, normalization)`` pairs and implement

    - ``_log_density(x)``: sum of the elementwise log-densities,
    - ``_grad_x(x)``: elementwise derivative of the log-density,
    - ``_grad_hyper(x)``: dict of derivatives of ``_log_density`` w.r.t.
      each (natural) hyperparameter.
    """

    kind = "prior"
    _hyperparameters: Tuple[Tuple[str, Normalization], ...] = ()

    def __init__(self, values: Optional[Dict[str, float]] = None,
                 priors: Optional[Dict[str, "Hyperprior"]] = None):
        self.values: Dict[str, float] = dict(values or {})
        self.priors: Dict[str, Optional[Hyperprior]] = {
            name: check_prior(f"{name}_prior", (priors or {}).get(name))
            for name, _ in self._hyperparameters
        }

    # -- packing -------------------------------------------------------

    def _active(self):
        return [
            (name, norm)
            for name, norm in self._hyperparameters
            if self.priors[name] is not None
        ]

    def _label(self, name, norm):
        prefix = self.kind.replace("prior_", "")
        if norm == Normalization.LOG:
            return f"log({prefix}.{name})"
        return f"{prefix}.{name}"

    def _entries(self, path: List[str]):
        entries = []
        for name, norm in self._active():
            entries.append(
                (normalize(self.values[name], norm), self._label(name, norm),
                 path + [name], norm)
            )
            entries.extend(prior_entries(self.priors[name], path + [name, "prior"]))
        return entries

    def pak(self):
        """Return the packed active hyperparameters and their labels."""
        entries = self._entries([self.kind])
        w = gnp.asarray([e[0] for e in entries], dtype=float)
        return w, [e[1] for e in entries]

    def _unpak_at(self, w, offset: int):
        new = copy.copy(self)
        new.values = dict(self.values)
        new.priors = dict(self.priors)
        for name, norm in self._active():
            if offset >= w.shape[0]:
                raise IncompatibleVectorLength(
                    f"{self.kind}: parameter vector too short to unpack '{name}'."
                )
            new.values[name] = float(denormalize(w[offset], norm))
            offset += 1
            new.priors[name], offset = unpak_at(self.priors[name], w, offset)
        return new, offset

    def unpak(self, w):
        """Return a new hyperprior read from ``w`` and the rest of ``w``."""
        w = _as_vector(w)
        new, offset = self._unpak_at(w, 0)
        return new, w[offset:]

    # -- densities -----------------------------------------------------

    def _log_density(self, x):
        raise NotImplementedError

    def _grad_x(self, x):
        raise NotImplementedError

    def _grad_hyper(self, x):
        return {}

    def lp(self, x):
        """Log-density at x, including the hyperparameter priors."""
        x = _as_vector(x)
        lp = self._log_density(x)
        for name, norm in self._active():
            value = self.values[name]
            lp = lp + self.priors[name].lp(value)
            if norm == Normalization.LOG:
                # Jacobian of the log transformation
                lp = lp + gnp.log(value)
        return lp

    def lpg(self, x):
        """Gradient of lp w.r.t. x, then w.r.t. the packed hyperparameters."""
        x = _as_vector(x)
        grads = [_as_vector(self._grad_x(x))]
        active = self._active()
        dhyper = self._grad_hyper(x) if active else {}
        for name, norm in active:
            value = self.values[name]
            g = _as_vector(self.priors[name].lpg(value))
            d = dhyper[name] + g[0]
            if norm == Normalization.LOG:
                d = d * value + 1.0
            grads.append(gnp.asarray([d], dtype=float))
            grads.append(g[1:])
        return gnp.concatenate(grads)

    # -- records -------------------------------------------------------

    def recappend(self, rec: Optional[RecordAccumulator] = None, ri: Optional[int] = None):
        """Initialize a record (``rec is None``) or append row ``ri``."""
        if rec is None:
            active = [name for name, _ in self._active()]
            return RecordAccumulator(
                self.kind,
                names=active,
                priors={name: self.priors[name].recappend() for name in active},
            )
        for name in rec.names:
            rec.append(name, ri, self.values[name])
            rec.priors[name] = self.priors[name].recappend(rec.priors[name], ri)
        return rec

    def from_record(self, rec: RecordAccumulator, ri: int):
        """Return a copy whose recorded hyperparameters take their values at row ri."""
        new = copy.copy(self)
        new.values = dict(self.values)
        new.priors = dict(self.priors)
        for name in rec.names:
            new.values[name] = float(rec.row(name, ri)[0])
            prior = self.priors[name]
            if hasattr(prior, "from_record"):
                new.priors[name] = prior.from_record(rec.priors[name], ri)
        return new

    def __repr__(self) -> str:
        args = ", ".join(f"{name}={self.values[name]!r}" for name, _ in self._hyperparameters)
        return f"{type(self).__name__}({args})"


class Uniform(Hyperprior):
    """Improper uniform prior, log p(x) = 0."""

    kind = "prior_unif"

    def _log_density(self, x):
        return 0.0

    def _grad_x(self, x):
        return gnp.zeros(x.shape)


class SqrtUniform(Hyperprior):
    """Uniform prior on sqrt(x), p(x) = 1 / (2 sqrt(x))."""

    kind = "prior_sqrtunif"

    def _log_density(self, x):
        return -gnp.sum(gnp.log(2.0 * gnp.sqrt(x)))

    def _grad_x(self, x):
        return -1.0 / (2.0 * x)


class LogUniform(Hyperprior):
    """Uniform prior on log(x), p(x) = 1 / x."""

    kind = "prior_logunif"

    def _log_density(self, x):
        return -gnp.sum(gnp.log(x))

    def _grad_x(self, x):
        return -1.0 / x


class Gaussian(Hyperprior):
    """Gaussian prior N(mu, s2).

    Parameters
    ----------
    mu : float, default=0.0
        Location.
    s2 : float, default=1.0
        Variance, packed as log(s2).
    mu_prior, s2_prior : Hyperprior or None
        Priors on the hyperparameters. None keeps them fixed.
    """

    kind = "prior_gaussian"
    _hyperparameters = (("mu", Normalization.NONE), ("s2", Normalization.LOG))

    def __init__(self, mu=0.0, s2=1.0, mu_prior=None, s2_prior=None):
        super().__init__(
            values={"mu": _check_real("mu", mu), "s2": _check_positive("s2", s2)},
            priors={"mu": mu_prior, "s2": s2_prior},
        )

    def _transform(self, x):
        return x

    def _log_density(self, x):
        mu, s2 = self.values["mu"], self.values["s2"]
        y = self._transform(x)
        return gnp.sum(-0.5 * gnp.log(2.0 * gnp.pi * s2) - (y - mu) ** 2 / (2.0 * s2))

    def _grad_x(self, x):
        mu, s2 = self.values["mu"], self.values["s2"]
        return -(x - mu) / s2

    def _grad_hyper(self, x):
        mu, s2 = self.values["mu"], self.values["s2"]
        y = self._transform(x)
        return {
            "mu": gnp.sum((y - mu) / s2),
            "s2": gnp.sum(-0.5 / s2 + (y - mu) ** 2 / (2.0 * s2**2)),
        }


class LogGaussian(Gaussian):
    """Gaussian prior on log(x), i.e. log-normal prior on x."""

    kind = "prior_loggaussian"

    def _transform(self, x):
        return gnp.log(x)

    def _log_density(self, x):
        return super()._log_density(x) - gnp.sum(gnp.log(x))

    def _grad_x(self, x):
        mu, s2 = self.values["mu"], self.values["s2"]
        return (-(gnp.log(x) - mu) / s2 - 1.0) / x


class Gamma(Hyperprior):
    """Gamma prior with shape sh and inverse scale inv_scale.

    log p(x) = sh log(inv_scale) - gammaln(sh) + (sh - 1) log(x) - inv_scale x
    """

    kind = "prior_gamma"
    _hyperparameters = (("sh", Normalization.LOG), ("inv_scale", Normalization.LOG))

    def __init__(self, sh=4.0, inv_scale=1.0, sh_prior=None, inv_scale_prior=None):
        super().__init__(
            values={
                "sh": _check_positive("sh", sh),
                "inv_scale": _check_positive("inv_scale", inv_scale),
            },
            priors={"sh": sh_prior, "inv_scale": inv_scale_prior},
        )

    def _log_density(self, x):
        sh, invs = self.values["sh"], self.values["inv_scale"]
        return gnp.sum(sh * gnp.log(invs) - gnp.gammaln(sh) + (sh - 1.0) * gnp.log(x) - invs * x)

    def _grad_x(self, x):
        sh, invs = self.values["sh"], self.values["inv_scale"]
        return (sh - 1.0) / x - invs

    def _grad_hyper(self, x):
        sh, invs = self.values["sh"], self.values["inv_scale"]
        return {
            "sh": gnp.sum(gnp.log(invs) - gnp.digamma(sh) + gnp.log(x)),
            "inv_scale": gnp.sum(sh / invs - x),
        }


class InverseGamma(Hyperprior):
    """Inverse-gamma prior with shape sh and scale s.

    log p(x) = sh log(s) - gammaln(sh) - (sh + 1) log(x) - s / x
    """

    kind = "prior_invgamma"
    _hyperparameters = (("sh", Normalization.LOG), ("s", Normalization.LOG))

    def __init__(self, sh=4.0, s=1.0, sh_prior=None, s_prior=None):
        super().__init__(
            values={"sh": _check_positive("sh", sh), "s": _check_positive("s", s)},
            priors={"sh": sh_prior, "s": s_prior},
        )

    def _log_density(self, x):
        sh, s = self.values["sh"], self.values["s"]
        return gnp.sum(sh * gnp.log(s) - gnp.gammaln(sh) - (sh + 1.0) * gnp.log(x) - s / x)

    def _grad_x(self, x):
        sh, s = self.values["sh"], self.values["s"]
        return -(sh + 1.0) / x + s / x**2

    def _grad_hyper(self, x):
        sh, s = self.values["sh"], self.values["s"]
        return {
            "sh": gnp.sum(gnp.log(s) - gnp.digamma(sh) - gnp.log(x)),
            "s": gnp.sum(sh / s - 1.0 / x),
        }
