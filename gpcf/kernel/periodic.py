# gpcf/kernel/periodic.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Periodic covariance function with optional squared-exponential decay.

.. math::

    k(x, y) = \\sigma^2 \\exp\\Big(-\\sum_{i=1}^{d}
        \\frac{2 \\sin^2(\\pi (x_i - y_i) / T)}{\\ell_i^2}
        - \\delta \\sum_{i=1}^{d} \\frac{(x_i - y_i)^2}{2 \\ell_{e,i}^2}\\Big)

where :math:`\\sigma^2` is ``magn_sigma2``, :math:`\\ell` is
``length_scale``, :math:`T` is ``period``, :math:`\\ell_e` is
``length_scale_sexp`` and :math:`\\delta \\in \\{0, 1\\}` is ``decay``
(Rasmussen & Williams, 2006, Gaussian Processes for Machine Learning).

Length scales are either scalars (isotropic) or vectors with one entry
per input dimension (ARD). The period is a scalar.

Packed vector layout (only parameters whose prior is not None, and
``length_scale_sexp`` / ``period`` only when ``decay`` / ``optim_period``
are set)::

    w = [log(magn_sigma2),       (hyperparameters of its prior),
         log(length_scale),      (hyperparameters of its prior),
         log(length_scale_sexp), (hyperparameters of its prior),
         log(period),            (hyperparameters of its prior)]
"""
import copy

import gpcf.num as gnp
from gpcf.config import get_logger
from gpcf.errors import IncompatibleVectorLength, InvalidParameter
from gpcf.misc.param import Normalization, Param
from .base import CovarianceFunction, as_inputs, is_empty
from .priors import SqrtUniform, Uniform, check_prior, prior_entries, unpak_at
from .record import RecordAccumulator

_logger = get_logger()

_DEFAULT = object()

_OPTIONS = (
    "magn_sigma2",
    "length_scale",
    "period",
    "length_scale_sexp",
    "decay",
    "optim_period",
    "magn_sigma2_prior",
    "length_scale_prior",
    "length_scale_sexp_prior",
    "period_prior",
    "metric",
)

_SCALAR_PARAMETERS = ("magn_sigma2", "period")


def _positive_scalar(name, value):
    v = gnp.asarray(value, dtype=float)
    if v.size != 1:
        raise InvalidParameter(f"{name} must be a scalar, got shape {v.shape}.")
    v = float(v.reshape(-1)[0])
    if not (v > 0.0 and gnp.isfinite(v)):
        raise InvalidParameter(f"{name} must be positive and finite, got {v}.")
    return v


def _positive_scales(name, value):
    v = gnp.asarray(value, dtype=float)
    if v.ndim > 1 or v.size == 0:
        raise InvalidParameter(f"{name} must be a scalar or a vector, got shape {v.shape}.")
    if not gnp.all((v > 0.0) & gnp.isfinite(v)):
        raise InvalidParameter(f"{name} must have positive finite entries, got {value!r}.")
    if v.ndim == 0:
        return float(v)
    return gnp.copy(v)


def _period(value):
    v = _positive_scalar("period", value)
    if v != gnp.floor(v):
        raise InvalidParameter(f"period must be integer-valued, got {v}.")
    return v


def _flag(name, value):
    if gnp.isscalar(value) and not isinstance(value, str) and value in (0, 1):
        return bool(value)
    raise InvalidParameter(f"{name} must be 0, 1, True or False, got {value!r}.")


def _vector(value):
    return gnp.asarray(value, dtype=float).reshape(-1)


class PeriodicCovariance(CovarianceFunction):
    """Periodic covariance function.

    Parameters
    ----------
    magn_sigma2 : float, default=0.1
        Magnitude (variance) of the process.
    length_scale : float or array_like, default=10.0
        Length scale(s) of the periodic term. A scalar is used for all
        input dimensions (isotropic); a vector gives one length scale
        per dimension (ARD).
    period : int, default=1
        Period of the periodic term.
    length_scale_sexp : float or array_like, default=10.0
        Length scale(s) of the squared-exponential decay term, used only
        when ``decay`` is set.
    decay : bool, default=False
        Whether the squared-exponential decay term is included.
    optim_period : bool, default=False
        Whether the period is a free hyperparameter (packed, with a
        gradient) or is held fixed.
    magn_sigma2_prior : Hyperprior or None, default=SqrtUniform()
    length_scale_prior : Hyperprior or None, default=Uniform()
    length_scale_sexp_prior : Hyperprior or None, default=None
    period_prior : Hyperprior or None, default=None
        Hyperpriors. A parameter with a None prior is fixed: it is not
        packed, has no prior contribution and no gradient.
    metric : None
        Metric distance abstractions are not supported; any other value
        makes every operation raise ``UnsupportedMetric``.

    Examples
    --------
    >>> import gpcf.num as gnp
    >>> from gpcf.kernel import PeriodicCovariance
    >>> k = PeriodicCovariance(magn_sigma2=1.0, length_scale=1.0, period=1)
    >>> x = gnp.array([[0.0], [1.0], [2.0]])
    >>> K = k.trcov(x)
    """

    kind = "gpcf_periodic"

    def __init__(
        self,
        magn_sigma2=0.1,
        length_scale=10.0,
        period=1,
        length_scale_sexp=10.0,
        decay=False,
        optim_period=False,
        magn_sigma2_prior=_DEFAULT,
        length_scale_prior=_DEFAULT,
        length_scale_sexp_prior=None,
        period_prior=None,
        metric=None,
    ):
        if magn_sigma2_prior is _DEFAULT:
            magn_sigma2_prior = SqrtUniform()
        if length_scale_prior is _DEFAULT:
            length_scale_prior = Uniform()
        self.priors = {}
        self._update(
            dict(
                magn_sigma2=magn_sigma2,
                length_scale=length_scale,
                period=period,
                length_scale_sexp=length_scale_sexp,
                decay=decay,
                optim_period=optim_period,
                magn_sigma2_prior=magn_sigma2_prior,
                length_scale_prior=length_scale_prior,
                length_scale_sexp_prior=length_scale_sexp_prior,
                period_prior=period_prior,
                metric=metric,
            )
        )
        _logger.debug("Created %r", self)

    # -- construction --------------------------------------------------

    def _update(self, options):
        for name, value in options.items():
            if name == "magn_sigma2":
                self.magn_sigma2 = _positive_scalar(name, value)
            elif name in ("length_scale", "length_scale_sexp"):
                setattr(self, name, _positive_scales(name, value))
            elif name == "period":
                self.period = _period(value)
            elif name in ("decay", "optim_period"):
                setattr(self, name, _flag(name, value))
            elif name.endswith("_prior"):
                self.priors[name[: -len("_prior")]] = check_prior(name, value)
            elif name == "metric":
                self.metric = value

    def set(self, **options):
        """Return a copy with the given options changed.

        Options not given keep their current value. Accepts the same
        names as the constructor.

        Raises
        ------
        InvalidParameter
            Unknown option name or value outside its domain.
        """
        unknown = [name for name in options if name not in _OPTIONS]
        if unknown:
            raise InvalidParameter(f"{self.kind}: unknown option(s) {unknown}.")
        new = self._copy()
        new._update(options)
        return new

    def _copy(self):
        new = copy.copy(self)
        new.priors = dict(self.priors)
        return new

    @property
    def is_ard(self):
        return _vector(self.length_scale).shape[0] > 1

    def _active(self):
        """(name, value) of the packed parameters, in packing order."""
        candidates = [
            ("magn_sigma2", self.magn_sigma2, True),
            ("length_scale", self.length_scale, True),
            ("length_scale_sexp", self.length_scale_sexp, self.decay),
            ("period", self.period, self.optim_period),
        ]
        return [
            (name, value)
            for name, value, enabled in candidates
            if enabled and self.priors[name] is not None
        ]

    # -- packing -------------------------------------------------------

    def _entries(self, path):
        entries = []
        for name, value in self._active():
            w = gnp.log(_vector(value))
            if w.shape[0] == 1:
                labels = [f"log(periodic.{name})"]
            else:
                labels = [f"log(periodic.{name}[{i}])" for i in range(w.shape[0])]
            for wi, label in zip(w, labels):
                entries.append((wi, label, path + [name], Normalization.LOG))
            entries.extend(prior_entries(self.priors[name], path + [name, "prior"]))
        return entries

    def pak(self):
        """Combine the active covariance parameters and the parameters of
        their hyperpriors into one vector.

        Returns
        -------
        w : gnp.array, shape (p,)
            Packed vector (see module docstring for the layout).
        labels : list of str
            One label per entry of ``w``.
        """
        self.check_metric()
        entries = self._entries([self.kind])
        return gnp.asarray([e[0] for e in entries], dtype=float), [e[1] for e in entries]

    def param(self):
        """Return a Param object describing the packed vector."""
        self.check_metric()
        return Param.from_entries(self._entries([self.kind]))

    def _unpak_at(self, w, offset):
        new = self._copy()
        for name, value in self._active():
            size = _vector(value).shape[0]
            if offset + size > w.shape[0]:
                raise IncompatibleVectorLength(
                    f"{self.kind}: parameter vector has {w.shape[0] - offset} "
                    f"remaining entries, '{name}' needs {size}."
                )
            natural = gnp.exp(w[offset : offset + size])
            offset += size
            if name in _SCALAR_PARAMETERS or isinstance(value, float):
                setattr(new, name, float(natural[0]))
            else:
                setattr(new, name, natural)
            new.priors[name], offset = unpak_at(self.priors[name], w, offset)
        return new, offset

    def unpak(self, w):
        """Set the covariance parameters from a packed vector.

        Parameters
        ----------
        w : array_like
            Vector whose leading entries follow the ``pak`` layout.

        Returns
        -------
        k : PeriodicCovariance
            New covariance function with the values read from ``w``.
        w_rest : gnp.array
            Entries of ``w`` that were not consumed.

        Raises
        ------
        IncompatibleVectorLength
            If ``w`` is shorter than the packed layout.
        """
        self.check_metric()
        w = _vector(w)
        new, offset = self._unpak_at(w, 0)
        return new, w[offset:]

    # -- priors --------------------------------------------------------

    def lp(self):
        """Log-prior of the packed parameters.

        The parameters are sampled or optimized in log space, so the
        Jacobian log|dθ/dlog θ| = log θ is added for each of them.
        """
        self.check_metric()
        lp = 0.0
        for name, value in self._active():
            lp = lp + self.priors[name].lp(value) + gnp.sum(gnp.log(_vector(value)))
        return lp

    def lpg(self):
        """Gradient of ``lp`` w.r.t. the packed vector returned by ``pak``."""
        self.check_metric()
        grads = []
        for name, value in self._active():
            v = _vector(value)
            g = _vector(self.priors[name].lpg(v))
            size = v.shape[0]
            grads.append(g[:size] * v + 1.0)
            grads.append(g[size:])
        if not grads:
            return gnp.zeros(0)
        return gnp.concatenate(grads)

    # -- covariances ---------------------------------------------------

    def _inverse_squared_scales(self, d):
        """1 / length_scale**2 (and for the decay term) broadcast to d dims."""
        s = 1.0 / _vector(self.length_scale) ** 2
        s_sexp = 1.0 / _vector(self.length_scale_sexp) ** 2 if self.decay else None
        for name, v in (("length_scale", s), ("length_scale_sexp", s_sexp)):
            if v is not None and v.shape[0] not in (1, d):
                raise InvalidParameter(
                    f"{self.kind}: {name} has {v.shape[0]} entries but inputs have {d} columns."
                )
        if s.shape[0] == 1:
            s = gnp.full((d,), s[0])
        if s_sexp is not None and s_sexp.shape[0] == 1:
            s_sexp = gnp.full((d,), s_sexp[0])
        return s, s_sexp

    def _accumulate(self, dist, dd, j, s, s_sexp):
        dist = dist + 2.0 * gnp.sin(gnp.pi * dd / self.period) ** 2 * s[j]
        if self.decay:
            dist = dist + dd**2 * s_sexp[j] / 2.0
        return dist

    def cov(self, x1, x2=None):
        """Covariance matrix between two sets of inputs.

        Parameters
        ----------
        x1 : array_like, shape (n1, d)
        x2 : array_like, shape (n2, d), optional
            If None or empty, ``x1`` is used.

        Returns
        -------
        K : gnp.array, shape (n1, n2)
        """
        self.check_metric()
        x1 = as_inputs(x1)
        x2 = x1 if is_empty(x2) else as_inputs(x2)
        self.check_columns(x1, x2)
        d = x1.shape[1]
        s, s_sexp = self._inverse_squared_scales(d)

        dist = gnp.zeros((x1.shape[0], x2.shape[0]))
        for j in range(d):
            dd = gnp.coordinate_differences(x1, x2, j)
            dist = self._accumulate(dist, dd, j, s, s_sexp)
        dist = gnp.clamp_below(dist)
        return self.magn_sigma2 * gnp.exp(-dist)

    def trcov(self, x):
        """Training covariance matrix of x.

        Same values as ``cov(x, x)``; distances are computed on the
        strict lower triangle only and mirrored.

        Parameters
        ----------
        x : array_like, shape (n, d)

        Returns
        -------
        K : gnp.array, shape (n, n)
        """
        self.check_metric()
        x = as_inputs(x)
        n, d = x.shape
        s, s_sexp = self._inverse_squared_scales(d)

        rows, cols = gnp.lower_pair_indices(n)
        dist = gnp.zeros(rows.shape[0])
        for j in range(d):
            dd = x[rows, j] - x[cols, j]
            dist = self._accumulate(dist, dd, j, s, s_sexp)
        C = gnp.zeros((n, n))
        C[rows, cols] = dist
        C = gnp.clamp_below(C)
        C = C + C.T
        return self.magn_sigma2 * gnp.exp(-C)

    def trvar(self, x):
        """Variance vector k(x_i, x_i), i.e. magn_sigma2 repeated n times."""
        self.check_metric()
        x = as_inputs(x)
        return gnp.clamp_below(self.magn_sigma2 * gnp.ones((x.shape[0],)))

    def covvec(self, x1, x2):
        """Covariance vector k(x1[i], x2[i]) for i = 1 ... n."""
        self.check_metric()
        x1, x2 = as_inputs(x1), as_inputs(x2)
        self.check_columns(x1, x2)
        if x1.shape[0] != x2.shape[0]:
            raise ValueError(
                f"{self.kind}: covvec needs the same number of rows in x1 and x2."
            )
        d = x1.shape[1]
        s, s_sexp = self._inverse_squared_scales(d)
        dist = gnp.zeros((x1.shape[0],))
        for j in range(d):
            dist = self._accumulate(dist, x1[:, j] - x2[:, j], j, s, s_sexp)
        return self.magn_sigma2 * gnp.exp(-gnp.clamp_below(dist))

    # -- gradients -----------------------------------------------------

    def cfg(self, x, x2=None, mask=False):
        """Derivatives of the covariance w.r.t. the packed parameters.

        The parameters are packed in log space, so the returned matrices
        are dK/dlog(θ) = θ dK/dθ.

        Parameters
        ----------
        x : array_like, shape (n, d)
        x2 : array_like, shape (n2, d), optional
            If given, derivatives of ``cov(x, x2)``; otherwise of
            ``trcov(x)``.
        mask : bool, default=False
            If True, derivatives of the diagonal ``trvar(x)`` only, as
            vectors of length n.

        Returns
        -------
        DKff : list of gnp.array
            In packing order: magn_sigma2; length_scale (one entry per
            dimension for ARD, one for isotropic); length_scale_sexp if
            ``decay`` (same rule); period if ``optim_period``. Parameters
            with a None prior are skipped.

        Raises
        ------
        ColumnMismatch
            If x and x2 do not have the same number of columns.
        UnsupportedMetric
            If a metric is attached.
        """
        self.check_metric()
        x = as_inputs(x)
        if mask:
            return self._cfg_mask(x)

        if is_empty(x2):
            K = self.trcov(x)
            x2 = x
        else:
            x2 = as_inputs(x2)
            self.check_columns(x, x2)
            K = self.cov(x, x2)

        d = x.shape[1]
        p = self.period
        s, s_sexp = self._inverse_squared_scales(d)
        diffs = [gnp.coordinate_differences(x, x2, j) for j in range(d)]

        DKff = []
        active = dict(self._active())

        if "magn_sigma2" in active:
            DKff.append(K)

        if "length_scale" in active:
            sin2 = [2.0 * gnp.sin(gnp.pi * dd / p) ** 2 for dd in diffs]
            if self.is_ard:
                for j in range(d):
                    DKff.append(2.0 * s[j] * K * sin2[j])
            else:
                DKff.append(2.0 * s[0] * K * sum(sin2))

        if "length_scale_sexp" in active:
            sq = [dd**2 for dd in diffs]
            if _vector(self.length_scale_sexp).shape[0] > 1:
                for j in range(d):
                    DKff.append(s_sexp[j] * K * sq[j])
            else:
                DKff.append(s_sexp[0] * K * sum(sq))

        if "period" in active:
            dist = 0.0
            for j, dd in enumerate(diffs):
                dist = dist + s[j] * 2.0 * gnp.pi * dd / p * gnp.sin(2.0 * gnp.pi * dd / p)
            DKff.append(K * dist)

        return DKff

    def _cfg_mask(self, x):
        n = x.shape[0]
        DKff = []
        for name, value in self._active():
            if name == "magn_sigma2":
                DKff.append(self.trvar(x))
            else:
                # the diagonal does not depend on the other parameters
                DKff.extend(gnp.zeros((n,)) for _ in range(_vector(value).shape[0]))
        return DKff

    def ginput(self, x, x2=None):
        """Derivatives of the covariance w.r.t. the inputs x.

        Parameters
        ----------
        x : array_like, shape (n, d)
        x2 : array_like, shape (n2, d), optional
            If given, derivatives of ``cov(x, x2)``; otherwise of
            ``trcov(x)``.

        Returns
        -------
        DKff : list of gnp.array
            ``d * n`` matrices; entry ``i * n + j`` is the derivative
            w.r.t. ``x[j, i]``. Only row j (and column j for the training
            covariance) is non-zero.
        """
        self.check_metric()
        x = as_inputs(x)
        symmetric = is_empty(x2)
        if symmetric:
            K = self.trcov(x)
            x2 = x
        else:
            x2 = as_inputs(x2)
            self.check_columns(x, x2)
            K = self.cov(x, x2)

        n, d = x.shape
        p = self.period
        s, s_sexp = self._inverse_squared_scales(d)

        DKff = []
        for i in range(d):
            dd = gnp.coordinate_differences(x, x2, i)
            G = -s[i] * 2.0 * gnp.pi / p * gnp.sin(2.0 * gnp.pi * dd / p)
            if self.decay:
                G = G - s_sexp[i] * dd
            for j in range(n):
                DK = gnp.zeros(K.shape)
                DK[j, :] = G[j, :]
                if symmetric:
                    DK = DK + DK.T
                DKff.append(DK * K)
        return DKff

    # -- records -------------------------------------------------------

    def _recorded(self):
        names = ["magn_sigma2", "length_scale"]
        if self.decay:
            names.append("length_scale_sexp")
        if self.optim_period:
            names.append("period")
        return names

    def recappend(self, rec=None, ri=None):
        """Record the current parameters for MCMC traces.

        ``recappend()`` returns an empty RecordAccumulator for the
        parameters in use (length_scale_sexp only with ``decay``, period
        only with ``optim_period``) and for their hyperpriors.
        ``recappend(rec, ri)`` writes the current values into row ``ri``
        of ``rec`` and returns it.
        """
        self.check_metric()
        if rec is None:
            names = self._recorded()
            priors = {
                name: self.priors[name].recappend()
                for name in names
                if self.priors[name] is not None
            }
            _logger.debug("%s: recording %s", self.kind, names)
            return RecordAccumulator(self.kind, names=names, priors=priors)

        for name in rec.names:
            rec.append(name, ri, getattr(self, name))
            if name in rec.priors:
                rec.priors[name] = self.priors[name].recappend(rec.priors[name], ri)
        return rec

    def from_record(self, rec, ri):
        """Return a copy whose recorded parameters take their values at row ri."""
        new = self._copy()
        for name in rec.names:
            value = rec.row(name, ri)
            if name in _SCALAR_PARAMETERS or isinstance(getattr(self, name), float):
                setattr(new, name, float(value[0]))
            else:
                setattr(new, name, gnp.copy(value))
            prior = self.priors.get(name)
            if name in rec.priors and hasattr(prior, "from_record"):
                new.priors[name] = prior.from_record(rec.priors[name], ri)
        return new

    def __repr__(self):
        return (
            f"PeriodicCovariance(magn_sigma2={self.magn_sigma2!r}, "
            f"length_scale={self.length_scale!r}, period={self.period!r}, "
            f"length_scale_sexp={self.length_scale_sexp!r}, decay={self.decay!r}, "
            f"optim_period={self.optim_period!r})"
        )
