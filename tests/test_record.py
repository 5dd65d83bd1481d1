import pytest
import gpcf.num as gnp
from gpcf.kernel import PeriodicCovariance, RecordAccumulator, Gaussian, Uniform
from gpcf.errors import RecordIndexError


def test_append_and_overwrite():
    rec = RecordAccumulator("test", names=["a", "b"])
    assert rec.nsamples == 0
    assert rec.samples("a").shape == (0, 0)
    rec.append("a", 0, 1.0)
    rec.append("a", 1, 2.0)
    rec.append("a", 0, 3.0)
    assert rec.nsamples == 2
    assert gnp.allclose(rec.samples("a"), gnp.array([[3.0], [2.0]]))
    assert "a" in rec
    assert "c" not in rec


def test_append_errors():
    rec = RecordAccumulator("test", names=["a"])
    with pytest.raises(RecordIndexError):
        rec.append("a", 1, 1.0)
    with pytest.raises(RecordIndexError):
        rec.append("a", -1, 1.0)
    with pytest.raises(KeyError):
        rec.append("b", 0, 1.0)


def test_init_record_names():
    k = PeriodicCovariance()
    rec = k.recappend()
    assert rec.kind == "gpcf_periodic"
    assert rec.names == ["magn_sigma2", "length_scale"]

    k = PeriodicCovariance(decay=True, optim_period=True)
    assert k.recappend().names == ["magn_sigma2", "length_scale", "length_scale_sexp", "period"]

    # parameters with a None prior are recorded, without a prior record
    rec = k.recappend()
    assert set(rec.priors) == {"magn_sigma2", "length_scale"}


def test_covariance_trace():
    k = PeriodicCovariance(
        length_scale=[1.0, 2.0],
        length_scale_prior=Gaussian(mu=1.0, s2=1.0, mu_prior=Uniform()),
    )
    rec = k.recappend()
    w, _ = k.pak()
    for ri in range(3):
        k_ri, _ = k.unpak(w + 0.1 * ri)
        rec = k_ri.recappend(rec, ri)

    assert rec.nsamples == 3
    ls = rec.samples("length_scale")
    assert ls.shape == (3, 2)
    assert gnp.allclose(ls[2], gnp.array([1.0, 2.0]) * gnp.exp(0.2))
    assert gnp.allclose(rec.priors["length_scale"].samples("mu")[:, 0], gnp.array([1.0, 1.1, 1.2]))

    restored = k.from_record(rec, 1)
    assert gnp.allclose(restored.length_scale, gnp.array([1.0, 2.0]) * gnp.exp(0.1))
    assert restored.priors["length_scale"].values["mu"] == pytest.approx(1.1)
    assert isinstance(restored.magn_sigma2, float)
