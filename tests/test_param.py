import gpcf.num as gnp
import pytest
from gpcf.misc.param import Param, Normalization, normalize, denormalize, parse_normalization
from gpcf.misc.dataframe import ftos
from gpcf.kernel import PeriodicCovariance, Gaussian, Uniform


def test_basic_construction():
    p = Param(
        values=[0.0, 1.0, -1.0],
        paths=[["gpcf_periodic", "magn_sigma2"], ["gpcf_periodic", "length_scale"], ["prior"]],
        normalizations=["log", "log", "none"],
        names=["sigma", "rho", "mu"],
    )
    assert p.dim == 3
    assert len(p) == 3
    assert gnp.allclose(p.denormalized_values, gnp.asarray([1.0, gnp.exp(1.0), -1.0]))
    assert p.get_by_name("sigma") == 0.0


def test_normalize_denormalize():
    for norm in (Normalization.NONE, Normalization.LOG):
        assert gnp.allclose(denormalize(normalize(2.5, norm), norm), 2.5)
    assert gnp.allclose(normalize(2.0, Normalization.LOG), gnp.log(2.0))


def test_unknown_normalization():
    with pytest.raises(ValueError):
        parse_normalization("log_inv")


def test_path_get_set():
    p = Param(
        values=[0.1, 0.2, 0.3],
        paths=[["gp", "a"], ["gp", "b"], ["mean"]],
        normalizations=["none"] * 3,
        names=["a", "b", "m"],
    )

    v = p.get_by_path(["gp"], prefix_match=True)
    assert gnp.allclose(v, gnp.asarray([0.1, 0.2]))
    v[0] = 999.0  # copy, internal state untouched
    assert gnp.allclose(p.get_by_path(["gp"], prefix_match=True), gnp.asarray([0.1, 0.2]))

    p.set_by_path(["gp"], [0.4, 0.5], prefix_match=True)
    assert gnp.allclose(p.get_by_path(["gp"], prefix_match=True), gnp.asarray([0.4, 0.5]))
    assert gnp.allclose(p.get_by_path(["mean"]), gnp.asarray([0.3]))


def test_concat_and_slice():
    p1 = Param(values=[0.0], paths=[["a"]], normalizations=["none"], names=["x"])
    p2 = Param(values=[1.0, 2.0], paths=[["b"], ["c"]], normalizations=["none"] * 2, names=["y", "z"])
    p = p1 + p2
    assert p.dim == 3
    assert p.names == ["x", "y", "z"]
    sliced = p[1:]
    assert sliced.names == ["y", "z"]
    assert gnp.allclose(sliced.values, gnp.asarray([1.0, 2.0]))


def test_from_covariance():
    k = PeriodicCovariance(
        magn_sigma2=2.0,
        length_scale=[1.0, 3.0],
        length_scale_prior=Gaussian(mu=1.0, s2=0.5, s2_prior=Uniform()),
    )
    p = k.param()
    assert p.names == [
        "log(periodic.magn_sigma2)",
        "log(periodic.length_scale[0])",
        "log(periodic.length_scale[1])",
        "log(gaussian.s2)",
    ]
    assert gnp.allclose(p.denormalized_values, gnp.asarray([2.0, 1.0, 3.0, 0.5]))
    assert p.names_by_path_prefix(["gpcf_periodic", "length_scale", "prior"]) == ["log(gaussian.s2)"]
    assert p.to_simple_dict()["log(periodic.magn_sigma2)"] == p.denormalized_values[0]
    assert "gpcf_periodic->magn_sigma2" in repr(p)


def test_ftos():
    assert ftos(gnp.inf) == "+Inf"
    assert ftos(-gnp.inf) == "-Inf"
    assert ftos(float("nan")) == "NaN"


def run_all():
    test_basic_construction()
    test_normalize_denormalize()
    test_unknown_normalization()
    test_path_get_set()
    test_concat_and_slice()
    test_from_covariance()
    test_ftos()
    print("All tests passed.")


if __name__ == "__main__":
    run_all()
