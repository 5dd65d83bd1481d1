""" Sample paths of a zero-mean GP with a periodic covariance, and
inspection of its packed hyperparameters

Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
Copyright (c) 2022-2026, CentraleSupelec
License: GPLv3 (see LICENSE)
"""
import matplotlib.pyplot as plt
import gpcf.num as gnp
from gpcf.kernel import PeriodicCovariance, Gaussian, LogUniform


def main():
    gnp.set_seed(0)
    n, n_samples = 300, 4
    x = gnp.linspace(0.0, 6.0, n).reshape(-1, 1)

    k = PeriodicCovariance(
        magn_sigma2=1.0,
        length_scale=0.8,
        period=2,
        length_scale_sexp=3.0,
        decay=True,
        length_scale_prior=Gaussian(mu=1.0, s2=0.5, s2_prior=LogUniform()),
        length_scale_sexp_prior=LogUniform(),
    )
    print(k)
    print(k.param())
    print(f"log-prior: {k.lp():.4f}")

    K = k.trcov(x) + 1e-6 * gnp.eye(n)
    C = gnp.cholesky(K)
    paths = C @ gnp.randn(n, n_samples)

    fig, ax = plt.subplots()
    ax.plot(x, paths)
    ax.set_title('Sample paths, periodic covariance with decay')
    ax.set_xlabel('x')
    ax.set_ylabel('$\\xi(x)$')
    ax.grid(True)
    plt.show()


if __name__ == '__main__':
    main()
