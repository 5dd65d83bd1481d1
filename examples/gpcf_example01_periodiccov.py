""" Plot the periodic covariance function, with and without decay

Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
Copyright (c) 2022-2026, CentraleSupelec
License: GPLv3 (see LICENSE)
"""
import matplotlib.pyplot as plt
import gpcf.num as gnp
from gpcf.kernel import PeriodicCovariance


def main():
    h = gnp.linspace(-4.0, 4.0, 801).reshape(-1, 1)
    x0 = gnp.zeros((1, 1))

    fig, ax = plt.subplots()
    for length_scale in [0.5, 1.0, 2.0]:
        k = PeriodicCovariance(magn_sigma2=1.0, length_scale=length_scale, period=2)
        ax.plot(h, k.cov(h, x0), label=f'length_scale={length_scale}')

    k = PeriodicCovariance(magn_sigma2=1.0, length_scale=1.0, period=2,
                           decay=True, length_scale_sexp=2.0)
    ax.plot(h, k.cov(h, x0), 'k--', label='length_scale=1.0, decay')

    ax.set_title('Periodic covariances, period = 2')
    ax.set_xlabel('h')
    ax.set_ylabel('$k(h)$')
    ax.legend()
    ax.grid(True)
    plt.show()


if __name__ == '__main__':
    main()
