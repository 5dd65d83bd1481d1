## --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022, CentraleSupelec
# License: GPLv3 (see LICENSE)
## --------------------------------------------------------------
"""Compact number formatting for parameter tables."""

import numpy as np


def ftos(x, fp=3):
    """Format a float with ``fp`` significant decimals, switching to
    scientific notation outside [0.01, 1000)."""
    x = float(x)
    if x == float('inf'):
        return "+Inf"
    elif x == float('-inf'):
        return "-Inf"
    elif x != x:
        return "NaN"
    abs_x = abs(x)
    if x == 0:
        return "0.0"
    elif abs_x >= 0.1 and abs_x < 1000:
        return f"{x:.{fp}f}"
    elif abs_x >= 0.01 and abs_x < 0.1:
        return f"{x:.{fp+1}f}"
    else:
        exponent = int(np.floor(np.log10(abs_x)))
        coeff = x / 10**exponent
        return f"{coeff:.{fp}f}e{exponent}"
