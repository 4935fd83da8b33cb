from __future__ import annotations

import math

from .complex_ops import ONE, Complex, c_div, c_mag_sq, c_mul, c_scale, c_sub
from .functions import AnalyticFunction

EPSILON = 1e-5
ESCAPE_MAG_SQ = 1e10

# math.exp/sinh/cosh overflow raise OverflowError, math.sin(inf) raises ValueError
ARITHMETIC_FAULTS = (ArithmeticError, ValueError)


def halley_step(z: Complex, func: AnalyticFunction) -> Complex:
    """
    One Halley update:
        z' = z - (f/f') / (1 - f f'' / (2 f'^2))
    """
    fz = func.f(z)
    dfz = func.df(z)
    d2fz = func.d2f(z)

    newton = c_div(fz, dfz)
    dfz2 = c_mul(dfz, dfz)
    term = c_div(c_mul(fz, d2fz), c_scale(dfz2, 2.0))
    correction = c_div(newton, c_sub(ONE, term))
    return c_sub(z, correction)


def iterate_halley(
    z0: Complex,
    func: AnalyticFunction,
    max_iter: int,
    epsilon: float = EPSILON,
    escape: float = ESCAPE_MAG_SQ,
) -> int:
    """
    Count Halley steps from z0 until the squared magnitude settles.

    Returns k when |mag_k - mag_{k-1}| < epsilon at step k > 0, and max_iter
    when the orbit blows past `escape`, turns NaN, faults, or never settles.
    """
    z = z0
    prev_mag = 0.0

    for k in range(max_iter):
        try:
            z = halley_step(z, func)
        except ARITHMETIC_FAULTS:
            return max_iter
        mag = c_mag_sq(z)

        if k > 0 and abs(mag - prev_mag) < epsilon:
            return k
        prev_mag = mag

        if mag > escape or math.isnan(mag):
            return max_iter

    return max_iter

