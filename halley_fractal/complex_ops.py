"""
Complex arithmetic on immutable (re, im) pairs.

The builtin ``complex`` raises on division by zero; the iteration engine needs
division by a zero-modulus value to produce an infinite result that flows
through the rest of the step instead, so the operations are spelled out here.
"""

from __future__ import annotations

import math
from typing import NamedTuple


class Complex(NamedTuple):
    re: float
    im: float

    def __add__(self, other):
        return c_add(self, other)

    def __sub__(self, other):
        return c_sub(self, other)

    def __mul__(self, other):
        return c_mul(self, other)

    def __truediv__(self, other):
        return c_div(self, other)

    def __neg__(self):
        return Complex(-self.re, -self.im)

    def __abs__(self):
        return c_mag(self)


def const(re: float, im: float = 0.0) -> Complex:
    return Complex(float(re), float(im))


ZERO = const(0.0)
ONE = const(1.0)


def c_add(a: Complex, b: Complex) -> Complex:
    return Complex(a.re + b.re, a.im + b.im)


def c_sub(a: Complex, b: Complex) -> Complex:
    return Complex(a.re - b.re, a.im - b.im)


def c_mul(a: Complex, b: Complex) -> Complex:
    return Complex(a.re * b.re - a.im * b.im, a.re * b.im + a.im * b.re)


def c_div(a: Complex, b: Complex) -> Complex:
    """Divide a by b; a zero-modulus divisor yields (inf, inf)."""
    denom = b.re * b.re + b.im * b.im
    if denom == 0:
        return Complex(math.inf, math.inf)
    return Complex(
        (a.re * b.re + a.im * b.im) / denom,
        (a.im * b.re - a.re * b.im) / denom,
    )


def c_pow(z: Complex, n: int) -> Complex:
    """Integer power (n >= 0) by repeated multiplication."""
    if n < 0:
        raise ValueError(f"Negative exponent not supported: {n}")
    result = ONE
    for _ in range(n):
        result = c_mul(result, z)
    return result


def c_mag_sq(z: Complex) -> float:
    return z.re * z.re + z.im * z.im


def c_mag(z: Complex) -> float:
    return math.sqrt(c_mag_sq(z))


def c_scale(z: Complex, k: float) -> Complex:
    return Complex(z.re * k, z.im * k)


# sin(x+iy) = sin x cosh y + i cos x sinh y, and the analogous identities below.

def c_sin(z: Complex) -> Complex:
    return Complex(math.sin(z.re) * math.cosh(z.im), math.cos(z.re) * math.sinh(z.im))


def c_cos(z: Complex) -> Complex:
    return Complex(math.cos(z.re) * math.cosh(z.im), -math.sin(z.re) * math.sinh(z.im))


def c_exp(z: Complex) -> Complex:
    exp_re = math.exp(z.re)
    return Complex(exp_re * math.cos(z.im), exp_re * math.sin(z.im))


def c_sinh(z: Complex) -> Complex:
    return Complex(math.sinh(z.re) * math.cos(z.im), math.cosh(z.re) * math.sin(z.im))


def c_cosh(z: Complex) -> Complex:
    return Complex(math.cosh(z.re) * math.cos(z.im), math.sinh(z.re) * math.sin(z.im))
