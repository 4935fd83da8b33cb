"""
Catalog of analytic functions whose Halley basins can be rendered.

Every entry carries f, f' and f''. Polynomials are described by their
coefficients and differentiated exactly; the transcendental entries are
written out by hand. The two rational functions use a closed-form f' and a
central finite difference of f' for f''.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .complex_ops import (
    Complex,
    ZERO,
    c_add,
    c_cos,
    c_cosh,
    c_div,
    c_exp,
    c_mul,
    c_pow,
    c_scale,
    c_sin,
    c_sinh,
    c_sub,
    const,
)

ComplexFn = Callable[[Complex], Complex]

FD_STEP = 1e-4


class UnknownFunctionError(ValueError):
    """Raised when a function name does not resolve in the registry."""

    def __init__(self, name: str):
        super().__init__(f"Unknown function: {name!r}")
        self.name = name


@dataclass(frozen=True)
class AnalyticFunction:
    name: str
    f: ComplexFn
    df: ComplexFn
    d2f: ComplexFn
    description: str
    family: str


def central_difference(g: ComplexFn, h: float = FD_STEP) -> ComplexFn:
    """Approximate g' with a central difference along the real axis."""
    step = const(h)
    two_h = const(2 * h)

    def derivative(z: Complex) -> Complex:
        return c_div(c_sub(g(c_add(z, step)), g(c_sub(z, step))), two_h)

    return derivative


def _polynomial(coeffs: Dict[int, complex]) -> Tuple[ComplexFn, ComplexFn, ComplexFn]:
    """
    Build f, f', f'' for sum(c_k * z**k).

    coeffs maps exponent -> coefficient (real or complex).
    """

    def evaluator(terms: Dict[int, complex]) -> ComplexFn:
        items = sorted(terms.items(), reverse=True)

        def evaluate(z: Complex) -> Complex:
            total = ZERO
            for power, coeff in items:
                total = c_add(total, c_mul(const(coeff.real, coeff.imag), c_pow(z, power)))
            return total

        return evaluate

    def derive(terms: Dict[int, complex]) -> Dict[int, complex]:
        return {k - 1: c * k for k, c in terms.items() if k > 0}

    base = {k: complex(c) for k, c in coeffs.items()}
    first = derive(base)
    second = derive(first)
    return evaluator(base), evaluator(first), evaluator(second)


def _poly_entry(name: str, coeffs: Dict[int, complex], description: str, family: str) -> AnalyticFunction:
    f, df, d2f = _polynomial(coeffs)
    return AnalyticFunction(name, f, df, d2f, description, family)


def _rational_entry(
    name: str,
    num: Dict[int, complex],
    den: Dict[int, complex],
    description: str,
) -> AnalyticFunction:
    """Quotient p/q with f' by the quotient rule and f'' by finite difference."""
    p, dp, _ = _polynomial(num)
    q, dq, _ = _polynomial(den)

    def f(z: Complex) -> Complex:
        return c_div(p(z), q(z))

    def df(z: Complex) -> Complex:
        qz = q(z)
        return c_div(c_sub(c_mul(dp(z), qz), c_mul(p(z), dq(z))), c_mul(qz, qz))

    return AnalyticFunction(name, f, df, central_difference(df), description, "Rational (Poles & Roots)")


def _neg(z: Complex) -> Complex:
    return c_scale(z, -1.0)


def _transcendental() -> List[AnalyticFunction]:
    family = "Transcendental"
    one = const(1.0)

    def z3_sin(z):
        return c_add(c_pow(z, 3), c_sin(z))

    def z3_sin_d(z):
        return c_add(c_scale(c_pow(z, 2), 3.0), c_cos(z))

    def z3_sin_d2(z):
        return c_sub(c_scale(z, 6.0), c_sin(z))

    def z4_exp(z):
        return c_add(c_pow(z, 4), c_exp(_neg(z)))

    def z4_exp_d(z):
        return c_sub(c_scale(c_pow(z, 3), 4.0), c_exp(_neg(z)))

    def z4_exp_d2(z):
        return c_add(c_scale(c_pow(z, 2), 12.0), c_exp(_neg(z)))

    def sin_z2_d(z):
        return c_mul(c_scale(z, 2.0), c_cos(c_pow(z, 2)))

    def sin_z2_d2(z):
        z2 = c_pow(z, 2)
        return c_add(c_scale(c_cos(z2), 2.0), c_mul(c_scale(z2, -4.0), c_sin(z2)))

    def z_exp_d(z):
        return c_add(c_exp(z), c_mul(z, c_exp(z)))

    def z_exp_d2(z):
        return c_add(c_scale(c_exp(z), 2.0), c_mul(z, c_exp(z)))

    return [
        AnalyticFunction(
            "sin(z)", c_sin, c_cos, lambda z: _neg(c_sin(z)),
            "Infinite periodic zeros → repeating tile-like patterns", family,
        ),
        AnalyticFunction(
            "cos(z) - 1", lambda z: c_sub(c_cos(z), one), lambda z: _neg(c_sin(z)), lambda z: _neg(c_cos(z)),
            "Zeros at multiples of 2π; repeating basin cells", family,
        ),
        AnalyticFunction(
            "exp(z) - 1", lambda z: c_sub(c_exp(z), one), c_exp, c_exp,
            "Infinite zeros with exponential growth; self-similar structure", family,
        ),
        AnalyticFunction(
            "z³ + sin(z)", z3_sin, z3_sin_d, z3_sin_d2,
            "Blends polynomial basins with sinusoidal distortions", family,
        ),
        AnalyticFunction(
            "z⁴ + exp(-z)", z4_exp, z4_exp_d, z4_exp_d2,
            "Polynomial growth vs. exponential decay; unusual textures", family,
        ),
        AnalyticFunction(
            "sin(z²) - 1", lambda z: c_sub(c_sin(c_pow(z, 2)), one), sin_z2_d, sin_z2_d2,
            "Curved, chaotic zero sets; swirling fractal structures", family,
        ),
        AnalyticFunction(
            "sinh(z) - 1", lambda z: c_sub(c_sinh(z), one), c_cosh, c_sinh,
            "Hyperbolic symmetries; different structure from trig functions", family,
        ),
        AnalyticFunction(
            "z·exp(z) - 1", lambda z: c_sub(c_mul(z, c_exp(z)), one), z_exp_d, z_exp_d2,
            "Lambert W function related; exotic mixed patterns", family,
        ),
    ]


def _build_registry() -> Dict[str, AnalyticFunction]:
    sym = "Classic Symmetric"
    brk = "Symmetry Breaking"
    julia = "Complex Parameter (Julia-like)"

    entries = [
        _poly_entry("z³ - 1", {3: 1, 0: -1}, "Classic 3-fold symmetry; clean, well-defined basins", sym),
        _poly_entry("z⁴ - 1", {4: 1, 0: -1}, "Fourfold symmetry; crisp, stable attraction basins", sym),
        _poly_entry("z⁵ - 1", {5: 1, 0: -1}, "Fivefold star-like patterns; more intricate boundaries", sym),
        _poly_entry("z⁶ - 1", {6: 1, 0: -1}, "Sixfold symmetry; general n-symmetric basins", sym),
        _poly_entry("z⁷ - 1", {7: 1, 0: -1}, "Sevenfold symmetry; good for exploring scaling", sym),
        _poly_entry("z⁸ - 1", {8: 1, 0: -1}, "Eightfold symmetry; intricate radial patterns", sym),
        _poly_entry("z³ - 0.5", {3: 1, 0: -0.5}, "Mildly broken symmetry; produces chaotic distortions", brk),
        _poly_entry("z⁴ - 2", {4: 1, 0: -2}, "Strong symmetry breaking; wide chaotic filaments", brk),
        _poly_entry("z⁴ + z² - 1", {4: 1, 2: 1, 0: -1}, "Complex basin boundaries with multiple attractors", brk),
        _poly_entry("z⁵ + z - 1", {5: 1, 1: 1, 0: -1}, "Multiple competing roots; tangled, intricate boundaries", brk),
        _poly_entry("z³ - z", {3: 1, 1: -1}, "Extra critical points; highly detailed dendritic structures", brk),
        _poly_entry("z⁵ - z²", {5: 1, 2: -1}, "Rich interactions between roots; very fine detail", brk),
        _poly_entry("z⁵ - z³", {5: 1, 3: -1}, "Intricate dendritic structures with rich detail", brk),
        _poly_entry("z⁶ + z³ - 1", {6: 1, 3: 1, 0: -1}, "Complex root layout; dense fractal features", brk),
        _poly_entry("z³ + (0.3+0.5i)", {3: 1, 0: 0.3 + 0.5j}, "Asymmetric, Julia-like basin patterns", julia),
        _poly_entry("z³ + (-0.2+0.8i)", {3: 1, 0: -0.2 + 0.8j}, "Strong asymmetry; chaotic microstructures", julia),
        _poly_entry("z³ + (1+i)", {3: 1, 0: 1 + 1j}, "Highly distorted basins; dramatic asymmetry", julia),
        _poly_entry("z³ + (0.5+0.2i)", {3: 1, 0: 0.5 + 0.2j}, "General complex-parameter form; tunable chaos", julia),
        _poly_entry("z⁴ + (0.2+0.4i)", {4: 1, 0: 0.2 + 0.4j}, "Four-fold symmetry with complex asymmetry", julia),
        _rational_entry(
            "(z² + 1)/(z³ - 1)", {2: 1, 0: 1}, {3: 1, 0: -1},
            "Roots and poles compete, producing exotic tilings",
        ),
        _rational_entry(
            "(z³ - 2)/(z - 1)", {3: 1, 0: -2}, {1: 1, 0: -1},
            "Strong singularity at z=1; chaotic filaments",
        ),
    ]
    entries.extend(_transcendental())
    return {entry.name: entry for entry in entries}


REGISTRY = MappingProxyType(_build_registry())

DEFAULT_FUNCTION = "z³ - 1"

_SUPERSCRIPTS = str.maketrans("0123456789", "⁰¹²³⁴⁵⁶⁷⁸⁹")


def canonical_name(name: str) -> str:
    """
    Normalize a user-typed formula so that e.g. 'z^3-1', 'z³ − 1' and
    'z³ - 1' compare equal.
    """
    s = re.sub(r"\s+", "", name)
    s = s.replace("−", "-").replace("*", "·")
    s = re.sub(r"\^(\d+)", lambda m: m.group(1).translate(_SUPERSCRIPTS), s)
    return s


_BY_CANONICAL = MappingProxyType({canonical_name(key): key for key in REGISTRY})


def get_function(name: str) -> AnalyticFunction:
    if name in REGISTRY:
        return REGISTRY[name]
    key = _BY_CANONICAL.get(canonical_name(name))
    if key is None:
        raise UnknownFunctionError(name)
    return REGISTRY[key]


def list_functions(family: Optional[str] = None) -> List[Tuple[str, str]]:
    """Return (name, description) pairs in catalog order."""
    return [
        (fn.name, fn.description)
        for fn in REGISTRY.values()
        if family is None or fn.family == family
    ]


def families() -> Sequence[str]:
    seen: Dict[str, None] = {}
    for fn in REGISTRY.values():
        seen.setdefault(fn.family, None)
    return tuple(seen)
