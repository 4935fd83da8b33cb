# halley_fractal/utils.py
import re


def formula_slug(formula: str) -> str:
    """Keep only ASCII letters and digits, e.g. 'z³ - 1' -> 'z1'."""
    return re.sub(r"[^a-zA-Z0-9]", "", formula)


def clamp(v, vmin, vmax):
    return max(vmin, min(v, vmax))
