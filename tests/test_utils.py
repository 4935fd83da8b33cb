from halley_fractal.utils import clamp, formula_slug


def test_formula_slug():
    assert formula_slug("z³ - 1") == "z1"
    assert formula_slug("z³ + (0.3+0.5i)") == "z0305i"
    assert formula_slug("z·exp(z) - 1") == "zexpz1"


def test_clamp():
    assert clamp(-5, 0, 255) == 0
    assert clamp(300, 0, 255) == 255
    assert clamp(17.5, 0, 255) == 17.5
