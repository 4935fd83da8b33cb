import argparse
import os
import sys
from pathlib import Path

# Ensure repository root is on sys.path so `from halley_fractal...` works when
# running this script directly (e.g. `python scripts/make_image.py`).
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from halley_fractal.coloring import ColorScheme
from halley_fractal.config import RenderConfig, config_from_dict, load_config
from halley_fractal.functions import families, list_functions
from halley_fractal.render import render_image
from halley_fractal.svg import export_contour_svg, export_filled_svg
from halley_fractal.utils import formula_slug
from halley_fractal.view import ASPECT_RATIOS

MODES = ("png", "svg", "contours")


def build_parser():
    parser = argparse.ArgumentParser(description="Render Halley's method basins to PNG or SVG.")
    parser.add_argument("--config", type=str, help="YAML render preset")
    parser.add_argument("--formula", type=str, help="function name, e.g. 'z^3 - 1'")
    parser.add_argument("--bounds", nargs=4, type=float, metavar=("MINX", "MAXX", "MINY", "MAXY"),
                        help="view window in the complex plane")
    parser.add_argument("--xmin", type=float)
    parser.add_argument("--xmax", type=float)
    parser.add_argument("--ymin", type=float)
    parser.add_argument("--ymax", type=float)
    parser.add_argument("--resolution", type=int)
    parser.add_argument("--aspect", type=str, choices=sorted(ASPECT_RATIOS))
    parser.add_argument("--width", type=int)
    parser.add_argument("--height", type=int)
    parser.add_argument("--max_iter", type=int)
    parser.add_argument("--scheme", type=str, choices=[s.value for s in ColorScheme])
    parser.add_argument("--mode", type=str, choices=MODES, default="png")
    parser.add_argument("--band-outlines", dest="band_outlines", action="store_true",
                        help="svg mode: overlay smoothed outlines of each color band")
    parser.add_argument("--outfile", type=str)
    parser.add_argument("--list", action="store_true", help="list available functions and exit")
    return parser


def resolve_config(args) -> RenderConfig:
    cfg = load_config(args.config) if args.config else RenderConfig()
    data = cfg.to_dict()

    overrides = {
        "formula": args.formula,
        "resolution": args.resolution,
        "aspect_ratio": args.aspect,
        "max_iter": args.max_iter,
        "color_scheme": args.scheme,
        "width": args.width,
        "height": args.height,
    }
    data.update({k: v for k, v in overrides.items() if v is not None})
    if args.bounds:
        data["bounds"] = dict(zip(("min_x", "max_x", "min_y", "max_y"), args.bounds))
    # single-edge flags apply on top of --bounds
    for key, value in (("min_x", args.xmin), ("max_x", args.xmax), ("min_y", args.ymin), ("max_y", args.ymax)):
        if value is not None:
            data["bounds"][key] = value
    return config_from_dict(data)


def default_outfile(mode: str, formula: str, width: int, height: int) -> Path:
    suffix = {"png": "", "svg": "-traced", "contours": "-contours"}[mode]
    ext = "png" if mode == "png" else "svg"
    return Path(f"halley-fractal{suffix}-{formula_slug(formula)}-{width}x{height}.{ext}")


def print_catalog():
    for family in families():
        print(family)
        for name, desc in list_functions(family):
            print(f"  {name:<20} {desc}")


def main():
    args = build_parser().parse_args()

    if args.list:
        print_catalog()
        return 0

    try:
        cfg = resolve_config(args)
    except ValueError as e:
        print(f"[run] error: {e}", file=sys.stderr)
        return 2

    params = cfg.to_params()
    out_path = Path(args.outfile) if args.outfile else default_outfile(
        args.mode, params.function_name, params.width, params.height
    )
    out_path.parent.mkdir(parents=True, exist_ok=True)

    print(f"[run] f={params.function_name}, {params.width}x{params.height}, "
          f"max_iter={params.max_iter}, scheme={params.color_scheme.value}, saving to {out_path}")

    last = [-1]

    def report(pct):
        if pct // 10 != last[0] // 10:
            print(f"[run] {pct}%")
        last[0] = pct

    if args.mode == "png":
        result = render_image(params, on_progress=report, chunk_rows=cfg.chunk_rows)
        from PIL import Image
        im = Image.fromarray(result.rgba)
        im.save(out_path)
    elif args.mode == "svg":
        text = export_filled_svg(params, on_progress=report, chunk_rows=cfg.chunk_rows,
                                 band_outlines=args.band_outlines)
        out_path.write_text(text, encoding="utf-8")
    else:
        text = export_contour_svg(params, on_progress=report, chunk_rows=cfg.chunk_rows)
        out_path.write_text(text, encoding="utf-8")

    print("[run] done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
