"""Public API for Halley basin rendering and vector export."""

from .coloring import ColorScheme, get_color
from .config import RenderConfig, load_config
from .functions import REGISTRY, UnknownFunctionError, get_function, list_functions
from .render import Grid, RenderParameters, RenderResult, ViewBounds, render_grid, render_image
from .svg import contour_svg, export_contour_svg, export_filled_svg, filled_svg
from .tasks import CancelToken, RenderCancelled, RenderTask

__all__ = [
    "CancelToken",
    "ColorScheme",
    "Grid",
    "REGISTRY",
    "RenderCancelled",
    "RenderConfig",
    "RenderParameters",
    "RenderResult",
    "RenderTask",
    "UnknownFunctionError",
    "ViewBounds",
    "contour_svg",
    "export_contour_svg",
    "export_filled_svg",
    "filled_svg",
    "get_color",
    "get_function",
    "list_functions",
    "load_config",
    "render_grid",
    "render_image",
]
