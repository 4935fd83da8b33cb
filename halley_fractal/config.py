"""
Render presets.

A preset is a flat YAML mapping, e.g.

    formula: "z³ - 1"
    resolution: 300
    aspect_ratio: "16:9"
    max_iter: 50
    color_scheme: rainbow
    bounds: {min_x: -3, max_x: 3, min_y: -3, max_y: 3}

Missing keys take the defaults below.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .coloring import ColorScheme
from .functions import DEFAULT_FUNCTION, get_function
from .render import RenderParameters, ViewBounds
from .view import ASPECT_RATIOS, canvas_dimensions


def _default_bounds() -> Dict[str, float]:
    return {"min_x": -3.0, "max_x": 3.0, "min_y": -3.0, "max_y": 3.0}


@dataclass
class RenderConfig:
    formula: str = DEFAULT_FUNCTION
    resolution: int = 300
    aspect_ratio: str = "1:1"
    max_iter: int = 50
    color_scheme: str = ColorScheme.RAINBOW.value
    bounds: Dict[str, float] = field(default_factory=_default_bounds)
    # explicit pixel size; overrides resolution/aspect_ratio when both are set
    width: Optional[int] = None
    height: Optional[int] = None
    chunk_rows: Optional[int] = None

    def dimensions(self) -> tuple[int, int]:
        if self.width is not None and self.height is not None:
            return int(self.width), int(self.height)
        return canvas_dimensions(int(self.resolution), self.aspect_ratio)

    def view_bounds(self) -> ViewBounds:
        b = self.bounds
        return ViewBounds(float(b["min_x"]), float(b["max_x"]), float(b["min_y"]), float(b["max_y"]))

    def to_params(self) -> RenderParameters:
        width, height = self.dimensions()
        return RenderParameters(
            function_name=get_function(self.formula).name,
            bounds=self.view_bounds(),
            width=width,
            height=height,
            max_iter=int(self.max_iter),
            color_scheme=ColorScheme(self.color_scheme),
        )

    def validate(self) -> None:
        """Raise ValueError (or UnknownFunctionError) on the first bad field."""
        if self.aspect_ratio not in ASPECT_RATIOS:
            raise ValueError(f"Unknown aspect ratio: {self.aspect_ratio!r}")
        missing = {"min_x", "max_x", "min_y", "max_y"} - set(self.bounds)
        if missing:
            raise ValueError(f"Bounds missing keys: {sorted(missing)}")
        self.to_params()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def config_from_dict(data: Optional[Dict[str, Any]]) -> RenderConfig:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a mapping, got {type(data).__name__}")

    known = {f.name for f in fields(RenderConfig)}
    for key in data:
        if key not in known:
            raise ValueError(f"Unknown config key: {key!r}")

    values = dict(data)
    if "bounds" in values:
        bounds = _default_bounds()
        bounds.update(values["bounds"] or {})
        values["bounds"] = bounds

    cfg = RenderConfig(**values)
    cfg.validate()
    return cfg


def load_config(path: str | Path) -> RenderConfig:
    with open(path, "r", encoding="utf-8") as f:
        return config_from_dict(yaml.safe_load(f))


def save_config(cfg: RenderConfig, path: str | Path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(cfg.to_dict(), f, allow_unicode=True, sort_keys=False)
