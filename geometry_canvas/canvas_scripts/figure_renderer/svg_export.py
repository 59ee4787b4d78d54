"""
svg_export.py — SVG backend for figure_renderer

Writes a DrawList as an SVG document with svgwrite. The two groups keep
their transforms as `transform="matrix(...)"` attributes and every text in
the shape group carries its own counter-transform, so the document is the
same layered structure a browser host would build.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import svgwrite

from ..utils import setup_logger
from .commands import (
    DrawList,
    EllipseShape,
    Group,
    LineShape,
    PathShape,
    RectShape,
    Shape,
    TextShape,
    svg_matrix,
)

logger = setup_logger(__name__)


def _element(drawing: svgwrite.Drawing, shape: Shape):
    if isinstance(shape, LineShape):
        el = drawing.line(
            start=(shape.x1, shape.y1),
            end=(shape.x2, shape.y2),
            stroke=shape.stroke,
            stroke_width=shape.width,
            class_=shape.role,
        )
        if shape.dash:
            el["stroke-dasharray"] = shape.dash
        return el

    if isinstance(shape, PathShape):
        el = drawing.path(
            d=shape.d,
            stroke=shape.stroke,
            stroke_width=shape.width,
            fill=shape.fill or "none",
            class_=shape.role,
        )
        if shape.fill:
            el["fill-opacity"] = shape.fill_opacity
        if shape.dash:
            el["stroke-dasharray"] = shape.dash
        return el

    if isinstance(shape, EllipseShape):
        return drawing.ellipse(
            center=(shape.cx, shape.cy),
            r=(shape.rx, shape.ry),
            stroke=shape.stroke or "none",
            stroke_width=shape.width,
            fill=shape.fill or "none",
            class_=shape.role,
        )

    if isinstance(shape, RectShape):
        return drawing.rect(
            insert=(shape.x, shape.y),
            size=(shape.w, shape.h),
            fill=shape.fill,
            stroke=shape.stroke or "none",
            class_=shape.role,
        )

    if isinstance(shape, TextShape):
        el = drawing.text(
            shape.text,
            insert=(shape.x, shape.y),
            fill=shape.color,
            font_size=shape.size,
            text_anchor=shape.anchor,
            dominant_baseline=shape.baseline,
            class_=shape.role,
        )
        if shape.transform is not None:
            el["transform"] = svg_matrix(shape.transform)
        return el

    raise TypeError(f"Unsupported shape: {type(shape).__name__}")


def _group(drawing: svgwrite.Drawing, group: Group):
    g = drawing.g(id=group.name, transform=svg_matrix(group.transform))
    for shape in group.items:
        g.add(_element(drawing, shape))
    return g


def drawlist_to_svg(drawlist: DrawList, path: Optional[Path] = None) -> svgwrite.Drawing:
    """
    Build the SVG document for a DrawList. When `path` is given the file is
    written too (parent folders are created).
    """
    w, h = float(drawlist.width), float(drawlist.height)
    drawing = svgwrite.Drawing(
        filename=str(path) if path is not None else "noname.svg",
        size=(w, h),
        viewBox=f"0 0 {w:g} {h:g}",
    )
    for group in drawlist.groups:
        drawing.add(_group(drawing, group))

    if path is not None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        drawing.save()
        logger.debug(f"Wrote SVG -> {path}")
    return drawing


def drawlist_to_svg_string(drawlist: DrawList) -> str:
    return drawlist_to_svg(drawlist).tostring()
