"""Write standalone SVG output from a finished pipeline context."""

from __future__ import annotations

from html import escape
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import NDArray

from isoflow.utils.geometry import bbox

if TYPE_CHECKING:
    from isoflow.engine.context import EngineContext

_CANVAS_MARGIN = 20.0
_EDGE_OPACITY = 0.6
_EDGE_COLOR = "#888888"


def _fmt(v: float) -> str:
    return f"{float(v):.2f}".rstrip("0").rstrip(".")


def outline_to_path_d(points: NDArray[np.float64]) -> str:
    """Smooth closed path: quadratic curves through ring midpoints.

    Each point after the first is the control point; the curve ends halfway
    to the next point (wrapping to the first).
    """
    n = len(points)
    if n == 0:
        return ""
    parts = [f"M {_fmt(points[0][0])} {_fmt(points[0][1])}"]
    for i in range(1, n):
        x, y = points[i]
        nx, ny = points[(i + 1) % n]
        parts.append(f"Q {_fmt(x)} {_fmt(y)} {_fmt((x + nx) / 2)} {_fmt((y + ny) / 2)}")
    parts.append("Z")
    return " ".join(parts)


def serialize_svg(
    elements: list[dict[str, Any]],
    viewbox: tuple[float, float, float, float] = (0.0, 0.0, 800.0, 600.0),
    title: str = "",
    description: str = "",
    defs: list[str] | None = None,
) -> str:
    """Generate clean SVG markup from element definitions."""
    x, y, w, h = viewbox
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg viewBox="{_fmt(x)} {_fmt(y)} {_fmt(w)} {_fmt(h)}" xmlns="http://www.w3.org/2000/svg"'
        f' role="img">',
    ]

    if title:
        lines.append(f"  <title>{escape(title)}</title>")
    if description:
        lines.append(f"  <desc>{escape(description)}</desc>")

    if defs:
        lines.append("  <defs>")
        lines.extend(f"    {d}" for d in defs)
        lines.append("  </defs>")

    for elem in elements:
        tag = elem.get("tag", "path")
        attrs = {k: v for k, v in elem.items() if k != "tag"}
        attr_str = " ".join(f'{k}="{escape(str(v))}"' for k, v in attrs.items())
        lines.append(f"  <{tag} {attr_str} />")

    lines.append("</svg>")
    return "\n".join(lines)


def _radial_gradient(gradient_id: str, stops) -> str:
    inner = "".join(
        f'<stop offset="{_fmt(s.offset * 100)}%" stop-color="{s.color}" stop-opacity="{round(s.opacity, 4)}" />'
        for s in stops
    )
    return f'<radialGradient id="{gradient_id}">{inner}</radialGradient>'


def _scene_viewbox(ctx: EngineContext) -> tuple[float, float, float, float]:
    chunks = [g.outline.points for g in ctx.glyphs.values() if g.outline is not None]
    chunks += [f.points for f in ctx.fusion_shapes]
    if not chunks:
        return (0.0, 0.0, 800.0, 600.0)
    xmin, ymin, xmax, ymax = bbox(np.vstack(chunks))
    return (
        xmin - _CANVAS_MARGIN,
        ymin - _CANVAS_MARGIN,
        (xmax - xmin) + 2 * _CANVAS_MARGIN,
        (ymax - ymin) + 2 * _CANVAS_MARGIN,
    )


def scene_to_svg(ctx: EngineContext, title: str = "Subjectivity isotypes") -> str:
    """Fusion shapes at the bottom, similarity edges, then glyphs on top."""
    defs: list[str] = []
    elements: list[dict[str, Any]] = []

    for i, shape in enumerate(ctx.fusion_shapes):
        gradient_id = f"fusion-{shape.cluster_id if shape.cluster_id is not None else i}"
        defs.append(_radial_gradient(gradient_id, shape.stops))
        elements.append({
            "tag": "path",
            "class": "fusion",
            "d": outline_to_path_d(shape.points),
            "fill": f"url(#{gradient_id})",
            "stroke": shape.stroke_color,
            "stroke-opacity": "0.3",
        })

    for edge in ctx.edges:
        a = ctx.subjects[edge.source]
        b = ctx.subjects[edge.target]
        (x1, y1), (x2, y2) = ctx.position(a.id), ctx.position(b.id)
        elements.append({
            "tag": "line",
            "class": "edge",
            "x1": _fmt(x1), "y1": _fmt(y1), "x2": _fmt(x2), "y2": _fmt(y2),
            "stroke": _EDGE_COLOR,
            "stroke-opacity": round(max(0.0, edge.similarity) * _EDGE_OPACITY, 3),
        })

    for subject in ctx.subjects:
        glyph = ctx.glyphs.get(subject.id)
        if glyph is None or glyph.outline is None or glyph.signature is None:
            continue
        elements.append({
            "tag": "path",
            "id": f"glyph-{subject.id}",
            "class": "glyph",
            "d": outline_to_path_d(glyph.outline.points),
            "fill": glyph.signature.base_color,
            "fill-opacity": round(glyph.signature.color_adjustment.opacity, 3),
        })

    return serialize_svg(
        elements,
        viewbox=_scene_viewbox(ctx),
        title=title,
        description=f"{ctx.num_subjects} subjects, {len(ctx.edges)} edges, {len(ctx.clusters)} clusters",
        defs=defs,
    )
