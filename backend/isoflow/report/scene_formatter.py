"""EngineContext → SceneOutput model and plain-text scene report."""

from __future__ import annotations

from isoflow.engine.context import EngineContext, GlyphData
from isoflow.engine.core.subject import Subject
from isoflow.models.scene import (
    ClusterScene,
    EdgeScene,
    FusionScene,
    GlyphScene,
    GradientStopScene,
    InterpretationItem,
    SceneOutput,
)
from isoflow.svg.serializer import outline_to_path_d
from isoflow.utils.geometry import outline_polygon

# Glyph summaries listed in the text report
_MAX_TEXT_GLYPHS = 50


def _points(points) -> list[tuple[float, float]]:
    return [(round(float(x), 3), round(float(y), 3)) for x, y in points]


def glyph_to_scene(ctx: EngineContext, subject: Subject, glyph: GlyphData) -> GlyphScene:
    scene = GlyphScene(
        subject_id=subject.id,
        original_id=subject.original_id,
        position=ctx.position(subject.id),
        color=subject.color,
        seed=glyph.seed,
        uniqueness=round(glyph.profile.uniqueness, 4) if glyph.profile else 0.0,
        degree=glyph.features.get("degree", 0),
        cluster_id=glyph.features.get("cluster_id"),
        quote=glyph.features.get("quote", ""),
    )

    sig = glyph.signature
    if sig is not None:
        scene.opacity = round(sig.color_adjustment.opacity, 4)
        scene.base_size = round(sig.base_size, 3)
        scene.display_size = round(sig.display_size(subject.id in ctx.highlighted), 3)
        scene.base_shape = sig.base_shape
        scene.narrative_style = sig.profile.narrative_style.type
        scene.emotional_level = sig.profile.emotional_expression.level
        scene.pattern_type = sig.internal_pattern.pattern_type
        scene.pattern_density = sig.internal_pattern.density
        scene.reflection_depth = round(sig.internal_pattern.reflection_depth, 4)
        scene.edge_sharpness = sig.edge_characteristics.sharpness
        scene.edge_thickness = round(sig.edge_characteristics.thickness, 4)

    if glyph.outline is not None:
        scene.outline = _points(glyph.outline.points)
        scene.path_d = outline_to_path_d(glyph.outline.points)
        scene.area = round(glyph.area, 3)

    interpretation = glyph.features.get("interpretation")
    if interpretation:
        scene.interpretations = [InterpretationItem(**item) for item in interpretation["interpretations"]]
        scene.summary = interpretation["summary"]
    return scene


def context_to_scene(ctx: EngineContext) -> SceneOutput:
    """Convert EngineContext to structured SceneOutput."""
    glyphs = [
        glyph_to_scene(ctx, subject, ctx.glyphs[subject.id])
        for subject in ctx.subjects
        if subject.id in ctx.glyphs
    ]

    edges = [
        EdgeScene(
            source=ctx.subjects[e.source].id,
            target=ctx.subjects[e.target].id,
            similarity=round(e.similarity, 6),
            dimension=e.dimension,
        )
        for e in ctx.edges
    ]

    clusters = [
        ClusterScene(
            cluster_id=c.cluster_id,
            members=[ctx.subjects[m].id for m in c.members],
            center=c.bounds.center,
            radius=round(c.bounds.radius, 3),
        )
        for c in ctx.clusters
    ]

    fusion_shapes = []
    for shape in ctx.fusion_shapes:
        poly = outline_polygon(shape.points)
        fusion_shapes.append(
            FusionScene(
                cluster_id=shape.cluster_id,
                seed=shape.seed,
                softness=round(shape.softness, 4),
                center=shape.bounds.center,
                radius=round(shape.bounds.radius, 3),
                outline=_points(shape.points),
                path_d=outline_to_path_d(shape.points),
                area=round(float(poly.area), 3) if poly is not None else 0.0,
                stops=[
                    GradientStopScene(offset=s.offset, color=s.color, opacity=round(s.opacity, 4), css=s.css)
                    for s in shape.stops
                ],
                stroke_color=shape.stroke_color,
            )
        )

    return SceneOutput(
        subject_count=ctx.num_subjects,
        dimension=ctx.dimension,
        similarity_threshold=ctx.similarity_threshold,
        cluster_threshold=round(ctx.cluster_threshold, 6),
        glyphs=glyphs,
        edges=edges,
        clusters=clusters,
        fusion_shapes=fusion_shapes,
        scene_text=context_to_scene_text(ctx),
    )


def context_to_scene_text(ctx: EngineContext) -> str:
    """Plain-text scene report: counts, clusters, then one line per glyph."""
    lines = ["=== ISOFLOW SCENE ===", ""]
    lines.append(
        f"Subjects: {ctx.num_subjects} | Dimension: {ctx.dimension} | "
        f"Threshold: {ctx.similarity_threshold:.3f} (clusters at {ctx.cluster_threshold:.3f})"
    )
    lines.append(f"Edges: {len(ctx.edges)} | Clusters: {len(ctx.clusters)}")
    lines.append("")

    if ctx.clusters:
        lines.append("── CLUSTERS ──")
        for c in ctx.clusters:
            ids = ", ".join(ctx.subjects[m].id for m in c.members)
            cx, cy = c.bounds.center
            lines.append(f"  #{c.cluster_id} ({c.size}): {ids}  center=({cx:.1f}, {cy:.1f}) r={c.bounds.radius:.1f}")
        lines.append("")

    lines.append("── GLYPHS ──")
    for subject in ctx.subjects[:_MAX_TEXT_GLYPHS]:
        glyph = ctx.glyphs.get(subject.id)
        if glyph is None or glyph.signature is None:
            lines.append(f"  {subject.id}: (no glyph)")
            continue
        sig = glyph.signature
        profile = sig.profile
        lines.append(
            f"  {subject.id}: {profile.narrative_style.type}/{profile.emotional_expression.level}, "
            f"pattern={sig.internal_pattern.pattern_type}, size={sig.base_size:.1f}, "
            f"degree={glyph.features.get('degree', 0)}"
        )
    if ctx.num_subjects > _MAX_TEXT_GLYPHS:
        lines.append(f"  ... {ctx.num_subjects - _MAX_TEXT_GLYPHS} more")

    if ctx.errors:
        lines.append("")
        lines.append("── ERRORS ──")
        for tid, msg in sorted(ctx.errors.items()):
            lines.append(f"  {tid}: {msg}")

    lines.append("")
    lines.append("=== END SCENE ===")
    return "\n".join(lines)
