"""Frame renderers."""

from logo_teaser.render.svg_renderer import (
    SvgFrameRenderer,
    ndc_to_pixels,
    project_mesh_edges,
)

__all__ = [
    "SvgFrameRenderer",
    "ndc_to_pixels",
    "project_mesh_edges",
]
