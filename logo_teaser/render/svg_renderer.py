"""
SVG frame renderer.

Draws every mesh edge of the scene through the camera as a perspective
wireframe and saves one SVG document per rendered frame into the mount
directory (frame_00000.svg, frame_00001.svg, ...).
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np
import svgwrite

from logo_teaser import config as cfg
from logo_teaser.host import MountHandle, Viewport
from logo_teaser.scene import Mesh, PerspectiveCamera, Scene

logger = logging.getLogger(__name__)

Segment = Tuple[Tuple[float, float], Tuple[float, float]]


def ndc_to_pixels(ndc: np.ndarray, width: int, height: int) -> np.ndarray:
    """Map NDC x/y in [-1, 1] to SVG pixel coordinates (y down)."""
    px = (ndc[:, 0] + 1.0) * 0.5 * width
    py = (1.0 - ndc[:, 1]) * 0.5 * height
    return np.column_stack([px, py])


def project_mesh_edges(mesh: Mesh, camera: PerspectiveCamera, width: int, height: int) -> List[Segment]:
    """Screen-space segments for the mesh edges in front of the camera.

    Edges with an endpoint behind the camera or outside the near/far
    range are dropped rather than clipped.
    """
    edges = mesh.edges()
    if len(edges) == 0:
        return []

    ndc, visible = camera.project(mesh.world_vertices())
    in_depth = visible & (ndc[:, 2] >= -1.0) & (ndc[:, 2] <= 1.0)
    pixels = ndc_to_pixels(ndc, width, height)

    keep = in_depth[edges[:, 0]] & in_depth[edges[:, 1]]
    segments = []
    for a, b in edges[keep]:
        segments.append((
            (float(pixels[a, 0]), float(pixels[a, 1])),
            (float(pixels[b, 0]), float(pixels[b, 1])),
        ))
    return segments


class SvgFrameRenderer:
    """render(scene, camera) implementation writing SVG wireframes.

    Args:
        mount: Mounted surface; frames are written into mount.path
        viewport: Initial drawing size
        stroke: Wireframe color
        stroke_width: Line width in pixels
        save_every: Save every n-th frame; 0 keeps frames in memory only
    """

    def __init__(
        self,
        mount: MountHandle,
        viewport: Viewport,
        stroke: str = cfg.WIREFRAME_COLOR,
        stroke_width: float = 1.0,
        save_every: int = 1,
    ):
        self.mount = mount
        self.width = viewport.width
        self.height = viewport.height
        self.stroke = stroke
        self.stroke_width = stroke_width
        self.save_every = max(0, int(save_every))
        self.frames_rendered = 0
        self.last_drawing: Optional[svgwrite.Drawing] = None
        self.last_path: Optional[Path] = None

    def set_size(self, width: int, height: int) -> None:
        self.width = max(1, int(width))
        self.height = max(1, int(height))

    def frame_path(self, index: int) -> Path:
        return self.mount.path / f"frame_{index:05d}.svg"

    def render(self, scene: Scene, camera: PerspectiveCamera) -> svgwrite.Drawing:
        """Draw one frame and save it when due."""
        path = self.frame_path(self.frames_rendered)
        dwg = svgwrite.Drawing(
            filename=str(path),
            size=(f"{self.width}px", f"{self.height}px"),
            viewBox=f"0 0 {self.width} {self.height}",
        )
        dwg.add(dwg.rect(insert=(0, 0), size=(self.width, self.height), fill=scene.background))

        group = dwg.g(
            id="wireframe",
            stroke=self.stroke,
            stroke_width=self.stroke_width,
            fill="none",
        )
        n_segments = 0
        for node in scene.traverse():
            if not isinstance(node, Mesh):
                continue
            for start, end in project_mesh_edges(node, camera, self.width, self.height):
                group.add(dwg.line(start=start, end=end))
                n_segments += 1
        dwg.add(group)

        if self.save_every and self.frames_rendered % self.save_every == 0:
            dwg.save()
            self.last_path = path

        logger.debug("Frame %d: %d segments", self.frames_rendered, n_segments)
        self.frames_rendered += 1
        self.last_drawing = dwg
        return dwg
