"""
Pytest configuration and fixtures for the logo teaser.

Provides:
- STL file fixtures generated with numpy-stl (cube, box, empty)
- Scene fixtures (cube mesh, rig)
- Host page and fake clock fixtures
"""

from pathlib import Path

import numpy as np
import pytest
from stl import mesh as stl_mesh

from logo_teaser.host import HostPage
from logo_teaser.scene import Group, Mesh


# ============================================================================
# Geometry helpers
# ============================================================================

BOX_FACES = np.array([
    [0, 1, 2], [0, 2, 3],  # bottom
    [4, 6, 5], [4, 7, 6],  # top
    [0, 5, 1], [0, 4, 5],  # front
    [2, 7, 3], [2, 6, 7],  # back
    [0, 3, 7], [0, 7, 4],  # left
    [1, 5, 6], [1, 6, 2],  # right
], dtype=np.int32)


def box_vertices(size=(2.0, 2.0, 2.0), center=(0.0, 0.0, 0.0)) -> np.ndarray:
    """Eight corners of an axis-aligned box."""
    hx, hy, hz = (s / 2 for s in size)
    cx, cy, cz = center
    return np.array([
        [cx - hx, cy - hy, cz - hz], [cx + hx, cy - hy, cz - hz],
        [cx + hx, cy + hy, cz - hz], [cx - hx, cy + hy, cz - hz],
        [cx - hx, cy - hy, cz + hz], [cx + hx, cy - hy, cz + hz],
        [cx + hx, cy + hy, cz + hz], [cx - hx, cy + hy, cz + hz],
    ])


def make_box_mesh(size=(2.0, 2.0, 2.0), center=(0.0, 0.0, 0.0), name="box") -> Mesh:
    return Mesh(box_vertices(size, center), BOX_FACES, name=name)


def write_box_stl(path: Path, size=(2.0, 2.0, 2.0), center=(0.0, 0.0, 0.0)) -> Path:
    vertices = box_vertices(size, center)
    m = stl_mesh.Mesh(np.zeros(len(BOX_FACES), dtype=stl_mesh.Mesh.dtype))
    for i, face in enumerate(BOX_FACES):
        m.vectors[i] = vertices[face]
    m.save(str(path))
    return path


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 0.0):
        self.now = float(start)

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        self.now += ms
        return self.now


# ============================================================================
# File fixtures
# ============================================================================

@pytest.fixture
def cube_stl_path(tmp_path: Path) -> Path:
    """2 x 2 x 2 cube centered at the origin."""
    return write_box_stl(tmp_path / "cube.stl")


@pytest.fixture
def offset_box_stl_path(tmp_path: Path) -> Path:
    """4 x 2 x 1 box whose center sits at (10, 5, -3)."""
    return write_box_stl(tmp_path / "offset_box.stl", size=(4.0, 2.0, 1.0), center=(10.0, 5.0, -3.0))


@pytest.fixture
def empty_stl_path(tmp_path: Path) -> Path:
    """STL with zero triangles."""
    path = tmp_path / "empty.stl"
    m = stl_mesh.Mesh(np.zeros(0, dtype=stl_mesh.Mesh.dtype))
    m.save(str(path))
    return path


@pytest.fixture
def env_map_path(tmp_path: Path) -> Path:
    path = tmp_path / "studio.hdr"
    path.write_bytes(b"#?RADIANCE\nFORMAT=32-bit_rle_rgbe\n\n-Y 1 +X 1\n\x80\x80\x80\x81")
    return path


# ============================================================================
# Scene fixtures
# ============================================================================

@pytest.fixture
def cube_mesh() -> Mesh:
    return make_box_mesh()


@pytest.fixture
def rig() -> Group:
    return Group(name="rig")


# ============================================================================
# Host fixtures
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def page(tmp_path: Path) -> HostPage:
    return HostPage(tmp_path, 1920, 1080)


@pytest.fixture
def make_box():
    """Factory for box meshes: make_box(size=(..), center=(..), name=..)."""
    return make_box_mesh
