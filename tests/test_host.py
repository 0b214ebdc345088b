"""
Unit tests for logo_teaser.host.

Tests:
- Viewport clamping
- Event dispatch and overlay flag
- ensure_mount idempotence and failure
"""

from pathlib import Path

import pytest

from logo_teaser.host import (
    HostPage,
    MountError,
    PointerEvent,
    ResizeEvent,
    Viewport,
    ensure_mount,
)


class TestViewport:

    def test_aspect(self):
        assert Viewport(1920, 1080).aspect == pytest.approx(16 / 9)

    def test_minimum_one_pixel(self):
        vp = Viewport(0, -5)
        assert vp.width == 1
        assert vp.height == 1


class TestEvents:
    """Tests for listener registration and dispatch."""

    def test_dispatch_to_matching_type(self, page):
        seen = []
        page.add_listener("pointermove", seen.append)
        page.add_listener("resize", lambda e: seen.append("resize"))

        count = page.dispatch(PointerEvent(10, 20, timestamp=1.0))

        assert count == 1
        assert len(seen) == 1
        assert seen[0].client_x == 10

    def test_remove_listener(self, page):
        seen = []
        page.add_listener("pointermove", seen.append)
        page.remove_listener("pointermove", seen.append)
        assert page.dispatch(PointerEvent(0, 0, 0.0)) == 0
        assert seen == []

    def test_resize_updates_viewport_and_notifies(self, page):
        events = []
        page.add_listener("resize", events.append)

        page.resize(800, 600)

        assert page.viewport.width == 800
        assert page.viewport.height == 600
        assert events == [ResizeEvent(800, 600)]

    def test_overlay_flag(self, page):
        assert not page.is_overlay_visible()
        page.show_overlay()
        assert page.is_overlay_visible()
        page.hide_overlay()
        assert not page.is_overlay_visible()


class TestEnsureMount:
    """Tests for the mount surface."""

    def test_creates_mount_dir(self, page, tmp_path: Path):
        handle = ensure_mount(page)
        assert handle.path == tmp_path / "three-mount"
        assert handle.path.is_dir()
        assert page.mount is handle

    def test_idempotent(self, page):
        first = ensure_mount(page)
        second = ensure_mount(page)
        assert first is second

    def test_recreated_when_removed(self, page):
        first = ensure_mount(page)
        first.path.rmdir()
        second = ensure_mount(page)
        assert second.path.is_dir()
        assert second.path == first.path

    def test_no_surface(self):
        with pytest.raises(MountError):
            ensure_mount(HostPage(None))

    def test_missing_surface(self, tmp_path: Path):
        with pytest.raises(MountError):
            ensure_mount(HostPage(tmp_path / "does-not-exist"))
