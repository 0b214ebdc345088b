"""
Host page: viewport, overlay flag, event dispatch and the mount surface.

The page owns a root directory standing in for the document body; the
mount is a fixed subdirectory of it where the renderer writes frames.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from logo_teaser import config as cfg

logger = logging.getLogger(__name__)


class MountError(Exception):
    """The mount surface cannot be created or found."""


@dataclass
class Viewport:
    """Drawable area in pixels; both sides are at least 1."""
    width: int
    height: int

    def __post_init__(self):
        self.width = max(1, int(self.width))
        self.height = max(1, int(self.height))

    @property
    def aspect(self) -> float:
        return self.width / self.height


@dataclass(frozen=True)
class PointerEvent:
    client_x: float
    client_y: float
    timestamp: float
    type: str = "pointermove"


@dataclass(frozen=True)
class OrientationEvent:
    """Device orientation reading; angles in degrees, None when unavailable."""
    beta: Optional[float]
    gamma: Optional[float]
    timestamp: float
    type: str = "deviceorientation"


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int
    type: str = "resize"


Listener = Callable[[object], None]


class HostPage:
    """Page hosting the teaser.

    Args:
        root_dir: Directory acting as the page body; None means the page
            has no surface to mount on
        width, height: Initial viewport size in pixels
    """

    def __init__(
        self,
        root_dir: Optional[Union[str, Path]],
        width: int = cfg.DEFAULT_VIEWPORT[0],
        height: int = cfg.DEFAULT_VIEWPORT[1],
    ):
        self.root_dir = Path(root_dir) if root_dir is not None else None
        self.viewport = Viewport(width, height)
        self.mount: Optional['MountHandle'] = None
        self._overlay_visible = False
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    # Overlay (modal) state

    def show_overlay(self) -> None:
        self._overlay_visible = True

    def hide_overlay(self) -> None:
        self._overlay_visible = False

    def is_overlay_visible(self) -> bool:
        return self._overlay_visible

    # Events

    def add_listener(self, event_type: str, listener: Listener) -> None:
        self._listeners[event_type].append(listener)

    def remove_listener(self, event_type: str, listener: Listener) -> None:
        if listener in self._listeners.get(event_type, []):
            self._listeners[event_type].remove(listener)

    def dispatch(self, event) -> int:
        """Deliver event to every listener registered for its type.

        Returns:
            Number of listeners called
        """
        listeners = list(self._listeners.get(event.type, []))
        for listener in listeners:
            listener(event)
        return len(listeners)

    def resize(self, width: int, height: int) -> None:
        self.viewport = Viewport(width, height)
        self.dispatch(ResizeEvent(self.viewport.width, self.viewport.height))


@dataclass(frozen=True)
class MountHandle:
    """Mounted drawing surface."""
    path: Path
    page_root: Path


def ensure_mount(page: HostPage) -> MountHandle:
    """Return the page's mount, creating it on first use.

    Safe to call any number of times: the same directory is reused, and a
    mount that disappeared from disk is recreated under the page root.

    Raises:
        MountError: if the page has no root surface or it is not a directory
    """
    root = page.root_dir
    if root is None:
        raise MountError("Host page has no mount surface")
    if not root.is_dir():
        raise MountError(f"Mount surface not found: {root}")

    if page.mount is not None and page.mount.path.is_dir():
        return page.mount

    path = root / cfg.MOUNT_DIRNAME
    try:
        path.mkdir(exist_ok=True)
    except OSError as exc:
        raise MountError(f"Cannot create mount {path}: {exc}") from exc

    page.mount = MountHandle(path=path, page_root=root)
    logger.debug("Mount ready: %s", path)
    return page.mount
