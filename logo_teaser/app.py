"""
Teaser application: wires host page, scene, controller and renderer.

start() mounts the surface, builds the scene and kicks off asset loads;
tick() runs one animation frame. Asset futures are polled from tick(),
so the loaded model is attached and framed on the loop thread.
"""

import logging
import time
from concurrent.futures import Future, TimeoutError as FutureTimeoutError
from typing import Callable, Optional

import numpy as np

from logo_teaser import config as cfg
from logo_teaser.assets import AssetPipeline
from logo_teaser.controller import OrientationController, RigPose
from logo_teaser.framing import FitResult, fit_camera_to_object
from logo_teaser.host import (
    HostPage,
    MountError,
    MountHandle,
    OrientationEvent,
    PointerEvent,
    Viewport,
    ensure_mount,
)
from logo_teaser.input import InputGate
from logo_teaser.project_config import TeaserConfig, controller_settings, validate_config
from logo_teaser.render.svg_renderer import SvgFrameRenderer
from logo_teaser.scene import DirectionalLight, Group, Object3D, PerspectiveCamera, Scene

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
RendererFactory = Callable[[MountHandle, Viewport], object]


def default_clock() -> float:
    """Monotonic milliseconds."""
    return time.perf_counter() * 1000.0


class TeaserApp:
    """One teaser instance per page view.

    Args:
        page: Host page providing viewport, overlay flag and events
        config: Teaser configuration (defaults when None)
        renderer_factory: Builds the renderer from the mount and viewport;
            SvgFrameRenderer by default
        pipeline: Asset pipeline (a private one when None)
        clock: Millisecond clock used for events and frames
    """

    def __init__(
        self,
        page: HostPage,
        config: Optional[TeaserConfig] = None,
        renderer_factory: Optional[RendererFactory] = None,
        pipeline: Optional[AssetPipeline] = None,
        clock: Optional[Clock] = None,
    ):
        self.page = page
        self.config = config or TeaserConfig()
        self.renderer_factory = renderer_factory or SvgFrameRenderer
        self._owns_pipeline = pipeline is None
        self.pipeline = pipeline or AssetPipeline()
        self.clock = clock or default_clock

        self.mount: Optional[MountHandle] = None
        self.renderer = None
        self.scene: Optional[Scene] = None
        self.camera: Optional[PerspectiveCamera] = None
        self.rig: Optional[Group] = None
        self.controller: Optional[OrientationController] = None
        self.logo: Optional[Object3D] = None
        self.last_fit: Optional[FitResult] = None
        self.started = False

        self._model_future: Optional[Future] = None
        self._env_future: Optional[Future] = None

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """Build the scene and begin loading assets.

        Returns:
            False when there is no mount surface or the config is invalid;
            nothing runs in that case.
            Calling start() on a started app is a no-op returning True.
        """
        if self.started:
            return True

        try:
            validate_config(self.config)
            self.mount = ensure_mount(self.page)
        except (MountError, ValueError) as exc:
            logger.error("Teaser init error: %s", exc)
            return False

        self.scene = Scene()
        self.camera = PerspectiveCamera(fov=self.config.camera.fov_deg, aspect=1.0)
        self.renderer = self.renderer_factory(self.mount, self.page.viewport)

        light = DirectionalLight()
        light.position = np.array(cfg.LIGHT_POSITION)
        self.scene.add(light)

        self.rig = Group(name="rig")
        self.scene.add(self.rig)
        self.controller = OrientationController(
            self.rig,
            settings=controller_settings(self.config),
            input_gate=InputGate(self.page.is_overlay_visible),
            start_time=self.clock(),
        )

        assets = self.config.assets
        if assets.environment:
            self._env_future = self.pipeline.load_environment(assets.environment)
        if assets.model:
            self._model_future = self.pipeline.load_model(assets.model)
        else:
            logger.warning("No model configured; rendering an empty scene")

        self.page.add_listener("resize", self._on_resize)
        self.page.add_listener("pointermove", self._on_pointer_move)
        self.page.add_listener("deviceorientation", self._on_device_orientation)

        self.handle_resize()
        self.started = True
        logger.info("Teaser started", extra={"mount": str(self.mount.path)})
        return True

    def stop(self) -> None:
        """Detach listeners and release the asset pool."""
        if not self.started:
            return
        self.page.remove_listener("resize", self._on_resize)
        self.page.remove_listener("pointermove", self._on_pointer_move)
        self.page.remove_listener("deviceorientation", self._on_device_orientation)
        if self._owns_pipeline:
            self.pipeline.shutdown(wait=False)
        self.started = False

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_resize(self, event) -> None:
        try:
            self.handle_resize()
        except Exception:
            logger.exception("Resize handling failed")

    def _on_pointer_move(self, event: PointerEvent) -> None:
        viewport = self.page.viewport
        self.controller.on_pointer_move(
            event.client_x, event.client_y, viewport.width, viewport.height, event.timestamp,
        )

    def _on_device_orientation(self, event: OrientationEvent) -> None:
        self.controller.on_device_orientation(event.beta, event.gamma, event.timestamp)

    def handle_resize(self) -> None:
        """Sync camera and renderer with the viewport, re-fit the logo."""
        viewport = self.page.viewport
        self.camera.aspect = viewport.aspect
        self.camera.update_projection_matrix()
        if hasattr(self.renderer, "set_size"):
            self.renderer.set_size(viewport.width, viewport.height)
        if self.logo is not None:
            self.last_fit = fit_camera_to_object(self.camera, self.logo, self.config.camera.fit_margin)

    # ------------------------------------------------------------------
    # Assets
    # ------------------------------------------------------------------

    def _poll_assets(self) -> None:
        future = self._env_future
        if future is not None and future.done():
            self._env_future = None
            exc = future.exception()
            if exc is not None:
                logger.error("Environment load error: %s", exc)
            else:
                self.scene.environment = future.result()

        future = self._model_future
        if future is not None and future.done():
            self._model_future = None
            exc = future.exception()
            if exc is not None:
                logger.error("Model load error: %s", exc)
            else:
                self.attach_model(future.result())

    def attach_model(self, obj: Object3D) -> None:
        """Put a loaded model under the rig and frame it."""
        if self.logo is not None:
            self.rig.remove(self.logo)
        self.logo = obj
        self.rig.add(obj)
        self.handle_resize()
        logger.info(
            "Model attached: %s",
            obj.name,
            extra={"distance": self.last_fit.distance if self.last_fit else None},
        )

    @property
    def loading(self) -> bool:
        return self._model_future is not None or self._env_future is not None

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------

    def tick(self, now: Optional[float] = None) -> RigPose:
        """Run one animation frame.

        Asset-attach and render errors are logged and do not propagate,
        so a broken frame does not stop the loop.

        Raises:
            RuntimeError: if the app has not been started
        """
        if not self.started:
            raise RuntimeError("TeaserApp.tick() called before start()")

        if now is None:
            now = self.clock()

        try:
            self._poll_assets()
        except Exception:
            logger.exception("Asset attach failed at t=%.1f ms", now)
        pose = self.controller.step_frame(now)

        try:
            self.renderer.render(self.scene, self.camera)
        except Exception:
            logger.exception("Render failed at t=%.1f ms", now)

        return pose

    def run(self, frames: int, fps: float = cfg.DEFAULT_FPS) -> Optional[RigPose]:
        """Run a fixed number of frames at a fixed rate.

        Returns:
            Pose of the last frame, None when no frame ran
        """
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")

        interval = 1.0 / fps
        pose = None
        for _ in range(frames):
            frame_start = time.perf_counter()
            pose = self.tick()
            remaining = interval - (time.perf_counter() - frame_start)
            if remaining > 0:
                time.sleep(remaining)
        return pose

    def wait_for_assets(self, timeout: Optional[float] = None) -> None:
        """Block until pending loads finish, then attach them."""
        for future in (self._model_future, self._env_future):
            if future is not None:
                try:
                    future.exception(timeout=timeout)
                except FutureTimeoutError:
                    logger.warning("Asset still loading after %.1fs", timeout)
        self._poll_assets()
