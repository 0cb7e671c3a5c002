"""Renderer interface - per-frame interpolation and hand-off to a drawing callback."""

import asyncio
from typing import Callable, Dict, Any, Optional
from .stats import iter_nodes
from .tree import TreeEngine


class Renderer:
    """
    Renderer interface for visualization.

    Decoupled from the engine, runs at configurable frame rate.
    Each frame moves every linked node's current position toward its
    target, then hands the engine's render data to the callback.
    """

    def __init__(self, engine: TreeEngine,
                 render_callback: Callable[[Dict[str, Any]], bool],
                 fps: float = 60.0):
        """
        Initialize renderer.

        Args:
            engine: Tree engine to render
            render_callback: Function to call with render data. Should return True to continue, False to quit.
            fps: Frame rate (10-100)
        """
        self.engine = engine
        self.render_callback = render_callback
        self.fps = max(10.0, min(100.0, fps))
        self.frame_period = 1.0 / self.fps

        self.running = False
        self._render_task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        """Check if renderer is running."""
        return self.running

    def interpolate(self):
        """Move every linked node one frame closer to its target."""
        factor = self.engine.config.lerp_factor
        for node in iter_nodes(self.engine.root):
            node.step_toward_target(factor)

    def render_once(self) -> bool:
        """
        Render a single frame.

        Returns:
            The callback's verdict: False means stop
        """
        self.interpolate()
        return self.render_callback(self.engine.get_render_data()) is not False

    async def _render_loop(self):
        """Main rendering loop."""
        while self.running:
            if not self.render_once():
                # Callback returned False, stop rendering
                self.running = False
                break

            # Wait for next frame
            await asyncio.sleep(self.frame_period)

    def start(self):
        """Start the renderer."""
        if not self.running:
            self.running = True
            self._render_task = asyncio.create_task(self._render_loop())

    def stop(self):
        """Stop the renderer."""
        self.running = False
        if self._render_task:
            self._render_task.cancel()

    async def wait_for_stop(self):
        """Wait for renderer to stop."""
        if self._render_task:
            try:
                await self._render_task
            except asyncio.CancelledError:
                pass

    def set_fps(self, fps: float):
        """
        Change frame rate.

        Args:
            fps: New frame rate
        """
        self.fps = max(10.0, min(100.0, fps))
        self.frame_period = 1.0 / self.fps
