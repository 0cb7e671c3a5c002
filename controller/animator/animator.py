"""Animator interface - connects the pygame framer to a controller."""

import asyncio
from typing import Dict, Any, Optional, Set
from .pygame_framer import PygameFramer

# Commands returning a coroutine; everything else runs synchronously
ASYNC_COMMANDS = {
    'insert', 'delete', 'search', 'pre_order', 'in_order', 'post_order',
    'balance', 'clear', 'random_fill', 'toggle_discipline',
}


class Animator:
    """
    Animator interface for visualization.

    Used as the render callback of a Renderer: each frame it forwards
    keyboard commands to the controller, then draws the render data.
    """

    def __init__(self, controller, window_height: int = 800):
        """
        Initialize animator.

        Args:
            controller: Controller receiving the user's commands
            window_height: Height of the window; the width is the canvas width
        """
        self.controller = controller
        width = int(controller.engine.config.canvas_width)
        self.framer = PygameFramer(window_size=(width, window_height))

        # Keep references so running operations are not garbage collected
        self._tasks: Set[asyncio.Task] = set()

    def start(self):
        self.framer.start()

    def dispatch(self, command: str, argument: Optional[str] = None) -> bool:
        """
        Forward one command to the controller.

        Returns:
            False if the command asks to quit
        """
        if command == 'quit':
            return False
        if command == 'resize':
            self.controller.engine.resize(float(argument))
            return True

        handler = getattr(self.controller, command)
        if command in ASYNC_COMMANDS:
            coroutine = handler(argument) if argument is not None else handler()
            task = asyncio.create_task(coroutine)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        else:
            handler()
        return True

    def __call__(self, render_data: Dict[str, Any]) -> bool:
        """Render callback: handle input, then draw."""
        for command, argument in self.framer.poll_commands():
            if not self.dispatch(command, argument):
                return False
        return self.framer.render_frame(render_data)

    def finish(self):
        for task in self._tasks:
            task.cancel()
        self.framer.finish()
