"""Controller interface - turns user requests into engine operations."""

import random
from typing import Any, Awaitable, Callable, List, Optional
from bsttrainer.step_gate import StepMode
from bsttrainer.tree import Discipline, TreeEngine
from .logger import Logger


def parse_key(text) -> Optional[int]:
    """
    Parse user input into a key.

    Args:
        text: Raw input (text or int)

    Returns:
        The integer key, or None if the input is malformed
    """
    if isinstance(text, bool):
        return None
    if isinstance(text, int):
        return text
    try:
        return int(str(text).strip())
    except ValueError:
        return None


class Controller:
    """
    Controller interface for a tree engine.

    Coordinates:
    - TreeEngine (structure and animated algorithms)
    - StepGate (auto or manual pacing, shared with the engine)
    - Logger (logging, optional)

    While an animated operation runs, further operation requests are
    ignored, the way a UI disables its buttons. Step mode changes and
    advances are always accepted since they are how a running operation
    is driven forward.
    """

    def __init__(self, engine: TreeEngine, logger: Optional[Logger] = None,
                 rng: Optional[random.Random] = None):
        """
        Initialize controller.

        Args:
            engine: Tree engine to drive
            logger: Logger for engine events (optional)
            rng: Random source for random fills
        """
        self.engine = engine
        self.gate = engine.gate
        self.logger = logger
        self.rng = rng if rng is not None else random.Random()

        self.busy = False
        self.not_found_key = None

        # True while a manual pause waits for advance_step()
        self.ready = False

        engine.set_event_callback(self._on_event)
        self.gate.set_ready_callback(self._on_ready)

    def _on_ready(self, ready: bool):
        self.ready = ready

    def _on_event(self, event: str, payload: Any):
        if event == "not_found":
            self.not_found_key = payload
        elif event == "found":
            self.not_found_key = None

        if self.logger:
            self.logger.log_event(event, payload)

    async def _run(self, operation: Callable[[], Awaitable]):
        """Run an operation unless another one is in flight."""
        if self.busy:
            return None
        self.busy = True
        try:
            return await operation()
        finally:
            self.busy = False

    # Keyed operations

    async def insert(self, text) -> Optional[bool]:
        key = parse_key(text)
        if key is None:
            return None
        return await self._run(lambda: self.engine.insert(key))

    async def delete(self, text) -> Optional[bool]:
        key = parse_key(text)
        if key is None:
            return None
        return await self._run(lambda: self.engine.delete(key))

    async def search(self, text) -> Optional[bool]:
        """
        Search for a key.

        Returns:
            True if found, False if not found (see not_found_key), None if
            the input was rejected or another operation is in flight
        """
        key = parse_key(text)
        if key is None:
            return None
        self.not_found_key = None
        return await self._run(lambda: self.engine.search(key))

    # Traversals

    async def pre_order(self) -> Optional[List]:
        return await self._run(self.engine.pre_order)

    async def in_order(self) -> Optional[List]:
        return await self._run(self.engine.in_order)

    async def post_order(self) -> Optional[List]:
        return await self._run(self.engine.post_order)

    # Whole-tree operations

    async def balance(self):
        return await self._run(self.engine.balance)

    async def clear(self):
        return await self._run(self.engine.clear)

    async def random_fill(self, count: Optional[int] = None) -> Optional[List[int]]:
        """
        Clear the tree and insert random keys one after another.

        Args:
            count: Number of keys (config.random_fill_count if None)

        Returns:
            Keys that were linked, in insertion order
        """
        config = self.engine.config
        if count is None:
            count = config.random_fill_count

        async def fill():
            await self.engine.clear()
            inserted = []
            for _ in range(count):
                key = self.rng.randint(config.random_min, config.random_max)
                if await self.engine.insert(key):
                    inserted.append(key)
                await self.gate.pause(config.random_fill_delay)
            return inserted

        return await self._run(fill)

    async def set_discipline(self, discipline):
        """
        Switch discipline; clears the tree.

        Not subject to the busy check: the engine queues it behind a running
        operation.

        Args:
            discipline: Discipline member or its name ("BST" or "AVL")
        """
        await self.engine.set_discipline(Discipline(discipline))

    async def toggle_discipline(self):
        if self.engine.discipline is Discipline.BST:
            await self.set_discipline(Discipline.AVL)
        else:
            await self.set_discipline(Discipline.BST)

    # Step control

    def set_step_mode(self, mode):
        """
        Args:
            mode: StepMode member or its name ("auto" or "manual")
        """
        self.gate.set_mode(StepMode(mode))

    def toggle_step_mode(self):
        if self.gate.mode is StepMode.AUTO:
            self.set_step_mode(StepMode.MANUAL)
        else:
            self.set_step_mode(StepMode.AUTO)

    def advance_step(self) -> bool:
        return self.gate.advance()

    # Engine outputs

    @property
    def stats(self):
        return self.engine.stats

    @property
    def output(self) -> List:
        return self.engine.output

    @property
    def rotation_message(self) -> Optional[str]:
        return self.engine.rotation_message
