"""Step gate - suspends the engine between visually meaningful steps."""

import asyncio
from enum import Enum
from typing import Callable, Optional


class StepMode(Enum):
    """How a pause is resumed."""
    AUTO = "auto"  # after the pause duration elapses
    MANUAL = "manual"  # on an explicit advance


class StepGateBusyError(RuntimeError):
    """Raised when a second pause is requested while one is outstanding."""


class StepGate:
    """
    Suspension primitive shared by the engine and the controller.

    Every pause is a future on the running event loop. In auto mode a timer
    resolves it; in manual mode only advance() does. The mode may change
    while a pause is outstanding: switching to auto resolves it at once,
    switching to manual drops the timer so the pause waits for advance().
    """

    def __init__(self, default_duration: float = 0.5,
                 mode: StepMode = StepMode.AUTO,
                 on_ready: Optional[Callable[[bool], None]] = None):
        """
        Initialize step gate.

        Args:
            default_duration: Pause length in auto mode when none is given
            mode: Initial step mode
            on_ready: Called with True when a manual pause starts waiting for
                an advance, and with False once it no longer waits
        """
        self.default_duration = default_duration
        self._mode = mode
        self._on_ready = on_ready

        self._waiter: Optional[asyncio.Future] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._ready = False

    def set_ready_callback(self, callback: Optional[Callable[[bool], None]]):
        """
        Set callback for "ready for advance" changes.

        Args:
            callback: Function called with True when a manual pause starts
                waiting and with False once it no longer waits
        """
        self._on_ready = callback

    @property
    def mode(self) -> StepMode:
        return self._mode

    @property
    def waiting(self) -> bool:
        """Check if a pause is outstanding."""
        return self._waiter is not None and not self._waiter.done()

    @property
    def awaiting_advance(self) -> bool:
        """Check if a pause is blocked until advance() is called."""
        return self.waiting and self._mode is StepMode.MANUAL

    async def pause(self, duration: Optional[float] = None):
        """
        Suspend the calling step.

        Args:
            duration: Pause length in auto mode (ignored in manual mode)
        """
        if self._waiter is not None:
            raise StepGateBusyError("a pause is already outstanding")

        loop = asyncio.get_running_loop()
        self._waiter = loop.create_future()
        if self._mode is StepMode.AUTO:
            self._start_timer(self.default_duration if duration is None else duration)
        else:
            self._set_ready(True)

        try:
            await self._waiter
        finally:
            self._cancel_timer()
            self._waiter = None
            self._set_ready(False)

    def set_mode(self, mode: StepMode):
        """
        Change the step mode, also while a pause is outstanding.

        Args:
            mode: New step mode
        """
        if mode is self._mode:
            return
        self._mode = mode

        if not self.waiting:
            return
        self._cancel_timer()
        if mode is StepMode.AUTO:
            # Nothing would ever advance a pause that waits in auto mode
            self._release()
        else:
            self._set_ready(True)

    def advance(self) -> bool:
        """
        Release the outstanding manual pause.

        Returns:
            True if a pause was released, False in auto mode or when idle
        """
        if not self.awaiting_advance:
            return False
        self._release()
        return True

    def _start_timer(self, duration: float):
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(max(0.0, duration), self._release)

    def _cancel_timer(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _release(self):
        self._timer = None
        if self._waiter is not None and not self._waiter.done():
            self._waiter.set_result(None)
        self._set_ready(False)

    def _set_ready(self, ready: bool):
        if ready == self._ready:
            return
        self._ready = ready
        if self._on_ready:
            self._on_ready(ready)
