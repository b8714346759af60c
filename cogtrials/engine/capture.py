"""
Response capture.

A window accepts the first input that belongs to its valid-response set and
then closes itself. Irrelevant keys and anything arriving after the first
accepted response are dropped without error; participants press stray keys
all the time.
"""
import logging
from collections.abc import Callable
from collections.abc import Iterable

from cogtrials.engine.errors import InvariantViolation

logger = logging.getLogger(__name__)


class CaptureHandle:
    def __init__(self, valid_responses: frozenset, on_capture: Callable[[str, float], None]):
        self.valid_responses = valid_responses
        self._on_capture = on_capture
        self.is_open = True
        self.response: str | None = None
        self.timestamp: float | None = None

    def __repr__(self) -> str:
        state = "open" if self.is_open else f"closed response={self.response!r}"
        return f"<CaptureHandle {sorted(self.valid_responses)} {state}>"


class ResponseCapture:
    def __init__(self):
        self._current: CaptureHandle | None = None

    @property
    def current(self) -> CaptureHandle | None:
        return self._current

    def open_window(self, valid_responses: Iterable[str], on_capture: Callable[[str, float], None]) -> CaptureHandle:
        if self._current is not None and self._current.is_open:
            raise InvariantViolation(f"a capture window is already open: {self._current!r}")
        responses = frozenset(valid_responses)
        if not responses:
            raise InvariantViolation("a capture window needs at least one valid response")
        self._current = CaptureHandle(responses, on_capture)
        return self._current

    def close_window(self, handle: CaptureHandle | None = None) -> None:
        """Close ``handle`` (default: the open one). Idempotent."""
        handle = handle or self._current
        if handle is None:
            return
        handle.is_open = False
        if self._current is handle:
            self._current = None

    def offer(self, response: str, timestamp: float) -> bool:
        """
        Deliver one input event.

        Returns True only when the input was accepted, in which case the
        window's on_capture callback has already run.
        """
        handle = self._current
        if handle is None or not handle.is_open:
            logger.debug("Discarded %r at %.1f: no open response window", response, timestamp)
            return False
        if response not in handle.valid_responses:
            logger.debug("Ignored %r at %.1f: not in %s", response, timestamp, sorted(handle.valid_responses))
            return False

        handle.response = response
        handle.timestamp = timestamp
        self.close_window(handle)
        handle._on_capture(response, timestamp)
        return True
