"""Phase timer: at most one pending, cancellable, phase-advancing callback."""
import itertools
import logging
from collections.abc import Callable

from cogtrials.engine.clock import Clock
from cogtrials.engine.errors import InvariantViolation

logger = logging.getLogger(__name__)

_token_ids = itertools.count(1)


class CancelToken:
    """Handle for one scheduled callback. Once cancelled it can never fire."""

    def __init__(self, delay_ms: float, label: str = ""):
        self.id = next(_token_ids)
        self.delay_ms = delay_ms
        self.label = label
        self.cancelled = False
        self.fired = False
        self._handle = None

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "fired" if self.fired else "pending"
        return f"<CancelToken #{self.id} {self.label or 'timer'} {self.delay_ms}ms {state}>"


class PhaseTimer:
    def __init__(self, clock: Clock):
        self._clock = clock
        self._pending: CancelToken | None = None

    @property
    def pending(self) -> CancelToken | None:
        return self._pending

    def schedule(self, delay_ms: float, callback: Callable[[], None], label: str = "") -> CancelToken:
        """
        Run ``callback`` after ``delay_ms`` milliseconds.

        Raises InvariantViolation if another timer is still pending; the caller
        must cancel it first.
        """
        if self._pending is not None:
            raise InvariantViolation(
                f"cannot schedule {label or 'timer'!r} while {self._pending!r} is outstanding"
            )
        if delay_ms < 0:
            raise InvariantViolation(f"negative delay {delay_ms} for {label or 'timer'!r}")

        token = CancelToken(delay_ms, label)

        def fire() -> None:
            # The clock may still deliver a handle that was cancelled late.
            if not token.pending or self._pending is not token:
                return
            token.fired = True
            self._pending = None
            callback()

        token._handle = self._clock.call_later(delay_ms, fire)
        self._pending = token
        logger.debug("Scheduled %r", token)
        return token

    def cancel(self, token: CancelToken | None = None) -> None:
        """Cancel ``token`` (default: the pending one). Idempotent."""
        token = token or self._pending
        if token is None or not token.pending:
            return
        token.cancelled = True
        if token._handle is not None:
            token._handle.cancel()
        if self._pending is token:
            self._pending = None
        logger.debug("Cancelled %r", token)
