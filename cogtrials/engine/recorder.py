"""
Per-block result logs and the hand-off to the persistence collaborator.

The local log always keeps the result, whatever the store does with it.
"""
import logging
import statistics
from collections.abc import Iterable
from collections.abc import Mapping
from typing import Protocol

from cogtrials.engine.errors import InvariantViolation
from cogtrials.engine.types import Block
from cogtrials.engine.types import SaveOutcome
from cogtrials.engine.types import TrialResult

logger = logging.getLogger(__name__)


class PersistenceStore(Protocol):
    def save(self, result: TrialResult) -> SaveOutcome: ...


class MemoryStore:
    """In-process store; the default when the host does not supply one."""

    def __init__(self, share_data: bool = False):
        self.share_data = share_data
        self.records: list[TrialResult] = []

    def save(self, result: TrialResult) -> SaveOutcome:
        self.records.append(result)
        return SaveOutcome(success=True, shared=self.share_data, fallback=False)


class ResultRecorder:
    def __init__(self, trial_counts: dict, store: PersistenceStore | None = None):
        self._limits = {Block(k): v for k, v in trial_counts.items()}
        self._logs: dict[Block, list[TrialResult]] = {block: [] for block in Block}
        self.store = store if store is not None else MemoryStore()

    def __len__(self) -> int:
        return sum(len(log) for log in self._logs.values())

    def count(self, phase: Block) -> int:
        return len(self._logs[Block(phase)])

    def record(self, result: TrialResult, phase: Block) -> SaveOutcome:
        """
        Append ``result`` to the ``phase`` log, then forward it to the store.

        Returns the store's SaveOutcome. Store failures are logged and
        reported as an unshared fallback outcome; they never propagate.
        """
        phase = Block(phase)
        log = self._logs[phase]
        if result.phase != phase:
            raise InvariantViolation(f"result for {result.phase} recorded into the {phase} log")
        if len(log) >= self._limits.get(phase, 0):
            raise InvariantViolation(f"{phase} log already holds all {len(log)} expected results")
        if result.trial_index != len(log):
            raise InvariantViolation(
                f"out-of-order {phase} result: got trial {result.trial_index}, expected {len(log)}"
            )
        log.append(result)
        return self._persist(result)

    def flush(self, phase: Block) -> tuple:
        """Return the ordered, read-only log for ``phase``."""
        return tuple(self._logs[Block(phase)])

    def clear(self) -> None:
        for log in self._logs.values():
            log.clear()

    def _persist(self, result: TrialResult) -> SaveOutcome:
        try:
            outcome = self.store.save(result)
        except Exception:
            logger.exception(
                "Saving %s trial %s failed; keeping the local copy", result.phase, result.trial_index
            )
            return SaveOutcome(success=False, shared=False, fallback=True)
        if not isinstance(outcome, SaveOutcome):
            outcome = SaveOutcome(success=bool(outcome))
        if not outcome.success:
            logger.warning(
                "Store did not accept %s trial %s (fallback=%s)",
                result.phase,
                result.trial_index,
                outcome.fallback,
            )
        return outcome


def summarise_block(rows: Iterable[Mapping]) -> dict:
    """
    Quick feedback figures for one block of results (TrialResult.to_dict() rows).

    Accuracy and mean RT are over responded trials only; both are None when
    nothing was answered.
    """
    rows = list(rows)
    responded = [r for r in rows if not r.get("timed_out")]
    rts = [r["reaction_time_ms"] for r in responded if r.get("reaction_time_ms") is not None]
    return {
        "trial_count": len(rows),
        "trials_responded": len(responded),
        "accuracy": sum(1 for r in responded if r.get("is_correct")) / len(responded) if responded else None,
        "mean_rt": statistics.mean(rts) if rts else None,
    }
