"""Exception taxonomy for the trial execution engine."""


class EngineError(Exception):
    """Base class for all engine errors."""


class InvalidConfig(EngineError, ValueError):
    """Raised when an ExperimentConfig or paradigm parameter set is malformed."""


class InvalidTransition(EngineError):
    """
    Raised when a lifecycle method is called from a state that does not permit it.

    The engine state is left untouched when this is raised.
    """

    def __init__(self, operation: str, phase):
        self.operation = operation
        self.phase = phase
        super().__init__(f"{operation}() is not allowed while the engine is in '{phase}'")


class InvariantViolation(EngineError, AssertionError):
    """Raised on an internal programmer error. Never caught by the engine."""
