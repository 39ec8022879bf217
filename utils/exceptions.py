# utils/exceptions.py
# Central place for small custom exceptions used across the codebase.

class ConfigurationError(ValueError):
    """
    Raised when the parameter table cannot be turned into valid draws
    (unknown type code, duplicate name, Beta/Gamma moments that give
    non-positive shape parameters, missing model inputs).  Raised at
    sampling time so a bad table never reaches the iteration loop.
    """
    pass

class InvariantViolationError(RuntimeError):
    """
    Raised when a transition matrix row does not sum to 1 or holds a
    value outside [0,1].  The matrix is never renormalised.
    """
    pass

class DimensionMismatchError(ValueError):
    """
    Raised when a trace, weight or discount vector does not have the
    shape the aggregator expects.
    """
    pass

class IterationError(RuntimeError):
    """
    Wraps any failure inside one PSA iteration so the caller learns which
    draw broke the run.  Both fields live in ``args`` so joblib workers can
    pickle the exception back to the parent process.
    """

    def __init__(self, iteration: int, reason: str):
        super().__init__(iteration, reason)
        self.iteration = iteration
        self.reason = reason

    def __str__(self) -> str:
        return f"iteration {self.iteration}: {self.reason}"
