"""Simulator exceptions.

Both failure kinds indicate a defect (bad configuration or broken energy
accounting) rather than a transient condition, so callers should report them
and never retry. All inherit from :class:`PhaseSolarError` so a caller can
tell simulator failures apart from generic faults.
"""


class PhaseSolarError(Exception):
    """Base exception for all simulator errors."""

    pass


class ConfigurationError(PhaseSolarError, ValueError):
    """Unknown topology / routing value or an invalid configuration file."""

    pass


class ConservationError(PhaseSolarError):
    """An hour's energy components do not add up to its declared total.

    Carries the month and the offending violation so reporting can show
    where the accounting broke.
    """

    def __init__(self, month: int, violation):
        self.month = month
        self.violation = violation
        self.hour = violation.hour
        self.kind = violation.kind
        self.total = violation.total
        self.computed = violation.computed
        super().__init__(
            f"Wrong {violation.kind} in month {month + 1}, hour {violation.hour}: "
            f"Total: {violation.total}, Sum: {violation.computed}"
        )
