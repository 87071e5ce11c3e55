class MedTrustError(Exception):
    """Base class for client-side errors."""


class IncompleteRequestError(MedTrustError):
    """Break-glass access was requested without a justification."""


class UnrecognizedDecisionError(MedTrustError):
    """The decision service answered with a value outside ALLOW/RESTRICT/DENY."""

    def __init__(self, value):
        super().__init__(f"Unrecognized decision value: {value!r}")
        self.value = value
