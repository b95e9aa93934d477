from __future__ import annotations


class InvalidInput(ValueError):
    """Weights that cannot define a discrete distribution.

    ``reason`` is one of ``"empty"``, ``"not_1d"``, ``"not_numeric"``,
    ``"non_finite"``, ``"negative_weight"`` or ``"non_positive_sum"``. Any real
    numeric type numpy can turn into float64 is accepted, ``Decimal`` and
    ``Fraction`` included.
    """

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = str(reason)


class PreconditionViolation(RuntimeError):
    """An alias table was used out of order (e.g. sampled before it was populated)."""
