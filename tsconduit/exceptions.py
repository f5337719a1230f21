"""Exception hierarchy for tsconduit.

Input problems derive from ``ValueError`` and numerical failures from
``RuntimeError`` so callers catching the builtin types keep working.
"""

from __future__ import annotations

from typing import Optional, Tuple, Union

Order = Union[int, float, Tuple[int, ...], Tuple[int, float, int]]


class TimeSeriesError(Exception):
    """Base class for all tsconduit errors.

    Attributes:
        estimator: Name of the estimator that raised the error (e.g.
            ``"ols"``), or an empty string when none was involved.
        order: Order the estimator was asked for, if known.
    """

    def __init__(
        self, message: str = "", estimator: str = "", order: Optional[Order] = None
    ) -> None:
        super().__init__(message)
        self.estimator = estimator
        self.order = order

    def __str__(self) -> str:
        base = super().__str__()
        if not self.estimator:
            return base
        if self.order is None:
            return f"{self.estimator}: {base}"
        return f"{self.estimator} (order={self.order}): {base}"


class InvalidOrderError(TimeSeriesError, ValueError):
    """A model order, method name or criterion name is not usable."""


class InsufficientDataError(TimeSeriesError, ValueError):
    """The series is empty, malformed or too short for the request."""


class EstimationError(TimeSeriesError, RuntimeError):
    """An estimator could not produce coefficients."""


class SingularMatrixError(EstimationError):
    """A linear system inside an estimator is singular or not positive definite."""


class OrderSelectionError(TimeSeriesError, RuntimeError):
    """Every candidate order of a search failed to fit."""


__all__ = [
    "TimeSeriesError",
    "InvalidOrderError",
    "InsufficientDataError",
    "EstimationError",
    "SingularMatrixError",
    "OrderSelectionError",
]
