"""Information-criterion order selection.

The searches are plain serial grid scans. Each candidate is fitted through a
caller-supplied function; a candidate whose fit raises
:class:`~tsconduit.exceptions.EstimationError` or
:class:`~tsconduit.exceptions.InsufficientDataError` is logged and scored
+inf instead of aborting the scan. The winner is the smallest score, ties
going to the earliest candidate in enumeration order.

Two-parameter grids are enumerated row-major (AR order outer, MA order inner)
and the flat arg-min is decoded with ``numpy.unravel_index`` on the same
shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

import numpy as np

from .diagnostics import normalize_criterion
from .exceptions import EstimationError, InsufficientDataError, OrderSelectionError
from .logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class OrderSearch1D:
    """
    Result of a search over a single order.

    Attributes:
        orders: 1D integer array of candidate orders, in enumeration order.
        values: 1D array of criterion values; ``values[i]`` belongs to
            ``orders[i]``. Failed candidates hold +inf.
        criterion: "aic" or "bic".
        best_order: Order with the smallest criterion value.
        best_fit: Fitted model at ``best_order``.
    """

    orders: np.ndarray
    values: np.ndarray
    criterion: str
    best_order: int
    best_fit: Any

    def __post_init__(self) -> None:
        if self.orders.ndim != 1:
            raise ValueError(f"orders must be 1D array, got shape {self.orders.shape}")
        if self.values.shape != self.orders.shape:
            raise ValueError(
                f"values must have shape {self.orders.shape}, got {self.values.shape}"
            )


@dataclass(frozen=True)
class OrderSearch2D:
    """
    Result of a search over (AR order, MA order) pairs.

    Attributes:
        ar_orders: 1D integer array of candidate AR orders.
        ma_orders: 1D integer array of candidate MA orders.
        values: 2D array of shape (n_ar, n_ma); ``values[i, j]`` belongs to
            ``(ar_orders[i], ma_orders[j])``. Failed candidates hold +inf.
        criterion: "aic" or "bic".
        best_order: (p, q) pair with the smallest criterion value.
        best_fit: Fitted model at ``best_order``.
    """

    ar_orders: np.ndarray
    ma_orders: np.ndarray
    values: np.ndarray
    criterion: str
    best_order: Tuple[int, int]
    best_fit: Any

    def __post_init__(self) -> None:
        expected_shape = (self.ar_orders.shape[0], self.ma_orders.shape[0])
        if self.values.shape != expected_shape:
            raise ValueError(
                f"values must have shape (n_ar, n_ma) = {expected_shape}, "
                f"got {self.values.shape}"
            )


def _score(fit: Callable[[], Any], criterion: str, label: str) -> Tuple[float, Optional[Any]]:
    try:
        fitted = fit()
    except (EstimationError, InsufficientDataError) as exc:
        logger.warning("Skipping candidate %s: %s", label, exc)
        return float("inf"), None
    value = float(getattr(fitted, criterion))
    if not np.isfinite(value):
        value = float("inf")
    return value, fitted


def _best_index(values: np.ndarray, fits: List[Optional[Any]]) -> int:
    successful = [i for i, fitted in enumerate(fits) if fitted is not None]
    if not successful:
        raise OrderSelectionError("every candidate order failed to fit")
    return min(successful, key=lambda i: values[i])


def search_orders(
    orders: Sequence[int],
    fit: Callable[[int], Any],
    criterion: str = "aic",
) -> OrderSearch1D:
    """Fit every candidate order and keep the criterion minimizer.

    Args:
        orders: Candidate orders, tried in the given sequence.
        fit: Function mapping an order to a fitted model exposing ``aic`` and
            ``bic`` attributes.
        criterion: "aic" or "bic".

    Raises:
        OrderSelectionError: If no candidate could be fitted.
    """
    criterion = normalize_criterion(criterion)
    orders = np.asarray(list(orders), dtype=int)
    if orders.size == 0:
        raise ValueError("orders must be non-empty")

    values = np.full(orders.size, np.inf)
    fits: List[Optional[Any]] = []
    for i, order in enumerate(orders):
        values[i], fitted = _score(lambda: fit(int(order)), criterion, f"order={order}")
        fits.append(fitted)

    best = _best_index(values, fits)
    logger.info(
        "Selected order %d by %s (%s=%.6g)",
        orders[best],
        criterion.upper(),
        criterion,
        values[best],
    )
    return OrderSearch1D(
        orders=orders,
        values=values,
        criterion=criterion,
        best_order=int(orders[best]),
        best_fit=fits[best],
    )


def search_order_pairs(
    ar_orders: Sequence[int],
    ma_orders: Sequence[int],
    fit: Callable[[int, int], Any],
    criterion: str = "aic",
) -> OrderSearch2D:
    """Fit every (p, q) pair of the grid and keep the criterion minimizer.

    The grid is filled row-major: for each p in ``ar_orders``, every q in
    ``ma_orders``.

    Raises:
        OrderSelectionError: If no candidate could be fitted.
    """
    criterion = normalize_criterion(criterion)
    ar_orders = np.asarray(list(ar_orders), dtype=int)
    ma_orders = np.asarray(list(ma_orders), dtype=int)
    if ar_orders.size == 0 or ma_orders.size == 0:
        raise ValueError("ar_orders and ma_orders must be non-empty")

    shape = (ar_orders.size, ma_orders.size)
    flat_values = np.full(ar_orders.size * ma_orders.size, np.inf)
    fits: List[Optional[Any]] = []
    for i, p in enumerate(ar_orders):
        for j, q in enumerate(ma_orders):
            flat = int(np.ravel_multi_index((i, j), shape))
            flat_values[flat], fitted = _score(
                lambda: fit(int(p), int(q)), criterion, f"order=({p}, {q})"
            )
            fits.append(fitted)

    best = _best_index(flat_values, fits)
    i, j = np.unravel_index(best, shape)
    best_order = (int(ar_orders[i]), int(ma_orders[j]))
    logger.info(
        "Selected order %s by %s (%s=%.6g)",
        best_order,
        criterion.upper(),
        criterion,
        flat_values[best],
    )
    return OrderSearch2D(
        ar_orders=ar_orders,
        ma_orders=ma_orders,
        values=flat_values.reshape(shape),
        criterion=criterion,
        best_order=best_order,
        best_fit=fits[best],
    )


__all__ = ["OrderSearch1D", "OrderSearch2D", "search_orders", "search_order_pairs"]
