"""Process simulators used to generate synthetic series.

Noise comes from a :data:`NoiseSource`, a callable ``(mean, std_dev, size)``
returning independent draws. :func:`gaussian_noise` wraps a
``numpy.random.Generator``; any other callable with the same signature can be
plugged in.

Each simulator draws ``length + p + q`` noise values, applies the MA filter
and then the AR filter, and discards the first ``p + q`` values as burn-in.
Integrated models are re-integrated after the burn-in is removed.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

import numpy as np

from .exceptions import InvalidOrderError
from .transforms import fractional_integrate, inverse_difference, split_order

NoiseSource = Callable[[float, float, int], np.ndarray]


def gaussian_noise(
    rng: Optional[np.random.Generator] = None, seed: Optional[int] = None
) -> NoiseSource:
    """Build a Gaussian noise source.

    Args:
        rng: Generator to draw from. If None, a new one is created from
            ``seed``.
        seed: Seed for the new generator when ``rng`` is None.

    Example:
        >>> sample = gaussian_noise(seed=0)
        >>> sample(0.0, 1.0, 3).shape
        (3,)
    """
    generator = rng if rng is not None else np.random.default_rng(seed)

    def sample(mean: float, std_dev: float, size: int) -> np.ndarray:
        return generator.normal(loc=mean, scale=std_dev, size=size)

    return sample


def _draw(
    noise: Optional[NoiseSource],
    seed: Optional[int],
    noise_mean: float,
    noise_variance: float,
    size: int,
) -> np.ndarray:
    if noise_variance < 0:
        raise ValueError(f"noise_variance must be >= 0, got {noise_variance}")
    source = noise if noise is not None else gaussian_noise(seed=seed)
    values = np.asarray(source(noise_mean, float(np.sqrt(noise_variance)), size), dtype=float)
    if values.shape != (size,):
        raise ValueError(f"noise source returned shape {values.shape}, expected ({size},)")
    return values


def _arma_filter(eps: np.ndarray, phi: np.ndarray, theta: np.ndarray) -> np.ndarray:
    p, q = len(phi), len(theta)
    total = len(eps)
    output = eps.copy()
    for t in range(q, total):
        output[t] += np.dot(theta, eps[t - q : t][::-1])
    if p > 0:
        for t in range(p + q, total):
            output[t] += np.dot(phi, output[t - p : t][::-1])
    return output


def simulate_arma(
    length: int,
    phi: Sequence[float],
    theta: Sequence[float],
    noise_mean: float = 0.0,
    noise_variance: float = 1.0,
    noise: Optional[NoiseSource] = None,
    seed: Optional[int] = None,
) -> np.ndarray:
    """Simulate an ARMA(p, q) process.

    Args:
        length: Number of observations to return. Must be >= 1.
        phi: AR coefficients [φ_1, ..., φ_p].
        theta: MA coefficients [θ_1, ..., θ_q].
        noise_mean: Mean of the innovations.
        noise_variance: Variance of the innovations. Must be >= 0.
        noise: Optional noise source; defaults to Gaussian noise from a
            generator seeded with ``seed``.
        seed: Seed used when ``noise`` is None.

    Returns:
        Simulated series of shape (length,).

    Example:
        >>> x = simulate_arma(500, [0.5], [0.3], seed=0)
        >>> x.shape
        (500,)
    """
    if length < 1:
        raise ValueError(f"length must be >= 1, got {length}")
    phi = np.asarray(phi, dtype=float).ravel()
    theta = np.asarray(theta, dtype=float).ravel()
    burn = len(phi) + len(theta)
    eps = _draw(noise, seed, noise_mean, noise_variance, length + burn)
    return _arma_filter(eps, phi, theta)[burn:]


def simulate_ar(
    length: int,
    phi: Sequence[float],
    noise_mean: float = 0.0,
    noise_variance: float = 1.0,
    noise: Optional[NoiseSource] = None,
    seed: Optional[int] = None,
) -> np.ndarray:
    """Simulate an AR(p) process; see :func:`simulate_arma`."""
    return simulate_arma(length, phi, [], noise_mean, noise_variance, noise, seed)


def simulate_ma(
    length: int,
    theta: Sequence[float],
    noise_mean: float = 0.0,
    noise_variance: float = 1.0,
    noise: Optional[NoiseSource] = None,
    seed: Optional[int] = None,
) -> np.ndarray:
    """Simulate an MA(q) process; see :func:`simulate_arma`."""
    return simulate_arma(length, [], theta, noise_mean, noise_variance, noise, seed)


def simulate_arima(
    length: int,
    phi: Sequence[float],
    d: int,
    theta: Sequence[float],
    noise_mean: float = 0.0,
    noise_variance: float = 1.0,
    noise: Optional[NoiseSource] = None,
    seed: Optional[int] = None,
) -> np.ndarray:
    """Simulate an ARIMA(p, d, q) process.

    An ARMA series of length ``length - d`` is integrated d times, so the
    result has ``length`` observations and starts from zero.
    """
    if isinstance(d, bool) or not isinstance(d, (int, np.integer)) or d < 0:
        raise InvalidOrderError(f"d must be a non-negative integer, got {d!r}")
    if length <= d:
        raise ValueError(f"length must exceed d={d}, got {length}")
    base = simulate_arma(length - d, phi, theta, noise_mean, noise_variance, noise, seed)
    if d == 0:
        return base
    return inverse_difference(base, int(d))


def simulate_farima(
    length: int,
    phi: Sequence[float],
    d: float,
    theta: Sequence[float],
    noise_mean: float = 0.0,
    noise_variance: float = 1.0,
    noise: Optional[NoiseSource] = None,
    seed: Optional[int] = None,
) -> np.ndarray:
    """Simulate a fractionally integrated ARFIMA(p, d, q) process.

    The ARMA series is fractionally integrated by the fractional part of d
    and then integrated by its integer part.
    """
    k, fraction = split_order(d)
    if length <= k:
        raise ValueError(f"length must exceed the integer part of d={d}, got {length}")
    series = simulate_arma(length - k, phi, theta, noise_mean, noise_variance, noise, seed)
    if fraction > 0.0:
        series = fractional_integrate(series, fraction)
    if k > 0:
        series = inverse_difference(series, k)
    return series


__all__ = [
    "NoiseSource",
    "gaussian_noise",
    "simulate_arma",
    "simulate_ar",
    "simulate_ma",
    "simulate_arima",
    "simulate_farima",
]
