"""Configuration objects for the iterative estimators."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class CSSConfig:
    """
    Settings for conditional-sum-of-squares fitting.

    Args:
        max_iterations: Upper bound on L-BFGS iterations. Defaults to 200.
        memory: Number of correction pairs kept by L-BFGS. Defaults to 6.
        gtol: Relative gradient tolerance; the search stops once
            ``||g|| <= gtol * max(1, ||x||)``. Defaults to 1e-5.
        diff_step: Step used for forward-difference gradients. Defaults to the
            square root of double-precision machine epsilon.
        max_line_search: Maximum trial steps per line search. Defaults to 40.
    """

    max_iterations: int = 200
    memory: int = 6
    gtol: float = 1e-5
    diff_step: float = float(np.sqrt(np.finfo(float).eps))
    max_line_search: int = 40

    def __post_init__(self) -> None:
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.memory < 1:
            raise ValueError(f"memory must be >= 1, got {self.memory}")
        if self.gtol <= 0.0:
            raise ValueError(f"gtol must be positive, got {self.gtol}")
        if self.diff_step <= 0.0:
            raise ValueError(f"diff_step must be positive, got {self.diff_step}")
        if self.max_line_search < 1:
            raise ValueError(
                f"max_line_search must be >= 1, got {self.max_line_search}"
            )


DEFAULT_CSS_CONFIG = CSSConfig()

__all__ = ["CSSConfig", "DEFAULT_CSS_CONFIG"]
