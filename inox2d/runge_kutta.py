"""Fourth-order Runge-Kutta integration of a small state vector."""

from __future__ import annotations

from typing import Any, Callable

import numpy as np


class PhysicsState:
    """State variables and their derivatives, both of fixed length."""

    def __init__(self, size: int) -> None:
        self.vars = np.zeros(size, dtype=float)
        self.derivatives = np.zeros(size, dtype=float)

    def tick(
        self,
        eval_fn: Callable[["PhysicsState", Any, Any, float], None],
        props: Any,
        anchor: Any,
        t: float,
        h: float,
    ) -> None:
        """Advance by ``h``; ``eval_fn`` writes derivatives from the current vars.

        If the result is not finite the state is left unchanged.
        """
        curs = self.vars.copy()
        self.derivatives = np.zeros_like(curs)

        eval_fn(self, props, anchor, t)
        k1 = np.array(self.derivatives, dtype=float)

        self.vars = curs + h * k1 / 2.0
        eval_fn(self, props, anchor, t + h / 2.0)
        k2 = np.array(self.derivatives, dtype=float)

        self.vars = curs + h * k2 / 2.0
        eval_fn(self, props, anchor, t + h / 2.0)
        k3 = np.array(self.derivatives, dtype=float)

        self.vars = curs + h * k3
        eval_fn(self, props, anchor, t + h)
        k4 = np.array(self.derivatives, dtype=float)

        with np.errstate(all="ignore"):
            result = curs + h * (k1 + 2.0 * k2 + 2.0 * k3 + k4) / 6.0
        self.vars = result if np.all(np.isfinite(result)) else curs