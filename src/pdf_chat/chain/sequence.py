"""Sequential composition of pipeline steps.

A step is any ``(input) -> output`` callable.  A :class:`StepSequence`
feeds the output of each step to the next, which is all the pipeline
needs: rewrite → search → format is three plain function calls.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

Step = Callable[[Any], Any]


class StepSequence:
    """An ordered, immutable list of steps applied one after another."""

    def __init__(self, *steps: Step) -> None:
        if not steps:
            raise ValueError("StepSequence needs at least one step")
        self.steps: tuple[Step, ...] = steps

    def __call__(self, value: Any) -> Any:
        for step in self.steps:
            logger.debug("Running step %s", _step_name(step))
            value = step(value)
        return value

    def __len__(self) -> int:
        return len(self.steps)

    def __repr__(self) -> str:
        return f"StepSequence({' -> '.join(_step_name(s) for s in self.steps)})"


def _step_name(step: Step) -> str:
    name = getattr(step, "__qualname__", None) or getattr(step, "__name__", None)
    if name is None:
        # functools.partial and other wrappers
        name = _step_name(step.func) if hasattr(step, "func") else type(step).__name__
    return name
