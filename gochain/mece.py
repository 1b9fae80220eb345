"""Find stretches of a target range left uncovered by a list of ideas."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True, order=True)
class Area:
    """A range from ``low`` to ``high``."""

    low: int
    high: int


def find_gaps(ideas: Iterable[Area], target: Area) -> list[Area]:
    """Return the parts of ``target`` that the ideas, taken in order, miss."""
    gaps: list[Area] = []
    covered = target.low
    for idea in ideas:
        if covered < idea.low:
            gaps.append(Area(covered, idea.low))
        if covered < idea.high:
            covered = idea.high
    if covered < target.high:
        gaps.append(Area(covered, target.high))
    return gaps