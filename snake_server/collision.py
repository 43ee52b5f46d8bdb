"""Collision helpers for the game server."""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Mapping, Set

from .snake import Snake
from .utils import Cell


def collides_with_other(snake: Snake, head: Cell, bodies: Mapping[str, Set[Cell]]) -> bool:
    """Return ``True`` if ``head`` hits a segment of a different snake.

    ``bodies`` maps snake ids to the cells they occupied at the start of the
    tick; heads computed during the same tick are not part of it.
    """

    return any(
        head in body for snake_id, body in bodies.items() if snake_id != snake.id
    )


def pre_tick_bodies(snakes: Iterable[Snake]) -> Dict[str, Set[Cell]]:
    """Snapshot the bodies of all live snakes as sets."""

    return {snake.id: set(snake.body) for snake in snakes if snake.alive}


def detect_head_on(candidates: Mapping[str, Cell]) -> List[str]:
    """Return the ids of snakes whose candidate heads share a cell."""

    counts = Counter(candidates.values())
    return [snake_id for snake_id, head in candidates.items() if counts[head] > 1]
