"""Snake entity implementation."""

from __future__ import annotations

from dataclasses import dataclass, field
import random
from typing import List, Optional, Tuple

from . import constants, utils
from .utils import Cell


@dataclass
class Snake:
    """Authoritative representation of a snake controlled by a player."""

    id: str
    color: str
    body: List[Cell]
    direction: Cell = utils.RIGHT
    pending_direction: Optional[Cell] = None
    alive: bool = True
    score: int = 0
    death_reason: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.body:
            raise ValueError("A snake needs at least one body segment")
        if self.pending_direction is None:
            self.pending_direction = self.direction

    @classmethod
    def spawn(
        cls,
        snake_id: str,
        color: str,
        grid_size: int = constants.GRID_SIZE,
        rng: Optional[random.Random] = None,
        head: Optional[Cell] = None,
    ) -> "Snake":
        """Create a one segment snake at a random interior cell heading right."""

        if head is None:
            head = utils.random_cell(grid_size, rng or random.Random(), constants.SPAWN_MARGIN)
        return cls(id=snake_id, color=color, body=[head])

    @property
    def head(self) -> Cell:
        return self.body[0]

    def __len__(self) -> int:
        return len(self.body)

    def set_pending_direction(self, direction: Cell) -> bool:
        """Queue ``direction`` for the next tick.

        A direct reversal of the committed direction would run the head into
        the neck, so it is ignored. Returns whether the input was accepted.
        """

        if not self.alive or direction.is_opposite(self.direction):
            return False
        self.pending_direction = direction
        return True

    def plan_move(self, grid_size: int) -> Tuple[Cell, Optional[str]]:
        """Commit the pending direction and compute the candidate head.

        The body is left untouched. The second element is ``"wall"`` or
        ``"self"`` when the candidate head is fatal, ``None`` otherwise.
        """

        self.direction = self.pending_direction
        candidate = self.head + self.direction
        if not candidate.in_bounds(grid_size):
            return candidate, "wall"
        if candidate in self.body:
            return candidate, "self"
        return candidate, None

    def advance(self, head: Cell, grow: bool = False) -> None:
        """Move onto ``head``; the tail is kept only when ``grow`` is set."""

        if not self.alive:
            return
        self.body.insert(0, head)
        if not grow:
            self.body.pop()

    def kill(self, reason: str) -> None:
        """Mark the snake as dead."""

        self.alive = False
        self.death_reason = reason

    def respawn(self, head: Cell) -> None:
        """Respawn the snake at ``head`` with default properties."""

        self.body = [head]
        self.direction = utils.RIGHT
        self.pending_direction = utils.RIGHT
        self.alive = True
        self.score = 0
        self.death_reason = None

    def to_snapshot(self) -> dict:
        """Return a snapshot representation for clients."""

        return {
            "id": self.id,
            "snake": {
                "body": utils.cells_to_dicts(self.body),
                "direction": self.direction.to_dict(),
                "alive": self.alive,
            },
            "color": self.color,
            "score": self.score,
        }
