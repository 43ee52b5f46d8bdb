"""Grid geometry primitives used by the authoritative game server."""

from __future__ import annotations

from dataclasses import dataclass
import random
from typing import Iterable, Iterator, List, Optional, Set


@dataclass(frozen=True)
class Cell:
    """An integer grid coordinate, also used for unit direction vectors.

    Cells are immutable and hashable so bodies and food can be compared with
    plain equality and collected into sets inside the hot update loop.
    """

    x: int
    y: int

    def __add__(self, other: "Cell") -> "Cell":
        return Cell(self.x + other.x, self.y + other.y)

    def in_bounds(self, grid_size: int) -> bool:
        """Return ``True`` if the cell lies inside a ``grid_size`` square."""

        return 0 <= self.x < grid_size and 0 <= self.y < grid_size

    def is_opposite(self, other: "Cell") -> bool:
        return self.x == -other.x and self.y == -other.y

    def to_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y}


UP = Cell(0, -1)
DOWN = Cell(0, 1)
LEFT = Cell(-1, 0)
RIGHT = Cell(1, 0)
DIRECTIONS = (UP, DOWN, LEFT, RIGHT)


def random_cell(grid_size: int, rng: random.Random, margin: int = 0) -> Cell:
    """Return a random cell at least ``margin`` cells away from every wall."""

    low = margin
    high = grid_size - 1 - margin
    if high < low:
        low, high = 0, grid_size - 1
    return Cell(rng.randint(low, high), rng.randint(low, high))


def iter_cells(grid_size: int) -> Iterator[Cell]:
    """Yield every cell of the grid in row-major order."""

    for y in range(grid_size):
        for x in range(grid_size):
            yield Cell(x, y)


def find_free_cell(
    grid_size: int,
    occupied: Set[Cell],
    rng: random.Random,
    attempts: int,
    margin: int = 0,
) -> Optional[Cell]:
    """Return a random cell not in ``occupied``.

    Random placement is retried ``attempts`` times; after that the helper
    falls back to picking among the remaining free cells so that a crowded
    grid still gets a placement. ``None`` means the grid is full.
    """

    for _ in range(attempts):
        cell = random_cell(grid_size, rng, margin)
        if cell not in occupied:
            return cell
    free: List[Cell] = [cell for cell in iter_cells(grid_size) if cell not in occupied]
    if not free:
        return None
    return rng.choice(free)


def cells_to_dicts(cells: Iterable[Cell]) -> List[dict[str, int]]:
    return [cell.to_dict() for cell in cells]
