"""Food entity definition."""

from __future__ import annotations

from dataclasses import dataclass

from .utils import Cell


@dataclass(frozen=True)
class Food:
    """A consumable item that grows the snake eating it."""

    position: Cell

    @classmethod
    def at(cls, x: int, y: int) -> "Food":
        """Create food at ``(x, y)``."""

        return cls(position=Cell(x, y))

    def to_dict(self) -> dict[str, int]:
        """Serialise the food to a JSON friendly dictionary."""

        return self.position.to_dict()
