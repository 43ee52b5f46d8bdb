"""Authoritative game world simulation."""

from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional, Set

from . import collision, constants, protocol, utils
from .food import Food
from .snake import Snake
from .utils import Cell


class SimulationError(RuntimeError):
    """The world reached a state its update rules should have prevented."""


class World:
    """Holds all entities and advances the simulation on every tick.

    Snakes are kept in join order; every per-tick pass iterates them in that
    order so a seeded ``rng`` makes a whole game reproducible.
    """

    def __init__(
        self,
        grid_size: int = constants.GRID_SIZE,
        min_food: int = constants.MIN_FOOD,
        reward: int = constants.FOOD_REWARD,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.grid_size = grid_size
        self.min_food = min_food
        self.reward = reward
        self.rng = rng or random.Random()
        self.tick: int = 0
        self.snakes: Dict[str, Snake] = {}
        self.food: List[Food] = []

    def occupied_cells(self) -> Set[Cell]:
        cells: Set[Cell] = set()
        for snake in self.snakes.values():
            cells.update(snake.body)
        return cells

    def _free_cell(self, margin: int = 0) -> Optional[Cell]:
        occupied = self.occupied_cells()
        occupied.update(item.position for item in self.food)
        return utils.find_free_cell(
            self.grid_size, occupied, self.rng, constants.SPAWN_ATTEMPTS, margin
        )

    def spawn_food(self) -> Optional[Food]:
        cell = self._free_cell()
        if cell is None:
            logging.warning("No free cell left for food")
            return None
        item = Food(cell)
        self.food.append(item)
        return item

    def ensure_food(self) -> None:
        """Top the food up to the configured minimum."""

        while len(self.food) < self.min_food:
            if self.spawn_food() is None:
                break

    def clear_food(self) -> None:
        self.food.clear()

    def add_snake(self, snake_id: str, color: str) -> Snake:
        if snake_id in self.snakes:
            raise KeyError(f"Snake {snake_id} already exists")
        head = self._free_cell(constants.SPAWN_MARGIN)
        snake = Snake.spawn(snake_id, color, self.grid_size, self.rng, head=head)
        self.snakes[snake_id] = snake
        if not self.food:
            self.ensure_food()
        return snake

    def remove_snake(self, snake_id: str) -> Optional[Snake]:
        return self.snakes.pop(snake_id, None)

    def reset_snake(self, snake_id: str) -> Optional[Snake]:
        """Respawn the snake of ``snake_id`` with a fresh body and zero score."""

        snake = self.snakes.get(snake_id)
        if snake is None:
            return None
        # the old body must not block its own respawn
        snake.body = []
        head = self._free_cell(constants.SPAWN_MARGIN)
        if head is None:
            head = utils.random_cell(self.grid_size, self.rng, constants.SPAWN_MARGIN)
        snake.respawn(head)
        return snake

    def set_direction(self, snake_id: str, direction: Cell) -> bool:
        snake = self.snakes.get(snake_id)
        if snake is None:
            return False
        return snake.set_pending_direction(direction)

    def update(self) -> None:
        """Advance every live snake by one cell and resolve the outcome."""

        self.tick += 1
        live = [snake for snake in self.snakes.values() if snake.alive]
        bodies = collision.pre_tick_bodies(live)

        candidates: Dict[str, Cell] = {}
        for snake in live:
            head, kind = snake.plan_move(self.grid_size)
            if kind is not None:
                self._kill(snake, kind)
                continue
            candidates[snake.id] = head

        for snake_id, head in list(candidates.items()):
            snake = self.snakes[snake_id]
            if collision.collides_with_other(snake, head, bodies):
                self._kill(snake, "other")
                del candidates[snake_id]

        for snake_id in collision.detect_head_on(candidates):
            self._kill(self.snakes[snake_id], "head-on")
            del candidates[snake_id]

        eaten = 0
        food_at = {item.position: item for item in self.food}
        for snake_id, head in candidates.items():
            snake = self.snakes[snake_id]
            item = food_at.pop(head, None)
            if item is not None:
                self.food.remove(item)
                snake.score += self.reward
                eaten += 1
                logging.debug("Snake %s ate food at %s, score %s", snake_id, head, snake.score)
            snake.advance(head, grow=item is not None)

        for _ in range(eaten):
            self.spawn_food()
        self.ensure_food()
        self._check_bounds()

    def _kill(self, snake: Snake, reason: str) -> None:
        snake.kill(reason)
        logging.info("Snake %s died (%s) with score %s", snake.id, reason, snake.score)

    def _check_bounds(self) -> None:
        for snake in self.snakes.values():
            if not snake.alive:
                continue
            for cell in snake.body:
                if not cell.in_bounds(self.grid_size):
                    raise SimulationError(
                        f"Snake {snake.id} has segment {cell} outside the {self.grid_size} grid"
                    )

    def encode_update(self) -> str:
        return protocol.encode_update(self.tick, self.snakes.values(), self.food)
