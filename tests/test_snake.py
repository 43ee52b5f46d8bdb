import random

import pytest

from snake_server import constants, utils
from snake_server.snake import Snake
from snake_server.utils import Cell


def make_snake(*cells, direction=utils.RIGHT):
    return Snake(id="s1", color="#FF6B6B", body=[Cell(x, y) for x, y in cells], direction=direction)


def test_spawn_stays_away_from_the_walls():
    rng = random.Random(7)
    low = constants.SPAWN_MARGIN
    high = constants.GRID_SIZE - 1 - constants.SPAWN_MARGIN
    for _ in range(200):
        snake = Snake.spawn("s1", "#FF6B6B", constants.GRID_SIZE, rng)
        assert len(snake) == 1
        assert low <= snake.head.x <= high
        assert low <= snake.head.y <= high
        assert snake.direction == utils.RIGHT
        assert snake.pending_direction == utils.RIGHT
        assert snake.alive and snake.score == 0


def test_empty_body_is_rejected():
    with pytest.raises(ValueError):
        Snake(id="s1", color="#FF6B6B", body=[])


def test_reversal_is_ignored():
    snake = make_snake((10, 10), (9, 10))
    assert snake.set_pending_direction(utils.LEFT) is False
    assert snake.pending_direction == utils.RIGHT


def test_perpendicular_turn_is_queued_until_next_move():
    snake = make_snake((10, 10), (9, 10))
    assert snake.set_pending_direction(utils.UP) is True
    assert snake.direction == utils.RIGHT
    assert snake.pending_direction == utils.UP


def test_reversal_is_checked_against_committed_direction():
    snake = make_snake((10, 10), (9, 10))
    snake.set_pending_direction(utils.DOWN)
    # UP is the opposite of the queued DOWN, but not of the current RIGHT
    assert snake.set_pending_direction(utils.UP) is True
    assert snake.set_pending_direction(utils.LEFT) is False
    assert snake.pending_direction == utils.UP


def test_dead_snake_ignores_input():
    snake = make_snake((10, 10))
    snake.kill("wall")
    assert snake.set_pending_direction(utils.UP) is False
    assert snake.pending_direction == utils.RIGHT


def test_plan_move_commits_direction_without_touching_body():
    snake = make_snake((10, 10), (9, 10))
    snake.set_pending_direction(utils.DOWN)
    head, kind = snake.plan_move(constants.GRID_SIZE)
    assert head == Cell(10, 11)
    assert kind is None
    assert snake.direction == utils.DOWN
    assert snake.body == [Cell(10, 10), Cell(9, 10)]


def test_plan_move_reports_wall():
    snake = make_snake((0, 5), direction=utils.LEFT)
    head, kind = snake.plan_move(constants.GRID_SIZE)
    assert head == Cell(-1, 5)
    assert kind == "wall"


def test_plan_move_reports_self_collision():
    # a loop where turning up runs into the snake's own body
    snake = make_snake((5, 5), (5, 6), (6, 6), (6, 5), (6, 4), (5, 4))
    snake.set_pending_direction(utils.UP)
    _, kind = snake.plan_move(constants.GRID_SIZE)
    assert kind == "self"


def test_tail_cell_still_counts_for_self_collision():
    snake = make_snake((5, 5), (5, 6), (6, 6), (6, 5))
    _, kind = snake.plan_move(constants.GRID_SIZE)
    assert kind == "self"


def test_advance_pops_tail_unless_growing():
    snake = make_snake((10, 10), (9, 10))
    snake.advance(Cell(11, 10))
    assert snake.body == [Cell(11, 10), Cell(10, 10)]
    snake.advance(Cell(12, 10), grow=True)
    assert snake.body == [Cell(12, 10), Cell(11, 10), Cell(10, 10)]


def test_advance_does_nothing_once_dead():
    snake = make_snake((10, 10))
    snake.kill("other")
    snake.advance(Cell(11, 10))
    assert snake.body == [Cell(10, 10)]
    assert snake.death_reason == "other"


def test_respawn_restores_defaults_but_keeps_identity():
    snake = make_snake((10, 10), (9, 10), direction=utils.UP)
    snake.score = 40
    snake.kill("self")
    snake.respawn(Cell(15, 15))
    assert snake.id == "s1" and snake.color == "#FF6B6B"
    assert snake.body == [Cell(15, 15)]
    assert snake.direction == utils.RIGHT
    assert snake.alive and snake.score == 0 and snake.death_reason is None


def test_snapshot_shape():
    snake = make_snake((3, 4), (2, 4))
    snake.score = 20
    assert snake.to_snapshot() == {
        "id": "s1",
        "snake": {
            "body": [{"x": 3, "y": 4}, {"x": 2, "y": 4}],
            "direction": {"x": 1, "y": 0},
            "alive": True,
        },
        "color": "#FF6B6B",
        "score": 20,
    }
