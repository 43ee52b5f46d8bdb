"""JSON protocol helpers for the websocket transport."""

from __future__ import annotations

from dataclasses import dataclass
import json
from typing import Any, Iterable, Optional, Union

from .food import Food
from .snake import Snake
from .utils import DIRECTIONS, Cell

MSG_INIT = "init"
MSG_PLAYER_JOINED = "playerJoined"
MSG_PLAYER_LEFT = "playerLeft"
MSG_UPDATE = "update"
MSG_MOVE = "move"
MSG_RESET = "reset"


class ProtocolError(ValueError):
    """Raised for client messages that cannot be decoded or understood."""


@dataclass(frozen=True)
class ClientMessage:
    """A decoded client command; ``direction`` is only set for moves."""

    type: str
    direction: Optional[Cell] = None


def parse_client_message(message: Union[str, bytes]) -> dict:
    """Parse a raw client ``message`` into a Python dictionary."""

    try:
        payload = json.loads(message)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ProtocolError("Invalid client message") from exc
    if not isinstance(payload, dict):
        raise ProtocolError("Client message must be a JSON object")
    return payload


def _coordinate(value: Any) -> int:
    # bool is a subclass of int, but true/false are not directions
    if isinstance(value, bool) or not isinstance(value, int):
        raise ProtocolError(f"Direction component must be an integer, got {value!r}")
    return value


def parse_direction(raw: Any) -> Cell:
    """Validate a ``{"x": .., "y": ..}`` object as one of the four directions."""

    if not isinstance(raw, dict):
        raise ProtocolError("Direction must be an object")
    try:
        direction = Cell(_coordinate(raw["x"]), _coordinate(raw["y"]))
    except KeyError as exc:
        raise ProtocolError(f"Direction is missing {exc.args[0]!r}") from exc
    if direction not in DIRECTIONS:
        raise ProtocolError(f"Direction {direction.to_dict()} is not a unit vector")
    return direction


def decode_client_message(message: Union[str, bytes]) -> ClientMessage:
    """Decode and validate a client command."""

    payload = parse_client_message(message)
    kind = payload.get("type")
    if kind == MSG_MOVE:
        return ClientMessage(MSG_MOVE, parse_direction(payload.get("direction")))
    if kind == MSG_RESET:
        return ClientMessage(MSG_RESET)
    raise ProtocolError(f"Unknown message type {kind!r}")


def encode(payload: dict) -> str:
    return json.dumps(payload, separators=(",", ":"))


def encode_init(player_id: str, color: str) -> str:
    """Encode the greeting sent to a player that just connected."""

    return encode({"type": MSG_INIT, "playerId": player_id, "color": color})


def encode_player_joined(player_id: str) -> str:
    return encode({"type": MSG_PLAYER_JOINED, "playerId": player_id})


def encode_player_left(player_id: str) -> str:
    return encode({"type": MSG_PLAYER_LEFT, "playerId": player_id})


def encode_update(tick: int, snakes: Iterable[Snake], food: Iterable[Food]) -> str:
    """Encode the full world state broadcast after every tick."""

    return encode(
        {
            "type": MSG_UPDATE,
            "tick": tick,
            "players": [snake.to_snapshot() for snake in snakes],
            "food": [item.to_dict() for item in food],
        }
    )
