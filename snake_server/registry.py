"""Bookkeeping of the live websocket connections."""

from __future__ import annotations

from dataclasses import dataclass
import asyncio
import itertools
import logging
from typing import Dict, Optional, Protocol, Sequence, Union
import uuid

from websockets.exceptions import ConnectionClosed

from . import constants, protocol


class Transport(Protocol):
    """The part of a websocket connection the registry relies on."""

    async def send(self, message: str) -> None: ...

    async def close(self) -> None: ...


@dataclass
class Player:
    """A joined connection together with its identity and display color."""

    id: str
    color: str
    connection: Transport


class ConnectionRegistry:
    """Maps player identities to their transport handles."""

    def __init__(
        self,
        palette: Sequence[str] = constants.PALETTE,
        send_timeout: float = constants.SEND_TIMEOUT,
    ) -> None:
        self._players: Dict[str, Player] = {}
        self._colors = itertools.cycle(palette)
        self.send_timeout = send_timeout

    def __len__(self) -> int:
        return len(self._players)

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._players

    def register(self, connection: Transport) -> Player:
        player = Player(id=uuid.uuid4().hex, color=next(self._colors), connection=connection)
        self._players[player.id] = player
        return player

    def unregister(self, player_id: str) -> Optional[Player]:
        return self._players.pop(player_id, None)

    async def send(self, player_id: str, payload: Union[str, dict]) -> bool:
        """Send ``payload`` to a single player; failures are logged."""

        player = self._players.get(player_id)
        if player is None:
            return False
        message = payload if isinstance(payload, str) else protocol.encode(payload)
        return await self._deliver(player, message)

    async def broadcast(self, payload: Union[str, dict], exclude: Optional[str] = None) -> int:
        """Send ``payload`` to every player and return the number of deliveries.

        The payload is serialised once and written to all recipients
        concurrently. A failing or stalled recipient does not hold up the
        others; a stalled one costs at most ``send_timeout``.
        """

        message = payload if isinstance(payload, str) else protocol.encode(payload)
        recipients = [player for player in self._players.values() if player.id != exclude]
        results = await asyncio.gather(*(self._deliver(player, message) for player in recipients))
        return sum(results)

    async def _deliver(self, player: Player, message: str) -> bool:
        try:
            await asyncio.wait_for(player.connection.send(message), timeout=self.send_timeout)
        except asyncio.TimeoutError:
            logging.warning("Player %s is not reading, dropped a message", player.id)
            return False
        except ConnectionClosed:
            logging.debug("Player %s is gone, skipping send", player.id)
            return False
        except Exception:
            logging.exception("Failed to send to player %s", player.id)
            return False
        return True

    async def close_all(self) -> None:
        """Close every transport handle, used when the server shuts down."""

        for player in list(self._players.values()):
            try:
                await player.connection.close()
            except Exception:
                logging.exception("Failed to close connection of player %s", player.id)
