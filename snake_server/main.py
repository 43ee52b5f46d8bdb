"""Entry point for the asyncio based game server."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from typing import Optional, Union

from websockets.asyncio.server import ServerConnection, serve
from websockets.exceptions import ConnectionClosed

from . import constants, protocol
from .registry import ConnectionRegistry, Transport
from .scheduler import TickScheduler
from .world import World


class GameServer:
    """High level orchestration of the world simulation and websocket IO.

    Every state change happens in one of the ``on_*`` handlers or in
    :meth:`tick`, all of which run on the event loop and do not await while
    the world is being mutated.
    """

    def __init__(
        self,
        host: str = constants.DEFAULT_HOST,
        port: int = constants.DEFAULT_PORT,
        world: Optional[World] = None,
        tick_interval: float = constants.TICK_INTERVAL,
    ) -> None:
        self.host = host
        self.port = port
        self.world = world or World()
        self.registry = ConnectionRegistry()
        self.scheduler = TickScheduler(tick_interval, self.tick, on_error=self._on_tick_error)
        self.exit_code = 0
        self.ready = asyncio.Event()
        self._shutdown = asyncio.Event()

    async def on_join(self, connection: Transport) -> str:
        player = self.registry.register(connection)
        self.world.add_snake(player.id, player.color)
        logging.info("Player %s connected (%d online)", player.id, len(self.registry))
        await self.registry.send(player.id, protocol.encode_init(player.id, player.color))
        await self.registry.broadcast(protocol.encode_player_joined(player.id), exclude=player.id)
        self.scheduler.start()
        return player.id

    def on_message(self, player_id: str, message: Union[str, bytes]) -> None:
        try:
            command = protocol.decode_client_message(message)
        except protocol.ProtocolError as exc:
            logging.warning("Dropping message from %s: %s", player_id, exc)
            return
        if command.type == protocol.MSG_MOVE:
            self.world.set_direction(player_id, command.direction)
        elif command.type == protocol.MSG_RESET:
            if self.world.reset_snake(player_id) is not None:
                logging.info("Player %s restarted", player_id)

    async def on_close(self, player_id: str) -> None:
        if self.registry.unregister(player_id) is None:
            return
        self.world.remove_snake(player_id)
        logging.info("Player %s disconnected (%d online)", player_id, len(self.registry))
        if not self.registry:
            self.scheduler.stop()
            self.world.clear_food()
            return
        await self.registry.broadcast(protocol.encode_player_left(player_id))

    async def tick(self) -> None:
        self.world.update()
        await self.registry.broadcast(self.world.encode_update())

    async def _handle_client(self, websocket: ServerConnection) -> None:
        player_id = await self.on_join(websocket)
        try:
            async for message in websocket:
                self.on_message(player_id, message)
        except ConnectionClosed as exc:
            logging.info("Connection of player %s lost: %s", player_id, exc)
        finally:
            await self.on_close(player_id)

    def _on_tick_error(self, exc: BaseException) -> None:
        self.exit_code = 1
        self.request_shutdown()

    def request_shutdown(self) -> None:
        self._shutdown.set()

    def _install_signal_handlers(self) -> list[signal.Signals]:
        loop = asyncio.get_running_loop()
        installed = []
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.request_shutdown)
            except (NotImplementedError, RuntimeError):
                # e.g. Windows, or not running in the main thread
                continue
            installed.append(sig)
        return installed

    async def start(self) -> int:
        """Serve clients until a shutdown is requested, then drain them."""

        installed = self._install_signal_handlers()
        loop = asyncio.get_running_loop()
        try:
            async with serve(self._handle_client, self.host, self.port) as server:
                sockets = list(server.sockets)
                if sockets:
                    self.port = sockets[0].getsockname()[1]
                logging.info("Server listening on ws://%s:%s", self.host, self.port)
                self.ready.set()
                await self._shutdown.wait()
                logging.info("Shutting down")
                self.scheduler.stop()
                await self.registry.close_all()
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)
        return self.exit_code


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the multiplayer snake server")
    parser.add_argument("--host", default=constants.DEFAULT_HOST, help="Host interface to bind to")
    parser.add_argument("--port", type=int, default=constants.DEFAULT_PORT, help="Port to listen on")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


async def run_server(host: str, port: int) -> int:
    server = GameServer(host, port)
    return await server.start()


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="[%(levelname)s] %(message)s")
    sys.exit(asyncio.run(run_server(args.host, args.port)))


if __name__ == "__main__":
    main()
