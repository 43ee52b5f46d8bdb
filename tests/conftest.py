import asyncio
import json
import os
import random
import sys

import pytest

# Ensure the repository root (containing the `snake_server` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
REPO_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from snake_server.world import World  # noqa: E402


class FakeConnection:
    """Stands in for a websocket connection and records what it was sent."""

    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []
        self.closed = False

    async def send(self, message):
        if self.fail:
            raise OSError("broken pipe")
        self.sent.append(json.loads(message))

    async def close(self):
        self.closed = True

    def types(self):
        return [payload["type"] for payload in self.sent]


class StalledConnection(FakeConnection):
    """A peer that stopped reading: every send waits forever."""

    async def send(self, message):
        await asyncio.Event().wait()


@pytest.fixture()
def make_connection():
    return FakeConnection


@pytest.fixture()
def stalled_connection():
    return StalledConnection


@pytest.fixture()
def world():
    return World(rng=random.Random(1234))
