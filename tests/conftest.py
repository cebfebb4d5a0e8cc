"""Shared fixtures for libmilight tests."""

import asyncio
from typing import Any, List, Tuple

import pytest
from libmilight import Command, CommandSender


class RecordingSender(CommandSender):
    """Sender that records commands instead of touching the network."""

    def __init__(self, events: List[Tuple[str, Any]]):
        self.events = events
        self.sent: List[Tuple[str, int, Command]] = []

    async def send(self, host: str, port: int, command: Command) -> None:
        self.sent.append((host, port, command))
        self.events.append(("send", command))

    @property
    def commands(self) -> List[Command]:
        return [command for _, _, command in self.sent]


class RecordingDelay:
    """Delay that records the requested pause and yields once to the loop."""

    def __init__(self, events: List[Tuple[str, Any]]):
        self.events = events
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        self.events.append(("delay", seconds))
        await asyncio.sleep(0)


@pytest.fixture
def events() -> List[Tuple[str, Any]]:
    """Ordered log of sends and delays."""
    return []


@pytest.fixture
def sender(events) -> RecordingSender:
    return RecordingSender(events)


@pytest.fixture
def delay(events) -> RecordingDelay:
    return RecordingDelay(events)
