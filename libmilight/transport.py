"""
UDP transport for MiLight bridge commands.

Commands are fire-and-forget: each one is sent as a single 3-byte datagram
from a socket that is opened for that send and closed right after. Nothing
is read back from the bridge. Send failures are logged and dropped.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional

from .codec import Command


# Default bridge address used by the adapter when nothing is configured
DEFAULT_BRIDGE_HOST = "192.168.0.66"
DEFAULT_BRIDGE_PORT = 80


class CommandSender(ABC):
    """
    Abstract base class for command transports.

    Implementations deliver one command to a bridge endpoint. They must not
    raise on delivery failure.
    """

    @abstractmethod
    async def send(self, host: str, port: int, command: Command) -> None:
        """
        Deliver a command to the bridge.

        Args:
            host: Bridge hostname or IP address.
            port: Bridge UDP port.
            command: The command to send.
        """


class _SendProtocol(asyncio.DatagramProtocol):
    """Datagram protocol that only reports asynchronous send errors."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def error_received(self, exc: Exception) -> None:
        self._logger.warning("Datagram send error: %s", exc)


class DatagramSender(CommandSender):
    """
    Sends commands as UDP datagrams.

    A datagram endpoint is created per send and closed afterwards, even if
    the send fails.

    Example:
        ```python
        sender = DatagramSender()
        await sender.send("192.168.0.66", 8899, Command(0x42, 0x00))
        ```
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the sender.

        Args:
            logger: Logger instance; defaults to ``milight.transport``.
        """
        self._logger = logger or logging.getLogger("milight.transport")

    async def send(self, host: str, port: int, command: Command) -> None:
        """
        Send a command to ``(host, port)`` over UDP.

        Socket and address resolution errors are logged and swallowed.

        Args:
            host: Bridge hostname or IP address.
            port: Bridge UDP port.
            command: The command to send.
        """
        message = command.to_bytes()
        loop = asyncio.get_running_loop()

        try:
            transport, _ = await loop.create_datagram_endpoint(
                lambda: _SendProtocol(self._logger),
                remote_addr=(host, port),
            )
        except OSError as e:
            self._logger.warning(
                "Failed to open socket to %s:%d for %s: %s",
                host,
                port,
                command,
                e
            )
            return

        try:
            transport.sendto(message)
            self._logger.debug(
                "Sent %s to %s:%d",
                message.hex(" "),
                host,
                port
            )
        except OSError as e:
            self._logger.warning(
                "Failed to send %s to %s:%d: %s",
                command,
                host,
                port,
                e
            )
        finally:
            transport.close()
