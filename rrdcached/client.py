"""High-level rrdcached client.

Runs request/response exchanges over a single connection. rrdcached
replies carry no request id, so exchanges are serialised with a lock:
the write and the whole reply are read before the next caller may send.
"""

import asyncio
import logging
import threading
from typing import Optional

from .protocol.commands import (
    Command,
    build_command,
    build_info_command,
    build_list_command,
)
from .protocol.connection import Connection
from .protocol.constants import DEFAULT_TIMEOUT, TRANSPORT_TCP, TRANSPORT_UNIX
from .protocol.errors import (
    ConfigurationError,
    ConnectError,
    RRDCachedError,
    TransportError,
)
from .protocol.info import InfoEntry, InfoValue, info_to_map, parse_info
from .protocol.reply import Reply, decode_reply

logger = logging.getLogger(__name__)


class RRDCachedClient:
    """Client for a rrdcached daemon.

    The first connection is dialed by the constructor. By default
    ``address`` is a TCP address (``host`` or ``host:port``, the default
    port is used when none is given); pass ``unix=True`` to treat it as
    the path of a UNIX domain socket.
    """

    def __init__(
        self,
        address: str,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        unix: bool = False,
    ):
        if not address:
            raise ConfigurationError("address must not be empty")
        if timeout is None:
            raise ConfigurationError("timeout must be set")
        if timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {timeout}")

        transport = TRANSPORT_UNIX if unix else TRANSPORT_TCP
        self._conn = Connection(address, transport, timeout)
        self._io_lock = threading.Lock()

        try:
            self._conn.open()
        except ConnectError as e:
            e.operation = "initial connection"
            raise

    @classmethod
    def from_settings(cls, config=None) -> "RRDCachedClient":
        """Create a client from Settings (the module-level instance by default)."""
        if config is None:
            from .config import settings as config
        return cls(config.address, timeout=config.timeout, unix=config.unix)

    @property
    def address(self) -> str:
        return self._conn.address

    @property
    def transport(self) -> str:
        return self._conn.transport

    @property
    def timeout(self) -> float:
        return self._conn.timeout

    # ---- request execution ----

    def execute(self, verb: str, *args: str) -> list[str]:
        """Execute ``verb`` with ``args`` and return the reply lines."""
        return self.execute_command(build_command(verb, *args))

    def execute_command(self, cmd: Command) -> list[str]:
        """Execute cmd on the daemon and return the reply lines.

        A zero-count reply is returned as its single message line.
        """
        with self._io_lock:
            try:
                reply = self._exchange(cmd)
            except RRDCachedError as e:
                if e.operation is None:
                    e.operation = str(cmd)
                raise
        return reply.content

    def _exchange(self, cmd: Command) -> Reply:
        try:
            self._conn.refresh_deadline()
        except OSError as e:
            raise TransportError("set deadline", e) from e

        self._conn.write(cmd)
        logger.debug("rrdcached command: [%s]", cmd)

        return decode_reply(self._conn.read_line)

    # ---- commands ----

    def info(self, filename: str) -> list[InfoEntry]:
        """Return the configuration information for the specified RRD."""
        cmd = build_info_command(filename)
        lines = self.execute_command(cmd)
        try:
            return parse_info(lines)
        except RRDCachedError as e:
            e.operation = str(cmd)
            raise

    def info_map(self, filename: str) -> dict[str, InfoValue]:
        """Return the configuration information as a key -> value dict."""
        return info_to_map(self.info(filename))

    def list_rrds(self, prefix: str) -> list[str]:
        """Return the RRDs known to the daemon below ``prefix``."""
        lines = self.execute_command(build_list_command(prefix))
        logger.debug("got list result: %s", lines)
        return lines

    def close(self) -> None:
        """Send quit and close the connection."""
        with self._io_lock:
            try:
                self._conn.close()
            except RRDCachedError as e:
                e.operation = "close"
                raise

    # ---- asyncio wrappers (run in the default executor) ----

    async def async_execute(self, verb: str, *args: str) -> list[str]:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, self.execute, verb, *args)

    async def async_info(self, filename: str) -> list[InfoEntry]:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, self.info, filename)

    async def async_info_map(self, filename: str) -> dict[str, InfoValue]:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, self.info_map, filename)

    async def async_list_rrds(self, prefix: str) -> list[str]:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, self.list_rrds, prefix)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
