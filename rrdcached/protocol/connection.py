"""Socket wrapper for rrdcached communication.

Owns the stream to the daemon (TCP or UNIX domain socket), a buffered
line reader over it, and the I/O deadline. The deadline is refreshed to
``timeout`` seconds before every write and every line read.
"""

import errno
import logging
import socket
import time
from typing import Optional

from .commands import Command, build_quit_command
from .constants import (
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    NEWLINE,
    RETRYABLE_WRITE_ERRNOS,
    TRANSPORT_TCP,
    TRANSPORT_UNIX,
)
from .errors import ConfigurationError, ConnectError, ReconnectError, TransportError

logger = logging.getLogger(__name__)

RECV_SIZE = 4096


def resolve_address(address: str, transport: str = TRANSPORT_TCP) -> str:
    """Append DEFAULT_PORT to a TCP address that has none.

    IPv6 hosts must be bracketed: ``[::1]`` or ``[::1]:42217``.
    """
    if transport == TRANSPORT_UNIX:
        return address
    if address.startswith("["):
        if "]:" in address:
            return address
        return f"{address}:{DEFAULT_PORT}"
    if ":" in address:
        return address
    return f"{address}:{DEFAULT_PORT}"


def split_host_port(address: str) -> tuple[str, int]:
    """Split ``host:port`` (or ``[v6]:port``) into its parts."""
    host, _, port = address.rpartition(":")
    try:
        return host.strip("[]"), int(port)
    except ValueError:
        raise ConfigurationError(f"invalid port in address {address!r}") from None


def is_retryable_write_error(error: BaseException) -> bool:
    """True if a failed write should be followed by a reconnect and retry."""
    if isinstance(error, (BrokenPipeError, ConnectionResetError)):
        return True
    return isinstance(error, OSError) and error.errno in RETRYABLE_WRITE_ERRNOS


class Connection:
    """Stream connection to a rrdcached daemon."""

    def __init__(
        self,
        address: str,
        transport: str = TRANSPORT_TCP,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        if transport not in (TRANSPORT_TCP, TRANSPORT_UNIX):
            raise ConfigurationError(f"unknown transport {transport!r}")
        self.address = resolve_address(address, transport)
        self.transport = transport
        self.timeout = timeout
        if transport == TRANSPORT_TCP:
            self._host, self._port = split_host_port(self.address)
        self._sock: Optional[socket.socket] = None
        self._buffer = bytearray()
        self._deadline: Optional[float] = None
        self._closed = False

    @property
    def is_open(self) -> bool:
        return self._sock is not None

    @property
    def closed(self) -> bool:
        """True once close() was called; a closed connection never redials."""
        return self._closed

    def open(self) -> None:
        """Dial the daemon and start with an empty line buffer."""
        try:
            sock = self._dial()
        except OSError as e:
            raise ConnectError(
                f"failed to dial {self.transport} {self.address}: {e}", self.address,
            ) from e
        self._sock = sock
        self._buffer.clear()
        self._closed = False
        logger.info("Connected to rrdcached at %s (%s)", self.address, self.transport)

    def _dial(self) -> socket.socket:
        if self.transport == TRANSPORT_TCP:
            return socket.create_connection((self._host, self._port), timeout=self.timeout)

        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self.timeout)
        try:
            sock.connect(self.address)
        except OSError:
            sock.close()
            raise
        return sock

    def reconnect(self) -> None:
        """Drop the current stream and dial again."""
        self._discard()
        self.open()

    def _discard(self) -> None:
        """Close the current stream without reporting errors."""
        if self._sock is not None:
            try:
                self._sock.close()
            except OSError as e:
                logger.debug("Ignoring error closing stale connection: %s", e)
        self._sock = None
        self._buffer.clear()

    # ---- deadline ----

    def refresh_deadline(self) -> None:
        """Set the deadline to ``timeout`` seconds from now.

        The deadline bounds the whole of the next write or line read,
        however many send/recv calls it takes.
        """
        self._deadline = time.monotonic() + self.timeout
        if self._sock is not None:
            self._sock.settimeout(self.timeout)

    def _arm(self) -> None:
        """Limit the next socket call to the time left before the deadline."""
        if self._deadline is None:
            self.refresh_deadline()
        remaining = self._deadline - time.monotonic()
        if remaining <= 0:
            raise TimeoutError("timed out")
        self._sock.settimeout(remaining)

    # ---- I/O ----

    def send(self, data: str) -> None:
        """Send raw text over the socket before the current deadline."""
        if self._sock is None:
            raise BrokenPipeError(errno.EPIPE, "connection is not open")
        self._arm()
        # sendall's timeout covers the whole call, not each chunk
        self._sock.sendall(data.encode("utf-8"))
        logger.debug("TX: %s", data.rstrip(NEWLINE))

    def write(self, command: Command) -> None:
        """Send a command, reconnecting while the write fails on a broken stream.

        Raises ReconnectError if redialing fails and TransportError for
        any write error that is not retry-eligible, including writes on a
        connection that was closed with close().
        """
        if self._closed:
            raise TransportError("write", OSError(errno.EBADF, "use of closed connection"))
        data = command.encode()
        while True:
            try:
                self.send(data)
                return
            except OSError as e:
                if not is_retryable_write_error(e):
                    raise TransportError("write", e) from e
                logger.warning(
                    "Write to %s caused [%s]; trying to reestablish connection...",
                    self.address, e,
                )
                try:
                    self.reconnect()
                except ConnectError as reconnect_error:
                    raise ReconnectError(e, reconnect_error, self.address) from reconnect_error
                self.refresh_deadline()

    def read_line(self) -> Optional[str]:
        """Read one line without its terminator. Returns None at end of stream.

        The deadline is refreshed first and bounds the whole line, so a
        daemon that trickles bytes cannot hold the read open past it.
        """
        if self._sock is None:
            raise OSError(errno.ENOTCONN, "connection is not open")
        self.refresh_deadline()
        while True:
            end = self._buffer.find(b"\n")
            if end >= 0:
                raw = bytes(self._buffer[:end])
                del self._buffer[:end + 1]
                break
            self._arm()
            chunk = self._sock.recv(RECV_SIZE)
            if not chunk:
                if not self._buffer:
                    return None
                # unterminated last line
                raw = bytes(self._buffer)
                self._buffer.clear()
                break
            self._buffer.extend(chunk)

        line = raw.decode("utf-8", errors="replace").rstrip("\r")
        logger.debug("RX: %s", line)
        return line

    def close(self) -> None:
        """Send quit (no reply is awaited) and close the stream.

        A failure to close the stream is reported first, then a failure
        to set the deadline, then a failure to send quit. Afterwards the
        connection stays closed: writes fail instead of redialing.
        """
        self._closed = True
        if self._sock is None:
            return

        errors: dict[str, Optional[OSError]] = {
            "close connection": None,
            "set deadline": None,
            "send quit": None,
        }
        try:
            self.refresh_deadline()
        except OSError as e:
            errors["set deadline"] = e
        try:
            self.send(build_quit_command().encode())
        except OSError as e:
            errors["send quit"] = e
        try:
            self._sock.close()
        except OSError as e:
            errors["close connection"] = e
        finally:
            self._sock = None
            self._buffer.clear()
        logger.info("Closed connection to %s", self.address)

        for op, error in errors.items():
            if error is not None:
                raise TransportError(op, error) from error

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
