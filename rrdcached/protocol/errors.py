"""Exception hierarchy for the rrdcached client.

Every error raised by the library derives from RRDCachedError. The
command line that was executing when the error happened is attached as
``operation`` by the client so messages read e.g.
``info /tmp/x.rrd: rrdcached error -1: No such file: /tmp/x.rrd``.
"""

from typing import Optional


class RRDCachedError(Exception):
    """Base class for all client errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.operation: Optional[str] = None

    def __str__(self) -> str:
        if self.operation:
            return f"{self.operation}: {self.message}"
        return self.message


class ConfigurationError(RRDCachedError, ValueError):
    """A construction-time option is missing or invalid."""


class ConnectError(RRDCachedError, ConnectionError):
    """The transport to the daemon could not be established."""

    def __init__(self, message: str, address: Optional[str] = None):
        super().__init__(message)
        self.address = address


class ReconnectError(ConnectError):
    """A write failed with a broken connection and redialing failed too."""

    def __init__(self, write_error: BaseException, reconnect_error: BaseException,
                 address: Optional[str] = None):
        super().__init__(
            f"failed to write ({write_error}) and failed to reestablish "
            f"connection: {reconnect_error}",
            address,
        )
        self.write_error = write_error
        self.reconnect_error = reconnect_error


class TransportError(RRDCachedError):
    """An I/O failure on an established connection that is not retried."""

    def __init__(self, op: str, error: BaseException):
        super().__init__(f"failed to {op}: {error}")
        self.op = op


class ProtocolError(RRDCachedError):
    """The daemon answered with a negative status code."""

    def __init__(self, code: int, message: str):
        super().__init__(f"rrdcached error {code}: {message}")
        self.code = code
        self.daemon_message = message


class MalformedResponseError(RRDCachedError):
    """A reply line does not have the expected shape."""

    def __init__(self, message: str, line: Optional[str] = None):
        if line is not None:
            message = f"{message}: {line!r}"
        super().__init__(message)
        self.line = line


class ShortResponseError(MalformedResponseError):
    """Fewer content lines arrived than the status line declared."""

    def __init__(self, expected: int, received: int, error: Optional[BaseException] = None):
        message = f"short response: expected {expected} lines, got {received}"
        if error is not None:
            message = f"{message} ({error})"
        super().__init__(message)
        self.expected = expected
        self.received = received


class UnexpectedEOFError(ShortResponseError):
    """The daemon closed the stream before the reply was complete."""

    def __init__(self, expected: int, received: int):
        super().__init__(expected, received)
        self.message = (
            f"unexpected end of stream: expected {expected} lines, got {received}"
        )


class InvalidResponseError(MalformedResponseError):
    """An INFO line carries an unknown type tag or an unparsable value."""

    def __init__(self, message: str, line: str, key: Optional[str] = None):
        super().__init__(message, line)
        self.key = key
