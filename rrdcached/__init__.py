"""rrdcached client -- talk to rrdtool's caching daemon over its text protocol."""

from .client import RRDCachedClient
from .protocol.commands import Command, build_command
from .protocol.constants import DEFAULT_PORT, DEFAULT_TIMEOUT, InfoType
from .protocol.errors import (
    ConfigurationError,
    ConnectError,
    InvalidResponseError,
    MalformedResponseError,
    ProtocolError,
    ReconnectError,
    RRDCachedError,
    ShortResponseError,
    TransportError,
    UnexpectedEOFError,
)
from .protocol.info import InfoEntry

__all__ = [
    'RRDCachedClient', 'Command', 'build_command', 'InfoEntry', 'InfoType',
    'DEFAULT_PORT', 'DEFAULT_TIMEOUT',
    'RRDCachedError', 'ConfigurationError', 'ConnectError', 'ReconnectError',
    'TransportError', 'ProtocolError', 'MalformedResponseError',
    'ShortResponseError', 'UnexpectedEOFError', 'InvalidResponseError',
]
