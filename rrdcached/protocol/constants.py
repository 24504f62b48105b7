"""Protocol constants for the rrdcached command interface."""

import errno
import re
from enum import IntEnum

# Well-known rrdcached TCP port
DEFAULT_PORT = 42217

# Dial / read / write timeout in seconds
DEFAULT_TIMEOUT = 10.0

# Status line: "<count> <text>", count is negative on error
STATUS_LINE_RE = re.compile(r"^(-?\d+)\s+(.*)$")

# Line terminator for requests and replies
NEWLINE = "\n"

# Sent on close, the daemon does not reply
QUIT_VERB = "quit"

TRANSPORT_TCP = "tcp"
TRANSPORT_UNIX = "unix"

# Write failures that trigger a reconnect and a retried write.
# Anything else is surfaced to the caller.
RETRYABLE_WRITE_ERRNOS = frozenset({errno.EPIPE, errno.ECONNRESET})


class InfoType(IntEnum):
    """Value type tags used on the lines of an INFO reply."""
    FLOAT = 0
    INT = 1
    STRING = 2


# 64-bit signed range for INT values
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1
