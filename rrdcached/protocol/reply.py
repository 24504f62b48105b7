"""Reply framing for the rrdcached text protocol.

Every reply starts with a status line ``<count> <text>``:

- count < 0: error, text is the daemon's message.
- count == 0: success, text is the only line of the reply.
- count > 0: success, exactly ``count`` further lines follow.

The count is the only framing information, so a reply that ends early
cannot be resynchronised and is reported as an error.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from .constants import NEWLINE, STATUS_LINE_RE
from .errors import (
    MalformedResponseError,
    ProtocolError,
    ShortResponseError,
    TransportError,
    UnexpectedEOFError,
)

logger = logging.getLogger(__name__)

# Returns one line without its terminator, or None at end of stream.
LineReader = Callable[[], Optional[str]]


@dataclass
class Reply:
    """A decoded success reply."""
    status: int
    message: str
    lines: list[str] = field(default_factory=list)

    @property
    def content(self) -> list[str]:
        """Content lines as returned to callers.

        A zero-count reply carries its message as the single line.
        """
        if self.status == 0:
            return [self.message]
        return list(self.lines)

    def encode(self) -> str:
        """Frame the reply the way the daemon sends it."""
        head = f"{self.status} {self.message}{NEWLINE}"
        return head + "".join(line + NEWLINE for line in self.lines)


def parse_status_line(line: str) -> tuple[int, str]:
    """Split a status line into (count, text)."""
    match = STATUS_LINE_RE.match(line)
    if match is None:
        raise MalformedResponseError("malformed status line", line)
    return int(match.group(1)), match.group(2)


def decode_reply(read_line: LineReader) -> Reply:
    """Read one framed reply.

    Raises ProtocolError for a negative status, MalformedResponseError if
    the status line has the wrong shape, and ShortResponseError (or its
    UnexpectedEOFError subclass) when fewer lines arrive than declared.
    """
    try:
        header = read_line()
    except OSError as e:
        raise TransportError("read status line", e) from e
    if header is None:
        raise UnexpectedEOFError(1, 0)

    count, text = parse_status_line(header)

    if count < 0:
        raise ProtocolError(count, text)
    if count == 0:
        return Reply(0, text)

    lines: list[str] = []
    while len(lines) < count:
        try:
            line = read_line()
        except OSError as e:
            raise ShortResponseError(count, len(lines), e) from e
        if line is None:
            raise UnexpectedEOFError(count, len(lines))
        lines.append(line)

    logger.debug("Decoded reply: status %d, %d lines", count, len(lines))
    return Reply(count, text, lines)
