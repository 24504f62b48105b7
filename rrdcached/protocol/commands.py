"""Command builders for the rrdcached text protocol.

A request is a single line: the verb, then the arguments separated by
single spaces, terminated with a newline. Arguments are sent as-is, so
they must not contain whitespace or control characters.
"""

from dataclasses import dataclass, field

from .constants import NEWLINE, QUIT_VERB
from .errors import ConfigurationError


@dataclass
class Command:
    """A verb plus its ordered arguments."""
    verb: str
    args: list[str] = field(default_factory=list)

    def __post_init__(self):
        if not self.verb:
            raise ConfigurationError("command verb must not be empty")

    def with_args(self, *args: str) -> "Command":
        """Append arguments in call order and return the command."""
        self.args.extend(args)
        return self

    def encode(self) -> str:
        """Return the wire line for this command, newline included."""
        if not self.args:
            return self.verb + NEWLINE
        return self.verb + " " + " ".join(self.args) + NEWLINE

    def __str__(self) -> str:
        return self.encode().rstrip(NEWLINE)


def build_command(verb: str, *args: str) -> Command:
    return Command(verb).with_args(*args)


def build_info_command(filename: str) -> Command:
    """Build INFO command for the configuration of one RRD.

    Format: info <filename>
    """
    return build_command("info", filename)


def build_list_command(prefix: str) -> Command:
    """Build LIST command for the RRDs below a path prefix.

    Format: list <prefix>
    """
    return build_command("list", prefix)


def build_quit_command() -> Command:
    """Build QUIT command sent on close (no reply)."""
    return build_command(QUIT_VERB)
