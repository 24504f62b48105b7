"""INFO reply parsing.

Each content line of an INFO reply has the form ``<key> <type> <value>``
where type is one of the InfoType tags:

    ds[temp].type 2 GAUGE
    ds[temp].index 1 0
    ds[temp].min 0 NaN

STRING values are taken verbatim (they may contain spaces), INT values
are 64-bit signed integers and FLOAT values are 64-bit floats.
"""

import re
from dataclasses import dataclass
from typing import Union

from .constants import INT64_MAX, INT64_MIN, InfoType
from .errors import InvalidResponseError, MalformedResponseError

InfoValue = Union[str, int, float]

_INT_RE = re.compile(r"^[+-]?[0-9]+$")


@dataclass(frozen=True)
class InfoEntry:
    """One key of an RRD's configuration."""
    key: str
    type: InfoType
    value: InfoValue


def _parse_int(raw: str) -> int:
    if not _INT_RE.match(raw):
        raise ValueError(raw)
    value = int(raw)
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValueError(raw)
    return value


def _parse_float(raw: str) -> float:
    # float() also accepts surrounding whitespace and digit separators
    if not raw or raw != raw.strip() or "_" in raw:
        raise ValueError(raw)
    return float(raw)


def parse_info_line(line: str) -> InfoEntry:
    """Parse a single INFO content line into an InfoEntry."""
    parts = line.split(" ", 2)
    if len(parts) != 3:
        raise MalformedResponseError("unexpected response: not 3 parts", line)
    key, tag, raw = parts

    if tag == "2":
        return InfoEntry(key, InfoType.STRING, raw)
    if tag == "1":
        try:
            return InfoEntry(key, InfoType.INT, _parse_int(raw))
        except ValueError:
            raise InvalidResponseError(f"invalid int for key {key}", line, key) from None
    if tag == "0":
        try:
            return InfoEntry(key, InfoType.FLOAT, _parse_float(raw))
        except ValueError:
            raise InvalidResponseError(f"invalid float for key {key}", line, key) from None

    raise InvalidResponseError(f"unknown type {tag} for key {key}", line, key)


def parse_info(lines: list[str]) -> list[InfoEntry]:
    """Parse all content lines of an INFO reply, in order."""
    return [parse_info_line(line) for line in lines]


def info_to_map(entries: list[InfoEntry]) -> dict[str, InfoValue]:
    """Collapse entries into a key -> value mapping (last one wins)."""
    return {entry.key: entry.value for entry in entries}
