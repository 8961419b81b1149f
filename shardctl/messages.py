"""Shards, controller configuration, and the request/response messages."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_BASE = len(_ALPHABET)


def _to_int(key: str) -> int:
    value = 0
    for ch in key:
        digit = _ALPHABET.find(ch)
        if digit < 0:
            raise ValueError(f"invalid character {ch!r} in shard key {key!r}")
        value = value * _BASE + digit
    return value


def _from_int(value: int, width: int) -> str:
    digits = []
    for _ in range(width):
        value, digit = divmod(value, _BASE)
        digits.append(_ALPHABET[digit])
    return "".join(reversed(digits))


class OverlapStatus(enum.Enum):
    """How a second shard lies relative to a first one."""

    NO_OVERLAP = enum.auto()
    OVERLAP_START = enum.auto()
    OVERLAP_END = enum.auto()
    COMPLETELY_CONTAINS = enum.auto()
    COMPLETELY_CONTAINED = enum.auto()


@dataclass(frozen=True, order=True)
class Shard:
    """An inclusive range of keys, from ``lower`` to ``upper``."""

    lower: str
    upper: str

    def __post_init__(self) -> None:
        lower = self.lower.upper()
        upper = self.upper.upper()
        if not lower or not upper:
            raise ValueError("shard bounds must not be empty")
        if len(lower) != len(upper):
            raise ValueError("shard bounds must have the same length")
        if _to_int(lower) > _to_int(upper):
            raise ValueError(f"shard lower bound {lower!r} exceeds upper bound {upper!r}")
        object.__setattr__(self, "lower", lower)
        object.__setattr__(self, "upper", upper)

    def __str__(self) -> str:
        return f"[{self.lower}, {self.upper}]"

    def granularity(self) -> int:
        """Number of characters in each bound."""
        return len(self.lower)

    def overlap(self, other: Shard) -> OverlapStatus:
        """Describe how ``other`` overlaps this shard."""
        if other.granularity() != self.granularity():
            raise ValueError("shards have differing granularities")
        lo, hi = _to_int(self.lower), _to_int(self.upper)
        olo, ohi = _to_int(other.lower), _to_int(other.upper)
        if ohi < lo or olo > hi:
            return OverlapStatus.NO_OVERLAP
        if olo <= lo and ohi >= hi:
            return OverlapStatus.COMPLETELY_CONTAINED
        if olo <= lo:
            return OverlapStatus.OVERLAP_START
        if ohi >= hi:
            return OverlapStatus.OVERLAP_END
        return OverlapStatus.COMPLETELY_CONTAINS

    def split(self, key: str, after: bool) -> tuple[Shard, Shard]:
        """Split at ``key``; the key ends the first part if ``after``, else starts the second."""
        key = key.upper()
        if len(key) != self.granularity():
            raise ValueError("split key has a different granularity than the shard")
        point = _to_int(key)
        lo, hi = _to_int(self.lower), _to_int(self.upper)
        if not lo <= point <= hi:
            raise ValueError(f"split key {key!r} lies outside shard {self}")
        width = self.granularity()
        if after:
            if point == hi:
                raise ValueError("cannot split after the upper bound")
            return Shard(self.lower, key), Shard(_from_int(point + 1, width), self.upper)
        if point == lo:
            raise ValueError("cannot split before the lower bound")
        return Shard(self.lower, _from_int(point - 1, width)), Shard(key, self.upper)


@dataclass
class ShardControllerConfig:
    """Mapping from server address to the shards it is responsible for."""

    server_to_shards: dict[str, list[Shard]] = field(default_factory=dict)

    def format(self) -> str:
        """Render one line per server, in server order."""
        lines = []
        for server in sorted(self.server_to_shards):
            shards = self.server_to_shards[server]
            listing = ", ".join(str(shard) for shard in shards)
            lines.append(f"{server}: {listing}" if shards else f"{server}:")
        return "".join(line + "\n" for line in lines)


@dataclass(frozen=True)
class JoinRequest:
    server: str


@dataclass(frozen=True)
class LeaveRequest:
    server: str


@dataclass(frozen=True)
class MoveRequest:
    server: str
    shards: tuple[Shard, ...] | list[Shard] = ()


@dataclass(frozen=True)
class QueryRequest:
    pass


@dataclass(frozen=True)
class JoinResponse:
    pass


@dataclass(frozen=True)
class LeaveResponse:
    pass


@dataclass(frozen=True)
class MoveResponse:
    pass


@dataclass
class QueryResponse:
    config: ShardControllerConfig = field(default_factory=ShardControllerConfig)


@dataclass(frozen=True)
class ErrorResponse:
    msg: str