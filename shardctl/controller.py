"""The shard controller: tracks which server owns which shards."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator

from shardctl.messages import (
    ErrorResponse,
    JoinRequest,
    JoinResponse,
    LeaveRequest,
    LeaveResponse,
    MoveRequest,
    MoveResponse,
    OverlapStatus,
    QueryRequest,
    QueryResponse,
    Shard,
    ShardControllerConfig,
)

logger = logging.getLogger(__name__)


class ShardControllerError(Exception):
    """A controller request could not be carried out."""


class ShardController(ABC):
    """Interface of a shard controller."""

    @abstractmethod
    def join(self, request: JoinRequest) -> JoinResponse: ...

    @abstractmethod
    def leave(self, request: LeaveRequest) -> LeaveResponse: ...

    @abstractmethod
    def move(self, request: MoveRequest) -> MoveResponse: ...

    @abstractmethod
    def query(self, request: QueryRequest) -> QueryResponse: ...


def _remaining(shards: Iterable[Shard], moved: Shard) -> Iterator[Shard]:
    """Yield what is left of ``shards`` once ``moved`` is taken out."""
    for shard in shards:
        if moved.granularity() != shard.granularity():
            raise ShardControllerError(
                "Moving differing shard granularities not currently supported."
            )
        match shard.overlap(moved):
            case OverlapStatus.NO_OVERLAP:
                yield shard
            case OverlapStatus.OVERLAP_START:
                yield shard.split(moved.upper, True)[1]
            case OverlapStatus.OVERLAP_END:
                yield shard.split(moved.lower, False)[0]
            case OverlapStatus.COMPLETELY_CONTAINS:
                yield shard.split(moved.lower, False)[0]
                yield shard.split(moved.upper, True)[1]
            case OverlapStatus.COMPLETELY_CONTAINED:
                pass


class StaticShardController(ShardController):
    """A thread-safe controller whose shards move only on explicit requests."""

    def __init__(self) -> None:
        self._config = ShardControllerConfig()
        self._lock = threading.Lock()

    def query(self, request: QueryRequest) -> QueryResponse:
        with self._lock:
            snapshot = {
                server: list(shards)
                for server, shards in self._config.server_to_shards.items()
            }
        return QueryResponse(ShardControllerConfig(snapshot))

    def join(self, request: JoinRequest) -> JoinResponse:
        with self._lock:
            mapping = self._config.server_to_shards
            if request.server in mapping:
                raise ShardControllerError(f"server {request.server} already joined")
            mapping[request.server] = []
        logger.info("Added server %s to shardcontroller configuration.", request.server)
        return JoinResponse()

    def leave(self, request: LeaveRequest) -> LeaveResponse:
        with self._lock:
            mapping = self._config.server_to_shards
            if request.server not in mapping:
                raise ShardControllerError(f"server {request.server} is not joined")
            orphaned = mapping.pop(request.server)
            logger.info(
                "Deleted server %s on shardcontroller configuration.", request.server
            )
            if mapping:
                mapping[min(mapping)].extend(orphaned)
        return LeaveResponse()

    def move(self, request: MoveRequest) -> MoveResponse:
        with self._lock:
            mapping = self._config.server_to_shards
            if request.server not in mapping:
                raise ShardControllerError(f"server {request.server} is not joined")
            updated = {server: list(shards) for server, shards in mapping.items()}
            for moved in request.shards:
                for server, shards in updated.items():
                    updated[server] = list(_remaining(shards, moved))
            updated[request.server].extend(request.shards)
            self._config.server_to_shards = updated
        logger.info(
            "Moved the following shards to server %s: %s",
            request.server,
            " ".join(str(shard) for shard in request.shards),
        )
        return MoveResponse()

    def process_request(self, request):
        """Dispatch a request and return its response or an ErrorResponse."""
        handlers = {
            JoinRequest: (self.join, "Join"),
            LeaveRequest: (self.leave, "Leave"),
            MoveRequest: (self.move, "Move"),
            QueryRequest: (self.query, "Query"),
        }
        try:
            handler, name = handlers[type(request)]
        except KeyError:
            raise TypeError("invalid request variant!") from None
        try:
            return handler(request)
        except ShardControllerError:
            return ErrorResponse(f"Failed to process {name} request.")