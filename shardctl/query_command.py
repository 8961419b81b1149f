"""Interactive command that prints the controller's configuration."""

from __future__ import annotations

import sys
from typing import TextIO

from shardctl.controller import ShardController
from shardctl.messages import QueryRequest


class QueryCommand:
    """Shell command that queries a shard controller and prints its config."""

    def __init__(self, controller: ShardController, stream: TextIO | None = None) -> None:
        self._controller = controller
        self._stream = stream

    def handle(self, args: str) -> None:
        response = self._controller.query(QueryRequest())
        out = self._stream if self._stream is not None else sys.stdout
        out.write(response.config.format())

    def name(self) -> str:
        return "query"

    def params(self) -> str:
        return ""

    def description(self) -> str:
        return "Gets the current shardcontroller configuration."