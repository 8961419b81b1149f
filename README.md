# shardctl

`shardctl` keeps track of which key-value server is responsible for which
range of keys. The keyspace is divided into *shards*, each an inclusive range
of keys such as `[0, 7]` or `[A, G]`, and the controller holds a
configuration that maps every server address to the shards it owns.

## Installing

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Shards and messages (`shardctl.messages`)

- `Shard(lower, upper)` – an inclusive key range. Bounds are made of the
  characters `0-9` and `A-Z` (lower-case letters are upper-cased), must have
  the same length, and `lower` must not exceed `upper`; otherwise
  `ValueError` is raised. `granularity()` is the length of a bound.
- `Shard.overlap(other)` reports how `other` lies relative to the shard as an
  `OverlapStatus`: `NO_OVERLAP`, `OVERLAP_START`, `OVERLAP_END`,
  `COMPLETELY_CONTAINS` or `COMPLETELY_CONTAINED`.
- `Shard.split(key, after)` cuts a shard in two at `key`: with `after=True`
  the key ends the first part, otherwise it starts the second.
- `ShardControllerConfig` – `server_to_shards`, a dict from server address to
  its list of shards. `format()` renders one line per server, in address
  order, e.g. `tiger:9999: [2, 5], [A, G]`.
- Requests: `JoinRequest(server)`, `LeaveRequest(server)`,
  `MoveRequest(server, shards)`, `QueryRequest()`. Responses:
  `JoinResponse`, `LeaveResponse`, `MoveResponse`, `QueryResponse(config)`
  and `ErrorResponse(msg)`.

## Using the controller (`shardctl.controller`)

```python
from shardctl.controller import StaticShardController
from shardctl.messages import JoinRequest, LeaveRequest, MoveRequest, QueryRequest, Shard

controller = StaticShardController()

controller.join(JoinRequest("elephant:4000"))
controller.join(JoinRequest("tiger:9999"))

controller.move(MoveRequest("elephant:4000", [Shard("0", "9")]))
controller.move(MoveRequest("tiger:9999", [Shard("A", "G")]))

# Moving part of a range splits the shards that held it.
controller.move(MoveRequest("tiger:9999", [Shard("2", "5")]))

config = controller.query(QueryRequest()).config
print(config.format())

# A server that leaves hands its shards to the first remaining server.
controller.leave(LeaveRequest("tiger:9999"))
```

The rules:

- **join** adds a server with no shards; joining a server that is already
  present fails.
- **leave** removes a server; its shards are appended to the first remaining
  server in address order. Leaving an unknown server fails.
- **move** gives the listed shards to the target server, trimming or
  splitting whatever overlapping ranges any server held. Moving to an unknown
  server fails, as does moving a shard whose granularity differs from an
  existing one; a failed move leaves the configuration unchanged.
- **query** returns a snapshot of the current configuration.

Failures raise `ShardControllerError`. `process_request(request)` dispatches
any of the four request types and turns a failure into an `ErrorResponse`
such as `"Failed to process Join request."`; a request of any other type
raises `TypeError`.

`ShardController` is the abstract interface with `join`, `leave`, `move` and
`query`. `StaticShardController` guards every operation with a lock, so one
controller can be shared between threads. Joins, leaves and moves are logged
at INFO level through the `shardctl.controller` logger.

## Interactive command (`shardctl.query_command`)

`QueryCommand(controller, stream=None)` wraps a controller for use in a
command loop: `name()` is `"query"`, `params()` is empty, `description()`
explains it, and `handle(args)` writes the formatted configuration to
`stream`, or to standard output when none was given.

## What it does not do

The controller lives in-process only: it does not listen on a network
address, accept client connections, or persist its configuration. There is
no command-line program and no command loop; `QueryCommand` is a building
block for one. Messages are plain Python objects with no wire format.