"""Connection resolution and edge-list transcoding.

Connections are stored as an adjacency map::

    {source_ref: {connection_type: [[{"node": target_ref, "index": 0}, ...], ...]}}

where the outer list is indexed by source output and both references may be
a node id or a node name.
"""
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping

from .graph import Node, NodeIndex


@dataclass(frozen=True)
class ConnectionLink:
    source: str
    connection_type: str
    source_output: int
    target: Any
    target_input: int


@dataclass(frozen=True)
class Edge:
    """Flat edge in the shape the update transport expects."""
    source: str
    target: Any
    source_output: int = 0
    target_input: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "sourceOutput": self.source_output,
            "targetInput": self.target_input,
        }


def _target_input(entry: Mapping[str, Any]) -> int:
    index = entry.get("index")
    if isinstance(index, int) and not isinstance(index, bool):
        return index
    return 0


def iter_source_links(
    source: str,
    connection_data: Any,
    connection_types: Iterable[str] | None = None,
) -> Iterator[ConnectionLink]:
    """Yield every link emitted by one adjacency entry.

    Malformed buckets and entries without a node reference are
    skipped rather than raised.
    """
    if not isinstance(connection_data, Mapping):
        return
    wanted = None if connection_types is None else set(connection_types)
    for connection_type, buckets in connection_data.items():
        if wanted is not None and connection_type not in wanted:
            continue
        if not isinstance(buckets, list):
            continue
        for output_index, bucket in enumerate(buckets):
            if not isinstance(bucket, list):
                continue
            for entry in bucket:
                if not isinstance(entry, Mapping):
                    continue
                target = entry.get("node")
                if target is None or target == "":
                    continue
                yield ConnectionLink(
                    source=source,
                    connection_type=connection_type,
                    source_output=output_index,
                    target=target,
                    target_input=_target_input(entry),
                )


def iter_links(
    connections: Mapping[str, Any] | None,
    connection_types: Iterable[str] | None = None,
) -> Iterator[ConnectionLink]:
    if not isinstance(connections, Mapping):
        return
    types = None if connection_types is None else tuple(connection_types)
    for source, connection_data in connections.items():
        yield from iter_source_links(source, connection_data, types)


def adjacency_key(connections: Mapping[str, Any], node: Node) -> str | None:
    """Return the key under which ``node``'s outgoing connections are stored."""
    for key in (node.get("id"), node.get("name")):
        if isinstance(key, str) and key in connections:
            return key
    return None


def inbound_links(
    connections: Mapping[str, Any] | None,
    index: NodeIndex,
    node: Node,
) -> list[ConnectionLink]:
    """All links whose target reference resolves to ``node``."""
    return [
        link for link in iter_links(connections)
        if index.resolve(link.target) is node
    ]


def outbound_links(
    connections: Mapping[str, Any] | None,
    node: Node,
) -> list[ConnectionLink]:
    """All links emitted by ``node``'s own adjacency entry."""
    if not isinstance(connections, Mapping):
        return []
    key = adjacency_key(connections, node)
    if key is None:
        return []
    return list(iter_source_links(key, connections[key]))


def to_edge_list(
    connections: Mapping[str, Any] | None,
    connection_types: Iterable[str] = ("main",),
) -> list[Edge]:
    """Project an adjacency map onto a flat edge list."""
    return [
        Edge(
            source=link.source,
            target=link.target,
            source_output=link.source_output,
            target_input=link.target_input,
        )
        for link in iter_links(connections, connection_types)
    ]
