"""Workflow document and node index data structures."""
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Mapping

from .errors import StructuralError

Node = dict[str, Any]
ConnectionMap = dict[str, Any]

_DOCUMENT_FIELDS = ("name", "nodes", "connections", "active", "settings")


@dataclass(frozen=True)
class WorkflowDocument:
    """Immutable snapshot of a workflow.

    ``nodes`` is ``None`` when the source had no node collection at all,
    which is distinct from an empty one. Top-level keys the engine does not
    interpret (``id``, ``tags``, timestamps, ...) are kept in ``extra``.
    """

    name: str = ""
    nodes: tuple[Node, ...] | None = None
    connections: ConnectionMap = field(default_factory=dict)
    active: bool | None = None
    settings: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WorkflowDocument":
        raw_nodes = data.get("nodes")
        connections = data.get("connections")
        return cls(
            name=data.get("name") or "",
            nodes=tuple(raw_nodes) if isinstance(raw_nodes, list) else None,
            connections=connections if isinstance(connections, dict) else {},
            active=data.get("active"),
            settings=data.get("settings"),
            extra={k: v for k, v in data.items() if k not in _DOCUMENT_FIELDS},
        )

    def to_dict(self) -> dict[str, Any]:
        data = dict(self.extra)
        data["name"] = self.name
        data["nodes"] = list(self.nodes or ())
        data["connections"] = self.connections
        if self.active is not None:
            data["active"] = self.active
        if self.settings is not None:
            data["settings"] = self.settings
        return data

    def with_nodes(self, nodes: Iterable[Node]) -> "WorkflowDocument":
        return replace(self, nodes=tuple(nodes))


def as_document(document: "WorkflowDocument | Mapping[str, Any]") -> WorkflowDocument:
    if isinstance(document, WorkflowDocument):
        return document
    return WorkflowDocument.from_dict(document)


def is_key(value: Any) -> bool:
    """True if ``value`` can be used as an index key."""
    if value is None:
        return False
    try:
        hash(value)
    except TypeError:
        return False
    return True


@dataclass
class NodeIndex:
    """Lookup of nodes by id and by name over one node sequence.

    Both maps store positions into ``nodes``; the first occurrence of a
    key wins. Every repeated id or name is recorded in ``duplicates`` in
    scan order as ``("id" | "name", value)``. Nodes whose id or name is
    missing or unhashable are recorded in ``unindexed`` as
    ``("id" | "name", position, value)`` and left out of the maps.
    """

    nodes: tuple[Node, ...]
    by_id: dict[Any, int] = field(default_factory=dict)
    by_name: dict[Any, int] = field(default_factory=dict)
    duplicates: list[tuple[str, Any]] = field(default_factory=list)
    unindexed: list[tuple[str, int, Any]] = field(default_factory=list)

    def get(self, node_id: Any) -> Node | None:
        pos = self.position_of(node_id)
        return None if pos is None else self.nodes[pos]

    def get_by_name(self, name: Any) -> Node | None:
        pos = self.by_name.get(name) if is_key(name) else None
        return None if pos is None else self.nodes[pos]

    def position_of(self, node_id: Any) -> int | None:
        return self.by_id.get(node_id) if is_key(node_id) else None

    def resolve(self, ref: Any) -> Node | None:
        """Resolve a connection reference, which may be an id or a name."""
        node = self.get(ref)
        if node is None:
            node = self.get_by_name(ref)
        return node

    def contains(self, ref: Any) -> bool:
        return is_key(ref) and (ref in self.by_id or ref in self.by_name)


def build_node_index(document: "WorkflowDocument | Mapping[str, Any]") -> NodeIndex:
    doc = as_document(document)
    if doc.nodes is None:
        raise StructuralError("Workflow has no nodes array")

    index = NodeIndex(nodes=doc.nodes)
    for pos, node in enumerate(doc.nodes):
        if not isinstance(node, Mapping):
            continue
        for kind, keys in (("id", index.by_id), ("name", index.by_name)):
            value = node.get(kind)
            if not is_key(value):
                index.unindexed.append((kind, pos, value))
            elif value in keys:
                index.duplicates.append((kind, value))
            else:
                keys[value] = pos
    return index
