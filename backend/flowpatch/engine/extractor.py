"""Read path: node summaries and node extraction with resolved connections."""
import copy
import logging
from typing import Any, Mapping

from .connections import ConnectionLink, inbound_links, outbound_links
from .errors import NotFoundError
from .graph import Node, NodeIndex, WorkflowDocument, as_document, build_node_index

logger = logging.getLogger(__name__)


def extract_node_summaries(
    document: WorkflowDocument | Mapping[str, Any],
) -> list[dict[str, Any]]:
    """Lightweight metadata for every node, in document order."""
    doc = as_document(document)
    if not doc.nodes:
        logger.warning("No nodes found in workflow %r", doc.name)
        return []

    return [
        {
            "id": node.get("id"),
            "name": node.get("name"),
            "type": node.get("type"),
            "disabled": bool(node.get("disabled", False)),
            "position": node.get("position"),
        }
        for node in doc.nodes
        if isinstance(node, Mapping)
    ]


def _describe(link: ConnectionLink, ref: str, index: NodeIndex) -> dict[str, Any] | None:
    peer = index.resolve(ref)
    if peer is None:
        return None
    return {
        "nodeId": peer.get("id"),
        "nodeName": peer.get("name"),
        "type": link.connection_type,
        "outputIndex": link.source_output,
        "inputIndex": link.target_input,
    }


def _decorate(node: Node, doc: WorkflowDocument, index: NodeIndex) -> dict[str, Any]:
    extracted = copy.deepcopy(node)
    inputs = [
        _describe(link, link.source, index)
        for link in inbound_links(doc.connections, index, node)
    ]
    outputs = [
        _describe(link, link.target, index)
        for link in outbound_links(doc.connections, node)
    ]
    # Dangling endpoints are left to the integrity validator.
    extracted["connections"] = {
        "inputs": [entry for entry in inputs if entry is not None],
        "outputs": [entry for entry in outputs if entry is not None],
    }
    return extracted


def extract_nodes(
    document: WorkflowDocument | Mapping[str, Any],
    node_ids: str | list[str],
) -> list[dict[str, Any]]:
    """Deep copies of the requested nodes, decorated with their connections.

    Results follow the order of ``node_ids``. Unknown ids are skipped; if
    none resolve, ``NotFoundError`` is raised.
    """
    target_ids = [node_ids] if isinstance(node_ids, str) else list(node_ids)
    doc = as_document(document)
    index = build_node_index(doc)

    extracted: list[dict[str, Any]] = []
    missing: list[str] = []
    for node_id in target_ids:
        node = index.get(node_id)
        if node is None:
            logger.warning("Node with ID %s not found in workflow", node_id)
            missing.append(node_id)
            continue
        extracted.append(_decorate(node, doc, index))

    if not extracted:
        raise NotFoundError(missing)
    return extracted
