"""Node operations against a remote workflow service.

The engine itself never performs I/O; these coroutines fetch a document
through an injected ``WorkflowClient``, run the pure engine over it and, for
updates, send the merged document back.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Protocol, Sequence

from ..config import settings
from .connections import to_edge_list
from .extractor import extract_node_summaries, extract_nodes
from .errors import WorkflowOperationError
from .graph import WorkflowDocument
from .patcher import NodeUpdate, merge_node_updates

logger = logging.getLogger(__name__)


class WorkflowClient(Protocol):
    async def get_workflow(self, workflow_id: str) -> Mapping[str, Any]: ...

    async def update_workflow(
        self, workflow_id: str, payload: dict[str, Any]
    ) -> Mapping[str, Any]: ...


@dataclass
class UpdateReport:
    success: bool
    updated_node_ids: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class NodeRequest:
    workflow_id: str
    node_ids: str | list[str]


@dataclass
class UpdateRequest:
    workflow_id: str
    updates: NodeUpdate | Sequence[NodeUpdate]


def build_update_payload(
    document: WorkflowDocument,
    connection_types: Iterable[str] | None = None,
) -> dict[str, Any]:
    """Shape a merged document for the update endpoint (flat edge list)."""
    types = settings.edge_connection_types if connection_types is None else connection_types
    return {
        "name": document.name,
        "nodes": list(document.nodes or ()),
        "connections": [
            edge.to_dict() for edge in to_edge_list(document.connections, types)
        ],
        "settings": document.settings,
        "active": document.active,
    }


async def get_node_names(client: WorkflowClient, workflow_id: str) -> list[dict[str, Any]]:
    try:
        logger.info("Getting node names for workflow %s", workflow_id)
        workflow = await client.get_workflow(workflow_id)
        summaries = extract_node_summaries(workflow)
        logger.info("Found %d nodes in workflow %s", len(summaries), workflow_id)
        return summaries
    except Exception as e:
        logger.error("Failed to get node names for workflow %s: %s", workflow_id, e)
        raise WorkflowOperationError(f"Failed to get node names: {e}") from e


async def get_nodes(
    client: WorkflowClient,
    workflow_id: str,
    node_ids: str | list[str],
) -> list[dict[str, Any]]:
    try:
        workflow = await client.get_workflow(workflow_id)
        nodes = extract_nodes(workflow, node_ids)
        logger.info("Extracted %d nodes from workflow %s", len(nodes), workflow_id)
        return nodes
    except Exception as e:
        logger.error("Failed to get nodes from workflow %s: %s", workflow_id, e)
        raise WorkflowOperationError(f"Failed to get nodes: {e}") from e


async def update_nodes(
    client: WorkflowClient,
    workflow_id: str,
    updates: NodeUpdate | Sequence[NodeUpdate],
) -> UpdateReport:
    """Fetch, merge and write back. Nothing is written unless the merge succeeds."""
    try:
        workflow = await client.get_workflow(workflow_id)
        result = merge_node_updates(workflow, updates)

        if not result.success or result.updated_document is None:
            return UpdateReport(
                success=False,
                errors=result.errors,
                warnings=result.warnings,
            )

        payload = build_update_payload(result.updated_document)
        await client.update_workflow(workflow_id, payload)
        logger.info(
            "Updated %d nodes in workflow %s", len(result.updated_node_ids), workflow_id
        )
        return UpdateReport(
            success=True,
            updated_node_ids=result.updated_node_ids,
            errors=result.errors,
        )
    except Exception as e:
        logger.error("Failed to update nodes in workflow %s: %s", workflow_id, e)
        raise WorkflowOperationError(f"Failed to update nodes: {e}") from e


async def batch_get_nodes(
    client: WorkflowClient,
    requests: Sequence[NodeRequest],
    concurrency: int | None = None,
) -> dict[str, list[dict[str, Any]]]:
    """Read from several workflows concurrently; failures yield an empty list."""
    semaphore = asyncio.Semaphore(concurrency or settings.batch_read_concurrency)

    async def _get(request: NodeRequest) -> list[dict[str, Any]]:
        async with semaphore:
            try:
                return await get_nodes(client, request.workflow_id, request.node_ids)
            except WorkflowOperationError as e:
                logger.warning("Batch read of workflow %s failed: %s", request.workflow_id, e)
                return []

    nodes = await asyncio.gather(*(_get(r) for r in requests))
    return {r.workflow_id: n for r, n in zip(requests, nodes)}


async def batch_update_nodes(
    client: WorkflowClient,
    requests: Sequence[UpdateRequest],
) -> dict[str, UpdateReport]:
    """Write to several workflows one at a time to avoid lost updates."""
    results: dict[str, UpdateReport] = {}
    for request in requests:
        try:
            results[request.workflow_id] = await update_nodes(
                client, request.workflow_id, request.updates
            )
        except WorkflowOperationError as e:
            results[request.workflow_id] = UpdateReport(success=False, errors=[str(e)])
    return results
