"""REST API routes over the pure patch engine."""
from typing import Any

from fastapi import APIRouter, HTTPException

from ..config import settings
from ..engine.connections import to_edge_list
from ..engine.errors import NotFoundError, StructuralError
from ..engine.extractor import extract_node_summaries, extract_nodes
from ..engine.integrity import validate_workflow_integrity
from ..engine.patcher import NodeUpdate, merge_node_updates
from ..models.schemas import (
    ConnectionsRequest, DocumentRequest, EdgeSchema, ExtractRequest,
    IntegrityResponse, MergeRequest, MergeResponse, NodeSummarySchema,
)

router = APIRouter(prefix="/api")


@router.get("/health")
async def health():
    return {"status": "ok", "app": settings.app_name}


@router.post("/nodes/summaries", response_model=list[NodeSummarySchema])
async def node_summaries(request: DocumentRequest):
    """Return id, name, type, disabled and position for every node."""
    return extract_node_summaries(request.document)


@router.post("/nodes/extract")
async def extract(request: ExtractRequest) -> list[dict[str, Any]]:
    """Return the requested nodes with their inbound and outbound connections."""
    try:
        return extract_nodes(request.document, request.node_ids)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StructuralError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/nodes/merge", response_model=MergeResponse)
async def merge(request: MergeRequest):
    """Apply partial node updates and return the merged document if it is valid.

    Per-update failures come back in ``errors``; integrity problems of the
    merged document come back in ``warnings`` with ``success`` false.
    """
    schemas = request.updates if isinstance(request.updates, list) else [request.updates]
    updates = [NodeUpdate(node_id=u.node_id, node=u.node) for u in schemas]
    try:
        result = merge_node_updates(request.document, updates)
    except StructuralError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return result.to_dict()


@router.post("/workflows/validate", response_model=IntegrityResponse)
async def validate(request: DocumentRequest):
    return validate_workflow_integrity(request.document).to_dict()


@router.post("/connections/edges", response_model=list[EdgeSchema])
async def edges(request: ConnectionsRequest):
    """Flatten an adjacency-map connection set into the transport edge list."""
    return [
        edge.to_dict()
        for edge in to_edge_list(request.connections, settings.edge_connection_types)
    ]
