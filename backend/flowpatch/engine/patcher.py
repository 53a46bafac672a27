"""Batch node merger: applies NodeUpdates to a document snapshot."""
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from .errors import ValidationError
from .graph import WorkflowDocument, as_document, build_node_index
from .integrity import validate_workflow_integrity
from .merge import apply_node_update

logger = logging.getLogger(__name__)


@dataclass
class NodeUpdate:
    node_id: str
    node: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NodeUpdate":
        node_id = data.get("nodeId", data.get("node_id"))
        return cls(node_id=node_id, node=dict(data.get("node") or {}))


@dataclass
class UpdateOutcome:
    """Result of one update within a batch."""
    node_id: str
    applied: bool
    errors: list[str] = field(default_factory=list)


@dataclass
class MergeResult:
    success: bool
    updated_document: WorkflowDocument | None = None
    errors: list[str] = field(default_factory=list)
    updated_node_ids: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    outcomes: list[UpdateOutcome] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": self.success,
            "errors": list(self.errors),
            "updatedNodeIds": list(self.updated_node_ids),
            "warnings": list(self.warnings),
        }
        if self.updated_document is not None:
            data["updatedDocument"] = self.updated_document.to_dict()
        return data


def _coerce_updates(
    updates: NodeUpdate | Mapping[str, Any] | Sequence[NodeUpdate | Mapping[str, Any]],
) -> list[NodeUpdate]:
    if isinstance(updates, (NodeUpdate, Mapping)):
        updates = [updates]
    return [u if isinstance(u, NodeUpdate) else NodeUpdate.from_dict(u) for u in updates]


def merge_node_updates(
    document: WorkflowDocument | Mapping[str, Any],
    updates: NodeUpdate | Mapping[str, Any] | Sequence[NodeUpdate | Mapping[str, Any]],
) -> MergeResult:
    """Apply ``updates`` in order to a snapshot of ``document``.

    A missing node or an invalid update is recorded and skipped. The batch
    succeeds if at least one update applied or nothing failed, and only a
    batch whose merged document passes the integrity check carries
    ``updated_document``.
    """
    doc = as_document(document)
    index = build_node_index(doc)
    nodes = list(index.nodes)

    outcomes: list[UpdateOutcome] = []
    for update in _coerce_updates(updates):
        pos = index.position_of(update.node_id)
        if pos is None:
            outcomes.append(UpdateOutcome(
                node_id=update.node_id,
                applied=False,
                errors=[f"node {update.node_id} not found"],
            ))
            continue

        original = nodes[pos]
        try:
            nodes[pos] = apply_node_update(original, update.node)
        except ValidationError as e:
            outcomes.append(UpdateOutcome(
                node_id=update.node_id,
                applied=False,
                errors=[f"Node {update.node_id}: {err}" for err in e.errors],
            ))
            continue

        outcomes.append(UpdateOutcome(node_id=update.node_id, applied=True))
        logger.info(
            "Merged updates for node %s (%s)", update.node_id, original.get("name")
        )

    errors = [err for outcome in outcomes for err in outcome.errors]
    updated_ids = [outcome.node_id for outcome in outcomes if outcome.applied]
    success = not errors or bool(updated_ids)
    if not success:
        return MergeResult(
            success=False, errors=errors,
            updated_node_ids=updated_ids, outcomes=outcomes,
        )

    merged = doc.with_nodes(nodes)
    report = validate_workflow_integrity(merged)
    if not report.valid:
        logger.warning(
            "Rejecting merged workflow %r: %s", doc.name, "; ".join(report.warnings)
        )
        return MergeResult(
            success=False, errors=errors, updated_node_ids=updated_ids,
            warnings=report.warnings, outcomes=outcomes,
        )

    return MergeResult(
        success=True, updated_document=merged, errors=errors,
        updated_node_ids=updated_ids, outcomes=outcomes,
    )
