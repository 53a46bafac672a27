"""Whole-document integrity checks: node uniqueness and dangling references."""
from dataclasses import dataclass, field
from typing import Any, Mapping

from .connections import iter_source_links
from .graph import WorkflowDocument, as_document, build_node_index


@dataclass
class IntegrityReport:
    valid: bool
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "warnings": list(self.warnings)}


def validate_workflow_integrity(
    document: WorkflowDocument | Mapping[str, Any],
) -> IntegrityReport:
    """Check a document, returning warnings as data (empty = valid).

    The first duplicate id or name stops the scan. Connection endpoints
    may be ids or names and are checked against both.
    """
    doc = as_document(document)
    if not doc.nodes:
        return IntegrityReport(valid=False, warnings=["Workflow has no nodes"])

    index = build_node_index(doc)
    if index.duplicates:
        kind, value = index.duplicates[0]
        label = "ID" if kind == "id" else "name"
        return IntegrityReport(
            valid=False,
            warnings=[f"Duplicate node {label} found: {value}"],
        )

    warnings: list[str] = []
    for kind, pos, value in index.unindexed:
        label = "ID" if kind == "id" else "name"
        if value is None:
            warnings.append(f"Node at position {pos} has no {label}")
        else:
            warnings.append(f"Node at position {pos} has an invalid {label}: {value!r}")

    for source_ref, connection_data in doc.connections.items():
        if not index.contains(source_ref):
            warnings.append(f"Connection from non-existent node: {source_ref}")
        for link in iter_source_links(source_ref, connection_data):
            if not index.contains(link.target):
                warnings.append(f"Connection to non-existent node: {link.target}")

    return IntegrityReport(valid=not warnings, warnings=warnings)
