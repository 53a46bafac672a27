"""Pydantic schemas for API request/response models."""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class DocumentRequest(BaseModel):
    document: dict[str, Any]


class ExtractRequest(_CamelModel):
    document: dict[str, Any]
    node_ids: str | list[str] = Field(alias="nodeIds")


class NodeUpdateSchema(_CamelModel):
    node_id: str = Field(alias="nodeId")
    node: dict[str, Any] = {}


class MergeRequest(BaseModel):
    document: dict[str, Any]
    updates: NodeUpdateSchema | list[NodeUpdateSchema]


class MergeResponse(_CamelModel):
    success: bool
    updated_document: dict[str, Any] | None = Field(default=None, alias="updatedDocument")
    errors: list[str] = []
    updated_node_ids: list[str] = Field(default=[], alias="updatedNodeIds")
    warnings: list[str] = []


class IntegrityResponse(BaseModel):
    valid: bool
    warnings: list[str] = []


class ConnectionsRequest(BaseModel):
    connections: dict[str, Any] = {}


class EdgeSchema(_CamelModel):
    source: str
    target: Any
    source_output: int = Field(default=0, alias="sourceOutput")
    target_input: int = Field(default=0, alias="targetInput")


class NodeSummarySchema(BaseModel):
    # Node fields pass through uninterpreted
    id: Any = None
    name: Any = None
    type: Any = None
    disabled: bool = False
    position: Any = None
