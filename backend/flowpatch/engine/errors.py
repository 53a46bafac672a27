"""Exception taxonomy for the patch engine."""


class PatchEngineError(Exception):
    """Base class for every error raised by the engine."""


class StructuralError(PatchEngineError):
    """The document is missing a required top-level field."""


class NotFoundError(PatchEngineError):
    def __init__(self, missing_ids: list[str]):
        self.missing_ids = missing_ids
        super().__init__(f"No nodes found with IDs: {', '.join(missing_ids)}")


class ValidationError(PatchEngineError):
    """A single node update has an invalid shape.

    Raised and caught inside one update's boundary; the batch records
    ``errors`` and moves on.
    """

    def __init__(self, node_id: str, errors: list[str]):
        self.node_id = node_id
        self.errors = errors
        super().__init__(f"Node {node_id} update rejected: {errors}")


class WorkflowOperationError(PatchEngineError):
    """A service-level operation failed (client or engine)."""
