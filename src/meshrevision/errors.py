"""
Revision Errors
===============
Failures raised while rebuilding a mesh. The mesh-level operations in
:mod:`meshrevision.editing.revision` catch :class:`MeshRevisionError` and
report it as "no resulting mesh"; everything else propagates.
"""


class MeshRevisionError(Exception):
    """Base class for errors that abort a mesh revision."""


class UnknownElementTypeError(MeshRevisionError):
    """No copy, reduction or subdivision rule exists for the element type."""

    def __init__(self, geom_type: object, operation: str) -> None:
        self.geom_type = geom_type
        self.operation = operation
        super().__init__(f"Unknown element type '{geom_type}' during {operation}.")


class InvariantViolationError(MeshRevisionError):
    """The number of unique nodes of an element is inconsistent with its node count."""

    def __init__(self, element_index: int, n_unique_nodes: int, n_nodes: int) -> None:
        self.element_index = element_index
        self.n_unique_nodes = n_unique_nodes
        self.n_nodes = n_nodes
        super().__init__(
            f"Element {element_index} has {n_unique_nodes} unique nodes out of {n_nodes}."
        )


class UnsupportedDegeneracyError(MeshRevisionError):
    """The element collapsed into a configuration that has no defined reduction."""
