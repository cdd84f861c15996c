from meshrevision.editing.grid import Grid, collapse_node_indices
from meshrevision.editing.duplicate import copy_element, copy_elements, copy_nodes
from meshrevision.editing.reduction import ElementReducer, count_unique_nodes
from meshrevision.editing.subdivision import subdivide_element
from meshrevision.editing.revision import MeshRevision

__all__ = [
    "ElementReducer",
    "Grid",
    "MeshRevision",
    "collapse_node_indices",
    "copy_element",
    "copy_elements",
    "copy_nodes",
    "count_unique_nodes",
    "subdivide_element",
]
