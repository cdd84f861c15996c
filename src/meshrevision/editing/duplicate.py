"""
Mesh component duplication.

New nodes and elements are independent of the source mesh. Collapsed nodes
are resolved through an explicit ``node_ids`` array mapping source node
positions to positions in the new node list.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Sequence

import numpy as np

from meshrevision.errors import UnknownElementTypeError
from meshrevision.mesh.elements import ELEMENT_TYPE_MAP

if TYPE_CHECKING:
    import numpy.typing as npt
    from meshrevision.mesh.elements import Element
    from meshrevision.mesh.node import Node


def copy_nodes(
    nodes: Sequence[Node],
    id_map: npt.NDArray[np.int64] | None = None,
) -> tuple[list[Node], npt.NDArray[np.int64]]:
    """
    Copy nodes, keeping only representatives of a collapse map.

    Args:
        nodes: Source nodes in mesh order.
        id_map: Collapse map from :func:`collapse_node_indices`; without it
            every node is copied.

    Returns:
        The new nodes with dense identifiers, and for every source position
        the position of its copy (or of its representative's copy).
    """
    node_ids = np.empty(len(nodes), dtype=np.int64)
    new_nodes: list[Node] = []
    for k, node in enumerate(nodes):
        if id_map is None or id_map[k] == k:
            node_ids[k] = len(new_nodes)
            new_nodes.append(node.copy(len(new_nodes)))
        else:
            # Representatives always precede the nodes they absorb
            node_ids[k] = node_ids[id_map[k]]
    return new_nodes, node_ids


def copy_element(
    element: Element,
    new_nodes: Sequence[Node],
    node_ids: npt.NDArray[np.int64],
) -> Element:
    """
    Rebuild an element on the new nodes.

    Raises:
        UnknownElementTypeError: If the element type has no registered class.
    """
    element_class = ELEMENT_TYPE_MAP.get(element.geom_type)
    if element_class is None:
        raise UnknownElementTypeError(element.geom_type, "copy")
    nodes = [new_nodes[node_ids[node.uid]] for node in element.nodes]
    return element_class(nodes, material=element.material)


def copy_elements(
    elements: Iterable[Element],
    new_nodes: Sequence[Node],
    node_ids: npt.NDArray[np.int64],
) -> list[Element]:
    return [copy_element(element, new_nodes, node_ids) for element in elements]
