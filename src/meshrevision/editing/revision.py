"""
Mesh Revision
=============
Mesh-level operations that rebuild a mesh after collapsing nearby nodes,
reducing degenerate elements or subdividing non-planar ones.

Every operation leaves the source mesh unchanged apart from resetting its
node identifiers to their positions, and returns a new :class:`Mesh`, or
``None`` if the revision failed.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from meshrevision.config import DEFAULT_MIN_ELEM_DIM
from meshrevision.editing.duplicate import copy_element, copy_elements, copy_nodes
from meshrevision.editing.grid import collapse_node_indices
from meshrevision.editing.reduction import ElementReducer, count_unique_nodes
from meshrevision.editing.subdivision import subdivide_element
from meshrevision.errors import InvariantViolationError, MeshRevisionError
from meshrevision.mesh.elements import ElementErrorFlag
from meshrevision.mesh.mesh import Mesh

if TYPE_CHECKING:
    from meshrevision.mesh.elements import Element
    from meshrevision.mesh.node import Node

logger = logging.getLogger(__name__)

SUBDIVISION_FLAGS = ElementErrorFlag.NON_COPLANAR | ElementErrorFlag.NON_CONVEX


class MeshRevision:
    """Revision operations on one source mesh."""

    def __init__(self, mesh: Mesh) -> None:
        self.mesh = mesh

    def count_collapsible_nodes(self, eps: float) -> int:
        """Number of nodes that would be merged into another node with distance ``eps``."""
        self.mesh.reset_node_ids()
        id_map = collapse_node_indices(self.mesh.nodes, eps)
        return int(np.count_nonzero(id_map != np.arange(len(id_map))))

    def collapse_nodes(self, name: str, eps: float) -> Mesh | None:
        """
        Merge nodes closer than ``eps``.

        Elements keep their type and node count, so collapsed elements may
        become degenerate; none are removed.

        Args:
            name: Name of the new mesh.
            eps: Collapse distance.

        Returns:
            The new mesh, or ``None`` if an element could not be copied.
        """
        logger.info(f"Collapsing nodes of '{self.mesh.name}' ({self.mesh.n_nodes} nodes) with eps={eps}.")
        self.mesh.reset_node_ids()
        try:
            id_map = collapse_node_indices(self.mesh.nodes, eps)
            new_nodes, node_ids = copy_nodes(self.mesh.nodes, id_map)
            new_elements = copy_elements(self.mesh.elements, new_nodes, node_ids)
        except MeshRevisionError as e:
            logger.error(f"Collapsing nodes of '{self.mesh.name}' failed: {e}")
            return None
        finally:
            self.mesh.reset_node_ids()

        mesh = Mesh(name, new_nodes, new_elements)
        logger.info(f"Created {mesh}; {self.mesh.n_nodes - mesh.n_nodes} nodes collapsed.")
        return mesh

    def simplify_mesh(
        self,
        name: str,
        eps: float,
        min_elem_dim: int = DEFAULT_MIN_ELEM_DIM,
    ) -> Mesh | None:
        """
        Collapse nodes, then replace every element by valid elements.

        Elements without collapsed nodes are copied, or subdivided when they
        are not planar or not convex. Elements with collapsed nodes are
        reduced to lower-order elements.

        Args:
            name: Name of the new mesh.
            eps: Collapse distance.
            min_elem_dim: Elements of lower dimension are dropped.

        Returns:
            The new mesh, or ``None`` if the revision failed or left no elements.
        """
        if min_elem_dim not in (1, 2, 3):
            raise ValueError(f"Minimum element dimension must be 1, 2 or 3, got {min_elem_dim}.")
        logger.info(
            f"Simplifying '{self.mesh.name}' ({self.mesh.n_nodes} nodes, {self.mesh.n_elements} elements) "
            f"with eps={eps}, min_elem_dim={min_elem_dim}."
        )
        if self.mesh.n_elements == 0:
            logger.error(f"Mesh '{self.mesh.name}' has no elements.")
            return None

        self.mesh.reset_node_ids()
        try:
            id_map = collapse_node_indices(self.mesh.nodes, eps)
            new_nodes, node_ids = copy_nodes(self.mesh.nodes, id_map)
            reducer = ElementReducer(new_nodes, node_ids, min_elem_dim)

            new_elements: list[Element] = []
            for i, element in enumerate(self.mesh.elements):
                n_unique = count_unique_nodes(element, node_ids)
                if n_unique == element.n_nodes:
                    if element.dimension < min_elem_dim:
                        logger.debug(f"Dropping {element!r}: below minimum dimension {min_elem_dim}.")
                        continue
                    new_elements.extend(self._copy_or_subdivide(element, new_nodes, node_ids))
                elif 1 < n_unique < element.n_nodes:
                    new_elements.extend(reducer.reduce(element, n_unique))
                else:
                    raise InvariantViolationError(i, n_unique, element.n_nodes)
        except MeshRevisionError as e:
            logger.error(f"Simplifying '{self.mesh.name}' failed: {e}")
            return None
        finally:
            self.mesh.reset_node_ids()

        if not new_elements:
            logger.error(f"Simplifying '{self.mesh.name}' left no elements.")
            return None

        mesh = Mesh(name, new_nodes, new_elements)
        logger.info(f"Created {mesh}.")
        return mesh

    def subdivide_mesh(self, name: str) -> Mesh | None:
        """
        Subdivide every non-planar or non-convex element.

        Args:
            name: Name of the new mesh.

        Returns:
            The new mesh, or ``None`` if the mesh has no elements or an
            element could not be subdivided.
        """
        logger.info(f"Subdividing '{self.mesh.name}' ({self.mesh.n_elements} elements).")
        if self.mesh.n_elements == 0:
            logger.error(f"Mesh '{self.mesh.name}' has no elements.")
            return None

        self.mesh.reset_node_ids()
        try:
            new_nodes, node_ids = copy_nodes(self.mesh.nodes)
            new_elements: list[Element] = []
            for element in self.mesh.elements:
                new_elements.extend(self._copy_or_subdivide(element, new_nodes, node_ids))
        except MeshRevisionError as e:
            logger.error(f"Subdividing '{self.mesh.name}' failed: {e}")
            return None
        finally:
            self.mesh.reset_node_ids()

        mesh = Mesh(name, new_nodes, new_elements)
        logger.info(f"Created {mesh}.")
        return mesh

    @staticmethod
    def _copy_or_subdivide(
        element: Element,
        new_nodes: list[Node],
        node_ids: np.ndarray,
    ) -> list[Element]:
        new_element = copy_element(element, new_nodes, node_ids)
        if new_element.validate() & SUBDIVISION_FLAGS:
            return subdivide_element(new_element)
        return [new_element]
