from __future__ import annotations

from meshrevision.geometry_utils import tetrahedron_volume
from meshrevision.mesh.elements.cell import Cell
from meshrevision.mesh.elements.element import MeshElemType


class Pyramid(Cell):
    """
    Five-node linear pyramid.

    Nodes 0-3 form the quadrilateral base, node 4 is the apex.
    """
    geom_type = MeshElemType.PYRAMID
    n_all_nodes = 5
    face_nodes = (
        (0, 1, 4),
        (1, 2, 4),
        (2, 3, 4),
        (3, 0, 4),
        (0, 3, 2, 1),
    )
    edge_nodes = (
        (0, 1), (1, 2), (2, 3), (0, 3),
        (0, 4), (1, 4), (2, 4), (3, 4),
    )

    @property
    def content(self) -> float:
        """Volume as the sum of the tetrahedra (0, 1, 2, 4) and (2, 3, 0, 4)."""
        c = [node.coords for node in self.nodes]
        return tetrahedron_volume(c[0], c[1], c[2], c[4]) + tetrahedron_volume(c[2], c[3], c[0], c[4])
