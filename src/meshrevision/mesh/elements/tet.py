from __future__ import annotations

from meshrevision.geometry_utils import tetrahedron_volume
from meshrevision.mesh.elements.cell import Cell
from meshrevision.mesh.elements.element import MeshElemType


class Tet(Cell):
    """Four-node linear tetrahedron."""
    geom_type = MeshElemType.TETRAHEDRON
    n_all_nodes = 4
    face_nodes = (
        (0, 2, 1),
        (0, 1, 3),
        (1, 2, 3),
        (2, 0, 3),
    )
    edge_nodes = ((0, 1), (1, 2), (0, 2), (0, 3), (1, 3), (2, 3))

    @property
    def content(self) -> float:
        a, b, c, d = (node.coords for node in self.nodes)
        return tetrahedron_volume(a, b, c, d)
