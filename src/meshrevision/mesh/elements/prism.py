from __future__ import annotations

from meshrevision.geometry_utils import tetrahedron_volume
from meshrevision.mesh.elements.cell import Cell
from meshrevision.mesh.elements.element import MeshElemType


class Prism(Cell):
    """
    Six-node linear prism (wedge).

    Nodes 0-2 form the bottom triangle, nodes 3-5 the top triangle; node i is
    connected to node i + 3 by a lateral edge.
    """
    geom_type = MeshElemType.PRISM
    n_all_nodes = 6
    face_nodes = (
        (0, 2, 1),
        (0, 1, 4, 3),
        (1, 2, 5, 4),
        (2, 0, 3, 5),
        (3, 4, 5),
    )
    edge_nodes = (
        (0, 1), (1, 2), (0, 2),
        (0, 3), (1, 4), (2, 5),
        (3, 4), (4, 5), (3, 5),
    )

    @property
    def content(self) -> float:
        c = [node.coords for node in self.nodes]
        return (
            tetrahedron_volume(c[0], c[1], c[2], c[3])
            + tetrahedron_volume(c[1], c[4], c[2], c[3])
            + tetrahedron_volume(c[2], c[4], c[5], c[3])
        )
