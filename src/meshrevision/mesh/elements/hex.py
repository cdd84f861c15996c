from __future__ import annotations

from meshrevision.geometry_utils import tetrahedron_volume
from meshrevision.mesh.elements.cell import Cell
from meshrevision.mesh.elements.element import MeshElemType

# Tetrahedra used to integrate the volume of a (possibly non-planar) hexahedron
_VOLUME_TETS = (
    (4, 7, 5, 0),
    (5, 3, 1, 0),
    (5, 7, 3, 0),
    (5, 7, 6, 2),
    (1, 3, 5, 2),
    (3, 7, 5, 2),
)


class Hex(Cell):
    """
    Eight-node linear hexahedron.

    Nodes 0-3 form the bottom face, nodes 4-7 the top face; node i is
    connected to node i + 4.
    """
    geom_type = MeshElemType.HEXAHEDRON
    n_all_nodes = 8
    face_nodes = (
        (0, 3, 2, 1),
        (0, 1, 5, 4),
        (1, 2, 6, 5),
        (2, 3, 7, 6),
        (3, 0, 4, 7),
        (4, 5, 6, 7),
    )
    edge_nodes = (
        (0, 1), (1, 2), (2, 3), (0, 3),
        (4, 5), (5, 6), (6, 7), (4, 7),
        (0, 4), (1, 5), (2, 6), (3, 7),
    )

    @property
    def content(self) -> float:
        c = [node.coords for node in self.nodes]
        return sum(tetrahedron_volume(c[a], c[b], c[d], c[e]) for a, b, d, e in _VOLUME_TETS)
