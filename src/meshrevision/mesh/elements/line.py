from __future__ import annotations

import numpy as np

from meshrevision.mesh.elements.element import Element, MeshElemType


class Line(Element):
    """Linear line element with two nodes."""
    geom_type = MeshElemType.LINE
    n_all_nodes = 2
    dimension = 1
    edge_nodes = ((0, 1),)

    @property
    def content(self) -> float:
        """Length of the line."""
        return float(np.linalg.norm(self.nodes[1].coords - self.nodes[0].coords))
