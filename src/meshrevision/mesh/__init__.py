from meshrevision.mesh.node import Node
from meshrevision.mesh.mesh import Mesh

__all__ = ["Mesh", "Node"]
