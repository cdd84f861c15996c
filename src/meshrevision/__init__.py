from meshrevision.mesh import Mesh, Node
from meshrevision.editing import MeshRevision

__all__ = ["Mesh", "MeshRevision", "Node"]
