"""
Mesh Input/Output
Reads and writes meshes, choosing gmsh or VTK by file suffix.
"""
import logging
from pathlib import Path

import pyvista as pv

from meshrevision.mesh.mesh import Mesh
from meshrevision.mesh.vtk_utils import VtkUtils

logger = logging.getLogger(__name__)

GMSH_SUFFIXES = (".msh",)


class MeshIO:
    @staticmethod
    def is_gmsh(filepath: str | Path) -> bool:
        return Path(filepath).suffix.lower() in GMSH_SUFFIXES

    @staticmethod
    def stem(filepath: str | Path) -> str:
        return Path(filepath).stem

    @staticmethod
    def read(filepath: str | Path, name: str | None = None) -> Mesh:
        """
        Load a mesh from a gmsh ``.msh`` file or any format pyvista reads.

        Args:
            filepath: Path of the mesh file.
            name: Name of the mesh; defaults to the file stem.
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Mesh file '{path}' does not exist.")

        logger.info(f"Loading mesh from: {path}")
        if MeshIO.is_gmsh(path):
            return Mesh.from_file(str(path), name=name or path.stem)
        return VtkUtils.from_pyvista(pv.read(str(path)), name=name or path.stem)

    @staticmethod
    def write(mesh: Mesh, filepath: str | Path) -> None:
        """Save a mesh; the suffix selects gmsh or VTK output."""
        path = Path(filepath)
        logger.info(f"Saving mesh '{mesh.name}' to: {path}")
        if MeshIO.is_gmsh(path):
            mesh.to_file(str(path))
        else:
            VtkUtils.to_pyvista(mesh).save(str(path))
