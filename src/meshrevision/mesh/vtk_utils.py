"""
VTK Utilities
Conversion between :class:`Mesh` and ``pyvista.UnstructuredGrid``.
"""
from __future__ import annotations

import logging

import numpy as np
import pyvista as pv

from meshrevision.config import MATERIAL_ARRAY_NAME
from meshrevision.mesh.elements import ELEMENT_TYPE_MAP, Element, MeshElemType
from meshrevision.mesh.mesh import Mesh
from meshrevision.mesh.node import Node

logger = logging.getLogger(__name__)

# VTK cell orderings match the local corner ordering of the element classes
VTK_CELL_TYPE_MAP: dict[MeshElemType, pv.CellType] = {
    MeshElemType.LINE: pv.CellType.LINE,
    MeshElemType.TRIANGLE: pv.CellType.TRIANGLE,
    MeshElemType.QUAD: pv.CellType.QUAD,
    MeshElemType.TETRAHEDRON: pv.CellType.TETRA,
    MeshElemType.HEXAHEDRON: pv.CellType.HEXAHEDRON,
    MeshElemType.PYRAMID: pv.CellType.PYRAMID,
    MeshElemType.PRISM: pv.CellType.WEDGE,
}

ELEM_TYPE_OF_VTK: dict[int, MeshElemType] = {
    int(cell_type): elem_type for elem_type, cell_type in VTK_CELL_TYPE_MAP.items()
}


class VtkUtils:
    @staticmethod
    def to_pyvista(mesh: Mesh) -> pv.UnstructuredGrid:
        """
        Convert a mesh to an unstructured grid.

        Materials are stored in the ``MaterialIDs`` cell array.
        """
        mesh.reset_node_ids()
        points = np.array([node.coords for node in mesh.nodes], dtype=np.float64).reshape(-1, 3)

        cells: list[int] = []
        cell_types: list[int] = []
        for element in mesh.elements:
            cells.append(element.n_nodes)
            cells.extend(node.uid for node in element.nodes)
            cell_types.append(int(VTK_CELL_TYPE_MAP[element.geom_type]))

        grid = pv.UnstructuredGrid(
            np.array(cells, dtype=np.int64),
            np.array(cell_types, dtype=np.uint8),
            points,
        )
        grid.cell_data[MATERIAL_ARRAY_NAME] = mesh.material_ids().astype(np.int32)
        return grid

    @staticmethod
    def from_pyvista(grid: pv.UnstructuredGrid, name: str = "mesh") -> Mesh:
        """
        Build a mesh from an unstructured grid.

        Cells of types without a matching element class are skipped.

        Args:
            grid: Source grid; any dataset is cast to an unstructured grid.
            name: Name of the new mesh.
        """
        if not isinstance(grid, pv.UnstructuredGrid):
            grid = grid.cast_to_unstructured_grid()

        nodes = [Node(index=i, coords=p) for i, p in enumerate(np.asarray(grid.points, dtype=np.float64))]

        if MATERIAL_ARRAY_NAME in grid.cell_data:
            materials = np.asarray(grid.cell_data[MATERIAL_ARRAY_NAME]).astype(np.int64)
        else:
            materials = np.zeros(grid.n_cells, dtype=np.int64)

        flat_cells = np.asarray(grid.cells)
        elements: list[Element] = []
        skipped = 0
        offset = 0
        for cell_index, cell_type in enumerate(np.asarray(grid.celltypes)):
            n = int(flat_cells[offset])
            ids = flat_cells[offset + 1:offset + 1 + n]
            offset += n + 1

            elem_type = ELEM_TYPE_OF_VTK.get(int(cell_type))
            if elem_type is None:
                skipped += 1
                continue
            element_class = ELEMENT_TYPE_MAP[elem_type]
            elements.append(element_class([nodes[int(i)] for i in ids], material=int(materials[cell_index])))

        if skipped:
            logger.debug(f"Skipped {skipped} cells of unsupported VTK types.")
        return Mesh(name=name, nodes=nodes, elements=elements)
