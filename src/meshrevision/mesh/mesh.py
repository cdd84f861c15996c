from __future__ import annotations

import logging
from collections import Counter, defaultdict
from datetime import datetime
from typing import TYPE_CHECKING, Iterable

import numpy as np

from meshrevision.logging_config import gmsh_verbosity
from meshrevision.mesh.elements import (
    Element,
    Hex,
    Line,
    MeshElemType,
    Prism,
    Pyramid,
    Quad,
    Tet,
    Tri,
)
from meshrevision.mesh.node import Node

if TYPE_CHECKING:
    import numpy.typing as npt
    from matplotlib.figure import Figure

logger = logging.getLogger(__name__)

# gmsh element type -> (element class, nodes per element)
GMSH_ELEMENT_TYPE_MAP: dict[int, tuple[type[Element], int]] = {
    1: (Line, 2),  # 2-node line
    2: (Tri, 3),  # 3-node triangle
    3: (Quad, 4),  # 4-node quadrangle
    4: (Tet, 4),  # 4-node tetrahedron
    5: (Hex, 8),  # 8-node hexahedron
    6: (Prism, 6),  # 6-node prism
    7: (Pyramid, 5),  # 5-node pyramid
}

GMSH_TYPE_OF: dict[MeshElemType, int] = {
    element_class.geom_type: gmsh_type
    for gmsh_type, (element_class, _) in GMSH_ELEMENT_TYPE_MAP.items()
}


def _set_gmsh_verbosity(gmsh) -> None:
    """Route gmsh terminal output by the level of the package logger."""
    verbosity = gmsh_verbosity()
    gmsh.option.setNumber("General.Terminal", int(verbosity > 0))
    gmsh.option.setNumber("General.Verbosity", verbosity)


class Mesh:
    def __init__(
        self,
        name: str,
        nodes: Iterable[Node],
        elements: Iterable[Element],
    ) -> None:
        """
        Initialize the Mesh class.

        The mesh owns its node and element lists. Node identifiers are reset
        to their position in the node list and elements are numbered in order.

        Args:
            name: Name of the mesh.
            nodes: Nodes of the mesh.
            elements: Elements referencing nodes of this mesh.
        """
        self.name = name
        self.nodes: list[Node] = list(nodes)
        self.elements: list[Element] = list(elements)
        self.reset_node_ids()
        for i, element in enumerate(self.elements):
            element.id = i

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', n_nodes={self.n_nodes}, n_elements={self.n_elements})"

    @classmethod
    def from_file(cls, filename: str, name: str | None = None) -> Mesh:
        """
        Load a mesh from a gmsh file.

        Linear lines, triangles, quads, tetrahedra, hexahedra, prisms and
        pyramids are read; other element types (e.g. points) are skipped. The
        material value of an element is the first physical-group tag of its
        entity, or 0 if the entity belongs to no physical group.

        Args:
            filename: Path to the ``.msh`` file.
            name: Name of the mesh; defaults to the gmsh model name.
        """
        import gmsh

        gmsh.initialize()
        try:
            _set_gmsh_verbosity(gmsh)
            gmsh.open(filename)
            model_name = gmsh.model.getCurrent()

            # 1) Read all nodes once
            node_tags, flat_coords, _ = gmsh.model.mesh.get_nodes()
            coords = flat_coords.reshape(-1, 3)
            order = np.argsort(node_tags)
            nodes: list[Node] = []
            nodes_lookup: dict[int, Node] = {}
            for position, i in enumerate(order):
                node = Node(index=position, coords=coords[i])
                nodes.append(node)
                nodes_lookup[int(node_tags[i])] = node

            # 2) Loop all entities, the physical group of the entity is the material
            tagged_elements: list[tuple[int, Element]] = []
            for dim, entity_tag in gmsh.model.get_entities():
                physical_tags = gmsh.model.get_physical_groups_for_entity(dim, entity_tag)
                material = int(physical_tags[0]) if len(physical_tags) > 0 else 0

                element_types, element_tags_list, node_tags_list = gmsh.model.mesh.get_elements(dim, entity_tag)
                for element_type, element_tags, flat_node_tags in zip(element_types, element_tags_list, node_tags_list):
                    if element_type not in GMSH_ELEMENT_TYPE_MAP:
                        logger.debug(f"Skipping {len(element_tags)} elements of gmsh type {element_type}.")
                        continue

                    element_class, nodes_per_element = GMSH_ELEMENT_TYPE_MAP[element_type]
                    connectivity = flat_node_tags.reshape(-1, nodes_per_element)
                    for element_tag, row in zip(element_tags, connectivity):
                        element = element_class([nodes_lookup[int(tag)] for tag in row], material=material)
                        tagged_elements.append((int(element_tag), element))
        finally:
            gmsh.finalize()

        tagged_elements.sort(key=lambda item: item[0])
        mesh = cls(name=name or model_name, nodes=nodes, elements=[e for _, e in tagged_elements])
        logger.info(f"Loaded {mesh} from '{filename}'.")
        return mesh

    def to_file(self, filename: str, msh_version: float = 4.1) -> None:
        """
        Write the mesh to a gmsh file.

        Elements are grouped into one discrete entity per (dimension, material);
        non-zero materials become the physical tag of their entity.

        Args:
            filename: Path of the ``.msh`` file.
            msh_version: gmsh file format version.
        """
        import gmsh

        self.reset_node_ids()

        groups: dict[tuple[int, int], dict[int, list[Element]]] = defaultdict(lambda: defaultdict(list))
        for element in self.elements:
            groups[(element.dimension, element.material)][GMSH_TYPE_OF[element.geom_type]].append(element)

        gmsh.initialize()
        try:
            _set_gmsh_verbosity(gmsh)
            gmsh.model.add(self.name or "mesh")

            node_tags = np.arange(1, self.n_nodes + 1, dtype=np.int64)
            flat_coords = np.array([node.coords for node in self.nodes], dtype=np.float64).ravel()

            nodes_added = False
            next_element_tag = 1
            for (dim, material), by_type in sorted(groups.items()):
                entity_tag = gmsh.model.addDiscreteEntity(dim)
                if not nodes_added:
                    gmsh.model.mesh.addNodes(dim, entity_tag, node_tags, flat_coords)
                    nodes_added = True
                for gmsh_type, elements in sorted(by_type.items()):
                    element_tags = np.arange(next_element_tag, next_element_tag + len(elements), dtype=np.int64)
                    next_element_tag += len(elements)
                    connectivity = np.array(
                        [[node.uid + 1 for node in element.nodes] for element in elements],
                        dtype=np.int64,
                    ).ravel()
                    gmsh.model.mesh.addElementsByType(entity_tag, gmsh_type, element_tags, connectivity)
                if material > 0:
                    gmsh.model.addPhysicalGroup(dim, [entity_tag], tag=material)

            if not nodes_added and self.n_nodes > 0:
                entity_tag = gmsh.model.addDiscreteEntity(0)
                gmsh.model.mesh.addNodes(0, entity_tag, node_tags, flat_coords)

            gmsh.option.setNumber("Mesh.SaveAll", 1)
            gmsh.option.setNumber("Mesh.MshFileVersion", msh_version)
            gmsh.write(filename)
        finally:
            gmsh.finalize()
        logger.info(f"Mesh '{self.name}' written to '{filename}'.")

    @property
    def n_nodes(self) -> int:
        return len(self.nodes)

    @property
    def n_elements(self) -> int:
        return len(self.elements)

    @property
    def dimension(self) -> int:
        """Highest dimension of the elements in the mesh."""
        if not self.elements:
            return 0
        return max(element.dimension for element in self.elements)

    @property
    def content(self) -> float:
        """Summed content (length, area or volume) of the highest-dimensional elements."""
        dim = self.dimension
        return sum(element.content for element in self.elements if element.dimension == dim)

    def reset_node_ids(self) -> None:
        """Set every node identifier to the position of the node in the mesh."""
        for i, node in enumerate(self.nodes):
            node.uid = i

    def element_type_counts(self) -> dict[MeshElemType, int]:
        """Number of elements per element type."""
        return dict(Counter(element.geom_type for element in self.elements))

    def material_ids(self) -> npt.NDArray[np.int64]:
        """Material value of every element, in element order."""
        return np.array([element.material for element in self.elements], dtype=np.int64)

    def plot(self, show: bool = True) -> Figure:
        """
        Plot the element edges of the mesh, coloured by material.

        Args:
            show: Open the interactive window.

        Returns:
            The matplotlib figure.
        """
        import matplotlib.pyplot as plt
        from mpl_toolkits.mplot3d.art3d import Line3DCollection

        fig = plt.figure()
        ax = fig.add_subplot(projection="3d")

        materials = sorted({element.material for element in self.elements})
        cmap = plt.get_cmap("gist_rainbow", max(len(materials), 1))
        material_to_color = {material: cmap(i % cmap.N) for i, material in enumerate(materials)}

        for material in materials:
            segments = [
                [element.node(i).coords, element.node(j).coords]
                for element in self.elements
                if element.material == material
                for i, j in element.edge_nodes
            ]
            ax.add_collection3d(Line3DCollection(segments, colors=material_to_color[material], linewidths=1, label=str(material)))

        if self.nodes:
            coords = np.array([node.coords for node in self.nodes])
            ax.scatter(coords[:, 0], coords[:, 1], coords[:, 2], color="k", s=4)

        ax.set_title(f"{self.name} plotted at {datetime.now().strftime('%d.%m.%Y %H:%M:%S')}")
        ax.set_xlabel("X Coordinate")
        ax.set_ylabel("Y Coordinate")
        ax.set_zlabel("Z Coordinate")
        if materials:
            ax.legend(loc="best", title="Material")
        if show:
            plt.show()
        return fig
