"""Shared fixtures for the meshrevision tests.

Coordinates are unit-sized so that volumes and areas can be checked against
hand-computed values.
"""
from __future__ import annotations

from typing import ClassVar

import numpy as np
import pytest

from meshrevision.mesh import Mesh, Node
from meshrevision.mesh.elements import Element, Hex, Prism, Pyramid, Quad

UNIT_CUBE = (
    (0.0, 0.0, 0.0),
    (1.0, 0.0, 0.0),
    (1.0, 1.0, 0.0),
    (0.0, 1.0, 0.0),
    (0.0, 0.0, 1.0),
    (1.0, 0.0, 1.0),
    (1.0, 1.0, 1.0),
    (0.0, 1.0, 1.0),
)

UNIT_PRISM = (
    (0.0, 0.0, 0.0),
    (1.0, 0.0, 0.0),
    (0.0, 1.0, 0.0),
    (0.0, 0.0, 1.0),
    (1.0, 0.0, 1.0),
    (0.0, 1.0, 1.0),
)

UNIT_PYRAMID = (
    (0.0, 0.0, 0.0),
    (1.0, 0.0, 0.0),
    (1.0, 1.0, 0.0),
    (0.0, 1.0, 0.0),
    (0.5, 0.5, 1.0),
)

UNIT_SQUARE = (
    (0.0, 0.0, 0.0),
    (1.0, 0.0, 0.0),
    (1.0, 1.0, 0.0),
    (0.0, 1.0, 0.0),
)


class Point(Element):
    """Element type without a registered class."""
    geom_type: ClassVar[str] = "point"
    n_all_nodes = 1
    dimension = 0

    @property
    def content(self) -> float:
        return 0.0


@pytest.fixture
def make_mesh():
    """Factory building a mesh from coordinates and ``(class, node indices, material)`` rows."""
    def _make(coords, cells, name: str = "test") -> Mesh:
        nodes = [Node(i, c) for i, c in enumerate(coords)]
        elements = [
            element_class([nodes[i] for i in local], material=material)
            for element_class, local, material in cells
        ]
        return Mesh(name, nodes, elements)

    return _make


@pytest.fixture
def make_single():
    """Factory for a mesh of one element, with selected nodes moved onto others.

    ``moves`` maps a node index to the index of the node whose coordinates it takes.
    """
    def _make(element_class, coords, moves=None, material: int = 0) -> Mesh:
        coords = [np.array(c, dtype=np.float64) for c in coords]
        for moved, target in (moves or {}).items():
            coords[moved] = coords[target].copy()
        nodes = [Node(i, c) for i, c in enumerate(coords)]
        return Mesh("single", nodes, [element_class(nodes, material=material)])

    return _make


@pytest.fixture
def unit_hex_mesh(make_single) -> Mesh:
    return make_single(Hex, UNIT_CUBE, material=1)


@pytest.fixture
def unit_prism_mesh(make_single) -> Mesh:
    return make_single(Prism, UNIT_PRISM, material=2)


@pytest.fixture
def unit_pyramid_mesh(make_single) -> Mesh:
    return make_single(Pyramid, UNIT_PYRAMID, material=3)


@pytest.fixture
def unit_quad_mesh(make_single) -> Mesh:
    return make_single(Quad, UNIT_SQUARE, material=4)


@pytest.fixture
def mixed_mesh(make_mesh) -> Mesh:
    """Hexahedron with a prism on top and a quad and line on its bottom face."""
    coords = list(UNIT_CUBE) + [(0.5, 0.0, 2.0), (0.5, 1.0, 2.0)]
    cells = [
        (Hex, range(8), 1),
        (Prism, (4, 5, 8, 7, 6, 9), 2),
        (Quad, (0, 1, 2, 3), 3),
    ]
    return make_mesh(coords, cells, name="mixed")


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)
