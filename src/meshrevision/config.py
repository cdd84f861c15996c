"""
Configuration & Global Constants
================================
Central registry for the numeric constants used by the revision algorithms.

Exports:
    GRID_MAX_POINTS_PER_CELL (int): Average node fill used to size the spatial grid.
    COPLANARITY_TOLERANCE (float): Relative bound on the squared scalar triple product.
    ZERO_CONTENT_TOLERANCE (float): Length/area/volume below which an element is degenerate.
    DEFAULT_COLLAPSE_EPS (float): Node collapse distance used by the CLI.
    DEFAULT_MIN_ELEM_DIM (int): Lowest element dimension kept by mesh simplification.
    MATERIAL_ARRAY_NAME (str): Cell array carrying material values in VTK files.
"""
import numpy as np

GRID_MAX_POINTS_PER_CELL: int = 64

COPLANARITY_TOLERANCE: float = 1e-11
ZERO_CONTENT_TOLERANCE: float = float(np.finfo(np.float64).eps)

DEFAULT_COLLAPSE_EPS: float = 1e-6
DEFAULT_MIN_ELEM_DIM: int = 1

MATERIAL_ARRAY_NAME: str = "MaterialIDs"
