from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from meshrevision.config import COPLANARITY_TOLERANCE, ZERO_CONTENT_TOLERANCE

if TYPE_CHECKING:
    import numpy.typing as npt

    Coords = npt.ArrayLike


def triangle_area(a: Coords, b: Coords, c: Coords) -> float:
    """
    Area of the triangle (a, b, c) in 3-D.

    Args:
        a, b, c: Corner coordinates [X, Y, Z].

    Returns:
        Non-negative area.
    """
    a = np.asarray(a, dtype=np.float64)
    return 0.5 * float(np.linalg.norm(np.cross(np.asarray(b) - a, np.asarray(c) - a)))


def tetrahedron_signed_volume(a: Coords, b: Coords, c: Coords, d: Coords) -> float:
    """
    Signed volume of the tetrahedron (a, b, c, d).

    Positive when d lies on the side of the triangle (a, b, c) that its
    normal (b - a) x (c - a) points to.
    """
    a = np.asarray(a, dtype=np.float64)
    return float(np.dot(np.cross(np.asarray(b) - a, np.asarray(c) - a), np.asarray(d) - a)) / 6.0


def tetrahedron_volume(a: Coords, b: Coords, c: Coords, d: Coords) -> float:
    """
    Unsigned volume of the tetrahedron (a, b, c, d).

    Args:
        a, b, c, d: Corner coordinates [X, Y, Z].

    Returns:
        Non-negative volume.
    """
    return abs(tetrahedron_signed_volume(a, b, c, d))


def is_coplanar(a: Coords, b: Coords, c: Coords, d: Coords) -> bool:
    """
    Test whether four points lie in one plane.

    The squared scalar triple product is compared relative to the squared
    lengths of the three edge vectors, so the test does not depend on the
    scale of the coordinates. Coincident points are always coplanar.

    Args:
        a, b, c, d: Point coordinates [X, Y, Z].

    Returns:
        True if the points are coplanar.
    """
    a = np.asarray(a, dtype=np.float64)
    ab = np.asarray(b, dtype=np.float64) - a
    ac = np.asarray(c, dtype=np.float64) - a
    ad = np.asarray(d, dtype=np.float64) - a

    sqr_lengths = (float(ab @ ab), float(ac @ ac), float(ad @ ad))
    if min(sqr_lengths) < ZERO_CONTENT_TOLERANCE ** 2:
        return True

    sqr_triple = float(np.dot(ac, np.cross(ad, ab))) ** 2
    return sqr_triple / (sqr_lengths[0] * sqr_lengths[1] * sqr_lengths[2]) < COPLANARITY_TOLERANCE


def divided_by_line(a: Coords, b: Coords, c: Coords, d: Coords) -> bool:
    """
    Test whether c and d lie on opposite sides of the line through a and b.

    All four points are expected to be (nearly) coplanar.

    Args:
        a, b: Points defining the dividing line.
        c, d: Points to test.

    Returns:
        True if the line strictly separates c and d.
    """
    a = np.asarray(a, dtype=np.float64)
    ab = np.asarray(b, dtype=np.float64) - a
    n_c = np.cross(ab, np.asarray(c, dtype=np.float64) - a)
    n_d = np.cross(ab, np.asarray(d, dtype=np.float64) - a)
    return float(n_c @ n_d) < 0.0
