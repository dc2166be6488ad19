"""
Centralized coordinate transformation utilities.

Both the OBJ importer and exporter use these so the axis convention lives in
one place.

Coordinate Systems:
- OBJ: Y-up, X-right
- CEM: Z-up, X-right

Mapping (its own inverse):
- OBJ X -> CEM X (unchanged)
- OBJ Y -> CEM Z
- OBJ Z -> CEM Y
"""

from typing import Sequence, Tuple

Vec3 = Tuple[float, float, float]


def swap_yz(vec: Sequence[float]) -> Vec3:
    """Exchange the Y and Z components of a 3D vector."""
    x, y, z = vec
    return (float(x), float(z), float(y))


def transform_position_obj_to_cem(pos: Sequence[float]) -> Vec3:
    """
    Transform a position from OBJ to CEM axes.

    Args:
        pos: Position in OBJ coordinates [x, y, z]

    Returns:
        Position in CEM coordinates (x, z, y)
    """
    return swap_yz(pos)


def transform_position_cem_to_obj(pos: Sequence[float]) -> Vec3:
    """Inverse of transform_position_obj_to_cem."""
    return swap_yz(pos)


# Normals are direction vectors; the same axis exchange applies.
transform_normal_obj_to_cem = transform_position_obj_to_cem
transform_normal_cem_to_obj = transform_position_cem_to_obj
