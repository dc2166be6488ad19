"""
CEM v2 → OBJ Exporter

Flattens a CEM model into an OBJ document. Uses LOD level 0 and frame 0 only.

Known limitation: only each material's first triangle selection is exported.
"""

import io
import logging
from typing import Sequence

import numpy as np

from cemconv.converters.coordinate_utils import (
    transform_normal_cem_to_obj,
    transform_position_cem_to_obj,
)
from cemconv.exceptions import InputError
from cemconv.schema.cem import CemModel

logger = logging.getLogger(__name__)


def format_float(value: float) -> str:
    """Shortest text that reads back as the same 32-bit float, without a trailing '.0'."""
    return np.format_float_positional(np.float32(value), trim='-')


def _format_vec(values: Sequence[float]) -> str:
    return ' '.join(format_float(v) for v in values)


def export_obj(model: CemModel) -> str:
    """
    Export a CEM model to an OBJ document.

    Every unified vertex becomes one `v`, `vn` and `vt` line, and faces repeat
    the same 1-based index for position, texture and normal.

    Args:
        model: CEM model (LOD level 0 and frame 0 are used)

    Returns:
        OBJ document string

    Raises:
        InputError: If the model has no LOD level or frame, or a triangle
            references a vertex outside frame 0
    """
    if not model.lod_levels or not model.frames:
        raise InputError("CEM model has no LOD level or frame to export")

    triangle_data = model.lod_levels[0]
    frame = model.frames[0]
    vertex_count = len(frame.vertices)

    out = io.StringIO()

    for vertex in frame.vertices:
        out.write(f"v {_format_vec(transform_position_cem_to_obj(vertex.position))}\n")
        out.write(f"vn {_format_vec(transform_normal_cem_to_obj(vertex.normal))}\n")
        out.write(f"vt {_format_vec(vertex.texture)}\n")

    face_count = 0
    for material in model.materials:
        out.write(
            f"# name: {material.name}, texture: {material.texture}, "
            f"texture_name: {material.texture_name}\n"
        )
        if not material.triangles:
            continue

        if len(material.triangles) > 1:
            logger.debug(
                f"Material {material.name!r}: exporting the first of "
                f"{len(material.triangles)} triangle selections"
            )
        selection = material.triangles[0]
        if selection.offset + selection.length > len(triangle_data):
            raise InputError(
                f"Material {material.name!r} selects triangles beyond LOD level 0 "
                f"({selection.offset + selection.length} > {len(triangle_data)})"
            )

        for triangle in triangle_data[selection.offset:selection.offset + selection.length]:
            indices = [material.vertex_offset + index + 1 for index in triangle]
            for index in indices:
                if not 1 <= index <= vertex_count:
                    raise InputError(
                        f"Triangle {tuple(triangle)} of material {material.name!r} references "
                        f"vertex {index} but frame 0 has {vertex_count}"
                    )
            out.write("f " + ' '.join(f"{i}/{i}/{i}" for i in indices) + "\n")
            face_count += 1

    logger.info(f"Exported OBJ document: {vertex_count} vertices, {face_count} faces")
    return out.getvalue()
