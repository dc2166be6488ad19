"""
OBJ → CEM v2 Importer

Converts a parsed OBJ object into a CEM model with a single material, a single
LOD level and a single animation frame.

OBJ indexes positions, texture coordinates and normals separately. CEM stores
one unified vertex per distinct (position, texture, normal) reference, so the
importer deduplicates face corners by their full reference tuple.
"""

import logging
from typing import Dict, List, Tuple, Union

from cemconv.converters.center import CenterBuilder
from cemconv.converters.coordinate_utils import (
    transform_normal_obj_to_cem,
    transform_position_obj_to_cem,
)
from cemconv.converters.obj.parser import parse_obj
from cemconv.exceptions import InputError
from cemconv.schema.cem import CemModel, Frame, Material, TriangleSelection, Vertex, to_f32
from cemconv.schema.obj import ObjObject, ObjSet, PrimitiveKind, VTNIndex

logger = logging.getLogger(__name__)

# Attribute defaults for corners without a texture or normal index
DEFAULT_TEXTURE = (0.0, 0.0)
DEFAULT_NORMAL = (1.0, 0.0, 0.0)


class ObjImporter:
    """Owns the reference → unified index map while one object is imported."""

    def __init__(self, obj: ObjObject):
        self.obj = obj
        self.vertex_associations: Dict[VTNIndex, int] = {}
        self.vertices: List[Vertex] = []
        self.triangles: List[Tuple[int, int, int]] = []

    def resolve_index(self, ref: VTNIndex) -> int:
        """Return the unified index for a face corner, adding a vertex on first sight."""
        index = self.vertex_associations.get(ref)
        if index is None:
            index = len(self.vertices)
            self.vertices.append(self._build_vertex(ref))
            self.vertex_associations[ref] = index
        return index

    def _build_vertex(self, ref: VTNIndex) -> Vertex:
        position = _lookup(self.obj.vertices, ref.position, "position")

        if ref.texture is None:
            texture = DEFAULT_TEXTURE
        else:
            u, v = _lookup(self.obj.tex_vertices, ref.texture, "texture coordinate")[:2]
            texture = (u, v)

        if ref.normal is None:
            normal = DEFAULT_NORMAL
        else:
            normal = _lookup(self.obj.normals, ref.normal, "normal")

        return Vertex(
            position=to_f32(transform_position_obj_to_cem(position)),
            normal=to_f32(transform_normal_obj_to_cem(normal)),
            texture=to_f32(texture),
        )

    def run(self) -> CemModel:
        skipped = 0
        for primitive in self.obj.primitives():
            if primitive.kind is not PrimitiveKind.triangle:
                skipped += 1
                continue
            v0, v1, v2 = primitive.vertices
            self.triangles.append((
                self.resolve_index(v0),
                self.resolve_index(v1),
                self.resolve_index(v2),
            ))

        if skipped:
            logger.debug(f"Skipped {skipped} line/point primitives (not supported)")

        if not self.triangles:
            raise InputError(f"OBJ object {self.obj.name!r} contains no triangles")

        center_builder = CenterBuilder.begin()
        for vertex in self.vertices:
            center_builder.update(vertex.position)
        center = center_builder.build()

        logger.info(
            f"Imported OBJ object {self.obj.name!r}: {len(self.triangles)} triangles, "
            f"{len(self.vertices)} unified vertices"
        )

        return CemModel(
            center=center,
            materials=[Material(
                name="",
                texture=0,
                triangles=[TriangleSelection(offset=0, length=len(self.triangles))],
                vertex_offset=0,
                vertex_count=len(self.vertices),
                texture_name="",
            )],
            lod_levels=[self.triangles],
            tag_points=[],
            frames=[Frame.from_vertices(self.vertices, [], center)],
        )


def _lookup(values, index: int, what: str):
    if not 0 <= index < len(values):
        raise InputError(f"OBJ {what} index {index + 1} out of range (have {len(values)})")
    return values[index]


def import_obj(obj: ObjObject) -> CemModel:
    """
    Import one OBJ object to a CEM model.

    Args:
        obj: Parsed OBJ object

    Returns:
        CemModel with one material, one LOD level and one frame

    Raises:
        InputError: If the object has no triangles or a face references a
            missing position, texture coordinate or normal
    """
    return ObjImporter(obj).run()


def import_obj_set(obj_set: ObjSet) -> CemModel:
    """Import the first object of a parsed OBJ document; the rest are ignored."""
    if not obj_set.objects:
        raise InputError("OBJ document contains no objects")
    if len(obj_set.objects) > 1:
        logger.warning(f"OBJ document has {len(obj_set.objects)} objects, converting only the first")
    return import_obj(obj_set.objects[0])


def import_obj_text(obj_data: Union[str, bytes]) -> CemModel:
    """Parse an OBJ document and import its first object."""
    if isinstance(obj_data, bytes):
        try:
            obj_data = obj_data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InputError(f"OBJ document is not valid UTF-8: {e}") from e
    return import_obj_set(parse_obj(obj_data))
