"""
OBJ object graph produced by the parser and consumed by the importer.

All indices are 0-based and local to the owning ObjObject. Faces are already
triangulated; lines and points are kept so callers can see what was skipped.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

Vec3 = Tuple[float, float, float]


class VTNIndex(NamedTuple):
    """A face corner: position index plus optional texture and normal indices."""
    position: int
    texture: Optional[int] = None
    normal: Optional[int] = None


class PrimitiveKind(str, Enum):
    point = "point"
    line = "line"
    triangle = "triangle"


@dataclass(frozen=True)
class Primitive:
    kind: PrimitiveKind
    vertices: Tuple[VTNIndex, ...]

    @classmethod
    def triangle(cls, a: VTNIndex, b: VTNIndex, c: VTNIndex) -> "Primitive":
        return cls(PrimitiveKind.triangle, (a, b, c))

    @classmethod
    def line(cls, a: VTNIndex, b: VTNIndex) -> "Primitive":
        return cls(PrimitiveKind.line, (a, b))

    @classmethod
    def point(cls, a: VTNIndex) -> "Primitive":
        return cls(PrimitiveKind.point, (a,))


@dataclass(frozen=True)
class Shape:
    primitive: Primitive
    groups: Tuple[str, ...] = ()
    smoothing_groups: Tuple[int, ...] = ()


@dataclass
class Geometry:
    """A run of shapes sharing one `usemtl` material."""
    material_name: Optional[str] = None
    shapes: List[Shape] = field(default_factory=list)


@dataclass
class ObjObject:
    name: str = ""
    vertices: List[Vec3] = field(default_factory=list)
    tex_vertices: List[Vec3] = field(default_factory=list)
    normals: List[Vec3] = field(default_factory=list)
    geometry: List[Geometry] = field(default_factory=list)

    def primitives(self):
        """Iterate all primitives in encounter order."""
        for geometry in self.geometry:
            for shape in geometry.shapes:
                yield shape.primitive


@dataclass
class ObjSet:
    material_libraries: List[str] = field(default_factory=list)
    objects: List[ObjObject] = field(default_factory=list)
