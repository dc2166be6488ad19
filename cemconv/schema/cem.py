"""
CEM v2 Schema: in-memory model of the binary "ssmf" scene format

COORDINATE SYSTEM:
Z-up. OBJ documents are Y-up, so positions and normals swap their Y and Z
components when crossing between the two formats (see coordinate_utils).

LAYOUT:
- A model owns one unified vertex list per animation frame. Every vertex
  carries position, normal and texture coordinate under a single index.
- LOD levels are independent triangle lists. Triangles index the vertex list
  relative to the owning material's vertex_offset.
- Materials select triangles with one TriangleSelection per LOD level:
  material.triangles[i] addresses lod_levels[i].
- Frames hold the full vertex list plus auxiliary data (bounding radius,
  axis-aligned bounds, one position per model tag point).

Models are frozen once validated. The validators below enforce the
cross-references so that exporters can index without re-checking.
"""

from __future__ import annotations
from typing import List, Sequence, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, model_validator

# Type aliases for better readability
Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]
Triangle = Tuple[NonNegativeInt, NonNegativeInt, NonNegativeInt]

CEM_MAGIC = b"ssmf"
ORIGIN: Vec3 = (0.0, 0.0, 0.0)


#########################
# HEADER
#########################

class ModelHeader(BaseModel):
    """Identifies a CEM stream and its format revision."""
    model_config = ConfigDict(frozen=True)

    magic: bytes = Field(CEM_MAGIC, description="Four identification bytes.")
    major: NonNegativeInt
    minor: NonNegativeInt

    @property
    def version(self) -> str:
        return f"{self.major}.{self.minor}"


V2_HEADER = ModelHeader(major=2, minor=0)


def to_f32(values: Sequence[float]) -> tuple:
    """Round to 32-bit floats; magnitudes beyond the f32 range saturate to ±inf."""
    with np.errstate(over='ignore'):
        return tuple(float(v) for v in np.asarray(values, dtype=np.float64).astype(np.float32))


#########################
# GEOMETRY
#########################

class Vertex(BaseModel):
    model_config = ConfigDict(frozen=True)

    position: Vec3
    normal: Vec3
    texture: Vec2


class TriangleSelection(BaseModel):
    """A contiguous run of triangles inside one LOD level."""
    model_config = ConfigDict(frozen=True)

    offset: NonNegativeInt
    length: NonNegativeInt

    @property
    def end(self) -> int:
        return self.offset + self.length


class Material(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    texture: NonNegativeInt = Field(0, description="Texture slot index.")
    triangles: List[TriangleSelection] = Field(..., description="One selection per LOD level.")
    vertex_offset: NonNegativeInt = 0
    vertex_count: NonNegativeInt
    texture_name: str = ""


class Frame(BaseModel):
    """One animation frame: the full vertex list plus auxiliary bounds."""
    model_config = ConfigDict(frozen=True)

    radius: float = 0.0
    bounds_min: Vec3 = ORIGIN
    bounds_max: Vec3 = ORIGIN
    vertices: List[Vertex]
    tag_points: List[Vec3] = Field(default_factory=list, description="One position per model tag point.")

    @classmethod
    def from_vertices(cls, vertices: Sequence[Vertex], tag_points: Sequence[Vec3], center: Vec3) -> "Frame":
        """Build a frame, deriving radius and bounds from the vertex positions."""
        if not vertices:
            return cls(vertices=[], tag_points=list(tag_points))

        positions = np.array([vertex.position for vertex in vertices], dtype=np.float64)
        # Saturated (infinite) coordinates make the radius inf or nan
        with np.errstate(over='ignore', invalid='ignore'):
            radius = np.linalg.norm(positions - np.asarray(center, dtype=np.float64), axis=1).max()

        return cls(
            radius=float(radius),
            bounds_min=tuple(float(c) for c in positions.min(axis=0)),
            bounds_max=tuple(float(c) for c in positions.max(axis=0)),
            vertices=list(vertices),
            tag_points=list(tag_points),
        )


#########################
# TOP-LEVEL MODELS
#########################

class CemModel(BaseModel):
    """A CEM v2 model."""
    model_config = ConfigDict(frozen=True)

    center: Vec3 = ORIGIN
    materials: List[Material]
    lod_levels: List[List[Triangle]]
    tag_points: List[str] = Field(default_factory=list, description="Tag point names.")
    frames: List[Frame]

    @model_validator(mode='after')
    def validate_structure(self):
        if not self.lod_levels:
            raise ValueError("Model must have at least one LOD level")
        if not self.frames:
            raise ValueError("Model must have at least one frame")

        vertex_count = len(self.frames[0].vertices)
        for index, frame in enumerate(self.frames):
            if len(frame.vertices) != vertex_count:
                raise ValueError(f"Frame {index} has {len(frame.vertices)} vertices, expected {vertex_count}")
            if len(frame.tag_points) != len(self.tag_points):
                raise ValueError(
                    f"Frame {index} has {len(frame.tag_points)} tag point positions, "
                    f"expected {len(self.tag_points)}"
                )

        for material in self.materials:
            self._validate_material(material, vertex_count)
        return self

    def _validate_material(self, material: Material, vertex_count: int) -> None:
        if len(material.triangles) > len(self.lod_levels):
            raise ValueError(
                f"Material {material.name!r} has {len(material.triangles)} selections "
                f"but the model has {len(self.lod_levels)} LOD levels"
            )
        if material.vertex_offset + material.vertex_count > vertex_count:
            raise ValueError(f"Material {material.name!r} vertex range exceeds the {vertex_count} frame vertices")

        for lod_index, selection in enumerate(material.triangles):
            lod = self.lod_levels[lod_index]
            if selection.end > len(lod):
                raise ValueError(
                    f"Material {material.name!r} selects triangles {selection.offset}..{selection.end} "
                    f"but LOD level {lod_index} has {len(lod)}"
                )
            for triangle in lod[selection.offset:selection.end]:
                if max(triangle) >= material.vertex_count:
                    raise ValueError(
                        f"Material {material.name!r} triangle {tuple(triangle)} references a vertex "
                        f"outside its {material.vertex_count} vertices"
                    )


class Scene(BaseModel):
    """Root container written to and read from CEM streams."""
    model_config = ConfigDict(frozen=True)

    model: CemModel

    @classmethod
    def root(cls, model: CemModel) -> "Scene":
        return cls(model=model)
