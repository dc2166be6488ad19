"""CEM and OBJ schema definitions."""
from .cem import (
    CEM_MAGIC,
    V2_HEADER,
    CemModel,
    Frame,
    Material,
    ModelHeader,
    Scene,
    TriangleSelection,
    Vertex,
)
from .obj import (
    Geometry,
    ObjObject,
    ObjSet,
    Primitive,
    PrimitiveKind,
    Shape,
    VTNIndex,
)

__all__ = [
    "CEM_MAGIC",
    "V2_HEADER",
    "CemModel",
    "Frame",
    "Material",
    "ModelHeader",
    "Scene",
    "TriangleSelection",
    "Vertex",
    "Geometry",
    "ObjObject",
    "ObjSet",
    "Primitive",
    "PrimitiveKind",
    "Shape",
    "VTNIndex",
]
