"""
CEM binary codec

Header identification plus full scene read/write for CEM v2 ("ssmf") streams.
"""

from .codec import (
    read_header,
    read_scene,
    read_scene_without_header,
    scene_from_bytes,
    scene_to_bytes,
    write_header,
    write_scene,
)

__all__ = [
    'read_header',
    'read_scene',
    'read_scene_without_header',
    'scene_from_bytes',
    'scene_to_bytes',
    'write_header',
    'write_scene',
]
