"""
MD5 Mesh/Animation Parser Package

Decodes the text-based .md5mesh and .md5anim skeletal formats:
- Joints, meshes, vertices, triangles and skin weights from .md5mesh
- Hierarchy, bounds, base frame and raw frame channels from .md5anim
- Unit quaternions are rebuilt from the three stored components
- Vertices, triangles and weights are ordered by their declared index
"""

from .vec_math import Vector2, Vector3, Quaternion
from .data_structs import (
    Joint,
    Vertex,
    Triangle,
    Weight,
    Mesh,
    Md5Mesh,
    HierarchyJoint,
    Bound,
    BaseFrame,
    Frame,
    Md5Anim,
)
from .config import DocumentKind, ParseConfig
from .errors import (
    ParseError,
    StructuralError,
    IncompleteInputError,
    NumericConversionError,
    SemanticValidationError,
    BiasRangeError,
    CountMismatchError,
)
from .decoders import complete_quaternion
from .md5mesh_parser import Md5MeshParser, parse_md5mesh
from .md5anim_parser import Md5AnimParser, parse_md5anim
from .loader import load_md5mesh, load_md5anim, load_document, load_directory
# Note: main module not imported here to avoid RuntimeWarning when running as -m

__version__ = "1.0.0"

__all__ = [
    # Algebra
    'Vector2',
    'Vector3',
    'Quaternion',

    # Data structures
    'Joint',
    'Vertex',
    'Triangle',
    'Weight',
    'Mesh',
    'Md5Mesh',
    'HierarchyJoint',
    'Bound',
    'BaseFrame',
    'Frame',
    'Md5Anim',

    # Configuration
    'DocumentKind',
    'ParseConfig',

    # Errors
    'ParseError',
    'StructuralError',
    'IncompleteInputError',
    'NumericConversionError',
    'SemanticValidationError',
    'BiasRangeError',
    'CountMismatchError',

    # Parsers
    'complete_quaternion',
    'Md5MeshParser',
    'parse_md5mesh',
    'Md5AnimParser',
    'parse_md5anim',

    # Loading
    'load_md5mesh',
    'load_md5anim',
    'load_document',
    'load_directory',
]
