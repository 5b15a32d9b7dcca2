"""
Data structures for decoded MD5 mesh and animation documents.

Contains frozen dataclasses for skeleton joints, meshes and their
vertices/triangles/weights, and for animation hierarchy, bounds, base
frame and per-frame channel data.
"""

import numpy as np
from dataclasses import dataclass
from typing import Tuple

from .vec_math import Vector2, Vector3, Quaternion


@dataclass(frozen=True)
class Joint:
    """A joint of the bind-pose skeleton in a .md5mesh file"""
    name: str
    parent_index: int   # -1 for the root
    position: Vector3
    orientation: Quaternion


@dataclass(frozen=True)
class Vertex:
    index: int
    tex_coords: Vector2
    start_weight: int
    weight_count: int


@dataclass(frozen=True)
class Triangle:
    index: int
    vertex_indices: Tuple[int, int, int]


@dataclass(frozen=True)
class Weight:
    index: int
    joint_index: int
    bias: float
    position: Vector3


@dataclass(frozen=True)
class Mesh:
    """
    One mesh block. Vertices, triangles and weights are sorted by their
    declared index, not by their order in the file.
    """
    shader: str
    vertices: Tuple[Vertex, ...]
    triangles: Tuple[Triangle, ...]
    weights: Tuple[Weight, ...]

    @property
    def num_vertices(self) -> int:
        return len(self.vertices)

    @property
    def num_triangles(self) -> int:
        return len(self.triangles)

    @property
    def num_weights(self) -> int:
        return len(self.weights)

    def vertex_weights(self, vertex: Vertex) -> Tuple[Weight, ...]:
        """Weights referenced by a vertex's start_weight/weight_count range"""
        return self.weights[vertex.start_weight:vertex.start_weight + vertex.weight_count]


@dataclass(frozen=True)
class Md5Mesh:
    """Complete .md5mesh document"""
    version: int
    command_line: str
    joints: Tuple[Joint, ...]
    meshes: Tuple[Mesh, ...]

    @property
    def num_joints(self) -> int:
        return len(self.joints)

    @property
    def num_meshes(self) -> int:
        return len(self.meshes)


@dataclass(frozen=True)
class HierarchyJoint:
    """A joint of the animated hierarchy in a .md5anim file"""
    name: str
    parent_index: int
    flags: int          # bit set of animated channels (Tx Ty Tz Qx Qy Qz)
    start_index: int    # first channel of this joint within each frame


@dataclass(frozen=True)
class Bound:
    """Axis-aligned bounding box of one frame"""
    minimum: Vector3
    maximum: Vector3


@dataclass(frozen=True)
class BaseFrame:
    """Reference pose, one position/orientation pair per hierarchy joint"""
    positions: Tuple[Vector3, ...]
    orientations: Tuple[Quaternion, ...]

    def positions_array(self) -> np.ndarray:
        """Positions as an (n, 3) array"""
        return np.array([p.to_array() for p in self.positions], dtype=np.float64).reshape(-1, 3)

    def orientations_array(self) -> np.ndarray:
        """Orientations as an (n, 4) array of [w, x, y, z]"""
        return np.array([q.to_array() for q in self.orientations], dtype=np.float64).reshape(-1, 4)


@dataclass(frozen=True)
class Frame:
    """Raw animated-channel values of one frame, in file order"""
    frame_number: int
    values: Tuple[float, ...]


@dataclass(frozen=True)
class Md5Anim:
    """
    Complete .md5anim document.

    The declared counts are kept as written in the header; they are not
    required to match the parsed lists.
    """
    version: int
    command_line: str
    num_frames: int
    num_joints: int
    frame_rate: int
    num_animated_components: int
    hierarchy: Tuple[HierarchyJoint, ...]
    bounds: Tuple[Bound, ...]
    base_frame: BaseFrame
    frames: Tuple[Frame, ...]

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    @property
    def duration(self) -> float:
        return self.frame_count / self.frame_rate if self.frame_rate > 0 else 0.0

    def frame_data_array(self) -> np.ndarray:
        """Frame values stacked into a (frames x components) array."""
        widths = {len(f.values) for f in self.frames}
        if len(widths) > 1:
            raise ValueError(f"Frames have differing component counts: {sorted(widths)}")
        width = widths.pop() if widths else 0
        return np.array([f.values for f in self.frames], dtype=np.float64).reshape(len(self.frames), width)
