"""
Vector and quaternion decoders shared by the mesh and animation grammars.

Orientations are stored as three floats (w, x, y). The missing z
component of the unit quaternion is derived from the other three.
"""

import logging
import math
from typing import Tuple

from .primitives import parse_decimal, parse_unsigned, delimited
from .vec_math import Vector2, Vector3, Quaternion

logger = logging.getLogger(__name__)


def parse_tuple3(data: bytes, pos: int) -> Tuple[Tuple[float, float, float], int]:
    """Three consecutive decimals as a raw tuple."""
    a, pos = parse_decimal(data, pos)
    b, pos = parse_decimal(data, pos)
    c, pos = parse_decimal(data, pos)
    return (a, b, c), pos


def parse_index_triple(data: bytes, pos: int) -> Tuple[Tuple[int, int, int], int]:
    """Three consecutive unsigned integers, e.g. triangle vertex indices."""
    a, pos = parse_unsigned(data, pos)
    b, pos = parse_unsigned(data, pos)
    c, pos = parse_unsigned(data, pos)
    return (a, b, c), pos


def parse_vector2(data: bytes, pos: int) -> Tuple[Vector2, int]:
    x, pos = parse_decimal(data, pos)
    y, pos = parse_decimal(data, pos)
    return Vector2(x, y), pos


def parse_vector3(data: bytes, pos: int) -> Tuple[Vector3, int]:
    (x, y, z), pos = parse_tuple3(data, pos)
    return Vector3(x, y, z), pos


def complete_quaternion(w: float, x: float, y: float) -> Quaternion:
    """
    Build a unit quaternion from its scalar and first two vector components.

    z = sqrt(1 - w^2 - x^2 - y^2). A negative radicand, which decimal
    round-off can produce for nearly-unit inputs, gives z = 0.0 exactly.
    """
    # Subtract each square in turn; summing first rounds differently
    radicand = 1.0 - w * w - x * x - y * y
    if radicand < 0.0:
        logger.debug("Clamping quaternion radicand %r to 0 for (%r, %r, %r)", radicand, w, x, y)
        z = 0.0
    else:
        z = math.sqrt(radicand)
    return Quaternion(w, Vector3(x, y, z))


def parse_quaternion(data: bytes, pos: int) -> Tuple[Quaternion, int]:
    """Three decimals (w, x, y); z is reconstructed."""
    (w, x, y), pos = parse_tuple3(data, pos)
    return complete_quaternion(w, x, y), pos


def parse_paren_vector2(data: bytes, pos: int) -> Tuple[Vector2, int]:
    return delimited(data, pos, b'(', parse_vector2, b')')


def parse_paren_vector3(data: bytes, pos: int) -> Tuple[Vector3, int]:
    return delimited(data, pos, b'(', parse_vector3, b')')


def parse_paren_quaternion(data: bytes, pos: int) -> Tuple[Quaternion, int]:
    return delimited(data, pos, b'(', parse_quaternion, b')')
