"""
Configuration classes for MD5 parsing.

Contains the document kind enumeration and parse options.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .errors import CountMismatchError


class DocumentKind(Enum):
    """Supported MD5 document types, keyed by file suffix"""
    MESH = ".md5mesh"
    ANIM = ".md5anim"

    @classmethod
    def from_path(cls, filepath: Union[str, Path]) -> 'DocumentKind':
        suffix = Path(filepath).suffix.lower()
        for kind in cls:
            if kind.value == suffix:
                return kind
        raise ValueError(f"Unrecognized MD5 file suffix: {filepath}")


@dataclass
class ParseConfig:
    """Options for the full-document parsers"""
    # Compare declared counts (numJoints, numverts, numFrames, ...) with the
    # parsed entries. Off by default: the formats do not require it.
    validate_counts: bool = False

    @staticmethod
    def strict() -> 'ParseConfig':
        return ParseConfig(validate_counts=True)


def check_count(config: Optional[ParseConfig], field: str, declared: int, actual: int, offset: int):
    """Raise CountMismatchError if count validation is enabled and counts differ"""
    if config is not None and config.validate_counts and declared != actual:
        raise CountMismatchError(field, declared, actual, offset)
