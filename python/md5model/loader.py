"""
File loading helpers for MD5 documents.

Reads whole files into memory and hands the bytes to the grammar
parsers. The parsers themselves never touch the filesystem.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from tqdm import tqdm

from .config import DocumentKind, ParseConfig
from .data_structs import Md5Anim, Md5Mesh
from .errors import ParseError
from .md5anim_parser import parse_md5anim
from .md5mesh_parser import parse_md5mesh

logger = logging.getLogger(__name__)

Document = Union[Md5Mesh, Md5Anim]

_SUFFIXES = {kind.value for kind in DocumentKind}


def parse_document(data: bytes, kind: DocumentKind, config: Optional[ParseConfig] = None) -> Document:
    """Parse in-memory document contents of the given kind."""
    if kind is DocumentKind.MESH:
        return parse_md5mesh(data, config)
    return parse_md5anim(data, config)


def load_md5mesh(filepath: Union[str, Path], config: Optional[ParseConfig] = None) -> Md5Mesh:
    """Load and parse a .md5mesh file."""
    return parse_md5mesh(Path(filepath).read_bytes(), config)


def load_md5anim(filepath: Union[str, Path], config: Optional[ParseConfig] = None) -> Md5Anim:
    """Load and parse a .md5anim file."""
    return parse_md5anim(Path(filepath).read_bytes(), config)


def load_document(filepath: Union[str, Path], config: Optional[ParseConfig] = None) -> Document:
    """Load a .md5mesh or .md5anim file, chosen by suffix."""
    kind = DocumentKind.from_path(filepath)
    data = Path(filepath).read_bytes()
    try:
        return parse_document(data, kind, config)
    except ParseError as e:
        logger.debug("%s: %s", filepath, e.describe(data))
        raise


def load_directory(directory: Union[str, Path], pattern: str = "*.md5*",
                   config: Optional[ParseConfig] = None, progress: bool = True) -> Dict[Path, Document]:
    """
    Load all MD5 documents in a directory.

    Files that fail to read or parse are logged and skipped.

    Args:
        directory: Directory to scan
        pattern: Glob pattern for candidate files
        config: Parse options passed to every document
        progress: Show a tqdm progress bar

    Returns:
        Mapping of file path to parsed document, in sorted path order
    """
    dir_path = Path(directory)
    paths = [p for p in sorted(dir_path.glob(pattern)) if p.suffix.lower() in _SUFFIXES]
    logger.info(f"Found {len(paths)} MD5 files in {dir_path}")

    documents = {}
    for filepath in tqdm(paths, desc="Parsing", unit="file", ncols=80, disable=not progress):
        try:
            data = filepath.read_bytes()
        except OSError as e:
            logger.warning(f"Failed to read {filepath}: {e}")
            continue
        try:
            documents[filepath] = parse_document(data, DocumentKind.from_path(filepath), config)
        except ParseError as e:
            logger.warning(f"Failed to parse {filepath}: {e.describe(data)}")
    return documents
