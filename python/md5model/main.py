"""
Command-line inspector for MD5 mesh and animation files.

Parses each given file and prints a short summary of its contents.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import ParseConfig
from .data_structs import Md5Mesh
from .loader import Document, load_document

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None):
    """
    Route log records to stderr (and optionally a file).

    Summaries go to stdout, so diagnostics never mix with them. Parse
    failures are logged at ERROR; --verbose adds the DEBUG trace of
    offsets and clamped quaternions.
    """
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )


def summarize(filepath: Path, document: Document) -> List[str]:
    """Summary lines for a parsed document"""
    lines = [
        f"{filepath}",
        f"  Version:     {document.version}",
        f"  Commandline: {document.command_line}",
    ]
    if isinstance(document, Md5Mesh):
        lines.append(f"  Joints:      {document.num_joints}")
        lines.append(f"  Meshes:      {document.num_meshes}")
        for mesh in document.meshes:
            lines.append(f"    {mesh.shader}: {mesh.num_vertices} verts, "
                         f"{mesh.num_triangles} tris, {mesh.num_weights} weights")
    else:
        lines.append(f"  Joints:      {len(document.hierarchy)} (declared {document.num_joints})")
        lines.append(f"  Frames:      {document.frame_count} (declared {document.num_frames})")
        lines.append(f"  Frame rate:  {document.frame_rate}")
        lines.append(f"  Duration:    {document.duration:.2f}s")
        lines.append(f"  Components:  {document.num_animated_components}")
    return lines


def main(argv: Optional[List[str]] = None):
    """Command-line interface for inspecting MD5 files"""
    parser = argparse.ArgumentParser(
        description='Parse and summarize MD5 mesh/animation files',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  # Summarize a mesh and its animation
  %(prog)s bob_lamp.md5mesh bob_lamp.md5anim

  # Require declared counts to match parsed contents
  %(prog)s --strict bob_lamp.md5anim
        """
    )

    parser.add_argument('files', nargs='+', help='Input .md5mesh / .md5anim files')
    parser.add_argument('--strict', action='store_true',
                        help='Fail when declared counts differ from parsed contents')
    parser.add_argument('--log-file', type=Path, default=None,
                        help='Also write log output to this file')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose logging')

    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.log_file)

    config = ParseConfig.strict() if args.strict else ParseConfig()

    failed = 0
    for name in args.files:
        filepath = Path(name)
        try:
            document = load_document(filepath, config)
        except (ValueError, OSError) as e:
            # ParseError and unknown suffixes are both ValueErrors
            logger.error(f"{filepath}: {e}")
            failed += 1
            continue
        print("\n".join(summarize(filepath, document)))

    if failed > 0:
        sys.exit(1)


if __name__ == '__main__':
    main()
