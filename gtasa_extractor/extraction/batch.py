"""
Batch decoding of path node files.

Each file is decoded on its own; a corrupt file produces a failed
DecodeResult instead of aborting the whole directory.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..constants import DEFAULT_NODE_FILE_PATTERN
from ..parsers import NodeFile, PathFileError, parse_path_file
from ..utils import log, logWarning, logError


@dataclass
class DecodeResult:
    """Outcome of decoding one file."""
    path: Path
    node_file: Optional[NodeFile] = None
    error: Optional[PathFileError] = None

    @property
    def ok(self) -> bool:
        return self.node_file is not None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def missing(self) -> bool:
        """The file could not be opened."""
        return self.node_file is None and self.error is None


def find_node_files(directory: Union[str, Path], pattern: str = DEFAULT_NODE_FILE_PATTERN) -> List[Path]:
    """
    List path node files in a directory, sorted by name.

    Args:
        directory: Directory to scan (not recursive)
        pattern: Glob pattern for file names

    Returns:
        Sorted list of file paths
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Paths directory not found: {directory}")

    return sorted(p for p in directory.glob(pattern) if p.is_file())


def decode_files(paths: Iterable[Union[str, Path]], legacy_bitfields: bool = False) -> List[DecodeResult]:
    """
    Decode each file independently.

    Args:
        paths: Files to decode
        legacy_bitfields: Passed through to the decoder

    Returns:
        One DecodeResult per input path, in input order
    """
    results = []
    paths = [Path(p) for p in paths]

    for i, path in enumerate(paths, 1):
        log(f"[{i}/{len(paths)}] {path.name}")
        try:
            node_file = parse_path_file(path, legacy_bitfields=legacy_bitfields)
        except PathFileError as e:
            logError(f"{path.name}: {e}")
            results.append(DecodeResult(path=path, error=e))
            continue

        if node_file is None:
            logWarning(f"Cannot open {path}")
        results.append(DecodeResult(path=path, node_file=node_file))

    return results


def decode_directory(directory: Union[str, Path], pattern: str = DEFAULT_NODE_FILE_PATTERN,
                     legacy_bitfields: bool = False) -> List[DecodeResult]:
    """Find and decode every matching file in a directory."""
    return decode_files(find_node_files(directory, pattern), legacy_bitfields=legacy_bitfields)


def total_node_count(results: Iterable[DecodeResult]) -> int:
    """Sum of number_of_nodes over successfully decoded files."""
    return sum(r.node_file.header.number_of_nodes for r in results if r.ok)
